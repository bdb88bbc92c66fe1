"""Local reference resolution and request-part extraction for operations."""

from __future__ import annotations

from copy import deepcopy
import logging
from typing import Any, Optional

from .model_types import OperationSpec

logger = logging.getLogger(__name__)

_PREFERRED_BODY_MEDIA_TYPES: tuple[str, ...] = (
    "application/json",
    "application/*+json",
    "application/x-www-form-urlencoded",
    "multipart/form-data",
)


class ResolveError(RuntimeError):
    """Raised when resolving OpenAPI references fails."""


class Resolver:
    """Inline local references and pull parameters and bodies out of operations."""

    def __init__(self, document: dict[str, Any]) -> None:
        self._document = deepcopy(document)
        self._cache: dict[str, Any] = {}

    def resolve_node(self, node: Any) -> Any:
        """Recursively inline references in a node.

        Raises:
            ResolveError: For non-local, unresolvable or cyclic references.
        """
        return self._resolve(node, stack=())

    def _resolve(self, node: Any, stack: tuple[str, ...]) -> Any:
        if isinstance(node, list):
            return [self._resolve(item, stack) for item in node]
        if not isinstance(node, dict):
            return node

        ref_value = node.get("$ref")
        if isinstance(ref_value, str):
            resolved_ref = self._resolve_ref(ref_value, stack)
            siblings = {key: value for key, value in node.items() if key != "$ref"}
            if siblings and isinstance(resolved_ref, dict):
                merged = deepcopy(resolved_ref)
                for key, value in siblings.items():
                    merged[key] = self._resolve(value, stack)
                return merged
            return deepcopy(resolved_ref)

        return {key: self._resolve(value, stack) for key, value in node.items()}

    def _resolve_ref(self, ref: str, stack: tuple[str, ...]) -> Any:
        if ref in stack:
            chain = " -> ".join((*stack, ref))
            raise ResolveError(f"Cyclic reference cannot be expanded inline: {chain}")

        if ref in self._cache:
            return deepcopy(self._cache[ref])

        if not ref.startswith("#/"):
            raise ResolveError(f"Only local references are currently supported: {ref}")

        current: Any = self._document
        for token in ref[2:].split("/"):
            token = token.replace("~1", "/").replace("~0", "~")
            if not isinstance(current, dict) or token not in current:
                raise ResolveError(f"Unresolvable reference: {ref}")
            current = current[token]

        resolved = self._resolve(deepcopy(current), (*stack, ref))
        self._cache[ref] = deepcopy(resolved)
        logger.debug("Resolved reference %s", ref)
        return resolved

    def collect_parameters(self, operation_spec: OperationSpec) -> list[dict[str, Any]]:
        """Return resolved path-item parameters followed by operation parameters.

        Operation-level parameters come last so they replace path-level ones
        with the same name and location.
        """
        return [
            *self._parameters_of(operation_spec.path_item),
            *self._parameters_of(operation_spec.operation),
        ]

    def _parameters_of(self, node: dict[str, Any]) -> list[dict[str, Any]]:
        raw = node.get("parameters")
        if not isinstance(raw, list):
            return []
        parameters: list[dict[str, Any]] = []
        for parameter in raw:
            resolved = self.resolve_node(parameter)
            if not isinstance(resolved, dict):
                raise ResolveError(f"Parameter must resolve to a mapping, got {resolved!r}")
            parameters.append(resolved)
        return parameters

    def request_body(self, operation_spec: OperationSpec) -> Optional[tuple[dict[str, Any], bool]]:
        """Return the resolved request body schema and its ``required`` flag.

        JSON-like media types are preferred; ``None`` means the operation has
        no body with a schema.
        """
        request_body = operation_spec.operation.get("requestBody")
        if not isinstance(request_body, dict):
            return None
        resolved_body = self.resolve_node(request_body)
        if not isinstance(resolved_body, dict):
            return None
        content = resolved_body.get("content")
        if not isinstance(content, dict):
            return None

        candidates: list[dict[str, Any]] = []
        for media_type in _PREFERRED_BODY_MEDIA_TYPES:
            media = content.get(media_type)
            if isinstance(media, dict):
                candidates.append(media)
        for media in content.values():
            if isinstance(media, dict) and media not in candidates:
                candidates.append(media)

        for media in candidates:
            schema_node = media.get("schema")
            if isinstance(schema_node, dict):
                return schema_node, resolved_body.get("required") is True
        return None

"""Naming helpers for operations and generated TypeScript identifiers."""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass
from typing import Any, Optional

from .http_methods import is_http_method
from .model_types import OperationSpec

logger = logging.getLogger(__name__)

_WORD_SPLIT_RE = re.compile(r"[^0-9a-zA-Z]+")
_PATH_PARAM_RE = re.compile(r"^\{(?P<name>[^{}]+)\}$")


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


def camel_case(raw: str) -> str:
    """Convert arbitrary text into a camelCase JavaScript identifier.

    Existing inner capitals are kept, so ``listPets`` stays ``listPets``.
    """
    words = [word for word in _WORD_SPLIT_RE.split(raw) if word]
    if not words:
        return "root"
    text = words[0][:1].lower() + words[0][1:] + "".join(_capitalize(word) for word in words[1:])
    if text[0].isdigit():
        text = f"_{text}"
    return text


def pascal_case(raw: str) -> str:
    """Convert arbitrary text into PascalCase."""
    return "".join(_capitalize(word) for word in _WORD_SPLIT_RE.split(raw) if word)


def path_to_route_name(method: str, path: str) -> str:
    """Create a route name from the method and path segments.

    ``get /users/{user_id}/posts`` becomes ``getUsersByUserIdPosts``.
    """
    parts: list[str] = []
    for segment in path.split("/"):
        if not segment:
            continue
        match = _PATH_PARAM_RE.match(segment)
        if match:
            parts.append(f"By{pascal_case(match.group('name'))}")
            continue
        parts.append(pascal_case(segment))
    suffix = "".join(parts) or "Root"
    return f"{method}{suffix}"


@dataclass(frozen=True)
class _OperationCandidate:
    path: str
    method: str
    operation: dict[str, Any]
    path_item: dict[str, Any]
    operation_id: Optional[str]


def _collect_operation_candidates(
    raw_paths: dict[str, dict[str, Any]],
) -> list[_OperationCandidate]:
    candidates: list[_OperationCandidate] = []
    for path, path_item in raw_paths.items():
        if not isinstance(path_item, dict):
            continue
        for key, operation in path_item.items():
            if not is_http_method(key) or not isinstance(operation, dict):
                continue
            candidates.append(
                _OperationCandidate(
                    path=path,
                    method=key,
                    operation=operation,
                    path_item=path_item,
                    operation_id=_normalize_operation_id(operation.get("operationId")),
                )
            )
    return candidates


def _normalize_operation_id(operation_id_raw: Any) -> Optional[str]:
    if isinstance(operation_id_raw, str) and operation_id_raw.strip():
        return camel_case(operation_id_raw.strip())
    return None


def _conflicting_operation_ids(candidates: list[_OperationCandidate]) -> set[str]:
    operation_ids = [candidate.operation_id for candidate in candidates if candidate.operation_id]
    counts = Counter(operation_ids)
    return {name for name, count in counts.items() if count > 1}


def _unique_name(base_name: str, used_names: set[str]) -> str:
    if base_name not in used_names:
        used_names.add(base_name)
        return base_name
    suffix = 2
    while f"{base_name}{suffix}" in used_names:
        suffix += 1
    name = f"{base_name}{suffix}"
    used_names.add(name)
    return name


def resolve_operations(
    raw_paths: dict[str, dict[str, Any]],
) -> tuple[list[OperationSpec], list[str]]:
    """Extract operations and name routes, preferring unique operationIds.

    Args:
        raw_paths (dict[str, dict[str, Any]]): The document ``paths`` mapping.

    Returns:
        tuple[list[OperationSpec], list[str]]: Operations in document order
            and warnings about naming conflicts.
    """
    candidates = _collect_operation_candidates(raw_paths)
    conflicting_ids = _conflicting_operation_ids(candidates)

    warnings: list[str] = []
    if conflicting_ids:
        joined = ", ".join(sorted(conflicting_ids))
        warnings.append(
            "Conflicting operationId values detected; using path-based naming for conflicts: "
            f"{joined}"
        )

    used_names: set[str] = set()
    resolved: list[OperationSpec] = []
    for candidate in candidates:
        operation_id = candidate.operation_id
        if operation_id is not None and operation_id not in conflicting_ids:
            base_name = operation_id
        else:
            base_name = path_to_route_name(candidate.method, candidate.path)
        route_name = _unique_name(base_name, used_names)
        if route_name != base_name:
            logger.warning("Route name %s already used; renamed to %s", base_name, route_name)
        resolved.append(
            OperationSpec(
                path=candidate.path,
                method=candidate.method,
                route_name=route_name,
                operation=candidate.operation,
                path_item=candidate.path_item,
            )
        )

    return resolved, warnings

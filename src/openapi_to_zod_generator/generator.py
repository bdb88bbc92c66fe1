"""High-level generator orchestration."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any, Optional

from .json_types import JSONObject, JSONValue
from .loader import OpenAPILoadError, get_openapi_version, load_openapi_document
from .model_types import GenerationResult, OperationSpec, RouteDefinition
from .naming import resolve_operations
from .params_object import ParameterLocationError, generate_params_object, generate_request_body
from .render import render_routes_module
from .resolver import ResolveError, Resolver
from .schema_nodes import ParameterDescriptor, SchemaNodeError
from .schema_parser import SchemaParser
from .writer import WriteError, write_routes_module

logger = logging.getLogger(__name__)

_SKIPPED_LOCATIONS = frozenset({"cookie"})


class GenerationError(RuntimeError):
    """Raised when one operation cannot be converted; nothing is written."""


@dataclass(frozen=True)
class GenerationRun:
    """Generation result together with the rendered source."""

    result: GenerationResult
    source: str


def run_generation(*, input_path: Path, output_path: Path) -> GenerationRun:
    """Generate a TypeScript module of Zod request validators from an OpenAPI document.

    Args:
        input_path (Path): Path to the input OpenAPI document.
        output_path (Path): ``.ts`` file to create.

    Returns:
        GenerationRun: Generation metadata and the written source.
    """
    document = load_openapi_document(input_path)
    routes, warnings = build_routes(document)
    source = render_routes_module(routes)
    write_routes_module(output_path=output_path, source=source)
    logger.debug("Generated %d routes into %s", len(routes), output_path)

    result = GenerationResult(
        output_path=str(output_path),
        route_names=tuple(route.route_name for route in routes),
        warnings=tuple(warnings),
    )
    return GenerationRun(result=result, source=source)


def build_routes(document: JSONObject) -> tuple[list[RouteDefinition], list[str]]:
    """Build route definitions for every operation of a loaded document.

    Raises:
        GenerationError: If any operation has an invalid parameter or schema.
    """
    parser = SchemaParser(get_openapi_version(document))
    resolver = Resolver(dict(document))
    operations, warnings = resolve_operations(_load_path_map(document))

    routes: list[RouteDefinition] = []
    for operation in operations:
        try:
            descriptors = _operation_descriptors(
                operation=operation,
                resolver=resolver,
                parser=parser,
                warnings=warnings,
            )
            params = generate_params_object(descriptors)
            request_body = _request_body_expression(
                operation=operation, resolver=resolver, parser=parser
            )
        except (SchemaNodeError, ParameterLocationError, ResolveError) as exc:
            raise GenerationError(
                f"{operation.method.upper()} {operation.path}: {exc}"
            ) from exc
        if request_body is not None and params.body:
            raise GenerationError(
                f"{operation.method.upper()} {operation.path}: both a requestBody and "
                f"'in: body' parameters {sorted(params.body)} are declared"
            )
        routes.append(
            RouteDefinition(
                route_name=operation.route_name,
                method=operation.method,
                path=operation.path,
                summary=_string_or_none(operation.operation.get("summary")),
                description=_string_or_none(operation.operation.get("description")),
                params=params,
                request_body=request_body,
            )
        )
    return routes, warnings


def _load_path_map(document: JSONObject) -> dict[str, dict[str, Any]]:
    raw_paths = document.get("paths")
    if not isinstance(raw_paths, dict):
        raise OpenAPILoadError("OpenAPI document missing 'paths' object")

    path_map: dict[str, dict[str, Any]] = {}
    for path, path_item in raw_paths.items():
        if isinstance(path, str) and isinstance(path_item, dict):
            path_map[path] = path_item
    return path_map


def _operation_descriptors(
    *,
    operation: OperationSpec,
    resolver: Resolver,
    parser: SchemaParser,
    warnings: list[str],
) -> list[ParameterDescriptor]:
    descriptors: list[ParameterDescriptor] = []
    for index, raw_parameter in enumerate(resolver.collect_parameters(operation)):
        location = raw_parameter.get("in")
        if location in _SKIPPED_LOCATIONS:
            message = (
                f"Skipping {location} parameter {raw_parameter.get('name')!r} in "
                f"{operation.method.upper()} {operation.path}"
            )
            logger.debug("%s", message)
            warnings.append(message)
            continue
        descriptors.append(
            parser.parse_parameter(raw_parameter, path=f"#/parameters/{index}")
        )
    return descriptors


def _request_body_expression(
    *,
    operation: OperationSpec,
    resolver: Resolver,
    parser: SchemaParser,
) -> Optional[str]:
    body = resolver.request_body(operation)
    if body is None:
        return None
    schema, required = body
    node = parser.parse_schema(schema, path="#/requestBody/schema")
    return generate_request_body(node, required=required)


def _string_or_none(value: JSONValue) -> Optional[str]:
    if isinstance(value, str):
        stripped = value.strip()
        if stripped:
            return stripped
    return None


__all__ = [
    "GenerationError",
    "GenerationRun",
    "OpenAPILoadError",
    "WriteError",
    "build_routes",
    "run_generation",
]

"""Group parameter validation expressions by request location."""

from __future__ import annotations

from collections.abc import Iterable

from .schema_nodes import (
    EnumNode,
    NumberNode,
    ParameterDescriptor,
    ParamsObject,
    SchemaNode,
    pointer_segment,
)
from .zod_builders import (
    ZOD_NUMBER,
    ZOD_STRING,
    generate_zod_coerce,
    generate_zod_pipe,
    with_optional,
)
from .zod_schema import generate_zod_schema

_NUMERIC_ENUM_TYPES = frozenset({"number", "integer"})

_LOCATION_BUCKETS: dict[str, str] = {
    "path": "params",
    "query": "query",
    "header": "headers",
    "body": "body",
}


class ParameterLocationError(RuntimeError):
    """Raised when a parameter targets a location without a bucket."""

    def __init__(self, *, parameter_name: str, location: str) -> None:
        expected = ", ".join(_LOCATION_BUCKETS)
        super().__init__(
            f"Parameter {parameter_name!r} has unsupported location {location!r}; "
            f"expected one of: {expected}"
        )
        self.parameter_name = parameter_name
        self.location = location


def generate_params_object(parameters: Iterable[ParameterDescriptor]) -> ParamsObject:
    """Build Zod expressions for each parameter and group them by location.

    Query parameters declared as ``number`` or ``integer``, including enums of
    those types, are coerced from ``z.string()``.
    Parameters that are not required get ``.optional()``. A later parameter
    with the same name and location replaces an earlier one.

    Args:
        parameters (Iterable[ParameterDescriptor]): Parameters in declaration order.

    Returns:
        ParamsObject: All four buckets, empty where no parameter applies.

    Raises:
        ParameterLocationError: If a parameter location is not path, query, header or body.
        SchemaNodeError: If a parameter schema cannot be converted.
    """
    result = ParamsObject()
    for parameter in parameters:
        bucket_name = _LOCATION_BUCKETS.get(parameter.location)
        if bucket_name is None:
            raise ParameterLocationError(
                parameter_name=parameter.name,
                location=parameter.location,
            )

        expression = generate_zod_schema(
            parameter.schema,
            path=f"#/parameters/{parameter.location}/{pointer_segment(parameter.name)}",
        )
        if parameter.location == "query":
            expression = _coerce_query_value(parameter.schema, expression)
        if not parameter.required:
            expression = with_optional(expression)

        getattr(result, bucket_name)[parameter.name] = expression
    return result


def generate_request_body(schema: SchemaNode, *, required: bool) -> str:
    """Build the validator for a whole request body payload.

    The body schema is used as is, not wrapped in a named property.
    """
    expression = generate_zod_schema(schema, path="#/requestBody/schema")
    if not required:
        expression = with_optional(expression)
    return expression


def _coerce_query_value(schema: SchemaNode, expression: str) -> str:
    if isinstance(schema, NumberNode):
        return generate_zod_coerce(ZOD_STRING, expression)
    if isinstance(schema, EnumNode) and schema.base_type in _NUMERIC_ENUM_TYPES:
        # Literal unions have no coerce form; coerce to a number, then check the enum.
        return generate_zod_coerce(ZOD_STRING, generate_zod_pipe(ZOD_NUMBER, expression))
    return expression

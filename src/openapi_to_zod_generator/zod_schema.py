"""Recursive conversion of schema nodes into Zod expression source."""

from __future__ import annotations

from typing import Optional

from .schema_nodes import (
    AnyNode,
    ArrayNode,
    BooleanNode,
    EnumNode,
    IntegerNode,
    IntersectionNode,
    NullNode,
    NumberNode,
    ObjectNode,
    SchemaNode,
    SchemaNodeError,
    StringNode,
    UnionNode,
    pointer_segment,
)
from .zod_builders import (
    ZOD_ANY,
    ZOD_BOOLEAN,
    ZOD_NULL,
    ZOD_NUMBER,
    ZOD_STRING,
    chain,
    generate_zod_array,
    generate_zod_discriminated_union,
    generate_zod_enum,
    generate_zod_intersection,
    generate_zod_object_schema,
    generate_zod_record,
    generate_zod_union,
    js_literal,
    js_regex_literal,
    with_nullable,
    with_optional,
    with_string_format,
)


def generate_zod_schema(node: SchemaNode, *, path: str = "#") -> str:
    """Convert one schema node, recursively, into a Zod expression.

    Kind-specific modifiers are emitted first and ``.nullable()`` last.
    Optionality is never added here; callers append it.

    Args:
        node (SchemaNode): Schema node to convert.
        path (str): Location of ``node`` inside the overall schema, used in errors.

    Returns:
        str: Zod source text for ``node``.

    Raises:
        SchemaNodeError: If ``node`` is not a known schema node or is malformed.
    """
    expression = _generate_base(node, path=path)
    if node.nullable:
        expression = with_nullable(expression)
    return expression


def _generate_base(node: SchemaNode, *, path: str) -> str:
    match node:
        case StringNode():
            return _string_expression(node)
        case IntegerNode():
            return _number_expression(node, base=chain(ZOD_NUMBER, "int"))
        case NumberNode():
            return _number_expression(node, base=ZOD_NUMBER)
        case BooleanNode():
            return ZOD_BOOLEAN
        case NullNode():
            return ZOD_NULL
        case AnyNode():
            return ZOD_ANY
        case EnumNode():
            if not node.values:
                raise SchemaNodeError("Enum schema has no values", path=path)
            return generate_zod_enum(node.values)
        case ArrayNode():
            return _array_expression(node, path=path)
        case ObjectNode():
            return _object_expression(node, path=path)
        case UnionNode():
            return _union_expression(node, path=path)
        case IntersectionNode():
            if not node.parts:
                raise SchemaNodeError("allOf schema has no parts", path=path)
            return generate_zod_intersection(
                generate_zod_schema(part, path=f"{path}/allOf/{index}")
                for index, part in enumerate(node.parts)
            )
        case _:
            raise SchemaNodeError(f"Unsupported schema node {type(node).__name__}", path=path)


def _string_expression(node: StringNode) -> str:
    expression = ZOD_STRING
    if node.format is not None:
        expression = with_string_format(expression, node.format)
    if node.min_length is not None:
        expression = chain(expression, "min", js_literal(node.min_length))
    if node.max_length is not None:
        expression = chain(expression, "max", js_literal(node.max_length))
    if node.pattern is not None:
        expression = chain(expression, "regex", js_regex_literal(node.pattern))
    return expression


def _number_expression(node: NumberNode, *, base: str) -> str:
    expression = base
    for method, value in (
        ("min", node.minimum),
        ("max", node.maximum),
        ("gt", node.exclusive_minimum),
        ("lt", node.exclusive_maximum),
        ("multipleOf", node.multiple_of),
    ):
        if value is not None:
            expression = chain(expression, method, js_literal(value))
    return expression


def _array_expression(node: ArrayNode, *, path: str) -> str:
    expression = generate_zod_array(generate_zod_schema(node.items, path=f"{path}/items"))
    if node.min_items is not None:
        expression = chain(expression, "min", js_literal(node.min_items))
    if node.max_items is not None:
        expression = chain(expression, "max", js_literal(node.max_items))
    return expression


def _object_expression(node: ObjectNode, *, path: str) -> str:
    additional = node.additional_properties
    if not node.properties and additional is True:
        return generate_zod_record(ZOD_ANY)
    if not node.properties and additional not in (None, False):
        return generate_zod_record(
            generate_zod_schema(additional, path=f"{path}/additionalProperties")
        )

    properties: dict[str, str] = {}
    for name, property_node in node.properties.items():
        property_path = f"{path}/properties/{pointer_segment(name)}"
        expression = generate_zod_schema(property_node, path=property_path)
        if name not in node.required:
            expression = with_optional(expression)
        properties[name] = expression

    expression = generate_zod_object_schema(properties)
    if additional is False:
        return chain(expression, "strict")
    if additional is True:
        return chain(expression, "passthrough")
    if additional is not None:
        return chain(
            expression,
            "catchall",
            generate_zod_schema(additional, path=f"{path}/additionalProperties"),
        )
    return expression


def _union_expression(node: UnionNode, *, path: str) -> str:
    if not node.options:
        raise SchemaNodeError("Union schema has no options", path=path)
    options = [
        generate_zod_schema(option, path=_option_path(node, path=path, index=index))
        for index, option in enumerate(node.options)
    ]
    if node.discriminator is not None and _is_discriminator_compatible(
        node.options, node.discriminator
    ):
        return generate_zod_discriminated_union(node.discriminator, options)
    return generate_zod_union(options)


def _option_path(node: UnionNode, *, path: str, index: int) -> str:
    if node.keyword is None:
        return path
    return f"{path}/{node.keyword}/{index}"


def _is_discriminator_compatible(options: tuple[SchemaNode, ...], property_name: str) -> bool:
    for option in options:
        if not isinstance(option, ObjectNode) or option.nullable:
            return False
        discriminator_node: Optional[SchemaNode] = option.properties.get(property_name)
        if property_name not in option.required:
            return False
        if not isinstance(discriminator_node, EnumNode) or discriminator_node.nullable:
            return False
        if len(discriminator_node.values) != 1:
            return False
    return True

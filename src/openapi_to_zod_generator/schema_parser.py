"""Build typed schema nodes and parameter descriptors from resolved OpenAPI data."""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Union, cast

from jsonschema.exceptions import SchemaError

from .json_types import JSONObject, JSONPrimitive, JSONValue
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
    ParameterDescriptor,
    PrimitiveType,
    SchemaNode,
    SchemaNodeError,
    StringNode,
    UnionKeyword,
    UnionNode,
    pointer_segment,
)
from .schema_utils import (
    is_null_schema,
    is_object_schema,
    meta_schema_validator,
    split_type_members,
    uses_openapi_30_dialect,
)

type _Number = Union[int, float]

_PRIMITIVE_TYPES = frozenset({"string", "number", "integer", "boolean"})


class SchemaParser:
    """Convert resolved JSON-Schema mappings into schema nodes.

    Malformed input is reported as ``SchemaNodeError`` with the path of the
    offending node; nothing is guessed.
    """

    def __init__(self, openapi_version: str) -> None:
        self._openapi_version = openapi_version

    def parse_schema(self, raw: JSONValue, *, path: str = "#") -> SchemaNode:
        """Check a raw schema against its meta-schema and convert it.

        Args:
            raw (JSONValue): Resolved schema mapping (or boolean schema).
            path (str): Location of ``raw`` used in error messages.

        Returns:
            SchemaNode: Typed node tree.

        Raises:
            SchemaNodeError: If the schema is invalid or uses unsupported shapes.
        """
        if isinstance(raw, dict):
            self._check_meta_schema(raw, path=path)
        return self._parse(raw, path=path)

    def parse_parameter(self, raw: JSONObject, *, path: str) -> ParameterDescriptor:
        """Convert one resolved OpenAPI parameter object.

        Path parameters are always required; other parameters default to optional.
        """
        name = raw.get("name")
        if not isinstance(name, str) or not name:
            raise SchemaNodeError("Parameter is missing a non-empty 'name'", path=path)
        location = raw.get("in")
        if not isinstance(location, str) or not location:
            raise SchemaNodeError(f"Parameter {name!r} is missing 'in'", path=path)

        schema_path = f"{path}/schema"
        schema_raw = raw.get("schema")
        if not isinstance(schema_raw, dict):
            schema_path, schema_raw = _content_schema(raw.get("content"), path=path)
        if schema_raw is None:
            raise SchemaNodeError(
                f"Parameter {name!r} declares neither 'schema' nor 'content'",
                path=path,
            )

        return ParameterDescriptor(
            name=name,
            location=location,
            required=location == "path" or raw.get("required") is True,
            schema=self.parse_schema(schema_raw, path=schema_path),
        )

    def _check_meta_schema(self, raw: JSONObject, *, path: str) -> None:
        validator = meta_schema_validator(self._openapi_version)
        try:
            validator.check_schema(raw)
        except SchemaError as exc:
            suffix = "".join(f"/{pointer_segment(str(segment))}" for segment in exc.path)
            raise SchemaNodeError(f"Invalid schema: {exc.message}", path=f"{path}{suffix}") from exc

    def _parse(self, raw: JSONValue, *, path: str) -> SchemaNode:
        if raw is True:
            return AnyNode()
        if not isinstance(raw, dict):
            raise SchemaNodeError(f"Expected a schema object, got {type(raw).__name__}", path=path)

        nullable = uses_openapi_30_dialect(self._openapi_version) and raw.get("nullable") is True

        if "const" in raw:
            return EnumNode(
                values=(_literal(raw["const"], path=f"{path}/const"),),
                base_type=_primitive_type(raw),
                nullable=nullable,
            )

        enum = raw.get("enum")
        if enum is not None:
            return self._parse_enum(
                enum,
                base_type=_primitive_type(raw),
                nullable=nullable,
                path=f"{path}/enum",
            )

        keyword: UnionKeyword
        for keyword in ("oneOf", "anyOf"):
            options = raw.get(keyword)
            if options is not None:
                return self._parse_union(
                    raw,
                    options,
                    keyword=keyword,
                    nullable=nullable,
                    path=path,
                )

        all_of = raw.get("allOf")
        if all_of is not None:
            if not isinstance(all_of, list) or not all_of:
                raise SchemaNodeError("'allOf' must be a non-empty list", path=f"{path}/allOf")
            parts = tuple(
                self._parse(part, path=f"{path}/allOf/{index}") for index, part in enumerate(all_of)
            )
            return IntersectionNode(parts=parts, nullable=nullable)

        members, null_listed = split_type_members(raw.get("type"))
        nullable = nullable or null_listed
        if not members:
            if null_listed:
                return NullNode()
            if is_object_schema(raw):
                return self._parse_object(raw, nullable=nullable, path=path)
            if "items" in raw:
                return self._parse_array(raw, nullable=nullable, path=path)
            return AnyNode(nullable=nullable)
        if len(members) == 1:
            return self._parse_typed(raw, members[0], nullable=nullable, path=path)
        return UnionNode(
            options=tuple(
                self._parse_typed(raw, member, nullable=False, path=path) for member in members
            ),
            keyword=None,
            nullable=nullable,
        )

    def _parse_typed(
        self,
        raw: JSONObject,
        schema_type: str,
        *,
        nullable: bool,
        path: str,
    ) -> SchemaNode:
        match schema_type:
            case "string":
                return StringNode(
                    min_length=_integer(raw, "minLength", path=path),
                    max_length=_integer(raw, "maxLength", path=path),
                    pattern=_string(raw, "pattern", path=path),
                    format=_string(raw, "format", path=path),
                    nullable=nullable,
                )
            case "number":
                return NumberNode(**self._numeric_bounds(raw, path=path), nullable=nullable)
            case "integer":
                return IntegerNode(**self._numeric_bounds(raw, path=path), nullable=nullable)
            case "boolean":
                return BooleanNode(nullable=nullable)
            case "array":
                return self._parse_array(raw, nullable=nullable, path=path)
            case "object":
                return self._parse_object(raw, nullable=nullable, path=path)
            case _:
                raise SchemaNodeError(f"Unknown schema type {schema_type!r}", path=f"{path}/type")

    def _numeric_bounds(self, raw: JSONObject, *, path: str) -> dict[str, Optional[_Number]]:
        minimum = _number(raw, "minimum", path=path)
        maximum = _number(raw, "maximum", path=path)
        exclusive_minimum: Optional[_Number] = None
        exclusive_maximum: Optional[_Number] = None

        if uses_openapi_30_dialect(self._openapi_version):
            if raw.get("exclusiveMinimum") is True:
                exclusive_minimum, minimum = minimum, None
            if raw.get("exclusiveMaximum") is True:
                exclusive_maximum, maximum = maximum, None
        else:
            exclusive_minimum = _number(raw, "exclusiveMinimum", path=path)
            exclusive_maximum = _number(raw, "exclusiveMaximum", path=path)

        return {
            "minimum": minimum,
            "maximum": maximum,
            "exclusive_minimum": exclusive_minimum,
            "exclusive_maximum": exclusive_maximum,
            "multiple_of": _number(raw, "multipleOf", path=path),
        }

    def _parse_enum(
        self,
        enum: JSONValue,
        *,
        base_type: Optional[PrimitiveType],
        nullable: bool,
        path: str,
    ) -> SchemaNode:
        if not isinstance(enum, list) or not enum:
            raise SchemaNodeError("'enum' must be a non-empty list", path=path)
        values = tuple(_literal(value, path=f"{path}/{index}") for index, value in enumerate(enum))
        non_null = tuple(value for value in values if value is not None)
        if not non_null:
            return NullNode()
        if len(non_null) != len(values):
            return EnumNode(values=non_null, base_type=base_type, nullable=True)
        return EnumNode(values=values, base_type=base_type, nullable=nullable)

    def _parse_union(
        self,
        raw: JSONObject,
        options_raw: JSONValue,
        *,
        keyword: UnionKeyword,
        nullable: bool,
        path: str,
    ) -> SchemaNode:
        keyword_path = f"{path}/{keyword}"
        if not isinstance(options_raw, list) or not options_raw:
            raise SchemaNodeError(f"'{keyword}' must be a non-empty list", path=keyword_path)

        options: list[SchemaNode] = []
        for index, option in enumerate(options_raw):
            if is_null_schema(option):
                nullable = True
                continue
            options.append(self._parse(option, path=f"{keyword_path}/{index}"))

        if not options:
            return NullNode()
        if len(options) == 1:
            only = options[0]
            return replace(only, nullable=only.nullable or nullable)
        return UnionNode(
            options=tuple(options),
            discriminator=_discriminator_property(raw),
            keyword=keyword,
            nullable=nullable,
        )

    def _parse_array(self, raw: JSONObject, *, nullable: bool, path: str) -> ArrayNode:
        if "items" not in raw:
            raise SchemaNodeError("Array schema is missing 'items'", path=path)
        return ArrayNode(
            items=self._parse(raw["items"], path=f"{path}/items"),
            min_items=_integer(raw, "minItems", path=path),
            max_items=_integer(raw, "maxItems", path=path),
            nullable=nullable,
        )

    def _parse_object(self, raw: JSONObject, *, nullable: bool, path: str) -> ObjectNode:
        properties_raw = raw.get("properties", {})
        if not isinstance(properties_raw, dict):
            raise SchemaNodeError("'properties' must be a mapping", path=f"{path}/properties")
        properties = {
            name: self._parse(value, path=f"{path}/properties/{pointer_segment(name)}")
            for name, value in properties_raw.items()
        }

        required_raw = raw.get("required", [])
        if not isinstance(required_raw, list) or not all(
            isinstance(name, str) for name in required_raw
        ):
            raise SchemaNodeError("'required' must be a list of names", path=f"{path}/required")

        additional_raw = raw.get("additionalProperties")
        additional: Union[bool, SchemaNode, None]
        if additional_raw is None or isinstance(additional_raw, bool):
            additional = additional_raw
        else:
            additional = self._parse(additional_raw, path=f"{path}/additionalProperties")

        return ObjectNode(
            properties=properties,
            required=frozenset(required_raw),
            additional_properties=additional,
            nullable=nullable,
        )


def _content_schema(content: JSONValue, *, path: str) -> tuple[str, Optional[JSONObject]]:
    if not isinstance(content, dict):
        return path, None
    for media_type, media in content.items():
        if isinstance(media, dict) and isinstance(media.get("schema"), dict):
            return f"{path}/content/{pointer_segment(media_type)}/schema", media["schema"]
    return path, None


def _primitive_type(raw: JSONObject) -> Optional[PrimitiveType]:
    members, _ = split_type_members(raw.get("type"))
    if len(members) == 1 and members[0] in _PRIMITIVE_TYPES:
        return cast(PrimitiveType, members[0])
    return None


def _discriminator_property(raw: JSONObject) -> Optional[str]:
    discriminator = raw.get("discriminator")
    if not isinstance(discriminator, dict):
        return None
    property_name = discriminator.get("propertyName")
    if isinstance(property_name, str) and property_name:
        return property_name
    return None


def _literal(value: JSONValue, *, path: str) -> JSONPrimitive:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    raise SchemaNodeError(
        f"Only primitive literals are supported, got {type(value).__name__}",
        path=path,
    )


def _integer(raw: JSONObject, key: str, *, path: str) -> Optional[int]:
    value = raw.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise SchemaNodeError(f"'{key}' must be an integer", path=f"{path}/{key}")
    return value


def _number(raw: JSONObject, key: str, *, path: str) -> Optional[_Number]:
    value = raw.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SchemaNodeError(f"'{key}' must be a number", path=f"{path}/{key}")
    return value


def _string(raw: JSONObject, key: str, *, path: str) -> Optional[str]:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise SchemaNodeError(f"'{key}' must be a string", path=f"{path}/{key}")
    return value

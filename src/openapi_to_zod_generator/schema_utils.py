"""Shared helpers for raw JSON-Schema shape inspection."""

from __future__ import annotations

from jsonschema.protocols import Validator
from jsonschema.validators import Draft4Validator, Draft202012Validator

from .json_types import JSONObject, JSONValue


def is_object_schema(schema: JSONObject) -> bool:
    """Return whether a schema without composite keywords behaves as an object schema.

    Args:
        schema (JSONObject): Schema node to inspect.

    Returns:
        bool: Whether object conversion rules should apply.
    """
    schema_type = schema.get("type")
    if schema_type == "object":
        return True
    if schema_type is not None:
        return False
    if isinstance(schema.get("properties"), dict):
        return True
    return "additionalProperties" in schema


def is_null_schema(schema: JSONValue) -> bool:
    """Return whether a schema only admits ``null``."""
    if not isinstance(schema, dict):
        return False
    schema_type = schema.get("type")
    if schema_type == "null":
        return True
    return isinstance(schema_type, list) and schema_type == ["null"]


def split_type_members(schema_type: JSONValue) -> tuple[list[str], bool]:
    """Split a ``type`` keyword into non-null member names and a null flag.

    Args:
        schema_type (JSONValue): Raw ``type`` value, a string or a list of strings.

    Returns:
        tuple[list[str], bool]: Non-null member names in order, and whether
            ``null`` was listed.
    """
    if isinstance(schema_type, str):
        members = [schema_type]
    elif isinstance(schema_type, list):
        members = [member for member in schema_type if isinstance(member, str)]
    else:
        members = []
    non_null: list[str] = []
    for member in members:
        if member != "null" and member not in non_null:
            non_null.append(member)
    return non_null, "null" in members


def uses_openapi_30_dialect(openapi_version: str) -> bool:
    """Return whether schemas follow the OpenAPI 3.0 JSON-Schema dialect."""
    return openapi_version.startswith("3.0")


def meta_schema_validator(openapi_version: str) -> type[Validator]:
    """Return the jsonschema validator class whose meta-schema fits the OpenAPI version.

    OpenAPI 3.0 schemas are a Draft 4 variant (boolean ``exclusiveMinimum``);
    OpenAPI 3.1 adopts Draft 2020-12.
    """
    if uses_openapi_30_dialect(openapi_version):
        return Draft4Validator
    return Draft202012Validator

"""Unit tests for grouping parameters by location."""

from __future__ import annotations

from typing import Any

import pytest

from openapi_to_zod_generator.params_object import ParameterLocationError, generate_params_object
from openapi_to_zod_generator.schema_nodes import (
    ArrayNode,
    BooleanNode,
    EnumNode,
    IntegerNode,
    NumberNode,
    ObjectNode,
    ParameterDescriptor,
    SchemaNodeError,
    StringNode,
    UnionNode,
)
from openapi_to_zod_generator.zod_builders import generate_zod_coerce


def _param(name: str, location: str, *, required: bool, schema: Any) -> ParameterDescriptor:
    return ParameterDescriptor(name=name, location=location, required=required, schema=schema)


def test_path_and_optional_integer_query() -> None:
    """A path string and an optional query integer land in their buckets."""
    result = generate_params_object(
        [
            _param("userId", "path", required=True, schema=StringNode()),
            _param("page", "query", required=False, schema=IntegerNode()),
        ]
    )
    assert result.params == {"userId": "z.string()"}
    assert result.query == {"page": "z.string().pipe(z.coerce.number().int()).optional()"}
    assert result.headers == {}
    assert result.body == {}


def test_object_body_parameter() -> None:
    """Body parameters follow their schema directly."""
    result = generate_params_object(
        [
            _param(
                "user",
                "body",
                required=True,
                schema=ObjectNode(properties={"name": StringNode()}),
            )
        ]
    )
    assert result.body == {"user": "z.object({name:z.string().optional()})"}
    assert result.params == {}
    assert result.query == {}
    assert result.headers == {}


def test_all_buckets_exist_for_empty_input() -> None:
    """No parameters still yields four empty buckets."""
    result = generate_params_object([])
    assert [name for name, _ in result.buckets()] == ["params", "query", "headers", "body"]
    assert all(bucket == {} for _, bucket in result.buckets())


def test_coercion_only_for_numeric_query_parameters() -> None:
    """Only query parameters typed number or integer are coerced from strings."""
    result = generate_params_object(
        [
            _param("limit", "query", required=True, schema=NumberNode(minimum=0)),
            _param("flag", "query", required=True, schema=BooleanNode()),
            _param("ids", "query", required=True, schema=ArrayNode(items=IntegerNode())),
            _param("id", "path", required=True, schema=IntegerNode()),
            _param("X-Rate", "header", required=True, schema=NumberNode()),
            _param(
                "either",
                "query",
                required=True,
                schema=UnionNode(options=(IntegerNode(), StringNode())),
            ),
        ]
    )
    assert result.query["limit"] == generate_zod_coerce("z.string()", "z.number().min(0)")
    assert result.query["flag"] == "z.boolean()"
    assert result.query["ids"] == "z.array(z.number().int())"
    assert result.query["either"] == "z.union([z.number().int(),z.string()])"
    assert result.params["id"] == "z.number().int()"
    assert result.headers["X-Rate"] == "z.number()"
    assert all("coerce" not in value for value in result.params.values())
    assert all("coerce" not in value for value in result.headers.values())


def test_numeric_enum_query_parameters_are_coerced() -> None:
    """Enums declared as integer or number accept their query-string form."""
    result = generate_params_object(
        [
            _param(
                "page_size",
                "query",
                required=True,
                schema=EnumNode(values=(10, 20), base_type="integer"),
            ),
            _param(
                "ratio",
                "query",
                required=False,
                schema=EnumNode(values=(0.5,), base_type="number"),
            ),
            _param("sort", "query", required=True, schema=EnumNode(values=("asc", "desc"))),
            _param("bare", "query", required=True, schema=EnumNode(values=(1, 2))),
            _param(
                "size",
                "path",
                required=True,
                schema=EnumNode(values=(1, 2), base_type="integer"),
            ),
        ]
    )
    assert result.query["page_size"] == (
        "z.string().pipe(z.coerce.number().pipe(z.union([z.literal(10),z.literal(20)])))"
    )
    assert result.query["ratio"] == (
        "z.string().pipe(z.coerce.number().pipe(z.literal(0.5))).optional()"
    )
    assert result.query["sort"] == 'z.enum(["asc","desc"])'
    assert result.query["bare"] == "z.union([z.literal(1),z.literal(2)])"
    assert result.params["size"] == "z.union([z.literal(1),z.literal(2)])"


def test_optional_suffix_follows_coercion_and_nullable() -> None:
    """Modifier order is constraints, nullable, then optional at the call site."""
    result = generate_params_object(
        [_param("score", "query", required=False, schema=NumberNode(nullable=True))]
    )
    assert result.query["score"] == "z.string().pipe(z.coerce.number().nullable()).optional()"


def test_same_name_in_different_locations_is_kept_apart() -> None:
    """Names only collide within a single location."""
    result = generate_params_object(
        [
            _param("id", "path", required=True, schema=StringNode()),
            _param("id", "query", required=False, schema=StringNode()),
        ]
    )
    assert result.params == {"id": "z.string()"}
    assert result.query == {"id": "z.string().optional()"}


def test_duplicate_name_and_location_last_write_wins() -> None:
    """A later descriptor replaces an earlier one with the same name and location."""
    result = generate_params_object(
        [
            _param("q", "query", required=True, schema=StringNode()),
            _param("other", "query", required=True, schema=StringNode()),
            _param("q", "query", required=False, schema=BooleanNode()),
        ]
    )
    assert result.query == {"q": "z.boolean().optional()", "other": "z.string()"}
    assert list(result.query) == ["q", "other"]


def test_insertion_order_is_preserved() -> None:
    """Buckets keep parameter declaration order."""
    names = ["zeta", "alpha", "mid"]
    result = generate_params_object(
        [_param(name, "header", required=True, schema=StringNode()) for name in names]
    )
    assert list(result.headers) == names


def test_repeated_runs_are_identical() -> None:
    """Generating twice from the same list gives equal results."""
    parameters = [
        _param("a", "query", required=False, schema=IntegerNode(maximum=5)),
        _param("b", "header", required=True, schema=StringNode(format="uuid")),
    ]
    assert generate_params_object(parameters) == generate_params_object(parameters)


def test_unknown_location_fails_fast() -> None:
    """Locations outside path/query/header/body are rejected."""
    with pytest.raises(ParameterLocationError) as excinfo:
        generate_params_object([_param("session", "cookie", required=False, schema=StringNode())])
    assert excinfo.value.parameter_name == "session"
    assert excinfo.value.location == "cookie"


def test_schema_errors_name_the_parameter() -> None:
    """Conversion failures point at the offending parameter."""
    with pytest.raises(SchemaNodeError) as excinfo:
        generate_params_object([_param("broken", "query", required=True, schema="string")])
    assert excinfo.value.path == "#/parameters/query/broken"

    with pytest.raises(SchemaNodeError) as excinfo:
        generate_params_object([_param("a/b", "header", required=True, schema="string")])
    assert excinfo.value.path == "#/parameters/header/a~1b"

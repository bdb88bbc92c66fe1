"""Integration tests for generator behavior."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import pytest

from openapi_to_zod_generator.cli import main
from openapi_to_zod_generator.generator import (
    GenerationError,
    WriteError,
    build_routes,
    run_generation,
)
from openapi_to_zod_generator.loader import OpenAPILoadError, load_openapi_document
from openapi_to_zod_generator.model_types import RouteDefinition
from openapi_to_zod_generator.render import render_route
from openapi_to_zod_generator.schema_nodes import ParamsObject
from .fixture_helpers import fixture_path, parametrize_fixtures

_MISSING_ITEMS_OPENAPI_SPEC = """
openapi: 3.1.0
info:
  title: Inline Test API
  version: 1.0.0
paths:
  /reports:
    get:
      parameters:
        - in: query
          name: window
          schema:
            type: array
      responses:
        "200":
          description: ok
"""


_ENUM_QUERY_OPENAPI_SPEC = """
openapi: 3.1.0
info:
  title: Enum Query API
  version: 1.0.0
paths:
  /items:
    get:
      parameters:
        - in: query
          name: page_size
          schema:
            type: integer
            enum: [10, 20]
      responses:
        "200":
          description: ok
"""


@parametrize_fixtures()
def test_generation_smoke(fixture_path: Path, tmp_path: Path) -> None:
    """Each fixture should generate a routes module without crashing."""
    output_path = tmp_path / f"{fixture_path.stem}.ts"
    run = run_generation(input_path=fixture_path, output_path=output_path)

    assert Path(run.result.output_path) == output_path
    assert output_path.read_text(encoding="utf-8") == run.source
    assert run.source.count("export const ") == len(run.result.route_names)
    assert "import { z } from 'zod'" in run.source


def test_petstore_routes() -> None:
    """Parameters, references and bodies land in the expected buckets."""
    document = load_openapi_document(fixture_path("petstore.yaml"))
    routes, warnings = build_routes(document)
    by_name = {route.route_name: route for route in routes}

    assert list(by_name) == ["listPets", "createPet", "getPetsByPetId", "deletePetsByPetId"]

    list_pets = by_name["listPets"].params
    assert list_pets.query == {
        "limit": "z.string().pipe(z.coerce.number().int().min(1).max(100)).optional()",
        "tags": "z.array(z.string()).optional()",
    }
    assert list_pets.headers == {"X-Request-Id": "z.string()"}
    assert list_pets.params == {}
    assert list_pets.body == {}

    create_pet = by_name["createPet"]
    assert create_pet.params.body == {}
    assert create_pet.request_body == (
        "z.object({name:z.string().min(1),tag:z.string().nullable().optional(),"
        'kind:z.enum(["cat","dog"]).optional()})'
    )
    assert by_name["getPetsByPetId"].params.params == {"petId": "z.string().uuid()"}
    assert by_name["deletePetsByPetId"].params.params == {"petId": "z.string().uuid()"}
    assert any("cookie parameter 'session'" in warning for warning in warnings)


def test_openapi_30_nullable_query_number() -> None:
    """OpenAPI 3.0 nullable and boolean exclusive bounds flow into the query bucket."""
    document = load_openapi_document(fixture_path("users_v30.yaml"))
    routes, _ = build_routes(document)
    get_posts = routes[0]
    assert get_posts.route_name == "getUsersByUserIdPosts"
    assert get_posts.params.params == {"user_id": "z.string()"}
    assert get_posts.params.query == {
        "score": "z.string().pipe(z.coerce.number().gt(0).nullable()).optional()"
    }
    assert routes[1].params.body == {}
    assert routes[1].request_body == (
        "z.object({title:z.string(),body:z.string().nullable().optional()}).optional()"
    )


def test_rendered_module_layout(tmp_path: Path) -> None:
    """Rendered routes wrap each non-empty bucket in an object schema."""
    output_path = tmp_path / "routes.ts"
    run = run_generation(input_path=fixture_path("users_v30.yaml"), output_path=output_path)

    assert "/**\n * GET /users/{user_id}/posts\n *\n * List posts for a user.\n */" in run.source
    assert "export const getUsersByUserIdPostsRequest = {\n" in run.source
    assert "  params: z.object({user_id:z.string()}),\n" in run.source
    assert " * Create a post for the user." in run.source
    assert "headers:" not in run.source
    assert (
        "  body: z.object({title:z.string(),body:z.string().nullable().optional()}).optional(),\n"
        in run.source
    )


def test_output_file_must_not_exist(tmp_path: Path) -> None:
    """Generator refuses to overwrite an existing output file."""
    output_path = tmp_path / "routes.ts"
    output_path.write_text("// keep\n", encoding="utf-8")

    with pytest.raises(WriteError):
        run_generation(input_path=fixture_path("petstore.yaml"), output_path=output_path)
    assert output_path.read_text(encoding="utf-8") == "// keep\n"


def test_malformed_schema_aborts_without_output(tmp_path: Path) -> None:
    """A malformed parameter schema stops generation and names the operation."""
    spec_path = tmp_path / "inline_openapi.yaml"
    spec_path.write_text(_MISSING_ITEMS_OPENAPI_SPEC, encoding="utf-8")
    output_path = tmp_path / "routes.ts"

    with pytest.raises(GenerationError) as excinfo:
        run_generation(input_path=spec_path, output_path=output_path)
    message = str(excinfo.value)
    assert "GET /reports" in message
    assert "missing 'items'" in message
    assert not output_path.exists()


def test_loader_rejects_swagger_2(tmp_path: Path) -> None:
    """Swagger 2.0 documents are refused with a clear message."""
    spec_path = tmp_path / "swagger.yaml"
    spec_path.write_text("swagger: '2.0'\ninfo: {title: t, version: '1'}\npaths: {}\n", encoding="utf-8")
    with pytest.raises(OpenAPILoadError, match="Swagger 2.0"):
        load_openapi_document(spec_path)


def test_loader_rejects_other_major_versions(tmp_path: Path) -> None:
    """Only OpenAPI 3.x input is accepted."""
    spec_path = tmp_path / "future.json"
    spec_path.write_text('{"openapi": "4.0.0", "info": {}, "paths": {}}', encoding="utf-8")
    with pytest.raises(OpenAPILoadError, match="not supported"):
        load_openapi_document(spec_path)


def test_loader_rejects_non_mapping(tmp_path: Path) -> None:
    """Documents must deserialize to a mapping."""
    spec_path = tmp_path / "list.yaml"
    spec_path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(OpenAPILoadError, match="mapping"):
        load_openapi_document(spec_path)


def test_cli_generates_and_reports_warnings(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """The CLI writes the module and prints skipped-parameter warnings."""
    output_path = tmp_path / "out" / "routes.ts"
    exit_code = main(["--input", str(fixture_path("petstore.yaml")), "--output", str(output_path)])

    captured = capsys.readouterr()
    assert exit_code == 0
    assert output_path.is_file()
    assert "Warning: Skipping cookie parameter" in captured.out
    assert "Generated 4 routes" in captured.out


def test_cli_load_error_exits_with_usage_error(tmp_path: Path) -> None:
    """Known failures are reported through argparse with exit code 2."""
    with pytest.raises(SystemExit) as excinfo:
        main(["--input", str(tmp_path / "missing.yaml"), "--output", str(tmp_path / "r.ts")])
    assert excinfo.value.code == 2


def test_cli_rejects_non_typescript_output(tmp_path: Path) -> None:
    """The output must be a TypeScript file."""
    with pytest.raises(SystemExit) as excinfo:
        main(["--input", str(fixture_path("petstore.yaml")), "--output", str(tmp_path / "r.py")])
    assert excinfo.value.code == 2


def test_cli_help_screen() -> None:
    """Running the CLI help should succeed and print usage information."""
    env = dict(os.environ)
    env["PYTHONPATH"] = str(Path(__file__).resolve().parents[1] / "src")
    result = subprocess.run(
        [sys.executable, "-m", "openapi_to_zod_generator", "--help"],
        check=False,
        capture_output=True,
        text=True,
        env=env,
    )
    assert result.returncode == 0
    assert "usage:" in result.stdout.lower()


def test_request_body_renders_unwrapped() -> None:
    """A request body payload is the body schema itself, not a named property."""
    route = RouteDefinition(
        route_name="createThing",
        method="post",
        path="/things",
        summary=None,
        description=None,
        params=ParamsObject(),
        request_body="z.object({name:z.string()})",
    )
    assert "  body: z.object({name:z.string()}),\n" in render_route(route)


def test_named_body_parameters_stay_grouped() -> None:
    """Parameters declared ``in: body`` are still collected into one object."""
    route = RouteDefinition(
        route_name="legacyUpload",
        method="post",
        path="/upload",
        summary=None,
        description=None,
        params=ParamsObject(body={"name": "z.string()"}),
    )
    assert "  body: z.object({name:z.string()}),\n" in render_route(route)
    assert render_route(
        RouteDefinition(
            route_name="ping",
            method="get",
            path="/ping",
            summary=None,
            description=None,
            params=ParamsObject(),
        )
    ).endswith("export const pingRequest = {}")


def test_integer_enum_query_parameter_is_coerced(tmp_path: Path) -> None:
    """Typed enums in the query string are coerced before the literal check."""
    spec_path = tmp_path / "enum_query.yaml"
    spec_path.write_text(_ENUM_QUERY_OPENAPI_SPEC, encoding="utf-8")
    routes, _ = build_routes(load_openapi_document(spec_path))
    assert routes[0].params.query == {
        "page_size": (
            "z.string().pipe(z.coerce.number().pipe("
            "z.union([z.literal(10),z.literal(20)]))).optional()"
        )
    }

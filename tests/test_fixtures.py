"""Fixture-based OpenAPI validation tests."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from openapi_python_client.schema import OpenAPI
from pydantic import ValidationError

from openapi_to_zod_generator.loader import load_openapi_document
from .fixture_helpers import fixture_dir, parametrize_fixtures


def test_fixture_directory_exists() -> None:
    """Ensure the fixtures directory is present."""
    assert fixture_dir().is_dir(), f"Fixture directory not found: {fixture_dir()}"


@parametrize_fixtures()
def test_fixture_is_valid_openapi(fixture_path: Path) -> None:
    """Validate each fixture using openapi-python-client's OpenAPI schema model."""
    data = yaml.safe_load(fixture_path.read_text(encoding="utf-8"))
    try:
        OpenAPI.model_validate(data)
    except ValidationError as exc:
        pytest.fail(f"OpenAPI validation failed for {fixture_path}:\n{exc}")


@parametrize_fixtures()
def test_fixture_loads_through_loader(fixture_path: Path) -> None:
    """The loader accepts every fixture and keeps the declared version."""
    document = load_openapi_document(fixture_path)
    assert str(document["openapi"]).startswith("3.")

"""Reading OpenAPI 3.0/3.1 input files for route generation."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from openapi_python_client.schema import OpenAPI
from pydantic import ValidationError

from .json_types import JSONObject

logger = logging.getLogger(__name__)

_SUPPORTED_MAJOR_VERSION = 3


class OpenAPILoadError(RuntimeError):
    """Raised when an input file is unreadable or is not an OpenAPI 3 document."""


def load_openapi_document(path: Path) -> JSONObject:
    """Read a ``.yaml``, ``.yml`` or ``.json`` OpenAPI 3 file.

    JSON is read through the YAML parser, which accepts it unchanged. The
    document is checked against the OpenAPI object model before any route is
    generated from it.

    Args:
        path (Path): Input file.

    Returns:
        JSONObject: The document as parsed. ``$ref`` pointers are resolved later.

    Raises:
        OpenAPILoadError: If the file cannot be read or parsed, is not a
            mapping, declares Swagger 2 or an unsupported version, or does
            not describe a valid OpenAPI object.
    """
    document = _read_mapping(path)
    version = get_openapi_version(document)
    ensure_supported_version(version)
    try:
        OpenAPI.model_validate(document)
    except ValidationError as exc:
        raise OpenAPILoadError(
            f"{path} is not a valid OpenAPI {version} document: {exc}"
        ) from exc

    logger.debug("Loaded OpenAPI %s input %s", version, path)
    return document


def _read_mapping(path: Path) -> JSONObject:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise OpenAPILoadError(f"Cannot read input file {path}: {exc}") from exc
    try:
        payload = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise OpenAPILoadError(f"{path} is not valid YAML or JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise OpenAPILoadError(
            f"{path} must contain a mapping at the top level, got {type(payload).__name__}"
        )
    return payload


def get_openapi_version(document: JSONObject) -> str:
    """Return the ``openapi`` version string, rejecting Swagger 2 input."""
    swagger = document.get("swagger")
    if swagger is not None and "openapi" not in document:
        raise OpenAPILoadError(
            f"Swagger {swagger} input is not supported; convert it to OpenAPI 3.0 or 3.1"
        )
    version = document.get("openapi")
    if not isinstance(version, str) or not version.strip():
        raise OpenAPILoadError("Input has no 'openapi' version string")
    return version.strip()


def ensure_supported_version(version: str) -> None:
    """Accept OpenAPI 3.x versions only."""
    major_text = version.split(".", maxsplit=1)[0]
    if not major_text.isdigit():
        raise OpenAPILoadError(f"Cannot read OpenAPI version {version!r}")
    if int(major_text) != _SUPPORTED_MAJOR_VERSION:
        raise OpenAPILoadError(f"OpenAPI {version} is not supported; expected 3.0 or 3.1")

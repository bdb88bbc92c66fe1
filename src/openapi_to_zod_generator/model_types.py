"""Internal datatypes for route generation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .json_types import JSONObject
from .schema_nodes import ParamsObject


@dataclass(frozen=True)
class OperationSpec:
    """Normalized operation metadata extracted from OpenAPI paths."""

    path: str
    method: str
    route_name: str
    operation: JSONObject
    path_item: JSONObject


@dataclass(frozen=True)
class RouteDefinition:
    """Validation expressions generated for one operation.

    ``request_body`` is the expression for the whole ``requestBody`` payload;
    ``params.body`` only holds named ``in: body`` parameters.
    """

    route_name: str
    method: str
    path: str
    summary: Optional[str]
    description: Optional[str]
    params: ParamsObject
    request_body: Optional[str] = None


@dataclass(frozen=True)
class GenerationResult:
    """Generation output metadata."""

    output_path: str
    route_names: tuple[str, ...]
    warnings: tuple[str, ...]

"""OpenAPI to Zod request validator generator package."""

from __future__ import annotations

from .cli import main
from .generator import GenerationRun, build_routes, run_generation
from .http_methods import is_http_method
from .params_object import generate_params_object
from .zod_builders import generate_zod_coerce, generate_zod_object_schema
from .zod_schema import generate_zod_schema

__all__ = [
    "GenerationRun",
    "build_routes",
    "generate_params_object",
    "generate_zod_coerce",
    "generate_zod_object_schema",
    "generate_zod_schema",
    "is_http_method",
    "main",
    "run_generation",
]

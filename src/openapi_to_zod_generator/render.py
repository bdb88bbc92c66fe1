"""TypeScript source rendering for generated route validators."""

from __future__ import annotations

from collections.abc import Iterable
import textwrap

from .model_types import RouteDefinition
from .zod_builders import generate_zod_object_schema

_BANNER = "// Generated by openapi-to-zod-generator. Do not edit by hand."
_ZOD_IMPORT = "import { z } from 'zod'"


def render_routes_module(routes: Iterable[RouteDefinition]) -> str:
    """Render all routes as one TypeScript module.

    Each route becomes ``export const <route>Request = {...}`` holding one
    ``z.object`` per non-empty parameter bucket.

    Args:
        routes (Iterable[RouteDefinition]): Routes in output order.

    Returns:
        str: TypeScript source text ending with a newline.
    """
    blocks: list[str] = [f"{_BANNER}\n{_ZOD_IMPORT}"]
    for route in routes:
        blocks.append(render_route(route))
    return "\n\n".join(blocks) + "\n"


def render_route(route: RouteDefinition) -> str:
    """Render one route's JSDoc block and request validator constant.

    Parameter buckets are wrapped in ``z.object``; a request body payload is
    emitted as its own schema under ``body``.
    """
    entries: list[str] = []
    for bucket_name, expressions in route.params.buckets():
        if bucket_name == "body" and route.request_body is not None:
            entries.append(f"  body: {route.request_body},")
        elif expressions:
            entries.append(f"  {bucket_name}: {generate_zod_object_schema(expressions)},")
    if entries:
        body = "{\n" + "\n".join(entries) + "\n}"
    else:
        body = "{}"
    return f"{_route_comment(route)}\nexport const {route.route_name}Request = {body}"


def _route_comment(route: RouteDefinition) -> str:
    lines = [f"{route.method.upper()} {route.path}"]
    for text in (route.summary, route.description):
        if text and text not in lines:
            lines.append("")
            lines.extend(_wrap_text(text))
    commented = "\n".join(f" * {line}".rstrip() for line in lines)
    return f"/**\n{commented}\n */"


def _wrap_text(text: str) -> list[str]:
    safe = text.replace("*/", "*\\/")
    wrapped: list[str] = []
    for paragraph in safe.splitlines():
        wrapped.extend(textwrap.wrap(paragraph, width=84) or [""])
    return wrapped

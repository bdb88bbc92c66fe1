"""Recognized HTTP method tokens for OpenAPI path items."""

from __future__ import annotations

from typing import Literal, TypeGuard, get_args

HttpMethod = Literal["get", "post", "put", "delete", "patch", "options", "head"]

HTTP_METHODS: tuple[str, ...] = get_args(HttpMethod)
_HTTP_METHOD_SET = frozenset(HTTP_METHODS)


def is_http_method(method: str) -> TypeGuard[HttpMethod]:
    """Return whether ``method`` is one of the recognized lower-case HTTP methods.

    Matching is case-sensitive: ``"GET"`` and ``"trace"`` are both rejected.
    """
    return method in _HTTP_METHOD_SET

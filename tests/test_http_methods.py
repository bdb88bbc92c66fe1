"""Unit tests for the HTTP method classifier."""

from __future__ import annotations

import pytest

from openapi_to_zod_generator.http_methods import HTTP_METHODS, is_http_method


@pytest.mark.parametrize("method", ["get", "post", "put", "delete", "patch", "options", "head"])
def test_recognized_methods(method: str) -> None:
    """Every lower-case method in the closed set is accepted."""
    assert is_http_method(method)


@pytest.mark.parametrize("method", ["GET", "Post", "trace", "connect", "parameters", "", " get"])
def test_other_tokens_are_rejected(method: str) -> None:
    """Matching is exact and case-sensitive."""
    assert not is_http_method(method)


def test_method_tuple_matches_classifier() -> None:
    """The exported tuple lists exactly the seven recognized methods."""
    assert HTTP_METHODS == ("get", "post", "put", "delete", "patch", "options", "head")

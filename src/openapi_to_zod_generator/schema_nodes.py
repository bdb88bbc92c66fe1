"""Typed schema nodes, parameter descriptors and grouped parameter output."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal, Optional, Union

from .json_types import JSONPrimitive


class SchemaNodeError(RuntimeError):
    """Raised when a schema node is malformed or of an unknown kind."""

    def __init__(self, message: str, *, path: str) -> None:
        super().__init__(f"{message} (at {path})")
        self.path = path


def pointer_segment(name: str) -> str:
    """Escape one JSON Pointer reference token (``~`` as ``~0``, ``/`` as ``~1``)."""
    return name.replace("~", "~0").replace("/", "~1")


type PrimitiveType = Literal["string", "number", "integer", "boolean"]
type UnionKeyword = Literal["anyOf", "oneOf"]


@dataclass(frozen=True, kw_only=True)
class _BaseNode:
    nullable: bool = False


@dataclass(frozen=True, kw_only=True)
class StringNode(_BaseNode):
    """A ``type: string`` schema with its string constraints."""

    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    format: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class NumberNode(_BaseNode):
    """A ``type: number`` schema with its numeric constraints."""

    minimum: Optional[float] = None
    maximum: Optional[float] = None
    exclusive_minimum: Optional[float] = None
    exclusive_maximum: Optional[float] = None
    multiple_of: Optional[float] = None


@dataclass(frozen=True, kw_only=True)
class IntegerNode(NumberNode):
    """A ``type: integer`` schema."""


@dataclass(frozen=True, kw_only=True)
class BooleanNode(_BaseNode):
    """A ``type: boolean`` schema."""


@dataclass(frozen=True, kw_only=True)
class NullNode(_BaseNode):
    """A ``type: null`` schema."""


@dataclass(frozen=True, kw_only=True)
class AnyNode(_BaseNode):
    """A schema without type information, accepting any value."""


@dataclass(frozen=True, kw_only=True)
class EnumNode(_BaseNode):
    """A closed set of literal values in declaration order.

    ``base_type`` keeps the declared primitive ``type`` when there was exactly one.
    """

    values: tuple[JSONPrimitive, ...]
    base_type: Optional[PrimitiveType] = None


@dataclass(frozen=True, kw_only=True)
class ArrayNode(_BaseNode):
    """An array whose elements all satisfy ``items``."""

    items: SchemaNode
    min_items: Optional[int] = None
    max_items: Optional[int] = None


@dataclass(frozen=True, kw_only=True)
class ObjectNode(_BaseNode):
    """An object with named properties.

    ``additional_properties`` is ``None`` when the schema does not mention the
    keyword, a bool for ``true``/``false``, or a node for a value schema.
    """

    properties: Mapping[str, SchemaNode] = field(default_factory=dict)
    required: frozenset[str] = frozenset()
    additional_properties: Union[bool, SchemaNode, None] = None


@dataclass(frozen=True, kw_only=True)
class UnionNode(_BaseNode):
    """A value matching at least one option.

    ``keyword`` names the composite keyword the options came from, or is ``None``
    when they were spelled as a ``type`` list and share the union's location.
    """

    options: tuple[SchemaNode, ...]
    discriminator: Optional[str] = None
    keyword: Optional[UnionKeyword] = "anyOf"


@dataclass(frozen=True, kw_only=True)
class IntersectionNode(_BaseNode):
    """A value matching every part (``allOf``)."""

    parts: tuple[SchemaNode, ...]


type SchemaNode = Union[
    StringNode,
    NumberNode,
    IntegerNode,
    BooleanNode,
    NullNode,
    AnyNode,
    EnumNode,
    ArrayNode,
    ObjectNode,
    UnionNode,
    IntersectionNode,
]


@dataclass(frozen=True)
class ParameterDescriptor:
    """One request parameter: its name, ``in`` location, required flag and schema."""

    name: str
    location: str
    required: bool
    schema: SchemaNode


@dataclass
class ParamsObject:
    """Validation expressions grouped by parameter location.

    Every bucket is present even when no parameter targets it.
    """

    params: dict[str, str] = field(default_factory=dict)
    query: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    body: dict[str, str] = field(default_factory=dict)

    def buckets(self) -> tuple[tuple[str, dict[str, str]], ...]:
        """Return ``(bucket_name, mapping)`` pairs in a fixed order."""
        return (
            ("params", self.params),
            ("query", self.query),
            ("headers", self.headers),
            ("body", self.body),
        )

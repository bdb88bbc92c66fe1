"""Builders for Zod expression source text.

Every function here is a pure string transformation. The recursive schema
transformer composes these calls so that Zod's surface syntax lives in one
module.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import json
import re

from .json_types import JSONPrimitive

_JS_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_EMPTY_REGEX_LITERAL = "/(?:)/"
_REGEX_LINE_ESCAPES = {"\n": "\\n", "\r": "\\r", "\u2028": "\\u2028", "\u2029": "\\u2029"}

ZOD_ANY = "z.any()"
ZOD_BOOLEAN = "z.boolean()"
ZOD_NULL = "z.null()"
ZOD_NUMBER = "z.number()"
ZOD_STRING = "z.string()"


def js_literal(value: JSONPrimitive) -> str:
    """Render a JSON primitive as a JavaScript literal."""
    return json.dumps(value, ensure_ascii=True)


def js_property_key(name: str) -> str:
    """Render an object key, quoting it when it is not a bare identifier."""
    if _JS_IDENTIFIER_RE.match(name):
        return name
    return js_literal(name)


def js_regex_literal(pattern: str) -> str:
    """Render a regular expression source as a ``/.../`` literal.

    Backslash escapes are copied as pairs, so only a ``/`` that is not already
    escaped gets a backslash. Line terminators become escape sequences and an
    empty source renders as ``/(?:)/``.
    """
    if not pattern:
        return _EMPTY_REGEX_LITERAL

    parts: list[str] = []
    escaping = False
    for char in pattern:
        if escaping:
            escaping = False
            if char in _REGEX_LINE_ESCAPES:
                parts[-1] = _REGEX_LINE_ESCAPES[char]
            else:
                parts.append(char)
        elif char == "\\":
            escaping = True
            parts.append(char)
        elif char == "/":
            parts.append("\\/")
        else:
            parts.append(_REGEX_LINE_ESCAPES.get(char, char))
    if escaping:
        # A dangling backslash would escape the closing delimiter.
        parts.append("\\")
    return f"/{''.join(parts)}/"


def generate_zod_object_schema(properties: Mapping[str, str]) -> str:
    """Build a ``z.object`` expression from already generated property expressions.

    Args:
        properties (Mapping[str, str]): Property name to Zod expression, in
            the order the fields should be emitted.

    Returns:
        str: ``z.object({name:z.string(),age:z.number()})``-style source.
    """
    entries = ",".join(f"{js_property_key(key)}:{value}" for key, value in properties.items())
    return f"z.object({{{entries}}})"


def generate_zod_coerce(source: str, target: str) -> str:
    """Wrap ``target`` so that the raw value is parsed as ``source`` first.

    Args:
        source (str): Expression for the transport representation, e.g. ``z.string()``.
        target (str): Expression the coerced value must satisfy, e.g. ``z.number()``.

    Returns:
        str: ``z.string().pipe(z.coerce.number())``-style source.
    """
    if target.startswith("z."):
        return generate_zod_pipe(source, f"z.coerce.{target.removeprefix('z.')}")
    return generate_zod_pipe(source, target)


def generate_zod_pipe(source: str, target: str) -> str:
    """Build ``source.pipe(target)``: the output of ``source`` is validated by ``target``."""
    return f"{source}.pipe({target})"


def generate_zod_array(items: str) -> str:
    """Build ``z.array(items)``."""
    return f"z.array({items})"


def generate_zod_record(values: str) -> str:
    """Build a string-keyed record expression."""
    return f"z.record({ZOD_STRING},{values})"


def generate_zod_enum(values: Iterable[JSONPrimitive]) -> str:
    """Build a closed-set validator for literal values.

    A single value becomes ``z.literal``; an all-string list becomes
    ``z.enum``; anything else is a union of literals.
    """
    literals = list(values)
    if len(literals) == 1:
        return generate_zod_literal(literals[0])
    if literals and all(isinstance(value, str) for value in literals):
        return f"z.enum([{','.join(js_literal(value) for value in literals)}])"
    return generate_zod_union(generate_zod_literal(value) for value in literals)


def generate_zod_literal(value: JSONPrimitive) -> str:
    """Build ``z.literal(value)``."""
    return f"z.literal({js_literal(value)})"


def generate_zod_union(options: Iterable[str]) -> str:
    """Build ``z.union([...])``, collapsing a single option."""
    members = list(options)
    if len(members) == 1:
        return members[0]
    return f"z.union([{','.join(members)}])"


def generate_zod_discriminated_union(discriminator: str, options: Iterable[str]) -> str:
    """Build ``z.discriminatedUnion(key,[...])``, collapsing a single option."""
    members = list(options)
    if len(members) == 1:
        return members[0]
    return f"z.discriminatedUnion({js_literal(discriminator)},[{','.join(members)}])"


def generate_zod_intersection(parts: Iterable[str]) -> str:
    """Fold parts into nested ``z.intersection`` calls, collapsing a single part."""
    members = list(parts)
    if not members:
        raise ValueError("An intersection needs at least one part")
    expression = members[0]
    for member in members[1:]:
        expression = f"z.intersection({expression},{member})"
    return expression


def chain(expression: str, method: str, *args: str) -> str:
    """Append one ``.method(args)`` modifier call."""
    return f"{expression}.{method}({','.join(args)})"


def with_string_format(expression: str, string_format: str) -> str:
    """Append the modifier matching an OpenAPI string ``format``, if Zod has one."""
    modifier = _STRING_FORMAT_MODIFIERS.get(string_format)
    if modifier is None:
        return expression
    return f"{expression}{modifier}"


def with_nullable(expression: str) -> str:
    """Append ``.nullable()``."""
    return f"{expression}.nullable()"


def with_optional(expression: str) -> str:
    """Append ``.optional()``."""
    return f"{expression}.optional()"


_STRING_FORMAT_MODIFIERS: dict[str, str] = {
    "email": ".email()",
    "uuid": ".uuid()",
    "uri": ".url()",
    "url": ".url()",
    "date-time": ".datetime()",
    "date": ".date()",
    "time": ".time()",
    "ipv4": '.ip({version:"v4"})',
    "ipv6": '.ip({version:"v6"})',
}

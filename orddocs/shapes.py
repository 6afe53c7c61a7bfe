"""Schema-shape parsing for zod construction expressions.

Turns the text of a schema expression such as
``z.record(z.string(), z.array(z.number())).nullable()`` into a
TypeDescriptor, and renders descriptors back into TypeScript-like display
strings. This is deliberately text matching, not a zod interpreter: the
parser never raises, and anything it does not recognize becomes an opaque
display string.
"""

from __future__ import annotations

import re
from typing import Iterator

from .models import (
    Array,
    EnumLiteral,
    NamedReference,
    Nullable,
    Record,
    Scalar,
    Tuple,
    TypeDescriptor,
)

DEFAULT_NAMESPACE = "z"
SCHEMA_SUFFIX = "Schema"
SCALAR_KINDS = frozenset({"string", "number", "boolean"})

_NAMED_REF_RE = re.compile(r"^(?:[A-Za-z_$][\w$]*\.)*([A-Za-z_$][\w$]*)Schema$")
_CALL_RE = re.compile(r"^([A-Za-z_$][\w$]*)\s*\(", re.DOTALL)
_IDENT_RE = re.compile(r"^[A-Za-z_$][\w$]*$")

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_QUOTES = "'\"`"
# A "/" after one of these (or at the start) opens a regex literal, not a division
_REGEX_PRECEDERS = frozenset("(,=:[!&|?{};")


def _skip_string(text: str, i: int) -> int:
    """Index just past the string literal opening at ``i``."""
    quote = text[i]
    i += 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == quote:
            return i + 1
        i += 1
    return len(text)


def _skip_regex(text: str, i: int) -> int:
    """Index just past the regex literal opening at ``i``, or -1 if unclosed."""
    in_class = False
    i += 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "\n":
            return -1
        if in_class:
            if ch == "]":
                in_class = False
        elif ch == "[":
            in_class = True
        elif ch == "/":
            i += 1
            while i < len(text) and text[i].isalpha():
                i += 1
            return i
        i += 1
    return -1


def _structural(text: str, start: int = 0) -> Iterator[tuple[int, str]]:
    """Yield ``(index, char)`` for characters outside string and regex literals."""
    previous = ""
    i = start
    while i < len(text):
        ch = text[i]
        if ch in _QUOTES:
            i = _skip_string(text, i)
            previous = ch
            continue
        if ch == "/" and (not previous or previous in _REGEX_PRECEDERS):
            end = _skip_regex(text, i)
            if end != -1:
                i = end
                previous = "/"
                continue
        yield i, ch
        if not ch.isspace():
            previous = ch
        i += 1


def split_top_level(text: str, sep: str = ",") -> list[str]:
    """Split text on ``sep`` where it is outside brackets and literals.

    Empty pieces (a trailing comma, say) are dropped.
    """
    parts = []
    depth = 0
    start = 0
    for i, ch in _structural(text):
        if ch in _OPENERS:
            depth += 1
        elif ch in ")]}":
            depth -= 1
        elif ch == sep and depth == 0:
            parts.append(text[start:i])
            start = i + 1
    parts.append(text[start:])
    return [p.strip() for p in parts if p.strip()]


def _matching_close(text: str, open_index: int) -> int:
    """Index of the bracket closing the one at ``open_index``, or -1."""
    opener = text[open_index]
    closer = _OPENERS[opener]
    depth = 0
    for i, ch in _structural(text, open_index):
        if ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0:
                return i
    return -1


def _unwrap(text: str, opener: str) -> str | None:
    """Contents of ``text`` if it is exactly one bracketed group, else None."""
    text = text.strip()
    if not text.startswith(opener):
        return None
    if _matching_close(text, 0) != len(text) - 1:
        return None
    return text[1:-1].strip()


def _split_call(segment: str) -> tuple[str, str | None] | None:
    """Split ``name(args)`` into (name, args); a bare identifier has args None."""
    if _IDENT_RE.match(segment):
        return segment, None
    match = _CALL_RE.match(segment)
    if not match:
        return None
    open_index = match.end() - 1
    if _matching_close(segment, open_index) != len(segment) - 1:
        return None
    return match.group(1), segment[open_index + 1 : -1].strip()


def _is_modifier(segment: str, name: str) -> bool:
    return re.sub(r"\s+", "", segment) == f"{name}()"


def _chain_start(segments: list[str], namespace: str) -> int:
    """Index of the first segment after the constructor call."""
    return 2 if segments[0] == namespace and len(segments) > 1 else 1


def _constructor(
    segments: list[str], namespace: str
) -> tuple[str, str | None] | None:
    head = segments[1] if segments[0] == namespace and len(segments) > 1 else segments[0]
    return _split_call(head)


def _fallback(text: str, namespace: str) -> Scalar:
    display = re.sub(r"\s+", " ", text).strip()
    prefix = f"{namespace}."
    if display.startswith(prefix):
        display = display[len(prefix) :]
    return Scalar(display or "unknown")


def extract_enum_values(text: str, namespace: str = DEFAULT_NAMESPACE) -> tuple[str, ...]:
    """Return the sorted literals of the first ``enum([...])`` call in text.

    Single, double and backtick quotes are all accepted. Blank entries are
    dropped. Returns an empty tuple when no bracketed literal list is found.
    """
    match = re.search(rf"(?:\b{re.escape(namespace)}\s*\.\s*)?\benum\s*\(\s*\[", text)
    if not match:
        return ()
    open_index = match.end() - 1
    close_index = _matching_close(text, open_index)
    if close_index == -1:
        return ()
    values = []
    for item in split_top_level(text[open_index + 1 : close_index]):
        value = item.strip().strip(_QUOTES).strip()
        if value:
            values.append(value)
    return tuple(sorted(values))


def parse_schema(text: str, namespace: str = DEFAULT_NAMESPACE) -> TypeDescriptor:
    """Parse a schema construction expression into a TypeDescriptor.

    Rules are tried in order and the first match wins:

    1. ``FooSchema`` is a named reference to ``Foo``.
    2. A top-level ``.nullable()`` (or ``z.nullable(X)``) wraps the rest.
       ``X.array()`` wraps the same way; whichever comes last is outermost.
    3. ``z.string()``, ``z.number()`` and ``z.boolean()``, ignoring any
       refinements chained after them.
    4. ``z.array(X)``.
    5. ``z.record(K, V)``; ``z.record(V)`` has string keys.
    6. ``z.tuple([A, B])``.
    7. ``z.enum(['a', 'b'])``.
    8. Anything else is returned as display text without the namespace.

    The namespace prefix is optional, so ``array(string)`` is understood as
    well as ``z.array(z.string())``.
    """
    text = text.strip()
    if not text:
        return Scalar("unknown")

    match = _NAMED_REF_RE.match(text)
    if match and match.group(1):
        return NamedReference(match.group(1))

    segments = split_top_level(text, ".")
    if not segments:
        return _fallback(text, namespace)
    start = _chain_start(segments, namespace)

    # The last wrapping modifier is the outermost; refinements after it are ignored
    wrappers = [
        i
        for i in range(start, len(segments))
        if _is_modifier(segments[i], "nullable") or _is_modifier(segments[i], "array")
    ]
    if wrappers:
        last = wrappers[-1]
        inner = parse_schema(".".join(segments[:last]), namespace)
        if _is_modifier(segments[last], "nullable"):
            return Nullable(inner)
        return Array(inner)

    call = _constructor(segments, namespace)
    if call is None:
        return _fallback(text, namespace)
    name, args = call

    if name == "nullable" and args:
        return Nullable(parse_schema(args, namespace))

    if name in SCALAR_KINDS and not args:
        return Scalar(name)

    if name == "array" and args:
        return Array(parse_schema(args, namespace))

    if name == "record" and args:
        parts = split_top_level(args)
        if len(parts) == 2:
            return Record(parse_schema(parts[0], namespace), parse_schema(parts[1], namespace))
        if len(parts) == 1:
            return Record(Scalar("string"), parse_schema(parts[0], namespace))

    if name == "tuple" and args:
        inner = _unwrap(args, "[")
        if inner is not None:
            return Tuple(tuple(parse_schema(p, namespace) for p in split_top_level(inner)))

    if name == "enum" and args and _unwrap(args, "[") is not None:
        return EnumLiteral(extract_enum_values(f"enum({args})", namespace))

    return _fallback(text, namespace)


def render_type(descriptor: TypeDescriptor) -> str:
    """Render a descriptor as a TypeScript-like display string."""
    if isinstance(descriptor, Scalar):
        return descriptor.kind
    if isinstance(descriptor, NamedReference):
        return descriptor.name
    if isinstance(descriptor, Nullable):
        return f"{render_type(descriptor.inner)} | null"
    if isinstance(descriptor, Array):
        element = render_type(descriptor.element)
        if isinstance(descriptor.element, Nullable) or (
            isinstance(descriptor.element, EnumLiteral) and len(descriptor.element.members) > 1
        ):
            element = f"({element})"
        return f"{element}[]"
    if isinstance(descriptor, Tuple):
        return f"[{', '.join(render_type(e) for e in descriptor.elements)}]"
    if isinstance(descriptor, Record):
        return f"Record<{render_type(descriptor.key)}, {render_type(descriptor.value)}>"
    if isinstance(descriptor, EnumLiteral):
        return " | ".join(f"'{m}'" for m in descriptor.members) or "never"
    raise TypeError(f"Unknown type descriptor: {descriptor!r}")

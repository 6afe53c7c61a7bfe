"""Endpoint path table loading and resolution.

The client keeps its URL paths in a static object literal:

    const api = {
      getBlockCount: '/blockcount',
      getBlockHashByHeight: (height: number) => `/blockhash/${height}`,
    } as const;
    export default api;

Entries are either fixed strings or small path-building functions. For a
function, the template literal it returns is documented with ``{param}``
placeholders instead of ``${param}`` substitutions.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Union

from tree_sitter import Node

from .errors import ExtractionError
from .syntax import (
    VariableDecl,
    is_function,
    iter_declarations,
    iter_descendants,
    node_text,
    object_members,
    parameters,
    parse_source,
    string_value,
    unwrap_expression,
)

log = logging.getLogger(__name__)

RECURSIVE_PREFIX = "/r/"

_PLACEHOLDER_RE = re.compile(r"\$\{\s*([A-Za-z_$][\w$]*)\s*\}")


@dataclass(frozen=True)
class PathLiteral:
    path: str


@dataclass(frozen=True)
class PathBuilder:
    params: tuple[str, ...]
    template: str  # Raw template body, "${...}" substitutions intact


PathEntry = Union[PathLiteral, PathBuilder]


@dataclass(frozen=True)
class PathTable:
    """Flattened path table; nested objects use dotted keys."""

    name: str | None = None  # Variable holding the table, e.g. "api"
    entries: dict[str, PathEntry] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.entries)


def _first_literal(function: Node) -> Node | None:
    body = function.child_by_field_name("body")
    if body is None:
        return None
    for node in iter_descendants(body):
        if node.type in ("string", "template_string"):
            return node
    return None


def _entry(key: str, value: Node) -> PathEntry | None:
    value = unwrap_expression(value)
    if value.type == "string":
        return PathLiteral(string_value(value))
    if value.type == "template_string":
        if any(c.type == "template_substitution" for c in value.named_children):
            return PathBuilder((), string_value(value))
        return PathLiteral(string_value(value))
    if is_function(value):
        literal = _first_literal(value)
        if literal is None:
            log.debug(f"Path builder {key} returns no string literal")
            return None
        names = tuple(p.name for p in parameters(value))
        return PathBuilder(names, string_value(literal))
    log.debug(f"Path entry {key} is not a string or function: {node_text(value)!r}")
    return None


def _flatten(obj: Node, prefix: str, entries: dict[str, PathEntry]) -> None:
    for key, value in object_members(obj):
        full_key = f"{prefix}{key}"
        inner = unwrap_expression(value)
        if inner.type == "object":
            _flatten(inner, f"{full_key}.", entries)
            continue
        try:
            entry = _entry(full_key, value)
        except ExtractionError as e:
            log.warning(f"Skipping path entry {full_key}: {e}")
            continue
        if entry is not None:
            entries[full_key] = entry


def parse_path_table(source: str, name: str | None = None) -> PathTable:
    """Build a PathTable from the source of the file declaring it.

    The table is the object literal bound to ``name`` if given, else the
    ``export default`` target, else the first top-level object constant.
    """
    tree = parse_source(source)
    objects: dict[str, Node] = {}
    default_export: str | None = None
    anonymous_default: Node | None = None

    for statement in tree.root_node.named_children:
        if statement.type != "export_statement":
            continue
        value = statement.child_by_field_name("value")
        if value is None:
            continue
        value = unwrap_expression(value)
        if value.type == "identifier":
            default_export = node_text(value)
        elif value.type == "object":
            anonymous_default = value

    for decl in iter_declarations(tree.root_node):
        if isinstance(decl, VariableDecl) and decl.value is not None:
            value = unwrap_expression(decl.value)
            if value.type == "object":
                objects.setdefault(decl.name, value)

    entries: dict[str, PathEntry] = {}
    if name is None and default_export is None and anonymous_default is not None:
        _flatten(anonymous_default, "", entries)
        return PathTable(None, entries)

    chosen = name or default_export or next(iter(objects), None)
    if chosen is None or chosen not in objects:
        log.warning(f"No path table object named {chosen!r} found")
        return PathTable(chosen, entries)

    _flatten(objects[chosen], "", entries)
    return PathTable(chosen, entries)


def load_path_table(path: Path, name: str | None = None) -> PathTable:
    """Load the path table file; an unreadable file gives an empty table."""
    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.warning(f"Could not read path table {path}: {e}")
        return PathTable(name)
    return parse_path_table(source, name)


def render_endpoint(entry: PathEntry, parameter_names: Iterable[str] = ()) -> str:
    """Turn a table entry into a documented endpoint template.

    ``${name}`` becomes ``{name}`` for every parameter declared either by the
    path builder or by the calling method; other substitutions are left as-is.
    """
    if isinstance(entry, PathLiteral):
        return entry.path
    names = set(entry.params) | set(parameter_names)

    def replace(match: re.Match) -> str:
        if match.group(1) in names:
            return "{" + match.group(1) + "}"
        return match.group(0)

    return _PLACEHOLDER_RE.sub(replace, entry.template)


def resolve_endpoint(
    table: PathTable,
    method_name: str,
    parameter_names: Iterable[str] = (),
    body_text: str = "",
) -> str:
    """Endpoint template for a client method, or "" when none is known.

    The table is keyed by method name. When a method has no entry of its own,
    its body is searched for a ``<table>.<key>`` reference instead.
    """
    entry = table.entries.get(method_name)
    if entry is None and table.name and body_text:
        reference = re.compile(
            rf"\b{re.escape(table.name)}\s*\.\s*([A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*)"
        )
        for match in reference.finditer(body_text):
            entry = table.entries.get(match.group(1))
            if entry is not None:
                break
    if entry is None:
        log.debug(f"No path table entry for {method_name}")
        return ""
    return render_endpoint(entry, parameter_names)


def is_recursive(endpoint: str) -> bool:
    return endpoint.startswith(RECURSIVE_PREFIX)

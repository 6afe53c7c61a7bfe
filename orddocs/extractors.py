"""Documentation extractors for zod schemas and client methods."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Mapping

from tree_sitter import Node

from .comments import parse_doc_comment
from .endpoints import PathTable, is_recursive, resolve_endpoint
from .errors import ExtractionError
from .models import DocEntry, MethodDoc, Parameter, Property, TypeDoc
from .shapes import DEFAULT_NAMESPACE, SCHEMA_SUFFIX, extract_enum_values, parse_schema, render_type
from .syntax import (
    MethodDecl,
    TypeAliasDecl,
    VariableDecl,
    annotation_text,
    call_arguments,
    iter_declarations,
    iter_descendants,
    leading_comment,
    modifiers,
    node_text,
    object_members,
    parameters,
    parse_source,
    unwrap_expression,
)

log = logging.getLogger(__name__)

DEFAULT_POST_HELPER = "fetchPost"
DEFAULT_METHOD_DENYLIST = frozenset({"fetch", "fetchPost"})

_HIDDEN_MODIFIERS = frozenset({"private", "protected", "get", "set"})


def load_type_descriptions(path: Path) -> dict[str, DocEntry]:
    """Read the central type descriptions file.

    Returns the parsed JSDoc of every top-level ``type X = ...`` alias, keyed
    by alias name. A missing or unreadable file is not fatal: a warning is
    logged and an empty mapping returned.
    """
    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.warning(f"Could not read type descriptions file {path}: {e}")
        return {}

    descriptions: dict[str, DocEntry] = {}
    for decl in iter_declarations(parse_source(source).root_node):
        if isinstance(decl, TypeAliasDecl):
            descriptions[decl.name] = parse_doc_comment(leading_comment(decl.statement))
    return descriptions


def _outermost_marker(value: Node, namespace: str) -> tuple[str, Node] | None:
    """Find the first ``z.object(...)`` or ``z.enum(...)`` call in pre-order."""
    markers = {f"{namespace}.object": "object", f"{namespace}.enum": "enum"}
    for node in iter_descendants(value):
        if node.type != "call_expression":
            continue
        function = re.sub(r"\s+", "", node_text(node.child_by_field_name("function")))
        if function in markers:
            return markers[function], node
    return None


def _object_properties(call: Node, entry: DocEntry, namespace: str) -> list[Property]:
    literal = next(
        (a for a in map(unwrap_expression, call_arguments(call)) if a.type == "object"),
        None,
    )
    if literal is None:
        raise ExtractionError(f"object schema without an object literal: {node_text(call)[:60]!r}")

    properties = []
    for name, value in object_members(literal):
        if value.type == "method_definition":
            continue
        descriptor = parse_schema(node_text(value), namespace)
        properties.append(
            Property(
                name=name,
                type=render_type(descriptor),
                description=entry.params.get(name, ""),
            )
        )
    properties.sort(key=lambda p: p.name)
    return properties


def _type_doc(
    decl: VariableDecl,
    source_file: str,
    descriptions: Mapping[str, DocEntry],
    namespace: str,
) -> TypeDoc | None:
    if decl.value is None:
        return None
    marker = _outermost_marker(decl.value, namespace)
    if marker is None:
        return None

    kind, call = marker
    name = decl.name[: -len(SCHEMA_SUFFIX)]
    entry = descriptions.get(name, DocEntry())

    if kind == "enum":
        return TypeDoc(
            name=name,
            kind="enum",
            description=entry.description,
            source_file=source_file,
            values=extract_enum_values(node_text(call), namespace),
        )
    return TypeDoc(
        name=name,
        kind="object",
        description=entry.description,
        source_file=source_file,
        properties=tuple(_object_properties(call, entry, namespace)),
    )


def extract_types(
    source: str,
    source_file: str,
    descriptions: Mapping[str, DocEntry] | None = None,
    namespace: str = DEFAULT_NAMESPACE,
) -> list[TypeDoc]:
    """Extract enum and object types from the zod schemas in one file.

    Every top-level variable named ``<Type>Schema`` is considered. Its kind is
    decided by the outermost ``z.enum``/``z.object`` call in the initializer;
    variables with neither are not types and are skipped. Descriptions come
    from ``descriptions`` (see ``load_type_descriptions``), keyed by type name.
    """
    descriptions = descriptions or {}
    types: list[TypeDoc] = []

    for decl in iter_declarations(parse_source(source).root_node):
        if not isinstance(decl, VariableDecl):
            continue
        if not decl.name.endswith(SCHEMA_SUFFIX) or decl.name == SCHEMA_SUFFIX:
            continue
        try:
            type_doc = _type_doc(decl, source_file, descriptions, namespace)
        except ExtractionError as e:
            log.warning(f"Skipping {decl.name} in {source_file}: {e}")
            continue
        if type_doc is not None:
            types.append(type_doc)

    return types


def is_public_method(decl: MethodDecl, denylist: Iterable[str] = DEFAULT_METHOD_DENYLIST) -> bool:
    """Public API methods: not underscored, private, accessors or plumbing."""
    if decl.name.startswith(("_", "#")) or decl.name == "constructor":
        return False
    if decl.name in set(denylist):
        return False
    return not (modifiers(decl.node) & _HIDDEN_MODIFIERS)


def calls_helper(body_text: str, helper: str) -> bool:
    """Textual probe for ``this.<helper>`` in a method body."""
    return re.search(rf"\bthis\s*\.\s*{re.escape(helper)}\b", body_text) is not None


def _method_doc(
    decl: MethodDecl,
    source_file: str,
    path_table: PathTable,
    post_helper: str,
) -> MethodDoc:
    node = decl.node
    if node.has_error:
        log.debug(f"{decl.name} in {source_file} contains syntax errors")

    doc = parse_doc_comment(leading_comment(node))
    params = parameters(node)
    body_text = node_text(node.child_by_field_name("body"))

    endpoint = resolve_endpoint(
        path_table,
        decl.name,
        [p.name for p in params],
        body_text,
    )

    return_type = annotation_text(node.child_by_field_name("return_type"))
    if return_type is None:
        return_type = "Promise<void>" if "async" in modifiers(node) else "void"

    return MethodDoc(
        name=decl.name,
        description=doc.description,
        parameters=tuple(
            Parameter(
                name=p.name,
                type=p.type or "any",
                description=doc.params.get(p.name, ""),
            )
            for p in params
        ),
        endpoint=endpoint,
        http_method="POST" if calls_helper(body_text, post_helper) else "GET",
        return_type=return_type,
        recursive=is_recursive(endpoint),
        source_file=source_file,
    )


def extract_methods(
    source: str,
    source_file: str,
    path_table: PathTable | None = None,
    post_helper: str = DEFAULT_POST_HELPER,
    denylist: Iterable[str] = DEFAULT_METHOD_DENYLIST,
) -> list[MethodDoc]:
    """Extract the public methods of every class in one file."""
    path_table = path_table or PathTable()
    denylist = frozenset(denylist)
    methods: list[MethodDoc] = []

    for decl in iter_declarations(parse_source(source).root_node):
        if not isinstance(decl, MethodDecl) or not is_public_method(decl, denylist):
            continue
        try:
            methods.append(_method_doc(decl, source_file, path_table, post_helper))
        except ExtractionError as e:
            log.warning(f"Skipping method {decl.name} in {source_file}: {e}")

    return methods

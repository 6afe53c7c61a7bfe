"""TypeScript syntax access via tree-sitter.

Source files are parsed once and their declarations classified into a small
closed set of variants (``VariableDecl``, ``TypeAliasDecl``, ``MethodDecl``,
``Other``) so the collectors only ever dispatch on those.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Iterator, Union

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from .errors import ExtractionError

TS_LANGUAGE = Language(tree_sitter_typescript.language_typescript())

_CLASS_TYPES = frozenset({"class_declaration", "abstract_class_declaration"})
_VARIABLE_TYPES = frozenset({"lexical_declaration", "variable_declaration"})
_WRAPPER_TYPES = frozenset({"as_expression", "satisfies_expression", "parenthesized_expression"})
_FUNCTION_TYPES = frozenset({"arrow_function", "function_expression", "function", "method_definition"})


@functools.lru_cache(maxsize=1)
def _parser() -> Parser:
    return Parser(TS_LANGUAGE)


def parse_source(source: str | bytes) -> Tree:
    """Parse TypeScript source text."""
    if isinstance(source, str):
        source = source.encode("utf-8")
    return _parser().parse(source)


def node_text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


# Declarations


@dataclass(frozen=True)
class VariableDecl:
    """A top-level ``const``/``let``/``var`` declarator."""

    name: str
    value: Node | None
    statement: Node  # Top-level statement, where a leading comment attaches
    exported: bool


@dataclass(frozen=True)
class TypeAliasDecl:
    """A top-level ``type X = ...`` declaration."""

    name: str
    value: Node | None
    statement: Node
    exported: bool


@dataclass(frozen=True)
class MethodDecl:
    """A method defined in a class body."""

    name: str
    class_name: str | None
    node: Node


@dataclass(frozen=True)
class Other:
    node: Node


Declaration = Union[VariableDecl, TypeAliasDecl, MethodDecl, Other]


def iter_declarations(root: Node) -> Iterator[Declaration]:
    """Classify every top-level declaration and class member of a program."""
    for statement in root.named_children:
        if statement.type == "comment":
            continue
        exported = statement.type == "export_statement"
        node = statement
        if exported:
            node = statement.child_by_field_name("declaration")
            if node is None:
                yield Other(statement)
                continue
        yield from _classify(node, statement, exported)


def _classify(node: Node, statement: Node, exported: bool) -> Iterator[Declaration]:
    if node.type in _VARIABLE_TYPES:
        for declarator in node.named_children:
            name = declarator.child_by_field_name("name")
            if declarator.type != "variable_declarator" or name is None or name.type != "identifier":
                yield Other(declarator)
                continue
            yield VariableDecl(
                name=node_text(name),
                value=declarator.child_by_field_name("value"),
                statement=statement,
                exported=exported,
            )
    elif node.type == "type_alias_declaration":
        name = node.child_by_field_name("name")
        if name is None:
            yield Other(node)
            return
        yield TypeAliasDecl(
            name=node_text(name),
            value=node.child_by_field_name("value"),
            statement=statement,
            exported=exported,
        )
    elif node.type in _CLASS_TYPES:
        class_name = node_text(node.child_by_field_name("name")) or None
        body = node.child_by_field_name("body")
        for member in body.named_children if body is not None else ():
            if member.type == "comment":
                continue
            name = member.child_by_field_name("name")
            if member.type != "method_definition" or name is None:
                yield Other(member)
                continue
            yield MethodDecl(name=node_text(name), class_name=class_name, node=member)
    else:
        yield Other(node)


# Comments


def _is_trailing(comment: Node) -> bool:
    """True for a comment sharing a line with the code before it."""
    before = comment.prev_sibling
    return before is not None and before.end_point[0] == comment.start_point[0]


def leading_comment(node: Node) -> str | None:
    """Return the comment directly preceding a declaration, if any.

    Consecutive ``//`` lines are returned together as one block.
    """
    comment = node.prev_sibling
    if comment is None or comment.type != "comment" or _is_trailing(comment):
        return None
    text = node_text(comment)
    if not text.startswith("//"):
        return text

    lines = [text]
    current = comment
    while True:
        previous = current.prev_sibling
        if (
            previous is None
            or previous.type != "comment"
            or not node_text(previous).startswith("//")
            or previous.end_point[0] != current.start_point[0] - 1
            or _is_trailing(previous)
        ):
            break
        lines.insert(0, node_text(previous))
        current = previous
    return "\n".join(lines)


# Members and parameters


@dataclass(frozen=True)
class ParamDecl:
    name: str
    type: str | None  # Annotation text without the colon
    optional: bool = False


def annotation_text(node: Node | None) -> str | None:
    """``: Promise<BlockHash>`` -> ``Promise<BlockHash>``."""
    text = node_text(node).strip()
    if text.startswith(":"):
        text = text[1:].strip()
    return text or None


def modifiers(method: Node) -> set[str]:
    """Keywords written before a method's name (async, static, get, private...)."""
    name = method.child_by_field_name("name")
    found = set()
    for child in method.children:
        if name is not None and child.start_byte >= name.start_byte:
            break
        if child.type in ("accessibility_modifier", "override_modifier"):
            found.add(node_text(child))
        elif not child.is_named:
            found.add(child.type)
    return found


def parameters(function: Node) -> list[ParamDecl]:
    """Declared parameters of a method, function or arrow function."""
    single = function.child_by_field_name("parameter")
    if single is not None:
        return [ParamDecl(name=node_text(single), type=None)]

    params = function.child_by_field_name("parameters")
    if params is None:
        return []

    result = []
    for param in params.named_children:
        if param.type not in ("required_parameter", "optional_parameter"):
            continue
        pattern = param.child_by_field_name("pattern")
        if pattern is None:
            raise ExtractionError(f"parameter without a name: {node_text(param)!r}")
        name = node_text(pattern)
        if name == "this":
            continue
        result.append(
            ParamDecl(
                name=name.lstrip("."),
                type=annotation_text(param.child_by_field_name("type")),
                optional=param.type == "optional_parameter",
            )
        )
    return result


def is_function(node: Node) -> bool:
    return node.type in _FUNCTION_TYPES


# Expressions


def unwrap_expression(node: Node) -> Node:
    """Strip ``as const``, ``satisfies T`` and parentheses."""
    while node.type in _WRAPPER_TYPES and node.named_children:
        node = node.named_children[0]
    return node


def iter_descendants(node: Node) -> Iterator[Node]:
    """Pre-order walk, node first."""
    yield node
    for child in node.children:
        yield from iter_descendants(child)


def string_value(node: Node) -> str:
    """Contents of a string or template literal without its quotes."""
    return node_text(node)[1:-1]


def object_members(obj: Node) -> Iterator[tuple[str, Node]]:
    """Yield ``(key, value)`` for the pairs and methods of an object literal.

    For a method member the value is the ``method_definition`` node itself.
    Computed keys, spreads and shorthand properties are skipped.
    """
    for member in obj.named_children:
        if member.type == "pair":
            key = member.child_by_field_name("key")
            value = member.child_by_field_name("value")
            if key is None or value is None:
                continue
            if key.type == "string":
                yield string_value(key), value
            elif key.type in ("property_identifier", "number"):
                yield node_text(key), value
        elif member.type == "method_definition":
            name = member.child_by_field_name("name")
            if name is not None and name.type == "property_identifier":
                yield node_text(name), member


def call_arguments(call: Node) -> list[Node]:
    args = call.child_by_field_name("arguments")
    if args is None:
        return []
    return [a for a in args.named_children if a.type != "comment"]

"""Documentation assembly and output."""

from __future__ import annotations

import functools
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping

from .config import DocsConfig
from .endpoints import PathTable, load_path_table
from .extractors import (
    DEFAULT_METHOD_DENYLIST,
    DEFAULT_POST_HELPER,
    extract_methods,
    extract_types,
    load_type_descriptions,
)
from .models import DocEntry, Documentation, FileExtraction, MethodDoc, TypeDoc
from .shapes import DEFAULT_NAMESPACE
from .sources import discover_sources, relative_path

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionContext:
    """Inputs shared by every file of one build."""

    root: Path
    descriptions: Mapping[str, DocEntry] = field(default_factory=dict)
    path_table: PathTable = field(default_factory=PathTable)
    namespace: str = DEFAULT_NAMESPACE
    post_helper: str = DEFAULT_POST_HELPER
    denylist: frozenset[str] = DEFAULT_METHOD_DENYLIST

    @classmethod
    def from_config(cls, config: DocsConfig) -> ExtractionContext:
        return cls(
            root=config.root,
            descriptions=load_type_descriptions(config.type_descriptions_path),
            path_table=load_path_table(config.path_table_path, config.path_table_name),
            namespace=config.schema_namespace,
            post_helper=config.post_helper,
            denylist=frozenset(config.method_denylist),
        )


@dataclass(frozen=True)
class Accumulator:
    """Documentation gathered so far. Never mutated; ``merge`` returns a new one.

    Types are keyed by name: a later file's type replaces an earlier one of
    the same name. Methods are kept in the order seen.
    """

    types: Mapping[str, TypeDoc] = field(default_factory=dict)
    methods: tuple[MethodDoc, ...] = ()
    files: int = 0


def name_sort_key(name: str) -> tuple[str, str]:
    """Case-insensitive order, ties broken by the exact name."""
    return name.casefold(), name


def extract_file(path: Path, context: ExtractionContext) -> FileExtraction:
    """Run both collectors over one source file."""
    source_file = relative_path(path, context.root)
    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.warning(f"Could not read {source_file}: {e}")
        return FileExtraction(source_file)

    types: list[TypeDoc] = []
    ns = context.namespace
    if f"{ns}.object" in source or f"{ns}.enum" in source:
        types = extract_types(source, source_file, context.descriptions, ns)

    methods = extract_methods(
        source,
        source_file,
        context.path_table,
        post_helper=context.post_helper,
        denylist=context.denylist,
    )
    return FileExtraction(source_file, tuple(types), tuple(methods))


def merge(acc: Accumulator, extraction: FileExtraction) -> Accumulator:
    """Fold one file's results into the accumulator."""
    types = dict(acc.types)
    for type_doc in extraction.types:
        previous = types.get(type_doc.name)
        if previous is not None:
            log.debug(
                f"Type {type_doc.name} from {type_doc.source_file} "
                f"replaces the one from {previous.source_file}"
            )
        types[type_doc.name] = type_doc
    return Accumulator(
        types=types,
        methods=acc.methods + extraction.methods,
        files=acc.files + 1,
    )


def finalize(acc: Accumulator) -> Documentation:
    """Sort methods and types by name."""
    return Documentation(
        methods=tuple(sorted(acc.methods, key=lambda m: name_sort_key(m.name))),
        types=tuple(sorted(acc.types.values(), key=lambda t: name_sort_key(t.name))),
    )


def build_documentation(paths: Iterable[Path], context: ExtractionContext) -> Documentation:
    """Extract and assemble documentation for the given files.

    Files are processed in sorted path order, which decides which type wins
    when two files declare the same name.
    """
    acc = functools.reduce(
        lambda acc, path: merge(acc, extract_file(path, context)),
        sorted(paths),
        Accumulator(),
    )
    log.debug(f"Assembled {len(acc.methods)} methods and {len(acc.types)} types from {acc.files} files")
    return finalize(acc)


def generate_docs(config: DocsConfig) -> tuple[Documentation, list[Path]]:
    """Discover sources and build documentation for a configuration.

    Returns the documentation and the list of processed files.
    """
    sources = discover_sources(
        config.source_path,
        config.include_extensions,
        config.exclude_patterns,
    )
    context = ExtractionContext.from_config(config)
    return build_documentation(sources, context), sources


def generate_json(documentation: Documentation) -> str:
    return json.dumps(documentation.to_dict(), indent=2, ensure_ascii=False) + "\n"


def write_docs(output_path: Path, documentation: Documentation) -> None:
    """Write documentation JSON, creating the output directory if needed."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(generate_json(documentation), encoding="utf-8")

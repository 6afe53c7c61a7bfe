"""orddocs - API documentation extraction for the ord TypeScript client."""

from orddocs.comments import parse_doc_comment
from orddocs.config import DocsConfig
from orddocs.errors import DocsError, ExtractionError, SourceDirectoryError
from orddocs.extractors import extract_methods, extract_types, load_type_descriptions
from orddocs.generators import build_documentation, generate_docs, write_docs
from orddocs.models import Documentation, MethodDoc, TypeDoc
from orddocs.shapes import parse_schema, render_type

__all__ = [
    "DocsConfig",
    "DocsError",
    "Documentation",
    "ExtractionError",
    "MethodDoc",
    "SourceDirectoryError",
    "TypeDoc",
    "build_documentation",
    "extract_methods",
    "extract_types",
    "generate_docs",
    "load_type_descriptions",
    "parse_doc_comment",
    "parse_schema",
    "render_type",
    "write_docs",
]

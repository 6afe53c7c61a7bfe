"""Build configuration."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from .extractors import DEFAULT_METHOD_DENYLIST, DEFAULT_POST_HELPER
from .shapes import DEFAULT_NAMESPACE
from .sources import DEFAULT_EXCLUDE_PATTERNS, DEFAULT_EXTENSIONS


class DocsConfig(BaseModel):
    """Where to read sources from and where to write the documentation.

    Relative paths are resolved against ``root``.
    """

    root: Path = Field(default_factory=Path.cwd)
    source_dir: Path = Path("src")
    output: Path = Path("docs/api-docs.json")
    type_descriptions: Path = Path("src/types/index.ts")
    path_table: Path = Path("src/api.ts")
    path_table_name: str | None = None
    include_extensions: list[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    exclude_patterns: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
    schema_namespace: str = DEFAULT_NAMESPACE
    post_helper: str = DEFAULT_POST_HELPER
    method_denylist: list[str] = Field(default_factory=lambda: sorted(DEFAULT_METHOD_DENYLIST))
    strict: bool = False

    @field_validator("exclude_patterns")
    @classmethod
    def _valid_patterns(cls, v: list[str]) -> list[str]:
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid exclude pattern {pattern!r}: {e}") from e
        return v

    @field_validator("include_extensions")
    @classmethod
    def _dotted_extensions(cls, v: list[str]) -> list[str]:
        return [ext if ext.startswith(".") else f".{ext}" for ext in v]

    @field_validator("schema_namespace", "post_helper", "path_table_name")
    @classmethod
    def _identifier(cls, v: str | None) -> str | None:
        if v is not None and not v.isidentifier():
            raise ValueError(f"Not a valid identifier: {v!r}")
        return v

    def resolve(self, path: Path) -> Path:
        return path if path.is_absolute() else self.root / path

    @property
    def source_path(self) -> Path:
        return self.resolve(self.source_dir)

    @property
    def output_path(self) -> Path:
        return self.resolve(self.output)

    @property
    def type_descriptions_path(self) -> Path:
        return self.resolve(self.type_descriptions)

    @property
    def path_table_path(self) -> Path:
        return self.resolve(self.path_table)

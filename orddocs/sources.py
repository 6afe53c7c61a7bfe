"""Source file discovery."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from .errors import SourceDirectoryError

DEFAULT_EXTENSIONS = (".ts",)
DEFAULT_EXCLUDE_PATTERNS = (
    r"\.test\.ts$",
    r"\.spec\.ts$",
    r"\.d\.ts$",
    r"/dist/",
    r"/build/",
    r"/node_modules/",
)


def relative_path(path: Path, root: Path) -> str:
    """Convert absolute path to relative from project root."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def discover_sources(
    source_dir: Path,
    include_extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    exclude_patterns: Iterable[str] = DEFAULT_EXCLUDE_PATTERNS,
) -> list[Path]:
    """Recursively list source files under ``source_dir``, sorted.

    Exclude patterns are matched against the path relative to ``source_dir``
    with a leading slash (``/schemas/rune.ts``). Directories are tested with a
    trailing slash and are not descended into when excluded.
    """
    if not source_dir.is_dir():
        raise SourceDirectoryError(f"Source directory not found: {source_dir}", path=str(source_dir))

    extensions = tuple(include_extensions)
    patterns = [re.compile(p) for p in exclude_patterns]

    def excluded(candidate: str) -> bool:
        return any(p.search(candidate) for p in patterns)

    files: list[Path] = []

    def walk(directory: Path) -> None:
        for entry in sorted(directory.iterdir()):
            posix = "/" + relative_path(entry, source_dir)
            if entry.is_dir():
                if not excluded(f"{posix}/"):
                    walk(entry)
            elif entry.name.endswith(extensions) and not excluded(posix):
                files.append(entry)

    walk(source_dir)
    return files

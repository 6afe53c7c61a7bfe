"""Exceptions raised by the documentation pipeline."""

from __future__ import annotations


class DocsError(Exception):
    """Base exception for documentation builds."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class SourceDirectoryError(DocsError):
    """Raised when the configured source root does not exist."""

    pass


class ExtractionError(DocsError):
    """Raised when a single declaration cannot be turned into documentation.

    Collectors catch this per declaration, so one malformed method or schema
    never aborts the rest of the file.
    """

    pass

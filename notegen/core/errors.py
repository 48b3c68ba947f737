"""Errors raised while creating a note."""

from __future__ import annotations

from pathlib import Path


class NoteError(Exception):
    """Base class for failures of the note creation pipeline.

    Attributes:
        stage: Pipeline stage that produced the error
        path: Candidate or target path involved, when known
    """

    stage = "note"

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def with_context(self, prefix: str) -> NoteError:
        """Return a copy of this error with its message prefixed."""
        return type(self)(f"{prefix}: {self.message}", path=self.path)


class TemplateLoadError(NoteError):
    """Raised when a template source or file cannot be loaded."""

    stage = "load"


class TemplateRenderError(NoteError):
    """Raised when a template fails to render for a context."""

    stage = "render"


class PathValidationError(NoteError):
    """Raised when checking whether a path exists fails."""

    stage = "validate"


class CollisionExhaustedError(NoteError):
    """Raised when every generated candidate path is already taken."""

    stage = "resolve"


class WriteError(NoteError):
    """Raised when the note cannot be written to disk."""

    stage = "write"

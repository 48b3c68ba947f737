"""File I/O operations for note creation."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from ..core.errors import PathValidationError, WriteError

logger = logging.getLogger(__name__)


def exists(path: Path) -> bool:
    """Return whether something exists at the given path.

    Args:
        path: Path to check

    Returns:
        True if the path exists

    Raises:
        OSError: If the check fails for another reason than a missing entry
    """
    try:
        os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        return False
    return True


def validate_path(path: Path) -> bool:
    """Return whether a note can be created at the given path.

    Args:
        path: Candidate note path

    Returns:
        True if the path is free

    Raises:
        PathValidationError: If the existence check fails
    """
    try:
        return not exists(path)
    except OSError as e:
        raise PathValidationError(f"{path}: {e.strerror or e}", path=path) from e


def atomic_write_text(path: Path, text: str, mode: int = 0o644) -> None:
    """Replace path with text so readers never observe a partial note.

    The text goes to a hidden sibling file first, which is fsynced and then
    renamed over path. The sibling is removed if any step fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    ) as handle:
        staged = Path(handle.name)
        try:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        except OSError:
            handle.close()
            staged.unlink(missing_ok=True)
            raise

    try:
        staged.chmod(mode)
        os.replace(staged, path)
    except OSError:
        staged.unlink(missing_ok=True)
        raise


def write_note(path: Path, content: str) -> None:
    """Persist a note to disk.

    Raises:
        WriteError: If the note cannot be written
    """
    try:
        atomic_write_text(path, content)
    except OSError as e:
        raise WriteError(f"{path}: {e.strerror or e}", path=path) from e

    logger.debug(f"Wrote {len(content)} character(s) to {path}")

"""Unique note path resolution."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from tenacity import RetryCallState, Retrying, retry_if_result, stop_after_attempt

from ..rendering.engine import Renderer
from .errors import CollisionExhaustedError
from .models import Directory, RenderContext

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 50


def join_note_path(base: Path, filename: str) -> Path:
    """Join a rendered filename under base and normalize the result.

    A leading separator in filename does not reset the path to the root.
    """
    return Path(os.path.normpath(f"{base}{os.sep}{filename}"))


def filename_stem(filename: str) -> str:
    """Strip the last extension of a base name, including dotfile names."""
    dot = filename.rfind(".")
    return filename[:dot] if dot != -1 else filename


@dataclass(frozen=True)
class NoteDependencies:
    """Collaborators of a create operation."""

    filename_template: Renderer
    body_template: Renderer
    gen_id: Callable[[], str]
    validate_path: Callable[[Path], bool]


@dataclass(frozen=True)
class Candidate:
    """Outcome of a single path generation attempt."""

    path: Path
    context: RenderContext
    free: bool


def _is_occupied(candidate: Candidate) -> bool:
    return not candidate.free


def _log_collision(retry_state: RetryCallState) -> None:
    candidate = retry_state.outcome.result()
    logger.debug(
        "Note path %s already exists (attempt %d)",
        candidate.path,
        retry_state.attempt_number,
    )


def _raise_exhausted(retry_state: RetryCallState) -> Candidate:
    candidate = retry_state.outcome.result()
    raise CollisionExhaustedError(
        f"{candidate.path}: note already exists", path=candidate.path
    )


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry of path generation attempts.

    Only results matching should_retry are retried. Exceptions raised by an
    attempt propagate immediately.
    """

    max_attempts: int = MAX_ATTEMPTS
    should_retry: Callable[[Candidate], bool] = _is_occupied

    def run(self, attempt: Callable[[], Candidate]) -> Candidate:
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            retry=retry_if_result(self.should_retry),
            before_sleep=_log_collision,
            retry_error_callback=_raise_exhausted,
        )
        return retrying(attempt)


def resolve_path(
    context: RenderContext,
    directory: Directory,
    deps: NoteDependencies,
    policy: RetryPolicy = RetryPolicy(),
) -> tuple[Path, RenderContext]:
    """Find a free path for a new note.

    Args:
        context: Render context without id or filename
        directory: Directory receiving the note
        deps: Filename template, id generator and path validator
        policy: Retry policy applied to collisions

    Returns:
        The free path and the context with id and filename fields set

    Raises:
        TemplateRenderError: If the filename template fails to render
        PathValidationError: If a path cannot be checked
        CollisionExhaustedError: If no free path was found
    """
    extension = directory.config.extension

    def attempt() -> Candidate:
        attempt_context = context.with_id(deps.gen_id())
        filename = deps.filename_template.render(attempt_context)
        path = join_note_path(directory.path, f"{filename}.{extension}")
        return Candidate(path, attempt_context, deps.validate_path(path))

    candidate = policy.run(attempt)
    filename = candidate.path.name
    stem = filename_stem(filename)

    logger.debug(f"Resolved note path {candidate.path}")

    return candidate.path, candidate.context.with_filename(filename, stem)

"""Note creation pipeline."""

from __future__ import annotations

import logging
from pathlib import Path

from ..rendering import io
from ..rendering.engine import NULL_RENDERER, Renderer, TemplateLoader
from .context import build_context
from .errors import NoteError
from .ids import new_id_generator
from .models import CreatedNote, CreateOptions
from .resolver import NoteDependencies, RetryPolicy, resolve_path

logger = logging.getLogger(__name__)


def compose_note(
    options: CreateOptions,
    deps: NoteDependencies,
    policy: RetryPolicy = RetryPolicy(),
) -> CreatedNote:
    """Resolve the path of a new note and render its body.

    Nothing is written to disk.

    Args:
        options: Create options of the note
        deps: Templates, id generator and path validator
        policy: Retry policy applied to path collisions

    Returns:
        Path and content of the note
    """
    context = build_context(options)
    path, context = resolve_path(context, options.directory, deps, policy)
    content = deps.body_template.render(context)
    return CreatedNote(path=path, content=content)


def create_note(options: CreateOptions, loader: TemplateLoader) -> Path:
    """Create a new note on disk.

    Args:
        options: Create options of the note
        loader: Loader of the filename and body templates

    Returns:
        Path of the created note

    Raises:
        NoteError: If any stage fails; the message is prefixed with "new note"
    """
    try:
        return _create_note(options, loader)
    except NoteError as e:
        logger.debug(f"Note creation failed at stage {e.stage!r}: {e}")
        raise e.with_context("new note") from e


def _create_note(options: CreateOptions, loader: TemplateLoader) -> Path:
    config = options.directory.config

    filename_template = loader.load(config.filename_template)

    body_template: Renderer = NULL_RENDERER
    if config.body_template_path is not None:
        body_template = loader.load_file(config.body_template_path)

    deps = NoteDependencies(
        filename_template=filename_template,
        body_template=body_template,
        gen_id=new_id_generator(config.id_options),
        validate_path=io.validate_path,
    )
    note = compose_note(options, deps)

    io.write_note(note.path, note.content)
    logger.info(f"Created note {note.path}")

    return note.path

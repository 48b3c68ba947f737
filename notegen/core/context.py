"""Initial render context construction."""

from __future__ import annotations

import logging

from .models import CreateOptions, RenderContext

logger = logging.getLogger(__name__)


def build_context(options: CreateOptions) -> RenderContext:
    """Build the render context of a new note before its path is known.

    Args:
        options: Create options of the note

    Returns:
        Context with title, content, directory name and extra values set
    """
    config = options.directory.config
    context = RenderContext(
        title=options.title or config.default_title,
        content=options.content or "",
        dir=options.directory.name,
        extra=config.extra,
    )

    logger.debug(
        f"Built render context for {options.directory.path} (title={context.title!r})"
    )

    return context

"""Notegen - template-driven note creation.

Creates uniquely named notes from Jinja2 filename and body templates.
"""

__version__ = "0.1.0"

# Configure logging for library use
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .core.composer import create_note
from .core.errors import (
    CollisionExhaustedError,
    NoteError,
    PathValidationError,
    TemplateLoadError,
    TemplateRenderError,
    WriteError,
)
from .core.models import CreateOptions, Directory, DirectoryConfig, IDOptions

__all__ = [
    "CollisionExhaustedError",
    "CreateOptions",
    "Directory",
    "DirectoryConfig",
    "IDOptions",
    "NoteError",
    "PathValidationError",
    "TemplateLoadError",
    "TemplateRenderError",
    "WriteError",
    "create_note",
]

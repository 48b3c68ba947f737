"""Template rendering engine."""

from __future__ import annotations

import logging
import re
import unicodedata
from datetime import datetime
from pathlib import Path
from typing import Iterable, Protocol

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateError,
    TemplateSyntaxError,
)

from ..core.errors import TemplateLoadError, TemplateRenderError
from ..core.models import RenderContext

logger = logging.getLogger(__name__)

_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")


class Renderer(Protocol):
    """Expands a render context into a string."""

    def render(self, context: RenderContext) -> str:
        ...


class TemplateLoader(Protocol):
    """Builds renderers from template sources or files."""

    def load(self, source: str) -> Renderer:
        ...

    def load_file(self, path: str | Path) -> Renderer:
        ...


class NullRenderer:
    """Renderer used when no body template is configured."""

    def render(self, context: RenderContext) -> str:
        return ""


NULL_RENDERER = NullRenderer()


class JinjaRenderer:
    """Renderer backed by a compiled Jinja2 template."""

    def __init__(self, template: Template, name: str) -> None:
        self.template = template
        self.name = name

    def render(self, context: RenderContext) -> str:
        try:
            return self.template.render(**context.template_vars())
        except TemplateError as e:
            raise TemplateRenderError(f"failed to render {self.name}: {e}") from e
        except Exception as e:
            raise TemplateRenderError(
                f"failed to render {self.name}: {type(e).__name__}: {e}"
            ) from e


def slugify(value: str) -> str:
    """Turn text into a lowercase, dash separated ASCII slug."""
    normalized = unicodedata.normalize("NFKD", value)
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii").lower()
    return _SLUG_SEPARATORS.sub("-", ascii_text).strip("-")


def create_environment(template_dirs: Iterable[Path] = ()) -> Environment:
    """Create the Jinja2 environment shared by note templates.

    Args:
        template_dirs: Directories searched for template files

    Returns:
        Configured Jinja2 environment
    """
    env = Environment(
        loader=FileSystemLoader([str(d) for d in template_dirs]),
        undefined=StrictUndefined,
        autoescape=False,
        keep_trailing_newline=True,
    )
    env.filters["slug"] = slugify
    env.globals["now"] = datetime.now
    return env


class JinjaTemplateLoader:
    """Loads filename and body templates with Jinja2."""

    def __init__(self, template_dirs: Iterable[Path] = ()) -> None:
        self.template_dirs = [Path(d) for d in template_dirs]
        self.env = create_environment(self.template_dirs)

    def load(self, source: str) -> JinjaRenderer:
        """Compile a template from its source text."""
        try:
            template = self.env.from_string(source)
        except TemplateSyntaxError as e:
            raise TemplateLoadError(f"invalid template {source!r}: {e}") from e
        return JinjaRenderer(template, name=repr(source))

    def load_file(self, path: str | Path) -> JinjaRenderer:
        """Load a template file.

        Args:
            path: Absolute path, or path relative to a template directory
                or to the current directory

        Returns:
            Renderer for the template file
        """
        template_path = self._find(Path(path))
        logger.debug(f"Loading template: {template_path}")

        try:
            source = template_path.read_text(encoding="utf-8")
        except OSError as e:
            raise TemplateLoadError(
                f"cannot read template {template_path}: {e.strerror or e}",
                path=template_path,
            ) from e

        try:
            template = self.env.from_string(source)
        except TemplateSyntaxError as e:
            raise TemplateLoadError(
                f"invalid template {template_path}: {e}", path=template_path
            ) from e
        return JinjaRenderer(template, name=str(template_path))

    def _find(self, path: Path) -> Path:
        if path.is_absolute():
            return path
        for directory in self.template_dirs:
            candidate = directory / path
            if candidate.is_file():
                return candidate
        if path.is_file():
            return path
        raise TemplateLoadError(f"template not found: {path}", path=path)

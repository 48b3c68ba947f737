"""Main CLI application."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from ..config import ConfigError, default_config_path, load_config, template_dir
from ..core.composer import create_note
from ..core.errors import NoteError
from ..core.models import CreateOptions, Directory
from ..rendering.engine import JinjaTemplateLoader
from ..settings import get_settings
from .parsers import parse_extras

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="notegen",
    help="Create uniquely named notes from Jinja2 templates.",
)


@app.callback()
def callback() -> None:
    """Create uniquely named notes from Jinja2 templates."""


def _apply_overrides(
    directory: Directory, extras: dict[str, str], template: Optional[Path]
) -> Directory:
    updates: dict[str, object] = {}
    if extras:
        updates["extra"] = {**directory.config.extra, **extras}
    if template is not None:
        updates["body_template_path"] = template
    if not updates:
        return directory
    return directory.model_copy(
        update={"config": directory.config.model_copy(update=updates)}
    )


@app.command()
def new(
    directory: Annotated[
        Optional[Path],
        typer.Argument(
            help="Directory receiving the note (default: notebook root).",
            metavar="DIRECTORY",
        ),
    ] = None,
    title: Annotated[
        Optional[str],
        typer.Option("--title", "-t", help="Title of the new note."),
    ] = None,
    content: Annotated[
        Optional[str],
        typer.Option("--content", help="Initial content of the new note."),
    ] = None,
    interactive: Annotated[
        bool,
        typer.Option(
            "--interactive",
            "-i",
            help="Read the initial content from standard input.",
        ),
    ] = False,
    template: Annotated[
        Optional[Path],
        typer.Option(
            "--template",
            help="Body template file, overriding the configured one.",
            metavar="PATH",
        ),
    ] = None,
    extras: Annotated[
        list[str],
        typer.Option(
            "--extra",
            help="Extra template value (format: KEY=VALUE). Repeatable.",
            metavar="KEY=VALUE",
        ),
    ] = [],
    notebook_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--notebook-dir",
            help="Notebook root (default: $NOTEGEN_NOTEBOOK_DIR or cwd).",
            metavar="DIR",
        ),
    ] = None,
    config_file: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            help="Notebook configuration file (default: <notebook>/.notegen/config.yaml).",
            metavar="FILE",
        ),
    ] = None,
    print_path: Annotated[
        bool,
        typer.Option(
            "--print-path",
            "-p",
            help="Print only the path of the created note.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose logging.",
        ),
    ] = False,
) -> None:
    """Create a new note in DIRECTORY."""
    settings = get_settings()

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format="[%(levelname)s] %(message)s",
    )

    root = notebook_dir or settings.notebook_dir
    config_path = config_file or settings.config_file or default_config_path(root)
    extra_values = parse_extras(extras)

    if interactive:
        content = sys.stdin.read()

    try:
        notebook = load_config(config_path)
        target = _apply_overrides(
            notebook.directory(root, directory), extra_values, template
        )
        logger.debug(f"Target directory: {target.path} (name={target.name!r})")

        loader = JinjaTemplateLoader([template_dir(root)])
        path = create_note(
            CreateOptions(directory=target, title=title, content=content), loader
        )
    except (ConfigError, NoteError) as e:
        typer.echo(f"notegen: {e}", err=True)
        raise typer.Exit(code=1) from e

    if print_path:
        typer.echo(str(path))
    else:
        typer.echo(f"Created {path}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

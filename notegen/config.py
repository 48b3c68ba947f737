"""Notebook configuration file loading."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .core.models import Directory, DirectoryConfig

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".notegen"
CONFIG_FILE_NAME = "config.yaml"
TEMPLATES_DIR_NAME = "templates"


class ConfigError(Exception):
    """Raised when the notebook configuration cannot be loaded or applied."""


class IDSection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    charset: str | None = None
    length: int | None = None
    case: str | None = None


class NoteSection(BaseModel):
    """The `note` section, or a per-directory override of it."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    filename: str | None = None
    extension: str | None = None
    template: Path | None = None
    default_title: str | None = Field(default=None, alias="default-title")
    id: IDSection = Field(default_factory=IDSection)


class DirSection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    note: NoteSection = Field(default_factory=NoteSection)
    extra: dict[str, str] = Field(default_factory=dict)


class NotebookConfig(BaseModel):
    """Notebook-wide note settings with per-directory overrides."""

    model_config = ConfigDict(extra="forbid")

    note: NoteSection = Field(default_factory=NoteSection)
    extra: dict[str, str] = Field(default_factory=dict)
    dir: dict[str, DirSection] = Field(default_factory=dict)

    def directory(self, root: Path, dir_path: Path | None = None) -> Directory:
        """Resolve the directory descriptor of a notebook directory.

        Args:
            root: Notebook root
            dir_path: Directory receiving the note, defaults to the root

        Returns:
            Directory with the `note` section merged with its override
        """
        root = root.resolve()
        path = (root / dir_path).resolve() if dir_path is not None else root
        try:
            name = path.relative_to(root).as_posix()
        except ValueError as e:
            raise ConfigError(f"{path} is not inside the notebook {root}") from e
        if name == ".":
            name = ""

        override = self.dir.get(name, DirSection())
        return Directory(
            name=name,
            path=path,
            config=_build_directory_config(
                root, [self.note, override.note], {**self.extra, **override.extra}
            ),
        )


def _merge_sections(sections: list[BaseModel]) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    for section in sections:
        merged.update(section.model_dump(exclude_none=True, exclude={"id"}))
    return merged


def _build_directory_config(
    root: Path, sections: list[NoteSection], extra: dict[str, str]
) -> DirectoryConfig:
    note = _merge_sections(sections)
    id_options = _merge_sections([section.id for section in sections])

    values: dict[str, Any] = {"extra": extra, "id_options": id_options}
    if "filename" in note:
        values["filename_template"] = note["filename"]
    if "extension" in note:
        values["extension"] = note["extension"]
    if "default_title" in note:
        values["default_title"] = note["default_title"]
    if "template" in note:
        template = Path(note["template"])
        if not template.is_absolute():
            template = template_dir(root) / template
        values["body_template_path"] = template

    try:
        return DirectoryConfig(**values)
    except ValidationError as e:
        raise ConfigError(f"invalid note configuration: {e}") from e


def config_dir(root: Path) -> Path:
    return root / CONFIG_DIR_NAME


def template_dir(root: Path) -> Path:
    return config_dir(root) / TEMPLATES_DIR_NAME


def default_config_path(root: Path) -> Path:
    return config_dir(root) / CONFIG_FILE_NAME


def load_config(path: Path) -> NotebookConfig:
    """Load a notebook configuration file.

    A missing file yields the default configuration.

    Args:
        path: YAML configuration file

    Returns:
        Parsed notebook configuration
    """
    if not path.exists():
        logger.debug(f"No configuration at {path}, using defaults")
        return NotebookConfig()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")

    try:
        config = NotebookConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"invalid configuration in {path}: {e}") from e

    logger.debug(f"Loaded configuration from {path}")
    return config

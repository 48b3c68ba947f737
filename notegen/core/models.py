"""Domain models for note creation inputs, render context and results."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class IDOptions(BaseModel):
    """Options of the note identifier generator."""

    model_config = ConfigDict(frozen=True)

    charset: str = Field(
        default="alphanum",
        min_length=1,
        description="alphanum, hex, letters, numbers or a literal set of characters",
    )
    length: int = Field(default=4, ge=1, description="Number of characters per id")
    case: Literal["lower", "upper", "mixed"] = Field(
        default="lower", description="Letter case applied to the charset"
    )


class DirectoryConfig(BaseModel):
    """Note settings attached to a notebook directory."""

    model_config = ConfigDict(frozen=True)

    filename_template: str = Field(
        default="{{ id }}", min_length=1, description="Filename template source"
    )
    body_template_path: Path | None = Field(
        default=None, description="Body template file"
    )
    extension: str = Field(default="md", min_length=1, description="File extension")
    default_title: str = Field(default="Untitled", description="Title used when none is given")
    id_options: IDOptions = Field(default_factory=IDOptions)
    extra: dict[str, str] = Field(
        default_factory=dict, description="Extra values exposed to templates"
    )

    @field_validator("extension")
    @classmethod
    def _strip_leading_dot(cls, value: str) -> str:
        value = value.lstrip(".")
        if not value:
            raise ValueError("extension must not be empty")
        return value


class Directory(BaseModel):
    """A notebook directory receiving new notes."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="", description="Path relative to the notebook root")
    path: Path = Field(..., description="Directory the note is written into")
    config: DirectoryConfig = Field(default_factory=DirectoryConfig)


class CreateOptions(BaseModel):
    """Input of a single create operation."""

    model_config = ConfigDict(frozen=True)

    directory: Directory
    title: str | None = None
    content: str | None = None


class RenderContext(BaseModel):
    """Placeholder values expanded in the filename and body templates."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    title: str = ""
    content: str = ""
    dir: str = ""
    filename: str = ""
    filename_stem: str = ""
    extra: dict[str, str] = Field(default_factory=dict)

    def with_id(self, note_id: str) -> RenderContext:
        return self.model_copy(update={"id": note_id})

    def with_filename(self, filename: str, stem: str) -> RenderContext:
        """Return a context with both filename fields set."""
        return self.model_copy(update={"filename": filename, "filename_stem": stem})

    def template_vars(self) -> dict[str, Any]:
        """Plain mapping handed to the template engine."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "dir": self.dir,
            "filename": self.filename,
            "filename_stem": self.filename_stem,
            "extra": dict(self.extra),
        }


class CreatedNote(BaseModel):
    """Path and rendered content of a note ready to be written."""

    model_config = ConfigDict(frozen=True)

    path: Path
    content: str

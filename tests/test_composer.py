from __future__ import annotations

from pathlib import Path

import pytest

from doubles import FormatRenderer, ScriptedGenerator, SetValidator
from notegen.core import composer
from notegen.core.composer import compose_note, create_note
from notegen.core.errors import (
    NoteError,
    PathValidationError,
    TemplateLoadError,
    TemplateRenderError,
    WriteError,
)
from notegen.core.models import CreateOptions
from notegen.core.resolver import NoteDependencies
from notegen.rendering import io
from notegen.rendering.engine import JinjaTemplateLoader


def _listing(directory: Path) -> list[str]:
    return sorted(p.name for p in directory.iterdir())


def test_compose_note_renders_body_with_resolved_context(make_directory, notes_dir):
    body = FormatRenderer("# {title}\n{filename_stem}\n")
    gen_id = ScriptedGenerator(["abcd"])
    deps = NoteDependencies(
        filename_template=FormatRenderer("20230101-{id}"),
        body_template=body,
        gen_id=gen_id,
        validate_path=SetValidator(),
    )

    note = compose_note(
        CreateOptions(directory=make_directory(), title="My Note"), deps
    )

    assert note.path == notes_dir / "20230101-abcd.md"
    assert note.content == "# My Note\n20230101-abcd\n"
    assert body.contexts[0].filename == "20230101-abcd.md"
    assert _listing(notes_dir) == []


def test_compose_note_uses_second_id_after_collision(make_directory, notes_dir):
    gen_id = ScriptedGenerator(["abcd", "efgh"])
    deps = NoteDependencies(
        filename_template=FormatRenderer("20230101-{id}"),
        body_template=FormatRenderer("{id}"),
        gen_id=gen_id,
        validate_path=SetValidator({notes_dir / "20230101-abcd.md"}),
    )

    note = compose_note(CreateOptions(directory=make_directory()), deps)

    assert note.path == notes_dir / "20230101-efgh.md"
    assert note.content == "efgh"
    assert gen_id.calls == 2


def test_create_note_writes_rendered_note(make_directory, notes_dir, tmp_path):
    template_file = tmp_path / "body.md"
    template_file.write_text("# {{ title }}\n\n{{ content }}\nid: {{ filename_stem }}\n")
    directory = make_directory(
        filename_template="note-{{ id }}",
        body_template_path=template_file,
        id_options={"charset": "hex", "length": 6},
    )

    path = create_note(
        CreateOptions(directory=directory, title="Groceries", content="milk"),
        JinjaTemplateLoader(),
    )

    assert path.parent == notes_dir
    assert path.name.startswith("note-") and path.suffix == ".md"
    assert path.read_text() == f"# Groceries\n\nmilk\nid: {path.stem}\n"
    assert _listing(notes_dir) == [path.name]


def test_create_note_without_body_template_writes_empty_file(make_directory):
    path = create_note(CreateOptions(directory=make_directory()), JinjaTemplateLoader())

    assert path.read_text() == ""


def test_create_note_skips_existing_paths(make_directory, notes_dir, monkeypatch):
    (notes_dir / "20230101-abcd.md").write_text("existing")
    ids = iter(["abcd", "efgh"])
    monkeypatch.setattr(composer, "new_id_generator", lambda options: lambda: next(ids))

    path = create_note(
        CreateOptions(directory=make_directory(filename_template="20230101-{{ id }}")),
        JinjaTemplateLoader(),
    )

    assert path == notes_dir / "20230101-efgh.md"
    assert (notes_dir / "20230101-abcd.md").read_text() == "existing"


def test_undefined_extra_in_filename_template_fails_without_writing(make_directory, notes_dir):
    directory = make_directory(filename_template="{{ extra.missing }}-{{ id }}")

    with pytest.raises(TemplateRenderError) as excinfo:
        create_note(CreateOptions(directory=directory), JinjaTemplateLoader())

    assert str(excinfo.value).startswith("new note: ")
    assert isinstance(excinfo.value.__cause__, TemplateRenderError)
    assert _listing(notes_dir) == []


def test_invalid_filename_template_fails_to_load(make_directory, notes_dir):
    directory = make_directory(filename_template="{{ id ")

    with pytest.raises(TemplateLoadError, match="^new note: "):
        create_note(CreateOptions(directory=directory), JinjaTemplateLoader())

    assert _listing(notes_dir) == []


def test_missing_body_template_fails_to_load(make_directory, notes_dir, tmp_path):
    directory = make_directory(body_template_path=tmp_path / "missing.md")

    with pytest.raises(TemplateLoadError, match="^new note: "):
        create_note(CreateOptions(directory=directory), JinjaTemplateLoader())

    assert _listing(notes_dir) == []


def test_body_render_failure_writes_nothing(make_directory, notes_dir, tmp_path):
    template_file = tmp_path / "body.md"
    template_file.write_text("{{ extra.author }}")

    with pytest.raises(TemplateRenderError):
        create_note(
            CreateOptions(directory=make_directory(body_template_path=template_file)),
            JinjaTemplateLoader(),
        )

    assert _listing(notes_dir) == []


def test_validation_failure_writes_nothing(make_directory, notes_dir, monkeypatch):
    def failing_validate(path: Path) -> bool:
        raise PathValidationError(f"{path}: permission denied", path=path)

    monkeypatch.setattr(io, "validate_path", failing_validate)

    with pytest.raises(PathValidationError) as excinfo:
        create_note(CreateOptions(directory=make_directory()), JinjaTemplateLoader())

    assert excinfo.value.stage == "validate"
    assert _listing(notes_dir) == []


def test_write_failure_is_reported_with_path(make_directory, notes_dir, monkeypatch):
    def failing_write(path: Path, text: str, mode: int = 0o644) -> None:
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(io, "atomic_write_text", failing_write)

    with pytest.raises(WriteError) as excinfo:
        create_note(CreateOptions(directory=make_directory()), JinjaTemplateLoader())

    assert excinfo.value.path is not None
    assert excinfo.value.path.parent == notes_dir
    assert str(excinfo.value) == f"new note: {excinfo.value.path}: Permission denied"
    assert _listing(notes_dir) == []


def test_errors_share_a_common_base():
    error = WriteError("disk full", path=Path("/notes/a.md"))

    wrapped = error.with_context("new note")

    assert isinstance(wrapped, NoteError)
    assert type(wrapped) is WriteError
    assert wrapped.path == Path("/notes/a.md")
    assert str(wrapped) == "new note: disk full"


def test_filename_template_runtime_error_is_wrapped(make_directory, notes_dir):
    directory = make_directory(filename_template="{{ 1 // 0 }}-{{ id }}")

    with pytest.raises(TemplateRenderError, match="^new note: ") as excinfo:
        create_note(CreateOptions(directory=directory), JinjaTemplateLoader())

    assert isinstance(excinfo.value.__cause__.__cause__, ZeroDivisionError)
    assert _listing(notes_dir) == []


def test_absolute_filename_template_writes_inside_directory(make_directory, notes_dir, tmp_path):
    directory = make_directory(filename_template=str(tmp_path / "outside") + "-{{ id }}")

    path = create_note(CreateOptions(directory=directory), JinjaTemplateLoader())

    assert path.is_relative_to(notes_dir)
    assert not any(p.name.startswith("outside-") for p in tmp_path.iterdir())

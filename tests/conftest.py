"""Shared pytest fixtures."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pytest

from notegen.core.models import Directory, DirectoryConfig
from notegen.settings import get_settings


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterable[None]:
    """Isolate tests from NOTEGEN_* variables of the caller."""
    for name in ("NOTEGEN_NOTEBOOK_DIR", "NOTEGEN_CONFIG_FILE", "NOTEGEN_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def notes_dir(tmp_path: Path) -> Path:
    d = tmp_path / "notes"
    d.mkdir()
    return d


@pytest.fixture()
def make_directory(notes_dir: Path):
    def _make(**config: object) -> Directory:
        return Directory(name="notes", path=notes_dir, config=DirectoryConfig(**config))

    return _make

"""CLI argument parsers and validators."""

from __future__ import annotations

import typer


def parse_extra(value: str) -> tuple[str, str]:
    """Parse an extra argument in format KEY=VALUE."""
    if "=" not in value:
        raise typer.BadParameter(f"Must be KEY=VALUE, got: {value!r}")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise typer.BadParameter(f"Missing key in: {value!r}")
    return key, val


def parse_extras(values: list[str]) -> dict[str, str]:
    """Parse repeated KEY=VALUE arguments, later keys win."""
    return dict(map(parse_extra, values))

"""Shared CLI options."""

from __future__ import annotations

from pathlib import Path

import typer

from pkgver.config.settings import settings
from pkgver.models import Ecosystem

OutputOption = typer.Option(settings.default_output, "--output", "-o", help="Output format: table, json, yaml")
EcosystemOption = typer.Option(None, "--ecosystem", "-e", help="Limit to one ecosystem: npm, composer, pypi, dart")
PathArgument = typer.Argument(Path("."), help="Workspace root to scan")
ExcludeOption = typer.Option(None, "--exclude", "-x", help="Extra folder glob to exclude (repeatable)")


def resolve_ecosystem(value: str | None) -> Ecosystem | None:
    if value is None:
        return None
    try:
        return Ecosystem.from_str(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def resolve_excludes(extra: list[str] | None) -> list[str]:
    return list(settings.exclude_folders) + list(extra or [])

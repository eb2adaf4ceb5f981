"""Rich table builders for each command."""

from __future__ import annotations

from pathlib import Path

from rich.table import Table

from pkgver.models.dependency import Dependency
from pkgver.output.themes import styled_update


def _relative(path: Path, root: Path | None) -> str:
    if root is None:
        return str(path)
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return str(path)


def dependency_table(deps: list[Dependency], root: Path | None = None) -> Table:
    table = Table(title="Dependencies", expand=True)
    table.add_column("Manifest", style="dim", no_wrap=True, max_width=40)
    table.add_column("Ecosystem", style="blue", no_wrap=True)
    table.add_column("Package", style="magenta", no_wrap=True)
    table.add_column("Current")
    table.add_column("Latest", style="bold")
    table.add_column("Update", no_wrap=True)

    for d in deps:
        name = f"{d.name} [dim]\\[dev][/dim]" if d.is_dev else d.name
        has_latest = d.latest_version is not None or d.comparable_version is None
        table.add_row(
            _relative(d.manifest, root),
            d.ecosystem.value,
            name,
            d.display_version or "-",
            d.latest_version or "-",
            styled_update(d.update_type, has_latest=has_latest),
        )
    return table

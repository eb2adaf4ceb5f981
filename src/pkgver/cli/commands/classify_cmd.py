"""pkgver classify <current> <latest> - Classify an update."""

from __future__ import annotations

import typer
from rich.console import Console

from pkgver.core.classifier import classify_update
from pkgver.output.themes import styled_update

app = typer.Typer()
console = Console()


@app.callback(invoke_without_command=True)
def classify(
    current: str = typer.Argument(help="Current specifier, e.g. ^1.2.3"),
    latest: str = typer.Argument(help="Latest version, e.g. 1.3.0"),
    plain: bool = typer.Option(False, "--plain", help="Print only the update type"),
) -> None:
    """Print the update type (major, minor, patch, prerelease, none)."""
    kind = classify_update(current, latest)
    if plain:
        typer.echo(kind.value)
        return
    console.print(f"{current} → {latest}: {styled_update(kind)}")

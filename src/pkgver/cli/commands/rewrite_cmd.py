"""pkgver rewrite <specifier> <version> - Rewrite a specifier."""

from __future__ import annotations

import typer

from pkgver.core.rewriter import rewrite_specifier

app = typer.Typer()


@app.callback(invoke_without_command=True)
def rewrite(
    specifier: str = typer.Argument(help="Original specifier, e.g. ~1.0.0"),
    version: str = typer.Argument(help="New bare version, e.g. 1.2.0"),
) -> None:
    """Print SPECIFIER pointed at VERSION with its operator preserved."""
    typer.echo(rewrite_specifier(specifier, version))

"""pkgver update-all - Rewrite every outdated dependency to its latest version."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from pkgver.cli.options import EcosystemOption, ExcludeOption, PathArgument, resolve_ecosystem, resolve_excludes
from pkgver.core.errors import PkgverError
from pkgver.core.manifest_writer import apply_update
from pkgver.core.registry_client import RegistryClient
from pkgver.core.update_checker import scan_workspace
from pkgver.output.themes import styled_update

app = typer.Typer()
console = Console()


@app.callback(invoke_without_command=True)
def update_all(
    path: Path = PathArgument,
    ecosystem: Optional[str] = EcosystemOption,
    exclude: Optional[List[str]] = ExcludeOption,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the changes without writing files"),
) -> None:
    """Update every outdated dependency under PATH, keeping constraint operators."""
    if not path.is_dir():
        typer.echo(f"Not a directory: {path}", err=True)
        raise typer.Exit(code=1)

    eco = resolve_ecosystem(ecosystem)

    with console.status("[bold cyan]Checking registries…") as status:
        def on_progress(i: int, total: int, name: str) -> None:
            status.update(f"[bold cyan]Checking registries… [dim]({i}/{total})[/dim] {name}")

        results = scan_workspace(
            path,
            client=RegistryClient(),
            exclude=resolve_excludes(exclude),
            ecosystem=eco,
            on_progress=on_progress,
        )

    outdated = [d for d in results if d.has_update and d.is_updatable]
    if not outdated:
        console.print("[green]No outdated packages found.[/green]")
        return

    if not yes and not dry_run:
        typer.confirm(f"This will update {len(outdated)} outdated package(s). Continue?", abort=True)

    succeeded = 0
    failed = 0
    total = len(outdated)
    for i, dep in enumerate(outdated, 1):
        try:
            new_spec = apply_update(dep, dep.latest_version, dry_run=dry_run)
        except PkgverError as e:
            console.print(f"[dim]({i}/{total})[/dim] [red]{dep.manifest}: {e}[/red]")
            failed += 1
            continue
        succeeded += 1
        shown = new_spec["version"] if isinstance(new_spec, dict) else new_spec
        console.print(
            f"[dim]({i}/{total})[/dim] [magenta]{dep.name}[/magenta] "
            f"{dep.display_version} → [bold]{shown}[/bold] ({styled_update(dep.update_type)})"
        )

    verb = "would be updated" if dry_run else "updated successfully"
    console.print(f"\nUpdate complete. {succeeded} package(s) {verb}. {failed} package(s) failed.")
    if failed:
        raise typer.Exit(code=1)

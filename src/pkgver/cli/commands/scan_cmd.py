"""pkgver scan - List dependencies and available updates."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from pkgver.cli.options import EcosystemOption, ExcludeOption, OutputOption, PathArgument, resolve_ecosystem, resolve_excludes
from pkgver.core.registry_client import RegistryClient
from pkgver.core.update_checker import check_updates, collect_dependencies
from pkgver.output.formatters import output_dependencies

app = typer.Typer()
console = Console()


@app.callback(invoke_without_command=True)
def scan(
    path: Path = PathArgument,
    output: str = OutputOption,
    ecosystem: Optional[str] = EcosystemOption,
    exclude: Optional[List[str]] = ExcludeOption,
    outdated: bool = typer.Option(False, "--outdated", help="Only show dependencies with an update"),
) -> None:
    """Scan manifests under PATH and check each dependency against its registry."""
    if not path.is_dir():
        typer.echo(f"Not a directory: {path}", err=True)
        raise typer.Exit(code=1)

    eco = resolve_ecosystem(ecosystem)

    with console.status("[bold cyan]Scanning manifests…") as status:
        deps = collect_dependencies(path, exclude=resolve_excludes(exclude), ecosystem=eco)
        if not deps:
            console.print("[dim]No dependencies found.[/dim]")
            return

        def on_progress(i: int, total: int, name: str) -> None:
            status.update(f"[bold cyan]Checking registries… [dim]({i}/{total})[/dim] {name}")

        results = check_updates(deps, client=RegistryClient(), on_progress=on_progress)

    if outdated:
        results = [d for d in results if d.has_update]

    output_dependencies(results, output, root=path)

    if output not in ("json", "yaml"):
        updates_available = [d for d in results if d.has_update]
        unknown = [d for d in results if d.is_updatable and d.latest_version is None]
        if updates_available:
            console.print(f"\n[yellow]{len(updates_available)} update(s) available[/yellow]")
        else:
            console.print("\n[green]All dependencies are up to date[/green]")
        if unknown:
            console.print(f"[dim]{len(unknown)} package(s) could not be looked up[/dim]")

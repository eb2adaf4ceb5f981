"""pkgver update <package> - Rewrite a dependency to its latest version."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from pkgver.cli.options import EcosystemOption, ExcludeOption, PathArgument, resolve_ecosystem, resolve_excludes
from pkgver.core.classifier import classify_update
from pkgver.core.errors import ManifestError, PkgverError
from pkgver.core.manifest_writer import apply_update
from pkgver.core.registry_client import RegistryClient
from pkgver.core.update_checker import collect_dependencies
from pkgver.models.dependency import Dependency
from pkgver.output.themes import styled_update
from pkgver.utils.manifest_parser import parse_manifest

app = typer.Typer()
console = Console()


def _matching(
    package: str,
    path: Path,
    manifest: Path | None,
    exclude: list[str],
    ecosystem: str | None,
) -> list[Dependency]:
    eco = resolve_ecosystem(ecosystem)
    if manifest is not None:
        deps = parse_manifest(manifest)
        if eco is not None:
            deps = [d for d in deps if d.ecosystem == eco]
    else:
        deps = collect_dependencies(path, exclude=exclude, ecosystem=eco)
    return [d for d in deps if d.name == package]


@app.callback(invoke_without_command=True)
def update(
    package: str = typer.Argument(help="Package name as written in the manifest"),
    path: Path = PathArgument,
    manifest: Optional[Path] = typer.Option(None, "--manifest", "-m", help="Only update this manifest file"),
    to: Optional[str] = typer.Option(None, "--to", help="Target version (default: latest from the registry)"),
    ecosystem: Optional[str] = EcosystemOption,
    exclude: Optional[List[str]] = ExcludeOption,
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the change without writing files"),
) -> None:
    """Update PACKAGE to the latest (or --to) version, keeping its constraint operator."""
    try:
        targets = _matching(package, path, manifest, resolve_excludes(exclude), ecosystem)
    except ManifestError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    if not targets:
        typer.echo(f"Package '{package}' not found.", err=True)
        raise typer.Exit(code=1)

    client = RegistryClient()
    failures = 0
    for dep in targets:
        if not dep.is_updatable:
            console.print(f"[yellow]Skipping {dep.name} in {dep.manifest}: {dep.display_version} is not a registry version[/yellow]")
            continue

        new_version = to or client.latest_version(dep.ecosystem, dep.name)
        if not new_version:
            console.print(f"[red]Cannot update {dep.name}: missing latest version information[/red]")
            failures += 1
            continue

        kind = classify_update(dep.comparable_version or "", new_version)
        try:
            new_spec = apply_update(dep, new_version, dry_run=dry_run)
        except PkgverError as e:
            console.print(f"[red]{dep.manifest}: {e}[/red]")
            failures += 1
            continue

        shown = new_spec["version"] if isinstance(new_spec, dict) else new_spec
        verb = "Would update" if dry_run else "Updated"
        console.print(
            f"{verb} [magenta]{dep.name}[/magenta] in [dim]{dep.manifest}[/dim]: "
            f"{dep.display_version} → [bold]{shown}[/bold] ({styled_update(kind)})"
        )

    if failures:
        raise typer.Exit(code=1)

"""Table / JSON / YAML output dispatch."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from rich.console import Console

from pkgver.models.dependency import Dependency

console = Console()


def dependency_to_dict(d: Dependency) -> dict[str, Any]:
    return {
        "name": d.name,
        "ecosystem": d.ecosystem.value,
        "manifest": str(d.manifest),
        "section": d.section,
        "dev": d.is_dev,
        "current": d.specifier,
        "latest": d.latest_version,
        "update_type": d.update_type.value,
        "in_range": d.in_range,
    }


def output_dependencies(deps: list[Dependency], fmt: str, root: Path | None = None) -> None:
    if fmt == "json":
        data = [dependency_to_dict(d) for d in deps]
        console.print_json(json.dumps(data, indent=2))
    elif fmt == "yaml":
        data = [dependency_to_dict(d) for d in deps]
        console.print(yaml.dump(data, default_flow_style=False, sort_keys=False))
    else:
        from pkgver.output.tables import dependency_table
        console.print(dependency_table(deps, root=root))

"""Compare declared dependency versions against registry releases."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterable

from pkgver.config.settings import settings
from pkgver.core.classifier import classify_update, satisfies_range
from pkgver.core.errors import ManifestError
from pkgver.core.registry_client import RegistryClient
from pkgver.core.workspace import find_manifests
from pkgver.models import Ecosystem, UpdateType
from pkgver.models.dependency import Dependency
from pkgver.utils.manifest_parser import parse_manifest

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


def _check_one(dep: Dependency, client: RegistryClient) -> Dependency:
    current = dep.comparable_version
    if current is None:
        return dep

    latest = client.latest_version(dep.ecosystem, dep.name)
    dep.latest_version = latest
    if latest is None:
        dep.update_type = UpdateType.NONE
        return dep

    dep.update_type = classify_update(current, latest)
    dep.in_range = satisfies_range(dep.parsed, latest)
    return dep


def check_updates(
    dependencies: list[Dependency],
    client: RegistryClient | None = None,
    on_progress: ProgressCallback | None = None,
    max_workers: int | None = None,
) -> list[Dependency]:
    """Fetch latest versions and classify updates for a list of dependencies.

    Lookups run in a thread pool. Results keep the input order.
    """
    client = client or RegistryClient()
    total = len(dependencies)
    if not total:
        return []

    workers = max_workers or settings.max_workers
    results: list[Dependency] = []
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(_check_one, dep, client) for dep in dependencies]
        for i, future in enumerate(futures, 1):
            dep = future.result()
            if on_progress:
                on_progress(i, total, dep.name)
            results.append(dep)

    return results


def collect_dependencies(
    root: Path,
    exclude: Iterable[str] | None = None,
    ecosystem: Ecosystem | None = None,
) -> list[Dependency]:
    """Parse every manifest under root, skipping ones that fail to parse."""
    deps: list[Dependency] = []
    for path in find_manifests(root, exclude=exclude):
        try:
            found = parse_manifest(path)
        except ManifestError as e:
            logger.warning("Skipping %s", e)
            continue
        deps.extend(d for d in found if ecosystem is None or d.ecosystem == ecosystem)
    return deps


def scan_workspace(
    root: Path,
    client: RegistryClient | None = None,
    exclude: Iterable[str] | None = None,
    ecosystem: Ecosystem | None = None,
    on_progress: ProgressCallback | None = None,
) -> list[Dependency]:
    """Find manifests under root and check every dependency for updates."""
    client = client or RegistryClient()
    client.clear_cache()
    deps = collect_dependencies(root, exclude=exclude, ecosystem=ecosystem)
    return check_updates(deps, client=client, on_progress=on_progress)

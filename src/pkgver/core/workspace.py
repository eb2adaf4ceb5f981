"""Locate manifest files in a workspace."""

from __future__ import annotations

import logging
import os
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable

from pkgver.config.settings import settings
from pkgver.utils.manifest_parser import PARSERS

logger = logging.getLogger(__name__)


def normalize_pattern(pattern: str) -> str:
    """Expand a folder name or partial glob to the **/<dir>/** form."""
    pattern = pattern.replace("\\", "/").strip()
    if not pattern.startswith("**"):
        pattern = f"**/{pattern.lstrip('/')}"
    if not pattern.endswith("**") and not pattern.endswith("*"):
        pattern = f"{pattern.rstrip('/')}/**"
    return pattern


def is_excluded(rel_path: str, patterns: Iterable[str]) -> bool:
    """True if a POSIX path relative to the root falls under any pattern."""
    # Anchor at "/" so "**/vendor/**" also matches a top-level vendor dir
    candidate = "/" + rel_path.strip("/") + "/"
    for pattern in patterns:
        if fnmatch(candidate, pattern):
            return True
    return False


def find_manifests(root: Path, exclude: Iterable[str] | None = None) -> list[Path]:
    """Walk root and return supported manifest files, pruning excluded dirs."""
    patterns = [normalize_pattern(p) for p in (settings.exclude_folders if exclude is None else exclude)]
    root = root.resolve()
    found: list[Path] = []

    for dirpath, dirnames, filenames in os.walk(root):
        base = Path(dirpath)
        rel_dir = base.relative_to(root).as_posix()
        kept = []
        for d in dirnames:
            rel = d if rel_dir == "." else f"{rel_dir}/{d}"
            if is_excluded(rel, patterns):
                logger.debug("Excluded %s", rel)
                continue
            kept.append(d)
        dirnames[:] = kept

        for name in filenames:
            if name in PARSERS:
                found.append(base / name)

    found.sort()
    return found

"""Parse package manifests into Dependency records."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Callable

import yaml
from packaging.requirements import InvalidRequirement, Requirement

from pkgver.core.errors import ManifestError
from pkgver.models import Ecosystem
from pkgver.models.dependency import Dependency

logger = logging.getLogger(__name__)

NPM_SECTIONS = ("dependencies", "devDependencies", "optionalDependencies")
COMPOSER_SECTIONS = ("require", "require-dev")
PUBSPEC_SECTIONS = ("dependencies", "dev_dependencies", "dependency_overrides")
DEV_SECTIONS = frozenset({"devDependencies", "require-dev", "dev_dependencies"})

# name[extras] <specifier> ; marker   # comment
_REQUIREMENT_RE = re.compile(
    r"^(?P<name>[A-Za-z0-9][A-Za-z0-9._-]*)\s*(?P<extras>\[[^\]]*\])?\s*(?P<spec>[^;#]*?)\s*(?:[;#].*)?$"
)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(path, f"cannot read file: {e}") from e


def _load_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(_read_text(path))
    except json.JSONDecodeError as e:
        raise ManifestError(path, f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ManifestError(path, "top-level value is not an object")
    return data


def _section_deps(
    data: dict[str, Any],
    sections: tuple[str, ...],
    ecosystem: Ecosystem,
    path: Path,
    skip: Callable[[str], bool] | None = None,
) -> list[Dependency]:
    deps: list[Dependency] = []
    for section in sections:
        entries = data.get(section)
        if not isinstance(entries, dict):
            continue
        for name, spec in entries.items():
            if skip and skip(name):
                continue
            deps.append(Dependency(
                name=name,
                specifier=spec if isinstance(spec, (str, dict)) else ("" if spec is None else str(spec)),
                ecosystem=ecosystem,
                manifest=path,
                section=section,
                is_dev=section in DEV_SECTIONS,
            ))
    return deps


def parse_package_json(path: Path) -> list[Dependency]:
    return _section_deps(_load_json(path), NPM_SECTIONS, Ecosystem.NPM, path)


def _is_platform_requirement(name: str) -> bool:
    return name.lower() == "php" or name.startswith("ext-")


def parse_composer_json(path: Path) -> list[Dependency]:
    """Parse composer.json, skipping php and ext-* platform requirements."""
    return _section_deps(
        _load_json(path), COMPOSER_SECTIONS, Ecosystem.COMPOSER, path,
        skip=_is_platform_requirement,
    )


def parse_pubspec_yaml(path: Path) -> list[Dependency]:
    try:
        data = yaml.safe_load(_read_text(path))
    except yaml.YAMLError as e:
        raise ManifestError(path, f"invalid YAML: {e}") from e
    if data is None:
        return []
    if not isinstance(data, dict):
        raise ManifestError(path, "top-level value is not a mapping")
    return _section_deps(data, PUBSPEC_SECTIONS, Ecosystem.DART, path)


def split_requirement(line: str) -> tuple[str, str] | None:
    """Split a requirements.txt line into (name, raw specifier text).

    Returns None for blank lines, comments, options and local paths.
    """
    stripped = line.strip()
    if not stripped or stripped.startswith(("#", "-", ".")):
        return None
    match = _REQUIREMENT_RE.match(stripped)
    if match and (not match.group("spec") or match.group("spec")[0] in "<>=!~^"):
        return match.group("name"), match.group("spec").strip()
    try:
        req = Requirement(stripped)
    except InvalidRequirement:
        logger.debug("Skipping unparseable requirement %r", stripped)
        return None
    if req.url:
        # Direct references are not registry packages
        return None
    return req.name, str(req.specifier)


def parse_requirements_txt(path: Path) -> list[Dependency]:
    deps: list[Dependency] = []
    for line in _read_text(path).splitlines():
        parts = split_requirement(line)
        if parts is None:
            continue
        name, spec = parts
        deps.append(Dependency(
            name=name,
            specifier=spec,
            ecosystem=Ecosystem.PYPI,
            manifest=path,
            section="requirements",
        ))
    return deps


PARSERS: dict[str, Callable[[Path], list[Dependency]]] = {
    "package.json": parse_package_json,
    "composer.json": parse_composer_json,
    "requirements.txt": parse_requirements_txt,
    "pubspec.yaml": parse_pubspec_yaml,
}


def parse_manifest(path: Path) -> list[Dependency]:
    """Parse any supported manifest, dispatching on the file name."""
    parser = PARSERS.get(path.name)
    if parser is None:
        raise ManifestError(path, "unsupported manifest type")
    return parser(path)

"""Dependency records produced by manifest parsers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pkgver.models import Ecosystem, PseudoKind, UpdateType
from pkgver.models.specifier import CompositeSpecifier, PseudoSpecifier, VersionSpecifier, parse_specifier


@dataclass
class Dependency:
    name: str
    specifier: Any  # str, or a mapping for Dart composite entries
    ecosystem: Ecosystem
    manifest: Path
    section: str = ""
    is_dev: bool = False
    latest_version: str | None = None
    update_type: UpdateType = UpdateType.NONE
    in_range: bool | None = None

    @property
    def parsed(self) -> VersionSpecifier:
        return parse_specifier(self.specifier)

    @property
    def display_version(self) -> str:
        """Human-readable form of the specifier."""
        spec = self.parsed
        if isinstance(spec, PseudoSpecifier) and spec.kind != PseudoKind.ANY:
            return f"{spec.kind.value}:{spec.raw}"
        if isinstance(spec, CompositeSpecifier):
            return spec.version or str(self.specifier)
        return str(self.specifier)

    @property
    def comparable_version(self) -> str | None:
        """The string handed to the classifier, or None to skip the lookup."""
        spec = self.parsed
        if isinstance(spec, PseudoSpecifier) and spec.kind != PseudoKind.ANY:
            return None
        if isinstance(spec, CompositeSpecifier):
            return spec.version
        return str(self.specifier)

    @property
    def has_update(self) -> bool:
        return self.latest_version is not None and self.update_type != UpdateType.NONE

    @property
    def is_updatable(self) -> bool:
        return self.comparable_version is not None

"""Version specifier shapes as written in manifests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from pkgver.models import PseudoKind
from pkgver.utils.version_compare import is_range_expression


@dataclass(frozen=True)
class PlainSpecifier:
    raw: str


@dataclass(frozen=True)
class RangeSpecifier:
    raw: str


@dataclass(frozen=True)
class PseudoSpecifier:
    kind: PseudoKind
    raw: Any = ""


@dataclass(frozen=True)
class CompositeSpecifier:
    fields: dict[str, Any] = field(default_factory=dict, hash=False)

    @property
    def version(self) -> str | None:
        value = self.fields.get("version")
        return value if isinstance(value, str) else None


VersionSpecifier = Union[PlainSpecifier, RangeSpecifier, PseudoSpecifier, CompositeSpecifier]


def parse_specifier(value: Any) -> VersionSpecifier:
    """Map a raw manifest value to one specifier variant."""
    if isinstance(value, dict):
        return _parse_mapping(value)
    text = "" if value is None else str(value).strip()
    if text.lower() == "any" or text == "*":
        return PseudoSpecifier(PseudoKind.ANY, text)
    if is_range_expression(text):
        return RangeSpecifier(text)
    return PlainSpecifier(text)


def _parse_mapping(value: dict[str, Any]) -> VersionSpecifier:
    if "sdk" in value:
        return PseudoSpecifier(PseudoKind.SDK, value["sdk"])
    if "path" in value:
        return PseudoSpecifier(PseudoKind.PATH, value["path"])
    if "git" in value:
        git = value["git"]
        url = git.get("url", "") if isinstance(git, dict) else git
        return PseudoSpecifier(PseudoKind.GIT, url)
    if "version" in value:
        return CompositeSpecifier(dict(value))
    if "hosted" in value:
        hosted = value["hosted"]
        url = hosted.get("url", "") if isinstance(hosted, dict) else hosted
        return PseudoSpecifier(PseudoKind.HOSTED, url)
    return CompositeSpecifier(dict(value))

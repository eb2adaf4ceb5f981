"""Data models for pkgver."""

from __future__ import annotations

import enum


class Ecosystem(enum.Enum):
    NPM = "npm"
    COMPOSER = "composer"
    PYPI = "pypi"
    DART = "dart"

    @classmethod
    def from_str(cls, s: str) -> Ecosystem:
        for member in cls:
            if member.value == s.lower():
                return member
        raise ValueError(f"Unknown ecosystem: {s}")


class UpdateType(enum.Enum):
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    PRERELEASE = "prerelease"
    NONE = "none"


class PseudoKind(enum.Enum):
    ANY = "any"
    SDK = "sdk"
    PATH = "path"
    GIT = "git"
    HOSTED = "hosted"

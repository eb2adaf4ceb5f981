"""Exceptions raised by the manifest and update layers."""

from __future__ import annotations


class PkgverError(Exception):
    """Base class for pkgver errors."""


class ManifestError(PkgverError):
    """A manifest file could not be read or parsed."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class UpdateError(PkgverError):
    """A dependency could not be rewritten in its manifest."""

"""Rewrite a specifier to a new version, keeping its constraint operator."""

from __future__ import annotations

from typing import Any

from pkgver.utils.version_compare import OPERATOR_RE


def leading_operator(text: str) -> str:
    """Return the leading run of ~ ^ > = < characters, or ""."""
    match = OPERATOR_RE.match(text.strip())
    return match.group(0) if match else ""


def _rewrite_string(text: str, new_version: str) -> str:
    return f"{leading_operator(text)}{new_version}"


def _mapping_version(value: dict[str, Any]) -> str | None:
    version = value.get("version")
    return version if isinstance(version, str) else None


def rewrite_specifier(original: Any, new_version: str) -> Any:
    """Point a specifier at new_version, preserving its shape and operator.

    Strings stay strings. Mappings keep every key, including any git, path
    or sdk source, and only have their ``version`` field replaced; mappings
    without one come back unchanged.
    """
    if isinstance(original, str):
        return _rewrite_string(original, new_version)
    if isinstance(original, dict):
        version = _mapping_version(original)
        if version is not None:
            updated = dict(original)
            updated["version"] = _rewrite_string(version, new_version)
            return updated
    return original


def is_rewritable(value: Any) -> bool:
    """True if rewrite_specifier would change the version payload of value."""
    if isinstance(value, str):
        return True
    if isinstance(value, dict):
        return _mapping_version(value) is not None
    return False

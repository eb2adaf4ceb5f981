"""Application configuration and defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_EXCLUDE_FOLDERS: tuple[str, ...] = (
    "**/node_modules/**",
    "**/vendor/**",
    "**/venv/**",
    "**/.git/**",
    "**/build/**",
    "**/.dart_tool/**",
)


def _default_exclude_folders() -> list[str]:
    """Return exclusion globs, honouring PKGVER_EXCLUDE_FOLDERS.

    The variable holds a comma-separated list that replaces the defaults.
    """
    raw = os.environ.get("PKGVER_EXCLUDE_FOLDERS", "")
    if raw:
        return [p.strip() for p in raw.split(",") if p.strip()]
    return list(DEFAULT_EXCLUDE_FOLDERS)


def _env_url(name: str, default: str) -> str:
    return os.environ.get(name, "").rstrip("/") or default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "")
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    try:
        return max(1, int(raw)) if raw else default
    except ValueError:
        return default


@dataclass
class Settings:
    exclude_folders: list[str] = field(default_factory=_default_exclude_folders)
    npm_registry: str = field(
        default_factory=lambda: _env_url("PKGVER_NPM_REGISTRY", "https://registry.npmjs.org"))
    packagist_registry: str = field(
        default_factory=lambda: _env_url("PKGVER_PACKAGIST_REGISTRY", "https://repo.packagist.org"))
    pypi_registry: str = field(
        default_factory=lambda: _env_url("PKGVER_PYPI_REGISTRY", "https://pypi.org"))
    pub_registry: str = field(
        default_factory=lambda: _env_url("PKGVER_PUB_REGISTRY", "https://pub.dev"))
    request_timeout: float = field(default_factory=lambda: _env_float("PKGVER_REQUEST_TIMEOUT", 10.0))
    max_workers: int = field(default_factory=lambda: _env_int("PKGVER_MAX_WORKERS", 8))
    default_output: str = "table"
    user_agent: str = "pkgver (+https://pypi.org/project/pkgver/)"


# Global singleton
settings = Settings()

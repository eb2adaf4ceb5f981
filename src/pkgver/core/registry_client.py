"""Latest-version lookups against the public package registries."""

from __future__ import annotations

import logging
import re
import threading
from datetime import datetime
from typing import Any
from urllib.parse import quote

import requests

from pkgver.config.settings import Settings, settings as default_settings
from pkgver.models import Ecosystem
from pkgver.utils.version_compare import coerce_version

logger = logging.getLogger(__name__)

_UNSTABLE_RE = re.compile(r"dev|alpha|beta|RC", re.IGNORECASE)


class RegistryClient:
    """Fetches the latest published version of a package per ecosystem.

    Lookups never raise for network or payload problems; they return None.
    Results are cached for the lifetime of the client (one scan).
    """

    def __init__(self, config: Settings | None = None, session: requests.Session | None = None):
        self.config = config or default_settings
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", self.config.user_agent)
        self._cache: dict[tuple[Ecosystem, str], str | None] = {}
        self._lock = threading.Lock()

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def latest_version(self, ecosystem: Ecosystem, name: str) -> str | None:
        key = (ecosystem, name)
        with self._lock:
            if key in self._cache:
                return self._cache[key]

        fetchers = {
            Ecosystem.NPM: self.fetch_npm,
            Ecosystem.COMPOSER: self.fetch_packagist,
            Ecosystem.PYPI: self.fetch_pypi,
            Ecosystem.DART: self.fetch_pub,
        }
        version = fetchers[ecosystem](name)
        with self._lock:
            self._cache[key] = version
        return version

    def _get_json(self, url: str, context: str, name: str) -> Any | None:
        try:
            res = self.session.get(url, timeout=self.config.request_timeout)
        except requests.Timeout:
            logger.error(
                "%s request for %s timed out after %s seconds",
                context, name, self.config.request_timeout,
            )
            return None
        except requests.RequestException as exc:  # includes ConnectionError
            logger.error("%s connection error for %s: %s", context, name, exc)
            return None

        if res.status_code == 404:
            logger.warning("Package %s not found on %s.", name, context)
            return None
        if res.status_code != 200:
            logger.error("%s returned HTTP %s for %s", context, res.status_code, name)
            return None
        try:
            return res.json()
        except ValueError:
            logger.error("%s returned a non-JSON payload for %s", context, name)
            return None

    def fetch_npm(self, name: str) -> str | None:
        # Scoped names keep their "@" but the slash must be encoded
        url = f"{self.config.npm_registry}/{quote(name, safe='@')}/latest"
        data = self._get_json(url, "npm", name)
        if isinstance(data, dict) and data.get("version"):
            return str(data["version"])
        return None

    def fetch_pypi(self, name: str) -> str | None:
        url = f"{self.config.pypi_registry}/pypi/{quote(name)}/json"
        data = self._get_json(url, "PyPI", name)
        if isinstance(data, dict):
            version = (data.get("info") or {}).get("version")
            if version:
                return str(version)
        return None

    def fetch_pub(self, name: str) -> str | None:
        url = f"{self.config.pub_registry}/api/packages/{quote(name)}"
        data = self._get_json(url, "pub.dev", name)
        if isinstance(data, dict):
            version = (data.get("latest") or {}).get("version")
            if version:
                return str(version)
        return None

    def fetch_packagist(self, name: str) -> str | None:
        if "/" not in name:
            logger.warning("Invalid composer package name format: %s", name)
            return None
        clean = name.strip().lower()
        url = f"{self.config.packagist_registry}/p2/{clean}.json"
        data = self._get_json(url, "Packagist", clean)
        if not isinstance(data, dict):
            return None
        versions = (data.get("packages") or {}).get(clean)
        if not isinstance(versions, list) or not versions:
            logger.warning("No versions found for %s on Packagist.", clean)
            return None
        latest = pick_packagist_version(versions)
        if latest is None:
            logger.warning("No stable version found for %s on Packagist.", clean)
        return latest


def _published_at(entry: dict) -> float | None:
    raw = entry.get("time")
    if not raw:
        return None
    try:
        return datetime.fromisoformat(str(raw).replace("Z", "+00:00")).timestamp()
    except ValueError:
        return None


def pick_packagist_version(entries: list[dict]) -> str | None:
    """Choose the newest stable release from a Packagist p2 version list.

    The most recently published stable release wins; without publish times
    the highest coerced version wins. A dev or pre-release is returned only
    when no stable release exists.
    """
    best_stable: str | None = None
    best_stable_key: tuple = ()
    fallback: str | None = None

    for entry in entries:
        version = entry.get("version")
        normalized = entry.get("version_normalized")
        if not version or not normalized:
            continue
        coerced = coerce_version(normalized)
        if coerced is None:
            continue
        if _UNSTABLE_RE.search(version) or coerced.prerelease:
            if fallback is None:
                fallback = version
            continue
        published = _published_at(entry)
        key = (published is not None, published or 0.0, coerced.as_semver())
        if best_stable is None or key > best_stable_key:
            best_stable = version
            best_stable_key = key

    return best_stable or fallback

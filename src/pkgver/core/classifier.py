"""Classify the update between a current specifier and a latest version."""

from __future__ import annotations

import logging

from pkgver.models import UpdateType
from pkgver.models.specifier import (
    CompositeSpecifier,
    PlainSpecifier,
    PseudoSpecifier,
    RangeSpecifier,
    VersionSpecifier,
    parse_specifier,
)
from pkgver.utils.version_compare import (
    NormalizedVersion,
    coerce_version,
    is_valid_version,
    parse_range,
    satisfies,
)

logger = logging.getLogger(__name__)


def classify_update(current: str, latest: str) -> UpdateType:
    """Classify the update from a current specifier string to a latest version.

    Leading constraint operators are ignored. Returns UpdateType.NONE when
    the comparison is inconclusive, when current is "any" or "*", or when
    latest is not strictly newer than current.
    """
    cur = coerce_version(current)
    lat = coerce_version(latest)

    if cur is None or lat is None or not lat > cur:
        if current.strip().lower() == "any" or current.strip() == "*":
            return UpdateType.NONE
        # Every path through this block ends in NONE; the steps are kept in
        # the documented order of the classification algorithm.
        valid_range = parse_range(current) is not None
        if valid_range and satisfies(lat, current):
            logger.debug("%s satisfies range %s", latest, current)
        elif not valid_range and not is_valid_version(current):
            return UpdateType.NONE
        if cur is None or lat is None or not lat > cur:
            return UpdateType.NONE

    return _diff(cur, lat)


def _diff(cur: NormalizedVersion, lat: NormalizedVersion) -> UpdateType:
    if lat.major != cur.major:
        return UpdateType.MAJOR
    if lat.minor != cur.minor:
        return UpdateType.MINOR
    if lat.patch != cur.patch:
        return UpdateType.PATCH
    if lat.prerelease != cur.prerelease:
        return UpdateType.PRERELEASE
    return UpdateType.NONE


def classify_specifier(spec: VersionSpecifier, latest: str) -> UpdateType:
    """Classify any specifier shape against a latest version."""
    if isinstance(spec, PseudoSpecifier):
        return UpdateType.NONE
    if isinstance(spec, CompositeSpecifier):
        if spec.version is None:
            return UpdateType.NONE
        return classify_specifier(parse_specifier(spec.version), latest)
    if isinstance(spec, (PlainSpecifier, RangeSpecifier)):
        return classify_update(spec.raw, latest)
    raise TypeError(f"Unsupported specifier: {spec!r}")


def satisfies_range(spec: VersionSpecifier, latest: str) -> bool | None:
    """Whether latest falls inside a range specifier; None for non-ranges."""
    if isinstance(spec, CompositeSpecifier) and spec.version is not None:
        spec = parse_specifier(spec.version)
    if not isinstance(spec, RangeSpecifier):
        return None
    return satisfies(coerce_version(latest), spec.raw)

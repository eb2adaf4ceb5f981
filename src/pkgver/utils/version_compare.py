"""Version coercion and semver comparison utilities."""

from __future__ import annotations

import re
from dataclasses import dataclass

import semantic_version

# Leading constraint run, e.g. "^", "~", ">=", "~=", "==".
OPERATOR_RE = re.compile(r"^[~^>=<]+")

# First numeric run not preceded by a digit, with an optional attached
# pre-release ("-alpha.1", or letters directly after the run as in "1.0rc1").
_COERCE_RE = re.compile(
    r"(?<!\d)(\d{1,16})(?:\.(\d{1,16}))?(?:\.(\d{1,16}))?"
    r"(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)|([A-Za-z][0-9A-Za-z]*(?:\.[0-9A-Za-z-]+)*))?"
)

# Separators between comparator clauses of a range expression.
_CLAUSE_SPLIT_RE = re.compile(r"\s*(?:,|\|\|)\s*|\s+")
_CLAUSE_OPERATOR_RE = re.compile(r"^(?:[~^]|[<>]=?|==?|!=|~=)")
# ">= 1.0" is one clause, not two
_OPERATOR_GAP_RE = re.compile(r"([~^<>=!]=?)\s+(?=[\dvVxX*])")


@dataclass(frozen=True)
class NormalizedVersion:
    """A (major, minor, patch) triple with an optional pre-release tag."""

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()

    def as_semver(self) -> semantic_version.Version:
        return semantic_version.Version(
            major=self.major,
            minor=self.minor,
            patch=self.patch,
            prerelease=self.prerelease,
        )

    def __lt__(self, other: NormalizedVersion) -> bool:
        return self.as_semver() < other.as_semver()

    def __le__(self, other: NormalizedVersion) -> bool:
        return self.as_semver() <= other.as_semver()

    def __gt__(self, other: NormalizedVersion) -> bool:
        return self.as_semver() > other.as_semver()

    def __ge__(self, other: NormalizedVersion) -> bool:
        return self.as_semver() >= other.as_semver()

    def __str__(self) -> str:
        return str(self.as_semver())


def strip_operator(text: str) -> str:
    """Remove the leading constraint operator run and surrounding whitespace."""
    return OPERATOR_RE.sub("", text.strip()).strip()


def coerce_version(text: str | None) -> NormalizedVersion | None:
    """Best-effort extraction of a comparable version from free text.

    Missing minor/patch components default to 0. Returns None when no
    numeric run is present.
    """
    if not text:
        return None
    match = _COERCE_RE.search(strip_operator(str(text)))
    if match is None:
        return None
    major, minor, patch, dashed, attached = match.groups()
    pre = dashed or attached
    return NormalizedVersion(
        major=int(major),
        minor=int(minor or 0),
        patch=int(patch or 0),
        prerelease=_prerelease_identifiers(pre),
    )


def _prerelease_identifiers(pre: str | None) -> tuple[str, ...]:
    if not pre:
        return ()
    # semver forbids leading zeroes in numeric identifiers
    return tuple(str(int(part)) if part.isdigit() else part for part in pre.split("."))


def parse_version(v: str) -> semantic_version.Version | None:
    """Parse a strict semver string, returning None on failure."""
    try:
        return semantic_version.Version(v)
    except ValueError:
        # Try stripping leading 'v'
        if v.startswith("v"):
            try:
                return semantic_version.Version(v[1:])
            except ValueError:
                pass
    return None


def is_valid_version(text: str) -> bool:
    """True if the text, minus a leading operator, is a strict semver version."""
    return parse_version(strip_operator(text)) is not None


def _close_operator_gaps(text: str) -> str:
    return _OPERATOR_GAP_RE.sub(r"\1", text.strip())


def is_range_expression(text: str) -> bool:
    """True if the text carries more than one comparator clause."""
    s = _close_operator_gaps(text)
    if "||" in s or " - " in s:
        return True
    clauses = [c for c in _CLAUSE_SPLIT_RE.split(s) if c]
    if len(clauses) < 2:
        return False
    return any(_CLAUSE_OPERATOR_RE.match(c) for c in clauses)


def parse_range(text: str) -> semantic_version.base.BaseSpec | None:
    """Parse an npm-style range, falling back to comma-separated clauses.

    Returns None for anything neither parser accepts.
    """
    s = _close_operator_gaps(text)
    if not s:
        return None
    # NpmSpec surfaces some malformed hyphen ranges as AttributeError
    try:
        return semantic_version.NpmSpec(s)
    except (ValueError, AttributeError, TypeError):
        pass
    try:
        return semantic_version.SimpleSpec(_CLAUSE_SPLIT_RE.sub(",", s))
    except (ValueError, AttributeError, TypeError):
        return None


def satisfies(version: NormalizedVersion | None, range_text: str) -> bool:
    """True if version lies inside the range expression."""
    if version is None:
        return False
    spec = parse_range(range_text)
    if spec is None:
        return False
    return spec.match(version.as_semver())

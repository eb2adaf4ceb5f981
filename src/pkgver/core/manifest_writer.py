"""Write rewritten specifiers back into manifest files.

Only the specifier text at its source location changes; every other byte of
the manifest (formatting, key order, comments, line endings) is preserved.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from packaging.utils import canonicalize_name

from pkgver.core.errors import UpdateError
from pkgver.core.rewriter import is_rewritable, rewrite_specifier
from pkgver.models import Ecosystem
from pkgver.models.dependency import Dependency

logger = logging.getLogger(__name__)

_SCALAR_RE = r"""(?P<quote>['"]?)(?P<value>.*?)(?P=quote)(?P<tail>\s*(?:#.*)?)$"""


def _read(path: Path) -> str:
    try:
        return path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise UpdateError(f"Cannot read {path}: {e}") from e


def _write(path: Path, text: str) -> None:
    try:
        path.write_bytes(text.encode("utf-8"))
    except OSError as e:
        raise UpdateError(f"Cannot write {path}: {e}") from e


def _json_str(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


_JSON_KEY_OBJECT_RE = re.compile(r'"((?:[^"\\]|\\.)*)"\s*:\s*\{')


def _string_end(text: str, start: int) -> int:
    i = start + 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == '"':
            return i + 1
        i += 1
    return len(text)


def _closing_brace(text: str, start: int) -> int:
    depth = 0
    i = start
    while i < len(text):
        ch = text[i]
        if ch == '"':
            i = _string_end(text, i)
            continue
        if ch in "{[":
            depth += 1
        elif ch in "}]":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return len(text)


def json_section_span(text: str, section: str) -> tuple[int, int] | None:
    """Return the (start, end) offsets of a top-level object member's value."""
    depth = 0
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == '"':
            if depth == 1:
                match = _JSON_KEY_OBJECT_RE.match(text, i)
                if match and json.loads(f'"{match.group(1)}"') == section:
                    start = match.end() - 1
                    return start, _closing_brace(text, start)
            i = _string_end(text, i)
            continue
        if ch in "{[":
            depth += 1
        elif ch in "}]":
            depth -= 1
        i += 1
    return None


def update_json_text(text: str, name: str, old: str, new: str, section: str | None = None) -> str:
    """Replace the "name": "old" pair with "name": "new".

    With a section, only that top-level object is searched. Exactly one
    pair is rewritten.
    """
    start, end = 0, len(text)
    if section:
        span = json_section_span(text, section)
        if span is None:
            raise UpdateError(f"Section {section} not found")
        start, end = span
    pattern = re.compile(rf"({re.escape(_json_str(name))}\s*:\s*){re.escape(_json_str(old))}")
    match = pattern.search(text, start, end)
    if match is None:
        raise UpdateError(f"Package {name} with version {old!r} not found")
    return f"{text[:match.start()]}{match.group(1)}{_json_str(new)}{text[match.end():]}"


def _requirement_name_pattern(name: str) -> str:
    parts = canonicalize_name(name).split("-")
    return "[-_.]+".join(re.escape(p) for p in parts)


def update_requirements_text(text: str, name: str, old: str, new_version: str) -> tuple[str, str]:
    """Rewrite the first requirement line for name. Returns (text, new specifier)."""
    line_re = re.compile(
        rf"^(?P<head>\s*{_requirement_name_pattern(name)}(?![A-Za-z0-9._-])\s*(?:\[[^\]]*\])?\s*)"
        rf"(?P<spec>[<>=!~^][^;#\r\n]*?)?(?P<tail>\s*(?:[;#].*)?)$",
        re.IGNORECASE,
    )
    lines = text.splitlines(keepends=True)
    for i, line in enumerate(lines):
        body = line.rstrip("\r\n")
        ending = line[len(body):]
        match = line_re.match(body)
        if match is None:
            continue
        current = match.group("spec") or old
        # PEP 508 needs an operator; an unpinned requirement gets pinned
        new_spec = rewrite_specifier(current, new_version) if current else f"=={new_version}"
        lines[i] = f"{match.group('head')}{new_spec}{match.group('tail')}{ending}"
        return "".join(lines), new_spec
    raise UpdateError(f"Package {name} not found")


def _is_section_header(line: str) -> bool:
    return bool(line) and not line[0].isspace() and not line.startswith("#")


def update_pubspec_text(text: str, section: str, name: str, new_version: str, original: Any) -> tuple[str, Any]:
    """Rewrite name's version inside a pubspec section. Returns (text, new specifier)."""
    new_spec = rewrite_specifier(original, new_version)
    target = new_spec["version"] if isinstance(new_spec, dict) else new_spec

    lines = text.splitlines(keepends=True)
    header_re = re.compile(rf"^{re.escape(section)}\s*:\s*(?:#.*)?$")
    entry_re = re.compile(rf"^(?P<head>(?P<indent>[ \t]+){re.escape(name)}\s*:[ \t]*)(?P<rest>.*)$")

    in_section = False
    entry_indent: int | None = None
    for i, line in enumerate(lines):
        body = line.rstrip("\r\n")
        if _is_section_header(body):
            in_section = bool(header_re.match(body))
            entry_indent = None
            continue
        if not in_section or not body.strip() or body.lstrip().startswith("#"):
            continue
        indent = len(body) - len(body.lstrip())
        if entry_indent is None:
            entry_indent = indent
        # Keys nested under another entry (path:, version:) are not packages
        if indent != entry_indent:
            continue
        match = entry_re.match(body)
        if match is None:
            continue
        rest = match.group("rest")
        if rest and not rest.startswith("#"):
            if isinstance(original, dict):
                raise UpdateError(f"Unsupported inline mapping for {name}")
            scalar = re.match(_SCALAR_RE, rest)
            lines[i] = _replace_scalar(line, match.group("head"), scalar, target)
            return "".join(lines), new_spec
        return _update_child_version(lines, i, len(match.group("indent")), target, name), new_spec

    raise UpdateError(f"Package {name} not found in {section}")


def _replace_scalar(line: str, head: str, scalar: re.Match, value: str) -> str:
    body = line.rstrip("\r\n")
    ending = line[len(body):]
    quote = scalar.group("quote")
    return f"{head}{quote}{value}{quote}{scalar.group('tail')}{ending}"


def _update_child_version(lines: list[str], start: int, indent: int, value: str, name: str) -> str:
    child_re = re.compile(r"^(?P<head>(?P<indent>[ \t]+)version\s*:[ \t]*)(?P<rest>.*)$")
    for j in range(start + 1, len(lines)):
        body = lines[j].rstrip("\r\n")
        if not body.strip() or body.lstrip().startswith("#"):
            continue
        if len(body) - len(body.lstrip()) <= indent:
            break
        match = child_re.match(body)
        if match and match.group("rest"):
            scalar = re.match(_SCALAR_RE, match.group("rest"))
            lines[j] = _replace_scalar(lines[j], match.group("head"), scalar, value)
            return "".join(lines)
    raise UpdateError(f"No version field found for {name}")


def apply_update(dependency: Dependency, new_version: str, dry_run: bool = False) -> Any:
    """Rewrite dependency's specifier in its manifest to point at new_version.

    Returns the new specifier. Raises UpdateError when the entry is not
    updatable or cannot be located in the file.
    """
    if not new_version:
        raise UpdateError(f"Cannot update {dependency.name}: missing latest version information")
    if not is_rewritable(dependency.specifier):
        raise UpdateError(f"Cannot update {dependency.name}: {dependency.display_version} is not a registry version")

    path = dependency.manifest
    text = _read(path)

    if dependency.ecosystem in (Ecosystem.NPM, Ecosystem.COMPOSER):
        new_spec = rewrite_specifier(dependency.specifier, new_version)
        updated = update_json_text(text, dependency.name, dependency.specifier, new_spec, dependency.section)
    elif dependency.ecosystem == Ecosystem.PYPI:
        updated, new_spec = update_requirements_text(text, dependency.name, dependency.specifier, new_version)
    elif dependency.ecosystem == Ecosystem.DART:
        updated, new_spec = update_pubspec_text(
            text, dependency.section, dependency.name, new_version, dependency.specifier,
        )
    else:
        raise UpdateError(f"Unsupported ecosystem: {dependency.ecosystem}")

    if not dry_run:
        _write(path, updated)
        logger.info("Updated %s in %s to %s", dependency.name, path, new_version)
    return new_spec

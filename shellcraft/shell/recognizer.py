"""
Entity recognizer — pure, line-level pattern matching for shell scripts.

Recognition is an ordered chain of matchers: the first matcher that accepts a
trimmed line wins.  A line that no matcher accepts is simply not promoted to
an entity; that is never an error.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional

from ..paths import expand_home
from .entities import (
    AliasCategory, EnvironmentVariable, PathEntry, ShellAlias,
    ShellFunction, SourceDirective,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

ALIAS_PATTERN = re.compile(r"^alias\s+([^\s=]+)=(.+)$")
COMMENTED_ALIAS_PATTERN = re.compile(r"^#\s*alias\s+([^\s=]+)=(.+)$")

FUNCTION_START_PATTERN = re.compile(r"^(\w[\w-]*)\(\)\s*\{")
FUNCTION_KEYWORD_PATTERN = re.compile(r"^function\s+(\w[\w-]*)\s*(?:\(\))?\s*\{")

PATH_EXPORT_PATTERN = re.compile(r"^export\s+PATH=(.+)$")
PATH_ASSIGN_PATTERN = re.compile(r"^PATH=(.+)$")
_PATH_REFERENCE = re.compile(r"\$(?:PATH\b|\{PATH\})")

EXPORT_PATTERN = re.compile(r"^export\s+(\w+)=(.+)$")

SOURCE_PATTERN = re.compile(r"^(?:source|\.)\s+(.+)$")
GUARDED_SOURCE_PATTERN = re.compile(r"^\[\[?.*?\]\]?\s*&&\s*(.+)$")

KEYCHAIN_PATTERN = re.compile(r"\$\(\s*security\s+find-generic-password")
_KEYCHAIN_MARKER = re.compile(r"\$\(\s*security\b")


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------

def unquote(value: str) -> str:
    """Strip one pair of matching surrounding quotes from *value*.

    Unbalanced or mismatched quote characters are left untouched.
    """
    s = value.strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in ("'", '"'):
        return s[1:-1]
    return s


def is_keychain_derived(value: str) -> bool:
    """True if *value* reads a secret via a ``$(security ...)`` substitution."""
    return _KEYCHAIN_MARKER.search(value) is not None


def split_path_value(value: str) -> list[str]:
    """Split a PATH value into directories, dropping ``$PATH`` references.

    Stray quotes appear when a quoted group spans several components, e.g.
    ``"$HOME/bin:$PATH":/usr/local/bin``; they are removed per component.
    """
    dirs: list[str] = []
    for component in value.split(":"):
        cleaned = unquote(component.strip()).replace('"', "").replace("'", "")
        if not cleaned or cleaned in ("$PATH", "${PATH}"):
            continue
        dirs.append(cleaned)
    return dirs


# ---------------------------------------------------------------------------
# Single-line matchers
# ---------------------------------------------------------------------------

def parse_alias(line: str) -> Optional[tuple[str, str, bool]]:
    """Return ``(name, expansion, enabled)`` for an alias line."""
    trimmed = line.strip()
    match = ALIAS_PATTERN.fullmatch(trimmed)
    if match:
        return match.group(1), unquote(match.group(2)), True
    match = COMMENTED_ALIAS_PATTERN.fullmatch(trimmed)
    if match:
        return match.group(1), unquote(match.group(2)), False
    return None


def parse_function_start(line: str) -> Optional[str]:
    """Return the function name if *line* opens a function definition."""
    trimmed = line.strip()
    match = FUNCTION_START_PATTERN.match(trimmed) or FUNCTION_KEYWORD_PATTERN.match(trimmed)
    return match.group(1) if match else None


def parse_path_assignment(line: str) -> Optional[list[str]]:
    """Return the directories of an ``export PATH=`` or ``PATH=...$PATH`` line."""
    trimmed = line.strip()
    match = PATH_EXPORT_PATTERN.fullmatch(trimmed)
    if match:
        return split_path_value(match.group(1))
    match = PATH_ASSIGN_PATTERN.fullmatch(trimmed)
    if match and _PATH_REFERENCE.search(match.group(1)):
        return split_path_value(match.group(1))
    return None


def parse_export(line: str) -> Optional[tuple[str, str]]:
    """Return ``(key, value)`` for an ``export KEY=VALUE`` line."""
    match = EXPORT_PATTERN.fullmatch(line.strip())
    if not match:
        return None
    return match.group(1), unquote(match.group(2))


def parse_source(line: str, home: Optional[str] = None) -> Optional[tuple[str, str, bool]]:
    """Return ``(target, resolved_path, guarded)`` for a source directive.

    Handles ``source FILE``, ``. FILE`` and the guarded forms
    ``[ -f FILE ] && source FILE`` / ``[[ ... ]] && . FILE``.
    """
    candidate = line.strip()
    guarded = False
    while candidate.startswith("["):
        guard = GUARDED_SOURCE_PATTERN.match(candidate)
        if guard is None:
            return None
        candidate = guard.group(1).strip()
        guarded = True

    match = SOURCE_PATTERN.match(candidate)
    if not match:
        return None
    target = unquote(re.split(r"\s+#", match.group(1), maxsplit=1)[0])
    if not target:
        return None
    return target, expand_home(target, home), guarded


# ---------------------------------------------------------------------------
# Function extent
# ---------------------------------------------------------------------------

def _brace_delta(line: str) -> int:
    return line.count("{") - line.count("}")


def strip_common_indentation(lines: list[str]) -> str:
    """Remove the common leading whitespace from *lines* and join them."""
    non_empty = [l for l in lines if l.strip()]
    if not non_empty:
        return "\n".join(lines)
    indent = min(len(l) - len(l.lstrip(" \t")) for l in non_empty)
    if indent == 0:
        return "\n".join(lines)
    return "\n".join("" if not l.strip() else l[indent:] for l in lines)


def _description_above(lines: list[str], index: int) -> str:
    if index <= 0:
        return ""
    previous = lines[index - 1].strip()
    if previous.startswith("#"):
        return previous[1:].strip()
    return ""


def scan_function(
    lines: list[str],
    start: int,
    name: str,
    source_file: str = "",
) -> tuple[ShellFunction, int]:
    """Collect a function body by brace-depth tracking.

    Returns the function and the index of its closing-brace line.  An
    unterminated function extends to the last line of *lines*.
    """
    first = lines[start]
    depth = _brace_delta(first)
    description = _description_above(lines, start)

    if depth <= 0:
        open_idx = first.find("{")
        close_idx = first.rfind("}")
        body = first[open_idx + 1:close_idx].strip() if open_idx < close_idx else ""
        return ShellFunction(
            name=name,
            body=body,
            source_file=source_file,
            line_range=(start, start),
            description=description,
        ), start

    body_lines: list[str] = []
    end = len(lines) - 1
    for index in range(start + 1, len(lines)):
        depth += _brace_delta(lines[index])
        if depth <= 0:
            end = index
            break
        body_lines.append(lines[index].rstrip("\r"))
    else:
        logger.debug("[ShellParse] Function %s is not closed before EOF", name)

    return ShellFunction(
        name=name,
        body=strip_common_indentation(body_lines),
        source_file=source_file,
        line_range=(start, end),
        description=description,
    ), end


# ---------------------------------------------------------------------------
# Ordered recognition chain
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LineMatch:
    """Result of recognising one line.

    ``kind`` is one of ``alias``, ``function``, ``path``, ``export`` or
    ``source``.  ``value`` is the entity; for ``path`` it is a list of
    :class:`PathEntry`; for ``function`` it is the function name, since the
    extent needs the following lines (see :func:`scan_function`).
    """
    kind: str
    value: object


def _match_alias(line: str, index: int, source_file: str, home: Optional[str]):
    parsed = parse_alias(line)
    if parsed is None:
        return None
    name, expansion, enabled = parsed
    return ShellAlias(
        name=name,
        expansion=expansion,
        source_file=source_file,
        source_line=index,
        category=AliasCategory.infer(name, expansion),
        enabled=enabled,
    )


def _match_function(line: str, index: int, source_file: str, home: Optional[str]):
    return parse_function_start(line)


def _match_path(line: str, index: int, source_file: str, home: Optional[str]):
    dirs = parse_path_assignment(line)
    if dirs is None:
        return None
    return [
        PathEntry(
            path=d,
            order=order,
            source_file=source_file,
            source_line=index,
            expanded_path=expand_home(d, home),
        )
        for order, d in enumerate(dirs)
    ]


def _match_export(line: str, index: int, source_file: str, home: Optional[str]):
    parsed = parse_export(line)
    if parsed is None or parsed[0] == "PATH":
        return None
    key, value = parsed
    return EnvironmentVariable(
        key=key,
        value=value,
        source_file=source_file,
        source_line=index,
        keychain_derived=is_keychain_derived(value),
    )


def _match_source(line: str, index: int, source_file: str, home: Optional[str]):
    parsed = parse_source(line, home)
    if parsed is None:
        return None
    target, resolved, guarded = parsed
    return SourceDirective(
        target=target,
        resolved_path=resolved,
        source_file=source_file,
        source_line=index,
        guarded=guarded,
    )


_Matcher = Callable[[str, int, str, Optional[str]], object]

MATCHERS: list[tuple[str, _Matcher]] = [
    ("alias", _match_alias),
    ("function", _match_function),
    ("path", _match_path),
    ("export", _match_export),
    ("source", _match_source),
]


def recognize_line(
    line: str,
    index: int = 0,
    source_file: str = "",
    home: Optional[str] = None,
) -> Optional[LineMatch]:
    """Run the matcher chain over one line; first match wins."""
    if not line.strip():
        return None
    for kind, matcher in MATCHERS:
        value = matcher(line, index, source_file, home)
        if value is not None:
            return LineMatch(kind=kind, value=value)
    return None

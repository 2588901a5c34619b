"""
Git config codec — parses ``[section "subsection"]`` / ``key = value`` text
into a :class:`GitConfig` and regenerates canonical text from the model.

The round trip is lossy but semantically faithful: comments, blank-line
placement and the interleaving of repeated headers are not reproduced, only
the logical key/value content.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from ..fileio import read_text, write_text
from .model import GitConfig, GitConfigEntry, GitConfigSection

logger = logging.getLogger(__name__)

DEFAULT_PATH = "~/.gitconfig"

_ESCAPES = {"n": "\n", "t": "\t", "b": "\b"}
_ENCODE = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t", "\b": "\\b"}


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------

def decode_value(raw: str) -> str:
    """Decode the text to the right of ``=``.

    Inline comments (``#`` or ``;``) end the value only outside quotes.
    Double quotes delimit and are dropped; single quotes protect comment
    characters but are kept.  Unquoted surrounding whitespace is trimmed.
    """
    chars: list[tuple[str, bool]] = []   # (char, quoted)
    quote: Optional[str] = None
    i = 0
    while i < len(raw):
        ch = raw[i]
        if ch == "\\" and i + 1 < len(raw):
            nxt = raw[i + 1]
            chars.append((_ESCAPES.get(nxt, nxt), True))
            i += 2
            continue
        if quote is None and ch in "#;":
            break
        if ch == '"' and quote in (None, '"'):
            quote = None if quote else '"'
            i += 1
            continue
        if ch == "'" and quote in (None, "'"):
            quote = None if quote else "'"
        chars.append((ch, quote is not None))
        i += 1

    start, end = 0, len(chars)
    while start < end and not chars[start][1] and chars[start][0].isspace():
        start += 1
    while end > start and not chars[end - 1][1] and chars[end - 1][0].isspace():
        end -= 1
    return "".join(ch for ch, _ in chars[start:end])


def encode_value(value: str) -> str:
    """Escape and, where needed, quote *value* so it decodes to itself."""
    encoded = "".join(_ENCODE.get(ch, ch) for ch in value)
    if value != value.strip() or "#" in value or ";" in value:
        return f'"{encoded}"'
    return encoded


# ---------------------------------------------------------------------------
# Headers and entries
# ---------------------------------------------------------------------------

def _parse_section_header(line: str) -> Optional[tuple[str, Optional[str]]]:
    """Parse ``[name]`` or ``[name "subsection"]``; None if malformed."""
    close = -1
    in_quote = escaped = False
    for i in range(1, len(line)):
        ch = line[i]
        if escaped:
            escaped = False
        elif in_quote and ch == "\\":
            escaped = True
        elif ch == '"':
            in_quote = not in_quote
        elif ch == "]" and not in_quote:
            close = i
            break
    if close == -1:
        return None

    trailing = line[close + 1:].strip()
    if trailing and trailing[0] not in "#;":
        return None

    inner = line[1:close].strip()
    quote = inner.find('"')
    if quote == -1:
        return (inner, None) if inner else None

    name = inner[:quote].strip()
    if not name or len(inner) - quote < 2 or not inner.endswith('"'):
        return None

    sub: list[str] = []
    escaped = False
    for ch in inner[quote + 1:-1]:
        if escaped:
            sub.append(ch)
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == '"':
            return None
        else:
            sub.append(ch)
    if escaped:
        return None
    return name, ("".join(sub) or None)


def _parse_entry(line: str) -> Optional[GitConfigEntry]:
    key, sep, rest = line.partition("=")
    if not sep:
        # Bare key: boolean true in git, modelled as an empty value.
        key = re.split(r"[#;]", line, maxsplit=1)[0].strip()
        return GitConfigEntry(key, "") if key else None
    key = key.strip()
    if not key:
        return None
    return GitConfigEntry(key, decode_value(rest))


def _format_header(section: GitConfigSection) -> str:
    if section.subsection is None:
        return f"[{section.name}]"
    escaped = section.subsection.replace("\\", "\\\\").replace('"', '\\"')
    return f'[{section.name} "{escaped}"]'


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------

def parse_git_config(text: str) -> GitConfig:
    """Parse git config text into one section per (name, subsection)."""
    config = GitConfig()
    by_identity: dict[tuple[str, Optional[str]], GitConfigSection] = {}
    current: Optional[GitConfigSection] = None

    for lineno, raw in enumerate(text.split("\n"), start=1):
        line = raw.strip()
        if not line or line[0] in "#;":
            continue

        if line.startswith("["):
            header = _parse_section_header(line)
            if header is None:
                logger.warning(
                    "[GitConfig] Skipping malformed section header on line %d: %s",
                    lineno, line,
                )
                current = None
                continue
            current = by_identity.get(header)
            if current is None:
                current = GitConfigSection(name=header[0], subsection=header[1])
                by_identity[header] = current
                config.sections.append(current)
            continue

        if current is None:
            logger.debug("[GitConfig] Ignoring entry outside a section on line %d", lineno)
            continue

        entry = _parse_entry(line)
        if entry is None:
            logger.warning("[GitConfig] Skipping entry with empty key on line %d", lineno)
            continue
        current.entries.append(entry)

    return config


def serialize_git_config(config: GitConfig) -> str:
    """Canonical text: one header per logical section, tab-indented entries,
    a blank line between sections and a single trailing newline."""
    lines: list[str] = []
    for section in config.logical_sections():
        if lines:
            lines.append("")
        lines.append(_format_header(section))
        lines.extend(
            f"\t{entry.key} = {encode_value(entry.value)}" for entry in section.entries
        )
    return "\n".join(lines) + "\n" if lines else ""


def read_git_config(path: str = DEFAULT_PATH) -> GitConfig:
    return parse_git_config(read_text(path))


def write_git_config(config: GitConfig, path: str = DEFAULT_PATH, **write_kwargs) -> None:
    """Serialize *config* and write it atomically (see :func:`fileio.write_text`)."""
    write_text(path, serialize_git_config(config), **write_kwargs)
    logger.info("[GitConfig] Wrote %d sections to %s", len(config.logical_sections()), path)

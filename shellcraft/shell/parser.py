"""
Shell config parser — runs the recognizer over whole files and follows
``source`` / ``.`` directives into the files they load.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Iterable, Optional

from ..editing.line_buffer import LineBuffer
from ..fileio import FileIOError, read_text
from ..paths import abbreviate_home, expand_home
from .entities import ParsedShellConfig
from .recognizer import recognize_line, scan_function

logger = logging.getLogger(__name__)

DEFAULT_FILES = ["~/.zshrc", "~/.zprofile"]


def parse_buffer(
    buffer: LineBuffer,
    source_file: str = "",
    home: Optional[str] = None,
) -> ParsedShellConfig:
    """Recognise every entity in one buffer.

    Source directives are collected but not followed.
    """
    config = ParsedShellConfig()
    lines = buffer.lines
    index = 0

    while index < len(lines):
        match = recognize_line(lines[index], index, source_file, home)
        if match is None:
            index += 1
            continue

        if match.kind == "alias":
            config.aliases.append(match.value)
        elif match.kind == "function":
            function, end = scan_function(lines, index, match.value, source_file)
            config.functions.append(function)
            index = end + 1
            continue
        elif match.kind == "path":
            config.path_entries.extend(match.value)
        elif match.kind == "export":
            config.environment_variables.append(match.value)
        elif match.kind == "source":
            config.sources.append(match.value)
        index += 1

    return config


def parse_text(text: str, source_file: str = "", home: Optional[str] = None) -> ParsedShellConfig:
    """Parse raw text; the resulting buffer is stored under *source_file*."""
    buffer = LineBuffer.from_text(text)
    config = parse_buffer(buffer, source_file, home)
    config.buffers[source_file] = buffer
    return config


class ShellConfigParser:
    """Parse a set of shell startup files, following sourced files.

    Parameters
    ----------
    reader:
        Callable returning a file's text; defaults to :func:`fileio.read_text`.
    exists:
        Existence predicate for resolved source targets.
    home:
        Home directory override (tests).
    """

    def __init__(
        self,
        reader: Callable[[str], str] = read_text,
        exists: Callable[[str], bool] = os.path.isfile,
        home: Optional[str] = None,
    ) -> None:
        self._reader = reader
        self._exists = exists
        self._home = home

    def parse(self, files: Optional[Iterable[str]] = None) -> ParsedShellConfig:
        """Parse every existing file in *files* (default ``~/.zshrc``,
        ``~/.zprofile``).  Unreadable top-level files raise FileIOError."""
        config = ParsedShellConfig()
        visited: set[str] = set()

        for label in files if files is not None else DEFAULT_FILES:
            real = expand_home(label, self._home)
            if real in visited or not self._exists(real):
                continue
            visited.add(real)
            self._parse_file(label, real, config, visited)

        return config

    def parse_single(self, path: str) -> ParsedShellConfig:
        """Parse one file without following its source directives."""
        real = expand_home(path, self._home)
        return parse_text(self._reader(real), path, self._home)

    def _parse_file(
        self,
        label: str,
        real: str,
        config: ParsedShellConfig,
        visited: set[str],
    ) -> None:
        parsed = parse_text(self._reader(real), label, self._home)
        config.merge(parsed)

        for directive in parsed.sources:
            target = directive.resolved_path
            if target in visited or not self._exists(target):
                continue
            visited.add(target)
            sourced_label = abbreviate_home(target, self._home)
            try:
                self._parse_file(sourced_label, target, config, visited)
            except FileIOError as exc:
                logger.warning(
                    "[ShellParse] Skipping sourced file %s: %s", sourced_label, exc
                )


def parse_files(
    files: Optional[Iterable[str]] = None,
    home: Optional[str] = None,
) -> ParsedShellConfig:
    """Convenience wrapper around :class:`ShellConfigParser`."""
    return ShellConfigParser(home=home).parse(files)

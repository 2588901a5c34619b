"""
Path/variable resolver: ``~``, ``$HOME`` and ``${HOME}`` expansion, plus
parallel existence checks for PATH entries.

No other shell expansion (globs, other variables, command substitution) is
performed.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, Optional

logger = logging.getLogger(__name__)

# $HOME only as a whole token: $HOMEBREW_PREFIX must survive.
_HOME_VAR = re.compile(r"\$\{HOME\}|\$HOME(?![A-Za-z0-9_])")


def home_directory() -> str:
    """Return the current user's home directory."""
    return os.path.expanduser("~")


def expand_home(path: str, home: Optional[str] = None) -> str:
    """Replace ``${HOME}``/``$HOME`` tokens and a leading ``~`` with *home*."""
    home = home if home is not None else home_directory()
    expanded = _HOME_VAR.sub(lambda _m: home, path)
    if expanded == "~":
        return home
    if expanded.startswith("~/"):
        return home + expanded[1:]
    return expanded


def abbreviate_home(path: str, home: Optional[str] = None) -> str:
    """Replace a leading home-directory prefix with ``~`` for display."""
    home = home if home is not None else home_directory()
    if path == home:
        return "~"
    if path.startswith(home.rstrip("/") + "/"):
        return "~" + path[len(home.rstrip("/")):]
    return path


def path_exists(path: str, home: Optional[str] = None) -> bool:
    """Return True if the expanded *path* exists on disk."""
    return os.path.exists(expand_home(path, home))


def validate_path_entries(
    entries: Iterable,
    exists: Callable[[str], bool] = os.path.exists,
    max_workers: int = 8,
    home: Optional[str] = None,
) -> list:
    """Return copies of *entries* with ``expanded_path`` and ``exists`` set.

    Each check is independent and read-only, so they run on a thread pool.
    The result keeps the input order.
    """
    items = list(entries)
    if not items:
        return []

    expanded = [expand_home(e.path, home) for e in items]
    with ThreadPoolExecutor(max_workers=max(1, min(len(items), max_workers))) as pool:
        flags = list(pool.map(exists, expanded))

    missing = sum(1 for f in flags if not f)
    if missing:
        logger.info("[Paths] %d of %d PATH entries do not exist", missing, len(items))

    return [
        dataclasses.replace(entry, expanded_path=path, exists=flag)
        for entry, path, flag in zip(items, expanded, flags)
    ]

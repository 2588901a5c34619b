"""
File I/O — reading and atomic, backed-up writing of configuration files.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from typing import Optional

from .backup import backup_file
from .paths import expand_home

logger = logging.getLogger(__name__)


class FileIOError(Exception):
    """Raised when a configuration file cannot be read or written.

    Carries the *path* that failed and the underlying *cause*.
    """

    def __init__(self, path: str, cause: BaseException, action: str = "access") -> None:
        self.path = path
        self.cause = cause
        self.action = action
        super().__init__(f"Failed to {action} {path}: {cause}")


def file_exists(path: str) -> bool:
    """Return True if *path* (``~`` expanded) is an existing file."""
    return os.path.isfile(expand_home(path))


def read_text(path: str) -> str:
    """Read a UTF-8 file, expanding ``~`` and ``$HOME`` in *path*."""
    real = expand_home(path)
    try:
        with open(real, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise FileIOError(path, exc, "read") from exc


def read_lines(path: str) -> list[str]:
    """Read a file and split it on ``\\n`` (line terminators removed)."""
    return read_text(path).split("\n")


def write_text(
    path: str,
    text: str,
    backup: bool = True,
    backup_root: Optional[str] = None,
    backup_keep: int = 20,
) -> None:
    """Atomically replace *path* with *text*.

    Symlinks are resolved so the real file is replaced, a timestamped backup
    is taken first, and the original permissions are copied onto the new
    file.  On failure the original file is untouched.
    """
    real = os.path.realpath(expand_home(path))
    directory = os.path.dirname(real) or "."

    if backup and os.path.isfile(real):
        try:
            backup_file(real, backup_root=backup_root, keep=backup_keep)
        except OSError as exc:
            raise FileIOError(path, exc, "back up") from exc

    tmp_path = None
    try:
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=directory, prefix=f".{os.path.basename(real)}.", suffix=".tmp"
        )
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)

        if os.path.exists(real):
            shutil.copymode(real, tmp_path)

        os.replace(tmp_path, real)
        tmp_path = None
        logger.debug("[FileIO] Wrote %d bytes to %s", len(text), real)
    except OSError as exc:
        raise FileIOError(path, exc, "write") from exc
    finally:
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass

"""
Backups — timestamped copies of configuration files before each write.

Layout: ``<backup_root>/<filename>/<filename>.<timestamp>``.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from .paths import expand_home

logger = logging.getLogger(__name__)

DEFAULT_BACKUP_ROOT = "~/.config/shellcraft/backups"
DEFAULT_KEEP = 20

_TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S.%fZ"


@dataclass
class BackupInfo:
    """One stored backup."""
    path: str
    filename: str
    timestamp: datetime
    size: int


def _root(backup_root: Optional[str]) -> str:
    return expand_home(backup_root or DEFAULT_BACKUP_ROOT)


def backup_file(
    path: str,
    backup_root: Optional[str] = None,
    keep: int = DEFAULT_KEEP,
) -> Optional[str]:
    """Copy *path* into the backup store and prune old copies.

    Returns the backup path, or None if *path* does not exist.
    """
    real = expand_home(path)
    if not os.path.isfile(real):
        return None

    filename = os.path.basename(real)
    backup_dir = os.path.join(_root(backup_root), filename)
    os.makedirs(backup_dir, exist_ok=True)

    timestamp = datetime.now(timezone.utc).strftime(_TIMESTAMP_FORMAT)
    backup_path = os.path.join(backup_dir, f"{filename}.{timestamp}")
    shutil.copy2(real, backup_path)
    logger.info("[Backup] %s -> %s", real, backup_path)

    _prune(backup_dir, keep)
    return backup_path


def _prune(directory: str, keep: int) -> None:
    # Timestamps sort lexically, oldest first.
    names = sorted(os.listdir(directory))
    for name in names[:max(0, len(names) - keep)]:
        os.remove(os.path.join(directory, name))
        logger.debug("[Backup] Pruned %s", name)


def _parse_timestamp(name: str, filename: str, fallback: float) -> datetime:
    stamp = name[len(filename) + 1:]
    try:
        return datetime.strptime(stamp, _TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        return datetime.fromtimestamp(fallback, tz=timezone.utc)


def list_backups(filename: str, backup_root: Optional[str] = None) -> list[BackupInfo]:
    """List backups for *filename*, newest first."""
    backup_dir = os.path.join(_root(backup_root), filename)
    if not os.path.isdir(backup_dir):
        return []

    backups: list[BackupInfo] = []
    for name in os.listdir(backup_dir):
        full = os.path.join(backup_dir, name)
        stat = os.stat(full)
        backups.append(BackupInfo(
            path=full,
            filename=name,
            timestamp=_parse_timestamp(name, filename, stat.st_mtime),
            size=stat.st_size,
        ))
    backups.sort(key=lambda b: b.timestamp, reverse=True)
    return backups


def restore_backup(
    backup: BackupInfo,
    original_path: str,
    backup_root: Optional[str] = None,
    keep: int = DEFAULT_KEEP,
) -> None:
    """Restore *backup* over *original_path*.

    The backup is staged next to the original before the current file is
    backed up (pruning may remove the backup being restored), then swapped
    in with a single rename.  On failure the original is untouched.
    """
    real = os.path.realpath(expand_home(original_path))
    staged = real + ".shellcraft-restore"
    shutil.copy2(backup.path, staged)
    try:
        backup_file(real, backup_root=backup_root, keep=keep)
        os.replace(staged, real)
    except OSError:
        logger.error("[Backup] Restore of %s failed, original kept", real)
        try:
            os.remove(staged)
        except OSError:
            pass
        raise
    logger.info("[Backup] Restored %s from %s", real, backup.filename)

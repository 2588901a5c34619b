"""
Edit history — records committed edit batches in a JSONL log file.
"""

from __future__ import annotations

import json
import logging
import os
from collections import Counter
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

_HISTORY_FILE = "~/.config/shellcraft/edit_history.jsonl"


def _history_path(history_file: str | None = None) -> str:
    """Return the absolute path to the history file."""
    return os.path.expanduser(history_file or _HISTORY_FILE)


def record_edit(data: dict, history_file: str | None = None) -> None:
    """Append a single edit entry to the JSONL log.

    Parameters
    ----------
    data:
        Entry fields (file, updated, inserted, deleted, appended, ...).
    history_file:
        Optional log location. Defaults to ``~/.config/shellcraft``.
    """
    path = _history_path(history_file)
    entry = {"timestamp": datetime.now(timezone.utc).isoformat()}
    entry.update(data)

    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry) + "\n")
    except OSError as exc:
        logger.warning("[ShellEdit] Failed to write edit history: %s", exc)


def read_history(history_file: str | None = None) -> list[dict]:
    """Return every readable entry of the log, oldest first."""
    path = _history_path(history_file)
    entries: list[dict] = []
    if not os.path.isfile(path):
        return entries
    try:
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    entries.append(json.loads(line))
                except json.JSONDecodeError:
                    continue
    except OSError as exc:
        logger.warning("[ShellEdit] Failed to read edit history: %s", exc)
    return entries


def read_edit_stats(
    last_n: int = 50,
    history_file: str | None = None,
) -> dict:
    """Compute rolling statistics from the history log.

    Parameters
    ----------
    last_n:
        Number of most-recent entries to include.
    history_file:
        Optional log location.

    Returns
    -------
    dict
        total_edits, total_lines_changed, avg_lines_changed, and the share
        of edits per file (percent).
    """
    entries = read_history(history_file)[-last_n:]

    if not entries:
        return {
            "total_edits": 0,
            "total_lines_changed": 0,
            "avg_lines_changed": 0.0,
            "files": {},
        }

    total = len(entries)
    changed = [
        sum(e.get(k, 0) for k in ("updated", "inserted", "deleted", "appended"))
        for e in entries
    ]
    files = Counter(e.get("file", "unknown") for e in entries)

    return {
        "total_edits": total,
        "total_lines_changed": sum(changed),
        "avg_lines_changed": sum(changed) / total,
        "files": {
            name: count / total * 100
            for name, count in files.most_common()
        },
    }

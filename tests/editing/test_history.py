"""Tests for the JSONL edit history log."""

import json
from unittest import mock

from shellcraft.editing.history import read_edit_stats, read_history, record_edit


class TestRecordEdit:
    def test_appends_entry_with_timestamp(self, tmp_path):
        log = tmp_path / "sub" / "history.jsonl"
        record_edit({"file": "~/.zshrc", "updated": 1}, history_file=str(log))
        record_edit({"file": "~/.zshrc", "appended": 2}, history_file=str(log))

        lines = log.read_text().strip().splitlines()
        assert len(lines) == 2
        first = json.loads(lines[0])
        assert first["file"] == "~/.zshrc"
        assert first["updated"] == 1
        assert "timestamp" in first

    def test_write_failure_is_logged_not_raised(self, tmp_path):
        log = tmp_path / "history.jsonl"
        with mock.patch("builtins.open", side_effect=OSError("disk full")):
            record_edit({"file": "x"}, history_file=str(log))
        assert not log.exists()


class TestReadHistory:
    def test_missing_file_is_empty(self, tmp_path):
        assert read_history(str(tmp_path / "nope.jsonl")) == []

    def test_skips_corrupt_lines(self, tmp_path):
        log = tmp_path / "history.jsonl"
        log.write_text('{"file": "a"}\nnot json\n\n{"file": "b"}\n')
        entries = read_history(str(log))
        assert [e["file"] for e in entries] == ["a", "b"]


class TestReadEditStats:
    def test_empty_log(self, tmp_path):
        stats = read_edit_stats(history_file=str(tmp_path / "h.jsonl"))
        assert stats["total_edits"] == 0
        assert stats["files"] == {}

    def test_aggregates_recent_entries(self, tmp_path):
        log = str(tmp_path / "h.jsonl")
        record_edit({"file": "~/.zshrc", "updated": 2, "deleted": 1}, history_file=log)
        record_edit({"file": "~/.zshrc", "appended": 3}, history_file=log)
        record_edit({"file": "~/.zprofile", "inserted": 2}, history_file=log)

        stats = read_edit_stats(history_file=log)
        assert stats["total_edits"] == 3
        assert stats["total_lines_changed"] == 8
        assert abs(stats["avg_lines_changed"] - 8 / 3) < 1e-9
        assert abs(stats["files"]["~/.zshrc"] - 200 / 3) < 1e-9

    def test_last_n_window(self, tmp_path):
        log = str(tmp_path / "h.jsonl")
        for i in range(5):
            record_edit({"file": f"f{i}", "updated": 1}, history_file=log)
        stats = read_edit_stats(last_n=2, history_file=log)
        assert stats["total_edits"] == 2
        assert set(stats["files"]) == {"f3", "f4"}

"""Tests for file reading and atomic writing."""

import os
from unittest import mock

import pytest

from shellcraft.backup import list_backups
from shellcraft.fileio import FileIOError, file_exists, read_lines, read_text, write_text


class TestRead:
    def test_read_keeps_line_endings(self, tmp_path):
        path = tmp_path / "rc"
        path.write_bytes(b"a\r\nb\n")
        assert read_text(str(path)) == "a\r\nb\n"
        assert read_lines(str(path)) == ["a\r", "b", ""]

    def test_missing_file_raises_with_path(self, tmp_path):
        missing = str(tmp_path / "nope")
        with pytest.raises(FileIOError) as info:
            read_text(missing)
        assert info.value.path == missing
        assert isinstance(info.value.cause, FileNotFoundError)
        assert "Failed to read" in str(info.value)

    def test_invalid_utf8_raises(self, tmp_path):
        path = tmp_path / "bin"
        path.write_bytes(b"\xff\xfe\x00bad")
        with pytest.raises(FileIOError):
            read_text(str(path))

    def test_file_exists(self, tmp_path):
        assert file_exists(str(tmp_path)) is False
        (tmp_path / "f").write_text("x")
        assert file_exists(str(tmp_path / "f")) is True


class TestWrite:
    def test_creates_new_file(self, tmp_path):
        path = tmp_path / "sub" / "rc"
        write_text(str(path), "hello\n", backup_root=str(tmp_path / "b"))
        assert path.read_text() == "hello\n"
        assert list_backups("rc", str(tmp_path / "b")) == []

    def test_backs_up_existing_file(self, tmp_path):
        path = tmp_path / "rc"
        path.write_text("old\n")
        write_text(str(path), "new\n", backup_root=str(tmp_path / "b"))
        assert path.read_text() == "new\n"
        backups = list_backups("rc", str(tmp_path / "b"))
        assert len(backups) == 1
        with open(backups[0].path) as f:
            assert f.read() == "old\n"

    def test_symlink_target_replaced(self, tmp_path):
        real = tmp_path / "dotfiles" / "zshrc"
        real.parent.mkdir()
        real.write_text("old\n")
        link = tmp_path / ".zshrc"
        link.symlink_to(real)

        write_text(str(link), "new\n", backup=False)

        assert link.is_symlink()
        assert real.read_text() == "new\n"

    def test_failed_replace_leaves_original_and_no_temp(self, tmp_path):
        path = tmp_path / "rc"
        path.write_text("old\n")
        with mock.patch("shellcraft.fileio.os.replace", side_effect=OSError("boom")):
            with pytest.raises(FileIOError) as info:
                write_text(str(path), "new\n", backup=False)
        assert info.value.action == "write"
        assert path.read_text() == "old\n"
        assert os.listdir(tmp_path) == ["rc"]

    def test_backup_failure_aborts_write(self, tmp_path):
        path = tmp_path / "rc"
        path.write_text("old\n")
        with mock.patch("shellcraft.fileio.backup_file", side_effect=OSError("full")):
            with pytest.raises(FileIOError) as info:
                write_text(str(path), "new\n")
        assert info.value.action == "back up"
        assert path.read_text() == "old\n"

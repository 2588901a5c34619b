"""Tests for the backup store."""

import os
from unittest import mock

import pytest

from shellcraft.backup import backup_file, list_backups, restore_backup


@pytest.fixture
def rc(tmp_path):
    path = tmp_path / "home" / ".zshrc"
    path.parent.mkdir()
    path.write_text("alias ll='ls -la'\n")
    return path


class TestBackupFile:
    def test_layout(self, rc, tmp_path):
        root = tmp_path / "backups"
        backup = backup_file(str(rc), backup_root=str(root))
        assert os.path.dirname(backup) == str(root / ".zshrc")
        assert os.path.basename(backup).startswith(".zshrc.")
        with open(backup) as f:
            assert f.read() == "alias ll='ls -la'\n"

    def test_missing_file_returns_none(self, tmp_path):
        assert backup_file(str(tmp_path / "nope"), backup_root=str(tmp_path / "b")) is None

    def test_prunes_oldest(self, rc, tmp_path):
        root = tmp_path / "backups"
        created = [backup_file(str(rc), backup_root=str(root), keep=3) for _ in range(5)]
        remaining = sorted(os.listdir(root / ".zshrc"))
        assert len(remaining) == 3
        assert remaining == sorted(os.path.basename(p) for p in created)[-3:]


class TestListBackups:
    def test_newest_first(self, rc, tmp_path):
        root = str(tmp_path / "backups")
        first = backup_file(str(rc), backup_root=root)
        rc.write_text("changed\n")
        second = backup_file(str(rc), backup_root=root)

        backups = list_backups(".zshrc", root)
        assert [b.path for b in backups] == [second, first]
        assert backups[0].size == len("changed\n")
        assert backups[0].timestamp >= backups[1].timestamp

    def test_unknown_file(self, tmp_path):
        assert list_backups(".bashrc", str(tmp_path)) == []


class TestRestoreBackup:
    def test_restore_backs_up_current_content(self, rc, tmp_path):
        root = str(tmp_path / "backups")
        backup_file(str(rc), backup_root=root)
        rc.write_text("broken\n")

        original = list_backups(".zshrc", root)[0]
        restore_backup(original, str(rc), backup_root=root)

        assert rc.read_text() == "alias ll='ls -la'\n"
        backups = list_backups(".zshrc", root)
        assert len(backups) == 2
        with open(backups[0].path) as f:
            assert f.read() == "broken\n"

    def test_restore_survives_pruning_of_restored_backup(self, rc, tmp_path):
        root = str(tmp_path / "backups")
        backup_file(str(rc), backup_root=root, keep=1)
        rc.write_text("broken\n")
        original = list_backups(".zshrc", root)[0]

        restore_backup(original, str(rc), backup_root=root, keep=1)

        assert rc.read_text() == "alias ll='ls -la'\n"
        assert not os.path.exists(str(rc) + ".shellcraft-restore")

    def test_failed_restore_keeps_original(self, rc, tmp_path):
        root = str(tmp_path / "backups")
        backup_file(str(rc), backup_root=root)
        rc.write_text("current\n")
        original = list_backups(".zshrc", root)[0]

        with mock.patch("shellcraft.backup.os.replace", side_effect=OSError("boom")):
            with pytest.raises(OSError):
                restore_backup(original, str(rc), backup_root=root)

        assert rc.read_text() == "current\n"
        assert not os.path.exists(str(rc) + ".shellcraft-restore")

    def test_restore_through_symlink_keeps_link(self, tmp_path):
        root = str(tmp_path / "backups")
        dotfile = tmp_path / "dotfiles" / ".zshrc"
        dotfile.parent.mkdir()
        dotfile.write_text("v1\n")
        link = tmp_path / "home" / ".zshrc"
        link.parent.mkdir()
        link.symlink_to(dotfile)

        backup_file(str(link), backup_root=root)
        dotfile.write_text("v2\n")
        restore_backup(list_backups(".zshrc", root)[0], str(link), backup_root=root)

        assert link.is_symlink()
        assert dotfile.read_text() == "v1\n"
        assert not os.path.exists(str(dotfile) + ".shellcraft-restore")

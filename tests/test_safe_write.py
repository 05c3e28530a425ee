"""Tests for the backup / write / rollback protocol."""

import asyncio
import shutil

import pytest

from canvas_vault.core import safe_write
from canvas_vault.core.safe_write import (
    combine_append,
    combine_prepend,
    create_exclusive,
    delete_with_grace,
    mutate_text,
    replace_text,
    safe_mutation,
)
from canvas_vault.errors import AlreadyExistsError, NotFoundError, RollbackError


def _backups(directory):
    return sorted(path.name for path in directory.iterdir() if path.name.endswith(".backup"))


class TestCombine:
    def test_append_trims_and_separates_with_blank_line(self):
        assert combine_append("\n  first line \n\n", "second") == "first line\n\nsecond"

    def test_prepend_mirrors_append(self):
        assert combine_prepend("body\n", "# Title") == "# Title\n\nbody"

    @pytest.mark.parametrize("existing", ["", "   \n\t"])
    def test_blank_existing_becomes_content(self, existing):
        assert combine_append(existing, "new") == "new"
        assert combine_prepend(existing, "new") == "new"


class TestSafeMutation:
    def test_success_replaces_and_leaves_no_backup(self, tmp_path):
        target = tmp_path / "note.md"
        target.write_bytes(b"old\r\nline")
        replace_text(target, "new\r\ncontent", "Note 'note.md'")
        assert target.read_bytes() == b"new\r\ncontent"
        assert _backups(tmp_path) == []

    def test_failed_write_restores_original_bytes(self, tmp_path, monkeypatch):
        target = tmp_path / "note.md"
        original = "línea uno\r\nline two\n".encode("utf-8")
        target.write_bytes(original)

        def failing_write(path, content):
            path.write_text("partial", encoding="utf-8")
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(safe_write, "write_text", failing_write)

        with pytest.raises(OSError):
            mutate_text(target, lambda existing: existing + "more", "Note 'note.md'")

        assert target.read_bytes() == original
        assert _backups(tmp_path) == []

    def test_failed_restore_raises_rollback_error_and_keeps_backup(self, tmp_path, monkeypatch):
        target = tmp_path / "board.canvas"
        target.write_text('{"nodes":[]}', encoding="utf-8")

        def failing_copyfile(*args, **kwargs):
            raise PermissionError(13, "Permission denied")

        with pytest.raises(RollbackError) as exc_info:
            with safe_mutation(target):
                # only the restore should fail, not the snapshot
                monkeypatch.setattr(safe_write.shutil, "copyfile", failing_copyfile)
                raise OSError("write failed")

        backup = exc_info.value.backup_path
        assert backup.exists()
        assert backup.read_text(encoding="utf-8") == '{"nodes":[]}'
        assert f"Backup file preserved at {backup}" in str(exc_info.value)
        assert isinstance(exc_info.value.original, OSError)

    def test_missing_target_is_not_found(self, tmp_path):
        with pytest.raises(NotFoundError):
            replace_text(tmp_path / "missing.md", "x", "Note 'missing.md'")

    def test_snapshot_failure_leaves_target_untouched(self, tmp_path, monkeypatch):
        target = tmp_path / "note.md"
        target.write_text("keep", encoding="utf-8")

        def failing_copy2(src, dst):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(safe_write.shutil, "copy2", failing_copy2)
        with pytest.raises(OSError):
            replace_text(target, "new", "Note 'note.md'")
        assert target.read_text(encoding="utf-8") == "keep"


class TestCreateExclusive:
    def test_creates_parents_and_writes_verbatim(self, tmp_path):
        target = tmp_path / "a" / "b" / "note.md"
        create_exclusive(target, "x\r\ny", "Note 'a/b/note.md'")
        assert target.read_bytes() == b"x\r\ny"

    def test_existing_target_is_never_overwritten(self, tmp_path):
        target = tmp_path / "note.md"
        target.write_text("original", encoding="utf-8")
        with pytest.raises(AlreadyExistsError, match="already exists"):
            create_exclusive(target, "other", "Note 'note.md'")
        assert target.read_text(encoding="utf-8") == "original"


class TestDeleteWithGrace:
    def test_without_event_loop_backup_is_removed_immediately(self, tmp_path):
        target = tmp_path / "note.md"
        target.write_text("bye", encoding="utf-8")
        backup = delete_with_grace(target, "Note 'note.md'")
        assert not target.exists()
        assert not backup.exists()

    def test_backup_survives_until_grace_period_elapses(self, tmp_path):
        target = tmp_path / "note.md"
        target.write_text("bye", encoding="utf-8")

        async def scenario():
            backup = delete_with_grace(target, "Note 'note.md'", delay=0.05)
            present_after_delete = backup.exists()
            await asyncio.sleep(0.2)
            return backup, present_after_delete

        backup, present_after_delete = asyncio.run(scenario())
        assert not target.exists()
        assert present_after_delete
        assert not backup.exists()

    def test_cleanup_failure_is_logged_not_raised(self, tmp_path, monkeypatch, caplog):
        target = tmp_path / "note.md"
        target.write_text("bye", encoding="utf-8")
        original_unlink = type(target).unlink

        def flaky_unlink(self, missing_ok=False):
            if self.name.endswith(".backup"):
                raise PermissionError(13, "Permission denied")
            return original_unlink(self, missing_ok=missing_ok)

        monkeypatch.setattr(type(target), "unlink", flaky_unlink)
        backup = delete_with_grace(target, "Note 'note.md'")
        assert not target.exists()
        assert backup.exists()
        assert "Failed to cleanup backup file" in caplog.text

    def test_missing_target_is_not_found(self, tmp_path):
        with pytest.raises(NotFoundError):
            delete_with_grace(tmp_path / "missing.md", "Note 'missing.md'")

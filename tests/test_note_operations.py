"""Tests for note CRUD, move and directory operations."""

import pytest

from canvas_vault.core import safe_write
from canvas_vault.core.note_operations import (
    create_directory,
    create_note,
    delete_note,
    edit_note,
    move_note,
    read_note,
)
from canvas_vault.core.trash import read_trash_metadata
from canvas_vault.errors import (
    AlreadyExistsError,
    InvalidParamsError,
    NotFoundError,
    PathEscapeError,
)


class TestCreateNote:
    def test_create_adds_extension_and_folders(self, vault, vault_path):
        result = create_note(vault, "ideas", "# Ideas\r\n- one", folder="Projects/2025")
        target = vault_path / "Projects" / "2025" / "ideas.md"
        assert result == {
            "success": True,
            "message": "Note created successfully",
            "path": str(target),
            "operation": "create",
            "vault": "vault",
        }
        assert target.read_bytes() == "# Ideas\r\n- one".encode("utf-8")

    def test_create_twice_fails_and_keeps_first_content(self, vault, vault_path):
        create_note(vault, "ideas", "first")
        with pytest.raises(AlreadyExistsError):
            create_note(vault, "ideas.md", "second")
        assert (vault_path / "ideas.md").read_text(encoding="utf-8") == "first"

    def test_filename_with_separator_is_rejected(self, vault, vault_path):
        with pytest.raises(InvalidParamsError):
            create_note(vault, "Projects/ideas", "x")
        assert list(vault_path.iterdir()) == []

    def test_folder_escape_is_rejected(self, vault, tmp_path):
        with pytest.raises(PathEscapeError):
            create_note(vault, "evil", "x", folder="../outside")
        assert not (tmp_path / "outside").exists()

    def test_read_round_trip_is_byte_identical(self, vault):
        content = "line one\r\n\ttabbed ünïcode\n\n"
        create_note(vault, "round", content)
        assert read_note(vault, "round")["content"] == content

    def test_read_missing_note(self, vault):
        with pytest.raises(NotFoundError):
            read_note(vault, "ghost")


class TestEditNote:
    def test_append_and_prepend(self, vault, vault_path):
        create_note(vault, "log", "\nmiddle\n\n")
        edit_note(vault, "log", "append", "end")
        edit_note(vault, "log", "prepend", "start")
        assert (vault_path / "log.md").read_text(encoding="utf-8") == "start\n\nmiddle\n\nend"

    def test_replace(self, vault, vault_path):
        create_note(vault, "log", "old")
        result = edit_note(vault, "log", "replace", "new")
        assert result["message"] == "Note replaced successfully"
        assert result["operation"] == "edit"
        assert (vault_path / "log.md").read_text(encoding="utf-8") == "new"

    def test_delete_removes_note(self, vault, vault_path):
        create_note(vault, "log", "old")
        result = edit_note(vault, "log", "delete", cleanup_delay=0)
        assert result["operation"] == "delete"
        assert not (vault_path / "log.md").exists()

    def test_content_rules(self, vault):
        create_note(vault, "log", "old")
        with pytest.raises(InvalidParamsError):
            edit_note(vault, "log", "delete", "unexpected")
        with pytest.raises(InvalidParamsError):
            edit_note(vault, "log", "append", "")
        with pytest.raises(InvalidParamsError):
            edit_note(vault, "log", "rename", "x")

    def test_edit_missing_note(self, vault):
        with pytest.raises(NotFoundError):
            edit_note(vault, "ghost", "append", "x")

    def test_failed_write_leaves_note_unchanged(self, vault, vault_path, monkeypatch):
        create_note(vault, "log", "keep me\r\n")

        def failing_write(path, content):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(safe_write, "write_text", failing_write)
        with pytest.raises(OSError):
            edit_note(vault, "log", "append", "more")

        assert (vault_path / "log.md").read_bytes() == b"keep me\r\n"
        assert [path.name for path in vault_path.iterdir()] == ["log.md"]


class TestDeleteNote:
    def test_soft_delete_moves_to_trash(self, vault, vault_path):
        create_note(vault, "old", "x", folder="Archive")
        result = delete_note(vault, "old", folder="Archive", reason="stale")
        assert not (vault_path / "Archive" / "old.md").exists()
        assert (vault_path / ".trash" / result["trash_name"]).exists()
        metadata = read_trash_metadata(vault, result["trash_name"])
        assert metadata["originalPath"] == "Archive/old.md"
        assert metadata["reason"] == "stale"

    def test_permanent_delete(self, vault, vault_path):
        create_note(vault, "old", "x")
        result = delete_note(vault, "old", permanent=True)
        assert "Permanently deleted" in result["message"]
        assert not (vault_path / "old.md").exists()
        assert not (vault_path / ".trash").exists()

    def test_missing_note(self, vault):
        with pytest.raises(NotFoundError):
            delete_note(vault, "ghost")


class TestMoveNote:
    def test_move_updates_backlinks(self, vault, vault_path):
        create_note(vault, "plan", "# Plan", folder="Projects")
        create_note(
            vault,
            "index",
            "See [[Projects/plan]], [[Projects/plan|the plan]], [[Projects/plan#Goals]] "
            "and [notes](Projects/plan.md). Not [[Projects/planning]].",
        )

        result = move_note(vault, "plan", "Archive/2024/plan-v1", folder="Projects")

        assert result["old_path"] == "Projects/plan.md"
        assert result["new_path"] == "Archive/2024/plan-v1.md"
        assert result["links_updated"] == 1
        assert not (vault_path / "Projects" / "plan.md").exists()
        assert (vault_path / "Archive" / "2024" / "plan-v1.md").read_text(encoding="utf-8") == "# Plan"
        assert (vault_path / "index.md").read_text(encoding="utf-8") == (
            "See [[Archive/2024/plan-v1]], [[Archive/2024/plan-v1|the plan]], "
            "[[Archive/2024/plan-v1#Goals]] and [notes](Archive/2024/plan-v1.md). "
            "Not [[Projects/planning]]."
        )

    def test_move_without_link_updates(self, vault, vault_path):
        create_note(vault, "a", "x")
        create_note(vault, "b", "[[a]]")
        result = move_note(vault, "a", "c", update_links=False)
        assert result["links_updated"] == 0
        assert (vault_path / "b.md").read_text(encoding="utf-8") == "[[a]]"

    def test_destination_exists(self, vault):
        create_note(vault, "a", "x")
        create_note(vault, "b", "y")
        with pytest.raises(AlreadyExistsError):
            move_note(vault, "a", "b")

    def test_missing_source(self, vault):
        with pytest.raises(NotFoundError):
            move_note(vault, "ghost", "elsewhere")

    def test_destination_escape(self, vault):
        create_note(vault, "a", "x")
        with pytest.raises(PathEscapeError):
            move_note(vault, "a", "../outside")


class TestCreateDirectory:
    def test_creates_intermediate_directories(self, vault, vault_path):
        result = create_directory(vault, "Projects/2025/Q1")
        assert (vault_path / "Projects" / "2025" / "Q1").is_dir()
        assert result["operation"] == "create"

    def test_non_recursive_requires_parent(self, vault):
        with pytest.raises(NotFoundError):
            create_directory(vault, "a/b", recursive=False)

    def test_existing_directory(self, vault, vault_path):
        (vault_path / "Projects").mkdir()
        with pytest.raises(AlreadyExistsError):
            create_directory(vault, "Projects")

    def test_escape(self, vault):
        with pytest.raises(PathEscapeError):
            create_directory(vault, "../sibling")

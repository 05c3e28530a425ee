"""Core business logic for note CRUD operations."""

from __future__ import annotations

import logging
import re
from pathlib import Path, PurePosixPath
from typing import Any, Optional

from canvas_vault.constants import BACKUP_GRACE_SECONDS, NOTE_EXTENSION
from canvas_vault.core import trash
from canvas_vault.core.safe_write import (
    combine_append,
    combine_prepend,
    create_exclusive,
    delete_with_grace,
    mutate_text,
    read_text,
    replace_text,
)
from canvas_vault.core.search_operations import walk_vault_files
from canvas_vault.core.vault_operations import (
    build_relative_path,
    ensure_extension,
    ensure_vault_ready,
    resolve_vault_path,
    validate_folder,
    vault_relative,
)
from canvas_vault.data_models import FileOperationResult, VaultMetadata
from canvas_vault.errors import (
    AlreadyExistsError,
    InvalidParamsError,
    NotFoundError,
    VaultToolError,
    handle_fs_error,
)

logger = logging.getLogger(__name__)

EDIT_OPERATIONS = ("append", "prepend", "replace", "delete")
_PAST_TENSE = {"append": "appended", "prepend": "prepended", "replace": "replaced", "delete": "deleted"}


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================


def _resolve_note(vault: VaultMetadata, filename: str, folder: Optional[str]) -> tuple[str, Path]:
    """Validate the filename/folder pair and return ``(relative, absolute)`` paths."""
    ensure_vault_ready(vault)
    relative = build_relative_path(filename, folder, NOTE_EXTENSION)
    return relative, resolve_vault_path(vault, relative)


def _note_label(relative: str) -> str:
    return f"Note '{relative}'"


def _link_target(relative: str) -> str:
    """Note identifier as used inside links: vault-relative, without ``.md``."""
    return relative[: -len(NOTE_EXTENSION)] if relative.lower().endswith(NOTE_EXTENSION) else relative


def _update_backlinks(vault: VaultMetadata, old_target: str, new_target: str, skip: Path) -> int:
    """Update wikilinks and markdown links that reference a moved note.

    ``[[old]]``, ``[[old|alias]]``, ``[[old#heading]]`` and ``[label](old.md)``
    forms are rewritten. Each rewritten note goes through the backup
    protocol; a note that cannot be read or written is logged and skipped.

    Args:
        vault: Vault metadata.
        old_target: Previous note identifier (without ``.md``).
        new_target: New note identifier (without ``.md``).
        skip: Absolute path of the moved note itself.

    Returns:
        Number of notes that were modified.
    """
    wikilink_pattern = re.compile(
        r"\[\[" + re.escape(old_target) + r"(?P<rest>[#|][^\]]*)?\]\]"
    )
    markdown_link_pattern = re.compile(
        r"\[(?P<label>[^\]]+)\]\(" + re.escape(old_target) + r"(?P<ext>\.md)?(?P<anchor>#[^)]*)?\)"
    )

    def _rewrite(content: str) -> str:
        updated = wikilink_pattern.sub(
            lambda match: f"[[{new_target}{match.group('rest') or ''}]]",
            content,
        )
        return markdown_link_pattern.sub(
            lambda match: (
                f"[{match.group('label')}]({new_target}"
                f"{match.group('ext') or ''}{match.group('anchor') or ''})"
            ),
            updated,
        )

    updated_count = 0
    for note_path in walk_vault_files(vault.path.resolve(strict=False), NOTE_EXTENSION):
        if note_path == skip:
            continue

        try:
            content = read_text(note_path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read note '%s' while updating backlinks: %s", note_path, exc)
            continue

        if _rewrite(content) == content:
            continue

        try:
            mutate_text(note_path, _rewrite, _note_label(vault_relative(vault, note_path)))
            updated_count += 1
        except (VaultToolError, OSError) as exc:
            logger.warning("Failed to write updated backlinks to '%s': %s", note_path, exc)

    return updated_count


# ==============================================================================
# NOTE OPERATIONS
# ==============================================================================


def create_note(
    vault: VaultMetadata,
    filename: str,
    content: str,
    folder: Optional[str] = None,
) -> dict[str, Any]:
    """Create a markdown note with the given content.

    Args:
        vault: Vault metadata describing where the note should reside.
        filename: Bare note name; ``.md`` is appended when missing.
        content: Markdown body to write into the new file, verbatim.
        folder: Optional vault-relative folder; created when missing.

    Returns:
        A result payload (``success``, ``message``, ``path``, ``operation``, ``vault``).

    Raises:
        AlreadyExistsError: If the note already exists.
        InvalidParamsError: If ``filename``/``folder`` are malformed.
        PathEscapeError: If the note would land outside the vault.
    """
    relative, target = _resolve_note(vault, filename, folder)
    try:
        create_exclusive(target, content, _note_label(relative))
    except VaultToolError:
        raise
    except OSError as exc:
        raise handle_fs_error(exc, "create note", target) from exc

    logger.info("Created note '%s' in vault '%s'", relative, vault.name)
    return FileOperationResult(
        success=True,
        message="Note created successfully",
        path=target,
        operation="create",
        vault=vault.name,
    ).as_payload()


def read_note(vault: VaultMetadata, filename: str, folder: Optional[str] = None) -> dict[str, Any]:
    """Retrieve the content of a markdown note.

    Raises:
        NotFoundError: If the note cannot be located.
    """
    relative, target = _resolve_note(vault, filename, folder)
    if not target.is_file():
        raise NotFoundError(f"{_note_label(relative)} not found in vault '{vault.name}'")

    try:
        content = read_text(target)
    except OSError as exc:
        raise handle_fs_error(exc, "read note", target) from exc

    return {
        "vault": vault.name,
        "note": relative,
        "path": str(target),
        "content": content,
    }


def edit_note(
    vault: VaultMetadata,
    filename: str,
    operation: str,
    content: Optional[str] = None,
    folder: Optional[str] = None,
    cleanup_delay: float = BACKUP_GRACE_SECONDS,
) -> dict[str, Any]:
    """Append to, prepend to, replace or delete an existing note.

    Every variant snapshots the note first. Append/prepend/replace restore
    the snapshot if the write fails; delete keeps the snapshot for
    ``cleanup_delay`` seconds before removing it.

    Args:
        vault: Vault metadata.
        filename: Bare note name.
        operation: One of ``append``, ``prepend``, ``replace``, ``delete``.
        content: New content; required unless ``operation`` is ``delete``.
        folder: Optional vault-relative folder.
        cleanup_delay: Grace period before a delete's backup is removed.

    Raises:
        InvalidParamsError: Unknown operation or missing/forbidden content.
        NotFoundError: If the note does not exist.
        RollbackError: If a failed write could not be rolled back.
    """
    if operation not in EDIT_OPERATIONS:
        raise InvalidParamsError(f"Invalid operation: {operation}")
    if operation == "delete" and content is not None:
        raise InvalidParamsError("Must not provide content for delete operation")
    if operation != "delete" and not content:
        raise InvalidParamsError("Content cannot be empty for non-delete operations")

    relative, target = _resolve_note(vault, filename, folder)
    label = _note_label(relative)

    try:
        if operation == "delete":
            delete_with_grace(target, label, cleanup_delay)
        elif operation == "append":
            mutate_text(target, lambda existing: combine_append(existing, content), label)
        elif operation == "prepend":
            mutate_text(target, lambda existing: combine_prepend(existing, content), label)
        else:
            replace_text(target, content, label)
    except VaultToolError:
        raise
    except OSError as exc:
        raise handle_fs_error(exc, f"{operation} note", target) from exc

    logger.info("Note '%s' %s in vault '%s'", relative, _PAST_TENSE[operation], vault.name)
    return FileOperationResult(
        success=True,
        message=f"Note {_PAST_TENSE[operation]} successfully",
        path=target,
        operation="delete" if operation == "delete" else "edit",
        vault=vault.name,
    ).as_payload()


def delete_note(
    vault: VaultMetadata,
    filename: str,
    folder: Optional[str] = None,
    permanent: bool = False,
    reason: Optional[str] = None,
) -> dict[str, Any]:
    """Delete a note, moving it to the vault trash unless ``permanent`` is set.

    Returns:
        A result payload; soft deletes include ``trash_name``.

    Raises:
        NotFoundError: If the note does not exist.
    """
    relative, target = _resolve_note(vault, filename, folder)
    if not target.is_file():
        raise NotFoundError(f"{_note_label(relative)} not found in vault '{vault.name}'")

    if permanent:
        trash.purge(vault, relative)
        return FileOperationResult(
            success=True,
            message=f'Permanently deleted note "{relative}"',
            path=target,
            operation="delete",
            vault=vault.name,
        ).as_payload()

    trash_name = trash.archive(vault, relative, reason)
    payload = FileOperationResult(
        success=True,
        message=f'Moved note "{relative}" to trash as "{trash_name}"',
        path=target,
        operation="delete",
        vault=vault.name,
    ).as_payload()
    payload["trash_name"] = trash_name
    return payload


def move_note(
    vault: VaultMetadata,
    filename: str,
    destination: str,
    folder: Optional[str] = None,
    update_links: bool = True,
) -> dict[str, Any]:
    """Move or rename a note, optionally updating backlinks across the vault.

    Args:
        vault: Vault metadata.
        filename: Bare name of the note to move.
        destination: New vault-relative path (folders allowed; ``.md`` appended
            when missing).
        folder: Optional folder containing the source note.
        update_links: When ``True`` rewrite links that reference the note.

    Returns:
        A result payload including ``old_path``, ``new_path`` and ``links_updated``.

    Raises:
        NotFoundError: If the source note cannot be located.
        AlreadyExistsError: If a note already exists at the destination.
    """
    old_relative, old_path = _resolve_note(vault, filename, folder)

    cleaned_destination = validate_folder(destination)
    if not cleaned_destination:
        raise InvalidParamsError("Destination cannot be empty")
    new_relative = PurePosixPath(
        ensure_extension(cleaned_destination.replace("\\", "/"), NOTE_EXTENSION)
    ).as_posix()
    new_path = resolve_vault_path(vault, new_relative)

    if not old_path.is_file():
        raise NotFoundError(f"{_note_label(old_relative)} not found in vault '{vault.name}'")
    if new_path == old_path:
        raise InvalidParamsError("Source and destination are the same note")
    if new_path.exists():
        raise AlreadyExistsError(f"{_note_label(vault_relative(vault, new_path))} already exists")

    try:
        new_path.parent.mkdir(parents=True, exist_ok=True)
        old_path.rename(new_path)
    except OSError as exc:
        raise handle_fs_error(exc, "move note", old_path) from exc

    new_relative = vault_relative(vault, new_path)
    links_updated = 0
    if update_links:
        links_updated = _update_backlinks(
            vault, _link_target(old_relative), _link_target(new_relative), new_path
        )

    logger.info(
        "Moved note from '%s' to '%s' in vault '%s' (%d links updated)",
        old_relative,
        new_relative,
        vault.name,
        links_updated,
    )

    payload = FileOperationResult(
        success=True,
        message="Note moved successfully",
        path=new_path,
        operation="move",
        vault=vault.name,
    ).as_payload()
    payload.update(
        {
            "old_path": old_relative,
            "new_path": new_relative,
            "links_updated": links_updated,
        }
    )
    return payload


def create_directory(vault: VaultMetadata, path: str, recursive: bool = True) -> dict[str, Any]:
    """Create a directory inside the vault.

    Args:
        vault: Vault metadata.
        path: Vault-relative directory path.
        recursive: Create missing intermediate directories.

    Raises:
        AlreadyExistsError: If the directory already exists.
        NotFoundError: If a parent is missing and ``recursive`` is ``False``.
    """
    ensure_vault_ready(vault)
    cleaned = validate_folder(path)
    if not cleaned:
        raise InvalidParamsError("Directory path cannot be empty")

    target = resolve_vault_path(vault, cleaned)
    if target.exists():
        raise AlreadyExistsError(f"Directory '{cleaned}' already exists in vault '{vault.name}'")

    try:
        target.mkdir(parents=recursive)
    except FileNotFoundError as exc:
        raise NotFoundError(
            f"Parent directory of '{cleaned}' does not exist; use recursive=true to create it"
        ) from exc
    except OSError as exc:
        raise handle_fs_error(exc, "create directory", target) from exc

    logger.info("Created directory '%s' in vault '%s'", cleaned, vault.name)
    return FileOperationResult(
        success=True,
        message="Directory created successfully",
        path=target,
        operation="create",
        vault=vault.name,
    ).as_payload()

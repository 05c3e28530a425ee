"""Note management MCP tools.

This module provides MCP tool wrappers for note operations:
- Create and read notes
- Edit notes (append, prepend, replace, delete)
- Delete notes to trash or permanently
- Move/rename notes
- Create directories

All tools delegate to core operations in canvas_vault.core.note_operations.
"""
from __future__ import annotations

from typing import Any

from canvas_vault.core.note_operations import (
    create_directory,
    create_note,
    delete_note,
    edit_note,
    move_note,
    read_note,
)
from canvas_vault.models import (
    CreateDirectoryInput,
    CreateNoteInput,
    DeleteNoteInput,
    EditNoteInput,
    MoveNoteInput,
    ReadNoteInput,
)
from canvas_vault.server import mcp
from canvas_vault.session import resolve_vault


# ==============================================================================
# CREATE / READ
# ==============================================================================

@mcp.tool(name="create-note")
async def create_note_tool(input: CreateNoteInput) -> dict[str, Any]:
    """Create a new markdown note (fails if it exists).

    The ``.md`` extension is added when missing and parent folders are
    created automatically.

    Args:
        input (CreateNoteInput): Validated input containing:
            - filename (str): Bare note name, no path separators
            - content (str): Markdown content, may be empty
            - folder (str, optional): Vault-relative folder
            - vault (str, optional): Vault name (omit for the default vault)

    Returns:
        {"success": True, "message": str, "path": str, "operation": "create", "vault": str}

    Error Handling:
        - ValidationError: filename with separators, absolute folder
        - Note exists → AlreadyExists error
        - Folder escaping the vault → PathEscape error
    """
    metadata = resolve_vault(input.vault)
    return create_note(metadata, input.filename, input.content, input.folder)


@mcp.tool(name="read-note")
async def read_note_tool(input: ReadNoteInput) -> dict[str, Any]:
    """Return the full markdown content of a note.

    Returns:
        {"vault": str, "note": str, "path": str, "content": str}
    """
    metadata = resolve_vault(input.vault)
    return read_note(metadata, input.filename, input.folder)


# ==============================================================================
# UPDATE / DELETE
# ==============================================================================

@mcp.tool(name="edit-note")
async def edit_note_tool(input: EditNoteInput) -> dict[str, Any]:
    """Append to, prepend to, replace or delete an existing note.

    Writes are backed up first and rolled back if they fail. Append and
    prepend separate the new content from the existing text with a blank
    line.

    Args:
        input (EditNoteInput): Validated input containing:
            - filename (str): Bare note name
            - operation (str): append | prepend | replace | delete
            - content (str, optional): Required unless operation is delete
            - folder (str, optional): Vault-relative folder
            - vault (str, optional): Vault name

    Error Handling:
        - Note missing → NotFound error
        - Content supplied for delete, or missing for a write → ValidationError
    """
    metadata = resolve_vault(input.vault)
    return edit_note(metadata, input.filename, input.operation, input.content, input.folder)


@mcp.tool(name="delete-note")
async def delete_note_tool(input: DeleteNoteInput) -> dict[str, Any]:
    """Delete a note, moving it to the vault's .trash folder by default.

    The trash entry keeps a ``.meta.json`` sidecar with the original path,
    the deletion time and the optional reason. ``permanent`` skips the
    trash entirely. Always confirm with the user before deleting.

    Returns:
        Operation result; soft deletes also include ``trash_name``.
    """
    metadata = resolve_vault(input.vault)
    return delete_note(metadata, input.filename, input.folder, input.permanent, input.reason)


@mcp.tool(name="move-note")
async def move_note_tool(input: MoveNoteInput) -> dict[str, Any]:
    """Move or rename a note and update links that point at it.

    Returns:
        Operation result plus ``old_path``, ``new_path`` and ``links_updated``.

    Error Handling:
        - Source missing → NotFound error
        - Destination exists → AlreadyExists error
    """
    metadata = resolve_vault(input.vault)
    return move_note(
        metadata,
        input.filename,
        input.destination,
        input.folder,
        input.update_links,
    )


@mcp.tool(name="create-directory")
async def create_directory_tool(input: CreateDirectoryInput) -> dict[str, Any]:
    """Create a directory in the vault, including missing parents by default."""
    metadata = resolve_vault(input.vault)
    return create_directory(metadata, input.path, input.recursive)

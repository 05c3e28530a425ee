"""Canvas management MCP tools.

Canvas tools always name their vault. Content is JSON text that must match
the canvas schema (``nodes`` and ``edges`` only); invalid payloads are
rejected with the offending field paths before the filesystem is touched.

All tools delegate to core operations in canvas_vault.core.canvas_operations.
"""
from __future__ import annotations

from typing import Any

from canvas_vault.core.canvas_operations import (
    create_canvas,
    delete_canvas,
    edit_canvas,
    read_canvas,
)
from canvas_vault.models import (
    CreateCanvasInput,
    DeleteCanvasInput,
    EditCanvasInput,
    ReadCanvasInput,
)
from canvas_vault.server import mcp
from canvas_vault.session import resolve_vault


@mcp.tool(name="create-canvas")
async def create_canvas_tool(input: CreateCanvasInput) -> dict[str, Any]:
    """Create a new canvas file from JSON text (fails if it exists).

    Args:
        input (CreateCanvasInput): Validated input containing:
            - vault (str): Vault name
            - filename (str): Bare canvas name, ``.canvas`` added when missing
            - content (str): Canvas JSON, e.g. '{"nodes":[],"edges":[]}'
            - folder (str, optional): Vault-relative folder

    Returns:
        {"success": True, "message": str, "path": str, "operation": "create", "vault": str}
    """
    metadata = resolve_vault(input.vault)
    return create_canvas(metadata, input.filename, input.content, input.folder)


@mcp.tool(name="read-canvas")
async def read_canvas_tool(input: ReadCanvasInput) -> dict[str, Any]:
    """Return the parsed JSON object stored in a canvas."""
    metadata = resolve_vault(input.vault)
    return read_canvas(metadata, input.filename, input.folder)


@mcp.tool(name="edit-canvas")
async def edit_canvas_tool(input: EditCanvasInput) -> dict[str, Any]:
    """Replace the whole content of an existing canvas.

    Only ``operation="replace"`` is supported. The previous content is
    restored if the write fails.

    Error Handling:
        - Canvas missing → NotFound error
        - Invalid canvas JSON → ValidationError listing field paths
    """
    metadata = resolve_vault(input.vault)
    return edit_canvas(metadata, input.filename, input.operation, input.content, input.folder)


@mcp.tool(name="delete-canvas")
async def delete_canvas_tool(input: DeleteCanvasInput) -> dict[str, Any]:
    """Delete a canvas, moving it to the vault's .trash folder by default.

    Returns:
        Operation result; soft deletes also include ``trash_name``.
    """
    metadata = resolve_vault(input.vault)
    return delete_canvas(metadata, input.filename, input.folder, input.permanent, input.reason)

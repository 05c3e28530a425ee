"""Search and discovery MCP tools."""
from __future__ import annotations

from typing import Any

from canvas_vault.core.search_operations import list_files, search_vault
from canvas_vault.models import ListFilesInput, SearchVaultInput
from canvas_vault.server import mcp
from canvas_vault.session import resolve_vault


@mcp.tool(name="search-vault")
async def search_vault_tool(input: SearchVaultInput) -> dict[str, Any]:
    """Search note contents and/or paths.

    Prefix the query with ``tag:`` to find notes carrying a tag in their
    frontmatter or inline (``tag:project`` also matches ``#project/active``).
    Unreadable files are skipped; the call only fails when nothing was found
    and a search pass errored.

    Args:
        input (SearchVaultInput): Validated input containing:
            - query (str): Text or 'tag:<name>'
            - path (str, optional): Folder to restrict the search to
            - caseSensitive (bool): Default false
            - searchType (str): content | filename | both
            - vault (str, optional): Vault name

    Returns:
        {
            "success": True,
            "vault": str,
            "query": str,
            "message": str,
            "results": [{"file": str, "matches": [{"line": int, "text": str}]}],
            "totalMatches": int,
            "matchedFiles": int
        }
    """
    metadata = resolve_vault(input.vault)
    return search_vault(
        metadata,
        input.query,
        input.path,
        input.case_sensitive,
        input.search_type,
    )


@mcp.tool(name="list-files")
async def list_files_tool(input: ListFilesInput) -> dict[str, Any]:
    """List every file in the vault (or a folder of it), skipping hidden entries and .trash."""
    metadata = resolve_vault(input.vault)
    return list_files(metadata, input.path)

"""MCP tools for vault discovery."""

from __future__ import annotations

from typing import Any

from canvas_vault.models import ListVaultsInput
from canvas_vault.server import mcp
from canvas_vault.session import get_vault_configuration


@mcp.tool(name="list-available-vaults")
async def list_available_vaults(input: ListVaultsInput) -> dict[str, Any]:
    """List the configured vaults.

    Primary entry point for vault discovery. Canvas tools need one of the
    returned names; note and search tools fall back to the default vault.

    Returns:
        {
            "default": str,
            "vaults": [
                {"name": str, "path": str, "description": str, "exists": bool}
            ]
        }
    """
    return get_vault_configuration().as_payload()

"""Canvas Vault MCP Server

Multi-vault management of markdown notes and JSON canvases via the Model
Context Protocol.
"""

from canvas_vault.data_models import FileOperationResult, VaultConfiguration, VaultMetadata
from canvas_vault.session import get_vault_configuration, resolve_vault, set_vault_configuration
from canvas_vault.server import main, mcp, run_server

# Import tools to register them with the MCP server
from canvas_vault import tools  # noqa: F401

__version__ = "0.1.0"
__all__ = [
    "FileOperationResult",
    "VaultConfiguration",
    "VaultMetadata",
    "get_vault_configuration",
    "resolve_vault",
    "set_vault_configuration",
    "main",
    "mcp",
    "run_server",
]

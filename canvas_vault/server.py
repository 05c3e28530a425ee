"""FastMCP server initialization and entry point."""

from __future__ import annotations

import argparse
import logging
import os
from typing import Optional, Sequence

from mcp.server.fastmcp import FastMCP

from canvas_vault.config import load_configuration_from_environment
from canvas_vault.constants import LOG_LEVEL, LOG_LEVEL_ENV
from canvas_vault.session import set_vault_configuration

# stdout carries the stdio transport, so logs go to stderr
logging.basicConfig(
    level=os.environ.get(LOG_LEVEL_ENV, LOG_LEVEL).upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("canvas_vault")

# Tool modules are imported in __init__.py to register all @mcp.tool() decorators


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="canvas-vault-mcp",
        description="MCP server for markdown notes and JSON canvases in local vaults.",
    )
    parser.add_argument(
        "vaults",
        nargs="*",
        metavar="VAULT_PATH",
        help=(
            "Vault root directories; the first one is the default vault. "
            "Falls back to CANVAS_VAULT_PATHS, then to the YAML config file."
        ),
    )
    return parser


def run_server(vault_paths: Optional[Sequence[str]] = None) -> None:
    """Publish the vault registry and start the MCP server with stdio transport."""
    set_vault_configuration(load_configuration_from_environment(vault_paths))
    logger.info("Starting canvas vault MCP server")
    mcp.run(transport="stdio")


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Console-script entry point."""
    args = build_parser().parse_args(argv)
    run_server(args.vaults)


if __name__ == "__main__":
    main()

"""Module-level constants for the canvas vault MCP server."""

from pathlib import Path

# Configuration
CONFIG_PATH = Path(__file__).parent.parent / "vaults.yaml"
CONFIG_PATH_ENV = "CANVAS_VAULT_CONFIG"
VAULT_PATHS_ENV = "CANVAS_VAULT_PATHS"

# File types
NOTE_EXTENSION = ".md"
CANVAS_EXTENSION = ".canvas"

# Trash and backups
TRASH_DIR_NAME = ".trash"
TRASH_METADATA_SUFFIX = ".meta.json"
BACKUP_SUFFIX = ".backup"
BACKUP_GRACE_SECONDS = 5.0

# Entries skipped by listing and search
IGNORED_NAMES = frozenset({".obsidian", TRASH_DIR_NAME, "node_modules"})

# Logging
LOG_LEVEL_ENV = "CANVAS_VAULT_LOG_LEVEL"
LOG_LEVEL = "INFO"

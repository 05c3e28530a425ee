"""Core business logic for canvas CRUD operations.

Canvas content is accepted as JSON text and persisted verbatim once it has
passed the canvas schema; a rejected payload never reaches the filesystem.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from canvas_vault.constants import CANVAS_EXTENSION
from canvas_vault.core import trash
from canvas_vault.core.canvas_schema import decode_canvas_json, load_canvas_json
from canvas_vault.core.safe_write import create_exclusive, read_text, replace_text
from canvas_vault.core.vault_operations import (
    build_relative_path,
    ensure_vault_ready,
    resolve_vault_path,
)
from canvas_vault.data_models import FileOperationResult, VaultMetadata
from canvas_vault.errors import (
    InvalidParamsError,
    NotFoundError,
    VaultToolError,
    handle_fs_error,
)

logger = logging.getLogger(__name__)


def _resolve_canvas(vault: VaultMetadata, filename: str, folder: Optional[str]) -> tuple[str, Path]:
    ensure_vault_ready(vault)
    relative = build_relative_path(filename, folder, CANVAS_EXTENSION)
    return relative, resolve_vault_path(vault, relative)


def _canvas_label(relative: str) -> str:
    return f"Canvas '{relative}'"


def _require_canvas(vault: VaultMetadata, relative: str, target: Path) -> None:
    if not target.is_file():
        raise NotFoundError(f"{_canvas_label(relative)} not found in vault '{vault.name}'")


def create_canvas(
    vault: VaultMetadata,
    filename: str,
    content: str,
    folder: Optional[str] = None,
) -> dict[str, Any]:
    """Create a canvas file from schema-valid JSON text.

    Args:
        vault: Vault metadata.
        filename: Bare canvas name; ``.canvas`` is appended when missing.
        content: Canvas JSON text, written byte-for-byte.
        folder: Optional vault-relative folder; created when missing.

    Raises:
        InvalidJsonError: If ``content`` is not JSON.
        CanvasValidationError: If ``content`` violates the canvas schema.
        AlreadyExistsError: If the canvas already exists.
    """
    relative, target = _resolve_canvas(vault, filename, folder)
    load_canvas_json(content, relative)

    try:
        create_exclusive(target, content, _canvas_label(relative))
    except VaultToolError:
        raise
    except OSError as exc:
        raise handle_fs_error(exc, "create canvas", target) from exc

    logger.info("Created canvas '%s' in vault '%s'", relative, vault.name)
    return FileOperationResult(
        success=True,
        message="Canvas created successfully",
        path=target,
        operation="create",
        vault=vault.name,
    ).as_payload()


def read_canvas(vault: VaultMetadata, filename: str, folder: Optional[str] = None) -> dict[str, Any]:
    """Return the parsed JSON object stored in a canvas file.

    The stored document is returned as-is; it is not re-validated against
    the schema so canvases written by other tools can still be inspected.

    Raises:
        NotFoundError: If the canvas does not exist.
        InvalidJsonError: If the file does not contain JSON.
    """
    relative, target = _resolve_canvas(vault, filename, folder)
    _require_canvas(vault, relative, target)

    try:
        text = read_text(target)
    except OSError as exc:
        raise handle_fs_error(exc, "read canvas", target) from exc

    return decode_canvas_json(text, relative)


def edit_canvas(
    vault: VaultMetadata,
    filename: str,
    operation: str,
    content: str,
    folder: Optional[str] = None,
) -> dict[str, Any]:
    """Replace the content of an existing canvas under backup protection.

    Raises:
        InvalidParamsError: If ``operation`` is not ``replace`` or the content
            is not a valid canvas.
        NotFoundError: If the canvas does not exist.
        RollbackError: If a failed write could not be rolled back.
    """
    if operation != "replace":
        raise InvalidParamsError(f"Invalid operation: {operation}. Canvas edits only support 'replace'")

    relative, target = _resolve_canvas(vault, filename, folder)
    _require_canvas(vault, relative, target)
    load_canvas_json(content, relative)

    try:
        replace_text(target, content, _canvas_label(relative))
    except VaultToolError:
        raise
    except OSError as exc:
        raise handle_fs_error(exc, "replace canvas", target) from exc

    logger.info("Replaced canvas '%s' in vault '%s'", relative, vault.name)
    return FileOperationResult(
        success=True,
        message="Canvas replaced successfully",
        path=target,
        operation="edit",
        vault=vault.name,
    ).as_payload()


def delete_canvas(
    vault: VaultMetadata,
    filename: str,
    folder: Optional[str] = None,
    permanent: bool = False,
    reason: Optional[str] = None,
) -> dict[str, Any]:
    """Delete a canvas, moving it to the vault trash unless ``permanent`` is set.

    Raises:
        NotFoundError: If the canvas does not exist.
    """
    relative, target = _resolve_canvas(vault, filename, folder)
    _require_canvas(vault, relative, target)

    if permanent:
        trash.purge(vault, relative)
        return FileOperationResult(
            success=True,
            message=f'Permanently deleted canvas "{relative}"',
            path=target,
            operation="delete",
            vault=vault.name,
        ).as_payload()

    trash_name = trash.archive(vault, relative, reason)
    payload = FileOperationResult(
        success=True,
        message=f'Moved canvas "{relative}" to trash as "{trash_name}"',
        path=target,
        operation="delete",
        vault=vault.name,
    ).as_payload()
    payload["trash_name"] = trash_name
    return payload

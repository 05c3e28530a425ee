"""Soft delete into a vault-local trash directory.

A trash entry is the moved file plus a ``<name>.meta.json`` sidecar holding
the original vault-relative path, the deletion time and an optional reason.
Entries are never expired here.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Any, Optional

from canvas_vault.constants import TRASH_DIR_NAME, TRASH_METADATA_SUFFIX
from canvas_vault.core.vault_operations import resolve_vault_path
from canvas_vault.data_models import VaultMetadata
from canvas_vault.errors import NotFoundError, handle_fs_error

logger = logging.getLogger(__name__)


def ensure_trash_directory(vault: VaultMetadata) -> Path:
    """Create (if needed) and return the vault's trash directory."""
    trash_path = resolve_vault_path(vault, TRASH_DIR_NAME)
    trash_path.mkdir(parents=True, exist_ok=True)
    return trash_path


def _filesystem_timestamp(moment: datetime) -> str:
    # ISO-8601 with ':' and '.' replaced so the name is valid on every filesystem
    return moment.strftime("%Y-%m-%dT%H-%M-%S-") + f"{moment.microsecond // 1000:03d}Z"


def trash_name_for(trash_path: Path, relative_path: str, moment: datetime) -> str:
    """Compute an unused ``<stem>_<timestamp><suffix>`` name inside ``trash_path``."""
    original = PurePosixPath(relative_path)
    stem, suffix = original.stem, original.suffix
    base = f"{stem}_{_filesystem_timestamp(moment)}"

    name = f"{base}{suffix}"
    counter = 2
    while (trash_path / name).exists() or (trash_path / f"{name}{TRASH_METADATA_SUFFIX}").exists():
        name = f"{base}-{counter}{suffix}"
        counter += 1
    return name


def archive(vault: VaultMetadata, relative_path: str, reason: Optional[str] = None) -> str:
    """Move a vault file into trash and record where it came from.

    The sidecar is written before the file moves: if the sidecar cannot be
    written nothing has moved, and if the move fails the sidecar is removed.
    Either way no half-trashed entry is left behind.

    Args:
        vault: Vault metadata.
        relative_path: Vault-relative path of the file (forward slashes).
        reason: Optional free-text reason stored in the sidecar.

    Returns:
        The name of the trashed file inside the trash directory.

    Raises:
        NotFoundError: If the file does not exist.
        FilesystemError: If the trash entry could not be created.
    """
    source = resolve_vault_path(vault, relative_path)
    if not source.is_file():
        raise NotFoundError(f"File '{relative_path}' not found in vault '{vault.name}'")

    try:
        trash_path = ensure_trash_directory(vault)
    except OSError as exc:
        raise handle_fs_error(exc, "create trash directory") from exc

    now = datetime.now(timezone.utc)
    trash_name = trash_name_for(trash_path, relative_path, now)
    trash_file = trash_path / trash_name
    meta_file = trash_path / f"{trash_name}{TRASH_METADATA_SUFFIX}"

    metadata: dict[str, Any] = {
        "originalPath": relative_path,
        "deletedAt": now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    }
    if reason is not None:
        metadata["reason"] = reason

    try:
        meta_file.write_text(json.dumps(metadata, indent=2), encoding="utf-8")
    except OSError as exc:
        meta_file.unlink(missing_ok=True)
        raise handle_fs_error(exc, "write trash metadata", meta_file) from exc

    try:
        source.rename(trash_file)
    except OSError as exc:
        try:
            meta_file.unlink(missing_ok=True)
        except OSError as cleanup_exc:
            logger.warning("Failed to remove orphaned trash metadata '%s': %s", meta_file, cleanup_exc)
        raise handle_fs_error(exc, "move file to trash", source) from exc

    logger.info("Moved '%s' in vault '%s' to trash as '%s'", relative_path, vault.name, trash_name)
    return trash_name


def purge(vault: VaultMetadata, relative_path: str) -> None:
    """Permanently delete a vault file; nothing is retained.

    Raises:
        NotFoundError: If the file does not exist.
        FilesystemError: If the file could not be removed.
    """
    target = resolve_vault_path(vault, relative_path)
    if not target.is_file():
        raise NotFoundError(f"File '{relative_path}' not found in vault '{vault.name}'")

    try:
        target.unlink()
    except OSError as exc:
        raise handle_fs_error(exc, "permanently delete file", target) from exc

    logger.info("Permanently deleted '%s' in vault '%s'", relative_path, vault.name)


def read_trash_metadata(vault: VaultMetadata, trash_name: str) -> dict[str, Any]:
    """Load the sidecar record for a trashed file.

    Inspection helper for operators and tests; no tool reads sidecars back.
    """
    meta_file = resolve_vault_path(vault, f"{TRASH_DIR_NAME}/{trash_name}{TRASH_METADATA_SUFFIX}")
    if not meta_file.is_file():
        raise NotFoundError(f"Trash entry '{trash_name}' not found in vault '{vault.name}'")
    return json.loads(meta_file.read_text(encoding="utf-8"))

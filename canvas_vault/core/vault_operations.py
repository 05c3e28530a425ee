"""Vault readiness checks and path containment.

Every tool resolves its target through :func:`resolve_vault_path`, which is
the only place a caller-supplied path is turned into a filesystem path.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Optional

from canvas_vault.data_models import VaultMetadata
from canvas_vault.errors import InvalidParamsError, NotFoundError, PathEscapeError

_SEPARATORS = ("/", "\\")


def ensure_vault_ready(vault: VaultMetadata) -> None:
    """Ensure the target vault directory is accessible before performing operations.

    Args:
        vault: Metadata describing the vault to use.

    Raises:
        NotFoundError: If the vault path does not exist or is not a directory.
    """
    if not vault.path.is_dir():
        raise NotFoundError(f"Vault '{vault.name}' is not accessible at {vault.path}")


def is_absolute_input(value: str) -> bool:
    """Return ``True`` for POSIX, Windows drive and UNC style absolute paths."""
    return (
        PurePosixPath(value).is_absolute()
        or PureWindowsPath(value).is_absolute()
        or bool(PureWindowsPath(value).drive)
        or value.startswith("\\")
    )


def validate_filename(filename: str) -> str:
    """Validate a bare file name field.

    A ``filename`` may never carry a path; folders go in the separate
    ``folder`` field.

    Raises:
        InvalidParamsError: If the name is empty, is ``.``/``..`` or contains
            any path separator.
    """
    cleaned = filename.strip()
    if not cleaned:
        raise InvalidParamsError("Filename cannot be empty")
    if any(separator in cleaned for separator in _SEPARATORS):
        raise InvalidParamsError(
            "Filename cannot contain path separators - use the 'folder' parameter for paths instead. "
            f"Invalid filename: '{cleaned}'"
        )
    if cleaned in {".", ".."}:
        raise InvalidParamsError(f"Filename cannot be '{cleaned}'")
    return cleaned


def validate_folder(folder: Optional[str]) -> Optional[str]:
    """Validate an optional folder field (multi-segment, relative only).

    Traversal that escapes the vault is caught later by
    :func:`resolve_vault_path`, after normalization.

    Raises:
        InvalidParamsError: If the folder is an absolute path.
    """
    if folder is None:
        return None
    cleaned = folder.strip()
    if not cleaned:
        return None
    if is_absolute_input(cleaned):
        raise InvalidParamsError(f"Folder must be a relative path. Invalid folder: '{cleaned}'")
    return cleaned


def ensure_extension(filename: str, extension: str) -> str:
    """Append ``extension`` unless the name already ends with it (case-insensitive)."""
    if filename.lower().endswith(extension.lower()):
        return filename
    return f"{filename}{extension}"


def build_relative_path(filename: str, folder: Optional[str], extension: str) -> str:
    """Combine validated ``filename`` and ``folder`` fields into a vault-relative path.

    Examples:
        >>> build_relative_path("board", "projects/boards", ".canvas")
        'projects/boards/board.canvas'
        >>> build_relative_path("daily.md", None, ".md")
        'daily.md'
    """
    name = ensure_extension(validate_filename(filename), extension)
    cleaned_folder = validate_folder(folder)
    if cleaned_folder:
        return (PurePosixPath(cleaned_folder.replace("\\", "/")) / name).as_posix()
    return name


def resolve_vault_path(vault: VaultMetadata, relative: str | Path) -> Path:
    """Resolve a vault-relative path and verify it stays within the vault root.

    Symlinks, ``.`` and ``..`` are resolved before the containment check, so
    a link pointing outside the vault is rejected like a traversal.

    Args:
        vault: Vault metadata.
        relative: Path relative to the vault root.

    Returns:
        The normalized absolute path (the root itself or a descendant).

    Raises:
        PathEscapeError: If ``relative`` is absolute or resolves outside the vault.
    """
    raw = str(relative)
    if is_absolute_input(raw):
        raise PathEscapeError(raw, vault.path)

    vault_root = vault.path.resolve(strict=False)
    candidate = (vault_root / raw.replace("\\", "/")).resolve(strict=False)

    # Filesystem-level security check: the only check that sees symlinks
    if candidate != vault_root and not candidate.is_relative_to(vault_root):
        raise PathEscapeError(raw, vault.path)

    return candidate


def vault_relative(vault: VaultMetadata, path: Path) -> str:
    """Convert an absolute path inside ``vault`` into a forward-slash relative path."""
    return path.relative_to(vault.path.resolve(strict=False)).as_posix()

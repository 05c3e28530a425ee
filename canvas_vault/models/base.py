"""Base Pydantic models for MCP tool input validation.

This module defines the shared ``filename``/``folder``/``vault`` fields used
by note and canvas tools. Field validators reuse the path checks from
:mod:`canvas_vault.core.vault_operations`, so a bad path is rejected with
the same message whether it arrives through a tool or a direct call.

Base Models:
- BaseFileInput: filename + optional folder + optional vault
- BaseCanvasInput: same fields, but the vault is required
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from canvas_vault.core.vault_operations import validate_filename, validate_folder


class BaseFileInput(BaseModel):
    """Base model for single-file operations with common validation.

    ``filename`` is a bare name; any directory part goes in ``folder``.
    """

    model_config = ConfigDict(extra="forbid")

    filename: str = Field(
        min_length=1,
        description=(
            "File name without any directory part. The extension is added "
            "automatically when omitted. Examples: 'meeting-notes', 'board.canvas'."
        ),
        examples=["meeting-notes", "2025-10-27.md", "roadmap"],
    )

    folder: Optional[str] = Field(
        None,
        description=(
            "Vault-relative folder holding the file, forward slashes for nesting. "
            "Omit for the vault root."
        ),
        examples=["Projects", "Daily Notes/2025"],
    )

    vault: Optional[str] = Field(
        None,
        description=(
            "Vault name (omit to use the default vault). "
            "Use list-available-vaults to discover configured vaults."
        ),
    )

    @field_validator("filename")
    @classmethod
    def validate_filename_field(cls, v: str) -> str:
        """Reject empty names, '.'/'..' and names carrying path separators."""
        return validate_filename(v)

    @field_validator("folder")
    @classmethod
    def validate_folder_field(cls, v: Optional[str]) -> Optional[str]:
        """Reject absolute folders; blank folders mean the vault root."""
        return validate_folder(v)

    @field_validator("vault")
    @classmethod
    def validate_vault(cls, v: Optional[str]) -> Optional[str]:
        """Validate vault name format.

        Raises:
            ValueError: If vault name is an empty string
        """
        if v is not None and not v.strip():
            raise ValueError(
                "Vault name cannot be empty. "
                "Either omit the vault parameter to use the default vault, "
                "or provide a valid vault name from list-available-vaults."
            )
        return v.strip() if v else None


class BaseCanvasInput(BaseFileInput):
    """Base model for canvas operations, which always name their vault."""

    vault: str = Field(
        min_length=1,
        description="Vault name. Use list-available-vaults to discover configured vaults.",
        examples=["personal", "work"],
    )

    @field_validator("vault")
    @classmethod
    def validate_vault(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("Vault name cannot be empty for canvas operations.")
        return cleaned

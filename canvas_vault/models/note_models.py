"""Pydantic input models for note operations.

This module defines input models for:
- Creating notes
- Reading notes
- Editing notes (append, prepend, replace, delete)
- Deleting notes (trash or permanent)
- Moving/renaming notes
- Creating directories
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from canvas_vault.core.vault_operations import validate_folder

from .base import BaseFileInput


class CreateNoteInput(BaseFileInput):
    """Input model for the create-note tool.

    Creates a new markdown file. Fails if the note already exists. Parent
    folders are created automatically.

    Examples:
        >>> CreateNoteInput(filename="ideas", content="# Ideas")
        >>> CreateNoteInput(filename="2025-10-27", folder="Daily Notes", content="", vault="personal")
    """

    content: str = Field(
        description="Full markdown content for the note. Can be empty to create a blank note.",
    )

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [
                {"filename": "ideas", "content": "# Ideas\n\n- first", "folder": None, "vault": None},
                {"filename": "2025-10-27", "content": "", "folder": "Daily Notes", "vault": "personal"},
            ]
        },
    )


class ReadNoteInput(BaseFileInput):
    """Input model for the read-note tool."""

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={"examples": [{"filename": "ideas", "folder": "Projects", "vault": None}]},
    )


class EditNoteInput(BaseFileInput):
    """Input model for the edit-note tool.

    ``append`` and ``prepend`` join the new content to the trimmed existing
    text with a blank line; ``replace`` overwrites the note; ``delete``
    removes it and takes no content.

    Examples:
        >>> EditNoteInput(filename="log", operation="append", content="- done")
        >>> EditNoteInput(filename="scratch", operation="delete")
    """

    operation: Literal["append", "prepend", "replace", "delete"] = Field(
        description="Edit to perform on the note.",
    )

    content: Optional[str] = Field(
        None,
        description="New content. Required for append/prepend/replace, must be omitted for delete.",
    )

    @model_validator(mode="after")
    def validate_content_for_operation(self) -> "EditNoteInput":
        """Require content for writes and forbid it for delete.

        Raises:
            ValueError: If content does not match the operation
        """
        if self.operation == "delete":
            if self.content is not None:
                raise ValueError("Content must be omitted for the delete operation.")
        elif not self.content:
            raise ValueError(
                f"Content is required for the {self.operation} operation and cannot be empty."
            )
        return self

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [
                {"filename": "log", "operation": "append", "content": "- shipped release"},
                {"filename": "log", "operation": "prepend", "content": "# Log"},
                {"filename": "scratch", "operation": "delete"},
            ]
        },
    )


class DeleteNoteInput(BaseFileInput):
    """Input model for the delete-note tool.

    By default the note is moved to the vault's ``.trash`` folder with a
    metadata sidecar. ``permanent=True`` removes it for good.
    """

    permanent: bool = Field(
        False,
        description="Delete permanently instead of moving to trash.",
    )

    reason: Optional[str] = Field(
        None,
        description="Optional reason recorded in the trash metadata.",
    )

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [
                {"filename": "old-idea", "reason": "superseded"},
                {"filename": "tmp", "folder": "Scratch", "permanent": True},
            ]
        },
    )


class MoveNoteInput(BaseFileInput):
    """Input model for the move-note tool.

    ``destination`` is the new vault-relative path of the note and may
    include folders. Links pointing at the note are updated unless
    ``update_links`` is false.

    Examples:
        >>> MoveNoteInput(filename="draft", destination="Archive/draft-2024")
    """

    destination: str = Field(
        min_length=1,
        description=(
            "New vault-relative path for the note, e.g. 'Archive/2024/draft'. "
            "The .md extension is added automatically when omitted."
        ),
        examples=["Archive/draft", "Projects/renamed-note.md"],
    )

    update_links: bool = Field(
        True,
        description="Rewrite [[wikilinks]] and markdown links that point at the moved note.",
    )

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        """Destination must be a non-empty relative path."""
        cleaned = validate_folder(v)
        if not cleaned:
            raise ValueError("Destination cannot be empty.")
        return cleaned

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [
                {"filename": "draft", "folder": "Projects", "destination": "Archive/draft"},
            ]
        },
    )


class CreateDirectoryInput(BaseModel):
    """Input model for the create-directory tool."""

    path: str = Field(
        min_length=1,
        description="Vault-relative directory path, e.g. 'Projects/2025/Q1'.",
        examples=["Projects", "Projects/2025/Q1"],
    )

    recursive: bool = Field(
        True,
        description="Create missing parent directories as well.",
    )

    vault: Optional[str] = Field(
        None,
        description="Vault name (omit to use the default vault).",
    )

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        cleaned = validate_folder(v)
        if not cleaned:
            raise ValueError("Directory path cannot be empty.")
        return cleaned

    @field_validator("vault")
    @classmethod
    def validate_vault(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Vault name cannot be empty. Omit it to use the default vault.")
        return v.strip() if v else None

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={"examples": [{"path": "Projects/2025", "recursive": True, "vault": None}]},
    )

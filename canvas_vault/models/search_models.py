"""Pydantic input models for search and discovery operations.

This module defines input models for:
- Searching note filenames and/or contents (including ``tag:`` queries)
- Listing vault files
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from canvas_vault.core.vault_operations import validate_folder


def _clean_vault(v: Optional[str]) -> Optional[str]:
    if v is not None and not v.strip():
        raise ValueError(
            "Vault name cannot be empty. "
            "Either omit the vault parameter or provide a valid vault name."
        )
    return v.strip() if v else None


class SearchVaultInput(BaseModel):
    """Input model for the search-vault tool.

    Plain queries are case-insensitive substring matches unless
    ``caseSensitive`` is set. A ``tag:`` prefix searches frontmatter and
    inline tags instead, including nested tags.

    Examples:
        >>> SearchVaultInput(query="meeting")
        >>> SearchVaultInput(query="tag:project/active", path="Projects")
        >>> SearchVaultInput(query="TODO", searchType="both", caseSensitive=True)
    """

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {"query": "meeting"},
                {"query": "tag:project", "path": "Projects", "searchType": "content"},
            ]
        },
    )

    query: str = Field(
        min_length=1,
        description="Search text, or 'tag:<name>' to search by tag.",
        examples=["meeting", "tag:project/active"],
    )

    path: Optional[str] = Field(
        None,
        description="Vault-relative folder to restrict the search to.",
    )

    case_sensitive: bool = Field(
        False,
        alias="caseSensitive",
        description="Match case exactly (ignored for tag searches).",
    )

    search_type: Literal["content", "filename", "both"] = Field(
        "content",
        alias="searchType",
        description="Search note contents, note paths, or both.",
    )

    vault: Optional[str] = Field(
        None,
        description="Vault name (omit to use the default vault).",
    )

    @field_validator("query")
    @classmethod
    def validate_query(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Search query cannot be empty.")
        return v

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: Optional[str]) -> Optional[str]:
        return validate_folder(v)

    @field_validator("vault")
    @classmethod
    def validate_vault(cls, v: Optional[str]) -> Optional[str]:
        return _clean_vault(v)


class ListFilesInput(BaseModel):
    """Input model for the list-files tool."""

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={"examples": [{"vault": None}, {"path": "Projects", "vault": "work"}]},
    )

    path: Optional[str] = Field(
        None,
        description="Vault-relative folder to list (omit for the whole vault).",
    )

    vault: Optional[str] = Field(
        None,
        description="Vault name (omit to use the default vault).",
    )

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: Optional[str]) -> Optional[str]:
        return validate_folder(v)

    @field_validator("vault")
    @classmethod
    def validate_vault(cls, v: Optional[str]) -> Optional[str]:
        return _clean_vault(v)

"""Pydantic input models for MCP tool validation.

Each model is the input schema of one tool, with field-level validation and
descriptive error messages. Path-shaped fields reuse the checks in
``canvas_vault.core.vault_operations``.

Architecture:
- base: BaseFileInput / BaseCanvasInput (filename, folder, vault)
- note_models: note CRUD, move and directory creation
- canvas_models: canvas CRUD with schema-checked content
- search_models: search-vault and list-files
- vault_models: list-available-vaults
"""

from .base import BaseCanvasInput, BaseFileInput
from .canvas_models import (
    CreateCanvasInput,
    DeleteCanvasInput,
    EditCanvasInput,
    ReadCanvasInput,
)
from .note_models import (
    CreateDirectoryInput,
    CreateNoteInput,
    DeleteNoteInput,
    EditNoteInput,
    MoveNoteInput,
    ReadNoteInput,
)
from .search_models import ListFilesInput, SearchVaultInput
from .vault_models import ListVaultsInput

__all__ = [
    # Base models
    "BaseFileInput",
    "BaseCanvasInput",
    # Note models
    "CreateNoteInput",
    "ReadNoteInput",
    "EditNoteInput",
    "DeleteNoteInput",
    "MoveNoteInput",
    "CreateDirectoryInput",
    # Canvas models
    "CreateCanvasInput",
    "ReadCanvasInput",
    "EditCanvasInput",
    "DeleteCanvasInput",
    # Search models
    "SearchVaultInput",
    "ListFilesInput",
    # Vault models
    "ListVaultsInput",
]

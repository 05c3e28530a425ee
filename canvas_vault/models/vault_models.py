"""Pydantic input models for vault registry operations."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ListVaultsInput(BaseModel):
    """Input model for the list-available-vaults tool.

    Takes no parameters; the model keeps every tool on the same input shape.

    Examples:
        >>> ListVaultsInput()
    """

    model_config = ConfigDict(extra="forbid", json_schema_extra={"examples": [{}]})

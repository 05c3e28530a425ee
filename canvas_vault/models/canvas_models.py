"""Pydantic input models for canvas operations.

Canvas content is a JSON string. The content validator runs the canvas
schema so a malformed document is rejected with the offending field paths
before any tool logic runs.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import ConfigDict, Field, field_validator

from canvas_vault.core.canvas_schema import (
    canvas_issues,
    decode_canvas_json,
    is_valid_canvas_json,
)

from .base import BaseCanvasInput

_EMPTY_CANVAS = '{"nodes":[],"edges":[]}'


def _validate_canvas_text(value: str) -> str:
    if is_valid_canvas_json(value):
        return value
    # InvalidJsonError/ValueError surfaces as a pydantic validation error
    issues = canvas_issues(decode_canvas_json(value))
    if issues:
        raise ValueError(
            "Invalid canvas JSON structure: " + ", ".join(str(issue) for issue in issues)
        )
    return value


class CreateCanvasInput(BaseCanvasInput):
    """Input model for the create-canvas tool.

    Examples:
        >>> CreateCanvasInput(vault="work", filename="board", content='{"nodes":[],"edges":[]}')
    """

    content: str = Field(
        description=(
            "Canvas document as JSON text with optional 'nodes' and 'edges' arrays. "
            "No other top-level keys are accepted."
        ),
        examples=[_EMPTY_CANVAS],
    )

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _validate_canvas_text(v)

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [
                {"vault": "work", "filename": "board", "content": _EMPTY_CANVAS, "folder": "Boards"},
            ]
        },
    )


class ReadCanvasInput(BaseCanvasInput):
    """Input model for the read-canvas tool."""

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={"examples": [{"vault": "work", "filename": "board"}]},
    )


class EditCanvasInput(BaseCanvasInput):
    """Input model for the edit-canvas tool (whole-document replace only)."""

    operation: Literal["replace"] = Field(
        description="Only 'replace' is supported for canvases.",
    )

    content: str = Field(
        description="Replacement canvas document as JSON text.",
        examples=[_EMPTY_CANVAS],
    )

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _validate_canvas_text(v)

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [
                {"vault": "work", "filename": "board", "operation": "replace", "content": _EMPTY_CANVAS},
            ]
        },
    )


class DeleteCanvasInput(BaseCanvasInput):
    """Input model for the delete-canvas tool."""

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
        json_schema_extra={"examples": [{"vault": "work", "filename": "board", "reason": "replaced"}]},
    )

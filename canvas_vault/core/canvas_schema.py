"""Structural schema for JSON Canvas documents.

Based on https://jsoncanvas.org/spec/1.0/. Every object in the document is
closed: unknown keys are rejected instead of dropped, so a caller that
invents ``colour`` or ``from`` gets an error rather than a silently broken
diagram.

The boolean check and the strict parse share a single ``TypeAdapter``, so
they always agree on what is accepted.
"""

from __future__ import annotations

import json
import re
from typing import Annotated, Any, Literal, Union

from pydantic import (
    AfterValidator,
    AnyUrl,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
)

from canvas_vault.errors import CanvasIssue, CanvasValidationError, InvalidJsonError

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")
_PRESET_COLORS = frozenset({"1", "2", "3", "4", "5", "6"})
_URL_ADAPTER = TypeAdapter(AnyUrl)


def _integral_number(value: Any) -> Any:
    # JSON has a single number type: 100.0 is an integer coordinate, "100" and true are not
    if isinstance(value, (bool, str)):
        raise ValueError("Input should be a valid integer")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _check_color(value: str) -> str:
    if value in _PRESET_COLORS or _HEX_COLOR.match(value):
        return value
    raise ValueError(
        "Color must be a preset '1'-'6' or a 6-digit hex color code starting with #"
    )


def _check_url(value: str) -> str:
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        raise ValueError("Invalid url") from None
    return value


def _check_subpath(value: str) -> str:
    if not value.startswith("#"):
        raise ValueError("Subpath must start with '#'")
    return value


CanvasInt = Annotated[int, BeforeValidator(_integral_number)]
PositiveCanvasInt = Annotated[int, BeforeValidator(_integral_number), Field(gt=0)]
CanvasColor = Annotated[str, AfterValidator(_check_color)]
NonEmptyStr = Annotated[str, Field(min_length=1)]
Side = Literal["top", "right", "bottom", "left"]
EndShape = Literal["none", "arrow"]


class _ClosedModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class GenericNode(_ClosedModel):
    """Attributes shared by every node variant.

    Optional fields default to ``None`` when absent; defaults are not
    validated, so an explicit JSON ``null`` is still rejected.
    """

    id: NonEmptyStr
    x: CanvasInt
    y: CanvasInt
    width: PositiveCanvasInt
    height: PositiveCanvasInt
    color: CanvasColor = None


class TextNode(GenericNode):
    type: Literal["text"]
    text: str = Field(description="Markdown text content")


class FileNode(GenericNode):
    type: Literal["file"]
    file: NonEmptyStr = Field(description="Path to the file (relative to vault)")
    subpath: Annotated[str, AfterValidator(_check_subpath)] = Field(
        None, description="Optional subpath within the file (e.g., #heading)"
    )


class LinkNode(GenericNode):
    type: Literal["link"]
    url: Annotated[str, AfterValidator(_check_url)] = Field(description="URL the node links to")


class GroupNode(GenericNode):
    type: Literal["group"]
    label: str = None
    background: str = Field(
        None, description="Optional path to a background image (relative to vault)"
    )
    backgroundStyle: Literal["cover", "ratio", "repeat"] = None


CanvasNode = Annotated[
    Union[TextNode, FileNode, LinkNode, GroupNode],
    Field(discriminator="type"),
]


class CanvasEdge(_ClosedModel):
    id: NonEmptyStr
    fromNode: NonEmptyStr
    toNode: NonEmptyStr
    fromSide: Side = None
    toSide: Side = None
    fromEnd: EndShape = None
    toEnd: EndShape = None
    color: CanvasColor = None
    label: str = None


class CanvasDocument(_ClosedModel):
    """Top-level canvas: only ``nodes`` and ``edges`` are allowed."""

    nodes: list[CanvasNode] = Field(default_factory=list)
    edges: list[CanvasEdge] = Field(default_factory=list)


_CANVAS_ADAPTER = TypeAdapter(CanvasDocument)


def _issues_from(exc: ValidationError) -> list[CanvasIssue]:
    return [
        CanvasIssue(
            path=".".join(str(part) for part in error["loc"]),
            message=error["msg"],
        )
        for error in exc.errors()
    ]


def canvas_issues(candidate: Any) -> list[CanvasIssue]:
    """Validate a parsed JSON value and return every schema violation.

    Args:
        candidate: The result of ``json.loads`` on canvas content.

    Returns:
        A list of ``(path, message)`` issues; empty when the document is valid.
        Paths are dot-joined, e.g. ``nodes.0.text.colour``.
    """
    try:
        _CANVAS_ADAPTER.validate_python(candidate)
    except ValidationError as exc:
        return _issues_from(exc)
    return []


def is_valid_canvas(candidate: Any) -> bool:
    """Cheap accept/reject check used for up-front argument validation."""
    try:
        _CANVAS_ADAPTER.validate_python(candidate)
    except ValidationError:
        return False
    return True


def parse_canvas(candidate: Any) -> CanvasDocument:
    """Strictly validate a parsed JSON value.

    Raises:
        CanvasValidationError: Listing each offending field path and message.
    """
    try:
        return _CANVAS_ADAPTER.validate_python(candidate)
    except ValidationError as exc:
        raise CanvasValidationError(_issues_from(exc)) from exc


def decode_canvas_json(text: str, filename: str = "<content>") -> Any:
    """Parse canvas text as JSON without schema checks.

    Raises:
        InvalidJsonError: If ``text`` is not valid JSON.
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidJsonError(filename, str(exc)) from exc


def load_canvas_json(text: str, filename: str = "<content>") -> CanvasDocument:
    """Parse canvas text and validate it against the schema."""
    return parse_canvas(decode_canvas_json(text, filename))


def is_valid_canvas_json(text: str) -> bool:
    """Boolean form of :func:`load_canvas_json` for input-model validators."""
    try:
        candidate = json.loads(text)
    except json.JSONDecodeError:
        return False
    return is_valid_canvas(candidate)

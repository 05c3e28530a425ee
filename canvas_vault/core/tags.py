"""Tag extraction and matching helpers used by tag search."""

from __future__ import annotations

import logging
import re
from typing import Any

import frontmatter
import yaml

logger = logging.getLogger(__name__)

# Obsidian tags: letters, digits, '_', '-', '/', with at least one non-digit
INLINE_TAG_PATTERN = re.compile(r"(?<![\w#/&])#([\w\-/]*[A-Za-z_\-/][\w\-/]*)")


def normalize_tag(tag: str) -> str:
    """Lower-case a tag and strip whitespace, a leading ``#`` and trailing slashes."""
    cleaned = tag.strip()
    if cleaned.startswith("#"):
        cleaned = cleaned[1:]
    return cleaned.strip("/").lower()


def matches_tag_pattern(pattern: str, tag: str) -> bool:
    """Return ``True`` when ``tag`` matches ``pattern``.

    Both arguments are expected to be normalized. A pattern matches the tag
    itself and any nested tag below it (``status`` matches
    ``status/active``). A trailing ``/*`` is accepted as an explicit
    wildcard for the nested form only.
    """
    if pattern.endswith("/*"):
        return tag.startswith(pattern[:-1])
    return tag == pattern or tag.startswith(f"{pattern}/")


def extract_inline_tags(text: str) -> list[str]:
    """Return ``#tag`` tokens found in ``text`` (without the ``#``)."""
    return INLINE_TAG_PATTERN.findall(text)


def extract_frontmatter_tags(text: str) -> list[str]:
    """Return the ``tags`` list from a YAML frontmatter block, if any.

    Unparseable frontmatter is logged and treated as having no tags.
    """
    if not text.lstrip().startswith("---"):
        return []

    try:
        post = frontmatter.loads(text)
    except yaml.YAMLError as exc:
        logger.debug("Ignoring invalid frontmatter while extracting tags: %s", exc)
        return []

    raw: Any = post.metadata.get("tags", [])
    if isinstance(raw, str):
        return [part.strip() for part in raw.replace(",", " ").split() if part.strip()]
    if isinstance(raw, list):
        return [str(tag).strip() for tag in raw if str(tag).strip()]
    return []


def extract_tags(text: str) -> list[str]:
    """Return every tag in a note: frontmatter tags first, then inline tags."""
    seen: dict[str, None] = {}
    for tag in extract_frontmatter_tags(text) + extract_inline_tags(text):
        seen.setdefault(tag, None)
    return list(seen)

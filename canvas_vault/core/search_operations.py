"""Search and discovery operations over vault files."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional

from canvas_vault.constants import BACKUP_SUFFIX, IGNORED_NAMES, NOTE_EXTENSION
from canvas_vault.core.safe_write import read_text
from canvas_vault.core.tags import (
    extract_frontmatter_tags,
    extract_inline_tags,
    matches_tag_pattern,
    normalize_tag,
)
from canvas_vault.core.vault_operations import (
    ensure_vault_ready,
    resolve_vault_path,
    vault_relative,
)
from canvas_vault.data_models import VaultMetadata
from canvas_vault.errors import (
    FilesystemError,
    InvalidParamsError,
    NotFoundError,
    VaultToolError,
    handle_fs_error,
)

logger = logging.getLogger(__name__)

TAG_QUERY_PREFIX = "tag:"


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================


def _is_ignored(name: str) -> bool:
    # backups of pending deletes are transient
    return name in IGNORED_NAMES or name.startswith(".") or name.endswith(BACKUP_SUFFIX)


def walk_vault_files(root: Path, suffix: Optional[str] = None) -> list[Path]:
    """Recursively collect non-hidden files below ``root``.

    Unreadable sub-directories are logged and skipped so one bad folder does
    not hide the rest of the vault.

    Args:
        root: Directory to walk (already resolved inside a vault).
        suffix: Optional file suffix filter such as ``".md"``.

    Returns:
        Sorted absolute file paths.
    """

    def _on_error(exc: OSError) -> None:
        if Path(exc.filename or "") == root:
            raise exc
        logger.warning("Skipping unreadable directory '%s': %s", exc.filename, exc)

    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        dirnames[:] = [name for name in dirnames if not _is_ignored(name)]
        for filename in filenames:
            if _is_ignored(filename):
                continue
            if suffix and not filename.lower().endswith(suffix):
                continue
            files.append(Path(dirpath) / filename)

    files.sort()
    return files


def _search_root(vault: VaultMetadata, path: Optional[str]) -> Path:
    ensure_vault_ready(vault)
    root = resolve_vault_path(vault, path) if path else vault.path.resolve(strict=False)
    if not root.is_dir():
        raise NotFoundError(f"Folder '{path}' not found in vault '{vault.name}'")
    return root


# ==============================================================================
# LISTING
# ==============================================================================


def list_files(vault: VaultMetadata, path: Optional[str] = None) -> dict[str, Any]:
    """List every non-hidden file in the vault (or a sub-folder of it).

    Hidden entries plus ``.obsidian``, ``.trash`` and ``node_modules`` are
    skipped.

    Returns:
        ``{"vault", "files"}`` with vault-relative, forward-slash paths sorted
        alphabetically.
    """
    root = _search_root(vault, path)
    try:
        files = walk_vault_files(root)
    except OSError as exc:
        raise handle_fs_error(exc, "list vault files", root) from exc

    return {
        "vault": vault.name,
        "files": [vault_relative(vault, file) for file in files],
    }


# ==============================================================================
# SEARCH
# ==============================================================================


def search_filenames(
    vault: VaultMetadata,
    query: str,
    path: Optional[str] = None,
    case_sensitive: bool = False,
) -> list[dict[str, Any]]:
    """Match ``query`` against vault-relative note paths."""
    root = _search_root(vault, path)
    needle = query if case_sensitive else query.lower()

    results: list[dict[str, Any]] = []
    for file in walk_vault_files(root, NOTE_EXTENSION):
        relative = vault_relative(vault, file)
        haystack = relative if case_sensitive else relative.lower()
        if needle in haystack:
            results.append(
                {
                    "file": relative,
                    # line 0 marks a filename match
                    "matches": [{"line": 0, "text": f"Filename match: {relative}"}],
                }
            )
    return results


def _tag_matches(text: str, tag_query: str) -> list[dict[str, Any]]:
    matches: list[dict[str, Any]] = []

    front_tags = [normalize_tag(tag) for tag in extract_frontmatter_tags(text)]
    hits = [tag for tag in front_tags if matches_tag_pattern(tag_query, tag)]
    if hits:
        matches.append({"line": 0, "text": f"Frontmatter tags: {', '.join(hits)}"})

    for index, line in enumerate(text.split("\n"), start=1):
        if any(
            matches_tag_pattern(tag_query, normalize_tag(tag))
            for tag in extract_inline_tags(line)
        ):
            matches.append({"line": index, "text": line.strip()})
    return matches


def _text_matches(text: str, query: str, case_sensitive: bool) -> list[dict[str, Any]]:
    needle = query if case_sensitive else query.lower()
    matches: list[dict[str, Any]] = []
    for index, line in enumerate(text.split("\n"), start=1):
        haystack = line if case_sensitive else line.lower()
        if needle in haystack:
            matches.append({"line": index, "text": line.strip()})
    return matches


def search_content(
    vault: VaultMetadata,
    query: str,
    path: Optional[str] = None,
    case_sensitive: bool = False,
) -> list[dict[str, Any]]:
    """Search note bodies line by line.

    A query starting with ``tag:`` searches for a tag (and its nested tags)
    in frontmatter and inline ``#tag`` tokens instead of plain text.
    Unreadable files are logged and skipped.
    """
    root = _search_root(vault, path)
    tag_query = normalize_tag(query[len(TAG_QUERY_PREFIX):]) if query.startswith(TAG_QUERY_PREFIX) else None
    if tag_query is not None and not tag_query:
        raise InvalidParamsError("Tag search requires a tag after 'tag:'")

    results: list[dict[str, Any]] = []
    for file in walk_vault_files(root, NOTE_EXTENSION):
        try:
            text = read_text(file)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping file '%s' in vault '%s' due to read error: %s", file, vault.name, exc)
            continue

        if tag_query is not None:
            matches = _tag_matches(text, tag_query)
        else:
            matches = _text_matches(text, query, case_sensitive)

        if matches:
            results.append({"file": vault_relative(vault, file), "matches": matches})
    return results


def search_vault(
    vault: VaultMetadata,
    query: str,
    path: Optional[str] = None,
    case_sensitive: bool = False,
    search_type: str = "content",
) -> dict[str, Any]:
    """Run filename and/or content search and aggregate the results.

    A failing sub-search is reported as a warning when the other one produced
    results; the call only fails when nothing was found and at least one
    sub-search errored.

    Raises:
        InvalidParamsError: If the query is empty or ``search_type`` is unknown.
        FilesystemError: If every sub-search failed to produce results because of errors.
    """
    if not query.strip():
        raise InvalidParamsError("Search query cannot be empty")
    if search_type not in {"content", "filename", "both"}:
        raise InvalidParamsError(f"Unknown search type '{search_type}'")
    if query.startswith(TAG_QUERY_PREFIX) and not normalize_tag(query[len(TAG_QUERY_PREFIX):]):
        raise InvalidParamsError("Tag search requires a tag after 'tag:'")

    # A missing or escaping search folder is the caller's error, not a partial failure
    _search_root(vault, path)

    results: list[dict[str, Any]] = []
    errors: list[str] = []

    if search_type in {"filename", "both"}:
        try:
            results.extend(search_filenames(vault, query, path, case_sensitive))
        except (VaultToolError, OSError) as exc:
            errors.append(f"Filename search failed: {exc}")

    if search_type in {"content", "both"}:
        try:
            results.extend(search_content(vault, query, path, case_sensitive))
        except (VaultToolError, OSError) as exc:
            errors.append(f"Content search failed: {exc}")

    if errors and not results:
        raise FilesystemError("Search failed:\n" + "\n".join(errors))

    total_matches = sum(len(result["matches"]) for result in results)
    message = "Search completed successfully"
    if errors:
        message = "Search completed with warnings:\n" + "\n".join(errors)
        logger.warning("Search in vault '%s' completed with errors: %s", vault.name, errors)

    return {
        "success": True,
        "vault": vault.name,
        "query": query,
        "message": message,
        "results": results,
        "totalMatches": total_matches,
        "matchedFiles": len(results),
    }

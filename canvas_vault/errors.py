"""Typed errors surfaced to MCP clients.

Every error raised by the core derives from :class:`VaultToolError` and
carries a ``kind`` that tells the caller which family of failure occurred.
The classes also mix in the matching builtin exception so callers that only
know about ``FileNotFoundError``/``FileExistsError``/``ValueError`` keep
working.
"""

from __future__ import annotations

import errno
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional


class VaultToolError(Exception):
    """Base class for all user-facing vault errors.

    The string form is prefixed with ``kind`` (``"NotFound: Note 'a.md' not
    found"``) so the failure family survives FastMCP turning the exception
    into a plain tool error message.
    """

    kind = "InternalError"

    def __str__(self) -> str:
        return f"{self.kind}: {super().__str__()}"


class InvalidParamsError(VaultToolError, ValueError):
    """Malformed arguments or payloads, rejected before any mutation."""

    kind = "InvalidParams"


class InvalidJsonError(InvalidParamsError):
    """Canvas content that is not parseable JSON."""

    def __init__(self, filename: str, detail: str) -> None:
        self.filename = filename
        self.detail = detail
        super().__init__(f"Invalid JSON in canvas '{filename}': {detail}")


@dataclass(frozen=True)
class CanvasIssue:
    """A single schema violation inside a canvas document."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path or '<root>'}: {self.message}"


class CanvasValidationError(InvalidParamsError):
    """Canvas JSON that parses but does not conform to the canvas schema."""

    def __init__(self, issues: Iterable[CanvasIssue]) -> None:
        self.issues = list(issues)
        details = ", ".join(str(issue) for issue in self.issues)
        super().__init__(f"Invalid canvas JSON structure: {details}")


class PathEscapeError(VaultToolError, ValueError):
    """A resolved path falls outside the owning vault root."""

    kind = "PathEscape"

    def __init__(self, user_path: str, vault_root: Path) -> None:
        self.user_path = user_path
        self.vault_root = vault_root
        super().__init__(f"Path '{user_path}' escapes vault root '{vault_root}'")


class NotFoundError(VaultToolError, FileNotFoundError):
    """The requested note, canvas, folder or vault does not exist."""

    kind = "NotFound"


class VaultNotFoundError(NotFoundError):
    """An unknown vault name was supplied."""

    def __init__(self, name: str, available: Iterable[str] = ()) -> None:
        self.name = name
        self.available = list(available)
        message = f"Unknown vault '{name}'"
        if self.available:
            message += f". Available vaults: {', '.join(self.available)}"
        super().__init__(message)


class AlreadyExistsError(VaultToolError, FileExistsError):
    """A create operation targeted a path that is already present."""

    kind = "AlreadyExists"


class FilesystemError(VaultToolError):
    """Wrapped storage failure (permissions, disk full, ...)."""

    kind = "FsFailure"


class RollbackError(VaultToolError):
    """Restoring from a backup failed after a mutation failure.

    The backup file is left on disk; its path is part of the message so an
    operator can recover the original content by hand.
    """

    kind = "InternalError"

    def __init__(
        self,
        backup_path: Path,
        original: BaseException,
        rollback: BaseException,
    ) -> None:
        self.backup_path = backup_path
        self.original = original
        self.rollback = rollback
        super().__init__(
            "Failed to rollback changes. "
            f"Original error: {original}. Rollback error: {rollback}. "
            f"Backup file preserved at {backup_path}"
        )


_ERRNO_MESSAGES = {
    errno.EACCES: "permission denied",
    errno.EPERM: "operation not permitted",
    errno.ENOSPC: "no space left on device",
    errno.EROFS: "read-only file system",
    errno.EEXIST: "file already exists",
    errno.ENOENT: "no such file or directory",
    errno.ENOTDIR: "not a directory",
    errno.EISDIR: "is a directory",
}


def handle_fs_error(exc: OSError, operation: str, path: Optional[Path] = None) -> FilesystemError:
    """Wrap an ``OSError`` with the operation that was being attempted.

    Args:
        exc: The low-level error.
        operation: Short description such as ``"create note"``.
        path: Optional path involved in the failure.

    Returns:
        A :class:`FilesystemError` suitable for ``raise ... from exc``.
    """
    reason = _ERRNO_MESSAGES.get(exc.errno or -1) or exc.strerror or str(exc)
    location = f" ({path})" if path is not None else ""
    return FilesystemError(f"Failed to {operation}{location}: {reason}")

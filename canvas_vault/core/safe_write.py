"""Backup / write / rollback protocol for mutating an existing file.

A mutation of an existing file always runs inside :func:`safe_mutation`:

1. snapshot the current bytes to ``<target>.<timestamp>.backup``;
2. run the mutation;
3. on success remove the backup, on failure copy the backup back over the
   target and remove it.

If the restore itself fails a :class:`RollbackError` is raised and the
backup is left in place. A backup file that survives a call therefore
always means a failure that needs manual recovery.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator

from canvas_vault.constants import BACKUP_GRACE_SECONDS, BACKUP_SUFFIX
from canvas_vault.errors import AlreadyExistsError, NotFoundError, RollbackError

logger = logging.getLogger(__name__)


# ==============================================================================
# TEXT I/O
# ==============================================================================


def read_text(path: Path) -> str:
    """Read UTF-8 text without newline translation."""
    with path.open("r", encoding="utf-8", newline="") as handle:
        return handle.read()


def write_text(path: Path, content: str) -> None:
    """Write UTF-8 text without newline translation, so bytes match ``content``."""
    with path.open("w", encoding="utf-8", newline="") as handle:
        handle.write(content)


def combine_append(existing: str, content: str) -> str:
    """Join ``content`` after ``existing`` with a blank line between them.

    Leading and trailing whitespace of the existing text is trimmed first;
    an empty (or whitespace-only) note simply becomes ``content``.
    """
    trimmed = existing.strip()
    if not trimmed:
        return content
    return f"{trimmed}\n\n{content}"


def combine_prepend(existing: str, content: str) -> str:
    """Mirror of :func:`combine_append` with the new content first."""
    trimmed = existing.strip()
    if not trimmed:
        return content
    return f"{content}\n\n{trimmed}"


# ==============================================================================
# BACKUP LIFECYCLE
# ==============================================================================


def backup_path_for(target: Path) -> Path:
    """Return an unused ``<target>.<millis>.backup`` sibling path."""
    stamp = time.time_ns() // 1_000_000
    candidate = target.with_name(f"{target.name}.{stamp}{BACKUP_SUFFIX}")
    while candidate.exists():
        stamp += 1
        candidate = target.with_name(f"{target.name}.{stamp}{BACKUP_SUFFIX}")
    return candidate


def discard_backup(backup: Path) -> None:
    """Remove a backup file; failures are logged, never raised."""
    try:
        backup.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Failed to cleanup backup file '%s': %s", backup, exc)


def _restore(target: Path, backup: Path, original: BaseException) -> None:
    try:
        shutil.copyfile(backup, target)
    except OSError as rollback_exc:
        logger.error(
            "Rollback of '%s' failed; backup preserved at '%s': %s",
            target,
            backup,
            rollback_exc,
        )
        raise RollbackError(backup, original, rollback_exc) from original

    logger.warning("Restored '%s' from backup after failed write: %s", target, original)
    discard_backup(backup)


@contextmanager
def safe_mutation(target: Path) -> Iterator[Path]:
    """Snapshot ``target`` and guarantee restore-or-commit on every exit path.

    Args:
        target: Existing file that the body of the ``with`` block will modify.

    Yields:
        The backup path (for logging; the body must not touch it).

    Raises:
        OSError: If the snapshot cannot be taken. Nothing has been modified.
        RollbackError: If the body failed and the target could not be restored.
    """
    backup = backup_path_for(target)
    shutil.copy2(target, backup)

    try:
        yield backup
    except BaseException as exc:
        _restore(target, backup, exc)
        raise
    else:
        discard_backup(backup)


# ==============================================================================
# MUTATIONS
# ==============================================================================


def mutate_text(target: Path, transform: Callable[[str], str], resource: str) -> str:
    """Apply ``transform`` to the text of an existing file under backup protection.

    Args:
        target: Absolute path of the file to edit.
        transform: Maps the current text to the new text.
        resource: Human-readable resource label used in errors, e.g.
            ``"Note 'daily.md'"``.

    Returns:
        The text that was written.

    Raises:
        NotFoundError: If ``target`` is not an existing file.
    """
    if not target.is_file():
        raise NotFoundError(f"{resource} not found")

    with safe_mutation(target):
        updated = transform(read_text(target))
        write_text(target, updated)
    return updated


def replace_text(target: Path, content: str, resource: str) -> None:
    """Overwrite an existing file with ``content`` under backup protection."""
    mutate_text(target, lambda _existing: content, resource)


def create_exclusive(target: Path, content: str, resource: str) -> None:
    """Create ``target`` with ``content``; never overwrite.

    Parent directories are created first. There is nothing to protect, so
    no backup is taken.

    Raises:
        AlreadyExistsError: If ``target`` already exists.
    """
    target.parent.mkdir(parents=True, exist_ok=True)

    if target.exists():
        raise AlreadyExistsError(f"{resource} already exists")

    try:
        with target.open("x", encoding="utf-8", newline="") as handle:
            handle.write(content)
    except FileExistsError as exc:
        raise AlreadyExistsError(f"{resource} already exists") from exc


def schedule_backup_cleanup(backup: Path, delay: float = BACKUP_GRACE_SECONDS) -> None:
    """Remove ``backup`` after ``delay`` seconds on the running event loop.

    Outside an event loop there is nothing to defer to, so the backup is
    removed right away.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        discard_backup(backup)
        return
    loop.call_later(delay, discard_backup, backup)


def delete_with_grace(target: Path, resource: str, delay: float = BACKUP_GRACE_SECONDS) -> Path:
    """Unlink ``target`` after snapshotting it, keeping the snapshot briefly.

    Returns:
        The backup path whose removal has been scheduled.

    Raises:
        NotFoundError: If ``target`` is not an existing file.
    """
    if not target.is_file():
        raise NotFoundError(f"{resource} not found")

    backup = backup_path_for(target)
    shutil.copy2(target, backup)
    try:
        target.unlink()
    except BaseException:
        discard_backup(backup)
        raise

    schedule_backup_cleanup(backup, delay)
    return backup

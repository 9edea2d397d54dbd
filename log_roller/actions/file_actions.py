"""Copy, move and delete actions.

Each action scans its directories afresh, then handles the eligible files
one at a time. A failure on one file is logged and recorded on the
returned ``ActionResult``; it never stops the rest of the batch.
"""

import logging
import os
import shutil
from datetime import datetime
from typing import Iterable

from log_roller.actions.results import (
    STATUS_DONE,
    STATUS_FAILED,
    STATUS_SKIPPED,
    ActionResult,
)
from log_roller.retention.backup_path import resolve_backup_dir
from log_roller.retention.scanner import scan

logger = logging.getLogger(__name__)


def copy_files(
    source_dirs: Iterable[str],
    backup_root: str,
    granularity: str | None,
    threshold_days: int,
    extension_filter: bool = False,
    allowed_extensions: Iterable[str] = (),
    now: datetime | None = None,
) -> ActionResult:
    """Copy eligible files into date-partitioned folders under ``backup_root``.

    Existing destination files are left alone and reported as skipped, so
    running the copy twice is harmless. Sources are never modified.
    """
    logger.info("copy: executed (threshold=%d days)", threshold_days)
    result = ActionResult(action="copy")

    root_error = None
    try:
        os.makedirs(backup_root, exist_ok=True)
    except OSError as exc:
        root_error = exc
        logger.error("copy: cannot create backup root %s: %s", backup_root, exc)

    for record in scan(source_dirs, threshold_days, extension_filter,
                       allowed_extensions, now=now):
        if root_error is not None:
            result.add(record, STATUS_FAILED, error=str(root_error))
            continue

        try:
            target_dir = resolve_backup_dir(backup_root, record, granularity)
        except OSError as exc:
            logger.error("copy: %s: cannot create backup directory: %s", record.path, exc)
            result.add(record, STATUS_FAILED, error=str(exc))
            continue

        target = os.path.join(target_dir, record.name)
        logger.debug("copy: %s -> %s", record.path, target)

        if os.path.lexists(target):
            logger.debug("copy: %s already exists", target)
            result.add(record, STATUS_SKIPPED, destination=target)
            continue

        try:
            shutil.copy2(record.path, target)
        except OSError as exc:
            logger.error("copy: %s: %s", record.path, exc)
            result.add(record, STATUS_FAILED, destination=target, error=str(exc))
            continue
        result.add(record, STATUS_DONE, destination=target)

    _log_summary(result, "copied")
    return result


def move_files(
    source_dirs: Iterable[str],
    backup_root: str,
    threshold_days: int,
    extension_filter: bool = False,
    allowed_extensions: Iterable[str] = (),
    now: datetime | None = None,
) -> ActionResult:
    """Rename eligible files into the flat ``backup_root`` directory.

    A rename either completes or leaves the source where it was. Moves
    across filesystems fail rather than fall back to copy-and-delete, and
    an existing file at the destination is never replaced.
    """
    logger.info("move: executed (threshold=%d days)", threshold_days)
    result = ActionResult(action="move")

    root_error = None
    try:
        os.makedirs(backup_root, exist_ok=True)
    except OSError as exc:
        root_error = exc
        logger.error("move: cannot create backup root %s: %s", backup_root, exc)

    for record in scan(source_dirs, threshold_days, extension_filter,
                       allowed_extensions, now=now):
        if root_error is not None:
            result.add(record, STATUS_FAILED, error=str(root_error))
            continue

        target = os.path.join(backup_root, record.name)
        logger.debug("move: %s -> %s", record.path, target)

        if os.path.lexists(target):
            error = f"destination already exists: {target}"
            logger.error("move: %s: %s", record.path, error)
            result.add(record, STATUS_FAILED, destination=target, error=error)
            continue

        try:
            os.rename(record.path, target)
        except OSError as exc:
            logger.error("move: %s: %s", record.path, exc)
            result.add(record, STATUS_FAILED, destination=target, error=str(exc))
            continue
        result.add(record, STATUS_DONE, destination=target)

    _log_summary(result, "moved")
    return result


def delete_files(
    target_dirs: Iterable[str],
    hold_days: int,
    extension_filter: bool = False,
    allowed_extensions: Iterable[str] = (),
    now: datetime | None = None,
) -> ActionResult:
    """Remove eligible files from ``target_dirs``. There is no undo."""
    logger.info("delete: executed (hold=%d days)", hold_days)
    result = ActionResult(action="delete")

    for record in scan(target_dirs, hold_days, extension_filter,
                       allowed_extensions, now=now):
        logger.debug("delete: %s", record.path)
        try:
            os.remove(record.path)
        except OSError as exc:
            logger.error("delete: %s: %s", record.path, exc)
            result.add(record, STATUS_FAILED, error=str(exc))
            continue
        result.add(record, STATUS_DONE)

    _log_summary(result, "deleted")
    return result


def _log_summary(result: ActionResult, verb: str):
    logger.info(
        "%s: %s %d file(s), skipped %d, failed %d",
        result.action, verb, len(result.done), len(result.skipped), len(result.failed),
    )
    if result.outcomes:
        logger.info(
            "%s: processed files %s",
            result.action, [r.path for r in result.files],
        )

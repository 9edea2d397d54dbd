"""Date-partitioned backup directories.

A backed-up file lands under a sub-directory derived from its own
last-modified time::

    YEAR   ->  <root>/2024/
    MONTH  ->  <root>/2024/03/
    DATE   ->  <root>/2024/03/07/

Months are numbered 01-12 and days 01-31, both zero padded.
"""

import logging
import os

from log_roller.config.defaults import PARTITION_DATE, PARTITION_MONTH, PARTITION_YEAR
from log_roller.retention.scanner import FileRecord

logger = logging.getLogger(__name__)


def normalize_partition(granularity: str | None) -> str:
    """Map a configured granularity to YEAR, MONTH or DATE.

    Anything unrecognised (including ``DEFAULT``) means DATE.
    """
    value = (granularity or "").strip().upper()
    if value in (PARTITION_YEAR, PARTITION_MONTH, PARTITION_DATE):
        return value
    if value != "DEFAULT":
        logger.debug("Unknown partition %r, using %s", granularity, PARTITION_DATE)
    return PARTITION_DATE


def partition_parts(record: FileRecord, granularity: str | None) -> list[str]:
    modified = record.modified
    parts = [f"{modified.year:04d}"]
    partition = normalize_partition(granularity)
    if partition in (PARTITION_MONTH, PARTITION_DATE):
        parts.append(f"{modified.month:02d}")
    if partition == PARTITION_DATE:
        parts.append(f"{modified.day:02d}")
    return parts


def backup_dir_for(root_dir: str, record: FileRecord, granularity: str | None) -> str:
    """Compute the partition directory without touching the filesystem."""
    path = os.path.join(root_dir, *partition_parts(record, granularity))
    return os.path.join(path, "")


def resolve_backup_dir(root_dir: str, record: FileRecord, granularity: str | None) -> str:
    """Return the partition directory for ``record``, creating it if needed.

    The returned path ends with a separator. Creation errors propagate as
    ``OSError``.
    """
    backup_dir = backup_dir_for(root_dir, record, granularity)
    logger.debug(
        "last modified %s -> %s", record.modified.strftime("%Y-%m-%d"), backup_dir
    )
    os.makedirs(backup_dir, exist_ok=True)
    return backup_dir

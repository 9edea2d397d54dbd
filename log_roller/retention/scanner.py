"""Retention scanning.

Selects the files in a set of directories that are old enough to act on.
Only the immediate children of each directory are considered, and
sub-directories are never selected. Dates are compared on the local wall
clock, so "N days ago" means the same time of day N calendar days back.
"""

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Iterable

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class FileRecord:
    """Snapshot of one directory entry's metadata."""
    path: str
    name: str
    modified: datetime
    is_dir: bool

    @classmethod
    def from_path(cls, path: str) -> "FileRecord":
        abs_path = os.path.abspath(path)
        st = os.stat(abs_path)
        return cls(
            path=abs_path,
            name=os.path.basename(abs_path),
            modified=datetime.fromtimestamp(st.st_mtime),
            is_dir=os.path.isdir(abs_path),
        )

    @property
    def extension(self) -> str | None:
        return get_extension(self.name)


@dataclass(frozen=True)
class RetentionRule:
    threshold_days: int
    extension_filter: bool = False
    allowed_extensions: frozenset[str] = frozenset()

    def cutoff(self, now: datetime | None = None) -> datetime:
        return cutoff_instant(self.threshold_days, now)


def get_extension(filename: str) -> str | None:
    """Return the text after the final ``.``, or None if there is no dot.

    ``a.tar.gz`` -> ``gz``; ``a.`` -> ``""``; ``a`` -> None.
    """
    if "." not in filename:
        return None
    return filename.rsplit(".", 1)[1]


def cutoff_instant(threshold_days: int, now: datetime | None = None) -> datetime:
    """Files modified strictly before this instant are old enough.

    Negative thresholds are not rejected; they push the cutoff into the
    future.
    """
    if now is None:
        now = datetime.now()
    return now - timedelta(days=threshold_days)


def is_eligible(
    record: FileRecord,
    cutoff: datetime,
    extension_filter: bool = False,
    allowed_extensions: Iterable[str] = (),
) -> bool:
    """Pure eligibility predicate over already-fetched metadata."""
    if record.is_dir:
        return False
    if not record.modified < cutoff:
        return False
    if extension_filter:
        ext = record.extension
        if not ext or ext not in allowed_extensions:
            return False
    return True


def list_directory(directory: str) -> list[FileRecord]:
    """Return records for the immediate children of ``directory``.

    A missing path or a non-directory yields an empty list. Entries that
    disappear between listing and stat are left out.
    """
    if not os.path.isdir(directory):
        logger.debug("Not a directory, skipping: %s", directory)
        return []

    records = []
    for name in sorted(os.listdir(directory)):
        try:
            records.append(FileRecord.from_path(os.path.join(directory, name)))
        except OSError as exc:
            logger.debug("Could not stat %s: %s", name, exc)
    return records


def scan(
    directories: Iterable[str],
    threshold_days: int,
    extension_filter: bool = False,
    allowed_extensions: Iterable[str] = (),
    now: datetime | None = None,
) -> list[FileRecord]:
    """Collect eligible files across ``directories`` in the given order.

    Results are concatenated without deduplication: a file reachable
    through two listed directories appears twice.
    """
    allowed = frozenset(allowed_extensions)
    cutoff = cutoff_instant(threshold_days, now)
    logger.debug("Scanning with cutoff %s (threshold=%d days)", cutoff.isoformat(), threshold_days)

    eligible: list[FileRecord] = []
    for directory in directories:
        for record in list_directory(directory):
            if is_eligible(record, cutoff, extension_filter, allowed):
                eligible.append(record)
    return eligible


def scan_rule(directories: Iterable[str], rule: RetentionRule,
              now: datetime | None = None) -> list[FileRecord]:
    return scan(directories, rule.threshold_days, rule.extension_filter,
                rule.allowed_extensions, now=now)

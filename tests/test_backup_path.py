"""Tests for date-partitioned backup directories."""

import os
import stat
from datetime import datetime

import pytest

from log_roller.retention.backup_path import (
    backup_dir_for,
    normalize_partition,
    resolve_backup_dir,
)
from log_roller.retention.scanner import FileRecord


def record(modified):
    return FileRecord(path="/logs/app.log", name="app.log", modified=modified, is_dir=False)


@pytest.fixture
def root(tmp_path):
    return str(tmp_path / "backup")


class TestNormalizePartition:
    @pytest.mark.parametrize("value,expected", [
        ("YEAR", "YEAR"),
        ("month", "MONTH"),
        (" Date ", "DATE"),
        ("DEFAULT", "DATE"),
        ("weekly", "DATE"),
        ("", "DATE"),
        (None, "DATE"),
    ])
    def test_values(self, value, expected):
        assert normalize_partition(value) == expected


class TestBackupDirFor:
    def test_year(self, root):
        path = backup_dir_for(root, record(datetime(2023, 1, 5)), "YEAR")
        assert path == os.path.join(root, "2023", "")

    def test_month_uses_file_mtime(self, root):
        path = backup_dir_for(root, record(datetime(2023, 1, 5)), "MONTH")
        assert path == os.path.join(root, "2023", "01", "")

    def test_date(self, root):
        path = backup_dir_for(root, record(datetime(2022, 12, 31)), "DATE")
        assert path == os.path.join(root, "2022", "12", "31", "")

    def test_unknown_falls_back_to_date(self, root):
        path = backup_dir_for(root, record(datetime(2022, 7, 4)), "HOURLY")
        assert path == os.path.join(root, "2022", "07", "04", "")

    def test_ends_with_separator(self, root):
        for granularity in ("YEAR", "MONTH", "DATE"):
            assert backup_dir_for(root, record(datetime(2024, 2, 29)), granularity).endswith(os.sep)

    def test_does_not_create(self, root):
        backup_dir_for(root, record(datetime(2024, 2, 29)), "DATE")
        assert not os.path.exists(root)


class TestResolveBackupDir:
    def test_month_directory_created(self, root):
        path = resolve_backup_dir(root, record(datetime(2024, 3, 7, 23, 59)), "MONTH")
        assert path == os.path.join(root, "2024", "03", "")
        assert os.path.isdir(path)

    def test_idempotent(self, root):
        rec = record(datetime(2024, 3, 7))
        first = resolve_backup_dir(root, rec, "DATE")
        second = resolve_backup_dir(root, rec, "DATE")
        assert first == second
        assert os.path.isdir(second)

    def test_file_in_the_way_raises(self, tmp_path):
        root = tmp_path / "backup"
        root.mkdir()
        (root / "2024").write_text("not a directory")
        with pytest.raises(OSError):
            resolve_backup_dir(str(root), record(datetime(2024, 3, 7)), "MONTH")

    @pytest.mark.skipif(
        os.name == "nt" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="Needs POSIX permissions enforced for a non-root user",
    )
    def test_permission_denied_raises(self, tmp_path):
        root = tmp_path / "backup"
        root.mkdir()
        os.chmod(root, stat.S_IRUSR | stat.S_IXUSR)
        try:
            with pytest.raises(PermissionError):
                resolve_backup_dir(str(root), record(datetime(2024, 3, 7)), "YEAR")
        finally:
            os.chmod(root, stat.S_IRWXU)

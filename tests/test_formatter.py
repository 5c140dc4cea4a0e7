"""
Tests for the metadata formatter.
"""

import os
import pwd
import stat
from datetime import datetime
from pathlib import Path

import pytest

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from modules.fs_explorer import formatter
from modules.fs_explorer.formatter import (
    EntryKind,
    build_entry,
    entry_kind,
    format_permissions,
    format_timestamp,
    group_name,
    owner_name,
)


class TestFormatPermissions:
    """Test permission string rendering."""

    def test_regular_file_755(self):
        """A non-directory 755 renders with a leading dash."""
        assert format_permissions(stat.S_IFREG | 0o755) == "-rwxr-xr-x"

    def test_directory_755(self):
        """A directory 755 renders with a leading d."""
        assert format_permissions(stat.S_IFDIR | 0o755) == "drwxr-xr-x"

    def test_bare_permission_bits(self):
        """Mode bits without a type are treated as a non-directory."""
        assert format_permissions(0o755) == "-rwxr-xr-x"

    def test_symlink_not_marked(self):
        """Symlinks are not distinguished in the first character."""
        assert format_permissions(stat.S_IFLNK | 0o777) == "-rwxrwxrwx"

    def test_no_permissions(self):
        assert format_permissions(stat.S_IFREG) == "----------"

    def test_mixed_bits(self):
        assert format_permissions(stat.S_IFREG | 0o640) == "-rw-r-----"
        assert format_permissions(stat.S_IFDIR | 0o701) == "drwx-----x"

    def test_special_bits_ignored(self):
        """Setuid and sticky bits don't leak into the nine rwx slots."""
        assert format_permissions(stat.S_IFDIR | stat.S_ISVTX | 0o777) == "drwxrwxrwx"

    def test_always_ten_characters(self):
        for mode in (0, 0o777, stat.S_IFDIR | 0o700, stat.S_IFREG | 0o111):
            assert len(format_permissions(mode)) == 10


class TestNameResolution:
    """Test owner and group lookups."""

    def test_owner_name_for_current_user(self):
        """The current uid resolves to its passwd name."""
        uid = os.getuid()
        assert owner_name(uid) == pwd.getpwuid(uid).pw_name

    def test_unknown_uid_falls_back_to_number(self, monkeypatch):
        """An unregistered uid is shown as its decimal value."""
        def missing(uid):
            raise KeyError(uid)

        monkeypatch.setattr(formatter.pwd, "getpwuid", missing)
        assert owner_name(4242) == "4242"

    def test_unknown_gid_falls_back_to_number(self, monkeypatch):
        """An unregistered gid is shown as its decimal value."""
        def missing(gid):
            raise KeyError(gid)

        monkeypatch.setattr(formatter.grp, "getgrgid", missing)
        assert group_name(31337) == "31337"


class TestTimestampAndKind:
    """Test timestamp formatting and entry classification."""

    def test_timestamp_minute_precision(self):
        """Timestamps are local time formatted to the minute."""
        mtime = 1700000000.75
        expected = datetime.fromtimestamp(mtime).strftime("%Y-%m-%d %H:%M")
        assert format_timestamp(mtime) == expected
        assert len(format_timestamp(mtime)) == 16

    def test_entry_kinds(self):
        assert entry_kind(stat.S_IFDIR | 0o755) == EntryKind.DIRECTORY
        assert entry_kind(stat.S_IFLNK | 0o777) == EntryKind.SYMLINK
        assert entry_kind(stat.S_IFREG | 0o644) == EntryKind.FILE
        assert entry_kind(stat.S_IFIFO | 0o644) == EntryKind.OTHER

    def test_build_entry_from_lstat(self, tmp_path):
        """build_entry fills every column from an lstat result."""
        target = tmp_path / "data.bin"
        target.write_bytes(b"x" * 12)
        os.chmod(target, 0o640)

        entry = build_entry("data.bin", os.lstat(target))

        assert entry.name == "data.bin"
        assert entry.kind == EntryKind.FILE
        assert entry.size == 12
        assert entry.permissions == "-rw-r-----"
        assert entry.owner == owner_name(os.getuid())
        assert entry.error is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

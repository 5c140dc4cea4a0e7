"""
Metadata formatting for directory listings.

Turns raw stat data into display strings. Nothing here touches the
filesystem apart from the user and group database lookups.
"""

import grp
import os
import pwd
import stat
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"

_PERMISSION_BITS = (
    (stat.S_IRUSR, "r"), (stat.S_IWUSR, "w"), (stat.S_IXUSR, "x"),
    (stat.S_IRGRP, "r"), (stat.S_IWGRP, "w"), (stat.S_IXGRP, "x"),
    (stat.S_IROTH, "r"), (stat.S_IWOTH, "w"), (stat.S_IXOTH, "x"),
)


class EntryKind(Enum):
    """What a directory entry is, as seen without following links."""
    DIRECTORY = "Directory"
    SYMLINK = "Symlink"
    FILE = "File"
    OTHER = "Other"


@dataclass
class DirectoryEntry:
    """One row of a directory listing."""
    name: str
    kind: Optional[EntryKind] = None
    size: int = 0
    permissions: str = ""
    owner: str = ""
    group: str = ""
    modified: str = ""
    error: Optional[str] = None


def format_permissions(mode: int) -> str:
    """
    Render mode bits as ``drwxr-xr-x`` style text.

    Only directories get a type letter; everything else shows ``-``.
    """
    chars = ["d" if stat.S_ISDIR(mode) else "-"]
    for bit, letter in _PERMISSION_BITS:
        chars.append(letter if mode & bit else "-")
    return "".join(chars)


def owner_name(uid: int) -> str:
    """User name for uid, or the uid itself when it has no passwd entry."""
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return str(uid)


def group_name(gid: int) -> str:
    """Group name for gid, or the gid itself when it has no group entry."""
    try:
        return grp.getgrgid(gid).gr_name
    except KeyError:
        return str(gid)


def format_timestamp(mtime: float) -> str:
    return datetime.fromtimestamp(mtime).strftime(TIMESTAMP_FORMAT)


def entry_kind(mode: int) -> EntryKind:
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    if stat.S_ISLNK(mode):
        return EntryKind.SYMLINK
    if stat.S_ISREG(mode):
        return EntryKind.FILE
    return EntryKind.OTHER


def build_entry(name: str, st: os.stat_result) -> DirectoryEntry:
    """
    Build a DirectoryEntry from an lstat result.

    Args:
        name: Entry name as returned by the directory read
        st: Result of os.lstat on the entry

    Returns:
        Fully populated DirectoryEntry
    """
    return DirectoryEntry(
        name=name,
        kind=entry_kind(st.st_mode),
        size=st.st_size,
        permissions=format_permissions(st.st_mode),
        owner=owner_name(st.st_uid),
        group=group_name(st.st_gid),
        modified=format_timestamp(st.st_mtime),
    )

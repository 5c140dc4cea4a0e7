"""
Directory listing.

Reads the immediate children of one directory and joins each with its
formatted metadata.
"""

import os
from dataclasses import dataclass, field
from typing import List

from core.results import OperationResult, ErrorKind, classify_os_error, describe_os_error
from .formatter import DirectoryEntry, build_entry


PSEUDO_ENTRIES = (".", "..")


@dataclass
class DirectoryListing:
    """Sorted entries of one directory."""
    path: str
    entries: List[DirectoryEntry] = field(default_factory=list)

    @property
    def errors(self) -> List[DirectoryEntry]:
        return [e for e in self.entries if e.error is not None]


def read_names(path: str) -> List[str]:
    """Names in a directory in byte order; raises OSError if it can't be opened."""
    with os.scandir(path) as it:
        names = [entry.name for entry in it]
    return sorted(names, key=os.fsencode)


def list_directory(path: str, include_pseudo: bool = True) -> OperationResult:
    """
    List a directory with per-entry metadata.

    Args:
        path: Directory to list
        include_pseudo: Whether to include the ``.`` and ``..`` entries

    Returns:
        OperationResult whose data is a DirectoryListing on success. A
        failure here means the directory itself could not be read; entries
        whose metadata can't be read are reported individually instead.
    """
    if not path:
        return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "No directory given")

    try:
        names = read_names(path)
    except OSError as e:
        return OperationResult.fail(
            classify_os_error(e),
            f"Failed to open directory: {describe_os_error(e)}"
        )

    if include_pseudo:
        names = sorted(names + list(PSEUDO_ENTRIES), key=os.fsencode)

    listing = DirectoryListing(path=path)
    for name in names:
        try:
            st = os.lstat(os.path.join(path, name))
        except OSError as e:
            listing.entries.append(DirectoryEntry(name=name, error=describe_os_error(e)))
            continue
        listing.entries.append(build_entry(name, st))

    return OperationResult.ok(f"Listed {len(listing.entries)} entries in {path}", data=listing)

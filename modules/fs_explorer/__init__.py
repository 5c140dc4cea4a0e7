"""
Filesystem explorer module.

Provides directory listing, file and directory operations, recursive
search and the interactive menu session.
"""

from .file_ops import FileOperator, change_directory
from .formatter import DirectoryEntry, EntryKind, format_permissions
from .lister import DirectoryListing, list_directory
from .search import search_tree
from .session import ExplorerSession

__all__ = [
    'FileOperator',
    'change_directory',
    'DirectoryEntry',
    'EntryKind',
    'format_permissions',
    'DirectoryListing',
    'list_directory',
    'search_tree',
    'ExplorerSession',
]

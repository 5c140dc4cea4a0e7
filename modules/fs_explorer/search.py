"""
Recursive filename search.

Walks a subtree and collects every entry whose name contains a pattern.
The first unreadable directory stops the walk.
"""

import os
from typing import List

from core.results import OperationResult, ErrorKind, classify_os_error, describe_os_error


class _TraversalAborted(Exception):
    def __init__(self, error: OSError):
        super().__init__(str(error))
        self.error = error


def _abort(error: OSError) -> None:
    raise _TraversalAborted(error)


def search_tree(root: str, pattern: str) -> OperationResult:
    """
    Find entries under root whose base name contains pattern.

    Matching is a case-sensitive substring test; an empty pattern matches
    everything. Symlinked directories are reported but not descended into.

    Args:
        root: Directory to search from (not itself a candidate)
        pattern: Substring to look for

    Returns:
        OperationResult whose data is the list of matching paths. On a
        traversal error the result is a failure and data holds the paths
        matched before the walk stopped.
    """
    if not root:
        return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "No search root given")

    matches: List[str] = []
    try:
        for dirpath, dirnames, filenames in os.walk(root, onerror=_abort, followlinks=False):
            dirnames.sort(key=os.fsencode)
            for name in sorted(dirnames + filenames, key=os.fsencode):
                if pattern in name:
                    matches.append(os.path.join(dirpath, name))
    except _TraversalAborted as aborted:
        error = aborted.error
        # a bad root is reported as such; anything deeper is a traversal error
        kind = classify_os_error(error) if error.filename == root else ErrorKind.TRAVERSAL
        where = error.filename or root
        return OperationResult.fail(
            kind,
            f"Search error: {where}: {describe_os_error(error)}",
            data=matches
        )

    return OperationResult.ok(
        f"Found {len(matches)} match(es) for \"{pattern}\" under {root}",
        data=matches
    )

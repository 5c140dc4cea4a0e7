"""
Operation results for the File Explorer.

Every filesystem operation reports its outcome through an OperationResult
instead of raising, so callers branch on the error kind tag.
"""

import errno
import shutil
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    """Categories of failure an operation can report."""
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    NOT_EMPTY = "not_empty"
    INVALID_ARGUMENT = "invalid_argument"
    NOT_A_DIRECTORY = "not_a_directory"
    IS_A_DIRECTORY = "is_a_directory"
    ALREADY_EXISTS = "already_exists"
    CROSS_DEVICE = "cross_device"
    PARTIAL_MOVE = "partial_move"
    TRAVERSAL = "traversal"
    OTHER = "other"


_ERRNO_KINDS = {
    errno.ENOENT: ErrorKind.NOT_FOUND,
    errno.EACCES: ErrorKind.PERMISSION_DENIED,
    errno.EPERM: ErrorKind.PERMISSION_DENIED,
    errno.ENOTEMPTY: ErrorKind.NOT_EMPTY,
    errno.EINVAL: ErrorKind.INVALID_ARGUMENT,
    errno.ENOTDIR: ErrorKind.NOT_A_DIRECTORY,
    errno.EISDIR: ErrorKind.IS_A_DIRECTORY,
    errno.EXDEV: ErrorKind.CROSS_DEVICE,
}


@dataclass
class OperationResult:
    """Result of a filesystem operation."""
    success: bool
    message: str
    kind: Optional[ErrorKind] = None
    data: Optional[Any] = None

    @classmethod
    def ok(cls, message: str, data: Optional[Any] = None) -> "OperationResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(
        cls,
        kind: ErrorKind,
        message: str,
        data: Optional[Any] = None
    ) -> "OperationResult":
        return cls(success=False, message=message, kind=kind, data=data)


def classify_os_error(exc: BaseException, removing_dir: bool = False) -> ErrorKind:
    """
    Map an OSError (or shutil.Error) to an ErrorKind.

    Args:
        exc: The exception raised by the filesystem call
        removing_dir: True when the failing call was rmdir, where some
            platforms report a populated directory as EEXIST

    Returns:
        The matching ErrorKind, OTHER when nothing specific applies
    """
    if isinstance(exc, shutil.SameFileError):
        return ErrorKind.INVALID_ARGUMENT
    if isinstance(exc, shutil.Error):
        return ErrorKind.OTHER

    code = getattr(exc, "errno", None)
    if code == errno.EEXIST:
        return ErrorKind.NOT_EMPTY if removing_dir else ErrorKind.ALREADY_EXISTS
    return _ERRNO_KINDS.get(code, ErrorKind.OTHER)


def describe_os_error(exc: BaseException) -> str:
    """Return the diagnostic text of an OS error without the repr noise."""
    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror
    return str(exc)

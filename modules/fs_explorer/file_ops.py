"""
File operations for the File Explorer.

Create, delete, copy, move and chmod, plus audited wrappers around listing
and search. Every method returns an OperationResult; none of them raise
for filesystem failures.
"""

import os
import shutil
import stat
from typing import Mapping, Optional

from core.logger import AuditLogger, ActionType, ActionStatus
from core.results import OperationResult, ErrorKind, classify_os_error, describe_os_error
from .lister import list_directory
from .search import search_tree


INVALID_MODE_MESSAGE = "Invalid mode. Provide octal like 755 or 0755"


def parse_mode(mode: str) -> Optional[int]:
    """
    Parse an octal permission string.

    Accepts ``755``, ``0755`` and ``0o755``. Returns None for anything that
    is not octal or falls outside the nine permission bits.
    """
    try:
        value = int(mode.strip(), 8)
    except (ValueError, AttributeError):
        return None
    if value < 0 or value > 0o777:
        return None
    return value


def expand_home(path: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """Expand a leading ``~`` from $HOME, falling back to ``/``."""
    if path != "~" and not path.startswith("~/"):
        return path
    env = os.environ if environ is None else environ
    home = env.get("HOME") or "/"
    return home + path[1:] if path != "~" else home


def change_directory(
    cwd: str,
    target: str,
    environ: Optional[Mapping[str, str]] = None
) -> OperationResult:
    """
    Work out the new working directory for a cd request.

    Nothing changes here; the caller adopts ``result.data`` on success.

    Args:
        cwd: Current working directory
        target: Directory to change to, relative to cwd unless absolute
        environ: Environment used to resolve ``~``

    Returns:
        OperationResult whose data is the resolved new directory
    """
    if not target:
        return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "No directory given")

    new_path = os.path.join(cwd, expand_home(target, environ))
    try:
        st = os.stat(new_path)
    except OSError as e:
        return OperationResult.fail(classify_os_error(e), f"chdir failed: {describe_os_error(e)}")

    if not stat.S_ISDIR(st.st_mode):
        return OperationResult.fail(ErrorKind.NOT_A_DIRECTORY, "chdir failed: Not a directory")
    if not os.access(new_path, os.X_OK):
        return OperationResult.fail(ErrorKind.PERMISSION_DENIED, "chdir failed: Permission denied")

    resolved = os.path.realpath(new_path)
    return OperationResult.ok(f"Changed to: {resolved}", data=resolved)


def _is_within(path: str, directory: str) -> bool:
    """True if path is directory itself or lies below it."""
    if not os.path.isdir(directory) or os.path.islink(directory):
        return False
    base = os.path.realpath(directory)
    target = os.path.realpath(path)
    return target == base or target.startswith(base + os.sep)


def _discard_source(path: str) -> None:
    """Remove a moved-away source, whole tree for directories."""
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
    else:
        os.remove(path)


class FileOperator:
    """Operations on files and directories with audit logging."""

    def __init__(self, logger: Optional[AuditLogger] = None):
        """
        Initialize FileOperator.

        Args:
            logger: Audit logger instance, an in-memory one if omitted
        """
        self.logger = logger or AuditLogger()

    def _record(
        self,
        action_type: ActionType,
        description: str,
        target: Optional[str],
        result: OperationResult,
        metadata: Optional[dict] = None
    ) -> OperationResult:
        """Write the audit entry for a finished operation and pass it through."""
        meta = dict(metadata or {})
        if result.kind is not None:
            meta["error_kind"] = result.kind.value
        self.logger.log_action(
            action_type=action_type,
            description=description,
            target=target,
            status=ActionStatus.SUCCEEDED if result.success else ActionStatus.FAILED,
            result=result.message,
            metadata=meta
        )
        return result

    def list_directory(self, path: str, include_pseudo: bool = True) -> OperationResult:
        """
        List contents of a directory.

        Args:
            path: Path to the directory
            include_pseudo: Include the ``.`` and ``..`` entries

        Returns:
            OperationResult carrying a DirectoryListing
        """
        result = list_directory(path, include_pseudo=include_pseudo)
        metadata = {}
        if result.success:
            metadata["entries"] = len(result.data.entries)
            metadata["unreadable"] = len(result.data.errors)
        return self._record(ActionType.LIST, f"List directory: {path}", path, result, metadata)

    def change_directory(self, cwd: str, target: str) -> OperationResult:
        """Audited change_directory; the caller owns the working directory."""
        result = change_directory(cwd, target)
        return self._record(
            ActionType.NAVIGATE,
            f"Change directory: {target}",
            result.data if result.success else (target or None),
            result,
            {"from": cwd}
        )

    def search(self, root: str, pattern: str) -> OperationResult:
        """
        Search a subtree for names containing pattern.

        Args:
            root: Directory to search under
            pattern: Substring to match against entry names

        Returns:
            OperationResult carrying the list of matching paths
        """
        result = search_tree(root, pattern)
        return self._record(
            ActionType.SEARCH,
            f"Search for \"{pattern}\" under {root}",
            root,
            result,
            {"pattern": pattern, "matches": len(result.data or [])}
        )

    def create_file(self, path: str) -> OperationResult:
        """
        Create an empty file, leaving an existing one untouched.

        Args:
            path: Path where the file should be created

        Returns:
            OperationResult; fails if the parent is missing or not writable
        """
        if not path:
            result = OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "No filename given")
            return self._record(ActionType.CREATE, "Create file", None, result)

        try:
            with open(path, "a", encoding="utf-8"):
                pass
            result = OperationResult.ok(f"Created: {path}")
        except OSError as e:
            result = OperationResult.fail(
                classify_os_error(e),
                f"Failed to create file: {describe_os_error(e)}"
            )

        return self._record(ActionType.CREATE, f"Create file: {path}", path, result)

    def delete_path(self, path: str) -> OperationResult:
        """
        Delete a file or an empty directory.

        Directories are never removed recursively; a populated directory
        fails with ErrorKind.NOT_EMPTY.

        Args:
            path: Path to delete

        Returns:
            OperationResult
        """
        if not path:
            result = OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "No path given")
            return self._record(ActionType.DELETE, "Delete", None, result)

        is_dir = os.path.isdir(path) and not os.path.islink(path)
        noun = "directory" if is_dir else "file"
        try:
            if is_dir:
                os.rmdir(path)
            else:
                os.remove(path)
            result = OperationResult.ok(f"Deleted {noun}: {path}")
        except OSError as e:
            result = OperationResult.fail(
                classify_os_error(e, removing_dir=is_dir),
                f"Failed to remove {noun}: {describe_os_error(e)}"
            )

        return self._record(ActionType.DELETE, f"Delete {noun}: {path}", path, result)

    def _copy(self, src: str, dst: str) -> OperationResult:
        """Copy without auditing; shared by copy_path and the move fallback."""
        if not src or not dst:
            return OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "Source and destination are required")

        if not os.path.lexists(src):
            return OperationResult.fail(ErrorKind.NOT_FOUND, f"Copy failed: source not found: {src}")

        try:
            if os.path.isdir(src) and not os.path.islink(src):
                shutil.copytree(src, dst, symlinks=True, dirs_exist_ok=True)
            else:
                shutil.copy2(src, dst, follow_symlinks=False)
        except (OSError, shutil.Error) as e:
            return OperationResult.fail(classify_os_error(e), f"Copy failed: {e}")

        return OperationResult.ok(f"Copied to: {dst}")

    def copy_path(self, src: str, dst: str) -> OperationResult:
        """
        Copy a file, or a directory tree, to a destination.

        Existing destination files with the same relative path are
        overwritten. Symlinks inside a tree are copied as links.

        Args:
            src: Source path
            dst: Destination path

        Returns:
            OperationResult
        """
        result = self._copy(src, dst)
        return self._record(
            ActionType.COPY,
            f"Copy {src} to {dst}",
            dst or None,
            result,
            {"source": src}
        )

    def move_path(self, src: str, dst: str) -> OperationResult:
        """
        Move or rename a file or directory.

        A plain rename is tried first. If it is refused (different
        filesystems, for instance) the source is copied to the destination
        and then removed. When the copy lands but the source can't be
        removed, both exist and the result is ErrorKind.PARTIAL_MOVE.

        Args:
            src: Source path
            dst: Destination path

        Returns:
            OperationResult
        """
        description = f"Move {src} to {dst}"
        metadata = {"source": src, "fallback": False}

        if not src or not dst:
            result = OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "Source and destination are required")
            return self._record(ActionType.MOVE, description, None, result, metadata)

        if not os.path.lexists(src):
            result = OperationResult.fail(ErrorKind.NOT_FOUND, f"Move failed: source not found: {src}")
            return self._record(ActionType.MOVE, description, dst, result, metadata)

        try:
            os.rename(src, dst)
            result = OperationResult.ok(f"Moved to: {dst}")
            return self._record(ActionType.MOVE, description, dst, result, metadata)
        except OSError as e:
            metadata["fallback"] = True
            metadata["rename_error"] = describe_os_error(e)
            metadata["rename_error_kind"] = classify_os_error(e).value

        if _is_within(dst, src):
            result = OperationResult.fail(
                ErrorKind.INVALID_ARGUMENT,
                f"Rename failed: cannot move {src} into itself"
            )
            return self._record(ActionType.MOVE, description, dst, result, metadata)

        copied = self._copy(src, dst)
        if not copied.success:
            result = OperationResult.fail(
                copied.kind,
                f"Rename failed: {metadata['rename_error']}; {copied.message}"
            )
            return self._record(ActionType.MOVE, description, dst, result, metadata)

        try:
            _discard_source(src)
        except OSError as e:
            result = OperationResult.fail(
                ErrorKind.PARTIAL_MOVE,
                f"Copied to {dst} but could not remove {src}: {describe_os_error(e)}. "
                f"Both copies now exist."
            )
            return self._record(ActionType.MOVE, description, dst, result, metadata)

        result = OperationResult.ok(f"Moved to: {dst} (copied and removed source)")
        return self._record(ActionType.MOVE, description, dst, result, metadata)

    def change_permission(self, path: str, mode: str) -> OperationResult:
        """
        Set the permission bits of a path from an octal string.

        Args:
            path: Target path
            mode: Octal mode such as ``755`` or ``0755``

        Returns:
            OperationResult; ErrorKind.INVALID_ARGUMENT for a bad mode,
            in which case the path is not touched
        """
        description = f"Change permissions of {path} to {mode}"

        if not path:
            result = OperationResult.fail(ErrorKind.INVALID_ARGUMENT, "No path given")
            return self._record(ActionType.CHMOD, description, None, result)

        value = parse_mode(mode)
        if value is None:
            result = OperationResult.fail(ErrorKind.INVALID_ARGUMENT, INVALID_MODE_MESSAGE)
            return self._record(ActionType.CHMOD, description, path, result, {"mode": mode})

        try:
            os.chmod(path, value)
            result = OperationResult.ok(f"Permissions changed for {path}")
        except OSError as e:
            result = OperationResult.fail(
                classify_os_error(e),
                f"chmod failed: {describe_os_error(e)}"
            )

        return self._record(ActionType.CHMOD, description, path, result, {"mode": oct(value)})

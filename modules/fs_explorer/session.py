"""
Interactive menu loop for the File Explorer.

The session owns the working directory. Operations get paths already
resolved against it, so the process working directory is never changed.
"""

import os
from typing import Optional, TextIO

from rich.console import Console
from rich.markup import escape

from core.config import ExplorerConfig
from core.logger import AuditLogger
from .file_ops import FileOperator, expand_home
from .render import (
    render_banner,
    render_menu,
    render_result,
    render_listing,
    render_matches,
    render_audit_warning,
    printable,
)


class ExplorerSession:
    """
    Menu-driven REPL.

    Reads a numeric selector, runs one command, prints its outcome and
    returns to the prompt until ``0`` or end of input.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        config: Optional[ExplorerConfig] = None,
        operator: Optional[FileOperator] = None,
        cwd: Optional[str] = None,
        stream: Optional[TextIO] = None
    ):
        """
        Initialize the session.

        Args:
            console: Console to print to and read from
            config: Explorer settings, defaults if omitted
            operator: FileOperator to run commands with
            cwd: Starting directory, the process directory if omitted
            stream: Input stream; stdin when omitted
        """
        self.config = config or ExplorerConfig()
        self.console = console or Console(no_color=not self.config.color)
        self.operator = operator or FileOperator(AuditLogger(self.config.audit_log))
        self.cwd = os.path.realpath(cwd or os.getcwd())
        self.stream = stream
        self._audit_warned = False

        self._commands = {
            1: self.list_files,
            2: self.change_directory,
            3: self.create_file,
            4: self.delete_path,
            5: self.copy_path,
            6: self.move_path,
            7: self.search,
            8: self.change_permission,
            9: self.show_cwd,
            10: self.list_files,
        }

    def _read(self, prompt: str) -> str:
        """Read one line, raising EOFError at end of input."""
        line = self.console.input(prompt, stream=self.stream)
        if self.stream is not None and line == "":
            raise EOFError
        return line.rstrip("\r\n")

    def _ask(self, label: str) -> str:
        return self._read(f"{label}: ")

    def resolve(self, path: str) -> str:
        """Make a user-supplied path relative to the working directory."""
        if not path:
            return path
        return os.path.join(self.cwd, expand_home(path))

    def run(self) -> int:
        """
        Run the loop until the user exits.

        Returns:
            Process exit status, always 0
        """
        render_banner(self.console, self.cwd)
        self._warn_audit_failure()
        render_menu(self.console)

        while True:
            try:
                raw = self._read(f"\n[bold green]{escape('[' + printable(self.cwd) + ']')}> [/bold green]").strip()
                if not raw:
                    continue
                if not self.dispatch(raw):
                    break
            except (EOFError, KeyboardInterrupt):
                self.console.print("\n[dim]Goodbye![/dim]")
                break

        return 0

    def dispatch(self, raw: str) -> bool:
        """
        Handle one selector.

        Returns:
            False when the session should end, True otherwise
        """
        try:
            choice = int(raw)
        except ValueError:
            self.console.print("[red]Invalid input[/red]")
            return True

        if choice == 0:
            self.console.print("[yellow]Exiting. Bye![/yellow]")
            return False

        command = self._commands.get(choice)
        if command is None:
            render_menu(self.console)
            return True

        command()
        self._warn_audit_failure()
        return True

    def _warn_audit_failure(self) -> None:
        """Tell the user once when the audit log file stopped working."""
        error = self.operator.logger.write_error
        if error and not self._audit_warned:
            render_audit_warning(self.console, error)
            self._audit_warned = True

    def list_files(self) -> None:
        result = self.operator.list_directory(self.cwd, include_pseudo=self.config.show_pseudo_entries)
        render_listing(self.console, result)

    def change_directory(self) -> None:
        target = self._ask("Enter directory")
        result = self.operator.change_directory(self.cwd, target)
        if result.success:
            self.cwd = result.data
        render_result(self.console, result)

    def create_file(self) -> None:
        name = self._ask("Enter filename")
        render_result(self.console, self.operator.create_file(self.resolve(name)))

    def delete_path(self) -> None:
        target = self._ask("Enter path to delete")
        render_result(self.console, self.operator.delete_path(self.resolve(target)))

    def copy_path(self) -> None:
        src = self._ask("Enter source path")
        dst = self._ask("Enter destination path")
        render_result(self.console, self.operator.copy_path(self.resolve(src), self.resolve(dst)))

    def move_path(self) -> None:
        src = self._ask("Enter source path")
        dst = self._ask("Enter destination path")
        render_result(self.console, self.operator.move_path(self.resolve(src), self.resolve(dst)))

    def search(self) -> None:
        root = self._ask("Enter search root")
        root = self.resolve(root) if root else self.cwd
        pattern = self._ask("Enter pattern")
        result = self.operator.search(root, pattern)
        render_matches(self.console, pattern, root, result)

    def change_permission(self) -> None:
        path = self._ask("Enter path")
        mode = self._ask("Enter mode (e.g. 755)")
        render_result(self.console, self.operator.change_permission(self.resolve(path), mode))

    def show_cwd(self) -> None:
        self.console.print(f"[cyan]Current directory: {escape(printable(self.cwd))}[/cyan]")

"""
Console presentation for the File Explorer.

Everything that prints lives here; the operations only return results.
"""

from typing import List

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from core.results import OperationResult
from .formatter import EntryKind
from .lister import DirectoryListing


KIND_STYLES = {
    EntryKind.DIRECTORY: "blue",
    EntryKind.SYMLINK: "cyan",
}


def printable(text: str) -> str:
    """Make undecodable filename bytes safe to print, as U+FFFD."""
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


MENU = (
    ("1", "List files in current directory"),
    ("2", "Change directory (cd)"),
    ("3", "Create file"),
    ("4", "Delete file/directory (rm)"),
    ("5", "Copy file/directory"),
    ("6", "Move/Rename file/directory"),
    ("7", "Search (recursive)"),
    ("8", "Change permissions (chmod)"),
    ("9", "Show current working directory"),
    ("10", "Detailed list (ls -la style)"),
    ("0", "Exit"),
)


def render_banner(console: Console, cwd: str) -> None:
    console.print("[bold yellow]Simple Linux File Explorer[/bold yellow]")
    console.print(f"[cyan]Working directory: {escape(printable(cwd))}[/cyan]")


def render_menu(console: Console) -> None:
    console.print("\n[bold yellow]--- Commands (Menu) ---[/bold yellow]")
    for key, label in MENU:
        console.print(f"[green]{key:<2}[/green] - {label}")


def render_result(console: Console, result: OperationResult) -> None:
    """Print an operation outcome in green or red."""
    style = "bright_green" if result.success else "red"
    console.print(f"[{style}]{escape(printable(result.message))}[/{style}]")


def build_listing_table(listing: DirectoryListing) -> Table:
    """
    Build the table for a directory listing.

    Args:
        listing: Listing produced by list_directory

    Returns:
        rich Table with one row per entry
    """
    table = Table(title=f"Listing: {escape(printable(listing.path))}", title_justify="left")
    table.add_column("Name", no_wrap=True)
    table.add_column("Type")
    table.add_column("Size", justify="right")
    table.add_column("Permissions")
    table.add_column("Owner")
    table.add_column("Group")
    table.add_column("Modified", style="dim")

    for entry in listing.entries:
        if entry.error is not None:
            table.add_row(
                f"[red]{escape(printable(entry.name))}[/red]",
                "[red](error reading)[/red]",
                "", "", "", "",
                f"[red]{escape(entry.error)}[/red]",
            )
            continue

        style = KIND_STYLES.get(entry.kind)
        name = escape(printable(entry.name))
        table.add_row(
            f"[{style}]{name}[/{style}]" if style else name,
            entry.kind.value,
            str(entry.size),
            entry.permissions,
            escape(entry.owner),
            escape(entry.group),
            entry.modified,
        )

    return table


def render_listing(console: Console, result: OperationResult) -> None:
    """Print a listing result: the table, or the error that prevented it."""
    if not result.success:
        render_result(console, result)
        return
    console.print(build_listing_table(result.data))


def render_matches(console: Console, pattern: str, root: str, result: OperationResult) -> None:
    """Print search matches, then the error if the walk was cut short."""
    console.print(f"[cyan]Searching for \"{escape(pattern)}\" under {escape(printable(root))} ...[/cyan]")
    matches: List[str] = result.data or []
    for path in matches:
        console.print(f"[green]{escape(printable(path))}[/green]")
    if not result.success:
        render_result(console, result)
    elif not matches:
        console.print("[dim]No matches found.[/dim]")


def render_audit_warning(console: Console, message: str) -> None:
    console.print(f"[yellow]Warning: {escape(printable(message))}; continuing without it[/yellow]")

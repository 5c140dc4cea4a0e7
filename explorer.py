#!/usr/bin/env python3
"""
File Explorer - menu-driven filesystem browser

Main entry point for the File Explorer CLI application.
"""

import os
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from core import ExplorerConfig, AuditLogger
from modules.fs_explorer import ExplorerSession, FileOperator
from modules.fs_explorer.render import render_listing, render_matches, render_audit_warning


def get_config(ctx: click.Context) -> ExplorerConfig:
    """Get the configuration stored on the click context."""
    return ctx.obj["config"]


def get_console(config: ExplorerConfig) -> Console:
    """Get a console honouring the colour setting."""
    return Console(no_color=not config.color, highlight=False)


def get_operator(config: ExplorerConfig) -> FileOperator:
    """Get a FileOperator writing to the configured audit log."""
    return FileOperator(AuditLogger(log_path=config.audit_log))


@click.group(invoke_without_command=True)
@click.version_option(version="0.1.0", prog_name="File Explorer")
@click.option("--config", "config_path", default="config.yaml", show_default=True,
              help="YAML configuration file.")
@click.option("--no-color", is_flag=True, help="Disable coloured output.")
@click.option("--start-dir", type=click.Path(file_okay=False), default=None,
              help="Directory to start the interactive session in.")
@click.pass_context
def explorer(ctx, config_path: str, no_color: bool, start_dir: Optional[str]):
    """
    File Explorer - browse and manipulate the local filesystem

    Without a subcommand an interactive menu session is started.
    """
    config = ExplorerConfig.load(config_path)
    if no_color:
        config.color = False
    ctx.obj = {"config": config, "start_dir": start_dir}

    if ctx.invoked_subcommand is None:
        ctx.invoke(shell)


@explorer.command()
@click.pass_context
def shell(ctx):
    """Start the interactive menu session."""
    config = get_config(ctx)
    start_dir = ctx.obj.get("start_dir")
    if start_dir and not os.path.isdir(start_dir):
        console = get_console(config)
        console.print(f"[red]Not a directory:[/red] {escape(start_dir)}; starting in current directory")
        start_dir = None

    session = ExplorerSession(
        console=get_console(config),
        config=config,
        operator=get_operator(config),
        cwd=start_dir,
    )
    ctx.exit(session.run())


@explorer.command("ls")
@click.argument("path", default=".")
@click.pass_context
def ls(ctx, path: str):
    """List a directory once and exit."""
    config = get_config(ctx)
    console = get_console(config)
    operator = get_operator(config)
    result = operator.list_directory(path, include_pseudo=config.show_pseudo_entries)
    render_listing(console, result)
    if operator.logger.write_error:
        render_audit_warning(console, operator.logger.write_error)


@explorer.command()
@click.argument("pattern")
@click.argument("root", default=".")
@click.pass_context
def search(ctx, pattern: str, root: str):
    """Search ROOT recursively for names containing PATTERN."""
    config = get_config(ctx)
    console = get_console(config)
    operator = get_operator(config)
    result = operator.search(root, pattern)
    render_matches(console, pattern, root, result)
    if operator.logger.write_error:
        render_audit_warning(console, operator.logger.write_error)


@explorer.command()
@click.option("--limit", default=20, show_default=True, help="Number of entries to show.")
@click.pass_context
def audit(ctx, limit: int):
    """View the audit log."""
    config = get_config(ctx)
    console = get_console(config)

    if not config.audit_log:
        console.print("[dim]Audit logging is disabled. Set audit_log in the config file.[/dim]")
        return

    logger = AuditLogger(log_path=config.audit_log)
    entries = logger.get_recent(limit=limit)
    if logger.write_error:
        render_audit_warning(console, logger.write_error)
        return

    if not entries:
        console.print("[dim]No audit entries found.[/dim]")
        return

    table = Table(title="Recent Audit Log")
    table.add_column("Time", style="dim")
    table.add_column("Action")
    table.add_column("Target")
    table.add_column("Status")
    table.add_column("Result")

    for entry in entries:
        time_str = entry.timestamp.split("T")[1].split(".")[0] if "T" in entry.timestamp else entry.timestamp

        status_str = entry.status
        if entry.status == "succeeded":
            status_str = f"[green]{entry.status}[/green]"
        elif entry.status == "failed":
            status_str = f"[red]{entry.status}[/red]"

        result = entry.result or ""
        table.add_row(
            time_str,
            entry.action_type,
            escape(entry.target or "—"),
            status_str,
            escape(result[:50] + "..." if len(result) > 50 else result)
        )

    console.print(table)


if __name__ == "__main__":
    explorer()

"""Notebook-related CLI commands."""

from __future__ import annotations

import click
from rich.markup import escape
from rich.table import Table

from tracky.cli.utils import cli_errors, console, get_session
from tracky.config import get_config


def register_notebook_commands(cli: click.Group) -> None:
    """Register all notebook-related commands with the CLI."""
    cli.add_command(notebooks_cmd)


@click.group("notebooks", invoke_without_command=True)
@click.pass_context
def notebooks_cmd(ctx: click.Context) -> None:
    """Manage notebooks.

    Run without a subcommand to list all notebooks.
    """
    if ctx.invoked_subcommand is None:
        _list_notebooks()


def _list_notebooks() -> None:
    """List all notebooks."""
    session = get_session()
    try:
        with cli_errors():
            session.require_login()
            nbs = session.client.list_notebooks()
    finally:
        session.close()

    if not nbs:
        console.print("[dim]No notebooks yet.[/dim]")
        return

    default = get_config().default_notebook
    table = Table(show_header=True)
    table.add_column("ID", justify="right")
    table.add_column("Notebook")
    for nb in nbs:
        name = escape(nb.name)
        if default and nb.name.lower() == default.lower():
            name = f"{name} [dim](default)[/dim]"
        table.add_row(str(nb.id), name)
    console.print(table)


@notebooks_cmd.command("list")
def notebooks_list() -> None:
    """List all notebooks."""
    _list_notebooks()


@notebooks_cmd.command("create")
@click.argument("name")
def notebooks_create(name: str) -> None:
    """Create a new notebook.

    \b
    Examples:
      tracky notebooks create Journal
      tracky notebooks create "Work log"
    """
    name = name.strip()
    if not name:
        console.print("[red]Notebook name cannot be empty.[/red]")
        raise SystemExit(1)

    session = get_session()
    try:
        with cli_errors():
            session.require_login()
            nb = session.client.create_notebook(name)
    finally:
        session.close()
    console.print(
        f"[green]Created notebook:[/green] {escape(nb.name)} [dim](id {nb.id})[/dim]"
    )


@notebooks_cmd.command("delete")
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def notebooks_delete(name: str, yes: bool) -> None:
    """Delete a notebook and all its notes."""
    session = get_session()
    try:
        with cli_errors():
            nb = session.open_notebook(name)
            if not yes and not click.confirm(
                f"Delete notebook '{nb.name}' and all its notes?"
            ):
                console.print("[dim]Cancelled.[/dim]")
                return
            session.client.delete_notebook(nb.id)
    finally:
        session.close()
    console.print(f"[green]Deleted notebook:[/green] {escape(nb.name)}")

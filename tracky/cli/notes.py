"""Note-related CLI commands."""

from __future__ import annotations

import click

from tracky.cli.timeline_view import render_timeline
from tracky.cli.utils import (
    cli_errors,
    console,
    get_now,
    get_session,
    resolve_notebook,
)
from tracky.config import get_config
from tracky.utils.dates import day_key, parse_day_key


def register_note_commands(cli: click.Group) -> None:
    """Register all note-related commands with the CLI."""
    cli.add_command(notes_cmd)
    cli.add_command(add_cmd)
    cli.add_command(edit_cmd)
    cli.add_command(delete_cmd)


def _join_content(words: tuple[str, ...]) -> str:
    return " ".join(words).strip()


@click.command("notes")
@click.option("--notebook", "-n", help="Notebook name or id")
@click.option(
    "--expand",
    "-e",
    "expand",
    multiple=True,
    metavar="YYYY-MM-DD",
    help="Show the notes of this day (repeatable)",
)
@click.option("--all", "-a", "expand_all", is_flag=True, help="Expand every node")
def notes_cmd(notebook: str | None, expand: tuple[str, ...], expand_all: bool) -> None:
    """Show a notebook's notes by year, month, week and day.

    Today's notes are listed first. The current year, month and week start
    open; days stay closed unless named with --expand.

    \b
    Examples:
      tracky notes
      tracky notes -n Journal --expand 2024-01-29
      tracky notes --all
    """
    config = get_config()
    session = get_session()
    try:
        with cli_errors():
            keys = [day_key(parse_day_key(k)) for k in expand]
            nb = resolve_notebook(session, notebook)
            for key in keys:
                session.on_day_toggled(key, True)
            timeline = session.timeline(now=get_now())
    finally:
        session.close()

    console.print(
        render_timeline(
            timeline, config, zone=session.zone, expand_all=expand_all, title=nb.name
        )
    )


@click.command("add")
@click.argument("content", nargs=-1)
@click.option("--notebook", "-n", help="Notebook name or id")
def add_cmd(content: tuple[str, ...], notebook: str | None) -> None:
    """Add a note.

    \b
    Examples:
      tracky add "Call the bank"
      tracky add -n Work Standup notes go here
    """
    text = _join_content(content)
    if not text:
        text = click.prompt("Note").strip()
    if not text:
        console.print("[red]Note content cannot be empty.[/red]")
        raise SystemExit(1)

    session = get_session()
    try:
        with cli_errors():
            nb = resolve_notebook(session, notebook)
            session.add_note(text)
    finally:
        session.close()
    console.print(f"[green]Added note to[/green] {nb.name}")


@click.command("edit")
@click.argument("note_id", type=int)
@click.argument("content", nargs=-1, required=True)
def edit_cmd(note_id: int, content: tuple[str, ...]) -> None:
    """Replace the content of a note."""
    text = _join_content(content)
    if not text:
        console.print("[red]Note content cannot be empty.[/red]")
        raise SystemExit(1)

    session = get_session()
    try:
        with cli_errors():
            session.edit_note(note_id, text)
    finally:
        session.close()
    console.print(f"[green]Updated note[/green] #{note_id}")


@click.command("delete")
@click.argument("note_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def delete_cmd(note_id: int, yes: bool) -> None:
    """Delete a note."""
    if not yes and not click.confirm(f"Delete note #{note_id}?"):
        console.print("[dim]Cancelled.[/dim]")
        return

    session = get_session()
    try:
        with cli_errors():
            session.delete_note(note_id)
    finally:
        session.close()
    console.print(f"[green]Deleted note[/green] #{note_id}")

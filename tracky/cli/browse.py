"""Interactive timeline browser.

Keeps one Session alive so that days opened with 'open' stay open after
notes are added, edited or deleted and the timeline is fetched again.
"""

from __future__ import annotations

import shlex
from datetime import datetime

import click

from tracky.cli.timeline_view import render_timeline
from tracky.cli.utils import (
    cli_errors,
    console,
    get_now,
    get_session,
    resolve_notebook,
)
from tracky.config import Config, get_config
from tracky.core.api import TrackyError
from tracky.core.session import Session
from tracky.core.timeline import group_notes
from tracky.models import Note
from tracky.utils.dates import day_key, parse_day_key

BROWSE_HELP = """\
[bold]Commands[/bold]
  open DAY          Expand a day (YYYY-MM-DD)
  close DAY         Collapse a day
  toggle DAY        Flip a day
  add TEXT          Add a note
  edit ID TEXT      Replace a note's content
  rm ID             Delete a note
  refresh           Fetch notes again
  help              Show this help
  quit              Leave the browser"""

QUIT_COMMANDS = {"quit", "exit", "q"}


def register_browse_commands(cli: click.Group) -> None:
    """Register the browse command with the CLI."""
    cli.add_command(browse_cmd)


class Browser:
    """State of one interactive browsing session."""

    def __init__(self, session: Session, config: Config, now: datetime | None = None):
        self.session = session
        self.config = config
        self.now = now
        self.notes: list[Note] = []

    def refresh(self) -> None:
        """Fetch the notebook's notes again."""
        self.notes = self.session.fetch_notes()

    def render(self) -> None:
        """Group the last fetched notes and draw them."""
        timeline = group_notes(
            self.notes,
            now=self.now,
            zone=self.session.zone,
            expansion=self.session.expansion,
        )
        title = self.session.notebook.name if self.session.notebook else "Notes"
        console.print(
            render_timeline(timeline, self.config, self.session.zone, title=title)
        )

    def handle(self, line: str) -> bool:
        """Run one command line. Returns False when the user wants to quit.

        Raises:
            ValueError: For malformed commands or arguments.
            TrackyError: When a server call fails.
        """
        try:
            parts = shlex.split(line)
        except ValueError as e:
            raise ValueError(f"Could not parse command: {e}") from None
        if not parts:
            return True

        command, args = parts[0].lower(), parts[1:]

        if command in QUIT_COMMANDS:
            return False
        if command == "help":
            console.print(BROWSE_HELP)
            return True

        if command in ("open", "close", "toggle"):
            key = self._day_arg(args)
            if command == "toggle":
                self.session.expansion.toggle(key)
            else:
                self.session.on_day_toggled(key, command == "open")
            self.render()
        elif command == "add":
            text = " ".join(args).strip()
            if not text:
                raise ValueError("Usage: add TEXT")
            self.session.add_note(text)
            self._refresh_and_render()
        elif command == "edit":
            if len(args) < 2:
                raise ValueError("Usage: edit ID TEXT")
            self.session.edit_note(self._id_arg(args[0]), " ".join(args[1:]))
            self._refresh_and_render()
        elif command in ("rm", "delete"):
            if len(args) != 1:
                raise ValueError("Usage: rm ID")
            self.session.delete_note(self._id_arg(args[0]))
            self._refresh_and_render()
        elif command == "refresh":
            self._refresh_and_render()
        else:
            raise ValueError(f"Unknown command '{command}'. Type 'help' for commands.")
        return True

    def _refresh_and_render(self) -> None:
        self.refresh()
        self.render()

    @staticmethod
    def _day_arg(args: list[str]) -> str:
        if len(args) != 1:
            raise ValueError("Expected one day as YYYY-MM-DD")
        return day_key(parse_day_key(args[0]))

    @staticmethod
    def _id_arg(value: str) -> int:
        try:
            return int(value.lstrip("#"))
        except ValueError:
            raise ValueError(f"Invalid note id '{value}'") from None


@click.command("browse")
@click.option("--notebook", "-n", help="Notebook name or id")
def browse_cmd(notebook: str | None) -> None:
    """Browse a notebook interactively.

    Days you open stay open while you add, edit and delete notes.
    Type 'help' at the prompt for the list of commands.
    """
    session = get_session()
    try:
        with cli_errors():
            resolve_notebook(session, notebook)
            browser = Browser(session, get_config(), now=get_now())
            browser.refresh()
        browser.render()
        console.print("[dim]Type 'help' for commands, 'quit' to leave.[/dim]")

        while True:
            try:
                line = console.input("[bold]tracky>[/bold] ")
            except (EOFError, KeyboardInterrupt):
                console.print()
                break
            try:
                if not browser.handle(line):
                    break
            except (TrackyError, ValueError) as e:
                console.print(f"[red]Error:[/red] {e}")
    finally:
        session.close()

"""CLI package for tracky."""

from __future__ import annotations

import sys
from typing import ClassVar

# Ensure stdout handles Unicode when piped (e.g., `tracky notes | less`)
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")

import click

from tracky import __version__
from tracky.cli.auth import register_auth_commands
from tracky.cli.browse import register_browse_commands
from tracky.cli.config_cmd import register_config_commands
from tracky.cli.notebooks import register_notebook_commands
from tracky.cli.notes import notes_cmd, register_note_commands
from tracky.cli.utils import setup_logging


class AliasedGroup(click.Group):
    """Click group that supports command aliases."""

    ALIASES: ClassVar[dict[str, str]] = {
        "ls": "notes",
        "nbs": "notebooks",
        "b": "browse",
        "rm": "delete",
    }

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        # Exact command name first
        rv = super().get_command(ctx, cmd_name)
        if rv is not None:
            return rv

        if cmd_name in self.ALIASES:
            return super().get_command(ctx, self.ALIASES[cmd_name])

        return None

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        # Report the real command name rather than the alias
        _, cmd, args = super().resolve_command(ctx, args)
        return (cmd.name if cmd else None), cmd, args


@click.group(cls=AliasedGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="tracky")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """A terminal client for tracky notes.

    Run 'tracky' without arguments to show the default notebook.
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    if ctx.invoked_subcommand is None:
        ctx.invoke(notes_cmd)


# Register all command groups
register_auth_commands(cli)
register_notebook_commands(cli)
register_note_commands(cli)
register_browse_commands(cli)
register_config_commands(cli)


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = ["cli", "main"]

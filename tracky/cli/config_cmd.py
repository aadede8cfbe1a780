"""Config-related CLI commands."""

from __future__ import annotations

import click

from tracky.cli.utils import console
from tracky.config import get_config, init_config


def register_config_commands(cli: click.Group) -> None:
    """Register all config-related commands with the CLI."""
    cli.add_command(config_cmd)


@click.group("config", invoke_without_command=True)
@click.pass_context
def config_cmd(ctx: click.Context) -> None:
    """Manage configuration settings.

    When called without a subcommand, lists all settings.

    \b
    Subcommands:
      get <key>           Get a configuration value
      set <key> <value>   Set a configuration value
      list                List all configurable settings
      path                Show the config file location

    \b
    Examples:
      tracky config set server_url https://notes.example.com
      tracky config set timezone Europe/Berlin
      tracky config get timezone
    """
    if ctx.invoked_subcommand is None:
        ctx.invoke(config_list)


@config_cmd.command("get")
@click.argument("key")
def config_get(key: str) -> None:
    """Get a configuration value.

    Run 'tracky config list' for the full set of configurable settings.
    """
    from tracky.config import CONFIGURABLE_SETTINGS, get_config_value

    if key not in CONFIGURABLE_SETTINGS and key != "home":
        console.print(f"[red]Unknown setting:[/red] {key}")
        console.print("[dim]Use 'tracky config list' to see available settings.[/dim]")
        raise SystemExit(1)

    value = get_config_value(key)
    console.print(f"{key} = {value if value is not None else '<not set>'}")


@config_cmd.command("set")
@click.argument("key")
@click.argument("value")
def config_set(key: str, value: str) -> None:
    """Set a configuration value.

    Use 'none' to clear optional settings such as timezone or default_notebook.
    """
    from tracky.config import set_config_value

    try:
        if set_config_value(key, value):
            console.print(f"[green]Set[/green] {key} = {value}")
        else:
            console.print(f"[red]Unknown setting:[/red] {key}")
            console.print(
                "[dim]Use 'tracky config list' to see available settings.[/dim]"
            )
            raise SystemExit(1)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1) from None


@config_cmd.command("list")
def config_list() -> None:
    """List all configurable settings."""
    from tracky.config import list_config_settings

    settings = list_config_settings()

    console.print("\n[bold]Configurable Settings[/bold]\n")
    for key, (description, value) in settings.items():
        value_str = str(value) if value is not None else "[dim]<not set>[/dim]"
        console.print(f"  [cyan]{key}[/cyan]")
        console.print(f"    {description}")
        console.print(f"    Current: {value_str}")
        console.print()


@config_cmd.command("path")
def config_path() -> None:
    """Show the config file location, creating a default one if missing."""
    config = get_config()
    if not config.config_path.exists():
        init_config(config.home)
    click.echo(str(config.config_path))

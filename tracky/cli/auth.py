"""Authentication CLI commands."""

from __future__ import annotations

import logging

import click

from tracky.cli.utils import cli_errors, console, get_credentials, get_session
from tracky.core.api import TrackyAuthError

logger = logging.getLogger(__name__)


def register_auth_commands(cli: click.Group) -> None:
    """Register all authentication commands with the CLI."""
    cli.add_command(signup_cmd)
    cli.add_command(login_cmd)
    cli.add_command(logout_cmd)
    cli.add_command(whoami_cmd)


@click.command("signup")
@click.argument("username", required=False)
@click.option("--password", "-p", help="Password (prompted if omitted)")
def signup_cmd(username: str | None, password: str | None) -> None:
    """Create an account on the server."""
    username, password = get_credentials(username, password)
    session = get_session()
    try:
        with cli_errors():
            session.client.signup(username, password)
    finally:
        session.close()
    console.print(f"[green]Signed up[/green] {username}. Run 'tracky login' next.")


@click.command("login")
@click.argument("username", required=False)
@click.option("--password", "-p", help="Password (or set TRACKY_PASSWORD)")
def login_cmd(username: str | None, password: str | None) -> None:
    """Log in and remember the session.

    \b
    Examples:
      tracky login alice
      TRACKY_PASSWORD=secret tracky login alice
    """
    username, password = get_credentials(username, password)
    session = get_session()
    try:
        with cli_errors():
            session.login(username, password)
    finally:
        session.close()
    console.print(f"[green]Logged in[/green] as {username}")


@click.command("logout")
def logout_cmd() -> None:
    """Log out and forget the saved session."""
    session = get_session()
    if not session.is_logged_in:
        session.close()
        console.print("[dim]Not logged in.[/dim]")
        return
    try:
        with cli_errors():
            try:
                session.logout()
            except TrackyAuthError as e:
                # Local state is cleared even when the cookie already expired
                logger.debug("Server rejected logout: %s", e)
    finally:
        session.close()
    console.print("[green]Logged out[/green]")


@click.command("whoami")
def whoami_cmd() -> None:
    """Show who is logged in and to which server."""
    session = get_session()
    try:
        with cli_errors():
            valid = session.client.check_session()
    finally:
        session.close()

    if not valid:
        console.print("[yellow]Not logged in.[/yellow]")
        raise SystemExit(1)
    name = session.username or "[dim]<unknown user>[/dim]"
    console.print(f"{name} @ {session.client.base_url}")

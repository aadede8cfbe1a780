"""Shared utilities for CLI commands."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

import click
import httpx
from rich.console import Console

from tracky.config import get_config
from tracky.core.api import TrackyAuthError, TrackyError
from tracky.core.session import Session
from tracky.models import Notebook

# Main console for stdout (user-facing output)
console = Console(highlight=False)


def setup_logging(verbose: bool) -> None:
    """Log DEBUG records to stderr when verbose.

    Otherwise nothing is configured and warnings reach stderr through
    logging's last-resort handler.
    """
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def get_transport() -> httpx.BaseTransport | None:
    """HTTP transport for the client. None uses httpx's default."""
    return None


def get_now() -> datetime | None:
    """Instant the timeline treats as now. None uses the system clock."""
    return None


def get_session() -> Session:
    """Create a session from the config, reusing a saved login."""
    return Session.from_config(get_config(), transport=get_transport())


@contextmanager
def cli_errors() -> Iterator[None]:
    """Turn client and validation errors into a red message and exit 1."""
    try:
        yield
    except TrackyAuthError as e:
        console.print(f"[red]Authentication failed:[/red] {e}")
        console.print("[dim]Run 'tracky login' to start a new session.[/dim]")
        raise SystemExit(1) from None
    except (TrackyError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1) from None


def resolve_notebook(session: Session, notebook: str | None) -> Notebook:
    """Open the named notebook, falling back to the configured default.

    With no name and no default, the first notebook on the server is used.
    """
    name = notebook or get_config().default_notebook
    if name:
        return session.open_notebook(name)

    session.require_login()
    notebooks = session.client.list_notebooks()
    if not notebooks:
        raise ValueError(
            "No notebooks yet. Create one with 'tracky notebooks create <name>'."
        )
    return session.open_notebook(notebooks[0].id)


def get_credentials(username: str | None, password: str | None) -> tuple[str, str]:
    """Fill in username and password from options, environment or prompts."""
    if not username:
        username = os.environ.get("TRACKY_USERNAME") or get_config().username
    if not username:
        username = click.prompt("Username")
    if not password:
        password = os.environ.get("TRACKY_PASSWORD")
    if not password:
        password = click.prompt("Password", hide_input=True)
    return username, password

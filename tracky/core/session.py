"""Session context: the logged-in client, current notebook and view state.

A Session owns the ExpansionState for as long as the user stays logged in.
Logging in or out starts over with an empty store. Only the auth cookie is
written to disk (so separate CLI invocations share a login); which days are
expanded is never saved.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from pathlib import Path
from typing import TYPE_CHECKING

import httpx

from tracky.core.api import TrackyAuthError, TrackyClient
from tracky.core.expansion import ExpansionState
from tracky.core.timeline import group_notes
from tracky.models import Note, Notebook, Timeline
from tracky.utils.dates import resolve_timezone

if TYPE_CHECKING:
    from tracky.config import Config

logger = logging.getLogger(__name__)


@dataclass
class SavedSession:
    """Login state persisted between CLI invocations."""

    server_url: str
    auth_token: str
    username: str | None = None


def load_saved_session(path: Path) -> SavedSession | None:
    """Load a saved session file, or None if absent or unreadable."""
    if not path.exists():
        return None
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
        return SavedSession(
            server_url=data["server_url"],
            auth_token=data["auth_token"],
            username=data.get("username"),
        )
    except (OSError, json.JSONDecodeError, KeyError, TypeError) as e:
        logger.warning("Ignoring unreadable session file %s: %s", path, e)
        return None


def save_session(path: Path, saved: SavedSession) -> None:
    """Write the session file, readable only by the owner."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(
            {
                "server_url": saved.server_url,
                "auth_token": saved.auth_token,
                "username": saved.username,
            },
            f,
            indent=2,
        )
    try:
        path.chmod(0o600)
    except OSError as e:
        logger.debug("Could not restrict permissions on %s: %s", path, e)


def clear_saved_session(path: Path) -> None:
    """Remove the session file if it exists."""
    path.unlink(missing_ok=True)


class Session:
    """A logged-in (or not yet logged-in) user session.

    Args:
        client: REST client for the server
        zone: Viewer timezone (None = machine local time)
        session_path: Where to persist the auth cookie, or None to keep it
            in memory only
        username: Name of the logged-in user, if known
    """

    def __init__(
        self,
        client: TrackyClient,
        zone: tzinfo | None = None,
        session_path: Path | None = None,
        username: str | None = None,
    ):
        self.client = client
        self.zone = zone
        self.session_path = session_path
        self.username = username
        self.expansion = ExpansionState()
        self.notebook: Notebook | None = None

    @classmethod
    def from_config(
        cls, config: Config, transport: httpx.BaseTransport | None = None
    ) -> Session:
        """Create a session for the configured server, reusing a saved login."""
        saved = load_saved_session(config.session_path)
        token = None
        username = None
        if saved is not None and saved.server_url == config.server_url:
            token = saved.auth_token
            username = saved.username

        client = TrackyClient(
            config.server_url,
            timeout=config.timeout,
            auth_token=token,
            transport=transport,
        )
        return cls(
            client,
            zone=resolve_timezone(config.timezone),
            session_path=config.session_path,
            username=username,
        )

    @property
    def is_logged_in(self) -> bool:
        """True if the client holds a session cookie."""
        return self.client.auth_token is not None

    def require_login(self) -> None:
        """Raise if there is no session cookie."""
        if not self.is_logged_in:
            raise TrackyAuthError("Not logged in. Run 'tracky login' first.")

    def _reset_view_state(self) -> None:
        self.expansion.clear()
        self.notebook = None

    def login(self, username: str, password: str) -> None:
        """Log in, start with fresh view state and persist the cookie."""
        self.client.login(username, password)
        self.username = username
        self._reset_view_state()
        token = self.client.auth_token
        if self.session_path is not None and token is not None:
            save_session(
                self.session_path,
                SavedSession(
                    server_url=self.client.base_url,
                    auth_token=token,
                    username=username,
                ),
            )

    def logout(self) -> None:
        """Log out on the server and forget all local session state."""
        try:
            self.client.logout()
        finally:
            self.username = None
            self._reset_view_state()
            if self.session_path is not None:
                clear_saved_session(self.session_path)

    def open_notebook(self, name_or_id: str | int) -> Notebook:
        """Select the notebook whose notes the timeline shows."""
        self.require_login()
        self.notebook = self.client.get_notebook(name_or_id)
        logger.debug("Opened notebook %s (%d)", self.notebook.name, self.notebook.id)
        return self.notebook

    def _require_notebook(self) -> Notebook:
        if self.notebook is None:
            raise ValueError("No notebook selected")
        return self.notebook

    def fetch_notes(self) -> list[Note]:
        """Fetch the current notebook's notes in server order."""
        self.require_login()
        notebook = self._require_notebook()
        return self.client.list_notes(notebook.id, zone=self.zone)

    def timeline(self, now: datetime | None = None) -> Timeline:
        """Fetch and group the current notebook's notes.

        Day nodes the user opened earlier in this session come back open.
        """
        return group_notes(
            self.fetch_notes(), now=now, zone=self.zone, expansion=self.expansion
        )

    def on_day_toggled(self, day_key: str, now_open: bool) -> None:
        """Record a user toggle of a day node."""
        self.expansion.on_day_toggled(day_key, now_open)

    def add_note(self, content: str) -> None:
        """Create a note in the current notebook."""
        self.require_login()
        notebook = self._require_notebook()
        self.client.create_note(notebook.id, content)

    def edit_note(self, note_id: int, content: str) -> None:
        """Replace a note's content."""
        self.require_login()
        self.client.update_note(note_id, content)

    def delete_note(self, note_id: int) -> None:
        """Delete a note."""
        self.require_login()
        self.client.delete_note(note_id)

    def close(self) -> None:
        """Release the HTTP client."""
        self.client.close()

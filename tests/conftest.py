"""Shared fixtures for tracky tests."""

from __future__ import annotations

import json
from collections.abc import Callable, Generator
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import httpx
import pytest
from click.testing import CliRunner
from dateutil import tz

from tracky import config as config_module
from tracky.cli import browse as browse_module
from tracky.cli import notes as notes_module
from tracky.cli import utils as cli_utils_module
from tracky.config import Config
from tracky.core.api import TrackyClient
from tracky.core.session import Session
from tracky.models import Note

SERVER_URL = "http://tracky.test"
FROZEN_NOW = datetime(2024, 2, 7, 12, 0, tzinfo=timezone.utc)


class FakeServer:
    """In-memory stand-in for the tracky server's REST API.

    Mirrors the server's status codes and cookie handling closely enough to
    drive the client through httpx.MockTransport.
    """

    def __init__(self) -> None:
        self.users: dict[str, tuple[int, str]] = {}
        self.tokens: dict[str, int] = {}
        self.notebooks: list[dict[str, Any]] = []
        self.notes: list[dict[str, Any]] = []
        self.requests: list[httpx.Request] = []
        self.clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)
        self._next_id = 1

    # Test helpers

    def _new_id(self) -> int:
        value = self._next_id
        self._next_id += 1
        return value

    def add_user(self, username: str, password: str) -> int:
        user_id = self._new_id()
        self.users[username] = (user_id, password)
        return user_id

    def issue_token(self, username: str) -> str:
        user_id = self.users[username][0]
        token = f"token-{user_id}-{len(self.tokens)}"
        self.tokens[token] = user_id
        return token

    def add_notebook(self, user_id: int, name: str) -> int:
        nb_id = self._new_id()
        self.notebooks.append({"id": nb_id, "name": name, "user_id": user_id})
        return nb_id

    def add_note(
        self, user_id: int, notebook_id: int, content: str, created_at: str | None = None
    ) -> int:
        note_id = self._new_id()
        if created_at is None:
            created_at = self.clock().isoformat().replace("+00:00", "Z")
        self.notes.append(
            {
                "id": note_id,
                "user_id": user_id,
                "notebook_id": notebook_id,
                "content": content,
                "created_at": created_at,
            }
        )
        return note_id

    def note_contents(self, notebook_id: int) -> list[str]:
        return [n["content"] for n in self.notes if n["notebook_id"] == notebook_id]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    # Request handling

    def _user_for(self, request: httpx.Request) -> int | None:
        for part in request.headers.get("cookie", "").split(";"):
            name, _, value = part.strip().partition("=")
            if name == "auth_token" and value in self.tokens:
                return self.tokens[value]
        return None

    def _int_param(self, request: httpx.Request, name: str) -> int | None:
        try:
            return int(request.url.params.get(name, ""))
        except ValueError:
            return None

    @staticmethod
    def _list_response(items: list[dict]) -> httpx.Response:
        # The Go server encodes an empty slice as null
        if not items:
            return httpx.Response(
                200, content=b"null\n", headers={"Content-Type": "application/json"}
            )
        return httpx.Response(200, json=items)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        method = request.method

        if path == "/api/signup" and method == "POST":
            body = json.loads(request.content)
            if body["username"] in self.users:
                return httpx.Response(409, text="Username already taken\n")
            user_id = self.add_user(body["username"], body["password"])
            self.add_notebook(user_id, "Default")
            return httpx.Response(201)

        if path == "/api/login" and method == "POST":
            body = json.loads(request.content)
            user = self.users.get(body["username"])
            if user is None or user[1] != body["password"]:
                return httpx.Response(401, text="Invalid credentials\n")
            token = self.issue_token(body["username"])
            return httpx.Response(
                200, headers={"set-cookie": f"auth_token={token}; Path=/; HttpOnly"}
            )

        if path == "/api/logout":
            return httpx.Response(
                200, headers={"set-cookie": "auth_token=; Path=/; Max-Age=0"}
            )

        user_id = self._user_for(request)
        if user_id is None:
            return httpx.Response(401, text="Unauthorized\n")

        if path == "/api/notebooks":
            return self._notebooks(request, user_id)
        if path == "/api/notes":
            return self._notes(request, user_id)
        return httpx.Response(404, text="Not found\n")

    def _notebooks(self, request: httpx.Request, user_id: int) -> httpx.Response:
        if request.method == "GET":
            owned = [
                {"id": nb["id"], "name": nb["name"]}
                for nb in self.notebooks
                if nb["user_id"] == user_id
            ]
            return self._list_response(owned)
        if request.method == "POST":
            body = json.loads(request.content)
            return httpx.Response(200, json={"id": self.add_notebook(user_id, body["name"])})
        if request.method == "DELETE":
            nb_id = self._int_param(request, "id")
            for nb in self.notebooks:
                if nb["id"] == nb_id and nb["user_id"] == user_id:
                    self.notebooks.remove(nb)
                    self.notes = [n for n in self.notes if n["notebook_id"] != nb_id]
                    return httpx.Response(200)
            return httpx.Response(404, text="Notebook not found\n")
        return httpx.Response(405, text="Method not allowed\n")

    def _notes(self, request: httpx.Request, user_id: int) -> httpx.Response:
        if request.method == "GET":
            nb_id = self._int_param(request, "notebook_id")
            if nb_id is None:
                return httpx.Response(400, text="Invalid notebook ID\n")
            notes = [
                {k: n[k] for k in ("id", "user_id", "content", "created_at")}
                for n in self.notes
                if n["notebook_id"] == nb_id and n["user_id"] == user_id
            ]
            return self._list_response(notes)
        if request.method == "POST":
            nb_id = self._int_param(request, "notebook_id")
            if nb_id is None:
                return httpx.Response(400, text="Invalid notebook ID\n")
            body = json.loads(request.content)
            self.add_note(user_id, nb_id, body["content"])
            return httpx.Response(201)
        if request.method in ("PUT", "DELETE"):
            note_id = self._int_param(request, "id")
            if note_id is None:
                return httpx.Response(400, text="Invalid note ID\n")
            for note in self.notes:
                if note["id"] == note_id and note["user_id"] == user_id:
                    if request.method == "PUT":
                        note["content"] = json.loads(request.content)["content"]
                    else:
                        self.notes.remove(note)
                    return httpx.Response(200)
            return httpx.Response(404, text="Note not found\n")
        return httpx.Response(405, text="Method not allowed\n")


@pytest.fixture
def fake_server() -> FakeServer:
    """A fresh fake tracky server."""
    return FakeServer()


@pytest.fixture
def client(fake_server: FakeServer) -> Generator[TrackyClient]:
    """A client wired to the fake server."""
    c = TrackyClient(SERVER_URL, transport=fake_server.transport)
    yield c
    c.close()


@pytest.fixture
def alice(fake_server: FakeServer) -> dict[str, Any]:
    """A registered user with one notebook on the fake server."""
    user_id = fake_server.add_user("alice", "wonderland")
    nb_id = fake_server.add_notebook(user_id, "Journal")
    return {"user_id": user_id, "notebook_id": nb_id}


@pytest.fixture
def temp_home(tmp_path: Path) -> Path:
    """Create a temporary tracky home directory."""
    home = tmp_path / ".tracky"
    home.mkdir()
    return home


@pytest.fixture
def temp_config(temp_home: Path) -> Generator[Config]:
    """Create a temporary configuration for testing."""
    cfg = Config(home=temp_home, server_url=SERVER_URL, timezone="UTC")
    yield cfg
    config_module.reset_config()


@pytest.fixture
def mock_config(temp_config: Config, monkeypatch: pytest.MonkeyPatch) -> Config:
    """Make get_config() return temp_config everywhere."""
    config_module.reset_config()
    monkeypatch.setattr(config_module, "_config", temp_config)
    return temp_config


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI runner for testing commands."""
    return CliRunner()


@pytest.fixture
def cli_env(
    mock_config: Config, fake_server: FakeServer, monkeypatch: pytest.MonkeyPatch
) -> Config:
    """Route CLI sessions to the fake server."""
    monkeypatch.delenv("TRACKY_USERNAME", raising=False)
    monkeypatch.delenv("TRACKY_PASSWORD", raising=False)
    monkeypatch.setattr(cli_utils_module, "get_transport", lambda: fake_server.transport)
    return mock_config


@pytest.fixture
def logged_in(cli_env: Config, fake_server: FakeServer, alice: dict[str, Any]) -> Config:
    """Log alice in through the session file the CLI reads."""
    session = Session.from_config(cli_env, transport=fake_server.transport)
    session.login("alice", "wonderland")
    session.close()
    return cli_env


@pytest.fixture
def make_note() -> Callable[..., Note]:
    """Factory for Note objects with UTC timestamps."""

    def _make_note(note_id: int, created_at: str | datetime, content: str = "") -> Note:
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=tz.UTC)
        return Note(id=note_id, content=content or f"note {note_id}", created_at=created_at)

    return _make_note


@pytest.fixture
def frozen_now(
    cli_env: Config, fake_server: FakeServer, monkeypatch: pytest.MonkeyPatch
) -> datetime:
    """Pin "now" to Wednesday 2024-02-07 12:00 UTC for the CLI and the server."""
    monkeypatch.setattr(notes_module, "get_now", lambda: FROZEN_NOW)
    monkeypatch.setattr(browse_module, "get_now", lambda: FROZEN_NOW)
    fake_server.clock = lambda: FROZEN_NOW
    return FROZEN_NOW


@pytest.fixture
def journal(
    logged_in: Config,
    frozen_now: datetime,
    fake_server: FakeServer,
    alice: dict[str, Any],
) -> int:
    """Fill alice's Journal with notes around the frozen date. Returns its id."""
    uid, nb = alice["user_id"], alice["notebook_id"]
    fake_server.add_note(uid, nb, "Sprint planning", "2024-02-05T10:00:00Z")
    fake_server.add_note(uid, nb, "Weekend hike", "2024-02-03T10:00:00Z")
    fake_server.add_note(uid, nb, "Dentist", "2024-01-15T10:00:00Z")
    fake_server.add_note(uid, nb, "Coffee with [bold]Sam[/bold]", "2024-02-07T09:30:00Z")
    return nb

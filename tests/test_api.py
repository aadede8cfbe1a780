"""Tests for the tracky REST client."""

from __future__ import annotations

import httpx
import pytest

from tracky.core.api import (
    NotebookNotFoundError,
    TrackyAPIError,
    TrackyAuthError,
    TrackyClient,
    TrackyConnectionError,
)

SERVER_URL = "http://tracky.test"


class TestAuthentication:
    """Tests for signup, login and logout."""

    def test_signup(self, client, fake_server):
        client.signup("bob", "secret")
        assert "bob" in fake_server.users

    def test_signup_existing_user(self, client, alice):
        with pytest.raises(TrackyAPIError) as exc_info:
            client.signup("alice", "other")
        assert exc_info.value.status_code == 409
        assert exc_info.value.message == "Username already taken"

    def test_login_stores_cookie(self, client, alice):
        """A successful login keeps the server's auth cookie."""
        assert client.auth_token is None
        client.login("alice", "wonderland")
        assert client.auth_token is not None
        assert client.auth_token.startswith("token-")

    def test_login_bad_password(self, client, alice):
        with pytest.raises(TrackyAuthError, match="Invalid credentials"):
            client.login("alice", "nope")
        assert client.auth_token is None

    def test_login_replaces_previous_cookie(self, client, alice):
        client.login("alice", "wonderland")
        first = client.auth_token
        client.login("alice", "wonderland")
        assert client.auth_token != first

    def test_logout_clears_cookie(self, client, alice):
        client.login("alice", "wonderland")
        client.logout()
        assert client.auth_token is None

    def test_check_session(self, client, alice):
        assert client.check_session() is False
        client.login("alice", "wonderland")
        assert client.check_session() is True

    def test_saved_token_is_sent(self, fake_server, alice):
        """A token passed to the constructor authenticates requests."""
        token = fake_server.issue_token("alice")
        with TrackyClient(
            SERVER_URL, auth_token=token, transport=fake_server.transport
        ) as c:
            assert c.auth_token == token
            assert [nb.name for nb in c.list_notebooks()] == ["Journal"]

    def test_expired_token(self, fake_server, alice):
        with TrackyClient(
            SERVER_URL, auth_token="stale", transport=fake_server.transport
        ) as c:
            assert c.check_session() is False
            with pytest.raises(TrackyAuthError):
                c.list_notebooks()


class TestNotebooks:
    """Tests for notebook endpoints."""

    @pytest.fixture(autouse=True)
    def _login(self, client, alice):
        client.login("alice", "wonderland")

    def test_list(self, client, alice):
        notebooks = client.list_notebooks()
        assert [(nb.id, nb.name) for nb in notebooks] == [
            (alice["notebook_id"], "Journal")
        ]

    def test_list_empty_null(self, client, fake_server):
        """The server's null body decodes to an empty list."""
        fake_server.notebooks.clear()
        assert client.list_notebooks() == []

    def test_create(self, client, fake_server):
        nb = client.create_notebook("Work")
        assert nb.name == "Work"
        assert any(n["id"] == nb.id for n in fake_server.notebooks)

    def test_delete(self, client, fake_server, alice):
        client.delete_notebook(alice["notebook_id"])
        assert fake_server.notebooks == []

    def test_delete_missing(self, client):
        with pytest.raises(NotebookNotFoundError):
            client.delete_notebook(999)

    def test_get_by_name_case_insensitive(self, client, alice):
        assert client.get_notebook("journal").id == alice["notebook_id"]

    def test_get_by_id(self, client, alice):
        assert client.get_notebook(alice["notebook_id"]).name == "Journal"
        assert client.get_notebook(str(alice["notebook_id"])).name == "Journal"

    def test_get_missing(self, client):
        with pytest.raises(NotebookNotFoundError, match="Nope"):
            client.get_notebook("Nope")


class TestNotes:
    """Tests for note endpoints."""

    @pytest.fixture(autouse=True)
    def _login(self, client, alice):
        client.login("alice", "wonderland")

    def test_list_in_server_order(self, client, fake_server, alice):
        uid, nb = alice["user_id"], alice["notebook_id"]
        fake_server.add_note(uid, nb, "second", "2024-01-29T10:00:00Z")
        fake_server.add_note(uid, nb, "first", "2024-01-15T10:00:00Z")

        notes = client.list_notes(nb)
        assert [n.content for n in notes] == ["second", "first"]
        assert all(n.notebook_id == nb for n in notes)
        assert notes[0].created_at.year == 2024

    def test_list_empty(self, client, alice):
        assert client.list_notes(alice["notebook_id"]) == []

    def test_create(self, client, fake_server, alice):
        client.create_note(alice["notebook_id"], "hello")
        assert fake_server.note_contents(alice["notebook_id"]) == ["hello"]

    def test_create_sends_notebook_param(self, client, fake_server, alice):
        client.create_note(alice["notebook_id"], "hello")
        request = fake_server.requests[-1]
        assert request.method == "POST"
        assert request.url.params["notebook_id"] == str(alice["notebook_id"])

    def test_update(self, client, fake_server, alice):
        note_id = fake_server.add_note(alice["user_id"], alice["notebook_id"], "old")
        client.update_note(note_id, "new")
        assert fake_server.note_contents(alice["notebook_id"]) == ["new"]

    def test_delete(self, client, fake_server, alice):
        note_id = fake_server.add_note(alice["user_id"], alice["notebook_id"], "gone")
        client.delete_note(note_id)
        assert fake_server.note_contents(alice["notebook_id"]) == []

    def test_delete_missing(self, client):
        with pytest.raises(TrackyAPIError) as exc_info:
            client.delete_note(999)
        assert exc_info.value.status_code == 404


class TestErrors:
    """Tests for transport and decoding failures."""

    def test_connection_error(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with TrackyClient(SERVER_URL, transport=httpx.MockTransport(refuse)) as c:
            with pytest.raises(TrackyConnectionError, match="tracky.test"):
                c.signup("bob", "secret")

    def test_invalid_json(self):
        def garbage(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>")

        with TrackyClient(
            SERVER_URL, auth_token="t", transport=httpx.MockTransport(garbage)
        ) as c:
            with pytest.raises(TrackyAPIError, match="Invalid JSON"):
                c.list_notebooks()

    def test_server_error(self):
        def boom(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="database is locked\n")

        with TrackyClient(SERVER_URL, transport=httpx.MockTransport(boom)) as c:
            with pytest.raises(TrackyAPIError) as exc_info:
                c.signup("bob", "secret")
        assert exc_info.value.status_code == 500
        assert "database is locked" in str(exc_info.value)

    def test_base_url_trailing_slash(self):
        c = TrackyClient(SERVER_URL + "/")
        assert c.base_url == SERVER_URL
        c.close()

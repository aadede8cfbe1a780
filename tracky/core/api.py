"""HTTP client for the tracky server's REST API."""

from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Any

import httpx

from tracky.models import Note, Notebook

logger = logging.getLogger(__name__)

AUTH_COOKIE_NAME = "auth_token"


class TrackyError(Exception):
    """Base class for errors talking to the tracky server."""

    pass


class TrackyAuthError(TrackyError):
    """Raised when the server rejects credentials or the session has expired."""

    pass


class TrackyAPIError(TrackyError):
    """Raised when the server returns an error response."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"API error {status_code}: {message}")


class TrackyConnectionError(TrackyError):
    """Raised when the server cannot be reached."""

    pass


class NotebookNotFoundError(TrackyError):
    """Raised when a notebook does not exist on the server."""

    pass


class TrackyClient:
    """Client for interacting with the tracky REST API.

    The server keeps the login in an ``auth_token`` cookie. The client holds
    it in its cookie jar; ``auth_token`` exposes it so callers can persist a
    session between processes.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30,
        auth_token: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Server base URL, e.g. http://localhost:8080
            timeout: Request timeout in seconds
            auth_token: Previously saved session cookie value
            transport: Custom httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self._http = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )
        if auth_token:
            self._http.cookies.set(AUTH_COOKIE_NAME, auth_token)

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._http.close()

    def __enter__(self) -> TrackyClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def auth_token(self) -> str | None:
        """Current session cookie value, if logged in."""
        return self._http.cookies.get(AUTH_COOKIE_NAME)

    def _request(
        self,
        method: str,
        endpoint: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Make an API request.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API endpoint (without base URL)
            json: JSON body for POST/PUT requests
            params: Query parameters

        Returns:
            The successful response

        Raises:
            TrackyAuthError: If the server answers 401
            TrackyAPIError: If the server answers with any other error status
            TrackyConnectionError: If the request could not be sent
        """
        logger.debug("%s %s params=%s", method, endpoint, params)
        try:
            response = self._http.request(method, endpoint, json=json, params=params)
        except httpx.HTTPError as e:
            raise TrackyConnectionError(
                f"Could not reach tracky server at {self.base_url}: {e}"
            ) from e

        logger.debug("%s %s -> %d", method, endpoint, response.status_code)

        if response.status_code == 401:
            message = response.text.strip() or "Unauthorized"
            raise TrackyAuthError(message)
        elif response.status_code >= 400:
            raise TrackyAPIError(response.status_code, response.text.strip())

        return response

    def _json_list(self, response: httpx.Response) -> list[dict[str, Any]]:
        """Decode a JSON array body. The server encodes an empty list as null."""
        try:
            data = response.json()
        except ValueError as e:
            raise TrackyAPIError(
                response.status_code, f"Invalid JSON in response: {e}"
            ) from e
        return data or []

    # Authentication

    def signup(self, username: str, password: str) -> None:
        """Create a new account."""
        self._request(
            "POST", "/api/signup", json={"username": username, "password": password}
        )

    def login(self, username: str, password: str) -> None:
        """Log in and keep the session cookie.

        Raises:
            TrackyAuthError: If the credentials are rejected.
        """
        # Drop any saved cookie so only the fresh one remains in the jar
        self._http.cookies.clear()
        self._request(
            "POST", "/api/login", json={"username": username, "password": password}
        )
        if self.auth_token is None:
            raise TrackyAuthError("Login succeeded but the server set no session cookie")
        logger.info("Logged in as %s", username)

    def logout(self) -> None:
        """End the session on the server and drop the local cookie."""
        try:
            self._request("GET", "/api/logout")
        finally:
            self._http.cookies.clear()

    def check_session(self) -> bool:
        """Check whether the current session cookie is still accepted."""
        if self.auth_token is None:
            return False
        try:
            self._request("GET", "/api/notebooks")
        except TrackyAuthError:
            return False
        return True

    # Notebooks

    def list_notebooks(self) -> list[Notebook]:
        """List the user's notebooks."""
        response = self._request("GET", "/api/notebooks")
        return [Notebook.from_api_response(nb) for nb in self._json_list(response)]

    def create_notebook(self, name: str) -> Notebook:
        """Create a notebook and return it."""
        response = self._request("POST", "/api/notebooks", json={"name": name})
        data = response.json()
        return Notebook(id=data["id"], name=name)

    def delete_notebook(self, notebook_id: int) -> None:
        """Delete a notebook and all of its notes.

        Raises:
            NotebookNotFoundError: If the server does not know the notebook.
        """
        try:
            self._request("DELETE", "/api/notebooks", params={"id": notebook_id})
        except TrackyAPIError as e:
            if e.status_code == 404:
                raise NotebookNotFoundError(f"Notebook {notebook_id} not found") from e
            raise

    def get_notebook(self, name_or_id: str | int) -> Notebook:
        """Find a notebook by id or by case-insensitive name.

        Raises:
            NotebookNotFoundError: If no notebook matches.
        """
        notebooks = self.list_notebooks()
        key = str(name_or_id).strip()
        for nb in notebooks:
            if str(nb.id) == key:
                return nb
        for nb in notebooks:
            if nb.name.lower() == key.lower():
                return nb
        raise NotebookNotFoundError(f"Notebook not found: {name_or_id}")

    # Notes

    def list_notes(self, notebook_id: int, zone: tzinfo | None = None) -> list[Note]:
        """List the notes of a notebook in server order.

        Raises:
            InvalidTimestampError: If the server sends an unparseable created_at.
        """
        response = self._request(
            "GET", "/api/notes", params={"notebook_id": notebook_id}
        )
        return [
            Note.from_api_response(item, notebook_id=notebook_id, zone=zone)
            for item in self._json_list(response)
        ]

    def create_note(self, notebook_id: int, content: str) -> None:
        """Create a note in a notebook. The server stamps created_at."""
        self._request(
            "POST",
            "/api/notes",
            json={"content": content},
            params={"notebook_id": notebook_id},
        )

    def update_note(self, note_id: int, content: str) -> None:
        """Replace a note's content."""
        self._request(
            "PUT", "/api/notes", json={"content": content}, params={"id": note_id}
        )

    def delete_note(self, note_id: int) -> None:
        """Delete a note."""
        self._request("DELETE", "/api/notes", params={"id": note_id})

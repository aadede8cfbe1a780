"""Configuration parsing functions for tracky."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from .models import DEFAULT_HOME, DEFAULT_SERVER_URL, DEFAULT_TIMEOUT
from .utils import parse_bool_strict


def expand_path(path: str | Path) -> Path:
    """Expand ~ and environment variables in a path."""
    path_str = str(path)
    # Expand environment variables
    path_str = os.path.expandvars(path_str)
    # Expand ~
    return Path(path_str).expanduser()


def get_default_home() -> Path:
    """Get the tracky home directory."""
    # Check environment variable first
    env_home = os.environ.get("TRACKY_HOME")
    if env_home:
        return expand_path(env_home)
    return DEFAULT_HOME


def get_config_path(home: Path | None = None) -> Path:
    """Get the path to the config file."""
    if home is None:
        home = get_default_home()
    return home / "config.yaml"


def _parse_server_url(value: Any) -> str:
    """Parse the server URL, letting TRACKY_SERVER_URL override the file."""
    env_url = os.environ.get("TRACKY_SERVER_URL")
    if env_url:
        value = env_url
    if not value:
        return DEFAULT_SERVER_URL
    return str(value).rstrip("/")


def _parse_timezone(value: Any) -> str | None:
    """Parse the timezone setting. Empty and 'local' mean machine local time."""
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.lower() == "local":
        return None
    return text


def _parse_timeout(value: Any) -> int:
    """Parse the request timeout, falling back to the default on bad input."""
    if value is None:
        return DEFAULT_TIMEOUT
    try:
        timeout = int(value)
    except (TypeError, ValueError):
        return DEFAULT_TIMEOUT
    return timeout if timeout > 0 else DEFAULT_TIMEOUT


def _parse_bool(value: Any, setting_name: str, default: bool = False) -> bool:
    """Parse a boolean setting. Quoted YAML strings like "no" are read as words."""
    if value is None:
        return default
    if isinstance(value, str):
        try:
            return parse_bool_strict(value.strip(), setting_name)
        except ValueError:
            return default
    return bool(value)

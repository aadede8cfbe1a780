"""Configuration I/O functions for tracky."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .models import DEFAULT_CONFIG_YAML, Config
from .parsers import (
    _parse_bool,
    _parse_server_url,
    _parse_timeout,
    _parse_timezone,
    expand_path,
    get_config_path,
    get_default_home,
)


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from YAML file.

    Missing files and missing keys fall back to defaults.

    Environment variables are loaded in this priority order (first wins):
    1. Shell environment variables (already set before tracky runs)
    2. The .env file in the tracky home directory

    The password is ONLY read from the environment, never from config.
    """
    if config_path is None:
        config_path = get_config_path()

    if config_path.exists():
        with config_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    else:
        data = {}

    # The config file lives in the home directory unless it says otherwise
    if "home" in data:
        home = expand_path(data["home"])
    else:
        home = config_path.parent

    # Using override=False means existing env vars are NOT overwritten
    env_file = home / ".env"
    if env_file.exists():
        load_dotenv(env_file, override=False)

    return Config(
        home=home,
        server_url=_parse_server_url(data.get("server_url")),
        timezone=_parse_timezone(data.get("timezone")),
        timeout=_parse_timeout(data.get("timeout")),
        date_format=data.get("date_format", "%Y-%m-%d"),
        time_format=data.get("time_format", "%H:%M"),
        week_label_format=data.get("week_label_format", "%b %d, %Y"),
        show_week_numbers=_parse_bool(
            data.get("show_week_numbers"), "show_week_numbers"
        ),
        default_notebook=data.get("default_notebook") or None,
        username=data.get("username") or None,
    )


def _config_to_dict(config: Config) -> dict[str, Any]:
    """Serialize a Config for writing. Unset optional values are left out."""
    data: dict[str, Any] = {
        "server_url": config.server_url,
        "timeout": config.timeout,
        "date_format": config.date_format,
        "time_format": config.time_format,
        "week_label_format": config.week_label_format,
        "show_week_numbers": config.show_week_numbers,
    }
    if config.timezone is not None:
        data["timezone"] = config.timezone
    if config.default_notebook is not None:
        data["default_notebook"] = config.default_notebook
    if config.username is not None:
        data["username"] = config.username
    return data


def save_config(config: Config) -> None:
    """Save configuration to YAML file."""
    config.config_path.parent.mkdir(parents=True, exist_ok=True)
    with config.config_path.open("w", encoding="utf-8") as f:
        f.write("# tracky configuration\n\n")
        yaml.safe_dump(
            _config_to_dict(config), f, default_flow_style=False, sort_keys=False
        )


def init_config(home: Path | None = None) -> Config:
    """Initialize configuration for first-time setup.

    Creates the home directory and a default config file.
    """
    if home is None:
        home = get_default_home()

    config_path = home / "config.yaml"
    home.mkdir(parents=True, exist_ok=True)

    if not config_path.exists():
        config_path.write_text(DEFAULT_CONFIG_YAML, encoding="utf-8")

    return load_config(config_path)

"""Configuration dataclass models for tracky."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_HOME = Path.home() / ".tracky"
DEFAULT_SERVER_URL = "http://localhost:8080"
DEFAULT_TIMEOUT = 30

DEFAULT_CONFIG_YAML = """\
# tracky configuration

# Base URL of the tracky server
server_url: http://localhost:8080

# Viewer timezone used to place notes on calendar days.
# Leave unset (or "local") to use this machine's timezone.
# timezone: Europe/Berlin

# HTTP request timeout in seconds
timeout: 30

# Display formats
date_format: "%Y-%m-%d"
time_format: "%H:%M"
week_label_format: "%b %d, %Y"
show_week_numbers: false

# Notebook opened by 'tracky notes' and 'tracky browse' when -n is not given
# default_notebook: Journal

# Username remembered by 'tracky login'
# username: alice
"""


@dataclass
class Config:
    """Application configuration.

    The password is never stored here; it comes from the TRACKY_PASSWORD
    environment variable or an interactive prompt.
    """

    home: Path
    server_url: str = DEFAULT_SERVER_URL
    timezone: str | None = None  # None = machine local time
    timeout: int = DEFAULT_TIMEOUT
    date_format: str = "%Y-%m-%d"
    time_format: str = "%H:%M"
    week_label_format: str = "%b %d, %Y"  # e.g., "Jan 29, 2024"
    show_week_numbers: bool = False
    default_notebook: str | None = None
    username: str | None = None

    @property
    def config_path(self) -> Path:
        """Path to the config file."""
        return self.home / "config.yaml"

    @property
    def session_path(self) -> Path:
        """Path to the saved login session."""
        return self.home / "session.json"

    @property
    def env_path(self) -> Path:
        """Path to the optional .env file."""
        return self.home / ".env"

    @property
    def datetime_format(self) -> str:
        """Combined date and time format for note timestamps."""
        return f"{self.date_format} {self.time_format}"

"""Configuration utility functions for tracky."""

from __future__ import annotations

from typing import Any

from tracky.utils.dates import resolve_timezone

# Configurable settings with descriptions
# Note: the password is NOT configurable via config - use TRACKY_PASSWORD instead
CONFIGURABLE_SETTINGS = {
    "server_url": "Base URL of the tracky server (e.g., http://localhost:8080)",
    "timezone": "Viewer timezone (IANA name like Europe/Berlin, or 'local')",
    "timeout": "HTTP request timeout in seconds (default 30)",
    "date_format": "Date display format (e.g., %Y-%m-%d)",
    "time_format": "Time display format (e.g., %H:%M)",
    "week_label_format": "Format of the Monday date in week headings (e.g., %b %d, %Y)",
    "show_week_numbers": "Show ISO week numbers next to week headings (true/false)",
    "default_notebook": "Notebook used when -n is not given",
    "username": "Username suggested by 'tracky login'",
}

BOOL_TRUE_VALUES = ("true", "yes", "1", "on")
BOOL_FALSE_VALUES = ("false", "no", "0", "off")


def parse_bool_strict(value: str, setting_name: str) -> bool:
    """Parse a boolean string value strictly.

    Args:
        value: String value to parse (e.g., "true", "false", "1", "0")
        setting_name: Name of the setting (for error messages)

    Returns:
        Boolean value

    Raises:
        ValueError: If the value is not a recognized boolean string

    """
    lower = value.lower()
    if lower in BOOL_TRUE_VALUES:
        return True
    if lower in BOOL_FALSE_VALUES:
        return False
    valid = ", ".join(BOOL_TRUE_VALUES + BOOL_FALSE_VALUES)
    raise ValueError(
        f"Invalid boolean value '{value}' for {setting_name}. Valid: {valid}"
    )


def get_config_value(key: str) -> Any:
    """Get a config value by key.

    Returns:
        The configuration value, or None if not found or not set.

    """
    # Import here to avoid circular imports
    from . import get_config

    if key not in CONFIGURABLE_SETTINGS and key != "home":
        return None

    config = get_config()
    if key == "home":
        return str(config.home)
    return getattr(config, key)


def set_config_value(key: str, value: str) -> bool:
    """Set a config value by key and save the config file.

    Args:
        key: Configuration key (e.g., 'server_url', 'timezone')
        value: Value to set (use empty string or 'none' to clear optional values)

    Returns:
        True if successful, False if key not recognized.

    Raises:
        ValueError: If the value is invalid for the setting type.

    """
    # Import here to avoid circular imports
    from . import get_config
    from .io import save_config

    if key not in CONFIGURABLE_SETTINGS:
        return False

    config = get_config()
    cleared = value.strip().lower() in ("", "none")

    if key == "server_url":
        if not value.startswith(("http://", "https://")):
            raise ValueError(
                f"Invalid server_url '{value}'. Must start with http:// or https://"
            )
        config.server_url = value.rstrip("/")
    elif key == "timezone":
        if cleared or value.strip().lower() == "local":
            config.timezone = None
        else:
            resolve_timezone(value)
            config.timezone = value.strip()
    elif key == "timeout":
        try:
            timeout = int(value)
        except ValueError:
            raise ValueError(f"Invalid timeout '{value}'. Must be an integer") from None
        if timeout <= 0:
            raise ValueError("timeout must be greater than 0")
        config.timeout = timeout
    elif key == "show_week_numbers":
        config.show_week_numbers = parse_bool_strict(value, key)
    elif key in ("default_notebook", "username"):
        setattr(config, key, None if cleared else value)
    else:
        # Display format strings
        setattr(config, key, value)

    save_config(config)
    return True


def list_config_settings() -> dict[str, tuple[str, Any]]:
    """List all configurable settings with their current values.

    Returns:
        Dict mapping key to (description, current_value).

    """
    result = {}
    for key, description in CONFIGURABLE_SETTINGS.items():
        value = get_config_value(key)
        result[key] = (description, value)
    return result

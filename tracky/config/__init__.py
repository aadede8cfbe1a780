"""Configuration management for tracky.

The main entry points are:
- get_config(): Get the global configuration instance
- reset_config(): Clear the cached configuration
- load_config(): Load configuration from file
- save_config(): Save configuration to file
"""

from __future__ import annotations

# Re-export I/O functions
from .io import init_config, load_config, save_config

# Re-export models
from .models import (
    DEFAULT_CONFIG_YAML,
    DEFAULT_HOME,
    DEFAULT_SERVER_URL,
    DEFAULT_TIMEOUT,
    Config,
)

# Re-export parsers
from .parsers import expand_path, get_config_path, get_default_home

# Re-export utilities
from .utils import (
    BOOL_FALSE_VALUES,
    BOOL_TRUE_VALUES,
    CONFIGURABLE_SETTINGS,
    get_config_value,
    list_config_settings,
    parse_bool_strict,
    set_config_value,
)

# Singleton config instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance.

    Loads config on first call, returns cached instance thereafter.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the cached configuration (useful for testing)."""
    global _config
    _config = None


__all__ = [
    "BOOL_FALSE_VALUES",
    "BOOL_TRUE_VALUES",
    "CONFIGURABLE_SETTINGS",
    "DEFAULT_CONFIG_YAML",
    "DEFAULT_HOME",
    "DEFAULT_SERVER_URL",
    "DEFAULT_TIMEOUT",
    "Config",
    "expand_path",
    "get_config",
    "get_config_path",
    "get_config_value",
    "get_default_home",
    "init_config",
    "list_config_settings",
    "load_config",
    "parse_bool_strict",
    "reset_config",
    "save_config",
    "set_config_value",
]

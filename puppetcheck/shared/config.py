"""Defaults-file loader for puppetcheck.

The file is a flat JSON object whose keys must already exist in the
built-in defaults; path-like settings must be strings or null.
"""

import json
from pathlib import Path
from typing import Any

PATH_KEYS = ("lockfile", "statefile", "log_file")


class ConfigError(ValueError):
    """Raised when a defaults file is well-formed JSON but not a valid settings object."""


def validate_settings(config: Any, allowed: dict[str, Any] | None = None) -> dict[str, Any]:
    """Check the shape of a decoded defaults file and return it unchanged."""
    if not isinstance(config, dict):
        raise ConfigError(f"expected a JSON object, got {type(config).__name__}")

    if allowed is not None:
        unknown = sorted(set(config) - set(allowed))
        if unknown:
            raise ConfigError(f"unknown settings: {', '.join(unknown)}")

    for key in PATH_KEYS:
        value = config.get(key)
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"{key} must be a path string, got {value!r}")

    return config


def load_check_config(config_path: str, defaults: dict[str, Any] | None = None) -> dict[str, Any]:
    """Load check defaults from a JSON file, merging with optional built-in defaults.

    Args:
        config_path: Path to the JSON configuration file.
        defaults: Optional dictionary of default values. File values override
            defaults, and only keys present in defaults are accepted.

    Returns:
        Merged configuration dictionary.

    Raises:
        FileNotFoundError: If the config file does not exist.
        OSError: If the file cannot be read (directory, permissions).
        ConfigError: If the content is not a valid settings object.
        ValueError: If the content is not JSON.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path) as f:
        config = validate_settings(json.load(f), defaults)

    if defaults:
        return {**defaults, **config}

    return config

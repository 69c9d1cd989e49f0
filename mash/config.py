"""Mash config loader.

Reads mash.config (YAML) from the project directory.
Caches result after first load. Call _reset_config() in tests.
"""

import os
import yaml

from mash.errors import ConfigError

CONFIG_FILENAME = "mash.config"

_config = None

DEFAULTS = {
    "lexer": {
        "infer_semicolons": True,
    },
    "check": {
        "max_errors": 20,
    },
    "logging": {
        "level": "WARNING",
    },
}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base, returning a new dict."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def get_config(config_dir: str | None = None) -> dict:
    """Load and return the mash config, caching after first call."""
    global _config
    if _config is not None:
        return _config

    if config_dir is None:
        config_dir = os.getcwd()

    config_path = os.path.join(config_dir, CONFIG_FILENAME)

    if os.path.exists(config_path):
        with open(config_path) as f:
            try:
                user_config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"invalid {CONFIG_FILENAME}: {e}") from e
        if user_config is None:
            _config = _deep_merge(DEFAULTS, {})
        elif isinstance(user_config, dict):
            _config = _deep_merge(DEFAULTS, user_config)
        else:
            raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the top level")
    else:
        _config = _deep_merge(DEFAULTS, {})

    for section, default in DEFAULTS.items():
        if isinstance(default, dict) and not isinstance(_config[section], dict):
            bad = _config[section]
            _config = None
            raise ConfigError(f"{CONFIG_FILENAME}: section '{section}' must be a mapping, got {bad!r}")

    return _config


def _reset_config():
    """Clear cached config. Call this in tests."""
    global _config
    _config = None

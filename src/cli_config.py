"""Runtime configuration: config file, environment and CLI overrides.

Values are applied onto ``Constants`` in increasing precedence:
environment variables, then the config file, then CLI flags.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict

import yaml

from constants import Constants
from errors import ConfigError

logger = logging.getLogger(__name__)

# config key -> (Constants attribute, expected type)
_CONFIG_KEYS = {
    "seeds": ("SEED_PACKAGES", list),
    "registry_url": ("REGISTRY_URL_NUGET_V3", str),
    "request_timeout": ("REQUEST_TIMEOUT", int),
    "batch_size": ("LOOKUP_BATCH_SIZE", int),
    "restore_command": ("RESTORE_COMMAND", str),
    "runtime_package": ("RUNTIME_PACKAGE_ID", str),
    "output": ("OUTPUT_FILE", str),
}


def load_config(path: str) -> Dict[str, Any]:
    """Load and validate a YAML or JSON configuration file.

    Args:
        path: File path; ``.json`` is parsed as JSON, anything else as YAML.

    Returns:
        Mapping of recognized keys to validated values.

    Raises:
        ConfigError: If the file cannot be read or holds invalid values.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            if path.lower().endswith(".json"):
                raw = json.load(fh)
            else:
                raw = yaml.safe_load(fh)
    except OSError as exc:
        raise ConfigError(f"Config file couldn't be read: {exc}") from exc
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Config file {path} is not valid: {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    config: Dict[str, Any] = {}
    for key, value in raw.items():
        if key not in _CONFIG_KEYS:
            logger.warning("Ignoring unknown config key '%s'", key)
            continue
        _, expected = _CONFIG_KEYS[key]
        if expected is int and (isinstance(value, bool) or not isinstance(value, int)):
            raise ConfigError(f"Config key '{key}' must be an integer")
        if not isinstance(value, expected):
            raise ConfigError(f"Config key '{key}' must be of type {expected.__name__}")
        if key == "seeds" and not all(isinstance(s, str) and s.strip() for s in value):
            raise ConfigError("Config key 'seeds' must be a list of package ids")
        if expected is int and value < 1:
            raise ConfigError(f"Config key '{key}' must be positive")
        config[key] = value
    return config


def apply_config(config: Dict[str, Any]) -> None:
    """Apply validated config values onto Constants."""
    for key, value in config.items():
        attr, _ = _CONFIG_KEYS[key]
        if key == "seeds":
            value = [s.strip() for s in value]
        setattr(Constants, attr, value)


def apply_env_overrides() -> None:
    """Apply PKGVERSIONS_* environment variables onto Constants."""
    restore_command = os.environ.get(Constants.ENV_RESTORE_COMMAND)
    if restore_command and restore_command.strip():
        Constants.RESTORE_COMMAND = restore_command.strip()
    registry_url = os.environ.get(Constants.ENV_REGISTRY_URL)
    if registry_url and registry_url.strip():
        Constants.REGISTRY_URL_NUGET_V3 = registry_url.strip()


def apply_overrides(args) -> None:
    """Apply environment, config file and CLI overrides, in that order.

    Raises:
        ConfigError: If the config file is unreadable or invalid.
    """
    apply_env_overrides()

    config_path = getattr(args, "CONFIG", None)
    if config_path:
        apply_config(load_config(config_path))
        logger.info("Configuration loaded from %s", config_path)

    if getattr(args, "REGISTRY_URL", None):
        Constants.REGISTRY_URL_NUGET_V3 = args.REGISTRY_URL
    if getattr(args, "RESTORE_COMMAND", None):
        Constants.RESTORE_COMMAND = args.RESTORE_COMMAND
    if getattr(args, "BATCH_SIZE", None) is not None:
        Constants.LOOKUP_BATCH_SIZE = int(args.BATCH_SIZE)
    if getattr(args, "OUTPUT", None):
        Constants.OUTPUT_FILE = args.OUTPUT

    packages = getattr(args, "PACKAGES", None) or []
    if getattr(args, "ONLY_PACKAGES", False):
        Constants.SEED_PACKAGES = list(packages)
    elif packages:
        Constants.SEED_PACKAGES = list(Constants.SEED_PACKAGES) + list(packages)

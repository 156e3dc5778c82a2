"""
Configuration for setup-slotalk.

Settings are layered, lowest priority first:

1. built-in defaults
2. YAML file (``setup-slotalk.yaml`` in the working directory, or --config)
3. environment variables
4. command-line overrides

Example ``setup-slotalk.yaml``::

    version: "1.2.3"
    cache_dir: /opt/tool-cache
    download_timeout: 60
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from setup_slotalk.core.exceptions import ConfigError
from setup_slotalk.core.release import DEFAULT_RELEASES_BASE, TOOL_NAME
from setup_slotalk.core.tool_cache import TOOL_CACHE_ENV
from setup_slotalk.core.version import LATEST

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "setup-slotalk.yaml"

# Environment variable -> config field; earlier entries win
ENV_VARS = (
    ("INPUT_VERSION", "version"),
    ("SETUP_SLOTALK_VERSION", "version"),
    ("SETUP_SLOTALK_CACHE_DIR", "cache_dir"),
    (TOOL_CACHE_ENV, "cache_dir"),
    ("SETUP_SLOTALK_RELEASES_BASE", "releases_base"),
    ("SETUP_SLOTALK_TIMEOUT", "download_timeout"),
    ("SETUP_SLOTALK_LOCK_TIMEOUT", "lock_timeout"),
)


@dataclass
class SetupConfig:
    """
    Resolved setup-slotalk settings.

    Attributes:
        version: Requested version ('latest' or a release tag)
        tool_name: Tool name (asset prefix, cache key and executable name)
        releases_base: Base URL of the releases page
        cache_dir: Tool cache root (None selects the default root)
        download_timeout: Download timeout in seconds
        lock_timeout: Tool cache lock timeout in seconds
    """

    version: str = LATEST
    tool_name: str = TOOL_NAME
    releases_base: str = DEFAULT_RELEASES_BASE
    cache_dir: Optional[Path] = None
    download_timeout: int = 30
    lock_timeout: int = 30


_INT_FIELDS = {"download_timeout", "lock_timeout"}


def _coerce(name: str, value: Any) -> Any:
    if value is None:
        return None

    if name in _INT_FIELDS:
        try:
            number = int(value)
        except (TypeError, ValueError):
            raise ConfigError(f"'{name}' must be an integer, got {value!r}")
        if number <= 0:
            raise ConfigError(f"'{name}' must be positive, got {number}")
        return number

    if name == "cache_dir":
        return Path(str(value)).expanduser()

    # YAML reads an unquoted 1.10 as the float 1.1
    if name == "version" and not isinstance(value, str):
        raise ConfigError(
            f"'version' must be a string, got {value!r}; "
            "quote it, e.g. version: \"1.10\""
        )

    if not isinstance(value, (str, int, float)):
        raise ConfigError(f"'{name}' must be a string, got {type(value).__name__}")
    return str(value).strip()


def _apply(config: SetupConfig, values: Mapping[str, Any], source: str) -> SetupConfig:
    known = {f.name for f in fields(SetupConfig)}
    updates = {}

    for key, value in values.items():
        name = key.replace("-", "_")
        if name not in known:
            logger.warning(f"Ignoring unknown setting '{key}' from {source}")
            continue
        if value is None or value == "":
            continue
        updates[name] = _coerce(name, value)

    if updates:
        logger.debug(f"Settings from {source}: {sorted(updates)}")
    return replace(config, **updates)


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty if file doesn't exist and not required)

    Raises:
        ConfigError: If the file is required but missing, or is not valid YAML
    """
    config_file = Path(config_file)

    if not config_file.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise ConfigError(f"Configuration in {config_file} must be a mapping")
    return config


def env_settings(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Collect settings from environment variables."""
    environ = os.environ if environ is None else environ
    settings: Dict[str, str] = {}

    for var, name in ENV_VARS:
        value = environ.get(var, "").strip()
        if value and name not in settings:
            settings[name] = value

    return settings


def load_config(
    config_file: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> SetupConfig:
    """
    Build the effective configuration.

    Args:
        config_file: Explicit YAML file (required to exist when given)
        overrides: Command-line values; None entries are ignored
        environ: Environment mapping (default: os.environ)

    Returns:
        Effective SetupConfig

    Raises:
        ConfigError: On unreadable files or invalid values
    """
    config = SetupConfig()

    if config_file is not None:
        file_values = load_yaml_config(Path(config_file), required=True)
        source = str(config_file)
    else:
        file_values = load_yaml_config(Path.cwd() / DEFAULT_CONFIG_FILE)
        source = DEFAULT_CONFIG_FILE

    config = _apply(config, file_values, source)
    config = _apply(config, env_settings(environ), "environment")
    config = _apply(config, overrides or {}, "command line")

    return config


__all__ = [
    "DEFAULT_CONFIG_FILE",
    "SetupConfig",
    "load_yaml_config",
    "env_settings",
    "load_config",
]

"""CLI configuration stored next to the token cache.

The file is YAML under the per-user config directory
($XDG_CONFIG_HOME/pub/config.yaml or ~/.config/pub/config.yaml). Missing keys
fall back to defaults, and PUB_API_BASE_URL overrides the stored base URL.
"""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from pubcli.auth import API_URL, DEFAULT_VALIDITY_MINUTES, config_dir

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = API_URL
DEFAULT_TOKEN_VALIDITY_MINUTES = DEFAULT_VALIDITY_MINUTES
ENV_API_BASE_URL = "PUB_API_BASE_URL"
CONFIG_FILE_NAME = "config.yaml"


class ConfigError(Exception):
    """Raised when the configuration file cannot be read or is invalid."""

    pass


@dataclass
class Config:
    account_uuid: str = ""
    api_base_url: str = DEFAULT_API_BASE_URL
    token_validity_minutes: int = DEFAULT_TOKEN_VALIDITY_MINUTES

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


_FIELD_TYPES: dict[str, type] = {f.name: type(getattr(Config(), f.name)) for f in fields(Config)}


def config_path() -> Path:
    return config_dir() / CONFIG_FILE_NAME


def _validate(data: dict[str, Any]) -> dict[str, Any]:
    """Keep known keys, checking each against the type of its default."""
    values: dict[str, Any] = {}
    for key, value in data.items():
        expected = _FIELD_TYPES.get(key)
        if expected is None:
            logger.debug(f"Ignoring unknown config key: {key}")
            continue
        if isinstance(value, bool) or not isinstance(value, expected):
            raise ConfigError(f"Config key '{key}' must be of type {expected.__name__}")
        values[key] = value
    if values.get("token_validity_minutes", DEFAULT_TOKEN_VALIDITY_MINUTES) <= 0:
        raise ConfigError("Config key 'token_validity_minutes' must be positive")
    return values


def load_config(path: str | Path | None = None, apply_env: bool = True) -> Config:
    """Load configuration, returning defaults when the file does not exist.

    With `apply_env`, a non-empty PUB_API_BASE_URL replaces api_base_url.

    Raises:
        ConfigError: If the file is unreadable, not a YAML mapping, or has
            values of the wrong type
    """
    cfg_path = Path(path) if path is not None else config_path()
    config = Config()
    if cfg_path.exists():
        try:
            data = yaml.safe_load(cfg_path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Could not read config {cfg_path}: {e}") from e
        # An empty file loads as None
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config {cfg_path} must contain a YAML mapping")
        config = Config(**_validate(data))
    else:
        logger.debug(f"No config file at {cfg_path}, using defaults")

    env_url = os.environ.get(ENV_API_BASE_URL) if apply_env else None
    if env_url:
        config.api_base_url = env_url
    return config


def save_config(config: Config, path: str | Path | None = None) -> Path:
    """Write configuration with owner-only permissions and return its path."""
    cfg_path = Path(path) if path is not None else config_path()
    try:
        cfg_path.parent.mkdir(parents=True, exist_ok=True)
        os.chmod(cfg_path.parent, stat.S_IRWXU)
        cfg_path.write_text(yaml.safe_dump(config.to_dict(), sort_keys=False), encoding="utf-8")
        os.chmod(cfg_path, stat.S_IRUSR | stat.S_IWUSR)
    except OSError as e:
        raise ConfigError(f"Could not write config {cfg_path}: {e}") from e
    return cfg_path

# src/browserfetch/config.py

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import platformdirs
import yaml

from browserfetch.constants import (
    APP_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_FETCH_CACHE_TTL_SECONDS,
    DEFAULT_REQUEST_TIMEOUT,
    MODE_DEVELOPMENT,
    MODE_ENV_VAR,
    MODE_PRODUCTION,
    VALID_MODES,
)
from browserfetch.exceptions import ConfigFileError, ConfigValidationError

# Get the config directory using platformdirs
CONFIG_DIR = platformdirs.user_config_dir(APP_NAME)
CONFIG_FILE = os.path.join(CONFIG_DIR, CONFIG_FILE_NAME)


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    mode: str = MODE_PRODUCTION
    cache_ttl_seconds: float = DEFAULT_FETCH_CACHE_TTL_SECONDS
    cache_dir: Optional[str] = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    log_level: Optional[str] = None
    log_dir: Optional[str] = None

    @property
    def caching_enabled(self) -> bool:
        # Release data must be fresh for end users; caching is a development aid
        return self.mode == MODE_DEVELOPMENT


def _read_config_file(config_path: str) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except OSError as e:
        raise ConfigFileError(
            f"Could not read configuration file {config_path}", details=str(e)
        ) from e
    except yaml.YAMLError as e:
        raise ConfigFileError(
            f"Could not parse configuration file {config_path}", details=str(e)
        ) from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigFileError(
            f"Configuration file {config_path} must contain a mapping",
            details=f"got {type(config).__name__}",
        )
    return config


def _positive_number(config: Dict[str, Any], key: str, default: float) -> float:
    value = config.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigValidationError(
            f"{key} must be a positive number", field=key, value=repr(value)
        )
    return value


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load the browserfetch configuration YAML.

    Parameters:
        path (str | Path | None): Explicit configuration file. Defaults to CONFIG_FILE.

    Returns:
        dict: The parsed configuration, or an empty dict if no file exists.

    Raises:
        ConfigFileError: If the file cannot be read or is not a YAML mapping.
    """
    config_path = str(path or CONFIG_FILE)
    if not os.path.exists(config_path):
        if path is not None:
            raise ConfigFileError(f"Configuration file {config_path} does not exist")
        return {}
    return _read_config_file(config_path)


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Build Settings from the configuration file and the environment.

    The BROWSERFETCH_MODE environment variable overrides the file's MODE.

    Raises:
        ConfigFileError: If the configuration file cannot be loaded.
        ConfigValidationError: If a configured value is invalid.
    """
    config = load_config(path)

    mode = str(os.environ.get(MODE_ENV_VAR) or config.get("MODE") or MODE_PRODUCTION)
    mode = mode.strip().lower()
    if mode not in VALID_MODES:
        raise ConfigValidationError(
            f"MODE must be one of {', '.join(VALID_MODES)}", field="MODE", value=mode
        )

    for key in ("CACHE_DIR", "LOG_DIR"):
        value = config.get(key)
        if value is not None and not isinstance(value, str):
            raise ConfigValidationError(
                f"{key} must be a path string", field=key, value=repr(value)
            )

    cache_dir = config.get("CACHE_DIR")
    log_dir = config.get("LOG_DIR")
    log_level = config.get("LOG_LEVEL")
    return Settings(
        mode=mode,
        cache_ttl_seconds=_positive_number(
            config, "CACHE_TTL_SECONDS", DEFAULT_FETCH_CACHE_TTL_SECONDS
        ),
        cache_dir=os.path.expanduser(cache_dir) if cache_dir else None,
        request_timeout=_positive_number(
            config, "REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT
        ),
        log_level=str(log_level) if log_level else None,
        log_dir=os.path.expanduser(log_dir) if log_dir else None,
    )

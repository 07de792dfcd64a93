"""
Settings for xmlcompose.

Settings control the defaults used when a caller does not pass a value
explicitly: the encoding, the indentation width, the names of elements
rendered as CDATA and whether libxml2's size limits are lifted. Values are
resolved from built-in defaults, then a JSON settings file, then
``XMLCOMPOSE_*`` environment variables, then explicit overrides.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..constants import DEFAULT_SETTINGS, ENV_PREFIX, SETTINGS_PATHS
from .exceptions import ConfigError
from .logging_utils import logger

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


def _to_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"Setting '{name}' expects a boolean, got {value!r}")


def _to_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"Setting '{name}' expects an integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Setting '{name}' expects an integer, got {value!r}") from e
    if number < 0:
        raise ConfigError(f"Setting '{name}' must not be negative, got {number}")
    return number


def _to_list(name: str, value: Any) -> List[str]:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, (list, tuple, set)):
        return [str(item) for item in value]
    raise ConfigError(f"Setting '{name}' expects a list or comma-separated string, got {value!r}")


def _to_str(name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"Setting '{name}' expects a non-empty string, got {value!r}")
    return value.strip()


_CONVERTERS = {
    "encoding": _to_str,
    "indent": _to_int,
    "cdata_elements": _to_list,
    "huge_tree": _to_bool,
}


class Settings:
    """Resolved xmlcompose settings."""

    def __init__(self, config_file: Optional[str] = None, **overrides: Any):
        """
        Initialize settings.

        Args:
            config_file: JSON settings file (optional). When not given, the
                first existing file from the standard locations is used.
            **overrides: Explicit values taking precedence over everything else

        Raises:
            ConfigError: If a key is unknown or a value cannot be converted
        """
        self._values: Dict[str, Any] = {
            name: _CONVERTERS[name](name, value) for name, value in DEFAULT_SETTINGS.items()
        }
        self.source_file: Optional[str] = None

        self._load_from_file(config_file)
        self._load_from_env()
        self.update(**{k: v for k, v in overrides.items() if v is not None})

    def _load_from_file(self, config_file: Optional[str] = None):
        """Load settings from a JSON file."""
        if config_file is None:
            for candidate in SETTINGS_PATHS:
                path = Path(candidate).expanduser()
                if path.is_file():
                    config_file = str(path)
                    break
            else:
                return

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                file_settings = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to load settings from {config_file}: {e}") from e

        if not isinstance(file_settings, dict):
            raise ConfigError(f"Settings file {config_file} must contain a JSON object")

        self.update(**file_settings)
        self.source_file = config_file
        logger.debug(f"Loaded settings from {config_file}")

    def _load_from_env(self):
        """Load settings from environment variables."""
        for name in self._values:
            env_name = f"{ENV_PREFIX}{name.upper()}"
            if env_name in os.environ:
                self._values[name] = _CONVERTERS[name](name, os.environ[env_name])
                logger.debug(f"Setting '{name}' set to {self._values[name]!r} from env")

    def update(self, **values: Any) -> "Settings":
        """
        Set one or more values.

        Raises:
            ConfigError: If a key is unknown or a value cannot be converted
        """
        for name, value in values.items():
            if name not in _CONVERTERS:
                raise ConfigError(f"Unknown setting '{name}'")
            self._values[name] = _CONVERTERS[name](name, value)
        return self

    def get(self, name: str) -> Any:
        """Get a setting value."""
        if name not in self._values:
            raise ConfigError(f"Unknown setting '{name}'")
        return self._values[name]

    @property
    def encoding(self) -> str:
        return self._values["encoding"]

    @property
    def indent(self) -> int:
        return self._values["indent"]

    @property
    def cdata_elements(self) -> List[str]:
        return list(self._values["cdata_elements"])

    @property
    def huge_tree(self) -> bool:
        return self._values["huge_tree"]

    def as_dict(self) -> Dict[str, Any]:
        """Get all settings as a dictionary."""
        return {name: (list(value) if isinstance(value, list) else value) for name, value in self._values.items()}

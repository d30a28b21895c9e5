"""Settings loader for YAML files.

Settings are read from a YAML file and layered over built-in defaults, with
dot-notation access to nested keys.

Recognized settings:
    data.features_path        default GeoJSON feature collection
    logging.config            logging YAML file
    logging.use_platform_dir  write logs to the platform log directory
    query.default_radius_nm   radius used when only a center is given

Typical usage example:
    from airfinder.core.config import ConfigLoader

    config = ConfigLoader.load("config/settings.yaml")
    features_path = config.get("data.features_path")
"""

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: dict[str, Any] = {
    "data": {
        "features_path": None,
    },
    "logging": {
        "config": None,
        "use_platform_dir": True,
    },
    "query": {
        "default_radius_nm": None,
    },
}


class ConfigError(Exception):
    """Raised when configuration operations fail."""


class ConfigLoader:
    """Settings with nested access and defaults.

    Examples:
        >>> config = ConfigLoader.load("config/settings.yaml")
        >>> radius = config.get("query.default_radius_nm", default=25)
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        """Initialize with settings data layered over the defaults.

        Args:
            data: Settings dictionary (None for defaults only).
        """
        self._data = self._merge_dicts(copy.deepcopy(DEFAULT_SETTINGS), data or {})

    @classmethod
    def load(cls, path: str | Path) -> "ConfigLoader":
        """Load settings from a YAML file.

        Args:
            path: Path to YAML settings file.

        Returns:
            ConfigLoader instance with loaded data.

        Raises:
            ConfigError: If the file is missing, unreadable or not a mapping.

        Examples:
            >>> config = ConfigLoader.load("config/settings.yaml")
        """
        path = Path(path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load configuration: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration root must be a mapping: {path}")

        logger.info("Loaded configuration from: %s", path)
        return cls(data)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value using dot notation.

        Args:
            key: Settings key (supports dot notation).
            default: Value returned if the key is missing or null.

        Returns:
            Settings value or default.

        Examples:
            >>> config.get("data.features_path")
            'data/airports.geojson'
        """
        value: Any = self._data

        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        """Set a value using dot notation.

        Args:
            key: Settings key (supports dot notation).
            value: Value to set.

        Examples:
            >>> config.set("query.default_radius_nm", 50)
        """
        keys = key.split(".")
        data = self._data

        for k in keys[:-1]:
            if not isinstance(data.get(k), dict):
                data[k] = {}
            data = data[k]

        data[keys[-1]] = value

    def get_section(self, key: str) -> dict[str, Any]:
        """Get an entire settings section.

        Args:
            key: Section key (supports dot notation).

        Returns:
            Section as dictionary.

        Raises:
            ConfigError: If section not found or not a dict.
        """
        value = self.get(key)

        if value is None:
            raise ConfigError(f"Configuration section not found: {key}")

        if not isinstance(value, dict):
            raise ConfigError(f"Configuration key is not a section: {key}")

        return value

    def merge(self, other: "ConfigLoader") -> None:
        """Merge another configuration into this one.

        Args:
            other: ConfigLoader to merge from. Its non-null values win.
        """
        self._data = self._merge_dicts(self._data, other._data)

    def _merge_dicts(self, base: dict, override: dict) -> dict:
        """Recursively merge two dictionaries.

        Args:
            base: Base dictionary.
            override: Override dictionary.

        Returns:
            Merged dictionary.
        """
        result = base.copy()

        for key, value in override.items():
            if value is None and key in result:
                continue
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_dicts(result[key], value)
            else:
                result[key] = value

        return result

    def to_dict(self) -> dict[str, Any]:
        """Get the settings as a dictionary.

        Returns:
            Deep copy of the settings.
        """
        return copy.deepcopy(self._data)

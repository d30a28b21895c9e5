"""Logging setup for the AirFinder command line tools.

Library modules only call logging.getLogger(__name__); this module wires
handlers for the applications that use them. Configuration comes from YAML
with optional per-component levels, logs go to a platform-aware location,
and previous logs are rotated on startup.

Platform-specific log locations:
    - macOS: ~/Library/Logs/AirFinder/airfinder.log
    - Linux: ~/.airfinder/logs/airfinder.log
    - Windows: %AppData%/AirFinder/Logs/airfinder.log

Typical usage example:
    from airfinder.core.logging_system import get_logger, initialize_logging

    initialize_logging("config/logging.yaml")
    log = get_logger("airfinder.main")
    log.info("Loaded %d features", count)
"""

import logging
import os
import platform
import time
from pathlib import Path
from typing import Any

import yaml

_logging_config: dict[str, Any] = {}
_loggers_cache: dict[str, logging.Logger] = {}
_initialized = False


class LoggingError(Exception):
    """Raised when logging system operations fail."""


def get_platform_log_dir() -> Path:
    """Get platform-specific log directory.

    Returns:
        Path to the platform-appropriate log directory:
        - macOS: ~/Library/Logs/AirFinder
        - Linux: ~/.airfinder/logs
        - Windows: %AppData%/AirFinder/Logs
    """
    system = platform.system()

    if system == "Darwin":
        return Path.home() / "Library" / "Logs" / "AirFinder"
    elif system == "Windows":
        appdata = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return appdata / "AirFinder" / "Logs"
    else:
        return Path.home() / ".airfinder" / "logs"


def rotate_logs(log_dir: Path, log_filename: str = "airfinder.log", keep_count: int = 5) -> None:
    """Rotate logs on startup, keeping the last N runs.

    Renames the current log to airfinder.log.1, shifts older logs, and
    deletes logs beyond keep_count.

    Args:
        log_dir: Directory containing log files.
        log_filename: Base name of the log file.
        keep_count: Number of old logs to keep.
    """
    log_file = log_dir / log_filename

    if not log_file.exists():
        return

    oldest_log = log_dir / f"{log_filename}.{keep_count}"
    if oldest_log.exists():
        oldest_log.unlink()

    for i in range(keep_count - 1, 0, -1):
        old_log = log_dir / f"{log_filename}.{i}"
        if old_log.exists():
            old_log.rename(log_dir / f"{log_filename}.{i + 1}")

    log_file.rename(log_dir / f"{log_filename}.1")


def initialize_logging(
    config_path: str | Path | None = None, use_platform_dir: bool = True
) -> None:
    """Initialize logging from YAML configuration.

    Call once at startup, before the first log record.

    Args:
        config_path: Path to logging configuration YAML file.
            If None, uses the default configuration.
        use_platform_dir: If True, use the platform-specific log directory.
            If False, use the directory from the config.

    Raises:
        LoggingError: If the configuration cannot be loaded or names an
            unknown log level.
    """
    global _logging_config, _initialized

    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise LoggingError(f"Logging config file not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise LoggingError(f"Failed to load logging config: {e}") from e

        if not isinstance(loaded, dict):
            raise LoggingError(f"Logging config must be a mapping: {config_path}")
        config = {**_get_default_config(), **loaded}
    else:
        config = _get_default_config()

    _validate_levels(config)
    _logging_config = config

    if use_platform_dir:
        _logging_config["log_dir"] = str(get_platform_log_dir())

    file_config = _logging_config.get("file", {})
    if file_config.get("enabled", True):
        log_dir = Path(_logging_config.get("log_dir", "logs"))
        log_dir.mkdir(parents=True, exist_ok=True)
        rotate_logs(
            log_dir,
            file_config.get("filename", "airfinder.log"),
            file_config.get("backup_count", 5),
        )

    _loggers_cache.clear()
    _configure_root_logger()

    _initialized = True


def _parse_level(name: Any) -> int:
    """Convert a level name such as "DEBUG" to its numeric value.

    Raises:
        LoggingError: If the name is not a standard logging level.
    """
    level = logging.getLevelNamesMapping().get(str(name).strip().upper())
    if level is None:
        raise LoggingError(f"Unknown log level: {name!r}")
    return level


def _validate_levels(config: dict[str, Any]) -> None:
    """Check every level name in a logging config before it is applied."""
    _parse_level(config.get("level", "INFO"))

    console_config = config.get("console") or {}
    if "level" in console_config:
        _parse_level(console_config["level"])

    components = config.get("components") or {}
    if not isinstance(components, dict):
        raise LoggingError("Logging components must be a mapping")
    for name, component_config in components.items():
        if not isinstance(component_config, dict):
            raise LoggingError(f"Logging component {name!r} must be a mapping")
        if "level" in component_config:
            _parse_level(component_config["level"])


def _get_default_config() -> dict[str, Any]:
    """Get default logging configuration.

    Returns:
        Default logging configuration dictionary.
    """
    return {
        "level": "INFO",
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        "date_format": "%Y-%m-%d %H:%M:%S",
        "log_dir": "logs",
        "file": {
            "enabled": True,
            "filename": "airfinder.log",
            "backup_count": 5,
        },
        "console": {
            "enabled": True,
            "level": "WARNING",
        },
        "components": {},
    }


def _configure_root_logger() -> None:
    """Configure the root logger with console and file handlers."""
    root_logger = logging.getLogger()
    root_logger.setLevel(_parse_level(_logging_config.get("level", "INFO")))

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    console_config = _logging_config.get("console", {})
    if console_config.get("enabled", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(_parse_level(console_config.get("level", "WARNING")))
        console_handler.setFormatter(_get_formatter())
        root_logger.addHandler(console_handler)

    file_config = _logging_config.get("file", {})
    if file_config.get("enabled", True):
        log_dir = Path(_logging_config.get("log_dir", "logs"))
        log_file = log_dir / file_config.get("filename", "airfinder.log")

        # Rotation already happened in initialize_logging
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(_get_formatter())
        root_logger.addHandler(file_handler)


class MillisecondFormatter(logging.Formatter):
    """Formatter that appends milliseconds with a dot separator."""

    def formatTime(self, record, datefmt=None):
        """Format time with milliseconds using dot separator."""
        ct = self.converter(record.created)
        s = time.strftime(datefmt or "%Y-%m-%d %H:%M:%S", ct)
        return f"{s}.{int(record.msecs):03d}"


def _get_formatter() -> logging.Formatter:
    """Get the configured log formatter."""
    fmt = _logging_config.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    datefmt = _logging_config.get("date_format", "%Y-%m-%d %H:%M:%S")
    return MillisecondFormatter(fmt, datefmt)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a component.

    Loggers are cached. A component may override its level, or be disabled,
    under the "components" section of the logging config:

        components:
          airfinder.airports.search:
            level: DEBUG

    Args:
        name: Logger name (typically the module name).

    Returns:
        Configured logger instance.
    """
    if not _initialized:
        initialize_logging()

    if name in _loggers_cache:
        return _loggers_cache[name]

    logger = logging.getLogger(name)
    component_config = _logging_config.get("components", {}).get(name, {})

    if component_config.get("enabled", True):
        if "level" in component_config:
            logger.setLevel(_parse_level(component_config["level"]))
    else:
        logger.disabled = True

    _loggers_cache[name] = logger
    return logger


def shutdown_logging() -> None:
    """Flush, close and detach all root handlers.

    Call at application exit.
    """
    global _initialized

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    logging.shutdown()
    _loggers_cache.clear()
    _initialized = False

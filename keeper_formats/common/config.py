"""Configuration management for keeper-formats.

Handles loading of the YAML file the host uses to enable format handlers
and pass them their options. Example::

    formats:
      unity:
        enabled: true
      rpm:
        compute_checksum: true
      pypi:
        options:
          simple_url: /pypi/simple/
    logging:
      level: DEBUG
      log_dir: ${KEEPER_LOG_DIR}
      file_logging: true
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml

from .logger import setup_logger

# Per-format handler options applied when the config file omits them
DEFAULT_FORMAT_OPTIONS: Dict[str, Dict[str, Any]] = {
    "unity": {},
    "rpm": {},
    "pypi": {
        "simple_url": "/simple/",
        "files_url": "/",
    },
}

DEFAULT_LOG_DIR = "/var/log/keeper-formats"


@dataclass
class FormatConfig:
    """Configuration for a single format handler."""

    enabled: bool = True
    compute_checksum: bool = False
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class LoggingConfig:
    """Where handler log records go."""

    level: str = "INFO"
    log_dir: str = DEFAULT_LOG_DIR
    file_logging: bool = False
    console_logging: bool = True


@dataclass
class KeeperFormatsConfig:
    """Top-level configuration for keeper-formats."""

    formats: Dict[str, FormatConfig] = field(default_factory=dict)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def get_format(self, format_key: str) -> FormatConfig:
        """Return the config for a format, falling back to defaults."""
        if format_key in self.formats:
            return self.formats[format_key]
        return parse_format_config(format_key, {})


def parse_format_config(format_key: str, format_dict: Dict[str, Any]) -> FormatConfig:
    """Parse a format configuration dictionary.

    Args:
        format_key: Key of the format (``unity``, ``rpm``, ``pypi``)
        format_dict: Format configuration dictionary

    Returns:
        FormatConfig instance

    Raises:
        ValueError: If a built-in format is given an option it does not take
    """
    configured = format_dict.get("options") or {}
    if format_key in DEFAULT_FORMAT_OPTIONS:
        unknown = sorted(set(configured) - set(DEFAULT_FORMAT_OPTIONS[format_key]))
        if unknown:
            raise ValueError(
                f"Unknown option(s) for format '{format_key}': {', '.join(unknown)}"
            )

    options = dict(DEFAULT_FORMAT_OPTIONS.get(format_key, {}))
    options.update(configured)

    return FormatConfig(
        enabled=format_dict.get("enabled", True),
        compute_checksum=format_dict.get("compute_checksum", False),
        options=options,
    )


def parse_logging_config(logging_dict: Dict[str, Any]) -> LoggingConfig:
    """Parse logging configuration dictionary.

    Args:
        logging_dict: Logging configuration dictionary

    Returns:
        LoggingConfig instance
    """
    return LoggingConfig(
        level=logging_dict.get("level", "INFO"),
        log_dir=logging_dict.get("log_dir", DEFAULT_LOG_DIR),
        file_logging=logging_dict.get("file_logging", False),
        console_logging=logging_dict.get("console_logging", True),
    )


def parse_config(config_dict: Dict[str, Any]) -> KeeperFormatsConfig:
    """Parse the full configuration dictionary.

    Args:
        config_dict: Full configuration dictionary

    Returns:
        KeeperFormatsConfig instance
    """
    formats = {}
    for format_key, format_dict in (config_dict.get("formats") or {}).items():
        formats[format_key] = parse_format_config(format_key, format_dict or {})

    logging_config = LoggingConfig()
    if config_dict.get("logging"):
        logging_config = parse_logging_config(config_dict["logging"])

    return KeeperFormatsConfig(formats=formats, logging=logging_config)


def get_enabled_formats(config: KeeperFormatsConfig) -> List[str]:
    """Get the keys of every enabled built-in format.

    Formats missing from the config file are enabled by default.

    Args:
        config: KeeperFormatsConfig instance

    Returns:
        List of enabled format keys
    """
    keys = list(DEFAULT_FORMAT_OPTIONS)
    keys.extend(k for k in config.formats if k not in DEFAULT_FORMAT_OPTIONS)
    return [key for key in keys if config.get_format(key).enabled]


def load_config(config_path: str = "/etc/keeper-formats/config.yaml") -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        TypeError: If the YAML root is not a mapping
        yaml.YAMLError: If config file is invalid YAML
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_file.open("r") as f:
        config = yaml.safe_load(f)

    if config is None:
        config = {}

    if not isinstance(config, dict):
        raise TypeError(
            f"Configuration root must be a mapping, got {type(config).__name__}"
        )

    return _expand_env_vars(config)


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand environment variables in configuration.

    Args:
        obj: Configuration object (dict, list, str, etc.)

    Returns:
        Configuration with expanded environment variables
    """
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        return os.path.expandvars(obj)
    else:
        return obj


def load_typed_config(
    config_path: str = "/etc/keeper-formats/config.yaml",
) -> KeeperFormatsConfig:
    """Load and parse configuration into typed dataclass.

    Args:
        config_path: Path to configuration file

    Returns:
        KeeperFormatsConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If a format is given an option it does not take
        yaml.YAMLError: If config file is invalid YAML
    """
    return parse_config(load_config(config_path))


def configure_logging(config: KeeperFormatsConfig) -> logging.Logger:
    """Route every handler logger (``format.*``) per the logging config."""
    return setup_logger(
        "format",
        log_dir=config.logging.log_dir,
        level=config.logging.level,
        file_logging=config.logging.file_logging,
        console_logging=config.logging.console_logging,
    )

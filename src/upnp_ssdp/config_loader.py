"""
Configuration loader for SSDP discovery
Loads and validates optional configuration from YAML files
"""

import copy
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import pytz
import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "ssdp": {
        "buffer_size": 4096
    },
    "http": {
        "request_timeout": 10,
        "max_concurrent_fetches": 10
    },
    "logging": {
        "level": "INFO",
        "file": None,
        "console_output": True,
        "timezone": "UTC"
    }
}

_POSITIVE_FIELDS = {
    "ssdp": ["buffer_size"],
    "http": ["request_timeout", "max_concurrent_fetches"]
}

_HANDLER_MARK = "_upnp_ssdp_handler"


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file with validation.
    Without a path the built-in defaults are returned.
    """
    if config_path is None:
        return _apply_defaults({})

    try:
        config_file = Path(config_path)
        if not config_file.exists():
            logger.error(f"Configuration file not found: {config_path}")
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_file, 'r') as f:
            config = yaml.safe_load(f) or {}

        if not isinstance(config, dict):
            raise ValueError("Configuration root must be a mapping")

        config = _apply_defaults(config)
        _validate_config(config)

        logger.info(f"Configuration loaded from {config_path}")
        return config

    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        raise


def _validate_config(config: Dict) -> None:
    """Validate that numeric settings are positive"""
    for section in DEFAULT_CONFIG:
        if not isinstance(config[section], dict):
            raise ValueError(f"Configuration section {section} must be a mapping")

    for section, fields in _POSITIVE_FIELDS.items():
        for field in fields:
            value = config[section][field]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ValueError(f"{section}.{field} must be a positive number, got {value!r}")

    level = config['logging']['level']
    if not isinstance(level, str) or not isinstance(logging.getLevelName(level.upper()), int):
        raise ValueError(f"logging.level is not a valid level: {level!r}")

    timezone = config['logging']['timezone']
    if timezone not in pytz.all_timezones_set:
        raise ValueError(f"logging.timezone is not a known timezone: {timezone!r}")


def _apply_defaults(config: Dict) -> Dict:
    """Apply default values to configuration"""
    for section, defaults in DEFAULT_CONFIG.items():
        if config.get(section) is None:
            config[section] = {}
        if not isinstance(config[section], dict):
            continue
        for key, default_value in defaults.items():
            if key not in config[section]:
                config[section][key] = default_value
    return config


class TimezoneFormatter(logging.Formatter):
    """Formatter that renders timestamps in a configured timezone"""

    def __init__(self, fmt=None, timezone: str = "UTC"):
        super().__init__(fmt)
        self.tz = pytz.timezone(timezone)

    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created, tz=self.tz)
        if datefmt:
            return dt.strftime(datefmt)
        else:
            # Default format: YYYY-MM-DD HH:MM:SS TZ
            return dt.strftime('%Y-%m-%d %H:%M:%S %Z')


def setup_logging(config: Dict) -> None:
    """Setup logging based on configuration"""
    log_config = config.get('logging', {})
    level = log_config.get('level', 'INFO')

    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    formatter = TimezoneFormatter(log_format, log_config.get('timezone', 'UTC'))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper()))

    # Replace handlers from an earlier call instead of stacking them
    for handler in root.handlers[:]:
        if getattr(handler, _HANDLER_MARK, False):
            root.removeHandler(handler)
            handler.close()

    if log_config.get('console_output', True):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        setattr(console_handler, _HANDLER_MARK, True)
        root.addHandler(console_handler)

    log_file = log_config.get('file')
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        setattr(file_handler, _HANDLER_MARK, True)
        root.addHandler(file_handler)

    logger.info(f"Logging configured: level={level}, console={log_config.get('console_output', True)}, file={log_file}")


def get_sample_config() -> Dict:
    """Return a sample configuration for reference"""
    sample = copy.deepcopy(DEFAULT_CONFIG)
    sample["logging"]["file"] = "logs/ssdp_discovery.log"
    return sample

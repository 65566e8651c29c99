"""
Configuration manager for the feed digest reader.
Handles loading and validation of configuration settings.
"""
import copy
import json
import logging
import os
from json.decoder import JSONDecodeError
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from fdr.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    "networking": {
        "timeout_seconds": 30,
        "user_agent": None
    },
    "storage": {
        "seen_file": "seen.txt"
    },
    "logging": {
        "level": "WARNING",
        "log_dir": None
    },
    "display": {
        "sort": "original",
        "show_all": False
    }
}

# Environment variable -> dotted settings key
ENV_OVERRIDES = {
    "FDR_SEEN_FILE": "storage.seen_file",
    "FDR_LOG_LEVEL": "logging.level",
}

VALID_SORT_MODES = ("original", "desc", "asc")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def merge_dicts(source: Dict[str, Any], default: Dict[str, Any]) -> None:
    """Recursively merges default dict into source dict."""
    for key, value in default.items():
        if key not in source:
            source[key] = copy.deepcopy(value)
        elif isinstance(value, dict) and isinstance(source[key], dict):
            merge_dicts(source[key], value)
        # No else: existing values in source take precedence


class ConfigManager:
    """
    Manages settings loading, defaults and environment overrides.
    """

    def __init__(self, settings_path: Optional[str] = None, use_env: bool = True):
        """
        Initialize configuration manager.

        Args:
            settings_path: Path to a JSON settings file. A missing file means
                "use the defaults".
            use_env: Apply FDR_* environment variables (and a .env file)
        """
        self.settings_path = settings_path
        self.settings: Dict[str, Any] = {}

        logger.debug(f"ConfigManager initialized with settings: {settings_path}")

        self.settings = self._load_json_file(settings_path)
        merge_dicts(self.settings, DEFAULT_SETTINGS)

        if use_env:
            load_dotenv()
            self._apply_env_overrides()

        self._validate_settings()

    def _load_json_file(self, file_path: Optional[str]) -> Dict[str, Any]:
        """
        Load the JSON settings file.

        Args:
            file_path: Path to JSON file

        Returns:
            Configuration dictionary, empty when there is no file

        Raises:
            ConfigError: If the file contains invalid JSON or is not an object
        """
        if not file_path or not os.path.exists(file_path):
            logger.debug(f"No settings file at {file_path}, using defaults")
            return {}

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in settings file '{file_path}': {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read settings file '{file_path}': {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Settings file '{file_path}' must contain a JSON object")

        logger.info(f"Loaded settings from {file_path}")
        return config

    def _apply_env_overrides(self):
        for env_var, key_path in ENV_OVERRIDES.items():
            value = os.environ.get(env_var)
            if value:
                logger.debug(f"Overriding '{key_path}' from {env_var}")
                self.set_config_value(key_path, value)

    def _validate_settings(self):
        """Validate settings configuration."""
        for section in DEFAULT_SETTINGS:
            if not isinstance(self.settings.get(section), dict):
                raise ConfigError(f"Invalid type for configuration section '{section}'. Expected dict")

        timeout = self.get_config_value("networking.timeout_seconds")
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigError("Invalid 'networking.timeout_seconds'. Expected a positive number.")

        user_agent = self.get_config_value("networking.user_agent")
        if user_agent is not None and not isinstance(user_agent, str):
            raise ConfigError("Invalid type for 'networking.user_agent'. Expected a string.")

        seen_file = self.get_config_value("storage.seen_file")
        if not seen_file or not isinstance(seen_file, str):
            raise ConfigError("Missing or invalid 'storage.seen_file'. Expected non-empty string.")

        level = self.get_config_value("logging.level")
        if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
            raise ConfigError(f"Invalid 'logging.level'. Expected one of {', '.join(VALID_LOG_LEVELS)}.")

        log_dir = self.get_config_value("logging.log_dir")
        if log_dir is not None and not isinstance(log_dir, str):
            raise ConfigError("Invalid type for 'logging.log_dir'. Expected a string.")

        if self.get_config_value("display.sort") not in VALID_SORT_MODES:
            raise ConfigError(f"Invalid 'display.sort'. Expected one of {', '.join(VALID_SORT_MODES)}.")

        if not isinstance(self.get_config_value("display.show_all"), bool):
            raise ConfigError("Invalid type for 'display.show_all'. Expected boolean.")

        logger.debug("Settings configuration validated")

    def get_config_value(self, key_path: str, default=None):
        """
        Get configuration value using dot notation.

        Args:
            key_path: Dot-separated path to configuration value (e.g., "storage.seen_file")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self.settings

        for key in key_path.split('.'):
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set_config_value(self, key_path: str, value) -> None:
        """Set a configuration value using dot notation, creating sections as needed."""
        keys = key_path.split('.')
        section = self.settings
        for key in keys[:-1]:
            section = section.setdefault(key, {})
        section[keys[-1]] = value

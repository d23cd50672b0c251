"""Configuration manager for loading and validating .resilient-fetch.yml"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import yaml
from pydantic import ValidationError

from resilient_fetch.domain.config import AppConfig, HttpConfig, MockEndpointConfig, RetryPolicy

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".resilient-fetch.yml"


class ConfigurationError(Exception):
    """Configuration validation error."""

    pass


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


# env var -> (section, key, converter)
ENV_OVERRIDES: Dict[str, Tuple[str, str, Callable[[str], Any]]] = {
    "RESILIENT_FETCH_MAX_RETRIES": ("retry", "max_retries", int),
    "RESILIENT_FETCH_BASE_DELAY": ("retry", "base_delay", float),
    "RESILIENT_FETCH_MAX_DELAY": ("retry", "max_delay", float),
    "RESILIENT_FETCH_EXPONENTIAL": ("retry", "exponential", _parse_bool),
    "RESILIENT_FETCH_BACKOFF_MULTIPLIER": ("retry", "backoff_multiplier", float),
    "RESILIENT_FETCH_TIMEOUT": ("http", "timeout", float),
}


class ConfigManager:
    """Manages configuration from .resilient-fetch.yml and environment variables

    Configuration priority:
    1. Default values (defined in Pydantic models)
    2. .resilient-fetch.yml file (searched from current directory)
    3. Environment variables (RESILIENT_FETCH_*)
    4. CLI arguments (handled by CLI layer)
    """

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager

        Args:
            config_path: Path to .resilient-fetch.yml (searches from current dir if None)

        Raises:
            ConfigurationError: If configuration validation fails
        """
        if isinstance(config_path, str):
            config_path = Path(config_path)
        self.config_path = config_path or self._find_config_file()
        try:
            self.config: AppConfig = self._load_config()
        except ValidationError as e:
            errors = []
            for error in e.errors():
                field = ".".join(str(x) for x in error["loc"])
                errors.append(f"  - {field}: {error['msg']}")
            raise ConfigurationError(
                "Configuration validation failed:\n" + "\n".join(errors)
            ) from e

    def _find_config_file(self) -> Optional[Path]:
        """Find the config file starting from current directory

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            config_file = parent / CONFIG_FILE_NAME
            if config_file.exists():
                logger.info(f"Found config file: {config_file}")
                return config_file
        logger.debug(f"No {CONFIG_FILE_NAME} found, using defaults")
        return None

    def _load_config(self) -> AppConfig:
        """Load configuration from file and validate with Pydantic

        Raises:
            ConfigurationError: If the file is not valid YAML
            ValidationError: If configuration is invalid
        """
        config_dict: Dict[str, Any] = {"retry": {}, "http": {}, "mock": {}}

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e
            if not isinstance(file_config, dict):
                raise ConfigurationError(f"{self.config_path} must contain a mapping")
            config_dict = self._merge_config(config_dict, file_config)
            logger.info(f"Loaded configuration from {self.config_path}")

        config_dict = self._apply_env_overrides(config_dict)
        return AppConfig(**config_dict)

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries"""
        result = copy.deepcopy(base)
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply RESILIENT_FETCH_* environment variable overrides

        Raises:
            ConfigurationError: If a variable cannot be converted
        """
        for env_name, (section, key, convert) in ENV_OVERRIDES.items():
            raw = os.getenv(env_name)
            if not raw:
                continue
            try:
                value = convert(raw)
            except ValueError as e:
                raise ConfigurationError(f"Invalid value for {env_name}: {raw!r}") from e
            section_dict = config.get(section)
            if not isinstance(section_dict, dict):
                section_dict = {}
                config[section] = section_dict
            section_dict[key] = value
            logger.debug(f"Applied {env_name} override")
        return config

    def get_retry_policy(self) -> RetryPolicy:
        """Get the default retry policy"""
        return self.config.retry

    def get_http_config(self) -> HttpConfig:
        """Get HTTP request configuration"""
        return self.config.http

    def get_mock_config(self) -> MockEndpointConfig:
        """Get simulated endpoint configuration"""
        return self.config.mock

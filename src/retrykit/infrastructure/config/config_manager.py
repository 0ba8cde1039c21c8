"""Configuration manager for loading and validating .retrykit.yml"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from retrykit.domain.config import AppConfig, LoggingConfig, RetryConfig
from retrykit.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".retrykit.yml"

# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "RETRYKIT_MODE": ("retry", "mode"),
    "RETRYKIT_MULTIPLIER": ("retry", "multiplier"),
    "RETRYKIT_MAX_RETRY": ("retry", "max_retry"),
    "RETRYKIT_LOG_LEVEL": ("logging", "level"),
}


def format_validation_error(error: ValidationError) -> str:
    """Format pydantic validation errors for the user"""
    errors = []
    for item in error.errors():
        field = ".".join(str(x) for x in item["loc"]) or "config"
        errors.append(f"  - {field}: {item['msg']}")
    return "Configuration validation failed:\n" + "\n".join(errors)


def build_retry_config(**options: Any) -> RetryConfig:
    """Build a RetryConfig, reporting invalid options as ConfigurationError"""
    try:
        return RetryConfig(**options)
    except ValidationError as e:
        raise ConfigurationError(format_validation_error(e)) from e


class ConfigManager:
    """Manages configuration from .retrykit.yml and environment variables

    Configuration priority:
    1. Default values (defined in Pydantic models)
    2. .retrykit.yml file (searched from current directory upwards)
    3. Environment variables (RETRYKIT_*)
    4. CLI arguments (applied with :meth:`with_overrides`)
    """

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager

        Args:
            config_path: Path to .retrykit.yml (searches from current dir if None)

        Raises:
            ConfigurationError: If configuration validation fails
        """
        if isinstance(config_path, str):
            config_path = Path(config_path)
        self.config_path = config_path or self._find_config_file()
        try:
            self.config: AppConfig = self._load_config()
        except ValidationError as e:
            raise ConfigurationError(format_validation_error(e)) from e

    def _find_config_file(self) -> Optional[Path]:
        """Find .retrykit.yml starting from current directory

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
            ValidationError: If configuration is invalid
            ConfigurationError: If the file cannot be read or parsed
        """
        config_dict: Dict[str, Any] = {"retry": {}, "logging": {}}

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigurationError(f"Failed to load config from {self.config_path}: {e}") from e
            if not isinstance(file_config, dict):
                raise ConfigurationError(f"Config file {self.config_path} must contain a mapping")
            file_config = self._normalize_sections(file_config)
            config_dict = self._merge_config(config_dict, file_config)
            logger.info(f"Loaded configuration from {self.config_path}")

        config_dict = self._apply_env_overrides(config_dict)
        return AppConfig(**config_dict)

    def _normalize_sections(self, file_config: Dict[str, Any]) -> Dict[str, Any]:
        """Treat empty sections (``retry:``) as empty mappings

        Raises:
            ConfigurationError: If a section holds a non-mapping value
        """
        result = {}
        for section, value in file_config.items():
            if value is None:
                value = {}
            elif not isinstance(value, dict):
                raise ConfigurationError(
                    f"Section '{section}' in {self.config_path} must be a mapping"
                )
            result[section] = value
        return result

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
        """Apply RETRYKIT_* environment variable overrides"""
        for env_name, (section, key) in ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                config.setdefault(section, {})[key] = value
        return config

    def with_overrides(self, **retry_overrides: Any) -> RetryConfig:
        """Get retry configuration with CLI overrides applied (None = keep)

        Raises:
            ConfigurationError: If the combined configuration is invalid
        """
        data = self.config.retry.model_dump()
        data.update({k: v for k, v in retry_overrides.items() if v is not None})
        return build_retry_config(**data)

    def get_retry_config(self) -> RetryConfig:
        """Get retry configuration

        Returns:
            Retry configuration model
        """
        return self.config.retry

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration

        Returns:
            Logging configuration model
        """
        return self.config.logging

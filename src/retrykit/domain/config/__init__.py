"""Configuration models with Pydantic validation."""

from retrykit.domain.config.app import AppConfig
from retrykit.domain.config.logging import LoggingConfig
from retrykit.domain.config.retry import RetryConfig

__all__ = [
    "AppConfig",
    "LoggingConfig",
    "RetryConfig",
]

"""Logging configuration model."""

from typing import Literal

from pydantic import BaseModel


class LoggingConfig(BaseModel):
    """Configuration for log output.

    Attributes:
        level: Root log level when --verbose is not given
        format: logging format string
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

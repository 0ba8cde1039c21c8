"""Main application configuration model."""

from pydantic import BaseModel, ConfigDict, Field

from retrykit.domain.config.logging import LoggingConfig
from retrykit.domain.config.retry import RetryConfig


class AppConfig(BaseModel):
    """Main application configuration.

    Root model aggregating all configuration sections.
    Validation is performed at load time to fail fast on configuration errors.

    Attributes:
        retry: Retry loop configuration
        logging: Log output configuration
    """

    retry: RetryConfig = Field(default_factory=RetryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(
        validate_assignment=True,  # Validate on attribute assignment
        extra="forbid",  # Reject unknown fields
        json_schema_extra={
            "example": {
                "retry": {
                    "mode": "Exponential",
                    "multiplier": 2,
                    "max_retry": 5,
                    "stop_on_errors": ["403 Forbidden"],
                    "continue_on_errors": ["already exists"],
                    "message": "deploy: ",
                },
                "logging": {
                    "level": "INFO",
                },
            }
        },
    )

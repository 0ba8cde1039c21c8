"""Retry configuration model."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from retrykit.domain.policies.backoff import (
    BackoffMode,
    validate_delay_bound,
    validate_multiplier,
)


class RetryConfig(BaseModel):
    """Configuration for the retry loop.

    Validation runs when the model is built, so an invalid combination
    (including one whose longest wait exceeds MAX_DELAY_SECONDS) fails
    before the unit of work is ever invoked.

    Attributes:
        mode: Backoff formula (Fixed, Linear, Exponential)
        multiplier: Fixed wait, linear increment or exponent base (seconds)
        max_retry: Retries allowed after the first attempt
        stop_on_errors: Errors that are re-raised immediately
        continue_on_errors: Errors that end the loop quietly with a warning
        message: Optional prefix for log messages
        warning: Log standalone ``wait`` messages at WARNING instead of DEBUG.
            Used by the ``wait`` command only; waits between retries are
            always logged at WARNING.
    """

    mode: BackoffMode = BackoffMode.FIXED
    multiplier: int = Field(2, ge=0)
    max_retry: int = Field(5, ge=0)
    stop_on_errors: List[str] = Field(default_factory=list)
    continue_on_errors: List[str] = Field(default_factory=list)
    message: Optional[str] = None
    warning: bool = False

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    @field_validator("mode", mode="before")
    @classmethod
    def _parse_mode(cls, value):
        return BackoffMode.parse(value)

    @model_validator(mode="after")
    def _check_multiplier(self) -> "RetryConfig":
        validate_multiplier(self.mode, self.multiplier)
        validate_delay_bound(self.mode, self.multiplier, self.max_retry)
        return self

    @property
    def max_attempts(self) -> int:
        """Total number of attempts, including the first"""
        return self.max_retry + 1

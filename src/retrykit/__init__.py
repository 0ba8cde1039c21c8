"""retrykit - retry a unit of work with fixed, linear or exponential backoff"""

from retrykit.domain.config import RetryConfig
from retrykit.domain.errors import ClassifiedError, CommandError, ConfigurationError, RetrykitError
from retrykit.domain.models.outcome import OutcomeStatus, RetryOutcome
from retrykit.domain.policies import BackoffMode, compute_delay
from retrykit.infrastructure.retry import RetryExecutor, retry_call, with_retry
from retrykit.infrastructure.wait import WaitStep, apply_delay

__all__ = [
    "BackoffMode",
    "ClassifiedError",
    "CommandError",
    "ConfigurationError",
    "OutcomeStatus",
    "RetryConfig",
    "RetryExecutor",
    "RetryOutcome",
    "RetrykitError",
    "WaitStep",
    "apply_delay",
    "compute_delay",
    "retry_call",
    "with_retry",
]

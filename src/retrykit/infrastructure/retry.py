"""Retry executor built on tenacity.

The executor runs a zero-argument unit of work until it succeeds, the retry
budget is spent, or a failure matches one of the caller's classification
lists. Backoff follows the configured Fixed/Linear/Exponential policy.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, List, Optional

from tenacity import RetryCallState, Retrying, retry_if_exception, stop_after_attempt
from tenacity.wait import wait_base

from retrykit.domain.config import RetryConfig
from retrykit.domain.models.outcome import OutcomeStatus, RetryOutcome
from retrykit.domain.policies.backoff import BackoffMode, compute_delay, validate_multiplier
from retrykit.domain.policies.classification import ErrorClass, ErrorClassifier
from retrykit.infrastructure.config.config_manager import build_retry_config
from retrykit.infrastructure.wait import WaitStep

logger = logging.getLogger(__name__)


class wait_backoff(wait_base):
    """tenacity wait strategy computing delays with the backoff policy"""

    def __init__(self, mode: BackoffMode, multiplier: int) -> None:
        self.mode = BackoffMode.parse(mode)
        self.multiplier = multiplier
        validate_multiplier(self.mode, self.multiplier)

    def __call__(self, retry_state: RetryCallState) -> float:
        return compute_delay(self.mode, self.multiplier, retry_state.attempt_number)


class RetryExecutor:
    """Runs a unit of work under a retry policy.

    Each call to :meth:`execute` owns its own attempt counter and tenacity
    controller, so one executor may be shared between callers.
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        log: Optional[logging.Logger] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        """Initialize executor

        Args:
            config: Validated retry configuration (defaults if None)
            log: Logger receiving retry/wait messages
            sleep: Blocking sleep function (defaults to tenacity's)
        """
        self.config = config or RetryConfig()
        self.log = log or logger
        self.classifier = ErrorClassifier(
            self.config.stop_on_errors, self.config.continue_on_errors
        )
        self.wait_step = WaitStep(log=self.log, sleep=sleep)

    def _prefix(self, text: str) -> str:
        return f"{self.config.message}{text}" if self.config.message else text

    def execute(self, work: Callable[[], Any]) -> RetryOutcome:
        """Run ``work`` until it succeeds or the loop reaches a terminal state

        Args:
            work: Callable taking no arguments; failures must be raised

        Returns:
            RetryOutcome with status SUCCEEDED, or SKIPPED when the failure
            matched continue_on_errors

        Raises:
            Exception: The original error when it matched stop_on_errors or
                when the retry budget was exhausted
        """
        config = self.config
        attempts = 0
        delays: List[int] = []

        def _attempt() -> Any:
            nonlocal attempts
            attempts += 1
            self.log.debug(f"Attempt {attempts}/{config.max_attempts}")
            return work()

        def _before_sleep(retry_state: RetryCallState) -> None:
            delay = int(retry_state.next_action.sleep)
            delays.append(delay)
            error = retry_state.outcome.exception()
            self.wait_step.announce(
                delay,
                config.mode,
                retry_state.attempt_number,
                message=self._prefix(f"Attempt {retry_state.attempt_number} failed: {error}. "),
                warning=True,
            )

        retrying = Retrying(
            stop=stop_after_attempt(config.max_attempts),
            wait=wait_backoff(config.mode, config.multiplier),
            retry=retry_if_exception(self.classifier.is_transient),
            before_sleep=_before_sleep,
            sleep=self.wait_step.sleep,
            reraise=True,
        )

        try:
            value = retrying(_attempt)
        except Exception as e:
            error_class = self.classifier.classify(e)
            if error_class is ErrorClass.CONTINUE:
                self.log.warning(self._prefix(f"Continuing past error on attempt {attempts}: {e}"))
                return RetryOutcome(
                    status=OutcomeStatus.SKIPPED,
                    attempts=attempts,
                    delays=delays,
                    error=e,
                )
            if error_class is ErrorClass.STOP:
                self.log.error(self._prefix(f"Stopping on error (attempt {attempts}): {e}"))
            else:
                self.log.error(self._prefix(f"Failed after {attempts} attempts: {e}"))
            raise

        if attempts > 1:
            self.log.info(self._prefix(f"Succeeded on attempt {attempts}"))
        return RetryOutcome(
            status=OutcomeStatus.SUCCEEDED,
            value=value,
            attempts=attempts,
            delays=delays,
        )


def retry_call(
    work: Callable[[], Any],
    config: Optional[RetryConfig] = None,
    *,
    log: Optional[logging.Logger] = None,
    sleep: Optional[Callable[[float], None]] = None,
    **options: Any,
) -> Any:
    """Retry ``work`` and return its value (None if the loop gave up quietly)

    Args:
        work: Callable taking no arguments
        config: Retry configuration; built from ``options`` if None
        log: Optional logger for retry messages
        sleep: Optional sleep function
        **options: RetryConfig fields (mode, multiplier, max_retry, ...)

    Raises:
        ConfigurationError: If the options are invalid (before any attempt)
    """
    if config is None:
        config = build_retry_config(**options)
    return RetryExecutor(config, log=log, sleep=sleep).execute(work).value


def with_retry(
    config: Optional[RetryConfig] = None, **options: Any
) -> Callable[[Callable], Callable]:
    """Create a decorator running every call of the function under retry

    Configuration is validated once, when the decorator is created.
    """
    retry_config = config or build_retry_config(**options)

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapped(*args: Any, **kwargs: Any) -> Any:
            executor = RetryExecutor(retry_config)
            return executor.execute(lambda: func(*args, **kwargs)).value

        return wrapped

    return decorator

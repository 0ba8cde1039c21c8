"""Wait step: announce a computed delay, then block for it."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Union

from tenacity import nap

from retrykit.domain.policies.backoff import BackoffMode

logger = logging.getLogger(__name__)


def _default_sleep(seconds: float) -> None:
    # Looked up at call time so tests can patch tenacity.nap.sleep
    nap.sleep(seconds)


def format_delay_message(
    delay: int,
    mode: Union[str, BackoffMode],
    attempt: int,
    message: Optional[str] = None,
) -> str:
    """Build the human-readable wait message"""
    mode_name = BackoffMode.parse(mode).value
    unit = "second" if delay == 1 else "seconds"
    text = f"{mode_name} backoff: attempt {attempt}, waiting {delay} {unit}"
    if message:
        text = f"{message}{text}"
    return text


class WaitStep:
    """Blocking wait with a warning- or debug-level announcement"""

    def __init__(
        self,
        log: Optional[logging.Logger] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self.log = log or logger
        self._sleep = sleep or _default_sleep

    def announce(
        self,
        delay: int,
        mode: Union[str, BackoffMode],
        attempt: int,
        message: Optional[str] = None,
        warning: bool = False,
    ) -> str:
        """Emit the wait message without blocking

        Returns:
            The emitted message
        """
        text = format_delay_message(delay, mode, attempt, message)
        self.log.log(logging.WARNING if warning else logging.DEBUG, text)
        return text

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            self._sleep(seconds)

    def apply(
        self,
        delay: int,
        mode: Union[str, BackoffMode],
        attempt: int,
        message: Optional[str] = None,
        warning: bool = False,
    ) -> None:
        """Announce the delay, then block for it (0 is a no-op wait)"""
        self.announce(delay, mode, attempt, message=message, warning=warning)
        self.sleep(delay)


def apply_delay(
    delay: int,
    mode: Union[str, BackoffMode] = BackoffMode.FIXED,
    attempt: int = 1,
    message: Optional[str] = None,
    warning: bool = False,
    *,
    log: Optional[logging.Logger] = None,
    sleep: Optional[Callable[[float], None]] = None,
) -> None:
    """Apply a single delay using a one-off WaitStep"""
    WaitStep(log=log, sleep=sleep).apply(delay, mode, attempt, message=message, warning=warning)

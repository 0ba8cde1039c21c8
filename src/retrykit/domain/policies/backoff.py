"""Backoff policy - wait time between attempts"""

import math
from enum import Enum
from typing import List, Union

from retrykit.domain.errors import ConfigurationError

MIN_EXPONENTIAL_MULTIPLIER = 2
MAX_DELAY_SECONDS = 365 * 24 * 60 * 60


class BackoffMode(str, Enum):
    """Formula family used to compute the wait between attempts"""

    FIXED = "Fixed"
    LINEAR = "Linear"
    EXPONENTIAL = "Exponential"

    @classmethod
    def parse(cls, value: Union[str, "BackoffMode"]) -> "BackoffMode":
        """Parse a mode name case-insensitively"""
        if isinstance(value, cls):
            return value
        for mode in cls:
            if mode.value.lower() == str(value).strip().lower():
                return mode
        available = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown backoff mode: {value}. Available modes: {available}")


def validate_multiplier(mode: BackoffMode, multiplier: int) -> None:
    """Check that ``multiplier`` is usable with ``mode``

    Raises:
        ConfigurationError: If exponential backoff would degenerate
    """
    if mode == BackoffMode.EXPONENTIAL and multiplier < MIN_EXPONENTIAL_MULTIPLIER:
        raise ConfigurationError(
            f"multiplier must be >= {MIN_EXPONENTIAL_MULTIPLIER} for Exponential backoff "
            f"(got {multiplier})"
        )


def validate_delay_bound(mode: BackoffMode, multiplier: int, attempt: int) -> None:
    """Check that the wait after ``attempt`` stays within MAX_DELAY_SECONDS

    Delays never decrease with the attempt number, so checking the last
    attempt bounds every wait of the run.

    Raises:
        ConfigurationError: If the wait would exceed the limit
    """
    if attempt < 1 or multiplier == 0:
        return
    if mode == BackoffMode.EXPONENTIAL:
        too_long = attempt * math.log(multiplier) > math.log(MAX_DELAY_SECONDS)
    elif mode == BackoffMode.LINEAR:
        too_long = multiplier * attempt > MAX_DELAY_SECONDS
    else:
        too_long = multiplier > MAX_DELAY_SECONDS
    if too_long:
        raise ConfigurationError(
            f"{mode.value} backoff with multiplier {multiplier} exceeds the maximum wait of "
            f"{MAX_DELAY_SECONDS} seconds by attempt {attempt}"
        )


def compute_delay(mode: Union[str, BackoffMode], multiplier: int = 2, attempt: int = 1) -> int:
    """Compute the wait in seconds after a failed attempt

    Args:
        mode: Backoff mode
        multiplier: Fixed wait (Fixed), per-attempt increment (Linear)
            or exponent base (Exponential)
        attempt: Number of the attempt that just failed (starts at 1)

    Returns:
        Wait time in whole seconds

    Raises:
        ValueError: If attempt is below 1
        ConfigurationError: If multiplier is invalid for exponential mode
    """
    mode = BackoffMode.parse(mode)
    if attempt < 1:
        raise ValueError(f"attempt must be >= 1 (got {attempt})")
    validate_multiplier(mode, multiplier)

    if mode == BackoffMode.FIXED:
        delay = multiplier
    elif mode == BackoffMode.LINEAR:
        delay = multiplier * attempt
    else:
        delay = multiplier**attempt
    return int(delay)


def delay_schedule(mode: Union[str, BackoffMode], multiplier: int, max_retry: int) -> List[int]:
    """Waits performed by a run whose every attempt fails"""
    return [compute_delay(mode, multiplier, attempt) for attempt in range(1, max_retry + 1)]

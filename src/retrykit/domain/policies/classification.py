"""Error classification against caller-supplied stop/continue lists"""

from enum import Enum
from typing import Iterable, Set


class ErrorClass(str, Enum):
    """How the retry loop treats a failure"""

    STOP = "stop"
    CONTINUE = "continue"
    TRANSIENT = "transient"


def error_keys(error: BaseException) -> Set[str]:
    """Textual identifiers an error can be matched by

    An error matches by its message and, for errors carrying one, by its
    ``key`` attribute.
    """
    keys = {str(error)}
    key = getattr(error, "key", None)
    if isinstance(key, str):
        keys.add(key)
    return keys


class ErrorClassifier:
    """Classifies errors by exact membership in the stop/continue lists.

    Stop takes precedence over continue. Matching is exact: no substring or
    pattern matching is performed.
    """

    def __init__(
        self,
        stop_on_errors: Iterable[str] = (),
        continue_on_errors: Iterable[str] = (),
    ):
        self.stop_on_errors = frozenset(stop_on_errors)
        self.continue_on_errors = frozenset(continue_on_errors)

    def classify(self, error: BaseException) -> ErrorClass:
        keys = error_keys(error)
        if keys & self.stop_on_errors:
            return ErrorClass.STOP
        if keys & self.continue_on_errors:
            return ErrorClass.CONTINUE
        return ErrorClass.TRANSIENT

    def is_transient(self, error: BaseException) -> bool:
        """True if the error should be retried (budget permitting)"""
        return isinstance(error, Exception) and self.classify(error) is ErrorClass.TRANSIENT

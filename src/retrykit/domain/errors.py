"""Exception types raised by retrykit"""

from typing import Optional


class RetrykitError(Exception):
    """Base class for retrykit errors."""

    pass


class ConfigurationError(RetrykitError, ValueError):
    """Configuration validation error."""

    pass


class ClassifiedError(RetrykitError):
    """Error carrying a stable classification key.

    The key is matched against ``stop_on_errors`` / ``continue_on_errors``
    alongside the error message, so callers can classify failures without
    depending on the exact wording of the message.
    """

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key if key is not None else message


class CommandError(ClassifiedError):
    """A shell command exited with a non-zero status"""

    def __init__(self, returncode: int, stderr: str = "", command: str = ""):
        self.returncode = returncode
        self.stderr = stderr or ""
        self.command = command
        key = _last_line(self.stderr) or f"exit status {returncode}"
        super().__init__(key, key=key)


def _last_line(text: str) -> str:
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    return lines[-1] if lines else ""

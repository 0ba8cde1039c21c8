"""Service for retrying shell commands"""

import logging
from typing import Callable, Optional, Sequence

from retrykit.domain.config import RetryConfig
from retrykit.domain.models.outcome import RetryOutcome
from retrykit.infrastructure.command import ShellCommand
from retrykit.infrastructure.retry import RetryExecutor

logger = logging.getLogger(__name__)


class CommandRetryService:
    """Runs a shell command under a retry policy"""

    def __init__(
        self,
        config: RetryConfig,
        log: Optional[logging.Logger] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        """Initialize command retry service

        Args:
            config: Retry configuration
            log: Logger for retry messages
            sleep: Optional sleep function (used by tests)
        """
        self.config = config
        self.executor = RetryExecutor(config, log=log, sleep=sleep)

    def run(self, argv: Sequence[str], timeout: Optional[float] = None) -> RetryOutcome:
        """Run the command until it succeeds or the loop stops

        Args:
            argv: Command and its arguments
            timeout: Per-attempt timeout in seconds

        Returns:
            RetryOutcome whose value is a CommandResult on success

        Raises:
            CommandError: If the command failed terminally
        """
        command = ShellCommand(argv, timeout=timeout)
        logger.info(
            f"Running '{command.display}' "
            f"(mode={self.config.mode.value}, multiplier={self.config.multiplier}, "
            f"max_retry={self.config.max_retry})"
        )
        return self.executor.execute(command)

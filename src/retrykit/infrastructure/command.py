"""Shell command adapter - turns a command line into a unit of work"""

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence

from retrykit.domain.errors import CommandError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Captured output of a successful command"""

    returncode: int
    stdout: str
    stderr: str


class ShellCommand:
    """Callable running a command once per invocation.

    A non-zero exit status is raised as :class:`CommandError`, so the retry
    loop sees every failure. ``subprocess.TimeoutExpired`` propagates as-is
    and is retried like any other error.
    """

    def __init__(self, argv: Sequence[str], timeout: Optional[float] = None):
        if not argv:
            raise ValueError("command must not be empty")
        self.argv = list(argv)
        self.timeout = timeout

    @property
    def display(self) -> str:
        return shlex.join(self.argv)

    def __call__(self) -> CommandResult:
        logger.debug(f"Running: {self.display}")
        try:
            completed = subprocess.run(
                self.argv,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise CommandError(127, stderr=str(e), command=self.display) from e

        if completed.returncode != 0:
            raise CommandError(completed.returncode, stderr=completed.stderr, command=self.display)
        return CommandResult(completed.returncode, completed.stdout, completed.stderr)

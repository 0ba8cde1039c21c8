"""RetryOutcome model - represents how a retried call ended"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional


class OutcomeStatus(str, Enum):
    """Non-raising end states of the retry loop"""

    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"  # failure matched continue_on_errors


@dataclass
class RetryOutcome:
    """Result of running a unit of work through the retry loop"""

    status: OutcomeStatus
    value: Any = None  # Return value of the work (None when skipped)
    attempts: int = 0  # Number of times the work was invoked
    delays: List[int] = field(default_factory=list)  # Waits performed, in seconds
    error: Optional[BaseException] = None  # Ignored error when skipped

    @property
    def succeeded(self) -> bool:
        """Check if the work completed successfully"""
        return self.status == OutcomeStatus.SUCCEEDED

    @property
    def skipped(self) -> bool:
        """Check if the loop gave up quietly on a continue-classified error"""
        return self.status == OutcomeStatus.SKIPPED

"""Retry decision policies"""

from retrykit.domain.policies.backoff import BackoffMode, compute_delay, delay_schedule
from retrykit.domain.policies.classification import ErrorClass, ErrorClassifier

__all__ = ["BackoffMode", "compute_delay", "delay_schedule", "ErrorClass", "ErrorClassifier"]

"""Tests for the wait step"""

import logging

from retrykit.domain.policies.backoff import BackoffMode
from retrykit.infrastructure.wait import WaitStep, apply_delay, format_delay_message


def test_format_delay_message():
    text = format_delay_message(10, BackoffMode.LINEAR, 2)
    assert text == "Linear backoff: attempt 2, waiting 10 seconds"


def test_format_delay_message_with_prefix():
    text = format_delay_message(1, "fixed", 1, message="deploy: ")
    assert text == "deploy: Fixed backoff: attempt 1, waiting 1 second"


def test_apply_sleeps_for_delay(caplog):
    sleeps = []
    step = WaitStep(sleep=sleeps.append)

    with caplog.at_level(logging.DEBUG, logger="retrykit.infrastructure.wait"):
        step.apply(4, BackoffMode.EXPONENTIAL, 2)

    assert sleeps == [4]
    assert caplog.records[-1].levelno == logging.DEBUG
    assert "Exponential backoff: attempt 2, waiting 4 seconds" in caplog.text


def test_apply_warning_channel(caplog):
    step = WaitStep(sleep=lambda _: None)

    with caplog.at_level(logging.DEBUG, logger="retrykit.infrastructure.wait"):
        step.apply(2, "Fixed", 1, message="retrying: ", warning=True)

    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert record.getMessage().startswith("retrying: Fixed backoff")


def test_zero_delay_does_not_sleep():
    sleeps = []
    WaitStep(sleep=sleeps.append).apply(0, "Fixed", 1)
    assert sleeps == []


def test_default_sleep_goes_through_tenacity(monkeypatch):
    sleeps = []
    monkeypatch.setattr("tenacity.nap.sleep", sleeps.append)

    apply_delay(3, "Fixed", 1)

    assert sleeps == [3]


def test_injected_logger(caplog):
    log = logging.getLogger("custom.retry")
    with caplog.at_level(logging.WARNING, logger="custom.retry"):
        apply_delay(0, "Linear", 1, warning=True, log=log)

    assert caplog.records[-1].name == "custom.retry"

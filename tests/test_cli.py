"""Tests for CLI interface"""

from __future__ import annotations

import logging
import sys
from unittest.mock import MagicMock, patch

import click
import pytest
from click.testing import CliRunner

from retrykit.cli import _die, cli, setup_logging
from retrykit.domain.errors import CommandError
from retrykit.domain.models.outcome import OutcomeStatus, RetryOutcome
from retrykit.infrastructure.command import CommandResult


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return CliRunner()


class TestSetupLogging:
    """Tests for setup_logging function"""

    def test_setup_logging_info_level(self):
        """Test that logging is set to INFO level by default"""
        setup_logging(verbose=False)
        assert logging.getLogger().level == logging.INFO

    def test_setup_logging_debug_level(self):
        """Test that logging is set to DEBUG level when verbose"""
        setup_logging(verbose=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_setup_logging_configured_level(self):
        """Test configured level is used when not verbose"""
        setup_logging(verbose=False, level="WARNING")
        assert logging.getLogger().level == logging.WARNING


class TestDie:
    """Tests for _die function"""

    def test_die_without_exception(self):
        with pytest.raises(click.ClickException, match="Test error"):
            _die("Test error", verbose=False)

    def test_die_with_exception_verbose(self):
        with pytest.raises(click.ClickException, match="Test error"):
            _die("Test error", verbose=True, exc=ValueError("boom"))


class TestRunCommand:
    """Tests for run command"""

    @patch("retrykit.cli.CommandRetryService")
    def test_run_success_prints_stdout(self, mock_service_cls, runner):
        mock_service = MagicMock()
        mock_service.run.return_value = RetryOutcome(
            status=OutcomeStatus.SUCCEEDED,
            value=CommandResult(0, "hello\n", ""),
            attempts=1,
        )
        mock_service_cls.return_value = mock_service

        result = runner.invoke(
            cli,
            ["run", "--mode", "linear", "--retry-delay", "5", "--max-retry", "3", "--", "echo", "hello"],
            obj={},
        )

        assert result.exit_code == 0
        assert "hello" in result.output
        config = mock_service_cls.call_args[0][0]
        assert config.mode.value == "Linear"
        assert config.multiplier == 5
        assert config.max_retry == 3
        mock_service.run.assert_called_once_with(("echo", "hello"), timeout=None)

    @patch("retrykit.cli.CommandRetryService")
    def test_run_passes_classification_lists(self, mock_service_cls, runner):
        mock_service_cls.return_value.run.return_value = RetryOutcome(
            status=OutcomeStatus.SKIPPED, error=CommandError(1, "gone\n")
        )

        result = runner.invoke(
            cli,
            ["run", "--stop-on", "denied", "--stop-on", "bad token", "--continue-on", "gone", "--", "true"],
            obj={},
        )

        assert result.exit_code == 0
        config = mock_service_cls.call_args[0][0]
        assert config.stop_on_errors == ["denied", "bad token"]
        assert config.continue_on_errors == ["gone"]

    @patch("retrykit.cli.CommandRetryService")
    def test_run_terminal_failure_uses_return_code(self, mock_service_cls, runner):
        mock_service_cls.return_value.run.side_effect = CommandError(3, stderr="disk full\n")

        result = runner.invoke(cli, ["run", "--", "false"], obj={})

        assert result.exit_code == 3
        assert "disk full" in result.output

    def test_run_invalid_exponential_multiplier(self, runner):
        result = runner.invoke(
            cli, ["run", "--mode", "Exponential", "--multiplier", "1", "--", "true"], obj={}
        )

        assert result.exit_code == 1
        assert "multiplier must be >= 2" in result.output

    def test_run_real_command(self, runner):
        result = runner.invoke(cli, ["run", "--", sys.executable, "-c", "print('real')"], obj={})

        assert result.exit_code == 0
        assert "real" in result.output

    def test_run_uses_config_file(self, runner, tmp_path):
        (tmp_path / ".retrykit.yml").write_text(
            "retry:\n  mode: Linear\n  multiplier: 7\n", encoding="utf-8"
        )
        with patch("retrykit.cli.CommandRetryService") as mock_service_cls:
            mock_service_cls.return_value.run.return_value = RetryOutcome(
                status=OutcomeStatus.SUCCEEDED, value=CommandResult(0, "", "")
            )
            result = runner.invoke(cli, ["run", "--", "true"], obj={})

        assert result.exit_code == 0
        config = mock_service_cls.call_args[0][0]
        assert config.multiplier == 7


class TestWaitCommand:
    """Tests for wait command"""

    def test_wait_applies_computed_delay(self, runner):
        with patch("retrykit.cli.apply_delay") as mock_apply:
            result = runner.invoke(
                cli,
                ["wait", "--mode", "Exponential", "--multiplier", "3", "--attempt", "2", "--warning"],
                obj={},
            )

        assert result.exit_code == 0
        args, kwargs = mock_apply.call_args
        assert args[0] == 9
        assert args[2] == 2
        assert kwargs["warning"] is True

    def test_wait_uses_configured_warning(self, runner, tmp_path):
        (tmp_path / ".retrykit.yml").write_text("retry:\n  warning: true\n", encoding="utf-8")
        with patch("retrykit.cli.apply_delay") as mock_apply:
            result = runner.invoke(cli, ["wait"], obj={})

        assert result.exit_code == 0
        assert mock_apply.call_args[1]["warning"] is True

    def test_wait_rejects_unbounded_delay(self, runner):
        with patch("retrykit.cli.apply_delay") as mock_apply:
            result = runner.invoke(
                cli, ["wait", "--mode", "Exponential", "--multiplier", "10", "--attempt", "50"], obj={}
            )

        assert result.exit_code == 1
        assert "exceeds the maximum wait" in result.output
        mock_apply.assert_not_called()

    def test_wait_sleeps_through_tenacity(self, runner, monkeypatch):
        sleeps = []
        monkeypatch.setattr("tenacity.nap.sleep", sleeps.append)

        result = runner.invoke(cli, ["wait", "--mode", "Linear", "--multiplier", "4", "--attempt", "3"], obj={})

        assert result.exit_code == 0
        assert sleeps == [12]


class TestScheduleCommand:
    """Tests for schedule command"""

    def test_schedule_output(self, runner):
        result = runner.invoke(
            cli, ["schedule", "--mode", "Exponential", "--multiplier", "2", "--max-retry", "3"], obj={}
        )

        assert result.exit_code == 0
        assert "After attempt 1: wait 2s" in result.output
        assert "After attempt 3: wait 8s" in result.output
        assert "Total wait: 14s over 4 attempts" in result.output

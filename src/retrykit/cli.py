"""CLI interface for retrykit"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from retrykit.application.command_service import CommandRetryService
from retrykit.domain.config import RetryConfig
from retrykit.domain.errors import CommandError, ConfigurationError
from retrykit.domain.policies.backoff import (
    BackoffMode,
    compute_delay,
    delay_schedule,
    validate_delay_bound,
)
from retrykit.infrastructure.config.config_manager import ConfigManager
from retrykit.infrastructure.wait import apply_delay

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
MODE_CHOICE = click.Choice([m.value for m in BackoffMode], case_sensitive=False)


def setup_logging(verbose: bool = False, level: str = "INFO", fmt: str = DEFAULT_FORMAT) -> None:
    """Setup logging configuration"""
    log_level = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format=fmt,
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    logging.getLogger().setLevel(log_level)


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def _load_config(ctx: click.Context) -> ConfigManager:
    """Load configuration and apply its logging settings"""
    verbose = ctx.obj.get("verbose", False)
    try:
        config_manager = ConfigManager(config_path=ctx.obj.get("config_path"))
    except ConfigurationError as e:
        _die(str(e), verbose=verbose, exc=e)
    logging_config = config_manager.get_logging_config()
    setup_logging(verbose, level=logging_config.level, fmt=logging_config.format)
    return config_manager


def _retry_config(ctx: click.Context, **overrides) -> RetryConfig:
    config_manager = _load_config(ctx)
    try:
        return config_manager.with_overrides(**overrides)
    except ConfigurationError as e:
        _die(str(e), verbose=ctx.obj.get("verbose", False), exc=e)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .retrykit.yml config file",
)
@click.pass_context
def cli(ctx, verbose: bool, config: Path):
    """retrykit - run commands with retry and backoff"""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("command", nargs=-1, required=True)
@click.option("--mode", type=MODE_CHOICE, help="Backoff mode. Overrides config.")
@click.option(
    "--multiplier",
    "--retry-delay",
    "multiplier",
    type=int,
    help="Fixed wait, linear increment or exponent base. Overrides config.",
)
@click.option("--max-retry", type=int, help="Retries after the first attempt. Overrides config.")
@click.option("--stop-on", multiple=True, help="Error text that stops immediately (repeatable)")
@click.option(
    "--continue-on", multiple=True, help="Error text that ends quietly with a warning (repeatable)"
)
@click.option("--message", type=str, help="Prefix for retry log messages")
@click.option("--timeout", type=float, help="Per-attempt timeout in seconds")
@click.pass_context
def run(
    ctx,
    command: tuple,
    mode: Optional[str],
    multiplier: Optional[int],
    max_retry: Optional[int],
    stop_on: tuple,
    continue_on: tuple,
    message: Optional[str],
    timeout: Optional[float],
):
    """Run a command, retrying on failure.

    COMMAND: Command and arguments (use -- before options of the command)
    """
    verbose = ctx.obj.get("verbose", False)
    retry_config = _retry_config(
        ctx,
        mode=mode,
        multiplier=multiplier,
        max_retry=max_retry,
        stop_on_errors=list(stop_on) or None,
        continue_on_errors=list(continue_on) or None,
        message=message,
    )

    try:
        outcome = CommandRetryService(retry_config).run(command, timeout=timeout)
    except CommandError as e:
        if e.stderr:
            click.echo(e.stderr.rstrip("\n"), err=True)
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(e.returncode or 1)
    except Exception as e:
        _die(f"Fatal error: {e}", verbose=verbose, exc=e)

    if outcome.skipped:
        click.echo(f"Skipped: {outcome.error}", err=True)
        return
    click.echo(outcome.value.stdout, nl=False)


@cli.command()
@click.option("--attempt", type=click.IntRange(min=1), default=1, show_default=True)
@click.option("--mode", type=MODE_CHOICE, help="Backoff mode. Overrides config.")
@click.option("--multiplier", "--retry-delay", "multiplier", type=int, help="Overrides config.")
@click.option("--message", type=str, help="Prefix for the wait message")
@click.option("--warning", is_flag=True, help="Log the wait message as a warning")
@click.pass_context
def wait(
    ctx,
    attempt: int,
    mode: Optional[str],
    multiplier: Optional[int],
    message: Optional[str],
    warning: bool,
):
    """Compute one backoff delay and sleep for it."""
    retry_config = _retry_config(
        ctx, mode=mode, multiplier=multiplier, message=message, warning=warning or None
    )
    try:
        validate_delay_bound(retry_config.mode, retry_config.multiplier, attempt)
    except ConfigurationError as e:
        _die(str(e), verbose=ctx.obj.get("verbose", False), exc=e)
    delay = compute_delay(retry_config.mode, retry_config.multiplier, attempt)
    apply_delay(
        delay,
        retry_config.mode,
        attempt,
        message=retry_config.message,
        warning=retry_config.warning,
    )


@cli.command()
@click.option("--mode", type=MODE_CHOICE, help="Backoff mode. Overrides config.")
@click.option("--multiplier", "--retry-delay", "multiplier", type=int, help="Overrides config.")
@click.option("--max-retry", type=int, help="Overrides config.")
@click.pass_context
def schedule(ctx, mode: Optional[str], multiplier: Optional[int], max_retry: Optional[int]):
    """Print the waits a run that always fails would perform."""
    retry_config = _retry_config(ctx, mode=mode, multiplier=multiplier, max_retry=max_retry)
    delays = delay_schedule(retry_config.mode, retry_config.multiplier, retry_config.max_retry)

    click.echo(
        f"{retry_config.mode.value} backoff, multiplier {retry_config.multiplier}, "
        f"max retry {retry_config.max_retry}"
    )
    for attempt, delay in enumerate(delays, start=1):
        click.echo(f"After attempt {attempt}: wait {delay}s")
    click.echo(f"Total wait: {sum(delays)}s over {retry_config.max_attempts} attempts")


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()

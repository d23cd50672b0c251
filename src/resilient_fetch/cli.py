"""CLI interface for resilient-fetch"""

import asyncio
import json
import logging
import random
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click

from resilient_fetch.application.fetcher import create_fetcher, fetch_with_retry
from resilient_fetch.domain.config import RetryPolicy
from resilient_fetch.domain.errors import ExhaustionFailure
from resilient_fetch.domain.models.fetch_result import FetchResult
from resilient_fetch.domain.models.request import RequestOptions
from resilient_fetch.infrastructure.config.config_manager import ConfigManager, ConfigurationError
from resilient_fetch.infrastructure.http_client import request_options_from_config
from resilient_fetch.infrastructure.mock_endpoint import UnreliableEndpoint

logger = logging.getLogger(__name__)

DEMO_STRATEGIES = (
    ("Fixed Delay", {"exponential": False, "base_delay": 1000}),
    ("Exponential Backoff", {"exponential": True, "base_delay": 500, "backoff_multiplier": 2}),
)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    logging.getLogger().setLevel(level)


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def parse_headers(values: Tuple[str, ...]) -> Dict[str, str]:
    """Parse repeated KEY:VALUE header options

    Raises:
        click.BadParameter: If a value has no colon
    """
    headers = {}
    for value in values:
        name, sep, content = value.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected KEY:VALUE, got {value!r}", param_hint="--header")
        headers[name.strip()] = content.strip()
    return headers


def _load_config(ctx: click.Context) -> ConfigManager:
    verbose = ctx.obj.get("verbose", False)
    try:
        return ConfigManager(config_path=ctx.obj.get("config_path"))
    except ConfigurationError as e:
        _die(str(e), verbose=verbose, exc=e)


def _policy_overrides(**options: Any) -> Dict[str, Any]:
    """Keep only the retry options given on the command line"""
    overrides = {key: value for key, value in options.items() if value is not None}
    if overrides.get("retryable_status_codes") == ():
        del overrides["retryable_status_codes"]
    return overrides


def _output_result(result: FetchResult) -> None:
    if isinstance(result.data, str):
        click.echo(result.data)
    else:
        click.echo(json.dumps(result.data, indent=2, default=str))
    click.echo(
        f"\nAttempts: {result.attempts}, Duration: {result.duration_ms:.0f}ms, "
        f"Succeeded on retry: {result.succeeded_on_retry}",
        err=True,
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .resilient-fetch.yml config file",
)
@click.pass_context
def cli(ctx, verbose: bool, config: Path):
    """resilient-fetch - retry remote calls under an explicit policy"""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("url", type=str)
@click.option("--method", "-X", type=str, help="HTTP method. Overrides config.")
@click.option("--header", "-H", "headers", multiple=True, help="Request header as KEY:VALUE (repeatable)")
@click.option("--timeout", type=float, help="Per-attempt timeout in seconds. Overrides config.")
@click.option("--max-retries", type=click.IntRange(min=0), help="Retries after the first attempt")
@click.option("--base-delay", type=click.FloatRange(min=0), help="Base delay in milliseconds")
@click.option("--max-delay", type=click.FloatRange(min=0), help="Maximum delay in milliseconds")
@click.option("--exponential/--fixed", default=None, help="Exponential backoff or fixed delay")
@click.option("--backoff-multiplier", type=click.FloatRange(min=0, min_open=True), help="Exponential growth factor")
@click.option("--retry-status", "retry_statuses", type=int, multiple=True, help="Retryable status code (repeatable)")
@click.pass_context
def fetch(
    ctx,
    url: str,
    method: Optional[str],
    headers: Tuple[str, ...],
    timeout: Optional[float],
    max_retries: Optional[int],
    base_delay: Optional[float],
    max_delay: Optional[float],
    exponential: Optional[bool],
    backoff_multiplier: Optional[float],
    retry_statuses: Tuple[int, ...],
):
    """Fetch URL, retrying transient failures.

    URL: Address to request
    """
    verbose = ctx.obj.get("verbose", False)
    config_manager = _load_config(ctx)

    defaults = request_options_from_config(config_manager.get_http_config())
    request = RequestOptions(
        method=(method or defaults.method).upper(),
        headers={**defaults.headers, **parse_headers(headers)},
        timeout=timeout if timeout is not None else defaults.timeout,
    )
    overrides = _policy_overrides(
        max_retries=max_retries,
        base_delay=base_delay,
        max_delay=max_delay,
        exponential=exponential,
        backoff_multiplier=backoff_multiplier,
        retryable_status_codes=retry_statuses,
    )

    try:
        result = asyncio.run(
            fetch_with_retry(url, request, overrides, policy=config_manager.get_retry_policy())
        )
    except ExhaustionFailure as e:
        _die(str(e), verbose=verbose, exc=e)
    except ValueError as e:
        _die(f"Invalid retry options: {e}", verbose=verbose, exc=e)

    _output_result(result)


async def _run_demo(policy: RetryPolicy, endpoint: UnreliableEndpoint) -> None:
    for index, (name, strategy) in enumerate(DEMO_STRATEGIES, start=1):
        click.echo(f"\n{index}. {name}")
        click.echo("=" * 50)
        endpoint.reset()
        fetcher = create_fetcher(policy, operation=endpoint, **strategy)
        try:
            result = await fetcher("https://api.mock.test/data")
        except ExhaustionFailure as e:
            duration = e.duration_ms or 0.0
            click.echo(f"FAILED after {e.attempts} attempts ({duration:.0f}ms): {e.last_failure}")
            continue
        click.echo(f"OK: {result.data['message']}")
        click.echo(
            f"   Attempts: {result.attempts}, Duration: {result.duration_ms:.0f}ms, "
            f"Succeeded on retry: {result.succeeded_on_retry}"
        )


@cli.command()
@click.option(
    "--success-probability",
    type=click.FloatRange(0.0, 1.0),
    help="Probability that one simulated call succeeds. Overrides config.",
)
@click.option("--max-retries", type=click.IntRange(min=0), default=3, show_default=True)
@click.option("--seed", type=int, help="Seed for reproducible runs")
@click.pass_context
def demo(ctx, success_probability: Optional[float], max_retries: int, seed: Optional[int]):
    """Compare fixed and exponential retry strategies on a simulated endpoint."""
    config_manager = _load_config(ctx)
    mock_config = config_manager.get_mock_config()
    if success_probability is not None:
        mock_config = mock_config.model_copy(update={"success_probability": success_probability})

    endpoint = UnreliableEndpoint(mock_config, rng=random.Random(seed))
    policy = config_manager.get_retry_policy().merged({"max_retries": max_retries})
    click.echo(f"Simulated endpoint, success probability {mock_config.success_probability:.0%}")
    asyncio.run(_run_demo(policy, endpoint))


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()

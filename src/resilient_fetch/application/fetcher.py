"""Retry orchestration for a single remote call.

``fetch_with_retry`` drives the attempt loop for one target: it invokes the
operation, normalizes failures, asks the classifier whether to go on and
sleeps between attempts. Either a FetchResult is returned or exactly one
ExhaustionFailure is raised.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from resilient_fetch.domain.config.retry import DEFAULT_RETRY_POLICY, RetryPolicy
from resilient_fetch.domain.errors import (
    ExhaustionFailure,
    FetchFailure,
    StatusFailure,
    TransportFailure,
    normalize_failure,
)
from resilient_fetch.domain.models.fetch_result import FetchResult
from resilient_fetch.infrastructure.http_client import http_operation
from resilient_fetch.infrastructure.retry import Sleeper, create_async_retrying

logger = logging.getLogger(__name__)

Operation = Callable[[str, Any], Awaitable[Any]]
PolicyOverrides = Union[Mapping[str, Any], RetryPolicy, None]


def _elapsed_ms(start: float) -> float:
    return (time.monotonic() - start) * 1000.0


async def _attempt(operation: Operation, target: str, request: Any) -> Any:
    try:
        return await operation(target, request)
    except (StatusFailure, TransportFailure):
        raise
    except Exception as e:
        raise normalize_failure(e) from e


async def fetch_with_retry(
    target: str,
    request: Any = None,
    overrides: PolicyOverrides = None,
    *,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    operation: Operation = http_operation,
    sleep: Sleeper = asyncio.sleep,
    on_attempt: Optional[Callable[[int], None]] = None,
) -> FetchResult:
    """Call operation on target, retrying under the merged policy.

    Args:
        target: Identifier of the remote resource (e.g. a URL)
        request: Invocation descriptor passed to the operation unchanged
        overrides: Partial policy applied on top of ``policy`` for this call
        policy: Base policy (never modified)
        operation: Async callable performing one attempt
        sleep: Async sleeper receiving seconds, used between attempts
        on_attempt: Observer called with the 1-based number of each attempt

    Returns:
        FetchResult with the payload and attempt metadata

    Raises:
        ExhaustionFailure: If attempts ran out or a failure was not retryable
    """
    resolved = policy.merged(overrides)
    start = time.monotonic()
    attempt_number = 0
    retry_state = None
    data: Any = None

    try:
        async for attempt in create_async_retrying(resolved, sleep=sleep):
            with attempt:
                retry_state = attempt.retry_state
                attempt_number = retry_state.attempt_number
                logger.info(f"Attempt {attempt_number} of {resolved.total_attempts} to fetch {target}")
                if on_attempt is not None:
                    on_attempt(attempt_number)
                data = await _attempt(operation, target, request)
    except FetchFailure as failure:
        # Only the attempt's own failure ends in exhaustion; errors from the
        # custom predicate propagate unchanged
        outcome = retry_state.outcome if retry_state is not None else None
        if outcome is None or failure is not outcome.exception():
            raise
        duration_ms = _elapsed_ms(start)
        logger.error(
            f"Giving up on {target} after {attempt_number} attempts ({duration_ms:.0f}ms): {failure}"
        )
        raise ExhaustionFailure(target, attempt_number, failure, duration_ms=duration_ms) from failure

    duration_ms = _elapsed_ms(start)
    logger.info(f"Fetched {target} on attempt {attempt_number} ({duration_ms:.0f}ms)")
    return FetchResult(
        data=data,
        attempts=attempt_number,
        duration_ms=duration_ms,
        succeeded_on_retry=attempt_number > 1,
    )


class Fetcher:
    """Reusable entry point bound to a default retry policy"""

    def __init__(
        self,
        policy: RetryPolicy,
        operation: Operation = http_operation,
        sleep: Sleeper = asyncio.sleep,
    ):
        self.policy = policy
        self.operation = operation
        self.sleep = sleep

    async def __call__(
        self,
        target: str,
        request: Any = None,
        overrides: PolicyOverrides = None,
    ) -> FetchResult:
        return await fetch_with_retry(
            target,
            request,
            overrides,
            policy=self.policy,
            operation=self.operation,
            sleep=self.sleep,
        )


def create_fetcher(
    default_policy: PolicyOverrides = None,
    *,
    operation: Operation = http_operation,
    sleep: Sleeper = asyncio.sleep,
    **default_overrides: Any,
) -> Fetcher:
    """Create a fetcher bound to a default policy.

    Args:
        default_policy: Policy to start from, or a partial mapping applied
            on top of the library defaults
        operation: Async callable performing one attempt
        sleep: Async sleeper receiving seconds
        **default_overrides: Policy fields applied on top of default_policy

    Returns:
        Fetcher whose per-call overrides are merged on top of the bound policy

    Example:
        >>> fetcher = create_fetcher(max_retries=3, exponential=True)
        >>> result = await fetcher("https://api.example.com/data")
    """
    if isinstance(default_policy, RetryPolicy):
        policy = default_policy
    elif default_policy is None or isinstance(default_policy, Mapping):
        policy = DEFAULT_RETRY_POLICY.merged(default_policy)
    else:
        raise TypeError(
            f"default_policy must be a RetryPolicy or a mapping, got {type(default_policy).__name__}"
        )
    policy = policy.merged(default_overrides or None)
    return Fetcher(policy, operation=operation, sleep=sleep)

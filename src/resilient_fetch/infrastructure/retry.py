"""Tenacity adapters driving the retry loop.

Bridges a RetryPolicy to tenacity's wait/retry/stop strategies so the
attempt loop itself is run by ``tenacity.AsyncRetrying``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from tenacity import AsyncRetrying, RetryCallState, stop_after_attempt
from tenacity.retry import retry_base
from tenacity.wait import wait_base

from resilient_fetch.domain.config.retry import RetryPolicy
from resilient_fetch.domain.errors import FetchFailure
from resilient_fetch.domain.retry import delay_for, should_retry

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[None]]


class wait_policy(wait_base):
    """Wait the policy delay for the attempt that just failed (in seconds)."""

    def __init__(self, policy: RetryPolicy):
        self.policy = policy

    def __call__(self, retry_state: RetryCallState) -> float:
        return delay_for(retry_state.attempt_number, self.policy) / 1000.0


class retry_if_eligible(retry_base):
    """Retry while attempts remain and the failure is eligible.

    The classifier is not consulted once the last allowed attempt has failed.
    """

    def __init__(self, policy: RetryPolicy):
        self.policy = policy

    def __call__(self, retry_state: RetryCallState) -> bool:
        if retry_state.outcome is None or not retry_state.outcome.failed:
            return False
        if retry_state.attempt_number > self.policy.max_retries:
            return False
        exception = retry_state.outcome.exception()
        if not isinstance(exception, FetchFailure):
            return False
        return should_retry(exception, self.policy)


def _before_sleep_log(retry_state: RetryCallState) -> None:
    if retry_state.outcome is None or retry_state.next_action is None:
        return
    exception = retry_state.outcome.exception()
    delay_ms = retry_state.next_action.sleep * 1000.0
    logger.warning(
        f"Attempt {retry_state.attempt_number} failed: {exception}. "
        f"Retrying in {delay_ms:.0f}ms..."
    )


def create_async_retrying(policy: RetryPolicy, sleep: Sleeper = asyncio.sleep) -> AsyncRetrying:
    """Create a fresh tenacity controller for one orchestrated call.

    Args:
        policy: Resolved retry policy
        sleep: Async sleeper receiving seconds

    Returns:
        AsyncRetrying that re-raises the last failure once it stops
    """
    return AsyncRetrying(
        sleep=sleep,
        stop=stop_after_attempt(policy.total_attempts),
        wait=wait_policy(policy),
        retry=retry_if_eligible(policy),
        reraise=True,
        before_sleep=_before_sleep_log,
    )

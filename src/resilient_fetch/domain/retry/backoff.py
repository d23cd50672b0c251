"""Delay computation between attempts."""

from resilient_fetch.domain.config.retry import RetryPolicy


def delay_for(attempt: int, policy: RetryPolicy) -> float:
    """Return the wait in milliseconds after a failed attempt.

    Args:
        attempt: 1-based index of the attempt that just failed
        policy: Retry policy

    Returns:
        Delay in milliseconds before the next attempt

    Raises:
        ValueError: If attempt is lower than 1
    """
    if attempt < 1:
        raise ValueError(f"attempt must be >= 1, got {attempt}")

    if not policy.exponential:
        return policy.base_delay

    # base_delay * multiplier ^ (attempt - 1), so the first retry waits base_delay
    exponential_delay = policy.base_delay * policy.backoff_multiplier ** (attempt - 1)
    return min(exponential_delay, policy.max_delay)

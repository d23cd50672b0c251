"""Retry eligibility rules."""

from resilient_fetch.domain.config.retry import RetryPolicy
from resilient_fetch.domain.errors import FailureKind, FetchFailure


def should_retry(failure: FetchFailure, policy: RetryPolicy) -> bool:
    """Decide whether a failed attempt may be retried.

    Status failures are judged only by ``retryable_status_codes``; a custom
    predicate cannot override them. Other failures go to the custom
    predicate when one is configured (its exceptions propagate), otherwise
    only transport failures are retried.
    """
    if failure.kind is FailureKind.STATUS:
        return failure.status_code in policy.retryable_status_codes

    if policy.custom_retry_predicate is not None:
        return bool(policy.custom_retry_predicate(failure))

    return failure.kind is FailureKind.TRANSPORT

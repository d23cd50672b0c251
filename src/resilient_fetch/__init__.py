"""Async retry orchestration for single-shot remote calls"""

from resilient_fetch.application.fetcher import Fetcher, create_fetcher, fetch_with_retry
from resilient_fetch.domain.config import DEFAULT_RETRY_POLICY, RetryPolicy
from resilient_fetch.domain.errors import (
    ExhaustionFailure,
    FailureKind,
    FetchFailure,
    StatusFailure,
    TransportFailure,
)
from resilient_fetch.domain.models import FetchResult, RequestOptions
from resilient_fetch.domain.retry import delay_for, should_retry
from resilient_fetch.infrastructure.mock_endpoint import UnreliableEndpoint

__all__ = [
    "fetch_with_retry",
    "create_fetcher",
    "Fetcher",
    "RetryPolicy",
    "DEFAULT_RETRY_POLICY",
    "FetchResult",
    "RequestOptions",
    "FailureKind",
    "FetchFailure",
    "StatusFailure",
    "TransportFailure",
    "ExhaustionFailure",
    "delay_for",
    "should_retry",
    "UnreliableEndpoint",
]

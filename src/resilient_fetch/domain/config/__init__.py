"""Configuration models with Pydantic validation."""

from resilient_fetch.domain.config.app import AppConfig
from resilient_fetch.domain.config.http import HttpConfig
from resilient_fetch.domain.config.mock import MockEndpointConfig
from resilient_fetch.domain.config.retry import (
    DEFAULT_RETRY_POLICY,
    DEFAULT_RETRYABLE_STATUS_CODES,
    RetryPolicy,
)

__all__ = [
    "AppConfig",
    "HttpConfig",
    "MockEndpointConfig",
    "RetryPolicy",
    "DEFAULT_RETRY_POLICY",
    "DEFAULT_RETRYABLE_STATUS_CODES",
]

"""Retry policy model."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from resilient_fetch.domain.errors import FetchFailure

DEFAULT_RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class RetryPolicy(BaseModel):
    """Immutable configuration for one retried call.

    Delays are expressed in milliseconds.

    Attributes:
        max_retries: Retries after the first attempt (total attempts = max_retries + 1)
        base_delay: Fixed delay, or the base of exponential backoff
        max_delay: Upper bound for exponential delays
        exponential: Use exponential backoff instead of a fixed delay
        backoff_multiplier: Growth factor per attempt (exponential mode only)
        retryable_status_codes: Status codes eligible for retry
        custom_retry_predicate: Decides eligibility for failures without a status code.
            It receives the normalized failure; anything the operation raised
            outside the status/transport taxonomy is a TransportFailure whose
            ``cause`` holds the raw exception
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    max_retries: int = Field(3, ge=0)
    base_delay: float = Field(1000.0, ge=0.0)
    max_delay: float = Field(30000.0, ge=0.0)
    exponential: bool = False
    backoff_multiplier: float = Field(2.0, gt=0.0)
    retryable_status_codes: frozenset[int] = DEFAULT_RETRYABLE_STATUS_CODES
    custom_retry_predicate: Optional[Callable[[FetchFailure], bool]] = Field(
        default=None, exclude=True, repr=False
    )

    @property
    def total_attempts(self) -> int:
        return self.max_retries + 1

    def merged(self, overrides: Union[Mapping[str, Any], "RetryPolicy", None] = None) -> "RetryPolicy":
        """Return a new policy with overrides applied on top of this one.

        Args:
            overrides: Partial mapping of field values, or a policy whose
                explicitly set fields take precedence

        Returns:
            Fresh validated policy (self is never modified)

        Raises:
            ValidationError: If an override is invalid or unknown
        """
        if overrides is None:
            return self
        if isinstance(overrides, RetryPolicy):
            overrides = {name: getattr(overrides, name) for name in overrides.model_fields_set}
        values = {name: getattr(self, name) for name in type(self).model_fields}
        values.update(overrides)
        return type(self)(**values)


DEFAULT_RETRY_POLICY = RetryPolicy()

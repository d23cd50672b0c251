"""Failure taxonomy for retried fetches.

Every failure carries a ``kind`` tag so the retry classifier can dispatch
on it without inspecting concrete classes.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar, Optional


class FailureKind(str, Enum):
    """Kind of failure raised while fetching"""

    STATUS = "status"
    TRANSPORT = "transport"
    EXHAUSTED = "exhausted"


class FetchFailure(Exception):
    """Base class for all fetch failures.

    Attributes:
        message: Human-readable description
        cause: Underlying cause, if any (may be any value)
    """

    kind: ClassVar[FailureKind]

    def __init__(self, message: str, cause: Any = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class StatusFailure(FetchFailure):
    """The remote side answered with a non-success status code"""

    kind = FailureKind.STATUS

    def __init__(self, status_code: int, reason: str, target: str):
        super().__init__(f"HTTP Error {status_code}: {reason} for {target}")
        self.status_code = status_code
        self.reason = reason
        self.target = target


class TransportFailure(FetchFailure):
    """Communication never completed (DNS, refused connection, timeout...)"""

    kind = FailureKind.TRANSPORT


class ExhaustionFailure(FetchFailure):
    """Terminal failure: attempts ran out or the last failure was not retryable.

    Attributes:
        target: Identifier of the fetched resource
        attempts: Number of attempts actually made
        last_failure: Failure that ended the loop
        duration_ms: Elapsed time until termination, in milliseconds
    """

    kind = FailureKind.EXHAUSTED

    def __init__(
        self,
        target: str,
        attempts: int,
        last_failure: FetchFailure,
        duration_ms: Optional[float] = None,
    ):
        super().__init__(
            f"Failed to fetch {target} after {attempts} attempts. "
            f"Last error: {last_failure.message}",
            cause=last_failure,
        )
        self.target = target
        self.attempts = attempts
        self.last_failure = last_failure
        self.duration_ms = duration_ms


def normalize_failure(value: Any) -> FetchFailure:
    """Bring an arbitrary failure into the status/transport taxonomy.

    Status and transport failures are returned unchanged. Anything else,
    including an exhaustion failure escaping a nested call, is wrapped in a
    TransportFailure that keeps the original value as its cause.
    """
    if isinstance(value, (StatusFailure, TransportFailure)):
        return value
    if isinstance(value, BaseException):
        message = str(value) or type(value).__name__
        return TransportFailure(f"Unexpected failure: {message}", cause=value)
    return TransportFailure("Unknown network error", cause=value)

"""Tests for the failure taxonomy"""

from resilient_fetch.domain.errors import (
    ExhaustionFailure,
    FailureKind,
    FetchFailure,
    StatusFailure,
    TransportFailure,
    normalize_failure,
)


def test_status_failure_fields():
    """Test StatusFailure message and attributes"""
    failure = StatusFailure(503, "Service Unavailable", "https://api.test/x")
    assert failure.kind is FailureKind.STATUS
    assert failure.status_code == 503
    assert failure.reason == "Service Unavailable"
    assert failure.target == "https://api.test/x"
    assert str(failure) == "HTTP Error 503: Service Unavailable for https://api.test/x"


def test_transport_failure_keeps_opaque_cause():
    """Test that any value can be a transport cause"""
    failure = TransportFailure("Unknown network error", cause={"code": "ECONNRESET"})
    assert failure.kind is FailureKind.TRANSPORT
    assert failure.cause == {"code": "ECONNRESET"}
    assert failure.message == "Unknown network error"


def test_exhaustion_failure_wraps_last_failure():
    """Test ExhaustionFailure message and attributes"""
    last = StatusFailure(500, "Internal Server Error", "https://api.test")
    failure = ExhaustionFailure("https://api.test", 3, last, duration_ms=12.5)
    assert failure.kind is FailureKind.EXHAUSTED
    assert failure.attempts == 3
    assert failure.last_failure is last
    assert failure.cause is last
    assert failure.duration_ms == 12.5
    assert str(failure) == (
        "Failed to fetch https://api.test after 3 attempts. "
        "Last error: HTTP Error 500: Internal Server Error for https://api.test"
    )
    assert isinstance(failure, FetchFailure)


class TestNormalizeFailure:
    """Tests for normalize_failure"""

    def test_known_failures_unchanged(self):
        """Test that status and transport failures pass through"""
        status = StatusFailure(404, "Not Found", "t")
        transport = TransportFailure("down")
        assert normalize_failure(status) is status
        assert normalize_failure(transport) is transport

    def test_plain_exception_wrapped(self):
        """Test that arbitrary exceptions become transport failures"""
        error = ValueError("bad json")
        failure = normalize_failure(error)
        assert isinstance(failure, TransportFailure)
        assert failure.cause is error
        assert "bad json" in failure.message

    def test_exception_without_message(self):
        """Test that the exception type is used when it has no message"""
        failure = normalize_failure(TimeoutError())
        assert "TimeoutError" in failure.message

    def test_exhaustion_from_nested_call_wrapped(self):
        """Test that an escaping exhaustion failure is normalized"""
        nested = ExhaustionFailure("inner", 2, TransportFailure("x"))
        failure = normalize_failure(nested)
        assert isinstance(failure, TransportFailure)
        assert failure.cause is nested

    def test_non_exception_value_wrapped(self):
        """Test that non-exception values are wrapped"""
        failure = normalize_failure("boom")
        assert isinstance(failure, TransportFailure)
        assert failure.message == "Unknown network error"
        assert failure.cause == "boom"

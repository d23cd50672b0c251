from __future__ import annotations

import json

import pytest
import requests

from resilient_fetch.application.fetcher import fetch_with_retry
from resilient_fetch.domain.config.http import HttpConfig
from resilient_fetch.domain.errors import ExhaustionFailure, StatusFailure, TransportFailure
from resilient_fetch.domain.models.request import RequestOptions
from resilient_fetch.infrastructure.http_client import (
    http_operation,
    perform_request,
    request_options_from_config,
)


def _make_response(status_code: int, payload: dict | None = None, reason: str = "") -> requests.Response:
    r = requests.Response()
    r.status_code = status_code
    r.reason = reason
    r.url = "http://example.test"
    if payload is None:
        payload = {}
    r._content = json.dumps(payload).encode("utf-8")  # type: ignore[attr-defined]
    r.headers["Content-Type"] = "application/json"
    return r


def test_perform_request_returns_json(monkeypatch):
    captured = {}

    def fake_request(method, url, **kwargs):
        captured["method"] = method
        captured["url"] = url
        captured.update(kwargs)
        return _make_response(200, {"ok": True})

    monkeypatch.setattr(requests, "request", fake_request)

    options = RequestOptions(method="POST", headers={"X-Test": "1"}, json={"x": 1}, timeout=5)
    data = perform_request("http://example.test", options)

    assert data == {"ok": True}
    assert captured["method"] == "POST"
    assert captured["url"] == "http://example.test"
    assert captured["headers"] == {"X-Test": "1"}
    assert captured["json"] == {"x": 1}
    assert captured["timeout"] == 5


def test_perform_request_returns_text_for_non_json(monkeypatch):
    def fake_request(method, url, **kwargs):
        r = requests.Response()
        r.status_code = 200
        r._content = b"plain body"  # type: ignore[attr-defined]
        r.headers["Content-Type"] = "text/plain"
        return r

    monkeypatch.setattr(requests, "request", fake_request)

    assert perform_request("http://example.test", RequestOptions()) == "plain body"


def test_perform_request_raises_status_failure(monkeypatch):
    monkeypatch.setattr(
        requests, "request", lambda *a, **kw: _make_response(503, {"error": "busy"}, "Service Unavailable")
    )

    with pytest.raises(StatusFailure) as exc_info:
        perform_request("http://example.test", RequestOptions())

    assert exc_info.value.status_code == 503
    assert exc_info.value.reason == "Service Unavailable"
    assert exc_info.value.target == "http://example.test"


def test_perform_request_raises_transport_failure(monkeypatch):
    error = requests.exceptions.ConnectionError("refused")

    def fake_request(*args, **kwargs):
        raise error

    monkeypatch.setattr(requests, "request", fake_request)

    with pytest.raises(TransportFailure) as exc_info:
        perform_request("http://example.test", RequestOptions())

    assert exc_info.value.cause is error


def test_request_options_from_config():
    options = request_options_from_config(
        HttpConfig(method="PUT", timeout=2.5, headers={"Accept": "application/json"})
    )
    assert options.method == "PUT"
    assert options.timeout == 2.5
    assert options.headers == {"Accept": "application/json"}


@pytest.mark.asyncio
async def test_http_operation_defaults_to_get(monkeypatch):
    calls = []

    def fake_request(method, url, **kwargs):
        calls.append(method)
        return _make_response(200, {"ok": True})

    monkeypatch.setattr(requests, "request", fake_request)

    assert await http_operation("http://example.test") == {"ok": True}
    assert calls == ["GET"]


@pytest.mark.asyncio
async def test_fetch_retries_on_5xx(monkeypatch, recording_sleep):
    calls = {"n": 0}

    def fake_request(*args, **kwargs):
        calls["n"] += 1
        if calls["n"] == 1:
            return _make_response(500, {"error": "boom"}, "Internal Server Error")
        return _make_response(200, {"ok": True})

    monkeypatch.setattr(requests, "request", fake_request)

    result = await fetch_with_retry(
        "http://example.test", overrides={"max_retries": 2, "base_delay": 0}, sleep=recording_sleep
    )

    assert result.data == {"ok": True}
    assert result.attempts == 2
    assert calls["n"] == 2


@pytest.mark.asyncio
async def test_fetch_does_not_retry_on_401(monkeypatch, recording_sleep):
    calls = {"n": 0}

    def fake_request(*args, **kwargs):
        calls["n"] += 1
        return _make_response(401, {"error": "unauthorized"}, "Unauthorized")

    monkeypatch.setattr(requests, "request", fake_request)

    with pytest.raises(ExhaustionFailure) as exc_info:
        await fetch_with_retry("http://example.test", sleep=recording_sleep)

    assert exc_info.value.attempts == 1
    assert exc_info.value.last_failure.status_code == 401
    assert calls["n"] == 1


@pytest.mark.asyncio
async def test_fetch_retries_network_errors(monkeypatch, recording_sleep):
    def fake_request(*args, **kwargs):
        raise requests.exceptions.Timeout("read timed out")

    monkeypatch.setattr(requests, "request", fake_request)

    with pytest.raises(ExhaustionFailure) as exc_info:
        await fetch_with_retry(
            "http://example.test",
            overrides={"max_retries": 2, "base_delay": 100, "exponential": True, "backoff_multiplier": 3},
            sleep=recording_sleep,
        )

    assert exc_info.value.attempts == 3
    assert isinstance(exc_info.value.last_failure, TransportFailure)
    assert recording_sleep.calls_ms == [100, 300]


def _empty_json_response(status_code: int) -> requests.Response:
    r = requests.Response()
    r.status_code = status_code
    r.url = "http://example.test"
    r._content = b""  # type: ignore[attr-defined]
    r.headers["Content-Type"] = "application/json"
    return r


@pytest.mark.parametrize("method,status_code", [("HEAD", 200), ("GET", 204), ("DELETE", 200)])
def test_perform_request_empty_body_is_success(monkeypatch, method, status_code):
    monkeypatch.setattr(requests, "request", lambda *a, **kw: _empty_json_response(status_code))

    assert perform_request("http://example.test", RequestOptions(method=method)) is None


def test_perform_request_undecodable_json_returns_text(monkeypatch):
    def fake_request(*args, **kwargs):
        r = _make_response(200)
        r._content = b"<html>not json</html>"  # type: ignore[attr-defined]
        return r

    monkeypatch.setattr(requests, "request", fake_request)

    assert perform_request("http://example.test", RequestOptions()) == "<html>not json</html>"


@pytest.mark.asyncio
async def test_fetch_head_with_empty_json_body_succeeds_once(monkeypatch, recording_sleep):
    calls = {"n": 0}

    def fake_request(*args, **kwargs):
        calls["n"] += 1
        return _empty_json_response(200)

    monkeypatch.setattr(requests, "request", fake_request)

    result = await fetch_with_retry("http://example.test", RequestOptions(method="HEAD"), sleep=recording_sleep)

    assert result.data is None
    assert result.attempts == 1
    assert calls["n"] == 1
    assert recording_sleep.calls == []

"""HTTP operation performing a single request attempt (requests).

The blocking ``requests`` call runs in a worker thread so that awaiting it
never blocks the event loop. Retrying is left to the orchestrator.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import requests

from resilient_fetch.domain.config.http import HttpConfig
from resilient_fetch.domain.errors import StatusFailure, TransportFailure
from resilient_fetch.domain.models.request import RequestOptions

logger = logging.getLogger(__name__)


def request_options_from_config(config: HttpConfig) -> RequestOptions:
    """Build default request options from the HTTP config section."""
    return RequestOptions(
        method=config.method,
        headers=dict(config.headers),
        timeout=config.timeout,
    )


def _decode_body(resp: requests.Response, method: str) -> Any:
    # HEAD, 204 and friends answer successfully without a body
    if method.upper() == "HEAD" or not resp.content:
        return None
    content_type = resp.headers.get("Content-Type", "")
    if "json" in content_type:
        try:
            return resp.json()
        except requests.exceptions.JSONDecodeError:
            logger.debug("Response declared JSON but could not be decoded, returning text")
            return resp.text
    return resp.text


def perform_request(target: str, options: RequestOptions) -> Any:
    """Perform one blocking request and classify its failure, if any.

    Args:
        target: URL to request
        options: Request parameters

    Returns:
        Decoded JSON body, text for non-JSON or undecodable bodies,
        None when the response has no body

    Raises:
        TransportFailure: If the request could not be completed
        StatusFailure: If the response status is not 2xx
    """
    logger.debug(f"HTTP {options.method} {target}")
    try:
        resp = requests.request(
            options.method,
            target,
            headers=options.headers,
            params=options.params,
            json=options.json,
            timeout=options.timeout,
        )
    except requests.exceptions.RequestException as e:
        raise TransportFailure(f"Request to {target} failed: {e}", cause=e) from e

    if not resp.ok:
        raise StatusFailure(resp.status_code, resp.reason or "", target)
    return _decode_body(resp, options.method)


async def http_operation(target: str, request: Optional[RequestOptions] = None) -> Any:
    """Perform one HTTP attempt without blocking the event loop."""
    return await asyncio.to_thread(perform_request, target, request or RequestOptions())

"""Simulated unreliable endpoint for demos and tests"""

from __future__ import annotations

import asyncio
import random
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional

from resilient_fetch.domain.config.mock import MockEndpointConfig
from resilient_fetch.domain.errors import StatusFailure, TransportFailure

_STATUS_REASONS = {
    429: "Too Many Requests",
    500: "Internal Server Error",
    502: "Bad Gateway",
    503: "Service Unavailable",
    504: "Gateway Timeout",
}


class UnreliableEndpoint:
    """Operation that randomly succeeds or fails after a simulated latency.

    Each instance counts its own calls, so concurrent demos never share state.
    """

    def __init__(
        self,
        config: Optional[MockEndpointConfig] = None,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the endpoint

        Args:
            config: Endpoint behavior (defaults to MockEndpointConfig())
            rng: Random source; pass a seeded one for reproducible runs
            sleep: Async sleeper receiving seconds
        """
        self.config = config or MockEndpointConfig()
        self.rng = rng or random.Random()
        self.sleep = sleep
        self.attempts = 0

    def reset(self) -> None:
        """Reset the call counter"""
        self.attempts = 0

    def _latency_ms(self) -> float:
        if not self.config.random_delay:
            return self.config.base_delay
        return min(self.config.base_delay + self.rng.random() * 500, self.config.max_delay)

    async def __call__(self, target: str, request: Any = None) -> Dict[str, Any]:
        """Simulate one call to target

        Returns:
            Payload with id, message, timestamp and attempt

        Raises:
            StatusFailure: On failure when failure status codes are configured
            TransportFailure: On failure when no status codes are configured
        """
        self.attempts += 1
        attempt = self.attempts
        roll = self.rng.random()

        await self.sleep(self._latency_ms() / 1000.0)

        if roll < self.config.success_probability:
            return {
                "id": int(time.time() * 1000),
                "message": f"Successfully fetched data from mock API (attempt {attempt})",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "attempt": attempt,
            }

        if not self.config.failure_status_codes:
            raise TransportFailure(
                f"Mock API call failed on attempt {attempt} (random: {roll:.2f})"
            )
        status_code = self.rng.choice(self.config.failure_status_codes)
        reason = _STATUS_REASONS.get(status_code, "Mock API failure")
        raise StatusFailure(status_code, reason, target)

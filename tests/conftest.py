"""Shared fixtures for retry tests"""

from __future__ import annotations

from typing import Any, List

import pytest


class RecordingSleep:
    """Async sleeper that records requested delays instead of waiting"""

    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def calls_ms(self) -> List[float]:
        return [round(s * 1000.0, 6) for s in self.calls]


class ScriptedOperation:
    """Operation that raises or returns the scripted outcomes in order

    The last outcome repeats once the script runs out.
    """

    def __init__(self, *outcomes: Any):
        self.outcomes = list(outcomes)
        self.calls: List[tuple] = []

    async def __call__(self, target: str, request: Any = None) -> Any:
        self.calls.append((target, request))
        index = min(len(self.calls), len(self.outcomes)) - 1
        outcome = self.outcomes[index]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def scripted():
    """Factory for ScriptedOperation instances"""
    return ScriptedOperation

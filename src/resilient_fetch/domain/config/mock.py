"""Simulated endpoint configuration model."""

from typing import List

from pydantic import BaseModel, Field


class MockEndpointConfig(BaseModel):
    """Configuration for the simulated unreliable endpoint.

    Attributes:
        success_probability: Probability that a single call succeeds (0.0-1.0)
        base_delay: Simulated latency in milliseconds
        random_delay: Add up to 500ms of random latency
        max_delay: Upper bound for simulated latency in milliseconds
        failure_status_codes: Status codes reported on failure (empty: transport failures)
    """

    success_probability: float = Field(0.3, ge=0.0, le=1.0)
    base_delay: float = Field(100.0, ge=0.0)
    random_delay: bool = True
    max_delay: float = Field(2000.0, ge=0.0)
    failure_status_codes: List[int] = Field(default_factory=lambda: [500, 429])

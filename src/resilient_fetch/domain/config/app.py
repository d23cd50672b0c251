"""Main application configuration model."""

from pydantic import BaseModel, ConfigDict, Field

from resilient_fetch.domain.config.http import HttpConfig
from resilient_fetch.domain.config.mock import MockEndpointConfig
from resilient_fetch.domain.config.retry import RetryPolicy


class AppConfig(BaseModel):
    """Main application configuration.

    Root model aggregating all configuration sections. Validation happens at
    load time to fail fast on configuration errors.

    Attributes:
        retry: Default retry policy
        http: Default HTTP request settings
        mock: Simulated endpoint settings used by the demo
    """

    retry: RetryPolicy = Field(default_factory=RetryPolicy)
    http: HttpConfig = Field(default_factory=HttpConfig)
    mock: MockEndpointConfig = Field(default_factory=MockEndpointConfig)

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "retry": {
                    "max_retries": 3,
                    "base_delay": 1000,
                    "max_delay": 30000,
                    "exponential": True,
                    "backoff_multiplier": 2,
                    "retryable_status_codes": [429, 500, 502, 503, 504],
                },
                "http": {
                    "method": "GET",
                    "timeout": 30.0,
                    "headers": {"Accept": "application/json"},
                },
                "mock": {
                    "success_probability": 0.3,
                    "failure_status_codes": [500, 429],
                },
            }
        },
    )

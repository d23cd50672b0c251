"""HTTP request configuration model."""

from typing import Dict, Literal

from pydantic import BaseModel, Field


class HttpConfig(BaseModel):
    """Configuration for the default HTTP operation.

    Attributes:
        method: HTTP method used when none is given on the command line
        timeout: Per-request timeout in seconds
        headers: Headers sent with every request
    """

    method: Literal["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD"] = "GET"
    timeout: float = Field(30.0, gt=0.0)
    headers: Dict[str, str] = Field(default_factory=dict)

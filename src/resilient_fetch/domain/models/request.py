"""RequestOptions model - parameters for one HTTP attempt"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class RequestOptions:
    """Describes the request the HTTP operation performs on every attempt"""

    method: str = "GET"
    headers: Dict[str, str] = field(default_factory=dict)
    params: Optional[Dict[str, Any]] = None
    json: Any = None
    timeout: Optional[float] = 30.0  # Seconds; None waits forever

"""FetchResult model - outcome of a successful retried fetch"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FetchResult:
    """Payload and retry metadata of a successful fetch"""

    data: Any
    attempts: int  # Attempts made, including the successful one
    duration_ms: float  # Wall-clock time from first attempt to success
    succeeded_on_retry: bool  # True when at least one retry was needed

"""Domain models"""

from resilient_fetch.domain.models.fetch_result import FetchResult
from resilient_fetch.domain.models.request import RequestOptions

__all__ = ["FetchResult", "RequestOptions"]

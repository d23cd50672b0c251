"""Application services"""

from resilient_fetch.application.fetcher import Fetcher, create_fetcher, fetch_with_retry

__all__ = ["Fetcher", "create_fetcher", "fetch_with_retry"]

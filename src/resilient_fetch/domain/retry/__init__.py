"""Pure retry decisions: backoff delays and eligibility"""

from resilient_fetch.domain.retry.backoff import delay_for
from resilient_fetch.domain.retry.classifier import should_retry

__all__ = ["delay_for", "should_retry"]

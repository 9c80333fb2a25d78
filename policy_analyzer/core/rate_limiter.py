"""
Fixed-window rate limiter keyed by client identifier.

Every admitted request rewrites the counter entry, which restarts its TTL:
the window is measured from the most recent admitted request, not from the
first one. A client that keeps sending just under the limit keeps extending
its own window. The read and the increment are two separate cache
operations, so concurrent requests from one client can race past the limit.
"""

import hashlib
import logging
from functools import lru_cache

from policy_analyzer.config import get_settings
from policy_analyzer.core.cache import ExpiringCache
from policy_analyzer.exceptions import RateLimitExceeded


logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "rate_limit_"


class RateLimiter:
    """Admits or rejects requests per client key."""

    def __init__(
        self,
        cache: ExpiringCache,
        max_requests: int = 5,
        window_seconds: int = 60,
    ):
        self.cache = cache
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    @staticmethod
    def cache_key(client_id: str) -> str:
        return CACHE_KEY_PREFIX + hashlib.md5(client_id.encode("utf-8")).hexdigest()

    def check_or_raise(self, client_id: str) -> None:
        """
        Count one request for ``client_id``.

        Raises:
            RateLimitExceeded: when the client already used its budget
        """
        key = self.cache_key(client_id)

        count = self.cache.get(key, lambda: 0, self.window_seconds)

        if count >= self.max_requests:
            logger.warning(f"Rate limit exceeded for client key {key}")
            raise RateLimitExceeded(retry_after=self.window_seconds)

        # Delete then recreate so the entry gets a fresh TTL.
        self.cache.delete(key)
        self.cache.get(key, lambda: count + 1, self.window_seconds)


@lru_cache()
def get_rate_limiter() -> RateLimiter:
    """Get the process-wide rate limiter."""
    settings = get_settings()
    return RateLimiter(
        ExpiringCache(),
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )

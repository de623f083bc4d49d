"""
Shared endpoint dependencies: rate limiting and the manage-translations gate.
"""
from collections import deque
from typing import Deque, Dict, Optional, Tuple
import hmac
import logging
import threading
import time

from fastapi import Header, HTTPException, Request, status

from sqlmodel_translations.core.config import settings
from sqlmodel_translations.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def parse_rate_limit(value: str) -> Tuple[int, int]:
    """
    Parse a "<max requests>,<minutes>" rate limit setting.

    Examples:
    - "60,1" -> (60, 60)   60 requests per minute
    - "100,5" -> (100, 300)

    Raises:
        ConfigurationError: If the value is not two positive integers
    """
    try:
        max_requests, minutes = (int(part.strip()) for part in value.split(","))
    except ValueError as e:
        raise ConfigurationError(f"Invalid rate limit format: {value!r}") from e
    if max_requests <= 0 or minutes <= 0:
        raise ConfigurationError(f"Rate limit values must be positive: {value!r}")
    return max_requests, minutes * 60


class RateLimiter:
    """Thread-safe in-memory sliding window limiter, keyed by client address."""

    def __init__(self, max_requests: int, window_seconds: int):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._hits: Dict[str, Deque[float]] = {}
        self._last_cleanup = float("-inf")
        self._lock = threading.Lock()

    @classmethod
    def from_setting(cls, value: str) -> "RateLimiter":
        return cls(*parse_rate_limit(value))

    @property
    def tracked_clients(self) -> int:
        """Number of clients currently held in memory."""
        with self._lock:
            return len(self._hits)

    def hit(self, key: str, now: Optional[float] = None) -> bool:
        """Record a request for key. Returns False when the limit is exceeded."""
        now = time.monotonic() if now is None else now
        with self._lock:
            # Sweep idle clients at most once per window
            if now - self._last_cleanup >= self.window_seconds:
                self._cleanup(now)

            window = self._hits.setdefault(key, deque())
            self._expire(window, now)
            if len(window) >= self.max_requests:
                return False
            window.append(now)
            return True

    def cleanup(self, now: Optional[float] = None):
        """Forget clients with no requests left in the current window."""
        now = time.monotonic() if now is None else now
        with self._lock:
            self._cleanup(now)

    def reset(self):
        with self._lock:
            self._hits.clear()
            self._last_cleanup = float("-inf")

    def _expire(self, window: Deque[float], now: float):
        while window and window[0] <= now - self.window_seconds:
            window.popleft()

    def _cleanup(self, now: float):
        for key in list(self._hits.keys()):
            self._expire(self._hits[key], now)
            if not self._hits[key]:
                del self._hits[key]
        self._last_cleanup = now

    async def __call__(self, request: Request):
        client = request.client.host if request.client else "anonymous"
        if not self.hit(client):
            logger.warning(f"Rate limit exceeded for {client} on {request.method} {request.url.path}")
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests",
                headers={"Retry-After": str(self.window_seconds)},
            )


rate_limiter = RateLimiter.from_setting(settings.api_rate_limit)


async def require_manage_permission(
    x_translations_token: Optional[str] = Header(default=None),
):
    """Gate for write routes. Open when no api_manage_token is configured."""
    expected = settings.api_manage_token
    if not expected:
        return
    if not x_translations_token or not hmac.compare_digest(x_translations_token, expected):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed to manage translations",
        )

"""
Fixed-window rate limiting per client.

Each client key gets a window of ``window_seconds`` starting at its first
request. Up to ``max_requests`` calls are permitted inside the window; the
window resets fully once it has elapsed. Bursts at window boundaries are an
accepted property of the fixed-window scheme.

Example:
    >>> limiter = FixedWindowRateLimiter(max_requests=10, window_seconds=3600)
    >>> decision = limiter.allow("203.0.113.7")
    >>> decision.allowed
    True
"""

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict

logger = logging.getLogger(__name__)


@dataclass
class RateWindow:
    """Request count for one client within its current window."""
    count: int
    reset_at: float


@dataclass
class RateLimitDecision:
    """Outcome of a rate limit check."""
    allowed: bool
    retry_after_minutes: int = 0


class FixedWindowRateLimiter:
    """
    Thread-safe fixed-window limiter keyed by client identifier.

    Windows whose reset time has passed are swept at most once per window
    length, so the number of tracked keys stays bounded by the number of
    clients active in roughly the last two windows.
    """

    def __init__(
        self,
        max_requests: int = 10,
        window_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")

        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, RateWindow] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def allow(self, client_key: str) -> RateLimitDecision:
        """
        Record a request for ``client_key`` and decide whether it may proceed.

        Args:
            client_key: Caller identity, usually the remote address.

        Returns:
            RateLimitDecision; when denied, ``retry_after_minutes`` is the
            whole number of minutes left in the window, rounded up.
        """
        with self._lock:
            now = self._clock()
            self._maybe_sweep(now)

            window = self._windows.get(client_key)
            if window is None or now >= window.reset_at:
                self._windows[client_key] = RateWindow(count=1, reset_at=now + self.window_seconds)
                return RateLimitDecision(allowed=True)

            if window.count >= self.max_requests:
                minutes_left = math.ceil((window.reset_at - now) / 60)
                logger.info(f"Rate limit hit for {client_key}: retry in {minutes_left} min")
                return RateLimitDecision(allowed=False, retry_after_minutes=minutes_left)

            window.count += 1
            return RateLimitDecision(allowed=True)

    def evict_expired(self) -> int:
        """Drop every window that has already reset. Returns the number removed."""
        with self._lock:
            return self._evict(self._clock())

    def reset(self) -> None:
        """Forget all clients."""
        with self._lock:
            self._windows.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def _maybe_sweep(self, now: float) -> None:
        if now - self._last_sweep >= self.window_seconds:
            removed = self._evict(now)
            self._last_sweep = now
            if removed:
                logger.debug(f"Evicted {removed} expired rate limit windows")

    def _evict(self, now: float) -> int:
        expired = [key for key, w in self._windows.items() if now >= w.reset_at]
        for key in expired:
            del self._windows[key]
        return len(expired)

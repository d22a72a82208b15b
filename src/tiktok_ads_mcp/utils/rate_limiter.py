"""Sliding-window rate limiting for outbound TikTok API calls."""

import logging
import time
from collections import deque
from threading import Lock

from ..constants import DEFAULT_RATE_LIMIT, DEFAULT_RATE_LIMIT_WINDOW_MS, MAX_ADMISSION_POLL_SECONDS

logger = logging.getLogger(__name__)


class RateLimiter:
    """Admit at most ``max_requests`` calls within any trailing ``window_ms`` interval."""

    def __init__(self, max_requests: int = DEFAULT_RATE_LIMIT, window_ms: int = DEFAULT_RATE_LIMIT_WINDOW_MS) -> None:
        """Initialize the limiter.

        Args:
            max_requests: Maximum admissions inside one window
            window_ms: Window length in milliseconds
        """
        if max_requests <= 0:
            raise ValueError("max_requests must be greater than 0")
        if window_ms <= 0:
            raise ValueError("window_ms must be greater than 0")

        self.max_requests = max_requests
        self.window_ms = window_ms
        self.timestamps: deque[float] = deque()
        self.lock = Lock()

    @property
    def window_seconds(self) -> float:
        return self.window_ms / 1000.0

    def _prune(self, now: float) -> None:
        cutoff = now - self.window_seconds
        while self.timestamps and self.timestamps[0] <= cutoff:
            self.timestamps.popleft()

    def admit(self) -> bool:
        """Try to take a slot in the current window.

        Returns:
            True if the call may proceed now (the slot is recorded as used),
            False if the window is full
        """
        with self.lock:
            now = time.monotonic()
            self._prune(now)

            if len(self.timestamps) < self.max_requests:
                self.timestamps.append(now)
                return True

            return False

    def get_wait_time(self) -> float:
        """Seconds until the oldest admission leaves the window (0.0 if a slot is free)."""
        with self.lock:
            now = time.monotonic()
            self._prune(now)

            if not self.timestamps or len(self.timestamps) < self.max_requests:
                return 0.0

            return max(0.0, self.timestamps[0] + self.window_seconds - now)

    def wait_if_needed(self) -> None:
        """Block until a slot is admitted.

        Sleeps are capped so the oldest entry is re-read after every poll.
        """
        while not self.admit():
            wait_time = self.get_wait_time()
            if wait_time <= 0:
                continue

            delay = min(wait_time, MAX_ADMISSION_POLL_SECONDS)
            logger.debug(f"Rate limit window full, waiting {delay:.3f}s")
            time.sleep(delay)

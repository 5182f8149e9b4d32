"""In-memory sliding-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: one lock per key, plus a registry lock held only while a key's
  state is created.
- Keys are never evicted; the registry grows with the number of distinct
  identities seen during the process lifetime.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable

from bodymetrics.adapters.rate_limit.base import AbstractRateLimiter


@dataclass
class _WindowState:
    timestamps: deque[float] = field(default_factory=deque)
    lock: threading.Lock = field(default_factory=threading.Lock)


class InMemorySlidingWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter that keeps the accepted timestamps of each key.

    Every call prunes timestamps that fell out of the trailing window before
    checking occupancy, so there is no burst at fixed window boundaries. The
    retained list is bounded by ``capacity``, which is expected to be small.
    """

    def __init__(
        self,
        *,
        capacity: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the limiter.

        Args:
            capacity: Maximum number of accepted attempts per window. Zero
                makes the limiter reject everything.
            window_seconds: Length of the trailing window in seconds.
            clock: Time source returning seconds as a float.

        Raises:
            ValueError: If capacity is negative or window_seconds not positive.
        """
        if capacity < 0:
            raise ValueError("capacity must be >= 0")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self.capacity = capacity
        self.window_seconds = window_seconds
        self._clock = clock
        self._registry_lock = threading.Lock()
        self._state_by_key: dict[str, _WindowState] = {}

    def _get_or_create_state(self, key: str) -> _WindowState:
        state = self._state_by_key.get(key)
        if state is not None:
            return state
        with self._registry_lock:
            return self._state_by_key.setdefault(key, _WindowState())

    def allow(self, key: str) -> bool:
        """Record an attempt for ``key`` if the window still has room.

        Args:
            key: Identity of the caller.

        Returns:
            True when accepted (the attempt is recorded), False when the
            window is full.
        """
        state = self._get_or_create_state(key)

        with state.lock:
            now = self._clock()
            cutoff = now - self.window_seconds
            timestamps = state.timestamps
            while timestamps and timestamps[0] <= cutoff:
                timestamps.popleft()

            if len(timestamps) >= self.capacity:
                return False

            timestamps.append(now)
            return True

    def retry_after(self, key: str) -> float | None:
        """Seconds until the oldest retained attempt for ``key`` expires.

        Returns ``None`` when the key is not currently blocked, or when
        capacity is zero and no wait would help.
        """
        if self.capacity == 0:
            return None

        state = self._state_by_key.get(key)
        if state is None:
            return None

        with state.lock:
            now = self._clock()
            timestamps = state.timestamps
            while timestamps and timestamps[0] <= now - self.window_seconds:
                timestamps.popleft()
            if len(timestamps) < self.capacity:
                return None
            return timestamps[0] + self.window_seconds - now

    def occupancy(self, key: str) -> int:
        """Return how many accepted attempts are currently retained for key."""
        state = self._state_by_key.get(key)
        if state is None:
            return 0
        with state.lock:
            return len(state.timestamps)

    def tracked_keys(self) -> int:
        """Return the number of keys held in the registry."""
        with self._registry_lock:
            return len(self._state_by_key)

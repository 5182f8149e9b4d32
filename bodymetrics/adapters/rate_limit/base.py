"""Rate limiter interfaces.

The HTTP layer depends on this abstraction (not the concrete implementation)
so the storage backend can be swapped later (e.g., Redis) with minimal changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class AbstractRateLimiter(ABC):
    """Interface for per-key rate limiters.

    Attributes:
        capacity: Maximum number of accepted events per window.
        window_seconds: Length of the trailing window in seconds.
    """

    capacity: int
    window_seconds: float

    @abstractmethod
    def allow(self, key: str) -> bool:
        """Decide whether a new attempt for ``key`` is accepted.

        Accepted attempts are recorded; rejected ones leave no trace.

        Args:
            key: Identity of the caller (e.g., client IP address).

        Returns:
            True if the attempt fits in the current window, False otherwise.
        """
        raise NotImplementedError

    @abstractmethod
    def retry_after(self, key: str) -> float | None:
        """Return seconds until ``key`` may try again, or None if not blocked."""
        raise NotImplementedError

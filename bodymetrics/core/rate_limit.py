"""Per-client throttling for sensitive endpoints.

This module wires the rate limiting adapter into the HTTP layer.

- Each protected operation owns one limiter, built at startup from
  ``settings.rate_limit`` and stored on ``app.state.rate_limiters``.
- ``rate_limit(name)`` returns a FastAPI dependency that resolves the caller's
  identity, asks the operation's limiter, and raises 429 when it refuses.
- The identity is the ``X-Forwarded-For`` header value, taken as-is, when
  forwarding is trusted and the header is present; otherwise the connection
  address.
"""

from __future__ import annotations

import hashlib
import logging
import math
from typing import Awaitable, Callable

from fastapi import Request

from bodymetrics.adapters.rate_limit.base import AbstractRateLimiter
from bodymetrics.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from bodymetrics.core.config import RateLimitSettings, settings
from bodymetrics.core.errors import RateLimitAppError

logger = logging.getLogger(__name__)

LOGIN = "login"
FORGOT_PASSWORD = "forgot_password"

FORWARDED_FOR_HEADER = "X-Forwarded-For"


def build_rate_limiters(cfg: RateLimitSettings | None = None) -> dict[str, AbstractRateLimiter]:
    """Create one limiter per protected operation.

    Args:
        cfg: Rate limit settings; defaults to the global settings.

    Returns:
        Mapping of operation name to its limiter.
    """
    cfg = cfg or settings.rate_limit
    return {
        LOGIN: InMemorySlidingWindowRateLimiter(
            capacity=cfg.login_attempts,
            window_seconds=cfg.login_window_seconds,
        ),
        FORGOT_PASSWORD: InMemorySlidingWindowRateLimiter(
            capacity=cfg.forgot_password_attempts,
            window_seconds=cfg.forgot_password_window_seconds,
        ),
    }


def client_identity(request: Request, *, trust_forwarded_for: bool = True) -> str:
    """Derive the limiter key for a request.

    The forwarded header is not validated; behind no trusted proxy a client
    can pick its own identity. Disable ``RATE_LIMIT_TRUST_FORWARDED_FOR`` when
    the service is exposed directly.
    """
    if trust_forwarded_for:
        forwarded = request.headers.get(FORWARDED_FOR_HEADER, "").strip()
        if forwarded:
            return forwarded

    return request.client.host if request.client else "unknown"


def _hash_identity(identity: str) -> str:
    """Hash the client identity for logging without exposing addresses."""
    return hashlib.sha256(identity.encode()).hexdigest()[:16]


def rate_limit(name: str) -> Callable[[Request], Awaitable[None]]:
    """Build a dependency that throttles the route with limiter ``name``.

    Usage:
        @router.post("/auth/login", dependencies=[Depends(rate_limit(LOGIN))])

    Raises (from the dependency):
        RateLimitAppError: 429 when the caller's window is full.
    """

    async def enforce_rate_limit(request: Request) -> None:
        if not settings.rate_limit.enabled:
            return

        limiter: AbstractRateLimiter = request.app.state.rate_limiters[name]
        identity = client_identity(
            request,
            trust_forwarded_for=settings.rate_limit.trust_forwarded_for,
        )

        if limiter.allow(identity):
            return

        wait = limiter.retry_after(identity)
        retry_after = max(1, math.ceil(wait)) if wait is not None else None

        logger.warning(
            "rate_limit.exceeded",
            extra={
                "limiter": name,
                "client_hash": _hash_identity(identity),
                "capacity": limiter.capacity,
                "window_s": limiter.window_seconds,
                "retry_after_s": retry_after,
            },
        )
        raise RateLimitAppError(
            code="rate_limited",
            message="too many requests",
            details={"retry_after": retry_after} if retry_after is not None else None,
        )

    enforce_rate_limit.__name__ = f"enforce_{name}_rate_limit"
    return enforce_rate_limit

"""Password hashing and access token helpers.

Passwords are hashed with bcrypt. Access tokens are HS256 JWTs carrying the
account id and email, valid for ``AUTH_TOKEN_TTL_DAYS``.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from bodymetrics.core.config import settings

# bcrypt rejects longer inputs
BCRYPT_MAX_PASSWORD_BYTES = 72

# Pre-computed hash so unknown emails cost the same bcrypt work as wrong passwords
_DUMMY_HASH = bcrypt.hashpw(b"dummy-password-for-timing", bcrypt.gensalt()).decode()


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode(), hashed.encode())
    except ValueError:
        # Malformed stored hash
        return False


def burn_password_check(plain: str) -> None:
    """Run a bcrypt comparison whose result is discarded."""
    verify_password(plain, _DUMMY_HASH)


def create_access_token(account_id: int, email: str, *, now: datetime | None = None) -> str:
    """Sign an access token for the account.

    Args:
        account_id: Account primary key, stored in the ``account_id`` claim.
        email: Account email, stored in the ``email`` claim.
        now: Issue time override (tests).

    Returns:
        Encoded JWT string.
    """
    issued_at = now or datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "account_id": account_id,
        "email": email,
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.auth.token_ttl_days),
    }
    return jwt.encode(payload, settings.auth.jwt_secret, algorithm=settings.auth.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT. Raises jwt.PyJWTError on failure."""
    return jwt.decode(token, settings.auth.jwt_secret, algorithms=[settings.auth.jwt_algorithm])

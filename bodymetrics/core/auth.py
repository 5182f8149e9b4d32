"""Request authentication dependencies.

Two independent checks guard the API:

- API key (``X-API-Key``): applied to every ``/api/v1`` route except health.
  Keys are validated against a comma-separated list from the environment.
- Bearer token (``Authorization: Bearer <jwt>``): applied to user and metric
  routes; resolves the calling account id.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Annotated

import jwt
from fastapi import Header

from bodymetrics.core.config import settings
from bodymetrics.core.errors import AuthenticationAppError, ForbiddenAppError
from bodymetrics.core.security import decode_access_token

logger = logging.getLogger(__name__)


def parse_api_keys(keys_string: str | None) -> set[str]:
    """Parse comma-separated API keys into a set.

    Examples:
        >>> parse_api_keys("key1, key2 , key3 ")
        {'key1', 'key2', 'key3'}
        >>> parse_api_keys(None)
        set()
    """
    if not keys_string:
        return set()

    return {key.strip() for key in keys_string.split(",") if key.strip()}


def _key_fingerprint(key: str) -> str:
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def validate_api_key(provided_key: str | None) -> None:
    """Validate that the provided API key matches a configured key.

    Pure validation logic without FastAPI dependencies for easy testing.

    Raises:
        ForbiddenAppError: If the key is missing, unknown, or no keys are
            configured while authentication is required.
    """
    if not settings.app.api_key_required:
        return

    valid_keys = parse_api_keys(settings.app.api_keys)
    if not valid_keys:
        logger.error(
            "auth.api_keys_not_configured",
            extra={"auth_required": settings.app.api_key_required},
        )
        raise ForbiddenAppError(
            code="api_keys_not_configured",
            message="API key authentication is enabled but no valid keys are configured",
            details={"hint": "Set APP_API_KEYS or disable auth with APP_API_KEY_REQUIRED=false"},
        )

    if not provided_key:
        logger.warning("auth.missing_api_key")
        raise ForbiddenAppError(code="missing_api_key", message="missing API key")

    if provided_key not in valid_keys:
        logger.warning(
            "auth.invalid_api_key",
            extra={"key_fingerprint": _key_fingerprint(provided_key)},
        )
        raise ForbiddenAppError(code="invalid_api_key", message="invalid API key")


async def verify_api_key(
    x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
) -> None:
    """FastAPI dependency for API key authentication.

    Usage:
        router = APIRouter(dependencies=[Depends(verify_api_key)])
    """
    validate_api_key(x_api_key)


def account_id_from_authorization(header: str | None) -> int:
    """Resolve the account id carried by an ``Authorization`` header value.

    Raises:
        AuthenticationAppError: On a missing, malformed, expired or
            tampered token, or when the token lacks an integer account id.
    """
    if not header:
        raise AuthenticationAppError(
            code="missing_authorization",
            message="missing authorization header",
        )

    scheme, _, token = header.partition(" ")
    if scheme != "Bearer" or not token:
        raise AuthenticationAppError(
            code="invalid_authorization_format",
            message="invalid authorization format",
        )

    try:
        claims = decode_access_token(token)
    except jwt.PyJWTError as exc:
        logger.info("auth.token_rejected", extra={"reason": type(exc).__name__})
        raise AuthenticationAppError(
            code="invalid_token",
            message="invalid or expired token",
        ) from exc

    account_id = claims.get("account_id")
    if isinstance(account_id, bool) or not isinstance(account_id, int):
        raise AuthenticationAppError(
            code="invalid_token_claims",
            message="invalid account id in token",
        )
    return account_id


async def get_current_account_id(
    authorization: Annotated[str | None, Header()] = None,
) -> int:
    """FastAPI dependency returning the authenticated account id."""
    return account_id_from_authorization(authorization)

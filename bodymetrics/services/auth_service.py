"""Account registration, login and password recovery.

The service owns the credential rules (email normalisation and format,
minimum password length), password hashing, token issuance and the
one-time reset code lifecycle. HTTP concerns stay in the route layer.
"""

from __future__ import annotations

import logging
import secrets
import sqlite3
import time

from bodymetrics.adapters.email.base import AbstractEmailSender
from bodymetrics.core.config import settings
from bodymetrics.core.errors import AppError, AuthenticationAppError, ValidationAppError
from bodymetrics.core.security import (
    BCRYPT_MAX_PASSWORD_BYTES,
    burn_password_check,
    create_access_token,
    hash_password,
    verify_password,
)
from bodymetrics.repositories.accounts import AccountRepository
from bodymetrics.repositories.reset_tokens import ResetTokenRepository

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    """Loose format check: a non-leading ``@`` followed somewhere by a dot."""
    at = email.find("@")
    return at > 0 and "." in email[at:]


def generate_reset_code() -> str:
    """Return a random six-digit numeric code (leading zeros kept)."""
    return f"{secrets.randbelow(1_000_000):06d}"


class AuthService:
    """Credential workflows backed by the account and reset-token stores."""

    def __init__(
        self,
        accounts: AccountRepository,
        reset_tokens: ResetTokenRepository,
        email_sender: AbstractEmailSender | None = None,
    ) -> None:
        self._accounts = accounts
        self._reset_tokens = reset_tokens
        self._email_sender = email_sender

    def _check_credentials_shape(self, email: str, password: str) -> None:
        if not email or not password:
            raise ValidationAppError(
                code="missing_credentials",
                message="email and password are required",
            )
        if not is_valid_email(email):
            raise ValidationAppError(code="invalid_email", message="invalid email format")

    def _check_password_strength(self, password: str) -> None:
        min_length = settings.auth.min_password_length
        if len(password) < min_length:
            raise ValidationAppError(
                code="password_too_short",
                message=f"password must be at least {min_length} characters",
                details={"min_length": min_length, "actual_length": len(password)},
            )

        encoded_length = len(password.encode())
        if encoded_length > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValidationAppError(
                code="password_too_long",
                message=f"password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes",
                details={"max_bytes": BCRYPT_MAX_PASSWORD_BYTES, "actual_length": encoded_length},
            )

    async def register(self, email: str, password: str) -> str:
        """Create an account and return an access token for it.

        Raises:
            ValidationAppError: Missing fields, bad email, or a password outside
                the accepted length.
            ConflictAppError: Email already registered.
        """
        email = normalize_email(email)
        self._check_credentials_shape(email, password)
        self._check_password_strength(password)

        account_id = await self._accounts.create(email, hash_password(password))
        logger.info("auth.registered", extra={"account_id": account_id})
        return create_access_token(account_id, email)

    async def login(self, email: str, password: str) -> str:
        """Verify credentials and return a fresh access token.

        Raises:
            ValidationAppError: Missing fields or bad email.
            AuthenticationAppError: Unknown email or wrong password.
        """
        email = normalize_email(email)
        self._check_credentials_shape(email, password)

        account = await self._accounts.get_by_email(email)
        if account is None:
            burn_password_check(password)
            logger.info("auth.login_failed", extra={"reason": "unknown_email"})
            raise AuthenticationAppError(
                code="invalid_credentials",
                message="invalid email or password",
            )

        if not verify_password(password, account.password_hash):
            logger.info(
                "auth.login_failed",
                extra={"reason": "wrong_password", "account_id": account.id},
            )
            raise AuthenticationAppError(
                code="invalid_credentials",
                message="invalid email or password",
            )

        logger.info("auth.login_succeeded", extra={"account_id": account.id})
        return create_access_token(account.id, account.email)

    async def send_reset_code(self, email: str) -> None:
        """Issue and email a reset code if the account exists.

        Intended to run after the response is sent: every failure is logged
        and never reaches the caller, so the endpoint does not reveal which
        emails are registered.
        """
        email = normalize_email(email)
        if not email:
            return

        try:
            account = await self._accounts.get_by_email(email)
            if account is None:
                logger.info("auth.reset_requested", extra={"account_found": False})
                return

            await self._reset_tokens.delete_by_account_id(account.id)

            code = generate_reset_code()
            expires_at = time.time() + settings.auth.reset_token_ttl_minutes * 60
            await self._reset_tokens.create(account.id, code, expires_at)

            if self._email_sender is None:
                logger.error("auth.reset_email_skipped", extra={"account_id": account.id})
                return

            await self._email_sender.send_password_reset(email, code)
            logger.info("auth.reset_email_sent", extra={"account_id": account.id})
        except AppError as exc:
            logger.error(
                "auth.reset_email_failed",
                extra={"error_code": exc.code, "error_message": exc.message},
            )
        except sqlite3.Error as exc:
            logger.error(
                "auth.reset_storage_failed",
                extra={"error_type": type(exc).__name__, "error_msg": str(exc)},
            )

    async def reset_password(self, email: str, token: str, password: str) -> None:
        """Replace the password using a valid reset code, consuming the code.

        Raises:
            ValidationAppError: Missing fields or a password outside the
                accepted length.
            AuthenticationAppError: Unknown, used or expired code.
        """
        email = normalize_email(email)
        if not email or not token or not password:
            raise ValidationAppError(
                code="missing_fields",
                message="email, token and password are required",
            )
        self._check_password_strength(password)

        reset_token = await self._reset_tokens.get_valid_by_email_and_token(email, token)
        if reset_token is None:
            logger.info("auth.reset_rejected")
            raise AuthenticationAppError(
                code="invalid_reset_token",
                message="invalid or expired token",
            )

        await self._accounts.update_password(reset_token.account_id, hash_password(password))
        await self._reset_tokens.mark_used(reset_token.id)
        logger.info("auth.password_reset", extra={"account_id": reset_token.account_id})

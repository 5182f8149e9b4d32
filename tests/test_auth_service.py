"""Unit tests for AuthService against a real temporary database."""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock

import pytest

from bodymetrics.core.errors import (
    AuthenticationAppError,
    EmailDeliveryAppError,
    ValidationAppError,
)
from bodymetrics.core.security import decode_access_token
from bodymetrics.repositories import AccountRepository, ResetTokenRepository
from bodymetrics.services.auth_service import (
    AuthService,
    generate_reset_code,
    is_valid_email,
    normalize_email,
)


@pytest.fixture
def sender() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(tmp_db, sender) -> AuthService:
    return AuthService(AccountRepository(tmp_db), ResetTokenRepository(tmp_db), sender)


@pytest.mark.parametrize(
    ("email", "valid"),
    [
        ("a@b.co", True),
        ("first.last@example.org", True),
        ("@example.com", False),
        ("no-at-sign.com", False),
        ("dot.before@at", False),
        ("", False),
    ],
)
def test_is_valid_email(email, valid):
    assert is_valid_email(email) is valid


def test_normalize_email():
    assert normalize_email("  Mixed@Case.COM ") == "mixed@case.com"


def test_reset_code_is_six_digits():
    codes = {generate_reset_code() for _ in range(50)}

    assert all(len(c) == 6 and c.isdigit() for c in codes)


async def test_register_then_login(service: AuthService):
    token = await service.register("user@example.com", "secret123")
    login_token = await service.login("USER@example.com", "secret123")

    assert decode_access_token(token)["account_id"] == decode_access_token(login_token)["account_id"]


async def test_short_password_reports_lengths(service: AuthService):
    with pytest.raises(ValidationAppError) as exc_info:
        await service.register("user@example.com", "abc")

    assert exc_info.value.details == {"min_length": 6, "actual_length": 3}


async def test_long_password_reports_byte_length(service: AuthService):
    with pytest.raises(ValidationAppError) as exc_info:
        await service.register("user@example.com", "\u00e9" * 40)

    assert exc_info.value.code == "password_too_long"
    assert exc_info.value.details == {"max_bytes": 72, "actual_length": 80}


async def test_password_of_exactly_72_bytes_is_accepted(service: AuthService):
    token = await service.register("user@example.com", "x" * 72)

    assert decode_access_token(token)["email"] == "user@example.com"


async def test_login_unknown_email(service: AuthService):
    with pytest.raises(AuthenticationAppError):
        await service.login("nobody@example.com", "secret123")


async def test_send_reset_code_for_unknown_email_sends_nothing(service: AuthService, sender: AsyncMock):
    await service.send_reset_code("nobody@example.com")

    sender.send_password_reset.assert_not_awaited()


async def test_send_reset_code_stores_and_sends(service: AuthService, sender: AsyncMock, tmp_db):
    await service.register("user@example.com", "secret123")

    await service.send_reset_code("user@example.com")

    sender.send_password_reset.assert_awaited_once()
    to, code = sender.send_password_reset.await_args.args
    assert to == "user@example.com"
    stored = await ResetTokenRepository(tmp_db).get_valid_by_email_and_token(to, code)
    assert stored is not None


async def test_delivery_failure_is_logged_not_raised(service: AuthService, sender: AsyncMock, caplog):
    await service.register("user@example.com", "secret123")
    sender.send_password_reset.side_effect = EmailDeliveryAppError(
        code="email_provider_error",
        message="Email provider returned HTTP 500",
    )

    with caplog.at_level(logging.ERROR, logger="bodymetrics.services.auth_service"):
        await service.send_reset_code("user@example.com")

    assert any(r.getMessage() == "auth.reset_email_failed" for r in caplog.records)


async def test_reset_password_rejects_expired_code(service: AuthService, tmp_db):
    await service.register("user@example.com", "secret123")
    account = await AccountRepository(tmp_db).get_by_email("user@example.com")
    await ResetTokenRepository(tmp_db).create(account.id, "111111", 1.0)

    with pytest.raises(AuthenticationAppError) as exc_info:
        await service.reset_password("user@example.com", "111111", "newpass1")

    assert exc_info.value.message == "invalid or expired token"


async def test_reset_password_checks_new_password_length(service: AuthService):
    with pytest.raises(ValidationAppError):
        await service.reset_password("user@example.com", "111111", "abc")

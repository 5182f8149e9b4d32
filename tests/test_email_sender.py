"""Tests for the Resend email adapter using an in-process httpx transport."""

from __future__ import annotations

import json

import httpx
import pytest

from bodymetrics.adapters.email.resend_client import RESET_SUBJECT, ResendEmailSender, build_reset_email
from bodymetrics.core.errors import EmailDeliveryAppError


def _sender(handler, **overrides) -> ResendEmailSender:
    kwargs = {
        "api_key": "re_test_key",
        "from_address": "no-reply@bodymetrics.test",
        "api_url": "https://email.test/emails",
        "transport": httpx.MockTransport(handler),
    }
    kwargs.update(overrides)
    return ResendEmailSender(**kwargs)


async def test_posts_reset_email_to_provider():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "email-1"})

    await _sender(handler).send_password_reset("user@example.com", "042042")

    assert len(seen) == 1
    request = seen[0]
    assert str(request.url) == "https://email.test/emails"
    assert request.headers["Authorization"] == "Bearer re_test_key"
    payload = json.loads(request.content)
    assert payload["to"] == ["user@example.com"]
    assert payload["from"] == "no-reply@bodymetrics.test"
    assert payload["subject"] == RESET_SUBJECT
    assert "042042" in payload["html"]


async def test_provider_error_status_raises():
    sender = _sender(lambda request: httpx.Response(422, json={"message": "bad from"}))

    with pytest.raises(EmailDeliveryAppError) as exc_info:
        await sender.send_password_reset("user@example.com", "123456")

    assert exc_info.value.code == "email_provider_error"
    assert exc_info.value.details["http_status"] == 422
    assert exc_info.value.status_code == 502


async def test_transport_failure_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(EmailDeliveryAppError) as exc_info:
        await _sender(handler).send_password_reset("user@example.com", "123456")

    assert exc_info.value.code == "email_transport_error"


@pytest.mark.parametrize("missing", ["api_key", "from_address"])
async def test_missing_configuration_raises_without_calling_provider(missing):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200)

    with pytest.raises(EmailDeliveryAppError) as exc_info:
        await _sender(handler, **{missing: None}).send_password_reset("user@example.com", "123456")

    assert exc_info.value.code == "email_not_configured"
    assert calls == []


def test_reset_email_mentions_code_and_validity():
    html = build_reset_email("987654", 15)

    assert "987654" in html
    assert "15 minutes" in html

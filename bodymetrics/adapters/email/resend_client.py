"""Resend HTTP API email adapter."""

from __future__ import annotations

import logging
from html import escape

import httpx

from bodymetrics.adapters.email.base import AbstractEmailSender
from bodymetrics.core.errors import EmailDeliveryAppError

logger = logging.getLogger(__name__)

RESET_SUBJECT = "BodyMetrics - Password reset code"

_RESET_TEMPLATE = """<!DOCTYPE html>
<html>
<head><meta charset="UTF-8"></head>
<body style="font-family:Arial,sans-serif;background:#f4f4f4;padding:20px;">
  <div style="max-width:480px;margin:0 auto;background:#fff;border-radius:8px;padding:32px;">
    <h2 style="color:#333;">BodyMetrics password reset</h2>
    <p>Use the following 6-digit code to reset your password:</p>
    <div style="text-align:center;margin:24px 0;">
      <span style="font-size:36px;font-weight:bold;letter-spacing:8px;color:#6200EE;">{code}</span>
    </div>
    <p>The code is valid for <strong>{ttl} minutes</strong>.</p>
    <p>If you did not request this, you can ignore this email.</p>
  </div>
</body>
</html>"""


def build_reset_email(code: str, ttl_minutes: int) -> str:
    return _RESET_TEMPLATE.format(code=escape(code), ttl=ttl_minutes)


class ResendEmailSender(AbstractEmailSender):
    """Send emails through https://resend.com using httpx."""

    def __init__(
        self,
        api_key: str | None,
        from_address: str | None,
        api_url: str = "https://api.resend.com/emails",
        timeout_seconds: float = 10.0,
        reset_code_ttl_minutes: int = 15,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Configure the sender.

        Args:
            api_key: Resend API key.
            from_address: Sender address, must be verified in Resend.
            api_url: Send-email endpoint.
            timeout_seconds: Request timeout.
            reset_code_ttl_minutes: Validity shown in the reset email.
            transport: Optional httpx transport (used by tests).
        """
        self.api_key = api_key
        self.from_address = from_address
        self.api_url = api_url
        self.timeout_seconds = timeout_seconds
        self.reset_code_ttl_minutes = reset_code_ttl_minutes
        self._transport = transport

    async def send_password_reset(self, to: str, code: str) -> None:
        if not self.api_key or not self.from_address:
            raise EmailDeliveryAppError(
                code="email_not_configured",
                message="Email delivery is not configured",
                details={"hint": "Set EMAIL_RESEND_API_KEY and EMAIL_FROM_ADDRESS"},
            )

        payload = {
            "from": self.from_address,
            "to": [to],
            "subject": RESET_SUBJECT,
            "html": build_reset_email(code, self.reset_code_ttl_minutes),
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self.api_url,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
        except httpx.HTTPError as exc:
            raise EmailDeliveryAppError(
                code="email_transport_error",
                message=f"Email provider unreachable: {type(exc).__name__}",
            ) from exc

        if response.status_code >= 400:
            raise EmailDeliveryAppError(
                code="email_provider_error",
                message=f"Email provider returned HTTP {response.status_code}",
                details={"http_status": response.status_code},
            )

        logger.info("email.sent", extra={"template": "password_reset", "http_status": response.status_code})

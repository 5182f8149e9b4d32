"""Factory for the configured email sender."""

from bodymetrics.adapters.email.base import AbstractEmailSender
from bodymetrics.adapters.email.resend_client import ResendEmailSender
from bodymetrics.core.config import settings


def create_email_sender() -> AbstractEmailSender:
    """Build the email sender from ``settings.email``.

    Missing credentials are not rejected here so the API can start without
    email configured; the sender reports ``email_not_configured`` on use.
    """
    return ResendEmailSender(
        api_key=settings.email.resend_api_key,
        from_address=settings.email.from_address,
        api_url=settings.email.api_url,
        timeout_seconds=settings.email.timeout_seconds,
        reset_code_ttl_minutes=settings.auth.reset_token_ttl_minutes,
    )

"""Email delivery adapters."""

from bodymetrics.adapters.email.base import AbstractEmailSender
from bodymetrics.adapters.email.factory import create_email_sender
from bodymetrics.adapters.email.resend_client import ResendEmailSender

__all__ = ["AbstractEmailSender", "ResendEmailSender", "create_email_sender"]

"""Outbound email interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class AbstractEmailSender(ABC):
    """Interface for providers that deliver transactional emails."""

    @abstractmethod
    async def send_password_reset(self, to: str, code: str) -> None:
        """Deliver a password reset code.

        Args:
            to: Recipient email address.
            code: One-time reset code to include in the message.

        Raises:
            EmailDeliveryAppError: If the provider rejects or cannot be reached.
        """
        ...

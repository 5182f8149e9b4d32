"""Application-level exception types.

This module defines domain errors used across services, repositories and
adapters, enabling consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    hint: str
    min_length: int
    max_bytes: int
    actual_length: int
    http_status: int
    retry_after: int


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    status_code: ClassVar[int] = 400

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class AuthenticationAppError(AppError):
    """Raised when credentials or tokens are missing or invalid."""

    status_code = 401


class ForbiddenAppError(AppError):
    """Raised when the API key check rejects a request."""

    status_code = 403


class NotFoundAppError(AppError):
    """Raised when a requested resource does not exist."""

    status_code = 404


class ConflictAppError(AppError):
    """Raised when a write collides with an existing resource."""

    status_code = 409


class RateLimitAppError(AppError):
    """Raised when a client exceeds its attempt budget."""

    status_code = 429


class EmailDeliveryAppError(AppError):
    """Raised when the email provider cannot deliver a message."""

    status_code = 502

"""Pydantic schemas for account authentication and password reset."""

from __future__ import annotations

from pydantic import BaseModel, Field


class TokenRequest(BaseModel):
    """Credentials submitted to register or log in.

    Fields default to empty strings so the service can answer missing values
    with its own messages instead of a generic validation error.
    """

    email: str = Field("", description="Account email address (case-insensitive).")
    password: str = Field("", description="Plain-text password.")


class TokenResponse(BaseModel):
    token: str = Field(..., description="Signed bearer token for the account.")


class ForgotPasswordRequest(BaseModel):
    email: str = Field("", description="Email of the account to recover.")


class ResetPasswordRequest(BaseModel):
    email: str = Field("", description="Email of the account being recovered.")
    token: str = Field("", description="Six-digit code received by email.")
    password: str = Field("", description="New password.")


class MessageResponse(BaseModel):
    message: str

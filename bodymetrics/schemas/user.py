"""Pydantic schemas for tracked users (profiles whose metrics are recorded)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UserBase(BaseModel):
    """Profile fields shared by create, update and read models.

    ``birthOfDate`` is the wire name; ``birth_of_date`` is accepted on input too.
    """

    name: str | None = Field(None, max_length=100)
    surname: str | None = Field(None, max_length=100)
    gender: int | None = Field(None, description="Client-defined gender code.")
    avatar: str | None = Field(None, max_length=50)
    height: int | None = Field(None, description="Height in centimetres.")
    birth_of_date: str | None = Field(None, alias="birthOfDate", max_length=20)

    model_config = ConfigDict(populate_by_name=True)


class UserCreate(UserBase):
    pass


class UserUpdate(UserBase):
    """Partial update; only fields present in the request body are written."""


class UserResponse(UserBase):
    id: int
    created_at: str
    updated_at: str

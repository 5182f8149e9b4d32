"""Pydantic schemas for body-metric history entries."""

from __future__ import annotations

from pydantic import BaseModel, Field


class MetricCreate(BaseModel):
    """A single dated measurement submitted by the client."""

    date: str = Field(..., max_length=20, description="Measurement date as sent by the client.")
    weight: float | None = Field(None, description="Weight in kilograms.")
    height: int = Field(..., description="Height in centimetres at measurement time.")
    bmi: float = Field(..., description="Body mass index computed by the client.")
    weight_diff: float | None = Field(None, description="Change since the previous entry.")
    body_metric: str | None = Field(None, max_length=30, description="BMI category label.")
    created_at: str | None = Field(
        None,
        max_length=30,
        description="Client timestamp; the server time is used when omitted.",
    )


class MetricResponse(BaseModel):
    id: int
    user_id: int
    date: str
    weight: float | None = None
    height: int
    bmi: float
    weight_diff: float | None = None
    body_metric: str | None = None
    created_at: str | None = None

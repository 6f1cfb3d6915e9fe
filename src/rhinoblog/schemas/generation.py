"""Schemas for AI post generation and the generation schedule."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .post import PostResponse


class GeneratePostRequest(BaseModel):
    """Brief for a single generated post."""

    age: str = Field(..., min_length=1)
    gender: str = Field(..., min_length=1)
    procedure: str = Field(..., min_length=1)
    reason: str = Field(..., min_length=1)
    content_type: Literal["personal", "educational"] = "personal"
    topic: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _coerce_age(cls, data: object) -> object:
        if isinstance(data, dict) and isinstance(data.get("age"), int):
            data = {**data, "age": str(data["age"])}
        return data


class GenerateCustomRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=5000)
    content_type: Literal["personal", "educational"] = "educational"


class BatchGenerationResponse(BaseModel):
    message: str
    posts: list[PostResponse]


class ScheduleUpdate(BaseModel):
    """New schedule; the cron expression defaults to daily at noon."""

    enabled: bool = False
    cron_expression: str = Field("0 12 * * *", min_length=1)


class ScheduleResponse(BaseModel):
    enabled: bool
    cron_expression: str
    next_run: datetime | None = None
    last_run: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class GenerationStatusResponse(BaseModel):
    """Whether the generation service is usable; the key is never returned in full."""

    configured: bool
    masked_key: str | None
    model: str
    base_url: str
    request_count: int
    success_count: int
    error_count: int
    average_response_time: float
    last_error: str | None


class ConnectionTestResponse(BaseModel):
    success: bool
    message: str
    tagline: str | None = None

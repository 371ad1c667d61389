"""Ratings Pydantic V2 schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class RateCourseRequest(BaseModel):
    rating: int = Field(ge=1, le=5, description="Stars, 1 to 5.")


class RatingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    rating_id: UUID
    course_id: UUID
    user_id: UUID
    user_name: str
    rating: int
    created_at: datetime


class RatingSummaryResponse(BaseModel):
    course_id: UUID
    average: float
    total: int
    ratings: list[RatingResponse]


class MyRatingResponse(BaseModel):
    has_rated: bool
    rating: RatingResponse | None = None

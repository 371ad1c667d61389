"""Catalog domain Pydantic V2 schemas.

Covers Journey and Course. Follows RORO: separate request models from
response models.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Journey
# ---------------------------------------------------------------------------


class CreateJourneyRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=300)
    slug: str | None = Field(
        default=None,
        max_length=200,
        description="URL slug. Auto-generated from title if omitted.",
    )
    description: str | None = None
    image_url: str | None = Field(default=None, max_length=500)
    sort_order: int = Field(default=0, ge=0)


class JourneyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    journey_id: UUID
    slug: str
    title: str
    description: str | None
    image_url: str | None
    sort_order: int


# ---------------------------------------------------------------------------
# Course
# ---------------------------------------------------------------------------


class CreateCourseRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=300, description="Course title.")
    slug: str | None = Field(
        default=None,
        max_length=200,
        description="URL slug (e.g. 'html'). Auto-generated from title if omitted.",
    )
    subtitle: str | None = Field(default=None, max_length=300)
    description: str | None = None
    category: str | None = Field(default=None, max_length=100)
    instructor_name: str | None = Field(default=None, max_length=200)
    thumbnail_url: str | None = Field(default=None, max_length=500)
    journey_id: UUID | None = None
    sort_order: int = Field(default=0, ge=0)
    is_finished: bool = Field(
        default=False, description="All lessons published (vs. still in production).",
    )
    payment_enabled: bool = False
    price: Decimal | None = Field(default=None, ge=0, description="Price in the service currency.")


class UpdateCourseRequest(BaseModel):
    """Partial update. Payment settings have their own endpoint."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(default=None, min_length=1, max_length=300)
    slug: str | None = Field(default=None, max_length=200)
    subtitle: str | None = Field(default=None, max_length=300)
    description: str | None = None
    category: str | None = Field(default=None, max_length=100)
    instructor_name: str | None = Field(default=None, max_length=200)
    thumbnail_url: str | None = Field(default=None, max_length=500)
    journey_id: UUID | None = None
    sort_order: int | None = Field(default=None, ge=0)
    is_finished: bool | None = None


class CourseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    course_id: UUID
    slug: str
    title: str
    subtitle: str | None
    description: str | None
    category: str | None
    instructor_name: str | None
    thumbnail_url: str | None
    journey_id: UUID | None
    sort_order: int
    is_finished: bool
    payment_enabled: bool
    price: Decimal
    enrollment_count: int
    created_at: datetime
    updated_at: datetime


class JourneyWithCoursesResponse(JourneyResponse):
    courses: list[CourseResponse] = Field(default_factory=list)

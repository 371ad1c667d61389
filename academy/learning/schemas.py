"""Learning domain Pydantic V2 schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class EnrollmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    enrollment_id: UUID
    user_id: UUID
    course_id: UUID
    progress_pct: Decimal
    completed_at: datetime | None = None
    created_at: datetime


class EnrollmentProgressResponse(EnrollmentResponse):
    completed_video_ids: list[UUID] = Field(default_factory=list)
    total_videos: int = 0


class CompleteVideoRequest(BaseModel):
    watched_secs: int = Field(
        default=0, ge=0, description="Seconds the player has been watching this video.",
    )
    ended: bool = Field(
        default=False, description="The native player fired its 'ended' event.",
    )

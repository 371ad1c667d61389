"""Video playlist Pydantic V2 schemas."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from academy.models.enums import PaymentStatus, VideoType


class AddVideoRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=300)
    url: str = Field(
        min_length=1,
        max_length=1000,
        description="YouTube / Vimeo link or a direct video file URL.",
    )
    video_type: VideoType | None = Field(
        default=None, description="Detected from the URL when omitted.",
    )
    duration_mins: int | None = Field(default=None, ge=0)


class UpdateVideoRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(default=None, min_length=1, max_length=300)
    url: str | None = Field(default=None, min_length=1, max_length=1000)
    video_type: VideoType | None = None
    duration_mins: int | None = Field(default=None, ge=0)


class ReorderVideosRequest(BaseModel):
    video_ids: list[UUID] = Field(
        min_length=1, description="Every video of the course, in the new order.",
    )


class VideoResponse(BaseModel):
    """Admin view: always carries the stored URL."""

    model_config = ConfigDict(from_attributes=True)

    video_id: UUID
    course_id: UUID
    title: str
    url: str
    video_type: VideoType
    duration_mins: int | None = None
    sort_order: int


class PlaylistVideoResponse(BaseModel):
    video_id: UUID
    title: str
    video_type: VideoType
    duration_mins: int | None = None
    sort_order: int
    url: str | None = Field(default=None, description="Hidden while the course is locked.")
    embed_url: str | None = None
    is_embedded: bool = False


class PlaylistResponse(BaseModel):
    course_id: UUID
    locked: bool
    price: Decimal
    payment_status: PaymentStatus | None = None
    free_mode_active: bool = False
    total_videos: int
    total_duration_mins: int
    videos: list[PlaylistVideoResponse]

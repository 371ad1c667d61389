"""Video playlist controller — maps service results to HTTP responses."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from academy.config import Settings
from academy.exceptions import (
    CourseNotFoundError,
    InvalidVideoOrderError,
    VideoNotFoundError,
)
from academy.models.course_video import CourseVideo
from academy.videos import service
from academy.videos.embed import is_embedded, resolve_embed_url
from academy.videos.schemas import (
    AddVideoRequest,
    PlaylistResponse,
    PlaylistVideoResponse,
    ReorderVideosRequest,
    UpdateVideoRequest,
    VideoResponse,
)

logger = logging.getLogger(__name__)


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, (CourseNotFoundError, VideoNotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, InvalidVideoOrderError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="video_ids must list every video of the course exactly once.",
        )
    logger.exception("Unexpected video error")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")


def _playlist_item(video: CourseVideo, can_watch: bool) -> PlaylistVideoResponse:
    item = PlaylistVideoResponse(
        video_id=video.video_id,
        title=video.title,
        video_type=video.video_type,
        duration_mins=video.duration_mins,
        sort_order=video.sort_order,
    )
    if can_watch:
        item.url = video.url
        item.embed_url = resolve_embed_url(video.url, video.video_type)
        item.is_embedded = is_embedded(video.url, video.video_type)
    return item


async def get_playlist(
    db: AsyncSession,
    course_id: UUID,
    user_id: UUID | None,
    settings: Settings,
    redis: Redis | None,
) -> PlaylistResponse:
    try:
        course, videos, decision, can_watch = await service.get_playlist(
            db, course_id, user_id, settings=settings, redis=redis,
        )
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
    return PlaylistResponse(
        course_id=course.course_id,
        locked=decision.locked,
        price=decision.price,
        payment_status=decision.payment_status,
        free_mode_active=decision.free_mode_active,
        total_videos=len(videos),
        total_duration_mins=sum(v.duration_mins or 0 for v in videos),
        videos=[_playlist_item(v, can_watch) for v in videos],
    )


async def add_video(
    db: AsyncSession, course_id: UUID, body: AddVideoRequest,
) -> VideoResponse:
    try:
        video = await service.add_video(db, course_id, **body.model_dump())
        return VideoResponse.model_validate(video)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def update_video(
    db: AsyncSession, course_id: UUID, video_id: UUID, body: UpdateVideoRequest,
) -> VideoResponse:
    try:
        video = await service.update_video(
            db, course_id, video_id, **body.model_dump(exclude_unset=True),
        )
        return VideoResponse.model_validate(video)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def delete_video(db: AsyncSession, course_id: UUID, video_id: UUID) -> None:
    try:
        await service.delete_video(db, course_id, video_id)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def reorder_videos(
    db: AsyncSession, course_id: UUID, body: ReorderVideosRequest,
) -> list[VideoResponse]:
    try:
        videos = await service.reorder_videos(db, course_id, body.video_ids)
        return [VideoResponse.model_validate(v) for v in videos]
    except Exception as exc:
        raise _handle_domain_error(exc) from exc

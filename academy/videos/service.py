"""Video playlist service — per-course ordered videos.

Pure business logic, no FastAPI imports.
"""

from __future__ import annotations

from uuid import UUID

from redis.asyncio import Redis
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.catalog.service import get_course_by_id
from academy.config import Settings
from academy.exceptions import InvalidVideoOrderError, VideoNotFoundError
from academy.learning.service import find_enrollment, refresh_course_progress
from academy.models.course import Course
from academy.models.course_video import CourseVideo
from academy.models.enums import VideoType
from academy.payments.gate import AccessDecision
from academy.payments.service import check_course_access
from academy.videos.embed import detect_video_type


async def list_videos(db: AsyncSession, course_id: UUID) -> list[CourseVideo]:
    stmt = (
        select(CourseVideo)
        .where(CourseVideo.course_id == course_id)
        .order_by(CourseVideo.sort_order, CourseVideo.created_at)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_playlist(
    db: AsyncSession,
    course_id: UUID,
    user_id: UUID | None,
    *,
    settings: Settings,
    redis: Redis | None = None,
) -> tuple[Course, list[CourseVideo], AccessDecision, bool]:
    """Course videos plus whether their URLs may be shown.

    Returns ``(course, videos, decision, can_watch)``. URLs stay hidden
    while the course is locked, except for users who enrolled while it
    was free.
    """
    course = await get_course_by_id(db, course_id)
    videos = await list_videos(db, course_id)
    decision = await check_course_access(
        db, course, user_id, settings=settings, redis=redis,
    )
    enrolled = (
        user_id is not None
        and await find_enrollment(db, user_id, course_id) is not None
    )
    return course, videos, decision, (not decision.locked) or enrolled


async def get_video(db: AsyncSession, course_id: UUID, video_id: UUID) -> CourseVideo:
    video = await db.get(CourseVideo, video_id)
    if video is None or video.course_id != course_id:
        raise VideoNotFoundError(str(video_id))
    return video


async def add_video(
    db: AsyncSession,
    course_id: UUID,
    *,
    title: str,
    url: str,
    video_type: VideoType | None = None,
    duration_mins: int | None = None,
) -> CourseVideo:
    await get_course_by_id(db, course_id)

    max_order = await db.scalar(
        select(func.max(CourseVideo.sort_order)).where(CourseVideo.course_id == course_id)
    )
    video = CourseVideo(
        course_id=course_id,
        title=title,
        url=url,
        video_type=video_type or detect_video_type(url),
        duration_mins=duration_mins,
        sort_order=(max_order + 1) if max_order is not None else 0,
    )
    db.add(video)
    await db.flush()
    return video


async def update_video(
    db: AsyncSession, course_id: UUID, video_id: UUID, **fields: object,
) -> CourseVideo:
    video = await get_video(db, course_id, video_id)
    for key, value in fields.items():
        if value is None and key in ("title", "url", "video_type"):
            continue
        if hasattr(video, key):
            setattr(video, key, value)
    if "url" in fields and fields.get("url") and fields.get("video_type") is None:
        video.video_type = detect_video_type(video.url)
    await db.flush()
    return video


async def delete_video(db: AsyncSession, course_id: UUID, video_id: UUID) -> None:
    video = await get_video(db, course_id, video_id)
    await db.delete(video)
    await db.flush()
    await refresh_course_progress(db, course_id)


async def reorder_videos(
    db: AsyncSession, course_id: UUID, video_ids: list[UUID],
) -> list[CourseVideo]:
    await get_course_by_id(db, course_id)
    videos = {v.video_id: v for v in await list_videos(db, course_id)}
    if len(video_ids) != len(videos) or set(video_ids) != set(videos):
        raise InvalidVideoOrderError()

    for idx, vid in enumerate(video_ids):
        videos[vid].sort_order = idx
    await db.flush()
    return sorted(videos.values(), key=lambda v: v.sort_order)

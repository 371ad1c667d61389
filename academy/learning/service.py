"""Learning service — enrollment and per-video progress tracking.

Pure business logic, no FastAPI imports.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from redis.asyncio import Redis
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.catalog.service import get_course_by_id
from academy.config import Settings
from academy.exceptions import (
    AlreadyEnrolledError,
    NotEnrolledError,
    PaymentRequiredError,
    VideoNotFoundError,
    WatchTimeNotReachedError,
)
from academy.models.course_video import CourseVideo
from academy.models.enrollment import Enrollment
from academy.models.video_progress import VideoProgress
from academy.payments.service import check_course_access

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


def calculate_progress(completed: int, total: int) -> Decimal:
    """Whole-number percentage, rounded half up."""
    if total <= 0:
        return Decimal("0")
    pct = (Decimal(completed) * HUNDRED / Decimal(total)).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP,
    )
    return min(pct, HUNDRED)


# ---------------------------------------------------------------------------
# Enrollment
# ---------------------------------------------------------------------------


async def find_enrollment(
    db: AsyncSession, user_id: UUID, course_id: UUID,
) -> Enrollment | None:
    stmt = select(Enrollment).where(
        Enrollment.user_id == user_id,
        Enrollment.course_id == course_id,
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def enroll(
    db: AsyncSession,
    course_id: UUID,
    user_id: UUID,
    *,
    settings: Settings,
    redis: Redis | None = None,
) -> Enrollment:
    course = await get_course_by_id(db, course_id)

    existing = await find_enrollment(db, user_id, course_id)
    if existing is not None:
        raise AlreadyEnrolledError()

    decision = await check_course_access(
        db, course, user_id, settings=settings, redis=redis,
    )
    if decision.locked:
        raise PaymentRequiredError(decision.price)

    enrollment = Enrollment(
        user_id=user_id,
        course_id=course_id,
        progress_pct=Decimal("0.00"),
    )
    db.add(enrollment)
    course.enrollment_count = (course.enrollment_count or 0) + 1
    await db.flush()
    await db.refresh(enrollment)
    logger.info(
        "User %s enrolled in course %s (free_mode=%s)",
        user_id, course_id, decision.free_mode_active,
    )
    return enrollment


async def _completed_video_ids(db: AsyncSession, enrollment: Enrollment) -> list[UUID]:
    stmt = (
        select(VideoProgress.video_id)
        .join(CourseVideo, CourseVideo.video_id == VideoProgress.video_id)
        .where(
            VideoProgress.enrollment_id == enrollment.enrollment_id,
            CourseVideo.course_id == enrollment.course_id,
        )
        .order_by(VideoProgress.completed_at)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def _count_videos(db: AsyncSession, course_id: UUID) -> int:
    stmt = select(func.count()).select_from(CourseVideo).where(CourseVideo.course_id == course_id)
    return await db.scalar(stmt) or 0


async def get_enrollment(
    db: AsyncSession, user_id: UUID, course_id: UUID,
) -> tuple[Enrollment, list[UUID], int]:
    """Enrollment, the ids of the videos completed in it and the course's video count."""
    enrollment = await find_enrollment(db, user_id, course_id)
    if enrollment is None:
        raise NotEnrolledError()
    completed = await _completed_video_ids(db, enrollment)
    total = await _count_videos(db, course_id)
    return enrollment, completed, total


async def list_my_enrollments(
    db: AsyncSession,
    user_id: UUID,
    *,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[Enrollment], int]:
    base = select(Enrollment).where(Enrollment.user_id == user_id)
    count_base = select(func.count()).select_from(Enrollment).where(Enrollment.user_id == user_id)

    total = await db.scalar(count_base) or 0
    stmt = base.order_by(Enrollment.created_at.desc()).limit(limit).offset(offset)
    result = await db.execute(stmt)
    return list(result.scalars().all()), total


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------


async def complete_video(
    db: AsyncSession,
    course_id: UUID,
    video_id: UUID,
    user_id: UUID,
    *,
    watched_secs: int = 0,
    ended: bool = False,
    min_watch_secs: int = 60,
) -> tuple[Enrollment, list[UUID], int]:
    """Mark a video as watched and recompute the enrollment's progress.

    Completing a video twice is a no-op. Embedded players report no end
    event, so a video counts once it ended or was watched for at least
    ``min_watch_secs``.
    """
    enrollment = await find_enrollment(db, user_id, course_id)
    if enrollment is None:
        raise NotEnrolledError()

    video = await db.get(CourseVideo, video_id)
    if video is None or video.course_id != course_id:
        raise VideoNotFoundError(str(video_id))

    completed = await _completed_video_ids(db, enrollment)
    if video_id not in completed:
        if not ended and watched_secs < min_watch_secs:
            raise WatchTimeNotReachedError(min_watch_secs)
        db.add(VideoProgress(enrollment_id=enrollment.enrollment_id, video_id=video_id))
        completed.append(video_id)

    total = await _count_videos(db, course_id)
    enrollment.progress_pct = calculate_progress(len(completed), total)
    if enrollment.progress_pct >= HUNDRED and enrollment.completed_at is None:
        enrollment.completed_at = datetime.now(timezone.utc)
        logger.info("User %s completed course %s", user_id, course_id)
    await db.flush()
    return enrollment, completed, total


async def refresh_course_progress(db: AsyncSession, course_id: UUID) -> int:
    """Recompute every enrollment of a course after its video list shrank.

    Returns the number of enrollments whose progress changed.
    """
    total = await _count_videos(db, course_id)
    enrollments = (await db.execute(
        select(Enrollment).where(Enrollment.course_id == course_id)
    )).scalars().all()

    changed = 0
    for enrollment in enrollments:
        completed = await _completed_video_ids(db, enrollment)
        progress = calculate_progress(len(completed), total)
        if progress == enrollment.progress_pct:
            continue
        enrollment.progress_pct = progress
        if progress >= HUNDRED and enrollment.completed_at is None:
            enrollment.completed_at = datetime.now(timezone.utc)
        changed += 1
    await db.flush()
    if changed:
        logger.info("Progress recomputed for %d enrollment(s) of course %s", changed, course_id)
    return changed

"""Learning controller — maps service results to HTTP responses, catches domain exceptions."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from academy.config import Settings
from academy.exceptions import (
    AlreadyEnrolledError,
    CourseNotFoundError,
    NotEnrolledError,
    PaymentRequiredError,
    VideoNotFoundError,
    WatchTimeNotReachedError,
)
from academy.learning import service
from academy.learning.schemas import (
    CompleteVideoRequest,
    EnrollmentProgressResponse,
    EnrollmentResponse,
)
from academy.pagination import OffsetPage

logger = logging.getLogger(__name__)


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, (CourseNotFoundError, VideoNotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, NotEnrolledError):
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="You are not enrolled in this course.",
        )
    if isinstance(exc, AlreadyEnrolledError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Already enrolled in this course.",
        )
    if isinstance(exc, PaymentRequiredError):
        return HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail=str(exc),
        )
    if isinstance(exc, WatchTimeNotReachedError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    logger.exception("Unexpected learning error")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")


def _progress_response(enrollment, completed: list[UUID], total: int) -> EnrollmentProgressResponse:
    return EnrollmentProgressResponse(
        **EnrollmentResponse.model_validate(enrollment).model_dump(),
        completed_video_ids=completed,
        total_videos=total,
    )


async def enroll(
    db: AsyncSession,
    course_id: UUID,
    user_id: UUID,
    settings: Settings,
    redis: Redis | None,
) -> EnrollmentResponse:
    try:
        enrollment = await service.enroll(
            db, course_id, user_id, settings=settings, redis=redis,
        )
        return EnrollmentResponse.model_validate(enrollment)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def get_enrollment(
    db: AsyncSession, course_id: UUID, user_id: UUID,
) -> EnrollmentProgressResponse:
    try:
        enrollment, completed, total = await service.get_enrollment(db, user_id, course_id)
        return _progress_response(enrollment, completed, total)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def complete_video(
    db: AsyncSession,
    course_id: UUID,
    video_id: UUID,
    user_id: UUID,
    body: CompleteVideoRequest,
    settings: Settings,
) -> EnrollmentProgressResponse:
    try:
        enrollment, completed, total = await service.complete_video(
            db,
            course_id,
            video_id,
            user_id,
            watched_secs=body.watched_secs,
            ended=body.ended,
            min_watch_secs=settings.video_min_watch_secs,
        )
        return _progress_response(enrollment, completed, total)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def list_my_enrollments(
    db: AsyncSession, user_id: UUID, *, limit: int, offset: int,
) -> OffsetPage[EnrollmentResponse]:
    enrollments, total = await service.list_my_enrollments(
        db, user_id, limit=limit, offset=offset,
    )
    return OffsetPage[EnrollmentResponse](
        items=[EnrollmentResponse.model_validate(e) for e in enrollments],
        total=total,
        limit=limit,
        offset=offset,
    )

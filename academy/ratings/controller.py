"""Ratings controller."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from academy.exceptions import AlreadyRatedError, CourseNotFoundError
from academy.ratings import service
from academy.ratings.schemas import (
    MyRatingResponse,
    RateCourseRequest,
    RatingResponse,
    RatingSummaryResponse,
)
from shared.models.user import CurrentUser

logger = logging.getLogger(__name__)


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, CourseNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, AlreadyRatedError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="You have already rated this course.",
        )
    logger.exception("Unexpected ratings error")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")


async def rate_course(
    db: AsyncSession, course_id: UUID, user: CurrentUser, body: RateCourseRequest,
) -> RatingResponse:
    try:
        row = await service.rate_course(
            db, course_id, user.id, user_name=user.display_name, rating=body.rating,
        )
        return RatingResponse.model_validate(row)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def get_ratings(
    db: AsyncSession, course_id: UUID, *, limit: int, offset: int,
) -> RatingSummaryResponse:
    try:
        rows, average, total = await service.get_ratings(
            db, course_id, limit=limit, offset=offset,
        )
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
    return RatingSummaryResponse(
        course_id=course_id,
        average=average,
        total=total,
        ratings=[RatingResponse.model_validate(r) for r in rows],
    )


async def get_my_rating(db: AsyncSession, course_id: UUID, user_id: UUID) -> MyRatingResponse:
    row = await service.get_my_rating(db, course_id, user_id)
    if row is None:
        return MyRatingResponse(has_rated=False)
    return MyRatingResponse(has_rated=True, rating=RatingResponse.model_validate(row))

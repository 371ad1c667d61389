"""Ratings router."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from academy.database import get_db
from academy.dependencies import get_current_user
from academy.ratings import controller
from academy.ratings.schemas import (
    MyRatingResponse,
    RateCourseRequest,
    RatingResponse,
    RatingSummaryResponse,
)
from shared.models.user import CurrentUser

router = APIRouter(tags=["Ratings"])


@router.get(
    "/courses/{course_id}/ratings",
    response_model=RatingSummaryResponse,
    summary="Course ratings (newest first) and average",
)
async def get_ratings(
    course_id: UUID,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
) -> RatingSummaryResponse:
    return await controller.get_ratings(db, course_id, limit=limit, offset=offset)


@router.get(
    "/courses/{course_id}/ratings/me",
    response_model=MyRatingResponse,
    summary="My rating for a course",
)
async def get_my_rating(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> MyRatingResponse:
    return await controller.get_my_rating(db, course_id, user.id)


@router.post(
    "/courses/{course_id}/ratings",
    response_model=RatingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Rate a course",
    description="One rating per user; it cannot be changed afterwards.",
)
async def rate_course(
    course_id: UUID,
    body: RateCourseRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> RatingResponse:
    return await controller.rate_course(db, course_id, user, body)

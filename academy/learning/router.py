"""Learning router — enrollment and video completion."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from academy.config import Settings
from academy.database import get_db
from academy.dependencies import get_current_user, get_redis, get_settings
from academy.learning import controller
from academy.learning.schemas import (
    CompleteVideoRequest,
    EnrollmentProgressResponse,
    EnrollmentResponse,
)
from academy.pagination import OffsetPage
from shared.models.user import CurrentUser

router = APIRouter(tags=["Learning"])


@router.post(
    "/courses/{course_id}/enroll",
    response_model=EnrollmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll in a course",
    description="402 while the course is locked for the caller, 409 when already enrolled.",
)
async def enroll(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
    redis: Redis | None = Depends(get_redis),
) -> EnrollmentResponse:
    return await controller.enroll(db, course_id, user.id, settings, redis)


@router.get(
    "/courses/{course_id}/enrollment",
    response_model=EnrollmentProgressResponse,
    summary="My progress in a course",
)
async def get_enrollment(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> EnrollmentProgressResponse:
    return await controller.get_enrollment(db, course_id, user.id)


@router.post(
    "/courses/{course_id}/videos/{video_id}/complete",
    response_model=EnrollmentProgressResponse,
    summary="Mark a video as watched",
    description="Requires the player's 'ended' event or the minimum watch time. "
    "Completing a video twice changes nothing.",
)
async def complete_video(
    course_id: UUID,
    video_id: UUID,
    body: CompleteVideoRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
) -> EnrollmentProgressResponse:
    return await controller.complete_video(db, course_id, video_id, user.id, body, settings)


@router.get(
    "/enrollments/me",
    response_model=OffsetPage[EnrollmentResponse],
    summary="List my enrollments",
)
async def list_my_enrollments(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> OffsetPage[EnrollmentResponse]:
    return await controller.list_my_enrollments(db, user.id, limit=limit, offset=offset)

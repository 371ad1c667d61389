"""Catalog router — HTTP layer only.

Journeys, course listing / search and course detail, plus the admin
endpoints that create and edit them.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from academy.catalog import controller
from academy.catalog.schemas import (
    CourseResponse,
    CreateCourseRequest,
    CreateJourneyRequest,
    JourneyResponse,
    JourneyWithCoursesResponse,
    UpdateCourseRequest,
)
from academy.database import get_db
from academy.dependencies import require_admin
from academy.pagination import OffsetPage
from shared.models.user import CurrentUser

router = APIRouter(tags=["Catalog"])


# ======================================================================
# Journeys
# ======================================================================


@router.get(
    "/journeys",
    response_model=list[JourneyWithCoursesResponse],
    summary="List journeys with their courses (landing page)",
)
async def list_journeys(
    db: AsyncSession = Depends(get_db),
) -> list[JourneyWithCoursesResponse]:
    return await controller.list_journeys(db)


@router.get(
    "/journeys/{journey_id}",
    response_model=JourneyWithCoursesResponse,
    summary="Get a journey and its courses",
)
async def get_journey(
    journey_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> JourneyWithCoursesResponse:
    return await controller.get_journey(db, journey_id)


@router.post(
    "/admin/journeys",
    response_model=JourneyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="[Admin] Create a journey",
)
async def create_journey(
    body: CreateJourneyRequest,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> JourneyResponse:
    return await controller.create_journey(db, body)


# ======================================================================
# Courses
# ======================================================================


@router.get(
    "/courses",
    response_model=OffsetPage[CourseResponse],
    summary="List / search courses",
    description="Case-insensitive search over title, subtitle, description and category.",
)
async def list_courses(
    search: str | None = Query(None, description="Search term."),
    journey_id: UUID | None = Query(None, description="Only courses of this journey."),
    limit: int = Query(20, ge=1, le=100, description="Items per page."),
    offset: int = Query(0, ge=0, description="Number of items to skip."),
    db: AsyncSession = Depends(get_db),
) -> OffsetPage[CourseResponse]:
    return await controller.list_courses(
        db, search=search, journey_id=journey_id, limit=limit, offset=offset,
    )


@router.get(
    "/courses/slug/{slug}",
    response_model=CourseResponse,
    summary="Get course by slug",
)
async def get_course_by_slug(
    slug: str,
    db: AsyncSession = Depends(get_db),
) -> CourseResponse:
    return await controller.get_course_by_slug(db, slug)


@router.get(
    "/courses/{course_id}",
    response_model=CourseResponse,
    summary="Get course by ID",
)
async def get_course(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> CourseResponse:
    return await controller.get_course(db, course_id)


@router.post(
    "/admin/courses",
    response_model=CourseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="[Admin] Create a course",
)
async def create_course(
    body: CreateCourseRequest,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> CourseResponse:
    return await controller.create_course(db, body)


@router.patch(
    "/admin/courses/{course_id}",
    response_model=CourseResponse,
    summary="[Admin] Update a course",
)
async def update_course(
    course_id: UUID,
    body: UpdateCourseRequest,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> CourseResponse:
    return await controller.update_course(db, course_id, body)

"""Catalog controller — maps service results to HTTP responses, catches domain exceptions."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from academy.catalog import service
from academy.catalog.schemas import (
    CourseResponse,
    CreateCourseRequest,
    CreateJourneyRequest,
    JourneyResponse,
    JourneyWithCoursesResponse,
    UpdateCourseRequest,
)
from academy.exceptions import (
    CourseNotFoundError,
    JourneyNotFoundError,
    SlugAlreadyExistsError,
)
from academy.pagination import OffsetPage

logger = logging.getLogger(__name__)


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, (CourseNotFoundError, JourneyNotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, SlugAlreadyExistsError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    logger.exception("Unexpected catalog error")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")


def _journey_with_courses(journey, courses) -> JourneyWithCoursesResponse:
    return JourneyWithCoursesResponse(
        **JourneyResponse.model_validate(journey).model_dump(),
        courses=[CourseResponse.model_validate(c) for c in courses],
    )


# ---------------------------------------------------------------------------
# Journeys
# ---------------------------------------------------------------------------


async def list_journeys(db: AsyncSession) -> list[JourneyWithCoursesResponse]:
    rows = await service.list_journeys_with_courses(db)
    return [_journey_with_courses(j, courses) for j, courses in rows]


async def get_journey(db: AsyncSession, journey_id: UUID) -> JourneyWithCoursesResponse:
    try:
        journey, courses = await service.list_journey_courses(db, journey_id)
        return _journey_with_courses(journey, courses)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def create_journey(db: AsyncSession, body: CreateJourneyRequest) -> JourneyResponse:
    try:
        journey = await service.create_journey(db, **body.model_dump())
        return JourneyResponse.model_validate(journey)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


# ---------------------------------------------------------------------------
# Courses
# ---------------------------------------------------------------------------


async def list_courses(
    db: AsyncSession,
    *,
    search: str | None,
    journey_id: UUID | None,
    limit: int,
    offset: int,
) -> OffsetPage[CourseResponse]:
    courses, total = await service.list_courses(
        db, search=search, journey_id=journey_id, limit=limit, offset=offset,
    )
    return OffsetPage[CourseResponse](
        items=[CourseResponse.model_validate(c) for c in courses],
        total=total,
        limit=limit,
        offset=offset,
    )


async def get_course(db: AsyncSession, course_id: UUID) -> CourseResponse:
    try:
        return CourseResponse.model_validate(await service.get_course_by_id(db, course_id))
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def get_course_by_slug(db: AsyncSession, slug: str) -> CourseResponse:
    try:
        return CourseResponse.model_validate(await service.get_course_by_slug(db, slug))
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def create_course(db: AsyncSession, body: CreateCourseRequest) -> CourseResponse:
    try:
        course = await service.create_course(db, **body.model_dump())
        return CourseResponse.model_validate(course)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def update_course(
    db: AsyncSession, course_id: UUID, body: UpdateCourseRequest,
) -> CourseResponse:
    try:
        course = await service.update_course(
            db, course_id, **body.model_dump(exclude_unset=True),
        )
        return CourseResponse.model_validate(course)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc

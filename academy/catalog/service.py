"""Catalog service — journeys and courses.

Pure business logic, no FastAPI imports.
"""

from __future__ import annotations

import re
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.exceptions import (
    CourseNotFoundError,
    JourneyNotFoundError,
    SlugAlreadyExistsError,
)
from academy.models.course import Course
from academy.models.journey import Journey


def slugify(title: str) -> str:
    slug = title.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s_]+", "-", slug)
    return slug.strip("-")


async def _ensure_free_slug(db: AsyncSession, model: type, slug: str) -> None:
    exists = await db.scalar(select(func.count()).select_from(model).where(model.slug == slug))
    if exists:
        raise SlugAlreadyExistsError(slug)


# ---------------------------------------------------------------------------
# Journeys
# ---------------------------------------------------------------------------


async def create_journey(
    db: AsyncSession,
    *,
    title: str,
    slug: str | None = None,
    description: str | None = None,
    image_url: str | None = None,
    sort_order: int = 0,
) -> Journey:
    resolved_slug = slug or slugify(title)
    await _ensure_free_slug(db, Journey, resolved_slug)
    journey = Journey(
        title=title,
        slug=resolved_slug,
        description=description,
        image_url=image_url,
        sort_order=sort_order,
    )
    db.add(journey)
    await db.flush()
    return journey


async def get_journey(db: AsyncSession, journey_id: UUID) -> Journey:
    journey = await db.get(Journey, journey_id)
    if journey is None:
        raise JourneyNotFoundError(str(journey_id))
    return journey


async def list_journeys_with_courses(
    db: AsyncSession,
) -> list[tuple[Journey, list[Course]]]:
    """Landing page: journeys in display order, each with its courses."""
    journeys = list((await db.execute(
        select(Journey).order_by(Journey.sort_order, Journey.title)
    )).scalars().all())
    if not journeys:
        return []

    courses = (await db.execute(
        select(Course)
        .where(Course.journey_id.in_([j.journey_id for j in journeys]))
        .order_by(Course.sort_order, Course.title)
    )).scalars().all()

    by_journey: dict[UUID, list[Course]] = {j.journey_id: [] for j in journeys}
    for course in courses:
        by_journey[course.journey_id].append(course)
    return [(j, by_journey[j.journey_id]) for j in journeys]


async def list_journey_courses(db: AsyncSession, journey_id: UUID) -> tuple[Journey, list[Course]]:
    journey = await get_journey(db, journey_id)
    courses = (await db.execute(
        select(Course)
        .where(Course.journey_id == journey_id)
        .order_by(Course.sort_order, Course.title)
    )).scalars().all()
    return journey, list(courses)


# ---------------------------------------------------------------------------
# Courses
# ---------------------------------------------------------------------------


async def create_course(
    db: AsyncSession,
    *,
    title: str,
    slug: str | None = None,
    subtitle: str | None = None,
    description: str | None = None,
    category: str | None = None,
    instructor_name: str | None = None,
    thumbnail_url: str | None = None,
    journey_id: UUID | None = None,
    sort_order: int = 0,
    is_finished: bool = False,
    payment_enabled: bool = False,
    price: Decimal | None = None,
) -> Course:
    resolved_slug = slug or slugify(title)
    await _ensure_free_slug(db, Course, resolved_slug)
    if journey_id is not None:
        await get_journey(db, journey_id)

    course = Course(
        title=title,
        slug=resolved_slug,
        subtitle=subtitle,
        description=description,
        category=category,
        instructor_name=instructor_name,
        thumbnail_url=thumbnail_url,
        journey_id=journey_id,
        sort_order=sort_order,
        is_finished=is_finished,
        payment_enabled=payment_enabled,
        price=price or Decimal("0"),
        enrollment_count=0,
    )
    db.add(course)
    await db.flush()
    return course


async def get_course_by_id(db: AsyncSession, course_id: UUID) -> Course:
    course = await db.get(Course, course_id)
    if course is None:
        raise CourseNotFoundError(str(course_id))
    return course


async def get_course_by_slug(db: AsyncSession, slug: str) -> Course:
    result = await db.execute(select(Course).where(Course.slug == slug))
    course = result.scalar_one_or_none()
    if course is None:
        raise CourseNotFoundError(slug)
    return course


async def list_courses(
    db: AsyncSession,
    *,
    search: str | None = None,
    journey_id: UUID | None = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[Course], int]:
    base = select(Course)
    count_base = select(func.count()).select_from(Course)

    filters = []
    if journey_id is not None:
        filters.append(Course.journey_id == journey_id)
    if search and search.strip():
        term = f"%{search.strip().lower()}%"
        filters.append(or_(
            func.lower(Course.title).like(term),
            func.lower(func.coalesce(Course.subtitle, "")).like(term),
            func.lower(func.coalesce(Course.description, "")).like(term),
            func.lower(func.coalesce(Course.category, "")).like(term),
        ))

    for f in filters:
        base = base.where(f)
        count_base = count_base.where(f)

    total = await db.scalar(count_base) or 0
    stmt = base.order_by(Course.sort_order, Course.title).limit(limit).offset(offset)
    result = await db.execute(stmt)
    return list(result.scalars().all()), total


# Columns a PATCH may omit but never null out
_REQUIRED_COURSE_FIELDS = frozenset({"title", "slug", "sort_order", "is_finished"})


async def update_course(db: AsyncSession, course_id: UUID, **fields: object) -> Course:
    course = await get_course_by_id(db, course_id)
    new_slug = fields.get("slug")
    if new_slug and new_slug != course.slug:
        await _ensure_free_slug(db, Course, str(new_slug))
    journey_id = fields.get("journey_id")
    if journey_id is not None:
        await get_journey(db, journey_id)  # type: ignore[arg-type]

    for key, value in fields.items():
        if value is None and key in _REQUIRED_COURSE_FIELDS:
            continue
        if hasattr(course, key):
            setattr(course, key, value)
    await db.flush()
    return course

"""Ratings service — one permanent 1..5 star rating per user per course."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from academy.catalog.service import get_course_by_id
from academy.exceptions import AlreadyRatedError
from academy.models.rating import CourseRating

logger = logging.getLogger(__name__)


async def get_my_rating(
    db: AsyncSession, course_id: UUID, user_id: UUID,
) -> CourseRating | None:
    stmt = select(CourseRating).where(
        CourseRating.course_id == course_id,
        CourseRating.user_id == user_id,
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def rate_course(
    db: AsyncSession,
    course_id: UUID,
    user_id: UUID,
    *,
    user_name: str,
    rating: int,
) -> CourseRating:
    await get_course_by_id(db, course_id)
    if await get_my_rating(db, course_id, user_id) is not None:
        raise AlreadyRatedError()

    row = CourseRating(
        course_id=course_id,
        user_id=user_id,
        user_name=user_name or "Usuário",
        rating=rating,
    )
    db.add(row)
    try:
        await db.flush()
    except IntegrityError as exc:
        # Concurrent duplicate lost the race against the unique constraint
        raise AlreadyRatedError() from exc
    logger.info("User %s rated course %s with %d", user_id, course_id, rating)
    return row


async def get_ratings(
    db: AsyncSession,
    course_id: UUID,
    *,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[CourseRating], float, int]:
    """Ratings newest first, the average (0 when unrated) and the total count."""
    await get_course_by_id(db, course_id)

    agg = await db.execute(
        select(func.avg(CourseRating.rating), func.count())
        .where(CourseRating.course_id == course_id)
    )
    average, total = agg.one()

    stmt = (
        select(CourseRating)
        .where(CourseRating.course_id == course_id)
        .order_by(CourseRating.created_at.desc())
        .limit(limit)
        .offset(offset)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all()), round(float(average or 0), 1), total or 0

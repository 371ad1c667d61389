"""Admin enrollment statistics."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.models.course import Course
from academy.models.enrollment import Enrollment


async def get_enrollment_stats(db: AsyncSession) -> list[tuple[Course, int]]:
    """Every course with its number of enrolled students, most popular first."""
    students = func.count(Enrollment.enrollment_id)
    stmt = (
        select(Course, students.label("students"))
        .outerjoin(Enrollment, Enrollment.course_id == Course.course_id)
        .group_by(Course.course_id)
        .order_by(students.desc(), Course.title)
    )
    result = await db.execute(stmt)
    return [(course, count) for course, count in result.all()]

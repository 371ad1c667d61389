"""Admin stats router."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from academy.database import get_db
from academy.dependencies import require_admin
from academy.stats import service
from academy.stats.schemas import CourseEnrollmentStats, EnrollmentStatsResponse
from shared.models.user import CurrentUser

router = APIRouter(prefix="/admin/stats", tags=["Admin — Stats"])


@router.get(
    "/enrollments",
    response_model=EnrollmentStatsResponse,
    summary="[Admin] Students per course",
)
async def get_enrollment_stats(
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> EnrollmentStatsResponse:
    rows = await service.get_enrollment_stats(db)
    courses = [
        CourseEnrollmentStats(
            course_id=course.course_id,
            slug=course.slug,
            title=course.title,
            students=students,
        )
        for course, students in rows
    ]
    return EnrollmentStatsResponse(
        courses=courses,
        total_students=sum(c.students for c in courses),
        generated_at=datetime.now(timezone.utc),
    )

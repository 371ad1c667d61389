from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class CourseEnrollmentStats(BaseModel):
    course_id: UUID
    slug: str
    title: str
    students: int


class EnrollmentStatsResponse(BaseModel):
    courses: list[CourseEnrollmentStats]
    total_students: int
    generated_at: datetime

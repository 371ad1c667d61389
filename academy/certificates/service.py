"""Certificate requests — issued by hand once a course is finished and paid.

A request needs a completed enrollment (100% progress) and an approved
certificate payment order. Admins then approve or reject it and mark it
as sent once the certificate has been mailed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.catalog.service import get_course_by_id
from academy.config import Settings
from academy.exceptions import (
    CertificateRequestNotFoundError,
    CourseNotCompletedError,
    InvalidStatusTransitionError,
    NotEnrolledError,
    PaymentRequiredError,
)
from academy.learning.service import HUNDRED, find_enrollment
from academy.models.certificate_request import CertificateRequest
from academy.models.enums import CertificateRequestStatus, PaymentType
from academy.payments.service import check_course_access

logger = logging.getLogger(__name__)

_REQUEST_TRANSITIONS: dict[CertificateRequestStatus, frozenset[CertificateRequestStatus]] = {
    CertificateRequestStatus.PENDING: frozenset(
        {CertificateRequestStatus.APPROVED, CertificateRequestStatus.REJECTED}
    ),
    CertificateRequestStatus.APPROVED: frozenset({CertificateRequestStatus.SENT}),
    CertificateRequestStatus.REJECTED: frozenset(),
    CertificateRequestStatus.SENT: frozenset(),
}


async def find_request(
    db: AsyncSession, user_id: UUID, course_id: UUID,
) -> CertificateRequest | None:
    stmt = select(CertificateRequest).where(
        CertificateRequest.user_id == user_id,
        CertificateRequest.course_id == course_id,
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def request_certificate(
    db: AsyncSession,
    course_id: UUID,
    user_id: UUID,
    *,
    full_name: str,
    email: str,
    settings: Settings,
) -> tuple[CertificateRequest, bool]:
    """Returns ``(request, already_exists)``; a repeat request is not an error."""
    course = await get_course_by_id(db, course_id)

    existing = await find_request(db, user_id, course_id)
    if existing is not None:
        return existing, True

    enrollment = await find_enrollment(db, user_id, course_id)
    if enrollment is None:
        raise NotEnrolledError()
    if enrollment.progress_pct < HUNDRED:
        raise CourseNotCompletedError()

    decision = await check_course_access(
        db, course, user_id, settings=settings, payment_type=PaymentType.CERTIFICATE,
    )
    if decision.locked:
        raise PaymentRequiredError(decision.price)

    request = CertificateRequest(
        user_id=user_id,
        course_id=course_id,
        full_name=full_name or "Aluno",
        email=email,
        course_title=course.title,
        status=CertificateRequestStatus.PENDING,
    )
    db.add(request)
    await db.flush()
    logger.info("Certificate requested by %s for course %s", user_id, course_id)
    return request, False


async def get_request(db: AsyncSession, request_id: UUID) -> CertificateRequest:
    request = await db.get(CertificateRequest, request_id)
    if request is None:
        raise CertificateRequestNotFoundError(str(request_id))
    return request


async def list_requests(
    db: AsyncSession,
    *,
    status: CertificateRequestStatus | None = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[CertificateRequest], int]:
    base = select(CertificateRequest)
    count_base = select(func.count()).select_from(CertificateRequest)
    if status is not None:
        base = base.where(CertificateRequest.status == status)
        count_base = count_base.where(CertificateRequest.status == status)

    total = await db.scalar(count_base) or 0
    stmt = base.order_by(CertificateRequest.created_at.desc()).limit(limit).offset(offset)
    result = await db.execute(stmt)
    return list(result.scalars().all()), total


async def transition_request(
    db: AsyncSession,
    request_id: UUID,
    admin_id: UUID,
    target: CertificateRequestStatus,
    *,
    reason: str | None = None,
) -> CertificateRequest:
    request = await get_request(db, request_id)
    if target not in _REQUEST_TRANSITIONS.get(request.status, frozenset()):
        raise InvalidStatusTransitionError(request.status.value, target.value)

    request.status = target
    request.reviewed_by = admin_id
    if target == CertificateRequestStatus.REJECTED:
        request.rejection_reason = reason or ""
    request.updated_at = datetime.now(timezone.utc)
    await db.flush()
    logger.info("Certificate request %s -> %s by %s", request_id, target.value, admin_id)
    return request

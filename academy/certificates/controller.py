"""Certificates controller — maps service results to HTTP responses, catches domain exceptions."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from academy.certificates import service
from academy.certificates.schemas import (
    CertificateRequestListResponse,
    CertificateRequestResponse,
    CertificateRequestResult,
    RequestCertificateRequest,
)
from academy.config import Settings
from academy.exceptions import (
    CertificateRequestNotFoundError,
    CourseNotCompletedError,
    CourseNotFoundError,
    InvalidStatusTransitionError,
    NotEnrolledError,
    PaymentRequiredError,
)
from academy.models.enums import CertificateRequestStatus
from shared.models.user import CurrentUser

logger = logging.getLogger(__name__)


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, (CourseNotFoundError, CertificateRequestNotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, NotEnrolledError):
        return HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not enrolled in this course.",
        )
    if isinstance(exc, CourseNotCompletedError):
        return HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Finish every video of the course before requesting a certificate.",
        )
    if isinstance(exc, PaymentRequiredError):
        return HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail="An approved certificate payment is required.",
        )
    if isinstance(exc, InvalidStatusTransitionError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    logger.exception("Unexpected certificates error")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")


async def request_certificate(
    db: AsyncSession,
    course_id: UUID,
    user: CurrentUser,
    body: RequestCertificateRequest | None,
    settings: Settings,
) -> CertificateRequestResult:
    full_name = (body.full_name if body else None) or user.name or (
        user.email.split("@")[0] if user.email else ""
    )
    try:
        request, already_exists = await service.request_certificate(
            db,
            course_id,
            user.id,
            full_name=full_name,
            email=user.email,
            settings=settings,
        )
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
    return CertificateRequestResult(
        request=CertificateRequestResponse.model_validate(request),
        already_exists=already_exists,
    )


async def get_my_request(
    db: AsyncSession, course_id: UUID, user_id: UUID,
) -> CertificateRequestResponse | None:
    request = await service.find_request(db, user_id, course_id)
    return CertificateRequestResponse.model_validate(request) if request else None


async def list_requests(
    db: AsyncSession,
    *,
    request_status: CertificateRequestStatus | None,
    limit: int,
    offset: int,
) -> CertificateRequestListResponse:
    requests, total = await service.list_requests(
        db, status=request_status, limit=limit, offset=offset,
    )
    return CertificateRequestListResponse(
        items=[CertificateRequestResponse.model_validate(r) for r in requests],
        total=total,
        limit=limit,
        offset=offset,
    )


async def transition_request(
    db: AsyncSession,
    request_id: UUID,
    admin_id: UUID,
    target: CertificateRequestStatus,
    reason: str | None = None,
) -> CertificateRequestResponse:
    try:
        request = await service.transition_request(
            db, request_id, admin_id, target, reason=reason,
        )
        return CertificateRequestResponse.model_validate(request)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc

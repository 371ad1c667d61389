"""Certificates router — user requests and the admin review lifecycle."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from academy.certificates import controller
from academy.certificates.schemas import (
    CertificateRequestListResponse,
    CertificateRequestResponse,
    CertificateRequestResult,
    RejectCertificateRequest,
    RequestCertificateRequest,
)
from academy.config import Settings
from academy.database import get_db
from academy.dependencies import get_current_user, get_settings, require_admin
from academy.models.enums import CertificateRequestStatus
from shared.models.user import CurrentUser

router = APIRouter(tags=["Certificates"])


@router.post(
    "/courses/{course_id}/certificate-request",
    response_model=CertificateRequestResult,
    status_code=status.HTTP_201_CREATED,
    summary="Request a certificate",
    description="Requires 100% progress and an approved certificate payment. "
    "Repeating the request returns the existing one with already_exists=true.",
)
async def request_certificate(
    course_id: UUID,
    body: RequestCertificateRequest | None = None,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
) -> CertificateRequestResult:
    return await controller.request_certificate(db, course_id, user, body, settings)


@router.get(
    "/courses/{course_id}/certificate-request",
    response_model=CertificateRequestResponse | None,
    summary="My certificate request for a course",
)
async def get_my_certificate_request(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> CertificateRequestResponse | None:
    return await controller.get_my_request(db, course_id, user.id)


# ======================================================================
# Admin
# ======================================================================


@router.get(
    "/admin/certificates/requests",
    response_model=CertificateRequestListResponse,
    summary="[Admin] List certificate requests",
)
async def list_certificate_requests(
    request_status: CertificateRequestStatus | None = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> CertificateRequestListResponse:
    return await controller.list_requests(
        db, request_status=request_status, limit=limit, offset=offset,
    )


@router.post(
    "/admin/certificates/requests/{request_id}/approve",
    response_model=CertificateRequestResponse,
    summary="[Admin] Approve a certificate request",
)
async def approve_certificate_request(
    request_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> CertificateRequestResponse:
    return await controller.transition_request(
        db, request_id, admin.id, CertificateRequestStatus.APPROVED,
    )


@router.post(
    "/admin/certificates/requests/{request_id}/reject",
    response_model=CertificateRequestResponse,
    summary="[Admin] Reject a certificate request",
)
async def reject_certificate_request(
    request_id: UUID,
    body: RejectCertificateRequest | None = None,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> CertificateRequestResponse:
    return await controller.transition_request(
        db,
        request_id,
        admin.id,
        CertificateRequestStatus.REJECTED,
        reason=body.reason if body else "",
    )


@router.post(
    "/admin/certificates/requests/{request_id}/sent",
    response_model=CertificateRequestResponse,
    summary="[Admin] Mark an approved certificate as sent",
)
async def mark_certificate_sent(
    request_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> CertificateRequestResponse:
    return await controller.transition_request(
        db, request_id, admin.id, CertificateRequestStatus.SENT,
    )

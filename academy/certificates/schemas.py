"""Certificate request Pydantic V2 schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from academy.models.enums import CertificateRequestStatus


class RequestCertificateRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    full_name: str | None = Field(
        default=None,
        max_length=200,
        description="Name printed on the certificate. Defaults to the account name.",
    )


class RejectCertificateRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    reason: str = Field(default="", max_length=1000)


class CertificateRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    request_id: UUID
    user_id: UUID
    course_id: UUID
    full_name: str
    email: str
    course_title: str
    status: CertificateRequestStatus
    reviewed_by: UUID | None = None
    rejection_reason: str | None = None
    created_at: datetime
    updated_at: datetime


class CertificateRequestResult(BaseModel):
    request: CertificateRequestResponse
    already_exists: bool = False


class CertificateRequestListResponse(BaseModel):
    items: list[CertificateRequestResponse]
    total: int
    limit: int
    offset: int

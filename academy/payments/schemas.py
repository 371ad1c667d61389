"""Payments domain Pydantic V2 schemas.

Covers access decisions, payment orders (claims), admin review and
course payment settings.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from academy.models.enums import PaymentStatus, PaymentType


class PaymentInstructionsResponse(BaseModel):
    """Bank-transfer details shown before the user claims a payment."""

    iban: str
    currency: str
    certificate_price: Decimal


class AccessResponse(BaseModel):
    course_id: UUID
    payment_type: PaymentType
    locked: bool
    price: Decimal
    currency: str
    payment_status: PaymentStatus | None = None
    free_mode_active: bool = False


class PaymentOrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    order_id: UUID
    user_id: UUID
    user_email: str
    user_name: str
    course_id: UUID
    course_title: str
    amount: Decimal
    currency: str
    payment_type: PaymentType
    status: PaymentStatus
    approved_by: UUID | None = None
    approved_at: datetime | None = None
    rejected_by: UUID | None = None
    rejected_at: datetime | None = None
    rejection_reason: str | None = None
    created_at: datetime
    updated_at: datetime


class UserPaymentStatusResponse(BaseModel):
    course_id: UUID
    payment_type: PaymentType
    status: PaymentStatus | None = None
    has_approved_payment: bool = False
    order: PaymentOrderResponse | None = None


class OrderStatusCounts(BaseModel):
    all: int = 0
    awaiting_verification: int = 0
    approved: int = 0
    rejected: int = 0
    pending: int = 0


class OrderListResponse(BaseModel):
    """Admin review list plus per-status counts for the filter tabs."""

    items: list[PaymentOrderResponse]
    total: int
    limit: int
    offset: int
    counts: OrderStatusCounts


class RejectOrderRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    reason: str = Field(default="", max_length=1000, description="Shown to the user.")


class CoursePaymentSettingsRequest(BaseModel):
    payment_enabled: bool
    price: Decimal | None = Field(default=None, ge=0)


class CoursePaymentSettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    course_id: UUID
    payment_enabled: bool
    price: Decimal

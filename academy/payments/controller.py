"""Payments controller — maps service results to HTTP responses, catches domain exceptions."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from academy.catalog.service import get_course_by_id
from academy.config import Settings
from academy.exceptions import (
    CourseNotFoundError,
    InvalidStatusTransitionError,
    OrderAwaitingVerificationError,
    OrderNotFoundError,
    PaymentAlreadyApprovedError,
    PaymentNotRequiredError,
)
from academy.models.enums import PaymentStatus, PaymentType
from academy.payments import service
from academy.payments.schemas import (
    AccessResponse,
    CoursePaymentSettingsRequest,
    CoursePaymentSettingsResponse,
    OrderListResponse,
    OrderStatusCounts,
    PaymentInstructionsResponse,
    PaymentOrderResponse,
    UserPaymentStatusResponse,
)
from shared.models.user import CurrentUser

logger = logging.getLogger(__name__)


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, (CourseNotFoundError, OrderNotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, PaymentNotRequiredError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="This course does not require payment.",
        )
    if isinstance(exc, PaymentAlreadyApprovedError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Payment already approved for this course.",
        )
    if isinstance(exc, OrderAwaitingVerificationError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A payment for this course is already awaiting verification.",
        )
    if isinstance(exc, InvalidStatusTransitionError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    logger.exception("Unexpected payments error")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")


def get_instructions(settings: Settings) -> PaymentInstructionsResponse:
    return PaymentInstructionsResponse(
        iban=settings.payment_iban,
        currency=settings.currency,
        certificate_price=settings.certificate_price,
    )


# ---------------------------------------------------------------------------
# User side
# ---------------------------------------------------------------------------


async def get_access(
    db: AsyncSession,
    course_id: UUID,
    user: CurrentUser | None,
    payment_type: PaymentType,
    settings: Settings,
    redis: Redis | None,
) -> AccessResponse:
    try:
        course = await get_course_by_id(db, course_id)
        decision = await service.check_course_access(
            db,
            course,
            user.id if user else None,
            settings=settings,
            payment_type=payment_type,
            redis=redis,
        )
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
    return AccessResponse(
        course_id=course_id,
        payment_type=payment_type,
        locked=decision.locked,
        price=decision.price,
        currency=settings.currency,
        payment_status=decision.payment_status,
        free_mode_active=decision.free_mode_active,
    )


async def create_order(
    db: AsyncSession,
    course_id: UUID,
    user: CurrentUser,
    payment_type: PaymentType,
    settings: Settings,
    redis: Redis | None,
) -> PaymentOrderResponse:
    try:
        order = await service.create_payment_order(
            db,
            course_id,
            user_id=user.id,
            user_email=user.email,
            user_name=user.display_name,
            settings=settings,
            payment_type=payment_type,
            redis=redis,
        )
        return PaymentOrderResponse.model_validate(order)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def get_my_orders(
    db: AsyncSession, course_id: UUID, user_id: UUID, payment_type: PaymentType | None,
) -> list[PaymentOrderResponse]:
    orders = await service.get_user_orders(db, user_id, course_id, payment_type)
    return [PaymentOrderResponse.model_validate(o) for o in orders]


async def get_payment_status(
    db: AsyncSession, course_id: UUID, user_id: UUID, payment_type: PaymentType,
) -> UserPaymentStatusResponse:
    current_status, order = await service.get_user_payment_status(
        db, user_id, course_id, payment_type,
    )
    approved = await service.has_approved_payment(db, user_id, course_id, payment_type)
    return UserPaymentStatusResponse(
        course_id=course_id,
        payment_type=payment_type,
        status=current_status,
        has_approved_payment=approved,
        order=PaymentOrderResponse.model_validate(order) if order else None,
    )


async def get_course_payment_settings(
    db: AsyncSession, course_id: UUID,
) -> CoursePaymentSettingsResponse:
    try:
        course = await get_course_by_id(db, course_id)
        return CoursePaymentSettingsResponse.model_validate(course)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


# ---------------------------------------------------------------------------
# Admin side
# ---------------------------------------------------------------------------


async def list_orders(
    db: AsyncSession,
    *,
    order_status: PaymentStatus | None,
    payment_type: PaymentType | None,
    limit: int,
    offset: int,
) -> OrderListResponse:
    orders, total = await service.list_orders(
        db, status=order_status, payment_type=payment_type, limit=limit, offset=offset,
    )
    by_status = await service.count_orders_by_status(db)
    counts = OrderStatusCounts(
        all=sum(by_status.values()),
        **{s.value: n for s, n in by_status.items()},
    )
    return OrderListResponse(
        items=[PaymentOrderResponse.model_validate(o) for o in orders],
        total=total,
        limit=limit,
        offset=offset,
        counts=counts,
    )


async def list_pending_orders(db: AsyncSession) -> list[PaymentOrderResponse]:
    orders = await service.list_pending_orders(db)
    return [PaymentOrderResponse.model_validate(o) for o in orders]


async def approve_order(
    db: AsyncSession, order_id: UUID, admin_id: UUID,
) -> PaymentOrderResponse:
    try:
        order = await service.approve_order(db, order_id, admin_id)
        return PaymentOrderResponse.model_validate(order)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def reject_order(
    db: AsyncSession, order_id: UUID, admin_id: UUID, reason: str,
) -> PaymentOrderResponse:
    try:
        order = await service.reject_order(db, order_id, admin_id, reason)
        return PaymentOrderResponse.model_validate(order)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def delete_order(db: AsyncSession, order_id: UUID) -> None:
    try:
        await service.delete_order(db, order_id)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def update_course_payment_settings(
    db: AsyncSession, course_id: UUID, body: CoursePaymentSettingsRequest,
) -> CoursePaymentSettingsResponse:
    try:
        course = await service.update_course_payment_settings(
            db, course_id, payment_enabled=body.payment_enabled, price=body.price,
        )
        return CoursePaymentSettingsResponse.model_validate(course)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc

"""Admin payment review router — requires the ADMIN role.

Orders move awaiting_verification -> approved | rejected. Deleting an
order revokes whatever access it granted.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from academy.database import get_db
from academy.dependencies import require_admin
from academy.models.enums import PaymentStatus, PaymentType
from academy.payments import controller
from academy.payments.schemas import (
    CoursePaymentSettingsRequest,
    CoursePaymentSettingsResponse,
    OrderListResponse,
    PaymentOrderResponse,
    RejectOrderRequest,
)
from shared.models.user import CurrentUser

router = APIRouter(prefix="/admin", tags=["Admin — Payments"])


@router.get(
    "/payments/orders",
    response_model=OrderListResponse,
    summary="List payment orders (newest first) with per-status counts",
)
async def list_orders(
    order_status: PaymentStatus | None = Query(None, alias="status"),
    payment_type: PaymentType | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> OrderListResponse:
    return await controller.list_orders(
        db,
        order_status=order_status,
        payment_type=payment_type,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/payments/orders/pending",
    response_model=list[PaymentOrderResponse],
    summary="Orders awaiting verification",
)
async def list_pending_orders(
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> list[PaymentOrderResponse]:
    return await controller.list_pending_orders(db)


@router.post(
    "/payments/orders/{order_id}/approve",
    response_model=PaymentOrderResponse,
    summary="Approve a payment order",
)
async def approve_order(
    order_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> PaymentOrderResponse:
    return await controller.approve_order(db, order_id, admin.id)


@router.post(
    "/payments/orders/{order_id}/reject",
    response_model=PaymentOrderResponse,
    summary="Reject a payment order",
)
async def reject_order(
    order_id: UUID,
    body: RejectOrderRequest | None = None,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> PaymentOrderResponse:
    reason = body.reason if body else ""
    return await controller.reject_order(db, order_id, admin.id, reason)


@router.delete(
    "/payments/orders/{order_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a payment order",
)
async def delete_order(
    order_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> None:
    await controller.delete_order(db, order_id)


@router.put(
    "/courses/{course_id}/payment-settings",
    response_model=CoursePaymentSettingsResponse,
    summary="Enable / disable payment and set the course price",
)
async def update_course_payment_settings(
    course_id: UUID,
    body: CoursePaymentSettingsRequest,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> CoursePaymentSettingsResponse:
    return await controller.update_course_payment_settings(db, course_id, body)

"""Payments service — order log, admin review transitions, access checks.

Pure business logic, no FastAPI imports.

A payment is a bank transfer the user reports as done ("I have paid");
an admin verifies it by hand and approves or rejects the order.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

from redis.asyncio import Redis
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.catalog.service import get_course_by_id
from academy.config import Settings
from academy.exceptions import (
    OrderAwaitingVerificationError,
    OrderNotFoundError,
    PaymentAlreadyApprovedError,
    PaymentNotRequiredError,
)
from academy.free_mode import service as free_mode_service
from academy.models.course import Course
from academy.models.enums import PaymentStatus, PaymentType
from academy.models.payment_order import PaymentOrder
from academy.payments.gate import (
    AccessDecision,
    CoursePricing,
    FreeModeWindow,
    check_transition,
    evaluate_access,
    latest_order,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Course payment settings
# ---------------------------------------------------------------------------


def pricing_for(
    course: Course, payment_type: PaymentType, certificate_price: Decimal,
) -> CoursePricing:
    if payment_type == PaymentType.CERTIFICATE:
        return CoursePricing(payment_enabled=True, price=certificate_price)
    return CoursePricing(
        payment_enabled=course.payment_enabled,
        price=course.price if course.price is not None else Decimal("0"),
    )


async def update_course_payment_settings(
    db: AsyncSession,
    course_id: UUID,
    *,
    payment_enabled: bool,
    price: Decimal | None,
) -> Course:
    course = await get_course_by_id(db, course_id)
    course.payment_enabled = payment_enabled
    course.price = price or Decimal("0")
    course.updated_at = datetime.now(timezone.utc)
    await db.flush()
    logger.info(
        "Payment settings for course %s: enabled=%s price=%s",
        course_id, payment_enabled, course.price,
    )
    return course


# ---------------------------------------------------------------------------
# Order log queries
# ---------------------------------------------------------------------------


async def get_user_orders(
    db: AsyncSession,
    user_id: UUID,
    course_id: UUID,
    payment_type: PaymentType | None = None,
) -> list[PaymentOrder]:
    """All orders of a user for a course, newest first."""
    stmt = select(PaymentOrder).where(
        PaymentOrder.user_id == user_id,
        PaymentOrder.course_id == course_id,
    )
    if payment_type is not None:
        stmt = stmt.where(PaymentOrder.payment_type == payment_type)
    stmt = stmt.order_by(PaymentOrder.created_at.desc())
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def has_approved_payment(
    db: AsyncSession,
    user_id: UUID,
    course_id: UUID,
    payment_type: PaymentType = PaymentType.COURSE,
) -> bool:
    stmt = select(func.count()).select_from(PaymentOrder).where(
        PaymentOrder.user_id == user_id,
        PaymentOrder.course_id == course_id,
        PaymentOrder.payment_type == payment_type,
        PaymentOrder.status == PaymentStatus.APPROVED,
    )
    return bool(await db.scalar(stmt))


async def get_user_payment_status(
    db: AsyncSession,
    user_id: UUID,
    course_id: UUID,
    payment_type: PaymentType = PaymentType.COURSE,
) -> tuple[PaymentStatus | None, PaymentOrder | None]:
    """Current status = status of the most recent order of that type."""
    orders = await get_user_orders(db, user_id, course_id, payment_type)
    current = latest_order(orders, payment_type)
    if current is None:
        return None, None
    return current.status, current


# ---------------------------------------------------------------------------
# Access gate
# ---------------------------------------------------------------------------


async def check_course_access(
    db: AsyncSession,
    course: Course,
    user_id: UUID | None,
    *,
    settings: Settings,
    payment_type: PaymentType = PaymentType.COURSE,
    redis: Redis | None = None,
    now: datetime | None = None,
) -> AccessDecision:
    """Fresh read of free mode, course pricing and the user's orders."""
    now = now or datetime.now(timezone.utc)
    free_mode: FreeModeWindow | None = None
    if payment_type == PaymentType.COURSE:
        free_mode = await free_mode_service.get_window(
            db, redis, cache_ttl_secs=settings.free_mode_cache_ttl_secs,
        )
    orders = (
        await get_user_orders(db, user_id, course.course_id, payment_type)
        if user_id is not None
        else []
    )
    return evaluate_access(
        pricing_for(course, payment_type, settings.certificate_price),
        free_mode,
        orders,
        payment_type=payment_type,
        now=now,
    )


# ---------------------------------------------------------------------------
# Claims
# ---------------------------------------------------------------------------


async def create_payment_order(
    db: AsyncSession,
    course_id: UUID,
    *,
    user_id: UUID,
    user_email: str,
    user_name: str,
    settings: Settings,
    payment_type: PaymentType = PaymentType.COURSE,
    redis: Redis | None = None,
) -> PaymentOrder:
    """Record a "I have paid" claim, awaiting admin verification.

    A rejected claim never blocks a new one; an approved or still-awaiting
    claim of the same type does.
    """
    course = await get_course_by_id(db, course_id)
    decision = await check_course_access(
        db, course, user_id, settings=settings, payment_type=payment_type, redis=redis,
    )
    if decision.has_approved_payment:
        raise PaymentAlreadyApprovedError()
    if not decision.locked:
        raise PaymentNotRequiredError()
    if decision.payment_status == PaymentStatus.AWAITING_VERIFICATION:
        raise OrderAwaitingVerificationError()

    now = datetime.now(timezone.utc)
    order = PaymentOrder(
        user_id=user_id,
        user_email=user_email,
        user_name=user_name or "Usuário",
        course_id=course.course_id,
        course_title=course.title,
        amount=decision.price,
        currency=settings.currency,
        payment_type=payment_type,
        status=PaymentStatus.AWAITING_VERIFICATION,
        created_at=now,
        updated_at=now,
    )
    db.add(order)
    await db.flush()
    logger.info(
        "Payment order %s (%s) claimed by %s for course %s",
        order.order_id, payment_type.value, user_id, course.course_id,
    )
    return order


# ---------------------------------------------------------------------------
# Admin review
# ---------------------------------------------------------------------------


async def get_order(db: AsyncSession, order_id: UUID) -> PaymentOrder:
    order = await db.get(PaymentOrder, order_id)
    if order is None:
        raise OrderNotFoundError(str(order_id))
    return order


async def list_orders(
    db: AsyncSession,
    *,
    status: PaymentStatus | None = None,
    payment_type: PaymentType | None = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[PaymentOrder], int]:
    base = select(PaymentOrder)
    count_base = select(func.count()).select_from(PaymentOrder)

    filters = []
    if status is not None:
        filters.append(PaymentOrder.status == status)
    if payment_type is not None:
        filters.append(PaymentOrder.payment_type == payment_type)
    for f in filters:
        base = base.where(f)
        count_base = count_base.where(f)

    total = await db.scalar(count_base) or 0
    stmt = base.order_by(PaymentOrder.created_at.desc()).limit(limit).offset(offset)
    result = await db.execute(stmt)
    return list(result.scalars().all()), total


async def list_pending_orders(db: AsyncSession) -> list[PaymentOrder]:
    """Every order awaiting verification, newest first; the review queue is not paged."""
    stmt = (
        select(PaymentOrder)
        .where(PaymentOrder.status == PaymentStatus.AWAITING_VERIFICATION)
        .order_by(PaymentOrder.created_at.desc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def count_orders_by_status(db: AsyncSession) -> dict[PaymentStatus, int]:
    stmt = select(PaymentOrder.status, func.count()).group_by(PaymentOrder.status)
    result = await db.execute(stmt)
    counts = {s: 0 for s in PaymentStatus}
    for status, count in result.all():
        counts[PaymentStatus(status)] = count
    return counts


async def approve_order(db: AsyncSession, order_id: UUID, admin_id: UUID) -> PaymentOrder:
    order = await get_order(db, order_id)
    check_transition(order.status, PaymentStatus.APPROVED)
    now = datetime.now(timezone.utc)
    order.status = PaymentStatus.APPROVED
    order.approved_by = admin_id
    order.approved_at = now
    order.updated_at = now
    await db.flush()
    logger.info("Payment order %s approved by %s", order_id, admin_id)
    return order


async def reject_order(
    db: AsyncSession, order_id: UUID, admin_id: UUID, reason: str = "",
) -> PaymentOrder:
    order = await get_order(db, order_id)
    check_transition(order.status, PaymentStatus.REJECTED)
    now = datetime.now(timezone.utc)
    order.status = PaymentStatus.REJECTED
    order.rejected_by = admin_id
    order.rejected_at = now
    order.rejection_reason = reason
    order.updated_at = now
    await db.flush()
    logger.info("Payment order %s rejected by %s: %s", order_id, admin_id, reason or "-")
    return order


async def delete_order(db: AsyncSession, order_id: UUID) -> None:
    """Remove the order entirely; an approved order's access goes with it."""
    order = await get_order(db, order_id)
    await db.delete(order)
    await db.flush()
    logger.info("Payment order %s deleted", order_id)

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from academy.catalog.service import create_course
from academy.exceptions import (
    InvalidStatusTransitionError,
    OrderAwaitingVerificationError,
    OrderNotFoundError,
    PaymentAlreadyApprovedError,
    PaymentNotRequiredError,
)
from academy.free_mode.service import update_settings as update_free_mode
from academy.models.enums import PaymentStatus, PaymentType
from academy.models.payment_order import PaymentOrder
from academy.payments import service


async def _course(db, price: str = "1000", payment_enabled: bool = True, title: str = "HTML"):
    return await create_course(
        db, title=title, payment_enabled=payment_enabled, price=Decimal(price),
    )


async def _claim(db, course, user_id, settings, payment_type=PaymentType.COURSE):
    return await service.create_payment_order(
        db,
        course.course_id,
        user_id=user_id,
        user_email="aluno@example.com",
        user_name="Aluno",
        settings=settings,
        payment_type=payment_type,
    )


@pytest.mark.asyncio
async def test_paid_course_is_locked_without_orders(db_session, settings) -> None:
    course = await _course(db_session)
    decision = await service.check_course_access(
        db_session, course, uuid.uuid4(), settings=settings,
    )
    assert decision.locked is True
    assert decision.price == Decimal("1000")
    assert decision.payment_status is None


@pytest.mark.asyncio
async def test_claim_records_awaiting_order(db_session, settings) -> None:
    course = await _course(db_session)
    user_id = uuid.uuid4()
    order = await _claim(db_session, course, user_id, settings)

    assert order.status == PaymentStatus.AWAITING_VERIFICATION
    assert order.amount == Decimal("1000")
    assert order.currency == "AOA"
    assert order.course_title == "HTML"

    status, current = await service.get_user_payment_status(db_session, user_id, course.course_id)
    assert status == PaymentStatus.AWAITING_VERIFICATION
    assert current.order_id == order.order_id


@pytest.mark.asyncio
async def test_second_claim_while_awaiting_is_rejected(db_session, settings) -> None:
    course = await _course(db_session)
    user_id = uuid.uuid4()
    await _claim(db_session, course, user_id, settings)
    with pytest.raises(OrderAwaitingVerificationError):
        await _claim(db_session, course, user_id, settings)


@pytest.mark.asyncio
async def test_claim_for_free_course_is_rejected(db_session, settings) -> None:
    course = await _course(db_session, payment_enabled=False)
    with pytest.raises(PaymentNotRequiredError):
        await _claim(db_session, course, uuid.uuid4(), settings)


@pytest.mark.asyncio
async def test_approve_unlocks_and_blocks_new_claims(db_session, settings) -> None:
    course = await _course(db_session)
    user_id, admin_id = uuid.uuid4(), uuid.uuid4()
    order = await _claim(db_session, course, user_id, settings)

    approved = await service.approve_order(db_session, order.order_id, admin_id)
    assert approved.status == PaymentStatus.APPROVED
    assert approved.approved_by == admin_id
    assert approved.approved_at is not None

    assert await service.has_approved_payment(db_session, user_id, course.course_id) is True
    decision = await service.check_course_access(db_session, course, user_id, settings=settings)
    assert decision.locked is False
    assert decision.payment_status == PaymentStatus.APPROVED

    with pytest.raises(PaymentAlreadyApprovedError):
        await _claim(db_session, course, user_id, settings)


@pytest.mark.asyncio
async def test_rejected_claim_can_be_resubmitted(db_session, settings) -> None:
    course = await _course(db_session)
    user_id = uuid.uuid4()
    first = await _claim(db_session, course, user_id, settings)
    await service.reject_order(db_session, first.order_id, uuid.uuid4(), "Comprovativo ilegível")
    first.created_at = datetime.now(timezone.utc) - timedelta(minutes=5)
    await db_session.flush()

    second = await _claim(db_session, course, user_id, settings)
    assert second.order_id != first.order_id

    orders = await service.get_user_orders(db_session, user_id, course.course_id)
    assert [o.order_id for o in orders] == [second.order_id, first.order_id]
    assert orders[1].status == PaymentStatus.REJECTED
    assert orders[1].rejection_reason == "Comprovativo ilegível"

    status, _ = await service.get_user_payment_status(db_session, user_id, course.course_id)
    assert status == PaymentStatus.AWAITING_VERIFICATION


@pytest.mark.asyncio
@pytest.mark.parametrize("first", ["approve", "reject"])
async def test_terminal_orders_cannot_transition(db_session, settings, first: str) -> None:
    course = await _course(db_session)
    order = await _claim(db_session, course, uuid.uuid4(), settings)
    admin_id = uuid.uuid4()
    if first == "approve":
        await service.approve_order(db_session, order.order_id, admin_id)
    else:
        await service.reject_order(db_session, order.order_id, admin_id)

    with pytest.raises(InvalidStatusTransitionError):
        await service.approve_order(db_session, order.order_id, admin_id)
    with pytest.raises(InvalidStatusTransitionError):
        await service.reject_order(db_session, order.order_id, admin_id)


@pytest.mark.asyncio
async def test_deleting_approved_order_relocks(db_session, settings) -> None:
    course = await _course(db_session)
    user_id = uuid.uuid4()
    order = await _claim(db_session, course, user_id, settings)
    await service.approve_order(db_session, order.order_id, uuid.uuid4())

    await service.delete_order(db_session, order.order_id)

    decision = await service.check_course_access(db_session, course, user_id, settings=settings)
    assert decision.locked is True
    assert decision.payment_status is None
    with pytest.raises(OrderNotFoundError):
        await service.get_order(db_session, order.order_id)


@pytest.mark.asyncio
async def test_missing_order_raises_not_found(db_session) -> None:
    with pytest.raises(OrderNotFoundError):
        await service.approve_order(db_session, uuid.uuid4(), uuid.uuid4())


@pytest.mark.asyncio
async def test_free_mode_unlocks_courses_but_not_certificates(db_session, settings) -> None:
    course = await _course(db_session)
    now = datetime.now(timezone.utc)
    await update_free_mode(
        db_session,
        uuid.uuid4(),
        is_enabled=True,
        start_at=now - timedelta(hours=1),
        end_at=now + timedelta(hours=1),
    )
    user_id = uuid.uuid4()

    course_decision = await service.check_course_access(
        db_session, course, user_id, settings=settings,
    )
    assert course_decision.locked is False
    assert course_decision.free_mode_active is True
    assert course_decision.price == Decimal("0")

    cert_decision = await service.check_course_access(
        db_session, course, user_id, settings=settings, payment_type=PaymentType.CERTIFICATE,
    )
    assert cert_decision.locked is True
    assert cert_decision.price == Decimal("1000")

    with pytest.raises(PaymentNotRequiredError):
        await _claim(db_session, course, user_id, settings)


@pytest.mark.asyncio
async def test_certificate_orders_are_independent_of_course_orders(db_session, settings) -> None:
    course = await _course(db_session, price="500")
    user_id = uuid.uuid4()
    course_order = await _claim(db_session, course, user_id, settings)
    await service.approve_order(db_session, course_order.order_id, uuid.uuid4())

    cert_order = await _claim(db_session, course, user_id, settings, PaymentType.CERTIFICATE)
    assert cert_order.amount == Decimal("1000")
    assert cert_order.payment_type == PaymentType.CERTIFICATE
    assert await service.has_approved_payment(
        db_session, user_id, course.course_id, PaymentType.CERTIFICATE,
    ) is False


@pytest.mark.asyncio
async def test_list_orders_filters_and_counts(db_session, settings) -> None:
    course = await _course(db_session)
    admin_id = uuid.uuid4()
    orders = [await _claim(db_session, course, uuid.uuid4(), settings) for _ in range(3)]
    await service.approve_order(db_session, orders[0].order_id, admin_id)
    await service.reject_order(db_session, orders[1].order_id, admin_id)

    pending = await service.list_pending_orders(db_session)
    assert [o.order_id for o in pending] == [orders[2].order_id]

    approved, total = await service.list_orders(db_session, status=PaymentStatus.APPROVED)
    assert total == 1
    assert approved[0].order_id == orders[0].order_id

    counts = await service.count_orders_by_status(db_session)
    assert counts[PaymentStatus.APPROVED] == 1
    assert counts[PaymentStatus.REJECTED] == 1
    assert counts[PaymentStatus.AWAITING_VERIFICATION] == 1
    assert counts[PaymentStatus.PENDING] == 0


@pytest.mark.asyncio
async def test_pending_queue_returns_every_awaiting_order(db_session) -> None:
    course = await _course(db_session)
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    db_session.add_all([
        PaymentOrder(
            user_id=uuid.uuid4(),
            user_name="Aluno",
            course_id=course.course_id,
            course_title=course.title,
            amount=Decimal("1000"),
            status=PaymentStatus.AWAITING_VERIFICATION,
            created_at=start + timedelta(minutes=i),
            updated_at=start + timedelta(minutes=i),
        )
        for i in range(1005)
    ])
    await db_session.flush()

    pending = await service.list_pending_orders(db_session)
    assert len(pending) == 1005
    assert pending[0].created_at > pending[-1].created_at


@pytest.mark.asyncio
async def test_update_course_payment_settings(db_session, settings) -> None:
    course = await _course(db_session, payment_enabled=False, price="0")
    updated = await service.update_course_payment_settings(
        db_session, course.course_id, payment_enabled=True, price=Decimal("900"),
    )
    assert updated.payment_enabled is True
    assert updated.price == Decimal("900")

    decision = await service.check_course_access(db_session, course, uuid.uuid4(), settings=settings)
    assert decision.locked is True
    assert decision.price == Decimal("900")

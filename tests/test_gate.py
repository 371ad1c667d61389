from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from academy.exceptions import InvalidStatusTransitionError
from academy.models.enums import PaymentStatus, PaymentType
from academy.payments.gate import (
    CoursePricing,
    FreeModeWindow,
    can_transition,
    check_transition,
    evaluate_access,
    latest_order,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
PAID = CoursePricing(payment_enabled=True, price=Decimal("1000"))


@dataclass
class FakeOrder:
    status: PaymentStatus
    payment_type: PaymentType = PaymentType.COURSE
    created_at: datetime = NOW


def _window(start_offset_h: int, end_offset_h: int, enabled: bool = True) -> FreeModeWindow:
    return FreeModeWindow(
        is_enabled=enabled,
        start_at=NOW + timedelta(hours=start_offset_h),
        end_at=NOW + timedelta(hours=end_offset_h),
    )


# ---------------------------------------------------------------------------
# Gate
# ---------------------------------------------------------------------------


def test_paid_course_without_orders_is_locked() -> None:
    decision = evaluate_access(PAID, FreeModeWindow(), [], now=NOW)
    assert decision.locked is True
    assert decision.price == Decimal("1000")
    assert decision.payment_status is None


def test_free_mode_inside_window_unlocks() -> None:
    decision = evaluate_access(PAID, _window(-1, 1), [], now=NOW)
    assert decision.locked is False
    assert decision.price == Decimal("0")
    assert decision.free_mode_active is True


def test_free_mode_bounds_are_inclusive() -> None:
    window = _window(0, 2)
    assert window.is_active(NOW) is True
    assert window.is_active(NOW + timedelta(hours=2)) is True
    assert window.is_active(NOW + timedelta(hours=2, seconds=1)) is False


def test_free_mode_disabled_or_outside_window_keeps_lock() -> None:
    assert evaluate_access(PAID, _window(-1, 1, enabled=False), [], now=NOW).locked is True
    assert evaluate_access(PAID, _window(1, 2), [], now=NOW).locked is True
    assert evaluate_access(PAID, _window(-3, -1), [], now=NOW).locked is True


def test_free_mode_with_missing_bound_is_inactive() -> None:
    window = FreeModeWindow(is_enabled=True, start_at=NOW - timedelta(hours=1), end_at=None)
    assert window.is_active(NOW) is False


def test_payment_disabled_or_zero_price_is_unlocked() -> None:
    disabled = CoursePricing(payment_enabled=False, price=Decimal("1000"))
    zero = CoursePricing(payment_enabled=True, price=Decimal("0"))
    assert evaluate_access(disabled, None, [], now=NOW).locked is False
    assert evaluate_access(disabled, None, [], now=NOW).price == Decimal("0")
    assert evaluate_access(zero, None, [], now=NOW).locked is False


@pytest.mark.parametrize("window", [None, FreeModeWindow(), _window(-1, 1)])
def test_approved_order_unlocks_regardless_of_free_mode(window) -> None:
    orders = [FakeOrder(PaymentStatus.APPROVED)]
    decision = evaluate_access(PAID, window, orders, now=NOW)
    assert decision.locked is False
    assert decision.has_approved_payment is True


def test_approved_order_of_other_type_does_not_unlock() -> None:
    orders = [FakeOrder(PaymentStatus.APPROVED, payment_type=PaymentType.CERTIFICATE)]
    decision = evaluate_access(PAID, None, orders, now=NOW)
    assert decision.locked is True
    assert decision.payment_status is None


def test_payment_status_is_latest_order() -> None:
    orders = [
        FakeOrder(PaymentStatus.REJECTED, created_at=NOW - timedelta(days=2)),
        FakeOrder(PaymentStatus.AWAITING_VERIFICATION, created_at=NOW - timedelta(hours=1)),
    ]
    decision = evaluate_access(PAID, None, orders, now=NOW)
    assert decision.locked is True
    assert decision.payment_status == PaymentStatus.AWAITING_VERIFICATION


def test_approved_older_order_unlocks_even_if_latest_is_rejected() -> None:
    orders = [
        FakeOrder(PaymentStatus.APPROVED, created_at=NOW - timedelta(days=2)),
        FakeOrder(PaymentStatus.REJECTED, created_at=NOW),
    ]
    decision = evaluate_access(PAID, None, orders, now=NOW)
    assert decision.locked is False
    assert decision.payment_status == PaymentStatus.REJECTED


def test_latest_order_handles_naive_timestamps() -> None:
    naive_old = FakeOrder(PaymentStatus.REJECTED, created_at=datetime(2026, 1, 1, 8, 0))
    aware_new = FakeOrder(PaymentStatus.APPROVED, created_at=NOW)
    assert latest_order([aware_new, naive_old], PaymentType.COURSE) is aware_new


# ---------------------------------------------------------------------------
# Order state machine
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (PaymentStatus.PENDING, PaymentStatus.AWAITING_VERIFICATION),
        (PaymentStatus.AWAITING_VERIFICATION, PaymentStatus.APPROVED),
        (PaymentStatus.AWAITING_VERIFICATION, PaymentStatus.REJECTED),
    ],
)
def test_allowed_transitions(current: PaymentStatus, target: PaymentStatus) -> None:
    assert can_transition(current, target) is True
    check_transition(current, target)


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (PaymentStatus.APPROVED, PaymentStatus.REJECTED),
        (PaymentStatus.APPROVED, PaymentStatus.AWAITING_VERIFICATION),
        (PaymentStatus.REJECTED, PaymentStatus.APPROVED),
        (PaymentStatus.REJECTED, PaymentStatus.AWAITING_VERIFICATION),
        (PaymentStatus.AWAITING_VERIFICATION, PaymentStatus.PENDING),
        (PaymentStatus.PENDING, PaymentStatus.APPROVED),
    ],
)
def test_forbidden_transitions(current: PaymentStatus, target: PaymentStatus) -> None:
    assert can_transition(current, target) is False
    with pytest.raises(InvalidStatusTransitionError):
        check_transition(current, target)

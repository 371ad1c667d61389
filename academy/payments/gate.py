"""Access gate and order state machine — pure functions, no I/O.

The gate decides whether paid content is locked for a user. Every input is
passed explicitly (course pricing, the free-mode window, the user's order
log and the clock), so a check is a deterministic function of a fresh read.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Protocol

from academy.exceptions import InvalidStatusTransitionError
from academy.models.enums import PaymentStatus, PaymentType

ZERO = Decimal("0")


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes (SQLite round-trips) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


class OrderLike(Protocol):
    status: PaymentStatus
    payment_type: PaymentType
    created_at: datetime


@dataclass(frozen=True)
class FreeModeWindow:
    is_enabled: bool = False
    start_at: datetime | None = None
    end_at: datetime | None = None

    def is_active(self, now: datetime) -> bool:
        if not self.is_enabled or self.start_at is None or self.end_at is None:
            return False
        return ensure_utc(self.start_at) <= ensure_utc(now) <= ensure_utc(self.end_at)

    def is_finished(self, now: datetime) -> bool:
        return (
            self.is_enabled
            and self.end_at is not None
            and ensure_utc(now) > ensure_utc(self.end_at)
        )


@dataclass(frozen=True)
class CoursePricing:
    payment_enabled: bool = False
    price: Decimal = ZERO

    @property
    def is_payable(self) -> bool:
        return self.payment_enabled and self.price > ZERO


@dataclass(frozen=True)
class AccessDecision:
    locked: bool
    price: Decimal
    payment_status: PaymentStatus | None
    free_mode_active: bool = False
    has_approved_payment: bool = False


# ---------------------------------------------------------------------------
# Order log queries
# ---------------------------------------------------------------------------


def _of_type(orders: Iterable[OrderLike], payment_type: PaymentType) -> list[OrderLike]:
    return [o for o in orders if o.payment_type == payment_type]


def latest_order(
    orders: Iterable[OrderLike], payment_type: PaymentType,
) -> OrderLike | None:
    """The current order of a (user, course, type) log is the newest by created_at."""
    matching = _of_type(orders, payment_type)
    if not matching:
        return None
    return max(matching, key=lambda o: ensure_utc(o.created_at))


def has_approved_order(orders: Iterable[OrderLike], payment_type: PaymentType) -> bool:
    return any(o.status == PaymentStatus.APPROVED for o in _of_type(orders, payment_type))


# ---------------------------------------------------------------------------
# Gate
# ---------------------------------------------------------------------------


def evaluate_access(
    pricing: CoursePricing,
    free_mode: FreeModeWindow | None,
    orders: Iterable[OrderLike],
    *,
    payment_type: PaymentType = PaymentType.COURSE,
    now: datetime,
) -> AccessDecision:
    """Combine pricing, free mode and the order log into a lock decision.

    ``free_mode`` is ``None`` for purchases free mode never waives
    (certificates). An approved order of the matching type unlocks
    regardless of free mode.
    """
    orders = list(orders)
    free_active = free_mode.is_active(now) if free_mode is not None else False
    approved = has_approved_order(orders, payment_type)
    current = latest_order(orders, payment_type)

    if free_active or not pricing.payment_enabled:
        price = ZERO
    else:
        price = pricing.price

    locked = pricing.is_payable and not free_active and not approved
    return AccessDecision(
        locked=locked,
        price=price,
        payment_status=current.status if current is not None else None,
        free_mode_active=free_active,
        has_approved_payment=approved,
    )


# ---------------------------------------------------------------------------
# Order state machine
# ---------------------------------------------------------------------------

_ORDER_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.AWAITING_VERIFICATION}),
    PaymentStatus.AWAITING_VERIFICATION: frozenset(
        {PaymentStatus.APPROVED, PaymentStatus.REJECTED}
    ),
    PaymentStatus.APPROVED: frozenset(),
    PaymentStatus.REJECTED: frozenset(),
}


def can_transition(current: PaymentStatus, target: PaymentStatus) -> bool:
    return target in _ORDER_TRANSITIONS.get(current, frozenset())


def check_transition(current: PaymentStatus, target: PaymentStatus) -> None:
    if not can_transition(current, target):
        raise InvalidStatusTransitionError(current.value, target.value)

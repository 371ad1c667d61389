"""Payments router — user-facing payment endpoints.

A user reads the bank-transfer instructions, pays outside the platform,
then claims the payment ("I have paid"). The claim waits for an admin
to verify it; see ``admin_router`` for the review side.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from academy.config import Settings
from academy.database import get_db
from academy.dependencies import (
    get_current_user,
    get_optional_user,
    get_redis,
    get_settings,
)
from academy.models.enums import PaymentType
from academy.payments import controller
from academy.payments.schemas import (
    AccessResponse,
    CoursePaymentSettingsResponse,
    PaymentInstructionsResponse,
    PaymentOrderResponse,
    UserPaymentStatusResponse,
)
from academy.rate_limit import limiter, order_claim_limit
from shared.models.user import CurrentUser

router = APIRouter(tags=["Payments"])


@router.get(
    "/payments/instructions",
    response_model=PaymentInstructionsResponse,
    summary="Bank-transfer instructions (IBAN, currency, certificate price)",
)
async def get_payment_instructions(
    settings: Settings = Depends(get_settings),
) -> PaymentInstructionsResponse:
    return controller.get_instructions(settings)


@router.get(
    "/courses/{course_id}/access",
    response_model=AccessResponse,
    summary="Is this course locked for me?",
    description="Combines the course payment settings, the free-mode window "
    "and the caller's payment orders. Anonymous callers see the locked state "
    "a user without orders would see.",
)
async def get_course_access(
    course_id: UUID,
    payment_type: PaymentType = Query(PaymentType.COURSE),
    db: AsyncSession = Depends(get_db),
    user: CurrentUser | None = Depends(get_optional_user),
    settings: Settings = Depends(get_settings),
    redis: Redis | None = Depends(get_redis),
) -> AccessResponse:
    return await controller.get_access(db, course_id, user, payment_type, settings, redis)


@router.get(
    "/courses/{course_id}/payment-settings",
    response_model=CoursePaymentSettingsResponse,
    summary="Course payment settings",
)
async def get_course_payment_settings(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> CoursePaymentSettingsResponse:
    return await controller.get_course_payment_settings(db, course_id)


@router.post(
    "/courses/{course_id}/orders",
    response_model=PaymentOrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Claim a course payment (\"I have paid\")",
    description="Creates an order awaiting admin verification. Rejected when the "
    "course is free (400), already paid for, or a claim is still awaiting "
    "verification (409). A rejected claim can be resubmitted.",
)
@limiter.limit(order_claim_limit)
async def create_course_order(
    request: Request,
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
    redis: Redis | None = Depends(get_redis),
) -> PaymentOrderResponse:
    return await controller.create_order(
        db, course_id, user, PaymentType.COURSE, settings, redis,
    )


@router.post(
    "/courses/{course_id}/certificate-orders",
    response_model=PaymentOrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Claim a certificate payment",
    description="Same rules as course claims, priced at the global certificate "
    "price. Free mode never waives certificates.",
)
@limiter.limit(order_claim_limit)
async def create_certificate_order(
    request: Request,
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
    redis: Redis | None = Depends(get_redis),
) -> PaymentOrderResponse:
    return await controller.create_order(
        db, course_id, user, PaymentType.CERTIFICATE, settings, redis,
    )


@router.get(
    "/courses/{course_id}/orders/me",
    response_model=list[PaymentOrderResponse],
    summary="My payment history for a course (newest first)",
)
async def get_my_orders(
    course_id: UUID,
    payment_type: PaymentType | None = Query(None),
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> list[PaymentOrderResponse]:
    return await controller.get_my_orders(db, course_id, user.id, payment_type)


@router.get(
    "/courses/{course_id}/payment-status",
    response_model=UserPaymentStatusResponse,
    summary="Status of my latest order for a course",
)
async def get_payment_status(
    course_id: UUID,
    payment_type: PaymentType = Query(PaymentType.COURSE),
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> UserPaymentStatusResponse:
    return await controller.get_payment_status(db, course_id, user.id, payment_type)

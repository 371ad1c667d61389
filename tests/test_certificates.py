import uuid
from decimal import Decimal

import pytest

from academy.catalog.service import create_course
from academy.certificates import service
from academy.exceptions import (
    CourseNotCompletedError,
    InvalidStatusTransitionError,
    NotEnrolledError,
    PaymentRequiredError,
)
from academy.learning.service import complete_video, enroll
from academy.models.enums import CertificateRequestStatus, PaymentType
from academy.payments.service import approve_order, create_payment_order
from academy.videos.service import add_video


async def _finished_course(db, user_id, settings):
    course = await create_course(db, title="HTML", payment_enabled=False)
    video = await add_video(db, course.course_id, title="Aula 1", url="https://youtu.be/x")
    await enroll(db, course.course_id, user_id, settings=settings)
    await complete_video(db, course.course_id, video.video_id, user_id, ended=True)
    return course


async def _pay_certificate(db, course, user_id, settings):
    order = await create_payment_order(
        db,
        course.course_id,
        user_id=user_id,
        user_email="aluno@example.com",
        user_name="Aluno",
        settings=settings,
        payment_type=PaymentType.CERTIFICATE,
    )
    await approve_order(db, order.order_id, uuid.uuid4())


async def _request(db, course, user_id, settings):
    return await service.request_certificate(
        db,
        course.course_id,
        user_id,
        full_name="Aluno Teste",
        email="aluno@example.com",
        settings=settings,
    )


@pytest.mark.asyncio
async def test_request_requires_enrollment(db_session, settings) -> None:
    course = await create_course(db_session, title="HTML")
    with pytest.raises(NotEnrolledError):
        await _request(db_session, course, uuid.uuid4(), settings)


@pytest.mark.asyncio
async def test_request_requires_full_progress(db_session, settings) -> None:
    user_id = uuid.uuid4()
    course = await create_course(db_session, title="CSS", payment_enabled=False)
    await add_video(db_session, course.course_id, title="Aula 1", url="https://youtu.be/x")
    await enroll(db_session, course.course_id, user_id, settings=settings)
    with pytest.raises(CourseNotCompletedError):
        await _request(db_session, course, user_id, settings)


@pytest.mark.asyncio
async def test_request_requires_approved_certificate_payment(db_session, settings) -> None:
    user_id = uuid.uuid4()
    course = await _finished_course(db_session, user_id, settings)
    with pytest.raises(PaymentRequiredError) as exc_info:
        await _request(db_session, course, user_id, settings)
    assert exc_info.value.price == Decimal("1000")


@pytest.mark.asyncio
async def test_request_lifecycle(db_session, settings) -> None:
    user_id, admin_id = uuid.uuid4(), uuid.uuid4()
    course = await _finished_course(db_session, user_id, settings)
    await _pay_certificate(db_session, course, user_id, settings)

    request, already_exists = await _request(db_session, course, user_id, settings)
    assert already_exists is False
    assert request.status == CertificateRequestStatus.PENDING
    assert request.course_title == "HTML"

    repeat, already_exists = await _request(db_session, course, user_id, settings)
    assert already_exists is True
    assert repeat.request_id == request.request_id

    with pytest.raises(InvalidStatusTransitionError):
        await service.transition_request(
            db_session, request.request_id, admin_id, CertificateRequestStatus.SENT,
        )

    approved = await service.transition_request(
        db_session, request.request_id, admin_id, CertificateRequestStatus.APPROVED,
    )
    assert approved.reviewed_by == admin_id
    sent = await service.transition_request(
        db_session, request.request_id, admin_id, CertificateRequestStatus.SENT,
    )
    assert sent.status == CertificateRequestStatus.SENT

    requests, total = await service.list_requests(
        db_session, status=CertificateRequestStatus.SENT,
    )
    assert total == 1 and requests[0].request_id == request.request_id


@pytest.mark.asyncio
async def test_rejected_request_is_terminal(db_session, settings) -> None:
    user_id, admin_id = uuid.uuid4(), uuid.uuid4()
    course = await _finished_course(db_session, user_id, settings)
    await _pay_certificate(db_session, course, user_id, settings)
    request, _ = await _request(db_session, course, user_id, settings)

    rejected = await service.transition_request(
        db_session,
        request.request_id,
        admin_id,
        CertificateRequestStatus.REJECTED,
        reason="Nome inválido",
    )
    assert rejected.rejection_reason == "Nome inválido"
    with pytest.raises(InvalidStatusTransitionError):
        await service.transition_request(
            db_session, request.request_id, admin_id, CertificateRequestStatus.APPROVED,
        )


@pytest.mark.asyncio
async def test_certificate_http_requires_completion(async_client, make_course, user_headers) -> None:
    course = await make_course(payment_enabled=False, price="0")
    base = f"/api/v1/courses/{course.course_id}"
    await async_client.post(f"{base}/enroll", headers=user_headers)

    # No videos: progress stays at 0
    resp = await async_client.post(f"{base}/certificate-request", headers=user_headers)
    assert resp.status_code == 403

    mine = await async_client.get(f"{base}/certificate-request", headers=user_headers)
    assert mine.status_code == 200
    assert mine.json() is None


@pytest.mark.asyncio
async def test_admin_certificate_review_http(
    async_client, make_course, admin_headers, user_headers,
) -> None:
    course = await make_course(payment_enabled=False, price="0")
    base = f"/api/v1/courses/{course.course_id}"
    video = (await async_client.post(
        f"/api/v1/admin/courses/{course.course_id}/videos",
        json={"title": "Aula 1", "url": "https://cdn.example.com/1.mp4"},
        headers=admin_headers,
    )).json()
    await async_client.post(f"{base}/enroll", headers=user_headers)
    done = await async_client.post(
        f"{base}/videos/{video['video_id']}/complete", json={"ended": True}, headers=user_headers,
    )
    assert float(done.json()["progress_pct"]) == 100

    unpaid = await async_client.post(f"{base}/certificate-request", headers=user_headers)
    assert unpaid.status_code == 402

    order = (await async_client.post(f"{base}/certificate-orders", headers=user_headers)).json()
    await async_client.post(
        f"/api/v1/admin/payments/orders/{order['order_id']}/approve", headers=admin_headers,
    )

    created = await async_client.post(
        f"{base}/certificate-request", json={"full_name": "Maria Silva"}, headers=user_headers,
    )
    assert created.status_code == 201
    assert created.json()["already_exists"] is False
    request_id = created.json()["request"]["request_id"]
    assert created.json()["request"]["full_name"] == "Maria Silva"

    listing = await async_client.get(
        "/api/v1/admin/certificates/requests", params={"status": "pending"}, headers=admin_headers,
    )
    assert listing.json()["total"] == 1

    sent_early = await async_client.post(
        f"/api/v1/admin/certificates/requests/{request_id}/sent", headers=admin_headers,
    )
    assert sent_early.status_code == 409

    approved = await async_client.post(
        f"/api/v1/admin/certificates/requests/{request_id}/approve", headers=admin_headers,
    )
    assert approved.json()["status"] == "approved"

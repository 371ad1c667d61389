import uuid
from decimal import Decimal

import pytest

from academy.catalog.service import create_course, get_course_by_id
from academy.exceptions import (
    AlreadyEnrolledError,
    NotEnrolledError,
    PaymentRequiredError,
    VideoNotFoundError,
    WatchTimeNotReachedError,
)
from academy.learning import service
from academy.learning.service import calculate_progress
from academy.videos.service import add_video


@pytest.mark.parametrize(
    ("completed", "total", "expected"),
    [(0, 3, "0"), (1, 3, "33"), (2, 3, "67"), (1, 2, "50"), (1, 8, "13"), (3, 3, "100"), (0, 0, "0")],
)
def test_calculate_progress(completed: int, total: int, expected: str) -> None:
    assert calculate_progress(completed, total) == Decimal(expected)


async def _free_course_with_videos(db, n: int = 3, title: str = "CSS"):
    course = await create_course(db, title=title, payment_enabled=False)
    videos = [
        await add_video(db, course.course_id, title=f"Aula {i}", url=f"https://youtu.be/v{i}")
        for i in range(n)
    ]
    return course, videos


@pytest.mark.asyncio
async def test_enroll_increments_counter(db_session, settings) -> None:
    course, _ = await _free_course_with_videos(db_session)
    user_id = uuid.uuid4()
    enrollment = await service.enroll(db_session, course.course_id, user_id, settings=settings)
    assert enrollment.progress_pct == Decimal("0")
    assert (await get_course_by_id(db_session, course.course_id)).enrollment_count == 1

    with pytest.raises(AlreadyEnrolledError):
        await service.enroll(db_session, course.course_id, user_id, settings=settings)


@pytest.mark.asyncio
async def test_enroll_in_locked_course_requires_payment(db_session, settings) -> None:
    course = await create_course(
        db_session, title="JavaScript", payment_enabled=True, price=Decimal("1500"),
    )
    with pytest.raises(PaymentRequiredError) as exc_info:
        await service.enroll(db_session, course.course_id, uuid.uuid4(), settings=settings)
    assert exc_info.value.price == Decimal("1500")


@pytest.mark.asyncio
async def test_complete_video_requires_watch_time(db_session, settings) -> None:
    course, videos = await _free_course_with_videos(db_session)
    user_id = uuid.uuid4()
    await service.enroll(db_session, course.course_id, user_id, settings=settings)

    with pytest.raises(WatchTimeNotReachedError):
        await service.complete_video(
            db_session, course.course_id, videos[0].video_id, user_id, watched_secs=30,
        )

    enrollment, completed, total = await service.complete_video(
        db_session, course.course_id, videos[0].video_id, user_id, watched_secs=60,
    )
    assert completed == [videos[0].video_id]
    assert total == 3
    assert enrollment.progress_pct == Decimal("33")


@pytest.mark.asyncio
async def test_ended_event_completes_immediately(db_session, settings) -> None:
    course, videos = await _free_course_with_videos(db_session, n=1)
    user_id = uuid.uuid4()
    await service.enroll(db_session, course.course_id, user_id, settings=settings)

    enrollment, _, _ = await service.complete_video(
        db_session, course.course_id, videos[0].video_id, user_id, ended=True,
    )
    assert enrollment.progress_pct == Decimal("100")
    assert enrollment.completed_at is not None


@pytest.mark.asyncio
async def test_complete_video_is_idempotent(db_session, settings) -> None:
    course, videos = await _free_course_with_videos(db_session, n=2)
    user_id = uuid.uuid4()
    await service.enroll(db_session, course.course_id, user_id, settings=settings)

    for _ in range(2):
        enrollment, completed, _ = await service.complete_video(
            db_session, course.course_id, videos[0].video_id, user_id, ended=True,
        )
    assert completed == [videos[0].video_id]
    assert enrollment.progress_pct == Decimal("50")

    # Already completed: no watch time needed the second time
    _, completed, _ = await service.complete_video(
        db_session, course.course_id, videos[0].video_id, user_id, watched_secs=0,
    )
    assert len(completed) == 1


@pytest.mark.asyncio
async def test_complete_video_requires_enrollment_and_matching_course(db_session, settings) -> None:
    course, videos = await _free_course_with_videos(db_session, n=1)
    other, other_videos = await _free_course_with_videos(db_session, n=1, title="HTML")
    user_id = uuid.uuid4()

    with pytest.raises(NotEnrolledError):
        await service.complete_video(
            db_session, course.course_id, videos[0].video_id, user_id, ended=True,
        )

    await service.enroll(db_session, course.course_id, user_id, settings=settings)
    with pytest.raises(VideoNotFoundError):
        await service.complete_video(
            db_session, course.course_id, other_videos[0].video_id, user_id, ended=True,
        )


@pytest.mark.asyncio
async def test_enrollment_http_flow(async_client, make_course, user_headers) -> None:
    course = await make_course(payment_enabled=False, price="0")
    base = f"/api/v1/courses/{course.course_id}"

    assert (await async_client.get(f"{base}/enrollment", headers=user_headers)).status_code == 404

    enroll = await async_client.post(f"{base}/enroll", headers=user_headers)
    assert enroll.status_code == 201
    assert (await async_client.post(f"{base}/enroll", headers=user_headers)).status_code == 409

    detail = await async_client.get(f"{base}/enrollment", headers=user_headers)
    assert detail.status_code == 200
    assert detail.json()["completed_video_ids"] == []
    assert detail.json()["total_videos"] == 0

    mine = await async_client.get("/api/v1/enrollments/me", headers=user_headers)
    assert mine.json()["total"] == 1


@pytest.mark.asyncio
async def test_enroll_http_locked_course_is_402(async_client, make_course, user_headers) -> None:
    course = await make_course()
    resp = await async_client.post(
        f"/api/v1/courses/{course.course_id}/enroll", headers=user_headers,
    )
    assert resp.status_code == 402

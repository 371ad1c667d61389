import uuid

import pytest

from tests.conftest import auth_headers


@pytest.mark.asyncio
async def test_enrollment_stats_sorted_by_students(
    async_client, make_course, admin_headers,
) -> None:
    popular = await make_course("HTML", payment_enabled=False, price="0")
    quiet = await make_course("CSS", payment_enabled=False, price="0")
    await make_course("JavaScript", payment_enabled=False, price="0")

    for _ in range(2):
        await async_client.post(
            f"/api/v1/courses/{popular.course_id}/enroll", headers=auth_headers(uuid.uuid4()),
        )
    await async_client.post(
        f"/api/v1/courses/{quiet.course_id}/enroll", headers=auth_headers(uuid.uuid4()),
    )

    resp = await async_client.get("/api/v1/admin/stats/enrollments", headers=admin_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert [c["title"] for c in data["courses"]] == ["HTML", "CSS", "JavaScript"]
    assert [c["students"] for c in data["courses"]] == [2, 1, 0]
    assert data["total_students"] == 3


@pytest.mark.asyncio
async def test_enrollment_stats_requires_admin(async_client, user_headers) -> None:
    resp = await async_client.get("/api/v1/admin/stats/enrollments", headers=user_headers)
    assert resp.status_code == 403

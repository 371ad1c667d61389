import pytest

from tests.conftest import auth_headers


@pytest.mark.asyncio
async def test_health(async_client) -> None:
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "service": "academy"}


@pytest.mark.asyncio
async def test_payment_instructions(async_client) -> None:
    resp = await async_client.get("/api/v1/payments/instructions")
    assert resp.status_code == 200
    data = resp.json()
    assert data["iban"] == "005500006717018310113"
    assert data["currency"] == "AOA"
    assert float(data["certificate_price"]) == 1000


@pytest.mark.asyncio
async def test_anonymous_access_check(async_client, make_course) -> None:
    course = await make_course()
    resp = await async_client.get(f"/api/v1/courses/{course.course_id}/access")
    assert resp.status_code == 200
    data = resp.json()
    assert data["locked"] is True
    assert float(data["price"]) == 1000
    assert data["payment_status"] is None


@pytest.mark.asyncio
async def test_claim_review_and_delete_flow(
    async_client, make_course, user_headers, admin_headers,
) -> None:
    course = await make_course()
    base = f"/api/v1/courses/{course.course_id}"

    claim = await async_client.post(f"{base}/orders", headers=user_headers)
    assert claim.status_code == 201
    order = claim.json()
    assert order["status"] == "awaiting_verification"
    assert order["user_name"] == "Aluno Teste"

    duplicate = await async_client.post(f"{base}/orders", headers=user_headers)
    assert duplicate.status_code == 409

    status_resp = await async_client.get(f"{base}/payment-status", headers=user_headers)
    assert status_resp.json()["status"] == "awaiting_verification"

    listing = await async_client.get(
        "/api/v1/admin/payments/orders",
        params={"status": "awaiting_verification"},
        headers=admin_headers,
    )
    assert listing.status_code == 200
    assert listing.json()["total"] == 1
    assert listing.json()["counts"]["awaiting_verification"] == 1
    assert listing.json()["counts"]["all"] == 1

    approve = await async_client.post(
        f"/api/v1/admin/payments/orders/{order['order_id']}/approve", headers=admin_headers,
    )
    assert approve.status_code == 200
    assert approve.json()["status"] == "approved"

    access = await async_client.get(f"{base}/access", headers=user_headers)
    assert access.json()["locked"] is False

    again = await async_client.post(
        f"/api/v1/admin/payments/orders/{order['order_id']}/reject", headers=admin_headers,
    )
    assert again.status_code == 409

    delete = await async_client.delete(
        f"/api/v1/admin/payments/orders/{order['order_id']}", headers=admin_headers,
    )
    assert delete.status_code == 204

    access = await async_client.get(f"{base}/access", headers=user_headers)
    assert access.json()["locked"] is True


@pytest.mark.asyncio
async def test_reject_with_reason(async_client, make_course, user_headers, admin_headers) -> None:
    course = await make_course()
    order = (await async_client.post(
        f"/api/v1/courses/{course.course_id}/orders", headers=user_headers,
    )).json()

    resp = await async_client.post(
        f"/api/v1/admin/payments/orders/{order['order_id']}/reject",
        json={"reason": "Valor incorreto"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["rejection_reason"] == "Valor incorreto"

    history = await async_client.get(
        f"/api/v1/courses/{course.course_id}/orders/me", headers=user_headers,
    )
    assert [o["status"] for o in history.json()] == ["rejected"]


@pytest.mark.asyncio
async def test_claim_on_free_course_is_bad_request(async_client, make_course, user_headers) -> None:
    course = await make_course(payment_enabled=False, price="0")
    resp = await async_client.post(
        f"/api/v1/courses/{course.course_id}/orders", headers=user_headers,
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_certificate_claim_uses_certificate_price(
    async_client, make_course, user_headers,
) -> None:
    course = await make_course(price="500")
    resp = await async_client.post(
        f"/api/v1/courses/{course.course_id}/certificate-orders", headers=user_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["payment_type"] == "certificate"
    assert float(resp.json()["amount"]) == 1000


@pytest.mark.asyncio
async def test_claims_require_authentication(async_client, make_course) -> None:
    course = await make_course()
    resp = await async_client.post(f"/api/v1/courses/{course.course_id}/orders")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_admin_endpoints_require_admin_role(async_client, user_headers) -> None:
    resp = await async_client.get("/api/v1/admin/payments/orders", headers=user_headers)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_missing_order_is_not_found(async_client, admin_headers) -> None:
    resp = await async_client.post(
        "/api/v1/admin/payments/orders/00000000-0000-0000-0000-000000000000/approve",
        headers=admin_headers,
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_admin_updates_course_payment_settings(
    async_client, make_course, admin_headers, user_id,
) -> None:
    course = await make_course(payment_enabled=False, price="0")
    resp = await async_client.put(
        f"/api/v1/admin/courses/{course.course_id}/payment-settings",
        json={"payment_enabled": True, "price": "1500"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["payment_enabled"] is True

    access = await async_client.get(
        f"/api/v1/courses/{course.course_id}/access", headers=auth_headers(user_id),
    )
    assert access.json()["locked"] is True
    assert float(access.json()["price"]) == 1500

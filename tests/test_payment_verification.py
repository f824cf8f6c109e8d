import httpx
import pytest

from app.core.http import get_http_transport
from app.core.exceptions import ConflictError, ValidationError
from app.services.billing_services.payment_verification_service import verify_payment
from main import app


async def decide(client, headers, order_id, decision, notes=None):
    body = {"decision": decision}
    if notes is not None:
        body["notes"] = notes
    return await client.post(f"/payments/{order_id}/verify", json=body, headers=headers)


async def test_reject_transfer_clears_proof_and_keeps_reason(client, admin, admin_headers, place_order):
    order = await place_order(payment_method="transfer")
    assert order["payment_proof_url"] == "https://img/proof.jpg"

    resp = await decide(client, admin_headers, order["id"], "reject", "blurry proof")

    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["status"] == "payment_rejected"
    assert data["payment_proof_url"] is None
    assert data["rejection_reason"] == "blurry proof"
    assert data["payment_rejected_by"] == admin.id
    assert data["payment_rejected_at"] is not None


async def test_approve_transfer_uses_default_notes(client, admin, admin_headers, place_order):
    order = await place_order(payment_method="transfer")

    resp = await decide(client, admin_headers, order["id"], "approve")

    data = resp.json()["data"]
    assert data["status"] == "paid"
    assert data["verification_notes"] == "Transfer payment confirmed"
    assert data["payment_verified_by"] == admin.id
    assert data["payment_verified_at"] is not None
    assert data["payment_proof_url"] == "https://img/proof.jpg"


async def test_approve_cash_with_own_notes(client, admin_headers, place_order):
    order = await place_order(payment_method="cash")

    resp = await decide(client, admin_headers, order["id"], "approve", "paid at the counter")

    assert resp.json()["data"]["verification_notes"] == "paid at the counter"


async def test_reject_cash_without_reason_uses_default(client, admin_headers, place_order):
    order = await place_order(payment_method="cash")

    resp = await decide(client, admin_headers, order["id"], "reject")

    assert resp.json()["data"]["rejection_reason"] == "Payment rejected"


async def test_reject_transfer_needs_a_reason(client, admin_headers, place_order):
    order = await place_order(payment_method="transfer")

    resp = await decide(client, admin_headers, order["id"], "reject", "   ")

    assert resp.status_code == 400
    resp = await client.get(f"/orders/{order['id']}", headers=admin_headers)
    assert resp.json()["data"]["status"] == "pending_payment"


async def test_second_decision_is_refused_and_changes_nothing(client, admin_headers, place_order):
    order = await place_order(payment_method="transfer")
    first = await decide(client, admin_headers, order["id"], "approve", "looks good")

    second = await decide(client, admin_headers, order["id"], "reject", "changed my mind")

    assert second.status_code == 409
    after = (await client.get(f"/orders/{order['id']}", headers=admin_headers)).json()["data"]
    assert after["status"] == "paid"
    assert after["verification_notes"] == "looks good"
    assert after["rejection_reason"] is None
    assert after["payment_verified_at"] == first.json()["data"]["payment_verified_at"]


async def test_notes_longer_than_500_characters(client, admin_headers, place_order):
    order = await place_order(payment_method="cash")

    resp = await decide(client, admin_headers, order["id"], "approve", "x" * 501)

    assert resp.status_code == 422


async def test_only_admin_decides(client, customer_headers, cashier_headers, place_order):
    order = await place_order(payment_method="cash")

    for headers in (customer_headers, cashier_headers):
        resp = await decide(client, headers, order["id"], "approve")
        assert resp.status_code == 403
        assert resp.json()["detail"] == "You are not authorized to perform this action"


async def test_unknown_order(client, admin_headers):
    resp = await decide(client, admin_headers, 999, "approve")

    assert resp.status_code == 404


async def test_service_rejects_unknown_decision(db, admin, place_order):
    order = await place_order(payment_method="cash")

    with pytest.raises(ValidationError):
        await verify_payment(db, order["id"], "maybe", None, admin)


async def test_service_refuses_decided_order(db, admin, place_order):
    order = await place_order(payment_method="cash")
    await verify_payment(db, order["id"], "approve", None, admin)

    with pytest.raises(ConflictError):
        await verify_payment(db, order["id"], "approve", None, admin)


async def test_payment_list_groups_and_counts(client, admin_headers, place_order):
    pending = await place_order(payment_method="transfer")
    approved = await place_order(payment_method="cash", price="20000")
    rejected = await place_order(payment_method="transfer", price="30000")
    await decide(client, admin_headers, approved["id"], "approve")
    await decide(client, admin_headers, rejected["id"], "reject", "wrong amount")

    resp = await client.get("/payments", params={"status_group": "pending"}, headers=admin_headers)

    body = resp.json()
    assert body["counts"] == {"pending": 1, "paid": 1, "cancelled": 1}
    assert [o["id"] for o in body["data"]] == [pending["id"]]

    resp = await client.get(
        "/payments", params={"status_group": "all", "payment_method": "cash"}, headers=admin_headers
    )
    assert [o["id"] for o in resp.json()["data"]] == [approved["id"]]


async def test_fulfillment_after_approval(client, admin_headers, cashier_headers, place_order):
    order = await place_order(payment_method="cash")

    early = await client.post(f"/orders/{order['id']}/advance", headers=cashier_headers)
    assert early.status_code == 409

    await decide(client, admin_headers, order["id"], "approve")
    statuses = []
    for _ in range(3):
        resp = await client.post(f"/orders/{order['id']}/advance", headers=cashier_headers)
        statuses.append(resp.json()["data"]["status"])

    assert statuses == ["processing", "ready_for_pickup", "completed"]
    done = await client.post(f"/orders/{order['id']}/advance", headers=cashier_headers)
    assert done.status_code == 409


async def test_status_endpoint_cannot_approve(client, cashier_headers, place_order):
    order = await place_order(payment_method="cash")

    resp = await client.patch(f"/orders/{order['id']}/status", json={"status": "paid"}, headers=cashier_headers)

    assert resp.status_code == 400


async def test_paid_order_cannot_be_cancelled_by_customer(client, admin_headers, customer_headers, place_order):
    order = await place_order(payment_method="cash")
    await decide(client, admin_headers, order["id"], "approve")

    resp = await client.post(f"/orders/{order['id']}/cancel", headers=customer_headers)

    assert resp.status_code == 409


async def test_new_proof_sends_rejected_order_back_to_verification(client, admin_headers, customer_headers, place_order):
    def cloudinary(request: httpx.Request):
        return httpx.Response(200, json={"secure_url": "https://res.cloudinary.com/demo/new-proof.jpg"})

    app.dependency_overrides[get_http_transport] = lambda: httpx.MockTransport(cloudinary)
    order = await place_order(payment_method="transfer")
    await decide(client, admin_headers, order["id"], "reject", "blurry proof")

    resp = await client.post(
        f"/orders/{order['id']}/payment-proof",
        files={"file": ("receipt.jpg", b"\xff\xd8\xff fake jpeg", "image/jpeg")},
        headers=customer_headers,
    )

    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["status"] == "pending_payment"
    assert data["payment_proof_url"] == "https://res.cloudinary.com/demo/new-proof.jpg"

    again = await decide(client, admin_headers, order["id"], "approve")
    assert again.json()["data"]["status"] == "paid"


@pytest.fixture
def cdn_calls():
    calls = []

    def cloudinary(request: httpx.Request):
        calls.append(request.url)
        return httpx.Response(200, json={"secure_url": "https://res.cloudinary.com/demo/unused.jpg"})

    app.dependency_overrides[get_http_transport] = lambda: httpx.MockTransport(cloudinary)
    return calls


async def upload_proof(client, headers, order_id):
    return await client.post(
        f"/orders/{order_id}/payment-proof",
        files={"file": ("receipt.jpg", b"\xff\xd8\xff fake jpeg", "image/jpeg")},
        headers=headers,
    )


async def test_cash_order_proof_is_refused_before_upload(client, customer_headers, place_order, cdn_calls):
    order = await place_order(payment_method="cash")

    resp = await upload_proof(client, customer_headers, order["id"])

    assert resp.status_code == 400
    assert cdn_calls == []


async def test_paid_order_proof_is_refused_before_upload(client, admin_headers, customer_headers, place_order, cdn_calls):
    order = await place_order(payment_method="transfer")
    await decide(client, admin_headers, order["id"], "approve")

    resp = await upload_proof(client, customer_headers, order["id"])

    assert resp.status_code == 409
    assert cdn_calls == []


async def test_status_endpoint_cannot_reopen_rejected_payment(
    client, admin_headers, cashier_headers, customer_headers, place_order,
):
    order = await place_order(payment_method="transfer")
    await decide(client, admin_headers, order["id"], "reject", "blurry proof")

    resp = await client.patch(
        f"/orders/{order['id']}/status", json={"status": "pending_payment"}, headers=cashier_headers
    )

    assert resp.status_code == 400
    current = await client.get(f"/orders/{order['id']}", headers=customer_headers)
    assert current.json()["data"]["status"] == "payment_rejected"

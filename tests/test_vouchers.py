async def test_required_field_cannot_be_set_to_null(client, db, admin_headers, make_voucher):
    voucher = await make_voucher(code="SAVE10")

    resp = await client.put(f"/vouchers/{voucher.id}", json={"is_active": None}, headers=admin_headers)

    assert resp.status_code == 400
    assert "is_active" in resp.json()["detail"]
    await db.refresh(voucher)
    assert voucher.is_active is True


async def test_null_usage_limit_removes_the_limit(client, db, admin_headers, make_voucher):
    voucher = await make_voucher(code="SAVE10", usage_limit=5)

    resp = await client.put(f"/vouchers/{voucher.id}", json={"usage_limit": None}, headers=admin_headers)

    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["usage_limit"] is None
    await db.refresh(voucher)
    assert voucher.usage_limit is None


async def test_voucher_management_is_admin_only(client, cashier_headers, make_voucher):
    voucher = await make_voucher(code="SAVE10")

    resp = await client.put(f"/vouchers/{voucher.id}", json={"is_active": False}, headers=cashier_headers)

    assert resp.status_code == 403

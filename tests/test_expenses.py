from decimal import Decimal


async def record(client, headers, **body):
    data = {"category": "supplies", "amount": "75000", "date": "2026-05-02", "description": "Pomade stock"}
    data.update(body)
    return await client.post("/expenses", json=data, headers=headers)


async def test_record_and_filter_expenses(client, admin, admin_headers):
    created = await record(client, admin_headers)
    await record(client, admin_headers, category="rent", amount="1500000", date="2026-06-01")

    assert created.status_code == 201, created.text
    data = created.json()["data"]
    assert Decimal(data["amount"]) == Decimal("75000")
    assert data["created_by"] == admin.id

    by_category = await client.get("/expenses", params={"category": "rent"}, headers=admin_headers)
    assert [e["category"] for e in by_category.json()["data"]] == ["rent"]

    by_range = await client.get(
        "/expenses", params={"start_date": "2026-05-01", "end_date": "2026-05-31"}, headers=admin_headers
    )
    assert [e["id"] for e in by_range.json()["data"]] == [data["id"]]


async def test_amount_must_be_positive(client, admin_headers):
    resp = await record(client, admin_headers, amount="0")

    assert resp.status_code == 422


async def test_unknown_category(client, admin_headers):
    resp = await record(client, admin_headers, category="snacks")

    assert resp.status_code == 422


async def test_update_and_delete(client, admin_headers):
    expense = (await record(client, admin_headers)).json()["data"]
    url = f"/expenses/{expense['id']}"

    updated = await client.put(url, json={"amount": "80000"}, headers=admin_headers)
    assert Decimal(updated.json()["data"]["amount"]) == Decimal("80000")
    assert updated.json()["data"]["category"] == "supplies"

    deleted = await client.delete(url, headers=admin_headers)
    assert deleted.status_code == 204
    assert (await client.get(url, headers=admin_headers)).status_code == 404


async def test_expenses_are_admin_only(client, cashier_headers):
    resp = await record(client, cashier_headers)

    assert resp.status_code == 403

from decimal import Decimal


async def test_admin_creates_product(client, admin_headers):
    resp = await client.post(
        "/products",
        json={"name": "Pomade", "price": "48000", "stock": 12, "category": "styling"},
        headers=admin_headers,
    )

    assert resp.status_code == 201, resp.text
    product = resp.json()["data"]
    assert Decimal(product["price"]) == Decimal("48000")
    assert product["is_active"] is True


async def test_duplicate_name_ignores_case(client, admin_headers, make_product):
    await make_product(name="Hair Tonic")

    resp = await client.post(
        "/products", json={"name": "hair tonic", "price": "10000"}, headers=admin_headers
    )

    assert resp.status_code == 409


async def test_negative_price_is_rejected(client, admin_headers):
    resp = await client.post("/products", json={"name": "Masker", "price": "-1"}, headers=admin_headers)

    assert resp.status_code == 422


async def test_customers_cannot_manage_products(client, customer_headers):
    resp = await client.post("/products", json={"name": "Masker", "price": "3000"}, headers=customer_headers)

    assert resp.status_code == 403


async def test_public_catalogue_search_and_hidden_products(client, make_product):
    await make_product(name="Hair Spray", price="60000")
    await make_product(name="Hair Powder", price="30000")
    await make_product(name="Serum Rambut", price="60000")
    await make_product(name="Hair Color", price="24000", is_active=False)

    resp = await client.get("/products", params={"search": "hair"})

    names = sorted(p["name"] for p in resp.json()["data"])
    assert names == ["Hair Powder", "Hair Spray"]


async def test_delete_hides_product_from_catalogue(client, admin_headers, make_product):
    product = await make_product(name="Masker", price="3000")

    resp = await client.delete(f"/products/{product.id}", headers=admin_headers)

    assert resp.json()["data"]["is_active"] is False
    assert (await client.get(f"/products/{product.id}")).status_code == 404
    managed = await client.get("/products/manage", headers=admin_headers)
    assert [p["name"] for p in managed.json()["data"]] == ["Masker"]


async def test_update_price(client, admin_headers, make_product):
    product = await make_product(name="Pomade", price="48000")

    resp = await client.put(f"/products/{product.id}", json={"price": "50000"}, headers=admin_headers)

    assert Decimal(resp.json()["data"]["price"]) == Decimal("50000")
    assert resp.json()["data"]["name"] == "Pomade"


async def test_low_stock_alerts(client, cashier_headers, make_product):
    await make_product(name="Pomade", stock=20)
    await make_product(name="Hair Tonic", stock=3)
    await make_product(name="Serum Rambut", stock=0)
    await make_product(name="Hair Spray", stock=1, is_active=False)

    resp = await client.get("/alerts/low-stock", headers=cashier_headers)

    assert resp.status_code == 200
    alerts = resp.json()["data"]
    assert [a["product_name"] for a in alerts] == ["Serum Rambut", "Hair Tonic"]
    assert [a["out_of_stock"] for a in alerts] == [True, False]


async def test_alerts_are_staff_only(client, customer_headers):
    resp = await client.get("/alerts/low-stock", headers=customer_headers)

    assert resp.status_code == 403

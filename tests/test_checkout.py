from decimal import Decimal

from sqlalchemy import select

from app.models.billing_models.cart_models import CartItem
from app.models.billing_models.voucher_models import Voucher

from conftest import CHECKOUT_FORM


async def fill_cart(client, headers, product, quantity):
    resp = await client.post("/cart/items", json={"product_id": product.id, "quantity": quantity}, headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


async def test_adding_same_product_twice_merges_lines(client, customer_headers, make_product):
    product = await make_product(price="48000")

    await fill_cart(client, customer_headers, product, 1)
    cart = await fill_cart(client, customer_headers, product, 2)

    assert len(cart["items"]) == 1
    assert cart["items"][0]["quantity"] == 3
    assert Decimal(cart["subtotal"]) == Decimal("144000")


async def test_inactive_product_cannot_be_added(client, customer_headers, make_product):
    product = await make_product(is_active=False)

    resp = await client.post("/cart/items", json={"product_id": product.id, "quantity": 1}, headers=customer_headers)

    assert resp.status_code == 404


async def test_quote_with_percentage_voucher(client, customer_headers, make_product, make_voucher):
    await make_voucher(code="SAVE10", discount_value="10", min_purchase=Decimal("100000"))
    await fill_cart(client, customer_headers, await make_product(price="100000"), 2)

    resp = await client.post("/cart/quote", json={"voucher_code": " save10 "}, headers=customer_headers)

    assert resp.status_code == 200
    quote = resp.json()
    assert Decimal(quote["subtotal"]) == Decimal("200000")
    assert Decimal(quote["discount"]) == Decimal("20000")
    assert Decimal(quote["tax"]) == Decimal("19800")
    assert Decimal(quote["total"]) == Decimal("199800")
    assert quote["voucher_code"] == "SAVE10"
    assert quote["voucher_error"] is None


async def test_quote_below_minimum_gives_no_discount(client, customer_headers, make_product, make_voucher):
    await make_voucher(code="BIG", min_purchase=Decimal("100000"))
    await fill_cart(client, customer_headers, await make_product(price="50000"), 1)

    resp = await client.post("/cart/quote", json={"voucher_code": "BIG"}, headers=customer_headers)

    quote = resp.json()
    assert quote["voucher_error"]["reason"] == "below_minimum"
    assert "Rp100.000" in quote["voucher_error"]["message"]
    assert Decimal(quote["discount"]) == Decimal("0")
    assert Decimal(quote["tax"]) == Decimal("5500")
    assert Decimal(quote["total"]) == Decimal("55500")


async def test_checkout_creates_order_counts_voucher_and_clears_cart(
    client, db, customer, customer_headers, make_product, make_voucher,
):
    voucher = await make_voucher(code="SAVE10", usage_limit=5)
    await fill_cart(client, customer_headers, await make_product(price="100000"), 2)

    resp = await client.post(
        "/orders/checkout",
        json=dict(CHECKOUT_FORM, payment_method="cash", voucher_code="SAVE10"),
        headers=customer_headers,
    )

    assert resp.status_code == 201, resp.text
    order = resp.json()["data"]
    assert order["status"] == "pending_payment"
    assert order["order_number"].startswith("ORD-")
    assert order["voucher_code"] == "SAVE10"
    assert Decimal(order["total"]) == Decimal("199800")
    assert order["items"][0]["quantity"] == 2
    assert order["payment_proof_url"] is None

    await db.refresh(voucher)
    assert voucher.used_count == 1
    remaining = (await db.execute(select(CartItem).where(CartItem.user_id == customer.id))).scalars().all()
    assert remaining == []


async def test_item_snapshot_survives_price_change(client, db, customer_headers, make_product):
    product = await make_product(name="Hair Tonic", price="10000")
    await fill_cart(client, customer_headers, product, 1)
    resp = await client.post("/orders/checkout", json=dict(CHECKOUT_FORM, payment_method="cash"), headers=customer_headers)
    order_id = resp.json()["data"]["id"]

    product.price = Decimal("99000")
    product.name = "Renamed"
    await db.commit()

    resp = await client.get(f"/orders/{order_id}", headers=customer_headers)
    item = resp.json()["data"]["items"][0]
    assert item["product_name"] == "Hair Tonic"
    assert Decimal(item["unit_price"]) == Decimal("10000")


async def test_checkout_with_exhausted_voucher_fails_and_keeps_cart(
    client, db, customer, customer_headers, make_product, make_voucher,
):
    await make_voucher(code="ONCE", usage_limit=1, used_count=1)
    await fill_cart(client, customer_headers, await make_product(), 1)

    resp = await client.post(
        "/orders/checkout",
        json=dict(CHECKOUT_FORM, payment_method="cash", voucher_code="ONCE"),
        headers=customer_headers,
    )

    assert resp.status_code == 400
    assert "limit" in resp.json()["detail"]
    cart = (await db.execute(select(CartItem).where(CartItem.user_id == customer.id))).scalars().all()
    assert len(cart) == 1


async def test_last_voucher_use_cannot_be_taken_twice(client, db, make_product, make_voucher):
    from conftest import auth_headers, create_user

    voucher = await make_voucher(code="LAST", usage_limit=1)
    first = auth_headers(await create_user(db, "first"))
    second = auth_headers(await create_user(db, "second"))
    product = await make_product()
    await fill_cart(client, first, product, 1)
    await fill_cart(client, second, product, 1)

    body = dict(CHECKOUT_FORM, payment_method="cash", voucher_code="LAST")
    ok = await client.post("/orders/checkout", json=body, headers=first)
    late = await client.post("/orders/checkout", json=body, headers=second)

    assert ok.status_code == 201
    assert late.status_code in (400, 409)
    await db.refresh(voucher)
    assert voucher.used_count == 1


async def test_checkout_with_empty_cart(client, customer_headers):
    resp = await client.post("/orders/checkout", json=dict(CHECKOUT_FORM, payment_method="cash"), headers=customer_headers)

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Your cart is empty"


async def test_unknown_voucher_blocks_checkout(client, customer_headers, make_product):
    await fill_cart(client, customer_headers, await make_product(), 1)

    resp = await client.post(
        "/orders/checkout",
        json=dict(CHECKOUT_FORM, payment_method="cash", voucher_code="NOPE"),
        headers=customer_headers,
    )

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Voucher code not found"


async def test_customer_cannot_see_someone_elses_order(client, db, place_order):
    from conftest import auth_headers, create_user

    order = await place_order(payment_method="cash")
    stranger = auth_headers(await create_user(db, "stranger"))

    resp = await client.get(f"/orders/{order['id']}", headers=stranger)

    assert resp.status_code == 404


async def test_customer_can_cancel_unpaid_order(client, customer_headers, place_order):
    order = await place_order(payment_method="cash")

    resp = await client.post(f"/orders/{order['id']}/cancel", headers=customer_headers)

    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "cancelled"


async def test_voucher_is_untouched_by_validation(client, db, customer_headers, make_product, make_voucher):
    voucher = await make_voucher(code="LOOK")
    await fill_cart(client, customer_headers, await make_product(), 1)

    for _ in range(3):
        await client.post("/cart/quote", json={"voucher_code": "LOOK"}, headers=customer_headers)
        await client.post("/vouchers/check", json={"voucher_code": "LOOK"}, headers=customer_headers)

    refreshed = (await db.execute(select(Voucher).where(Voucher.id == voucher.id))).scalar_one()
    await db.refresh(refreshed)
    assert refreshed.used_count == 0


async def test_out_of_stock_product_cannot_be_added(client, customer_headers, make_product):
    product = await make_product(name="Serum Rambut", stock=0)

    resp = await client.post("/cart/items", json={"product_id": product.id, "quantity": 1}, headers=customer_headers)

    assert resp.status_code == 400
    assert resp.json()["detail"] == "'Serum Rambut' is out of stock"


async def test_cart_quantity_cannot_exceed_stock(client, customer_headers, make_product):
    product = await make_product(name="Pomade", stock=3)

    too_many = await client.post("/cart/items", json={"product_id": product.id, "quantity": 4}, headers=customer_headers)
    assert too_many.status_code == 400
    assert "Only 3" in too_many.json()["detail"]

    await fill_cart(client, customer_headers, product, 2)
    merged = await client.post("/cart/items", json={"product_id": product.id, "quantity": 2}, headers=customer_headers)
    assert merged.status_code == 400

    cart = (await client.get("/cart", headers=customer_headers)).json()
    assert cart["items"][0]["quantity"] == 2


async def test_cart_update_cannot_exceed_stock(client, customer_headers, make_product):
    product = await make_product(stock=3)
    cart = await fill_cart(client, customer_headers, product, 1)
    item_id = cart["items"][0]["id"]

    resp = await client.put(f"/cart/items/{item_id}", json={"quantity": 5}, headers=customer_headers)

    assert resp.status_code == 400
    ok = await client.put(f"/cart/items/{item_id}", json={"quantity": 3}, headers=customer_headers)
    assert ok.json()["items"][0]["quantity"] == 3


async def test_checkout_refuses_product_that_sold_out(client, db, customer, customer_headers, make_product):
    product = await make_product(name="Hair Tonic", stock=5)
    await fill_cart(client, customer_headers, product, 2)
    product.stock = 0
    await db.commit()

    resp = await client.post("/orders/checkout", json=dict(CHECKOUT_FORM, payment_method="cash"), headers=customer_headers)

    assert resp.status_code == 400
    assert resp.json()["detail"] == "'Hair Tonic' is out of stock"
    cart = (await db.execute(select(CartItem).where(CartItem.user_id == customer.id))).scalars().all()
    assert len(cart) == 1

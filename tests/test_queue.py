from conftest import auth_headers, create_user


async def join(client, headers, barber_id=None):
    return await client.post("/queue/join", json={"barber_id": barber_id}, headers=headers)


async def test_positions_and_wait_estimates(client, db):
    first = auth_headers(await create_user(db, "andi"))
    second = auth_headers(await create_user(db, "citra"))

    a = (await join(client, first)).json()["data"]
    b = (await join(client, second)).json()["data"]

    assert (a["position"], a["estimated_wait_minutes"]) == (1, 20)
    assert (b["position"], b["estimated_wait_minutes"]) == (2, 40)


async def test_customer_cannot_join_twice(client, customer_headers):
    await join(client, customer_headers)

    resp = await join(client, customer_headers)

    assert resp.status_code == 409


async def test_leaving_frees_the_spot_but_not_the_number(client, db):
    first = auth_headers(await create_user(db, "andi"))
    second = auth_headers(await create_user(db, "citra"))
    await join(client, first)
    await join(client, second)

    left = await client.post("/queue/leave", headers=first)
    assert left.json()["data"]["status"] == "left"

    overview = (await client.get("/queue", headers=second)).json()
    assert [e["position"] for e in overview["waiting"]] == [2]
    assert overview["my_entry"]["estimated_wait_minutes"] == 20

    rejoined = (await join(client, first)).json()["data"]
    assert rejoined["position"] == 3


async def test_leave_without_entry(client, customer_headers):
    resp = await client.post("/queue/leave", headers=customer_headers)

    assert resp.status_code == 404


async def test_staff_calls_and_serves_in_order(client, db, cashier_headers):
    first = auth_headers(await create_user(db, "andi"))
    second = auth_headers(await create_user(db, "citra"))
    await join(client, first)
    await join(client, second)

    called = (await client.post("/queue/call-next", headers=cashier_headers)).json()["data"]
    assert called["position"] == 1
    assert called["status"] == "called"

    served = await client.post(f"/queue/{called['id']}/served", headers=cashier_headers)
    assert served.json()["data"]["status"] == "served"

    again = await client.post(f"/queue/{called['id']}/served", headers=cashier_headers)
    assert again.status_code == 409

    overview = (await client.get("/queue", headers=second)).json()
    assert overview["my_entry"]["position"] == 2
    assert overview["my_entry"]["estimated_wait_minutes"] == 20


async def test_call_next_on_empty_queue(client, cashier_headers):
    resp = await client.post("/queue/call-next", headers=cashier_headers)

    assert resp.status_code == 404


async def test_customers_cannot_call_next(client, customer_headers):
    resp = await client.post("/queue/call-next", headers=customer_headers)

    assert resp.status_code == 403

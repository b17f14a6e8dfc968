import pytest

from conftest import create_order, receive


async def receive_all(client, catalog, order):
    res = await receive(
        client,
        order["id"],
        catalog["warehouse"]["id"],
        [
            {"articleId": catalog["bolts"]["id"], "quantity": 10},
            {"articleId": catalog["nuts"]["id"], "quantity": 5},
        ],
    )
    assert res.status_code == 201, res.text
    return res.json()


async def pay(client, order_id, amount, **extra):
    payload = {"amount": amount, "date": "2024-06-10"}
    payload.update(extra)
    return await client.post(f"/api/orders/{order_id}/payments", json=payload)


class TestRecordPayment:
    """POST /api/orders/{id}/payments"""

    async def test_full_payment_flow(self, client, catalog, thousand_order):
        order_id = thousand_order["id"]
        await receive_all(client, catalog, thousand_order)

        res = await pay(client, order_id, 400, method="transfer", reference="TRX-1")
        assert res.status_code == 201
        body = res.json()
        assert body["totalPaid"] == 400.0
        assert body["remaining"] == 600.0
        assert body["status"] == "PartiallyPaid"
        assert body["payments"][0]["method"] == "transfer"

        order = (await client.get(f"/api/orders/{order_id}")).json()
        assert order["status"] == "Partially Paid"
        assert order["paymentStatus"] == "PartiallyPaid"

        res = await pay(client, order_id, 600)
        assert res.status_code == 201
        assert res.json()["remaining"] == 0.0
        assert res.json()["status"] == "Paid"

        order = (await client.get(f"/api/orders/{order_id}")).json()
        assert order["status"] == "Finalized"

        res = await pay(client, order_id, 0.01)
        assert res.status_code == 409
        assert res.json()["kind"] == "AmountExceedsBalance"

        summary = (await client.get(f"/api/orders/{order_id}/payments")).json()
        assert summary["totalPaid"] == 1000.0
        assert len(summary["payments"]) == 2

    async def test_partial_reception_blocks_payment(self, client, catalog, thousand_order):
        res = await receive(
            client,
            thousand_order["id"],
            catalog["warehouse"]["id"],
            [
                {"articleId": catalog["bolts"]["id"], "quantity": 4},
                {"articleId": catalog["nuts"]["id"], "quantity": 5},
            ],
        )
        assert res.status_code == 201
        assert res.json()["receiving"]["totalPending"] == 6.0

        res = await pay(client, thousand_order["id"], 100)
        assert res.status_code == 409
        assert res.json()["kind"] == "ReceivingIncomplete"

        summary = (await client.get(f"/api/orders/{thousand_order['id']}/payments")).json()
        assert summary["payments"] == []

    async def test_receiving_checked_before_amount(self, client, thousand_order):
        res = await pay(client, thousand_order["id"], -10)
        assert res.status_code == 409
        assert res.json()["kind"] == "ReceivingIncomplete"

    async def test_invalid_amounts(self, client, catalog, thousand_order):
        await receive_all(client, catalog, thousand_order)
        for amount in [0, -1, "abc", None]:
            res = await pay(client, thousand_order["id"], amount)
            assert res.status_code == 422, amount
            assert res.json()["kind"] == "InvalidAmount"

    async def test_amount_too_large_to_store(self, client, catalog, thousand_order):
        await receive_all(client, catalog, thousand_order)
        for amount in ["1e30", 1e30, "1000000000000"]:
            res = await pay(client, thousand_order["id"], amount)
            assert res.status_code == 422, amount
            assert res.json()["kind"] == "InvalidAmount"

    @pytest.mark.parametrize("literal", ["1e999", "-1e999", "NaN", "Infinity"])
    async def test_non_finite_amount(self, client, catalog, thousand_order, literal):
        await receive_all(client, catalog, thousand_order)
        res = await client.post(
            f"/api/orders/{thousand_order['id']}/payments",
            content=f'{{"amount": {literal}, "date": "2024-06-10"}}',
            headers={"Content-Type": "application/json"},
        )
        assert res.status_code == 422
        assert res.json()["kind"] == "InvalidAmount"

        summary = (await client.get(f"/api/orders/{thousand_order['id']}/payments")).json()
        assert summary["payments"] == []

    async def test_overpayment_is_rejected_without_writing(self, client, catalog, thousand_order):
        await receive_all(client, catalog, thousand_order)
        res = await pay(client, thousand_order["id"], 1000.02)
        assert res.status_code == 409
        assert res.json()["details"] == {"remaining": "1000.00"}

        summary = (await client.get(f"/api/orders/{thousand_order['id']}/payments")).json()
        assert summary["status"] == "Unpaid"

    async def test_one_cent_over_settles_the_order(self, client, catalog, thousand_order):
        await receive_all(client, catalog, thousand_order)
        res = await pay(client, thousand_order["id"], 1000.01)
        assert res.status_code == 201
        assert res.json()["totalPaid"] == 1000.0
        assert res.json()["status"] == "Paid"

    async def test_actor_from_headers(self, client, catalog, thousand_order):
        await receive_all(client, catalog, thousand_order)
        res = await client.post(
            f"/api/orders/{thousand_order['id']}/payments",
            json={"amount": 10, "date": "2024-06-10"},
            headers={"X-Actor-Id": "3", "X-Actor-Name": "Luis"},
        )
        payment = res.json()["payments"][0]
        assert payment["actorId"] == "3"
        assert payment["actorName"] == "Luis"

    async def test_unknown_order(self, client):
        res = await pay(client, 9999, 10)
        assert res.status_code == 404

    async def test_service_only_order_can_be_paid_immediately(self, client, catalog):
        order = await create_order(
            client,
            catalog["supplier"]["id"],
            [{"lineType": "Service", "description": "Freight", "quantity": 1, "unitCost": 250}],
        )
        res = await pay(client, order["id"], 250)
        assert res.status_code == 201
        assert res.json()["status"] == "Paid"


class TestPaymentSummary:
    async def test_newest_first(self, client, catalog, thousand_order):
        await receive_all(client, catalog, thousand_order)
        await pay(client, thousand_order["id"], 100, date="2024-06-01", reference="first")
        await pay(client, thousand_order["id"], 100, date="2024-06-20", reference="second")
        await pay(client, thousand_order["id"], 100, date="2024-06-01", reference="third")

        res = await client.get(f"/api/orders/{thousand_order['id']}/payments")
        assert [p["reference"] for p in res.json()["payments"]] == ["second", "first", "third"]
        assert res.json()["remaining"] == 700.0

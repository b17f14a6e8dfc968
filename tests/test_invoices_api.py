import pytest

from conftest import create_article, create_third_party, issue_invoice


async def issue(client, client_id, folio="F-001", amount=1000, taxes=160, **extra):
    return await issue_invoice(client, client_id, folio=folio, amount=amount, taxes=taxes, dueDate="2024-07-01", **extra)


async def issue_lines(client, client_id, lines, folio="L-001", **extra):
    payload = {"folio": folio, "clientId": client_id, "issueDate": "2024-06-01", "lines": lines}
    payload.update(extra)
    return await client.post("/api/invoices", json=payload)


async def collect(client, invoice_id, amount):
    return await client.post(f"/api/invoices/{invoice_id}/payments", json={"amount": amount, "date": "2024-06-15"})


class TestIssueInvoice:
    async def test_create(self, client):
        customer = await create_third_party(client, tax_id="CLI010101AAA", name="Comercial Centro", relation="client")
        res = await issue(client, customer["id"])
        assert res.status_code == 201
        body = res.json()
        assert body["total"] == 1160.0
        assert body["amountPending"] == 1160.0
        assert body["status"] == "Pending"
        assert body["clientName"] == "Comercial Centro"
        assert body["payments"]["status"] == "Unpaid"

    async def test_supplier_cannot_be_invoiced(self, client):
        supplier = await create_third_party(client)
        res = await issue(client, supplier["id"])
        assert res.status_code == 422
        assert res.json()["kind"] == "InvalidRelation"

    async def test_duplicate_folio(self, client):
        customer = await create_third_party(client, tax_id="CLI010101AAA", relation="both")
        assert (await issue(client, customer["id"], folio="A-1")).status_code == 201
        res = await issue(client, customer["id"], folio="a-1")
        assert res.status_code == 409
        assert res.json()["kind"] == "Conflict"

    async def test_zero_total(self, client):
        customer = await create_third_party(client, tax_id="CLI010101AAA", relation="client")
        res = await issue(client, customer["id"], amount=0, taxes=0)
        assert res.status_code == 422
        assert res.json()["kind"] == "InvalidAmount"


class TestInvoiceLines:
    """Invoice amounts come from their lines"""

    async def test_totals_are_computed_from_lines(self, client):
        customer = await create_third_party(client, tax_id="CLI010101AAA", relation="client")
        cable = await create_article(client, code="CAB-1", name="Cable")
        res = await issue_lines(
            client,
            customer["id"],
            [
                {"lineType": "Product", "articleId": cable["id"], "quantity": 2, "unitPrice": 500, "taxes": 160},
                {"lineType": "Service", "description": "Installation", "quantity": 1, "unitPrice": "200.005"},
            ],
            paymentTerms="30 days",
        )
        assert res.status_code == 201, res.text
        body = res.json()
        assert body["subtotal"] == 1200.01
        assert body["taxes"] == 160.0
        assert body["total"] == 1360.01
        assert body["amountPending"] == 1360.01
        assert body["paymentTerms"] == "30 days"

        product, service = body["lines"]
        assert product["articleCode"] == "CAB-1"
        assert product["lineTotal"] == 1160.0
        assert service["articleId"] is None
        assert service["description"] == "Installation"

        res = await client.get(f"/api/invoices/{body['id']}")
        assert [line["lineType"] for line in res.json()["lines"]] == ["Product", "Service"]

    async def test_subtotal_in_the_body_is_ignored(self, client):
        customer = await create_third_party(client, tax_id="CLI010101AAA", relation="client")
        res = await issue(client, customer["id"], amount=100, taxes=16, subtotal=99999)
        assert res.json()["subtotal"] == 100.0
        assert res.json()["total"] == 116.0

    async def test_actor_is_recorded(self, client):
        customer = await create_third_party(client, tax_id="CLI010101AAA", relation="client")
        res = await client.post(
            "/api/invoices",
            json={"folio": "F-9", "clientId": customer["id"], "lines": [{"lineType": "Service", "quantity": 1, "unitPrice": 10}]},
            headers={"X-Actor-Id": "7", "X-Actor-Name": "Ana"},
        )
        assert res.status_code == 201
        assert res.json()["createdByName"] == "Ana"

    @pytest.mark.parametrize(
        "line",
        [
            {"lineType": "Product", "quantity": 1, "unitPrice": 5},
            {"lineType": "Service", "quantity": 0, "unitPrice": 5},
            {"lineType": "Service", "quantity": 1, "unitPrice": -5},
            {"lineType": "Service", "quantity": 1, "unitPrice": 5, "taxes": -1},
            {"lineType": "Gift", "quantity": 1, "unitPrice": 5},
            {"lineType": "Service", "quantity": "1e30", "unitPrice": 5},
            {"lineType": "Service", "quantity": 1, "unitPrice": "1e30"},
        ],
    )
    async def test_invalid_lines(self, client, line):
        customer = await create_third_party(client, tax_id="CLI010101AAA", relation="client")
        res = await issue_lines(client, customer["id"], [line])
        assert res.status_code == 422
        assert res.json()["kind"] == "InvalidLine"

    async def test_invoice_without_lines(self, client):
        customer = await create_third_party(client, tax_id="CLI010101AAA", relation="client")
        res = await issue_lines(client, customer["id"], [])
        assert res.status_code == 422
        assert res.json()["kind"] == "InvalidLine"

    async def test_inactive_article_is_rejected(self, client):
        customer = await create_third_party(client, tax_id="CLI010101AAA", relation="client")
        retired = await create_article(client, code="OLD-1")
        await client.delete(f"/api/articles/{retired['id']}")
        res = await issue_lines(client, customer["id"], [{"articleId": retired["id"], "quantity": 1, "unitPrice": 5}])
        assert res.status_code == 404
        assert (await client.get("/api/invoices")).json()["pagination"]["total"] == 0


class TestCollectInvoice:
    async def test_collection_flow(self, client):
        customer = await create_third_party(client, tax_id="CLI010101AAA", relation="client")
        invoice = (await issue(client, customer["id"])).json()

        res = await collect(client, invoice["id"], 160)
        assert res.status_code == 201
        assert res.json()["amountPending"] == 1000.0
        assert res.json()["status"] == "Partially Paid"

        res = await collect(client, invoice["id"], 1000.01)
        assert res.status_code == 201
        body = res.json()
        assert body["amountPending"] == 0.0
        assert body["status"] == "Paid"
        assert body["payments"]["totalPaid"] == 1160.0

        res = await collect(client, invoice["id"], 1)
        assert res.status_code == 409
        assert res.json()["kind"] == "AmountExceedsBalance"

    async def test_invalid_amount(self, client):
        customer = await create_third_party(client, tax_id="CLI010101AAA", relation="client")
        invoice = (await issue(client, customer["id"])).json()
        res = await collect(client, invoice["id"], "ten")
        assert res.status_code == 422
        assert res.json()["kind"] == "InvalidAmount"

    async def test_unknown_invoice(self, client):
        res = await collect(client, 777, 10)
        assert res.status_code == 404


class TestReadInvoices:
    async def test_list_and_filter(self, client):
        first = await create_third_party(client, tax_id="CLI010101AAA", name="Comercial Centro", relation="client")
        second = await create_third_party(client, tax_id="CLI020202BBB", name="Abarrotes Lupita", relation="client")
        paid = (await issue(client, first["id"], folio="F-1")).json()
        await issue(client, second["id"], folio="F-2")
        await collect(client, paid["id"], 1160)

        res = (await client.get("/api/invoices")).json()
        assert res["pagination"]["total"] == 2

        res = (await client.get("/api/invoices", params={"status": "Paid"})).json()
        assert [i["folio"] for i in res["items"]] == ["F-1"]

        res = (await client.get("/api/invoices", params={"search": "lupita"})).json()
        assert [i["folio"] for i in res["items"]] == ["F-2"]

        res = (await client.get("/api/invoices", params={"clientId": second["id"]})).json()
        assert [i["clientTaxId"] for i in res["items"]] == ["CLI020202BBB"]

    async def test_get_with_payments(self, client):
        customer = await create_third_party(client, tax_id="CLI010101AAA", relation="client")
        invoice = (await issue(client, customer["id"])).json()
        await collect(client, invoice["id"], 500)

        res = await client.get(f"/api/invoices/{invoice['id']}")
        assert res.status_code == 200
        assert res.json()["payments"]["remaining"] == 660.0
        assert len(res.json()["payments"]["payments"]) == 1

    async def test_missing(self, client):
        assert (await client.get("/api/invoices/31337")).status_code == 404

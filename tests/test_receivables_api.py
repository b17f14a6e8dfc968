import csv
import io
from datetime import date

from conftest import create_third_party, issue_invoice


async def seed(client):
    norte = await create_third_party(client, tax_id="CNO010101AA1", name="Comercial del Norte", relation="client")
    sur = await create_third_party(client, tax_id="DSU020202BB2", name="Distribuidora Sur", relation="client")
    invoices = [
        (norte["id"], "N-1", 500, "2024-05-01", "2024-06-01"),
        (norte["id"], "N-2", 300, "2024-06-15", "2024-07-15"),
        (sur["id"], "S-1", 200, "2024-01-15", "2024-03-01"),
        (sur["id"], "S-2", 100, "2024-02-01", "2024-03-01"),
    ]
    created = {}
    for client_id, folio, subtotal, issued, due in invoices:
        res = await issue_invoice(client, client_id, folio=folio, amount=subtotal, issue_date=issued, dueDate=due)
        assert res.status_code == 201, res.text
        created[folio] = res.json()
    return created


class TestAgingReport:
    async def test_report(self, client):
        await seed(client)
        res = await client.get("/api/receivables/aging", params={"cutoffDate": "2024-06-30"})
        assert res.status_code == 200
        body = res.json()
        assert body["cutoffDate"] == "2024-06-30"
        assert body["currency"] == "MXN"
        assert body["totalPending"] == 1100.0
        assert body["summary"] == {"totalClients": 2, "overdueAmount": 800.0, "notYetDueAmount": 300.0}

        norte, sur = body["clients"]
        assert norte["name"] == "Comercial del Norte"
        assert norte["bucket0to30"] == 800.0
        assert norte["overdueAmount"] == 500.0
        assert norte["maxDaysOverdue"] == 29
        assert norte["lastInvoice"]["folio"] == "N-2"

        assert sur["bucketOver90"] == 300.0
        assert sur["bucket0to30"] == 0.0
        assert sur["overdueAmount"] == 300.0
        assert sur["maxDaysOverdue"] == 121
        assert sur["invoiceCount"] == 2
        assert sur["totalPending"] == 300.0

    async def test_settled_invoices_are_left_out(self, client):
        created = await seed(client)
        for folio in ("S-1", "S-2"):
            invoice = created[folio]
            res = await client.post(f"/api/invoices/{invoice['id']}/payments", json={"amount": invoice["total"]})
            assert res.status_code == 201

        body = (await client.get("/api/receivables/aging", params={"cutoffDate": "2024-06-30"})).json()
        assert [c["identifier"] for c in body["clients"]] == ["CNO010101AA1"]

    async def test_search_is_case_insensitive(self, client):
        await seed(client)
        body = (await client.get("/api/receivables/aging", params={"cutoffDate": "2024-06-30", "search": "SUR"})).json()
        assert body["summary"]["totalClients"] == 1
        assert body["totalPending"] == 300.0

    async def test_bad_cutoff_falls_back_to_today(self, client):
        body = (await client.get("/api/receivables/aging", params={"cutoffDate": "yesterday-ish"})).json()
        assert body["cutoffDate"] == date.today().isoformat()
        assert body["clients"] == []


class TestAgingExport:
    async def test_csv(self, client):
        await seed(client)
        res = await client.get("/api/receivables/aging/export", params={"cutoffDate": "2024-06-30"})
        assert res.status_code == 200
        assert res.headers["content-type"].startswith("text/csv")
        assert 'filename="accounts_receivable_aging_2024-06-30.csv"' in res.headers["content-disposition"]

        rows = list(csv.reader(io.StringIO(res.text)))
        assert rows[0][0] == "Client"
        assert [r[0] for r in rows[1:]] == ["Comercial del Norte", "Distribuidora Sur"]

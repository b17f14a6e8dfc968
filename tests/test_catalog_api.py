from conftest import create_article, create_third_party, create_warehouse


class TestThirdParties:
    """Clients and suppliers"""

    async def test_create_normalizes_tax_id(self, client):
        party = await create_third_party(client, tax_id="abc010101xyz", name="Papelera", relation="client")
        assert party["taxId"] == "ABC010101XYZ"
        assert party["isActive"] is True

    async def test_duplicate_tax_id_conflicts(self, client):
        await create_third_party(client, tax_id="DUP010101AAA")
        res = await client.post("/api/third-parties", json={"taxId": "dup010101aaa", "name": "Other", "relation": "client"})
        assert res.status_code == 409
        assert res.json()["kind"] == "Conflict"

    async def test_invalid_relation(self, client):
        res = await client.post("/api/third-parties", json={"taxId": "X1", "name": "X", "relation": "partner"})
        assert res.status_code == 422

    async def test_relation_filter_includes_both(self, client):
        await create_third_party(client, tax_id="C1", name="Client One", relation="client")
        await create_third_party(client, tax_id="S1", name="Supplier One", relation="supplier")
        await create_third_party(client, tax_id="B1", name="Both One", relation="both")

        res = await client.get("/api/third-parties", params={"relation": "client"})
        assert sorted(p["taxId"] for p in res.json()["items"]) == ["B1", "C1"]

    async def test_update(self, client):
        party = await create_third_party(client)
        res = await client.patch(f"/api/third-parties/{party['id']}", json={"name": "Renamed", "phone": "555-0101"})
        assert res.status_code == 200
        assert res.json()["name"] == "Renamed"
        assert res.json()["phone"] == "555-0101"

    async def test_soft_delete_and_restore(self, client):
        party = await create_third_party(client)
        res = await client.delete(f"/api/third-parties/{party['id']}")
        assert res.status_code == 204

        assert (await client.get(f"/api/third-parties/{party['id']}")).status_code == 404
        listed = (await client.get("/api/third-parties", params={"include_inactive": True})).json()
        assert listed["items"][0]["isActive"] is False

        res = await client.patch(f"/api/third-parties/{party['id']}/restore")
        assert res.status_code == 200
        assert res.json()["isActive"] is True

    async def test_search(self, client):
        await create_third_party(client, tax_id="AAA", name="Ferretería Central")
        await create_third_party(client, tax_id="BBB", name="Maderas del Valle")
        res = await client.get("/api/third-parties", params={"search": "valle"})
        assert [p["taxId"] for p in res.json()["items"]] == ["BBB"]


class TestArticles:
    async def test_create_and_get(self, client):
        article = await create_article(client, code="ART-100", name="Cable", unit_price=12.5)
        assert article["unitPrice"] == 12.5
        assert article["articleType"] == "Product"

        res = await client.get(f"/api/articles/{article['id']}")
        assert res.json()["code"] == "ART-100"

    async def test_duplicate_code_conflicts(self, client):
        await create_article(client, code="ART-100")
        res = await client.post("/api/articles", json={"code": "art-100", "name": "Copy"})
        assert res.status_code == 409

    async def test_negative_price_is_rejected(self, client):
        res = await client.post("/api/articles", json={"code": "NEG", "name": "Neg", "unitPrice": -1})
        assert res.status_code == 422

    async def test_values_beyond_storage_are_rejected(self, client):
        res = await client.post("/api/articles", json={"code": "BIG", "name": "Big", "unitPrice": 1e13})
        assert res.status_code == 422
        assert res.json()["kind"] == "ValidationError"
        res = await client.post("/api/articles", json={"code": "BIG", "name": "Big", "quantityOnHand": "1e30"})
        assert res.status_code == 422
        assert (await client.get("/api/articles")).json()["pagination"]["total"] == 0

    async def test_list_paginates_and_hides_inactive(self, client):
        for i in range(3):
            await create_article(client, code=f"ART-{i}", name=f"Article {i}")
        first = (await client.get("/api/articles", params={"size": 2})).json()
        await client.delete(f"/api/articles/{first['items'][0]['id']}")

        res = (await client.get("/api/articles", params={"size": 2})).json()
        assert res["pagination"] == {"page": 1, "size": 2, "total": 2, "total_pages": 1}

    async def test_update_and_restore(self, client):
        article = await create_article(client)
        res = await client.patch(f"/api/articles/{article['id']}", json={"unitPrice": 99.99})
        assert res.json()["unitPrice"] == 99.99

        await client.delete(f"/api/articles/{article['id']}")
        res = await client.patch(f"/api/articles/{article['id']}/restore")
        assert res.status_code == 200
        res = await client.patch(f"/api/articles/{article['id']}/restore")
        assert res.status_code == 404


class TestWarehouses:
    async def test_crud(self, client):
        warehouse = await create_warehouse(client, code="WH-9", name="North")
        res = await client.patch(f"/api/warehouses/{warehouse['id']}", json={"location": "Monterrey"})
        assert res.json()["location"] == "Monterrey"

        listed = (await client.get("/api/warehouses")).json()["items"]
        assert [w["code"] for w in listed] == ["WH-9"]

        assert (await client.delete(f"/api/warehouses/{warehouse['id']}")).status_code == 204
        assert (await client.get("/api/warehouses")).json()["items"] == []

    async def test_duplicate_code(self, client):
        await create_warehouse(client, code="WH-1")
        res = await client.post("/api/warehouses", json={"code": "wh-1", "name": "Copy"})
        assert res.status_code == 409

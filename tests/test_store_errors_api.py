"""Data store outages surface as StoreUnavailable and leave nothing behind"""

from contextlib import contextmanager

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from conftest import create_order, receive
from main import app
from models.base import get_db


class CommitFailsSession(AsyncSession):
    async def commit(self):
        raise OperationalError("COMMIT", {}, ConnectionRefusedError("connection refused"))


class UnreachableSession(AsyncSession):
    async def execute(self, *args, **kwargs):
        raise InterfaceError("SELECT 1", {}, ConnectionResetError("connection reset by peer"))


@contextmanager
def sessions_of(engine, session_class):
    factory = async_sessionmaker(bind=engine, autoflush=False, class_=session_class, expire_on_commit=False)

    async def override_get_db():
        async with factory() as session:
            yield session

    previous = app.dependency_overrides[get_db]
    app.dependency_overrides[get_db] = override_get_db
    try:
        yield
    finally:
        app.dependency_overrides[get_db] = previous


class TestStoreUnavailable:
    async def test_failed_commit_records_no_payment(self, client, engine, catalog, thousand_order):
        order_id = thousand_order["id"]
        res = await receive(
            client,
            order_id,
            catalog["warehouse"]["id"],
            [
                {"articleId": catalog["bolts"]["id"], "quantity": 10},
                {"articleId": catalog["nuts"]["id"], "quantity": 5},
            ],
        )
        assert res.status_code == 201

        with sessions_of(engine, CommitFailsSession):
            res = await client.post(f"/api/orders/{order_id}/payments", json={"amount": 400, "date": "2024-06-10"})
        assert res.status_code == 503
        assert res.json()["kind"] == "StoreUnavailable"
        assert "details" not in res.json()

        summary = (await client.get(f"/api/orders/{order_id}/payments")).json()
        assert summary["payments"] == []
        assert summary["status"] == "Unpaid"
        order = (await client.get(f"/api/orders/{order_id}")).json()
        assert order["status"] == "Received"

    async def test_failed_commit_creates_no_order(self, client, engine, catalog):
        line = {"articleId": catalog["bolts"]["id"], "quantity": 1, "unitCost": 5}
        with sessions_of(engine, CommitFailsSession):
            res = await client.post("/api/orders", json={"supplierId": catalog["supplier"]["id"], "lines": [line]})
        assert res.status_code == 503
        assert res.json()["kind"] == "StoreUnavailable"

        assert (await client.get("/api/orders")).json()["pagination"]["total"] == 0
        await create_order(client, catalog["supplier"]["id"], [line])
        assert (await client.get("/api/orders")).json()["pagination"]["total"] == 1

    async def test_unreachable_store_on_read(self, client, engine):
        with sessions_of(engine, UnreachableSession):
            res = await client.get("/api/invoices")
        assert res.status_code == 503
        assert res.json() == {"message": "Data store is unavailable, please try again later.", "kind": "StoreUnavailable"}

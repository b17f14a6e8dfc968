"""Shared fixtures: in-memory SQLite database and an HTTP client bound to the app"""

import os
import sys
from pathlib import Path

# Settings are cached on first import, so the environment must be ready before the app loads
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["DB_CREATE_ALL"] = "false"
os.environ["ENABLE_RATE_LIMITER"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DEFAULT_CURRENCY"] = "MXN"

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from main import app
from models.base import Base, get_db


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(bind=engine, autocommit=False, autoflush=False, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# -------------------------------
# API data builders
# -------------------------------

async def create_third_party(client, tax_id="SUP010101AAA", name="Proveedora Norte", relation="supplier"):
    res = await client.post("/api/third-parties", json={"taxId": tax_id, "name": name, "relation": relation})
    assert res.status_code == 201, res.text
    return res.json()


async def create_article(client, code="ART-001", name="Steel bolt", unit_price=10):
    res = await client.post("/api/articles", json={"code": code, "name": name, "unitPrice": unit_price})
    assert res.status_code == 201, res.text
    return res.json()


async def create_warehouse(client, code="WH-01", name="Main warehouse"):
    res = await client.post("/api/warehouses", json={"code": code, "name": name})
    assert res.status_code == 201, res.text
    return res.json()


async def create_order(client, supplier_id, lines, **extra):
    payload = {"supplierId": supplier_id, "orderDate": "2024-06-01", "lines": lines}
    payload.update(extra)
    res = await client.post("/api/orders", json=payload)
    assert res.status_code == 201, res.text
    return res.json()


async def receive(client, order_id, warehouse_id, lines, entry_date="2024-06-05"):
    return await client.post(
        "/api/warehouse-entries",
        json={"orderId": order_id, "warehouseId": warehouse_id, "date": entry_date, "lines": lines},
    )


@pytest_asyncio.fixture
async def catalog(client):
    """
    A supplier, two articles and a warehouse ready for ordering.
    """
    supplier = await create_third_party(client)
    bolts = await create_article(client, code="ART-001", name="Steel bolt")
    nuts = await create_article(client, code="ART-002", name="Steel nut")
    warehouse = await create_warehouse(client)
    return {"supplier": supplier, "bolts": bolts, "nuts": nuts, "warehouse": warehouse}


@pytest_asyncio.fixture
async def thousand_order(client, catalog):
    """
    Order for 10 bolts at 50 and 5 nuts at 100: total 1000.00.
    """
    return await create_order(
        client,
        catalog["supplier"]["id"],
        [
            {"lineType": "Product", "articleId": catalog["bolts"]["id"], "quantity": 10, "unitCost": 50},
            {"lineType": "Product", "articleId": catalog["nuts"]["id"], "quantity": 5, "unitCost": 100},
        ],
    )


async def issue_invoice(client, client_id, folio="F-001", amount=1000, taxes=0, issue_date="2024-06-01", **extra):
    """
    Post an invoice made of a single service line worth `amount` plus `taxes`.
    """
    payload = {
        "folio": folio,
        "clientId": client_id,
        "issueDate": issue_date,
        "lines": [{"lineType": "Service", "description": "Consulting", "quantity": 1, "unitPrice": amount, "taxes": taxes}],
    }
    payload.update(extra)
    return await client.post("/api/invoices", json=payload)

"""Shared fixtures: a throwaway SQLite database and an in-memory store double."""
from __future__ import annotations

import asyncio
import os
import tempfile

# Set env vars BEFORE any app imports
_DB_DIR = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'storefront.db')}"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "admin123"
os.environ["ADMIN_TOKEN"] = "test-admin-token"
os.environ["CHECKOUT_RATE_LIMIT"] = "10000"
os.environ["LOGIN_RATE_LIMIT"] = "10000"
os.environ["SEED_SAMPLE_DATA"] = "true"
os.environ["PING_MESSAGE"] = "ping"
os.environ.pop("OTEL_EXPORTER_OTLP_ENDPOINT", None)

import pytest

ADMIN_HEADERS = {"Authorization": "Bearer test-admin-token"}


def make_product(product_id: str, price: float, en: str = "", vi: str = "") -> dict:
    return {
        "id": product_id,
        "name": {"en": en or f"Product {product_id}", "vi": vi or f"Sản phẩm {product_id}"},
        "price": price,
    }


class FakeStore:
    """In-memory stand-in for StorefrontStore used by service-level tests."""

    def __init__(self, products=None, settings=None, delays=None):
        self.products = {p["id"]: p for p in products or []}
        self.settings = settings
        self.delays = delays or {}
        self.orders: list[dict] = []
        self.settings_scopes: list[str] = []
        self.lookups: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def get_settings(self, scope):
        self.settings_scopes.append(scope)
        return self.settings

    async def get_product_by_id(self, product_id):
        self.lookups.append(product_id)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(product_id, 0))
        finally:
            self.in_flight -= 1
        return self.products.get(product_id)

    async def create_order(self, draft):
        order = {**draft, "id": len(self.orders) + 1}
        self.orders.append(order)
        return order

    async def list_orders(self):
        return list(reversed(self.orders))


@pytest.fixture()
def fake_store():
    return FakeStore(
        products=[
            make_product("p1", 3.50, "Robusta Coffee Beans", "Cà phê Robusta"),
            make_product("p2", 5.25, "Arabica Coffee Beans", "Cà phê Arabica"),
        ],
        settings={"paymentMethods": {"cod": {"enabled": True}}},
    )


@pytest.fixture()
def client():
    """FastAPI TestClient over a freshly seeded database."""
    from fastapi.testclient import TestClient
    from database import engine
    from models import Base
    from main import app

    Base.metadata.drop_all(bind=engine)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def admin_headers():
    return dict(ADMIN_HEADERS)

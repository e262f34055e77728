"""Tests for admin authentication and request rate limiting."""
from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from security import RateLimitMiddleware


# ---------- Auth ----------

def test_login_returns_token(client):
    resp = client.post("/api/auth/login", json={"username": "admin", "password": "admin123"})

    assert resp.status_code == 200
    token = resp.json()["token"]
    assert resp.json()["tokenType"] == "bearer"

    verify = client.get("/api/auth/verify", headers={"Authorization": f"Bearer {token}"})
    assert verify.status_code == 200
    assert verify.json() == {"authenticated": True}


def test_login_rejects_bad_credentials(client):
    resp = client.post("/api/auth/login", json={"username": "admin", "password": "nope"})

    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid username or password"}


def test_verify_rejects_malformed_header(client):
    resp = client.get("/api/auth/verify", headers={"Authorization": "Token abc"})

    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid authorization header format"}


def test_verify_rejects_missing_or_empty_token(client):
    missing = client.get("/api/auth/verify")
    assert missing.status_code == 401
    assert missing.json() == {"error": "Missing authorization header"}

    empty = client.get("/api/auth/verify", headers={"Authorization": "Bearer "})
    assert empty.status_code == 401
    assert empty.json() == {"error": "Invalid authorization header format"}

    wrong = client.get("/api/auth/verify", headers={"Authorization": "Bearer not-the-token"})
    assert wrong.status_code == 401
    assert wrong.json() == {"error": "Invalid token"}


def test_logout(client):
    assert client.post("/api/auth/logout").json() == {"message": "Logged out"}


def test_orders_require_token(client):
    assert client.get("/api/orders").status_code == 401


def test_health_and_ping(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/api/ping").json() == {"message": "ping"}


# ---------- Rate limiting ----------

class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def _endpoints() -> FastAPI:
    app = FastAPI()

    @app.post("/api/checkout")
    async def checkout():
        return {"ok": True}

    @app.get("/api/products")
    async def products():
        return []

    return app


def _limited(limit: int, **options) -> RateLimitMiddleware:
    return RateLimitMiddleware(_endpoints(), limits={"/api/checkout": limit}, window_seconds=600, **options)


def test_rate_limit_blocks_after_budget():
    client = TestClient(_limited(2))

    assert client.post("/api/checkout").status_code == 200
    assert client.post("/api/checkout").status_code == 200

    blocked = client.post("/api/checkout")
    assert blocked.status_code == 429
    assert "error" in blocked.json()
    assert int(blocked.headers["Retry-After"]) > 0


def test_rate_limit_is_per_path():
    client = TestClient(_limited(1))

    assert client.post("/api/checkout").status_code == 200
    assert client.post("/api/checkout").status_code == 429

    for _ in range(5):
        assert client.get("/api/products").status_code == 200


def test_forwarded_for_ignored_by_default():
    client = TestClient(_limited(2))

    statuses = [
        client.post("/api/checkout", headers={"X-Forwarded-For": f"10.0.0.{i}"}).status_code
        for i in range(10)
    ]

    assert statuses[:2] == [200, 200]
    assert set(statuses[2:]) == {429}


def test_forwarded_for_keys_clients_behind_trusted_proxy():
    client = TestClient(_limited(1, trust_proxy_headers=True))

    assert client.post("/api/checkout", headers={"X-Forwarded-For": "10.0.0.7"}).status_code == 200
    assert client.post("/api/checkout", headers={"X-Forwarded-For": "10.0.0.7, 172.16.0.1"}).status_code == 429
    assert client.post("/api/checkout", headers={"X-Forwarded-For": "10.0.0.8"}).status_code == 200


def test_idle_clients_are_forgotten():
    clock = FakeClock()
    limiter = _limited(5, trust_proxy_headers=True, clock=clock)
    client = TestClient(limiter)

    for i in range(20):
        client.post("/api/checkout", headers={"X-Forwarded-For": f"10.0.1.{i}"})
    assert len(limiter.request_log) == 20

    clock.now += 601
    assert client.post("/api/checkout", headers={"X-Forwarded-For": "10.0.2.1"}).status_code == 200

    assert list(limiter.request_log) == ["/api/checkout:10.0.2.1"]


def test_window_slides():
    clock = FakeClock()
    client = TestClient(_limited(1, clock=clock))

    assert client.post("/api/checkout").status_code == 200
    assert client.post("/api/checkout").status_code == 429

    clock.now += 600
    assert client.post("/api/checkout").status_code == 200

"""Tests for the settings and public settings endpoints."""
from __future__ import annotations

import pytest


def test_settings_require_token(client):
    assert client.get("/api/settings").status_code == 401
    assert client.put("/api/settings", json={"settings": {}}).status_code == 401

    resp = client.get("/api/settings", headers={"Authorization": "Bearer wrong"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid token"}


def test_get_seeded_settings(client, admin_headers):
    resp = client.get("/api/settings", headers=admin_headers)

    assert resp.status_code == 200
    payment_methods = resp.json()["settings"]["paymentMethods"]
    assert payment_methods["cod"] == {"enabled": True}
    assert payment_methods["momo"]["enabled"] is False


def test_update_settings_round_trip(client, admin_headers):
    new_settings = {
        "storeName": "Lotus",
        "paymentMethods": {
            "cod": {"enabled": False},
            "momo": {"enabled": True, "phone": "0900000000", "qrImageUrl": "q.png", "instruction": "Scan"},
        },
    }

    resp = client.put("/api/settings", headers=admin_headers, json={"settings": new_settings})

    assert resp.status_code == 200
    assert resp.json() == {"message": "Settings updated", "settings": new_settings}
    assert client.get("/api/settings", headers=admin_headers).json()["settings"] == new_settings


@pytest.mark.parametrize("body", [
    {},
    {"settings": None},
    {"settings": "cod"},
    {"settings": [1, 2]},
    [],
])
def test_update_settings_rejects_non_object(client, admin_headers, body):
    resp = client.put("/api/settings", headers=admin_headers, json=body)

    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid settings payload"}


@pytest.mark.parametrize("payment_methods", [
    "cod",
    {"cod": {"enabled": "yes"}},
    {"custom": {"id": "zalopay"}},
    {"custom": [{"name": "missing id"}]},
])
def test_update_settings_rejects_malformed_payment_section(client, admin_headers, payment_methods):
    resp = client.put("/api/settings", headers=admin_headers, json={
        "settings": {"paymentMethods": payment_methods}
    })

    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid payment method settings"}


def test_public_settings_follow_updates(client, admin_headers):
    resp = client.get("/api/public-settings")
    assert resp.status_code == 200
    assert resp.json()["settings"]["paymentMethods"]["cod"] == {"enabled": True}
    assert resp.json()["settings"]["paymentMethods"]["momo"] == {"enabled": False}

    client.put("/api/settings", headers=admin_headers, json={"settings": {
        "paymentMethods": {
            "cod": {"enabled": False},
            "momo": {"enabled": True, "phone": "0900000000"},
            "custom": [
                {"id": "zalopay", "name": "ZaloPay", "enabled": True},
                {"id": "vnpay", "name": "VNPay"},
            ],
        },
        "internalNote": "not for customers",
    }})

    public = client.get("/api/public-settings").json()["settings"]
    assert public["paymentMethods"]["cod"] == {"enabled": False}
    assert public["paymentMethods"]["momo"] == {"enabled": True, "phone": "0900000000"}
    assert [m["id"] for m in public["paymentMethods"]["custom"]] == ["zalopay"]
    assert "internalNote" not in public


def test_custom_method_checkout_follows_settings(client, admin_headers):
    cart = {
        "items": [{"id": "p2", "quantity": 1}],
        "paymentMethod": "zalopay",
        "customer": {"name": "Le C", "address": "Da Nang"},
    }
    assert client.post("/api/checkout", json=cart).status_code == 400

    client.put("/api/settings", headers=admin_headers, json={"settings": {
        "paymentMethods": {"custom": [{"id": "zalopay", "name": "ZaloPay", "enabled": True}]}
    }})

    resp = client.post("/api/checkout", json=cart)
    assert resp.status_code == 200
    assert resp.json()["status"] == "pending"

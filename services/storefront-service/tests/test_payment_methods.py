"""Tests for payment method enablement and the public settings projection."""
from __future__ import annotations

import pytest

from services.payment_methods import (
    enabled_payment_methods,
    is_payment_method_enabled,
    public_settings,
)


FULL_SETTINGS = {
    "storeName": "Cà Phê Shop",
    "paymentMethods": {
        "cod": {"enabled": True},
        "bankTransfer": {
            "enabled": True,
            "bankName": "Vietcombank",
            "accountName": "CA PHE SHOP",
            "accountNumber": "0123456789",
            "instruction": "Use your order id as reference",
        },
        "momo": {
            "enabled": False,
            "phone": "0900000000",
            "qrImageUrl": "https://example.com/momo.png",
            "instruction": "Scan to pay",
        },
        "custom": [
            {"id": "zalopay", "name": "ZaloPay", "enabled": True, "instruction": "Scan", "qrImageUrl": "z.png"},
            {"id": "vnpay", "name": "VNPay", "enabled": False},
            {"id": "cod", "name": "Shadowed", "enabled": True},
        ],
    },
}


def test_defaults_without_settings():
    assert enabled_payment_methods(None) == {
        "cod": True,
        "bank_transfer": False,
        "momo": False,
    }


@pytest.mark.parametrize("cod_section, expected", [
    (None, True),
    ({}, True),
    ({"enabled": None}, True),
    ({"enabled": 0}, True),
    ({"enabled": True}, True),
    ({"enabled": False}, False),
])
def test_cod_is_on_unless_explicitly_disabled(cod_section, expected):
    settings = {"paymentMethods": {"cod": cod_section}}
    assert is_payment_method_enabled(settings, "cod") is expected


@pytest.mark.parametrize("section_value, expected", [
    (None, False),
    ({}, False),
    ({"enabled": 1}, False),
    ({"enabled": "yes"}, False),
    ({"enabled": False}, False),
    ({"enabled": True}, True),
])
def test_bank_transfer_and_momo_are_off_unless_explicitly_enabled(section_value, expected):
    settings = {"paymentMethods": {"bankTransfer": section_value, "momo": section_value}}
    assert is_payment_method_enabled(settings, "bank_transfer") is expected
    assert is_payment_method_enabled(settings, "momo") is expected


def test_custom_methods_follow_their_own_flag():
    methods = enabled_payment_methods(FULL_SETTINGS)

    assert methods["zalopay"] is True
    assert methods["vnpay"] is False
    # A custom entry cannot override a built-in method
    assert methods["cod"] is True
    assert is_payment_method_enabled(FULL_SETTINGS, "unknown") is False


def test_public_settings_exposes_details_of_enabled_methods_only():
    public = public_settings(FULL_SETTINGS)["paymentMethods"]

    assert public["cod"] == {"enabled": True}
    assert public["bankTransfer"] == {
        "enabled": True,
        "bankName": "Vietcombank",
        "accountName": "CA PHE SHOP",
        "accountNumber": "0123456789",
        "instruction": "Use your order id as reference",
    }
    assert public["momo"] == {"enabled": False}
    assert public["custom"] == [
        {"id": "zalopay", "name": "ZaloPay", "instruction": "Scan", "qrImageUrl": "z.png", "enabled": True},
    ]
    assert "storeName" not in public_settings(FULL_SETTINGS)


@pytest.mark.parametrize("settings", [
    None,
    {},
    {"paymentMethods": {"cod": {"enabled": False}, "momo": {"enabled": True}}},
    FULL_SETTINGS,
])
def test_public_flags_agree_with_checkout_rules(settings):
    enabled = enabled_payment_methods(settings)
    public = public_settings(settings)["paymentMethods"]

    assert public["cod"]["enabled"] == enabled["cod"]
    assert public["bankTransfer"]["enabled"] == enabled["bank_transfer"]
    assert public["momo"]["enabled"] == enabled["momo"]
    assert {method["id"] for method in public["custom"]} == {
        method_id for method_id, on in enabled.items()
        if on and method_id not in ("cod", "bank_transfer", "momo")
    }


def test_malformed_payment_settings_raise():
    with pytest.raises(AttributeError):
        enabled_payment_methods({"paymentMethods": "cod"})

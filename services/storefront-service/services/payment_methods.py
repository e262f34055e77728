"""Payment method enablement rules.

Cash on delivery is on unless the settings switch it off explicitly. Bank
transfer, MoMo and every custom method stay off unless switched on with a
literal ``true``. Both the checkout and the public settings endpoint derive
enablement from here so they can never disagree.
"""
from typing import Any, Dict, List, Optional

COD = "cod"
BANK_TRANSFER = "bank_transfer"
MOMO = "momo"
BUILTIN_METHODS = (COD, BANK_TRANSFER, MOMO)

BANK_TRANSFER_DETAILS = ("bankName", "accountName", "accountNumber", "instruction")
MOMO_DETAILS = ("phone", "qrImageUrl", "instruction")
CUSTOM_DETAILS = ("id", "name", "instruction", "qrImageUrl")


def _payment_settings(settings: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return (settings or {}).get("paymentMethods") or {}


def _custom_methods(payment_settings: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [
        method for method in payment_settings.get("custom") or []
        if str(method["id"]) not in BUILTIN_METHODS
    ]


def enabled_payment_methods(settings: Optional[Dict[str, Any]]) -> Dict[str, bool]:
    """
    Map every known payment method id to whether it is enabled.

    Args:
        settings: The "store" settings document, or None when none is stored

    Returns:
        Method id to enabled flag, built-in methods first
    """
    payment_settings = _payment_settings(settings)
    methods = {
        COD: (payment_settings.get("cod") or {}).get("enabled") is not False,
        BANK_TRANSFER: (payment_settings.get("bankTransfer") or {}).get("enabled") is True,
        MOMO: (payment_settings.get("momo") or {}).get("enabled") is True,
    }
    for method in _custom_methods(payment_settings):
        methods.setdefault(str(method["id"]), method.get("enabled") is True)
    return methods


def is_payment_method_enabled(settings: Optional[Dict[str, Any]], method: str) -> bool:
    """Return True if ``method`` may be used at checkout."""
    return enabled_payment_methods(settings).get(method, False)


def _details(section: Dict[str, Any], keys) -> Dict[str, Any]:
    return {key: section.get(key) for key in keys if key in section}


def public_settings(settings: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Project the store settings onto what a checkout page may see.

    Display details (account numbers, QR codes) are only exposed for methods
    that are enabled.

    Args:
        settings: The "store" settings document, or None

    Returns:
        ``{"paymentMethods": {...}}`` in the stored settings layout
    """
    payment_settings = _payment_settings(settings)
    enabled = enabled_payment_methods(settings)

    bank_transfer = {"enabled": enabled[BANK_TRANSFER]}
    if enabled[BANK_TRANSFER]:
        bank_transfer.update(_details(payment_settings.get("bankTransfer") or {}, BANK_TRANSFER_DETAILS))

    momo = {"enabled": enabled[MOMO]}
    if enabled[MOMO]:
        momo.update(_details(payment_settings.get("momo") or {}, MOMO_DETAILS))

    custom = []
    for method in _custom_methods(payment_settings):
        method_id = str(method["id"])
        if enabled.get(method_id) and method.get("enabled") is True:
            custom.append({**_details(method, CUSTOM_DETAILS), "id": method_id, "enabled": True})

    return {
        "paymentMethods": {
            "cod": {"enabled": enabled[COD]},
            "bankTransfer": bank_transfer,
            "momo": momo,
            "custom": custom,
        }
    }

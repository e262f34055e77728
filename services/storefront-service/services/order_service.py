"""Checkout and order management service."""
import asyncio
import logging
import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

from opentelemetry import trace

from config import STORE_SETTINGS_SCOPE
from errors import CheckoutError, InvalidInput, InvalidProduct, UnsupportedPaymentMethod
from services.payment_methods import is_payment_method_enabled
from services.store import StorefrontStore
from monitoring import (
    checkout_counter,
    checkout_rejections_counter,
    checkout_amount_histogram
)

logger = logging.getLogger(__name__)

MIN_QUANTITY = 1
MAX_QUANTITY = 99
NAME_MAX_LENGTH = 120
EMAIL_MAX_LENGTH = 254
PHONE_MAX_LENGTH = 40
ADDRESS_MAX_LENGTH = 300
ORDER_CURRENCY = "USD"
INITIAL_ORDER_STATUS = "pending"


def normalize_quantity(value: Any) -> int:
    """
    Coerce a client-supplied quantity into ``[1, 99]``.

    Missing, non-numeric, zero and NaN values become 1. Integers too large
    for a float clamp the same way infinities do. Fractions are truncated
    after clamping.
    """
    try:
        quantity = float(value)
    except OverflowError:
        return MAX_QUANTITY if value > 0 else MIN_QUANTITY
    except (TypeError, ValueError):
        return MIN_QUANTITY
    if math.isnan(quantity) or quantity == 0:
        return MIN_QUANTITY
    return int(max(MIN_QUANTITY, min(MAX_QUANTITY, quantity)))


def sanitize_required(value: Any, max_length: int) -> str:
    """Trim and cap a required text field. Returns "" when nothing is left."""
    return str(value or "").strip()[:max_length]


def sanitize_optional(value: Any, max_length: int) -> Optional[str]:
    """Trim and cap an optional text field. Returns None when nothing is left."""
    if not value:
        return None
    return str(value).strip()[:max_length] or None


class OrderService:
    """Service for placing and listing orders."""

    def __init__(self, store: StorefrontStore):
        """
        Initialize order service.

        Args:
            store: Settings, product and order storage
        """
        self.store = store
        self.tracer = trace.get_tracer(__name__)

    async def process_checkout(
        self,
        items: Optional[Sequence[Any]],
        payment_method: str,
        customer: Any
    ) -> Dict[str, Any]:
        """
        Validate a cart, price it from stored products and create an order.

        Args:
            items: Cart lines, each with ``id`` and ``quantity``
            payment_method: Requested payment method id
            customer: Customer details with ``name``, ``email``, ``phone``
                and ``address``

        Returns:
            ``{"orderId": ..., "status": ...}`` for the created order

        Raises:
            InvalidInput: If the cart is empty or customer info is missing
            UnsupportedPaymentMethod: If the method is not enabled
            InvalidProduct: If a cart line references an unknown product
        """
        span = trace.get_current_span()
        span.set_attribute("payment.method", str(payment_method))
        span.set_attribute("cart.lines", len(items) if items else 0)

        try:
            draft = await self._build_order_draft(items, payment_method, customer)
        except CheckoutError as e:
            checkout_rejections_counter.add(1, {
                "reason": e.reason,
                "payment_method": str(payment_method)
            })
            logger.warning("Checkout rejected", extra={
                "reason": e.reason,
                "error": str(e),
                "payment_method": payment_method
            })
            raise

        # Nothing has been written before this point
        order = await self.store.create_order(draft)

        checkout_counter.add(1, {
            "payment_method": payment_method,
            "status": "completed"
        })
        checkout_amount_histogram.record(draft["totalAmount"], {
            "payment_method": payment_method
        })
        logger.info("Checkout completed", extra={
            "order_id": order["id"],
            "amount": draft["totalAmount"],
            "currency": draft["currency"],
            "payment_method": payment_method,
            "item_count": len(draft["items"])
        })

        return {"orderId": order["id"], "status": order["status"]}

    async def _build_order_draft(
        self,
        items: Optional[Sequence[Any]],
        payment_method: str,
        customer: Any
    ) -> Dict[str, Any]:
        if not items:
            raise InvalidInput("No items in cart")

        name = sanitize_required(getattr(customer, "name", None), NAME_MAX_LENGTH)
        address = sanitize_required(getattr(customer, "address", None), ADDRESS_MAX_LENGTH)
        email = sanitize_optional(getattr(customer, "email", None), EMAIL_MAX_LENGTH)
        phone = sanitize_optional(getattr(customer, "phone", None), PHONE_MAX_LENGTH)
        if not name or not address:
            raise InvalidInput("Missing customer info")

        lines = [(str(item.id), normalize_quantity(item.quantity)) for item in items]

        # Fetched once per request and passed down explicitly
        settings = await self.store.get_settings(STORE_SETTINGS_SCOPE)
        if not is_payment_method_enabled(settings, payment_method):
            raise UnsupportedPaymentMethod("Unsupported payment method")

        products = await self._resolve_products([product_id for product_id, _ in lines])

        order_items = []
        total_amount = 0.0
        for (product_id, quantity), product in zip(lines, products):
            total_amount += product["price"] * quantity
            order_items.append({
                "productId": product["id"],
                "name_en": product["name"]["en"],
                "name_vi": product["name"]["vi"],
                "price": product["price"],
                "quantity": quantity
            })

        return {
            "status": INITIAL_ORDER_STATUS,
            "totalAmount": total_amount,
            "currency": ORDER_CURRENCY,
            "customerName": name,
            "email": email,
            "phone": phone,
            "address": address,
            "paymentMethod": payment_method,
            "items": order_items
        }

    async def _resolve_products(self, product_ids: List[str]) -> List[Dict[str, Any]]:
        """
        Look up all products concurrently.

        Results are matched back to ``product_ids`` by position, so the
        reported missing id is the first one in cart order whatever order
        the lookups finish in.

        Raises:
            InvalidProduct: Naming the first unknown id
        """
        with self.tracer.start_as_current_span("checkout.resolve_products") as lookup_span:
            lookup_span.set_attribute("product.count", len(product_ids))

            products = await asyncio.gather(
                *(self.store.get_product_by_id(product_id) for product_id in product_ids)
            )

            missing: Tuple[str, ...] = tuple(
                product_id for product_id, product in zip(product_ids, products)
                if product is None
            )
            lookup_span.set_attribute("product.missing", len(missing))

        if missing:
            raise InvalidProduct(missing[0])
        return list(products)

    async def list_orders(self) -> List[Dict[str, Any]]:
        """
        Get recent orders for the admin panel.

        Returns:
            Orders newest first, with item snapshots
        """
        return await self.store.list_orders()

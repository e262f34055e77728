"""Persistence facade used by the checkout flow.

Every operation opens its own session from the factory and runs on a worker
thread, so independent reads (one per cart line) can be awaited together
without sharing a session.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import sessionmaker, selectinload
from opentelemetry import trace

from models import Order, OrderItem
from services.catalog_service import ProductService
from services.settings_service import SettingsService

logger = logging.getLogger(__name__)


def order_to_dict(order: Order) -> Dict[str, Any]:
    """Render an order row with its item snapshots."""
    return {
        "id": order.id,
        "status": order.status,
        "totalAmount": order.total_amount,
        "currency": order.currency,
        "customerName": order.customer_name,
        "email": order.email,
        "phone": order.phone,
        "address": order.address,
        "paymentMethod": order.payment_method,
        "createdAt": order.created_at.isoformat() if order.created_at else None,
        "items": [
            {
                "productId": item.product_id,
                "name_en": item.name_en,
                "name_vi": item.name_vi,
                "price": item.price,
                "quantity": item.quantity,
            }
            for item in order.items
        ],
    }


class StorefrontStore:
    """Settings, product and order storage backed by SQLAlchemy sessions."""

    def __init__(self, session_factory: sessionmaker):
        """
        Initialize the store.

        Args:
            session_factory: Factory producing independent database sessions
        """
        self.session_factory = session_factory
        self.products = ProductService()
        self.settings = SettingsService()
        self.tracer = trace.get_tracer(__name__)

    async def get_settings(self, scope: str) -> Optional[Dict[str, Any]]:
        return await asyncio.to_thread(self._get_settings, scope)

    async def get_product_by_id(self, product_id: str) -> Optional[Dict[str, Any]]:
        return await asyncio.to_thread(self._get_product_by_id, product_id)

    async def create_order(self, draft: Dict[str, Any]) -> Dict[str, Any]:
        return await asyncio.to_thread(self._create_order, draft)

    async def list_orders(self, limit: int = 200) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self._list_orders, limit)

    def _get_settings(self, scope: str) -> Optional[Dict[str, Any]]:
        with self.session_factory() as db:
            return self.settings.get_settings(db, scope)

    def _get_product_by_id(self, product_id: str) -> Optional[Dict[str, Any]]:
        with self.session_factory() as db:
            return self.products.get_product(db, product_id)

    def _create_order(self, draft: Dict[str, Any]) -> Dict[str, Any]:
        """Insert the order and its item snapshots in one transaction."""
        with self.session_factory() as db:
            with self.tracer.start_as_current_span("db.transaction.create_order") as db_span:
                db_span.set_attribute("db.operation", "INSERT")
                db_span.set_attribute("db.table", "orders")
                db_span.set_attribute("order.total_amount", draft["totalAmount"])

                order = Order(
                    status=draft["status"],
                    total_amount=draft["totalAmount"],
                    currency=draft["currency"],
                    customer_name=draft["customerName"],
                    email=draft.get("email"),
                    phone=draft.get("phone"),
                    address=draft["address"],
                    payment_method=draft["paymentMethod"],
                    items=[
                        OrderItem(
                            product_id=item["productId"],
                            name_en=item["name_en"],
                            name_vi=item["name_vi"],
                            price=item["price"],
                            quantity=item["quantity"],
                        )
                        for item in draft["items"]
                    ],
                )
                try:
                    db.add(order)
                    db.commit()
                except Exception:
                    db.rollback()
                    raise
                db.refresh(order)

                db_span.set_attribute("order.id", order.id)
                return order_to_dict(order)

    def _list_orders(self, limit: int) -> List[Dict[str, Any]]:
        with self.session_factory() as db:
            with self.tracer.start_as_current_span("db.query.list_orders") as db_span:
                db_span.set_attribute("db.operation", "SELECT")
                db_span.set_attribute("db.table", "orders")

                orders = (
                    db.query(Order)
                    .options(selectinload(Order.items))
                    .order_by(Order.created_at.desc(), Order.id.desc())
                    .limit(limit)
                    .all()
                )

                db_span.set_attribute("db.rows_returned", len(orders))
                return [order_to_dict(order) for order in orders]

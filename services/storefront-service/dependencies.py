"""Dependency injection for services."""
from fastapi import Request

from services.catalog_service import ProductService
from services.order_service import OrderService
from services.settings_service import SettingsService
from services.store import StorefrontStore


def get_store(request: Request) -> StorefrontStore:
    """Get the storefront store from app state."""
    return request.app.state.store


def get_order_service(request: Request) -> OrderService:
    """Get order service instance."""
    return OrderService(get_store(request))


def get_product_service() -> ProductService:
    """Get product catalog service instance."""
    return ProductService()


def get_settings_service() -> SettingsService:
    """Get settings service instance."""
    return SettingsService()

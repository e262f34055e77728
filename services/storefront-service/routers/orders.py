"""Orders API router."""
import logging

from fastapi import APIRouter, Depends, HTTPException

from schemas import OrdersListResponse
from auth import verify_token
from dependencies import get_order_service
from services.order_service import OrderService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("", response_model=OrdersListResponse)
async def get_orders(
    token: str = Depends(verify_token),
    order_service: OrderService = Depends(get_order_service)
):
    """Get recent orders - requires authentication."""
    try:
        orders = await order_service.list_orders()
    except Exception:
        logger.exception("Error fetching orders")
        raise HTTPException(status_code=500, detail="Internal server error")

    return {"orders": orders}

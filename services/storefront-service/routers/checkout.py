"""Checkout API router."""
import logging

from fastapi import APIRouter, Depends, HTTPException

from schemas import CheckoutRequest, CheckoutResponse
from dependencies import get_order_service
from errors import CheckoutError
from monitoring import checkout_counter
from services.order_service import OrderService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["checkout"])


@router.post("/checkout", response_model=CheckoutResponse)
async def checkout(
    request: CheckoutRequest,
    order_service: OrderService = Depends(get_order_service)
):
    """Place an order for the submitted cart. Public, rate-limited."""
    try:
        return await order_service.process_checkout(
            items=request.items,
            payment_method=request.paymentMethod,
            customer=request.customer
        )
    except CheckoutError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        checkout_counter.add(1, {
            "payment_method": request.paymentMethod,
            "status": "failed"
        })
        logger.exception("Checkout error", extra={
            "payment_method": request.paymentMethod,
            "item_count": len(request.items or [])
        })
        raise HTTPException(status_code=500, detail="Internal server error")

"""
Orders API Endpoints
Fee quotes, checkout and order management
"""
from fastapi import APIRouter, Depends, HTTPException

from app.core.auth import TokenUser, get_current_user
from app.core.config import settings
from app.core.exceptions import MarketplaceError, status_code_for
from app.domain.fees import FeeRequest
from app.domain.order import OrderCreate, OrderStatusUpdate
from app.services.checkout_service import CheckoutService

router = APIRouter()


# Dependency: Get checkout service
def get_checkout_service() -> CheckoutService:
    return CheckoutService(schedule=settings.fee_schedule())


@router.post("/calculate-fees")
async def calculate_fees(
    request: FeeRequest,
    service: CheckoutService = Depends(get_checkout_service)
):
    """
    Quote the fees for a subtotal and delivery option

    Returns subtotal, delivery_fee, platform_fee, processing_fee and total
    """
    try:
        fees = service.calculate_fees(request.subtotal, request.delivery_option)

        return {
            "status": "success",
            "data": fees.to_dict()
        }

    except MarketplaceError as e:
        raise HTTPException(status_code=status_code_for(e), detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error calculating fees: {str(e)}")


@router.post("", status_code=201)
async def create_order(
    request: OrderCreate,
    user: TokenUser = Depends(get_current_user),
    service: CheckoutService = Depends(get_checkout_service)
):
    """
    Check out the current user's cart

    The cart is priced, turned into an order and emptied in one transaction.
    """
    try:
        order = service.create_order_from_cart(user.id, request)

        return {
            "status": "success",
            "data": order.to_dict()
        }

    except MarketplaceError as e:
        raise HTTPException(status_code=status_code_for(e), detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating order: {str(e)}")


@router.get("")
async def get_orders(
    user: TokenUser = Depends(get_current_user),
    service: CheckoutService = Depends(get_checkout_service)
):
    """Get the current user's orders, newest first"""
    try:
        orders = service.list_user_orders(user.id)

        return {
            "status": "success",
            "count": len(orders),
            "data": [order.to_dict() for order in orders]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching orders: {str(e)}")


@router.get("/producer/{producer_id}")
async def get_producer_orders(
    producer_id: str,
    user: TokenUser = Depends(get_current_user),
    service: CheckoutService = Depends(get_checkout_service)
):
    """Get orders containing products of a producer owned by the current user"""
    try:
        orders = service.list_producer_orders(producer_id, user.id)

        return {
            "status": "success",
            "count": len(orders),
            "data": [order.to_dict() for order in orders]
        }

    except MarketplaceError as e:
        raise HTTPException(status_code=status_code_for(e), detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching producer orders: {str(e)}")


@router.get("/{order_id}")
async def get_order(
    order_id: str,
    user: TokenUser = Depends(get_current_user),
    service: CheckoutService = Depends(get_checkout_service)
):
    """Get a single order with its items"""
    try:
        order = service.get_user_order(order_id, user.id)

        return {
            "status": "success",
            "data": order.to_dict()
        }

    except MarketplaceError as e:
        raise HTTPException(status_code=status_code_for(e), detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching order: {str(e)}")


@router.patch("/{order_id}/status")
async def update_order_status(
    order_id: str,
    request: OrderStatusUpdate,
    user: TokenUser = Depends(get_current_user),
    service: CheckoutService = Depends(get_checkout_service)
):
    """
    Change an order's status

    Producers selling in the order may set any status; buyers may cancel
    their own pending orders.
    """
    try:
        order = service.update_status(order_id, request.status, user.id)

        return {
            "status": "success",
            "data": order.to_dict()
        }

    except MarketplaceError as e:
        raise HTTPException(status_code=status_code_for(e), detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating order status: {str(e)}")

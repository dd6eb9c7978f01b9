"""
Cart API Endpoints
The current user's shopping cart
"""
from fastapi import APIRouter, Depends, HTTPException

from app.core.auth import TokenUser, get_current_user
from app.core.exceptions import MarketplaceError, status_code_for
from app.domain.order import CartItemCreate, CartItemUpdate
from app.services.cart_service import CartService
from app.services.checkout_service import cart_subtotal

router = APIRouter()


def get_cart_service() -> CartService:
    return CartService()


@router.get("")
async def get_cart(
    user: TokenUser = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    """Get cart lines with products and the cart subtotal"""
    try:
        items = service.get_cart(user.id)

        return {
            "status": "success",
            "count": len(items),
            "subtotal": float(cart_subtotal(items)),
            "data": [item.to_dict() for item in items]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching cart: {str(e)}")


@router.post("", status_code=201)
async def add_to_cart(
    request: CartItemCreate,
    user: TokenUser = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    """Add a product to the cart; adding a product already in the cart raises its quantity"""
    try:
        item = service.add_item(user.id, request.product_id, request.quantity)

        return {
            "status": "success",
            "data": item.to_dict()
        }

    except MarketplaceError as e:
        raise HTTPException(status_code=status_code_for(e), detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error adding to cart: {str(e)}")


@router.patch("/{item_id}")
async def update_cart_item(
    item_id: str,
    request: CartItemUpdate,
    user: TokenUser = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    try:
        item = service.update_quantity(user.id, item_id, request.quantity)

        return {
            "status": "success",
            "data": item.to_dict()
        }

    except MarketplaceError as e:
        raise HTTPException(status_code=status_code_for(e), detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating cart item: {str(e)}")


@router.delete("/{item_id}")
async def remove_cart_item(
    item_id: str,
    user: TokenUser = Depends(get_current_user),
    service: CartService = Depends(get_cart_service)
):
    try:
        service.remove_item(user.id, item_id)

        return {
            "status": "success",
            "message": f"Cart item {item_id} removed"
        }

    except MarketplaceError as e:
        raise HTTPException(status_code=status_code_for(e), detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error removing cart item: {str(e)}")

"""
Payments API Endpoints
Payment intents for placed orders
"""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.core.auth import TokenUser, get_current_user
from app.core.config import settings
from app.core.exceptions import MarketplaceError, status_code_for
from app.services.checkout_service import CheckoutService
from app.services.payment_service import PaymentService

router = APIRouter()


class PaymentIntentRequest(BaseModel):
    order_id: str


# Dependency: Get payment service
def get_payment_service() -> PaymentService:
    if not settings.STRIPE_SECRET_KEY:
        raise HTTPException(status_code=500, detail="STRIPE_SECRET_KEY not configured")
    return PaymentService(checkout_service=CheckoutService(schedule=settings.fee_schedule()))


@router.post("/create-payment-intent")
async def create_payment_intent(
    request: PaymentIntentRequest,
    user: TokenUser = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service)
):
    """
    Create a payment intent for one of the current user's orders

    The amount charged is the order's stored total.
    """
    try:
        intent = await service.create_payment_intent(request.order_id, user.id)

        return {
            "status": "success",
            "data": intent
        }

    except MarketplaceError as e:
        raise HTTPException(status_code=status_code_for(e), detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating payment intent: {str(e)}")

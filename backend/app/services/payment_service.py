"""
Payment Service
Creates payment intents for orders and records them on the order
"""
import logging
from decimal import Decimal
from typing import Optional

from app.connectors.stripe_connector import StripeConnector
from app.core.config import settings
from app.repositories.order_repository import OrderRepository
from app.services.checkout_service import CheckoutService
from app.services.fee_calculator import to_money

logger = logging.getLogger(__name__)


def to_smallest_unit(amount: Decimal) -> int:
    """Convert a currency amount to cents, rounding half-up first"""
    return int(to_money(amount) * 100)


class PaymentService:

    def __init__(self, connector: Optional[StripeConnector] = None,
                 checkout_service: Optional[CheckoutService] = None,
                 order_repo: Optional[OrderRepository] = None,
                 currency: Optional[str] = None):
        self.connector = connector or StripeConnector()
        self.checkout_service = checkout_service or CheckoutService()
        self.order_repo = order_repo or OrderRepository()
        self.currency = currency or settings.PAYMENT_CURRENCY

    async def create_payment_intent(self, order_id: str, user_id: str) -> dict:
        """
        Create a payment intent for the total of an order owned by user_id

        Returns:
            Dict with client_secret and payment_intent_id
        """
        order = self.checkout_service.get_user_order(order_id, user_id)

        intent = await self.connector.create_payment_intent(
            amount=to_smallest_unit(order.total),
            currency=self.currency,
            metadata={'orderId': order.id, 'userId': user_id},
        )
        self.order_repo.set_payment_intent(order.id, intent['id'])

        return {
            'client_secret': intent['client_secret'],
            'payment_intent_id': intent['id'],
        }

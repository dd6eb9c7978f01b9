"""
Checkout Service
Turns a user's cart into a priced, fee-itemized order

The whole cart-to-order transition (read cart, price it, insert the order
and its items, clear the cart) runs on one connection inside one
transaction: either everything is committed or nothing is.
"""
import logging
from typing import Callable, List, Optional

from app.core.database import transaction
from app.core.exceptions import InvalidInput, NotFound, Unauthorized
from app.domain.fees import FeeCalculation, FeeSchedule
from app.domain.order import CartItemWithProduct, Order, OrderCreate, OrderStatus
from app.repositories.cart_repository import CartRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.producer_repository import ProducerRepository
from app.services.fee_calculator import calculate_fees, to_money

logger = logging.getLogger(__name__)


def cart_subtotal(items: List[CartItemWithProduct]):
    """Sum of price x quantity over cart lines, rounded to cents"""
    return to_money(sum((item.line_total for item in items), start=to_money(0)))


def order_lines(items: List[CartItemWithProduct]) -> List[dict]:
    """Order item rows for cart lines, priced at the current product price"""
    return [
        {
            'product_id': item.product.id,
            'quantity': item.quantity,
            'unit_price': item.product.price,
            'total_price': to_money(item.line_total),
        }
        for item in items
    ]


class CheckoutService:
    """
    Service for pricing carts and placing orders

    Handles:
    - Fee calculation with the configured fee schedule
    - Atomic cart-to-order checkout
    - Order reads scoped to the buyer or the selling producer
    - Order status transitions
    """

    def __init__(self, schedule: Optional[FeeSchedule] = None,
                 cart_repo: Optional[CartRepository] = None,
                 order_repo: Optional[OrderRepository] = None,
                 producer_repo: Optional[ProducerRepository] = None,
                 transaction_factory: Callable = transaction):
        self.schedule = schedule
        self.cart_repo = cart_repo or CartRepository()
        self.order_repo = order_repo or OrderRepository()
        self.producer_repo = producer_repo or ProducerRepository()
        self.transaction_factory = transaction_factory

    def calculate_fees(self, subtotal, delivery_option) -> FeeCalculation:
        return calculate_fees(subtotal, delivery_option, self.schedule)

    def create_order_from_cart(self, user_id: str, order_data: OrderCreate) -> Order:
        """
        Check out a user's cart

        Steps:
        1. Read cart lines (with products)
        2. Price the cart
        3. Create the order and its items
        4. Clear the cart

        Args:
            user_id: Buyer
            order_data: Delivery option, address and time

        Returns:
            The created Order with its items

        Raises:
            InvalidInput: cart is empty
        """
        with self.transaction_factory() as conn:
            items = self.cart_repo.get_items(user_id, conn=conn)
            if not items:
                raise InvalidInput("Cart is empty")

            fees = self.calculate_fees(cart_subtotal(items), order_data.delivery_option)

            order = self.order_repo.create(
                user_id=user_id,
                fees=fees,
                delivery_option=order_data.delivery_option,
                delivery_address=order_data.delivery_address,
                delivery_time=order_data.delivery_time,
                conn=conn,
            )
            order_items = self.order_repo.add_items(order.id, order_lines(items), conn=conn)
            self.cart_repo.clear(user_id, conn=conn)

        logger.info(
            f"Order {order.id} created for user {user_id}: "
            f"{len(order_items)} items, total {fees.total}"
        )
        return order.model_copy(update={'items': order_items})

    def list_user_orders(self, user_id: str) -> List[Order]:
        return self.order_repo.find_by_user(user_id)

    def get_user_order(self, order_id: str, user_id: str) -> Order:
        """Fetch an order owned by user_id"""
        order = self.order_repo.find_by_id(order_id)
        if not order:
            raise NotFound(f"Order {order_id} not found")
        if order.user_id != user_id:
            raise Unauthorized("Access denied")
        return order

    def list_producer_orders(self, producer_id: str, user_id: str) -> List[Order]:
        """Orders containing the producer's products; only the producer's owner may list them"""
        producer = self.producer_repo.find_by_user_id(user_id)
        if not producer or producer.id != producer_id:
            raise Unauthorized("Access denied")
        return self.order_repo.find_by_producer(producer_id)

    def update_status(self, order_id: str, status: OrderStatus, user_id: str) -> Order:
        """
        Move an order to a new status

        Producers selling items in the order may set any status;
        the buyer may only cancel a pending order.
        """
        order = self.order_repo.find_by_id(order_id)
        if not order:
            raise NotFound(f"Order {order_id} not found")

        producer = self.producer_repo.find_by_user_id(user_id)
        sells_in_order = producer is not None and any(
            item.product is not None and item.product.producer_id == producer.id
            for item in order.items
        )

        if not sells_in_order:
            if order.user_id != user_id:
                raise Unauthorized("Access denied")
            if status != OrderStatus.CANCELLED or order.status != OrderStatus.PENDING.value:
                raise InvalidInput("Buyers can only cancel pending orders")

        updated = self.order_repo.update_status(order_id, status.value)
        logger.info(f"Order {order_id} status {order.status} -> {status.value} by user {user_id}")
        return updated.model_copy(update={'items': order.items})

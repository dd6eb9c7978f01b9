"""
Order Repository - Data Access Layer for Orders

Handles all database queries for orders and returns Order domain models.
"""
from datetime import datetime
from typing import Dict, List, Optional

from app.core.database import connection_scope
from app.core.exceptions import NotFound
from app.domain.fees import FeeCalculation
from app.domain.order import Order, OrderItem
from app.repositories.producer_repository import producer_columns
from app.repositories.product_repository import PRODUCT_FIELDS, ProductRepository

ORDER_FIELDS = [
    'id', 'user_id', 'status',
    'subtotal', 'platform_fee', 'processing_fee', 'delivery_fee', 'total',
    'delivery_option', 'delivery_address', 'delivery_time',
    'stripe_payment_intent_id', 'created_at', 'updated_at',
]

ORDER_COLUMNS = ", ".join(f"o.{column}" for column in ORDER_FIELDS)
RETURNING_COLUMNS = ", ".join(ORDER_FIELDS)

ORDER_ITEM_WITH_PRODUCT_COLUMNS = ", ".join([
    "oi.id, oi.order_id, oi.product_id, oi.quantity, oi.unit_price, oi.total_price",
    ", ".join(f"p.{column} AS p_{column}" for column in PRODUCT_FIELDS),
    producer_columns(alias='pr', prefix='pr_'),
])


class OrderRepository:
    """
    Repository for Order data access

    All SQL queries for orders are centralized here.
    Returns Order domain models with their items (and each item's product).
    """

    @staticmethod
    def _map_row_to_order(row: dict, items: Optional[List[OrderItem]] = None) -> Order:
        order_dict = dict(row)
        order_dict['items'] = items or []
        return Order(**order_dict)

    @staticmethod
    def _map_row_to_item(row: dict) -> OrderItem:
        product = None
        if row.get('p_id') is not None:
            product = ProductRepository.map_row_to_product_with_producer(row, prefix='p_')
        return OrderItem(
            id=row['id'],
            order_id=row['order_id'],
            product_id=row['product_id'],
            quantity=row['quantity'],
            unit_price=row['unit_price'],
            total_price=row['total_price'],
            product=product,
        )

    def _fetch_items(self, cursor, order_ids: List[str]) -> Dict[str, List[OrderItem]]:
        """Items for several orders in ONE QUERY, grouped by order id"""
        items_by_order: Dict[str, List[OrderItem]] = {order_id: [] for order_id in order_ids}
        if not order_ids:
            return items_by_order

        cursor.execute(f"""
            SELECT {ORDER_ITEM_WITH_PRODUCT_COLUMNS}
            FROM order_items oi
            LEFT JOIN products p ON oi.product_id = p.id
            LEFT JOIN producers pr ON p.producer_id = pr.id
            WHERE oi.order_id = ANY(%s)
            ORDER BY oi.order_id, oi.id
        """, (list(order_ids),))

        for row in cursor.fetchall():
            items_by_order.setdefault(row['order_id'], []).append(self._map_row_to_item(row))

        return items_by_order

    def create(
        self,
        user_id: str,
        fees: FeeCalculation,
        delivery_option: str,
        delivery_address: Optional[str] = None,
        delivery_time: Optional[datetime] = None,
        conn=None
    ) -> Order:
        """
        Insert a pending order carrying the fee breakdown

        Args:
            user_id: Buyer
            fees: Fee breakdown from the fee calculator
            delivery_option: pickup, home or farmers-market
            delivery_address: Address for home delivery
            delivery_time: Requested delivery/pickup time

        Returns:
            The created Order (without items)
        """
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"""
                    INSERT INTO orders (
                        user_id, status,
                        subtotal, platform_fee, processing_fee, delivery_fee, total,
                        delivery_option, delivery_address, delivery_time
                    ) VALUES (%s, 'pending', %s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING {RETURNING_COLUMNS}
                """, (
                    user_id,
                    fees.subtotal,
                    fees.platform_fee,
                    fees.processing_fee,
                    fees.delivery_fee,
                    fees.total,
                    delivery_option,
                    delivery_address,
                    delivery_time,
                ))
                return self._map_row_to_order(cursor.fetchone())
            finally:
                cursor.close()

    def add_items(self, order_id: str, items: List[dict], conn=None) -> List[OrderItem]:
        """
        Insert order lines

        Args:
            order_id: Parent order
            items: dicts with product_id, quantity, unit_price, total_price

        Returns:
            Created order items
        """
        created = []
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                for item in items:
                    cursor.execute("""
                        INSERT INTO order_items (order_id, product_id, quantity, unit_price, total_price)
                        VALUES (%s, %s, %s, %s, %s)
                        RETURNING id, order_id, product_id, quantity, unit_price, total_price
                    """, (
                        order_id,
                        item['product_id'],
                        item['quantity'],
                        item['unit_price'],
                        item['total_price'],
                    ))
                    created.append(self._map_row_to_item(cursor.fetchone()))
                return created
            finally:
                cursor.close()

    def find_by_id(self, order_id: str, conn=None) -> Optional[Order]:
        """
        Find order by ID with items

        Returns:
            Order with all related data or None if not found
        """
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"""
                    SELECT {ORDER_COLUMNS}
                    FROM orders o
                    WHERE o.id = %s
                """, (order_id,))

                row = cursor.fetchone()
                if not row:
                    return None

                items = self._fetch_items(cursor, [row['id']])
                return self._map_row_to_order(row, items[row['id']])
            finally:
                cursor.close()

    def find_by_user(self, user_id: str, conn=None) -> List[Order]:
        """Orders placed by a user, newest first"""
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"""
                    SELECT {ORDER_COLUMNS}
                    FROM orders o
                    WHERE o.user_id = %s
                    ORDER BY o.created_at DESC
                """, (user_id,))
                rows = cursor.fetchall()

                items = self._fetch_items(cursor, [row['id'] for row in rows])
                return [self._map_row_to_order(row, items[row['id']]) for row in rows]
            finally:
                cursor.close()

    def find_by_producer(self, producer_id: str, conn=None) -> List[Order]:
        """Orders containing at least one product of a producer, newest first"""
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"""
                    SELECT {ORDER_COLUMNS}
                    FROM orders o
                    WHERE o.id IN (
                        SELECT oi.order_id
                        FROM order_items oi
                        INNER JOIN products p ON oi.product_id = p.id
                        WHERE p.producer_id = %s
                    )
                    ORDER BY o.created_at DESC
                """, (producer_id,))
                rows = cursor.fetchall()

                items = self._fetch_items(cursor, [row['id'] for row in rows])
                return [self._map_row_to_order(row, items[row['id']]) for row in rows]
            finally:
                cursor.close()

    def update_status(self, order_id: str, status: str, conn=None) -> Order:
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"""
                    UPDATE orders
                    SET status = %s, updated_at = NOW()
                    WHERE id = %s
                    RETURNING {RETURNING_COLUMNS}
                """, (status, order_id))
                row = cursor.fetchone()
                if not row:
                    raise NotFound(f"Order {order_id} not found")
                return self._map_row_to_order(row)
            finally:
                cursor.close()

    def set_payment_intent(self, order_id: str, payment_intent_id: str, conn=None) -> None:
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("""
                    UPDATE orders
                    SET stripe_payment_intent_id = %s, updated_at = NOW()
                    WHERE id = %s
                """, (payment_intent_id, order_id))
                if cursor.rowcount == 0:
                    raise NotFound(f"Order {order_id} not found")
            finally:
                cursor.close()

"""
Cart Repository - Data Access Layer for shopping carts

Returns CartItem domain models; reads join each line with its
product and producer so checkout can price the cart in one query.
"""
from typing import List, Optional

from app.core.database import connection_scope
from app.core.exceptions import NotFound
from app.domain.order import CartItem, CartItemWithProduct
from app.repositories.producer_repository import producer_columns
from app.repositories.product_repository import PRODUCT_FIELDS, ProductRepository

CART_COLUMNS = "c.id, c.user_id, c.product_id, c.quantity, c.created_at"

CART_WITH_PRODUCT_COLUMNS = ", ".join([
    CART_COLUMNS,
    ", ".join(f"p.{column} AS p_{column}" for column in PRODUCT_FIELDS),
    producer_columns(alias='pr', prefix='pr_'),
])


class CartRepository:
    """Repository for cart data access"""

    @staticmethod
    def _map_row_to_cart_item(row: dict) -> CartItem:
        return CartItem(
            id=row['id'],
            user_id=row['user_id'],
            product_id=row['product_id'],
            quantity=row['quantity'],
            created_at=row['created_at'],
        )

    @classmethod
    def _map_row_to_cart_item_with_product(cls, row: dict) -> CartItemWithProduct:
        item = cls._map_row_to_cart_item(row)
        product = ProductRepository.map_row_to_product_with_producer(row, prefix='p_')
        return CartItemWithProduct(**item.model_dump(), product=product)

    def get_items(self, user_id: str, conn=None) -> List[CartItemWithProduct]:
        """
        Cart lines of a user with product and producer

        Args:
            user_id: Cart owner
            conn: Optional connection (checkout passes its transaction)

        Returns:
            List of cart items, oldest first
        """
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"""
                    SELECT {CART_WITH_PRODUCT_COLUMNS}
                    FROM cart c
                    INNER JOIN products p ON c.product_id = p.id
                    INNER JOIN producers pr ON p.producer_id = pr.id
                    WHERE c.user_id = %s
                    ORDER BY c.created_at
                """, (user_id,))
                return [self._map_row_to_cart_item_with_product(row) for row in cursor.fetchall()]
            finally:
                cursor.close()

    def find_item(self, item_id: str, conn=None) -> Optional[CartItem]:
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"""
                    SELECT {CART_COLUMNS}
                    FROM cart c
                    WHERE c.id = %s
                """, (item_id,))
                row = cursor.fetchone()
                return self._map_row_to_cart_item(row) if row else None
            finally:
                cursor.close()

    def add(self, user_id: str, product_id: str, quantity: int, conn=None) -> CartItem:
        """Add a product to the cart; an existing line for the product gets its quantity increased"""
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("""
                    INSERT INTO cart (user_id, product_id, quantity)
                    VALUES (%s, %s, %s)
                    ON CONFLICT (user_id, product_id)
                    DO UPDATE SET quantity = cart.quantity + EXCLUDED.quantity
                    RETURNING id, user_id, product_id, quantity, created_at
                """, (user_id, product_id, quantity))
                return self._map_row_to_cart_item(cursor.fetchone())
            finally:
                cursor.close()

    def update_quantity(self, item_id: str, quantity: int, conn=None) -> CartItem:
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("""
                    UPDATE cart
                    SET quantity = %s
                    WHERE id = %s
                    RETURNING id, user_id, product_id, quantity, created_at
                """, (quantity, item_id))
                row = cursor.fetchone()
                if not row:
                    raise NotFound(f"Cart item {item_id} not found")
                return self._map_row_to_cart_item(row)
            finally:
                cursor.close()

    def remove(self, item_id: str, conn=None) -> bool:
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("DELETE FROM cart WHERE id = %s", (item_id,))
                return cursor.rowcount > 0
            finally:
                cursor.close()

    def clear(self, user_id: str, conn=None) -> int:
        """Delete every cart line of a user, returns the number of lines removed"""
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("DELETE FROM cart WHERE user_id = %s", (user_id,))
                return cursor.rowcount
            finally:
                cursor.close()

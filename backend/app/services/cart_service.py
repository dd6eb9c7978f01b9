"""
Cart Service
Per-user cart operations; a user can only touch their own cart lines
"""
from typing import List, Optional

from app.core.exceptions import InvalidInput, NotFound, Unauthorized
from app.domain.order import CartItem, CartItemWithProduct
from app.repositories.cart_repository import CartRepository
from app.repositories.product_repository import ProductRepository


class CartService:

    def __init__(self, cart_repo: Optional[CartRepository] = None,
                 product_repo: Optional[ProductRepository] = None):
        self.cart_repo = cart_repo or CartRepository()
        self.product_repo = product_repo or ProductRepository()

    def get_cart(self, user_id: str) -> List[CartItemWithProduct]:
        return self.cart_repo.get_items(user_id)

    def add_item(self, user_id: str, product_id: str, quantity: int) -> CartItem:
        """Add a product (merging with an existing line for the same product)"""
        product = self.product_repo.find_by_id(product_id)
        if not product:
            raise NotFound("Product not found")
        if not product.available:
            raise InvalidInput("Product is not available")
        return self.cart_repo.add(user_id, product_id, quantity)

    def _owned_item(self, user_id: str, item_id: str) -> CartItem:
        item = self.cart_repo.find_item(item_id)
        if not item:
            raise NotFound("Cart item not found")
        if item.user_id != user_id:
            raise Unauthorized("You can only modify your own cart")
        return item

    def update_quantity(self, user_id: str, item_id: str, quantity: int) -> CartItem:
        self._owned_item(user_id, item_id)
        return self.cart_repo.update_quantity(item_id, quantity)

    def remove_item(self, user_id: str, item_id: str) -> None:
        self._owned_item(user_id, item_id)
        self.cart_repo.remove(item_id)

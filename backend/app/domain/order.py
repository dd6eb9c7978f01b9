"""
Order Domain Models

Represents cart and order entities in the FreshLink system.
These are the single source of truth for order data structure.
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from enum import Enum

from app.domain.fees import DeliveryOption
from app.domain.product import ProductWithProducer


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class CartItem(BaseModel):
    """A product line in a user's cart"""

    id: str = Field(..., description="Cart item ID")
    user_id: str = Field(..., description="Cart owner")
    product_id: str = Field(..., description="Product ID")
    quantity: int = Field(..., description="Quantity", ge=1)
    created_at: datetime = Field(..., description="Creation timestamp")

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")


class CartItemWithProduct(CartItem):
    """Cart line joined with its product and producer"""

    product: ProductWithProducer

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['product'] = self.product.to_dict()
        data['line_total'] = float(self.line_total)
        return data


class CartItemCreate(BaseModel):
    """Schema for adding a product to the cart"""
    product_id: str
    quantity: int = Field(1, ge=1)


class CartItemUpdate(BaseModel):
    """Schema for changing a cart line quantity"""
    quantity: int = Field(..., ge=1)


class OrderItem(BaseModel):
    """
    Order Item domain model - represents a line item in an order

    Fields:
        id: Order item ID
        order_id: Parent order ID
        product_id: Reference to product catalog
        quantity: Number of units ordered
        unit_price: Price per unit at checkout time
        total_price: unit_price x quantity
        product: Product with producer (optional, from JOIN)
    """

    id: str = Field(..., description="Order item ID")
    order_id: str = Field(..., description="Parent order ID")
    product_id: str = Field(..., description="Product ID")
    quantity: int = Field(..., description="Quantity ordered", ge=1)
    unit_price: Decimal = Field(..., description="Price per unit", ge=0)
    total_price: Decimal = Field(..., description="Total for line item", ge=0)
    product: Optional[ProductWithProducer] = Field(None, description="Product (from JOIN)")

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump(mode="json", exclude={'product'})
        data['unit_price'] = float(self.unit_price)
        data['total_price'] = float(self.total_price)
        data['product'] = self.product.to_dict() if self.product else None
        return data


class Order(BaseModel):
    """
    Order domain model - a priced, fee-itemized checkout of a cart

    Fields:
        id: Order ID (uuid)
        user_id: Buyer
        status: pending, confirmed, processing, delivered or cancelled

        # Financial information (each rounded to cents)
        subtotal: Sum of line totals
        platform_fee: Marketplace commission
        processing_fee: Payment processing cost
        delivery_fee: Flat delivery fee
        total: subtotal + platform_fee + processing_fee + delivery_fee

        # Delivery
        delivery_option: pickup, home or farmers-market
        delivery_address: Address for home delivery
        delivery_time: Requested delivery/pickup time

        stripe_payment_intent_id: Payment intent created for this order
        items: List of order items
    """

    id: str = Field(..., description="Order ID")
    user_id: str = Field(..., description="Buyer ID")
    status: str = Field(OrderStatus.PENDING.value, description="Order status")

    # Financial information
    subtotal: Decimal = Field(..., description="Subtotal", ge=0)
    platform_fee: Decimal = Field(..., description="Platform fee", ge=0)
    processing_fee: Decimal = Field(..., description="Processing fee", ge=0)
    delivery_fee: Decimal = Field(Decimal('0'), description="Delivery fee", ge=0)
    total: Decimal = Field(..., description="Total order amount", ge=0)

    # Delivery
    delivery_option: str = Field(..., description="Delivery option")
    delivery_address: Optional[str] = None
    delivery_time: Optional[datetime] = None

    stripe_payment_intent_id: Optional[str] = None
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    items: List[OrderItem] = Field(default_factory=list, description="Order items")

    model_config = ConfigDict(from_attributes=True)

    @property
    def item_count(self) -> int:
        """Total number of items in order"""
        return len(self.items)

    @property
    def total_quantity(self) -> int:
        """Total quantity of all items"""
        return sum(item.quantity for item in self.items)

    def to_dict(self) -> dict:
        """
        Convert to dictionary with computed fields

        Returns dict with all fields plus computed properties
        """
        data = self.model_dump(mode="json", exclude={'items'})

        data['item_count'] = self.item_count
        data['total_quantity'] = self.total_quantity

        # Convert Decimal to float for JSON compatibility
        for field in ['subtotal', 'platform_fee', 'processing_fee', 'delivery_fee', 'total']:
            data[field] = float(getattr(self, field))

        data['items'] = [item.to_dict() for item in self.items]

        return data


class OrderCreate(BaseModel):
    """Schema for checking out the current user's cart"""
    delivery_option: str = DeliveryOption.PICKUP.value
    delivery_address: Optional[str] = None
    delivery_time: Optional[datetime] = None


class OrderStatusUpdate(BaseModel):
    """Schema for moving an order to a new status"""
    status: OrderStatus

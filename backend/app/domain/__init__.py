"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities.
These models enforce type safety and validation across the application.
"""
from app.domain.fees import DeliveryOption, FeeSchedule, FeeCalculation
from app.domain.user import Location, User
from app.domain.product import Producer, Product, ProductWithProducer
from app.domain.order import Order, OrderItem, OrderStatus, CartItem, CartItemWithProduct
from app.domain.review import Review

__all__ = [
    'DeliveryOption', 'FeeSchedule', 'FeeCalculation',
    'Location', 'User',
    'Producer', 'Product', 'ProductWithProducer',
    'Order', 'OrderItem', 'OrderStatus', 'CartItem', 'CartItemWithProduct',
    'Review',
]

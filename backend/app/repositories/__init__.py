"""
Repository Layer - Data Access

This layer handles all database queries and returns domain models.
Repositories abstract away SQL details from business logic.
"""
from app.repositories.user_repository import UserRepository
from app.repositories.producer_repository import ProducerRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.cart_repository import CartRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.review_repository import ReviewRepository

__all__ = [
    'UserRepository',
    'ProducerRepository',
    'ProductRepository',
    'CartRepository',
    'OrderRepository',
    'ReviewRepository',
]

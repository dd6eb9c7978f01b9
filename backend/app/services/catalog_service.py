"""
Catalog Service
Producer profiles, product listings and reviews, with ownership rules

Only the user owning a producer profile may change that producer's
products; everything else is read-only for other users.
"""
import logging
from typing import List, Optional

from app.core.database import transaction
from app.core.exceptions import InvalidInput, NotFound, Unauthorized
from app.domain.product import (
    Producer, ProducerCreate, ProducerUpdate,
    Product, ProductCreate, ProductUpdate, ProductWithProducer,
)
from app.domain.review import Review, ReviewCreate
from app.repositories.producer_repository import ProducerRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.review_repository import ReviewRepository
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class CatalogService:

    def __init__(self, producer_repo: Optional[ProducerRepository] = None,
                 product_repo: Optional[ProductRepository] = None,
                 user_repo: Optional[UserRepository] = None,
                 review_repo: Optional[ReviewRepository] = None,
                 transaction_factory=transaction):
        self.producer_repo = producer_repo or ProducerRepository()
        self.product_repo = product_repo or ProductRepository()
        self.user_repo = user_repo or UserRepository()
        self.review_repo = review_repo or ReviewRepository()
        self.transaction_factory = transaction_factory

    # Producers

    def create_producer(self, user_id: str, data: ProducerCreate) -> Producer:
        """Create the user's producer profile and promote the user to producer"""
        if self.producer_repo.find_by_user_id(user_id):
            raise InvalidInput("Producer profile already exists")

        with self.transaction_factory() as conn:
            producer = self.producer_repo.create(user_id, data, conn=conn)
            self.user_repo.promote_to_producer(user_id, conn=conn)

        logger.info(f"Producer {producer.id} created for user {user_id}")
        return producer

    def get_own_producer(self, user_id: str) -> Producer:
        producer = self.producer_repo.find_by_user_id(user_id)
        if not producer:
            raise NotFound("Producer profile not found")
        return producer

    def update_own_producer(self, user_id: str, updates: ProducerUpdate) -> Producer:
        producer = self.get_own_producer(user_id)
        return self.producer_repo.update(producer.id, updates)

    def _require_producer(self, user_id: str, action: str) -> Producer:
        producer = self.producer_repo.find_by_user_id(user_id)
        if not producer:
            raise Unauthorized(f"Must be a producer to {action} products")
        return producer

    # Products

    def get_product(self, product_id: str) -> ProductWithProducer:
        product = self.product_repo.find_by_id(product_id)
        if not product:
            raise NotFound("Product not found")
        return product

    def list_producer_products(self, producer_id: str) -> List[Product]:
        if not self.producer_repo.find_by_id(producer_id):
            raise NotFound("Producer not found")
        return self.product_repo.find_by_producer(producer_id)

    def create_product(self, user_id: str, data: ProductCreate) -> Product:
        producer = self._require_producer(user_id, "create")
        product = self.product_repo.create(producer.id, data)
        logger.info(f"Product {product.id} created by producer {producer.id}")
        return product

    def _owned_product(self, user_id: str, product_id: str, action: str) -> ProductWithProducer:
        producer = self._require_producer(user_id, action)
        product = self.get_product(product_id)
        if product.producer_id != producer.id:
            raise Unauthorized(f"You can only {action} your own products")
        return product

    def update_product(self, user_id: str, product_id: str, updates: ProductUpdate) -> Product:
        self._owned_product(user_id, product_id, "update")
        return self.product_repo.update(product_id, updates)

    def delete_product(self, user_id: str, product_id: str) -> None:
        self._owned_product(user_id, product_id, "delete")
        self.product_repo.delete(product_id)
        logger.info(f"Product {product_id} deleted by user {user_id}")

    # Reviews

    def add_review(self, user_id: str, product_id: str, data: ReviewCreate) -> Review:
        product = self.get_product(product_id)
        return self.review_repo.create(user_id, product.id, product.producer_id, data)

    def list_reviews(self, product_id: str) -> List[Review]:
        self.get_product(product_id)
        return self.review_repo.find_by_product(product_id)

"""
Unit tests for CatalogService ownership rules
"""
import pytest
from contextlib import contextmanager
from decimal import Decimal
from unittest.mock import MagicMock, sentinel

from app.core.exceptions import InvalidInput, NotFound, Unauthorized
from app.domain.product import ProducerCreate, ProductCreate, ProductUpdate
from app.domain.review import ReviewCreate
from app.services.catalog_service import CatalogService
from conftest import make_producer, make_product


@contextmanager
def fake_transaction():
    yield sentinel.conn


@pytest.fixture
def producer_repo():
    return MagicMock()


@pytest.fixture
def product_repo():
    return MagicMock()


@pytest.fixture
def user_repo():
    return MagicMock()


@pytest.fixture
def review_repo():
    return MagicMock()


@pytest.fixture
def service(producer_repo, product_repo, user_repo, review_repo):
    return CatalogService(
        producer_repo=producer_repo,
        product_repo=product_repo,
        user_repo=user_repo,
        review_repo=review_repo,
        transaction_factory=fake_transaction,
    )


class TestProducers:

    def test_create_producer_promotes_user_in_same_transaction(self, service, producer_repo, user_repo):
        producer_repo.find_by_user_id.return_value = None
        producer_repo.create.return_value = make_producer(user_id="user-1")
        data = ProducerCreate(business_name="Maple Ridge Farm")

        producer = service.create_producer("user-1", data)

        producer_repo.create.assert_called_once_with("user-1", data, conn=sentinel.conn)
        user_repo.promote_to_producer.assert_called_once_with("user-1", conn=sentinel.conn)
        assert producer.user_id == "user-1"

    def test_create_second_producer_is_rejected(self, service, producer_repo):
        producer_repo.find_by_user_id.return_value = make_producer(user_id="user-1")

        with pytest.raises(InvalidInput):
            service.create_producer("user-1", ProducerCreate(business_name="Again"))
        producer_repo.create.assert_not_called()

    def test_get_own_producer_missing(self, service, producer_repo):
        producer_repo.find_by_user_id.return_value = None

        with pytest.raises(NotFound):
            service.get_own_producer("user-1")


class TestProducts:

    def test_consumer_cannot_create_product(self, service, producer_repo, product_repo):
        producer_repo.find_by_user_id.return_value = None
        data = ProductCreate(name="Kale", category="vegetables", price=Decimal("3"), unit="bunch")

        with pytest.raises(Unauthorized):
            service.create_product("user-1", data)
        product_repo.create.assert_not_called()

    def test_producer_creates_product_under_own_profile(self, service, producer_repo, product_repo):
        producer_repo.find_by_user_id.return_value = make_producer(id="producer-1")
        product_repo.create.return_value = make_product()
        data = ProductCreate(name="Kale", category="vegetables", price=Decimal("3"), unit="bunch")

        service.create_product("user-producer", data)

        product_repo.create.assert_called_once_with("producer-1", data)

    def test_cannot_update_another_producers_product(self, service, producer_repo, product_repo):
        producer_repo.find_by_user_id.return_value = make_producer(id="producer-2")
        product_repo.find_by_id.return_value = make_product(producer=make_producer(id="producer-1"))

        with pytest.raises(Unauthorized):
            service.update_product("user-2", "product-1", ProductUpdate(price=Decimal("1")))
        product_repo.update.assert_not_called()

    def test_delete_own_product(self, service, producer_repo, product_repo):
        producer_repo.find_by_user_id.return_value = make_producer(id="producer-1")
        product_repo.find_by_id.return_value = make_product(producer=make_producer(id="producer-1"))

        service.delete_product("user-producer", "product-1")

        product_repo.delete.assert_called_once_with("product-1")

    def test_missing_product(self, service, product_repo):
        product_repo.find_by_id.return_value = None

        with pytest.raises(NotFound):
            service.get_product("product-404")


class TestReviews:

    def test_review_is_attributed_to_the_products_producer(self, service, product_repo, review_repo):
        product_repo.find_by_id.return_value = make_product(producer=make_producer(id="producer-7"))
        data = ReviewCreate(rating=5, comment="Great")

        service.add_review("user-1", "product-1", data)

        review_repo.create.assert_called_once_with("user-1", "product-1", "producer-7", data)

    def test_reviews_of_missing_product(self, service, product_repo, review_repo):
        product_repo.find_by_id.return_value = None

        with pytest.raises(NotFound):
            service.list_reviews("product-404")
        review_repo.find_by_product.assert_not_called()

"""
Pytest fixtures and configuration for FreshLink Backend tests

This file provides shared fixtures that can be used across all test modules.
Database access is mocked throughout; no test needs a running PostgreSQL.
"""
import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from fastapi.testclient import TestClient

from app.core.auth import TokenUser, get_current_user
from app.domain.order import CartItemWithProduct, Order, OrderItem
from app.domain.product import Producer, ProductWithProducer
from app.domain.user import Location

NOW = datetime(2025, 6, 1, 12, 0, 0)

# Toronto city hall; Hamilton is ~59 km away, Oshawa ~50 km
TORONTO = Location(latitude=43.6534, longitude=-79.3839)
HAMILTON = Location(latitude=43.2557, longitude=-79.8711)
OSHAWA = Location(latitude=43.8971, longitude=-78.8658)


def make_producer(id="producer-1", user_id="user-producer", location=TORONTO, **overrides) -> Producer:
    data = {
        'id': id,
        'user_id': user_id,
        'business_name': f"Farm {id}",
        'location': location,
        'created_at': NOW,
    }
    data.update(overrides)
    return Producer(**data)


def make_product(id="product-1", producer=None, price="4.50", created_at=NOW, **overrides) -> ProductWithProducer:
    producer = producer or make_producer()
    data = {
        'id': id,
        'producer_id': producer.id,
        'name': f"Product {id}",
        'category': 'vegetables',
        'price': Decimal(price),
        'unit': 'kg',
        'stock': 10,
        'created_at': created_at,
        'producer': producer,
    }
    data.update(overrides)
    return ProductWithProducer(**data)


def make_cart_item(id="cart-1", user_id="user-1", product=None, quantity=1) -> CartItemWithProduct:
    product = product or make_product()
    return CartItemWithProduct(
        id=id,
        user_id=user_id,
        product_id=product.id,
        quantity=quantity,
        created_at=NOW,
        product=product,
    )


def make_order(id="order-1", user_id="user-1", status="pending", items=None, **overrides) -> Order:
    data = {
        'id': id,
        'user_id': user_id,
        'status': status,
        'subtotal': Decimal("100.00"),
        'platform_fee': Decimal("5.00"),
        'processing_fee': Decimal("3.20"),
        'delivery_fee': Decimal("0.00"),
        'total': Decimal("108.20"),
        'delivery_option': 'pickup',
        'created_at': NOW,
        'items': items or [],
    }
    data.update(overrides)
    return Order(**data)


def make_order_item(id="item-1", order_id="order-1", product=None, quantity=2) -> OrderItem:
    product = product or make_product()
    return OrderItem(
        id=id,
        order_id=order_id,
        product_id=product.id,
        quantity=quantity,
        unit_price=product.price,
        total_price=product.price * quantity,
        product=product,
    )


@pytest.fixture
def producer_row():
    """
    Provides a producers row as returned by RealDictCursor
    """
    return {
        'id': 'producer-1',
        'user_id': 'user-producer',
        'business_name': 'Maple Ridge Farm',
        'description': 'Family farm',
        'story': None,
        'certifications': ['organic'],
        'latitude': 43.6534,
        'longitude': -79.3839,
        'address': '100 Queen St W',
        'phone': None,
        'website': None,
        'profile_image': None,
        'verified': True,
        'rating': Decimal('4.5'),
        'total_reviews': 12,
        'created_at': NOW,
    }


@pytest.fixture
def product_row(producer_row):
    """
    Provides a products JOIN producers row (producer columns prefixed pr_)
    """
    row = {
        'id': 'product-1',
        'producer_id': 'producer-1',
        'name': 'Heirloom Tomatoes',
        'description': 'Vine ripened',
        'category': 'vegetables',
        'price': Decimal('4.50'),
        'unit': 'kg',
        'stock': 25,
        'images': None,
        'tags': ['organic', 'local'],
        'seasonal': True,
        'available': True,
        'created_at': NOW,
        'updated_at': None,
    }
    row.update({f"pr_{column}": value for column, value in producer_row.items()})
    return row


@pytest.fixture
def order_row():
    return {
        'id': 'order-1',
        'user_id': 'user-1',
        'status': 'pending',
        'subtotal': Decimal('100.00'),
        'platform_fee': Decimal('5.00'),
        'processing_fee': Decimal('3.20'),
        'delivery_fee': Decimal('0.00'),
        'total': Decimal('108.20'),
        'delivery_option': 'pickup',
        'delivery_address': None,
        'delivery_time': None,
        'stripe_payment_intent_id': None,
        'created_at': NOW,
        'updated_at': None,
    }


@pytest.fixture
def current_user():
    return TokenUser(id="user-1", email="ana@example.com", name="Ana")


@pytest.fixture
def client(current_user):
    """
    Provides a TestClient with authentication replaced by current_user

    Tests override service dependencies through client.app.dependency_overrides.
    """
    from app.main import app

    app.dependency_overrides[get_current_user] = lambda: current_user
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def later():
    """Returns a timestamp factory: later(n) is n hours after NOW"""
    return lambda hours: NOW + timedelta(hours=hours)

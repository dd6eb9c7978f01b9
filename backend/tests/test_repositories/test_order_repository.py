"""
Unit tests for OrderRepository

These tests validate repository logic without requiring a database connection.
"""
import pytest
from unittest.mock import MagicMock
from decimal import Decimal

from app.core.exceptions import NotFound
from app.repositories.order_repository import OrderRepository
from app.services.fee_calculator import calculate_fees


@pytest.fixture
def mock_conn():
    conn = MagicMock()
    conn.cursor.return_value = MagicMock()
    return conn


def item_row(product_row, id='item-1', order_id='order-1', quantity=2):
    row = {
        'id': id,
        'order_id': order_id,
        'product_id': 'product-1',
        'quantity': quantity,
        'unit_price': Decimal('4.50'),
        'total_price': Decimal('4.50') * quantity,
    }
    for column, value in product_row.items():
        key = column if column.startswith('pr_') else f'p_{column}'
        row[key] = value
    return row


class TestOrderRepository:
    """Test OrderRepository methods"""

    def test_create_inserts_fee_breakdown(self, mock_conn, order_row):
        cursor = mock_conn.cursor.return_value
        cursor.fetchone.return_value = order_row
        fees = calculate_fees(Decimal('100'), 'pickup')

        order = OrderRepository().create('user-1', fees, 'pickup', conn=mock_conn)

        sql, params = cursor.execute.call_args.args
        assert "INSERT INTO orders" in sql
        assert params[:6] == (
            'user-1', Decimal('100.00'), Decimal('5.00'), Decimal('3.20'), Decimal('0.00'), Decimal('108.20')
        )
        assert order.total == Decimal('108.20')
        assert order.items == []

    def test_add_items_inserts_each_line(self, mock_conn):
        cursor = mock_conn.cursor.return_value
        cursor.fetchone.side_effect = [
            {'id': 'item-1', 'order_id': 'order-1', 'product_id': 'a', 'quantity': 2,
             'unit_price': Decimal('1.50'), 'total_price': Decimal('3.00')},
            {'id': 'item-2', 'order_id': 'order-1', 'product_id': 'b', 'quantity': 1,
             'unit_price': Decimal('9.99'), 'total_price': Decimal('9.99')},
        ]

        items = OrderRepository().add_items('order-1', [
            {'product_id': 'a', 'quantity': 2, 'unit_price': Decimal('1.50'), 'total_price': Decimal('3.00')},
            {'product_id': 'b', 'quantity': 1, 'unit_price': Decimal('9.99'), 'total_price': Decimal('9.99')},
        ], conn=mock_conn)

        assert cursor.execute.call_count == 2
        assert [item.product_id for item in items] == ['a', 'b']
        assert items[0].product is None

    def test_find_by_id_loads_items_with_products(self, mock_conn, order_row, product_row):
        cursor = mock_conn.cursor.return_value
        cursor.fetchone.return_value = order_row
        cursor.fetchall.return_value = [item_row(product_row)]

        order = OrderRepository().find_by_id('order-1', conn=mock_conn)

        assert order.id == 'order-1'
        assert order.item_count == 1
        assert order.total_quantity == 2
        assert order.items[0].product.name == 'Heirloom Tomatoes'
        assert order.items[0].product.producer.id == 'producer-1'

    def test_find_by_user_fetches_items_in_one_query(self, mock_conn, order_row, product_row):
        """N+1 check: two orders, two SELECTs total"""
        cursor = mock_conn.cursor.return_value
        second = dict(order_row, id='order-2')
        cursor.fetchall.side_effect = [
            [order_row, second],
            [item_row(product_row, id='item-1', order_id='order-1'),
             item_row(product_row, id='item-2', order_id='order-2', quantity=5)],
        ]

        orders = OrderRepository().find_by_user('user-1', conn=mock_conn)

        assert cursor.execute.call_count == 2
        assert [order.id for order in orders] == ['order-1', 'order-2']
        assert orders[1].items[0].quantity == 5
        _, params = cursor.execute.call_args.args
        assert params == (['order-1', 'order-2'],)

    def test_find_by_user_without_orders_skips_items_query(self, mock_conn):
        cursor = mock_conn.cursor.return_value
        cursor.fetchall.return_value = []

        assert OrderRepository().find_by_user('user-1', conn=mock_conn) == []
        assert cursor.execute.call_count == 1

    def test_update_status_missing_order(self, mock_conn):
        mock_conn.cursor.return_value.fetchone.return_value = None

        with pytest.raises(NotFound):
            OrderRepository().update_status('missing', 'confirmed', conn=mock_conn)

    def test_set_payment_intent_missing_order(self, mock_conn):
        mock_conn.cursor.return_value.rowcount = 0

        with pytest.raises(NotFound):
            OrderRepository().set_payment_intent('missing', 'pi_1', conn=mock_conn)

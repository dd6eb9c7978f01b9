"""
Unit tests for ProductRepository

These tests validate repository logic without requiring a database connection.
"""
import pytest
from unittest.mock import MagicMock, patch
from decimal import Decimal

from psycopg2 import errors

from app.core.exceptions import InvalidInput, NotFound
from app.domain.product import ProductUpdate, ProductWithProducer
from app.repositories.product_repository import ProductRepository, escape_like


class TestProductRepository:
    """Test ProductRepository methods"""

    @patch('app.core.database.get_db_connection_dict')
    def test_find_by_id_returns_product_with_producer(self, mock_get_conn, product_row):
        """Test find_by_id maps the JOIN row to ProductWithProducer"""
        # Arrange: Mock database connection
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = product_row

        # Act
        repo = ProductRepository()
        product = repo.find_by_id('product-1')

        # Assert: Verify result
        assert isinstance(product, ProductWithProducer)
        assert product.name == 'Heirloom Tomatoes'
        assert product.price == Decimal('4.50')
        assert product.images == []
        assert product.producer.id == 'producer-1'
        assert product.producer.business_name == 'Maple Ridge Farm'
        assert product.producer.location.latitude == 43.6534

        # Own connection is committed and closed
        mock_cursor.close.assert_called_once()
        mock_conn.commit.assert_called_once()
        mock_conn.close.assert_called_once()

    @patch('app.core.database.get_db_connection_dict')
    def test_find_by_id_returns_none_when_not_found(self, mock_get_conn):
        """Test find_by_id returns None when product doesn't exist"""
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = None

        repo = ProductRepository()
        product = repo.find_by_id('missing')

        assert product is None
        mock_cursor.close.assert_called_once()
        mock_conn.close.assert_called_once()

    def test_producer_without_location(self, product_row):
        """Producer location is None when coordinates are missing"""
        product_row['pr_latitude'] = None

        product = ProductRepository.map_row_to_product_with_producer(product_row)

        assert product.producer.location is None

    def test_find_search_candidates_builds_filters(self, product_row):
        """Test text, category and tag filters become SQL conditions"""
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchall.return_value = [product_row]

        repo = ProductRepository()
        results = repo.find_search_candidates(
            query="tom%", category="vegetables", tags=["organic"], conn=mock_conn
        )

        sql, params = mock_cursor.execute.call_args.args
        assert "p.available = true" in sql
        assert "ILIKE" in sql
        assert "p.category = %s" in sql
        assert "p.tags && %s::text[]" in sql
        assert params == ["%tom\\%%", "%tom\\%%", "vegetables", ["organic"]]
        assert len(results) == 1

        # Caller's connection is left open for the caller to manage
        mock_conn.commit.assert_not_called()
        mock_conn.close.assert_not_called()

    def test_find_search_candidates_without_filters(self):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchall.return_value = []

        ProductRepository().find_search_candidates(conn=mock_conn)

        sql, params = mock_cursor.execute.call_args.args
        assert "ILIKE" not in sql
        assert params == []

    def test_update_only_sets_given_fields(self, product_row):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = product_row

        ProductRepository().update('product-1', ProductUpdate(price=Decimal('5.00')), conn=mock_conn)

        sql, params = mock_cursor.execute.call_args.args
        assert "price = %s" in sql
        assert "name = %s" not in sql
        assert "updated_at = NOW()" in sql
        assert params == [Decimal('5.00'), 'product-1']

    def test_update_missing_product_raises(self):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = None

        with pytest.raises(NotFound):
            ProductRepository().update('missing', ProductUpdate(stock=3), conn=mock_conn)

    def test_update_rejects_null_for_required_columns(self):
        """Explicit nulls for NOT NULL columns are rejected before any SQL runs"""
        mock_conn = MagicMock()

        updates = ProductUpdate.model_validate({'name': None, 'price': None, 'description': None})
        with pytest.raises(InvalidInput, match="name, price"):
            ProductRepository().update('product-1', updates, conn=mock_conn)

        mock_conn.cursor.assert_not_called()

    def test_update_allows_clearing_optional_columns(self, product_row):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.fetchone.return_value = product_row

        ProductRepository().update('product-1', ProductUpdate.model_validate({'description': None}), conn=mock_conn)

        _, params = mock_cursor.execute.call_args.args
        assert params == [None, 'product-1']

    @patch('app.core.database.get_db_connection_dict')
    def test_delete_ordered_product_is_invalid_input(self, mock_get_conn):
        """Products referenced by order_items cannot be deleted"""
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.execute.side_effect = errors.ForeignKeyViolation("order_items_product_id_fkey")

        with pytest.raises(InvalidInput, match="mark it unavailable"):
            ProductRepository().delete('product-1')

        mock_conn.rollback.assert_called_once()
        mock_cursor.close.assert_called_once()

    @patch('app.core.database.get_db_connection_dict')
    def test_error_rolls_back_own_connection(self, mock_get_conn):
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        mock_cursor.execute.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            ProductRepository().delete('product-1')

        mock_conn.rollback.assert_called_once()
        mock_conn.commit.assert_not_called()
        mock_conn.close.assert_called_once()


class TestEscapeLike:

    def test_escapes_wildcards(self):
        assert escape_like("50%_off") == "50\\%\\_off"

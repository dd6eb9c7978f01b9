"""
Product Repository - Data Access Layer for Products

Handles all database queries for products and returns Product domain models.
"""
from typing import List, Optional

from psycopg2 import errors

from app.core.database import connection_scope, reject_nulls
from app.core.exceptions import InvalidInput, NotFound
from app.domain.product import Product, ProductCreate, ProductUpdate, ProductWithProducer
from app.repositories.producer_repository import ProducerRepository, producer_columns

PRODUCT_FIELDS = [
    'id', 'producer_id', 'name', 'description', 'category',
    'price', 'unit', 'stock', 'images', 'tags',
    'seasonal', 'available', 'created_at', 'updated_at',
]

PRODUCT_COLUMNS = ", ".join(f"p.{column}" for column in PRODUCT_FIELDS)
RETURNING_COLUMNS = ", ".join(PRODUCT_FIELDS)

PRODUCT_WITH_PRODUCER_COLUMNS = f"{PRODUCT_COLUMNS}, {producer_columns(alias='pr', prefix='pr_')}"

UPDATABLE_FIELDS = {
    'name', 'description', 'category', 'price', 'unit', 'stock',
    'images', 'tags', 'seasonal', 'available',
}

NOT_NULL_FIELDS = {'name', 'category', 'price', 'unit', 'stock', 'seasonal', 'available'}


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally"""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ProductRepository:
    """
    Repository for Product data access

    All SQL queries for products are centralized here.
    Returns Product domain models, not raw dictionaries.
    """

    @staticmethod
    def map_row_to_product(row: dict, prefix: str = "") -> Product:
        """Map a database row to Product domain model."""
        return Product(
            id=row[f'{prefix}id'],
            producer_id=row[f'{prefix}producer_id'],
            name=row[f'{prefix}name'],
            description=row.get(f'{prefix}description'),
            category=row[f'{prefix}category'],
            price=row[f'{prefix}price'],
            unit=row[f'{prefix}unit'],
            stock=row.get(f'{prefix}stock') or 0,
            images=row.get(f'{prefix}images') or [],
            tags=row.get(f'{prefix}tags') or [],
            seasonal=bool(row.get(f'{prefix}seasonal')),
            available=bool(row.get(f'{prefix}available')),
            created_at=row[f'{prefix}created_at'],
            updated_at=row.get(f'{prefix}updated_at'),
        )

    @classmethod
    def map_row_to_product_with_producer(cls, row: dict, prefix: str = "",
                                         producer_prefix: str = "pr_") -> ProductWithProducer:
        """
        Map a products JOIN producers row.

        Producer columns are expected as pr_<column>
        (see PRODUCT_WITH_PRODUCER_COLUMNS).
        """
        product = cls.map_row_to_product(row, prefix)
        producer = ProducerRepository.map_row_to_producer(row, prefix=producer_prefix)
        return ProductWithProducer(**product.model_dump(), producer=producer)

    def find_by_id(self, product_id: str, conn=None) -> Optional[ProductWithProducer]:
        """
        Find product by ID, joined with its producer

        Args:
            product_id: Product ID

        Returns:
            ProductWithProducer or None if not found
        """
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"""
                    SELECT {PRODUCT_WITH_PRODUCER_COLUMNS}
                    FROM products p
                    INNER JOIN producers pr ON p.producer_id = pr.id
                    WHERE p.id = %s
                """, (product_id,))

                row = cursor.fetchone()
                if not row:
                    return None

                return self.map_row_to_product_with_producer(row)
            finally:
                cursor.close()

    def find_by_producer(self, producer_id: str, conn=None) -> List[Product]:
        """All products of a producer, newest first"""
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"""
                    SELECT {PRODUCT_COLUMNS}
                    FROM products p
                    WHERE p.producer_id = %s
                    ORDER BY p.created_at DESC
                """, (producer_id,))
                return [self.map_row_to_product(row) for row in cursor.fetchall()]
            finally:
                cursor.close()

    def find_search_candidates(
        self,
        query: str = "",
        category: Optional[str] = None,
        tags: Optional[List[str]] = None,
        conn=None
    ) -> List[ProductWithProducer]:
        """
        Available products matching text/category/tag filters

        Args:
            query: Case-insensitive substring of name or description
            category: Exact category
            tags: Product must carry at least one of these tags

        Returns:
            Products with producers, newest first
        """
        conditions = ["p.available = true"]
        params = []

        if query:
            conditions.append("(p.name ILIKE %s OR p.description ILIKE %s)")
            search_term = f"%{escape_like(query)}%"
            params.extend([search_term, search_term])

        if category:
            conditions.append("p.category = %s")
            params.append(category)

        if tags:
            conditions.append("p.tags && %s::text[]")
            params.append(list(tags))

        where_clause = " AND ".join(conditions)

        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"""
                    SELECT {PRODUCT_WITH_PRODUCER_COLUMNS}
                    FROM products p
                    INNER JOIN producers pr ON p.producer_id = pr.id
                    WHERE {where_clause}
                    ORDER BY p.created_at DESC
                """, params)
                return [self.map_row_to_product_with_producer(row) for row in cursor.fetchall()]
            finally:
                cursor.close()

    def create(self, producer_id: str, data: ProductCreate, conn=None) -> Product:
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"""
                    INSERT INTO products (
                        producer_id, name, description, category, price, unit,
                        stock, images, tags, seasonal, available
                    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, true)
                    RETURNING {RETURNING_COLUMNS}
                """, (
                    producer_id,
                    data.name,
                    data.description,
                    data.category,
                    data.price,
                    data.unit,
                    data.stock,
                    data.images,
                    data.tags,
                    data.seasonal,
                ))
                return self.map_row_to_product(cursor.fetchone())
            finally:
                cursor.close()

    def update(self, product_id: str, updates: ProductUpdate, conn=None) -> Product:
        """Apply the fields set on `updates`; raises NotFound for unknown products"""
        values = {
            column: value
            for column, value in updates.model_dump(exclude_unset=True).items()
            if column in UPDATABLE_FIELDS
        }
        reject_nulls(values, NOT_NULL_FIELDS, "Product")
        assignments = ", ".join([f"{column} = %s" for column in values] + ["updated_at = NOW()"])

        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"""
                    UPDATE products
                    SET {assignments}
                    WHERE id = %s
                    RETURNING {RETURNING_COLUMNS}
                """, list(values.values()) + [product_id])
                row = cursor.fetchone()
                if not row:
                    raise NotFound(f"Product {product_id} not found")
                return self.map_row_to_product(row)
            finally:
                cursor.close()

    def delete(self, product_id: str, conn=None) -> bool:
        """
        Delete a product, returns False when it did not exist

        Products referenced by past orders cannot be deleted; raises InvalidInput.
        """
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("DELETE FROM products WHERE id = %s", (product_id,))
                return cursor.rowcount > 0
            except errors.ForeignKeyViolation:
                raise InvalidInput("Product has orders; mark it unavailable instead")
            finally:
                cursor.close()

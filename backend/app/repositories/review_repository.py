"""
Review Repository - Data Access Layer for product reviews
"""
from typing import List

from app.core.database import connection_scope
from app.domain.review import Review, ReviewCreate

REVIEW_COLUMNS = "id, user_id, product_id, producer_id, rating, comment, created_at"


class ReviewRepository:
    """Repository for review data access"""

    def create(self, user_id: str, product_id: str, producer_id: str,
               data: ReviewCreate, conn=None) -> Review:
        """
        Insert a review and refresh the producer's rating aggregate

        Both statements share one connection so the aggregate never
        drifts from the reviews table.
        """
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"""
                    INSERT INTO reviews (user_id, product_id, producer_id, rating, comment)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING {REVIEW_COLUMNS}
                """, (user_id, product_id, producer_id, data.rating, data.comment))
                review = Review(**cursor.fetchone())

                cursor.execute("""
                    UPDATE producers
                    SET rating = sub.avg_rating, total_reviews = sub.review_count
                    FROM (
                        SELECT ROUND(AVG(rating)::numeric, 1) AS avg_rating, COUNT(*) AS review_count
                        FROM reviews
                        WHERE producer_id = %s
                    ) sub
                    WHERE producers.id = %s
                """, (producer_id, producer_id))

                return review
            finally:
                cursor.close()

    def find_by_product(self, product_id: str, conn=None) -> List[Review]:
        """Reviews of a product, newest first"""
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"""
                    SELECT {REVIEW_COLUMNS}
                    FROM reviews
                    WHERE product_id = %s
                    ORDER BY created_at DESC
                """, (product_id,))
                return [Review(**row) for row in cursor.fetchall()]
            finally:
                cursor.close()

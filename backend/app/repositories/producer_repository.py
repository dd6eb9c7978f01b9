"""
Producer Repository - Data Access Layer for Producers

Handles all database queries for producers and returns Producer domain models.
"""
from typing import List, Optional

from app.core.database import connection_scope, reject_nulls
from app.core.exceptions import NotFound
from app.domain.product import Producer, ProducerCreate, ProducerUpdate
from app.domain.user import Location

PRODUCER_FIELDS = [
    'id', 'user_id', 'business_name', 'description', 'story', 'certifications',
    'latitude', 'longitude', 'address', 'phone', 'website', 'profile_image',
    'verified', 'rating', 'total_reviews', 'created_at',
]

NOT_NULL_FIELDS = {'business_name'}


def producer_columns(alias: str = "pr", prefix: str = "") -> str:
    """SELECT list for producer columns, optionally prefixed for JOINs"""
    return ", ".join(
        f"{alias}.{column} AS {prefix}{column}" if prefix else f"{alias}.{column}"
        for column in PRODUCER_FIELDS
    )


class ProducerRepository:
    """
    Repository for Producer data access

    All SQL queries for producers are centralized here.
    Every method accepts an optional connection so it can take part
    in a caller's transaction.
    """

    @staticmethod
    def map_row_to_producer(row: dict, prefix: str = "") -> Producer:
        """Map a database row (optionally with prefixed columns) to Producer"""
        return Producer(
            id=row[f'{prefix}id'],
            user_id=row[f'{prefix}user_id'],
            business_name=row[f'{prefix}business_name'],
            description=row.get(f'{prefix}description'),
            story=row.get(f'{prefix}story'),
            certifications=row.get(f'{prefix}certifications') or [],
            location=Location.from_row(row, prefix),
            address=row.get(f'{prefix}address'),
            phone=row.get(f'{prefix}phone'),
            website=row.get(f'{prefix}website'),
            profile_image=row.get(f'{prefix}profile_image'),
            verified=bool(row.get(f'{prefix}verified')),
            rating=row.get(f'{prefix}rating') or 0,
            total_reviews=row.get(f'{prefix}total_reviews') or 0,
            created_at=row[f'{prefix}created_at'],
        )

    def find_by_id(self, producer_id: str, conn=None) -> Optional[Producer]:
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"""
                    SELECT {producer_columns()}
                    FROM producers pr
                    WHERE pr.id = %s
                """, (producer_id,))
                row = cursor.fetchone()
                return self.map_row_to_producer(row) if row else None
            finally:
                cursor.close()

    def find_by_user_id(self, user_id: str, conn=None) -> Optional[Producer]:
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"""
                    SELECT {producer_columns()}
                    FROM producers pr
                    WHERE pr.user_id = %s
                """, (user_id,))
                row = cursor.fetchone()
                return self.map_row_to_producer(row) if row else None
            finally:
                cursor.close()

    def find_with_location(self, conn=None) -> List[Producer]:
        """All producers that have a location set (radius search candidates)"""
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"""
                    SELECT {producer_columns()}
                    FROM producers pr
                    WHERE pr.latitude IS NOT NULL AND pr.longitude IS NOT NULL
                """)
                return [self.map_row_to_producer(row) for row in cursor.fetchall()]
            finally:
                cursor.close()

    def create(self, user_id: str, data: ProducerCreate, conn=None) -> Producer:
        """
        Create a producer profile

        Args:
            user_id: Owning user
            data: Producer fields

        Returns:
            The created Producer
        """
        location = data.location
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"""
                    INSERT INTO producers (
                        user_id, business_name, description, story, certifications,
                        latitude, longitude, address, phone, website
                    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING {producer_columns(alias='producers')}
                """, (
                    user_id,
                    data.business_name,
                    data.description,
                    data.story,
                    data.certifications,
                    location.latitude if location else None,
                    location.longitude if location else None,
                    data.address,
                    data.phone,
                    data.website,
                ))
                return self.map_row_to_producer(cursor.fetchone())
            finally:
                cursor.close()

    def update(self, producer_id: str, updates: ProducerUpdate, conn=None) -> Producer:
        """Apply the fields set on `updates`, raises NotFound for unknown producers"""
        values = updates.model_dump(exclude_unset=True)
        reject_nulls(values, NOT_NULL_FIELDS, "Producer")
        if 'location' in values:
            location = updates.location
            values.pop('location')
            values['latitude'] = location.latitude if location else None
            values['longitude'] = location.longitude if location else None

        if not values:
            producer = self.find_by_id(producer_id, conn=conn)
            if not producer:
                raise NotFound(f"Producer {producer_id} not found")
            return producer

        assignments = ", ".join(f"{column} = %s" for column in values)
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"""
                    UPDATE producers
                    SET {assignments}
                    WHERE id = %s
                    RETURNING {producer_columns(alias='producers')}
                """, list(values.values()) + [producer_id])
                row = cursor.fetchone()
                if not row:
                    raise NotFound(f"Producer {producer_id} not found")
                return self.map_row_to_producer(row)
            finally:
                cursor.close()

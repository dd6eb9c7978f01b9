"""
User Repository - Data Access Layer for user profiles

Credentials are managed by the session layer; this repository only
reads and updates profile data.
"""
from typing import Optional

from app.core.database import connection_scope, reject_nulls
from app.core.exceptions import NotFound
from app.domain.user import Location, User, UserUpdate

USER_COLUMNS = """
    id, email, username, role, profile_completion,
    latitude, longitude, city, province, created_at, updated_at
"""

NOT_NULL_FIELDS = {'username'}


class UserRepository:
    """Repository for user profile data access"""

    @staticmethod
    def _map_row_to_user(row: dict) -> User:
        return User(
            id=row['id'],
            email=row['email'],
            username=row['username'],
            role=row['role'],
            profile_completion=row.get('profile_completion') or 0,
            location=Location.from_row(row),
            city=row.get('city'),
            province=row.get('province'),
            created_at=row['created_at'],
            updated_at=row.get('updated_at'),
        )

    def find_by_id(self, user_id: str, conn=None) -> Optional[User]:
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"SELECT {USER_COLUMNS} FROM users WHERE id = %s", (user_id,))
                row = cursor.fetchone()
                return self._map_row_to_user(row) if row else None
            finally:
                cursor.close()

    def update_profile(self, user_id: str, updates: UserUpdate, conn=None) -> User:
        """Apply the fields set on `updates`; raises NotFound for unknown users"""
        values = updates.model_dump(exclude_unset=True)
        reject_nulls(values, NOT_NULL_FIELDS, "User")
        if 'location' in values:
            location = updates.location
            values.pop('location')
            values['latitude'] = location.latitude if location else None
            values['longitude'] = location.longitude if location else None

        assignments = ", ".join([f"{column} = %s" for column in values] + ["updated_at = NOW()"])

        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(f"""
                    UPDATE users
                    SET {assignments}
                    WHERE id = %s
                    RETURNING {USER_COLUMNS}
                """, list(values.values()) + [user_id])
                row = cursor.fetchone()
                if not row:
                    raise NotFound(f"User {user_id} not found")
                return self._map_row_to_user(row)
            finally:
                cursor.close()

    def promote_to_producer(self, user_id: str, conn=None) -> None:
        """Mark a user as producer once their producer profile exists"""
        with connection_scope(conn) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("""
                    UPDATE users
                    SET role = 'producer',
                        profile_completion = GREATEST(profile_completion, 80),
                        updated_at = NOW()
                    WHERE id = %s
                """, (user_id,))
                if cursor.rowcount == 0:
                    raise NotFound(f"User {user_id} not found")
            finally:
                cursor.close()

"""
Persistence for user accounts.
"""

from app.db.helpers import execute_query, fetch_all, fetch_one
from app.db.pool import DatabasePoolManager
from app.models.domain.user_domain import Role, User


class UserRepository:
    SELECT_COLUMNS = "id, email, name, photo_url, role, created_at"

    def __init__(self, db: DatabasePoolManager):
        self.db = db

    @staticmethod
    def _row_to_user(row: dict | None) -> User | None:
        if not row:
            return None
        return User(**{**row, "id": str(row["id"])})

    async def get_by_email(self, email: str) -> User | None:
        row = await fetch_one(
            f"SELECT {self.SELECT_COLUMNS} FROM users WHERE email = %s", (email,), db=self.db
        )
        return self._row_to_user(row)

    async def get(self, user_id: str) -> User | None:
        row = await fetch_one(
            f"SELECT {self.SELECT_COLUMNS} FROM users WHERE id = %s", (user_id,), db=self.db
        )
        return self._row_to_user(row)

    async def create(self, email: str, name: str | None, photo_url: str | None) -> User | None:
        """Insert a plain user; None when the email is already registered."""
        row = await fetch_one(
            f"""
            INSERT INTO users (email, name, photo_url, role)
            VALUES (%s, %s, %s, 'user')
            ON CONFLICT (email) DO NOTHING
            RETURNING {self.SELECT_COLUMNS}
            """,
            (email, name, photo_url),
            db=self.db,
        )
        return self._row_to_user(row)

    async def search_by_name(self, search: str | None) -> list[User]:
        if search:
            rows = await fetch_all(
                f"SELECT {self.SELECT_COLUMNS} FROM users WHERE name ILIKE %s ORDER BY created_at",
                (f"%{search}%",),
                db=self.db,
            )
        else:
            rows = await fetch_all(
                f"SELECT {self.SELECT_COLUMNS} FROM users ORDER BY created_at", db=self.db
            )
        return [self._row_to_user(row) for row in rows]

    async def set_role(self, user_id: str, role: Role) -> User | None:
        row = await fetch_one(
            f"UPDATE users SET role = %s WHERE id = %s RETURNING {self.SELECT_COLUMNS}",
            (role.value, user_id),
            db=self.db,
        )
        return self._row_to_user(row)

    async def delete(self, user_id: str) -> int:
        return await execute_query("DELETE FROM users WHERE id = %s", (user_id,), db=self.db)

"""
Persistence for favorites.
"""

from app.db.helpers import execute_query, fetch_all, fetch_one
from app.db.pool import DatabasePoolManager
from app.models.domain.biodata_domain import Biodata, Favorite


class FavoriteRepository:
    SELECT_COLUMNS = """
        id, owner_email, biodata_id, name, profile_image, age,
        occupation, permanent_division, biodata_email, added_at
    """

    def __init__(self, db: DatabasePoolManager):
        self.db = db

    @staticmethod
    def _row_to_favorite(row: dict | None) -> Favorite | None:
        if not row:
            return None
        return Favorite(**{**row, "id": str(row["id"])})

    async def exists(self, owner_email: str, biodata_id: int) -> bool:
        row = await fetch_one(
            "SELECT 1 AS found FROM favorites WHERE owner_email = %s AND biodata_id = %s",
            (owner_email, biodata_id),
            db=self.db,
        )
        return row is not None

    async def add_snapshot(self, owner_email: str, biodata: Biodata) -> Favorite:
        """Copy the biodata's display fields as they are right now."""
        row = await fetch_one(
            f"""
            INSERT INTO favorites (
                owner_email, biodata_id, name, profile_image, age,
                occupation, permanent_division, biodata_email
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING {self.SELECT_COLUMNS}
            """,
            (
                owner_email,
                biodata.biodata_id,
                biodata.name,
                biodata.profile_image,
                biodata.age,
                biodata.occupation,
                biodata.permanent_division,
                biodata.email,
            ),
            db=self.db,
        )
        return self._row_to_favorite(row)

    async def list_for_owner(self, owner_email: str) -> list[Favorite]:
        rows = await fetch_all(
            f"SELECT {self.SELECT_COLUMNS} FROM favorites WHERE owner_email = %s ORDER BY added_at DESC",
            (owner_email,),
            db=self.db,
        )
        return [self._row_to_favorite(row) for row in rows]

    async def delete_for_owner(self, owner_email: str, favorite_id: str) -> int:
        return await execute_query(
            "DELETE FROM favorites WHERE id = %s AND owner_email = %s",
            (favorite_id, owner_email),
            db=self.db,
        )

"""
Persistence for biodata (profile) rows.

Status changes are single conditional UPDATEs: the WHERE clause carries the
precondition, so a statement that matches nothing means the row was missing
or not in a modifiable state.
"""

from typing import Any

from psycopg import sql

from app.db.helpers import fetch_all, fetch_one, fetch_val
from app.db.pool import DatabasePoolManager
from app.models.domain.biodata_domain import Biodata, PremiumStatus

EDITABLE_FIELDS: tuple[str, ...] = (
    "name",
    "biodata_type",
    "profile_image",
    "date_of_birth",
    "age",
    "height",
    "weight",
    "occupation",
    "race",
    "fathers_name",
    "mothers_name",
    "permanent_division",
    "present_division",
    "expected_partner_age",
    "expected_partner_height",
    "expected_partner_weight",
    "contact_email",
    "mobile_number",
)


class BiodataRepository:
    """Queries over the ``biodatas`` table."""

    SELECT_COLUMNS = """
        id, biodata_id, email, name, biodata_type, profile_image, date_of_birth,
        age, height, weight, occupation, race, fathers_name, mothers_name,
        permanent_division, present_division, expected_partner_age,
        expected_partner_height, expected_partner_weight, contact_email,
        mobile_number, premium_status, is_premium, premium_requested_at,
        premium_approved_at, premium_rejected_at, created_at
    """

    def __init__(self, db: DatabasePoolManager):
        self.db = db

    @staticmethod
    def _row_to_biodata(row: dict | None) -> Biodata | None:
        if not row:
            return None
        return Biodata(**{**row, "id": str(row["id"])})

    async def get_by_biodata_id(self, biodata_id: int) -> Biodata | None:
        row = await fetch_one(
            f"SELECT {self.SELECT_COLUMNS} FROM biodatas WHERE biodata_id = %s",
            (biodata_id,),
            db=self.db,
        )
        return self._row_to_biodata(row)

    async def get_by_email(self, email: str) -> Biodata | None:
        row = await fetch_one(
            f"SELECT {self.SELECT_COLUMNS} FROM biodatas WHERE email = %s",
            (email,),
            db=self.db,
        )
        return self._row_to_biodata(row)

    async def get_many(self, biodata_ids: list[int]) -> dict[int, Biodata]:
        if not biodata_ids:
            return {}
        rows = await fetch_all(
            f"SELECT {self.SELECT_COLUMNS} FROM biodatas WHERE biodata_id = ANY(%s)",
            (list(biodata_ids),),
            db=self.db,
        )
        return {row["biodata_id"]: self._row_to_biodata(row) for row in rows}

    async def create(self, email: str, fields: dict[str, Any]) -> Biodata:
        """
        Insert a biodata, numbering it one past the current maximum.

        The number is computed inside the INSERT; the unique constraint on
        ``biodata_id`` rejects a concurrent insert that computed the same one.
        """
        columns = [name for name in EDITABLE_FIELDS if name in fields]
        query = sql.SQL(
            """
            INSERT INTO biodatas (biodata_id, email, {columns})
            SELECT COALESCE(MAX(biodata_id), 0) + 1, %s, {placeholders}
            FROM biodatas
            RETURNING {returning}
            """
        ).format(
            columns=sql.SQL(", ").join(sql.Identifier(name) for name in columns),
            placeholders=sql.SQL(", ").join(sql.Placeholder() for _ in columns),
            returning=sql.SQL(self.SELECT_COLUMNS),
        )
        params = (email, *(fields[name] for name in columns))
        row = await fetch_one(query, params, db=self.db)
        return self._row_to_biodata(row)

    async def update_fields(self, email: str, fields: dict[str, Any]) -> Biodata | None:
        columns = [name for name in EDITABLE_FIELDS if name in fields]
        if not columns:
            return await self.get_by_email(email)

        query = sql.SQL("UPDATE biodatas SET {assignments} WHERE email = %s RETURNING {returning}").format(
            assignments=sql.SQL(", ").join(
                sql.SQL("{} = %s").format(sql.Identifier(name)) for name in columns
            ),
            returning=sql.SQL(self.SELECT_COLUMNS),
        )
        params = (*(fields[name] for name in columns), email)
        row = await fetch_one(query, params, db=self.db)
        return self._row_to_biodata(row)

    async def search(
        self,
        *,
        age_min: int,
        age_max: int,
        biodata_type: str | None = None,
        division: str | None = None,
        offset: int | None = None,
        limit: int | None = None,
    ) -> tuple[list[Biodata], int]:
        conditions = ["age BETWEEN %s AND %s"]
        params: list[Any] = [age_min, age_max]
        if biodata_type:
            conditions.append("biodata_type = %s")
            params.append(biodata_type)
        if division:
            conditions.append("permanent_division = %s")
            params.append(division)
        where = " AND ".join(conditions)

        total = await fetch_val(f"SELECT COUNT(*) FROM biodatas WHERE {where}", tuple(params), db=self.db)

        page_clause = ""
        page_params: list[Any] = []
        if limit is not None:
            page_clause = " LIMIT %s OFFSET %s"
            page_params = [limit, offset or 0]

        rows = await fetch_all(
            f"SELECT {self.SELECT_COLUMNS} FROM biodatas WHERE {where} ORDER BY biodata_id{page_clause}",
            tuple(params + page_params),
            db=self.db,
        )
        return [self._row_to_biodata(row) for row in rows], int(total or 0)

    async def list_page(self, *, offset: int, limit: int) -> tuple[list[Biodata], int]:
        total = await fetch_val("SELECT COUNT(*) FROM biodatas", db=self.db)
        rows = await fetch_all(
            f"SELECT {self.SELECT_COLUMNS} FROM biodatas ORDER BY biodata_id LIMIT %s OFFSET %s",
            (limit, offset),
            db=self.db,
        )
        return [self._row_to_biodata(row) for row in rows], int(total or 0)

    async def list_by_premium_status(
        self, premium_status: PremiumStatus, *, descending_age: bool = False
    ) -> list[Biodata]:
        direction = "DESC" if descending_age else "ASC"
        rows = await fetch_all(
            f"""
            SELECT {self.SELECT_COLUMNS} FROM biodatas
            WHERE premium_status = %s
            ORDER BY age {direction} NULLS LAST, biodata_id
            """,
            (premium_status.value,),
            db=self.db,
        )
        return [self._row_to_biodata(row) for row in rows]

    # ------------------------------------------------------------------
    # Premium-status transitions
    # ------------------------------------------------------------------

    async def mark_premium_pending(self, email: str) -> Biodata | None:
        """none/rejected -> pending. None when the row is missing or in another state."""
        row = await fetch_one(
            f"""
            UPDATE biodatas
            SET premium_status = 'pending', premium_requested_at = now()
            WHERE email = %s AND premium_status IN ('none', 'rejected')
            RETURNING {self.SELECT_COLUMNS}
            """,
            (email,),
            db=self.db,
        )
        return self._row_to_biodata(row)

    async def approve_premium(self, biodata_id: int) -> Biodata | None:
        """pending -> approved."""
        row = await fetch_one(
            f"""
            UPDATE biodatas
            SET premium_status = 'approved', is_premium = true, premium_approved_at = now()
            WHERE biodata_id = %s AND premium_status = 'pending'
            RETURNING {self.SELECT_COLUMNS}
            """,
            (biodata_id,),
            db=self.db,
        )
        return self._row_to_biodata(row)

    async def reject_premium(self, biodata_id: int) -> Biodata | None:
        """pending -> rejected."""
        row = await fetch_one(
            f"""
            UPDATE biodatas
            SET premium_status = 'rejected', premium_rejected_at = now()
            WHERE biodata_id = %s AND premium_status = 'pending'
            RETURNING {self.SELECT_COLUMNS}
            """,
            (biodata_id,),
            db=self.db,
        )
        return self._row_to_biodata(row)

    async def count_summary(self) -> dict[str, int]:
        row = await fetch_one(
            """
            SELECT
                COUNT(*) AS biodata_count,
                COUNT(*) FILTER (WHERE biodata_type = 'Male') AS male_count,
                COUNT(*) FILTER (WHERE biodata_type = 'Female') AS female_count,
                COUNT(*) FILTER (WHERE premium_status = 'approved') AS premium_count
            FROM biodatas
            """,
            db=self.db,
        )
        return {key: int(value or 0) for key, value in (row or {}).items()}

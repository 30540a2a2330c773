"""
Persistence for the payment ledger and success stories.
"""

from datetime import date

from app.db.helpers import fetch_all, fetch_one, fetch_val
from app.db.pool import DatabasePoolManager
from app.models.domain.ledger_domain import Payment, SuccessStory


class PaymentRepository:
    SELECT_COLUMNS = "id, email, amount, currency, payment_reference, purpose, biodata_id, created_at"

    def __init__(self, db: DatabasePoolManager):
        self.db = db

    @staticmethod
    def _row_to_payment(row: dict | None) -> Payment | None:
        if not row:
            return None
        return Payment(**{**row, "id": str(row["id"]), "amount": float(row["amount"])})

    async def create(
        self,
        *,
        email: str,
        amount: float,
        currency: str,
        payment_reference: str,
        purpose: str,
        biodata_id: int | None,
    ) -> Payment:
        row = await fetch_one(
            f"""
            INSERT INTO payments (email, amount, currency, payment_reference, purpose, biodata_id)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING {self.SELECT_COLUMNS}
            """,
            (email, amount, currency, payment_reference, purpose, biodata_id),
            db=self.db,
        )
        return self._row_to_payment(row)

    async def list_for_email(self, email: str) -> list[Payment]:
        rows = await fetch_all(
            f"SELECT {self.SELECT_COLUMNS} FROM payments WHERE email = %s ORDER BY created_at DESC",
            (email,),
            db=self.db,
        )
        return [self._row_to_payment(row) for row in rows]

    async def list_all(self) -> list[Payment]:
        rows = await fetch_all(
            f"SELECT {self.SELECT_COLUMNS} FROM payments ORDER BY created_at DESC", db=self.db
        )
        return [self._row_to_payment(row) for row in rows]

    async def total_revenue(self) -> float:
        total = await fetch_val("SELECT COALESCE(SUM(amount), 0) FROM payments", db=self.db)
        return float(total or 0)


class SuccessStoryRepository:
    SELECT_COLUMNS = """
        id, couple_image, self_biodata_id, partner_biodata_id,
        marriage_date, review, rating, created_at
    """

    def __init__(self, db: DatabasePoolManager):
        self.db = db

    @staticmethod
    def _row_to_story(row: dict | None) -> SuccessStory | None:
        if not row:
            return None
        return SuccessStory(**{**row, "id": str(row["id"])})

    async def create(
        self,
        *,
        couple_image: str | None,
        self_biodata_id: int,
        partner_biodata_id: int,
        marriage_date: date,
        review: str,
        rating: int,
    ) -> SuccessStory:
        row = await fetch_one(
            f"""
            INSERT INTO success_stories (
                couple_image, self_biodata_id, partner_biodata_id, marriage_date, review, rating
            )
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING {self.SELECT_COLUMNS}
            """,
            (couple_image, self_biodata_id, partner_biodata_id, marriage_date, review, rating),
            db=self.db,
        )
        return self._row_to_story(row)

    async def list_recent(self) -> list[SuccessStory]:
        rows = await fetch_all(
            f"SELECT {self.SELECT_COLUMNS} FROM success_stories ORDER BY marriage_date DESC",
            db=self.db,
        )
        return [self._row_to_story(row) for row in rows]

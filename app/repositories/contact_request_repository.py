"""
Persistence for contact-unlock requests.
"""

from app.db.helpers import execute_query, fetch_all, fetch_one, fetch_val
from app.db.pool import DatabasePoolManager
from app.models.domain.biodata_domain import ContactRequest, ContactRequestStatus


class ContactRequestRepository:
    SELECT_COLUMNS = """
        id, requester_email, biodata_id, status, payment_reference,
        amount, created_at, approved_at
    """

    def __init__(self, db: DatabasePoolManager):
        self.db = db

    @staticmethod
    def _row_to_request(row: dict | None) -> ContactRequest | None:
        if not row:
            return None
        return ContactRequest(**{**row, "id": str(row["id"]), "amount": float(row["amount"])})

    async def get(self, request_id: str) -> ContactRequest | None:
        row = await fetch_one(
            f"SELECT {self.SELECT_COLUMNS} FROM contact_requests WHERE id = %s",
            (request_id,),
            db=self.db,
        )
        return self._row_to_request(row)

    async def get_for_pair(self, requester_email: str, biodata_id: int) -> ContactRequest | None:
        row = await fetch_one(
            f"""
            SELECT {self.SELECT_COLUMNS} FROM contact_requests
            WHERE requester_email = %s AND biodata_id = %s
            """,
            (requester_email, biodata_id),
            db=self.db,
        )
        return self._row_to_request(row)

    async def create(
        self, requester_email: str, biodata_id: int, payment_reference: str, amount: float
    ) -> ContactRequest:
        row = await fetch_one(
            f"""
            INSERT INTO contact_requests (requester_email, biodata_id, status, payment_reference, amount)
            VALUES (%s, %s, 'pending', %s, %s)
            RETURNING {self.SELECT_COLUMNS}
            """,
            (requester_email, biodata_id, payment_reference, amount),
            db=self.db,
        )
        return self._row_to_request(row)

    async def approve(self, request_id: str) -> ContactRequest | None:
        """pending -> approved. None when the row is missing or already approved."""
        row = await fetch_one(
            f"""
            UPDATE contact_requests
            SET status = 'approved', approved_at = now()
            WHERE id = %s AND status = 'pending'
            RETURNING {self.SELECT_COLUMNS}
            """,
            (request_id,),
            db=self.db,
        )
        return self._row_to_request(row)

    async def has_approved(self, requester_email: str, biodata_id: int) -> bool:
        found = await fetch_val(
            """
            SELECT EXISTS (
                SELECT 1 FROM contact_requests
                WHERE requester_email = %s AND biodata_id = %s AND status = 'approved'
            )
            """,
            (requester_email, biodata_id),
            db=self.db,
        )
        return bool(found)

    async def list_for_requester(self, requester_email: str) -> list[ContactRequest]:
        rows = await fetch_all(
            f"""
            SELECT {self.SELECT_COLUMNS} FROM contact_requests
            WHERE requester_email = %s
            ORDER BY created_at DESC
            """,
            (requester_email,),
            db=self.db,
        )
        return [self._row_to_request(row) for row in rows]

    async def list_all(self, status: ContactRequestStatus | None = None) -> list[ContactRequest]:
        if status is None:
            rows = await fetch_all(
                f"SELECT {self.SELECT_COLUMNS} FROM contact_requests ORDER BY created_at DESC",
                db=self.db,
            )
        else:
            rows = await fetch_all(
                f"""
                SELECT {self.SELECT_COLUMNS} FROM contact_requests
                WHERE status = %s ORDER BY created_at DESC
                """,
                (status.value,),
                db=self.db,
            )
        return [self._row_to_request(row) for row in rows]

    async def delete_pending_for_requester(self, requester_email: str, request_id: str) -> int:
        return await execute_query(
            """
            DELETE FROM contact_requests
            WHERE id = %s AND requester_email = %s AND status = 'pending'
            """,
            (request_id, requester_email),
            db=self.db,
        )

    async def count(self) -> int:
        return int(await fetch_val("SELECT COUNT(*) FROM contact_requests", db=self.db) or 0)

"""
Table definitions for the biodata service.

Run ``python -m app.db.schema`` to create missing tables, or set
``DB_APPLY_SCHEMA_ON_STARTUP=true`` to apply them from the app lifespan.
"""

import asyncio

from app.db.pool import DatabasePoolManager
from app.infrastructure.observability.logging import get_logger, setup_logging

logger = get_logger(__name__)

SCHEMA_STATEMENTS: list[str] = [
    """
    CREATE TABLE IF NOT EXISTS users (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        email TEXT NOT NULL UNIQUE,
        name TEXT,
        photo_url TEXT,
        role TEXT NOT NULL DEFAULT 'user' CHECK (role IN ('user', 'premium', 'admin')),
        created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS biodatas (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        biodata_id INTEGER NOT NULL UNIQUE,
        email TEXT NOT NULL UNIQUE,
        name TEXT NOT NULL,
        biodata_type TEXT NOT NULL CHECK (biodata_type IN ('Male', 'Female')),
        profile_image TEXT,
        date_of_birth DATE,
        age INTEGER,
        height TEXT,
        weight TEXT,
        occupation TEXT,
        race TEXT,
        fathers_name TEXT,
        mothers_name TEXT,
        permanent_division TEXT,
        present_division TEXT,
        expected_partner_age INTEGER,
        expected_partner_height TEXT,
        expected_partner_weight TEXT,
        contact_email TEXT,
        mobile_number TEXT,
        premium_status TEXT NOT NULL DEFAULT 'none'
            CHECK (premium_status IN ('none', 'pending', 'approved', 'rejected')),
        is_premium BOOLEAN NOT NULL DEFAULT false,
        premium_requested_at TIMESTAMPTZ,
        premium_approved_at TIMESTAMPTZ,
        premium_rejected_at TIMESTAMPTZ,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_biodatas_premium_status ON biodatas (premium_status)",
    """
    CREATE TABLE IF NOT EXISTS favorites (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        owner_email TEXT NOT NULL,
        biodata_id INTEGER NOT NULL,
        name TEXT,
        profile_image TEXT,
        age INTEGER,
        occupation TEXT,
        permanent_division TEXT,
        biodata_email TEXT,
        added_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        CONSTRAINT uq_favorites_owner_biodata UNIQUE (owner_email, biodata_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS contact_requests (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        requester_email TEXT NOT NULL,
        biodata_id INTEGER NOT NULL,
        status TEXT NOT NULL DEFAULT 'pending' CHECK (status IN ('pending', 'approved')),
        payment_reference TEXT NOT NULL,
        amount NUMERIC(10, 2) NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        approved_at TIMESTAMPTZ,
        CONSTRAINT uq_contact_requests_pair UNIQUE (requester_email, biodata_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS payments (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        email TEXT NOT NULL,
        amount NUMERIC(10, 2) NOT NULL,
        currency TEXT NOT NULL,
        payment_reference TEXT NOT NULL UNIQUE,
        purpose TEXT NOT NULL,
        biodata_id INTEGER,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS success_stories (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        couple_image TEXT,
        self_biodata_id INTEGER NOT NULL,
        partner_biodata_id INTEGER NOT NULL,
        marriage_date DATE NOT NULL,
        review TEXT NOT NULL,
        rating INTEGER NOT NULL CHECK (rating BETWEEN 1 AND 5),
        created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS audit_logs (
        id BIGSERIAL PRIMARY KEY,
        user_id TEXT NOT NULL,
        action TEXT NOT NULL,
        resource_type TEXT,
        resource_id TEXT,
        pii_fields TEXT[],
        ip_address TEXT,
        user_agent TEXT,
        request_id TEXT,
        metadata JSONB,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
]


async def apply_schema(db: DatabasePoolManager) -> None:
    """Create any missing tables and indexes."""
    async with db.connection() as conn:
        for statement in SCHEMA_STATEMENTS:
            await conn.execute(statement)
    logger.info("Database schema applied", statements=len(SCHEMA_STATEMENTS))


async def _main() -> None:
    db = DatabasePoolManager()
    await db.initialize()
    try:
        await apply_schema(db)
    finally:
        await db.close()


if __name__ == "__main__":
    setup_logging()
    asyncio.run(_main())

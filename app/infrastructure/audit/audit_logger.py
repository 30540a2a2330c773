"""
AuditLogger - Centralized audit trail for contact-info disclosure and admin actions.

Usage:
    audit = AuditLogger(db)

    await audit.log(
        actor_email="bob@example.com",
        action="contact_info_viewed",
        resource_type="biodata",
        resource_id="7",
        pii_fields=["contact_email", "mobile_number"],
        request_id="req-abc123",
    )

Design Principles:
- Write to both database (immutable) and structured logs (searchable)
- Never fail the request if audit logging fails
"""

from typing import Any

from psycopg.types.json import Jsonb

from app.db.pool import DatabasePoolManager
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

ANONYMOUS_ACTOR = "anonymous"


class AuditLogger:
    """
    Logs disclosures of sensitive fields and privileged operations to:
    1. Database (audit_logs table) - Immutable, queryable
    2. Structured logs (stdout) - Real-time monitoring
    """

    def __init__(self, db: DatabasePoolManager | None):
        self.db = db

    async def log(
        self,
        actor_email: str,
        action: str,
        resource_type: str | None = None,
        resource_id: str | None = None,
        pii_fields: list[str] | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
        request_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> bool:
        """
        Log an audit event to database and structured logs.

        Returns:
            True if logged successfully, False if failed (never raises)
        """
        logger.info(
            "Audit event",
            audit_action=action,
            actor=actor_email,
            resource_type=resource_type,
            resource_id=resource_id,
            pii_fields=pii_fields,
            ip_address=ip_address,
            request_id=request_id,
        )

        if self.db is None:
            return False

        try:
            async with self.db.connection() as conn:
                await conn.execute(
                    """
                    INSERT INTO audit_logs (
                        user_id, action, resource_type, resource_id, pii_fields,
                        ip_address, user_agent, request_id, metadata
                    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                    """,
                    (
                        actor_email,
                        action,
                        resource_type,
                        resource_id,
                        pii_fields,
                        ip_address,
                        user_agent,
                        request_id,
                        Jsonb(metadata) if metadata is not None else None,
                    ),
                )
            return True

        except Exception as e:
            # Never fail the request on audit failure; keep enough context to recreate the row
            logger.error(
                "CRITICAL: Failed to write audit log to database",
                error=str(e),
                error_type=type(e).__name__,
                action=action,
                actor=actor_email,
                fallback_data={
                    "resource_type": resource_type,
                    "resource_id": resource_id,
                    "pii_fields": pii_fields,
                    "request_id": request_id,
                },
            )
            return False

    async def log_admin_action(
        self,
        actor_email: str,
        action: str,
        resource_type: str,
        resource_id: str | None = None,
        **kwargs,
    ) -> bool:
        return await self.log(
            actor_email=actor_email,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            **kwargs,
        )

    async def log_security_event(
        self,
        actor_email: str | None,
        event_type: str,
        severity: str,
        description: str,
        ip_address: str | None = None,
        request_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> bool:
        """
        Log security events (rate limit exceeded, auth failures, etc.).

        Args:
            actor_email: Caller involved (None if unauthenticated)
            event_type: Type of security event (e.g., "rate_limit_exceeded")
            severity: Severity level ("low", "medium", "high", "critical")
            description: Human-readable description
        """
        audit_metadata = dict(metadata or {})
        audit_metadata.update(
            {
                "event_type": event_type,
                "severity": severity,
                "description": description,
            }
        )

        return await self.log(
            actor_email=actor_email or ANONYMOUS_ACTOR,
            action="security_event",
            resource_type="security",
            metadata=audit_metadata,
            ip_address=ip_address,
            request_id=request_id,
        )

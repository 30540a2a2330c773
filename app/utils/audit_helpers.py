"""
Audit Helper Utilities - One-line audit logging for endpoints.

Usage:
    from app.utils.audit_helpers import audit_contact_disclosure

    await audit_contact_disclosure(request, caller.email, biodata.biodata_id, reason="approved_request")

The audit logger is bound to the pool stored on ``app.state``; request
context (IP, user-agent, request ID) comes from ``RequestContextMiddleware``.
"""

from typing import Any

from fastapi import Request

from app.infrastructure.audit import AuditLogger
from app.models.domain.biodata_domain import CONTACT_FIELDS


def _audit_logger(request: Request) -> AuditLogger:
    return AuditLogger(getattr(request.app.state, "db", None))


def _context(request: Request) -> dict[str, str | None]:
    return {
        "ip_address": getattr(request.state, "ip_address", None),
        "user_agent": getattr(request.state, "user_agent", None),
        "request_id": getattr(request.state, "request_id", None),
    }


async def audit_contact_disclosure(
    request: Request,
    actor_email: str,
    biodata_id: int,
    reason: str,
) -> bool:
    """
    Record that a biodata's contact fields were returned to someone other than its owner.

    Args:
        request: FastAPI Request object
        actor_email: Caller who received the contact fields
        biodata_id: Sequence id of the disclosed profile
        reason: Which visibility rule granted access (e.g. "role", "approved_request")
    """
    return await _audit_logger(request).log(
        actor_email=actor_email,
        action="contact_info_viewed",
        resource_type="biodata",
        resource_id=str(biodata_id),
        pii_fields=list(CONTACT_FIELDS),
        metadata={"reason": reason},
        **_context(request),
    )


async def audit_data_modification(
    request: Request,
    actor_email: str,
    action: str,
    resource_type: str,
    resource_id: str | None = None,
    changes: dict[str, Any] | None = None,
) -> bool:
    """
    One-line helper for auditing privileged modifications.

    Examples:
        await audit_data_modification(
            request=request,
            actor_email=caller.email,
            action="premium_approved",
            resource_type="biodata",
            resource_id=str(biodata_id),
        )
    """
    return await _audit_logger(request).log_admin_action(
        actor_email=actor_email,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        metadata={"changes": changes} if changes else None,
        **_context(request),
    )


async def audit_security_event(
    request: Request,
    event_type: str,
    severity: str,
    description: str,
    actor_email: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> bool:
    """One-line helper for security events (rate limiting, auth failures, etc.)."""
    context = _context(request)
    return await _audit_logger(request).log_security_event(
        actor_email=actor_email,
        event_type=event_type,
        severity=severity,
        description=description,
        ip_address=context["ip_address"],
        request_id=context["request_id"],
        metadata=metadata,
    )

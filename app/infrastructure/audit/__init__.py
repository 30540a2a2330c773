"""
Audit logging infrastructure for contact-info disclosure and admin actions.
"""

from app.infrastructure.audit.audit_logger import ANONYMOUS_ACTOR, AuditLogger

__all__ = ["ANONYMOUS_ACTOR", "AuditLogger"]

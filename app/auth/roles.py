"""
roles.py
--------
Purpose:
    Closed role set and the capability table every authorization decision
    goes through. Handlers ask ``has_capability`` instead of comparing role
    strings.
"""

from enum import Enum

from app.models.domain.user_domain import Role


class Capability(str, Enum):
    VIEW_CONTACT_INFO = "view_contact_info"
    MANAGE_PREMIUM = "manage_premium"
    MANAGE_CONTACT_REQUESTS = "manage_contact_requests"
    MANAGE_USERS = "manage_users"
    VIEW_ALL_BIODATAS = "view_all_biodatas"
    VIEW_LEDGER = "view_ledger"
    VIEW_STATS = "view_stats"


_ROLE_CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.USER: frozenset(),
    Role.PREMIUM: frozenset({Capability.VIEW_CONTACT_INFO}),
    Role.ADMIN: frozenset(Capability),
}


def parse_role(value: str | Role | None) -> Role:
    """Map a stored role value onto the enum; anything unknown is a plain user."""
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        return Role.USER


def has_capability(role: Role | str | None, capability: Capability) -> bool:
    return capability in _ROLE_CAPABILITIES[parse_role(role)]

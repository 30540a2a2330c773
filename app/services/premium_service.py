"""
Premium-status workflow.

    none ──request──▶ pending ──approve──▶ approved (terminal)
      ▲                  │
      └──── resubmit ◀── rejected ◀──reject──┘

Every transition is one conditional UPDATE in ``BiodataRepository``; when it
matches nothing the current row is re-read to report the precise reason.
"""

from app.infrastructure.observability.logging import get_logger, log_workflow_transition
from app.models.domain.biodata_domain import Biodata, PremiumStatus, PublicBiodata
from app.repositories.biodata_repository import BiodataRepository
from app.services.errors import AlreadyPremiumError, NotFoundError, RequestAlreadyPendingError

logger = get_logger(__name__)

# Named entry transitions into ``pending``, keyed by the state they leave
REQUEST_TRANSITIONS = {
    PremiumStatus.NONE: "request",
    PremiumStatus.REJECTED: "resubmit",
}


class PremiumService:
    def __init__(self, biodatas: BiodataRepository):
        self.biodatas = biodatas

    async def request_upgrade(self, owner_email: str) -> Biodata:
        """Move the caller's own profile to ``pending`` (from ``none`` or ``rejected``)."""
        current = await self.biodatas.get_by_email(owner_email)
        self._ensure_requestable(current, owner_email)

        updated = await self.biodatas.mark_premium_pending(owner_email)
        if updated is None:
            # Another writer moved the row between the read and the update
            self._ensure_requestable(await self.biodatas.get_by_email(owner_email), owner_email)
            raise NotFoundError("Biodata not found", email=owner_email)

        log_workflow_transition(
            "biodata_premium",
            updated.biodata_id,
            current.premium_status.value,
            PremiumStatus.PENDING.value,
            actor=owner_email,
            transition=REQUEST_TRANSITIONS.get(current.premium_status),
        )
        return updated

    @staticmethod
    def _ensure_requestable(biodata: Biodata | None, owner_email: str) -> None:
        if biodata is None:
            raise NotFoundError("Biodata not found", email=owner_email)
        if biodata.premium_status == PremiumStatus.APPROVED:
            raise AlreadyPremiumError("Biodata is already premium", biodata_id=biodata.biodata_id)
        if biodata.premium_status == PremiumStatus.PENDING:
            raise RequestAlreadyPendingError(
                "Premium request is already pending", biodata_id=biodata.biodata_id
            )

    async def approve(self, biodata_id: int, actor: str | None = None) -> Biodata:
        updated = await self.biodatas.approve_premium(biodata_id)
        if updated is None:
            raise NotFoundError("No pending premium request for this biodata", biodata_id=biodata_id)

        log_workflow_transition(
            "biodata_premium",
            biodata_id,
            PremiumStatus.PENDING.value,
            PremiumStatus.APPROVED.value,
            actor,
            transition="approve",
        )
        return updated

    async def reject(self, biodata_id: int, actor: str | None = None) -> Biodata:
        updated = await self.biodatas.reject_premium(biodata_id)
        if updated is None:
            raise NotFoundError("No pending premium request for this biodata", biodata_id=biodata_id)

        log_workflow_transition(
            "biodata_premium",
            biodata_id,
            PremiumStatus.PENDING.value,
            PremiumStatus.REJECTED.value,
            actor,
            transition="reject",
        )
        return updated

    async def list_pending(self) -> list[Biodata]:
        return await self.biodatas.list_by_premium_status(PremiumStatus.PENDING)

    async def list_premium_profiles(self, descending: bool = False) -> list[PublicBiodata]:
        profiles = await self.biodatas.list_by_premium_status(
            PremiumStatus.APPROVED, descending_age=descending
        )
        return [profile.without_contact_info() for profile in profiles]

    async def is_premium(self, email: str) -> bool:
        biodata = await self.biodatas.get_by_email(email)
        if biodata is None:
            raise NotFoundError("Biodata not found", email=email)
        return biodata.is_premium

"""
Contact-unlock workflow.

A requester pays for one profile's contact fields; an admin approves the
request; from then on that requester (and only that requester) sees the
contact fields of that profile. Owners, premium members and admins see them
without a request.
"""

from app.auth.roles import Capability, has_capability
from app.config import settings
from app.db.helpers import UniqueViolationError
from app.infrastructure.observability.logging import get_logger, log_workflow_transition
from app.models.domain.biodata_domain import (
    ContactRequest,
    ContactRequestStatus,
    ContactRequestView,
    ProfileView,
    VisibilityReason,
)
from app.models.domain.user_domain import Role
from app.repositories.biodata_repository import BiodataRepository
from app.repositories.contact_request_repository import ContactRequestRepository
from app.services.errors import (
    AlreadyApprovedError,
    DuplicateRequestError,
    InvalidInputError,
    InvalidTargetError,
    NotFoundError,
)
from app.utils.ids import is_uuid

logger = get_logger(__name__)


class ContactUnlockService:
    def __init__(
        self,
        biodatas: BiodataRepository,
        requests: ContactRequestRepository,
        unlock_price: float | None = None,
    ):
        self.biodatas = biodatas
        self.requests = requests
        self.unlock_price = settings.CONTACT_UNLOCK_PRICE if unlock_price is None else unlock_price

    async def create_request(
        self, requester_email: str, biodata_id: int, payment_reference: str
    ) -> ContactRequest:
        if not payment_reference or not payment_reference.strip():
            raise InvalidInputError("payment_reference is required")

        target = await self.biodatas.get_by_biodata_id(biodata_id)
        if target is None:
            raise InvalidTargetError("No biodata with this id", biodata_id=biodata_id)

        if await self.requests.get_for_pair(requester_email, biodata_id) is not None:
            raise DuplicateRequestError(
                "A contact request for this biodata already exists", biodata_id=biodata_id
            )

        try:
            created = await self.requests.create(
                requester_email, biodata_id, payment_reference.strip(), self.unlock_price
            )
        except UniqueViolationError as e:
            # A concurrent request for the same pair won the insert
            raise DuplicateRequestError(
                "A contact request for this biodata already exists", biodata_id=biodata_id
            ) from e

        logger.info(
            "Contact request created",
            request_id=created.id,
            requester=requester_email,
            biodata_id=biodata_id,
            amount=created.amount,
        )
        return created

    async def approve_request(self, request_id: str, actor: str | None = None) -> ContactRequest:
        if not is_uuid(request_id):
            raise NotFoundError("Contact request not found", request_id=request_id)

        approved = await self.requests.approve(request_id)
        if approved is None:
            existing = await self.requests.get(request_id)
            if existing is None:
                raise NotFoundError("Contact request not found", request_id=request_id)
            raise AlreadyApprovedError("Contact request is already approved", request_id=request_id)

        log_workflow_transition(
            "contact_request",
            request_id,
            ContactRequestStatus.PENDING.value,
            ContactRequestStatus.APPROVED.value,
            actor,
        )
        return approved

    async def read_profile(self, requester_email: str, role: Role, biodata_id: int) -> ProfileView:
        """
        Fetch a profile with contact fields kept only for callers entitled to them.

        Entitlement, checked in order: the caller owns the profile, the
        caller's role can view contact info, or the caller holds an approved
        request for exactly this profile.
        """
        biodata = await self.biodatas.get_by_biodata_id(biodata_id)
        if biodata is None:
            raise NotFoundError("Biodata not found", biodata_id=biodata_id)

        if biodata.email == requester_email:
            return ProfileView(biodata=biodata, reason=VisibilityReason.OWNER)
        if has_capability(role, Capability.VIEW_CONTACT_INFO):
            return ProfileView(biodata=biodata, reason=VisibilityReason.ROLE)
        if await self.requests.has_approved(requester_email, biodata_id):
            return ProfileView(biodata=biodata, reason=VisibilityReason.APPROVED_REQUEST)

        return ProfileView(biodata=biodata.without_contact_info())

    async def list_my_requests(self, requester_email: str) -> list[ContactRequestView]:
        own_requests = await self.requests.list_for_requester(requester_email)
        targets = await self.biodatas.get_many([r.biodata_id for r in own_requests])

        views = []
        for request in own_requests:
            target = targets.get(request.biodata_id)
            view = ContactRequestView(**request.model_dump(), name=target.name if target else None)
            if target is not None and request.status == ContactRequestStatus.APPROVED:
                view.contact_email = target.contact_email
                view.mobile_number = target.mobile_number
            views.append(view)
        return views

    async def list_all(self, status: ContactRequestStatus | None = None) -> list[ContactRequest]:
        return await self.requests.list_all(status)

    async def delete_my_request(self, requester_email: str, request_id: str) -> None:
        """Withdraw one of the caller's own requests while it is still pending."""
        if not is_uuid(request_id):
            raise NotFoundError("Contact request not found", request_id=request_id)

        deleted = await self.requests.delete_pending_for_requester(requester_email, request_id)
        if not deleted:
            raise NotFoundError("No pending contact request of yours with this id", request_id=request_id)

        logger.info("Contact request withdrawn", request_id=request_id, requester=requester_email)

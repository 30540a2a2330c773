from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict

CONTACT_FIELDS: tuple[str, ...] = ("contact_email", "mobile_number")


class PremiumStatus(str, Enum):
    NONE = "none"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PublicBiodata(BaseModel):
    """
    A matrimonial listing without its contact fields.

    This is what search results, premium listings and unentitled profile
    reads return; the contact keys are absent rather than null.
    """

    model_config = ConfigDict(use_enum_values=False)

    id: str
    biodata_id: int
    email: str
    name: str
    biodata_type: str
    profile_image: str | None = None
    date_of_birth: date | None = None
    age: int | None = None
    height: str | None = None
    weight: str | None = None
    occupation: str | None = None
    race: str | None = None
    fathers_name: str | None = None
    mothers_name: str | None = None
    permanent_division: str | None = None
    present_division: str | None = None
    expected_partner_age: int | None = None
    expected_partner_height: str | None = None
    expected_partner_weight: str | None = None

    premium_status: PremiumStatus = PremiumStatus.NONE
    is_premium: bool = False
    premium_requested_at: datetime | None = None
    premium_approved_at: datetime | None = None
    premium_rejected_at: datetime | None = None
    created_at: datetime


class Biodata(PublicBiodata):
    """A user's full listing. ``biodata_id`` is the public sequence number."""

    # Sensitive; only disclosed through the visibility rule
    contact_email: str | None = None
    mobile_number: str | None = None

    def without_contact_info(self) -> PublicBiodata:
        return PublicBiodata.model_validate(self.model_dump(exclude=set(CONTACT_FIELDS)))


class ContactRequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"


class ContactRequest(BaseModel):
    """A paid request from one requester to see one biodata's contact fields."""

    id: str
    requester_email: str
    biodata_id: int
    status: ContactRequestStatus
    payment_reference: str
    amount: float
    created_at: datetime
    approved_at: datetime | None = None


class Favorite(BaseModel):
    """
    A bookmarked biodata.

    Display fields are a snapshot taken when the favorite is added and do
    not follow later edits to the biodata; listing favorites needs no join.
    """

    id: str
    owner_email: str
    biodata_id: int
    name: str | None = None
    profile_image: str | None = None
    age: int | None = None
    occupation: str | None = None
    permanent_division: str | None = None
    biodata_email: str | None = None
    added_at: datetime


class VisibilityReason(str, Enum):
    OWNER = "owner"
    ROLE = "role"
    APPROVED_REQUEST = "approved_request"


class ProfileView(BaseModel):
    """A biodata as one caller may see it; ``reason`` is None when contact fields were stripped."""

    biodata: Biodata | PublicBiodata
    reason: VisibilityReason | None = None

    @property
    def contact_visible(self) -> bool:
        return self.reason is not None


class ContactRequestView(ContactRequest):
    """A requester's own request, with the target's name and, once approved, its contact fields."""

    name: str | None = None
    contact_email: str | None = None
    mobile_number: str | None = None

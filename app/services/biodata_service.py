"""
Biodata management: creating, editing and browsing profiles.
"""

from typing import Any

from app.auth.roles import Capability, has_capability
from app.db.helpers import UniqueViolationError
from app.infrastructure.observability.logging import get_logger
from app.models.domain.biodata_domain import Biodata, PublicBiodata
from app.models.domain.user_domain import Caller
from app.repositories.biodata_repository import EDITABLE_FIELDS, BiodataRepository
from app.services.errors import ConflictError, ForbiddenError, InvalidInputError, NotFoundError

logger = get_logger(__name__)

DEFAULT_AGE_MIN = 0
DEFAULT_AGE_MAX = 100
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
BIODATA_TYPES = ("Male", "Female")

# Raised when two inserts compute the same next sequence id
SEQUENCE_CONSTRAINT = "biodatas_biodata_id_key"


def _editable(fields: dict[str, Any]) -> dict[str, Any]:
    values = {name: value for name, value in fields.items() if name in EDITABLE_FIELDS}
    if "biodata_type" in values and values["biodata_type"] not in BIODATA_TYPES:
        raise InvalidInputError("biodata_type must be Male or Female", biodata_type=values["biodata_type"])
    return values


def _validate_page(page: int, limit: int) -> None:
    if page < 1:
        raise InvalidInputError("page must be at least 1", page=page)
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise InvalidInputError(f"limit must be between 1 and {MAX_PAGE_SIZE}", limit=limit)


class BiodataService:
    def __init__(self, biodatas: BiodataRepository):
        self.biodatas = biodatas

    async def create(self, owner_email: str, fields: dict[str, Any]) -> Biodata:
        if await self.biodatas.get_by_email(owner_email) is not None:
            raise ConflictError("This account already has a biodata", email=owner_email)

        values = _editable(fields)
        if not values.get("name") or not values.get("biodata_type"):
            raise InvalidInputError("name and biodata_type are required")

        try:
            biodata = await self.biodatas.create(owner_email, values)
        except UniqueViolationError as e:
            if e.constraint == SEQUENCE_CONSTRAINT:
                raise ConflictError("Biodata id was taken concurrently, try again", email=owner_email) from e
            raise ConflictError("This account already has a biodata", email=owner_email) from e

        logger.info("Biodata created", biodata_id=biodata.biodata_id, email=owner_email)
        return biodata

    async def update_own(self, owner_email: str, fields: dict[str, Any]) -> Biodata:
        """Apply display-field changes; ids, ownership and premium state are not editable."""
        updated = await self.biodatas.update_fields(owner_email, _editable(fields))
        if updated is None:
            raise NotFoundError("Biodata not found", email=owner_email)
        return updated

    async def search(
        self,
        *,
        age_min: int = DEFAULT_AGE_MIN,
        age_max: int = DEFAULT_AGE_MAX,
        biodata_type: str | None = None,
        division: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> tuple[list[PublicBiodata], int]:
        if age_min > age_max:
            raise InvalidInputError("age_min must not exceed age_max", age_min=age_min, age_max=age_max)

        offset = None
        if page is not None and limit is not None:
            _validate_page(page, limit)
            offset = (page - 1) * limit
        else:
            limit = None

        found, total = await self.biodatas.search(
            age_min=age_min,
            age_max=age_max,
            biodata_type=biodata_type,
            division=division,
            offset=offset,
            limit=limit,
        )
        return [biodata.without_contact_info() for biodata in found], total

    async def get_by_email(self, caller: Caller, email: str) -> Biodata:
        if caller.email != email and not has_capability(caller.role, Capability.VIEW_ALL_BIODATAS):
            raise ForbiddenError("You may only read your own biodata")

        biodata = await self.biodatas.get_by_email(email)
        if biodata is None:
            raise NotFoundError("Biodata not found", email=email)
        return biodata

    async def admin_list(self, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> tuple[list[Biodata], int]:
        _validate_page(page, limit)
        return await self.biodatas.list_page(offset=(page - 1) * limit, limit=limit)

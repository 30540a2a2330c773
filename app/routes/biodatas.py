"""
biodatas.py
-----------
Purpose:
    Profile creation, editing, browsing and the contact-visibility read.

Usage:
    1. GET /biodatas - Public search (contact fields stripped)
    2. POST /biodatas - Create the caller's biodata
    3. PATCH /biodatas/me - Edit the caller's biodata
    4. GET /biodatas/by-email/{email} - Owner/admin full read
    5. GET /biodatas/{biodata_id} - Read with contact visibility applied
"""

from fastapi import APIRouter, Depends, Query, Request, status

from app.dependencies import (
    get_biodata_service,
    get_caller,
    get_contact_unlock_service,
)
from app.infrastructure.observability.logging import get_logger
from app.middleware.rate_limit_dependencies import rate_limit_ip_only
from app.models.api.biodata_request import BiodataCreateRequest, BiodataUpdateRequest
from app.models.api.biodata_response import BiodataSearchResponse
from app.models.domain.biodata_domain import Biodata, PublicBiodata, VisibilityReason
from app.models.domain.user_domain import Caller
from app.services.biodata_service import BiodataService
from app.services.contact_unlock_service import ContactUnlockService
from app.utils.audit_helpers import audit_contact_disclosure

router = APIRouter(prefix="/biodatas", tags=["biodatas"])
logger = get_logger(__name__)


@router.get("", response_model=BiodataSearchResponse)
async def search_biodatas(
    age_min: int = Query(0, alias="ageMin"),
    age_max: int = Query(100, alias="ageMax"),
    biodata_type: str | None = Query(None, alias="biodataType"),
    division: str | None = None,
    page: int | None = None,
    limit: int | None = None,
    service: BiodataService = Depends(get_biodata_service),
    _rate: None = Depends(rate_limit_ip_only),
):
    """
    Search profiles by age range, type and permanent division.

    Paging applies only when both ``page`` and ``limit`` are given.
    """
    biodatas, total = await service.search(
        age_min=age_min,
        age_max=age_max,
        biodata_type=biodata_type,
        division=division,
        page=page,
        limit=limit,
    )
    return BiodataSearchResponse(biodatas=biodatas, total=total)


@router.post("", response_model=Biodata, status_code=status.HTTP_201_CREATED)
async def create_biodata(
    body: BiodataCreateRequest,
    caller: Caller = Depends(get_caller),
    service: BiodataService = Depends(get_biodata_service),
):
    return await service.create(caller.email, body.model_dump(exclude_unset=True))


@router.patch("/me", response_model=Biodata)
async def update_my_biodata(
    body: BiodataUpdateRequest,
    caller: Caller = Depends(get_caller),
    service: BiodataService = Depends(get_biodata_service),
):
    return await service.update_own(caller.email, body.model_dump(exclude_unset=True))


@router.get("/by-email/{email}", response_model=Biodata)
async def get_biodata_by_email(
    email: str,
    caller: Caller = Depends(get_caller),
    service: BiodataService = Depends(get_biodata_service),
):
    return await service.get_by_email(caller, email)


@router.get("/{biodata_id}", response_model=None)
async def read_biodata(
    biodata_id: int,
    request: Request,
    caller: Caller = Depends(get_caller),
    service: ContactUnlockService = Depends(get_contact_unlock_service),
) -> Biodata | PublicBiodata:
    """
    Read one profile. Contact fields are present only for the owner,
    premium members, admins and requesters with an approved unlock;
    for anyone else the keys are left out of the body.
    """
    view = await service.read_profile(caller.email, caller.role, biodata_id)

    if view.reason in (VisibilityReason.ROLE, VisibilityReason.APPROVED_REQUEST):
        await audit_contact_disclosure(request, caller.email, biodata_id, reason=view.reason.value)

    return view.biodata

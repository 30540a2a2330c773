"""
premium.py
----------
Purpose:
    Premium-status workflow endpoints.

Usage:
    1. POST /biodatas/premium-request - Owner asks for premium (none/rejected -> pending)
    2. GET /biodatas/is-premium/{email} - Premium flag for a profile
    3. PATCH /biodatas/premium-approve/{biodata_id} - Admin: pending -> approved
    4. PATCH /biodatas/premium-reject/{biodata_id} - Admin: pending -> rejected
    5. GET /premium-profiles?order=asc|desc - Public list of approved profiles
    6. GET /admin/premium-requests - Admin: pending queue
"""

from typing import Literal

from fastapi import APIRouter, Depends, Request

from app.auth.roles import Capability
from app.dependencies import get_caller, get_premium_service, require_capability
from app.infrastructure.observability.logging import get_logger
from app.models.api.biodata_response import IsPremiumResponse
from app.models.domain.biodata_domain import Biodata, PublicBiodata
from app.models.domain.user_domain import Caller
from app.services.premium_service import PremiumService
from app.utils.audit_helpers import audit_data_modification

router = APIRouter(tags=["premium"])
logger = get_logger(__name__)


@router.post("/biodatas/premium-request", response_model=Biodata)
async def request_premium(
    caller: Caller = Depends(get_caller),
    service: PremiumService = Depends(get_premium_service),
):
    return await service.request_upgrade(caller.email)


@router.get("/biodatas/is-premium/{email}", response_model=IsPremiumResponse)
async def is_premium(
    email: str,
    _caller: Caller = Depends(get_caller),
    service: PremiumService = Depends(get_premium_service),
):
    return IsPremiumResponse(email=email, is_premium=await service.is_premium(email))


@router.patch("/biodatas/premium-approve/{biodata_id}", response_model=Biodata)
async def approve_premium(
    biodata_id: int,
    request: Request,
    caller: Caller = Depends(require_capability(Capability.MANAGE_PREMIUM)),
    service: PremiumService = Depends(get_premium_service),
):
    biodata = await service.approve(biodata_id, actor=caller.email)
    await audit_data_modification(
        request=request,
        actor_email=caller.email,
        action="premium_approved",
        resource_type="biodata",
        resource_id=str(biodata_id),
    )
    return biodata


@router.patch("/biodatas/premium-reject/{biodata_id}", response_model=Biodata)
async def reject_premium(
    biodata_id: int,
    request: Request,
    caller: Caller = Depends(require_capability(Capability.MANAGE_PREMIUM)),
    service: PremiumService = Depends(get_premium_service),
):
    biodata = await service.reject(biodata_id, actor=caller.email)
    await audit_data_modification(
        request=request,
        actor_email=caller.email,
        action="premium_rejected",
        resource_type="biodata",
        resource_id=str(biodata_id),
    )
    return biodata


@router.get("/premium-profiles", response_model=list[PublicBiodata])
async def list_premium_profiles(
    order: Literal["asc", "desc"] = "asc",
    service: PremiumService = Depends(get_premium_service),
):
    return await service.list_premium_profiles(descending=order == "desc")


@router.get("/admin/premium-requests", response_model=list[Biodata])
async def list_premium_requests(
    _caller: Caller = Depends(require_capability(Capability.MANAGE_PREMIUM)),
    service: PremiumService = Depends(get_premium_service),
):
    return await service.list_pending()

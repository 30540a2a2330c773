"""
contact_requests.py
-------------------
Purpose:
    Contact-unlock workflow endpoints.

Usage:
    1. POST /contact-requests - Requester files a paid request
    2. GET /contact-requests/me - Requester's own requests
    3. DELETE /contact-requests/{id} - Withdraw a pending request
    4. GET /admin/contact-requests?status= - Admin: all requests
    5. PATCH /admin/contact-requests/{id}/approve - Admin: pending -> approved
"""

from fastapi import APIRouter, Depends, Query, Request, status

from app.auth.roles import Capability
from app.dependencies import get_caller, get_contact_unlock_service, require_capability
from app.infrastructure.observability.logging import get_logger
from app.middleware.rate_limit_dependencies import rate_limit_payment
from app.models.api.biodata_request import ContactRequestCreateRequest
from app.models.api.biodata_response import (
    ContactRequestListResponse,
    DeletedResponse,
    MyContactRequestsResponse,
)
from app.models.domain.biodata_domain import ContactRequest, ContactRequestStatus
from app.models.domain.user_domain import Caller
from app.services.contact_unlock_service import ContactUnlockService
from app.utils.audit_helpers import audit_data_modification

router = APIRouter(tags=["contact-requests"])
logger = get_logger(__name__)


@router.post("/contact-requests", response_model=ContactRequest, status_code=status.HTTP_201_CREATED)
async def create_contact_request(
    body: ContactRequestCreateRequest,
    caller: Caller = Depends(get_caller),
    _rate: None = Depends(rate_limit_payment),
    service: ContactUnlockService = Depends(get_contact_unlock_service),
):
    return await service.create_request(caller.email, body.biodata_id, body.payment_reference)


@router.get("/contact-requests/me", response_model=MyContactRequestsResponse)
async def list_my_contact_requests(
    caller: Caller = Depends(get_caller),
    service: ContactUnlockService = Depends(get_contact_unlock_service),
):
    return MyContactRequestsResponse(requests=await service.list_my_requests(caller.email))


@router.delete("/contact-requests/{request_id}", response_model=DeletedResponse)
async def delete_my_contact_request(
    request_id: str,
    caller: Caller = Depends(get_caller),
    service: ContactUnlockService = Depends(get_contact_unlock_service),
):
    await service.delete_my_request(caller.email, request_id)
    return DeletedResponse()


@router.get("/admin/contact-requests", response_model=ContactRequestListResponse)
async def list_contact_requests(
    status_filter: ContactRequestStatus | None = Query(None, alias="status"),
    _caller: Caller = Depends(require_capability(Capability.MANAGE_CONTACT_REQUESTS)),
    service: ContactUnlockService = Depends(get_contact_unlock_service),
):
    return ContactRequestListResponse(requests=await service.list_all(status_filter))


@router.patch("/admin/contact-requests/{request_id}/approve", response_model=ContactRequest)
async def approve_contact_request(
    request_id: str,
    request: Request,
    caller: Caller = Depends(require_capability(Capability.MANAGE_CONTACT_REQUESTS)),
    service: ContactUnlockService = Depends(get_contact_unlock_service),
):
    approved = await service.approve_request(request_id, actor=caller.email)
    await audit_data_modification(
        request=request,
        actor_email=caller.email,
        action="contact_request_approved",
        resource_type="contact_request",
        resource_id=request_id,
        changes={"requester": approved.requester_email, "biodata_id": approved.biodata_id},
    )
    return approved

"""
users.py
--------
Purpose:
    Account registration and admin user management.

Usage:
    1. POST /users - Register (idempotent)
    2. GET /users?search= - Admin: search by name
    3. GET /users/admin/{email} - Is the caller an admin?
    4. PATCH /users/admin/{id} - Admin: grant admin role
    5. PATCH /users/premium/{id} - Admin: grant premium role
    6. DELETE /users/{id} - Admin: delete an account
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from app.auth.roles import Capability
from app.dependencies import get_caller, get_user_service, require_capability
from app.infrastructure.observability.logging import get_logger
from app.middleware.rate_limit_dependencies import rate_limit_ip_only
from app.models.api.biodata_response import DeletedResponse
from app.models.api.user_request import UserRegisterRequest
from app.models.api.user_response import AdminCheckResponse, UserListResponse, UserRegisterResponse
from app.models.domain.user_domain import Caller, Role, User
from app.services.user_service import UserService
from app.utils.audit_helpers import audit_data_modification

router = APIRouter(prefix="/users", tags=["users"])
logger = get_logger(__name__)


@router.post("", response_model=UserRegisterResponse)
async def register_user(
    body: UserRegisterRequest,
    service: UserService = Depends(get_user_service),
    _rate: None = Depends(rate_limit_ip_only),
):
    """Create the account on first sign-in; later calls return the stored record with created=false."""
    user, created = await service.register(body.email, body.name, body.photo_url)
    response = UserRegisterResponse(user=user, created=created)
    return JSONResponse(
        content=response.model_dump(mode="json"),
        status_code=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
    )


@router.get("", response_model=UserListResponse)
async def search_users(
    search: str | None = None,
    _caller: Caller = Depends(require_capability(Capability.MANAGE_USERS)),
    service: UserService = Depends(get_user_service),
):
    return UserListResponse(users=await service.search(search))


@router.get("/admin/{email}", response_model=AdminCheckResponse)
async def check_admin(
    email: str,
    caller: Caller = Depends(get_caller),
    service: UserService = Depends(get_user_service),
):
    return AdminCheckResponse(admin=await service.check_admin(caller, email))


async def _set_role(request: Request, caller: Caller, service: UserService, user_id: str, role: Role) -> User:
    user = await service.set_role(user_id, role, actor=caller.email)
    await audit_data_modification(
        request=request,
        actor_email=caller.email,
        action="user_role_changed",
        resource_type="user",
        resource_id=user_id,
        changes={"role": role.value},
    )
    return user


@router.patch("/admin/{user_id}", response_model=User)
async def make_admin(
    user_id: str,
    request: Request,
    caller: Caller = Depends(require_capability(Capability.MANAGE_USERS)),
    service: UserService = Depends(get_user_service),
):
    return await _set_role(request, caller, service, user_id, Role.ADMIN)


@router.patch("/premium/{user_id}", response_model=User)
async def make_premium(
    user_id: str,
    request: Request,
    caller: Caller = Depends(require_capability(Capability.MANAGE_USERS)),
    service: UserService = Depends(get_user_service),
):
    return await _set_role(request, caller, service, user_id, Role.PREMIUM)


@router.delete("/{user_id}", response_model=DeletedResponse)
async def delete_user(
    user_id: str,
    request: Request,
    caller: Caller = Depends(require_capability(Capability.MANAGE_USERS)),
    service: UserService = Depends(get_user_service),
):
    await service.delete(caller, user_id)
    await audit_data_modification(
        request=request,
        actor_email=caller.email,
        action="user_deleted",
        resource_type="user",
        resource_id=user_id,
    )
    return DeletedResponse()

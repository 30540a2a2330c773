"""
FastAPI dependency wiring.

The pool manager is created in the app lifespan and stored on
``app.state.db``; repositories are built per request from it and services
from repositories. Tests replace any layer through ``app.dependency_overrides``.
"""

from collections.abc import Callable

from fastapi import Depends, HTTPException, Request, status

from app.auth.roles import Capability, has_capability
from app.auth.verify import auth_dependency
from app.db.pool import DatabasePoolManager
from app.infrastructure.observability.logging import get_logger
from app.models.domain.user_domain import Caller, Role
from app.repositories.biodata_repository import BiodataRepository
from app.repositories.contact_request_repository import ContactRequestRepository
from app.repositories.favorite_repository import FavoriteRepository
from app.repositories.ledger_repository import PaymentRepository, SuccessStoryRepository
from app.repositories.user_repository import UserRepository
from app.services.biodata_service import BiodataService
from app.services.contact_unlock_service import ContactUnlockService
from app.services.favorite_service import FavoriteService
from app.services.payment_service import PaymentService
from app.services.premium_service import PremiumService
from app.services.stats_service import StatsService
from app.services.success_story_service import SuccessStoryService
from app.services.user_service import UserService

logger = get_logger(__name__)


def get_db(request: Request) -> DatabasePoolManager:
    db = getattr(request.app.state, "db", None)
    if db is None or not db.initialized:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database is not available"
        )
    return db


# Repositories


def get_biodata_repository(db: DatabasePoolManager = Depends(get_db)) -> BiodataRepository:
    return BiodataRepository(db)


def get_contact_request_repository(db: DatabasePoolManager = Depends(get_db)) -> ContactRequestRepository:
    return ContactRequestRepository(db)


def get_favorite_repository(db: DatabasePoolManager = Depends(get_db)) -> FavoriteRepository:
    return FavoriteRepository(db)


def get_user_repository(db: DatabasePoolManager = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_payment_repository(db: DatabasePoolManager = Depends(get_db)) -> PaymentRepository:
    return PaymentRepository(db)


def get_success_story_repository(db: DatabasePoolManager = Depends(get_db)) -> SuccessStoryRepository:
    return SuccessStoryRepository(db)


# Services


def get_premium_service(biodatas: BiodataRepository = Depends(get_biodata_repository)) -> PremiumService:
    return PremiumService(biodatas)


def get_contact_unlock_service(
    biodatas: BiodataRepository = Depends(get_biodata_repository),
    requests: ContactRequestRepository = Depends(get_contact_request_repository),
) -> ContactUnlockService:
    return ContactUnlockService(biodatas, requests)


def get_favorite_service(
    biodatas: BiodataRepository = Depends(get_biodata_repository),
    favorites: FavoriteRepository = Depends(get_favorite_repository),
) -> FavoriteService:
    return FavoriteService(biodatas, favorites)


def get_biodata_service(biodatas: BiodataRepository = Depends(get_biodata_repository)) -> BiodataService:
    return BiodataService(biodatas)


def get_user_service(users: UserRepository = Depends(get_user_repository)) -> UserService:
    return UserService(users)


def get_payment_service(payments: PaymentRepository = Depends(get_payment_repository)) -> PaymentService:
    return PaymentService(payments)


def get_stats_service(
    biodatas: BiodataRepository = Depends(get_biodata_repository),
    requests: ContactRequestRepository = Depends(get_contact_request_repository),
    payments: PaymentRepository = Depends(get_payment_repository),
) -> StatsService:
    return StatsService(biodatas, requests, payments)


def get_success_story_service(
    stories: SuccessStoryRepository = Depends(get_success_story_repository),
) -> SuccessStoryService:
    return SuccessStoryService(stories)


# Caller identity


async def get_caller(
    request: Request,
    claims: dict = Depends(auth_dependency),
    users: UserRepository = Depends(get_user_repository),
) -> Caller:
    """Resolve the token's email to a caller, taking the role from the users table."""
    email = claims["email"]
    user = await users.get_by_email(email)
    caller = Caller(
        email=email,
        role=user.role if user else Role.USER,
        user_id=user.id if user else None,
    )
    request.state.caller_email = caller.email
    return caller


def require_capability(capability: Capability) -> Callable:
    """Dependency factory: the caller's role must grant ``capability``."""

    async def _check(caller: Caller = Depends(get_caller)) -> Caller:
        if not has_capability(caller.role, capability):
            logger.warning(
                "Capability check failed",
                email=caller.email,
                role=caller.role.value,
                capability=capability.value,
            )
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="forbidden access")
        return caller

    return _check

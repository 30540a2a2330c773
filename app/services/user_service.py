"""
User accounts and role management.
"""

import uuid

from app.infrastructure.observability.logging import get_logger
from app.models.domain.user_domain import Caller, Role, User
from app.repositories.user_repository import UserRepository
from app.services.errors import ForbiddenError, InvalidInputError, NotFoundError
from app.utils.ids import is_uuid

logger = get_logger(__name__)


class UserService:
    def __init__(self, users: UserRepository):
        self.users = users

    async def register(self, email: str, name: str | None = None, photo_url: str | None = None) -> tuple[User, bool]:
        """
        Register an account as a plain user.

        Returns:
            (user, created) - ``created`` is False when the email was already
            registered, in which case the stored record is returned unchanged.
        """
        if not email or "@" not in email:
            raise InvalidInputError("A valid email is required")

        created = await self.users.create(email, name, photo_url)
        if created is not None:
            logger.info("User registered", email=email)
            return created, True

        existing = await self.users.get_by_email(email)
        if existing is None:
            # Deleted between the conflicting insert and this read
            raise NotFoundError("User not found", email=email)
        return existing, False

    async def search(self, search: str | None = None) -> list[User]:
        return await self.users.search_by_name(search.strip() if search else None)

    async def set_role(self, user_id: str, role: Role, actor: str | None = None) -> User:
        if not is_uuid(user_id):
            raise NotFoundError("User not found", user_id=user_id)

        updated = await self.users.set_role(user_id, role)
        if updated is None:
            raise NotFoundError("User not found", user_id=user_id)

        logger.info("User role changed", user_id=user_id, role=role.value, actor=actor)
        return updated

    async def delete(self, caller: Caller, user_id: str) -> None:
        if not is_uuid(user_id):
            raise NotFoundError("User not found", user_id=user_id)
        if caller.user_id is not None and uuid.UUID(caller.user_id) == uuid.UUID(user_id):
            raise ForbiddenError("Admins cannot delete their own account")

        if not await self.users.delete(user_id):
            raise NotFoundError("User not found", user_id=user_id)
        logger.info("User deleted", user_id=user_id, actor=caller.email)

    async def check_admin(self, caller: Caller, email: str) -> bool:
        if caller.email != email:
            raise ForbiddenError("You may only check your own admin status")
        return caller.role == Role.ADMIN

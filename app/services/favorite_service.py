from app.db.helpers import UniqueViolationError
from app.infrastructure.observability.logging import get_logger
from app.models.domain.biodata_domain import Favorite
from app.repositories.biodata_repository import BiodataRepository
from app.repositories.favorite_repository import FavoriteRepository
from app.services.errors import DuplicateFavoriteError, InvalidTargetError, NotFoundError
from app.utils.ids import is_uuid

logger = get_logger(__name__)


class FavoriteService:
    def __init__(self, biodatas: BiodataRepository, favorites: FavoriteRepository):
        self.biodatas = biodatas
        self.favorites = favorites

    async def add(self, owner_email: str, biodata_id: int) -> Favorite:
        target = await self.biodatas.get_by_biodata_id(biodata_id)
        if target is None:
            raise InvalidTargetError("No biodata with this id", biodata_id=biodata_id)

        if await self.favorites.exists(owner_email, biodata_id):
            raise DuplicateFavoriteError("Biodata is already in favorites", biodata_id=biodata_id)

        try:
            favorite = await self.favorites.add_snapshot(owner_email, target)
        except UniqueViolationError as e:
            raise DuplicateFavoriteError("Biodata is already in favorites", biodata_id=biodata_id) from e

        logger.info("Favorite added", owner=owner_email, biodata_id=biodata_id)
        return favorite

    async def remove(self, owner_email: str, favorite_id: str) -> None:
        """Delete one of the caller's favorites; other owners' rows are never touched."""
        if not is_uuid(favorite_id):
            raise NotFoundError("Favorite not found", favorite_id=favorite_id)

        if not await self.favorites.delete_for_owner(owner_email, favorite_id):
            raise NotFoundError("Favorite not found", favorite_id=favorite_id)

    async def list(self, owner_email: str) -> list[Favorite]:
        return await self.favorites.list_for_owner(owner_email)

    async def is_favorite(self, owner_email: str, biodata_id: int) -> bool:
        return await self.favorites.exists(owner_email, biodata_id)

from fastapi import APIRouter, Depends, status

from app.dependencies import get_caller, get_favorite_service
from app.models.api.biodata_request import FavoriteCreateRequest
from app.models.api.biodata_response import DeletedResponse, FavoriteCheckResponse, FavoriteListResponse
from app.models.domain.biodata_domain import Favorite
from app.models.domain.user_domain import Caller
from app.services.favorite_service import FavoriteService

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.post("", response_model=Favorite, status_code=status.HTTP_201_CREATED)
async def add_favorite(
    body: FavoriteCreateRequest,
    caller: Caller = Depends(get_caller),
    service: FavoriteService = Depends(get_favorite_service),
):
    return await service.add(caller.email, body.biodata_id)


@router.get("", response_model=FavoriteListResponse)
async def list_favorites(
    caller: Caller = Depends(get_caller),
    service: FavoriteService = Depends(get_favorite_service),
):
    return FavoriteListResponse(favorites=await service.list(caller.email))


@router.get("/check/{biodata_id}", response_model=FavoriteCheckResponse)
async def check_favorite(
    biodata_id: int,
    caller: Caller = Depends(get_caller),
    service: FavoriteService = Depends(get_favorite_service),
):
    return FavoriteCheckResponse(
        biodata_id=biodata_id, is_favorite=await service.is_favorite(caller.email, biodata_id)
    )


@router.delete("/{favorite_id}", response_model=DeletedResponse)
async def remove_favorite(
    favorite_id: str,
    caller: Caller = Depends(get_caller),
    service: FavoriteService = Depends(get_favorite_service),
):
    await service.remove(caller.email, favorite_id)
    return DeletedResponse()

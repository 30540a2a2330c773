# app/models/api/biodata_response.py
from pydantic import BaseModel

from app.models.domain.biodata_domain import Biodata, ContactRequest, ContactRequestView, Favorite, PublicBiodata


class BiodataSearchResponse(BaseModel):
    biodatas: list[PublicBiodata]
    total: int


class AdminBiodataPageResponse(BaseModel):
    biodatas: list[Biodata]
    total: int
    page: int
    limit: int


class IsPremiumResponse(BaseModel):
    email: str
    is_premium: bool


class ContactRequestListResponse(BaseModel):
    requests: list[ContactRequest]


class MyContactRequestsResponse(BaseModel):
    requests: list[ContactRequestView]


class FavoriteListResponse(BaseModel):
    favorites: list[Favorite]


class FavoriteCheckResponse(BaseModel):
    biodata_id: int
    is_favorite: bool


class DeletedResponse(BaseModel):
    deleted: bool = True

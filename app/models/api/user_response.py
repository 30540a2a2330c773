# app/models/api/user_response.py
from pydantic import BaseModel

from app.models.domain.user_domain import User


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int


class UserRegisterResponse(BaseModel):
    user: User
    created: bool


class UserListResponse(BaseModel):
    users: list[User]


class AdminCheckResponse(BaseModel):
    admin: bool

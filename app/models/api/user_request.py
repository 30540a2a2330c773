# app/models/api/user_request.py
from pydantic import BaseModel, Field


class TokenRequest(BaseModel):
    """Request body for POST /jwt."""

    email: str = Field(..., min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+$")


class UserRegisterRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+$")
    name: str | None = Field(None, max_length=120)
    photo_url: str | None = None

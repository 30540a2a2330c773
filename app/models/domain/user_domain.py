from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class Role(str, Enum):
    USER = "user"
    PREMIUM = "premium"
    ADMIN = "admin"


class User(BaseModel):
    """Account record; ``role`` drives every authorization decision."""

    id: str
    email: str
    name: str | None = None
    photo_url: str | None = None
    role: Role = Role.USER
    created_at: datetime


class Caller(BaseModel):
    """Identity resolved from a bearer token plus the stored role."""

    email: str
    role: Role = Role.USER
    user_id: str | None = None

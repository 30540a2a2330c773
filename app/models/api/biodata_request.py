# app/models/api/biodata_request.py
from datetime import date
from typing import Literal

from pydantic import BaseModel, Field


class BiodataFields(BaseModel):
    """Display fields an owner may set. Unknown keys (ids, premium state) are ignored."""

    name: str | None = Field(None, min_length=1, max_length=120)
    biodata_type: Literal["Male", "Female"] | None = None
    profile_image: str | None = None
    date_of_birth: date | None = None
    age: int | None = Field(None, ge=18, le=100)
    height: str | None = None
    weight: str | None = None
    occupation: str | None = None
    race: str | None = None
    fathers_name: str | None = None
    mothers_name: str | None = None
    permanent_division: str | None = None
    present_division: str | None = None
    expected_partner_age: int | None = Field(None, ge=18, le=100)
    expected_partner_height: str | None = None
    expected_partner_weight: str | None = None
    contact_email: str | None = None
    mobile_number: str | None = None


class BiodataCreateRequest(BiodataFields):
    name: str = Field(..., min_length=1, max_length=120)
    biodata_type: Literal["Male", "Female"]


class BiodataUpdateRequest(BiodataFields):
    pass


class ContactRequestCreateRequest(BaseModel):
    biodata_id: int = Field(..., ge=1)
    payment_reference: str = Field(..., min_length=1, max_length=255)


class FavoriteCreateRequest(BaseModel):
    biodata_id: int = Field(..., ge=1)

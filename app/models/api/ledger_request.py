# app/models/api/ledger_request.py
from datetime import date

from pydantic import BaseModel, Field


class PaymentIntentRequest(BaseModel):
    """Only the purpose is accepted; the amount is always decided server-side."""

    purpose: str = "contact_unlock"


class PaymentRecordRequest(BaseModel):
    payment_reference: str = Field(..., min_length=1, max_length=255)
    biodata_id: int | None = Field(None, ge=1)
    purpose: str = "contact_unlock"


class SuccessStoryCreateRequest(BaseModel):
    couple_image: str | None = None
    self_biodata_id: int = Field(..., ge=1)
    partner_biodata_id: int = Field(..., ge=1)
    marriage_date: date
    review: str = Field(..., min_length=1, max_length=2000)
    rating: int = Field(..., ge=1, le=5)

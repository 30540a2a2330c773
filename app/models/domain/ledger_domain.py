from datetime import date, datetime

from pydantic import BaseModel


class Payment(BaseModel):
    """A completed payment recorded in the ledger."""

    id: str
    email: str
    amount: float
    currency: str
    payment_reference: str
    purpose: str
    biodata_id: int | None = None
    created_at: datetime


class PaymentIntent(BaseModel):
    """Client-usable handle returned by the payment processor."""

    client_secret: str
    amount: int
    currency: str


class AdminStats(BaseModel):
    biodata_count: int
    male_count: int
    female_count: int
    premium_count: int
    contact_request_count: int
    revenue: float


class SuccessStory(BaseModel):
    id: str
    couple_image: str | None = None
    self_biodata_id: int
    partner_biodata_id: int
    marriage_date: date
    review: str
    rating: int
    created_at: datetime

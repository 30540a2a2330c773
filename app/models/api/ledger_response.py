# app/models/api/ledger_response.py
from pydantic import BaseModel

from app.models.domain.ledger_domain import Payment, SuccessStory


class PaymentListResponse(BaseModel):
    payments: list[Payment]


class SuccessStoryListResponse(BaseModel):
    stories: list[SuccessStory]

"""
payments.py
-----------
Purpose:
    Stripe payment intents and the payment ledger.

Usage:
    1. POST /create-payment-intent - Client secret for the unlock price
    2. POST /payments - Record a completed payment
    3. GET /payments - Admin: whole ledger
    4. GET /payments/{email} - Caller's own payments
"""

from fastapi import APIRouter, Depends, status

from app.auth.roles import Capability
from app.dependencies import get_caller, get_payment_service, require_capability
from app.middleware.rate_limit_dependencies import rate_limit_payment
from app.models.api.ledger_request import PaymentIntentRequest, PaymentRecordRequest
from app.models.api.ledger_response import PaymentListResponse
from app.models.domain.ledger_domain import Payment, PaymentIntent
from app.models.domain.user_domain import Caller
from app.services.payment_service import PaymentService

router = APIRouter(tags=["payments"])


@router.post("/create-payment-intent", response_model=PaymentIntent)
async def create_payment_intent(
    body: PaymentIntentRequest | None = None,
    caller: Caller = Depends(get_caller),
    _rate: None = Depends(rate_limit_payment),
    service: PaymentService = Depends(get_payment_service),
):
    """Any client-sent amount is ignored; the unlock price comes from settings."""
    purpose = body.purpose if body else "contact_unlock"
    return await service.create_payment_intent(caller.email, purpose)


@router.post("/payments", response_model=Payment, status_code=status.HTTP_201_CREATED)
async def record_payment(
    body: PaymentRecordRequest,
    caller: Caller = Depends(get_caller),
    service: PaymentService = Depends(get_payment_service),
):
    return await service.record_payment(
        caller.email, body.payment_reference, biodata_id=body.biodata_id, purpose=body.purpose
    )


@router.get("/payments", response_model=PaymentListResponse)
async def list_all_payments(
    _caller: Caller = Depends(require_capability(Capability.VIEW_LEDGER)),
    service: PaymentService = Depends(get_payment_service),
):
    return PaymentListResponse(payments=await service.list_all())


@router.get("/payments/{email}", response_model=PaymentListResponse)
async def list_payments_for_email(
    email: str,
    caller: Caller = Depends(get_caller),
    service: PaymentService = Depends(get_payment_service),
):
    return PaymentListResponse(payments=await service.list_for_email(caller, email))

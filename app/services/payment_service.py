"""
Payments: Stripe PaymentIntents and the local payment ledger.

The charged amount always comes from ``settings.CONTACT_UNLOCK_PRICE``; a
client cannot choose what it pays. The Stripe SDK is synchronous, so calls
run in a worker thread via ``asyncio.to_thread``.
"""

import asyncio

import stripe

from app.auth.roles import Capability, has_capability
from app.config import settings
from app.db.helpers import UniqueViolationError
from app.infrastructure.observability.logging import get_logger
from app.models.domain.ledger_domain import Payment, PaymentIntent
from app.models.domain.user_domain import Caller
from app.repositories.ledger_repository import PaymentRepository
from app.services.errors import ConflictError, ForbiddenError, InvalidInputError, PaymentProviderError

logger = get_logger(__name__)

CONTACT_UNLOCK_PURPOSE = "contact_unlock"
PAYMENT_PURPOSES = frozenset({CONTACT_UNLOCK_PURPOSE})


class PaymentService:
    def __init__(self, payments: PaymentRepository, stripe_api_key: str | None = None):
        self.payments = payments
        self.stripe_api_key = stripe_api_key if stripe_api_key is not None else settings.STRIPE_SECRET_KEY

    async def create_payment_intent(self, email: str, purpose: str = CONTACT_UNLOCK_PURPOSE) -> PaymentIntent:
        if purpose not in PAYMENT_PURPOSES:
            raise InvalidInputError("Unknown payment purpose", purpose=purpose)
        if not self.stripe_api_key:
            raise PaymentProviderError("Payment processing is not configured")

        amount = settings.contact_unlock_amount_cents()
        try:
            intent = await asyncio.to_thread(
                stripe.PaymentIntent.create,
                amount=amount,
                currency=settings.PAYMENT_CURRENCY,
                payment_method_types=["card"],
                metadata={"email": email, "purpose": purpose},
                api_key=self.stripe_api_key,
            )
        except stripe.StripeError as e:
            logger.error(
                "Stripe PaymentIntent creation failed",
                error=str(e),
                error_type=type(e).__name__,
                email=email,
            )
            raise PaymentProviderError("Payment provider rejected the request") from e

        logger.info("Payment intent created", email=email, amount=amount, purpose=purpose)
        return PaymentIntent(
            client_secret=intent["client_secret"],
            amount=amount,
            currency=settings.PAYMENT_CURRENCY,
        )

    async def record_payment(
        self,
        email: str,
        payment_reference: str,
        biodata_id: int | None = None,
        purpose: str = CONTACT_UNLOCK_PURPOSE,
    ) -> Payment:
        if not payment_reference or not payment_reference.strip():
            raise InvalidInputError("payment_reference is required")
        if purpose not in PAYMENT_PURPOSES:
            raise InvalidInputError("Unknown payment purpose", purpose=purpose)

        try:
            payment = await self.payments.create(
                email=email,
                amount=settings.CONTACT_UNLOCK_PRICE,
                currency=settings.PAYMENT_CURRENCY,
                payment_reference=payment_reference.strip(),
                purpose=purpose,
                biodata_id=biodata_id,
            )
        except UniqueViolationError as e:
            raise ConflictError(
                "This payment has already been recorded", payment_reference=payment_reference
            ) from e

        logger.info("Payment recorded", email=email, payment_id=payment.id, amount=payment.amount)
        return payment

    async def list_for_email(self, caller: Caller, email: str) -> list[Payment]:
        if caller.email != email and not has_capability(caller.role, Capability.VIEW_LEDGER):
            raise ForbiddenError("You may only list your own payments")
        return await self.payments.list_for_email(email)

    async def list_all(self) -> list[Payment]:
        return await self.payments.list_all()

import pytest
import stripe

from app.config import settings
from app.models.domain.user_domain import Caller, Role
from app.services.errors import ConflictError, ForbiddenError, InvalidInputError, PaymentProviderError
from app.services.payment_service import PaymentService


@pytest.fixture
def stripe_calls(monkeypatch):
    calls = []

    def fake_create(**kwargs):
        calls.append(kwargs)
        return {"id": "pi_test", "client_secret": "pi_test_secret_abc"}

    monkeypatch.setattr("app.services.payment_service.stripe.PaymentIntent.create", fake_create)
    return calls


@pytest.mark.asyncio
async def test_intent_amount_is_decided_by_server(repos, stripe_calls, monkeypatch):
    monkeypatch.setattr(settings, "CONTACT_UNLOCK_PRICE", 7.5)
    service = PaymentService(repos.payments, stripe_api_key="sk_test_123")

    intent = await service.create_payment_intent("bob@example.com")

    assert intent.client_secret == "pi_test_secret_abc"
    assert intent.amount == 750
    assert stripe_calls[0]["amount"] == 750
    assert stripe_calls[0]["api_key"] == "sk_test_123"
    assert stripe_calls[0]["metadata"] == {"email": "bob@example.com", "purpose": "contact_unlock"}


@pytest.mark.asyncio
async def test_intent_without_stripe_key_fails(repos, stripe_calls):
    service = PaymentService(repos.payments, stripe_api_key="")

    with pytest.raises(PaymentProviderError):
        await service.create_payment_intent("bob@example.com")
    assert stripe_calls == []


@pytest.mark.asyncio
async def test_stripe_error_becomes_provider_error(repos, monkeypatch):
    def failing_create(**kwargs):
        raise stripe.StripeError("card declined")

    monkeypatch.setattr("app.services.payment_service.stripe.PaymentIntent.create", failing_create)
    service = PaymentService(repos.payments, stripe_api_key="sk_test_123")

    with pytest.raises(PaymentProviderError) as exc_info:
        await service.create_payment_intent("bob@example.com")

    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_unknown_purpose_is_rejected(repos, stripe_calls):
    service = PaymentService(repos.payments, stripe_api_key="sk_test_123")

    with pytest.raises(InvalidInputError):
        await service.create_payment_intent("bob@example.com", purpose="donation")


@pytest.mark.asyncio
async def test_record_payment_uses_configured_price(repos):
    service = PaymentService(repos.payments, stripe_api_key="sk_test_123")

    payment = await service.record_payment("bob@example.com", " pi_1 ", biodata_id=3)

    assert payment.amount == settings.CONTACT_UNLOCK_PRICE
    assert payment.payment_reference == "pi_1"
    assert payment.biodata_id == 3


@pytest.mark.asyncio
async def test_record_same_reference_twice_conflicts(repos):
    service = PaymentService(repos.payments, stripe_api_key="sk_test_123")
    await service.record_payment("bob@example.com", "pi_1")

    with pytest.raises(ConflictError):
        await service.record_payment("bob@example.com", "pi_1")


@pytest.mark.asyncio
async def test_list_for_email_requires_owner_or_ledger_access(repos):
    service = PaymentService(repos.payments, stripe_api_key="sk_test_123")
    await service.record_payment("bob@example.com", "pi_1")
    await service.record_payment("erin@example.com", "pi_2")

    own = await service.list_for_email(Caller(email="bob@example.com"), "bob@example.com")
    as_admin = await service.list_for_email(
        Caller(email="root@example.com", role=Role.ADMIN), "erin@example.com"
    )

    assert [p.payment_reference for p in own] == ["pi_1"]
    assert [p.payment_reference for p in as_admin] == ["pi_2"]
    assert len(await service.list_all()) == 2

    with pytest.raises(ForbiddenError):
        await service.list_for_email(Caller(email="bob@example.com"), "erin@example.com")

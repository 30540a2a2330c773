from datetime import date

import pytest

from app.services.contact_unlock_service import ContactUnlockService
from app.services.errors import InvalidInputError
from app.services.payment_service import PaymentService
from app.services.premium_service import PremiumService
from app.services.stats_service import StatsService
from app.services.success_story_service import SuccessStoryService


@pytest.mark.asyncio
async def test_admin_stats_counts_everything(repos):
    for email, kind in (("a@example.com", "Female"), ("b@example.com", "Male"), ("c@example.com", "Male")):
        await repos.biodatas.create(email, {"name": "X", "biodata_type": kind, "age": 30})

    premium = PremiumService(repos.biodatas)
    await premium.request_upgrade("a@example.com")
    await premium.approve(1)
    await ContactUnlockService(repos.biodatas, repos.contact_requests).create_request(
        "b@example.com", 1, "pi_1"
    )
    payments = PaymentService(repos.payments, stripe_api_key="sk_test")
    await payments.record_payment("b@example.com", "pi_1", biodata_id=1)
    await payments.record_payment("c@example.com", "pi_2", biodata_id=1)

    stats = await StatsService(repos.biodatas, repos.contact_requests, repos.payments).admin_stats()

    assert stats.biodata_count == 3
    assert stats.male_count == 2
    assert stats.female_count == 1
    assert stats.premium_count == 1
    assert stats.contact_request_count == 1
    assert stats.revenue == pytest.approx(10.0)


@pytest.mark.asyncio
async def test_admin_stats_on_empty_store(repos):
    stats = await StatsService(repos.biodatas, repos.contact_requests, repos.payments).admin_stats()

    assert stats.biodata_count == 0
    assert stats.revenue == 0


@pytest.mark.asyncio
async def test_stories_listed_newest_marriage_first(repos):
    service = SuccessStoryService(repos.stories)
    for day, review in ((date(2023, 1, 5), "older"), (date(2024, 6, 1), "newer")):
        await service.create(
            author_email="a@example.com",
            self_biodata_id=1,
            partner_biodata_id=2,
            marriage_date=day,
            review=review,
            rating=5,
        )

    stories = await service.list_recent()

    assert [s.review for s in stories] == ["newer", "older"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [{"rating": 0}, {"rating": 6}, {"partner_biodata_id": 1}, {"review": "  "}],
)
async def test_story_validation(repos, overrides):
    service = SuccessStoryService(repos.stories)
    fields = {
        "author_email": "a@example.com",
        "self_biodata_id": 1,
        "partner_biodata_id": 2,
        "marriage_date": date(2024, 1, 1),
        "review": "We met here",
        "rating": 4,
    }
    fields.update(overrides)

    with pytest.raises(InvalidInputError):
        await service.create(**fields)

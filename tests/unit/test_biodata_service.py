import pytest

from app.db.helpers import UniqueViolationError
from app.models.domain.biodata_domain import PremiumStatus
from app.models.domain.user_domain import Caller, Role
from app.services.biodata_service import BiodataService
from app.services.errors import ConflictError, ForbiddenError, InvalidInputError, NotFoundError


def _fields(**overrides):
    fields = {
        "name": "Alice",
        "biodata_type": "Female",
        "age": 27,
        "permanent_division": "Dhaka",
        "contact_email": "alice.private@example.com",
        "mobile_number": "+8801111111111",
    }
    fields.update(overrides)
    return fields


@pytest.mark.asyncio
async def test_create_allocates_sequential_ids(repos):
    service = BiodataService(repos.biodatas)

    first = await service.create("a@example.com", _fields())
    second = await service.create("b@example.com", _fields(name="Bea"))

    assert (first.biodata_id, second.biodata_id) == (1, 2)
    assert first.premium_status == PremiumStatus.NONE
    assert first.is_premium is False


@pytest.mark.asyncio
async def test_create_ignores_privileged_fields(repos):
    service = BiodataService(repos.biodatas)

    created = await service.create(
        "a@example.com", _fields(biodata_id=500, is_premium=True, premium_status="approved")
    )

    assert created.biodata_id == 1
    assert created.is_premium is False
    assert created.premium_status == PremiumStatus.NONE


@pytest.mark.asyncio
async def test_second_biodata_for_same_account_conflicts(repos):
    service = BiodataService(repos.biodatas)
    await service.create("a@example.com", _fields())

    with pytest.raises(ConflictError):
        await service.create("a@example.com", _fields())


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "fields",
    [
        {"biodata_type": "Female"},
        {"name": "Alice"},
        {"name": "Alice", "biodata_type": "Other"},
    ],
)
async def test_create_validates_required_fields(repos, fields):
    service = BiodataService(repos.biodatas)

    with pytest.raises(InvalidInputError):
        await service.create("a@example.com", fields)


@pytest.mark.asyncio
async def test_sequence_collision_is_reported_as_conflict(repos, monkeypatch):
    service = BiodataService(repos.biodatas)

    async def colliding_create(email, fields):
        raise UniqueViolationError("duplicate key", constraint="biodatas_biodata_id_key")

    monkeypatch.setattr(repos.biodatas, "create", colliding_create)

    with pytest.raises(ConflictError) as exc_info:
        await service.create("a@example.com", _fields())

    assert "try again" in exc_info.value.message


@pytest.mark.asyncio
async def test_update_own_cannot_touch_ids_or_premium_state(repos):
    service = BiodataService(repos.biodatas)
    created = await service.create("a@example.com", _fields())

    updated = await service.update_own(
        "a@example.com",
        {"occupation": "Architect", "biodata_id": 77, "email": "x@example.com", "is_premium": True},
    )

    assert updated.occupation == "Architect"
    assert updated.biodata_id == created.biodata_id
    assert updated.email == "a@example.com"
    assert updated.is_premium is False


@pytest.mark.asyncio
async def test_update_without_biodata_is_not_found(repos):
    service = BiodataService(repos.biodatas)

    with pytest.raises(NotFoundError):
        await service.update_own("ghost@example.com", {"occupation": "Architect"})


@pytest.mark.asyncio
async def test_search_filters_and_strips_contact_fields(repos):
    service = BiodataService(repos.biodatas)
    await service.create("a@example.com", _fields(age=25))
    await service.create("b@example.com", _fields(name="Bob", biodata_type="Male", age=33))
    await service.create("c@example.com", _fields(name="Cara", age=45, permanent_division="Khulna"))

    found, total = await service.search(age_min=20, age_max=40, biodata_type="Female")

    assert total == 1
    assert [b.email for b in found] == ["a@example.com"]
    assert "contact_email" not in found[0].model_dump()
    assert "mobile_number" not in found[0].model_dump()


@pytest.mark.asyncio
async def test_search_pages_only_when_page_and_limit_given(repos):
    service = BiodataService(repos.biodatas)
    for i in range(5):
        await service.create(f"u{i}@example.com", _fields(age=20 + i))

    everything, total = await service.search(page=2)
    page_two, _ = await service.search(page=2, limit=2)

    assert total == 5
    assert len(everything) == 5
    assert [b.biodata_id for b in page_two] == [3, 4]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "kwargs",
    [
        {"age_min": 50, "age_max": 30},
        {"page": 0, "limit": 10},
        {"page": 1, "limit": 0},
        {"page": 1, "limit": 101},
    ],
)
async def test_search_rejects_bad_ranges(repos, kwargs):
    service = BiodataService(repos.biodatas)

    with pytest.raises(InvalidInputError):
        await service.search(**kwargs)


@pytest.mark.asyncio
async def test_get_by_email_is_owner_or_admin_only(repos):
    service = BiodataService(repos.biodatas)
    await service.create("a@example.com", _fields())

    own = await service.get_by_email(Caller(email="a@example.com"), "a@example.com")
    as_admin = await service.get_by_email(Caller(email="root@example.com", role=Role.ADMIN), "a@example.com")

    assert own.contact_email == "alice.private@example.com"
    assert as_admin.email == "a@example.com"

    with pytest.raises(ForbiddenError):
        await service.get_by_email(Caller(email="b@example.com", role=Role.PREMIUM), "a@example.com")


@pytest.mark.asyncio
async def test_admin_list_defaults_and_page_bounds(repos):
    service = BiodataService(repos.biodatas)
    for i in range(3):
        await service.create(f"u{i}@example.com", _fields())

    items, total = await service.admin_list()
    second, _ = await service.admin_list(page=2, limit=2)

    assert total == 3
    assert len(items) == 3
    assert [b.biodata_id for b in second] == [3]

    with pytest.raises(InvalidInputError):
        await service.admin_list(page=1, limit=500)

import uuid
from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient

from app.auth.verify import auth_dependency, issue_access_token
from app.db.helpers import UniqueViolationError
from app.dependencies import (
    get_biodata_repository,
    get_contact_request_repository,
    get_favorite_repository,
    get_payment_repository,
    get_success_story_repository,
    get_user_repository,
)
from app.models.domain.biodata_domain import (
    Biodata,
    ContactRequest,
    ContactRequestStatus,
    Favorite,
    PremiumStatus,
)
from app.models.domain.ledger_domain import Payment, SuccessStory
from app.models.domain.user_domain import Role, User
from app.repositories.biodata_repository import EDITABLE_FIELDS


def _now() -> datetime:
    return datetime.now(UTC)


class FakeBiodataRepository:
    """In-memory stand-in for BiodataRepository with the same conditional-update semantics."""

    def __init__(self):
        self.rows: dict[str, Biodata] = {}

    async def get_by_biodata_id(self, biodata_id: int) -> Biodata | None:
        return next((b for b in self.rows.values() if b.biodata_id == biodata_id), None)

    async def get_by_email(self, email: str) -> Biodata | None:
        return self.rows.get(email)

    async def get_many(self, biodata_ids: list[int]) -> dict[int, Biodata]:
        return {b.biodata_id: b for b in self.rows.values() if b.biodata_id in biodata_ids}

    async def create(self, email: str, fields: dict) -> Biodata:
        if email in self.rows:
            raise UniqueViolationError("duplicate email", constraint="biodatas_email_key")
        next_id = max((b.biodata_id for b in self.rows.values()), default=0) + 1
        values = {name: value for name, value in fields.items() if name in EDITABLE_FIELDS}
        biodata = Biodata(
            id=str(uuid.uuid4()), biodata_id=next_id, email=email, created_at=_now(), **values
        )
        self.rows[email] = biodata
        return biodata

    async def update_fields(self, email: str, fields: dict) -> Biodata | None:
        current = self.rows.get(email)
        if current is None:
            return None
        values = {name: value for name, value in fields.items() if name in EDITABLE_FIELDS}
        self.rows[email] = current.model_copy(update=values)
        return self.rows[email]

    async def search(self, *, age_min, age_max, biodata_type=None, division=None, offset=None, limit=None):
        found = [
            b
            for b in sorted(self.rows.values(), key=lambda b: b.biodata_id)
            if b.age is not None
            and age_min <= b.age <= age_max
            and (not biodata_type or b.biodata_type == biodata_type)
            and (not division or b.permanent_division == division)
        ]
        total = len(found)
        if limit is not None:
            found = found[(offset or 0) : (offset or 0) + limit]
        return found, total

    async def list_page(self, *, offset: int, limit: int):
        ordered = sorted(self.rows.values(), key=lambda b: b.biodata_id)
        return ordered[offset : offset + limit], len(ordered)

    async def list_by_premium_status(self, premium_status, *, descending_age=False):
        matching = [b for b in self.rows.values() if b.premium_status == premium_status]
        return sorted(matching, key=lambda b: (b.age or 0), reverse=descending_age)

    def _transition(self, biodata: Biodata | None, allowed_from, **update) -> Biodata | None:
        if biodata is None or biodata.premium_status not in allowed_from:
            return None
        self.rows[biodata.email] = biodata.model_copy(update=update)
        return self.rows[biodata.email]

    async def mark_premium_pending(self, email: str) -> Biodata | None:
        return self._transition(
            self.rows.get(email),
            (PremiumStatus.NONE, PremiumStatus.REJECTED),
            premium_status=PremiumStatus.PENDING,
            premium_requested_at=_now(),
        )

    async def approve_premium(self, biodata_id: int) -> Biodata | None:
        return self._transition(
            await self.get_by_biodata_id(biodata_id),
            (PremiumStatus.PENDING,),
            premium_status=PremiumStatus.APPROVED,
            is_premium=True,
            premium_approved_at=_now(),
        )

    async def reject_premium(self, biodata_id: int) -> Biodata | None:
        return self._transition(
            await self.get_by_biodata_id(biodata_id),
            (PremiumStatus.PENDING,),
            premium_status=PremiumStatus.REJECTED,
            premium_rejected_at=_now(),
        )

    async def count_summary(self) -> dict[str, int]:
        rows = list(self.rows.values())
        return {
            "biodata_count": len(rows),
            "male_count": sum(1 for b in rows if b.biodata_type == "Male"),
            "female_count": sum(1 for b in rows if b.biodata_type == "Female"),
            "premium_count": sum(1 for b in rows if b.premium_status == PremiumStatus.APPROVED),
        }


class FakeContactRequestRepository:
    def __init__(self):
        self.rows: dict[str, ContactRequest] = {}

    async def get(self, request_id: str) -> ContactRequest | None:
        return self.rows.get(request_id)

    async def get_for_pair(self, requester_email: str, biodata_id: int) -> ContactRequest | None:
        return next(
            (
                r
                for r in self.rows.values()
                if r.requester_email == requester_email and r.biodata_id == biodata_id
            ),
            None,
        )

    async def create(self, requester_email, biodata_id, payment_reference, amount) -> ContactRequest:
        if any(r.requester_email == requester_email and r.biodata_id == biodata_id for r in self.rows.values()):
            raise UniqueViolationError("duplicate pair", constraint="uq_contact_requests_pair")
        request = ContactRequest(
            id=str(uuid.uuid4()),
            requester_email=requester_email,
            biodata_id=biodata_id,
            status=ContactRequestStatus.PENDING,
            payment_reference=payment_reference,
            amount=amount,
            created_at=_now(),
        )
        self.rows[request.id] = request
        return request

    async def approve(self, request_id: str) -> ContactRequest | None:
        current = self.rows.get(request_id)
        if current is None or current.status != ContactRequestStatus.PENDING:
            return None
        self.rows[request_id] = current.model_copy(
            update={"status": ContactRequestStatus.APPROVED, "approved_at": _now()}
        )
        return self.rows[request_id]

    async def has_approved(self, requester_email: str, biodata_id: int) -> bool:
        request = await self.get_for_pair(requester_email, biodata_id)
        return request is not None and request.status == ContactRequestStatus.APPROVED

    async def list_for_requester(self, requester_email: str) -> list[ContactRequest]:
        return [r for r in self.rows.values() if r.requester_email == requester_email]

    async def list_all(self, status=None) -> list[ContactRequest]:
        return [r for r in self.rows.values() if status is None or r.status == status]

    async def delete_pending_for_requester(self, requester_email: str, request_id: str) -> int:
        current = self.rows.get(request_id)
        if (
            current is None
            or current.requester_email != requester_email
            or current.status != ContactRequestStatus.PENDING
        ):
            return 0
        del self.rows[request_id]
        return 1

    async def count(self) -> int:
        return len(self.rows)


class FakeFavoriteRepository:
    def __init__(self):
        self.rows: dict[str, Favorite] = {}

    async def exists(self, owner_email: str, biodata_id: int) -> bool:
        return any(
            f.owner_email == owner_email and f.biodata_id == biodata_id for f in self.rows.values()
        )

    async def add_snapshot(self, owner_email: str, biodata: Biodata) -> Favorite:
        if await self.exists(owner_email, biodata.biodata_id):
            raise UniqueViolationError("duplicate favorite", constraint="uq_favorites_owner_biodata")
        favorite = Favorite(
            id=str(uuid.uuid4()),
            owner_email=owner_email,
            biodata_id=biodata.biodata_id,
            name=biodata.name,
            profile_image=biodata.profile_image,
            age=biodata.age,
            occupation=biodata.occupation,
            permanent_division=biodata.permanent_division,
            biodata_email=biodata.email,
            added_at=_now(),
        )
        self.rows[favorite.id] = favorite
        return favorite

    async def list_for_owner(self, owner_email: str) -> list[Favorite]:
        return [f for f in self.rows.values() if f.owner_email == owner_email]

    async def delete_for_owner(self, owner_email: str, favorite_id: str) -> int:
        current = self.rows.get(favorite_id)
        if current is None or current.owner_email != owner_email:
            return 0
        del self.rows[favorite_id]
        return 1


class FakeUserRepository:
    def __init__(self):
        self.rows: dict[str, User] = {}

    def add(self, email: str, role: Role = Role.USER, name: str | None = None) -> User:
        user = User(id=str(uuid.uuid4()), email=email, name=name, role=role, created_at=_now())
        self.rows[user.id] = user
        return user

    async def get_by_email(self, email: str) -> User | None:
        return next((u for u in self.rows.values() if u.email == email), None)

    async def get(self, user_id: str) -> User | None:
        return self.rows.get(user_id)

    async def create(self, email, name, photo_url) -> User | None:
        if await self.get_by_email(email):
            return None
        user = self.add(email, name=name)
        self.rows[user.id] = user.model_copy(update={"photo_url": photo_url})
        return self.rows[user.id]

    async def search_by_name(self, search: str | None) -> list[User]:
        if not search:
            return list(self.rows.values())
        return [u for u in self.rows.values() if u.name and search.lower() in u.name.lower()]

    async def set_role(self, user_id: str, role: Role) -> User | None:
        current = self.rows.get(user_id)
        if current is None:
            return None
        self.rows[user_id] = current.model_copy(update={"role": role})
        return self.rows[user_id]

    async def delete(self, user_id: str) -> int:
        return 1 if self.rows.pop(user_id, None) else 0


class FakePaymentRepository:
    def __init__(self):
        self.rows: list[Payment] = []

    async def create(self, *, email, amount, currency, payment_reference, purpose, biodata_id) -> Payment:
        if any(p.payment_reference == payment_reference for p in self.rows):
            raise UniqueViolationError("duplicate reference", constraint="payments_payment_reference_key")
        payment = Payment(
            id=str(uuid.uuid4()),
            email=email,
            amount=amount,
            currency=currency,
            payment_reference=payment_reference,
            purpose=purpose,
            biodata_id=biodata_id,
            created_at=_now(),
        )
        self.rows.append(payment)
        return payment

    async def list_for_email(self, email: str) -> list[Payment]:
        return [p for p in self.rows if p.email == email]

    async def list_all(self) -> list[Payment]:
        return list(self.rows)

    async def total_revenue(self) -> float:
        return float(sum(p.amount for p in self.rows))


class FakeSuccessStoryRepository:
    def __init__(self):
        self.rows: list[SuccessStory] = []

    async def create(self, **fields) -> SuccessStory:
        story = SuccessStory(id=str(uuid.uuid4()), created_at=_now(), **fields)
        self.rows.append(story)
        return story

    async def list_recent(self) -> list[SuccessStory]:
        return sorted(self.rows, key=lambda s: s.marriage_date, reverse=True)


class FakeRepositories:
    def __init__(self):
        self.biodatas = FakeBiodataRepository()
        self.contact_requests = FakeContactRequestRepository()
        self.favorites = FakeFavoriteRepository()
        self.users = FakeUserRepository()
        self.payments = FakePaymentRepository()
        self.stories = FakeSuccessStoryRepository()


@pytest.fixture
def repos() -> FakeRepositories:
    return FakeRepositories()


@pytest.fixture
def auth_override():
    def _override():
        return {"sub": "user@example.com", "email": "user@example.com"}

    return _override


@pytest.fixture
def apply_auth_override(auth_override):
    def _apply(app):
        app.dependency_overrides[auth_dependency] = auth_override

    return _apply


@pytest.fixture
def app(repos, monkeypatch):
    """Full application wired to in-memory repositories; no database or Redis."""
    from app.main import create_app

    monkeypatch.setattr("app.middleware.rate_limit_dependencies.settings.RATE_LIMIT_ENABLED", False)

    application = create_app()
    application.dependency_overrides.update(
        {
            get_biodata_repository: lambda: repos.biodatas,
            get_contact_request_repository: lambda: repos.contact_requests,
            get_favorite_repository: lambda: repos.favorites,
            get_user_repository: lambda: repos.users,
            get_payment_repository: lambda: repos.payments,
            get_success_story_repository: lambda: repos.stories,
        }
    )
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def auth_headers():
    def _headers(email: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {issue_access_token(email)}"}

    return _headers

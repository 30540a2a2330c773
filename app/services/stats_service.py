from app.models.domain.ledger_domain import AdminStats
from app.repositories.biodata_repository import BiodataRepository
from app.repositories.contact_request_repository import ContactRequestRepository
from app.repositories.ledger_repository import PaymentRepository


class StatsService:
    """Dashboard counters for admins; revenue is the sum of recorded payments."""

    def __init__(
        self,
        biodatas: BiodataRepository,
        requests: ContactRequestRepository,
        payments: PaymentRepository,
    ):
        self.biodatas = biodatas
        self.requests = requests
        self.payments = payments

    async def admin_stats(self) -> AdminStats:
        summary = await self.biodatas.count_summary()
        return AdminStats(
            biodata_count=summary.get("biodata_count", 0),
            male_count=summary.get("male_count", 0),
            female_count=summary.get("female_count", 0),
            premium_count=summary.get("premium_count", 0),
            contact_request_count=await self.requests.count(),
            revenue=await self.payments.total_revenue(),
        )

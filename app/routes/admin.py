from fastapi import APIRouter, Depends

from app.auth.roles import Capability
from app.dependencies import get_biodata_service, get_stats_service, require_capability
from app.models.api.biodata_response import AdminBiodataPageResponse
from app.models.domain.ledger_domain import AdminStats
from app.models.domain.user_domain import Caller
from app.services.biodata_service import DEFAULT_PAGE_SIZE, BiodataService
from app.services.stats_service import StatsService

router = APIRouter(tags=["admin"])


@router.get("/admin/biodatas", response_model=AdminBiodataPageResponse)
async def admin_list_biodatas(
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    _caller: Caller = Depends(require_capability(Capability.VIEW_ALL_BIODATAS)),
    service: BiodataService = Depends(get_biodata_service),
):
    biodatas, total = await service.admin_list(page, limit)
    return AdminBiodataPageResponse(biodatas=biodatas, total=total, page=page, limit=limit)


@router.get("/admin-stats", response_model=AdminStats)
async def admin_stats(
    _caller: Caller = Depends(require_capability(Capability.VIEW_STATS)),
    service: StatsService = Depends(get_stats_service),
):
    return await service.admin_stats()

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from matchday.services.api.dependencies import get_dashboard_service
from matchday.services.api.schemas.common import ERROR_RESPONSES, CacheInvalidationResponse
from matchday.services.dashboard_service import DashboardService
from matchday.services.view_models import TeamDetail

router = APIRouter(prefix="/api/v1/teams", tags=["teams"], responses=ERROR_RESPONSES)


# 注意：必须在 /{team_id} 之前注册
@router.delete("/cache", response_model=CacheInvalidationResponse)
async def invalidate_team_cache(
    team_id: str | None = Query(default=None, description="不传则清空全部缓存"),
    service: DashboardService = Depends(get_dashboard_service),
) -> CacheInvalidationResponse:
    removed = service.cache.invalidate(team_id)
    return CacheInvalidationResponse(team_id=team_id, removed=removed)


@router.get("/{team_id}", response_model=TeamDetail)
async def get_team_detail(
    team_id: str,
    refresh: bool = Query(default=False, description="跳过缓存重新拉取"),
    service: DashboardService = Depends(get_dashboard_service),
) -> TeamDetail:
    return await service.get_team_detail(team_id, refresh=refresh)

from __future__ import annotations

from typing import List, Literal

from fastapi import APIRouter, Depends, Query

from matchday.services.analytics import build_stats_overview
from matchday.services.api.dependencies import get_app_settings, get_dashboard_service
from matchday.services.api.schemas.common import ERROR_RESPONSES
from matchday.services.dashboard_service import DashboardService
from matchday.services.view_models import DashboardSnapshot, StatsOverview, TopScorer
from matchday.shared.config import Settings

router = APIRouter(prefix="/api/v1", tags=["dashboard"], responses=ERROR_RESPONSES)


@router.get("/dashboard", response_model=DashboardSnapshot)
async def get_dashboard(
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardSnapshot:
    return await service.get_snapshot()


@router.get("/dashboard/stats", response_model=StatsOverview)
async def get_dashboard_stats(
    service: DashboardService = Depends(get_dashboard_service),
    settings: Settings = Depends(get_app_settings),
) -> StatsOverview:
    snapshot = await service.get_snapshot()
    return build_stats_overview(
        snapshot, most_recent_first=settings.dashboard.form_most_recent_first
    )


@router.get("/scorers", response_model=List[TopScorer])
async def get_scorers(
    sort_by: Literal["goals", "assists", "contributions"] = Query(default="goals"),
    limit: int = Query(default=10, ge=1, le=100, description="返回数量"),
    service: DashboardService = Depends(get_dashboard_service),
) -> List[TopScorer]:
    return await service.get_top_scorers(sort_by, limit)

# ==============================================================================
# ANALYTICS ENDPOINTS - Dashboard
# ==============================================================================

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Query

from backoffice.api.dependencies import AnalyticsServiceDep
from backoffice.schemas.analytics import DashboardSummary
from backoffice.schemas.base import APIResponse

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get(
    "/dashboard",
    response_model=APIResponse[DashboardSummary],
    summary="Dashboard",
    description=(
        "Orders, revenue, profit, daily sales and inventory for a preset "
        "range (all, today, last90, week, month, year, season-YYYY) or "
        "custom start/end dates."
    ),
)
async def dashboard(
    service: AnalyticsServiceDep,
    range_key: Optional[str] = Query(None, alias="range"),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
) -> APIResponse[DashboardSummary]:
    summary = await service.dashboard(range_key=range_key, start=start, end=end)
    return APIResponse.ok(data=summary)

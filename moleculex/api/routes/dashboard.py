"""Dashboard and activity endpoints."""

from fastapi import APIRouter, Depends, Query

from moleculex.api.dependencies import get_store
from moleculex.application.domain_store import DomainStore
from moleculex.application.dto.responses import DashboardResponse
from moleculex.core.entities import ActivityEvent

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard(store: DomainStore = Depends(get_store)) -> DashboardResponse:
    return DashboardResponse(
        stats=store.dashboard_stats(),
        recent_activity=store.recent_activity(),
        recent_formulas=store.recent_formulas(),
    )


@router.get("/activity", response_model=list[ActivityEvent])
async def get_activity(
    limit: int | None = Query(default=None, ge=1),
    store: DomainStore = Depends(get_store),
) -> list[ActivityEvent]:
    """Full activity feed, newest first."""
    return store.activity_feed(limit=limit)

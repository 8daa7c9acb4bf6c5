"""
Analytics API Endpoints.

Read-only dashboard data for admins.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from egzit.app.db.session import get_db
from egzit.app.models.enums import UserRole
from egzit.app.core.guards import require_role
from egzit.app.services.analytics import AnalyticsService
from egzit.app.schemas.analytics import MoveOverview, PerformanceStats

router = APIRouter(prefix="/admin/analytics", tags=["Admin - Analytics"])


@router.get("/performance", response_model=PerformanceStats)
async def get_performance_analytics(
    current_user: dict = Depends(require_role([UserRole.ADMIN])),
    db: AsyncSession = Depends(get_db)
):
    """On-time rate and estimated vs actual durations of completed moves."""
    return await AnalyticsService.get_performance_stats(db)


@router.get("/overview", response_model=MoveOverview)
async def get_move_overview(
    current_user: dict = Depends(require_role([UserRole.ADMIN])),
    db: AsyncSession = Depends(get_db)
):
    return MoveOverview(
        performance=await AnalyticsService.get_performance_stats(db),
        by_status=await AnalyticsService.get_status_breakdown(db),
    )

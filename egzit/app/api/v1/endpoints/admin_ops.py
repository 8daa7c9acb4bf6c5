"""
Admin Operations API Endpoints.

Visibility into degraded enrichment: how often scheduling fell back to
the default duration because the route service was unavailable.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from egzit.app.db.session import get_db
from egzit.app.models.enums import UserRole
from egzit.app.core.guards import require_role
from egzit.app.core.reliability import route_circuit_breaker
from egzit.app.schemas.analytics import RouteEstimateStats
from egzit.app.services.audit import AuditAction, count_events, get_audit_trail

router = APIRouter(prefix="/admin/ops", tags=["Admin - Ops"])


@router.get("/route-estimates", response_model=RouteEstimateStats)
async def route_estimate_health(
    limit: int = Query(20, ge=1, le=100, description="Recent defaulted estimates to include"),
    current_user: dict = Depends(require_role([UserRole.ADMIN])),
    db: AsyncSession = Depends(get_db)
):
    defaulted = await count_events(db, AuditAction.ROUTE_ESTIMATE_DEFAULTED)
    recent = await get_audit_trail(db, action=AuditAction.ROUTE_ESTIMATE_DEFAULTED, limit=limit)

    return RouteEstimateStats(
        defaulted_estimates=defaulted,
        circuit_state=route_circuit_breaker.state,
        recent=[
            {
                "move_id": entry.target_id,
                "reason": (entry.meta_data or {}).get("reason"),
                "operation": (entry.meta_data or {}).get("operation"),
                "timestamp": entry.timestamp.isoformat() if entry.timestamp else None,
            }
            for entry in recent
        ],
    )

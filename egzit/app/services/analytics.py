"""
Analytics Service.

Read-only aggregation over move performance records and move statuses
for the admin dashboard.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from egzit.app.models.move import Move
from egzit.app.models.move_performance import MovePerformance
from egzit.app.schemas.analytics import PerformanceStats, StatusCount


class AnalyticsService:

    @staticmethod
    async def get_performance_stats(db: AsyncSession) -> PerformanceStats:
        """Estimated vs actual duration across completed moves."""
        stmt = select(
            func.count(MovePerformance.id),
            func.avg(MovePerformance.estimated_duration),
            func.avg(MovePerformance.actual_duration),
            func.avg(MovePerformance.distance_km),
        )
        total, avg_estimated, avg_actual, avg_distance = (await db.execute(stmt)).one()
        total = total or 0

        on_time = (await db.execute(
            select(func.count(MovePerformance.id)).where(MovePerformance.on_time == True)  # noqa: E712
        )).scalar() or 0

        return PerformanceStats(
            completed_moves=total,
            on_time_moves=on_time,
            on_time_rate=(on_time / total) if total > 0 else 0.0,
            average_estimated_duration_seconds=float(avg_estimated) if avg_estimated is not None else None,
            average_actual_duration_seconds=float(avg_actual) if avg_actual is not None else None,
            average_distance_km=float(avg_distance) if avg_distance is not None else None,
        )

    @staticmethod
    async def get_status_breakdown(db: AsyncSession) -> list:
        """Number of moves per lifecycle status."""
        stmt = select(Move.status, func.count(Move.id)).group_by(Move.status)
        results = await db.execute(stmt)
        return [
            StatusCount(status=row[0].value, count=row[1])
            for row in results
        ]

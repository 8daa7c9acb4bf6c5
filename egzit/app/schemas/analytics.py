"""
Analytics Schemas.
"""

from pydantic import BaseModel
from typing import List, Optional


class PerformanceStats(BaseModel):
    """Estimated vs actual durations across completed moves."""
    completed_moves: int
    on_time_moves: int
    on_time_rate: float
    average_estimated_duration_seconds: Optional[float] = None
    average_actual_duration_seconds: Optional[float] = None
    average_distance_km: Optional[float] = None


class StatusCount(BaseModel):
    status: str
    count: int


class MoveOverview(BaseModel):
    performance: PerformanceStats
    by_status: List[StatusCount]


class RouteEstimateStats(BaseModel):
    """How often scheduling fell back to the default duration."""
    defaulted_estimates: int
    circuit_state: str
    recent: List[dict] = []

"""
Move performance model.

Written once when a move completes; read by the analytics endpoints.
"""

from sqlalchemy import Column, Integer, Float, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from egzit.app.db.session import Base


class MovePerformance(Base):
    """Estimated vs actual duration for a completed move."""
    __tablename__ = "move_performance"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    move_id = Column(Integer, ForeignKey('moves.id'), nullable=False, unique=True, index=True)

    estimated_duration = Column(Integer, nullable=False)  # seconds
    actual_duration = Column(Integer, nullable=False)  # seconds
    on_time = Column(Boolean, nullable=False)

    distance_km = Column(Float, nullable=True)
    average_speed_kmh = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<MovePerformance(move_id={self.move_id}, on_time={self.on_time})>"

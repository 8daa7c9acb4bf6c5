"""
Move database model.

A move is one relocation job from a pickup address to a delivery address,
owned by one customer. Its status is the authoritative lifecycle state.
"""

from sqlalchemy import (
    Column, Integer, String, Text, Float, Date, Time, DateTime, ForeignKey, Enum, JSON
)
from sqlalchemy.sql import func
from egzit.app.db.session import Base
from egzit.app.models.move_enums import MoveStatus, enum_values


class Move(Base):
    """
    Move model.

    Scheduling fields (scheduled_time, assigned_mover_id, estimated_duration,
    estimated_arrival_time) are written together by one transition.
    actual_start_time / actual_end_time are written once and never cleared.
    """
    __tablename__ = "moves"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Ownership
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)

    # Request details
    name = Column(String(200), nullable=False)
    pickup_address = Column(String(500), nullable=False)
    delivery_address = Column(String(500), nullable=False)
    move_date = Column(Date, nullable=False)
    inventory_size = Column(String(20), nullable=True)
    special_requirements = Column(Text, nullable=True)

    # Status
    status = Column(
        Enum(MoveStatus, values_callable=enum_values, name="move_status"),
        default=MoveStatus.PENDING,
        nullable=False,
        index=True
    )

    # Quote / approval
    quote_id = Column(Integer, ForeignKey('quotes.id', use_alter=True, name='fk_moves_quote_id'), nullable=True)
    approved_at = Column(DateTime, nullable=True)
    approved_by = Column(Integer, ForeignKey('users.id'), nullable=True)

    # Scheduling
    scheduled_time = Column(Time, nullable=True)
    assigned_mover_id = Column(Integer, ForeignKey('movers.id'), nullable=True, index=True)
    estimated_duration = Column(Integer, nullable=True)  # seconds
    estimated_arrival_time = Column(DateTime, nullable=True)
    route_data = Column(JSON, nullable=True)  # opaque blob from the route service

    # Execution
    actual_start_time = Column(DateTime, nullable=True)
    actual_end_time = Column(DateTime, nullable=True)
    current_lat = Column(Float, nullable=True)
    current_lng = Column(Float, nullable=True)

    # Cancellation
    cancelled_at = Column(DateTime, nullable=True)
    cancellation_reason = Column(String(500), nullable=True)

    # Optimistic concurrency
    version = Column(Integer, nullable=False, default=1)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __mapper_args__ = {"version_id_col": version, "eager_defaults": True}

    def __repr__(self):
        return f"<Move(id={self.id}, name='{self.name}', status='{self.status.value}')>"

"""
Move tracking event model.

Append-only journal of lifecycle transitions and GPS pings for a move.
"""

from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey, JSON
from egzit.app.db.session import Base


class MoveTrackingEvent(Base):
    """
    One immutable tracking journal entry.

    Entries are ordered by (event_time, id). Rows are inserted, never updated
    or deleted.
    """
    __tablename__ = "move_tracking_events"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    move_id = Column(Integer, ForeignKey('moves.id'), nullable=False, index=True)

    event_type = Column(String(50), nullable=False, index=True)
    event_time = Column(DateTime, nullable=False, index=True)
    notes = Column(Text, nullable=True)

    # GPS coordinates (location pings)
    location_lat = Column(Float, nullable=True)
    location_lng = Column(Float, nullable=True)

    metadata_payload = Column(JSON, nullable=True)
    created_by = Column(Integer, ForeignKey('users.id'), nullable=True)

    def __repr__(self):
        return f"<MoveTrackingEvent(move_id={self.move_id}, type='{self.event_type}', at={self.event_time})>"

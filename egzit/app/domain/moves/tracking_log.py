"""
Tracking event log.

Append-only journal of what happened to a move. Entries are read in
(event_time, id) order and an appended entry never predates the last one.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from egzit.app.core.timeutils import utcnow
from egzit.app.models.move_enums import TrackingEventType
from egzit.app.models.tracking_event import MoveTrackingEvent


async def last_event(db: AsyncSession, move_id: int) -> Optional[MoveTrackingEvent]:
    result = await db.execute(
        select(MoveTrackingEvent)
        .where(MoveTrackingEvent.move_id == move_id)
        .order_by(MoveTrackingEvent.event_time.desc(), MoveTrackingEvent.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def append_event(
    db: AsyncSession,
    move_id: int,
    event_type: Union[TrackingEventType, str],
    notes: Optional[str] = None,
    created_by: Optional[int] = None,
    location_lat: Optional[float] = None,
    location_lng: Optional[float] = None,
    metadata: Optional[Dict[str, Any]] = None,
    event_time: Optional[datetime] = None,
) -> MoveTrackingEvent:
    """
    Append one entry to the move's journal inside the current transaction.

    event_time defaults to now and is clamped forward to the previous
    entry's time so the journal order matches insertion order.
    """
    if event_time is None:
        event_time = utcnow()

    previous = await last_event(db, move_id)
    if previous is not None and previous.event_time > event_time:
        event_time = previous.event_time

    event = MoveTrackingEvent(
        move_id=move_id,
        event_type=TrackingEventType(event_type).value,
        event_time=event_time,
        notes=notes,
        location_lat=location_lat,
        location_lng=location_lng,
        metadata_payload=metadata,
        created_by=created_by,
    )
    db.add(event)
    await db.flush()
    return event


async def list_events(db: AsyncSession, move_id: int) -> List[MoveTrackingEvent]:
    result = await db.execute(
        select(MoveTrackingEvent)
        .where(MoveTrackingEvent.move_id == move_id)
        .order_by(MoveTrackingEvent.event_time, MoveTrackingEvent.id)
    )
    return list(result.scalars().all())


def current_marker(events: list):
    """Latest entry, shown as the "current" step on tracking screens."""
    return events[-1] if events else None

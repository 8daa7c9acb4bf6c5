"""
Move Lifecycle (Domain Logic).

Single source of truth for which lifecycle events are legal for a move,
and for the derived progress percentage and ETA shown by tracking screens.
Pure functions only: no database or network access.
"""

import enum
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

from egzit.app.core.exceptions import InvalidTransitionError, MoveValidationError
from egzit.app.models.move_enums import MoveStatus


class MoveEvent(str, enum.Enum):
    """Actions that drive a move through its lifecycle."""
    SUBMIT = "submit"
    QUOTE = "quote"
    APPROVE = "approve"
    SCHEDULE = "schedule"
    PAY = "pay"
    START = "start"
    COMPLETE = "complete"
    CANCEL = "cancel"


# (from_status, event) -> to_status. None as from_status means "no move yet".
TRANSITIONS: Dict[Tuple[Optional[MoveStatus], MoveEvent], MoveStatus] = {
    (None, MoveEvent.SUBMIT): MoveStatus.PENDING,
    (MoveStatus.PENDING, MoveEvent.QUOTE): MoveStatus.PENDING,
    (MoveStatus.PENDING, MoveEvent.APPROVE): MoveStatus.APPROVED,
    (MoveStatus.APPROVED, MoveEvent.SCHEDULE): MoveStatus.SCHEDULED,
    (MoveStatus.APPROVED, MoveEvent.PAY): MoveStatus.SCHEDULED,
    (MoveStatus.SCHEDULED, MoveEvent.START): MoveStatus.IN_PROGRESS,
    (MoveStatus.IN_PROGRESS, MoveEvent.COMPLETE): MoveStatus.COMPLETED,
    (MoveStatus.PENDING, MoveEvent.CANCEL): MoveStatus.CANCELLED,
    (MoveStatus.APPROVED, MoveEvent.CANCEL): MoveStatus.CANCELLED,
    (MoveStatus.SCHEDULED, MoveEvent.CANCEL): MoveStatus.CANCELLED,
}

TERMINAL_STATUSES = frozenset({MoveStatus.COMPLETED, MoveStatus.CANCELLED})

# Events whose guard needs a quote on the move
QUOTE_GUARDED_EVENTS = frozenset({MoveEvent.APPROVE, MoveEvent.PAY})

# Progress bounds (percent)
SCHEDULED_PROGRESS = 25.0
IN_PROGRESS_CAP = 90.0
COMPLETED_PROGRESS = 100.0


def is_terminal(status: MoveStatus) -> bool:
    return status in TERMINAL_STATUSES


def next_status(status: Optional[MoveStatus], event: MoveEvent) -> MoveStatus:
    """
    Resolve the target status for an event.

    Raises:
        InvalidTransitionError: if the (status, event) pair is not in the table
    """
    target = TRANSITIONS.get((status, event))
    if target is None:
        current = status.value if status is not None else "not yet created"
        raise InvalidTransitionError(current, event.value)
    return target


def ensure_quote_present(move, event: MoveEvent) -> None:
    """Guard for approve/pay: the move must reference a quote."""
    if move.quote_id is None:
        raise MoveValidationError(
            f"Cannot {event.value} move {move.id} before a quote has been created",
            details={"move_id": move.id, "event": event.value, "reason": "quote_missing"}
        )


def ensure_can_approve(move) -> None:
    ensure_quote_present(move, MoveEvent.APPROVE)


def allowed_events(move) -> List[MoveEvent]:
    """Events legal for the move right now, with guards applied."""
    events = []
    for (from_status, event) in TRANSITIONS:
        if from_status is None or from_status != move.status:
            continue
        if event in QUOTE_GUARDED_EVENTS and move.quote_id is None:
            continue
        events.append(event)
    return events


def scheduled_arrival(
    move_date: date, scheduled_time: time, duration_seconds: int, local_timezone: str = "UTC"
) -> datetime:
    """
    Start on the move date plus the estimated duration, as naive UTC.

    scheduled_time is a wall-clock time in local_timezone.
    """
    start = datetime.combine(move_date, scheduled_time, tzinfo=ZoneInfo(local_timezone))
    arrival = start.astimezone(timezone.utc) + timedelta(seconds=duration_seconds)
    return arrival.replace(tzinfo=None)


def compute_progress(move, now: datetime, default_duration: int = 3600) -> float:
    """
    Derive the 0-100 progress shown on tracking screens.

    pending/approved/cancelled → 0, scheduled → 25, completed → 100.
    In progress interpolates from 25 toward 90 over the estimated duration
    and never passes 90 until the move is actually completed.
    """
    status = move.status
    if status == MoveStatus.COMPLETED:
        return COMPLETED_PROGRESS
    if status == MoveStatus.SCHEDULED:
        return SCHEDULED_PROGRESS
    if status != MoveStatus.IN_PROGRESS:
        return 0.0

    if move.actual_start_time is None:
        return SCHEDULED_PROGRESS

    duration = move.estimated_duration or default_duration
    elapsed = (now - move.actual_start_time).total_seconds()
    fraction = max(0.0, elapsed / duration)
    progress = SCHEDULED_PROGRESS + (IN_PROGRESS_CAP - SCHEDULED_PROGRESS) * fraction
    return round(min(IN_PROGRESS_CAP, progress), 1)


def compute_eta(move) -> Optional[datetime]:
    """
    Derive the estimated arrival time.

    A persisted estimate wins; otherwise an in-progress move with a known
    duration arrives at start + duration; otherwise the ETA is unknown.
    """
    if move.estimated_arrival_time is not None:
        return move.estimated_arrival_time

    if (
        move.status == MoveStatus.IN_PROGRESS
        and move.actual_start_time is not None
        and move.estimated_duration
    ):
        return move.actual_start_time + timedelta(seconds=move.estimated_duration)

    return None

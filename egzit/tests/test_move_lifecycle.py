"""
Unit tests for the move lifecycle rules.

Transition table, guards, progress and ETA derivation. No database.
"""

from datetime import date, datetime, time, timedelta
from types import SimpleNamespace

import pytest

from egzit.app.core.exceptions import InvalidTransitionError, MoveValidationError
from egzit.app.domain.lifecycle.move_lifecycle import (
    MoveEvent,
    TRANSITIONS,
    allowed_events,
    compute_eta,
    compute_progress,
    ensure_can_approve,
    is_terminal,
    next_status,
    scheduled_arrival,
)
from egzit.app.models.move_enums import MoveStatus

NOW = datetime(2025, 3, 1, 12, 0, 0)


def make_move(**overrides):
    fields = dict(
        id=1,
        status=MoveStatus.PENDING,
        quote_id=None,
        actual_start_time=None,
        estimated_duration=None,
        estimated_arrival_time=None,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def test_happy_path_transitions():
    status = next_status(None, MoveEvent.SUBMIT)
    assert status == MoveStatus.PENDING
    assert next_status(status, MoveEvent.QUOTE) == MoveStatus.PENDING
    status = next_status(status, MoveEvent.APPROVE)
    assert status == MoveStatus.APPROVED
    status = next_status(status, MoveEvent.SCHEDULE)
    assert status == MoveStatus.SCHEDULED
    status = next_status(status, MoveEvent.START)
    assert status == MoveStatus.IN_PROGRESS
    assert next_status(status, MoveEvent.COMPLETE) == MoveStatus.COMPLETED


def test_pay_converges_on_scheduled():
    assert next_status(MoveStatus.APPROVED, MoveEvent.PAY) == MoveStatus.SCHEDULED


@pytest.mark.parametrize("status", [MoveStatus.PENDING, MoveStatus.APPROVED, MoveStatus.SCHEDULED])
def test_cancel_allowed_before_start(status):
    assert next_status(status, MoveEvent.CANCEL) == MoveStatus.CANCELLED


@pytest.mark.parametrize("status", [MoveStatus.IN_PROGRESS, MoveStatus.COMPLETED, MoveStatus.CANCELLED])
def test_cancel_rejected_once_started_or_terminal(status):
    with pytest.raises(InvalidTransitionError) as exc_info:
        next_status(status, MoveEvent.CANCEL)
    assert exc_info.value.status_code == 409
    assert exc_info.value.details == {"current_status": status.value, "event": "cancel"}


def test_terminal_statuses_accept_no_events():
    for status in (MoveStatus.COMPLETED, MoveStatus.CANCELLED):
        assert is_terminal(status)
        for event in MoveEvent:
            assert (status, event) not in TRANSITIONS


def test_completed_requires_in_progress():
    with pytest.raises(InvalidTransitionError):
        next_status(MoveStatus.SCHEDULED, MoveEvent.COMPLETE)
    with pytest.raises(InvalidTransitionError):
        next_status(MoveStatus.PENDING, MoveEvent.START)


def test_approve_guard_requires_quote():
    with pytest.raises(MoveValidationError) as exc_info:
        ensure_can_approve(make_move())
    assert exc_info.value.details["reason"] == "quote_missing"

    ensure_can_approve(make_move(quote_id=7))


def test_allowed_events_respect_quote_guard():
    assert allowed_events(make_move()) == [MoveEvent.QUOTE, MoveEvent.CANCEL]
    assert MoveEvent.APPROVE in allowed_events(make_move(quote_id=3))
    approved = allowed_events(make_move(status=MoveStatus.APPROVED, quote_id=3))
    assert set(approved) == {MoveEvent.SCHEDULE, MoveEvent.PAY, MoveEvent.CANCEL}
    assert allowed_events(make_move(status=MoveStatus.COMPLETED)) == []


def test_legacy_planning_alias_reads_as_pending():
    assert MoveStatus.parse("planning") == MoveStatus.PENDING
    assert MoveStatus.parse("In_Progress") == MoveStatus.IN_PROGRESS
    with pytest.raises(ValueError):
        MoveStatus.parse("teleported")


@pytest.mark.parametrize("status,expected", [
    (MoveStatus.PENDING, 0.0),
    (MoveStatus.APPROVED, 0.0),
    (MoveStatus.SCHEDULED, 25.0),
    (MoveStatus.COMPLETED, 100.0),
    (MoveStatus.CANCELLED, 0.0),
])
def test_progress_by_status(status, expected):
    assert compute_progress(make_move(status=status), NOW) == expected


def test_progress_interpolates_while_in_progress():
    move = make_move(
        status=MoveStatus.IN_PROGRESS,
        actual_start_time=NOW - timedelta(minutes=30),
        estimated_duration=3600,
    )
    assert compute_progress(move, NOW) == 57.5


def test_progress_caps_at_ninety_when_overdue():
    move = make_move(
        status=MoveStatus.IN_PROGRESS,
        actual_start_time=NOW - timedelta(hours=5),
        estimated_duration=3600,
    )
    assert compute_progress(move, NOW) == 90.0


def test_progress_never_below_scheduled_level_when_clock_skewed():
    move = make_move(
        status=MoveStatus.IN_PROGRESS,
        actual_start_time=NOW + timedelta(minutes=5),
        estimated_duration=3600,
    )
    assert compute_progress(move, NOW) == 25.0


def test_progress_uses_default_duration_when_unknown():
    move = make_move(status=MoveStatus.IN_PROGRESS, actual_start_time=NOW - timedelta(minutes=30))
    assert compute_progress(move, NOW, default_duration=3600) == 57.5


def test_progress_is_monotonic_over_time():
    move = make_move(
        status=MoveStatus.IN_PROGRESS,
        actual_start_time=NOW,
        estimated_duration=7200,
    )
    samples = [compute_progress(move, NOW + timedelta(minutes=m)) for m in range(0, 240, 10)]
    assert samples == sorted(samples)
    assert all(25.0 <= p <= 90.0 for p in samples)


def test_eta_prefers_persisted_value():
    persisted = datetime(2025, 3, 1, 15, 30)
    move = make_move(
        status=MoveStatus.IN_PROGRESS,
        actual_start_time=NOW,
        estimated_duration=600,
        estimated_arrival_time=persisted,
    )
    assert compute_eta(move) == persisted


def test_eta_derived_from_start_while_in_progress():
    move = make_move(status=MoveStatus.IN_PROGRESS, actual_start_time=NOW, estimated_duration=5400)
    assert compute_eta(move) == NOW + timedelta(seconds=5400)


def test_eta_unknown_otherwise():
    assert compute_eta(make_move(status=MoveStatus.SCHEDULED)) is None
    assert compute_eta(make_move(status=MoveStatus.IN_PROGRESS, actual_start_time=NOW)) is None


def test_scheduled_arrival_combines_date_time_and_duration():
    arrival = scheduled_arrival(date(2025, 3, 10), time(9, 0), 5400)
    assert arrival == datetime(2025, 3, 10, 10, 30)


def test_scheduled_arrival_converts_local_start_to_utc():
    # Jamaica keeps UTC-5 all year
    arrival = scheduled_arrival(date(2030, 6, 15), time(9, 0), 5400, "America/Jamaica")
    assert arrival == datetime(2030, 6, 15, 15, 30)
    assert arrival.tzinfo is None

    late_evening = scheduled_arrival(date(2030, 6, 15), time(22, 0), 3600, "America/Jamaica")
    assert late_evening == datetime(2030, 6, 16, 4, 0)

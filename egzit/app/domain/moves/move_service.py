"""
Move Service (Domain Logic).

Applies lifecycle transitions to persisted moves. Every public operation
runs inside one database transaction: the status change, its side fields,
the tracking event, collaborator rows and owner notifications land together
or not at all (see move_transaction).
"""

import logging
from contextlib import asynccontextmanager
from datetime import time, timedelta, timezone
from typing import List, Optional, Tuple
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from egzit.app.core.config import settings
from egzit.app.core.exceptions import (
    InvalidTransitionError,
    MoveValidationError,
    ResourceNotFoundError,
    StaleMoveError,
    TransientBackendError,
)
from egzit.app.core.guards import verify_ownership
from egzit.app.core.timeutils import utcnow
from egzit.app.domain.geo.estimator import (
    distance_between,
    estimate_travel_minutes,
    format_distance,
    format_travel_time,
    haversine_distance,
    resolve_address,
)
from egzit.app.domain.lifecycle.move_lifecycle import (
    MoveEvent,
    allowed_events,
    compute_eta,
    compute_progress,
    ensure_can_approve,
    ensure_quote_present,
    next_status,
    scheduled_arrival,
)
from egzit.app.domain.moves import tracking_log
from egzit.app.models.booking import Booking
from egzit.app.models.enums import UserRole
from egzit.app.models.move import Move
from egzit.app.models.move_enums import (
    BookingStatus,
    MoveStatus,
    PaymentStatus,
    QuoteStatus,
    TrackingEventType,
    VehicleClass,
)
from egzit.app.models.move_performance import MovePerformance
from egzit.app.models.mover import Mover
from egzit.app.models.notification import NotificationType
from egzit.app.models.quote import Quote
from egzit.app.schemas.move import (
    CancelRequest,
    LocationPing,
    MoveCreate,
    MoveResponse,
    PayRequest,
    QuoteCreate,
    QuoteResponse,
    ScheduleRequest,
    TrackingEventResponse,
    TrackingResponse,
)
from egzit.app.services.audit import AuditAction, log_event
from egzit.app.services.notification_service import NotificationService
from egzit.app.services.route_service import DurationEstimate, RouteEstimator

logger = logging.getLogger("egzit.moves")

# Request wizard minimums (characters, exclusive)
MIN_ADDRESS_LENGTH = 5
MIN_NAME_LENGTH = 2

# Actions each role may trigger from a tracking screen
CUSTOMER_EVENTS = frozenset({MoveEvent.PAY, MoveEvent.CANCEL})
ADMIN_EVENTS = frozenset({
    MoveEvent.QUOTE, MoveEvent.APPROVE, MoveEvent.SCHEDULE,
    MoveEvent.START, MoveEvent.COMPLETE, MoveEvent.CANCEL,
})


def format_jmd(amount: int) -> str:
    return f"JMD ${amount:,}"


def format_local(moment) -> str:
    """Render a naive UTC timestamp in the local timezone."""
    local = moment.replace(tzinfo=timezone.utc).astimezone(ZoneInfo(settings.local_timezone))
    return local.strftime("%Y-%m-%d %H:%M")


@asynccontextmanager
async def move_transaction(db: AsyncSession, operation: str, move_id: Optional[int] = None):
    """
    Commit on success, roll back on any failure.

    A concurrent writer surfaces as StaleMoveError; any other database
    failure as a retryable TransientBackendError.
    """
    try:
        yield
        await db.commit()
    except StaleDataError:
        await db.rollback()
        raise StaleMoveError(move_id)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Move transaction failed", extra={"operation": operation, "move_id": move_id})
        raise TransientBackendError(operation)
    except Exception:
        await db.rollback()
        raise


class MoveService:

    # --- Lookups ---

    @staticmethod
    async def get_move(db: AsyncSession, move_id: int, current_user: Optional[dict] = None) -> Move:
        """
        Load a move. When current_user is given, moves the caller may not see
        are reported as missing.
        """
        result = await db.execute(select(Move).where(Move.id == move_id))
        move = result.scalar_one_or_none()
        if move is None:
            raise ResourceNotFoundError("Move", move_id)
        if current_user is not None and not verify_ownership(move.user_id, current_user):
            raise ResourceNotFoundError("Move", move_id)
        return move

    @staticmethod
    async def list_moves(
        db: AsyncSession,
        user_id: Optional[int] = None,
        status: Optional[MoveStatus] = None,
        include_cancelled: bool = True,
        limit: int = 100,
        offset: int = 0
    ) -> List[Move]:
        query = select(Move)
        if user_id is not None:
            query = query.where(Move.user_id == user_id)
        if status is not None:
            query = query.where(Move.status == status)
        elif not include_cancelled:
            query = query.where(Move.status != MoveStatus.CANCELLED)
        query = query.order_by(Move.move_date, Move.id).offset(offset).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def get_quote(db: AsyncSession, quote_id: Optional[int]) -> Optional[Quote]:
        if quote_id is None:
            return None
        result = await db.execute(select(Quote).where(Quote.id == quote_id))
        return result.scalar_one_or_none()

    @staticmethod
    def check_version(move: Move, expected_version: Optional[int]) -> None:
        if expected_version is not None and expected_version != move.version:
            raise StaleMoveError(move.id, expected_version, move.version)

    @staticmethod
    def _transition(move: Move, event: MoveEvent) -> MoveStatus:
        return next_status(move.status, event)

    @staticmethod
    def _apply(move: Move, target: MoveStatus, event: MoveEvent) -> None:
        logger.info(
            "Move transition",
            extra={
                "move_id": move.id,
                "event": event.value,
                "from_status": move.status.value,
                "to_status": target.value,
            }
        )
        move.status = target

    @staticmethod
    async def _record_defaulted_estimate(
        db: AsyncSession, move: Move, estimate: DurationEstimate, actor: dict, operation: str
    ) -> None:
        await log_event(
            db,
            action=AuditAction.ROUTE_ESTIMATE_DEFAULTED,
            actor_id=actor.get("user_id"),
            actor_username=actor.get("sub"),
            target_type="move",
            target_id=move.id,
            metadata={
                "operation": operation,
                "reason": estimate.reason,
                "duration_seconds": estimate.duration_seconds,
            }
        )

    # --- Transitions ---

    @staticmethod
    async def submit_move(db: AsyncSession, user_id: int, data: MoveCreate) -> Move:
        """Request wizard submit: create a pending move with its first event."""
        errors = {}
        if len(data.pickup_address.strip()) <= MIN_ADDRESS_LENGTH:
            errors["pickup_address"] = f"Must be longer than {MIN_ADDRESS_LENGTH} characters"
        if len(data.delivery_address.strip()) <= MIN_ADDRESS_LENGTH:
            errors["delivery_address"] = f"Must be longer than {MIN_ADDRESS_LENGTH} characters"
        if len(data.name.strip()) <= MIN_NAME_LENGTH:
            errors["name"] = f"Must be longer than {MIN_NAME_LENGTH} characters"
        if data.move_date is None:
            errors["move_date"] = "A move date is required"
        if errors:
            raise MoveValidationError("Move request is incomplete", details={"fields": errors})

        status = next_status(None, MoveEvent.SUBMIT)
        move = Move(
            user_id=user_id,
            name=data.name.strip(),
            pickup_address=data.pickup_address.strip(),
            delivery_address=data.delivery_address.strip(),
            move_date=data.move_date,
            inventory_size=data.inventory_size,
            special_requirements=data.special_requirements,
            status=status,
        )
        db.add(move)
        await db.flush()

        await tracking_log.append_event(
            db, move.id, TrackingEventType.CREATED,
            notes="Move request submitted",
            created_by=user_id,
        )
        logger.info("Move submitted", extra={"move_id": move.id, "user_id": user_id})
        return move

    @staticmethod
    async def create_quote(
        db: AsyncSession, move_id: int, data: QuoteCreate, actor: dict
    ) -> Tuple[Move, Quote]:
        """Price a pending move. Re-quoting inserts a new quote and re-points the move."""
        move = await MoveService.get_move(db, move_id)
        MoveService.check_version(move, data.expected_version)
        MoveService._transition(move, MoveEvent.QUOTE)

        now = utcnow()
        total = (
            data.base_price + data.distance_fee + data.weight_fee
            + data.special_items_fee + data.insurance_fee + data.tax
        )
        quote = Quote(
            move_id=move.id,
            base_price=data.base_price,
            distance_fee=data.distance_fee,
            weight_fee=data.weight_fee,
            special_items_fee=data.special_items_fee,
            insurance_fee=data.insurance_fee,
            tax=data.tax,
            total_price=total,
            valid_until=now + timedelta(days=data.valid_days or settings.quote_validity_days),
            notes=data.notes,
            status=QuoteStatus.PENDING,
            created_by=actor.get("user_id"),
            created_at=now,
        )
        db.add(quote)
        await db.flush()

        move.quote_id = quote.id
        await db.flush()

        await tracking_log.append_event(
            db, move.id, TrackingEventType.QUOTE_SENT,
            notes=f"Quote sent: {format_jmd(total)}",
            created_by=actor.get("user_id"),
            metadata={"quote_id": quote.id, "total_price": total},
        )
        await NotificationService.notify_move_owner(
            db, move,
            title="Your quote is ready",
            message=f"We've prepared a quote of {format_jmd(total)} for '{move.name}'.",
            type=NotificationType.QUOTE_UPDATE,
        )
        return move, quote

    @staticmethod
    async def approve(
        db: AsyncSession, move_id: int, actor: dict, expected_version: Optional[int] = None
    ) -> Move:
        move = await MoveService.get_move(db, move_id)
        MoveService.check_version(move, expected_version)
        target = MoveService._transition(move, MoveEvent.APPROVE)
        ensure_can_approve(move)

        MoveService._apply(move, target, MoveEvent.APPROVE)
        move.approved_at = utcnow()
        move.approved_by = actor.get("user_id")
        await db.flush()

        await tracking_log.append_event(
            db, move.id, TrackingEventType.APPROVED,
            notes="Move approved",
            created_by=actor.get("user_id"),
        )
        await NotificationService.notify_move_owner(
            db, move,
            title="Move approved",
            message=f"'{move.name}' has been approved. You can now pay to confirm your booking.",
            type=NotificationType.SUCCESS,
        )
        return move

    @staticmethod
    async def schedule(
        db: AsyncSession,
        move_id: int,
        data: ScheduleRequest,
        actor: dict,
        estimator: RouteEstimator
    ) -> Move:
        """
        Fix the start time and mover, and derive duration and arrival.

        The four scheduling fields are written together. A route service
        failure still schedules the move with the default duration.
        """
        move = await MoveService.get_move(db, move_id)
        MoveService.check_version(move, data.expected_version)
        target = MoveService._transition(move, MoveEvent.SCHEDULE)

        missing = [
            field for field, value in (("scheduled_time", data.scheduled_time), ("mover_id", data.mover_id))
            if value is None
        ]
        if missing:
            raise MoveValidationError(
                "A start time and a mover are required to schedule a move",
                details={"missing": missing}
            )

        mover = (await db.execute(select(Mover).where(Mover.id == data.mover_id))).scalar_one_or_none()
        if mover is None:
            raise ResourceNotFoundError("Mover", data.mover_id)
        if not mover.available:
            raise MoveValidationError(
                f"Mover {mover.id} is not available",
                details={"mover_id": mover.id, "reason": "mover_unavailable"}
            )

        estimate = await estimator.estimate(move.pickup_address, move.delivery_address)
        if estimate.defaulted:
            await MoveService._record_defaulted_estimate(db, move, estimate, actor, "schedule")

        arrival = scheduled_arrival(
            move.move_date, data.scheduled_time, estimate.duration_seconds, settings.local_timezone
        )

        MoveService._apply(move, target, MoveEvent.SCHEDULE)
        move.scheduled_time = data.scheduled_time
        move.assigned_mover_id = mover.id
        move.estimated_duration = estimate.duration_seconds
        move.estimated_arrival_time = arrival
        move.route_data = estimate.route_data
        await db.flush()

        await tracking_log.append_event(
            db, move.id, TrackingEventType.SCHEDULED,
            notes=f"Scheduled for {move.move_date.isoformat()} at {data.scheduled_time.strftime('%H:%M')} with {mover.name}",
            created_by=actor.get("user_id"),
            metadata={
                "mover_id": mover.id,
                "estimated_duration": estimate.duration_seconds,
                "estimated_arrival_time": arrival.isoformat(),
                "estimate_source": estimate.source,
            },
        )
        await NotificationService.notify_move_owner(
            db, move,
            title="Move scheduled",
            message=f"'{move.name}' is scheduled for {move.move_date.isoformat()} at {data.scheduled_time.strftime('%H:%M')}.",
        )
        return move

    @staticmethod
    async def pay(
        db: AsyncSession,
        move_id: int,
        data: PayRequest,
        current_user: dict,
        estimator: RouteEstimator
    ) -> Tuple[Move, Booking]:
        """
        Demo payment: book the move for its quote total and schedule it.

        Timing fields missing at this point are filled (default start time,
        estimated duration and arrival) so tracking works the same as for
        admin-scheduled moves. The mover may remain unassigned.
        """
        move = await MoveService.get_move(db, move_id, current_user)
        MoveService.check_version(move, data.expected_version)
        target = MoveService._transition(move, MoveEvent.PAY)
        ensure_quote_present(move, MoveEvent.PAY)

        quote = await MoveService.get_quote(db, move.quote_id)
        if quote is None:
            raise ResourceNotFoundError("Quote", move.quote_id)

        now = utcnow()
        booking = Booking(
            move_id=move.id,
            user_id=move.user_id,
            mover_id=move.assigned_mover_id,
            quote_id=quote.id,
            status=BookingStatus.CONFIRMED,
            payment_status=PaymentStatus.PAID,
            quoted_price=quote.total_price,
            final_price=quote.total_price,
            payment_reference=data.payment_reference or f"DEMO-{move.id}-{now.strftime('%Y%m%d%H%M%S')}",
        )
        db.add(booking)
        quote.status = QuoteStatus.ACCEPTED

        estimate_source = None
        if move.scheduled_time is None:
            move.scheduled_time = time.fromisoformat(settings.default_move_start_time)
        if move.estimated_duration is None:
            estimate = await estimator.estimate(move.pickup_address, move.delivery_address)
            if estimate.defaulted:
                await MoveService._record_defaulted_estimate(db, move, estimate, current_user, "pay")
            move.estimated_duration = estimate.duration_seconds
            move.route_data = estimate.route_data
            estimate_source = estimate.source
        if move.estimated_arrival_time is None:
            move.estimated_arrival_time = scheduled_arrival(
                move.move_date, move.scheduled_time, move.estimated_duration, settings.local_timezone
            )

        MoveService._apply(move, target, MoveEvent.PAY)
        await db.flush()

        metadata = {"booking_id": booking.id, "amount": quote.total_price}
        if estimate_source is not None:
            metadata["estimate_source"] = estimate_source
        await tracking_log.append_event(
            db, move.id, TrackingEventType.PAYMENT_RECEIVED,
            notes=f"Payment received: {format_jmd(quote.total_price)}",
            created_by=current_user.get("user_id"),
            metadata=metadata,
        )
        return move, booking

    @staticmethod
    async def start(
        db: AsyncSession, move_id: int, actor: dict, expected_version: Optional[int] = None
    ) -> Move:
        move = await MoveService.get_move(db, move_id)
        MoveService.check_version(move, expected_version)
        target = MoveService._transition(move, MoveEvent.START)

        MoveService._apply(move, target, MoveEvent.START)
        if move.actual_start_time is None:
            move.actual_start_time = utcnow()
        await db.flush()

        await tracking_log.append_event(
            db, move.id, TrackingEventType.STARTED,
            notes="Moving team has started",
            created_by=actor.get("user_id"),
        )
        await NotificationService.notify_move_owner(
            db, move,
            title="Your move has started",
            message=f"The moving team has started on '{move.name}'.",
        )
        return move

    @staticmethod
    async def complete(
        db: AsyncSession, move_id: int, actor: dict, expected_version: Optional[int] = None
    ) -> Move:
        """Finish the move and record estimated vs actual duration."""
        move = await MoveService.get_move(db, move_id)
        MoveService.check_version(move, expected_version)
        target = MoveService._transition(move, MoveEvent.COMPLETE)

        now = utcnow()
        MoveService._apply(move, target, MoveEvent.COMPLETE)
        if move.actual_end_time is None:
            move.actual_end_time = now

        started = move.actual_start_time or move.actual_end_time
        actual_duration = max(0, int((move.actual_end_time - started).total_seconds()))
        estimated_duration = move.estimated_duration or settings.default_move_duration_seconds

        distance_km = None
        pickup = resolve_address(move.pickup_address)
        delivery = resolve_address(move.delivery_address)
        if pickup is not None and delivery is not None:
            distance_km = round(distance_between(pickup, delivery), 2)

        average_speed = None
        if distance_km is not None and actual_duration > 0:
            average_speed = round(distance_km / (actual_duration / 3600), 2)

        on_time = actual_duration <= estimated_duration
        db.add(MovePerformance(
            move_id=move.id,
            estimated_duration=estimated_duration,
            actual_duration=actual_duration,
            on_time=on_time,
            distance_km=distance_km,
            average_speed_kmh=average_speed,
        ))
        await db.flush()

        await tracking_log.append_event(
            db, move.id, TrackingEventType.COMPLETED,
            notes="All items delivered",
            created_by=actor.get("user_id"),
            metadata={"actual_duration": actual_duration, "on_time": on_time},
        )
        await NotificationService.notify_move_owner(
            db, move,
            title="Move completed",
            message=f"'{move.name}' is complete. Welcome to your new home!",
            type=NotificationType.SUCCESS,
        )
        return move

    @staticmethod
    async def cancel(db: AsyncSession, move_id: int, data: CancelRequest, current_user: dict) -> Move:
        """Cancel a move that has not started. Customers may only cancel their own."""
        move = await MoveService.get_move(db, move_id, current_user)
        MoveService.check_version(move, data.expected_version)
        target = MoveService._transition(move, MoveEvent.CANCEL)

        reason = (data.reason or "").strip() or None
        MoveService._apply(move, target, MoveEvent.CANCEL)
        move.cancelled_at = utcnow()
        move.cancellation_reason = reason
        await db.flush()

        await tracking_log.append_event(
            db, move.id, TrackingEventType.CANCELLED,
            notes=reason or "Move cancelled",
            created_by=current_user.get("user_id"),
        )
        if current_user.get("user_id") != move.user_id:
            await NotificationService.notify_move_owner(
                db, move,
                title="Move cancelled",
                message=f"'{move.name}' has been cancelled." + (f" Reason: {reason}" if reason else ""),
                type=NotificationType.WARNING,
            )
        return move

    @staticmethod
    async def record_location(db: AsyncSession, move_id: int, ping: LocationPing, actor: dict) -> Move:
        """
        Accept a GPS ping for a move in progress.

        The ETA is re-derived from the straight-line distance left to the
        delivery address when that address resolves to a known place.
        """
        move = await MoveService.get_move(db, move_id)
        MoveService.check_version(move, ping.expected_version)
        if move.status != MoveStatus.IN_PROGRESS:
            raise InvalidTransitionError(move.status.value, "record location for")

        now = utcnow()
        move.current_lat = ping.lat
        move.current_lng = ping.lng

        metadata = {}
        delivery = resolve_address(move.delivery_address)
        if delivery is not None:
            vehicle_class = VehicleClass(settings.default_vehicle_class)
            if move.assigned_mover_id is not None:
                mover = (await db.execute(
                    select(Mover).where(Mover.id == move.assigned_mover_id)
                )).scalar_one_or_none()
                if mover is not None:
                    vehicle_class = mover.vehicle_class
            remaining_km = haversine_distance(ping.lat, ping.lng, delivery.lat, delivery.lon)
            minutes = estimate_travel_minutes(remaining_km, vehicle_class)
            move.estimated_arrival_time = now + timedelta(minutes=minutes)
            metadata = {
                "remaining_km": round(remaining_km, 2),
                "estimated_arrival_time": move.estimated_arrival_time.isoformat(),
            }
        await db.flush()

        await tracking_log.append_event(
            db, move.id, TrackingEventType.LOCATION_UPDATE,
            notes="Location updated",
            created_by=actor.get("user_id"),
            location_lat=ping.lat,
            location_lng=ping.lng,
            metadata=metadata or None,
            event_time=now,
        )
        return move

    # --- Read models ---

    @staticmethod
    async def build_tracking(db: AsyncSession, move: Move, viewer: dict, now=None) -> TrackingResponse:
        """Compose the tracking view: journal, quote, progress, ETA and distance."""
        now = now or utcnow()
        events = [TrackingEventResponse.model_validate(e) for e in await tracking_log.list_events(db, move.id)]
        quote = await MoveService.get_quote(db, move.quote_id)

        distance_km = distance_display = travel_time_display = None
        pickup = resolve_address(move.pickup_address)
        delivery = resolve_address(move.delivery_address)
        if pickup is not None and delivery is not None:
            distance_km = round(distance_between(pickup, delivery), 1)
            distance_display = format_distance(distance_km)
            travel_time_display = format_travel_time(
                estimate_travel_minutes(distance_km, settings.default_vehicle_class)
            )

        permitted = ADMIN_EVENTS if viewer.get("role") == UserRole.ADMIN.value else CUSTOMER_EVENTS
        eta = compute_eta(move)

        return TrackingResponse(
            move=MoveResponse.from_move(move, now),
            events=events,
            current_event=tracking_log.current_marker(events),
            quote=QuoteResponse.from_quote(quote, now) if quote is not None else None,
            progress=compute_progress(move, now, settings.default_move_duration_seconds),
            eta=eta,
            eta_display=format_local(eta) if eta is not None else "calculating...",
            distance_km=distance_km,
            distance_display=distance_display,
            travel_time_display=travel_time_display,
            allowed_actions=[event.value for event in allowed_events(move) if event in permitted],
        )

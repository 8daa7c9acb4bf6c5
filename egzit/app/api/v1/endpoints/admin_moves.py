"""
Admin Move API Endpoints.

Backoffice actions that drive a move through its lifecycle: quote,
approve, schedule, start, complete, cancel, and GPS pings while the
move is underway.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from egzit.app.db.session import get_db
from egzit.app.models.move_enums import MoveStatus
from egzit.app.core.exceptions import MoveValidationError
from egzit.app.core.guards import require_admin
from egzit.app.core.timeutils import utcnow
from egzit.app.domain.moves import tracking_log
from egzit.app.domain.moves.move_service import MoveService, move_transaction
from egzit.app.schemas.move import (
    CancelRequest,
    LocationPing,
    MoveResponse,
    QuoteCreate,
    QuoteCreatedResponse,
    QuoteResponse,
    ScheduleRequest,
    TrackingEventResponse,
    TrackingResponse,
    TransitionRequest,
)
from egzit.app.services.route_service import RouteEstimator, get_route_estimator

router = APIRouter(prefix="/admin/moves", tags=["Admin - Moves"])


@router.get("", response_model=List[MoveResponse])
async def list_moves(
    status: Optional[str] = Query(None, description="Filter by status"),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """List all moves, optionally filtered by status."""
    status_filter = None
    if status:
        try:
            status_filter = MoveStatus.parse(status)
        except ValueError:
            raise MoveValidationError(f"Unknown move status '{status}'", details={"status": status})

    moves = await MoveService.list_moves(
        db, status=status_filter, limit=page_size, offset=(page - 1) * page_size
    )
    now = utcnow()
    return [MoveResponse.from_move(move, now) for move in moves]


@router.get("/{move_id}", response_model=TrackingResponse)
async def get_move(
    move_id: int,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    move = await MoveService.get_move(db, move_id)
    return await MoveService.build_tracking(db, move, current_user)


@router.get("/{move_id}/events", response_model=List[TrackingEventResponse])
async def list_move_events(
    move_id: int,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Full tracking journal, oldest first."""
    move = await MoveService.get_move(db, move_id)
    return [TrackingEventResponse.model_validate(e) for e in await tracking_log.list_events(db, move.id)]


@router.post("/{move_id}/quote", response_model=QuoteCreatedResponse)
async def create_quote(
    move_id: int,
    quote_data: QuoteCreate,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Price a pending move. The total is the sum of the fee components."""
    async with move_transaction(db, "create quote", move_id):
        move, quote = await MoveService.create_quote(db, move_id, quote_data, current_user)
    await db.refresh(move)
    now = utcnow()
    return QuoteCreatedResponse(
        move=MoveResponse.from_move(move, now),
        quote=QuoteResponse.from_quote(quote, now),
    )


@router.post("/{move_id}/approve", response_model=MoveResponse)
async def approve_move(
    move_id: int,
    body: TransitionRequest = TransitionRequest(),
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Approve a quoted move."""
    async with move_transaction(db, "approve move", move_id):
        move = await MoveService.approve(db, move_id, current_user, body.expected_version)
    await db.refresh(move)
    return MoveResponse.from_move(move, utcnow())


@router.post("/{move_id}/schedule", response_model=MoveResponse)
async def schedule_move(
    move_id: int,
    schedule: ScheduleRequest,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    estimator: RouteEstimator = Depends(get_route_estimator)
):
    """Fix start time and mover; duration and arrival are estimated."""
    async with move_transaction(db, "schedule move", move_id):
        move = await MoveService.schedule(db, move_id, schedule, current_user, estimator)
    await db.refresh(move)
    return MoveResponse.from_move(move, utcnow())


@router.post("/{move_id}/start", response_model=MoveResponse)
async def start_move(
    move_id: int,
    body: TransitionRequest = TransitionRequest(),
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    async with move_transaction(db, "start move", move_id):
        move = await MoveService.start(db, move_id, current_user, body.expected_version)
    await db.refresh(move)
    return MoveResponse.from_move(move, utcnow())


@router.post("/{move_id}/complete", response_model=MoveResponse)
async def complete_move(
    move_id: int,
    body: TransitionRequest = TransitionRequest(),
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    async with move_transaction(db, "complete move", move_id):
        move = await MoveService.complete(db, move_id, current_user, body.expected_version)
    await db.refresh(move)
    return MoveResponse.from_move(move, utcnow())


@router.post("/{move_id}/cancel", response_model=MoveResponse)
async def cancel_move(
    move_id: int,
    cancel: CancelRequest = CancelRequest(),
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    async with move_transaction(db, "cancel move", move_id):
        move = await MoveService.cancel(db, move_id, cancel, current_user)
    await db.refresh(move)
    return MoveResponse.from_move(move, utcnow())


@router.post("/{move_id}/location", response_model=MoveResponse)
async def record_move_location(
    move_id: int,
    ping: LocationPing,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """GPS ping from the moving team. Only accepted while the move is in progress."""
    async with move_transaction(db, "record location", move_id):
        move = await MoveService.record_location(db, move_id, ping, current_user)
    await db.refresh(move)
    return MoveResponse.from_move(move, utcnow())

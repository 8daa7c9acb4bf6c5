"""
Customer Move API Endpoints.

Request a move, follow it, pay for it or cancel it. Customers only ever
see their own moves; anything else is reported as not found.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from egzit.app.db.session import get_db
from egzit.app.core.guards import require_customer
from egzit.app.core.timeutils import utcnow
from egzit.app.domain.moves.move_service import MoveService, move_transaction
from egzit.app.schemas.move import (
    BookingResponse,
    CancelRequest,
    MoveCreate,
    MoveResponse,
    PayRequest,
    PayResponse,
    TrackingResponse,
)
from egzit.app.services.route_service import RouteEstimator, get_route_estimator

router = APIRouter(prefix="/moves", tags=["Customer - Moves"])


@router.post("", response_model=MoveResponse, status_code=status.HTTP_201_CREATED)
async def submit_move(
    move_data: MoveCreate,
    current_user: dict = Depends(require_customer),
    db: AsyncSession = Depends(get_db)
):
    """Submit the request wizard. The move starts out pending."""
    async with move_transaction(db, "submit move"):
        move = await MoveService.submit_move(db, current_user["user_id"], move_data)
    await db.refresh(move)
    return MoveResponse.from_move(move, utcnow())


@router.get("", response_model=List[MoveResponse])
async def list_my_moves(
    include_cancelled: bool = Query(False, description="Include cancelled moves"),
    current_user: dict = Depends(require_customer),
    db: AsyncSession = Depends(get_db)
):
    """List the caller's moves, soonest first."""
    moves = await MoveService.list_moves(
        db, user_id=current_user["user_id"], include_cancelled=include_cancelled
    )
    now = utcnow()
    return [MoveResponse.from_move(move, now) for move in moves]


@router.get("/{move_id}", response_model=MoveResponse)
async def get_my_move(
    move_id: int,
    current_user: dict = Depends(require_customer),
    db: AsyncSession = Depends(get_db)
):
    move = await MoveService.get_move(db, move_id, current_user)
    return MoveResponse.from_move(move, utcnow())


@router.get("/{move_id}/tracking", response_model=TrackingResponse)
async def track_my_move(
    move_id: int,
    current_user: dict = Depends(require_customer),
    db: AsyncSession = Depends(get_db)
):
    """Progress, ETA, journal and quote for one move."""
    move = await MoveService.get_move(db, move_id, current_user)
    return await MoveService.build_tracking(db, move, current_user)


@router.post("/{move_id}/pay", response_model=PayResponse)
async def pay_for_move(
    move_id: int,
    payment: PayRequest = PayRequest(),
    current_user: dict = Depends(require_customer),
    db: AsyncSession = Depends(get_db),
    estimator: RouteEstimator = Depends(get_route_estimator)
):
    """
    Pay for an approved move (demo checkout).

    Books the move at its quote total and schedules it.
    """
    async with move_transaction(db, "record payment", move_id):
        move, booking = await MoveService.pay(db, move_id, payment, current_user, estimator)
    await db.refresh(move)
    await db.refresh(booking)
    return PayResponse(
        move=MoveResponse.from_move(move, utcnow()),
        booking=BookingResponse.model_validate(booking),
    )


@router.post("/{move_id}/cancel", response_model=MoveResponse)
async def cancel_my_move(
    move_id: int,
    cancel: CancelRequest = CancelRequest(),
    current_user: dict = Depends(require_customer),
    db: AsyncSession = Depends(get_db)
):
    """Cancel a move that has not started yet."""
    async with move_transaction(db, "cancel move", move_id):
        move = await MoveService.cancel(db, move_id, cancel, current_user)
    await db.refresh(move)
    return MoveResponse.from_move(move, utcnow())

"""
Move Pydantic schemas.

Request bodies for the customer request wizard and the admin lifecycle
actions, plus the read models for moves, quotes and tracking.
"""

from datetime import date, datetime, time
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from egzit.app.core.config import settings
from egzit.app.domain.lifecycle.move_lifecycle import compute_eta, compute_progress
from egzit.app.models.move_enums import MoveStatus, QuoteStatus, BookingStatus, PaymentStatus


# --- Requests ---

class MoveCreate(BaseModel):
    """
    Request wizard submission.

    Lengths and the move date are checked by the service so the wizard gets
    a single descriptive 400 instead of a field-level 422.
    """
    name: str = Field(..., max_length=200, description="Customer name for the move")
    pickup_address: str = Field(..., max_length=500)
    delivery_address: str = Field(..., max_length=500)
    move_date: Optional[date] = None
    inventory_size: Optional[str] = Field(default=None, max_length=20)
    special_requirements: Optional[str] = None


class TransitionRequest(BaseModel):
    """Base body for lifecycle actions. expected_version enables stale-write detection."""
    expected_version: Optional[int] = Field(default=None, ge=1)


class QuoteCreate(TransitionRequest):
    base_price: int = Field(..., ge=0)
    distance_fee: int = Field(default=0, ge=0)
    weight_fee: int = Field(default=0, ge=0)
    special_items_fee: int = Field(default=0, ge=0)
    insurance_fee: int = Field(default=0, ge=0)
    tax: int = Field(default=0, ge=0)
    valid_days: Optional[int] = Field(default=None, ge=1, le=90)
    notes: Optional[str] = None


class ScheduleRequest(TransitionRequest):
    scheduled_time: Optional[time] = None
    mover_id: Optional[int] = None


class PayRequest(TransitionRequest):
    payment_reference: Optional[str] = Field(default=None, max_length=100)


class CancelRequest(TransitionRequest):
    reason: Optional[str] = Field(default=None, max_length=500)


class LocationPing(TransitionRequest):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


# --- Responses ---

class QuoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    move_id: int
    base_price: int
    distance_fee: int
    weight_fee: int
    special_items_fee: int
    insurance_fee: int
    tax: int
    total_price: int
    valid_until: datetime
    notes: Optional[str] = None
    status: QuoteStatus
    created_at: datetime

    @classmethod
    def from_quote(cls, quote, now: datetime) -> "QuoteResponse":
        """Report pending quotes past valid_until as expired."""
        response = cls.model_validate(quote)
        if response.status == QuoteStatus.PENDING and quote.valid_until < now:
            response.status = QuoteStatus.EXPIRED
        return response


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    move_id: int
    user_id: int
    mover_id: Optional[int] = None
    quote_id: int
    status: BookingStatus
    payment_status: PaymentStatus
    quoted_price: int
    final_price: int
    payment_reference: Optional[str] = None


class MoveResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    pickup_address: str
    delivery_address: str
    move_date: date
    inventory_size: Optional[str] = None
    special_requirements: Optional[str] = None
    status: MoveStatus
    quote_id: Optional[int] = None
    approved_at: Optional[datetime] = None
    scheduled_time: Optional[time] = None
    assigned_mover_id: Optional[int] = None
    estimated_duration: Optional[int] = None
    estimated_arrival_time: Optional[datetime] = None
    actual_start_time: Optional[datetime] = None
    actual_end_time: Optional[datetime] = None
    current_lat: Optional[float] = None
    current_lng: Optional[float] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    version: int
    created_at: datetime

    # Derived on read
    progress: float = 0.0
    eta: Optional[datetime] = None

    @classmethod
    def from_move(cls, move, now: datetime) -> "MoveResponse":
        response = cls.model_validate(move)
        response.progress = compute_progress(move, now, settings.default_move_duration_seconds)
        response.eta = compute_eta(move)
        return response


class PayResponse(BaseModel):
    move: MoveResponse
    booking: BookingResponse


class QuoteCreatedResponse(BaseModel):
    move: MoveResponse
    quote: QuoteResponse


class TrackingEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    event_type: str
    event_time: datetime
    notes: Optional[str] = None
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    metadata: Optional[Dict[str, Any]] = Field(
        default=None, validation_alias=AliasChoices("metadata_payload", "metadata")
    )
    created_by: Optional[int] = None


class TrackingResponse(BaseModel):
    """Everything a tracking screen renders for one move."""
    move: MoveResponse
    events: List[TrackingEventResponse]
    current_event: Optional[TrackingEventResponse] = None
    quote: Optional[QuoteResponse] = None
    progress: float
    eta: Optional[datetime] = None
    eta_display: str
    distance_km: Optional[float] = None
    distance_display: Optional[str] = None
    travel_time_display: Optional[str] = None
    allowed_actions: List[str]

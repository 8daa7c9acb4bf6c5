"""
Move-related enumerations.
"""

import enum


class MoveStatus(str, enum.Enum):
    """
    Move status enumeration.

    Status flow:
        PENDING → APPROVED → SCHEDULED → IN_PROGRESS → COMPLETED
        PENDING, APPROVED and SCHEDULED can transition to CANCELLED
    """
    PENDING = "pending"  # Request submitted, awaiting quote/approval
    APPROVED = "approved"  # Quote accepted by admin review
    SCHEDULED = "scheduled"  # Time, mover and ETA fixed (or paid)
    IN_PROGRESS = "in_progress"  # Moving team has started
    COMPLETED = "completed"  # All items delivered
    CANCELLED = "cancelled"  # Cancelled before the move started

    @classmethod
    def parse(cls, value: str) -> "MoveStatus":
        """Parse a status string, folding the legacy "planning" alias into PENDING."""
        normalized = (value or "").strip().lower()
        if normalized == "planning":
            return cls.PENDING
        return cls(normalized)


class TrackingEventType(str, enum.Enum):
    """Known tracking event vocabulary."""
    CREATED = "created"
    QUOTE_SENT = "quote_sent"
    APPROVED = "approved"
    SCHEDULED = "scheduled"
    PAYMENT_RECEIVED = "payment_received"
    STARTED = "started"
    LOCATION_UPDATE = "location_update"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class QuoteStatus(str, enum.Enum):
    """Quote status enumeration."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    EXPIRED = "expired"  # Derived on read, never written


class BookingStatus(str, enum.Enum):
    """Booking status enumeration."""
    PENDING = "pending"
    CONFIRMED = "confirmed"


class PaymentStatus(str, enum.Enum):
    """Booking payment status enumeration."""
    UNPAID = "unpaid"
    PAID = "paid"


class VehicleClass(str, enum.Enum):
    """Coarse vehicle category used to pick an average road speed."""
    CAR = "car"
    TRUCK = "truck"


def enum_values(enum_cls):
    """values_callable for SQLAlchemy Enum columns so the lowercase values are stored."""
    return [member.value for member in enum_cls]

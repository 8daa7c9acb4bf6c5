"""
Booking database model.

Created when a customer pays against an approved move's quote.
"""

from sqlalchemy import Column, Integer, DateTime, ForeignKey, Enum, String
from sqlalchemy.sql import func
from egzit.app.db.session import Base
from egzit.app.models.move_enums import BookingStatus, PaymentStatus, enum_values


class Booking(Base):
    """Paid booking record referencing the quote total."""
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    move_id = Column(Integer, ForeignKey('moves.id'), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    mover_id = Column(Integer, ForeignKey('movers.id'), nullable=True)
    quote_id = Column(Integer, ForeignKey('quotes.id'), nullable=False)

    status = Column(
        Enum(BookingStatus, values_callable=enum_values, name="booking_status"),
        default=BookingStatus.CONFIRMED,
        nullable=False
    )
    payment_status = Column(
        Enum(PaymentStatus, values_callable=enum_values, name="payment_status"),
        default=PaymentStatus.PAID,
        nullable=False
    )

    quoted_price = Column(Integer, nullable=False)
    final_price = Column(Integer, nullable=False)
    payment_reference = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Booking(id={self.id}, move_id={self.move_id}, final_price={self.final_price})>"

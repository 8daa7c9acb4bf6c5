"""
Quote database model.

A priced proposal for a move. The total is persisted at creation and never
recomputed; re-quoting inserts a new row.
"""

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Enum
from egzit.app.db.session import Base
from egzit.app.models.move_enums import QuoteStatus, enum_values


class Quote(Base):
    """Itemized quote (JMD, whole dollars)."""
    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    move_id = Column(Integer, ForeignKey('moves.id'), nullable=False, index=True)

    # Fee components
    base_price = Column(Integer, nullable=False, default=0)
    distance_fee = Column(Integer, nullable=False, default=0)
    weight_fee = Column(Integer, nullable=False, default=0)
    special_items_fee = Column(Integer, nullable=False, default=0)
    insurance_fee = Column(Integer, nullable=False, default=0)
    tax = Column(Integer, nullable=False, default=0)

    total_price = Column(Integer, nullable=False)

    valid_until = Column(DateTime, nullable=False)
    notes = Column(Text, nullable=True)
    status = Column(
        Enum(QuoteStatus, values_callable=enum_values, name="quote_status"),
        default=QuoteStatus.PENDING,
        nullable=False
    )

    created_by = Column(Integer, ForeignKey('users.id'), nullable=True)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<Quote(id={self.id}, move_id={self.move_id}, total={self.total_price})>"

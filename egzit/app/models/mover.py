"""
Mover directory model.

Moving companies that admins assign to scheduled moves.
"""

from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, Enum
from sqlalchemy.sql import func
from egzit.app.db.session import Base
from egzit.app.models.move_enums import VehicleClass, enum_values


class Mover(Base):
    """Moving company available for assignment."""
    __tablename__ = "movers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    name = Column(String(200), nullable=False, index=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    location = Column(String(200), nullable=True)

    vehicle_class = Column(
        Enum(VehicleClass, values_callable=enum_values, name="vehicle_class"),
        default=VehicleClass.TRUCK,
        nullable=False
    )
    rating = Column(Float, nullable=True)
    available = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Mover(id={self.id}, name='{self.name}', available={self.available})>"

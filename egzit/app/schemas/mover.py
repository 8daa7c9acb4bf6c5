"""
Mover directory schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from egzit.app.models.move_enums import VehicleClass


class MoverCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=50)
    email: Optional[EmailStr] = None
    location: Optional[str] = Field(default=None, max_length=200)
    vehicle_class: VehicleClass = VehicleClass.TRUCK
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    available: bool = True


class MoverResponse(BaseModel):
    id: int
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    location: Optional[str] = None
    vehicle_class: VehicleClass
    rating: Optional[float] = None
    available: bool
    created_at: datetime

    class Config:
        from_attributes = True

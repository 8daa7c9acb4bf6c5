"""
Location lookup schemas.
"""

from typing import Optional

from pydantic import BaseModel

from egzit.app.domain.geo.places import PlaceType
from egzit.app.models.move_enums import VehicleClass


class PlaceResponse(BaseModel):
    name: str
    parish: str
    lat: float
    lon: float
    type: PlaceType

    @classmethod
    def from_place(cls, place) -> "PlaceResponse":
        return cls(name=place.name, parish=place.parish, lat=place.lat, lon=place.lon, type=place.type)


class TravelEstimateResponse(BaseModel):
    origin: PlaceResponse
    destination: PlaceResponse
    vehicle_class: VehicleClass
    distance_km: float
    distance_display: str
    travel_minutes: int
    travel_time_display: str
    note: Optional[str] = None

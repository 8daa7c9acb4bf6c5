"""
Location API Endpoints.

Place search for address pickers and straight-line travel estimates.
Public: the request wizard uses these before the customer signs in.
"""

from typing import List

from fastapi import APIRouter, Query

from egzit.app.core.exceptions import ResourceNotFoundError
from egzit.app.domain.geo.estimator import (
    distance_between,
    estimate_travel_minutes,
    format_distance,
    format_travel_time,
    resolve_address,
    search_locations,
)
from egzit.app.models.move_enums import VehicleClass
from egzit.app.schemas.location import PlaceResponse, TravelEstimateResponse

router = APIRouter(prefix="/locations", tags=["Locations"])


@router.get("/search", response_model=List[PlaceResponse])
async def search(
    q: str = Query(..., min_length=1, description="Place name or parish"),
    limit: int = Query(10, ge=1, le=50)
):
    return [PlaceResponse.from_place(place) for place in search_locations(q, limit)]


@router.get("/estimate", response_model=TravelEstimateResponse)
async def estimate(
    origin: str = Query(..., alias="from", description="Free-text origin address"),
    destination: str = Query(..., alias="to", description="Free-text destination address"),
    vehicle: VehicleClass = Query(VehicleClass.CAR)
):
    """Great-circle distance and heuristic drive time between two addresses."""
    origin_place = resolve_address(origin)
    if origin_place is None:
        raise ResourceNotFoundError("Place", origin)
    destination_place = resolve_address(destination)
    if destination_place is None:
        raise ResourceNotFoundError("Place", destination)

    distance_km = distance_between(origin_place, destination_place)
    minutes = estimate_travel_minutes(distance_km, vehicle)

    return TravelEstimateResponse(
        origin=PlaceResponse.from_place(origin_place),
        destination=PlaceResponse.from_place(destination_place),
        vehicle_class=vehicle,
        distance_km=round(distance_km, 1),
        distance_display=format_distance(distance_km),
        travel_minutes=minutes,
        travel_time_display=format_travel_time(minutes),
        note="Straight-line estimate; road distance is usually longer",
    )

"""
Geographic estimation helpers.

Great-circle distance, heuristic travel time by vehicle class, display
formatting, and place lookup over the static place table.
"""

import math
import re
from typing import List, Optional, Union

from egzit.app.domain.geo.places import PLACES, PLACE_TYPE_RANK, Place
from egzit.app.models.move_enums import VehicleClass

EARTH_RADIUS_KM = 6371.0

# Average road speeds in km/h for local road conditions
AVERAGE_SPEED_KMH = {
    VehicleClass.CAR: 45.0,
    VehicleClass.TRUCK: 35.0,
}


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Args:
        lat1, lon1: First point coordinates (degrees)
        lat2, lon2: Second point coordinates (degrees)

    Returns:
        Distance in kilometers
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)

    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = math.sin(dlat / 2)**2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2)**2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def average_speed_kmh(vehicle_class: Union[VehicleClass, str]) -> float:
    """Look up the average road speed for a vehicle class."""
    return AVERAGE_SPEED_KMH[VehicleClass(vehicle_class)]


def estimate_travel_minutes(distance_km: float, vehicle_class: Union[VehicleClass, str] = VehicleClass.CAR) -> int:
    """
    Estimate driving time in whole minutes (half-up rounding).

    Raises:
        ValueError: if distance_km is negative
    """
    if distance_km < 0:
        raise ValueError("distance_km must be non-negative")

    minutes = distance_km / average_speed_kmh(vehicle_class) * 60
    return int(math.floor(minutes + 0.5))


def format_distance(distance_km: float) -> str:
    """Render meters below 1 km, otherwise kilometers to one decimal."""
    if distance_km < 1:
        return f"{int(math.floor(distance_km * 1000 + 0.5))} m"
    return f"{distance_km:.1f} km"


def format_travel_time(minutes: int) -> str:
    """Render "45 min", "2h" or "3h 43m"."""
    if minutes < 60:
        return f"{minutes} min"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m" if mins > 0 else f"{hours}h"


def search_locations(query: str, limit: int = 10) -> List[Place]:
    """
    Search places by name or parish substring.

    Names starting with the query come first, then larger settlements.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return []

    matches = [
        place for place in PLACES
        if needle in place.name.lower() or needle in place.parish.lower()
    ]
    matches.sort(key=lambda p: (
        0 if p.name.lower().startswith(needle) else 1,
        PLACE_TYPE_RANK[p.type],
    ))
    return matches[:limit]


def resolve_address(address: str) -> Optional[Place]:
    """
    Resolve a free-text address to the most specific known place it mentions.

    "12 Hope Rd, New Kingston" resolves to New Kingston rather than Kingston.
    """
    text = (address or "").lower()
    if not text:
        return None

    best = None
    for place in PLACES:
        pattern = r"\b" + re.escape(place.name.lower()) + r"\b"
        if re.search(pattern, text):
            if best is None or len(place.name) > len(best.name):
                best = place
    return best


def distance_between(place_a: Place, place_b: Place) -> float:
    return haversine_distance(place_a.lat, place_a.lon, place_b.lat, place_b.lon)

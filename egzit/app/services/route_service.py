"""
Route duration estimation.

Resolves pickup and delivery addresses against the place table, asks an
OSRM-compatible route service for driving routes, and falls back to the
configured default duration when anything along the way fails.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import httpx

from egzit.app.core.config import settings
from egzit.app.core.reliability import CircuitBreaker, CircuitOpenError, route_circuit_breaker
from egzit.app.domain.geo.estimator import distance_between, resolve_address

logger = logging.getLogger("egzit.routing")

SOURCE_ROUTE_SERVICE = "route_service"
SOURCE_DEFAULT = "default"


class RouteServiceError(Exception):
    """The route service answered, but not with a usable route."""


@dataclass(frozen=True)
class DurationEstimate:
    duration_seconds: int
    route_data: Optional[Dict[str, Any]]
    source: str
    distance_km: Optional[float] = None
    reason: Optional[str] = None

    @property
    def defaulted(self) -> bool:
        return self.source == SOURCE_DEFAULT


def _convert_route(route: Dict[str, Any]) -> Dict[str, Any]:
    # OSRM geometry is [lon, lat]; callers draw [lat, lon]
    coordinates = route["geometry"]["coordinates"]
    return {
        "distance": float(route["distance"]),
        "duration": float(route["duration"]),
        "geometry": [[lat, lon] for lon, lat in coordinates],
    }


class RouteServiceClient:
    """Thin async client for the OSRM /route endpoint."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.route_service_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.route_service_timeout_seconds
        self.transport = transport

    async def fetch_route(self, start: Tuple[float, float], end: Tuple[float, float]) -> Dict[str, Any]:
        """
        Fetch the primary route and alternatives between two (lat, lon) points.

        Returns:
            {"primary": {distance, duration, geometry}, "alternatives": [...]}
            with distance in metres, duration in seconds.

        Raises:
            httpx.HTTPError: transport failure, timeout or non-2xx status
            RouteServiceError: payload without a usable route
        """
        url = f"{self.base_url}/route/v1/driving/{start[1]},{start[0]};{end[1]},{end[0]}"
        params = {"overview": "full", "geometries": "geojson", "alternatives": "true"}

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.get(url, params=params)
            response.raise_for_status()
            try:
                data = response.json()
            except ValueError as e:
                raise RouteServiceError("Route service returned invalid JSON") from e

        if not isinstance(data, dict):
            raise RouteServiceError("Route service returned an unexpected payload")
        if data.get("code") != "Ok" or not data.get("routes"):
            raise RouteServiceError(f"No route found (code={data.get('code')})")

        try:
            routes = [_convert_route(route) for route in data["routes"]]
        except (KeyError, TypeError, ValueError) as e:
            raise RouteServiceError(f"Malformed route payload: {e}") from e

        return {"primary": routes[0], "alternatives": routes[1:]}


class RouteEstimator:
    """
    Produces a duration estimate for scheduling.

    Never raises for route-service problems: the result carries
    source="default" and the reason instead.
    """

    def __init__(
        self,
        client: Optional[RouteServiceClient] = None,
        breaker: Optional[CircuitBreaker] = None,
        default_duration: Optional[int] = None,
    ):
        self.client = client or RouteServiceClient()
        self.breaker = breaker or route_circuit_breaker
        self.default_duration = default_duration or settings.default_move_duration_seconds

    def _default(self, reason: str, pickup_address: str, delivery_address: str,
                 distance_km: Optional[float] = None) -> DurationEstimate:
        logger.warning(
            "Route estimate defaulted to %s seconds",
            self.default_duration,
            extra={
                "reason": reason,
                "pickup_address": pickup_address,
                "delivery_address": delivery_address,
            }
        )
        return DurationEstimate(
            duration_seconds=self.default_duration,
            route_data=None,
            source=SOURCE_DEFAULT,
            distance_km=distance_km,
            reason=reason,
        )

    async def estimate(
        self,
        pickup_address: str,
        delivery_address: str,
    ) -> DurationEstimate:
        pickup = resolve_address(pickup_address)
        delivery = resolve_address(delivery_address)
        if pickup is None or delivery is None:
            return self._default("address_unresolved", pickup_address, delivery_address)

        distance_km = distance_between(pickup, delivery)

        try:
            route = await self.breaker.call(
                self.client.fetch_route, pickup.coordinates, delivery.coordinates
            )
        except CircuitOpenError:
            return self._default("circuit_open", pickup_address, delivery_address, distance_km)
        except httpx.TimeoutException:
            return self._default("timeout", pickup_address, delivery_address, distance_km)
        except httpx.HTTPError as e:
            return self._default(f"http_error: {e}", pickup_address, delivery_address, distance_km)
        except RouteServiceError as e:
            return self._default(f"bad_response: {e}", pickup_address, delivery_address, distance_km)

        duration = int(round(route["primary"]["duration"]))
        if duration <= 0:
            return self._default("zero_duration", pickup_address, delivery_address, distance_km)

        logger.info(
            "Route estimate resolved",
            extra={"duration_seconds": duration, "distance_km": round(distance_km, 1)}
        )
        return DurationEstimate(
            duration_seconds=duration,
            route_data=route,
            source=SOURCE_ROUTE_SERVICE,
            distance_km=round(route["primary"]["distance"] / 1000, 2),
        )


def get_route_estimator() -> RouteEstimator:
    """FastAPI dependency; overridden in tests."""
    return RouteEstimator()

"""Client classes for the Google Routes and Open-Meteo APIs."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, TypeVar

from pydantic import TypeAdapter

from trafficflow._http import SyncTransport
from trafficflow.exceptions import RoutesValidationError
from trafficflow.models.route import ComputeRoutesResponse, Route
from trafficflow.models.sample import WeatherSnapshot
from trafficflow.models.segment import Coordinate
from trafficflow.models.weather import CurrentWeather, describe_weather_code

ROUTES_BASE_URL = "https://routes.googleapis.com"
COMPUTE_ROUTES_ENDPOINT = "/directions/v2:computeRoutes"
FIELD_MASK = ",".join([
    "routes.duration",
    "routes.distanceMeters",
    "routes.staticDuration",
    "routes.travelAdvisory",
    "routes.routeLabels",
])
DEPARTURE_LEAD_SECONDS = 120

OPEN_METEO_BASE_URL = "https://api.open-meteo.com/v1"
WEATHER_PROVIDER = "open-meteo"

T = TypeVar("T")


def _validate(model_type: type[T], data: Any) -> T:
    """Validate a payload against a Pydantic model."""
    try:
        return TypeAdapter(model_type).validate_python(data)
    except Exception as exc:
        raise RoutesValidationError(
            f"Failed to validate {model_type.__name__} response: {exc}"
        ) from exc


def _lat_lng(point: Coordinate) -> dict[str, Any]:
    return {"location": {"latLng": {"latitude": point.latitude, "longitude": point.longitude}}}


def build_route_request(
    origin: Coordinate,
    destination: Coordinate,
    departure_time: datetime,
) -> dict[str, Any]:
    """Build a traffic-aware computeRoutes request body."""
    return {
        "origin": _lat_lng(origin),
        "destination": _lat_lng(destination),
        "travelMode": "DRIVE",
        "routingPreference": "TRAFFIC_AWARE",
        "computeAlternativeRoutes": False,
        "departureTime": departure_time.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
    }


class RoutesClient:
    """Synchronous client for the Google Routes API.

    Usage:
        with RoutesClient(api_key) as routes:
            route = routes.compute_route(origin, destination)
            route.duration_seconds, route.static_duration_seconds
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = ROUTES_BASE_URL,
        timeout: float = 30.0,
    ) -> None:
        self._transport = SyncTransport(
            base_url=base_url,
            timeout=timeout,
            headers={"X-Goog-Api-Key": api_key},
        )

    def __enter__(self) -> RoutesClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection."""
        self._transport.close()

    def compute_route(
        self,
        origin: Coordinate,
        destination: Coordinate,
        departure_time: datetime | None = None,
    ) -> Route:
        """Compute the driving route between two points, departing shortly from now."""
        if departure_time is None:
            departure_time = datetime.now(timezone.utc) + timedelta(seconds=DEPARTURE_LEAD_SECONDS)
        body = build_route_request(origin, destination, departure_time)
        data = self._transport.post(
            COMPUTE_ROUTES_ENDPOINT,
            body,
            headers={"X-Goog-FieldMask": FIELD_MASK},
        )
        response = _validate(ComputeRoutesResponse, data)
        if not response.routes:
            raise RoutesValidationError("No route returned")
        return response.routes[0]


class WeatherClient:
    """Synchronous client for Open-Meteo current conditions."""

    def __init__(
        self,
        base_url: str = OPEN_METEO_BASE_URL,
        timeout: float = 30.0,
    ) -> None:
        self._transport = SyncTransport(base_url=base_url, timeout=timeout)

    def __enter__(self) -> WeatherClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection."""
        self._transport.close()

    def current(self, location: Coordinate) -> WeatherSnapshot:
        """Get the current temperature and weather code at *location*."""
        params = [
            ("latitude", str(location.latitude)),
            ("longitude", str(location.longitude)),
            ("current", "temperature_2m,weather_code"),
            ("timezone", "UTC"),
        ]
        data = self._transport.get("/forecast", params)
        if not isinstance(data, dict):
            raise RoutesValidationError("Unexpected Open-Meteo response shape")
        current = _validate(CurrentWeather, data.get("current") or {})
        return WeatherSnapshot(
            weather_code=current.weather_code,
            condition=describe_weather_code(current.weather_code),
            temperature_c=current.temperature_2m,
            observed_at=current.time,
            provider=WEATHER_PROVIDER,
        )

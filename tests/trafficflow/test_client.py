"""Tests for the Routes and Open-Meteo client classes."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import httpx
import pytest
import respx

from trafficflow.client import FIELD_MASK, RoutesClient, WeatherClient, build_route_request
from trafficflow.exceptions import RoutesAPIError, RoutesValidationError
from trafficflow.models.route import Route
from trafficflow.models.sample import WeatherSnapshot
from trafficflow.models.segment import Coordinate

ROUTES_URL = "https://routes.googleapis.com/directions/v2:computeRoutes"
OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"

ORIGIN = Coordinate(latitude=45.5178105, longitude=9.3229557)
DESTINATION = Coordinate(latitude=45.5179762, longitude=9.3262213)


class TestBuildRouteRequest:
    def test_body_shape(self) -> None:
        departure = datetime(2024, 3, 12, 10, 2, 0, tzinfo=timezone.utc)
        body = build_route_request(ORIGIN, DESTINATION, departure)
        assert body["origin"] == {
            "location": {"latLng": {"latitude": 45.5178105, "longitude": 9.3229557}},
        }
        assert body["destination"]["location"]["latLng"]["longitude"] == 9.3262213
        assert body["travelMode"] == "DRIVE"
        assert body["routingPreference"] == "TRAFFIC_AWARE"
        assert body["computeAlternativeRoutes"] is False
        assert body["departureTime"] == "2024-03-12T10:02:00Z"


class TestRoutesClient:
    @respx.mock
    def test_compute_route(self, routes_response) -> None:
        route_mock = respx.post(ROUTES_URL).mock(
            return_value=httpx.Response(200, json=routes_response)
        )
        with RoutesClient("test-key") as routes:
            route = routes.compute_route(ORIGIN, DESTINATION)
        assert isinstance(route, Route)
        assert route.duration_seconds == 90
        assert route.static_duration_seconds == 60
        assert route.distance_meters == 254
        assert route.route_labels == ["DEFAULT_ROUTE"]

        request = route_mock.calls.last.request
        assert request.headers["X-Goog-Api-Key"] == "test-key"
        assert request.headers["X-Goog-FieldMask"] == FIELD_MASK

    @respx.mock
    def test_departure_is_in_the_future(self, routes_response) -> None:
        route_mock = respx.post(ROUTES_URL).mock(
            return_value=httpx.Response(200, json=routes_response)
        )
        before = datetime.now(timezone.utc)
        with RoutesClient("test-key") as routes:
            routes.compute_route(ORIGIN, DESTINATION)
        body = json.loads(route_mock.calls.last.request.content)
        departure = datetime.strptime(body["departureTime"], "%Y-%m-%dT%H:%M:%SZ").replace(
            tzinfo=timezone.utc,
        )
        assert (departure - before).total_seconds() > 100

    @respx.mock
    def test_no_routes(self) -> None:
        respx.post(ROUTES_URL).mock(return_value=httpx.Response(200, json={}))
        with RoutesClient("test-key") as routes:
            with pytest.raises(RoutesValidationError, match="No route returned"):
                routes.compute_route(ORIGIN, DESTINATION)

    @respx.mock
    def test_invalid_payload(self) -> None:
        respx.post(ROUTES_URL).mock(
            return_value=httpx.Response(200, json={"routes": "not-a-list"})
        )
        with RoutesClient("test-key") as routes:
            with pytest.raises(RoutesValidationError):
                routes.compute_route(ORIGIN, DESTINATION)

    @respx.mock
    def test_api_error(self) -> None:
        respx.post(ROUTES_URL).mock(
            return_value=httpx.Response(403, text="PERMISSION_DENIED")
        )
        with RoutesClient("bad-key") as routes:
            with pytest.raises(RoutesAPIError) as exc_info:
                routes.compute_route(ORIGIN, DESTINATION)
        assert exc_info.value.status_code == 403


class TestWeatherClient:
    @respx.mock
    def test_current(self, open_meteo_response) -> None:
        route = respx.get(OPEN_METEO_URL).mock(
            return_value=httpx.Response(200, json=open_meteo_response)
        )
        with WeatherClient() as weather:
            snapshot = weather.current(ORIGIN)
        assert isinstance(snapshot, WeatherSnapshot)
        assert snapshot.weather_code == 3
        assert snapshot.condition == "Overcast"
        assert snapshot.temperature_c == 12.4
        assert snapshot.observed_at == "2024-03-12T10:00"
        assert snapshot.provider == "open-meteo"

        params = route.calls.last.request.url.params
        assert params["current"] == "temperature_2m,weather_code"
        assert params["latitude"] == "45.5178105"

    @respx.mock
    def test_unknown_code_has_no_condition(self) -> None:
        respx.get(OPEN_METEO_URL).mock(
            return_value=httpx.Response(200, json={"current": {"weather_code": 42}})
        )
        with WeatherClient() as weather:
            snapshot = weather.current(ORIGIN)
        assert snapshot.weather_code == 42
        assert snapshot.condition is None
        assert snapshot.temperature_c is None

    @respx.mock
    def test_unexpected_shape(self) -> None:
        respx.get(OPEN_METEO_URL).mock(return_value=httpx.Response(200, json=[1, 2]))
        with WeatherClient() as weather:
            with pytest.raises(RoutesValidationError):
                weather.current(ORIGIN)

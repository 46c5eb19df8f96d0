"""Shared test fixtures and sample API responses."""

from __future__ import annotations

import pytest

from trafficflow.capacity import build_capacity_index
from trafficflow.segments import load_segments

SAMPLE_ROUTES_RESPONSE = {
    "routes": [
        {
            "distanceMeters": 254,
            "duration": "90s",
            "staticDuration": "60s",
            "travelAdvisory": {
                "speedReadingIntervals": [
                    {"startPolylinePointIndex": 0, "endPolylinePointIndex": 3, "speed": "SLOW"},
                ],
            },
            "routeLabels": ["DEFAULT_ROUTE"],
        },
    ],
}

SAMPLE_OPEN_METEO_RESPONSE = {
    "latitude": 45.52,
    "longitude": 9.32,
    "current": {
        "time": "2024-03-12T10:00",
        "interval": 900,
        "temperature_2m": 12.4,
        "weather_code": 3,
    },
}

SAMPLE_RECORD = {
    "segmentId": "via-pontida",
    "segmentName": "Via Pontida",
    "direction": "forward",
    "requestedAt": "2024-03-12T10:02:13Z",
    "origin": {"latitude": 45.5178105, "longitude": 9.3229557},
    "destination": {"latitude": 45.5179762, "longitude": 9.3262213},
    "distanceMeters": 254,
    "durationSeconds": 90,
    "staticDurationSeconds": 60,
    "delaySeconds": None,
    "routeLabels": ["DEFAULT_ROUTE"],
}


@pytest.fixture
def routes_response() -> dict:
    return SAMPLE_ROUTES_RESPONSE


@pytest.fixture
def open_meteo_response() -> dict:
    return SAMPLE_OPEN_METEO_RESPONSE


@pytest.fixture
def sample_record() -> dict:
    return dict(SAMPLE_RECORD)


@pytest.fixture
def default_segments():
    return load_segments()


@pytest.fixture
def default_index(default_segments):
    return build_capacity_index(default_segments)

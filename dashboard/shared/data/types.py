"""Data contracts for the traffic dashboard data layer."""

from __future__ import annotations

from typing import Any, TypedDict


class CoordinateData(TypedDict):
    latitude: float
    longitude: float


class WeatherData(TypedDict, total=False):
    weatherCode: int | None
    condition: str | None
    temperatureC: float | None
    observedAt: str | None
    provider: str | None


class SampleRecord(TypedDict, total=False):
    """One persisted sample; flow fields are present once enriched."""

    segmentId: str
    segmentName: str | None
    direction: str
    requestedAt: str  # ISO 8601
    origin: CoordinateData | None
    destination: CoordinateData | None
    distanceMeters: float | None
    durationSeconds: float | None
    staticDurationSeconds: float | None
    delaySeconds: float | None
    speedReadingIntervals: list[dict[str, Any]] | None
    routeLabels: list[str] | None
    weather: WeatherData | None
    lengthMeters: float | None
    freeFlowSpeedKph: float | None
    capacityVph: float | None
    volumeCapacityRatio: float | None
    derivedFlowVph: float | None
    flowConfidence: str | None
    flowEstimationModel: dict[str, Any] | None

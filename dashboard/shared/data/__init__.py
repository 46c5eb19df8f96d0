"""Data layer — repository factory and re-exports."""

from __future__ import annotations

from trafficflow.settings import load_settings

from .base import TrafficDataRepository
from .errors import TrafficDataError
from .types import CoordinateData, SampleRecord, WeatherData


def get_repository() -> TrafficDataRepository:
    """Return the repository for the configured data file."""
    from .jsonl_repo import JsonlRepository

    settings = load_settings()
    return JsonlRepository(settings.data_file, settings.segments_file)


__all__ = [
    "CoordinateData",
    "SampleRecord",
    "TrafficDataError",
    "TrafficDataRepository",
    "WeatherData",
    "get_repository",
]

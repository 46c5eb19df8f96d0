"""Great-circle length of segment geometry."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any

EARTH_RADIUS_METERS = 6_371_000.0


def _lat_lon(point: Any) -> tuple[float, float]:
    """Read (latitude, longitude) from a Coordinate model or a mapping."""
    if isinstance(point, Mapping):
        return float(point["latitude"]), float(point["longitude"])
    return float(point.latitude), float(point.longitude)


def haversine_distance_meters(a: Any, b: Any) -> float:
    """Great-circle distance between two points using the haversine formula."""
    lat_a, lon_a = _lat_lon(a)
    lat_b, lon_b = _lat_lon(b)
    lat1 = math.radians(lat_a)
    lat2 = math.radians(lat_b)
    delta_lat = lat2 - lat1
    delta_lon = math.radians(lon_b - lon_a)

    sin_lat = math.sin(delta_lat / 2)
    sin_lon = math.sin(delta_lon / 2)
    h = sin_lat * sin_lat + math.cos(lat1) * math.cos(lat2) * sin_lon * sin_lon
    # rounding can push h just past 1 for near-antipodal points
    h = min(1.0, max(0.0, h))
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_METERS * c


def path_length_meters(points: Sequence[Any] | None) -> float | None:
    """Sum of haversine distances between consecutive points.

    Returns None when fewer than two points are given, so callers can tell
    "no geometry" apart from a zero-length path.
    """
    if not points or len(points) < 2:
        return None
    return sum(
        haversine_distance_meters(points[i], points[i + 1])
        for i in range(len(points) - 1)
    )

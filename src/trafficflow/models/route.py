"""Google Routes API response models."""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

_DURATION_RE = re.compile(r"([0-9]+)(?:\.([0-9]+))?s")


def parse_duration_seconds(duration: str | None) -> float | None:
    """Parse a protobuf duration string such as '42s' or '3.25s'.

    Returns None for missing or unparseable input.
    """
    if not duration or not isinstance(duration, str):
        return None
    match = _DURATION_RE.search(duration)
    if match is None:
        return None
    integer = int(match.group(1))
    fraction = float(f"0.{match.group(2)}") if match.group(2) else 0.0
    return integer + fraction


class TravelAdvisory(BaseModel):
    """Traffic information attached to a computed route."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    delay_duration: str | None = None
    speed_reading_intervals: list[dict[str, Any]] | None = None


class Route(BaseModel):
    """A single route from the computeRoutes response."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    distance_meters: float | None = None
    duration: str | None = None
    static_duration: str | None = None
    travel_advisory: TravelAdvisory | None = None
    route_labels: list[str] | None = None

    @property
    def duration_seconds(self) -> float | None:
        """Live, traffic-aware travel time in seconds."""
        return parse_duration_seconds(self.duration)

    @property
    def static_duration_seconds(self) -> float | None:
        """Free-flow travel time in seconds."""
        return parse_duration_seconds(self.static_duration)

    @property
    def delay_seconds(self) -> float | None:
        if self.travel_advisory is None:
            return None
        return parse_duration_seconds(self.travel_advisory.delay_duration)


class ComputeRoutesResponse(BaseModel):
    """Top-level computeRoutes response body."""

    model_config = ConfigDict(frozen=True)

    routes: list[Route] = []

"""Street segment configuration models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Direction = Literal["forward", "reverse"]

DIRECTIONS: tuple[Direction, ...] = ("forward", "reverse")


class Coordinate(BaseModel):
    """A WGS84 point in degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class BPRCoefficients(BaseModel):
    """Coefficients of the BPR travel-time function t = t0 * (1 + alpha * (v/c)^beta)."""

    model_config = ConfigDict(frozen=True)

    alpha: float = Field(gt=0)
    beta: float = Field(gt=0)


class SegmentMetadata(BaseModel):
    """Optional per-segment road characteristics."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    lanes: int | None = Field(default=None, ge=0)
    lane_capacity_vph: float | None = Field(default=None, ge=0)
    speed_limit_kph: float | None = Field(default=None, gt=0)
    allowed_directions: tuple[Direction, ...] | None = Field(default=None, min_length=1)
    bpr: BPRCoefficients | None = None


class Segment(BaseModel):
    """A monitored street segment."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    endpoints: tuple[Coordinate, ...] = Field(min_length=2)
    metadata: SegmentMetadata = Field(default_factory=SegmentMetadata)

    @property
    def directions(self) -> tuple[Direction, ...]:
        """Directions to sample; both when none are configured."""
        return self.metadata.allowed_directions or DIRECTIONS

    def route_endpoints(self, direction: Direction) -> tuple[Coordinate, Coordinate]:
        """Return (origin, destination) for travelling the segment in *direction*."""
        first, last = self.endpoints[0], self.endpoints[-1]
        if direction == "forward":
            return first, last
        return last, first

"""Traffic sample and derived metrics models."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from trafficflow.models.segment import Coordinate, Direction

FlowConfidence = Literal["high", "medium", "low"]


class WeatherSnapshot(BaseModel):
    """Weather conditions captured alongside a poll."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    weather_code: int | None = None
    condition: str | None = None
    temperature_c: float | None = None
    observed_at: str | None = None
    provider: str | None = None


class TrafficSample(BaseModel):
    """One travel-time observation for a segment in one direction.

    Unknown keys are kept so that records written by newer pollers survive a
    round trip through this model.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    segment_id: str
    segment_name: str | None = None
    direction: Direction
    requested_at: datetime
    origin: Coordinate | None = None
    destination: Coordinate | None = None
    distance_meters: float | None = None
    duration_seconds: float | None = None
    static_duration_seconds: float | None = None
    delay_seconds: float | None = None
    speed_reading_intervals: list[dict[str, Any]] | None = None
    route_labels: list[str] | None = None
    weather: WeatherSnapshot | None = None

    def to_record(self) -> dict[str, Any]:
        """Serialise to the camelCase JSON record persisted in the data file."""
        return self.model_dump(by_alias=True, mode="json")


class FlowEstimationModel(BaseModel):
    """Model coefficients used to derive a flow estimate."""

    model_config = ConfigDict(frozen=True)

    alpha: float
    beta: float
    source: str = "BPR"
    notes: str = "Derived from travel-time ratio using BPR function and assumed lane capacity."


class FlowMetrics(BaseModel):
    """Metrics derived from one sample and its segment configuration."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    length_meters: float | None = None
    free_flow_speed_kph: float | None = None
    capacity_vph: float | None = None
    volume_capacity_ratio: float | None = None
    derived_flow_vph: float | None = None
    flow_confidence: FlowConfidence = "low"
    flow_estimation_model: FlowEstimationModel | None = None

    def to_record(self) -> dict[str, Any]:
        """Serialise to the camelCase fields appended to an enriched record."""
        return self.model_dump(by_alias=True, mode="json")

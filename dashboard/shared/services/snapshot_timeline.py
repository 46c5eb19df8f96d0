"""Snapshot timeline service: everything the map page shows, minus Streamlit."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import pandas as pd

from trafficflow.capacity import CapacityRegistry
from trafficflow.exceptions import MalformedSampleError
from trafficflow.models.segment import Segment
from trafficflow.snapshots import (
    RangePreset,
    SnapshotGroup,
    TimeRange,
    bucket_key,
    filter_visible,
    group_snapshots,
    parse_timestamp,
    resolve_range,
    select_snapshot,
)

from ..api_logging import log_service_call
from ..data.base import TrafficDataRepository
from .common import (
    color_for_ratio,
    ensure_enriched,
    latest_per_direction,
    normalize_confidence,
    travel_time_ratio,
    weight_for_ratio,
)

HISTORY_COLUMNS = [
    "requestedAt",
    "bucket",
    "direction",
    "durationSeconds",
    "staticDurationSeconds",
    "travelTimeRatio",
    "volumeCapacityRatio",
    "derivedFlowVph",
]


@dataclass(frozen=True)
class TimelineView:
    groups: list[SnapshotGroup]
    visible: list[SnapshotGroup]
    time_range: TimeRange | None
    selected_key: datetime | None

    @property
    def earliest(self) -> datetime | None:
        return self.groups[0].key if self.groups else None

    @property
    def latest(self) -> datetime | None:
        return self.groups[-1].key if self.groups else None

    @property
    def visible_keys(self) -> list[datetime]:
        return [group.key for group in self.visible]

    @property
    def selected_samples(self) -> list[dict]:
        for group in self.groups:
            if group.key == self.selected_key:
                return list(group.samples)
        return []


@dataclass(frozen=True)
class DirectionReading:
    direction: str
    duration_seconds: float | None
    static_duration_seconds: float | None
    delay_seconds: float | None
    travel_time_ratio: float | None
    color: str
    volume_capacity_ratio: float | None
    derived_flow_vph: float | None
    flow_confidence: str | None


@dataclass(frozen=True)
class SegmentCard:
    segment_id: str
    segment_name: str
    length_meters: float | None
    capacity_vph: float | None
    free_flow_speed_kph: float | None
    weather: dict | None
    readings: list[DirectionReading]


@dataclass(frozen=True)
class MapTrace:
    key: str
    segment_id: str
    segment_name: str
    direction: str
    latitudes: list[float]
    longitudes: list[float]
    travel_time_ratio: float | None
    color: str
    width: float


class SnapshotTimelineService:
    """Loads samples, slices them into snapshots and shapes them for display."""

    def __init__(self, repo: TrafficDataRepository, registry: CapacityRegistry | None = None) -> None:
        self._repo = repo
        self._registry = registry or CapacityRegistry()
        self._segments: list[Segment] = []

    @property
    def segments(self) -> list[Segment]:
        return self._segments

    @log_service_call
    def refresh_configuration(self) -> list[Segment]:
        """Reload segment configuration and rebuild the capacity index."""
        self._segments = self._repo.get_segments()
        self._registry.reload(self._segments)
        return self._segments

    @log_service_call
    def load_samples(self) -> list[dict]:
        """Fetch all samples, enriching any that predate flow estimation."""
        return ensure_enriched(self._repo.get_samples(), self._registry.index)

    def dataset_span(self, samples: list[dict]) -> tuple[datetime, datetime] | None:
        """Earliest and latest bucket keys across *samples*, or None if empty."""
        keys = [group.key for group in group_snapshots(samples)]
        if not keys:
            return None
        return keys[0], keys[-1]

    @log_service_call
    def build_view(
        self,
        samples: list[dict],
        preset: RangePreset,
        custom_start: datetime | None = None,
        custom_end: datetime | None = None,
        requested_key: datetime | None = None,
    ) -> TimelineView:
        """Group samples into snapshots, apply the time window and pick the snapshot."""
        groups = group_snapshots(samples)
        time_range = resolve_range([g.key for g in groups], preset, custom_start, custom_end)
        visible = filter_visible(groups, time_range)
        selected = select_snapshot([g.key for g in visible], requested_key)
        return TimelineView(
            groups=groups,
            visible=visible,
            time_range=time_range,
            selected_key=selected,
        )

    def segment_cards(self, samples: list[dict]) -> list[SegmentCard]:
        """One card per configured segment that has samples in *samples*."""
        latest = latest_per_direction(samples)
        cards: list[SegmentCard] = []
        for segment in self._segments:
            readings_src = [
                latest[(segment.id, direction)]
                for direction in segment.directions
                if (segment.id, direction) in latest
            ]
            if not readings_src:
                continue
            base = readings_src[0]
            readings = []
            for sample in readings_src:
                ratio = travel_time_ratio(sample)
                readings.append(DirectionReading(
                    direction=sample["direction"],
                    duration_seconds=sample.get("durationSeconds"),
                    static_duration_seconds=sample.get("staticDurationSeconds"),
                    delay_seconds=sample.get("delaySeconds"),
                    travel_time_ratio=ratio,
                    color=color_for_ratio(ratio),
                    volume_capacity_ratio=sample.get("volumeCapacityRatio"),
                    derived_flow_vph=sample.get("derivedFlowVph"),
                    flow_confidence=normalize_confidence(sample.get("flowConfidence")),
                ))
            cards.append(SegmentCard(
                segment_id=segment.id,
                segment_name=segment.name,
                length_meters=base.get("lengthMeters"),
                capacity_vph=base.get("capacityVph"),
                free_flow_speed_kph=base.get("freeFlowSpeedKph"),
                weather=base.get("weather"),
                readings=readings,
            ))
        return cards

    def map_traces(self, samples: list[dict]) -> list[MapTrace]:
        """Polylines for every configured segment direction, coloured by *samples*."""
        latest = latest_per_direction(samples)
        traces: list[MapTrace] = []
        for segment in self._segments:
            for direction in segment.directions:
                origin, destination = segment.route_endpoints(direction)
                sample = latest.get((segment.id, direction))
                ratio = travel_time_ratio(sample) if sample else None
                traces.append(MapTrace(
                    key=f"{segment.id}-{direction}",
                    segment_id=segment.id,
                    segment_name=segment.name,
                    direction=direction,
                    latitudes=[origin.latitude, destination.latitude],
                    longitudes=[origin.longitude, destination.longitude],
                    travel_time_ratio=ratio,
                    color=color_for_ratio(ratio),
                    width=weight_for_ratio(ratio),
                ))
        return traces

    @log_service_call
    def history_frame(
        self,
        samples: list[dict],
        segment_id: str,
        time_range: TimeRange | None,
    ) -> pd.DataFrame:
        """Time series for one segment inside the visible window, oldest first."""
        rows = []
        for sample in samples:
            if sample.get("segmentId") != segment_id:
                continue
            try:
                moment = parse_timestamp(sample.get("requestedAt"))
            except MalformedSampleError:
                continue
            key = bucket_key(moment)
            if time_range is None or key not in time_range:
                continue
            rows.append({
                "requestedAt": pd.Timestamp(moment),
                "bucket": pd.Timestamp(key),
                "direction": sample.get("direction"),
                "durationSeconds": sample.get("durationSeconds"),
                "staticDurationSeconds": sample.get("staticDurationSeconds"),
                "travelTimeRatio": travel_time_ratio(sample),
                "volumeCapacityRatio": sample.get("volumeCapacityRatio"),
                "derivedFlowVph": sample.get("derivedFlowVph"),
            })
        if not rows:
            return pd.DataFrame(columns=HISTORY_COLUMNS)
        return pd.DataFrame(rows, columns=HISTORY_COLUMNS).sort_values("requestedAt", ignore_index=True)

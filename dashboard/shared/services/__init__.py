"""Service layer — business logic for the traffic dashboard."""

from .common import (
    color_for_ratio,
    ensure_enriched,
    latest_per_direction,
    normalize_confidence,
    travel_time_ratio,
    weight_for_ratio,
)
from .polling import PollInProgressError, PollService
from .snapshot_timeline import (
    DirectionReading,
    MapTrace,
    SegmentCard,
    SnapshotTimelineService,
    TimelineView,
)

__all__ = [
    "DirectionReading",
    "MapTrace",
    "PollInProgressError",
    "PollService",
    "SegmentCard",
    "SnapshotTimelineService",
    "TimelineView",
    "color_for_ratio",
    "ensure_enriched",
    "latest_per_direction",
    "normalize_confidence",
    "travel_time_ratio",
    "weight_for_ratio",
]

"""Per-segment capacity and BPR coefficient lookup."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from trafficflow.exceptions import ConfigurationError
from trafficflow.geo import path_length_meters
from trafficflow.models.segment import Segment

logger = logging.getLogger(__name__)

DEFAULT_LANES = 1
DEFAULT_LANE_CAPACITY_VPH = 900.0
DEFAULT_BPR_ALPHA = 0.15
DEFAULT_BPR_BETA = 4.0


@dataclass(frozen=True)
class SegmentCapacity:
    """Resolved static characteristics of one segment."""

    segment_id: str
    lanes: int
    lane_capacity_vph: float
    capacity_vph: float
    alpha: float
    beta: float
    length_meters: float | None
    speed_limit_kph: float | None


CapacityIndex = Mapping[str, SegmentCapacity]


def resolve_segment_capacity(segment: Segment) -> SegmentCapacity:
    """Apply defaults to a segment's metadata and compute its capacity."""
    meta = segment.metadata
    lanes = meta.lanes if meta.lanes is not None else DEFAULT_LANES
    lane_capacity = (
        meta.lane_capacity_vph if meta.lane_capacity_vph is not None else DEFAULT_LANE_CAPACITY_VPH
    )
    alpha, beta = DEFAULT_BPR_ALPHA, DEFAULT_BPR_BETA
    if meta.bpr is not None:
        alpha, beta = meta.bpr.alpha, meta.bpr.beta
    return SegmentCapacity(
        segment_id=segment.id,
        lanes=lanes,
        lane_capacity_vph=lane_capacity,
        capacity_vph=lanes * lane_capacity,
        alpha=alpha,
        beta=beta,
        length_meters=path_length_meters(segment.endpoints),
        speed_limit_kph=meta.speed_limit_kph,
    )


def build_capacity_index(segments: Iterable[Segment]) -> CapacityIndex:
    """Build a read-only segment id -> SegmentCapacity lookup.

    Raises ConfigurationError if two segments share an id.
    """
    index: dict[str, SegmentCapacity] = {}
    for segment in segments:
        if segment.id in index:
            raise ConfigurationError(f"Duplicate segment id: {segment.id!r}")
        index[segment.id] = resolve_segment_capacity(segment)
    return MappingProxyType(index)


class CapacityRegistry:
    """Holds the capacity index for the current segment configuration.

    ``reload`` builds a complete new index before swapping it in, so readers
    see either the old version or the new one, never a mix.
    """

    def __init__(self, segments: Iterable[Segment] = ()) -> None:
        self._lock = threading.Lock()
        self._index: CapacityIndex = build_capacity_index(segments)

    @property
    def index(self) -> CapacityIndex:
        """The current index version."""
        return self._index

    def reload(self, segments: Iterable[Segment]) -> CapacityIndex:
        """Replace the index with one built from *segments*."""
        with self._lock:
            new_index = build_capacity_index(segments)
            self._index = new_index
        logger.info("Capacity index reloaded with %d segments", len(new_index))
        return new_index

    def get(self, segment_id: str) -> SegmentCapacity | None:
        """Return the segment's record, or None when the segment is unknown."""
        return self._index.get(segment_id)

    def __contains__(self, segment_id: object) -> bool:
        return segment_id in self._index

    def __len__(self) -> int:
        return len(self._index)

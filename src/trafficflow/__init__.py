"""trafficflow — segment travel-time sampling and BPR flow estimation."""

from trafficflow.capacity import CapacityRegistry, SegmentCapacity, build_capacity_index
from trafficflow.client import RoutesClient, WeatherClient
from trafficflow.exceptions import (
    ConfigurationError,
    MalformedSampleError,
    RoutesAPIError,
    RoutesConnectionError,
    RoutesTimeoutError,
    RoutesValidationError,
    TrafficFlowError,
)
from trafficflow.flow import derive_flow_metrics, enrich_sample, enrich_samples
from trafficflow.geo import haversine_distance_meters, path_length_meters
from trafficflow.segments import load_segments
from trafficflow.snapshots import (
    RangePreset,
    SnapshotGroup,
    TimeRange,
    bucket_key,
    filter_visible,
    group_snapshots,
    resolve_range,
    select_snapshot,
)

__all__ = [
    "CapacityRegistry",
    "ConfigurationError",
    "MalformedSampleError",
    "RangePreset",
    "RoutesAPIError",
    "RoutesClient",
    "RoutesConnectionError",
    "RoutesTimeoutError",
    "RoutesValidationError",
    "SegmentCapacity",
    "SnapshotGroup",
    "TimeRange",
    "TrafficFlowError",
    "WeatherClient",
    "bucket_key",
    "build_capacity_index",
    "derive_flow_metrics",
    "enrich_sample",
    "enrich_samples",
    "filter_visible",
    "group_snapshots",
    "haversine_distance_meters",
    "load_segments",
    "path_length_meters",
    "resolve_range",
    "select_snapshot",
]

__version__ = "0.1.0"

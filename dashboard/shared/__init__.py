"""Shared dashboard utilities."""

# --- Constants & formatting ---
from .constants import (
    CONFIDENCE_COLORS,
    DIRECTION_LABELS,
    MAP_ZOOM,
    NO_DATA_COLOR,
    PLOTLY_LAYOUT_DEFAULTS,
)
from .formatters import format_quantity, format_ratio, format_seconds, format_snapshot_range

# --- Data layer ---
from .data import TrafficDataError, get_repository

# --- Service layer ---
from .services import (
    PollInProgressError,
    PollService,
    SnapshotTimelineService,
    color_for_ratio,
    travel_time_ratio,
)

# --- UI components ---
from .sidebar import (
    TimeWindowSelection,
    render_poll_button,
    render_snapshot_slider,
    render_time_window_sidebar,
)

__all__ = [
    "CONFIDENCE_COLORS",
    "DIRECTION_LABELS",
    "MAP_ZOOM",
    "NO_DATA_COLOR",
    "PLOTLY_LAYOUT_DEFAULTS",
    "PollInProgressError",
    "PollService",
    "SnapshotTimelineService",
    "TimeWindowSelection",
    "TrafficDataError",
    "color_for_ratio",
    "format_quantity",
    "format_ratio",
    "format_seconds",
    "format_snapshot_range",
    "get_repository",
    "render_poll_button",
    "render_snapshot_slider",
    "render_time_window_sidebar",
    "travel_time_ratio",
]

"""Shared constants for the traffic dashboard."""

from __future__ import annotations

MAP_ZOOM = 15.5

NO_DATA_COLOR = "#95A5A6"

# (upper bound on live/free-flow travel-time ratio, colour)
RATIO_COLOR_BANDS: list[tuple[float, str]] = [
    (1.05, "#2ECC71"),  # free flow
    (1.25, "#F1C40F"),
    (1.5, "#E67E22"),
]
CONGESTED_COLOR = "#E74C3C"

CONFIDENCE_COLORS: dict[str, str] = {
    "high": "#2ECC71",
    "medium": "#F1C40F",
    "low": "#E74C3C",
}

DIRECTION_LABELS: dict[str, str] = {
    "forward": "Forward",
    "reverse": "Reverse",
}

PLOTLY_LAYOUT_DEFAULTS = dict(
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    margin=dict(l=40, r=20, t=40, b=40),
)

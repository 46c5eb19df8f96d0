"""Shared pure functions for the service layer (no Streamlit dependency)."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from trafficflow.capacity import CapacityIndex
from trafficflow.exceptions import MalformedSampleError
from trafficflow.flow import enrich_sample
from trafficflow.snapshots import parse_timestamp

from ..constants import CONGESTED_COLOR, NO_DATA_COLOR, RATIO_COLOR_BANDS

_CONFIDENCE_LEVELS = {"high", "medium", "low"}


def travel_time_ratio(sample: Mapping[str, Any]) -> float | None:
    """Return live / free-flow travel time, or None if either is missing or zero."""
    duration = sample.get("durationSeconds")
    static = sample.get("staticDurationSeconds")
    if duration is None or static is None or static == 0:
        return None
    return duration / static


def color_for_ratio(ratio: float | None) -> str:
    """Map a travel-time ratio to a traffic colour (grey when unknown)."""
    if ratio is None:
        return NO_DATA_COLOR
    for upper, color in RATIO_COLOR_BANDS:
        if ratio <= upper:
            return color
    return CONGESTED_COLOR


def weight_for_ratio(ratio: float | None) -> float:
    """Line width for a segment: thicker when more congested, within [3, 8]."""
    if ratio is None:
        return 4
    return min(8, max(3, ratio * 4))


def normalize_confidence(value: object) -> str | None:
    """Return 'high'/'medium'/'low' for a recognised label, else None."""
    if not isinstance(value, str):
        return None
    label = value.strip().lower()
    return label if label in _CONFIDENCE_LEVELS else None


def _requested_at(sample: Mapping[str, Any]) -> datetime | None:
    try:
        return parse_timestamp(sample.get("requestedAt"))
    except MalformedSampleError:
        return None


def latest_per_direction(samples: Iterable[Mapping[str, Any]]) -> dict[tuple[str, str], dict]:
    """Collapse repeated polls: the newest ``requestedAt`` per (segment, direction) wins.

    Ties and unparseable timestamps fall back to input order (later wins).
    """
    latest: dict[tuple[str, str], dict] = {}
    stamps: dict[tuple[str, str], datetime | None] = {}
    for sample in samples:
        key = (sample.get("segmentId", ""), sample.get("direction", ""))
        stamp = _requested_at(sample)
        current = stamps.get(key)
        if key in latest and stamp is not None and current is not None and stamp < current:
            continue
        latest[key] = dict(sample)
        stamps[key] = stamp
    return latest


def ensure_enriched(samples: Iterable[Mapping[str, Any]], index: CapacityIndex) -> list[dict]:
    """Add flow metrics to samples written before enrichment; others pass through."""
    return [
        enrich_sample(sample, index) if "flowConfidence" not in sample else dict(sample)
        for sample in samples
    ]

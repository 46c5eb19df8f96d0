"""Formatting helpers for the traffic dashboard."""

from __future__ import annotations

from datetime import datetime, timedelta

from trafficflow.snapshots import SNAPSHOT_WINDOW_MINUTES

_DASH = "—"


def format_snapshot_range(key: datetime | None) -> str:
    """Format a bucket key as 'Mar 12, 10:00–10:05' or '—' if None."""
    if key is None:
        return _DASH
    end = key + timedelta(minutes=SNAPSHOT_WINDOW_MINUTES)
    return f"{key:%b %d}, {key:%H:%M}–{end:%H:%M}"


def format_seconds(seconds: float | None) -> str:
    """Format a duration as '1m 05s' / '42s', or '—' if None."""
    if seconds is None:
        return _DASH
    mins, secs = divmod(round(seconds), 60)
    if mins:
        return f"{mins}m {secs:02d}s"
    return f"{secs}s"


def format_ratio(ratio: float | None) -> str:
    """Format a ratio with two decimals, or '—' if None."""
    if ratio is None:
        return _DASH
    return f"{ratio:.2f}"


def format_quantity(value: float | None, unit: str, digits: int = 0) -> str:
    """Format a number with a unit suffix, or '—' if None."""
    if value is None:
        return _DASH
    return f"{value:,.{digits}f} {unit}"

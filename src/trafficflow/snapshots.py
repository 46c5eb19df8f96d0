"""Snapshot bucketing and time-range selection for display."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from trafficflow.exceptions import MalformedSampleError
from trafficflow.models.sample import TrafficSample

logger = logging.getLogger(__name__)

SNAPSHOT_WINDOW_MINUTES = 5


class RangePreset(str, Enum):
    """Time windows offered for browsing the snapshot timeline."""

    LAST_24_HOURS = "Last 24 hours"
    LAST_48_HOURS = "Last 48 hours"
    LAST_7_DAYS = "Last 7 days"
    FULL_RANGE = "Full range"
    CUSTOM = "Custom range"


DEFAULT_RANGE_PRESET = RangePreset.LAST_48_HOURS

_PRESET_SPANS: dict[RangePreset, timedelta] = {
    RangePreset.LAST_24_HOURS: timedelta(hours=24),
    RangePreset.LAST_48_HOURS: timedelta(hours=48),
    RangePreset.LAST_7_DAYS: timedelta(days=7),
}


@dataclass(frozen=True)
class SnapshotGroup:
    """Samples captured within the same 5-minute window."""

    key: datetime
    samples: tuple[dict[str, Any], ...]


@dataclass(frozen=True)
class TimeRange:
    """Inclusive [start, end] window; start never exceeds end."""

    start: datetime
    end: datetime

    def __contains__(self, moment: object) -> bool:
        return isinstance(moment, datetime) and self.start <= moment <= self.end


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime (naive means UTC)."""
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str):
        try:
            moment = datetime.fromisoformat(value)
        except ValueError as exc:
            raise MalformedSampleError(f"Invalid timestamp: {value!r}") from exc
    else:
        raise MalformedSampleError(f"Expected an ISO-8601 timestamp, got {value!r}")
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def bucket_key(value: str | datetime) -> datetime:
    """Floor a timestamp to the start of its 5-minute window (UTC)."""
    moment = parse_timestamp(value)
    minute = moment.minute - moment.minute % SNAPSHOT_WINDOW_MINUTES
    return moment.replace(minute=minute, second=0, microsecond=0)


def format_bucket_key(key: datetime) -> str:
    """Render a bucket key as an ISO-8601 UTC string ending in 'Z'."""
    return key.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def group_snapshots(
    samples: Iterable[TrafficSample | Mapping[str, Any]],
) -> list[SnapshotGroup]:
    """Group samples by bucket key, ascending.

    Samples keep their input order within a group. Records whose
    ``requestedAt`` cannot be parsed are skipped.
    """
    buckets: dict[datetime, list[dict[str, Any]]] = {}
    skipped = 0
    for sample in samples:
        record = sample.to_record() if isinstance(sample, TrafficSample) else sample
        if not isinstance(record, Mapping) or "requestedAt" not in record:
            raise MalformedSampleError("Sample is missing required field: requestedAt")
        try:
            key = bucket_key(record["requestedAt"])
        except MalformedSampleError:
            skipped += 1
            continue
        buckets.setdefault(key, []).append(dict(record))

    if skipped:
        logger.warning("Skipped %d samples with unparseable requestedAt", skipped)
    return [SnapshotGroup(key=key, samples=tuple(buckets[key])) for key in sorted(buckets)]


def resolve_range(
    bucket_keys: Sequence[datetime],
    preset: RangePreset,
    custom_start: datetime | str | None = None,
    custom_end: datetime | str | None = None,
) -> TimeRange | None:
    """Compute the effective window for *preset* over ascending *bucket_keys*.

    Relative presets end at the latest bucket. Custom bounds default to the
    earliest/latest bucket independently. The result is clamped into the
    dataset's span, and an inverted window collapses to ``end = start``.
    Returns None when there are no buckets.
    """
    if not bucket_keys:
        return None
    earliest, latest = bucket_keys[0], bucket_keys[-1]

    if preset in _PRESET_SPANS:
        start, end = latest - _PRESET_SPANS[preset], latest
    elif preset == RangePreset.CUSTOM:
        start = parse_timestamp(custom_start) if custom_start is not None else earliest
        end = parse_timestamp(custom_end) if custom_end is not None else latest
    else:
        start, end = earliest, latest

    start = min(max(start, earliest), latest)
    end = min(max(end, earliest), latest)
    if start > end:
        end = start
    return TimeRange(start=start, end=end)


def filter_visible(
    groups: Sequence[SnapshotGroup],
    time_range: TimeRange | None,
) -> list[SnapshotGroup]:
    """Return the groups whose key falls inside *time_range* (inclusive)."""
    if time_range is None:
        return []
    return [group for group in groups if group.key in time_range]


def select_snapshot(
    visible_keys: Sequence[datetime],
    requested_key: datetime | None = None,
) -> datetime | None:
    """Pick the bucket to display.

    The requested key wins only while it is still visible; otherwise the most
    recent visible bucket is used.
    """
    if not visible_keys:
        return None
    if requested_key is not None and requested_key in visible_keys:
        return requested_key
    return max(visible_keys)

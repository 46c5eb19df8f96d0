"""Shared fixtures for dashboard tests."""

from __future__ import annotations

import pytest

from trafficflow.segments import parse_segments

from shared.data.base import TrafficDataRepository

# ── Sample data fixtures ─────────────────────────────────────────────────────

_SEGMENT_RECORDS = [
    {
        "id": "via-pontida",
        "name": "Via Pontida",
        "endpoints": [
            {"latitude": 45.5178105, "longitude": 9.3229557},
            {"latitude": 45.5179762, "longitude": 9.3262213},
        ],
        "metadata": {"lanes": 1, "laneCapacityVph": 750},
    },
    {
        "id": "via-sant-ambrogio",
        "name": "Via Sant'Ambrogio",
        "endpoints": [
            {"latitude": 45.516732, "longitude": 9.3232577},
            {"latitude": 45.5178105, "longitude": 9.3229557},
        ],
        "metadata": {"allowedDirections": ["forward"]},
    },
]


def _make_record(
    requested_at: str,
    segment_id: str = "via-pontida",
    direction: str = "forward",
    duration: float | None = 90.0,
    static: float | None = 60.0,
    **extra,
) -> dict:
    return {
        "segmentId": segment_id,
        "direction": direction,
        "requestedAt": requested_at,
        "durationSeconds": duration,
        "staticDurationSeconds": static,
        **extra,
    }


class FakeRepository(TrafficDataRepository):
    """In-memory repository for service tests."""

    def __init__(self, samples: list[dict], segments=None) -> None:
        self.samples = samples
        self.segments = segments if segments is not None else parse_segments(_SEGMENT_RECORDS)

    def get_samples(self) -> list[dict]:
        return list(self.samples)

    def get_segments(self):
        return list(self.segments)


@pytest.fixture
def segments():
    return parse_segments(_SEGMENT_RECORDS)


@pytest.fixture
def sample_records() -> list[dict]:
    """Two snapshots, 10:00 and 10:05, plus an older one a day earlier."""
    return [
        _make_record("2024-03-11T10:01:00Z", duration=60.0),
        _make_record("2024-03-12T10:00:30Z", duration=60.0),
        _make_record("2024-03-12T10:01:10Z", direction="reverse", duration=66.0),
        _make_record("2024-03-12T10:01:40Z", segment_id="via-sant-ambrogio", duration=None),
        _make_record("2024-03-12T10:06:00Z", duration=90.0),
        _make_record("2024-03-12T10:07:30Z", duration=75.0),
    ]


@pytest.fixture
def make_record():
    """Factory fixture for creating sample record dicts."""
    return _make_record


@pytest.fixture
def make_repository():
    """Factory fixture for in-memory repositories."""
    return FakeRepository

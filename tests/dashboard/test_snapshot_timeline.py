"""Tests for the snapshot timeline service."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from trafficflow.capacity import CapacityRegistry
from trafficflow.snapshots import RangePreset, TimeRange

from shared.services.snapshot_timeline import HISTORY_COLUMNS, SnapshotTimelineService


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def service(make_repository, sample_records):
    svc = SnapshotTimelineService(make_repository(sample_records), CapacityRegistry())
    svc.refresh_configuration()
    return svc


class TestConfiguration:
    def test_refresh_rebuilds_index(self, make_repository, sample_records, segments):
        registry = CapacityRegistry()
        repo = make_repository(sample_records, segments)
        svc = SnapshotTimelineService(repo, registry)
        assert len(registry) == 0
        svc.refresh_configuration()
        assert registry.get("via-pontida").capacity_vph == 750
        assert [s.id for s in svc.segments] == ["via-pontida", "via-sant-ambrogio"]

    def test_load_samples_enriches(self, service):
        samples = service.load_samples()
        assert len(samples) == 6
        assert all("flowConfidence" in s for s in samples)
        assert samples[-1]["capacityVph"] == 750

    def test_load_samples_after_reload_uses_new_capacity(self, make_repository, sample_records, segments):
        from trafficflow.segments import parse_segments

        repo = make_repository(sample_records, segments)
        svc = SnapshotTimelineService(repo, CapacityRegistry())
        svc.refresh_configuration()
        before = svc.load_samples()[-1]["capacityVph"]

        repo.segments = parse_segments([{
            "id": "via-pontida",
            "name": "Via Pontida",
            "endpoints": [
                {"latitude": 45.5178105, "longitude": 9.3229557},
                {"latitude": 45.5179762, "longitude": 9.3262213},
            ],
            "metadata": {"lanes": 2, "laneCapacityVph": 750},
        }])
        svc.refresh_configuration()
        after = svc.load_samples()[-1]["capacityVph"]
        assert (before, after) == (750, 1500)

    def test_dataset_span(self, service, sample_records):
        assert service.dataset_span(sample_records) == (
            _utc(2024, 3, 11, 10, 0), _utc(2024, 3, 12, 10, 5),
        )
        assert service.dataset_span([]) is None


class TestBuildView:
    def test_full_range(self, service, sample_records):
        view = service.build_view(sample_records, RangePreset.FULL_RANGE)
        assert len(view.groups) == 3
        assert view.visible_keys == [
            _utc(2024, 3, 11, 10, 0), _utc(2024, 3, 12, 10, 0), _utc(2024, 3, 12, 10, 5),
        ]
        assert view.selected_key == _utc(2024, 3, 12, 10, 5)
        assert view.earliest == _utc(2024, 3, 11, 10, 0)
        assert view.latest == _utc(2024, 3, 12, 10, 5)
        assert len(view.selected_samples) == 2

    def test_last_24_hours_drops_older_snapshot(self, service, sample_records):
        view = service.build_view(sample_records, RangePreset.LAST_24_HOURS)
        assert view.time_range == TimeRange(
            start=_utc(2024, 3, 11, 10, 5), end=_utc(2024, 3, 12, 10, 5),
        )
        assert view.visible_keys == [_utc(2024, 3, 12, 10, 0), _utc(2024, 3, 12, 10, 5)]

    def test_keeps_requested_snapshot(self, service, sample_records):
        view = service.build_view(
            sample_records, RangePreset.FULL_RANGE, requested_key=_utc(2024, 3, 12, 10, 0),
        )
        assert view.selected_key == _utc(2024, 3, 12, 10, 0)
        assert len(view.selected_samples) == 3

    def test_hidden_request_resets_to_latest(self, service, sample_records):
        view = service.build_view(
            sample_records, RangePreset.LAST_24_HOURS, requested_key=_utc(2024, 3, 11, 10, 0),
        )
        assert view.selected_key == _utc(2024, 3, 12, 10, 5)

    def test_custom_range(self, service, sample_records):
        view = service.build_view(
            sample_records,
            RangePreset.CUSTOM,
            custom_start=_utc(2024, 3, 11, 0, 0),
            custom_end=_utc(2024, 3, 12, 10, 2),
        )
        assert view.visible_keys == [_utc(2024, 3, 11, 10, 0), _utc(2024, 3, 12, 10, 0)]
        assert view.selected_key == _utc(2024, 3, 12, 10, 0)

    def test_empty(self, service):
        view = service.build_view([], RangePreset.FULL_RANGE)
        assert view.groups == []
        assert view.time_range is None
        assert view.selected_key is None
        assert view.selected_samples == []


class TestSegmentCards:
    def test_latest_reading_per_direction(self, service, sample_records):
        view = service.build_view(sample_records, RangePreset.FULL_RANGE)
        [card] = service.segment_cards(view.selected_samples)
        assert card.segment_id == "via-pontida"
        [reading] = card.readings
        assert reading.direction == "forward"
        assert reading.duration_seconds == 75
        assert reading.travel_time_ratio == pytest.approx(1.25)
        assert reading.color == "#F1C40F"

    def test_cards_follow_configuration_order(self, service, sample_records):
        samples = service.load_samples()
        view = service.build_view(
            samples, RangePreset.FULL_RANGE, requested_key=_utc(2024, 3, 12, 10, 0),
        )
        cards = service.segment_cards(view.selected_samples)
        assert [c.segment_id for c in cards] == ["via-pontida", "via-sant-ambrogio"]
        assert [r.direction for r in cards[0].readings] == ["forward", "reverse"]
        assert cards[0].capacity_vph == 750
        assert cards[0].readings[0].flow_confidence == "high"
        missing = cards[1].readings[0]
        assert missing.travel_time_ratio is None
        assert missing.flow_confidence == "low"


class TestMapTraces:
    def test_one_trace_per_allowed_direction(self, service, sample_records):
        view = service.build_view(
            sample_records, RangePreset.FULL_RANGE, requested_key=_utc(2024, 3, 12, 10, 0),
        )
        traces = service.map_traces(view.selected_samples)
        assert [t.key for t in traces] == [
            "via-pontida-forward", "via-pontida-reverse", "via-sant-ambrogio-forward",
        ]
        forward, reverse, ambrogio = traces
        assert forward.latitudes == list(reversed(reverse.latitudes))
        assert forward.travel_time_ratio == 1.0
        assert ambrogio.travel_time_ratio is None
        assert ambrogio.width == 4

    def test_segments_without_samples_are_grey(self, service):
        traces = service.map_traces([])
        assert len(traces) == 3
        assert all(t.travel_time_ratio is None for t in traces)


class TestHistoryFrame:
    def test_rows_in_window(self, service, sample_records):
        view = service.build_view(sample_records, RangePreset.LAST_24_HOURS)
        frame = service.history_frame(sample_records, "via-pontida", view.time_range)
        assert list(frame.columns) == HISTORY_COLUMNS
        assert len(frame) == 4
        assert frame["requestedAt"].is_monotonic_increasing
        assert frame["travelTimeRatio"].tolist() == pytest.approx([1.0, 1.1, 1.5, 1.25])

    def test_no_range(self, service, sample_records):
        frame = service.history_frame(sample_records, "via-pontida", None)
        assert frame.empty
        assert list(frame.columns) == HISTORY_COLUMNS

    def test_skips_unparseable_timestamps(self, service, make_record):
        records = [make_record("garbage"), make_record("2024-03-12T10:00:00Z")]
        time_range = TimeRange(start=_utc(2024, 3, 12, 0, 0), end=_utc(2024, 3, 13, 0, 0))
        frame = service.history_frame(records, "via-pontida", time_range)
        assert len(frame) == 1

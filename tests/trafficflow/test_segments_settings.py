"""Tests for segment configuration loading and runtime settings."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from trafficflow.exceptions import ConfigurationError
from trafficflow.segments import DEFAULT_SEGMENT_RECORDS, load_segments, parse_segments
from trafficflow.settings import DEFAULT_DATA_FILE, load_settings

_ENV_VARS = (
    "GOOGLE_MAPS_API_KEY",
    "TRAFFICFLOW_DATA_FILE",
    "TRAFFICFLOW_SEGMENTS_FILE",
    "TRAFFICFLOW_POLL_DELAY",
)


class TestSegments:
    def test_defaults(self) -> None:
        segments = load_segments()
        assert len(segments) == len(DEFAULT_SEGMENT_RECORDS) == 7
        assert len({s.id for s in segments}) == 7
        for segment in segments:
            assert segment.directions
            assert set(segment.directions) <= {"forward", "reverse"}

    def test_from_file(self, tmp_path) -> None:
        path = tmp_path / "segments.json"
        path.write_text(json.dumps(DEFAULT_SEGMENT_RECORDS[:2]), encoding="utf-8")
        segments = load_segments(path)
        assert [s.id for s in segments] == ["via-don-luigi-sturzo", "via-sant-ambrogio"]

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_segments(tmp_path / "missing.json")

    def test_not_a_list(self, tmp_path) -> None:
        path = tmp_path / "segments.json"
        path.write_text('{"id": "x"}', encoding="utf-8")
        with pytest.raises(ConfigurationError, match="JSON list"):
            load_segments(path)

    def test_invalid_record(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid segment configuration"):
            parse_segments([{"id": "x", "name": "X", "endpoints": []}])

    def test_duplicate_ids(self) -> None:
        with pytest.raises(ConfigurationError, match="Duplicate"):
            parse_segments([DEFAULT_SEGMENT_RECORDS[0], DEFAULT_SEGMENT_RECORDS[0]])


class TestSettings:
    @pytest.fixture(autouse=True)
    def _clean_env(self, monkeypatch):
        for name in _ENV_VARS:
            monkeypatch.delenv(name, raising=False)
        yield
        # load_dotenv writes straight to os.environ
        for name in _ENV_VARS:
            os.environ.pop(name, None)

    def test_defaults(self, tmp_path) -> None:
        settings = load_settings(tmp_path / "absent.env")
        assert settings.google_maps_api_key is None
        assert settings.data_file == DEFAULT_DATA_FILE
        assert settings.segments_file is None
        assert settings.poll_delay_seconds == 0.25

    def test_reads_dotenv(self, tmp_path) -> None:
        env = tmp_path / ".env"
        env.write_text(
            "GOOGLE_MAPS_API_KEY=abc123\n"
            "TRAFFICFLOW_DATA_FILE=/tmp/samples.jsonl\n"
            "TRAFFICFLOW_SEGMENTS_FILE=segments.json\n"
            "TRAFFICFLOW_POLL_DELAY=1.5\n",
            encoding="utf-8",
        )
        settings = load_settings(env)
        assert settings.require_api_key() == "abc123"
        assert settings.data_file == Path("/tmp/samples.jsonl")
        assert settings.segments_file == Path("segments.json")
        assert settings.poll_delay_seconds == 1.5

    def test_environment_wins_over_dotenv(self, tmp_path, monkeypatch) -> None:
        env = tmp_path / ".env"
        env.write_text("GOOGLE_MAPS_API_KEY=from-file\n", encoding="utf-8")
        monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "from-env")
        assert load_settings(env).google_maps_api_key == "from-env"

    def test_missing_api_key(self, tmp_path) -> None:
        settings = load_settings(tmp_path / "absent.env")
        with pytest.raises(ConfigurationError, match="GOOGLE_MAPS_API_KEY"):
            settings.require_api_key()

    @pytest.mark.parametrize("value", ["soon", "-1"])
    def test_invalid_delay(self, tmp_path, monkeypatch, value) -> None:
        monkeypatch.setenv("TRAFFICFLOW_POLL_DELAY", value)
        with pytest.raises(ConfigurationError):
            load_settings(tmp_path / "absent.env")

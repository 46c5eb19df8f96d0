"""JSON Lines file repository implementation."""

from __future__ import annotations

from pathlib import Path

import streamlit as st

from trafficflow.exceptions import TrafficFlowError
from trafficflow.models.segment import Segment
from trafficflow.segments import load_segments
from trafficflow.store import read_samples

from ..api_logging import log_api_call
from .base import TrafficDataRepository
from .errors import TrafficDataError
from .types import SampleRecord


def _mtime(path: Path | None) -> float | None:
    """Modification time used as a cache key, so edits to the file bust the cache."""
    if path is None or not path.exists():
        return None
    return path.stat().st_mtime


# ── Cached readers ───────────────────────────────────────────────────────────


@st.cache_data(ttl=600, show_spinner=False)
def _read_samples(path: str, mtime: float | None) -> list[SampleRecord]:
    try:
        return read_samples(path)  # type: ignore[return-value]
    except (TrafficFlowError, OSError) as exc:
        raise TrafficDataError(f"Failed to read samples from {path}: {exc}") from exc


@st.cache_data(ttl=600, show_spinner=False)
def _read_segments(path: str | None, mtime: float | None) -> list[Segment]:
    try:
        return load_segments(path)
    except TrafficFlowError as exc:
        raise TrafficDataError(f"Failed to load segment configuration: {exc}") from exc


# ── Repository class ─────────────────────────────────────────────────────────


class JsonlRepository(TrafficDataRepository):
    """Reads samples from the poller's JSON Lines file."""

    def __init__(self, data_file: str | Path, segments_file: str | Path | None = None) -> None:
        self._data_file = Path(data_file)
        self._segments_file = Path(segments_file) if segments_file is not None else None

    def __repr__(self) -> str:
        return f"JsonlRepository({str(self._data_file)!r})"

    @log_api_call
    def get_samples(self) -> list[SampleRecord]:
        return _read_samples(str(self._data_file), _mtime(self._data_file))

    @log_api_call
    def get_segments(self) -> list[Segment]:
        path = str(self._segments_file) if self._segments_file is not None else None
        return _read_segments(path, _mtime(self._segments_file))

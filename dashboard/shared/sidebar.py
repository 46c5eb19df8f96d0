"""Shared sidebar rendering for time-window and snapshot selection."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timezone

import streamlit as st

from trafficflow.exceptions import TrafficFlowError
from trafficflow.models.segment import Segment
from trafficflow.snapshots import DEFAULT_RANGE_PRESET, RangePreset

from .formatters import format_snapshot_range
from .services.polling import PollInProgressError, PollService

SNAPSHOT_STATE_KEY = "snapshot_key"


@dataclass(frozen=True)
class TimeWindowSelection:
    """Result of the time-window controls."""

    preset: RangePreset
    custom_start: datetime | None = None
    custom_end: datetime | None = None


def _combine_utc(day, moment: time) -> datetime:
    return datetime.combine(day, moment).replace(tzinfo=timezone.utc)


def render_time_window_sidebar(earliest: datetime, latest: datetime) -> TimeWindowSelection:
    """Render the range preset picker, plus date/time inputs for a custom range."""
    presets = list(RangePreset)
    preset = st.sidebar.selectbox(
        "Time window",
        presets,
        index=presets.index(DEFAULT_RANGE_PRESET),
        format_func=lambda p: p.value,
    )
    if preset != RangePreset.CUSTOM:
        return TimeWindowSelection(preset=preset)

    # Inputs are UTC; out-of-range values are clamped by the service
    start_col, end_col = st.sidebar.columns(2)
    start_day = start_col.date_input(
        "From", value=earliest.date(),
        min_value=earliest.date(), max_value=latest.date(),
    )
    start_time = start_col.time_input("From (UTC)", value=earliest.time(), step=300)
    end_day = end_col.date_input(
        "To", value=latest.date(),
        min_value=earliest.date(), max_value=latest.date(),
    )
    end_time = end_col.time_input("To (UTC)", value=latest.time(), step=300)
    return TimeWindowSelection(
        preset=preset,
        custom_start=_combine_utc(start_day, start_time),
        custom_end=_combine_utc(end_day, end_time),
    )


def render_snapshot_slider(visible_keys: list[datetime], selected_key: datetime | None) -> datetime | None:
    """Render the snapshot slider and return the chosen bucket key.

    The widget state is reset to *selected_key* whenever the previous choice
    has dropped out of the visible window.
    """
    if not visible_keys:
        st.sidebar.info("No snapshots in the selected time window.")
        return None
    if len(visible_keys) == 1:
        st.sidebar.caption(f"Snapshot: {format_snapshot_range(visible_keys[0])}")
        return visible_keys[0]

    if st.session_state.get(SNAPSHOT_STATE_KEY) not in visible_keys:
        st.session_state[SNAPSHOT_STATE_KEY] = selected_key
    return st.sidebar.select_slider(
        "Snapshot",
        options=visible_keys,
        format_func=format_snapshot_range,
        key=SNAPSHOT_STATE_KEY,
    )


def render_poll_button(poll_service: PollService, segments: list[Segment]) -> None:
    """Render a 'Poll now' button; a poll already running is reported, not queued."""
    st.sidebar.divider()
    if not st.sidebar.button("Poll now", disabled=poll_service.in_progress or not segments):
        return
    try:
        with st.spinner("Polling Google Routes..."):
            result = poll_service.poll_now(segments)
    except PollInProgressError:
        st.sidebar.warning("A poll is already in progress.")
        return
    except TrafficFlowError as exc:
        st.sidebar.error(f"Poll failed: {exc}")
        return
    st.sidebar.success(f"Collected {len(result.samples)} samples.")

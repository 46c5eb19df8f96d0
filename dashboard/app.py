"""Traffic Flow Dashboard — Streamlit + Plotly over the poller's JSONL samples."""

from __future__ import annotations

import plotly.graph_objects as go
import streamlit as st

from trafficflow.capacity import CapacityRegistry
from trafficflow.exceptions import TrafficFlowError
from trafficflow.poller import segments_centroid
from trafficflow.settings import load_settings

from shared import (
    CONFIDENCE_COLORS,
    DIRECTION_LABELS,
    MAP_ZOOM,
    PLOTLY_LAYOUT_DEFAULTS,
    PollService,
    SnapshotTimelineService,
    TrafficDataError,
    format_quantity,
    format_ratio,
    format_seconds,
    format_snapshot_range,
    get_repository,
    render_poll_button,
    render_snapshot_slider,
    render_time_window_sidebar,
)

# ── Page config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Traffic Flow",
    page_icon="\U0001f6a6",
    layout="wide",
)


@st.cache_resource
def _services() -> tuple[SnapshotTimelineService, PollService]:
    # One registry and one poll lock per server process
    registry = CapacityRegistry()
    timeline = SnapshotTimelineService(get_repository(), registry)
    return timeline, PollService(load_settings(), registry)


# ── Load configuration and samples ───────────────────────────────────────────

st.sidebar.title("Traffic Flow")

try:
    timeline, poller = _services()
    segments = timeline.refresh_configuration()
    with st.spinner("Loading samples..."):
        samples = timeline.load_samples()
except (TrafficDataError, TrafficFlowError) as exc:
    st.error(f"Failed to load traffic data: {exc}")
    st.stop()

span = timeline.dataset_span(samples)
if span is None:
    render_poll_button(poller, segments)
    st.info("No samples yet. Run `python scripts/poll.py` or use **Poll now** in the sidebar.")
    st.stop()


# ── Sidebar: time window and snapshot ─ ───────────────────────────────────────

window = render_time_window_sidebar(*span)
view = timeline.build_view(
    samples,
    window.preset,
    window.custom_start,
    window.custom_end,
    requested_key=st.session_state.get("snapshot_key"),
)
selected_key = render_snapshot_slider(view.visible_keys, view.selected_key)
render_poll_button(poller, segments)

if selected_key is None:
    st.warning("No snapshots fall inside the selected time window.")
    st.stop()

snapshot = next(g for g in view.visible if g.key == selected_key)
snapshot_samples = list(snapshot.samples)


# ── Header ───────────────────────────────────────────────────────────────────

st.markdown(f"# Traffic snapshot  \n{format_snapshot_range(selected_key)} UTC")
kpi1, kpi2, kpi3 = st.columns(3)
kpi1.metric("Samples in snapshot", len(snapshot_samples))
kpi2.metric("Snapshots in window", len(view.visible))
kpi3.metric("Segments configured", len(segments))


# ── Map ──────────────────────────────────────────────────────────────────────

st.subheader("Segment map")

fig_map = go.Figure()
for trace in timeline.map_traces(snapshot_samples):
    label = f"{trace.segment_name} ({DIRECTION_LABELS.get(trace.direction, trace.direction)})"
    fig_map.add_trace(go.Scattermap(
        lat=trace.latitudes,
        lon=trace.longitudes,
        mode="lines",
        name=label,
        line=dict(color=trace.color, width=trace.width),
        hovertext=f"{label}<br>Travel-time ratio: {format_ratio(trace.travel_time_ratio)}",
        hoverinfo="text",
        showlegend=False,
    ))

center = segments_centroid(segments) if segments else None
fig_map.update_layout(
    **PLOTLY_LAYOUT_DEFAULTS,
    map=dict(
        style="open-street-map",
        center=dict(lat=center.latitude, lon=center.longitude) if center else None,
        zoom=MAP_ZOOM,
    ),
    height=520,
)
st.plotly_chart(fig_map, use_container_width=True)


# ── Segment cards ────────────────────────────────────────────────────────────

st.subheader("Segments")

cards = timeline.segment_cards(snapshot_samples)
if not cards:
    st.warning("No samples for configured segments in this snapshot.")

for card in cards:
    with st.container(border=True):
        st.markdown(f"**{card.segment_name}**")
        st.caption(
            f"Length {format_quantity(card.length_meters, 'm')} | "
            f"Capacity {format_quantity(card.capacity_vph, 'veh/h')} | "
            f"Free-flow {format_quantity(card.free_flow_speed_kph, 'km/h', 1)}"
        )
        if card.weather:
            st.caption(
                f"Weather: {card.weather.get('condition', 'Unknown')}, "
                f"{format_quantity(card.weather.get('temperatureC'), '°C', 1)}"
            )
        for reading in card.readings:
            cols = st.columns(5)
            cols[0].markdown(
                f'<span style="color:{reading.color}">●</span> '
                f"{DIRECTION_LABELS.get(reading.direction, reading.direction)}",
                unsafe_allow_html=True,
            )
            cols[1].metric(
                "Travel time", format_seconds(reading.duration_seconds),
                delta=f"+{format_seconds(reading.delay_seconds)}" if reading.delay_seconds else None,
                delta_color="inverse",
            )
            cols[2].metric("Free-flow", format_seconds(reading.static_duration_seconds))
            cols[3].metric("v/c", format_ratio(reading.volume_capacity_ratio))
            cols[4].metric("Flow", format_quantity(reading.derived_flow_vph, "veh/h"))
            if reading.flow_confidence:
                color = CONFIDENCE_COLORS[reading.flow_confidence]
                cols[4].markdown(
                    f'<span style="color:{color}">{reading.flow_confidence} confidence</span>',
                    unsafe_allow_html=True,
                )


# ── History chart ────────────────────────────────────────────────────────────

st.subheader("History")

segment_names = {segment.name: segment.id for segment in segments}
if segment_names:
    chosen_name = st.selectbox("Segment", list(segment_names.keys()))
    history = timeline.history_frame(samples, segment_names[chosen_name], view.time_range)

    if history.empty:
        st.warning("No samples for this segment in the selected time window.")
    else:
        fig_history = go.Figure()
        for direction, rows in history.groupby("direction"):
            fig_history.add_trace(go.Scatter(
                x=rows["requestedAt"],
                y=rows["travelTimeRatio"],
                mode="lines+markers",
                name=DIRECTION_LABELS.get(direction, direction),
                marker=dict(size=5),
                customdata=rows["derivedFlowVph"],
                hovertemplate=(
                    "%{x|%b %d %H:%M}<br>Ratio %{y:.2f}"
                    "<br>Flow %{customdata:.0f} veh/h<extra></extra>"
                ),
            ))
        fig_history.add_vline(
            x=selected_key, line_dash="dot", line_color="#888888", line_width=1,
        )
        fig_history.update_layout(
            **PLOTLY_LAYOUT_DEFAULTS,
            xaxis_title="Requested at (UTC)",
            yaxis_title="Travel-time ratio",
            legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
            height=380,
        )
        st.plotly_chart(fig_history, use_container_width=True)

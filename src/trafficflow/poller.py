"""Collect travel-time samples for every configured segment and direction."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from trafficflow.capacity import CapacityIndex
from trafficflow.client import RoutesClient, WeatherClient
from trafficflow.exceptions import TrafficFlowError
from trafficflow.flow import enrich_samples
from trafficflow.models.sample import TrafficSample, WeatherSnapshot
from trafficflow.models.segment import Coordinate, Direction, Segment
from trafficflow.store import append_samples

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PollResult:
    samples: list[TrafficSample]
    data_file: Path
    started_at: datetime
    completed_at: datetime


def segments_centroid(segments: Sequence[Segment]) -> Coordinate:
    """Mean of all segment endpoints; used as the weather lookup location."""
    points = [point for segment in segments for point in segment.endpoints]
    return Coordinate(
        latitude=sum(p.latitude for p in points) / len(points),
        longitude=sum(p.longitude for p in points) / len(points),
    )


def sample_segment(
    routes: RoutesClient,
    segment: Segment,
    direction: Direction,
    weather: WeatherSnapshot | None = None,
) -> TrafficSample:
    """Request one route for *segment* in *direction* and record the result."""
    origin, destination = segment.route_endpoints(direction)
    route = routes.compute_route(origin, destination)
    advisory = route.travel_advisory
    return TrafficSample(
        segment_id=segment.id,
        segment_name=segment.name,
        direction=direction,
        requested_at=datetime.now(timezone.utc),
        origin=origin,
        destination=destination,
        distance_meters=route.distance_meters,
        duration_seconds=route.duration_seconds,
        static_duration_seconds=route.static_duration_seconds,
        delay_seconds=route.delay_seconds,
        speed_reading_intervals=advisory.speed_reading_intervals if advisory else None,
        route_labels=route.route_labels,
        weather=weather,
    )


def fetch_weather(
    weather_client: WeatherClient | None,
    segments: Sequence[Segment],
) -> WeatherSnapshot | None:
    """Current weather at the segments' centroid; None if unavailable."""
    if weather_client is None or not segments:
        return None
    try:
        return weather_client.current(segments_centroid(segments))
    except TrafficFlowError as exc:
        logger.warning("Weather lookup failed: %s", exc)
        return None


def collect_samples(
    segments: Sequence[Segment],
    routes: RoutesClient,
    weather_client: WeatherClient | None = None,
    delay_seconds: float = 0.25,
    sleep: Callable[[float], None] = time.sleep,
) -> list[TrafficSample]:
    """Sample every allowed direction of every segment, one request at a time.

    A failed request is logged and skipped so the rest of the poll proceeds.
    """
    weather = fetch_weather(weather_client, segments)
    samples: list[TrafficSample] = []
    for segment in segments:
        for direction in segment.directions:
            try:
                sample = sample_segment(routes, segment, direction, weather)
            except TrafficFlowError as exc:
                logger.error("Failed to collect %s %s: %s", segment.id, direction, exc)
            else:
                samples.append(sample)
                logger.info(
                    "%s (%s) -> duration %ss, delay %ss",
                    segment.name, direction,
                    sample.duration_seconds if sample.duration_seconds is not None else "n/a",
                    sample.delay_seconds if sample.delay_seconds is not None else "n/a",
                )
            if delay_seconds > 0:
                sleep(delay_seconds)
    return samples


def poll_and_store(
    segments: Sequence[Segment],
    routes: RoutesClient,
    data_file: str | Path,
    weather_client: WeatherClient | None = None,
    delay_seconds: float = 0.25,
    index: CapacityIndex | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> PollResult:
    """Run one poll and append the samples to *data_file*.

    When *index* is given the samples are enriched with flow metrics before
    they are written.
    """
    started_at = datetime.now(timezone.utc)
    samples = collect_samples(segments, routes, weather_client, delay_seconds, sleep)
    data_path = Path(data_file)
    if samples:
        records = (
            enrich_samples(samples, index) if index is not None
            else [sample.to_record() for sample in samples]
        )
        append_samples(data_path, records)
        logger.info("Appended %d samples to %s", len(records), data_path)
    else:
        logger.warning("No samples collected. Nothing written to disk.")
    return PollResult(
        samples=samples,
        data_file=data_path,
        started_at=started_at,
        completed_at=datetime.now(timezone.utc),
    )

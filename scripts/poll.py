"""Run one polling pass over all segments and append the samples to the data file.

Schedule this with cron or a systemd timer for periodic sampling.
"""

from __future__ import annotations

import argparse
import logging
import sys
from contextlib import ExitStack

from trafficflow import CapacityRegistry, RoutesClient, WeatherClient, load_segments
from trafficflow.exceptions import TrafficFlowError
from trafficflow.poller import poll_and_store
from trafficflow.settings import load_settings


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--data-file", help="JSON Lines file to append to")
    parser.add_argument("--segments", help="JSON segment configuration file")
    parser.add_argument("--delay", type=float, help="Seconds to wait between requests")
    parser.add_argument("--no-weather", action="store_true", help="Skip the weather lookup")
    parser.add_argument("--enrich", action="store_true", help="Add flow metrics before writing")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logger = logging.getLogger("trafficflow.poll")

    try:
        settings = load_settings()
        segments = load_segments(args.segments or settings.segments_file)
        registry = CapacityRegistry(segments)
        with ExitStack() as stack:
            routes = stack.enter_context(RoutesClient(settings.require_api_key()))
            weather = None if args.no_weather else stack.enter_context(WeatherClient())
            result = poll_and_store(
                segments,
                routes,
                args.data_file or settings.data_file,
                weather_client=weather,
                delay_seconds=args.delay if args.delay is not None else settings.poll_delay_seconds,
                index=registry.index if args.enrich else None,
            )
    except TrafficFlowError as exc:
        logger.error("Poll failed: %s", exc)
        return 1

    logger.info(
        "Collected %d samples (%s -> %s)",
        len(result.samples),
        result.started_at.isoformat(),
        result.completed_at.isoformat(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

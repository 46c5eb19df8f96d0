"""Recompute length, capacity and BPR flow estimates for every stored sample."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from trafficflow import load_segments
from trafficflow.enrich import enrich_file
from trafficflow.exceptions import TrafficFlowError
from trafficflow.settings import load_settings
from trafficflow.store import backup_path_for


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--data-file", help="JSON Lines file to enrich in place")
    parser.add_argument("--segments", help="JSON segment configuration file")
    parser.add_argument("--no-backup", action="store_true", help="Do not keep a backup copy")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logger = logging.getLogger("trafficflow.enrich")

    try:
        settings = load_settings()
        data_file = Path(args.data_file) if args.data_file else settings.data_file
        backup_file = None if args.no_backup else backup_path_for(data_file)
        segments = load_segments(args.segments or settings.segments_file)
        count = enrich_file(data_file, segments, backup_file=backup_file)
    except (TrafficFlowError, OSError) as exc:
        logger.error("Failed to enrich samples: %s", exc)
        return 1

    message = f"Enriched {count} samples with length, capacity, and flow estimates."
    if backup_file is not None:
        message += f" Backup saved to {backup_file}"
    logger.info(message)
    return 0


if __name__ == "__main__":
    sys.exit(main())

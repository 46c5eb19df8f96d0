"""Batch enrichment of a stored sample file."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from trafficflow.capacity import build_capacity_index
from trafficflow.flow import enrich_samples
from trafficflow.models.segment import Segment
from trafficflow.store import read_samples, write_samples

logger = logging.getLogger(__name__)


def enrich_file(
    data_file: str | Path,
    segments: Sequence[Segment],
    backup_file: str | Path | None = None,
) -> int:
    """Recompute flow metrics for every record in *data_file*, in place.

    Existing derived fields are overwritten, so running this twice gives the
    same file. Returns the number of records written.
    """
    records = read_samples(data_file)
    index = build_capacity_index(segments)
    enriched = enrich_samples(records, index)
    count = write_samples(data_file, enriched, backup_path=backup_file)
    logger.info("Enriched %d samples in %s", count, data_file)
    return count

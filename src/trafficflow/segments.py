"""Monitored street segments and segment-file loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from trafficflow.exceptions import ConfigurationError
from trafficflow.models.segment import Segment

_SEGMENT_LIST = TypeAdapter(list[Segment])

DEFAULT_SEGMENT_RECORDS: list[dict[str, Any]] = [
    {
        "id": "via-don-luigi-sturzo",
        "name": "Via Don Luigi Sturzo",
        "endpoints": [
            {"latitude": 45.5199214, "longitude": 9.3261225},
            {"latitude": 45.5185424, "longitude": 9.3228744},
        ],
    },
    {
        "id": "via-sant-ambrogio",
        "name": "Via Sant'Ambrogio",
        "endpoints": [
            {"latitude": 45.516732, "longitude": 9.3232577},
            {"latitude": 45.5178105, "longitude": 9.3229557},
        ],
    },
    {
        "id": "via-don-lorenzo-milani",
        "name": "Via Don Lorenzo Milani",
        "endpoints": [
            {"latitude": 45.5164186, "longitude": 9.3214657},
            {"latitude": 45.5178105, "longitude": 9.3229557},
        ],
    },
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
        "id": "via-filippo-corridoni",
        "name": "Via Filippo Corridoni",
        "endpoints": [
            {"latitude": 45.5199214, "longitude": 9.3261225},
            {"latitude": 45.5168092, "longitude": 9.326232},
        ],
    },
    {
        "id": "via-leonardo-da-vinci",
        "name": "Via Leonardo da Vinci",
        "endpoints": [
            {"latitude": 45.5227546, "longitude": 9.3268995},
            {"latitude": 45.522077, "longitude": 9.3269528},
        ],
    },
    {
        "id": "via-don-primo-mazzolari",
        "name": "Via Don Primo Mazzolari",
        "endpoints": [
            {"latitude": 45.5169218, "longitude": 9.3269703},
            {"latitude": 45.5168306, "longitude": 9.3265576},
        ],
    },
]


def parse_segments(records: list[dict[str, Any]]) -> list[Segment]:
    """Validate raw segment records.

    Raises ConfigurationError on schema violations or duplicate ids.
    """
    try:
        segments = _SEGMENT_LIST.validate_python(records)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid segment configuration: {exc}") from exc

    seen: set[str] = set()
    for segment in segments:
        if segment.id in seen:
            raise ConfigurationError(f"Duplicate segment id: {segment.id!r}")
        seen.add(segment.id)
    return segments


def load_segments(path: str | Path | None = None) -> list[Segment]:
    """Load segments from a JSON file, or the built-in defaults when *path* is None."""
    if path is None:
        return parse_segments(DEFAULT_SEGMENT_RECORDS)
    path = Path(path)
    try:
        records = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Cannot read segment file {path}: {exc}") from exc
    if not isinstance(records, list):
        raise ConfigurationError(f"Segment file {path} must contain a JSON list")
    return parse_segments(records)

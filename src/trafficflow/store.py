"""JSON Lines persistence for traffic samples."""

from __future__ import annotations

import json
import logging
import os
import shutil
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from trafficflow.exceptions import MalformedSampleError

logger = logging.getLogger(__name__)


def serialize_record(record: Mapping[str, Any]) -> str:
    """Serialise one record to a single JSON line (no trailing newline).

    NaN and Infinity are rejected so that every line is strict JSON.
    """
    return json.dumps(record, ensure_ascii=False, allow_nan=False)


def backup_path_for(path: str | Path) -> Path:
    """Sibling path that receives the previous contents before a rewrite."""
    path = Path(path)
    return path.with_name(f"{path.stem}.backup{path.suffix}")


def read_samples(path: str | Path) -> list[dict[str, Any]]:
    """Read every record from a JSON Lines file; a missing file yields []."""
    path = Path(path)
    if not path.exists():
        return []
    records: list[dict[str, Any]] = []
    with path.open("r", encoding="utf-8") as fh:
        for line_number, line in enumerate(fh, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as exc:
                raise MalformedSampleError(f"{path}:{line_number}: invalid JSON: {exc}") from exc
            if not isinstance(record, dict):
                raise MalformedSampleError(f"{path}:{line_number}: expected a JSON object")
            records.append(record)
    return records


def append_samples(path: str | Path, records: Iterable[Mapping[str, Any]]) -> int:
    """Append records to the file, creating it and its directory if needed."""
    lines = [serialize_record(record) for record in records]
    if not lines:
        return 0
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as fh:
        fh.write("\n".join(lines) + "\n")
    return len(lines)


def write_samples(
    path: str | Path,
    records: Iterable[Mapping[str, Any]],
    backup_path: str | Path | None = None,
) -> int:
    """Replace the file's contents, copying the previous file to *backup_path* first."""
    path = Path(path)
    lines = [serialize_record(record) for record in records]
    path.parent.mkdir(parents=True, exist_ok=True)
    if backup_path is not None and path.exists():
        shutil.copyfile(path, backup_path)
        logger.info("Backed up %s to %s", path, backup_path)

    tmp_path = path.with_name(f"{path.name}.tmp")
    with tmp_path.open("w", encoding="utf-8") as fh:
        if lines:
            fh.write("\n".join(lines) + "\n")
    os.replace(tmp_path, path)
    return len(lines)

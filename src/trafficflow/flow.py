"""Traffic-flow estimation from travel-time samples.

Observed travel time ``t`` and free-flow travel time ``t0`` are related to the
volume/capacity ratio by the BPR function::

    t = t0 * (1 + alpha * (v/c) ** beta)

Inverting it gives ``v/c = ((t / t0 - 1) / alpha) ** (1 / beta)``, and
multiplying by the segment capacity gives an estimated flow in vehicles/hour.
Samples at or below free-flow time are attributed zero congestion.

Missing or degenerate measurements never raise: they produce null metrics
with ``"low"`` confidence so one bad record cannot abort a batch.
"""

from __future__ import annotations

import math
import sys
from collections.abc import Iterable, Mapping
from typing import Any

from trafficflow.capacity import CapacityIndex
from trafficflow.exceptions import MalformedSampleError
from trafficflow.models.sample import FlowConfidence, FlowEstimationModel, FlowMetrics, TrafficSample

HIGH_CONFIDENCE_MAX_RATIO = 0.8
MEDIUM_CONFIDENCE_MAX_RATIO = 1.2

_REQUIRED_FIELDS = ("segmentId", "durationSeconds", "staticDurationSeconds")
_MAX_LOG_FLOAT = math.log(sys.float_info.max)


def _as_number(record: Mapping[str, Any], key: str) -> float | None:
    value = record[key]
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedSampleError(f"{key} must be a number or null, got {value!r}")
    try:
        return float(value)
    except OverflowError as exc:
        raise MalformedSampleError(f"{key} is out of range for a float") from exc


def _read_sample(sample: TrafficSample | Mapping[str, Any]) -> tuple[str, float | None, float | None]:
    """Extract (segment_id, duration, static_duration) or raise on a malformed record."""
    if isinstance(sample, TrafficSample):
        return sample.segment_id, sample.duration_seconds, sample.static_duration_seconds
    if not isinstance(sample, Mapping):
        raise MalformedSampleError(
            f"Expected a sample mapping, got {type(sample).__name__}",
        )
    missing = [key for key in _REQUIRED_FIELDS if key not in sample]
    if missing:
        raise MalformedSampleError(f"Sample is missing required fields: {', '.join(missing)}")
    segment_id = sample["segmentId"]
    if not isinstance(segment_id, str):
        raise MalformedSampleError(f"segmentId must be a string, got {segment_id!r}")
    return (
        segment_id,
        _as_number(sample, "durationSeconds"),
        _as_number(sample, "staticDurationSeconds"),
    )


def _finite_or_none(value: float | None) -> float | None:
    if value is None or not math.isfinite(value):
        return None
    return value


def invert_bpr(time_ratio: float, alpha: float, beta: float) -> float | None:
    """Return the v/c ratio that explains *time_ratio*, or None if not finite."""
    if time_ratio <= 1:
        return 0.0
    adjusted = max((time_ratio - 1) / alpha, 0.0)
    if not math.isfinite(adjusted):
        return None
    if adjusted == 0:
        return 0.0
    # x ** (1/beta) overflows for large x when beta < 1
    if math.log(adjusted) / beta > _MAX_LOG_FLOAT:
        return None
    ratio = _finite_or_none(adjusted ** (1 / beta))
    if ratio is not None and ratio < 0:
        ratio = 0.0
    return ratio


def classify_confidence(
    volume_capacity_ratio: float | None,
    derived_flow_vph: float | None,
) -> FlowConfidence:
    """Label an estimate by completeness and congestion severity."""
    if volume_capacity_ratio is None or derived_flow_vph is None:
        return "low"
    if volume_capacity_ratio <= HIGH_CONFIDENCE_MAX_RATIO:
        return "high"
    if volume_capacity_ratio > MEDIUM_CONFIDENCE_MAX_RATIO:
        return "low"
    return "medium"


def derive_flow_metrics(
    sample: TrafficSample | Mapping[str, Any],
    index: CapacityIndex,
) -> FlowMetrics:
    """Derive length, free-flow speed, v/c, flow and confidence for one sample.

    Args:
        sample: A raw camelCase record or a TrafficSample. Only ``segmentId``,
            ``durationSeconds`` and ``staticDurationSeconds`` are read.
        index: Capacity lookup built by ``build_capacity_index``.

    Raises:
        MalformedSampleError: If a required key is absent or holds a
            non-numeric value. Null, zero, negative or non-finite numbers
            are not errors.
    """
    segment_id, duration, static_duration = _read_sample(sample)

    meta = index.get(segment_id)
    if meta is None:
        return FlowMetrics()

    length_meters = meta.length_meters
    capacity_vph = meta.capacity_vph
    model = FlowEstimationModel(alpha=meta.alpha, beta=meta.beta)

    free_flow_speed_kph = None
    if length_meters is not None and static_duration is not None and static_duration > 0:
        free_flow_speed_kph = _finite_or_none((length_meters / static_duration) * 3.6)

    if (
        duration is None
        or static_duration is None
        or duration <= 0
        or static_duration <= 0
        or capacity_vph is None
        or capacity_vph <= 0
    ):
        return FlowMetrics(
            length_meters=length_meters,
            free_flow_speed_kph=free_flow_speed_kph,
            capacity_vph=capacity_vph,
            flow_confidence="low",
            flow_estimation_model=model,
        )

    time_ratio = duration / static_duration
    volume_capacity_ratio = invert_bpr(time_ratio, meta.alpha, meta.beta)

    derived_flow_vph = None
    if volume_capacity_ratio is not None:
        derived_flow_vph = _finite_or_none(volume_capacity_ratio * capacity_vph)

    return FlowMetrics(
        length_meters=length_meters,
        free_flow_speed_kph=free_flow_speed_kph,
        capacity_vph=capacity_vph,
        volume_capacity_ratio=volume_capacity_ratio,
        derived_flow_vph=derived_flow_vph,
        flow_confidence=classify_confidence(volume_capacity_ratio, derived_flow_vph),
        flow_estimation_model=model,
    )


def enrich_sample(
    sample: TrafficSample | Mapping[str, Any],
    index: CapacityIndex,
) -> dict[str, Any]:
    """Return a new record with the derived metrics merged over the input fields."""
    metrics = derive_flow_metrics(sample, index)
    record = sample.to_record() if isinstance(sample, TrafficSample) else dict(sample)
    record.update(metrics.to_record())
    return record


def enrich_samples(
    samples: Iterable[TrafficSample | Mapping[str, Any]],
    index: CapacityIndex,
) -> list[dict[str, Any]]:
    """Enrich every sample against the same index version."""
    return [enrich_sample(sample, index) for sample in samples]

"""Abstract base repository for traffic sample access."""

from __future__ import annotations

from abc import ABC, abstractmethod

from trafficflow.models.segment import Segment

from .types import SampleRecord


class TrafficDataRepository(ABC):
    """Storage-agnostic interface for samples and segment configuration."""

    @abstractmethod
    def get_samples(self) -> list[SampleRecord]: ...

    @abstractmethod
    def get_segments(self) -> list[Segment]: ...

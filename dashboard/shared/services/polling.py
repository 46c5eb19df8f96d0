"""On-demand polling from the dashboard."""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence

from trafficflow.capacity import CapacityRegistry
from trafficflow.client import RoutesClient, WeatherClient
from trafficflow.models.segment import Segment
from trafficflow.poller import PollResult, poll_and_store
from trafficflow.settings import Settings

from ..api_logging import log_service_call


class PollInProgressError(RuntimeError):
    """Another poll is already running in this process."""


PollRunner = Callable[[Sequence[Segment]], PollResult]


class PollService:
    """Runs one poll at a time; a second concurrent request is rejected, not queued."""

    def __init__(
        self,
        settings: Settings,
        registry: CapacityRegistry,
        runner: PollRunner | None = None,
    ) -> None:
        self._settings = settings
        self._registry = registry
        self._runner = runner or self._run_poll
        self._lock = threading.Lock()

    @property
    def in_progress(self) -> bool:
        return self._lock.locked()

    @log_service_call
    def poll_now(self, segments: Sequence[Segment]) -> PollResult:
        if not self._lock.acquire(blocking=False):
            raise PollInProgressError("Poll already in progress")
        try:
            return self._runner(segments)
        finally:
            self._lock.release()

    def _run_poll(self, segments: Sequence[Segment]) -> PollResult:
        api_key = self._settings.require_api_key()
        with RoutesClient(api_key) as routes, WeatherClient() as weather:
            return poll_and_store(
                segments,
                routes,
                self._settings.data_file,
                weather_client=weather,
                delay_seconds=self._settings.poll_delay_seconds,
                index=self._registry.index,
            )

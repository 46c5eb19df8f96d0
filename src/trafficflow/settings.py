"""Runtime settings read from the environment and an optional .env file."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from trafficflow.exceptions import ConfigurationError

DEFAULT_DATA_FILE = Path("data") / "traffic_samples.jsonl"
DEFAULT_POLL_DELAY_SECONDS = 0.25


@dataclass(frozen=True)
class Settings:
    google_maps_api_key: str | None
    data_file: Path
    segments_file: Path | None
    poll_delay_seconds: float

    def require_api_key(self) -> str:
        if not self.google_maps_api_key:
            raise ConfigurationError(
                "GOOGLE_MAPS_API_KEY missing. Set it in your environment or .env file.",
            )
        return self.google_maps_api_key


def load_settings(dotenv_path: str | Path | None = None) -> Settings:
    """Build Settings from environment variables after loading .env.

    Without an explicit path, .env is searched for from the working directory
    upwards. Variables already set in the environment take precedence.
    """
    load_dotenv(dotenv_path or find_dotenv(usecwd=True))

    raw_delay = os.getenv("TRAFFICFLOW_POLL_DELAY")
    try:
        delay = float(raw_delay) if raw_delay else DEFAULT_POLL_DELAY_SECONDS
    except ValueError as exc:
        raise ConfigurationError(f"TRAFFICFLOW_POLL_DELAY must be a number, got {raw_delay!r}") from exc
    if delay < 0:
        raise ConfigurationError("TRAFFICFLOW_POLL_DELAY must not be negative")

    segments_file = os.getenv("TRAFFICFLOW_SEGMENTS_FILE")
    return Settings(
        google_maps_api_key=os.getenv("GOOGLE_MAPS_API_KEY") or None,
        data_file=Path(os.getenv("TRAFFICFLOW_DATA_FILE") or DEFAULT_DATA_FILE),
        segments_file=Path(segments_file) if segments_file else None,
        poll_delay_seconds=delay,
    )

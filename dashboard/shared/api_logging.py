"""Call logging for the traffic dashboard data and service layers.

Sample and segment lists are logged by count rather than content. Timeline
calls also record the range preset and the snapshot that ended up selected.
"""

from __future__ import annotations

import functools
import logging
import os
import threading
import time
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Callable, TypeVar

import pandas as pd

from trafficflow.models.segment import Segment
from trafficflow.poller import PollResult
from trafficflow.snapshots import RangePreset

F = TypeVar("F", bound=Callable[..., Any])

_LOG_DIR = os.path.join(os.path.dirname(__file__), "..", "logs")
_LOG_FILE = os.path.join(_LOG_DIR, "api_calls.log")
_LOGGER_NAME = "traffic_dashboard.api"

_logger: logging.Logger | None = None
_logger_lock = threading.Lock()


def _get_logger() -> logging.Logger:
    """Return the file logger, creating log dir and handler on first use."""
    global _logger
    if _logger is not None:
        return _logger

    with _logger_lock:
        if _logger is not None:
            return _logger

        os.makedirs(_LOG_DIR, exist_ok=True)

        logger = logging.getLogger(_LOGGER_NAME)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False

        if not logger.handlers:
            handler = logging.FileHandler(_LOG_FILE, encoding="utf-8")
            handler.setFormatter(
                logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"),
            )
            logger.addHandler(handler)
        _logger = logger

    return _logger


def _describe_arg(value: Any) -> str:
    # lists are logged by size only
    if isinstance(value, RangePreset):
        return f"preset={value.value!r}"
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return f"<{_count(value)}>"
    return repr(value)


def _count(items: list | tuple) -> str:
    if items and all(isinstance(item, Segment) for item in items):
        return f"{len(items)} segments"
    if items and all(isinstance(item, Mapping) for item in items):
        return f"{len(items)} samples"
    return f"{len(items)} items"


def _summarise_args(args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
    parts = [_describe_arg(a) for a in args[1:]]
    parts += [
        _describe_arg(v) if isinstance(v, RangePreset) else f"{k}={_describe_arg(v)}"
        for k, v in kwargs.items()
    ]
    return ", ".join(parts)


def _describe_result(result: Any) -> str:
    if isinstance(result, PollResult):
        return f"{_count(result.samples)} written to {result.data_file.name}"
    if isinstance(result, pd.DataFrame):
        return f"{len(result)} history rows"
    if isinstance(result, (list, tuple)):
        return _count(result)
    visible = getattr(result, "visible", None)
    if isinstance(visible, list) and hasattr(result, "selected_key"):
        selected = result.selected_key.isoformat() if result.selected_key else "none"
        return f"{len(visible)}/{len(result.groups)} snapshots visible, selected {selected}"
    return type(result).__name__


def log_api_call(fn: F) -> F:
    """Decorator that logs data-layer reads (samples, segment config) to the API log file."""

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger = _get_logger()
        arg_str = _summarise_args(args, kwargs)
        logger.info("CALL: %s(%s)", fn.__qualname__, arg_str)

        start = time.monotonic()
        try:
            result = fn(*args, **kwargs)
        except Exception as exc:
            logger.error(
                "FAIL: %s(%s) -> %s: %s (%.3fs)",
                fn.__qualname__, arg_str, type(exc).__name__, exc, time.monotonic() - start,
            )
            raise
        logger.info(
            "OK: %s(%s) -> %s (%.3fs)",
            fn.__qualname__, arg_str, _describe_result(result), time.monotonic() - start,
        )
        return result

    return wrapper  # type: ignore[return-value]


def log_service_call(fn: F) -> F:
    """Decorator that logs timeline and poll service calls to the API log file."""

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger = _get_logger()
        logger.info("SERVICE CALL: %s(%s)", fn.__qualname__, _summarise_args(args, kwargs))

        start = time.monotonic()
        try:
            result = fn(*args, **kwargs)
        except Exception as exc:
            logger.error(
                "SERVICE FAIL: %s -> %s: %s (%.3fs)",
                fn.__qualname__, type(exc).__name__, exc, time.monotonic() - start,
            )
            raise
        logger.info(
            "SERVICE OK: %s -> %s (%.3fs)",
            fn.__qualname__, _describe_result(result), time.monotonic() - start,
        )
        return result

    return wrapper  # type: ignore[return-value]

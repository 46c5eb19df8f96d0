"""Data-layer error for the traffic dashboard."""

from __future__ import annotations


class TrafficDataError(Exception):
    """Sample or configuration loading failed. UI catches only this."""

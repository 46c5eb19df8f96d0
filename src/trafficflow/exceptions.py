"""Custom exceptions for the trafficflow package."""

from __future__ import annotations


class TrafficFlowError(Exception):
    """Base exception for all trafficflow errors."""


class RoutesConnectionError(TrafficFlowError):
    """Raised when the client cannot connect to an upstream API."""


class RoutesTimeoutError(TrafficFlowError):
    """Raised when a request to an upstream API times out."""


class RoutesAPIError(TrafficFlowError):
    """Raised when an upstream API returns an error response (4xx/5xx)."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}")


class RoutesValidationError(TrafficFlowError):
    """Raised when API response data fails model validation."""


class ConfigurationError(TrafficFlowError):
    """Raised for invalid segment configuration or missing settings."""


class MalformedSampleError(TrafficFlowError, ValueError):
    """Raised when a sample record violates the input contract.

    Missing or degenerate measurements are not malformed; they produce null
    metrics. This is reserved for records lacking required keys entirely or
    carrying values of the wrong type.
    """

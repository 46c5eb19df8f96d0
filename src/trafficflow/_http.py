"""Low-level HTTP transport layer wrapping httpx."""

from __future__ import annotations

from typing import Any

import httpx

from trafficflow.exceptions import (
    RoutesAPIError,
    RoutesConnectionError,
    RoutesTimeoutError,
)

DEFAULT_TIMEOUT = 30.0


def _handle_response(response: httpx.Response) -> Any:
    """Validate response status and return parsed JSON."""
    if response.status_code >= 400:
        raise RoutesAPIError(
            status_code=response.status_code,
            message=response.text,
        )
    return response.json()


class SyncTransport:
    """Synchronous HTTP transport using httpx.Client."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json", **(headers or {})},
        )

    def get(self, endpoint: str, params: list[tuple[str, str]]) -> Any:
        """Perform a GET request and return parsed JSON."""
        try:
            response = self._client.get(endpoint, params=params)
        except httpx.ConnectError as exc:
            raise RoutesConnectionError(str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise RoutesTimeoutError(str(exc)) from exc
        return _handle_response(response)

    def post(
        self,
        endpoint: str,
        body: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Perform a POST request with a JSON body and return parsed JSON."""
        try:
            response = self._client.post(endpoint, json=body, headers=headers)
        except httpx.ConnectError as exc:
            raise RoutesConnectionError(str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise RoutesTimeoutError(str(exc)) from exc
        return _handle_response(response)

    def close(self) -> None:
        self._client.close()

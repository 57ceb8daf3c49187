"""
HTTP Client Base
================

Shared ``httpx.AsyncClient`` handling for the Horizon and approval-server
clients. A caller may inject its own client (for connection pooling or a
``MockTransport`` in tests); a client created here is owned and closed here.

Transport failures are translated into ``NetworkError``. Nothing is retried.
"""

from typing import Any

import httpx

from regulated_assets.core.exceptions import ErrorCode, NetworkError, ParseError

DEFAULT_TIMEOUT = 30.0


class BaseHTTPClient:
    """Shared HTTP client management for the network-facing components."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._headers = headers or {}

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, headers=self._headers)
            self._owns_client = True
        elif self._client.is_closed:
            raise NetworkError("HTTP client is closed")
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Send a request; raise ``NetworkError`` on any request failure."""
        try:
            return await self._get_client().request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise NetworkError(
                f"{method} {url} timed out", error_code=ErrorCode.TIMEOUT
            ) from e
        except httpx.RequestError as e:
            raise NetworkError(f"{method} {url} failed: {e}") from e

    @staticmethod
    def _json_object(response: httpx.Response) -> dict[str, Any] | None:
        """Return the decoded body if it is a JSON object, else None."""
        try:
            data = response.json()
        except ValueError:
            return None
        return data if isinstance(data, dict) else None

    @classmethod
    def _require_json_object(cls, response: httpx.Response) -> dict[str, Any]:
        """
        Decode a reply that must be a JSON object.

        A JSON object is returned whatever the status code, since protocol
        servers report refusals in the body. Without one, a non-2xx status is
        a ``NetworkError`` and a 2xx status is a ``ParseError``.
        """
        data = cls._json_object(response)
        if data is not None:
            return data
        if not response.is_success:
            raise NetworkError(
                f"HTTP {response.status_code} from {response.request.url}",
                status_code=response.status_code,
                details={'body': response.text[:500]},
            )
        raise ParseError(
            f"Response from {response.request.url} is not a JSON object",
            details={'body': response.text[:500]},
        )

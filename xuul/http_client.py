"""Shared outbound HTTP client."""

from __future__ import annotations

from typing import Any

import httpx

from xuul.response import UpstreamError

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 12.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/70.0.3538.102 Safari/537.36 Edge/18.18362"
)

_REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL)


class HttpClient:
    """An async HTTP client that turns transport failures into UpstreamError."""

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        if client is None:
            client = httpx.AsyncClient(headers={"User-Agent": USER_AGENT}, follow_redirects=True)
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """The underlying httpx client."""
        return self._client

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.get(url, **kwargs)
        except _REQUEST_ERRORS as exc:
            raise UpstreamError(f"request to {url} failed: {exc}") from exc

    async def post(self, url: str, body: Any) -> httpx.Response:
        try:
            return await self._client.post(url, json=body)
        except _REQUEST_ERRORS as exc:
            raise UpstreamError(f"request to {url} failed: {exc}") from exc

    async def get_json(self, url: str, **kwargs: Any) -> Any:
        """GET ``url`` and decode the body as JSON, whatever the status."""
        response = await self.get(url, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(f"error decoding response body: {exc}") from exc

    async def aclose(self) -> None:
        await self._client.aclose()
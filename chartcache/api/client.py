"""Async httpx wrapper with bearer auth for the evaluations API."""

from __future__ import annotations

from typing import Any

import httpx

DEFAULT_BASE_URL = "http://localhost:3001"


class EvaluationsAPIClient:
    """Async HTTP client for the evaluations backend."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: str = "",
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ) -> None:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        kwargs: dict[str, Any] = {"base_url": base_url, "timeout": timeout, "headers": headers}
        if transport is not None:
            kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**kwargs)

    async def close(self) -> None:
        await self._client.aclose()

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET path and return the decoded JSON body. Raises on HTTP errors."""
        # Drop unset filters
        params = {k: v for k, v in (params or {}).items() if v is not None}
        response = await self._client.get(path, params=params)
        response.raise_for_status()
        return response.json()

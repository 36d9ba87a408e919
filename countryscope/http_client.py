from __future__ import annotations

import asyncio
from collections.abc import Callable

import httpx

from .config import Settings, get_settings


def build_http_client(settings: Settings) -> httpx.AsyncClient:
    """Client for the JSON providers; the timeout bounds every upstream call."""
    limits = httpx.Limits(
        max_connections=settings.http_max_connections,
        max_keepalive_connections=settings.http_max_keepalive,
    )
    return httpx.AsyncClient(
        timeout=settings.http_timeout,
        limits=limits,
        headers={"User-Agent": settings.http_user_agent, "Accept": "application/json"},
        follow_redirects=True,
    )


class SharedHttpClient:
    """One upstream client per process, rebuilt if it was closed."""

    def __init__(self, settings_factory: Callable[[], Settings] = get_settings) -> None:
        self._settings_factory = settings_factory
        self._client: httpx.AsyncClient | None = None
        self._lock = asyncio.Lock()

    @property
    def active(self) -> bool:
        return self._client is not None and not self._client.is_closed

    async def acquire(self) -> httpx.AsyncClient:
        if not self.active:
            async with self._lock:
                if not self.active:
                    self._client = build_http_client(self._settings_factory())
        return self._client

    async def close(self) -> None:
        async with self._lock:
            client, self._client = self._client, None
        if client is not None:
            await client.aclose()


_shared = SharedHttpClient()


async def get_http_client() -> httpx.AsyncClient:
    return await _shared.acquire()


async def shutdown_http_client() -> None:
    await _shared.close()

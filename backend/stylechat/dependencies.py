"""FastAPI dependency injection."""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx

from stylechat.config import Settings, settings


def get_settings() -> Settings:
    return settings


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """One outbound client per request; timeouts are set per call."""
    async with httpx.AsyncClient() as client:
        yield client

"""POST /api/anthropic/messages -- same-origin relay to the Anthropic Messages API.

Keeps the API key on the server: the browser (or the edit engine pointed at a
relative endpoint) posts the request body here and we forward it verbatim.
"""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from stylechat.config import Settings
from stylechat.dependencies import get_http_client, get_settings
from stylechat.engine.config import ANTHROPIC_MESSAGES_URL, ANTHROPIC_VERSION

router = APIRouter()
logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 300_000
MIN_TIMEOUT_MS = 60_000


def proxy_timeout_seconds(settings: Settings) -> float:
    timeout_ms = settings.anthropic_proxy_timeout_ms or DEFAULT_TIMEOUT_MS
    return max(MIN_TIMEOUT_MS, timeout_ms) / 1000


@router.post("/anthropic/messages")
async def anthropic_messages(
    request: Request,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> Response:
    logger.info("POST /api/anthropic/messages -- forwarding to Anthropic")

    key = settings.anthropic_api_key.strip()
    if not key:
        return JSONResponse(
            status_code=500,
            content={"error": "ANTHROPIC_API_KEY is not set. Add it to a .env file in the project root and restart the server."},
        )

    body = await request.body()
    try:
        upstream = await client.post(
            ANTHROPIC_MESSAGES_URL,
            content=body,
            headers={
                "Content-Type": "application/json",
                "x-api-key": key,
                "anthropic-version": ANTHROPIC_VERSION,
            },
            timeout=proxy_timeout_seconds(settings),
        )
    except httpx.TimeoutException:
        logger.warning("Anthropic request timed out")
        return JSONResponse(
            status_code=504,
            content={"error": "Request to Anthropic timed out. Try a shorter prompt or try again."},
        )
    except httpx.HTTPError as e:
        logger.warning("Anthropic proxy request failed: %s", e)
        return JSONResponse(status_code=502, content={"error": str(e) or "Proxy request failed"})

    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        media_type=upstream.headers.get("content-type", "application/json"),
    )

"""POST /api/style/edit -- natural-language style edit via JSON Patch."""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends

from stylechat.config import Settings
from stylechat.dependencies import get_http_client, get_settings
from stylechat.engine.config import EditConfig
from stylechat.engine.orchestrator import edit_style
from stylechat.models.requests import EditStyleRequest
from stylechat.models.style import EditResult

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/style/edit", response_model=EditResult)
async def edit(
    req: EditStyleRequest,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> EditResult:
    # Failures are part of the result, not HTTP errors
    config = EditConfig.from_settings(settings)
    logger.info("Style edit: %d layers, %d history turns", len(req.style.get("layers") or []), len(req.history))
    return await edit_style(req.style, req.prompt, req.history, config, client=client)

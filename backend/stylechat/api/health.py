"""Health check + meta endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from stylechat.config import Settings
from stylechat.dependencies import get_settings
from stylechat.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(settings: Settings = Depends(get_settings)) -> HealthResponse:
    return HealthResponse(status="ok", llm_configured=bool(settings.anthropic_api_key.strip()))


@router.get("/prompts")
async def prompts() -> dict[str, str]:
    from stylechat.llm.prompts import get_all_templates

    return get_all_templates()

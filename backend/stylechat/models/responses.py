"""API response models."""

from __future__ import annotations

from pydantic import BaseModel

from stylechat import __version__


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = __version__
    llm_configured: bool = False

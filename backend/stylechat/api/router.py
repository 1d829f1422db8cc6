"""Master API router; mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from stylechat.api import edit, health, proxy

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(edit.router)
api_router.include_router(proxy.router)

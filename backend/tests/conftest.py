"""Shared test fixtures."""

from __future__ import annotations

import asyncio
import copy
import json
from typing import Any, Callable

import httpx
import pytest

from stylechat.engine.config import EditConfig
from stylechat.engine.orchestrator import edit_style


# Sample styles (MapLibre style spec, trimmed)

BASIC_STYLE: dict[str, Any] = {
    "version": 8,
    "id": "basic",
    "name": "Basic",
    "sources": {
        "openmaptiles": {"type": "vector", "url": "https://tiles.example.com/tiles.json"},
    },
    "glyphs": "https://fonts.example.com/{fontstack}/{range}.pbf",
    "layers": [
        {"id": "background", "type": "background", "paint": {"background-color": "#f8f4f0"}},
        {
            "id": "roads_minor",
            "type": "line",
            "source": "openmaptiles",
            "source-layer": "transportation",
            "paint": {
                "line-color": "#fff",
                "line-width": ["interpolate", ["linear"], ["zoom"], 12, 0.5, 18, 6],
            },
        },
        {
            "id": "landuse_park",
            "type": "fill",
            "source": "openmaptiles",
            "source-layer": "park",
            "paint": {"fill-opacity": 0.6},
        },
        {
            "id": "water",
            "type": "fill",
            "source": "openmaptiles",
            "source-layer": "water",
            "paint": {"fill-color": "#a0c8f0"},
        },
        {
            "id": "place/label",
            "type": "symbol",
            "source": "openmaptiles",
            "source-layer": "place",
            "layout": {"text-field": "{name}", "text-size": 12},
        },
    ],
}

ROADS_ONLY_STYLE: dict[str, Any] = {
    "version": 8,
    "id": "roads",
    "sources": {"openmaptiles": {"type": "vector", "url": "https://tiles.example.com/tiles.json"}},
    "layers": [
        {
            "id": "roads_minor",
            "type": "line",
            "source": "openmaptiles",
            "source-layer": "transportation",
            "paint": {"line-color": "#fff"},
        },
    ],
}


def make_envelope(text: str) -> dict[str, Any]:
    """A Messages API response carrying a single text block."""
    return {
        "id": "msg_01",
        "type": "message",
        "role": "assistant",
        "model": "claude-3-5-haiku-latest",
        "content": [{"type": "text", "text": text}],
        "stop_reason": "end_turn",
        "usage": {"input_tokens": 1200, "output_tokens": 40},
    }


def reply_with(text: str, status: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    """Handler for httpx.MockTransport answering every request with ``text``."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=make_envelope(text))

    return handler


def run_edit(
    style: dict[str, Any],
    prompt: str,
    handler: Callable[[httpx.Request], httpx.Response],
    history: list | None = None,
    config: EditConfig | None = None,
    **kwargs: Any,
):
    """Drive edit_style against a mocked endpoint."""

    async def _go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await edit_style(
                style,
                prompt,
                history,
                config or EditConfig(api_key="test-key"),
                client=client,
                **kwargs,
            )

    return asyncio.run(_go())


def patch_text(*ops: dict[str, Any]) -> str:
    return json.dumps(list(ops))


@pytest.fixture
def basic_style() -> dict[str, Any]:
    return copy.deepcopy(BASIC_STYLE)


@pytest.fixture
def roads_style() -> dict[str, Any]:
    return copy.deepcopy(ROADS_ONLY_STYLE)

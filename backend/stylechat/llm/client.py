"""Messages API call over httpx: one request, typed failures."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from stylechat.engine.config import EditConfig
from stylechat.engine.errors import CredentialMissing, HttpError, MalformedEnvelope, NetworkFailure

logger = logging.getLogger(__name__)


def build_headers(config: EditConfig) -> dict[str, str]:
    headers = {
        "Content-Type": "application/json",
        "anthropic-version": config.anthropic_version,
    }
    # The proxy injects its own key server-side
    if not config.uses_proxy and config.api_key:
        headers["x-api-key"] = config.api_key
    return headers


def endpoint_url(config: EditConfig) -> str:
    if config.uses_proxy:
        return config.proxy_base_url.rstrip("/") + config.api_url
    return config.api_url


async def post_messages(
    payload: dict[str, Any],
    config: EditConfig,
    client: httpx.AsyncClient | None = None,
) -> Any:
    """POST ``payload`` to the model endpoint and return the decoded envelope.

    Raises CredentialMissing before any I/O when a direct (non-proxy) endpoint
    has no key, NetworkFailure on transport errors and timeouts, HttpError on
    non-2xx responses and MalformedEnvelope when the body is not JSON.
    """
    if not config.uses_proxy and not (config.api_key or "").strip():
        raise CredentialMissing()

    url = endpoint_url(config)
    owns_client = client is None
    http = client or httpx.AsyncClient(timeout=config.timeout_seconds)
    try:
        logger.debug("POST %s model=%s", url, payload.get("model"))
        resp = await http.post(url, json=payload, headers=build_headers(config), timeout=config.timeout_seconds)
    except httpx.HTTPError as e:
        raise NetworkFailure(str(e) or type(e).__name__) from e
    finally:
        if owns_client:
            await http.aclose()

    if not resp.is_success:
        raise HttpError(resp.status_code, resp.text)

    try:
        return resp.json()
    except ValueError as e:
        raise MalformedEnvelope() from e


def get_response_text(envelope: Any) -> str | None:
    """Concatenate the ``text`` blocks of a Messages API response, in order."""
    blocks = envelope.get("content") if isinstance(envelope, dict) else None
    if not isinstance(blocks, list):
        return None
    parts = [
        block["text"]
        for block in blocks
        if isinstance(block, dict) and block.get("type") == "text" and isinstance(block.get("text"), str)
    ]
    return "".join(parts) if parts else None

"""Natural-language style edits: prompt → model → JSON Patch → validated style."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping, Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from stylechat.engine.config import HISTORY_WINDOW, EditConfig
from stylechat.engine.errors import (
    EmptyPrompt,
    EmptyResponse,
    InvalidHistory,
    PostConditionInvalid,
    StyleEditError,
)
from stylechat.llm.client import get_response_text, post_messages
from stylechat.llm.prompts import build_current_turn, get_patch_system_prompt
from stylechat.models.style import (
    ConversationTurn,
    EditFailure,
    EditResult,
    EditSuccess,
    PatchOperation,
    StyleDocument,
)
from stylechat.style.applier import apply_patch_with_fallbacks
from stylechat.style.extractor import extract_payload, is_provider_envelope, unwrap_envelope
from stylechat.style.resolver import resolve_layer_references
from stylechat.style.validator import StyleValidator, issue_message, validate_style

logger = logging.getLogger(__name__)

NO_CHANGES = "No changes requested."


def trim_history(history: Sequence[ConversationTurn | Mapping[str, Any]] | None) -> list[dict[str, str]]:
    """Keep only the most recent turns, as plain role/content dicts."""
    try:
        turns = [
            turn if isinstance(turn, ConversationTurn) else ConversationTurn.model_validate(turn)
            for turn in list(history or [])[-HISTORY_WINDOW:]
        ]
    except ValidationError as e:
        raise InvalidHistory(e.errors()[0].get("msg", str(e))) from e
    return [{"role": t.role, "content": t.content} for t in turns]


def build_request(
    style: StyleDocument,
    prompt: str,
    history: Sequence[ConversationTurn | Mapping[str, Any]] | None,
    config: EditConfig,
) -> dict[str, Any]:
    messages = trim_history(history)
    messages.append({"role": "user", "content": build_current_turn(style, prompt)})
    return {
        "model": config.model,
        "max_tokens": config.max_tokens,
        "system": get_patch_system_prompt(),
        "messages": messages,
    }


def _with_id(candidate: StyleDocument, original: StyleDocument) -> StyleDocument:
    if candidate.get("id") or "id" not in original:
        return candidate
    return {**candidate, "id": original["id"]}


def _check(style: StyleDocument, validator: StyleValidator, prefix: str) -> None:
    issues = list(validator(style) or [])
    if issues:
        message = issue_message(issues[0]) or "validation failed"
        raise PostConditionInvalid(message, prefix=prefix)


def _apply_patch(
    style: StyleDocument,
    patch: list[PatchOperation],
    validator: StyleValidator,
) -> EditSuccess:
    if not patch:
        return EditSuccess(style=copy.deepcopy(style), explanation=NO_CHANGES)

    resolved = resolve_layer_references(style, patch)
    patched = _with_id(apply_patch_with_fallbacks(style, resolved), style)
    _check(patched, validator, "Style invalid after patch")
    return EditSuccess(style=patched)


def _accept_full_style(
    style: StyleDocument,
    candidate: dict[str, Any],
    validator: StyleValidator,
) -> EditSuccess:
    logger.info("Model returned a full style instead of a patch")
    out = _with_id(dict(candidate), style)
    _check(out, validator, "Invalid style")
    return EditSuccess(style=out)


async def _run_edit(
    style: StyleDocument,
    prompt: str,
    history: Sequence[ConversationTurn | Mapping[str, Any]] | None,
    config: EditConfig,
    validator: StyleValidator,
    client: httpx.AsyncClient | None,
) -> EditSuccess:
    if not prompt or not prompt.strip():
        raise EmptyPrompt()

    payload = build_request(style, prompt, history, config)
    envelope = await post_messages(payload, config, client)

    raw_text = get_response_text(envelope)
    if not raw_text:
        raise EmptyResponse()
    logger.debug("Model reply: %s", raw_text)

    parsed = extract_payload(raw_text)
    if is_provider_envelope(parsed):
        logger.info("Model reply was a provider envelope; unwrapping one level")
        parsed = unwrap_envelope(parsed)

    if isinstance(parsed, list):
        return _apply_patch(style, parsed, validator)
    return _accept_full_style(style, parsed, validator)


async def edit_style(
    style: StyleDocument,
    prompt: str,
    history: Sequence[ConversationTurn | Mapping[str, Any]] | None = None,
    config: EditConfig | None = None,
    *,
    validator: StyleValidator = validate_style,
    client: httpx.AsyncClient | None = None,
) -> EditResult:
    """Edit ``style`` according to ``prompt`` using the model as the editor.

    Never raises for edit failures and never mutates ``style``: the result is
    either EditSuccess with a new document or EditFailure with a message.
    """
    try:
        result = await _run_edit(style, prompt, history, config or EditConfig(), validator, client)
    except StyleEditError as e:
        logger.warning("Style edit failed (%s): %s", type(e).__name__, e)
        return EditFailure(error=str(e))

    logger.info("Style edit succeeded%s", f" ({result.explanation})" if result.explanation else "")
    return result

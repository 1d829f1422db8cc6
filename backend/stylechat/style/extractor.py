"""Locate and parse the JSON payload inside free-form model output."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from stylechat.engine.errors import NestedEnvelopeUnresolvable, UnparsableModelOutput

logger = logging.getLogger(__name__)

# "[" then "{" then an "op" key; tolerates \"op\" when the model double-encodes
_PATCH_START_RE = re.compile(r"""\[\s*\{\s*(\\?)["']op\\?["']""")
_ANY_JSON_RE = re.compile(r"(\[[\s\S]*\]|\{[\s\S]*\})")


def find_patch_array(raw: str) -> str | None:
    """Return the substring holding the first JSON Patch array, or None.

    Brackets are depth-counted from the array start so nested arrays inside
    operation values (e.g. expressions) do not end the match early.
    """
    text = raw.strip()
    match = _PATCH_START_RE.search(text)
    if match is None:
        return None

    # Quote tracking only makes sense when quotes are not themselves escaped
    track_strings = not match.group(1)
    depth = 0
    in_string = False
    escaped = False
    for i in range(match.start(), len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"' and track_strings:
            in_string = True
        elif ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                return text[match.start():i + 1]
    return None


def _parse_loose(raw: str) -> Any:
    """Parse the first [...] or {...} span of the text, or the text itself."""
    trimmed = raw.strip()
    m = _ANY_JSON_RE.search(trimmed)
    candidate = m.group(1) if m else trimmed
    return json.loads(candidate)


def extract_payload(raw: str) -> list[Any] | dict[str, Any]:
    """Extract a patch array (or, failing that, any JSON array/object) from model text.

    Raises UnparsableModelOutput when no JSON can be recovered or when the
    recovered value is a bare scalar.
    """
    parsed: Any = None
    found = False

    patch_text = find_patch_array(raw)
    if patch_text is not None:
        try:
            parsed = json.loads(patch_text)
            found = True
        except (json.JSONDecodeError, RecursionError) as e:
            logger.debug("Patch-shaped span did not parse (%s), trying loose extraction", e)

    if not found:
        try:
            parsed = _parse_loose(raw)
        except (json.JSONDecodeError, RecursionError) as e:
            raise UnparsableModelOutput() from e

    if not isinstance(parsed, (list, dict)):
        raise UnparsableModelOutput("Model response was not JSON object or array.")
    return parsed


# ---------------------------------------------------------------------------
# Provider envelope handling
# ---------------------------------------------------------------------------

def is_provider_envelope(obj: Any) -> bool:
    """True if the object looks like the Messages API wrapper rather than a payload."""
    return (
        isinstance(obj, dict)
        and isinstance(obj.get("content"), list)
        and isinstance(obj.get("usage"), dict)
        and isinstance(obj.get("model"), str)
    )


def unwrap_envelope(envelope: dict[str, Any]) -> list[Any] | dict[str, Any]:
    """Peel exactly one envelope level and extract the payload from its text.

    The inner result is returned as-is even if it is another envelope; there
    is no second unwrap.
    """
    blocks = envelope.get("content") or []
    first = blocks[0] if blocks else None
    inner_text = first.get("text") if isinstance(first, dict) else None
    if not isinstance(inner_text, str):
        raise NestedEnvelopeUnresolvable("Response was API wrapper; no content found.")

    try:
        return extract_payload(inner_text)
    except UnparsableModelOutput as e:
        raise NestedEnvelopeUnresolvable("Could not parse style from nested response.") from e

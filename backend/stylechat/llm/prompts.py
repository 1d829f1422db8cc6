"""Prompt text for the style editor (patch mode)."""

from __future__ import annotations

import json

from stylechat.models.style import StyleDocument

STYLE_SPEC_REF = "https://maplibre.org/maplibre-style-spec/"

_PATCH_SYSTEM_TEMPLATE = """You edit MapLibre GL map styles. You receive the current style JSON and a user request. Return ONLY a JSON Patch (RFC 6902) array that, when applied to the style, makes the requested change.

Rules:
- Output nothing but a JSON array of patch operations. No markdown, no explanation, no commentary before or after the array. Example: [{{"op":"replace","path":"/layers/roads_minor/paint/line-color","value":"#d8d8d8"}}]
- Paths use JSON Pointer with layer id (not index): /layers/<layer_id>/paint/line-color, e.g. /layers/roads_minor/paint/line-color or /layers/landuse_park/paint/fill-color. Layer ids are resolved to indices automatically. The path must end at a property name. Never use array indices on property values (no /paint/line-color/0 or /3). Paint properties like line-color, fill-color are strings or expressions; set the whole value with one replace/add.
- Use "replace" for existing properties, "add" for new ones. For paint or layout properties that may be missing (e.g. line-dasharray, line-cap), use "add" so the patch works whether the property exists or not. Preserve id, sources, glyphs, sprite unless the user asks to change them.
- For label overlap: adjust symbol layers' layout/paint (text-size, text-max-width, text-optional, symbol-spacing, text-allow-overlap). Spec: {spec_ref}
- Only include operations that change something."""


def get_patch_system_prompt() -> str:
    return _PATCH_SYSTEM_TEMPLATE.format(spec_ref=STYLE_SPEC_REF)


def build_current_turn(style: StyleDocument, prompt: str) -> str:
    """User message carrying the full current style and the literal request."""
    style_json = json.dumps(style, indent=2, ensure_ascii=False)
    return f"Current style JSON:\n```json\n{style_json}\n```\n\nUser request: {prompt}"


def get_all_templates() -> dict[str, str]:
    return {"patch": get_patch_system_prompt()}

"""Minimal structural validator for MapLibre style documents.

Covers the subset of the style spec the editor relies on: root keys, layer
identity and type, source references and paint/layout shape. Callers may pass
any other callable with the same ``validate(style) -> list[issue]`` shape.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, Protocol, Union

from stylechat.models.style import StyleDocument, ValidationIssue

LAYER_TYPES = frozenset({
    "background",
    "fill",
    "line",
    "symbol",
    "circle",
    "heatmap",
    "fill-extrusion",
    "raster",
    "hillshade",
    "color-relief",
})

_REQUIRED_ROOT_KEYS = ("version", "sources", "layers")


class HasMessage(Protocol):
    message: str


# Issues are objects with .message or {"message": ...} mappings
StyleIssue = Union[HasMessage, Mapping[str, Any]]
StyleValidator = Callable[[StyleDocument], Sequence[StyleIssue]]


def issue_message(issue: StyleIssue) -> str | None:
    message = issue.get("message") if isinstance(issue, Mapping) else getattr(issue, "message", None)
    return message if isinstance(message, str) and message else None


def _issue(path: str, message: str) -> ValidationIssue:
    return ValidationIssue(path=path, message=f"{path}: {message}" if path else message)


def _validate_layer(i: int, layer: Any, sources: dict[str, Any], seen: set[str]) -> list[ValidationIssue]:
    where = f"layers[{i}]"
    if not isinstance(layer, dict):
        return [_issue(where, f"object expected, {type(layer).__name__} found")]

    issues: list[ValidationIssue] = []
    layer_id = layer.get("id")
    if not isinstance(layer_id, str) or not layer_id:
        issues.append(_issue(where, 'missing required property "id"'))
    elif layer_id in seen:
        issues.append(_issue(f"{where}.id", f'duplicate layer id "{layer_id}"'))
    else:
        seen.add(layer_id)

    layer_type = layer.get("type")
    if layer_type is None:
        issues.append(_issue(where, 'missing required property "type"'))
    elif not isinstance(layer_type, str):
        issues.append(_issue(f"{where}.type", f"string expected, {type(layer_type).__name__} found"))
    elif layer_type not in LAYER_TYPES:
        issues.append(_issue(f"{where}.type", f'unknown layer type "{layer_type}"'))
    elif layer_type != "background":
        source = layer.get("source")
        if not isinstance(source, str):
            issues.append(_issue(where, 'missing required property "source"'))
        elif source not in sources:
            issues.append(_issue(f"{where}.source", f'source "{source}" not found'))

    for key in ("paint", "layout"):
        if key in layer and not isinstance(layer[key], dict):
            issues.append(_issue(f"{where}.{key}", f"object expected, {type(layer[key]).__name__} found"))
    return issues


def validate_style(style: StyleDocument) -> list[ValidationIssue]:
    """Return every problem found; an empty list means the style is usable."""
    if not isinstance(style, dict):
        return [_issue("", f"object expected, {type(style).__name__} found")]

    issues = [
        _issue("", f'missing required property "{key}"')
        for key in _REQUIRED_ROOT_KEYS
        if key not in style
    ]
    if "version" in style and style["version"] != 8:
        issues.append(_issue("version", f"expected one of [8], {style['version']!r} found"))

    sources = style.get("sources", {})
    if not isinstance(sources, dict):
        issues.append(_issue("sources", f"object expected, {type(sources).__name__} found"))
        sources = {}

    layers = style.get("layers", [])
    if not isinstance(layers, list):
        issues.append(_issue("layers", f"array expected, {type(layers).__name__} found"))
        return issues

    seen: set[str] = set()
    for i, layer in enumerate(layers):
        issues.extend(_validate_layer(i, layer, sources, seen))
    return issues

"""Rewrite layer-id JSON Pointers (/layers/<id>/...) to positional ones (/layers/<index>/...)."""

from __future__ import annotations

import logging
import re

from stylechat.models.style import PatchOperation, StyleDocument

logger = logging.getLogger(__name__)

_INDEX_RE = re.compile(r"^\d+$")


def _decode_segment(segment: str) -> str:
    # RFC 6901: ~1 first, then ~0
    return segment.replace("~1", "/").replace("~0", "~")


def _resolve_pointer(pointer: str, id_to_index: dict[str, int]) -> str:
    if not pointer.startswith("/layers/"):
        return pointer
    segments = [s for s in pointer.split("/") if s]
    if len(segments) < 2 or segments[0] != "layers":
        return pointer

    layer_ref = _decode_segment(segments[1])
    if _INDEX_RE.match(layer_ref):
        return pointer
    index = id_to_index.get(layer_ref)
    if index is None:
        # Left unresolved so the apply step fails on this exact path
        logger.debug("Unknown layer id %r in %s", layer_ref, pointer)
        return pointer

    rest = "/".join(segments[2:])
    return f"/layers/{index}" + (f"/{rest}" if rest else "")


def resolve_layer_references(style: StyleDocument, patch: list[PatchOperation]) -> list[PatchOperation]:
    """Return a new patch with layer ids in ``path``/``from`` replaced by indices.

    Already-numeric segments and unknown ids are left untouched. The input
    patch and style are not modified.
    """
    layers = style.get("layers")
    if not isinstance(layers, list):
        return list(patch)

    id_to_index: dict[str, int] = {}
    for i, layer in enumerate(layers):
        layer_id = layer.get("id") if isinstance(layer, dict) else None
        if isinstance(layer_id, str):
            id_to_index[layer_id] = i

    resolved: list[PatchOperation] = []
    for op in patch:
        if not isinstance(op, dict):
            resolved.append(op)
            continue
        new_op = op
        for key in ("path", "from"):
            pointer = op.get(key)
            if not isinstance(pointer, str):
                continue
            new_pointer = _resolve_pointer(pointer, id_to_index)
            if new_pointer != pointer:
                if new_op is op:
                    new_op = dict(op)
                new_op[key] = new_pointer
        resolved.append(new_op)
    return resolved

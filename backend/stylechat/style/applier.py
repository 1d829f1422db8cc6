"""Apply a JSON Patch to a style with an add/replace substitution ladder.

Models often do not know whether a paint/layout property already exists, so a
patch applied exactly as emitted frequently fails on "add" vs "replace". Each
strategy below runs the whole patch strictly on its own deep copy; the first
one that succeeds wins and the caller's document is never touched.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from dataclasses import dataclass

import jsonpatch
import jsonpointer

from stylechat.engine.errors import PatchApplicationFailure
from stylechat.models.style import PatchOperation, StyleDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Strategy:
    name: str
    patch: list[PatchOperation]
    # Whether a failure of this attempt lets the next strategy run
    continue_if: Callable[[PatchApplicationFailure], bool]


def _always(_: PatchApplicationFailure) -> bool:
    return True


def _when_unresolvable(err: PatchApplicationFailure) -> bool:
    return err.unresolvable


def _op_name(op: PatchOperation) -> object:
    return op.get("op") if isinstance(op, dict) else None


def coerce_ops(patch: list[PatchOperation], source: str, target: str) -> list[PatchOperation]:
    """Copy of the patch with every ``source`` operation turned into ``target``."""
    return [
        {**op, "op": target} if _op_name(op) == source else op
        for op in patch
    ]


def _targets_array_end(op: PatchOperation) -> bool:
    path = op.get("path") if isinstance(op, dict) else None
    return isinstance(path, str) and path.rsplit("/", 1)[-1] == "-"


def _describe(err: Exception, limit: int = 300) -> str:
    # jsonpointer embeds the whole sub-document in some messages
    text = str(err) or type(err).__name__
    return text if len(text) <= limit else text[:limit] + "..."


def apply_strict(style: StyleDocument, patch: list[PatchOperation]) -> StyleDocument:
    """Apply every operation to a deep copy, or raise without returning anything.

    The failure names the first offending operation. ``unresolvable`` is set
    when the target location does not exist for that operation.
    """
    working = copy.deepcopy(style)
    for index, op in enumerate(patch):
        label = f"operation {index} ({_op_name(op)} {op.get('path') if isinstance(op, dict) else op!r})"
        if _op_name(op) == "replace" and _targets_array_end(op):
            # "/-" addresses an element that does not exist yet
            raise PatchApplicationFailure(f"{label}: nothing to replace past the end of the array", unresolvable=True)
        try:
            working = jsonpatch.JsonPatch([op]).apply(working, in_place=True)
        except (jsonpointer.JsonPointerException, jsonpatch.JsonPatchConflict) as e:
            raise PatchApplicationFailure(f"{label}: {_describe(e)}", unresolvable=True) from e
        except (jsonpatch.JsonPatchException, TypeError) as e:
            raise PatchApplicationFailure(f"{label}: {_describe(e)}") from e
    return working


def build_strategies(patch: list[PatchOperation]) -> list[Strategy]:
    has_add = any(_op_name(op) == "add" for op in patch)
    has_replace = any(_op_name(op) == "replace" for op in patch)
    strategies: list[Strategy] = []
    if has_add:
        strategies.append(Strategy("add-as-replace", coerce_ops(patch, "add", "replace"), _when_unresolvable))
    strategies.append(Strategy("as-emitted", list(patch), _always))
    if has_replace:
        strategies.append(Strategy("replace-as-add", coerce_ops(patch, "replace", "add"), _always))
    return strategies


def apply_patch_with_fallbacks(style: StyleDocument, patch: list[PatchOperation]) -> StyleDocument:
    """Apply ``patch`` to a copy of ``style`` trying each strategy in order.

    Raises PatchApplicationFailure carrying the last error when none succeeds.
    """
    last_error = PatchApplicationFailure("no strategy applicable")
    for strategy in build_strategies(patch):
        try:
            result = apply_strict(style, strategy.patch)
        except PatchApplicationFailure as e:
            logger.debug("Patch strategy %s failed: %s", strategy.name, e.detail)
            last_error = e
            if not strategy.continue_if(e):
                break
            continue
        logger.info("Patch applied with strategy %s (%d operations)", strategy.name, len(patch))
        return result

    raise last_error

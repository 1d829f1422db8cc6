"""Tests for the add/replace strategy ladder."""

from __future__ import annotations

import copy

import pytest

from stylechat.engine.errors import PatchApplicationFailure
from stylechat.style.applier import (
    apply_patch_with_fallbacks,
    apply_strict,
    build_strategies,
    coerce_ops,
)
from tests.conftest import BASIC_STYLE


def _layer(style, layer_id):
    return next(layer for layer in style["layers"] if layer["id"] == layer_id)


class TestStrategies:
    def test_replace_only(self):
        patch = [{"op": "replace", "path": "/layers/1/paint/line-color", "value": "#000"}]
        assert [s.name for s in build_strategies(patch)] == ["as-emitted", "replace-as-add"]

    def test_add_only(self):
        patch = [{"op": "add", "path": "/layers/1/paint/line-cap", "value": "round"}]
        assert [s.name for s in build_strategies(patch)] == ["add-as-replace", "as-emitted"]

    def test_mixed(self):
        patch = [
            {"op": "add", "path": "/layers/1/paint/line-cap", "value": "round"},
            {"op": "replace", "path": "/layers/1/paint/line-color", "value": "#000"},
        ]
        assert [s.name for s in build_strategies(patch)] == ["add-as-replace", "as-emitted", "replace-as-add"]

    def test_remove_only(self):
        assert [s.name for s in build_strategies([{"op": "remove", "path": "/layers/0"}])] == ["as-emitted"]

    def test_coerce_leaves_input_alone(self):
        patch = [{"op": "add", "path": "/x", "value": 1}, {"op": "remove", "path": "/y"}]
        coerced = coerce_ops(patch, "add", "replace")
        assert coerced[0]["op"] == "replace"
        assert coerced[1] is patch[1]
        assert patch[0]["op"] == "add"


class TestApplyStrict:
    def test_all_or_nothing(self):
        style = copy.deepcopy(BASIC_STYLE)
        patch = [
            {"op": "replace", "path": "/layers/1/paint/line-color", "value": "#000"},
            {"op": "replace", "path": "/layers/1/paint/line-opacity", "value": 0.5},
        ]
        with pytest.raises(PatchApplicationFailure) as exc:
            apply_strict(style, patch)
        assert exc.value.unresolvable
        assert "operation 1" in exc.value.detail
        assert style == BASIC_STYLE

    def test_invalid_operation_is_not_unresolvable(self):
        with pytest.raises(PatchApplicationFailure) as exc:
            apply_strict(BASIC_STYLE, [{"op": "frobnicate", "path": "/name", "value": 1}])
        assert not exc.value.unresolvable

    def test_replace_at_array_end_is_unresolvable(self):
        with pytest.raises(PatchApplicationFailure) as exc:
            apply_strict(BASIC_STYLE, [{"op": "replace", "path": "/layers/-", "value": {}}])
        assert exc.value.unresolvable


class TestLadder:
    def test_replace_existing_property(self):
        patch = [{"op": "replace", "path": "/layers/1/paint/line-color", "value": "#d8d8d8"}]
        result = apply_patch_with_fallbacks(BASIC_STYLE, patch)
        assert _layer(result, "roads_minor")["paint"]["line-color"] == "#d8d8d8"

    def test_add_missing_property_converges(self):
        # add→replace fails (fill-color absent), the patch as emitted then succeeds
        patch = [{"op": "add", "path": "/layers/2/paint/fill-color", "value": "#cde"}]
        result = apply_patch_with_fallbacks(BASIC_STYLE, patch)
        assert _layer(result, "landuse_park")["paint"]["fill-color"] == "#cde"
        assert _layer(result, "landuse_park")["paint"]["fill-opacity"] == 0.6

    def test_add_existing_property(self):
        patch = [{"op": "add", "path": "/layers/3/paint/fill-color", "value": "#123456"}]
        result = apply_patch_with_fallbacks(BASIC_STYLE, patch)
        assert _layer(result, "water")["paint"]["fill-color"] == "#123456"

    def test_replace_missing_property_retried_as_add(self):
        patch = [{"op": "replace", "path": "/layers/1/paint/line-dasharray", "value": [2, 1]}]
        result = apply_patch_with_fallbacks(BASIC_STYLE, patch)
        assert _layer(result, "roads_minor")["paint"]["line-dasharray"] == [2, 1]

    def test_mixed_patch(self):
        patch = [
            {"op": "replace", "path": "/layers/1/paint/line-color", "value": "#333"},
            {"op": "add", "path": "/layers/1/paint/line-cap", "value": "round"},
        ]
        result = apply_patch_with_fallbacks(BASIC_STYLE, patch)
        paint = _layer(result, "roads_minor")["paint"]
        assert paint["line-color"] == "#333"
        assert paint["line-cap"] == "round"

    def test_append_layer(self):
        new_layer = {"id": "buildings", "type": "fill", "source": "openmaptiles", "source-layer": "building"}
        result = apply_patch_with_fallbacks(BASIC_STYLE, [{"op": "add", "path": "/layers/-", "value": new_layer}])
        assert result["layers"][-1] == new_layer
        assert [layer["id"] for layer in result["layers"][:-1]] == [layer["id"] for layer in BASIC_STYLE["layers"]]

    def test_missing_parent_fails(self):
        # place/label has no paint mapping at all
        patch = [{"op": "add", "path": "/layers/4/paint/text-color", "value": "#333"}]
        with pytest.raises(PatchApplicationFailure) as exc:
            apply_patch_with_fallbacks(BASIC_STYLE, patch)
        assert "/layers/4/paint/text-color" in str(exc.value)
        assert str(exc.value).startswith("Patch failed: ")

    def test_unresolved_layer_id_fails(self):
        patch = [{"op": "replace", "path": "/layers/no_such_layer/paint/line-color", "value": "#000"}]
        with pytest.raises(PatchApplicationFailure) as exc:
            apply_patch_with_fallbacks(BASIC_STYLE, patch)
        assert "no_such_layer" in exc.value.detail

    def test_non_path_error_stops_ladder(self):
        patch = [
            {"op": "add", "path": "/layers/3/paint/fill-color", "value": "#000"},
            {"op": "test", "path": "/version", "value": 7},
        ]
        with pytest.raises(PatchApplicationFailure) as exc:
            apply_patch_with_fallbacks(BASIC_STYLE, patch)
        assert "operation 1" in exc.value.detail
        assert not exc.value.unresolvable

    def test_original_never_mutated(self):
        style = copy.deepcopy(BASIC_STYLE)
        apply_patch_with_fallbacks(style, [{"op": "add", "path": "/layers/2/paint/fill-color", "value": "#cde"}])
        with pytest.raises(PatchApplicationFailure):
            apply_patch_with_fallbacks(style, [
                {"op": "replace", "path": "/layers/1/paint/line-color", "value": "#000"},
                {"op": "remove", "path": "/layers/9"},
            ])
        assert style == BASIC_STYLE

    def test_reapplying_is_harmless(self):
        patch = [{"op": "add", "path": "/layers/2/paint/fill-color", "value": "#cde"}]
        once = apply_patch_with_fallbacks(BASIC_STYLE, patch)
        twice = apply_patch_with_fallbacks(once, patch)
        assert twice == once


def test_no_strategies_still_raises(monkeypatch):
    monkeypatch.setattr("stylechat.style.applier.build_strategies", lambda patch: [])
    with pytest.raises(PatchApplicationFailure) as exc:
        apply_patch_with_fallbacks(BASIC_STYLE, [{"op": "remove", "path": "/name"}])
    assert str(exc.value) == "Patch failed: no strategy applicable"

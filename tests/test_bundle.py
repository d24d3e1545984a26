"""
tests/test_bundle.py
Tests for traitforge/bundle.py configuration bundles
"""

import json

import pytest

from traitforge.assemble import assemble_batch, assemble_traits
from traitforge.bundle import (
    registry_from_dict,
    registry_from_json,
    registry_to_dict,
    validate_bundle,
)
from traitforge.errors import ConfigurationError
from traitforge.registry import default_registry


def _themes(common_weight=60):
    return [
        {"name": "one", "rarity": "Common", "weight": common_weight,
         "colors": {"color1": "#000000", "color2": "#555555",
                    "color3": "#AAAAAA", "color4": "#FFFFFF"}},
        {"name": "two", "rarity": "Uncommon", "weight": 25,
         "colors": ["#FF0000", "#00FF00", "#0000FF", "#FFFFFF"]},
        {"name": "three", "rarity": "Rare", "weight": 12,
         "colors": ["#1B2951", "#4A90A4", "#85C1E9", "#F8F9FA"]},
        {"name": "four", "rarity": "Epic", "weight": 3,
         "colors": ["#111111", "#222222", "#EEEEEE", "#FFFFFF"]},
    ]


class TestDefaults:
    """Omitted sections fall back to the built-ins"""

    def test_empty_bundle_matches_default(self, seeds):
        registry = registry_from_dict({})
        default = default_registry()
        assert registry.pattern_table.keys() == default.pattern_table.keys()
        assert [t.name for t in registry.themes] == [t.name for t in default.themes]
        for seed in seeds[:20]:
            assert assemble_traits(seed, registry) == assemble_traits(seed, default)

    def test_validate_bundle_ok(self):
        assert validate_bundle({"version": 1}) == (True, [])


class TestPatterns:
    """Pattern section parsing"""

    def test_weight_override(self, seeds):
        registry = registry_from_dict({"patterns": [{"id": "interference", "weight": 100}]})
        assert registry.pattern_table.keys() == ["interference"]
        assert {assemble_traits(s, registry).pattern_id for s in seeds[:30]} == {"interference"}

    def test_total_mismatch(self):
        with pytest.raises(ConfigurationError, match="weights sum to 30 but total is 100"):
            registry_from_dict({"patterns": [{"id": "interference", "weight": 30}]})

    def test_null_total_accepts_any_sum(self):
        registry = registry_from_dict({
            "patterns": [{"id": "interference", "weight": 3}, {"id": "gentle", "weight": 1}],
            "pattern_total": None,
        })
        assert registry.pattern_table.total == 4

    def test_unknown_scorer(self):
        with pytest.raises(ConfigurationError, match="not a built-in scorer"):
            registry_from_dict({"patterns": [{"id": "spirograph", "weight": 100}]})

    def test_custom_id_with_builtin_scorer(self):
        registry = registry_from_dict({
            "patterns": [{"id": "ripples", "scorer": "interference", "weight": 100,
                          "display_name": "Ripples"}],
        })
        record = assemble_traits(1, registry)
        assert record.pattern_id == "ripples"
        assert record.pattern_name == "Ripples"
        assert tuple(record.parameters) == ("sources", "wavelength", "speed", "gradient_mode")

    def test_param_names_must_match_scorer(self):
        ok, errors = validate_bundle({"patterns": [{
            "id": "interference", "weight": 100,
            "params": [{"name": "foo", "min": 0, "max": 1}],
        }]})
        assert not ok
        assert any("params must declare" in e for e in errors)

    def test_narrowed_param_range(self):
        registry = registry_from_dict({"patterns": [{
            "id": "interference", "weight": 100,
            "params": [
                {"name": "sources", "min": 3, "max": 3, "type": "int"},
                {"name": "wavelength", "min": 20, "max": 100, "type": "int"},
                {"name": "speed", "min": 0.1, "max": 2.0, "step": 0.1},
                {"name": "gradient_mode", "min": 0, "max": 1, "type": "bool"},
            ],
        }]})
        for seed in range(20):
            assert assemble_traits(seed, registry).parameters["sources"] == 3

    def test_fixed_source_count(self):
        registry = registry_from_dict({"patterns": [{
            "id": "contour_interference", "weight": 100,
            "params": [
                {"name": "resolution", "min": 2.0, "max": 6.0, "step": 0.5},
                {"name": "num_rings", "min": 2, "max": 2, "type": "int"},
                {"name": "sources_per_ring", "min": 6, "max": 6, "type": "int"},
                {"name": "line_width", "min": 0.5, "max": 2.0, "step": 0.1},
            ],
        }]})
        outcomes = assemble_batch([1, 2, 3], registry)
        assert all(o.ok for o in outcomes)
        for o in outcomes:
            assert o.record.parameters["num_rings"] == 2
            assert 1 <= o.record.complexity.value <= 100

    def test_bad_param_spec(self):
        ok, errors = validate_bundle({"patterns": [{
            "id": "gentle", "weight": 100,
            "params": [{"name": "wavelength", "min": 80, "max": 10}],
        }]})
        assert not ok
        assert any("min 80 > max 10" in e for e in errors)


class TestThemes:
    """Theme section parsing"""

    def test_custom_themes(self):
        registry = registry_from_dict({"themes": _themes()})
        assert [t.name for t in registry.themes] == ["one", "two", "three", "four"]
        assert registry.theme("one").colors == ("#000000", "#555555", "#AAAAAA", "#FFFFFF")
        assert registry.theme("two").colors[0] == "#FF0000"

    def test_bad_hex(self):
        themes = _themes()
        themes[1]["colors"] = ["#FF0000", "#GGGGGG", "#0000FF", "#FFFFFF"]
        ok, errors = validate_bundle({"themes": themes})
        assert not ok
        assert any(e.startswith("themes[1]") and "color2" in e for e in errors)

    def test_class_total_mismatch(self):
        with pytest.raises(ConfigurationError, match="members total 50 but class weight is 60"):
            registry_from_dict({"themes": _themes(common_weight=50)})

    def test_unknown_rarity(self):
        themes = _themes()
        themes[3]["rarity"] = "Mythic"
        with pytest.raises(ConfigurationError, match="unknown rarity 'Mythic'"):
            registry_from_dict({"themes": themes})

    def test_missing_fields(self):
        ok, errors = validate_bundle({"themes": [{"name": "x"}]})
        assert not ok
        assert "themes[0].rarity is required" in errors
        assert "themes[0].colors is required" in errors


class TestBundleErrors:
    """Top-level checks and error collection"""

    def test_errors_collected(self):
        ok, errors = validate_bundle({
            "version": 2,
            "patterns": [{"id": "nope"}, {"id": "gentle", "weight": "heavy"}],
            "colour": "red",
        })
        assert not ok
        assert "unknown keys: colour" in errors
        assert "version must be 1, got 2" in errors
        assert any(e.startswith("patterns[0].scorer") for e in errors)
        assert any(e.startswith("patterns[1].weight") for e in errors)

    def test_message_joined(self):
        with pytest.raises(ConfigurationError) as exc:
            registry_from_dict({"version": 2, "themes": "all"})
        message = str(exc.value)
        assert message.startswith("Invalid bundle: ")
        assert "version must be 1, got 2; themes must be list" in message

    def test_not_a_dict(self):
        assert validate_bundle([1, 2]) == (False, ["bundle must be dict, got list"])

    def test_validation_override(self):
        registry = registry_from_dict({"validation": {"wcag_aa": 3.0}})
        assert registry.validation_config.wcag_aa == 3.0

    def test_validation_unknown_key(self):
        ok, errors = validate_bundle({"validation": {"wcag_aaaa": 9}})
        assert not ok
        assert errors == ["validation has unknown keys: wcag_aaaa"]

    def test_validation_bad_weights(self):
        ok, errors = validate_bundle({"validation": {"weights": {"contrast": 1.0}}})
        assert not ok
        assert "weights must have keys" in errors[0]


class TestJson:
    """JSON entry point and export"""

    def test_bad_json(self):
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            registry_from_json("{not json")

    def test_export_round_trip(self, seeds):
        default = default_registry()
        text = json.dumps(registry_to_dict(default))
        rebuilt = registry_from_json(text)
        for seed in seeds[:20]:
            assert assemble_traits(seed, rebuilt) == assemble_traits(seed, default)

    def test_export_keeps_scorer(self):
        registry = registry_from_dict({
            "patterns": [{"id": "ripples", "scorer": "interference", "weight": 100}],
        })
        data = registry_to_dict(registry)
        assert data["patterns"][0]["scorer"] == "interference"
        assert registry_from_dict(data).pattern_table.keys() == ["ripples"]

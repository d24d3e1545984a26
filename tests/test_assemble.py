"""
tests/test_assemble.py
Tests for traitforge/assemble.py seed -> TraitRecord
"""

import json
import threading
from collections import Counter

import pytest

from traitforge.assemble import (
    TraitAssembler,
    assemble_batch,
    assemble_traits,
    seed_range,
)
from traitforge.config import ValidationConfig
from traitforge.errors import ConfigurationError, InvalidSeedError
from traitforge.harmony import ColorHarmonyValidator
from traitforge.patterns import BUILTIN_ARCHETYPES, Archetype
from traitforge.patterns.waves import INTERFERENCE, score_interference
from traitforge.registry import TraitRegistry, default_registry
from traitforge.themes import BUILTIN_THEMES, ThemePreset


def _single_theme_per_class():
    return [
        ThemePreset("one", "Common", 60, ("#000000", "#555555", "#AAAAAA", "#FFFFFF")),
        ThemePreset("two", "Uncommon", 25, ("#FF0000", "#00FF00", "#0000FF", "#FFFFFF")),
        ThemePreset("three", "Rare", 12, ("#1B2951", "#4A90A4", "#85C1E9", "#F8F9FA")),
        ThemePreset("four", "Epic", 3, ("#111111", "#222222", "#EEEEEE", "#FFFFFF")),
    ]


class TestDeterminism:
    """Same seed, same record"""

    def test_repeatable(self, registry, seeds):
        for seed in seeds[:50]:
            assert assemble_traits(seed, registry) == assemble_traits(seed, registry)

    def test_fresh_registry_agrees(self, seeds):
        for seed in seeds[:20]:
            assert assemble_traits(seed, default_registry()) == assemble_traits(seed, default_registry())

    def test_int_and_hex_agree(self, registry):
        a = assemble_traits(255, registry)
        b = assemble_traits("00" * 31 + "ff", registry)
        c = assemble_traits("0x" + "00" * 31 + "FF", registry)
        assert a == b == c
        assert a.seed == "0x" + "00" * 31 + "ff"

    def test_default_registry_used(self):
        assert assemble_traits(7) == assemble_traits(7, default_registry())

    def test_seeds_vary(self, registry, seeds):
        patterns = {assemble_traits(s, registry).pattern_id for s in seeds}
        themes = {assemble_traits(s, registry).theme_name for s in seeds}
        assert len(patterns) > 1
        assert len(themes) > 1


class TestRecordConsistency:
    """Every field agrees with the registry"""

    def test_fields(self, registry, seeds):
        for seed in seeds[:100]:
            record = assemble_traits(seed, registry)
            pattern = registry.pattern(record.pattern_id)
            theme = registry.theme(record.theme_name)

            assert record.pattern_name == pattern.display_name
            assert record.rarity == theme.rarity
            assert record.colors == theme.colors
            assert tuple(record.parameters) == pattern.param_names
            assert record.validation == registry.palette_validation(theme.name)
            assert record.complexity == registry.scorer.score(record.pattern_id, record.parameters)
            assert 1 <= record.complexity.value <= 100

    def test_pattern_independent_of_themes(self, seeds):
        default = default_registry()
        custom = TraitRegistry(BUILTIN_ARCHETYPES, _single_theme_per_class())
        for seed in seeds[:100]:
            a = assemble_traits(seed, default)
            b = assemble_traits(seed, custom)
            assert a.pattern_id == b.pattern_id
            assert a.parameters == b.parameters
            assert a.rarity == b.rarity

    def test_validation_config_only_changes_scores(self, seeds):
        contrast_only = ValidationConfig(weights={
            "contrast": 1.0, "harmony": 0.0, "accessibility": 0.0, "balance": 0.0,
        })
        default = default_registry()
        custom = default_registry(contrast_only)
        for seed in seeds[:30]:
            a = assemble_traits(seed, default)
            b = assemble_traits(seed, custom)
            assert (a.pattern_id, a.theme_name, a.parameters) == (b.pattern_id, b.theme_name, b.parameters)
            assert b.validation.overall == pytest.approx(b.validation.contrast)


class TestFailures:
    """Assembly is all-or-nothing"""

    @pytest.mark.parametrize("seed", [-1, "xyz", b"short", 2 ** 256, None])
    def test_invalid_seed(self, registry, seed):
        with pytest.raises(InvalidSeedError):
            assemble_traits(seed, registry)

    def test_scorer_failing_on_defaults_rejected_at_load(self):
        def broken(config, params):
            raise ZeroDivisionError("division by zero")

        with pytest.raises(ConfigurationError, match="complexity scorer failed on defaults: "
                                                     "ZeroDivisionError"):
            TraitRegistry(
                [Archetype(INTERFERENCE, broken, weight=1)],
                BUILTIN_THEMES,
                pattern_total=None,
            )

    def test_scorer_failure_propagates(self):
        def gradient_only(config, params):
            if params["gradient_mode"]:
                raise RuntimeError("scorer exploded")
            return score_interference(config, params)

        registry = TraitRegistry(
            [Archetype(INTERFERENCE, gradient_only, weight=1)],
            BUILTIN_THEMES,
            pattern_total=None,
        )
        failures = 0
        for seed in range(40):
            try:
                record = TraitAssembler().assemble(seed, registry)
            except RuntimeError:
                failures += 1
            else:
                assert record.parameters["gradient_mode"] is False
        assert 0 < failures < 40


class TestPaletteCache:
    """Each theme palette is validated at most once"""

    def test_once_per_theme_under_concurrency(self, monkeypatch, seeds):
        calls = Counter()
        lock = threading.Lock()
        original = ColorHarmonyValidator.analyze

        def counting(self, palette):
            with lock:
                calls[tuple(palette.hex)] += 1
            return original(self, palette)

        monkeypatch.setattr(ColorHarmonyValidator, "analyze", counting)
        registry = default_registry()

        outcomes = assemble_batch(seeds, registry, max_workers=8)
        assert all(o.ok for o in outcomes)
        assert calls
        assert max(calls.values()) == 1
        assert len(calls) == len(registry.cached_themes())

    def test_warm_cache(self, registry):
        registry.warm_cache()
        assert sorted(registry.cached_themes()) == sorted(t.name for t in registry.themes)


class TestBatch:
    """Thread-pool batch assembly"""

    def test_order_preserved(self, registry, seeds):
        outcomes = assemble_batch(seeds[:40], registry, max_workers=4)
        assert [o.seed for o in outcomes] == seeds[:40]
        for seed, outcome in zip(seeds[:40], outcomes):
            assert outcome.record == assemble_traits(seed, registry)

    def test_failure_isolated(self, registry):
        outcomes = assemble_batch([1, "bad", 2], registry, max_workers=2)
        assert [o.ok for o in outcomes] == [True, False, True]
        assert isinstance(outcomes[1].error, InvalidSeedError)
        assert outcomes[1].record is None
        assert outcomes[0].record == assemble_traits(1, registry)
        assert outcomes[2].record == assemble_traits(2, registry)

    def test_invalid_worker_count(self, registry):
        with pytest.raises(ValueError, match="max_workers"):
            assemble_batch([1], registry, max_workers=0)

    def test_empty(self, registry):
        assert assemble_batch([], registry) == []

    def test_seed_range(self):
        assert seed_range(5, 3) == [
            "0x" + "00" * 31 + "05",
            "0x" + "00" * 31 + "06",
            "0x" + "00" * 31 + "07",
        ]
        with pytest.raises(ValueError):
            seed_range(0, -1)


class TestSerialization:
    """Record export"""

    def test_to_dict_is_json(self, registry):
        record = assemble_traits(42, registry)
        data = json.loads(json.dumps(record.to_dict()))
        assert data["seed"] == record.seed
        assert data["colors"]["color1"] == record.colors[0]
        assert data["parameters"] == record.parameters.to_dict()
        assert data["complexity"]["bucket"] == record.complexity.bucket.value
        assert data["schema_version"] == 1

    def test_metadata(self, registry):
        record = assemble_traits(42, registry)
        meta = record.to_metadata(token_id=7)
        assert meta["name"] == "Onchain Summer Vibes #7"
        assert record.pattern_name in meta["description"]
        assert meta["traits"] == {
            "Pattern": record.pattern_name,
            "Theme": record.theme_name,
            "Rarity": record.rarity,
            "Complexity": record.complexity.bucket.value,
        }

    def test_record_frozen(self, registry):
        record = assemble_traits(42, registry)
        with pytest.raises(AttributeError):
            record.theme_name = "other"

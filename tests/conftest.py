"""Pytest configuration - shared fixtures for the trait engine tests."""
from __future__ import annotations

from pathlib import Path

import pytest

from traitforge.harmony import ColorHarmonyValidator
from traitforge.registry import default_registry
from traitforge.seeds import DeterministicRNG, seed_hex

ROOT = Path(__file__).resolve().parents[1]


class FixedRNG:
    """Replays a fixed list of draws; raises once exhausted."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def next(self) -> float:
        value = self.values[self.calls]
        self.calls += 1
        return value


# Fixtures used by multiple test files

@pytest.fixture
def project_root():
    """Return path to project root."""
    return ROOT


@pytest.fixture
def registry():
    """Fresh registry over the built-in archetypes and themes."""
    return default_registry()


@pytest.fixture
def validator():
    return ColorHarmonyValidator()


@pytest.fixture
def rng():
    return DeterministicRNG(42)


@pytest.fixture
def fixed_rng():
    """Factory: fixed_rng(0.1, 0.5, ...) -> FixedRNG."""
    def make(*values):
        return FixedRNG(values)
    return make


@pytest.fixture
def seeds():
    """A spread of canonical hex seeds."""
    return [seed_hex(i * 7919 + 1) for i in range(200)]

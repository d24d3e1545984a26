"""
traitforge/patterns/__init__.py
Built-in pattern archetypes

The built-ins are plain data. Nothing is registered globally: a
TraitRegistry is built from these tuples and passed explicitly to the
assembler.
"""

from typing import Tuple

from .base import (
    Archetype,
    ParamSpec,
    PatternConfig,
    ScoringFunction,
    round_half_up,
)
from .geometric import GEOMETRIC_ARCHETYPES
from .particles import PARTICLE_ARCHETYPES
from .waves import WAVE_ARCHETYPES

# IMPORTANT: Order is part of the rarity walk - append only
BUILTIN_ARCHETYPES: Tuple[Archetype, ...] = (
    WAVE_ARCHETYPES[0],       # interference
    WAVE_ARCHETYPES[1],       # gentle
    GEOMETRIC_ARCHETYPES[0],  # mandala
    GEOMETRIC_ARCHETYPES[1],  # shell_ridge
    PARTICLE_ARCHETYPES[0],   # vector_field
    WAVE_ARCHETYPES[2],       # contour_interference
)

__all__ = [
    "Archetype",
    "ParamSpec",
    "PatternConfig",
    "ScoringFunction",
    "round_half_up",
    "BUILTIN_ARCHETYPES",
]

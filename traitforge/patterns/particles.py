"""
traitforge/patterns/particles.py
Particle archetypes: vector field
"""

from typing import Any, Mapping

from .base import Archetype, ParamSpec, PatternConfig


VECTOR_FIELD = PatternConfig(
    pattern_id="vector_field",
    display_name="Vector Field",
    category="particles",
    description="Particle lines flowing through a tiled vector field",
    param_specs=(
        ParamSpec("tile_size", 20, 100, type="int", label="Tile Size"),
        ParamSpec("tile_shift_amplitude", 5.0, 20.0, label="Tile Shift"),
    ),
)


def score_vector_field(config: PatternConfig, params: Mapping[str, Any]) -> float:
    """
    Particle system floor is high; smaller tiles and larger shifts add more.

    Range is 50-100, so this archetype never lands in the Low bucket.
    """
    tile = config.spec("tile_size").normalize(params["tile_size"])
    shift = config.spec("tile_shift_amplitude").normalize(params["tile_shift_amplitude"])
    return 40.0 + 35.0 * (1.0 - tile) + 15.0 * shift + 10.0


PARTICLE_ARCHETYPES = (
    Archetype(VECTOR_FIELD, score_vector_field, weight=15),
)

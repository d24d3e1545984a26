"""
traitforge/patterns/geometric.py
Geometric archetypes: mandala, shell ridge
"""

from typing import Any, Mapping

from .base import Archetype, ParamSpec, PatternConfig


MANDALA = PatternConfig(
    pattern_id="mandala",
    display_name="Mandala",
    category="geometric",
    description="Layered radial geometry with breathing animation",
    param_specs=(
        ParamSpec("layers", 2, 15, type="int", label="Mandala Layers"),
        ParamSpec("speed", 0.5, 2.5, label="Mandala Speed"),
    ),
)


def score_mandala(config: PatternConfig, params: Mapping[str, Any]) -> float:
    layers = config.spec("layers").normalize(params["layers"])
    speed = config.spec("speed").normalize(params["speed"])
    # Each layer adds petals plus layers*8 connecting lines
    return 15.0 + 60.0 * layers + 20.0 * speed + 5.0


SHELL_RIDGE = PatternConfig(
    pattern_id="shell_ridge",
    display_name="Shell Ridge",
    category="geometric",
    description="Concentric shell-like ridges with breathing effects",
    param_specs=(
        ParamSpec("rings", 10, 50, type="int", label="Ridge Rings"),
        ParamSpec("distortion", 3.0, 15.0, label="Ridge Distortion"),
    ),
)


def score_shell_ridge(config: PatternConfig, params: Mapping[str, Any]) -> float:
    rings = config.spec("rings").normalize(params["rings"])
    distortion = config.spec("distortion").normalize(params["distortion"])

    complexity = 30.0
    complexity += rings * 45.0
    complexity += distortion * 20.0
    # Textured surfaces
    complexity += 5.0
    return complexity


GEOMETRIC_ARCHETYPES = (
    Archetype(MANDALA, score_mandala, weight=15),
    Archetype(SHELL_RIDGE, score_shell_ridge, weight=15),
)

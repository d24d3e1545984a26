"""
traitforge/patterns/waves.py
Wave-family archetypes: interference, gentle, contour interference

Complexity scorers normalize each parameter against the archetype's own
declared range, so a value at max always contributes its full weight.
"""

from typing import Any, Mapping

from .base import Archetype, ParamSpec, PatternConfig


# =============================================================================
# Interference
# =============================================================================

INTERFERENCE = PatternConfig(
    pattern_id="interference",
    display_name="Interference",
    category="waves",
    description="Overlapping circular waves from point sources",
    param_specs=(
        ParamSpec("sources", 2, 6, type="int", label="Wave Sources"),
        ParamSpec("wavelength", 20, 100, type="int", label="Wavelength"),
        ParamSpec("speed", 0.1, 2.0, step=0.1, label="Animation Speed"),
        ParamSpec("gradient_mode", 0, 1, type="bool", label="Gradient Mode"),
    ),
)


def score_interference(config: PatternConfig, params: Mapping[str, Any]) -> float:
    """More sources and shorter wavelengths mean denser fringes."""
    sources = config.spec("sources").normalize(params["sources"])
    wavelength = config.spec("wavelength").normalize(params["wavelength"])
    speed = config.spec("speed").normalize(params["speed"])
    return 20.0 + 45.0 * sources + 25.0 * (1.0 - wavelength) + 10.0 * speed


# =============================================================================
# Gentle
# =============================================================================

GENTLE = PatternConfig(
    pattern_id="gentle",
    display_name="Gentle",
    category="waves",
    description="Flowing sinusoidal lines",
    param_specs=(
        ParamSpec("wavelength", 10, 80, type="int", label="Wavelength"),
        ParamSpec("line_density", 10, 80, type="int", label="Line Density"),
        ParamSpec("speed", 0.005, 0.05, distribution="log", label="Animation Speed"),
    ),
)


def score_gentle(config: PatternConfig, params: Mapping[str, Any]) -> float:
    density = config.spec("line_density").normalize(params["line_density"])
    wavelength = config.spec("wavelength").normalize(params["wavelength"])

    complexity = 20.0
    # Line density contributes most
    complexity += density * 40.0
    # Smaller wavelength = more complex
    complexity += (1.0 - wavelength) * 30.0
    # Horizontal, vertical and diagonal line sets
    complexity += 10.0
    return complexity


# =============================================================================
# Contour Interference
# =============================================================================

CONTOUR_INTERFERENCE = PatternConfig(
    pattern_id="contour_interference",
    display_name="Contour Interference",
    category="waves",
    description="Interference field traced as contour lines",
    param_specs=(
        ParamSpec("resolution", 2.0, 6.0, step=0.5, label="Grid Resolution"),
        ParamSpec("num_rings", 1, 4, type="int", label="Wave Source Rings"),
        ParamSpec("sources_per_ring", 4, 12, type="int", step=2, label="Sources per Ring"),
        ParamSpec("line_width", 0.5, 2.0, step=0.1, label="Line Weight"),
    ),
)


def score_contour_interference(config: PatternConfig, params: Mapping[str, Any]) -> float:
    # Lower resolution value = finer marching-squares grid
    grid = 1.0 - config.spec("resolution").normalize(params["resolution"])

    rings = config.spec("num_rings")
    per_ring = config.spec("sources_per_ring")
    # Center source plus every ring source
    fewest = 1 + rings.min_val * per_ring.min_val
    most = 1 + rings.max_val * per_ring.max_val
    sources = 1 + params["num_rings"] * params["sources_per_ring"]
    if most == fewest:
        source_factor = 0.5
    else:
        source_factor = (sources - fewest) / (most - fewest)

    return 10.0 + 45.0 * grid + 45.0 * source_factor


WAVE_ARCHETYPES = (
    Archetype(INTERFERENCE, score_interference, weight=25),
    Archetype(GENTLE, score_gentle, weight=20),
    Archetype(CONTOUR_INTERFERENCE, score_contour_interference, weight=10),
)

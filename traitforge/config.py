"""
traitforge/config.py
Configuration constants for the trait engine

Values here are part of the reproducibility contract: changing any of them
changes minted output for existing seeds.
"""

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple

from .errors import ConfigurationError

# =============================================================================
# Version
# =============================================================================

ENGINE_VERSION = "1.0.0"

# Bumped whenever stream derivation, table order or scorer formulas change
TRAIT_SCHEMA_VERSION = 1

# =============================================================================
# Seeds
# =============================================================================

SEED_BYTE_LENGTH = 32
SEED_HEX_LENGTH = SEED_BYTE_LENGTH * 2

# Domain tag mixed into every RNG digest
RNG_DOMAIN = "traitforge-rng"

# 53 bits is the full mantissa of an IEEE-754 double
RNG_FLOAT_BITS = 53

# =============================================================================
# RNG Streams
# =============================================================================

# IMPORTANT: Names are hashed into the stream - never rename
STREAM_PATTERN = "pattern"
STREAM_THEME = "theme"
STREAM_PARAMS = "params"

# =============================================================================
# Color Validation
# =============================================================================

@dataclass(frozen=True)
class ValidationConfig:
    """Thresholds and weights for palette validation."""
    wcag_aa: float = 4.5
    wcag_aaa: float = 7.0

    # Hue tolerances in degrees
    monochromatic_tolerance: float = 15.0
    analogous_tolerance: float = 30.0
    scheme_tolerance: float = 15.0

    # Minimum Euclidean RGB distance under color-blindness simulation
    distinguish_threshold: float = 50.0

    # Light/dark presence (HSL lightness)
    light_threshold: float = 0.7
    dark_threshold: float = 0.3

    scheme_bonus: float = 25.0
    balance_weight: float = 75.0

    weights: Mapping[str, float] = field(default_factory=lambda: {
        "contrast": 0.30,
        "harmony": 0.25,
        "accessibility": 0.25,
        "balance": 0.20,
    })

    def __post_init__(self):
        object.__setattr__(self, "weights", MappingProxyType(dict(self.weights)))
        errors = []
        expected = {"contrast", "harmony", "accessibility", "balance"}
        if set(self.weights) != expected:
            errors.append(f"weights must have keys {sorted(expected)}, got {sorted(self.weights)}")
        elif any(w < 0 for w in self.weights.values()):
            errors.append("weights must be >= 0")
        elif not math.isclose(sum(self.weights.values()), 1.0, abs_tol=1e-9):
            errors.append(f"weights must sum to 1, got {sum(self.weights.values()):g}")
        if self.wcag_aa <= 0:
            errors.append(f"wcag_aa must be positive, got {self.wcag_aa}")
        if not 0 <= self.dark_threshold <= self.light_threshold <= 1:
            errors.append("thresholds must satisfy 0 <= dark <= light <= 1")
        if errors:
            raise ConfigurationError(f"Invalid validation config: {'; '.join(errors)}")


VALIDATION_CONFIG = ValidationConfig()

PALETTE_SIZE = 4
PALETTE_KEYS: Tuple[str, ...] = ("color1", "color2", "color3", "color4")

# =============================================================================
# Complexity
# =============================================================================

COMPLEXITY_MIN = 1
COMPLEXITY_MAX = 100

# Upper-exclusive edges, non-decreasing
COMPLEXITY_BUCKETS: Tuple[Tuple[float, str], ...] = (
    (25.0, "Low"),
    (50.0, "Medium"),
    (75.0, "High"),
)
COMPLEXITY_TOP_BUCKET = "Very High"

# =============================================================================
# Metadata
# =============================================================================

COLLECTION_NAME = "Onchain Summer Vibes"

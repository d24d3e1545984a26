"""
traitforge - Deterministic trait generation for generative-art collections

Given a seed, picks a pattern archetype and a theme from weighted rarity
tables, samples the pattern's parameters, validates the theme palette, and
scores complexity. The same seed and configuration always produce the same
trait record.

Usage:
    from traitforge import assemble_traits
    record = assemble_traits("0x" + "ab" * 32)

    python -m traitforge generate --seed 42
    python -m traitforge list-themes
"""

__version__ = "1.0.0"

from .errors import (
    TraitForgeError,
    InvalidSeedError,
    ConfigurationError,
    InvalidColorError,
)
from .seeds import DeterministicRNG, RNGStream, normalize_seed, seed_hex
from .rarity import RarityEntry, RarityTable, TieredRarityTable
from .patterns import ParamSpec, PatternConfig, Archetype, BUILTIN_ARCHETYPES
from .sampler import ParameterSampler, sample_parameters
from .color import Palette, parse_hex, rgb_to_hsl, relative_luminance, contrast_ratio
from .harmony import ColorHarmonyValidator, PaletteAnalysis, validate_palette
from .complexity import ComplexityScorer, bucket_for
from .models import (
    ParameterSet,
    ValidationResult,
    ComplexityBucket,
    ComplexityResult,
    TraitRecord,
)
from .themes import ThemePreset, BUILTIN_THEMES, RARITY_CLASSES
from .registry import TraitRegistry, default_registry
from .bundle import registry_from_dict, registry_from_json, validate_bundle
from .assemble import TraitAssembler, assemble_traits, assemble_batch, BatchOutcome
from .config import VALIDATION_CONFIG, ValidationConfig

__all__ = [
    # Version
    "__version__",
    # Errors
    "TraitForgeError",
    "InvalidSeedError",
    "ConfigurationError",
    "InvalidColorError",
    # Seeds
    "DeterministicRNG",
    "RNGStream",
    "normalize_seed",
    "seed_hex",
    # Rarity
    "RarityEntry",
    "RarityTable",
    "TieredRarityTable",
    # Patterns
    "ParamSpec",
    "PatternConfig",
    "Archetype",
    "BUILTIN_ARCHETYPES",
    "ParameterSampler",
    "sample_parameters",
    # Color
    "Palette",
    "parse_hex",
    "rgb_to_hsl",
    "relative_luminance",
    "contrast_ratio",
    "ColorHarmonyValidator",
    "PaletteAnalysis",
    "validate_palette",
    # Complexity
    "ComplexityScorer",
    "bucket_for",
    # Models
    "ParameterSet",
    "ValidationResult",
    "ComplexityBucket",
    "ComplexityResult",
    "TraitRecord",
    # Themes / registry
    "ThemePreset",
    "BUILTIN_THEMES",
    "RARITY_CLASSES",
    "TraitRegistry",
    "default_registry",
    "registry_from_dict",
    "registry_from_json",
    "validate_bundle",
    # Assembly
    "TraitAssembler",
    "assemble_traits",
    "assemble_batch",
    "BatchOutcome",
    # Config
    "VALIDATION_CONFIG",
    "ValidationConfig",
]

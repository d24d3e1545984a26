"""
traitforge/models.py
Core data models for the trait engine

Every record here is immutable once built. A TraitRecord is persisted
externally as minted metadata and can never be corrected afterwards.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, Tuple

from .config import (
    COLLECTION_NAME,
    COMPLEXITY_BUCKETS,
    COMPLEXITY_TOP_BUCKET,
    ENGINE_VERSION,
    TRAIT_SCHEMA_VERSION,
)


# =============================================================================
# ParameterSet
# =============================================================================

class ParameterSet(Mapping):
    """
    Immutable, ordered mapping of parameter name -> sampled value.

    Iteration order is the PatternConfig declaration order.
    """

    __slots__ = ("_items",)

    def __init__(self, items=()):
        if isinstance(items, Mapping):
            items = items.items()
        self._items: Tuple[Tuple[str, Any], ...] = tuple(items)

    def __getitem__(self, name: str) -> Any:
        for key, value in self._items:
            if key == name:
                return value
        raise KeyError(name)

    def __iter__(self) -> Iterator[str]:
        return (key for key, _ in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __hash__(self) -> int:
        return hash(self._items)

    def __eq__(self, other) -> bool:
        if isinstance(other, ParameterSet):
            return self._items == other._items
        return Mapping.__eq__(self, other)

    def __repr__(self) -> str:
        body = ", ".join(f"{k}={v!r}" for k, v in self._items)
        return f"ParameterSet({body})"

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._items)


# =============================================================================
# ValidationResult
# =============================================================================

@dataclass(frozen=True)
class ValidationResult:
    """Palette quality scores, each in [0, 100]."""
    contrast: float
    harmony: float
    accessibility: float
    balance: float
    overall: float

    def to_dict(self) -> dict:
        return {
            "contrast": self.contrast,
            "harmony": self.harmony,
            "accessibility": self.accessibility,
            "balance": self.balance,
            "overall": self.overall,
        }


# =============================================================================
# ComplexityResult
# =============================================================================

class ComplexityBucket(Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    VERY_HIGH = "Very High"


def bucket_for(value: float) -> ComplexityBucket:
    """
    Map a complexity value to its bucket.

    Edges are upper-exclusive: 24.9 -> Low, 25.0 -> Medium.
    """
    for edge, label in COMPLEXITY_BUCKETS:
        if value < edge:
            return ComplexityBucket(label)
    return ComplexityBucket(COMPLEXITY_TOP_BUCKET)


@dataclass(frozen=True)
class ComplexityResult:
    value: int
    bucket: ComplexityBucket

    def to_dict(self) -> dict:
        return {"value": self.value, "bucket": self.bucket.value}


# =============================================================================
# TraitRecord
# =============================================================================

@dataclass(frozen=True)
class TraitRecord:
    """
    Terminal aggregate for one minted instance.

    Consumed by the renderer (pattern_id, parameters, colors) and by the
    metadata publisher (theme_name, rarity, complexity bucket).
    """
    seed: str                  # Canonical 0x-prefixed hex
    pattern_id: str
    pattern_name: str
    theme_name: str
    rarity: str
    colors: Tuple[str, ...]    # Normalized "#RRGGBB", color1..color4
    parameters: ParameterSet
    complexity: ComplexityResult
    validation: ValidationResult

    def to_dict(self) -> dict:
        return {
            "engine_version": ENGINE_VERSION,
            "schema_version": TRAIT_SCHEMA_VERSION,
            "seed": self.seed,
            "pattern_id": self.pattern_id,
            "pattern_name": self.pattern_name,
            "theme_name": self.theme_name,
            "rarity": self.rarity,
            "colors": {f"color{i + 1}": c for i, c in enumerate(self.colors)},
            "parameters": self.parameters.to_dict(),
            "complexity": self.complexity.to_dict(),
            "validation": self.validation.to_dict(),
        }

    @property
    def traits(self) -> Dict[str, str]:
        """Human-facing traits published as collection metadata."""
        return {
            "Pattern": self.pattern_name,
            "Theme": self.theme_name,
            "Rarity": self.rarity,
            "Complexity": self.complexity.bucket.value,
        }

    def to_metadata(self, token_id: int) -> dict:
        """Token name, description and traits for the metadata publisher."""
        return {
            "name": f"{COLLECTION_NAME} #{token_id}",
            "description": (
                f"An animated generative artwork featuring the '{self.pattern_name}' "
                f"pattern with the '{self.theme_name}' theme."
            ),
            "traits": self.traits,
        }

"""
traitforge/themes.py
Built-in theme palettes and rarity classes

Theme selection is two-level: a rarity class is drawn first, then a theme
within it. Each class's theme weights sum exactly to the class weight, so a
theme's overall probability is simply weight / 100.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from .color import Palette
from .config import PALETTE_KEYS
from .errors import ConfigurationError

# IMPORTANT: Order is part of the rarity walk - append only
RARITY_CLASSES: Tuple[Tuple[str, int], ...] = (
    ("Common", 60),
    ("Uncommon", 25),
    ("Rare", 12),
    ("Epic", 3),
)

RARITY_TOTAL = 100


@dataclass(frozen=True)
class ThemePreset:
    """A named four-color palette with a rarity class and weight."""
    name: str
    rarity: str
    weight: int
    colors: Tuple[str, ...]      # "#RRGGBB", color1..color4
    description: str = ""
    mood: str = ""

    def __post_init__(self):
        object.__setattr__(self, "colors", tuple(self.colors))
        errors = []
        if not self.name:
            errors.append("name cannot be empty")
        if not self.rarity:
            errors.append("rarity cannot be empty")
        if isinstance(self.weight, bool) or not isinstance(self.weight, (int, float)):
            errors.append(f"weight must be a number, got {self.weight!r}")
        elif self.weight < 0:
            errors.append(f"weight must be >= 0, got {self.weight}")
        if errors:
            raise ConfigurationError(f"Invalid theme '{self.name}': {'; '.join(errors)}")
        # Raises InvalidColorError for malformed hex or a wrong color count
        object.__setattr__(self, "colors", Palette.from_hex(self.colors).hex)

    @property
    def palette(self) -> Palette:
        return Palette.from_hex(self.colors)

    def colors_dict(self) -> Dict[str, str]:
        return dict(zip(PALETTE_KEYS, self.colors))

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "rarity": self.rarity,
            "weight": self.weight,
            "colors": self.colors_dict(),
            "description": self.description,
            "mood": self.mood,
        }


# =============================================================================
# Built-in themes
# =============================================================================

BUILTIN_THEMES: Tuple[ThemePreset, ...] = (
    # Common (60)
    ThemePreset(
        name="dawn", rarity="Common", weight=20,
        colors=("#1B2951", "#4A90A4", "#85C1E9", "#F8F9FA"),
        description="Soft morning colors with gentle blues and warm whites",
        mood="calm",
    ),
    ThemePreset(
        name="sunrise", rarity="Common", weight=20,
        colors=("#2C3E50", "#E67E22", "#F39C12", "#FEF9E7"),
        description="Warm orange and gold tones with deep contrasts",
        mood="energetic",
    ),
    ThemePreset(
        name="ocean", rarity="Common", weight=20,
        colors=("#1B4F72", "#3498DB", "#AED6F1", "#EBF5FB"),
        description="Deep sea blues with aqua highlights",
        mood="tranquil",
    ),
    # Uncommon (25)
    ThemePreset(
        name="forest", rarity="Uncommon", weight=13,
        colors=("#274A31", "#58A4B0", "#A5D6A7", "#F5F8F5"),
        description="Natural greens with earthy undertones",
        mood="grounded",
    ),
    ThemePreset(
        name="sunset", rarity="Uncommon", weight=12,
        colors=("#4A235A", "#9B59B6", "#F1C40F", "#FDF2F8"),
        description="Warm purples and pinks with golden accents",
        mood="romantic",
    ),
    # Rare (12)
    ThemePreset(
        name="midnight", rarity="Rare", weight=4,
        colors=("#17202A", "#34495E", "#95A5A6", "#2C3E50"),
        description="Deep blacks and blues with silver accents",
        mood="mysterious",
    ),
    ThemePreset(
        name="monochrome", rarity="Rare", weight=4,
        colors=("#111111", "#555555", "#AAAAAA", "#F5F5F5"),
        description="Pure greyscale from ink to paper",
        mood="minimal",
    ),
    ThemePreset(
        name="neon", rarity="Rare", weight=4,
        colors=("#FF00FF", "#00FFFF", "#39FF14", "#0D0D0D"),
        description="Electric magenta, cyan and green on black",
        mood="electric",
    ),
    # Epic (3)
    ThemePreset(
        name="pastel", rarity="Epic", weight=3,
        colors=("#FFB3BA", "#BAE1FF", "#BAFFC9", "#FFFFBA"),
        description="Soft candy tones with a light touch",
        mood="playful",
    ),
)

"""
traitforge/color.py
Color math for palette validation

Hex parsing, RGB <-> HSL, WCAG relative luminance and contrast, and
dichromacy simulation. All functions are pure.

Colors are RGB triples of ints in 0-255. Hue is in degrees [0, 360),
saturation and lightness in [0, 1].
"""

import re
from dataclasses import dataclass
from itertools import combinations
from typing import Dict, Iterable, List, Mapping, NamedTuple, Sequence, Tuple, Union

import numpy as np

from .config import PALETTE_KEYS, PALETTE_SIZE
from .errors import InvalidColorError

HEX_PATTERN = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")


class RGB(NamedTuple):
    r: int
    g: int
    b: int

    @property
    def hex(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"


# =============================================================================
# Parsing
# =============================================================================

def parse_hex(value: str) -> RGB:
    """
    Parse "#RRGGBB" (leading # optional, case-insensitive).

    Raises:
        InvalidColorError: for anything else; there is no fallback color
    """
    if not isinstance(value, str):
        raise InvalidColorError(f"color must be a hex string, got {value!r}")
    match = HEX_PATTERN.match(value.strip())
    if not match:
        raise InvalidColorError(f"invalid hex color: {value!r}")
    return RGB(*(int(part, 16) for part in match.groups()))


def normalize_hex(value: str) -> str:
    """Canonical uppercase "#RRGGBB" form."""
    return parse_hex(value).hex


# =============================================================================
# HSL
# =============================================================================

def rgb_to_hsl(rgb: Sequence[int]) -> Tuple[float, float, float]:
    """
    Convert an RGB triple to (hue degrees, saturation, lightness).

    Achromatic colors (r == g == b) report hue 0 and saturation 0.
    """
    r, g, b = (c / 255.0 for c in rgb)
    hi = max(r, g, b)
    lo = min(r, g, b)
    l = (hi + lo) / 2

    if hi == lo:
        return 0.0, 0.0, l

    d = hi - lo
    s = d / (2 - hi - lo) if l > 0.5 else d / (hi + lo)
    if hi == r:
        h = (g - b) / d + (6 if g < b else 0)
    elif hi == g:
        h = (b - r) / d + 2
    else:
        h = (r - g) / d + 4
    return h * 60.0, s, l


def hue_distance(a: float, b: float) -> float:
    """Shortest angular distance between two hues, in [0, 180]."""
    d = abs(a - b) % 360.0
    return 360.0 - d if d > 180.0 else d


# =============================================================================
# WCAG luminance / contrast
# =============================================================================

def _linearize(channel: int) -> float:
    c = channel / 255.0
    return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(rgb: Sequence[int]) -> float:
    """WCAG 2.x relative luminance in [0, 1]."""
    r, g, b = (_linearize(c) for c in rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(a: Sequence[int], b: Sequence[int]) -> float:
    """WCAG contrast ratio in [1, 21]; symmetric in its arguments."""
    la = relative_luminance(a)
    lb = relative_luminance(b)
    return (max(la, lb) + 0.05) / (min(la, lb) + 0.05)


# =============================================================================
# Color-blindness simulation
# =============================================================================

# Row-major projection matrices applied to column RGB vectors
SIMULATION_MATRICES: Dict[str, np.ndarray] = {
    "protanopia": np.array([
        [0.567, 0.433, 0.0],
        [0.558, 0.442, 0.0],
        [0.0, 0.242, 0.758],
    ]),
    "deuteranopia": np.array([
        [0.625, 0.375, 0.0],
        [0.7, 0.3, 0.0],
        [0.0, 0.3, 0.7],
    ]),
    "tritanopia": np.array([
        [0.95, 0.05, 0.0],
        [0.0, 0.433, 0.567],
        [0.0, 0.475, 0.525],
    ]),
}


def simulate(colors: Iterable[Sequence[int]], deficiency: str) -> np.ndarray:
    """
    Project colors through a dichromacy matrix.

    Returns an (n, 3) int array; channels are rounded half up.
    """
    try:
        matrix = SIMULATION_MATRICES[deficiency]
    except KeyError:
        raise ValueError(
            f"unknown deficiency '{deficiency}', expected one of "
            f"{sorted(SIMULATION_MATRICES)}"
        ) from None
    rgb = np.asarray(list(colors), dtype=np.float64).reshape(-1, 3)
    projected = rgb @ matrix.T
    return np.clip(np.floor(projected + 0.5), 0, 255).astype(np.int64)


def color_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance in RGB space."""
    diff = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    return float(np.sqrt(np.sum(diff * diff)))


def min_pairwise_distance(colors: Sequence[Sequence[float]]) -> float:
    """Smallest Euclidean distance between any two colors."""
    return min(color_distance(a, b) for a, b in combinations(colors, 2))


# =============================================================================
# Palette
# =============================================================================

@dataclass(frozen=True)
class Palette:
    """
    Exactly four colors, color1..color4.

    Build with Palette.from_hex() from either a {color1: ..} mapping or a
    sequence of hex strings.
    """
    colors: Tuple[RGB, ...]

    def __post_init__(self):
        object.__setattr__(self, "colors", tuple(RGB(*c) for c in self.colors))
        if len(self.colors) != PALETTE_SIZE:
            raise InvalidColorError(
                f"palette must have exactly {PALETTE_SIZE} colors, got {len(self.colors)}"
            )
        for c in self.colors:
            if not all(isinstance(v, int) and 0 <= v <= 255 for v in c):
                raise InvalidColorError(f"RGB channels must be ints 0-255, got {tuple(c)}")

    @classmethod
    def from_hex(cls, values: Union[Mapping[str, str], Sequence[str]]) -> "Palette":
        if isinstance(values, Mapping):
            keys = list(values)
            if sorted(keys) != sorted(PALETTE_KEYS):
                raise InvalidColorError(
                    f"palette keys must be {', '.join(PALETTE_KEYS)}, got {', '.join(map(str, keys))}"
                )
            values = [values[k] for k in PALETTE_KEYS]
        elif isinstance(values, str):
            raise InvalidColorError("palette must be a sequence of colors, not a single string")

        errors = []
        colors: List[RGB] = []
        for i, value in enumerate(values):
            try:
                colors.append(parse_hex(value))
            except InvalidColorError as e:
                errors.append(f"color{i + 1}: {e}")
        if errors:
            raise InvalidColorError("; ".join(errors))
        return cls(tuple(colors))

    @property
    def hex(self) -> Tuple[str, ...]:
        return tuple(c.hex for c in self.colors)

    def to_dict(self) -> Dict[str, str]:
        return dict(zip(PALETTE_KEYS, self.hex))

    def hsl(self) -> List[Tuple[float, float, float]]:
        return [rgb_to_hsl(c) for c in self.colors]

    def __iter__(self):
        return iter(self.colors)

    def __len__(self) -> int:
        return len(self.colors)

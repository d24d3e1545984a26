"""
traitforge/harmony.py
Palette validation: contrast, harmony, accessibility, balance

Given a four-color palette, produce sub-scores in [0, 100] and a weighted
overall score. Validation is a pure function of the palette and the
ValidationConfig; it never draws randomness.

Hue comparisons use circular distance, so 355 deg and 5 deg are 10 deg apart.
"""

import logging
import math
from dataclasses import dataclass
from itertools import combinations
from typing import Dict, Sequence, Tuple

from .color import (
    SIMULATION_MATRICES,
    Palette,
    contrast_ratio,
    hue_distance,
    min_pairwise_distance,
    relative_luminance,
    rgb_to_hsl,
    simulate,
)
from .config import VALIDATION_CONFIG, ValidationConfig
from .models import ValidationResult

logger = logging.getLogger(__name__)

SCHEMES = (
    "monochromatic",
    "analogous",
    "complementary",
    "triadic",
    "tetradic",
    "split_complementary",
)


# =============================================================================
# Reports
# =============================================================================

@dataclass(frozen=True)
class ContrastPair:
    first: int
    second: int
    ratio: float
    wcag_aa: bool
    wcag_aaa: bool


@dataclass(frozen=True)
class ContrastReport:
    pairs: Tuple[ContrastPair, ...]
    average: float
    minimum: float
    maximum: float
    aa_compliant: int
    aaa_compliant: int
    score: float


@dataclass(frozen=True)
class HarmonyReport:
    schemes: Dict[str, bool]
    hue_variance: float
    saturation_balance: float
    lightness_balance: float
    score: float

    @property
    def matched(self) -> Tuple[str, ...]:
        return tuple(name for name in SCHEMES if self.schemes[name])


@dataclass(frozen=True)
class AccessibilityReport:
    distinguishable: Dict[str, bool]   # deficiency -> passes
    min_distances: Dict[str, float]
    score: float


@dataclass(frozen=True)
class BalanceReport:
    visual_weights: Tuple[float, ...]
    weight_balance: float
    temperatures: Tuple[float, ...]
    temperature_balance: float
    has_light: bool
    has_dark: bool
    light_dark_balance: float
    score: float


@dataclass(frozen=True)
class PaletteAnalysis:
    """Detailed validation breakdown; .result gives the headline scores."""
    palette: Palette
    contrast: ContrastReport
    harmony: HarmonyReport
    accessibility: AccessibilityReport
    balance: BalanceReport
    overall: float

    @property
    def result(self) -> ValidationResult:
        return ValidationResult(
            contrast=self.contrast.score,
            harmony=self.harmony.score,
            accessibility=self.accessibility.score,
            balance=self.balance.score,
            overall=self.overall,
        )

    def to_dict(self) -> dict:
        return {
            "colors": self.palette.to_dict(),
            "scores": self.result.to_dict(),
            "contrast": {
                "average": self.contrast.average,
                "minimum": self.contrast.minimum,
                "maximum": self.contrast.maximum,
                "wcag_aa_compliant": self.contrast.aa_compliant,
                "wcag_aaa_compliant": self.contrast.aaa_compliant,
                "pairs": [
                    {"colors": [p.first, p.second], "ratio": p.ratio,
                     "wcag_aa": p.wcag_aa, "wcag_aaa": p.wcag_aaa}
                    for p in self.contrast.pairs
                ],
            },
            "harmony": {
                "schemes": dict(self.harmony.schemes),
                "hue_variance": self.harmony.hue_variance,
                "saturation_balance": self.harmony.saturation_balance,
                "lightness_balance": self.harmony.lightness_balance,
            },
            "accessibility": {
                "distinguishable": dict(self.accessibility.distinguishable),
                "min_distances": dict(self.accessibility.min_distances),
            },
            "balance": {
                "visual_weights": list(self.balance.visual_weights),
                "weight_balance": self.balance.weight_balance,
                "temperatures": list(self.balance.temperatures),
                "temperature_balance": self.balance.temperature_balance,
                "has_light": self.balance.has_light,
                "has_dark": self.balance.has_dark,
                "light_dark_balance": self.balance.light_dark_balance,
            },
        }


# =============================================================================
# Statistics helpers
# =============================================================================

def variance(values: Sequence[float]) -> float:
    """Population variance; 0 for an empty set."""
    if not values:
        return 0.0
    mean = math.fsum(values) / len(values)
    return math.fsum((v - mean) ** 2 for v in values) / len(values)


def balance(values: Sequence[float]) -> float:
    """
    1 - (variance / mean^2), floored at 0.

    1.0 means perfectly even values. Empty sets and zero means score 0.
    """
    if not values:
        return 0.0
    mean = math.fsum(values) / len(values)
    if mean == 0:
        return 0.0
    return max(0.0, 1.0 - variance(values) / (mean * mean))


def clamp_score(value: float) -> float:
    return max(0.0, min(100.0, value))


def color_temperature(hue: float) -> float:
    """
    Bucketed warmth of a hue: 1.0 warm ... 0.0 cool.

    Bucket edges are inclusive on the lower bucket.
    """
    if 0 <= hue <= 60:
        return 1.0      # Red-Yellow
    if hue <= 120:
        return 0.5      # Yellow-Green
    if hue <= 240:
        return 0.0      # Green-Blue
    if hue <= 300:
        return 0.2      # Blue-Purple
    return 0.8          # Purple-Red


def visual_weight(rgb: Sequence[int]) -> float:
    """Darker and more saturated colors weigh more."""
    _, s, _ = rgb_to_hsl(rgb)
    return (1.0 - relative_luminance(rgb)) * 0.7 + s * 0.3


# =============================================================================
# Hue schemes
# =============================================================================

def _circular_gaps(hues: Sequence[float]) -> Tuple[float, ...]:
    """Gaps between consecutive sorted hues, including the wrap-around gap."""
    ordered = sorted(h % 360.0 for h in hues)
    gaps = [b - a for a, b in zip(ordered, ordered[1:])]
    gaps.append(360.0 - (ordered[-1] - ordered[0]))
    return tuple(gaps)


def is_monochromatic(hues: Sequence[float], tolerance: float) -> bool:
    base = hues[0]
    return all(hue_distance(h, base) <= tolerance for h in hues)


def is_analogous(hues: Sequence[float], tolerance: float) -> bool:
    """All hues fit inside an arc no wider than tolerance."""
    arc = 360.0 - max(_circular_gaps(hues))
    return arc <= tolerance


def is_complementary(hues: Sequence[float], tolerance: float) -> bool:
    return any(
        abs(hue_distance(a, b) - 180.0) <= tolerance
        for a, b in combinations(hues, 2)
    )


def is_triadic(hues: Sequence[float], tolerance: float) -> bool:
    """Some three hues sit roughly 120 deg apart around the wheel."""
    if len(hues) < 3:
        return False
    return any(
        all(abs(gap - 120.0) <= tolerance for gap in _circular_gaps(trio))
        for trio in combinations(hues, 3)
    )


def is_tetradic(hues: Sequence[float], tolerance: float) -> bool:
    """Four hues roughly 90 deg apart around the wheel."""
    if len(hues) < 4:
        return False
    return any(
        all(abs(gap - 90.0) <= tolerance for gap in _circular_gaps(quad))
        for quad in combinations(hues, 4)
    )


def is_split_complementary(hues: Sequence[float], tolerance: float) -> bool:
    """Some base hue has colors near both neighbours of its complement."""
    if len(hues) < 3:
        return False
    for base in hues:
        complement = (base + 180.0) % 360.0
        split1 = (complement - 30.0) % 360.0
        split2 = (complement + 30.0) % 360.0
        has_split1 = any(hue_distance(h, split1) <= tolerance for h in hues)
        has_split2 = any(hue_distance(h, split2) <= tolerance for h in hues)
        if has_split1 and has_split2:
            return True
    return False


# =============================================================================
# Validator
# =============================================================================

class ColorHarmonyValidator:
    """
    Scores a four-color palette.

    Usage:
        validator = ColorHarmonyValidator()
        result = validator.validate({"color1": "#1B2951", ...})
        report = validator.analyze(["#000000", "#FFFFFF", "#FF0000", "#00FF00"])
    """

    def __init__(self, config: ValidationConfig = VALIDATION_CONFIG):
        self.config = config

    def validate(self, palette) -> ValidationResult:
        """
        Headline scores for a palette.

        Args:
            palette: Palette, {color1..color4: hex} mapping, or sequence of 4 hex

        Raises:
            InvalidColorError: for malformed hex or a palette that is not 4 colors
        """
        return self.analyze(palette).result

    def analyze(self, palette) -> PaletteAnalysis:
        """Full per-check breakdown for a palette."""
        if not isinstance(palette, Palette):
            palette = Palette.from_hex(palette)

        contrast = self.check_contrast(palette)
        harmony = self.check_harmony(palette)
        accessibility = self.check_accessibility(palette)
        balance_report = self.check_balance(palette)

        w = self.config.weights
        overall = clamp_score(
            contrast.score * w["contrast"]
            + harmony.score * w["harmony"]
            + accessibility.score * w["accessibility"]
            + balance_report.score * w["balance"]
        )

        logger.debug(
            "palette %s: contrast=%.1f harmony=%.1f accessibility=%.1f balance=%.1f overall=%.1f",
            ",".join(palette.hex), contrast.score, harmony.score,
            accessibility.score, balance_report.score, overall,
        )

        return PaletteAnalysis(
            palette=palette,
            contrast=contrast,
            harmony=harmony,
            accessibility=accessibility,
            balance=balance_report,
            overall=overall,
        )

    # -------------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------------

    def check_contrast(self, palette: Palette) -> ContrastReport:
        cfg = self.config
        pairs = []
        for (i, a), (j, b) in combinations(enumerate(palette.colors), 2):
            ratio = contrast_ratio(a, b)
            pairs.append(ContrastPair(
                first=i,
                second=j,
                ratio=ratio,
                wcag_aa=ratio >= cfg.wcag_aa,
                wcag_aaa=ratio >= cfg.wcag_aaa,
            ))

        ratios = [p.ratio for p in pairs]
        average = math.fsum(ratios) / len(ratios)
        return ContrastReport(
            pairs=tuple(pairs),
            average=average,
            minimum=min(ratios),
            maximum=max(ratios),
            aa_compliant=sum(1 for p in pairs if p.wcag_aa),
            aaa_compliant=sum(1 for p in pairs if p.wcag_aaa),
            score=clamp_score(average / cfg.wcag_aa * 100.0),
        )

    def check_harmony(self, palette: Palette) -> HarmonyReport:
        cfg = self.config
        hsl = palette.hsl()
        hues = [h for h, _, _ in hsl]
        saturations = [s for _, s, _ in hsl]
        lightnesses = [l for _, _, l in hsl]

        schemes = {
            "monochromatic": is_monochromatic(hues, cfg.monochromatic_tolerance),
            "analogous": is_analogous(hues, cfg.analogous_tolerance),
            "complementary": is_complementary(hues, cfg.scheme_tolerance),
            "triadic": is_triadic(hues, cfg.scheme_tolerance),
            "tetradic": is_tetradic(hues, cfg.scheme_tolerance),
            "split_complementary": is_split_complementary(hues, cfg.scheme_tolerance),
        }

        saturation_balance = balance(saturations)
        lightness_balance = balance(lightnesses)

        scheme_score = cfg.scheme_bonus if any(schemes.values()) else 0.0
        balance_score = (saturation_balance + lightness_balance) / 2 * cfg.balance_weight

        return HarmonyReport(
            schemes=schemes,
            hue_variance=variance(hues),
            saturation_balance=saturation_balance,
            lightness_balance=lightness_balance,
            score=clamp_score(scheme_score + balance_score),
        )

    def check_accessibility(self, palette: Palette) -> AccessibilityReport:
        cfg = self.config
        distinguishable = {}
        min_distances = {}
        for deficiency in SIMULATION_MATRICES:
            simulated = simulate(palette.colors, deficiency)
            nearest = min_pairwise_distance(simulated)
            min_distances[deficiency] = nearest
            distinguishable[deficiency] = nearest >= cfg.distinguish_threshold

        passes = sum(1 for ok in distinguishable.values() if ok)
        return AccessibilityReport(
            distinguishable=distinguishable,
            min_distances=min_distances,
            score=clamp_score(passes / len(SIMULATION_MATRICES) * 100.0),
        )

    def check_balance(self, palette: Palette) -> BalanceReport:
        cfg = self.config
        weights = tuple(visual_weight(c) for c in palette.colors)
        hsl = palette.hsl()
        temperatures = tuple(color_temperature(h) for h, _, _ in hsl)

        has_light = any(l > cfg.light_threshold for _, _, l in hsl)
        has_dark = any(l < cfg.dark_threshold for _, _, l in hsl)
        light_dark = 1.0 if (has_light and has_dark) else 0.5

        weight_balance = balance(weights)
        temperature_balance = balance(temperatures)

        overall = (weight_balance + temperature_balance + light_dark) / 3
        return BalanceReport(
            visual_weights=weights,
            weight_balance=weight_balance,
            temperatures=temperatures,
            temperature_balance=temperature_balance,
            has_light=has_light,
            has_dark=has_dark,
            light_dark_balance=light_dark,
            score=clamp_score(overall * 100.0),
        )


def validate_palette(palette, config: ValidationConfig = VALIDATION_CONFIG) -> ValidationResult:
    """Convenience wrapper: ColorHarmonyValidator(config).validate(palette)."""
    return ColorHarmonyValidator(config).validate(palette)

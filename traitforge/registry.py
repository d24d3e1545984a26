"""
traitforge/registry.py
Validated configuration bundle for trait assembly

A TraitRegistry holds every static table the assembler reads: pattern
configs and their complexity functions, the pattern rarity table, the
two-level theme table, and the validation thresholds. It is checked once at
construction and is read-only afterwards, with one exception: a per-theme
cache of palette validation results, filled on first use under a lock.
"""

import logging
import threading
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .complexity import ComplexityScorer
from .config import VALIDATION_CONFIG, ValidationConfig
from .errors import ConfigurationError
from .harmony import ColorHarmonyValidator, PaletteAnalysis
from .models import ValidationResult
from .patterns import BUILTIN_ARCHETYPES, Archetype, PatternConfig
from .rarity import RarityTable, TieredRarityTable
from .themes import BUILTIN_THEMES, RARITY_CLASSES, RARITY_TOTAL, ThemePreset

logger = logging.getLogger(__name__)

PATTERN_TOTAL = 100


class TraitRegistry:
    """
    Frozen configuration consumed by TraitAssembler.

    Usage:
        registry = TraitRegistry(BUILTIN_ARCHETYPES, BUILTIN_THEMES)
        registry.pattern_table.select(rng)
        registry.palette_validation("dawn")
    """

    def __init__(
        self,
        archetypes: Iterable[Archetype],
        themes: Iterable[ThemePreset],
        rarity_classes: Sequence[Tuple[str, int]] = RARITY_CLASSES,
        pattern_total: Optional[float] = PATTERN_TOTAL,
        rarity_total: Optional[float] = RARITY_TOTAL,
        validation_config: ValidationConfig = VALIDATION_CONFIG,
    ):
        archetypes = tuple(archetypes)
        themes = tuple(themes)
        errors = []

        pattern_ids = [a.pattern_id for a in archetypes]
        dupes = sorted({p for p in pattern_ids if pattern_ids.count(p) > 1})
        if dupes:
            errors.append(f"duplicate patterns: {', '.join(dupes)}")
        for a in archetypes:
            if not callable(a.scorer):
                errors.append(f"pattern '{a.pattern_id}' has no complexity scorer")

        theme_names = [t.name for t in themes]
        dupes = sorted({n for n in theme_names if theme_names.count(n) > 1})
        if dupes:
            errors.append(f"duplicate themes: {', '.join(dupes)}")

        class_names = [c for c, _ in rarity_classes]
        for t in themes:
            if t.rarity not in class_names:
                errors.append(f"theme '{t.name}' has unknown rarity '{t.rarity}'")

        if errors:
            message = f"Invalid registry: {'; '.join(errors)}"
            logger.warning(message)
            raise ConfigurationError(message)

        self._patterns: Dict[str, PatternConfig] = {a.pattern_id: a.config for a in archetypes}
        self._themes: Dict[str, ThemePreset] = {t.name: t for t in themes}

        self.scorer = ComplexityScorer()
        for a in archetypes:
            self.scorer.register(a.pattern_id, a.scorer, a.config)

        # Every scorer must accept its own defaults
        for a in archetypes:
            try:
                self.scorer.score(a.pattern_id, a.config.default_params())
            except Exception as e:
                errors.append(
                    f"pattern '{a.pattern_id}' complexity scorer failed on defaults: "
                    f"{type(e).__name__}: {e}"
                )
        if errors:
            message = f"Invalid registry: {'; '.join(errors)}"
            logger.warning(message)
            raise ConfigurationError(message)

        self.pattern_table = RarityTable(
            [(a.pattern_id, a.weight) for a in archetypes],
            total=pattern_total,
            name="patterns",
        )

        class_table = RarityTable(rarity_classes, total=rarity_total, name="rarity classes")
        members = {}
        for class_key in class_names:
            entries = [(t.name, t.weight) for t in themes if t.rarity == class_key]
            if entries:
                members[class_key] = RarityTable(entries, name=f"{class_key} themes")
        self.theme_table = TieredRarityTable(class_table, members, name="themes")

        self.validation_config = validation_config
        self._validator = ColorHarmonyValidator(validation_config)
        self._analyses: Dict[str, PaletteAnalysis] = {}
        self._lock = threading.Lock()

        logger.debug(
            "registry ready: %d patterns, %d themes", len(self._patterns), len(self._themes)
        )

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def pattern(self, pattern_id: str) -> PatternConfig:
        try:
            return self._patterns[pattern_id]
        except KeyError:
            raise ConfigurationError(f"unknown pattern '{pattern_id}'") from None

    def theme(self, name: str) -> ThemePreset:
        try:
            return self._themes[name]
        except KeyError:
            raise ConfigurationError(f"unknown theme '{name}'") from None

    @property
    def patterns(self) -> List[PatternConfig]:
        return list(self._patterns.values())

    @property
    def themes(self) -> List[ThemePreset]:
        return list(self._themes.values())

    # -------------------------------------------------------------------------
    # Palette validation cache
    # -------------------------------------------------------------------------

    def palette_analysis(self, theme_name: str) -> PaletteAnalysis:
        """
        Detailed validation for a theme's palette, computed at most once.

        The lock is held across the computation so concurrent first calls
        for the same theme never validate twice.
        """
        theme = self.theme(theme_name)
        with self._lock:
            analysis = self._analyses.get(theme_name)
            if analysis is None:
                analysis = self._validator.analyze(theme.palette)
                self._analyses[theme_name] = analysis
                logger.debug("validated theme '%s': overall=%.1f", theme_name, analysis.overall)
            return analysis

    def palette_validation(self, theme_name: str) -> ValidationResult:
        return self.palette_analysis(theme_name).result

    def cached_themes(self) -> List[str]:
        with self._lock:
            return list(self._analyses)

    def warm_cache(self) -> None:
        """Validate every theme up front."""
        for name in self._themes:
            self.palette_analysis(name)


def default_registry(validation_config: ValidationConfig = VALIDATION_CONFIG) -> TraitRegistry:
    """Registry over the built-in archetypes and themes."""
    return TraitRegistry(
        BUILTIN_ARCHETYPES,
        BUILTIN_THEMES,
        validation_config=validation_config,
    )

"""
traitforge/assemble.py
Seed -> TraitRecord

Assembly runs in a fixed order so that RNG consumption, and therefore every
output, is stable:

    1. RNG from seed
    2. Pattern        (stream "pattern", one draw)
    3. Theme          (stream "theme", two draws: rarity class, then theme)
    4. Parameters     (stream "params", one draw per spec)
    5. Palette validation (registry cache, no draws)
    6. Complexity     (pure function of pattern + params)
    7. Frozen TraitRecord

Any failure aborts the whole assembly; a partial record is never returned.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .config import STREAM_PARAMS, STREAM_PATTERN, STREAM_THEME
from .errors import TraitForgeError
from .models import TraitRecord
from .registry import TraitRegistry, default_registry
from .sampler import ParameterSampler
from .seeds import DeterministicRNG, SeedLike, seed_hex

logger = logging.getLogger(__name__)


class TraitAssembler:
    """
    Orchestrates one assembly per call.

    Holds no per-call state, so one assembler can serve concurrent calls.
    """

    def __init__(self, sampler: Optional[ParameterSampler] = None):
        self.sampler = sampler or ParameterSampler()

    def assemble(self, seed: SeedLike, registry: TraitRegistry) -> TraitRecord:
        """
        Build the trait record for seed.

        Raises:
            InvalidSeedError: if the seed is malformed
            ConfigurationError: if the registry cannot serve the selection
            InvalidColorError: if the selected theme's palette is malformed
        """
        rng = DeterministicRNG(seed)

        pattern_id = registry.pattern_table.select(rng.stream(STREAM_PATTERN))
        pattern = registry.pattern(pattern_id)

        rarity, theme_name = registry.theme_table.select(rng.stream(STREAM_THEME))
        theme = registry.theme(theme_name)

        params = self.sampler.sample(pattern, rng.stream(STREAM_PARAMS))

        validation = registry.palette_validation(theme_name)

        complexity = registry.scorer.score(pattern_id, params)

        record = TraitRecord(
            seed=rng.seed_hex,
            pattern_id=pattern_id,
            pattern_name=pattern.display_name,
            theme_name=theme.name,
            rarity=rarity,
            colors=theme.colors,
            parameters=params,
            complexity=complexity,
            validation=validation,
        )
        logger.debug(
            "assembled %s: pattern=%s theme=%s rarity=%s complexity=%d (%s)",
            record.seed[:10], pattern_id, theme_name, rarity,
            complexity.value, complexity.bucket.value,
        )
        return record


_default_assembler = TraitAssembler()


def assemble_traits(seed: SeedLike, registry: Optional[TraitRegistry] = None) -> TraitRecord:
    """
    Convenience entry point.

    Example:
        record = assemble_traits("0x" + "ab" * 32)
        record.to_metadata(token_id=1)
    """
    if registry is None:
        registry = default_registry()
    return _default_assembler.assemble(seed, registry)


# =============================================================================
# Batch assembly
# =============================================================================

@dataclass(frozen=True)
class BatchOutcome:
    """Result for one seed in a batch: exactly one of record/error is set."""
    seed: SeedLike
    record: Optional[TraitRecord] = None
    error: Optional[TraitForgeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _assemble_one(assembler: TraitAssembler, seed: SeedLike, registry: TraitRegistry) -> BatchOutcome:
    try:
        return BatchOutcome(seed=seed, record=assembler.assemble(seed, registry))
    except TraitForgeError as e:
        logger.warning("assembly failed for seed %r: %s", seed, e)
        return BatchOutcome(seed=seed, error=e)


def assemble_batch(
    seeds: Iterable[SeedLike],
    registry: TraitRegistry,
    max_workers: Optional[int] = None,
    assembler: Optional[TraitAssembler] = None,
) -> List[BatchOutcome]:
    """
    Assemble many seeds on a thread pool.

    Outcomes are returned in input order. A seed that fails is reported in
    its own outcome and does not affect the others.
    """
    seeds = list(seeds)
    assembler = assembler or _default_assembler
    if max_workers is not None and max_workers < 1:
        raise ValueError(f"max_workers must be >= 1, got {max_workers}")

    with ThreadPoolExecutor(max_workers=max_workers) as ex:
        outcomes = list(ex.map(lambda s: _assemble_one(assembler, s, registry), seeds))

    failed = sum(1 for o in outcomes if not o.ok)
    logger.info("batch assembled %d seeds (%d failed)", len(outcomes), failed)
    return outcomes


def seed_range(start: int, count: int) -> List[str]:
    """count consecutive integer seeds from start, as canonical hex."""
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    return [seed_hex(start + i) for i in range(count)]

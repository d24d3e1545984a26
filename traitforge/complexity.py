"""
traitforge/complexity.py
Complexity trait scoring

Each archetype registers a pure function (config, params) -> float.
Raw scores are rounded half up and clamped to [1, 100], then bucketed.
"""

import logging
import math
from typing import Dict, Mapping, Optional, Tuple

from .config import COMPLEXITY_MAX, COMPLEXITY_MIN
from .errors import ConfigurationError
from .models import ComplexityBucket, ComplexityResult, bucket_for
from .patterns.base import PatternConfig, ScoringFunction, round_half_up

logger = logging.getLogger(__name__)

__all__ = [
    "ComplexityBucket",
    "ComplexityResult",
    "ComplexityScorer",
    "bucket_for",
    "clamp_complexity",
]


def clamp_complexity(raw: float) -> int:
    """Round half up, then clamp to [COMPLEXITY_MIN, COMPLEXITY_MAX]."""
    if not math.isfinite(raw):
        raise ValueError(f"complexity score must be finite, got {raw!r}")
    return max(COMPLEXITY_MIN, min(COMPLEXITY_MAX, round_half_up(raw)))


class ComplexityScorer:
    """
    Registry of per-pattern complexity functions.

    Usage:
        scorer = ComplexityScorer()
        scorer.register("interference", score_interference, INTERFERENCE)
        result = scorer.score("interference", params)
    """

    def __init__(self):
        self._scorers: Dict[str, Tuple[Optional[PatternConfig], ScoringFunction]] = {}

    def register(
        self,
        pattern_id: str,
        fn: ScoringFunction,
        config: Optional[PatternConfig] = None,
    ) -> None:
        """
        Register fn for pattern_id.

        fn is called as fn(config, params). When config is given, score()
        also checks that params carries every declared parameter.

        Raises:
            ConfigurationError: if the pattern already has a scorer
        """
        if pattern_id in self._scorers:
            raise ConfigurationError(
                f"complexity scorer already registered for '{pattern_id}'"
            )
        if config is not None and config.pattern_id != pattern_id:
            raise ConfigurationError(
                f"scorer registered as '{pattern_id}' but config is '{config.pattern_id}'"
            )
        self._scorers[pattern_id] = (config, fn)

    def pattern_ids(self):
        return list(self._scorers)

    def get(self, pattern_id: str) -> Optional[ScoringFunction]:
        entry = self._scorers.get(pattern_id)
        return entry[1] if entry else None

    def score(self, pattern_id: str, params: Mapping) -> ComplexityResult:
        """
        Score a parameter set.

        Raises:
            ConfigurationError: if no scorer is registered for pattern_id
            ConfigurationError: if params lacks a parameter the pattern declares
        """
        entry = self._scorers.get(pattern_id)
        if entry is None:
            raise ConfigurationError(f"no complexity scorer for pattern '{pattern_id}'")
        config, fn = entry

        missing = [name for name in config.param_names if name not in params] if config else []
        if missing:
            raise ConfigurationError(
                f"params for '{pattern_id}' missing: {', '.join(missing)}"
            )

        raw = fn(config, params)
        value = clamp_complexity(raw)
        bucket = bucket_for(value)
        logger.debug("complexity %s: raw=%.3f value=%d bucket=%s",
                     pattern_id, raw, value, bucket.value)
        return ComplexityResult(value=value, bucket=bucket)

    def __len__(self) -> int:
        return len(self._scorers)

    def __contains__(self, pattern_id: str) -> bool:
        return pattern_id in self._scorers

"""
traitforge/sampler.py
Seed-driven parameter sampling

One draw per ParamSpec, consumed in declared order. Adding a spec to the end
of a pattern leaves earlier values unchanged; reordering changes them all.
"""

import logging

from .errors import ConfigurationError
from .models import ParameterSet
from .patterns.base import PatternConfig

logger = logging.getLogger(__name__)


class ParameterSampler:
    """
    Draws a ParameterSet for a pattern from an RNG (or RNGStream).

    Stateless; a single instance may be shared across threads as long as
    each call gets its own rng.
    """

    def sample(self, pattern_config: PatternConfig, rng) -> ParameterSet:
        """
        Sample every parameter of pattern_config.

        Args:
            pattern_config: Frozen pattern definition
            rng: Anything with next() -> float in [0, 1)

        Returns:
            ParameterSet in declaration order

        Raises:
            ConfigurationError: if any spec is malformed
        """
        # Specs validate themselves on construction; re-check here so that a
        # spec built around __post_init__ can never reach the draw
        for spec in pattern_config.param_specs:
            errors = spec.check()
            if errors:
                message = (
                    f"Invalid param '{spec.name}' in pattern "
                    f"'{pattern_config.pattern_id}': {'; '.join(errors)}"
                )
                logger.warning(message)
                raise ConfigurationError(message)

        values = []
        for spec in pattern_config.param_specs:
            values.append((spec.name, spec.sample(rng.next())))

        return ParameterSet(values)


_default_sampler = ParameterSampler()


def sample_parameters(pattern_config: PatternConfig, rng) -> ParameterSet:
    """Convenience wrapper around a shared ParameterSampler."""
    return _default_sampler.sample(pattern_config, rng)

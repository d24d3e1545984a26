"""
traitforge/patterns/base.py
Pattern archetype definitions

Each archetype defines:
- Parameter specs (what can vary, in a stable, versioned order)
- Display metadata consumed by the rendering layer
- A pure complexity function, registered alongside it

Specs are validated when constructed, so a malformed archetype fails at
load time instead of on a live seed.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from ..errors import ConfigurationError

PARAM_TYPES = ("int", "float", "bool")
DISTRIBUTIONS = ("uniform", "log")


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives; Python's round() is banker's."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class ParamSpec:
    """A parameter sampled once per minted instance."""
    name: str
    min_val: float
    max_val: float
    type: str = "float"           # "int", "float" or "bool"
    distribution: str = "uniform"  # "uniform" or "log"
    step: Optional[float] = None   # Optional quantization from min_val

    label: str = ""               # Human-readable, e.g. "Wave Sources"

    def __post_init__(self):
        errors = self.check()
        if errors:
            raise ConfigurationError(f"Invalid param '{self.name}': {'; '.join(errors)}")

    def check(self) -> list:
        """Return a list of problems with this spec (empty if valid)."""
        errors = []
        if not self.name:
            errors.append("name cannot be empty")
        if self.type not in PARAM_TYPES:
            errors.append(f"type must be one of {PARAM_TYPES}, got '{self.type}'")
        if self.distribution not in DISTRIBUTIONS:
            errors.append(
                f"distribution must be one of {DISTRIBUTIONS}, got '{self.distribution}'"
            )
        for bound in (self.min_val, self.max_val):
            if isinstance(bound, bool) or not isinstance(bound, (int, float)):
                errors.append(f"bounds must be numbers, got {bound!r}")
                return errors
            if not math.isfinite(bound):
                errors.append(f"bounds must be finite, got {bound!r}")
                return errors
        if self.min_val > self.max_val:
            errors.append(f"min {self.min_val} > max {self.max_val}")
        elif self.type == "int" and math.ceil(self.min_val) > math.floor(self.max_val):
            errors.append(f"int range [{self.min_val}, {self.max_val}] contains no integer")
        if self.distribution == "log" and self.min_val <= 0:
            errors.append(f"log distribution requires positive min, got {self.min_val}")
        if self.type == "bool" and (self.min_val, self.max_val) != (0, 1):
            errors.append("bool params must declare min 0 and max 1")
        if self.type == "bool" and self.distribution != "uniform":
            errors.append("bool params must use the uniform distribution")
        if self.step is not None and not (self.step > 0):
            errors.append(f"step must be positive, got {self.step}")
        return errors

    def sample(self, t: float) -> Any:
        """
        Map a draw t in [0, 1) to a value in [min_val, max_val].

        Args:
            t: Uniform draw from the RNG stream

        Returns:
            int, float or bool according to type
        """
        if self.type == "bool":
            return t >= 0.5

        if self.distribution == "log":
            value = self.min_val * ((self.max_val / self.min_val) ** t)
        else:
            value = self.min_val + t * (self.max_val - self.min_val)

        if self.step is not None:
            # Snap to the nearest grid point that does not pass max_val
            top = math.floor((self.max_val - self.min_val) / self.step + 1e-9)
            k = min(round_half_up((value - self.min_val) / self.step), top)
            value = self.min_val + k * self.step

        if self.type == "int":
            value = round_half_up(value)

        # Clamp float drift (e.g. exp/log round-off or a step overshooting max)
        return self.clamp(value)

    def clamp(self, value):
        if value < self.min_val:
            return type(value)(math.ceil(self.min_val)) if self.type == "int" else self.min_val
        if value > self.max_val:
            return type(value)(math.floor(self.max_val)) if self.type == "int" else self.max_val
        return value

    def normalize(self, value: float) -> float:
        """
        Convert actual value to normalized 0-1 range.

        Log specs normalize in log space. Values outside the range clamp.
        """
        value = max(self.min_val, min(self.max_val, float(value)))
        if self.distribution == "log":
            if self.max_val == self.min_val:
                return 0.5
            return math.log(value / self.min_val) / math.log(self.max_val / self.min_val)
        range_val = self.max_val - self.min_val
        if range_val == 0:
            return 0.5
        return (value - self.min_val) / range_val

    def default(self) -> Any:
        """Midpoint of the range; False for bools."""
        if self.type == "bool":
            return False
        mid = (self.min_val + self.max_val) / 2
        if self.type == "int":
            return self.clamp(round_half_up(mid))
        return mid

    def to_dict(self) -> dict:
        d = {
            "name": self.name,
            "min": self.min_val,
            "max": self.max_val,
            "type": self.type,
            "distribution": self.distribution,
        }
        if self.step is not None:
            d["step"] = self.step
        if self.label:
            d["label"] = self.label
        return d


@dataclass(frozen=True)
class PatternConfig:
    """
    Complete definition of a pattern archetype.

    param_specs order is part of the output contract: each spec consumes one
    draw in declared order, so reordering changes every sampled value.
    """
    pattern_id: str          # e.g., "interference"
    display_name: str        # e.g., "Interference"
    param_specs: Tuple[ParamSpec, ...] = field(default_factory=tuple)
    category: str = ""       # e.g., "waves", "geometric"
    description: str = ""
    version: str = "1"

    def __post_init__(self):
        # Accept lists from callers but store immutably
        object.__setattr__(self, "param_specs", tuple(self.param_specs))
        errors = []
        if not self.pattern_id:
            errors.append("pattern_id cannot be empty")
        if not self.param_specs:
            errors.append("at least one param spec is required")
        names = [p.name for p in self.param_specs]
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            errors.append(f"duplicate params: {', '.join(dupes)}")
        if errors:
            raise ConfigurationError(
                f"Invalid pattern '{self.pattern_id}': {'; '.join(errors)}"
            )

    def spec(self, name: str) -> ParamSpec:
        for p in self.param_specs:
            if p.name == name:
                return p
        raise KeyError(name)

    @property
    def param_names(self) -> Tuple[str, ...]:
        return tuple(p.name for p in self.param_specs)

    def default_params(self) -> Dict[str, Any]:
        """Default value for every param (midpoint of range)."""
        return {p.name: p.default() for p in self.param_specs}

    def to_dict(self) -> dict:
        return {
            "id": self.pattern_id,
            "display_name": self.display_name,
            "category": self.category,
            "description": self.description,
            "version": self.version,
            "params": [p.to_dict() for p in self.param_specs],
        }


ScoringFunction = Callable[[PatternConfig, Mapping[str, Any]], float]


@dataclass(frozen=True)
class Archetype:
    """A pattern config paired with its complexity function and rarity weight."""
    config: PatternConfig
    scorer: ScoringFunction
    weight: int

    @property
    def pattern_id(self) -> str:
        return self.config.pattern_id

"""
traitforge/rarity.py
Weighted-rarity selection tables

A RarityTable is validated once, at construction, and is read-only
afterwards. Weight arithmetic is exact (fractions.Fraction) so that selection
probability is exactly weight / total and the walk gives identical results on
every platform.

Float weights are read by their shortest decimal repr, so 0.1 + 0.2 sums to
exactly 0.3 as written in configuration.
"""

import logging
import math
from dataclasses import dataclass
from fractions import Fraction
from numbers import Real
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

Weight = Union[int, float, Fraction]


def exact_weight(value: Weight) -> Fraction:
    """
    Convert a configured weight to an exact Fraction.

    Raises:
        ConfigurationError: for bools, non-numbers and non-finite values
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ConfigurationError(f"weight must be a number, got {value!r}")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ConfigurationError(f"weight must be finite, got {value!r}")
        return Fraction(repr(value))
    return Fraction(value)


@dataclass(frozen=True)
class RarityEntry:
    """One weighted category."""
    key: str
    weight: Weight

    @property
    def exact(self) -> Fraction:
        return exact_weight(self.weight)


class RarityTable:
    """
    Ordered weighted selection with a declared total.

    The declared total must equal the summed weights exactly; a mismatch
    silently biases every draw, so it is rejected here rather than at
    selection time.

    Usage:
        table = RarityTable([("common", 60), ("rare", 40)], total=100)
        key = table.select(rng)
    """

    def __init__(
        self,
        entries: Iterable[Union[RarityEntry, Tuple[str, Weight]]],
        total: Optional[Weight] = None,
        name: str = "table",
    ):
        self.name = name
        self._entries: Tuple[RarityEntry, ...] = tuple(
            e if isinstance(e, RarityEntry) else RarityEntry(*e) for e in entries
        )

        errors = []
        weights: List[Fraction] = []
        seen = set()

        if not self._entries:
            errors.append("table is empty")

        for entry in self._entries:
            if entry.key in seen:
                errors.append(f"duplicate key '{entry.key}'")
            seen.add(entry.key)
            try:
                w = entry.exact
            except ConfigurationError as e:
                errors.append(f"'{entry.key}': {e}")
                continue
            if w < 0:
                errors.append(f"'{entry.key}': weight must be >= 0, got {entry.weight}")
            weights.append(w)

        summed = sum(weights, Fraction(0))
        if total is None:
            declared = summed
        else:
            try:
                declared = exact_weight(total)
            except ConfigurationError as e:
                errors.append(f"total: {e}")
                declared = summed

        if not errors:
            if declared != summed:
                errors.append(f"weights sum to {_fmt(summed)} but total is {_fmt(declared)}")
            elif summed <= 0:
                errors.append("weights sum to zero")

        if errors:
            message = f"Invalid rarity table '{name}': {'; '.join(errors)}"
            logger.warning(message)
            raise ConfigurationError(message)

        self._weights: Tuple[Fraction, ...] = tuple(weights)
        self._total = declared

    @property
    def total(self) -> Fraction:
        return self._total

    @property
    def entries(self) -> Tuple[RarityEntry, ...]:
        return self._entries

    def keys(self) -> List[str]:
        return [e.key for e in self._entries]

    def weight(self, key: str) -> Fraction:
        for entry, w in zip(self._entries, self._weights):
            if entry.key == key:
                return w
        raise KeyError(key)

    def probability(self, key: str) -> Fraction:
        """Exact selection probability of key."""
        return self.weight(key) / self._total

    def __contains__(self, key: str) -> bool:
        return any(e.key == key for e in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def select(self, rng) -> str:
        """
        Select a key using one draw from rng.

        r = rng.next() * total; walk entries accumulating weight and return
        the first whose cumulative weight is >= r. Zero-weight entries are
        never returned. Ties resolve positionally.
        """
        r = Fraction(rng.next()) * self._total
        cumulative = Fraction(0)
        for entry, w in zip(self._entries, self._weights):
            cumulative += w
            if w > 0 and cumulative >= r:
                return entry.key
        # r < total always holds, so the walk above cannot fall through
        raise AssertionError(f"rarity walk exhausted table '{self.name}'")

    def __repr__(self) -> str:
        body = ", ".join(f"{e.key}={_fmt(w)}" for e, w in zip(self._entries, self._weights))
        return f"RarityTable({self.name}: {body}; total={_fmt(self._total)})"


class TieredRarityTable:
    """
    Two-level selection: rarity class first, then a key within that class.

    Each class's inner table must total exactly its class weight, so the
    joint probability of a key equals its weight over the class-table total.
    Selection consumes two sequential draws.
    """

    def __init__(
        self,
        classes: RarityTable,
        members: Mapping[str, RarityTable],
        name: str = "tiered",
    ):
        self.name = name
        errors = []

        for class_key in classes.keys():
            inner = members.get(class_key)
            if inner is None:
                if classes.weight(class_key) > 0:
                    errors.append(f"class '{class_key}' has no member table")
                continue
            if inner.total != classes.weight(class_key):
                errors.append(
                    f"class '{class_key}' members total {_fmt(inner.total)} "
                    f"but class weight is {_fmt(classes.weight(class_key))}"
                )

        for class_key in members:
            if class_key not in classes:
                errors.append(f"member table '{class_key}' has no rarity class")

        owners: Dict[str, str] = {}
        for class_key, inner in members.items():
            for key in inner.keys():
                if key in owners:
                    errors.append(f"'{key}' appears in both '{owners[key]}' and '{class_key}'")
                owners[key] = class_key

        if errors:
            message = f"Invalid tiered table '{name}': {'; '.join(errors)}"
            logger.warning(message)
            raise ConfigurationError(message)

        self.classes = classes
        self._members: Dict[str, RarityTable] = dict(members)
        self._owners = owners

    def members(self, class_key: str) -> RarityTable:
        return self._members[class_key]

    def class_of(self, key: str) -> str:
        return self._owners[key]

    def keys(self) -> List[str]:
        return list(self._owners)

    def probability(self, class_key: str, key: str) -> Fraction:
        """Joint probability of selecting class_key then key."""
        return self.classes.probability(class_key) * self._members[class_key].probability(key)

    def select(self, rng) -> Tuple[str, str]:
        """Return (class_key, key) using two draws from rng."""
        class_key = self.classes.select(rng)
        key = self._members[class_key].select(rng)
        return class_key, key


def _fmt(value: Fraction) -> str:
    if value.denominator == 1:
        return str(value.numerator)
    return f"{float(value):g}"


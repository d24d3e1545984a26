"""
traitforge/seeds.py
Deterministic seed handling and random streams

CRITICAL: Do NOT use Python's built-in hash() or the random module here.
hash() is salted per-process and random's algorithm is an implementation
detail. Every value must be reproducible across runs, platforms and
independent implementations given the same seed.

Each draw is SHA-256 over (domain, seed, stream, index), so a value is a pure
function of its coordinates and streams never perturb one another.
"""

import hashlib
from typing import Dict, Union

from .config import RNG_DOMAIN, RNG_FLOAT_BITS, SEED_BYTE_LENGTH, SEED_HEX_LENGTH
from .errors import InvalidSeedError

SeedLike = Union[int, bytes, bytearray, str]

DEFAULT_STREAM = "main"


def normalize_seed(seed: SeedLike) -> bytes:
    """
    Convert a seed to its canonical 32-byte form.

    Accepted forms:
        int   - 0 <= seed < 2**256, encoded big-endian
        bytes - exactly 32 bytes
        str   - 64 hex digits, optional "0x" prefix (e.g. a transaction hash)

    Raises:
        InvalidSeedError: if the seed fails any format precondition
    """
    # bool is an int subclass; True/False are never meaningful seeds
    if isinstance(seed, bool):
        raise InvalidSeedError(f"seed must not be a bool, got {seed!r}")

    if isinstance(seed, int):
        if seed < 0:
            raise InvalidSeedError(f"seed must be non-negative, got {seed}")
        if seed.bit_length() > SEED_BYTE_LENGTH * 8:
            raise InvalidSeedError(f"seed exceeds {SEED_BYTE_LENGTH * 8} bits")
        return seed.to_bytes(SEED_BYTE_LENGTH, "big")

    if isinstance(seed, (bytes, bytearray)):
        if len(seed) != SEED_BYTE_LENGTH:
            raise InvalidSeedError(
                f"seed must be exactly {SEED_BYTE_LENGTH} bytes, got {len(seed)}"
            )
        return bytes(seed)

    if isinstance(seed, str):
        digits = seed[2:] if seed[:2].lower() == "0x" else seed
        if len(digits) != SEED_HEX_LENGTH:
            raise InvalidSeedError(
                f"hex seed must have {SEED_HEX_LENGTH} digits, got {len(digits)}"
            )
        try:
            return bytes.fromhex(digits)
        except ValueError:
            raise InvalidSeedError(f"seed is not valid hex: {seed!r}") from None

    raise InvalidSeedError(f"unsupported seed type: {type(seed).__name__}")


def seed_hex(seed: SeedLike) -> str:
    """Canonical 0x-prefixed hex form of a seed."""
    return "0x" + normalize_seed(seed).hex()


def _unit_float(digest: bytes) -> float:
    """Top 53 bits of a digest as a float in [0, 1)."""
    k = int.from_bytes(digest[:8], "big") >> (64 - RNG_FLOAT_BITS)
    return k / float(1 << RNG_FLOAT_BITS)


class DeterministicRNG:
    """
    Seeded random source with independent named streams.

    Owned by a single assembly. The only state is a cursor per stream, which
    advances monotonically. Two instances built from the same seed produce
    identical sequences on every stream.

    Usage:
        rng = DeterministicRNG(seed)
        rng.next()                      # default stream
        rng.next_int(1, 6)
        rng.next_from_stream("theme")   # does not move the default stream
        params = rng.stream("params")   # view bound to one stream
    """

    def __init__(self, seed: SeedLike):
        self._seed = normalize_seed(seed)
        self._seed_hex = self._seed.hex()
        self._cursors: Dict[str, int] = {}

    @property
    def seed(self) -> bytes:
        return self._seed

    @property
    def seed_hex(self) -> str:
        return "0x" + self._seed_hex

    @property
    def draws(self) -> Dict[str, int]:
        """Number of draws consumed so far, per stream."""
        return dict(self._cursors)

    def value_at(self, stream_id: str, index: int) -> float:
        """
        Value at a fixed (stream, index) coordinate without moving any cursor.
        """
        if index < 0:
            raise ValueError(f"index must be >= 0, got {index}")
        s = f"{RNG_DOMAIN}|{self._seed_hex}|{stream_id}|{index}".encode("utf-8")
        return _unit_float(hashlib.sha256(s).digest())

    def next_from_stream(self, stream_id: str) -> float:
        """Next float in [0, 1) from a named stream."""
        index = self._cursors.get(stream_id, 0)
        self._cursors[stream_id] = index + 1
        return self.value_at(stream_id, index)

    def next(self) -> float:
        """Next float in [0, 1) from the default stream."""
        return self.next_from_stream(DEFAULT_STREAM)

    def next_int(self, lo: int, hi: int) -> int:
        """Next integer in [lo, hi] inclusive from the default stream."""
        _check_int_range(lo, hi)
        return _scale_int(self.next(), lo, hi)

    def stream(self, stream_id: str) -> "RNGStream":
        """Return a view that draws only from stream_id."""
        return RNGStream(self, stream_id)


class RNGStream:
    """
    A DeterministicRNG view bound to one stream.

    Exposes the same next()/next_int() contract, so consumers such as
    RarityTable and ParameterSampler never need to know a stream exists.
    """

    def __init__(self, rng: DeterministicRNG, stream_id: str):
        self._rng = rng
        self.stream_id = stream_id

    def next(self) -> float:
        return self._rng.next_from_stream(self.stream_id)

    def next_int(self, lo: int, hi: int) -> int:
        _check_int_range(lo, hi)
        return _scale_int(self.next(), lo, hi)

    @property
    def position(self) -> int:
        return self._rng.draws.get(self.stream_id, 0)


def _check_int_range(lo: int, hi: int) -> None:
    # Checked before drawing so a bad call never advances the cursor
    if lo > hi:
        raise ValueError(f"lo must be <= hi, got {lo} > {hi}")


def _scale_int(t: float, lo: int, hi: int) -> int:
    return min(hi, lo + int(t * (hi - lo + 1)))

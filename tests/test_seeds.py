"""
tests/test_seeds.py
Tests for traitforge/seeds.py seed normalization and deterministic streams
"""

import hashlib

import pytest

from traitforge.errors import InvalidSeedError
from traitforge.seeds import (
    DeterministicRNG,
    normalize_seed,
    seed_hex,
)

HEX_SEED = "3f" * 32


class TestNormalizeSeed:
    """Tests for normalize_seed accepted forms"""

    def test_int_seed(self):
        assert normalize_seed(0) == bytes(32)
        assert normalize_seed(1) == bytes(31) + b"\x01"

    def test_max_int_seed(self):
        assert normalize_seed(2 ** 256 - 1) == b"\xff" * 32

    def test_hex_with_and_without_prefix(self):
        assert normalize_seed(HEX_SEED) == normalize_seed("0x" + HEX_SEED)
        assert normalize_seed("0X" + HEX_SEED.upper()) == normalize_seed(HEX_SEED)

    def test_bytes_seed(self):
        raw = bytes(range(32))
        assert normalize_seed(raw) == raw
        assert normalize_seed(bytearray(raw)) == raw

    def test_forms_agree(self):
        assert normalize_seed(255) == normalize_seed("00" * 31 + "ff")

    def test_seed_hex(self):
        assert seed_hex(1) == "0x" + "00" * 31 + "01"
        assert seed_hex("0x" + HEX_SEED.upper()) == "0x" + HEX_SEED


class TestInvalidSeeds:
    """Seeds that fail the format precondition"""

    @pytest.mark.parametrize("seed", [
        -1,
        2 ** 256,
        True,
        b"\x00" * 31,
        b"\x00" * 33,
        "ab" * 31,
        "zz" * 32,
        "0x" + "ab" * 33,
        1.0,
        None,
    ])
    def test_rejected(self, seed):
        with pytest.raises(InvalidSeedError):
            normalize_seed(seed)

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            DeterministicRNG(-5)


class TestDeterministicRNG:
    """Tests for DeterministicRNG streams"""

    def test_same_seed_same_sequence(self):
        a = DeterministicRNG(HEX_SEED)
        b = DeterministicRNG("0x" + HEX_SEED)
        assert [a.next() for _ in range(20)] == [b.next() for _ in range(20)]

    def test_different_seed_different_sequence(self):
        a = DeterministicRNG(1)
        b = DeterministicRNG(2)
        assert [a.next() for _ in range(5)] != [b.next() for _ in range(5)]

    def test_unit_interval(self):
        rng = DeterministicRNG(7)
        for _ in range(2000):
            v = rng.next()
            assert 0.0 <= v < 1.0

    def test_value_matches_digest(self):
        """Draw i is the top 53 bits of sha256(domain|seed|stream|i)."""
        rng = DeterministicRNG(HEX_SEED)
        s = f"traitforge-rng|{HEX_SEED}|pattern|0".encode("utf-8")
        k = int.from_bytes(hashlib.sha256(s).digest()[:8], "big") >> 11
        assert rng.next_from_stream("pattern") == k / 2 ** 53

    def test_value_at_does_not_advance(self):
        rng = DeterministicRNG(3)
        peek = [rng.value_at("params", i) for i in range(4)]
        assert rng.draws == {}
        assert [rng.next_from_stream("params") for _ in range(4)] == peek

    def test_value_at_negative_index(self):
        with pytest.raises(ValueError):
            DeterministicRNG(3).value_at("params", -1)

    def test_streams_independent(self):
        a = DeterministicRNG(99)
        b = DeterministicRNG(99)
        for _ in range(10):
            b.next_from_stream("theme")
        b.next()
        assert [a.next_from_stream("pattern") for _ in range(5)] == \
               [b.next_from_stream("pattern") for _ in range(5)]

    def test_draws_counts_per_stream(self):
        rng = DeterministicRNG(5)
        rng.next()
        rng.next_from_stream("theme")
        rng.next_from_stream("theme")
        assert rng.draws == {"main": 1, "theme": 2}

    def test_seed_hex_property(self):
        assert DeterministicRNG(1).seed_hex == seed_hex(1)


class TestNextInt:
    """Tests for next_int range handling"""

    def test_inclusive_range(self):
        rng = DeterministicRNG(11)
        values = {rng.next_int(1, 6) for _ in range(600)}
        assert values == {1, 2, 3, 4, 5, 6}

    def test_single_value(self):
        rng = DeterministicRNG(11)
        assert all(rng.next_int(5, 5) == 5 for _ in range(20))

    def test_inverted_range_raises_without_draw(self):
        rng = DeterministicRNG(11)
        with pytest.raises(ValueError, match="lo must be <= hi"):
            rng.next_int(6, 1)
        assert rng.draws == {}

    def test_stream_view(self):
        rng = DeterministicRNG(11)
        params = rng.stream("params")
        v = params.next_int(0, 9)
        assert 0 <= v <= 9
        assert params.position == 1
        assert rng.draws == {"params": 1}

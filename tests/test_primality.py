from __future__ import annotations

import random

import pytest

import nt_primality
from nt_model import InvalidArgument, ResourceExhausted
from nt_primality import (
    SMALL_PRIMES,
    fermat_test,
    generate_n_bit_number,
    generate_prime,
    is_prime,
    miller_rabin_test,
    trial_division,
)
from tests._helpers import P16, P32, P64, naive_primes, seeded


class _ZeroBits(random.Random):
    """Every random bit is 0: generate_n_bit_number always yields 2^(bits-1)."""

    def getrandbits(self, k: int) -> int:
        return 0


class _FixedWitness(random.Random):
    def randint(self, a: int, b: int) -> int:
        return 3


def test_small_prime_table_is_exactly_primes_up_to_181():
    assert list(SMALL_PRIMES) == naive_primes(181)


def test_known_verdicts():
    rng = seeded()
    assert is_prime(P16, rng=rng) is True
    assert is_prime(26894, rng=rng) is False
    assert is_prime(P32, rng=rng) is True
    assert is_prime(P64, rng=rng) is True
    assert is_prime(P16 * 6701, rng=rng) is False


def test_is_prime_matches_naive_sieve_below_3000():
    rng = seeded(7)
    expected = set(naive_primes(3000))
    for n in range(2, 3001):
        assert is_prime(n, rng=rng) == (n in expected), n


def test_table_primes_are_prime():
    for p in SMALL_PRIMES:
        assert is_prime(p)


@pytest.mark.parametrize("n", [1, 0, -1, -7])
def test_is_prime_rejects_n_below_2(n):
    with pytest.raises(InvalidArgument):
        is_prime(n)


def test_trial_division_stages():
    assert trial_division(13) is True
    assert trial_division(91) is False
    assert trial_division(191) is None


def test_fermat_and_miller_rabin_on_primes():
    rng = seeded()
    for p in (13, 17, 191, P16):
        assert fermat_test(p, rng=rng)
        assert miller_rabin_test(p, rng=rng)


def test_miller_rabin_catches_carmichael_number():
    # 211 * 421 * 631: Carmichael, no factor in the trial division table,
    # strong liars are ~12% of the witnesses
    n = 211 * 421 * 631
    assert trial_division(n) is None
    rng = seeded()
    assert not all(miller_rabin_test(n, rng=rng) for _ in range(20))


@pytest.mark.parametrize("n", [2, 1, 0, -1])
def test_single_round_tests_reject_small_n(n):
    with pytest.raises(InvalidArgument):
        fermat_test(n)
    with pytest.raises(InvalidArgument):
        miller_rabin_test(n)


def test_miller_rabin_witness_resampling_can_be_capped():
    with pytest.raises(ResourceExhausted, match="3 attempts"):
        miller_rabin_test(9, rng=_FixedWitness(), max_attempts=3)


def test_generate_n_bit_number_sets_top_bit():
    rng = seeded()
    for bits in (1, 2, 5, 17, 64):
        n = generate_n_bit_number(bits, rng=rng)
        assert n.bit_length() == bits
    with pytest.raises(InvalidArgument):
        generate_n_bit_number(0)


@pytest.mark.parametrize("bits", [2, 3, 8, 16, 32, 64])
def test_generate_prime_has_requested_bit_length(bits):
    p = generate_prime(bits, rng=seeded(bits))
    assert p.bit_length() == bits
    assert is_prime(p, rng=seeded())


def test_generate_prime_is_reproducible_with_seed():
    assert generate_prime(48, rng=seeded(99)) == generate_prime(48, rng=seeded(99))


def test_generate_prime_rejects_bits_below_2():
    with pytest.raises(InvalidArgument):
        generate_prime(1)


def test_generate_prime_attempt_cap():
    # 2^15 is never prime, so sampling never succeeds
    with pytest.raises(ResourceExhausted, match="5 attempts"):
        generate_prime(16, rng=_ZeroBits(), max_attempts=5)


def test_generate_prime_passes_rng_and_cap_to_primality_check(monkeypatch):
    seen: list[dict] = []
    real_is_prime = nt_primality.is_prime

    def recording_is_prime(n, **kwargs):
        seen.append(kwargs)
        return real_is_prime(n, **kwargs)

    monkeypatch.setattr(nt_primality, "is_prime", recording_is_prime)
    rng = seeded(8)
    p = generate_prime(24, rng=rng, max_attempts=10_000)
    assert p.bit_length() == 24
    assert seen
    assert all(kw == {"rng": rng, "max_attempts": 10_000} for kw in seen)

from __future__ import annotations

import logging
import random

import pytest

from nt_factor import (
    euler_phi,
    factor_multiplicities,
    factorize,
    get_factor,
    logging_observer,
    pollard_p_minus_one,
    pollard_rho,
    sieve_factor,
)
from nt_model import FactorEvent, FactorLimits, InvalidArgument, ResourceExhausted
from nt_primality import is_prime
from tests._helpers import P16, P32, P64, Q16, Q32, product, seeded


def test_rho_finds_small_factor():
    assert pollard_rho(2 * Q16) in (2, Q16)
    assert pollard_rho(3**10) == 3


def test_rho_gives_up_without_factor():
    assert pollard_rho(1) is None
    assert pollard_rho(3) is None
    assert pollard_rho(101) is None


def test_p_minus_one_finds_smooth_factor():
    # P16 - 1 = 2^2 * 3^4 * 83 is 100-smooth
    assert pollard_p_minus_one(2 * P16) in (2, P16)
    assert pollard_p_minus_one(1) is None


def test_pollard_methods_reject_non_positive():
    with pytest.raises(InvalidArgument):
        pollard_rho(0)
    with pytest.raises(InvalidArgument):
        pollard_p_minus_one(-1)
    with pytest.raises(InvalidArgument):
        sieve_factor(0)


def test_sieve_factor():
    assert sieve_factor(P16 * 6701) == 6701
    assert sieve_factor(4) == 2
    assert sieve_factor(191 * 193) == 191
    assert sieve_factor(1) is None
    assert sieve_factor(P16) is None


def test_sieve_factor_respects_limit():
    with pytest.raises(ResourceExhausted, match="limit"):
        sieve_factor(10_007, limit=10)


def test_sieve_reports_build_progress():
    events: list[FactorEvent] = []
    # 193^2: no factor in the small table, so the sieve is built
    assert sieve_factor(193 * 193, observer=events.append) == 193
    assert [e.stage for e in events] == ["sieve-build", "sieve-ready"]


def test_get_factor_on_prime_returns_prime():
    assert get_factor(P16) == P16
    assert get_factor(2) == 2


def test_factorize_examples():
    f = factorize(7919 * 3469)
    assert 3469 in f
    assert 7919 in f
    assert sorted(f) == [3469, 7919]

    assert P32 in factorize(3709 * P32)


def test_factorize_one_is_sentinel():
    assert factorize(1) == [1]


@pytest.mark.parametrize("n", [0, -1, -360])
def test_factorize_rejects_non_positive(n):
    with pytest.raises(InvalidArgument):
        factorize(n)


def test_factorize_product_and_primality_small_range():
    rng = seeded()
    for n in range(2, 1500):
        f = factorize(n)
        assert product(f) == n, n
        assert all(is_prime(q, rng=rng) for q in f), (n, f)


def test_factorize_many_repeated_factors():
    n = 2**40 * 3**25
    f = factorize(n)
    assert sorted(f) == [2] * 40 + [3] * 25


def test_factorize_large_number_uses_primality_shortcut():
    # F6 = 2^64 + 1 = 274177 * 67280421310721
    limits = FactorLimits(rho_iterations=5_000, shortcut_bits=40)
    f = factorize(2**64 + 1, limits=limits)
    assert sorted(f) == [274177, 67280421310721]


def test_factorize_fails_loudly_when_sieve_too_big():
    # 58-bit semiprime: rho is too short and 2^2 - 1 = 3 shares nothing with it
    limits = FactorLimits(rho_iterations=10, pm1_bound=2, sieve_limit=1000)
    with pytest.raises(ResourceExhausted):
        factorize(P32 * Q32, limits=limits)


def test_factorize_prime_beyond_default_sieve_limit():
    # 61 bits: below the shortcut width, above what the default sieve covers
    assert factorize(P64) == [P64]


class _CountingRandom(random.Random):
    def __init__(self, seed: int) -> None:
        super().__init__(seed)
        self.draws = 0

    def randint(self, a: int, b: int) -> int:
        self.draws += 1
        return super().randint(a, b)


def test_get_factor_prime_too_big_for_sieve_takes_shortcut():
    events: list[FactorEvent] = []
    rng = _CountingRandom(64)
    limits = FactorLimits(rho_iterations=10, sieve_limit=1000)
    assert get_factor(P64, limits, events.append, rng=rng) == P64
    # one Fermat witness and three Miller-Rabin witnesses
    assert rng.draws == 4
    assert events[-1] == FactorEvent(stage="shortcut", n=P64, factor=P64)
    assert all(e.stage != "sieve-build" for e in events)


def test_factorize_large_prime_with_low_shortcut():
    limits = FactorLimits(rho_iterations=10, shortcut_bits=32)
    assert factorize(P64, limits=limits) == [P64]


def test_observer_sees_cascade_steps():
    events: list[FactorEvent] = []
    factorize(7919 * 3469, observer=events.append)

    assert events[0] == FactorEvent(stage="split", n=7919 * 3469)
    assert events[1].stage == "rho"
    found = [e.factor for e in events if e.factor is not None]
    assert 3469 in found or 7919 in found


def test_logging_observer_writes_debug_records(caplog):
    caplog.set_level(logging.DEBUG, logger="nt_factor")
    factorize(91, observer=logging_observer)
    assert any("stage=rho" in r.getMessage() for r in caplog.records)


def test_factor_multiplicities_and_phi():
    assert factor_multiplicities(360) == {2: 3, 3: 2, 5: 1}
    assert factor_multiplicities(1) == {}
    assert euler_phi(36) == 12
    assert euler_phi(1) == 1
    assert euler_phi(P16) == P16 - 1


def test_factor_limits_validation():
    with pytest.raises(InvalidArgument):
        FactorLimits(rho_iterations=0)
    with pytest.raises(InvalidArgument):
        FactorLimits(pm1_bound=1)
    with pytest.raises(InvalidArgument):
        FactorLimits(sieve_limit=0)

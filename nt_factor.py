"""Factorization engine.

factorize(n) splits off one factor at a time with get_factor(), which cascades:

  1) Pollard rho (two cycles of t -> t^2 + 1 mod n, distinct starts);
  2) Pollard p-1 with a = 2^(2*3*...*B) mod n;
  3) for n beyond FactorLimits.shortcut_bits, accept a probable prime as-is;
  4) Sieve of Eratosthenes up to isqrt(n): always finds a factor or proves n prime.

Steps 1 and 2 are bounded heuristics, step 4 is the backstop. When n is too big
for FactorLimits.sieve_limit, a probable prime is accepted as in step 3, so the
cascade always ends with a factor, a prime, or ResourceExhausted for a composite
the sieve cannot reach.

Progress is reported to an optional observer (see nt_model.FactorEvent).
"""

from __future__ import annotations

import logging
import math
import random

from nt_arith import gcd, power_mod
from nt_model import (
    DEFAULT_PM1_BOUND,
    DEFAULT_RHO_ITERATIONS,
    DEFAULT_SIEVE_LIMIT,
    FactorEvent,
    FactorLimits,
    FactorObserver,
    InvalidArgument,
    ResourceExhausted,
)
from nt_primality import SMALL_PRIMES, is_prime

logger = logging.getLogger(__name__)

RHO_STARTS: tuple[int, int] = (2, 3)
# first prime after the SMALL_PRIMES table
_SIEVE_SCAN_START = 191


def logging_observer(event: FactorEvent) -> None:
    """Observer forwarding cascade progress to this module's logger."""
    logger.debug("factor stage=%s n=%d factor=%s", event.stage, event.n, event.factor)


def _emit(observer: FactorObserver | None, stage: str, n: int, factor: int | None = None) -> None:
    if observer is not None:
        observer(FactorEvent(stage=stage, n=n, factor=factor))


def _check_n(n: int, what: str) -> int:
    n = int(n)
    if n < 1:
        raise InvalidArgument(f"{what} needs n >= 1 (got n={n})")
    return n


# --- Pollard rho --------------------------------------------------------------


def _rho_cycle(n: int, start: int, iterations: int) -> int | None:
    x = y = start % n
    for _ in range(iterations):
        x = (x * x + 1) % n
        y = (y * y + 1) % n
        y = (y * y + 1) % n
        d = gcd(abs(x - y), n)
        if d == n:
            # the cycle closed without separating a factor
            return None
        if d != 1:
            return d
    return None


def pollard_rho(n: int, iterations: int = DEFAULT_RHO_ITERATIONS) -> int | None:
    """
    Extract a factor of n with Pollard's rho method.

    Two tortoise/hare cycles of g(t) = (t^2 + 1) mod n are tried, one per
    starting point in RHO_STARTS, each bounded to `iterations` steps.
    Returns a factor d with 1 < d < n, or None.
    """
    n = _check_n(n, "pollard_rho")
    if n < 4:
        return None
    for start in RHO_STARTS:
        d = _rho_cycle(n, start, iterations)
        if d is not None:
            return d
    return None


# --- Pollard p-1 ----------------------------------------------------------------


def pollard_p_minus_one(n: int, bound: int = DEFAULT_PM1_BOUND) -> int | None:
    """
    Extract a factor of n with Pollard's p-1 method.

    a = 2^(2*3*...*bound) mod n, then d = gcd(a-1, n). Finds p when p-1 is
    bound-smooth. Returns d with 1 < d < n, or None.
    """
    n = _check_n(n, "pollard_p_minus_one")
    a = 2
    for j in range(2, bound + 1):
        a = power_mod(a, j, n)
    d = gcd(a - 1, n)
    if 1 < d < n:
        return d
    return None


# --- Sieve fallback -------------------------------------------------------------


def sieve_factor(
    n: int,
    limit: int | None = DEFAULT_SIEVE_LIMIT,
    *,
    observer: FactorObserver | None = None,
) -> int | None:
    """
    Smallest prime factor of n up to isqrt(n), by a Sieve of Eratosthenes.

    The sieve is seeded from SMALL_PRIMES (each is also checked as a divisor),
    then only odd candidates from 191 on are sieved and scanned.
    Returns None when no factor exists below isqrt(n), i.e. n is prime
    (or n == 1). Raises ResourceExhausted if isqrt(n) > limit.
    """
    n = _check_n(n, "sieve_factor")
    target = math.isqrt(n)
    if limit is not None and target > limit:
        raise ResourceExhausted(
            f"sieve for n={n} needs {target} slots, above the limit of {limit}"
        )

    sieve = bytearray([1]) * (target + 1)
    sieve[0] = sieve[1] = 0

    for p in SMALL_PRIMES:
        if p > target:
            return None
        if n % p == 0:
            return p
        sieve[p * p :: p] = bytes(len(range(p * p, target + 1, p)))

    _emit(observer, "sieve-build", n)
    for i in range(_SIEVE_SCAN_START, math.isqrt(target) + 1, 2):
        if sieve[i]:
            sieve[i * i :: i] = bytes(len(range(i * i, target + 1, i)))
    _emit(observer, "sieve-ready", n)

    for i in range(_SIEVE_SCAN_START, target + 1, 2):
        if sieve[i] and n % i == 0:
            return i

    return None


# --- Cascade --------------------------------------------------------------------


def get_factor(
    n: int,
    limits: FactorLimits | None = None,
    observer: FactorObserver | None = None,
    *,
    rng: random.Random | None = None,
) -> int:
    """
    One factor p of n (1 < p <= n), trying rho, p-1, the large-number
    shortcut and finally the sieve. p == n means n is (probably) prime.
    Raises ResourceExhausted only for a composite n whose sieve would
    exceed limits.sieve_limit. rng feeds the primality checks.
    """
    n = _check_n(n, "get_factor")
    limits = limits or FactorLimits()

    p = pollard_rho(n, limits.rho_iterations)
    _emit(observer, "rho", n, p)
    if p is not None:
        return p

    p = pollard_p_minus_one(n, limits.pm1_bound)
    _emit(observer, "p-1", n, p)
    if p is not None:
        return p

    # the sieve needs O(sqrt(n)) memory: for big n trust the primality oracle
    if n.bit_length() > limits.shortcut_bits and is_prime(n, rng=rng):
        _emit(observer, "shortcut", n, n)
        return n

    # a prime too big for the sieve is still a complete answer
    too_big = limits.sieve_limit is not None and math.isqrt(n) > limits.sieve_limit
    if too_big and is_prime(n, rng=rng):
        _emit(observer, "shortcut", n, n)
        return n

    p = sieve_factor(n, limits.sieve_limit, observer=observer)
    _emit(observer, "sieve", n, p)
    if p is not None:
        return p

    _emit(observer, "prime", n, n)
    return n


def factorize(
    n: int,
    *,
    limits: FactorLimits | None = None,
    observer: FactorObserver | None = None,
    rng: random.Random | None = None,
) -> list[int]:
    """
    Prime factors of n with multiplicity; prod(factorize(n)) == n.

    The order is the depth-first order of factorize(p) ++ factorize(n // p),
    computed with an explicit stack. factorize(1) == [1].
    """
    n = _check_n(n, "factorize")
    if n == 1:
        return [1]
    limits = limits or FactorLimits()

    out: list[int] = []
    stack = [n]
    while stack:
        m = stack.pop()
        _emit(observer, "split", m)
        p = get_factor(m, limits, observer, rng=rng)
        r = m // p
        if r == 1:
            out.append(p)
            continue
        # p is expanded before the cofactor
        stack.append(r)
        stack.append(p)
    return out


def factor_multiplicities(
    n: int,
    *,
    limits: FactorLimits | None = None,
    observer: FactorObserver | None = None,
) -> dict[int, int]:
    """Factorization as {q: exp}, ascending q. Empty for n == 1."""
    n = _check_n(n, "factor_multiplicities")
    f: dict[int, int] = {}
    if n == 1:
        return f
    for q in sorted(factorize(n, limits=limits, observer=observer)):
        f[q] = f.get(q, 0) + 1
    return f


def euler_phi(n: int, *, limits: FactorLimits | None = None) -> int:
    """Euler's totient from the factorization of n."""
    phi = _check_n(n, "euler_phi")
    for q in factor_multiplicities(n, limits=limits):
        phi = phi // q * (q - 1)
    return phi


__all__ = [
    "RHO_STARTS",
    "euler_phi",
    "factor_multiplicities",
    "factorize",
    "get_factor",
    "logging_observer",
    "pollard_p_minus_one",
    "pollard_rho",
    "sieve_factor",
]

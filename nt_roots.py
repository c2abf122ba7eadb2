"""Primitive roots (generators of the multiplicative group mod a prime)."""

from __future__ import annotations

import random
from collections.abc import Iterable

from nt_arith import power_mod
from nt_factor import factorize
from nt_model import FactorLimits, InvalidArgument
from nt_primality import _check_attempts, _rng, is_prime


def prime_divisors_of_order(
    p: int,
    *,
    limits: FactorLimits | None = None,
    rng: random.Random | None = None,
) -> list[int]:
    """Distinct prime divisors of p-1, ascending (empty for p = 2)."""
    return sorted(set(factorize(p - 1, limits=limits, rng=rng)) - {1})


def _has_full_order(a: int, p: int, divisors: Iterable[int]) -> bool:
    if a % p == 0:
        return False
    phi = p - 1
    for q in divisors:
        if power_mod(a, phi // q, p) == 1:
            return False
    return True


def is_primitive_root(
    a: int,
    p: int,
    *,
    rng: random.Random | None = None,
    limits: FactorLimits | None = None,
) -> bool:
    """True if a has order p-1 modulo p. Always False when p is not (probably) prime."""
    a, p = int(a), int(p)
    if p < 2 or not is_prime(p, rng=rng):
        return False
    return _has_full_order(a, p, prime_divisors_of_order(p, limits=limits, rng=rng))


def generate_primitive_root(
    p: int,
    *,
    rng: random.Random | None = None,
    max_attempts: int | None = None,
    limits: FactorLimits | None = None,
) -> int:
    """
    Random primitive root modulo the prime p.

    p-1 is factored once, then candidates in [2, p-1] are sampled until one
    has full order. max_attempts=None samples without a cap; it also caps the
    witness resampling of the primality check on p.
    """
    p = int(p)
    gen = _rng(rng)
    if p < 2 or not is_prime(p, rng=gen, max_attempts=max_attempts):
        raise InvalidArgument(f"generate_primitive_root needs a prime modulus (got p={p})")
    if p == 2:
        return 1

    divisors = prime_divisors_of_order(p, limits=limits, rng=gen)

    attempts = 0
    while True:
        g = gen.randint(2, p - 1)
        if _has_full_order(g, p, divisors):
            return g
        attempts += 1
        _check_attempts(attempts, max_attempts, f"generate_primitive_root(p={p})")


__all__ = ["generate_primitive_root", "is_primitive_root", "prime_divisors_of_order"]

"""Textbook RSA on top of the arithmetic engine.

No padding, non-cryptographic randomness: for teaching and testing only.
"""

from __future__ import annotations

import random

from nt_arith import gcd, lcm, modular_inverse, power_mod
from nt_model import InvalidArgument
from nt_primality import _rng, generate_prime


def generate_keys(p: int, q: int, *, rng: random.Random | None = None) -> tuple[int, int, int]:
    """
    Key pair from two distinct primes p, q.

    Returns (n, e, d) with n = p*q, e random and coprime to
    lam = lcm(p-1, q-1), and d = e^-1 mod lam reduced into [0, lam).
    """
    p, q = int(p), int(q)
    if p == q:
        raise InvalidArgument(f"p and q must be distinct (got p=q={p})")
    n = p * q
    lam = lcm(p - 1, q - 1)
    if lam < 3:
        raise InvalidArgument(f"primes p={p}, q={q} are too small for RSA keys")

    gen = _rng(rng)
    e = gen.randint(2, lam - 1)
    while gcd(e, lam) != 1:
        e = gen.randint(2, lam - 1)

    # the Bezout coefficient may be negative
    d = modular_inverse(e, lam) % lam
    return n, e, d


def generate_keypair(
    bits: int,
    *,
    rng: random.Random | None = None,
    max_attempts: int | None = None,
) -> tuple[int, int, int]:
    """generate_keys() over two fresh, distinct `bits`-bit primes."""
    p = generate_prime(bits, rng=rng, max_attempts=max_attempts)
    q = generate_prime(bits, rng=rng, max_attempts=max_attempts)
    while q == p:
        q = generate_prime(bits, rng=rng, max_attempts=max_attempts)
    return generate_keys(p, q, rng=rng)


def encrypt(message: int, public_key: int, n: int) -> int:
    return power_mod(message, public_key, n)


def decrypt(cyphertext: int, secret_key: int, n: int) -> int:
    return power_mod(cyphertext, secret_key, n)


__all__ = ["decrypt", "encrypt", "generate_keypair", "generate_keys"]

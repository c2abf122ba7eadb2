from __future__ import annotations

import random

# Verified primes (16/32/64-bit) and a few non-prime companions
P16 = 26893
P32 = 1973705399
P64 = 1444191769131458227

Q16 = 2131
Q32 = 76420979
Q64 = 8668330227278800147

E16 = 30964
E32 = 1575944192


def product(xs: list[int]) -> int:
    out = 1
    for x in xs:
        out *= x
    return out


def naive_power_mod(x: int, e: int, m: int) -> int:
    """Repeated multiplication, no squaring: the trusted reference for small e."""
    y = 1
    for _ in range(e):
        y *= x
    return y % m


def naive_primes(limit: int) -> list[int]:
    """Primes <= limit by trial division (reference for small ranges)."""
    out: list[int] = []
    for n in range(2, limit + 1):
        if all(n % p for p in out if p * p <= n):
            out.append(n)
    return out


def seeded(seed: int = 1234) -> random.Random:
    return random.Random(seed)

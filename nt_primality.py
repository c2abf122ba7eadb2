"""Primality oracle and prime generator.

is_prime(n) runs three stages and stops at the first negative verdict:

  1) trial division by the primes up to 181 (SMALL_PRIMES);
  2) one Fermat test with a random witness a in [2, n-1];
  3) MR_ROUNDS rounds of Miller-Rabin with witnesses coprime to n.

A True verdict means "probably prime": the error probability of one call is at
most 4^-MR_ROUNDS (times the Fermat liar probability). False is always certain.

The random source is the module-level `random` generator unless an explicit
random.Random is passed. It is NOT a cryptographic source.
"""

from __future__ import annotations

import random

from nt_arith import gcd, power_mod
from nt_model import InvalidArgument, ResourceExhausted

SMALL_PRIMES: tuple[int, ...] = (
    2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47, 53, 59, 61,
    67, 71, 73, 79, 83, 89, 97, 101, 103, 107, 109, 113, 127, 131, 137,
    139, 149, 151, 157, 163, 167, 173, 179, 181,
)  # fmt: skip

MR_ROUNDS = 3


def _rng(rng: random.Random | None) -> random.Random:
    # the random module's functions share the Random API
    return rng if rng is not None else random  # type: ignore[return-value]


def _check_attempts(attempts: int, max_attempts: int | None, what: str) -> None:
    if max_attempts is not None and attempts >= max_attempts:
        raise ResourceExhausted(f"{what}: gave up after {attempts} attempts")


# --- Trial division -----------------------------------------------------------


def trial_division(n: int) -> bool | None:
    """
    Check n against SMALL_PRIMES.

    Returns True if n is itself a table prime, False if a table prime divides
    n, None if the table is inconclusive.
    """
    for p in SMALL_PRIMES:
        if n == p:
            return True
        if n % p == 0:
            return False
    return None


# --- Fermat -------------------------------------------------------------------


def fermat_test(n: int, *, rng: random.Random | None = None) -> bool:
    """One Fermat round: a^(n-1) == 1 (mod n) for a random a in [2, n-1]."""
    n = int(n)
    if n < 3:
        raise InvalidArgument(f"fermat_test needs n >= 3 (got n={n})")
    a = _rng(rng).randint(2, n - 1)
    return power_mod(a, n - 1, n) == 1


# --- Miller-Rabin ---------------------------------------------------------------


def _mr_decompose(n: int) -> tuple[int, int]:
    """n-1 = d * 2^s with d odd."""
    m = n - 1
    s = (m & -m).bit_length() - 1
    return m >> s, s


def miller_rabin_test(
    n: int,
    *,
    rng: random.Random | None = None,
    max_attempts: int | None = None,
) -> bool:
    """
    One Miller-Rabin round.

    The witness is resampled until gcd(a, n) = 1; max_attempts caps the
    resampling (None = no cap).
    Passes iff a^d == 1 or a^(2^r * d) == n-1 (mod n) for some r in [0, s].
    """
    n = int(n)
    if n < 3:
        raise InvalidArgument(f"miller_rabin_test needs n >= 3 (got n={n})")
    gen = _rng(rng)

    d, s = _mr_decompose(n)

    attempts = 0
    a = gen.randint(2, n - 1)
    while gcd(a, n) != 1:
        attempts += 1
        _check_attempts(attempts, max_attempts, f"miller_rabin_test(n={n}) witness")
        a = gen.randint(2, n - 1)

    x = power_mod(a, d, n)
    if x == 1 or x == n - 1:
        return True
    for _ in range(s):
        x = (x * x) % n
        if x == n - 1:
            return True
    return False


def is_prime(
    n: int,
    *,
    rng: random.Random | None = None,
    max_attempts: int | None = None,
) -> bool:
    """Probabilistic primality verdict (see module docstring). n < 2 is rejected."""
    n = int(n)
    if n < 2:
        raise InvalidArgument(f"is_prime needs n >= 2 (got n={n})")

    verdict = trial_division(n)
    if verdict is not None:
        return verdict

    if not fermat_test(n, rng=rng):
        return False

    for _ in range(MR_ROUNDS):
        if not miller_rabin_test(n, rng=rng, max_attempts=max_attempts):
            return False

    return True


# --- Prime generation ---------------------------------------------------------


def generate_n_bit_number(bits: int, *, rng: random.Random | None = None) -> int:
    """Random integer with exactly `bits` bits (top bit set)."""
    bits = int(bits)
    if bits < 1:
        raise InvalidArgument(f"bits must be >= 1 (got bits={bits})")
    return (1 << (bits - 1)) | _rng(rng).getrandbits(bits - 1)


def generate_prime(
    bits: int,
    *,
    rng: random.Random | None = None,
    max_attempts: int | None = None,
) -> int:
    """
    Sample `bits`-bit candidates until one passes is_prime.

    max_attempts=None keeps sampling for as long as it takes; primes have
    positive density so this ends in practice. bits must be >= 2.
    """
    bits = int(bits)
    if bits < 2:
        raise InvalidArgument(f"no prime has {bits} bit(s): bits must be >= 2")

    attempts = 0
    while True:
        candidate = generate_n_bit_number(bits, rng=rng)
        if is_prime(candidate, rng=rng, max_attempts=max_attempts):
            return candidate
        attempts += 1
        _check_attempts(attempts, max_attempts, f"generate_prime(bits={bits})")


__all__ = [
    "MR_ROUNDS",
    "SMALL_PRIMES",
    "fermat_test",
    "generate_n_bit_number",
    "generate_prime",
    "is_prime",
    "miller_rabin_test",
    "trial_division",
]

"""Modular arithmetic engine.

Every function takes and returns plain Python ints. Callers holding other
integer-like values convert them with int(...) before calling.
"""

from __future__ import annotations

from collections.abc import Callable

from nt_model import InvalidArgument, NotInvertible

# --- Exponentiation ---------------------------------------------------------


def _check_exponent(e: int) -> None:
    if e < 0:
        raise InvalidArgument(f"negative exponent e={e} is not allowed in fast exponentiation")


def power(x: int, e: int) -> int:
    """x^e by square-and-multiply, without modulus."""
    x, e = int(x), int(e)
    _check_exponent(e)
    y = 1
    while e:
        if e & 1:
            y *= x
        e >>= 1
        if e:
            x *= x
    return y


def power_mod(x: int, e: int, m: int) -> int:
    """
    x^e mod m by square-and-multiply.

    m = 0 means no reduction (Z/0Z is Z), so power_mod(x, e, 0) == power(x, e).
    The result is always reduced: power_mod(x, 0, 1) == 0.
    """
    x, e, m = int(x), int(e), int(m)
    _check_exponent(e)
    if m < 0:
        raise InvalidArgument(f"negative modulus m={m} is not allowed in fast exponentiation")
    if m == 0:
        return power(x, e)

    y = 1 % m
    x %= m
    while e:
        if e & 1:
            y = (y * x) % m
        e >>= 1
        if e:
            x = (x * x) % m
    return y


def mod_exp_curry(m: int) -> Callable[[int, int], int]:
    """Bind the modulus: mod_exp_curry(m)(x, e) == power_mod(x, e, m)."""
    m = int(m)
    return lambda x, e: power_mod(x, e, m)


# --- GCD ----------------------------------------------------------------------


def gcd(a: int, b: int) -> int:
    """Euclid, iterative. Always non-negative; gcd(a, 0) == |a|."""
    a, b = int(a), int(b)
    while b:
        a, b = b, a % b
    return abs(a)


def lcm(a: int, b: int) -> int:
    a, b = int(a), int(b)
    if a == 0 or b == 0:
        return 0
    return abs(a * b) // gcd(a, b)


def extended_gcd(a: int, b: int) -> tuple[int, int, int]:
    """
    Extended GCD: returns (c1, c2, g) with c1*a + c2*b = g = gcd(a, b).

    Same coefficients as the recursive back-substitution
      (b, a mod b) -> (c1, c2)  =>  (c2, c1 - (a // b) * c2)
    with base case (a, 0) -> (1, 0, a), unrolled into a loop.
    The coefficients are not normalized; g is returned non-negative.
    """
    a, b = int(a), int(b)
    old_r, r = a, b
    old_s, s = 1, 0
    old_t, t = 0, 1
    while r:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_s, s = s, old_s - q * s
        old_t, t = t, old_t - q * t
    if old_r < 0:
        return (-old_s, -old_t, -old_r)
    return (old_s, old_t, old_r)


def modular_inverse(a: int, m: int) -> int:
    """
    a^-1 modulo m, as the first Bezout coefficient of extended_gcd(a, m).

    The result is NOT reduced into [0, m): callers needing the canonical
    representative take `% m` themselves.
    """
    a, m = int(a), int(m)
    c1, _, g = extended_gcd(a, m)
    if g != 1:
        raise NotInvertible(
            f"cannot calculate modular inverse: a={a} and m={m} are not coprime (gcd={g})"
        )
    return c1


__all__ = [
    "extended_gcd",
    "gcd",
    "lcm",
    "mod_exp_curry",
    "modular_inverse",
    "power",
    "power_mod",
]

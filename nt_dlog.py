"""Discrete logarithm by baby-step/giant-step.

Finds k with alpha^k == beta (mod p) in O(sqrt(p)) time and memory, assuming
alpha generates the subgroup that contains beta.
"""

from __future__ import annotations

import math
from collections.abc import Callable

from nt_arith import modular_inverse
from nt_model import InvalidArgument


def baby_step_giant_step(alpha: int, beta: int, p: int) -> int | None:
    """
    Solve alpha^k == beta (mod p) for 0 <= k < p-1.

    m = ceil(sqrt(p-1))
    baby steps:  alpha^j mod p -> j, for j in [1, m]
    giant steps: beta * alpha^(-m*i) mod p, for i in [0, m]
    A hit gives k = i*m + j, reduced mod p-1.
    Returns None if the search window holds no solution.
    """
    alpha, beta, p = int(alpha), int(beta), int(p)
    if p < 2:
        raise InvalidArgument(f"baby_step_giant_step needs p >= 2 (got p={p})")
    alpha %= p
    beta %= p
    order = p - 1
    if order == 1:
        # Z/2Z*: the only element is 1
        return 0 if beta == 1 else None

    m = math.isqrt(order - 1) + 1

    steps: dict[int, int] = {}
    cur = 1
    for j in range(1, m + 1):
        cur = (cur * alpha) % p
        steps.setdefault(cur, j)

    # cur == alpha^m here
    giant = modular_inverse(cur, p) % p

    gamma = beta
    for i in range(m + 1):
        j = steps.get(gamma)
        if j is not None:
            return (i * m + j) % order
        gamma = (gamma * giant) % p

    return None


def dlog(base: int, modulus: int) -> Callable[[int], int | None]:
    """Bind base and modulus: dlog(g, p)(beta) == baby_step_giant_step(g, beta, p)."""
    base, modulus = int(base), int(modulus)
    return lambda beta: baby_step_giant_step(base, beta, modulus)


__all__ = ["baby_step_giant_step", "dlog"]

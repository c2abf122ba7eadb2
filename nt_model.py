"""Shared data model for the number-theory toolkit.

This module contains only the exception taxonomy, the factorization limits and
the progress events emitted by the factorization cascade. No arithmetic lives
here.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

# --- Default limits ---------------------------------------------------------

DEFAULT_RHO_ITERATIONS = 100_000
DEFAULT_PM1_BOUND = 100
# beyond the signed 64-bit range the sieve is replaced by a primality check
DEFAULT_SHORTCUT_BITS = 63
DEFAULT_SIEVE_LIMIT = 1 << 27


# --- Errors -----------------------------------------------------------------


class NumberTheoryError(Exception):
    """Base class for every error raised by the toolkit."""


class InvalidArgument(NumberTheoryError, ValueError):
    pass


class NotInvertible(NumberTheoryError, ValueError):
    pass


class NoSolutionFound(NumberTheoryError, LookupError):
    pass


class ResourceExhausted(NumberTheoryError, RuntimeError):
    pass


# --- Factorization model ----------------------------------------------------


@dataclass(frozen=True)
class FactorLimits:
    """Bounds for the factorization cascade.

    rho_iterations: iterations per Pollard rho cycle.
    pm1_bound: last exponent folded into Pollard p-1 (2*3*...*pm1_bound).
    shortcut_bits: above this bit length a probable prime is accepted as-is.
    sieve_limit: largest isqrt(n) the sieve may allocate; None = unbounded.
    """

    rho_iterations: int = DEFAULT_RHO_ITERATIONS
    pm1_bound: int = DEFAULT_PM1_BOUND
    shortcut_bits: int = DEFAULT_SHORTCUT_BITS
    sieve_limit: int | None = DEFAULT_SIEVE_LIMIT

    def __post_init__(self) -> None:
        if self.rho_iterations <= 0:
            raise InvalidArgument(f"rho_iterations must be > 0 (got {self.rho_iterations})")
        if self.pm1_bound < 2:
            raise InvalidArgument(f"pm1_bound must be >= 2 (got {self.pm1_bound})")
        if self.shortcut_bits <= 0:
            raise InvalidArgument(f"shortcut_bits must be > 0 (got {self.shortcut_bits})")
        if self.sieve_limit is not None and self.sieve_limit <= 0:
            raise InvalidArgument(f"sieve_limit must be > 0 (got {self.sieve_limit})")


@dataclass(frozen=True)
class FactorEvent:
    """One progress step of the factorization cascade.

    stage is one of: "split", "rho", "p-1", "shortcut", "sieve-build",
    "sieve-ready", "sieve", "prime".
    factor is the factor found by that stage, or None if it found nothing.
    """

    stage: str
    n: int
    factor: int | None = None


FactorObserver = Callable[[FactorEvent], None]


__all__ = [
    "DEFAULT_PM1_BOUND",
    "DEFAULT_RHO_ITERATIONS",
    "DEFAULT_SHORTCUT_BITS",
    "DEFAULT_SIEVE_LIMIT",
    "FactorEvent",
    "FactorLimits",
    "FactorObserver",
    "InvalidArgument",
    "NoSolutionFound",
    "NotInvertible",
    "NumberTheoryError",
    "ResourceExhausted",
]

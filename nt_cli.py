#!/usr/bin/env python3
"""CLI for the number-theory toolkit.

Usage examples:
  - Modular exponentiation / inverses:
      python3 nt_cli.py pow 26893 2 76420979
      python3 nt_cli.py inverse 7 31

  - Primality and prime generation (reproducible with --seed):
      python3 nt_cli.py is-prime 26893
      python3 nt_cli.py --seed 7 gen-prime 64

  - Factorization with a preset, overrides always win:
      python3 nt_cli.py factor 27471011
      python3 nt_cli.py factor 1444191769131458227 --preset thorough --verbose
      python3 nt_cli.py factor 360 --preset fast --sieve-limit 4096 --json

  - Discrete log and primitive roots:
      python3 nt_cli.py dlog 3 2 29
      python3 nt_cli.py --seed 1 gen-root 1019
"""

from __future__ import annotations

import argparse
import json
import random

from nt_arith import extended_gcd, gcd, modular_inverse, power, power_mod
from nt_dlog import baby_step_giant_step
from nt_factor import factorize
from nt_model import (
    DEFAULT_PM1_BOUND,
    DEFAULT_RHO_ITERATIONS,
    DEFAULT_SHORTCUT_BITS,
    DEFAULT_SIEVE_LIMIT,
    FactorEvent,
    FactorLimits,
    NumberTheoryError,
)
from nt_primality import generate_prime, is_prime
from nt_roots import generate_primitive_root, is_primitive_root

PRESETS: dict[str, tuple[int, int, int, int | None]] = {
    # rho_iterations, pm1_bound, shortcut_bits, sieve_limit
    "default": (DEFAULT_RHO_ITERATIONS, DEFAULT_PM1_BOUND, DEFAULT_SHORTCUT_BITS, DEFAULT_SIEVE_LIMIT),
    # give up early, trust the primality oracle from 32 bits on
    "fast": (10_000, 100, 32, 1 << 20),
    # longer Pollard runs and a sieve big enough for any 64-bit n
    "thorough": (1_000_000, 1_000, DEFAULT_SHORTCUT_BITS, 1 << 32),
}


def resolve_factor_limits(
    *,
    preset: str | None,
    rho_iterations: int | None = None,
    pm1_bound: int | None = None,
    shortcut_bits: int | None = None,
    sieve_limit: int | None = None,
) -> tuple[str, FactorLimits]:
    """Resolve preset + overrides.

    Returns: (preset_effective, limits)
    """
    preset_eff = "default" if preset is None else preset
    if preset_eff not in PRESETS:
        raise ValueError(f"Unknown preset: {preset_eff!r}")

    rho, pm1, bits, sieve = PRESETS[preset_eff]

    # Explicit overrides always win
    if rho_iterations is not None:
        rho = int(rho_iterations)
    if pm1_bound is not None:
        pm1 = int(pm1_bound)
    if shortcut_bits is not None:
        bits = int(shortcut_bits)
    if sieve_limit is not None:
        sieve = int(sieve_limit)

    return preset_eff, FactorLimits(
        rho_iterations=rho,
        pm1_bound=pm1,
        shortcut_bits=bits,
        sieve_limit=sieve,
    )


def build_argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="nt-toolkit",
        description="Number theory toolkit: modular arithmetic, primes, factoring, discrete logs.",
    )
    ap.add_argument("--seed", type=int, default=None, help="Seed for the random generator.")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_pow = sub.add_parser("pow", help="x^e, or x^e mod m")
    p_pow.add_argument("x", type=int)
    p_pow.add_argument("e", type=int)
    p_pow.add_argument("m", type=int, nargs="?", default=None)

    p_gcd = sub.add_parser("gcd", help="Greatest common divisor")
    p_gcd.add_argument("a", type=int)
    p_gcd.add_argument("b", type=int)

    p_egcd = sub.add_parser("egcd", help="Bezout triple (c1, c2, g) with c1*a + c2*b = g")
    p_egcd.add_argument("a", type=int)
    p_egcd.add_argument("b", type=int)

    p_inv = sub.add_parser("inverse", help="Modular inverse of a mod m")
    p_inv.add_argument("a", type=int)
    p_inv.add_argument("m", type=int)

    p_isp = sub.add_parser("is-prime", help="Probabilistic primality test")
    p_isp.add_argument("n", type=int)

    p_gen = sub.add_parser("gen-prime", help="Random prime with the given bit length")
    p_gen.add_argument("bits", type=int)
    p_gen.add_argument("--max-attempts", type=int, default=None, help="Cap on sampled candidates.")

    p_fac = sub.add_parser("factor", help="Prime factorization (rho -> p-1 -> sieve)")
    p_fac.add_argument("n", type=int)
    p_fac.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default="default",
        help=(
            "Factorization limits: default (100k rho steps, 2^27 sieve), "
            "fast (short runs, early primality shortcut), thorough (long runs, 2^32 sieve). "
            "The flags below always win."
        ),
    )
    p_fac.add_argument("--rho-iterations", type=int, default=None, help="Override: steps per rho cycle.")
    p_fac.add_argument("--pm1-bound", type=int, default=None, help="Override: Pollard p-1 bound.")
    p_fac.add_argument("--shortcut-bits", type=int, default=None, help="Override: bit length for the primality shortcut.")
    p_fac.add_argument("--sieve-limit", type=int, default=None, help="Override: largest sieve size.")
    p_fac.add_argument("--verbose", action="store_true", help="Print every cascade step.")
    p_fac.add_argument("--json", action="store_true", help="Print the result as one JSON object.")

    p_dlog = sub.add_parser("dlog", help="k with alpha^k == beta (mod p), baby-step/giant-step")
    p_dlog.add_argument("alpha", type=int)
    p_dlog.add_argument("beta", type=int)
    p_dlog.add_argument("p", type=int)

    p_isr = sub.add_parser("is-root", help="Is a a primitive root mod p?")
    p_isr.add_argument("a", type=int)
    p_isr.add_argument("p", type=int)

    p_genr = sub.add_parser("gen-root", help="Random primitive root mod the prime p")
    p_genr.add_argument("p", type=int)
    p_genr.add_argument("--max-attempts", type=int, default=None, help="Cap on sampled candidates.")

    return ap


def _print_event(event: FactorEvent) -> None:
    print(f"[factor] stage={event.stage}  n={event.n}  factor={event.factor}")


def _cmd_pow(args: argparse.Namespace, rng: random.Random) -> int:
    if args.m is None:
        print(f"[pow] result={power(args.x, args.e)}")
    else:
        print(f"[pow] result={power_mod(args.x, args.e, args.m)}")
    return 0


def _cmd_gcd(args: argparse.Namespace, rng: random.Random) -> int:
    print(f"[gcd] result={gcd(args.a, args.b)}")
    return 0


def _cmd_egcd(args: argparse.Namespace, rng: random.Random) -> int:
    c1, c2, g = extended_gcd(args.a, args.b)
    print(f"[egcd] c1={c1}  c2={c2}  g={g}")
    return 0


def _cmd_inverse(args: argparse.Namespace, rng: random.Random) -> int:
    inv = modular_inverse(args.a, args.m)
    print(f"[inverse] result={inv}  canonical={inv % args.m}")
    return 0


def _cmd_is_prime(args: argparse.Namespace, rng: random.Random) -> int:
    print(f"[prime] n={args.n}  probable_prime={is_prime(args.n, rng=rng)}")
    return 0


def _cmd_gen_prime(args: argparse.Namespace, rng: random.Random) -> int:
    p = generate_prime(args.bits, rng=rng, max_attempts=args.max_attempts)
    print(f"[prime] bits={args.bits}  p={p}")
    return 0


def _cmd_factor(args: argparse.Namespace, rng: random.Random) -> int:
    preset_eff, limits = resolve_factor_limits(
        preset=args.preset,
        rho_iterations=args.rho_iterations,
        pm1_bound=args.pm1_bound,
        shortcut_bits=args.shortcut_bits,
        sieve_limit=args.sieve_limit,
    )
    observer = _print_event if args.verbose else None
    factors = factorize(args.n, limits=limits, observer=observer, rng=rng)

    if args.json:
        multiplicities: dict[str, int] = {}
        if args.n != 1:
            for q in sorted(factors):
                multiplicities[str(q)] = multiplicities.get(str(q), 0) + 1
        out = {
            "n": args.n,
            "preset": preset_eff,
            "factors": factors,
            "multiplicities": multiplicities,
        }
        print(json.dumps(out, separators=(",", ":")))
        return 0

    print(
        f"[factor] preset={preset_eff}  rho_iterations={limits.rho_iterations}  pm1_bound={limits.pm1_bound}"
        f"  shortcut_bits={limits.shortcut_bits}  sieve_limit={limits.sieve_limit}"
    )
    print(f"[factor] n={args.n}  factors={' '.join(map(str, factors))}")
    return 0


def _cmd_dlog(args: argparse.Namespace, rng: random.Random) -> int:
    k = baby_step_giant_step(args.alpha, args.beta, args.p)
    if k is None:
        print(f"[dlog] no solution for {args.alpha}^k == {args.beta} (mod {args.p})")
        return 1
    print(f"[dlog] k={k}")
    return 0


def _cmd_is_root(args: argparse.Namespace, rng: random.Random) -> int:
    print(f"[root] a={args.a}  p={args.p}  primitive_root={is_primitive_root(args.a, args.p, rng=rng)}")
    return 0


def _cmd_gen_root(args: argparse.Namespace, rng: random.Random) -> int:
    g = generate_primitive_root(args.p, rng=rng, max_attempts=args.max_attempts)
    print(f"[root] p={args.p}  g={g}")
    return 0


COMMANDS = {
    "pow": _cmd_pow,
    "gcd": _cmd_gcd,
    "egcd": _cmd_egcd,
    "inverse": _cmd_inverse,
    "is-prime": _cmd_is_prime,
    "gen-prime": _cmd_gen_prime,
    "factor": _cmd_factor,
    "dlog": _cmd_dlog,
    "is-root": _cmd_is_root,
    "gen-root": _cmd_gen_root,
}


def main(argv: list[str] | None = None) -> int:
    ap = build_argparser()
    args = ap.parse_args(argv)
    rng = random.Random(args.seed)

    try:
        return COMMANDS[args.cmd](args, rng)
    except (NumberTheoryError, ValueError) as e:
        print(f"[error] {e}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())

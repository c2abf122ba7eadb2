"""ElGamal-style message exchange over Z_p*, plus the discrete-log attack.

Keys are (public, secret) = (g^x mod p, x). The shared key between a sender
with secret s and a receiver with public key R is R^s mod p; the cyphertext is
message * shared mod p.
"""

from __future__ import annotations

import random

from nt_arith import modular_inverse, power_mod
from nt_dlog import baby_step_giant_step
from nt_model import InvalidArgument, NoSolutionFound
from nt_primality import _rng


def generate_keys(p: int, g: int, *, rng: random.Random | None = None) -> tuple[int, int]:
    """Returns (public_key, secret) with secret drawn from [2, p-1]."""
    p, g = int(p), int(g)
    if p < 3:
        raise InvalidArgument(f"ElGamal needs p >= 3 (got p={p})")
    secret = _rng(rng).randint(2, p - 1)
    return power_mod(g, secret, p), secret


def encrypt(message: int, receiver_key: int, sender_secret: int, p: int) -> int:
    shared_key = power_mod(receiver_key, sender_secret, p)
    return int(message) * shared_key % p


def _unmask(cyphertext: int, shared_key: int, p: int) -> int:
    inverse = modular_inverse(shared_key, p) % p
    return int(cyphertext) * inverse % p


def decrypt(cyphertext: int, sender_key: int, receiver_secret: int, p: int) -> int:
    shared_key = power_mod(sender_key, receiver_secret, p)
    return _unmask(cyphertext, shared_key, p)


def crack(cyphertext: int, sender_key: int, receiver_key: int, p: int, g: int) -> int:
    """
    Recover the message from public data only.

    The sender secret is the discrete log of sender_key to base g; with it
    the shared key is receiver_key^secret mod p. Raises NoSolutionFound if
    the discrete log search fails (e.g. g does not generate sender_key).
    """
    secret = baby_step_giant_step(g, sender_key, p)
    if secret is None:
        raise NoSolutionFound(f"no k with {g}^k == {sender_key} (mod {p})")
    shared_key = power_mod(receiver_key, secret, p)
    return _unmask(cyphertext, shared_key, p)


__all__ = ["crack", "decrypt", "encrypt", "generate_keys"]

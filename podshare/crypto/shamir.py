"""
Shamir secret sharing over a fixed prime field.

A secret is the constant term of a random polynomial of degree k-1; share i
is the polynomial evaluated at x=i. Any k shares recover the secret by
Lagrange interpolation at x=0, fewer reveal nothing about it.
"""

import random
import secrets
from dataclasses import dataclass
from typing import Iterable, List, Optional

from podshare.core.errors import InsufficientShares, InvalidThreshold


# Curve25519 field prime. Every share value fits in 32 bytes.
PRIME = 2**255 - 19
SHARE_SIZE = 32

# Largest magnitude a signed value may have before it would alias in the field
MAX_SIGNED = (PRIME - 1) // 2


@dataclass(frozen=True)
class FieldShare:
    """One share of one secret: evaluation point and field element."""

    index: int
    value: int

    def to_bytes(self) -> bytes:
        return self.value.to_bytes(SHARE_SIZE, "big")

    @classmethod
    def from_bytes(cls, index: int, data: bytes) -> "FieldShare":
        value = int.from_bytes(data, "big")
        if value >= PRIME:
            raise ValueError(f"share value out of field range at index {index}")
        return cls(index=index, value=value)


def default_rng() -> random.Random:
    """Cryptographically secure generator used outside of tests."""
    return secrets.SystemRandom()


def encode_signed(value: int) -> int:
    """Map a signed integer into the field (negatives become PRIME - |x|)."""
    if abs(value) > MAX_SIGNED:
        raise ValueError(f"value {value} does not fit in the share field")
    return value % PRIME


def decode_signed(element: int) -> int:
    """Inverse of encode_signed."""
    element %= PRIME
    return element - PRIME if element > MAX_SIGNED else element


def split(secret: int, n: int, k: int, rng: Optional[random.Random] = None) -> List[FieldShare]:
    """
    Split a secret into n shares with reconstruction threshold k.

    Args:
        secret: Field element in [0, PRIME)
        n: Number of shares (evaluated at x = 1..n)
        k: Shares required to reconstruct
        rng: Randomness source for the polynomial coefficients

    Returns:
        Shares ordered by index 1..n
    """
    if n < 1 or k < 1 or k > n:
        raise InvalidThreshold(n, k)
    if not 0 <= secret < PRIME:
        raise ValueError("secret must be a field element in [0, PRIME)")

    rng = rng or default_rng()
    coefficients = [secret] + [rng.randrange(PRIME) for _ in range(k - 1)]
    return [FieldShare(index=x, value=_evaluate(coefficients, x)) for x in range(1, n + 1)]


def reconstruct(shares: Iterable[FieldShare], k: int) -> int:
    """
    Recover the secret from at least k distinct shares.

    Duplicate indices count once; the first share seen for an index wins.
    """
    if k < 1:
        raise InvalidThreshold(k, k)

    by_index = {}
    for share in shares:
        if share.index <= 0:
            raise ValueError(f"share index must be positive, got {share.index}")
        by_index.setdefault(share.index, share.value)

    if len(by_index) < k:
        raise InsufficientShares(len(by_index), k)

    points = list(by_index.items())
    secret = 0
    for i, (xi, yi) in enumerate(points):
        num, den = 1, 1
        for j, (xj, _) in enumerate(points):
            if i == j:
                continue
            num = (num * -xj) % PRIME
            den = (den * (xi - xj)) % PRIME
        secret = (secret + yi * num * pow(den, -1, PRIME)) % PRIME
    return secret


def _evaluate(coefficients: List[int], x: int) -> int:
    """Horner evaluation mod PRIME."""
    acc = 0
    for c in reversed(coefficients):
        acc = (acc * x + c) % PRIME
    return acc

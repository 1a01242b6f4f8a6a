"""BN254 curve points and their byte encodings.

Group arithmetic comes from py_ecc's optimized (projective) bn128 backend.
Encoding used by proofs and key digests:
    G1: 64 bytes, affine x || y, 32-byte big-endian each; infinity is all zero
    G2: 128 bytes, x.c0 || x.c1 || y.c0 || y.c1
    scalar: 32 bytes, big-endian, must be canonical (< r)
"""

from typing import Sequence

from py_ecc.optimized_bn128 import (
    FQ,
    G1,
    G2,
    Z1,
    add,
    b,
    field_modulus,
    is_inf,
    is_on_curve,
    multiply,
    neg,
    normalize,
)

from primitives.field import BN254_SCALAR_PRIME

# --- Type Aliases ---
G1Point = tuple  # Projective (x, y, z) over FQ
G2Point = tuple  # Projective (x, y, z) over FQ2

# --- Encoding Sizes ---
COORD_SIZE = 32
G1_SIZE = 2 * COORD_SIZE
G2_SIZE = 4 * COORD_SIZE
SCALAR_SIZE = 32


def _coord_int(c) -> int:
    # py_ecc stores FQ2 coefficients either as ints or as FQ elements
    return c.n if hasattr(c, "n") else int(c)


def g1_to_bytes(point: G1Point) -> bytes:
    """Encode a G1 point as 64 bytes."""
    if is_inf(point):
        return bytes(G1_SIZE)
    x, y = normalize(point)
    return _coord_int(x).to_bytes(COORD_SIZE, "big") + _coord_int(y).to_bytes(COORD_SIZE, "big")


def g1_from_bytes(data: bytes) -> G1Point:
    """Decode a 64-byte G1 point.

    Raises:
        ValueError: If the encoding is not a point on the curve
    """
    if len(data) != G1_SIZE:
        raise ValueError(f"G1 point must be {G1_SIZE} bytes, got {len(data)}")
    if data == bytes(G1_SIZE):
        return Z1
    x = int.from_bytes(data[:COORD_SIZE], "big")
    y = int.from_bytes(data[COORD_SIZE:], "big")
    if x >= field_modulus or y >= field_modulus:
        raise ValueError("G1 coordinate is not a canonical base field element")
    point = (FQ(x), FQ(y), FQ.one())
    # BN254 G1 has cofactor 1, so on-curve implies in the prime-order subgroup
    if not is_on_curve(point, b):
        raise ValueError("G1 point is not on the curve")
    return point


def g2_to_bytes(point: G2Point) -> bytes:
    """Encode a G2 point as 128 bytes."""
    if is_inf(point):
        return bytes(G2_SIZE)
    x, y = normalize(point)
    out = b""
    for coord in (x, y):
        for c in coord.coeffs:
            out += _coord_int(c).to_bytes(COORD_SIZE, "big")
    return out


def scalar_to_bytes(value) -> bytes:
    """Encode a scalar field element as 32 big-endian bytes."""
    return int(value).to_bytes(SCALAR_SIZE, "big")


def scalar_from_bytes(data: bytes) -> int:
    """Decode a canonical 32-byte scalar.

    Raises:
        ValueError: If the value is not reduced modulo r
    """
    if len(data) != SCALAR_SIZE:
        raise ValueError(f"scalar must be {SCALAR_SIZE} bytes, got {len(data)}")
    value = int.from_bytes(data, "big")
    if value >= BN254_SCALAR_PRIME:
        raise ValueError("scalar is not a canonical field element")
    return value


def g1_eq(p1: G1Point, p2: G1Point) -> bool:
    """Equality of projective G1 points."""
    return g1_to_bytes(p1) == g1_to_bytes(p2)


def msm(points: Sequence[G1Point], scalars: Sequence[int]) -> G1Point:
    """Multi-scalar multiplication sum_i scalars[i] * points[i]."""
    acc = Z1
    for point, scalar in zip(points, scalars):
        scalar = int(scalar) % BN254_SCALAR_PRIME
        if scalar:
            acc = add(acc, multiply(point, scalar))
    return acc


__all__ = [
    "G1",
    "G2",
    "Z1",
    "G1Point",
    "G2Point",
    "G1_SIZE",
    "G2_SIZE",
    "SCALAR_SIZE",
    "add",
    "multiply",
    "neg",
    "msm",
    "g1_eq",
    "g1_to_bytes",
    "g1_from_bytes",
    "g2_to_bytes",
    "scalar_to_bytes",
    "scalar_from_bytes",
]

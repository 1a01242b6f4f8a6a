"""Evaluation domain and polynomial operations.

This module provides protocol-level polynomial operations over the
multiplicative subgroup H = {1, w, w^2, ..., w^(n-1)} of order n = 2^k. The
protocol layer converts between evaluation form (column values over H) and
coefficient form (galois.Poly) only through these helpers.
"""

from functools import cached_property
from typing import Sequence

import galois
import numpy as np

from primitives.errors import BackendError
from primitives.field import BN254_SCALAR_PRIME, FF, TWO_ADICITY, get_omega

P = BN254_SCALAR_PRIME


def poly_from_coeffs(coeffs: Sequence[int]) -> galois.Poly:
    """Build a polynomial from ascending-order integer coefficients."""
    if len(coeffs) == 0:
        return galois.Poly.Zero(field=FF)
    return galois.Poly(FF([int(c) % P for c in coeffs]), order="asc")


def constant_poly(value) -> galois.Poly:
    """Degree-0 polynomial equal to value."""
    return galois.Poly(FF([int(value) % P]))


def coefficients_asc(poly: galois.Poly) -> list[int]:
    """Ascending-order coefficients of poly as ints."""
    return [int(c) for c in poly.coefficients(order="asc")]


def is_zero_poly(poly: galois.Poly) -> bool:
    """True if every coefficient of poly is zero."""
    return bool(np.all(poly.coeffs == 0))


def divide_by_linear(poly: galois.Poly, point) -> galois.Poly:
    """Return (poly(X) - poly(point)) / (X - point).

    The remainder of this division is exactly poly(point), so the quotient is
    always exact; it is the KZG opening witness polynomial.
    """
    value = poly(FF(int(point)))
    numerator = poly - constant_poly(value)
    denominator = galois.Poly(FF([1, (P - int(point)) % P]))
    quotient, remainder = divmod(numerator, denominator)
    if not is_zero_poly(remainder):
        raise BackendError("linear division left a non-zero remainder")
    return quotient


class EvaluationDomain:
    """Multiplicative subgroup of order 2^k with its vanishing polynomial."""

    def __init__(self, k: int) -> None:
        if not 1 <= k <= TWO_ADICITY:
            raise BackendError(f"k must be in [1, {TWO_ADICITY}], got {k}")
        self.k = k
        self.n = 1 << k
        self.omega = get_omega(k)
        self.omega_inv = pow(self.omega, P - 2, P)
        self.points = FF([pow(self.omega, i, P) for i in range(self.n)])

    def __repr__(self) -> str:
        return f"EvaluationDomain(k={self.k})"

    def rotate_point(self, point, rotation: int) -> FF:
        """point * w^rotation."""
        return FF(int(point)) * FF(pow(self.omega, rotation % self.n, P))

    def interpolate(self, values) -> galois.Poly:
        """Unique polynomial of degree < n taking values[i] at w^i."""
        if len(values) != self.n:
            raise BackendError(f"expected {self.n} evaluations, got {len(values)}")
        return galois.lagrange_poly(self.points, FF([int(v) for v in values]))

    @cached_property
    def vanishing_poly(self) -> galois.Poly:
        """Z_H(X) = X^n - 1."""
        coeffs = [P - 1] + [0] * (self.n - 1) + [1]
        return poly_from_coeffs(coeffs)

    def vanishing_eval(self, x) -> FF:
        """Z_H(x) = x^n - 1."""
        return FF(int(x)) ** self.n - FF(1)

    @cached_property
    def lagrange_first(self) -> galois.Poly:
        """L_0(X): 1 at w^0, 0 elsewhere on H."""
        values = [1] + [0] * (self.n - 1)
        return self.interpolate(values)

    def rotate_poly(self, poly: galois.Poly, rotation: int) -> galois.Poly:
        """Return q(X) = poly(w^rotation * X)."""
        if rotation == 0:
            return poly
        w = pow(self.omega, rotation % self.n, P)
        coeffs = coefficients_asc(poly)
        scaled = [c * pow(w, i, P) % P for i, c in enumerate(coeffs)]
        return poly_from_coeffs(scaled)

    def blind(self, poly: galois.Poly, blinding: Sequence) -> galois.Poly:
        """Add (b_0 + b_1 X + ...) * Z_H(X) to poly; unchanged on H."""
        return poly + poly_from_coeffs([int(b) for b in blinding]) * self.vanishing_poly

    def divide_by_vanishing(self, poly: galois.Poly) -> galois.Poly:
        """Exact division by Z_H.

        Raises:
            BackendError: If poly does not vanish on H
        """
        quotient, remainder = divmod(poly, self.vanishing_poly)
        if not is_zero_poly(remainder):
            raise BackendError("constraint polynomial is not divisible by the vanishing polynomial")
        return quotient

    def split(self, poly: galois.Poly, pieces: int) -> list[galois.Poly]:
        """Split poly into `pieces` chunks of n coefficients: sum_i X^(n*i) * t_i(X)."""
        coeffs = coefficients_asc(poly)
        if len(coeffs) > pieces * self.n:
            raise BackendError(
                f"polynomial of degree {poly.degree} does not fit in {pieces} pieces of size {self.n}")
        coeffs = coeffs + [0] * (pieces * self.n - len(coeffs))
        return [poly_from_coeffs(coeffs[i * self.n:(i + 1) * self.n]) for i in range(pieces)]

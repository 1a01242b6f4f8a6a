"""Tests for the evaluation domain and polynomial helpers."""

import numpy as np
import pytest

from primitives.errors import BackendError
from primitives.field import FF
from primitives.polynomial import (
    EvaluationDomain,
    coefficients_asc,
    divide_by_linear,
    is_zero_poly,
    poly_from_coeffs,
)


@pytest.fixture
def domain() -> EvaluationDomain:
    return EvaluationDomain(3)


class TestEvaluationDomain:
    """Tests for interpolation and domain polynomials."""

    def test_points_are_powers_of_omega(self, domain: EvaluationDomain) -> None:
        """points[i] = w^i and w^n = 1."""
        assert domain.n == 8
        assert domain.points[0] == FF(1)
        assert domain.points[1] == FF(domain.omega)
        assert FF(domain.omega) ** 8 == FF(1)

    def test_interpolate_hits_values(self, domain: EvaluationDomain) -> None:
        """Interpolated polynomial takes values[i] at w^i."""
        values = FF([3, 1, 4, 1, 5, 9, 2, 6])
        poly = domain.interpolate(values)
        assert poly.degree < domain.n
        assert np.array_equal(poly(domain.points), values)

    def test_interpolate_wrong_length(self, domain: EvaluationDomain) -> None:
        """Interpolation needs exactly n values."""
        with pytest.raises(BackendError):
            domain.interpolate(FF([1, 2, 3]))

    def test_vanishing_poly_vanishes_on_domain(self, domain: EvaluationDomain) -> None:
        """Z_H is zero on H and matches vanishing_eval elsewhere."""
        assert np.all(domain.vanishing_poly(domain.points) == 0)
        assert domain.vanishing_poly(FF(12345)) == domain.vanishing_eval(12345)

    def test_lagrange_first(self, domain: EvaluationDomain) -> None:
        """L_0 is one at w^0 and zero on the rest of H."""
        evals = domain.lagrange_first(domain.points)
        assert evals[0] == FF(1)
        assert np.all(evals[1:] == 0)

    def test_rotate_poly(self, domain: EvaluationDomain) -> None:
        """rotate_poly(p, r)(x) = p(w^r x)."""
        poly = poly_from_coeffs([5, 0, 7, 11])
        x = FF(987654321)
        for rotation in (1, -1, 3):
            rotated = domain.rotate_poly(poly, rotation)
            assert rotated(x) == poly(domain.rotate_point(x, rotation))

    def test_blind_keeps_domain_values(self, domain: EvaluationDomain) -> None:
        """Blinding adds a multiple of Z_H: same values on H, higher degree."""
        poly = domain.interpolate(FF([1, 2, 3, 4, 5, 6, 7, 8]))
        blinded = domain.blind(poly, [FF(17), FF(29)])
        assert blinded.degree == domain.n + 1
        assert np.array_equal(blinded(domain.points), poly(domain.points))

    def test_divide_by_vanishing(self, domain: EvaluationDomain) -> None:
        """Multiples of Z_H divide exactly; anything else fails."""
        q = poly_from_coeffs([1, 2, 3])
        assert domain.divide_by_vanishing(q * domain.vanishing_poly) == q
        with pytest.raises(BackendError):
            domain.divide_by_vanishing(q)

    def test_split_recombines(self, domain: EvaluationDomain) -> None:
        """sum_i x^(n*i) * piece_i(x) = poly(x)."""
        poly = poly_from_coeffs(list(range(1, 21)))
        pieces = domain.split(poly, 3)
        assert len(pieces) == 3
        x = FF(4242)
        total = FF(0)
        for i, piece in enumerate(pieces):
            total = total + x ** (domain.n * i) * piece(x)
        assert total == poly(x)

    def test_split_too_few_pieces(self, domain: EvaluationDomain) -> None:
        """A polynomial that does not fit raises."""
        with pytest.raises(BackendError):
            domain.split(poly_from_coeffs(list(range(1, 21))), 2)

    def test_invalid_k(self) -> None:
        """k must fit the field's two-adicity."""
        with pytest.raises(BackendError):
            EvaluationDomain(29)


class TestPolynomialHelpers:
    """Tests for coefficient helpers."""

    def test_coefficients_ascending(self) -> None:
        """poly_from_coeffs and coefficients_asc agree on order."""
        assert coefficients_asc(poly_from_coeffs([1, 2, 3])) == [1, 2, 3]

    def test_zero_poly(self) -> None:
        """Empty coefficients give the zero polynomial."""
        assert is_zero_poly(poly_from_coeffs([]))
        assert not is_zero_poly(poly_from_coeffs([0, 1]))

    def test_divide_by_linear(self) -> None:
        """(p(X) - p(a)) / (X - a) times (X - a) gives back p - p(a)."""
        poly = poly_from_coeffs([7, 0, 3, 1])
        point = FF(11)
        quotient = divide_by_linear(poly, point)
        x = FF(99)
        assert quotient(x) * (x - point) == poly(x) - poly(point)

"""Tests for the BN254 scalar field helpers."""

import random

import pytest

from primitives.field import (
    BN254_SCALAR_PRIME,
    FF,
    TWO_ADICITY,
    batch_inverse,
    get_omega,
    is_canonical,
    random_element,
)

P = BN254_SCALAR_PRIME


class TestRootsOfUnity:
    """Tests for the 2-adic roots of unity."""

    @pytest.mark.parametrize("n_bits", [1, 2, 4, 10])
    def test_omega_has_exact_order(self, n_bits: int) -> None:
        """w^(2^n_bits) = 1 and w^(2^(n_bits-1)) != 1."""
        w = get_omega(n_bits)
        assert pow(w, 1 << n_bits, P) == 1
        assert pow(w, 1 << (n_bits - 1), P) != 1

    def test_two_adicity_bound(self) -> None:
        """Asking for more than 2^28 roots fails."""
        with pytest.raises(ValueError):
            get_omega(TWO_ADICITY + 1)


class TestConversions:
    """Tests for element conversion and validation."""

    def test_scalar_prime(self) -> None:
        """r is the BN254 group order."""
        assert P == 21888242871839275222246405745257275088548364400416034343698204186575808495617

    def test_is_canonical(self) -> None:
        """Only ints in [0, r) are canonical."""
        assert is_canonical(0)
        assert is_canonical(P - 1)
        assert not is_canonical(P)
        assert not is_canonical(-1)
        assert not is_canonical(True)
        assert not is_canonical("7")

    def test_random_element_is_seeded(self) -> None:
        """Same seed draws the same element."""
        assert random_element(random.Random(3)) == random_element(random.Random(3))


class TestBatchInverse:
    """Tests for Montgomery batch inversion."""

    def test_single_element(self) -> None:
        """Single element is inverted correctly."""
        result = batch_inverse(FF([12345]))
        assert result[0] * FF(12345) == FF(1)

    def test_matches_scalar_inversion(self) -> None:
        """Batch inversion matches scalar inversion."""
        values = FF([i * 7 + 13 for i in range(20)])
        results = batch_inverse(values)
        for v, r in zip(values, results):
            assert r == v ** -1

    def test_zero_raises(self) -> None:
        """A zero element cannot be inverted."""
        with pytest.raises(ZeroDivisionError):
            batch_inverse(FF([1, 0, 3]))

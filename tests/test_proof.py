"""Tests for point / scalar encodings and proof serialization."""

import pytest
from py_ecc.optimized_bn128 import G1, Z1, multiply

from primitives.curve import (
    G1_SIZE,
    SCALAR_SIZE,
    g1_eq,
    g1_from_bytes,
    g1_to_bytes,
    scalar_from_bytes,
    scalar_to_bytes,
)
from primitives.field import BN254_SCALAR_PRIME
from protocol.proof import PlonkishProof


class TestEncodings:
    """Tests for G1 and scalar encodings."""

    def test_g1_round_trip(self) -> None:
        """A point decodes to itself."""
        point = multiply(G1, 123456789)
        encoded = g1_to_bytes(point)
        assert len(encoded) == G1_SIZE
        assert g1_eq(g1_from_bytes(encoded), point)

    def test_infinity_is_all_zero(self) -> None:
        """The point at infinity encodes as 64 zero bytes."""
        assert g1_to_bytes(Z1) == bytes(G1_SIZE)
        assert g1_eq(g1_from_bytes(bytes(G1_SIZE)), Z1)

    def test_off_curve_rejected(self) -> None:
        """Coordinates not on y^2 = x^3 + 3 are rejected."""
        encoded = bytearray(g1_to_bytes(G1))
        encoded[-1] ^= 1
        with pytest.raises(ValueError):
            g1_from_bytes(bytes(encoded))

    def test_g1_wrong_length(self) -> None:
        """G1 encodings are exactly 64 bytes."""
        with pytest.raises(ValueError):
            g1_from_bytes(bytes(63))

    def test_scalar_canonical(self) -> None:
        """Scalars are 32-byte big-endian and must be below r."""
        assert scalar_from_bytes(scalar_to_bytes(42)) == 42
        assert len(scalar_to_bytes(42)) == SCALAR_SIZE
        with pytest.raises(ValueError):
            scalar_from_bytes(BN254_SCALAR_PRIME.to_bytes(SCALAR_SIZE, "big"))


class TestProofSerialization:
    """Tests for PlonkishProof.to_bytes / from_bytes."""

    def test_size_fixed_by_vk(self, keys, proof_select_sum) -> None:
        """15 points and 20 scalars for the two-chip circuit."""
        _, vk = keys
        assert PlonkishProof.expected_size(vk) == 15 * G1_SIZE + 20 * SCALAR_SIZE
        assert len(proof_select_sum) == PlonkishProof.expected_size(vk)

    def test_round_trip(self, keys, proof_select_sum) -> None:
        """Decoding and re-encoding gives the same bytes."""
        _, vk = keys
        proof = PlonkishProof.from_bytes(proof_select_sum, vk)
        assert len(proof.advice_commitments) == 7
        assert len(proof.quotient_commitments) == vk.pieces
        assert len(proof.opening_witnesses) == len(vk.rotations)
        assert proof.to_bytes() == proof_select_sum

    def test_truncated(self, keys, proof_select_sum) -> None:
        """A short proof fails to decode."""
        _, vk = keys
        with pytest.raises(ValueError):
            PlonkishProof.from_bytes(proof_select_sum[:-1], vk)

    def test_non_canonical_scalar(self, keys, proof_select_sum) -> None:
        """An evaluation >= r fails to decode."""
        _, vk = keys
        offset = (7 + 1 + vk.pieces) * G1_SIZE
        data = bytearray(proof_select_sum)
        data[offset:offset + SCALAR_SIZE] = b"\xff" * SCALAR_SIZE
        with pytest.raises(ValueError):
            PlonkishProof.from_bytes(bytes(data), vk)

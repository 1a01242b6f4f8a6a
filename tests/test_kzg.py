"""Tests for KZG commitments and batched openings."""

import pytest

from primitives.curve import add, g1_eq
from primitives.errors import BackendError
from primitives.field import FF
from primitives.kzg import SRS_EXTRA_POWERS, OpeningClaim, verify_openings
from primitives.polynomial import poly_from_coeffs


class TestCommit:
    """Tests for KZGParams.commit."""

    def test_srs_size(self, params) -> None:
        """The SRS holds 2^k + 3 powers of tau."""
        assert len(params.g1_powers) == (1 << params.k) + SRS_EXTRA_POWERS

    def test_commit_is_linear(self, params) -> None:
        """commit(p + q) = commit(p) + commit(q)."""
        p = poly_from_coeffs([1, 2, 3])
        q = poly_from_coeffs([4, 0, 0, 5])
        assert g1_eq(params.commit(p + q), add(params.commit(p), params.commit(q)))

    def test_commit_too_large(self, params) -> None:
        """Polynomials beyond the SRS cannot be committed."""
        with pytest.raises(BackendError):
            params.commit(poly_from_coeffs([1] * (params.max_degree + 2)))


class TestOpenings:
    """Tests for open / verify_openings."""

    def test_batched_openings_verify(self, params) -> None:
        """Two polynomials at one point and one at another verify together."""
        p = poly_from_coeffs([1, 2, 3])
        q = poly_from_coeffs([9, 8, 7, 6, 5])
        r = poly_from_coeffs([4, 4])
        v = FF(31337)
        x1, x2 = FF(5), FF(77)
        claims = [
            OpeningClaim(point=int(x1), commitments=[params.commit(p), params.commit(q)],
                         evals=[int(p(x1)), int(q(x1))], witness=params.open([p, q], x1, v)),
            OpeningClaim(point=int(x2), commitments=[params.commit(r)],
                         evals=[int(r(x2))], witness=params.open([r], x2, v)),
        ]
        assert verify_openings(params.verifier_params(), claims, v, FF(424242))

    def test_wrong_evaluation_rejected(self, params) -> None:
        """A claimed value that is not p(x) fails the pairing check."""
        p = poly_from_coeffs([1, 2, 3])
        x = FF(5)
        v = FF(3)
        claim = OpeningClaim(point=int(x), commitments=[params.commit(p)],
                             evals=[int(p(x)) + 1], witness=params.open([p], x, v))
        assert not verify_openings(params.verifier_params(), [claim], v, FF(11))

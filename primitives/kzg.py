"""KZG polynomial commitment scheme over BN254.

Commitments are [p(tau)]G1 computed from a structured reference string of
powers of a secret tau. Openings are batched per evaluation point: all
polynomials opened at the same point are combined with powers of a challenge
v, and the per-point witnesses are combined again with powers of u so the
verifier performs a single pairing equation:

    e(sum_k u^k W_k, [tau]G2) == e(sum_k u^k (F_k + x_k W_k), G2)

where F_k = sum_i v^i C_i - (sum_i v^i y_i) G1 for point x_k.
"""

from dataclasses import dataclass, field
from typing import Sequence

import galois
from py_ecc.optimized_bn128 import G1, G2, multiply, pairing

from primitives.curve import G1Point, G2Point, msm
from primitives.errors import BackendError
from primitives.field import BN254_SCALAR_PRIME, FF
from primitives.polynomial import coefficients_asc, constant_poly, divide_by_linear

P = BN254_SCALAR_PRIME

# Extra SRS powers beyond n: blinded advice has degree n+1, blinded z has degree n+2
SRS_EXTRA_POWERS = 3


@dataclass(frozen=True)
class KZGVerifierParams:
    """Group elements the verifier needs: G1, G2 and [tau]G2."""
    g1: G1Point
    g2: G2Point
    tau_g2: G2Point


@dataclass(frozen=True)
class KZGParams:
    """Structured reference string for circuits of 2^k rows.

    Attributes:
        k: log2 of the number of rows the SRS supports
        g1_powers: [tau^i]G1 for i in [0, 2^k + SRS_EXTRA_POWERS)
        g2: G2 generator
        tau_g2: [tau]G2
    """
    k: int
    g1_powers: tuple = field(repr=False)
    g2: G2Point = field(repr=False)
    tau_g2: G2Point = field(repr=False)

    @classmethod
    def setup(cls, k: int, rng) -> "KZGParams":
        """Generate an SRS with toxic waste tau drawn from rng.

        Args:
            k: log2 of the circuit row count
            rng: object with randrange (random.Random, secrets.SystemRandom, ...)
        """
        tau = rng.randrange(1, P)
        size = (1 << k) + SRS_EXTRA_POWERS
        powers = []
        tau_i = 1
        for _ in range(size):
            powers.append(multiply(G1, tau_i))
            tau_i = tau_i * tau % P
        return cls(k=k, g1_powers=tuple(powers), g2=G2, tau_g2=multiply(G2, tau))

    @property
    def max_degree(self) -> int:
        return len(self.g1_powers) - 1

    def verifier_params(self) -> KZGVerifierParams:
        return KZGVerifierParams(g1=self.g1_powers[0], g2=self.g2, tau_g2=self.tau_g2)

    def commit(self, poly: galois.Poly) -> G1Point:
        """Commit to poly: sum_i c_i [tau^i]G1.

        Raises:
            BackendError: If poly's degree exceeds the SRS
        """
        coeffs = coefficients_asc(poly)
        if len(coeffs) > len(self.g1_powers):
            raise BackendError(
                f"polynomial of degree {poly.degree} exceeds SRS max degree {self.max_degree}")
        return msm(self.g1_powers[:len(coeffs)], coeffs)

    def open(self, polys: Sequence[galois.Poly], point, v) -> G1Point:
        """Batched opening witness for polys at point.

        Returns [(h(X) - h(point)) / (X - point)]G1 with h = sum_i v^i polys[i].
        """
        combined = constant_poly(0)
        v_power = FF(1)
        for poly in polys:
            combined = combined + constant_poly(v_power) * poly
            v_power = v_power * FF(int(v))
        return self.commit(divide_by_linear(combined, point))


@dataclass
class OpeningClaim:
    """Claim that commitments open to evals at point, with batched witness."""
    point: int
    commitments: list
    evals: list[int]
    witness: G1Point


def verify_openings(params: KZGVerifierParams, claims: Sequence[OpeningClaim], v, u) -> bool:
    """Check all opening claims with one pairing equation."""
    v = int(v) % P
    u = int(u) % P
    lhs_points = []
    lhs_scalars = []
    rhs_points = []
    rhs_scalars = []
    u_power = 1
    for claim in claims:
        # F = sum v^i C_i - (sum v^i y_i) G1
        v_power = 1
        combined_eval = 0
        for commitment, value in zip(claim.commitments, claim.evals):
            rhs_points.append(commitment)
            rhs_scalars.append(u_power * v_power % P)
            combined_eval = (combined_eval + v_power * int(value)) % P
            v_power = v_power * v % P
        rhs_points.append(params.g1)
        rhs_scalars.append((P - u_power * combined_eval % P) % P)
        # + x * W
        rhs_points.append(claim.witness)
        rhs_scalars.append(u_power * int(claim.point) % P)
        lhs_points.append(claim.witness)
        lhs_scalars.append(u_power)
        u_power = u_power * u % P

    lhs = msm(lhs_points, lhs_scalars)
    rhs = msm(rhs_points, rhs_scalars)
    return pairing(params.tau_g2, lhs) == pairing(params.g2, rhs)

"""Proving and verifying keys."""

import hashlib
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import galois

from primitives.curve import G1Point, g1_to_bytes, g2_to_bytes
from primitives.field import FF
from primitives.kzg import KZGParams, KZGVerifierParams
from primitives.polynomial import EvaluationDomain
from protocol.constraint_system import ConstraintSystem
from protocol.expressions import Column

# --- Opening Labels ---
# Each opened evaluation is named (source, index):
#   ("advice", i)      advice query i of the constraint system
#   ("fixed", i)       fixed / selector query i
#   ("sigma", j)       permutation polynomial of permutation column j
#   ("permutation", r) grand product z at rotation r (0 or 1)
#   ("quotient", i)    quotient piece t_i
ADVICE = "advice"
FIXED = "fixed"
SIGMA = "sigma"
PERMUTATION = "permutation"
QUOTIENT = "quotient"

OpeningLabel = Tuple[str, int]


def quotient_pieces(degree: int, n: int) -> int:
    """Number of n-coefficient pieces holding H / Z_H.

    Blinded advice has degree n + 1 and blinded z degree n + 2, so
    deg H <= degree * (n + 2) and deg t <= degree * (n + 2) - n.
    """
    return (degree * (n + 2) - n) // n + 1


@dataclass(eq=False)
class VerifyingKey:
    """Everything the verifier needs about a circuit shape.

    Attributes:
        k: log2 of the number of rows
        cs: Constraint system (columns, gates, queries)
        fixed_commitments: One commitment per fixed-like column (fixed, then selectors)
        permutation_commitments: One sigma commitment per permutation column
        pieces: Number of quotient pieces
        rotations: Sorted opening rotations
        kzg: Verifier half of the SRS
        transcript_repr: Digest binding all of the above, absorbed first by the transcript
    """
    k: int
    cs: ConstraintSystem
    fixed_commitments: Tuple[G1Point, ...] = field(repr=False)
    permutation_commitments: Tuple[G1Point, ...] = field(repr=False)
    pieces: int
    rotations: Tuple[int, ...]
    kzg: KZGVerifierParams = field(repr=False)
    transcript_repr: bytes = field(default=b"", repr=False)

    def __post_init__(self):
        if not self.transcript_repr:
            self.transcript_repr = self._digest()

    @property
    def n(self) -> int:
        return 1 << self.k

    def _digest(self) -> bytes:
        hasher = hashlib.blake2b(digest_size=64, person=b"TwoChips-VK-v1")
        hasher.update(f"k={self.k};pieces={self.pieces};rotations={list(self.rotations)};".encode())
        hasher.update(self.cs.pinned().encode())
        for commitment in self.fixed_commitments:
            hasher.update(g1_to_bytes(commitment))
        for commitment in self.permutation_commitments:
            hasher.update(g1_to_bytes(commitment))
        hasher.update(g2_to_bytes(self.kzg.g2))
        hasher.update(g2_to_bytes(self.kzg.tau_g2))
        return hasher.digest()

    def opening_schedule(self) -> List[Tuple[int, List[OpeningLabel]]]:
        """Evaluations opened at zeta * w^rotation, grouped by rotation.

        Prover and verifier walk this list in the same order to build the
        batched openings.
        """
        schedule = []
        for rotation in self.rotations:
            labels = [(ADVICE, i) for i, (_, rot) in enumerate(self.cs.advice_queries) if rot == rotation]
            labels += [(FIXED, i) for i, (_, rot) in enumerate(self.cs.fixed_queries) if rot == rotation]
            if rotation == 0:
                labels += [(SIGMA, j) for j in range(len(self.cs.permutation_columns))]
                labels.append((PERMUTATION, 0))
                labels += [(QUOTIENT, i) for i in range(self.pieces)]
            elif rotation == 1:
                labels.append((PERMUTATION, 1))
            schedule.append((rotation, labels))
        return schedule


@dataclass(eq=False)
class ProvingKey:
    """Verifying key plus the prover-side polynomials.

    Attributes:
        vk: The matching verifying key
        params: Full SRS
        domain: Evaluation domain of 2^k rows
        fixed_values: Fixed-like column values over H
        fixed_polys: Fixed-like column polynomials, in fixed_like_columns order
        permutation_values: sigma_j over H
        permutation_polys: sigma_j polynomials
        layout_fingerprint: Structural fingerprint every proving layout must match
    """
    vk: VerifyingKey
    params: KZGParams = field(repr=False)
    domain: EvaluationDomain
    fixed_values: Dict[Column, FF] = field(repr=False)
    fixed_polys: List[galois.Poly] = field(repr=False)
    permutation_values: List[FF] = field(repr=False)
    permutation_polys: List[galois.Poly] = field(repr=False)
    layout_fingerprint: bytes = field(repr=False)

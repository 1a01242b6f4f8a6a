"""Proof data structure and binary serialization.

The byte layout is fully determined by the verifying key:

    advice commitments      G1 x len(cs.advice_columns)
    z commitment            G1
    quotient commitments    G1 x vk.pieces
    advice evaluations      scalar x len(cs.advice_queries)
    fixed evaluations       scalar x len(cs.fixed_queries)
    sigma evaluations       scalar x len(cs.permutation_columns)
    z(zeta), z(zeta * w)    scalar x 2
    quotient evaluations    scalar x vk.pieces
    opening witnesses       G1 x len(vk.rotations)
"""

from dataclasses import dataclass, field
from typing import List

from primitives.curve import (
    G1_SIZE,
    SCALAR_SIZE,
    G1Point,
    g1_from_bytes,
    g1_to_bytes,
    scalar_from_bytes,
    scalar_to_bytes,
)
from protocol.keys import VerifyingKey


@dataclass
class PlonkishProof:
    """Commitments, evaluations and opening witnesses of one proof."""
    advice_commitments: List[G1Point] = field(default_factory=list)
    z_commitment: G1Point = None
    quotient_commitments: List[G1Point] = field(default_factory=list)
    advice_evals: List[int] = field(default_factory=list)
    fixed_evals: List[int] = field(default_factory=list)
    sigma_evals: List[int] = field(default_factory=list)
    z_eval: int = 0
    z_next_eval: int = 0
    quotient_evals: List[int] = field(default_factory=list)
    opening_witnesses: List[G1Point] = field(default_factory=list)

    def evals(self) -> List[int]:
        """All evaluations in transcript order."""
        return (self.advice_evals + self.fixed_evals + self.sigma_evals
                + [self.z_eval, self.z_next_eval] + self.quotient_evals)

    def to_bytes(self) -> bytes:
        out = bytearray()
        for point in self.advice_commitments:
            out += g1_to_bytes(point)
        out += g1_to_bytes(self.z_commitment)
        for point in self.quotient_commitments:
            out += g1_to_bytes(point)
        for value in self.evals():
            out += scalar_to_bytes(int(value))
        for point in self.opening_witnesses:
            out += g1_to_bytes(point)
        return bytes(out)

    @staticmethod
    def expected_size(vk: VerifyingKey) -> int:
        cs = vk.cs
        n_points = len(cs.advice_columns) + 1 + vk.pieces + len(vk.rotations)
        n_scalars = (len(cs.advice_queries) + len(cs.fixed_queries)
                     + len(cs.permutation_columns) + 2 + vk.pieces)
        return n_points * G1_SIZE + n_scalars * SCALAR_SIZE

    @classmethod
    def from_bytes(cls, data: bytes, vk: VerifyingKey) -> "PlonkishProof":
        """Parse a proof laid out for vk.

        Raises:
            ValueError: If the length is wrong, a point is not on the curve or
                a scalar is not canonical
        """
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError(f"proof must be bytes, got {type(data).__name__}")
        expected = cls.expected_size(vk)
        if len(data) != expected:
            raise ValueError(f"proof must be {expected} bytes, got {len(data)}")

        cs = vk.cs
        offset = 0

        def read_points(count: int) -> List[G1Point]:
            nonlocal offset
            points = []
            for _ in range(count):
                points.append(g1_from_bytes(bytes(data[offset:offset + G1_SIZE])))
                offset += G1_SIZE
            return points

        def read_scalars(count: int) -> List[int]:
            nonlocal offset
            scalars = []
            for _ in range(count):
                scalars.append(scalar_from_bytes(bytes(data[offset:offset + SCALAR_SIZE])))
                offset += SCALAR_SIZE
            return scalars

        proof = cls()
        proof.advice_commitments = read_points(len(cs.advice_columns))
        proof.z_commitment = read_points(1)[0]
        proof.quotient_commitments = read_points(vk.pieces)
        proof.advice_evals = read_scalars(len(cs.advice_queries))
        proof.fixed_evals = read_scalars(len(cs.fixed_queries))
        proof.sigma_evals = read_scalars(len(cs.permutation_columns))
        proof.z_eval, proof.z_next_eval = read_scalars(2)
        proof.quotient_evals = read_scalars(vk.pieces)
        proof.opening_witnesses = read_points(len(vk.rotations))
        return proof

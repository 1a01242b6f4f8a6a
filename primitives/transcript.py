"""
Fiat-Shamir transcript implementation using a Blake2b hash chain.

This module implements challenge generation for non-interactive proofs. The
prover and verifier absorb the same sequence of commitments and scalars, so
they squeeze the same challenges.
"""
import hashlib
from typing import List

from primitives.curve import G1Point, g1_to_bytes, scalar_to_bytes
from primitives.field import BN254_SCALAR_PRIME, FF

PERSONALIZATION = b"TwoChips-FS-v1"

# Domain separation prefixes
PREFIX_CHALLENGE = b"\x00"
PREFIX_POINT = b"\x01"
PREFIX_SCALAR = b"\x02"
PREFIX_BYTES = b"\x03"


class Transcript:
    """
    Fiat-Shamir transcript over Blake2b.

    The transcript absorbs curve points, field elements and raw bytes, and
    produces field challenges in a deterministic, pseudorandom manner.

    Squeezing does not reset the state: each challenge appends a prefix byte
    to the running hash and reduces a 64-byte digest of the result modulo r,
    so consecutive challenges are distinct.
    """

    def __init__(self):
        self._hasher = hashlib.blake2b(digest_size=64, person=PERSONALIZATION)

    def put_bytes(self, data: bytes) -> None:
        """Absorb a length-prefixed byte string."""
        self._hasher.update(PREFIX_BYTES + len(data).to_bytes(8, "little") + data)

    def put_point(self, point: G1Point) -> None:
        """Absorb a G1 commitment."""
        self._hasher.update(PREFIX_POINT + g1_to_bytes(point))

    def put_scalar(self, value) -> None:
        """Absorb a field element."""
        self._hasher.update(PREFIX_SCALAR + scalar_to_bytes(int(value) % BN254_SCALAR_PRIME))

    def put(self, values: List) -> None:
        """Absorb a list of field elements."""
        for value in values:
            self.put_scalar(value)

    def get_field(self) -> FF:
        """Squeeze one field challenge."""
        self._hasher.update(PREFIX_CHALLENGE)
        digest = self._hasher.copy().digest()
        return FF(int.from_bytes(digest, "little") % BN254_SCALAR_PRIME)

    def get_state(self) -> bytes:
        """Digest of everything absorbed so far (for tests and debugging)."""
        return self._hasher.copy().digest()

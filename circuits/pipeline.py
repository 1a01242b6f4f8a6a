"""Key generation, proving and verification for a circuit."""

import random
import secrets
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from primitives.field import TWO_ADICITY
from primitives.kzg import KZGParams
from protocol.circuit import Circuit, configure, synthesize
from protocol.errors import ConfigurationError
from protocol.keygen import setup
from protocol.keys import ProvingKey, VerifyingKey
from protocol.layout import instance_table
from protocol.mock_prover import check_layout, witness_error
from protocol.prover import create_proof
from protocol.verifier import verify_proof


# --- Configuration ---

@dataclass(frozen=True)
class PipelineConfig:
    """Pipeline parameters.

    Attributes:
        k: log2 of the number of rows
        seed: Seed for SRS and witness sampling; None draws from the OS CSPRNG
    """
    k: int = 4
    seed: Optional[int] = None

    def __post_init__(self):
        if not 1 <= self.k <= TWO_ADICITY:
            raise ConfigurationError(f"k must be in [1, {TWO_ADICITY}], got {self.k}")

    def rng(self):
        """Randomness source: seeded random.Random, or the OS CSPRNG."""
        if self.seed is None:
            return secrets.SystemRandom()
        return random.Random(self.seed)

    def params(self, rng=None) -> KZGParams:
        return KZGParams.setup(self.k, rng if rng is not None else self.rng())


# --- Pipeline ---

def generate_keys(params: KZGParams, circuit: Circuit) -> Tuple[ProvingKey, VerifyingKey]:
    """Configure circuit, lay it out without witnesses and derive its keys.

    Raises:
        ConfigurationError: On static circuit defects
    """
    cs, config = configure(circuit)
    layout = synthesize(circuit.without_witnesses(), cs, config, 1 << params.k)
    return setup(params, cs, layout)


def prove(pk: ProvingKey, circuit: Circuit, instances: Sequence[Sequence[int]], rng=None) -> bytes:
    """Synthesize circuit with its witness, check it and build a proof.

    Args:
        pk: Proving key from generate_keys
        circuit: Circuit carrying a witness
        instances: Public input values, one sequence per instance column
        rng: Blinding randomness; defaults to the OS CSPRNG

    Returns:
        Serialized proof

    Raises:
        ConfigurationError: If the circuit's shape differs from the key's
        WitnessError: If the witness or public inputs do not satisfy the circuit
    """
    cs, config = configure(circuit)
    if cs.pinned() != pk.vk.cs.pinned():
        raise ConfigurationError("circuit configuration does not match the proving key")

    layout = synthesize(circuit, cs, config, pk.vk.n)
    if layout.structural_fingerprint() != pk.layout_fingerprint:
        raise ConfigurationError("circuit layout does not match the proving key")

    instance_values = instance_table(cs, instances, layout.n)
    failures = check_layout(cs, layout, instance_values)
    if failures:
        raise witness_error(failures)

    proof = create_proof(pk, layout, instances, rng)
    return proof.to_bytes()


def verify(vk: VerifyingKey, instances: Sequence[Sequence[int]], proof: bytes) -> bool:
    """True if proof is valid for vk and instances. Never raises on bad input."""
    return verify_proof(vk, instances, proof)

"""Protocol - Constraint system, layout and the PLONKish proving protocol."""

from protocol.errors import BackendError, ConfigurationError, WitnessError

from protocol.expressions import Column, ColumnKind, Expression

from protocol.constraint_system import ConstraintSystem, Gate, VirtualCells

from protocol.layout import AssignedCell, Cell, Layout, Region

from protocol.circuit import Circuit, configure, synthesize

from protocol.mock_prover import FailureKind, MockProver, VerifyFailure, check_layout

from protocol.keys import ProvingKey, VerifyingKey
from protocol.keygen import setup

from protocol.proof import PlonkishProof

from protocol.prover import create_proof

from protocol.verifier import verify_proof

__all__ = [
    # Errors
    "BackendError",
    "ConfigurationError",
    "WitnessError",
    # Constraint system
    "Column",
    "ColumnKind",
    "Expression",
    "ConstraintSystem",
    "Gate",
    "VirtualCells",
    # Layout
    "AssignedCell",
    "Cell",
    "Layout",
    "Region",
    # Circuits
    "Circuit",
    "configure",
    "synthesize",
    # Mock prover
    "FailureKind",
    "MockProver",
    "VerifyFailure",
    "check_layout",
    # Keys and proofs
    "ProvingKey",
    "VerifyingKey",
    "setup",
    "PlonkishProof",
    "create_proof",
    "verify_proof",
]

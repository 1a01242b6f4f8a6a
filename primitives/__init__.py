"""Primitives - Field, curve, polynomial and commitment building blocks of the proving backend."""

from primitives.errors import BackendError
from primitives.field import (
    BN254_SCALAR_PRIME,
    DELTA,
    FF,
    TWO_ADICITY,
    batch_inverse,
    get_omega,
    random_element,
)
from primitives.curve import (
    G1_SIZE,
    SCALAR_SIZE,
    g1_from_bytes,
    g1_to_bytes,
    scalar_from_bytes,
    scalar_to_bytes,
)
from primitives.kzg import KZGParams, KZGVerifierParams, OpeningClaim, verify_openings
from primitives.polynomial import EvaluationDomain
from primitives.transcript import Transcript

__all__ = [
    # Errors
    "BackendError",
    # Field
    "FF",
    "BN254_SCALAR_PRIME",
    "TWO_ADICITY",
    "DELTA",
    "random_element",
    "batch_inverse",
    "get_omega",
    # Curve encoding
    "G1_SIZE",
    "SCALAR_SIZE",
    "g1_to_bytes",
    "g1_from_bytes",
    "scalar_to_bytes",
    "scalar_from_bytes",
    # Commitments
    "KZGParams",
    "KZGVerifierParams",
    "OpeningClaim",
    "verify_openings",
    # Domain
    "EvaluationDomain",
    # Transcript
    "Transcript",
]

"""Pytest configuration and shared fixtures."""

import random
import sys
from pathlib import Path

# Add the repository root to the path so absolute imports work
# (tests/ is inside the repository root)
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

import pytest

from circuits.pipeline import generate_keys, prove
from circuits.two_chips import TwoChipCircuit
from primitives.kzg import KZGParams

K = 4


@pytest.fixture(scope="session")
def params() -> KZGParams:
    """SRS for 2^K rows with a fixed toxic-waste seed."""
    return KZGParams.setup(K, random.Random(1234))


@pytest.fixture(scope="session")
def keys(params):
    """(pk, vk) for the two-chip circuit."""
    return generate_keys(params, TwoChipCircuit())


@pytest.fixture(scope="session")
def proof_select_sum(keys) -> bytes:
    """Proof for a=3, b=4, y=10, s=1 (public output 7)."""
    pk, _ = keys
    return prove(pk, TwoChipCircuit(a=3, b=4, y=10, s=1), [[7]], random.Random(7))

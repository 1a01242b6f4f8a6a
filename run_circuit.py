#!/usr/bin/env python3
"""Prove and verify one random witness of the two-chip circuit.

Usage:
    python run_circuit.py --k 4 --seed 1

Draws a, b, y in [0, 1000) and s in {0, 1}, checks the witness with the mock
prover, generates keys, proves and verifies. Exit status is 0 when the proof
verifies, 1 otherwise.
"""

import argparse
import sys
from typing import List, Optional

from circuits.pipeline import PipelineConfig, generate_keys, prove, verify
from circuits.two_chips import TwoChipCircuit
from protocol.errors import ConfigurationError
from protocol.mock_prover import MockProver

WITNESS_RANGE = 1000


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Prove and verify a random witness of the two-chip circuit."
    )
    parser.add_argument(
        "--k",
        type=int,
        default=PipelineConfig.k,
        help="log2 of the number of circuit rows (default: %(default)s)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the SRS, witness and blinding (default: OS randomness)",
    )
    args = parser.parse_args(argv)

    try:
        config = PipelineConfig(k=args.k, seed=args.seed)
    except ConfigurationError as e:
        print(f"ERROR: {e}")
        return 1
    rng = config.rng()

    circuit = TwoChipCircuit(
        a=rng.randrange(WITNESS_RANGE),
        b=rng.randrange(WITNESS_RANGE),
        y=rng.randrange(WITNESS_RANGE),
        s=rng.randrange(2),
    )
    instances = [[circuit.public_output()]]
    print(f"Witness: {circuit}")
    print(f"Public output: {instances[0][0]}")

    print("Running mock prover...")
    failures = MockProver.run(config.k, circuit, instances).verify()
    if failures:
        for failure in failures:
            print(f"ERROR: {failure}")
        return 1

    print(f"Generating keys (k={config.k})...")
    params = config.params(rng)
    pk, vk = generate_keys(params, circuit)
    print(f"  quotient pieces: {vk.pieces}")
    print(f"  opening rotations: {list(vk.rotations)}")

    print("Proving...")
    proof = prove(pk, circuit, instances, rng)
    print(f"  proof size: {len(proof)} bytes")

    print("Verifying...")
    if not verify(vk, instances, proof):
        print("Verification FAILED")
        return 1

    print("Verification PASSED")
    return 0


if __name__ == "__main__":
    sys.exit(main())

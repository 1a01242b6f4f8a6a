"""PLONKish proof verification.

Verification consists of three phases:
1. Fiat-Shamir transcript reconstruction - Re-derive beta, gamma, alpha, zeta, v, u
   from the verifying key, public inputs and proof commitments
2. Constraint identity - Check H(zeta) == t(zeta) * Z_H(zeta), where H is
   recomputed from the opened evaluations and t from its pieces
3. Opening check - Verify every claimed evaluation with one batched KZG
   pairing equation

Any failure prints an ERROR line and returns False; the verifier never raises
on bad proofs or bad public inputs.
"""

from typing import Dict, Sequence

from primitives.field import FF
from primitives.kzg import OpeningClaim, verify_openings
from primitives.polynomial import EvaluationDomain
from primitives.transcript import Transcript
from protocol.constraint_context import EvaluationContext, PermutationTerms, constraint_polynomial
from protocol.errors import WitnessError
from protocol.keys import ADVICE, FIXED, PERMUTATION, QUOTIENT, SIGMA, OpeningLabel, VerifyingKey
from protocol.layout import instance_table
from protocol.proof import PlonkishProof


# --- Main Entry Point ---

def verify_proof(vk: VerifyingKey, instances: Sequence[Sequence[int]], proof_bytes: bytes) -> bool:
    """Verify a proof against vk and the public inputs.

    Args:
        vk: Verifying key
        instances: Public input values, one sequence per instance column
        proof_bytes: Serialized proof

    Returns:
        True if the proof is valid
    """
    cs = vk.cs
    domain = EvaluationDomain(vk.k)
    n = domain.n

    try:
        proof = PlonkishProof.from_bytes(proof_bytes, vk)
    except (ValueError, TypeError) as e:
        print(f"ERROR: Malformed proof: {e}")
        return False

    try:
        instance_values = instance_table(cs, instances, n)
    except WitnessError as e:
        print(f"ERROR: Malformed instances: {e}")
        return False

    # === Fiat-Shamir transcript reconstruction ===
    transcript = Transcript()
    transcript.put_bytes(vk.transcript_repr)
    for column in cs.instance_columns:
        transcript.put(instance_values[column])

    for commitment in proof.advice_commitments:
        transcript.put_point(commitment)
    beta = transcript.get_field()
    gamma = transcript.get_field()

    transcript.put_point(proof.z_commitment)
    alpha = transcript.get_field()

    for commitment in proof.quotient_commitments:
        transcript.put_point(commitment)
    zeta = transcript.get_field()

    transcript.put(proof.evals())
    v = transcript.get_field()

    for witness in proof.opening_witnesses:
        transcript.put_point(witness)
    u = transcript.get_field()

    # === Constraint identity at zeta ===
    vanishing = domain.vanishing_eval(zeta)
    if vanishing == 0:
        print("ERROR: Challenge point lies in the evaluation domain")
        return False

    evals: Dict = {}
    for (column, rotation), value in zip(cs.advice_queries, proof.advice_evals):
        evals[(column, rotation)] = FF(value)
    for (column, rotation), value in zip(cs.fixed_queries, proof.fixed_evals):
        evals[(column, rotation)] = FF(value)
    for column, rotation in cs.instance_queries:
        # The verifier interpolates public inputs itself rather than trusting the prover
        poly = domain.interpolate(instance_values[column])
        evals[(column, rotation)] = poly(domain.rotate_point(zeta, rotation))

    # L_0(zeta) = Z_H(zeta) / (n * (zeta - 1))
    l0 = vanishing / (FF(n) * (zeta - FF(1)))

    perm = PermutationTerms(
        x=zeta,
        l0=l0,
        z=FF(proof.z_eval),
        z_next=FF(proof.z_next_eval),
        sigmas=[FF(value) for value in proof.sigma_evals],
        beta=int(beta),
        gamma=int(gamma),
    )
    h_eval = constraint_polynomial(cs, EvaluationContext(evals), perm, int(alpha))

    # t(zeta) = sum_i zeta^(n*i) * t_i(zeta)
    zeta_n = zeta ** n
    t_eval = FF(0)
    power = FF(1)
    for value in proof.quotient_evals:
        t_eval = t_eval + power * FF(value)
        power = power * zeta_n

    if h_eval != t_eval * vanishing:
        print("ERROR: Constraint identity H(zeta) == t(zeta) * Z_H(zeta) failed")
        return False

    # === Batched opening check ===
    def opened(label: OpeningLabel):
        source, index = label
        if source == ADVICE:
            column = cs.advice_queries[index][0]
            return proof.advice_commitments[column.index], proof.advice_evals[index]
        if source == FIXED:
            column = cs.fixed_queries[index][0]
            return vk.fixed_commitments[cs.fixed_like_index(column)], proof.fixed_evals[index]
        if source == SIGMA:
            return vk.permutation_commitments[index], proof.sigma_evals[index]
        if source == PERMUTATION:
            return proof.z_commitment, proof.z_eval if index == 0 else proof.z_next_eval
        if source == QUOTIENT:
            return proof.quotient_commitments[index], proof.quotient_evals[index]
        raise ValueError(f"unknown opening label {label}")

    claims = []
    for (rotation, labels), witness in zip(vk.opening_schedule(), proof.opening_witnesses):
        pairs = [opened(label) for label in labels]
        claims.append(OpeningClaim(
            point=int(domain.rotate_point(zeta, rotation)),
            commitments=[commitment for commitment, _ in pairs],
            evals=[value for _, value in pairs],
            witness=witness,
        ))

    if not verify_openings(vk.kzg, claims, v, u):
        print("ERROR: Batched KZG opening check failed")
        return False

    return True

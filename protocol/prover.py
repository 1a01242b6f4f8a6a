"""Top-level PLONKish proof generation."""

import secrets
from typing import Dict, Sequence

import galois

from primitives.field import FF, random_element
from primitives.polynomial import poly_from_coeffs
from primitives.transcript import Transcript
from protocol.constraint_context import PermutationTerms, PolynomialContext, constraint_polynomial
from protocol.errors import ConfigurationError, WitnessError
from protocol.expressions import Column
from protocol.keys import ADVICE, FIXED, PERMUTATION, QUOTIENT, SIGMA, OpeningLabel, ProvingKey
from protocol.layout import Layout, instance_table
from protocol.permutation import grand_product, permutation_cell_values
from protocol.proof import PlonkishProof

# --- Module Constants ---
# Blinding coefficients: advice gets (r1 X + r2) Z_H, z gets a degree-2 blinder
ADVICE_BLINDING_FACTORS = 2
PERMUTATION_BLINDING_FACTORS = 3


def _eval(poly: galois.Poly, point) -> int:
    return int(poly(FF(int(point))))


# --- Main Entry Point ---

def create_proof(pk: ProvingKey, layout: Layout, instances: Sequence[Sequence[int]], rng=None) -> PlonkishProof:
    """Generate a proof that layout's witness satisfies the circuit of pk.

    The layout is assumed to have passed check_layout(); a witness that does
    not satisfy the circuit makes the quotient division fail.

    Args:
        pk: Proving key
        layout: Layout synthesized with a witness, same shape as the key's
        instances: Public input values, one sequence per instance column
        rng: Blinding randomness (anything with randrange); defaults to the OS CSPRNG

    Returns:
        The proof

    Raises:
        ConfigurationError: If layout does not match the key's shape
        WitnessError: If an advice cell has no value or instances are malformed
        BackendError: If the constraints do not vanish on the domain
    """
    if rng is None:
        rng = secrets.SystemRandom()

    vk = pk.vk
    cs = vk.cs
    domain = pk.domain
    params = pk.params
    n = domain.n

    if layout.n != n or layout.structural_fingerprint() != pk.layout_fingerprint:
        raise ConfigurationError("layout does not match the proving key's circuit shape")

    unknown = layout.unknown_cells()
    if unknown:
        raise WitnessError("advice cells assigned without a value: " + ", ".join(str(c) for c in unknown))

    instance_values = instance_table(cs, instances, n)
    proof = PlonkishProof()

    # === INITIALIZATION: bind the key and public inputs ===
    transcript = Transcript()
    transcript.put_bytes(vk.transcript_repr)
    for column in cs.instance_columns:
        transcript.put(instance_values[column])

    instance_arrays = {c: FF(instance_values[c]) for c in cs.instance_columns}
    instance_polys = {c: domain.interpolate(values) for c, values in instance_arrays.items()}

    # === STAGE 1: blinded advice commitments ===
    advice_values = layout.advice_values()
    advice_polys: Dict[Column, galois.Poly] = {}
    for column in cs.advice_columns:
        blinding = [random_element(rng) for _ in range(ADVICE_BLINDING_FACTORS)]
        advice_polys[column] = domain.blind(domain.interpolate(advice_values[column]), blinding)
        commitment = params.commit(advice_polys[column])
        proof.advice_commitments.append(commitment)
        transcript.put_point(commitment)

    beta = transcript.get_field()
    gamma = transcript.get_field()

    # === STAGE 2: permutation grand product ===
    cell_values = permutation_cell_values(cs, advice_values, pk.fixed_values, instance_arrays)
    z_values = grand_product(cell_values, pk.permutation_values, domain, beta, gamma)
    blinding = [random_element(rng) for _ in range(PERMUTATION_BLINDING_FACTORS)]
    z_poly = domain.blind(domain.interpolate(z_values), blinding)
    proof.z_commitment = params.commit(z_poly)
    transcript.put_point(proof.z_commitment)

    alpha = transcript.get_field()

    # === STAGE 3: quotient ===
    column_polys = dict(advice_polys)
    column_polys.update(zip(cs.fixed_like_columns, pk.fixed_polys))
    column_polys.update(instance_polys)
    ctx = PolynomialContext(column_polys, domain)
    perm = PermutationTerms(
        x=poly_from_coeffs([0, 1]),
        l0=domain.lagrange_first,
        z=z_poly,
        z_next=domain.rotate_poly(z_poly, 1),
        sigmas=pk.permutation_polys,
        beta=int(beta),
        gamma=int(gamma),
    )
    h_poly = constraint_polynomial(cs, ctx, perm, int(alpha))
    quotient = domain.divide_by_vanishing(h_poly)
    quotient_pieces = domain.split(quotient, vk.pieces)
    for piece in quotient_pieces:
        commitment = params.commit(piece)
        proof.quotient_commitments.append(commitment)
        transcript.put_point(commitment)

    zeta = transcript.get_field()

    # === STAGE 4: evaluations ===
    for column, rotation in cs.advice_queries:
        proof.advice_evals.append(_eval(advice_polys[column], domain.rotate_point(zeta, rotation)))
    for column, rotation in cs.fixed_queries:
        poly = pk.fixed_polys[cs.fixed_like_index(column)]
        proof.fixed_evals.append(_eval(poly, domain.rotate_point(zeta, rotation)))
    proof.sigma_evals = [_eval(poly, zeta) for poly in pk.permutation_polys]
    proof.z_eval = _eval(z_poly, zeta)
    proof.z_next_eval = _eval(z_poly, domain.rotate_point(zeta, 1))
    proof.quotient_evals = [_eval(piece, zeta) for piece in quotient_pieces]
    transcript.put(proof.evals())

    v = transcript.get_field()

    # === STAGE 5: batched openings, one per rotation ===
    def poly_for(label: OpeningLabel) -> galois.Poly:
        source, index = label
        if source == ADVICE:
            return advice_polys[cs.advice_queries[index][0]]
        if source == FIXED:
            return pk.fixed_polys[cs.fixed_like_index(cs.fixed_queries[index][0])]
        if source == SIGMA:
            return pk.permutation_polys[index]
        if source == PERMUTATION:
            return z_poly
        if source == QUOTIENT:
            return quotient_pieces[index]
        raise ValueError(f"unknown opening label {label}")

    for rotation, labels in vk.opening_schedule():
        point = domain.rotate_point(zeta, rotation)
        witness = params.open([poly_for(label) for label in labels], point, v)
        proof.opening_witnesses.append(witness)
        transcript.put_point(witness)

    return proof

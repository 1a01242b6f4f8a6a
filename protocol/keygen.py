"""Key generation: commit to the fixed part of a circuit."""

from typing import Tuple

from primitives.errors import BackendError
from primitives.kzg import KZGParams
from primitives.polynomial import EvaluationDomain
from protocol.constraint_context import RowsContext
from protocol.constraint_system import ConstraintSystem
from protocol.errors import ConfigurationError
from protocol.expressions import ColumnKind
from protocol.keys import ProvingKey, VerifyingKey, quotient_pieces
from protocol.layout import Layout
from protocol.mock_prover import active_rows
from protocol.permutation import PermutationAssembly


def check_fixed_constraints(cs: ConstraintSystem, layout: Layout) -> None:
    """Reject constraints that no witness can satisfy.

    A constraint querying only fixed columns and selectors is fully
    determined at key generation; it must already vanish on every row where
    its gate is active.

    Raises:
        ConfigurationError: If such a constraint is non-zero on an active row
    """
    ctx = RowsContext(layout.fixed_values(), layout.n)
    for gate in cs.gates:
        rows = active_rows(gate, layout)
        for name, expr in gate.constraints:
            kinds = {q.column.kind for q in expr.queries()}
            if ColumnKind.ADVICE in kinds or ColumnKind.INSTANCE in kinds:
                continue
            values = expr.evaluate(ctx)
            for row in rows:
                if values[row] != 0:
                    raise ConfigurationError(
                        f"gate '{gate.name}' constraint '{name}' is not satisfiable: "
                        f"non-zero on row {row} regardless of the witness")


def setup(params: KZGParams, cs: ConstraintSystem, layout: Layout) -> Tuple[ProvingKey, VerifyingKey]:
    """Derive the proving and verifying keys from a witness-free layout.

    Args:
        params: SRS; its k fixes the number of rows
        cs: Configured constraint system
        layout: Layout synthesized without witnesses

    Returns:
        (pk, vk) tuple

    Raises:
        ConfigurationError: On static circuit defects
        BackendError: If the SRS cannot hold the circuit's polynomials
    """
    try:
        domain = EvaluationDomain(params.k)
    except BackendError as e:
        raise ConfigurationError(str(e)) from e
    if layout.n != domain.n:
        raise ConfigurationError(f"layout has {layout.n} rows, params support {domain.n}")
    if layout.cs is not cs:
        raise ConfigurationError("layout was built against a different constraint system")
    if not cs.gates:
        raise ConfigurationError("constraint system has no gates")

    check_fixed_constraints(cs, layout)

    # Fixed columns and selectors
    fixed_values = layout.fixed_values()
    fixed_polys = [domain.interpolate(fixed_values[c]) for c in cs.fixed_like_columns]
    fixed_commitments = tuple(params.commit(poly) for poly in fixed_polys)

    # Permutation
    assembly = PermutationAssembly.from_copies(cs, layout.copies, domain.n)
    permutation_values = assembly.sigma_values(domain)
    permutation_polys = [domain.interpolate(values) for values in permutation_values]
    permutation_commitments = tuple(params.commit(poly) for poly in permutation_polys)

    vk = VerifyingKey(
        k=params.k,
        cs=cs,
        fixed_commitments=fixed_commitments,
        permutation_commitments=permutation_commitments,
        pieces=quotient_pieces(cs.degree(), domain.n),
        rotations=tuple(cs.rotations()),
        kzg=params.verifier_params(),
    )
    pk = ProvingKey(
        vk=vk,
        params=params,
        domain=domain,
        fixed_values=fixed_values,
        fixed_polys=fixed_polys,
        permutation_values=permutation_values,
        permutation_polys=permutation_polys,
        layout_fingerprint=layout.structural_fingerprint(),
    )
    return pk, vk

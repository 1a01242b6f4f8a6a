"""Contexts for constraint evaluation.

ConstraintContext provides a uniform interface for evaluating gate
expressions. The same Expression tree is evaluated three ways:

    RowsContext        column values on every row (mock prover, keygen checks)
    PolynomialContext  column polynomials (prover quotient construction)
    EvaluationContext  opened evaluations at the challenge point (verifier)

Example:
    expr = s * (a + b - c)

    # Per-row values, one entry per row
    rows = expr.evaluate(RowsContext(values, n))

    # Single scalar at zeta
    at_zeta = expr.evaluate(EvaluationContext(evals))
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Sequence, Tuple, Union

import galois
import numpy as np

from primitives.field import FF, BN254_SCALAR_PRIME
from primitives.polynomial import EvaluationDomain, constant_poly
from protocol.expressions import Column
from protocol.permutation import coset_shifts

if TYPE_CHECKING:
    from protocol.constraint_system import ConstraintSystem

# Type aliases for clarity
FFPoly = FF  # Array of field elements, one per row
ColumnRotation = Tuple[Column, int]


class ConstraintContext(ABC):
    """Uniform interface for expression evaluation."""

    @abstractmethod
    def query(self, column: Column, rotation: int) -> Union[FFPoly, galois.Poly, FF]:
        """Value of column at the current row offset by rotation.

        Returns:
            RowsContext: array of values, rolled so entry i is row i + rotation
            PolynomialContext: polynomial p(w^rotation * X)
            EvaluationContext: scalar evaluation at zeta * w^rotation
        """
        pass

    @abstractmethod
    def constant(self, value: int) -> Union[FFPoly, galois.Poly, FF]:
        """A constant in the context's representation."""
        pass


class RowsContext(ConstraintContext):
    """Row-wise implementation - returns value arrays over all n rows.

    Rotations wrap around the table, matching polynomial rotation on the
    multiplicative domain.
    """

    def __init__(self, columns: Dict[Column, FFPoly], n: int):
        self._columns = columns
        self._n = n

    def query(self, column: Column, rotation: int) -> FFPoly:
        values = self._columns.get(column)
        if values is None:
            return FF.Zeros(self._n)
        if rotation == 0:
            return values
        return np.roll(values, -rotation)

    def constant(self, value: int) -> FFPoly:
        return FF([int(value) % BN254_SCALAR_PRIME] * self._n)


class PolynomialContext(ConstraintContext):
    """Prover implementation - returns coefficient-form polynomials."""

    def __init__(self, polys: Dict[Column, galois.Poly], domain: EvaluationDomain):
        self._polys = polys
        self._domain = domain
        self._rotated: Dict[ColumnRotation, galois.Poly] = {}

    def query(self, column: Column, rotation: int) -> galois.Poly:
        key = (column, rotation)
        if key not in self._rotated:
            self._rotated[key] = self._domain.rotate_poly(self._polys[column], rotation)
        return self._rotated[key]

    def constant(self, value: int) -> galois.Poly:
        return constant_poly(value)


class EvaluationContext(ConstraintContext):
    """Verifier implementation - returns scalar evaluations.

    evals maps (column, rotation) to the column's evaluation at
    zeta * w^rotation.
    """

    def __init__(self, evals: Dict[ColumnRotation, FF]):
        self._evals = evals

    def query(self, column: Column, rotation: int) -> FF:
        return self._evals[(column, rotation)]

    def constant(self, value: int) -> FF:
        return FF(int(value) % BN254_SCALAR_PRIME)


# --- Combined Constraint Polynomial ---

@dataclass
class PermutationTerms:
    """Permutation-argument inputs in a context's representation.

    Attributes:
        x: The variable X (prover) or the challenge point zeta (verifier)
        l0: L_0, the Lagrange basis polynomial of row 0
        z: Grand product z(X)
        z_next: z(w * X)
        sigmas: sigma_j per permutation column
        beta, gamma: Permutation challenges
    """
    x: object
    l0: object
    z: object
    z_next: object
    sigmas: Sequence
    beta: int
    gamma: int


def combine_constraints(constraints, alpha):
    """Horner combination: ((c_0 * alpha + c_1) * alpha + ...) + c_last."""
    acc = constraints[0]
    for constraint in constraints[1:]:
        acc = acc * alpha + constraint
    return acc


def constraint_polynomial(cs: "ConstraintSystem", ctx: ConstraintContext, perm: PermutationTerms, alpha: int):
    """Every constraint of the circuit folded into one value with powers of alpha.

    Order: gate constraints (gate order, then constraint order), L_0 * (z - 1),
    then z(X) * prod_j (p_j + beta * k_j * X + gamma)
         - z(w X) * prod_j (p_j + beta * sigma_j + gamma).
    The result vanishes on H exactly when the witness satisfies the circuit.
    """
    terms = [expr.evaluate(ctx) for gate in cs.gates for _, expr in gate.constraints]

    one = ctx.constant(1)
    terms.append(perm.l0 * (perm.z - one))

    if cs.permutation_columns:
        beta = int(perm.beta)
        gamma = ctx.constant(perm.gamma)
        left = perm.z
        right = perm.z_next
        shifts = coset_shifts(len(cs.permutation_columns))
        for column, shift, sigma in zip(cs.permutation_columns, shifts, perm.sigmas):
            value = ctx.query(column, 0)
            left = left * (value + ctx.constant(beta * shift) * perm.x + gamma)
            right = right * (value + ctx.constant(beta) * sigma + gamma)
        terms.append(left - right)

    return combine_constraints(terms, ctx.constant(alpha))

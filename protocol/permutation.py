"""Permutation argument: copy-constraint cycles and sigma polynomials.

Every equality-enabled column j is placed on the coset DELTA^j * H, so cell
(j, i) is labelled k_j * w^i with k_j = DELTA^j. Copy constraints merge cells
into cycles; sigma_j[i] is the label of the next cell in (j, i)'s cycle. The
grand product

    Z[0] = 1
    Z[i+1] = Z[i] * prod_j (v_j[i] + beta * k_j * w^i + gamma)
                  / prod_j (v_j[i] + beta * sigma_j[i] + gamma)

returns to 1 exactly when every cycle carries a single value (with
overwhelming probability over beta, gamma).
"""

from typing import Dict, List, Sequence, Tuple

from primitives.field import BN254_SCALAR_PRIME, DELTA, FF, batch_inverse
from primitives.polynomial import EvaluationDomain
from protocol.constraint_system import ConstraintSystem
from protocol.errors import ConfigurationError
from protocol.expressions import Column
from protocol.layout import Cell

P = BN254_SCALAR_PRIME

# (permutation column index, row)
Position = Tuple[int, int]


def coset_shifts(count: int) -> List[int]:
    """k_j = DELTA^j for each permutation column."""
    return [pow(DELTA, j, P) for j in range(count)]


class PermutationAssembly:
    """Union of copy-constraint cycles over the permutation columns.

    Cycles are kept as a permutation `mapping` with `aux` pointing every
    position at its cycle representative and `sizes` holding each
    representative's cycle length; merging relinks the smaller cycle into
    the larger one.
    """

    def __init__(self, columns: Sequence[Column], n: int):
        self.columns = list(columns)
        self.n = n
        self._index = {column: j for j, column in enumerate(self.columns)}
        self.mapping: List[List[Position]] = [[(j, i) for i in range(n)] for j in range(len(self.columns))]
        self.aux: List[List[Position]] = [[(j, i) for i in range(n)] for j in range(len(self.columns))]
        self.sizes: List[List[int]] = [[1] * n for _ in self.columns]

    @classmethod
    def from_copies(cls, cs: ConstraintSystem, copies: Sequence[Tuple[Cell, Cell]], n: int) -> "PermutationAssembly":
        assembly = cls(cs.permutation_columns, n)
        for left, right in copies:
            assembly.copy(left, right)
        return assembly

    def _position(self, cell: Cell) -> Position:
        if cell.column not in self._index:
            raise ConfigurationError(f"equality is not enabled on {cell.column}")
        if not 0 <= cell.row < self.n:
            raise ConfigurationError(f"{cell} is outside the {self.n}-row table")
        return (self._index[cell.column], cell.row)

    def copy(self, left: Cell, right: Cell) -> None:
        """Merge the cycles containing left and right."""
        lpos = self._position(left)
        rpos = self._position(right)
        left_root = self.aux[lpos[0]][lpos[1]]
        right_root = self.aux[rpos[0]][rpos[1]]
        if left_root == right_root:
            return

        if self.sizes[left_root[0]][left_root[1]] < self.sizes[right_root[0]][right_root[1]]:
            lpos, rpos = rpos, lpos
            left_root, right_root = right_root, left_root

        self.sizes[left_root[0]][left_root[1]] += self.sizes[right_root[0]][right_root[1]]

        # Re-point every member of the right cycle at the left representative
        cursor = rpos
        while True:
            self.aux[cursor[0]][cursor[1]] = left_root
            cursor = self.mapping[cursor[0]][cursor[1]]
            if cursor == rpos:
                break

        # Splice the two cycles
        self.mapping[lpos[0]][lpos[1]], self.mapping[rpos[0]][rpos[1]] = (
            self.mapping[rpos[0]][rpos[1]], self.mapping[lpos[0]][lpos[1]])

    def cycles(self) -> List[List[Position]]:
        """Non-trivial cycles, each starting at its smallest position."""
        seen = set()
        out = []
        for j in range(len(self.columns)):
            for i in range(self.n):
                start = (j, i)
                if start in seen or self.mapping[j][i] == start:
                    continue
                cycle = [start]
                seen.add(start)
                cursor = self.mapping[j][i]
                while cursor != start:
                    cycle.append(cursor)
                    seen.add(cursor)
                    cursor = self.mapping[cursor[0]][cursor[1]]
                out.append(cycle)
        return out

    def sigma_values(self, domain: EvaluationDomain) -> List[FF]:
        """sigma_j over H, one array per permutation column."""
        shifts = coset_shifts(len(self.columns))
        omega_powers = [int(p) for p in domain.points]
        return [
            FF([shifts[j2] * omega_powers[i2] % P for j2, i2 in self.mapping[j]])
            for j in range(len(self.columns))
        ]


def identity_values(count: int, domain: EvaluationDomain) -> List[FF]:
    """id_j over H: k_j * w^i."""
    return [FF(shift) * domain.points for shift in coset_shifts(count)]


def grand_product(values: Sequence[FF], sigmas: Sequence[FF], domain: EvaluationDomain, beta, gamma) -> FF:
    """Evaluations of Z over H.

    Args:
        values: Column values of each permutation column over H
        sigmas: sigma_j over H
        domain: Evaluation domain
        beta, gamma: Permutation challenges

    Returns:
        Z as an array of n values, Z[0] = 1
    """
    n = domain.n
    numerator = FF.Ones(n)
    denominator = FF.Ones(n)
    for value, identity, sigma in zip(values, identity_values(len(values), domain), sigmas):
        numerator = numerator * (value + beta * identity + gamma)
        denominator = denominator * (value + beta * sigma + gamma)
    ratios = numerator * batch_inverse(denominator)

    z = FF.Ones(n)
    for i in range(n - 1):
        z[i + 1] = z[i] * ratios[i]
    return z


def permutation_cell_values(
    cs: ConstraintSystem,
    advice: Dict[Column, FF],
    fixed: Dict[Column, FF],
    instance: Dict[Column, FF],
) -> List[FF]:
    """Values of each permutation column in declaration order."""
    out = []
    for column in cs.permutation_columns:
        for table in (advice, fixed, instance):
            if column in table:
                out.append(table[column])
                break
        else:
            raise ConfigurationError(f"no values for permutation column {column}")
    return out

"""Mock prover: check a synthesized layout without any cryptography.

MockProver.run(k, circuit, instances).verify() returns the list of problems
with the witness. The proving pipeline runs the same check_layout() before
building a proof, so a bad witness surfaces as a readable WitnessError
instead of a failed polynomial division.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Sequence

from primitives.field import FF
from protocol.circuit import Circuit, configure, synthesize
from protocol.constraint_context import RowsContext
from protocol.constraint_system import ConstraintSystem, Gate
from protocol.errors import WitnessError
from protocol.expressions import Column, ColumnKind
from protocol.layout import Cell, Layout, instance_table


class FailureKind(Enum):
    CELL_NOT_ASSIGNED = "cell not assigned"
    CONSTRAINT_NOT_SATISFIED = "constraint not satisfied"
    PERMUTATION = "equality constraint not satisfied"


@dataclass(frozen=True)
class VerifyFailure:
    """One problem found in a layout."""
    kind: FailureKind
    location: str
    detail: str

    def __str__(self) -> str:
        return f"{self.kind.value} at {self.location}: {self.detail}"


def witness_error(failures: List[VerifyFailure]) -> WitnessError:
    return WitnessError(
        f"{len(failures)} witness failure(s): " + "; ".join(str(f) for f in failures), failures)


def active_rows(gate: Gate, layout: Layout) -> List[int]:
    """Rows on which every selector of gate is enabled (all rows if it has none)."""
    rows = []
    for row in range(layout.n):
        if all(layout.selectors[s][row] for s in gate.selectors):
            rows.append(row)
    return rows


def _missing(layout: Layout, cell: Cell, usage: str) -> str:
    if layout.is_assigned(cell.column, cell.row):
        return f"{cell} is {usage} but its value is unknown"
    return f"{cell} is {usage} but was never assigned"


def _cell_value(layout: Layout, instances: Dict[Column, List[int]], cell: Cell) -> int:
    if cell.column.kind == ColumnKind.ADVICE:
        return layout.advice[cell.column][cell.row]
    if cell.column.kind == ColumnKind.FIXED:
        return layout.fixed[cell.column][cell.row] or 0
    return instances[cell.column][cell.row]


def check_layout(cs: ConstraintSystem, layout: Layout, instances: Dict[Column, List[int]]) -> List[VerifyFailure]:
    """All witness problems of layout.

    Args:
        cs: Constraint system
        layout: Layout synthesized with a witness
        instances: Padded instance values from instance_table()

    Returns:
        Failures in gate order, then copy order; empty when the witness is valid
    """
    failures: List[VerifyFailure] = []
    n = layout.n

    ctx = RowsContext({**layout.advice_values(), **layout.fixed_values(),
                       **{c: FF(v) for c, v in instances.items()}}, n)

    for gate in cs.gates:
        rows = active_rows(gate, layout)
        advice_queries = {(q.column, q.rotation) for q in gate.queries() if q.column.kind == ColumnKind.ADVICE}
        complete_rows = []
        for row in rows:
            missing = [
                Cell(column, (row + rotation) % n)
                for column, rotation in sorted(advice_queries, key=lambda cr: (cr[0].index, cr[1]))
                if not layout.has_value(column, (row + rotation) % n)
            ]
            for cell in missing:
                failures.append(VerifyFailure(
                    FailureKind.CELL_NOT_ASSIGNED,
                    f"gate '{gate.name}' row {row}",
                    _missing(layout, cell, "queried")))
            if not missing:
                complete_rows.append(row)

        for name, expr in gate.constraints:
            values = expr.evaluate(ctx)
            for row in complete_rows:
                if values[row] != 0:
                    failures.append(VerifyFailure(
                        FailureKind.CONSTRAINT_NOT_SATISFIED,
                        f"gate '{gate.name}' row {row}",
                        f"constraint '{name}' evaluates to {int(values[row])}"))

    for left, right in layout.copies:
        unassigned = [c for c in (left, right)
                      if c.column.kind == ColumnKind.ADVICE and not layout.has_value(c.column, c.row)]
        for cell in unassigned:
            failures.append(VerifyFailure(
                FailureKind.CELL_NOT_ASSIGNED,
                f"equality {left} == {right}",
                _missing(layout, cell, "in an equality constraint")))
        if unassigned:
            continue
        left_value = _cell_value(layout, instances, left)
        right_value = _cell_value(layout, instances, right)
        if left_value != right_value:
            failures.append(VerifyFailure(
                FailureKind.PERMUTATION,
                f"equality {left} == {right}",
                f"{left_value} != {right_value}"))

    return failures


class MockProver:
    """Synthesizes a circuit with its witness and reports every failure."""

    def __init__(self, cs: ConstraintSystem, layout: Layout, instances: Dict[Column, List[int]]):
        self.cs = cs
        self.layout = layout
        self.instances = instances

    @classmethod
    def run(cls, k: int, circuit: Circuit, instances: Sequence[Sequence[int]]) -> "MockProver":
        """Configure and synthesize circuit on 2^k rows.

        Raises:
            ConfigurationError: On static circuit defects
            WitnessError: If the instance values are malformed
        """
        cs, config = configure(circuit)
        layout = synthesize(circuit, cs, config, 1 << k)
        return cls(cs, layout, instance_table(cs, instances, layout.n))

    def verify(self) -> List[VerifyFailure]:
        return check_layout(self.cs, self.layout, self.instances)

    def assert_satisfied(self) -> None:
        failures = self.verify()
        if failures:
            raise witness_error(failures)

"""Constraint system: column declarations, gates, queries and equality.

A ConstraintSystem is filled in once, by a circuit's configure(), and never
changes afterwards. Its column and query lists fix the shape of the proving
and verifying keys and of every proof.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Union

from protocol.errors import ConfigurationError
from protocol.expressions import Column, ColumnKind, Expression, Query

# --- Type Aliases ---
ColumnQuery = tuple[Column, int]  # (column, rotation)
GateConstraints = Iterable[Union[Expression, tuple[str, Expression]]]


@dataclass(frozen=True)
class Gate:
    """Named polynomial constraints enabled by selectors.

    Attributes:
        name: Gate name
        constraints: (name, expression) pairs, each must vanish on active rows
        selectors: Selector columns queried by the gate; the gate is active on
            rows where all of them are enabled
    """
    name: str
    constraints: tuple[tuple[str, Expression], ...]
    selectors: tuple[Column, ...]

    def degree(self) -> int:
        return max(expr.degree() for _, expr in self.constraints)

    def queries(self) -> list[Query]:
        return [q for _, expr in self.constraints for q in expr.queries()]


class VirtualCells:
    """Query builder handed to gate definitions by create_gate."""

    def __init__(self, cs: "ConstraintSystem") -> None:
        self._cs = cs
        self.selectors: list[Column] = []

    def query_advice(self, column: Column, rotation: int = 0) -> Query:
        return self._query(column, rotation, ColumnKind.ADVICE)

    def query_fixed(self, column: Column, rotation: int = 0) -> Query:
        return self._query(column, rotation, ColumnKind.FIXED)

    def query_instance(self, column: Column, rotation: int = 0) -> Query:
        return self._query(column, rotation, ColumnKind.INSTANCE)

    def query_selector(self, selector: Column) -> Query:
        query = self._query(selector, 0, ColumnKind.SELECTOR)
        if selector not in self.selectors:
            self.selectors.append(selector)
        return query

    def _query(self, column: Column, rotation: int, kind: ColumnKind) -> Query:
        if column.kind != kind:
            raise ConfigurationError(f"{column} queried as {kind.value}")
        self._cs.register_query(column, rotation)
        return Query(column, rotation)


class ConstraintSystem:
    """Columns, gates, queries and equality-enabled columns of a circuit."""

    def __init__(self) -> None:
        self.advice_columns: list[Column] = []
        self.fixed_columns: list[Column] = []
        self.instance_columns: list[Column] = []
        self.selectors: list[Column] = []
        self.gates: list[Gate] = []
        # Columns taking part in the permutation argument, in declaration order
        self.permutation_columns: list[Column] = []
        # Unique (column, rotation) pairs, in first-use order
        self.advice_queries: list[ColumnQuery] = []
        self.fixed_queries: list[ColumnQuery] = []
        self.instance_queries: list[ColumnQuery] = []

    # --- Column Declaration ---

    def advice_column(self, name: str = "") -> Column:
        column = Column(ColumnKind.ADVICE, len(self.advice_columns), name)
        self.advice_columns.append(column)
        return column

    def fixed_column(self, name: str = "") -> Column:
        column = Column(ColumnKind.FIXED, len(self.fixed_columns), name)
        self.fixed_columns.append(column)
        return column

    def instance_column(self, name: str = "") -> Column:
        column = Column(ColumnKind.INSTANCE, len(self.instance_columns), name)
        self.instance_columns.append(column)
        return column

    def selector(self, name: str = "") -> Column:
        column = Column(ColumnKind.SELECTOR, len(self.selectors), name)
        self.selectors.append(column)
        return column

    def enable_equality(self, column: Column) -> None:
        """Allow column's cells to appear in equality constraints."""
        if column.kind == ColumnKind.SELECTOR:
            raise ConfigurationError(f"selector {column} cannot take part in equality constraints")
        if column in self.permutation_columns:
            return
        self.permutation_columns.append(column)
        # The permutation argument opens every participating column at the current row
        self.register_query(column, 0)

    # --- Gates ---

    def create_gate(self, name: str, constraints_fn: Callable[[VirtualCells], GateConstraints]) -> Gate:
        """Define a gate from a function returning its constraints.

        Each returned item is either an Expression or a (name, Expression) pair.
        """
        cells = VirtualCells(self)
        constraints = []
        for i, item in enumerate(constraints_fn(cells)):
            if isinstance(item, Expression):
                constraints.append((f"{name}[{i}]", item))
            else:
                constraint_name, expr = item
                if not isinstance(expr, Expression):
                    raise ConfigurationError(f"gate '{name}' constraint '{constraint_name}' is not an expression")
                constraints.append((constraint_name, expr))
        if not constraints:
            raise ConfigurationError(f"gate '{name}' has no constraints")
        gate = Gate(name=name, constraints=tuple(constraints), selectors=tuple(cells.selectors))
        self.gates.append(gate)
        return gate

    # --- Queries ---

    def register_query(self, column: Column, rotation: int) -> None:
        queries = self._queries_for(column)
        if (column, rotation) not in queries:
            queries.append((column, rotation))

    def _queries_for(self, column: Column) -> list[ColumnQuery]:
        if column.kind == ColumnKind.ADVICE:
            return self.advice_queries
        if column.kind == ColumnKind.INSTANCE:
            return self.instance_queries
        return self.fixed_queries

    def query_index(self, column: Column, rotation: int) -> int:
        """Position of (column, rotation) in its query list."""
        try:
            return self._queries_for(column).index((column, rotation))
        except ValueError:
            raise KeyError(f"{column}@{rotation} was never queried") from None

    # --- Fixed-like Columns ---

    @property
    def fixed_like_columns(self) -> list[Column]:
        """Fixed columns followed by selectors; both are committed in the verifying key."""
        return self.fixed_columns + self.selectors

    def fixed_like_index(self, column: Column) -> int:
        if column.kind == ColumnKind.FIXED:
            return column.index
        if column.kind == ColumnKind.SELECTOR:
            return len(self.fixed_columns) + column.index
        raise KeyError(f"{column} is not a fixed or selector column")

    # --- Shape ---

    def degree(self) -> int:
        """Maximum degree over gates and the permutation argument.

        The permutation constraint multiplies z by one factor per
        participating column; L_0 * (z - 1) has degree 2.
        """
        degree = 2
        if self.permutation_columns:
            degree = max(degree, len(self.permutation_columns) + 1)
        for gate in self.gates:
            degree = max(degree, gate.degree())
        return degree

    def rotations(self) -> list[int]:
        """Sorted opening rotations; always includes 0 and 1 (z is opened at the next row)."""
        rotations = {0, 1}
        for _, rotation in self.advice_queries + self.fixed_queries:
            rotations.add(rotation)
        return sorted(rotations)

    def pinned(self) -> str:
        """Deterministic description of the whole constraint system."""
        lines = [
            f"advice={len(self.advice_columns)}",
            f"fixed={len(self.fixed_columns)}",
            f"instance={len(self.instance_columns)}",
            f"selectors={len(self.selectors)}",
            "permutation=" + ",".join(str(c) for c in self.permutation_columns),
            "advice_queries=" + ",".join(f"{c}@{r}" for c, r in self.advice_queries),
            "fixed_queries=" + ",".join(f"{c}@{r}" for c, r in self.fixed_queries),
            "instance_queries=" + ",".join(f"{c}@{r}" for c, r in self.instance_queries),
        ]
        for gate in self.gates:
            for constraint_name, expr in gate.constraints:
                lines.append(f"gate {gate.name}/{constraint_name}: {expr!r}")
        return "\n".join(lines)

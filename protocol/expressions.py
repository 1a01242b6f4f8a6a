"""Polynomial expressions over column queries.

Gates are written as ordinary Python arithmetic on Query objects:

    s = meta.query_selector(q_add)
    a = meta.query_advice(col_a)
    ...
    return [("a + b = c", s * (a + b - c))]

An Expression is an immutable tree. It is evaluated through a
ConstraintContext, which decides what a query means: a column of values on
every row (mock prover), a polynomial (prover) or a single opened
evaluation (verifier). The same gate definition therefore drives all three.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Union

from primitives.field import BN254_SCALAR_PRIME


# --- Columns ---

class ColumnKind(Enum):
    """Kind of a column in the constraint table."""
    ADVICE = "advice"      # Witness values, private
    FIXED = "fixed"        # Circuit constants, committed in the verifying key
    INSTANCE = "instance"  # Public inputs, supplied to the verifier
    SELECTOR = "selector"  # Boolean fixed column enabling a gate per row


@dataclass(frozen=True)
class Column:
    """A column handle. Identity is (kind, index); name is for display only."""
    kind: ColumnKind
    index: int
    name: str = field(default="", compare=False)

    def __str__(self) -> str:
        return f"{self.kind.value}[{self.index}]"


# --- Expression Tree ---

class Expression(ABC):
    """Base class of the expression tree."""

    @abstractmethod
    def degree(self) -> int:
        """Number of column queries multiplied together in the worst term."""

    @abstractmethod
    def evaluate(self, ctx):
        """Evaluate against a ConstraintContext."""

    @abstractmethod
    def queries(self) -> Iterator["Query"]:
        """All column queries in the tree (with repetition)."""

    def __add__(self, other: "ExpressionLike") -> "Expression":
        return Sum(self, _lift(other))

    def __radd__(self, other: "ExpressionLike") -> "Expression":
        return Sum(_lift(other), self)

    def __sub__(self, other: "ExpressionLike") -> "Expression":
        return Sum(self, Negated(_lift(other)))

    def __rsub__(self, other: "ExpressionLike") -> "Expression":
        return Sum(_lift(other), Negated(self))

    def __mul__(self, other: "ExpressionLike") -> "Expression":
        if isinstance(other, int):
            return Scaled(self, other % BN254_SCALAR_PRIME)
        return Product(self, _lift(other))

    def __rmul__(self, other: "ExpressionLike") -> "Expression":
        if isinstance(other, int):
            return Scaled(self, other % BN254_SCALAR_PRIME)
        return Product(_lift(other), self)

    def __neg__(self) -> "Expression":
        return Negated(self)


ExpressionLike = Union[Expression, int]


def _lift(value: ExpressionLike) -> Expression:
    if isinstance(value, Expression):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return Constant(value % BN254_SCALAR_PRIME)
    raise TypeError(f"cannot use {type(value).__name__} in an expression")


@dataclass(frozen=True, eq=False)
class Constant(Expression):
    value: int

    def degree(self) -> int:
        return 0

    def evaluate(self, ctx):
        return ctx.constant(self.value)

    def queries(self) -> Iterator["Query"]:
        return iter(())

    def __repr__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, eq=False)
class Query(Expression):
    """Value of `column` at the current row + rotation."""
    column: Column
    rotation: int = 0

    def degree(self) -> int:
        return 1

    def evaluate(self, ctx):
        return ctx.query(self.column, self.rotation)

    def queries(self) -> Iterator["Query"]:
        yield self

    def __repr__(self) -> str:
        return f"{self.column}@{self.rotation}"


@dataclass(frozen=True, eq=False)
class Sum(Expression):
    left: Expression
    right: Expression

    def degree(self) -> int:
        return max(self.left.degree(), self.right.degree())

    def evaluate(self, ctx):
        return self.left.evaluate(ctx) + self.right.evaluate(ctx)

    def queries(self) -> Iterator["Query"]:
        yield from self.left.queries()
        yield from self.right.queries()

    def __repr__(self) -> str:
        return f"({self.left!r} + {self.right!r})"


@dataclass(frozen=True, eq=False)
class Product(Expression):
    left: Expression
    right: Expression

    def degree(self) -> int:
        return self.left.degree() + self.right.degree()

    def evaluate(self, ctx):
        return self.left.evaluate(ctx) * self.right.evaluate(ctx)

    def queries(self) -> Iterator["Query"]:
        yield from self.left.queries()
        yield from self.right.queries()

    def __repr__(self) -> str:
        return f"({self.left!r} * {self.right!r})"


@dataclass(frozen=True, eq=False)
class Negated(Expression):
    inner: Expression

    def degree(self) -> int:
        return self.inner.degree()

    def evaluate(self, ctx):
        return -self.inner.evaluate(ctx)

    def queries(self) -> Iterator["Query"]:
        yield from self.inner.queries()

    def __repr__(self) -> str:
        return f"-{self.inner!r}"


@dataclass(frozen=True, eq=False)
class Scaled(Expression):
    inner: Expression
    factor: int

    def degree(self) -> int:
        return self.inner.degree()

    def evaluate(self, ctx):
        return self.inner.evaluate(ctx) * ctx.constant(self.factor)

    def queries(self) -> Iterator["Query"]:
        yield from self.inner.queries()

    def __repr__(self) -> str:
        return f"({self.inner!r} * {self.factor})"

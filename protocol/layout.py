"""Layout builder: regions, assigned cells and equality constraints.

A Layout is created per synthesis and threaded explicitly through the
circuit's synthesize(). It records which cells were assigned (values may be
unknown during key generation), which selectors are enabled, fixed values and
the copy constraints consumed by the permutation argument.
"""

import hashlib
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from primitives.field import BN254_SCALAR_PRIME, FF, is_canonical
from protocol.constraint_system import ConstraintSystem
from protocol.errors import ConfigurationError, WitnessError
from protocol.expressions import Column, ColumnKind

Value = Optional[int]  # None while the witness is unknown


@dataclass(frozen=True)
class Cell:
    """A (column, row) coordinate of the table."""
    column: Column
    row: int

    def __str__(self) -> str:
        return f"{self.column}[row {self.row}]"


@dataclass(frozen=True)
class AssignedCell:
    """A cell together with the value written to it."""
    cell: Cell
    value: Value

    @property
    def column(self) -> Column:
        return self.cell.column

    @property
    def row(self) -> int:
        return self.cell.row


def _normalize(value) -> Value:
    if value is None:
        return None
    return int(value) % BN254_SCALAR_PRIME


def _column_key(column: Column) -> Tuple[str, int]:
    return (column.kind.value, column.index)


class Region:
    """Named row span [start, start + height) of a layout.

    Offsets passed to the assign methods are relative to the region start.
    """

    def __init__(self, layout: "Layout", name: str, start: int, height: int):
        self._layout = layout
        self.name = name
        self.start = start
        self.height = height

    def __repr__(self) -> str:
        return f"Region({self.name!r}, start={self.start}, height={self.height})"

    def cell(self, column: Column, offset: int) -> Cell:
        """Absolute cell for a region-relative offset."""
        if not 0 <= offset < self.height:
            raise ConfigurationError(
                f"region '{self.name}': offset {offset} outside [0, {self.height})")
        return Cell(column, self.start + offset)

    def assign_advice(self, column: Column, offset: int, value) -> AssignedCell:
        self._check_kind(column, ColumnKind.ADVICE)
        return self._layout._assign(self.cell(column, offset), _normalize(value), self.name)

    def assign_fixed(self, column: Column, offset: int, value) -> AssignedCell:
        self._check_kind(column, ColumnKind.FIXED)
        if value is None:
            raise ConfigurationError(f"region '{self.name}': fixed value for {column} must be known")
        return self._layout._assign(self.cell(column, offset), _normalize(value), self.name)

    def enable_selector(self, selector: Column, offset: int) -> None:
        self._check_kind(selector, ColumnKind.SELECTOR)
        self._layout._enable(self.cell(selector, offset), self.name)

    def _check_kind(self, column: Column, kind: ColumnKind) -> None:
        if column.kind != kind:
            raise ConfigurationError(f"region '{self.name}': {column} is not a {kind.value} column")


class Layout:
    """Exclusively-owned table builder for one synthesis of a circuit.

    Attributes:
        cs: Constraint system the layout is built against
        n: Number of rows (2^k)
        advice: Per advice column, one value (or None) per row
        fixed: Per fixed column, one value (or None) per row
        selectors: Per selector, one flag per row
        assigned: Coordinates written so far
        regions: Regions in creation order
        copies: Equality constraints as (left, right) cell pairs
    """

    def __init__(self, cs: ConstraintSystem, n: int):
        self.cs = cs
        self.n = n
        self.advice: Dict[Column, List[Value]] = {c: [None] * n for c in cs.advice_columns}
        self.fixed: Dict[Column, List[Value]] = {c: [None] * n for c in cs.fixed_columns}
        self.selectors: Dict[Column, List[bool]] = {c: [False] * n for c in cs.selectors}
        self.assigned: set = set()
        self.regions: List[Region] = []
        self.copies: List[Tuple[Cell, Cell]] = []

    # --- Regions ---

    def region(self, name: str, height: int, start: Optional[int] = None) -> Region:
        """Open a region. Without start, it is placed after the last region.

        Raises:
            ConfigurationError: If the region leaves the table or overlaps another
        """
        if height <= 0:
            raise ConfigurationError(f"region '{name}' must have positive height, got {height}")
        if start is None:
            start = max((r.start + r.height for r in self.regions), default=0)
        if start < 0 or start + height > self.n:
            raise ConfigurationError(
                f"region '{name}' rows [{start}, {start + height}) do not fit in {self.n} rows")
        for other in self.regions:
            if start < other.start + other.height and other.start < start + height:
                raise ConfigurationError(f"region '{name}' overlaps region '{other.name}'")
        region = Region(self, name, start, height)
        self.regions.append(region)
        return region

    def _assign(self, cell: Cell, value: Value, region_name: str) -> AssignedCell:
        key = (cell.column, cell.row)
        table = self.advice if cell.column.kind == ColumnKind.ADVICE else self.fixed
        if cell.column not in table:
            raise ConfigurationError(f"{cell.column} was not declared in the constraint system")
        if key in self.assigned:
            if cell.column.kind == ColumnKind.FIXED and table[cell.column][cell.row] != value:
                raise ConfigurationError(f"region '{region_name}': conflicting fixed values for {cell}")
            raise ConfigurationError(f"region '{region_name}': {cell} assigned twice")
        self.assigned.add(key)
        table[cell.column][cell.row] = value
        return AssignedCell(cell, value)

    def _enable(self, cell: Cell, region_name: str) -> None:
        if cell.column not in self.selectors:
            raise ConfigurationError(f"{cell.column} was not declared in the constraint system")
        self.selectors[cell.column][cell.row] = True

    # --- Equality ---

    def constrain_equal(self, left: Cell, right: Cell) -> None:
        """Declare left == right; enforced by the permutation argument."""
        for cell in (left, right):
            if cell.column not in self.cs.permutation_columns:
                raise ConfigurationError(f"equality is not enabled on {cell.column}")
            if not 0 <= cell.row < self.n:
                raise ConfigurationError(f"{cell} is outside the {self.n}-row table")
        self.copies.append((left, right))

    def constrain_instance(self, cell: Cell, instance_column: Column, row: int) -> None:
        """Bind cell to public input `row` of instance_column."""
        if instance_column.kind != ColumnKind.INSTANCE:
            raise ConfigurationError(f"{instance_column} is not an instance column")
        self.constrain_equal(cell, Cell(instance_column, row))

    # --- Values ---

    def is_assigned(self, column: Column, row: int) -> bool:
        return (column, row) in self.assigned

    def has_value(self, column: Column, row: int) -> bool:
        """True if the cell was assigned and, for advice, its value is known."""
        if (column, row) not in self.assigned:
            return False
        return column.kind != ColumnKind.ADVICE or self.advice[column][row] is not None

    def unknown_cells(self) -> List[Cell]:
        """Advice cells assigned without a value, in column then row order."""
        return [
            Cell(column, row)
            for column in self.cs.advice_columns
            for row, value in enumerate(self.advice[column])
            if value is None and (column, row) in self.assigned
        ]

    def advice_values(self) -> Dict[Column, FF]:
        """Advice columns as field arrays.

        Unknown values read as zero, which only a witness-free layout (key
        generation) may rely on; proving rejects them first.
        """
        return {c: FF([v or 0 for v in values]) for c, values in self.advice.items()}

    def fixed_values(self) -> Dict[Column, FF]:
        """Fixed columns and selectors as field arrays; unassigned fixed cells read as zero."""
        out = {c: FF([v or 0 for v in values]) for c, values in self.fixed.items()}
        for c, flags in self.selectors.items():
            out[c] = FF([int(f) for f in flags])
        return out

    # --- Fingerprints ---

    def structural_fingerprint(self) -> bytes:
        """Digest of everything known without a witness."""
        hasher = hashlib.blake2b(digest_size=32, person=b"layout-shape")
        self._hash_structure(hasher)
        return hasher.digest()

    def fingerprint(self) -> bytes:
        """Digest of the structure and every advice value."""
        hasher = hashlib.blake2b(digest_size=32, person=b"layout-full")
        self._hash_structure(hasher)
        for column in self.cs.advice_columns:
            for row, value in enumerate(self.advice[column]):
                hasher.update(f"{column}:{row}={value};".encode())
        return hasher.digest()

    def _hash_structure(self, hasher) -> None:
        hasher.update(f"n={self.n};".encode())
        for region in self.regions:
            hasher.update(f"region {region.name}:{region.start}+{region.height};".encode())
        for column, row in sorted(self.assigned, key=lambda cr: (_column_key(cr[0]), cr[1])):
            hasher.update(f"assigned {column}:{row};".encode())
        for column in self.cs.fixed_columns:
            hasher.update(f"fixed {column}={self.fixed[column]};".encode())
        for column in self.cs.selectors:
            rows = [i for i, flag in enumerate(self.selectors[column]) if flag]
            hasher.update(f"selector {column}={rows};".encode())
        for left, right in self.copies:
            hasher.update(f"copy {left}={right};".encode())


def instance_table(cs: ConstraintSystem, instances: Sequence[Sequence[int]], n: int) -> Dict[Column, List[int]]:
    """Validate public inputs and pad each instance column to n rows.

    Args:
        cs: Constraint system declaring the instance columns
        instances: One sequence of canonical field elements per instance column
        n: Number of rows

    Raises:
        WitnessError: If the instance values are malformed
    """
    if isinstance(instances, (str, bytes)) or not isinstance(instances, Sequence):
        raise WitnessError("instances must be a sequence of columns")
    if len(instances) != len(cs.instance_columns):
        raise WitnessError(
            f"expected {len(cs.instance_columns)} instance columns, got {len(instances)}")
    table = {}
    for column, values in zip(cs.instance_columns, instances):
        if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
            raise WitnessError(f"{column} values must be a sequence")
        if len(values) > n:
            raise WitnessError(f"{column} has {len(values)} values but the table has {n} rows")
        padded = []
        for value in values:
            if isinstance(value, FF):
                value = int(value)
            if not is_canonical(value):
                raise WitnessError(f"{column} value {value!r} is not a canonical field element")
            padded.append(value)
        table[column] = padded + [0] * (n - len(padded))
    return table

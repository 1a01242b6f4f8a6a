"""Arithmetic chip: one addition a + b = c per row.

Gate (one constraint):
    s_add * (a + b - c) == 0

c is equality-enabled so its value can be wired into other chips.
"""

from dataclasses import dataclass

from chips.base import Chip
from primitives.field import BN254_SCALAR_PRIME
from protocol.constraint_system import ConstraintSystem
from protocol.expressions import Column
from protocol.layout import AssignedCell, Region


@dataclass(frozen=True)
class AddConfig:
    a: Column
    b: Column
    c: Column
    s_add: Column


class AddChip(Chip):
    """Chip A: constrains c = a + b on rows where s_add is enabled."""

    @classmethod
    def configure(cls, cs: ConstraintSystem) -> AddConfig:
        a = cs.advice_column("a")
        b = cs.advice_column("b")
        c = cs.advice_column("c")
        s_add = cs.selector("s_add")
        cs.enable_equality(c)

        def gate(meta):
            s = meta.query_selector(s_add)
            lhs = meta.query_advice(a) + meta.query_advice(b)
            return [("a + b = c", s * (lhs - meta.query_advice(c)))]

        cs.create_gate("add", gate)
        return AddConfig(a=a, b=b, c=c, s_add=s_add)

    def assign(self, region: Region, row: int, a_val, b_val) -> AssignedCell:
        """Write a, b and c = a + b; return the c cell.

        Raises:
            ConfigurationError: If row is outside the region or a cell is already assigned
        """
        config = self.config
        region.assign_advice(config.a, row, a_val)
        region.assign_advice(config.b, row, b_val)
        c_val = None
        if a_val is not None and b_val is not None:
            c_val = (int(a_val) + int(b_val)) % BN254_SCALAR_PRIME
        c_cell = region.assign_advice(config.c, row, c_val)
        region.enable_selector(config.s_add, row)
        return c_cell

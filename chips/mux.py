"""Selector chip: z = x if s == 1 else y.

Gate "mux" (two constraints, both enabled by s_mux):
    s_mux * s * (s - 1) == 0             s is boolean
    s_mux * (s * (x - y) + y - z) == 0   z picks x or y

x and z are equality-enabled: x receives a value computed elsewhere and z
is the chip's output.
"""

from dataclasses import dataclass

from chips.base import Chip
from primitives.field import BN254_SCALAR_PRIME
from protocol.constraint_system import ConstraintSystem
from protocol.errors import WitnessError
from protocol.expressions import Column
from protocol.layout import AssignedCell, Region


@dataclass(frozen=True)
class MuxConfig:
    x: Column
    y: Column
    s: Column
    z: Column
    s_mux: Column


class MuxChip(Chip):
    """Chip B: two-way multiplexer with a boolean control column."""

    @classmethod
    def configure(cls, cs: ConstraintSystem) -> MuxConfig:
        x = cs.advice_column("x")
        y = cs.advice_column("y")
        s = cs.advice_column("s")
        z = cs.advice_column("z")
        s_mux = cs.selector("s_mux")
        cs.enable_equality(x)
        cs.enable_equality(z)

        def gate(meta):
            q = meta.query_selector(s_mux)
            x_cur = meta.query_advice(x)
            y_cur = meta.query_advice(y)
            s_cur = meta.query_advice(s)
            z_cur = meta.query_advice(z)
            return [
                ("s is boolean", q * s_cur * (s_cur - 1)),
                ("z = s ? x : y", q * (s_cur * (x_cur - y_cur) + y_cur - z_cur)),
            ]

        cs.create_gate("mux", gate)
        return MuxConfig(x=x, y=y, s=s, z=z, s_mux=s_mux)

    def assign(self, region: Region, row: int, x_val, y_val, s_val) -> AssignedCell:
        """Write x, y, s and z; return the z cell.

        Raises:
            WitnessError: If s_val is known and not 0 or 1
            ConfigurationError: If row is outside the region or a cell is already assigned
        """
        if s_val is not None and int(s_val) % BN254_SCALAR_PRIME not in (0, 1):
            raise WitnessError(f"mux control must be 0 or 1, got {int(s_val)}")

        config = self.config
        region.assign_advice(config.x, row, x_val)
        region.assign_advice(config.y, row, y_val)
        region.assign_advice(config.s, row, s_val)
        if s_val is None:
            z_val = None
        elif int(s_val) % BN254_SCALAR_PRIME == 1:
            z_val = x_val
        else:
            z_val = y_val
        z_cell = region.assign_advice(config.z, row, z_val)
        region.enable_selector(config.s_mux, row)
        return z_cell

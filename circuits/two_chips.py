"""Two-chip circuit: an adder feeding a multiplexer.

    c = a + b            (Chip A, region "add", row 0)
    z = s ? x : y        (Chip B, region "mux", row 1)
    c == x               equality constraint
    z == out[0]          z is the public output

With the default x = c the public output is a + b when s = 1 and y when s = 0.
"""

from dataclasses import dataclass
from typing import Optional

from chips.arithmetic import AddChip, AddConfig
from chips.mux import MuxChip, MuxConfig
from primitives.field import BN254_SCALAR_PRIME
from protocol.circuit import Circuit
from protocol.constraint_system import ConstraintSystem
from protocol.expressions import Column
from protocol.layout import Layout


@dataclass(frozen=True)
class TwoChipConfig:
    add: AddConfig
    mux: MuxConfig
    out: Column


class TwoChipCircuit(Circuit):
    """Witness a, b, y, s and an optional override of the mux input x.

    Any value may be None (unknown); without_witnesses() sets them all to
    None for key generation.
    """

    def __init__(self, a: Optional[int] = None, b: Optional[int] = None, y: Optional[int] = None,
                 s: Optional[int] = None, x: Optional[int] = None):
        self.a = a
        self.b = b
        self.y = y
        self.s = s
        self.x = x

    def __repr__(self) -> str:
        return f"TwoChipCircuit(a={self.a}, b={self.b}, y={self.y}, s={self.s}, x={self.x})"

    def without_witnesses(self) -> "TwoChipCircuit":
        return TwoChipCircuit()

    @classmethod
    def configure(cls, cs: ConstraintSystem) -> TwoChipConfig:
        add = AddChip.configure(cs)
        mux = MuxChip.configure(cs)
        out = cs.instance_column("out")
        cs.enable_equality(out)
        return TwoChipConfig(add=add, mux=mux, out=out)

    def synthesize(self, config: TwoChipConfig, layout: Layout) -> Layout:
        add_chip = AddChip(config.add)
        mux_chip = MuxChip(config.mux)

        region = layout.region("add", height=1, start=0)
        c_cell = add_chip.assign(region, 0, self.a, self.b)

        x_val = self.x if self.x is not None else c_cell.value
        region = layout.region("mux", height=1, start=1)
        z_cell = mux_chip.assign(region, 0, x_val, self.y, self.s)

        layout.constrain_equal(c_cell.cell, region.cell(config.mux.x, 0))
        layout.constrain_instance(z_cell.cell, config.out, 0)
        return layout

    def public_output(self) -> Optional[int]:
        """Value out[0] must hold for this witness (None if not determined)."""
        if self.s is None:
            return None
        if int(self.s) % BN254_SCALAR_PRIME == 1:
            if self.x is not None:
                return int(self.x) % BN254_SCALAR_PRIME
            if self.a is None or self.b is None:
                return None
            return (int(self.a) + int(self.b)) % BN254_SCALAR_PRIME
        if self.y is None:
            return None
        return int(self.y) % BN254_SCALAR_PRIME

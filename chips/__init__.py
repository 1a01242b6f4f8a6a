"""Chips - Reusable gate definitions and their layouts."""

from chips.base import Chip
from chips.arithmetic import AddChip, AddConfig
from chips.mux import MuxChip, MuxConfig

__all__ = [
    "Chip",
    "AddChip",
    "AddConfig",
    "MuxChip",
    "MuxConfig",
]

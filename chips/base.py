"""Base class for chips."""

from abc import ABC, abstractmethod
from typing import Any

from protocol.constraint_system import ConstraintSystem
from protocol.layout import AssignedCell, Region


class Chip(ABC):
    """A reusable piece of circuit: its columns and gates plus how to fill them.

    configure() runs once per constraint system and returns the chip's
    config (column handles). A chip instance wraps that config and lays out
    one use of the gate per assign() call. Chips never share columns; they
    are wired together by equality constraints on the cells they return.
    """

    def __init__(self, config: Any):
        self.config = config

    @classmethod
    @abstractmethod
    def configure(cls, cs: ConstraintSystem) -> Any:
        """Declare the chip's columns and gates.

        Args:
            cs: Constraint system being configured

        Returns:
            The chip's config
        """
        pass

    @abstractmethod
    def assign(self, region: Region, row: int, *values) -> AssignedCell:
        """Lay out one use of the chip at region offset row.

        Args:
            region: Region to write into
            row: Offset within the region
            values: Witness inputs; None while the witness is unknown

        Returns:
            The chip's output cell
        """
        pass

"""Circuit interface and the configure / synthesize drivers."""

from abc import ABC, abstractmethod
from typing import Any, Tuple

from protocol.constraint_system import ConstraintSystem
from protocol.errors import ConfigurationError
from protocol.layout import Layout


class Circuit(ABC):
    """A circuit: a static shape (configure) plus a witness (synthesize).

    configure() must depend only on the circuit type, never on witness
    values, so key generation and proving see the same constraint system.
    """

    @classmethod
    @abstractmethod
    def configure(cls, cs: ConstraintSystem) -> Any:
        """Declare columns and gates; return the circuit's config."""
        pass

    @abstractmethod
    def synthesize(self, config: Any, layout: Layout) -> Layout:
        """Assign regions and declare equality constraints; return the layout."""
        pass

    @abstractmethod
    def without_witnesses(self) -> "Circuit":
        """Same circuit with every witness value unknown."""
        pass


def configure(circuit: Circuit) -> Tuple[ConstraintSystem, Any]:
    cs = ConstraintSystem()
    config = type(circuit).configure(cs)
    return cs, config


def synthesize(circuit: Circuit, cs: ConstraintSystem, config: Any, n: int) -> Layout:
    """Run circuit.synthesize on a fresh n-row layout."""
    layout = circuit.synthesize(config, Layout(cs, n))
    if not isinstance(layout, Layout) or layout.cs is not cs:
        raise ConfigurationError(f"{type(circuit).__name__}.synthesize must return the layout it was given")
    return layout

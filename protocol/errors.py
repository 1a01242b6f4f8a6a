"""Circuit-misuse errors.

ConfigurationError is a static defect of the circuit definition, found while
configuring, laying out or generating keys. WitnessError is a defect of one
particular witness, found while synthesizing or proving; the caller may retry
with a corrected witness. Verification failure is not an exception: the
verifier returns False.
"""

from primitives.errors import BackendError


class ConfigurationError(ValueError):
    """Circuit definition is inconsistent (overlap, out-of-bounds, unsatisfiable gate, ...)."""


class WitnessError(ValueError):
    """Witness does not satisfy the circuit.

    Attributes:
        failures: individual failures found by the witness check (may be empty)
    """

    def __init__(self, message: str, failures=None):
        super().__init__(message)
        self.failures = list(failures or [])


__all__ = ["BackendError", "ConfigurationError", "WitnessError"]

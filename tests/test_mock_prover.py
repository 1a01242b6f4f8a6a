"""Tests for the mock prover."""

import pytest

from chips.arithmetic import AddChip
from circuits.two_chips import TwoChipCircuit
from protocol.circuit import Circuit
from protocol.errors import WitnessError
from protocol.mock_prover import FailureKind, MockProver

K = 4


class PartialAddCircuit(Circuit):
    """Enables the add gate but only writes a."""

    @classmethod
    def configure(cls, cs):
        return AddChip.configure(cs)

    def synthesize(self, config, layout):
        region = layout.region("add", height=1)
        region.assign_advice(config.a, 0, 1)
        region.enable_selector(config.s_add, 0)
        return layout

    def without_witnesses(self):
        return self


class WrongSumCircuit(Circuit):
    """Writes c = a + b + 1."""

    @classmethod
    def configure(cls, cs):
        return AddChip.configure(cs)

    def synthesize(self, config, layout):
        region = layout.region("add", height=1)
        region.assign_advice(config.a, 0, 1)
        region.assign_advice(config.b, 0, 2)
        region.assign_advice(config.c, 0, 4)
        region.enable_selector(config.s_add, 0)
        return layout

    def without_witnesses(self):
        return self


class TestMockProver:
    """Tests for MockProver.run(...).verify()."""

    @pytest.mark.parametrize("s,public", [(1, 7), (0, 10)])
    def test_valid_witness(self, s: int, public: int) -> None:
        """Valid witnesses produce no failures."""
        circuit = TwoChipCircuit(a=3, b=4, y=10, s=s)
        assert circuit.public_output() == public
        assert MockProver.run(K, circuit, [[public]]).verify() == []

    def test_wrong_public_output(self) -> None:
        """A public value different from z breaks the instance binding."""
        failures = MockProver.run(K, TwoChipCircuit(a=3, b=4, y=10, s=1), [[8]]).verify()
        assert [f.kind for f in failures] == [FailureKind.PERMUTATION]

    def test_x_override(self) -> None:
        """x different from c breaks the c == x copy."""
        circuit = TwoChipCircuit(a=3, b=4, y=10, s=1, x=9)
        failures = MockProver.run(K, circuit, [[9]]).verify()
        assert len(failures) == 1
        assert failures[0].kind == FailureKind.PERMUTATION
        assert "7 != 9" in failures[0].detail

    def test_unassigned_cells(self) -> None:
        """Cells queried by an active gate must be assigned."""
        failures = MockProver.run(K, PartialAddCircuit(), []).verify()
        assert [f.kind for f in failures] == [FailureKind.CELL_NOT_ASSIGNED] * 2

    def test_unknown_mux_input(self) -> None:
        """An assigned cell without a value counts as missing."""
        failures = MockProver.run(K, TwoChipCircuit(a=3, b=4, s=1), [[7]]).verify()
        assert len(failures) == 1
        assert failures[0].kind == FailureKind.CELL_NOT_ASSIGNED
        assert failures[0].location == "gate 'mux' row 1"
        assert failures[0].detail == "advice[4][row 1] is queried but its value is unknown"

    def test_unknown_adder_inputs(self) -> None:
        """Unknown a and b leave c and x unknown in both gates and in the c == x copy."""
        failures = MockProver.run(K, TwoChipCircuit(y=10, s=0), [[10]]).verify()
        assert [f.kind for f in failures] == [FailureKind.CELL_NOT_ASSIGNED] * 6
        assert sum(f.location.startswith("equality") for f in failures) == 2

    def test_witness_free_layout(self) -> None:
        """The key generation layout is not a valid witness."""
        failures = MockProver.run(K, TwoChipCircuit(), [[0]]).verify()
        assert failures
        assert all(f.kind == FailureKind.CELL_NOT_ASSIGNED for f in failures)

    def test_unsatisfied_constraint(self) -> None:
        """Wrong values on an active row are reported per constraint."""
        failures = MockProver.run(K, WrongSumCircuit(), []).verify()
        assert len(failures) == 1
        assert failures[0].kind == FailureKind.CONSTRAINT_NOT_SATISFIED
        assert failures[0].location == "gate 'add' row 0"

    def test_assert_satisfied(self) -> None:
        """assert_satisfied raises a WitnessError carrying the failures."""
        prover = MockProver.run(K, WrongSumCircuit(), [])
        with pytest.raises(WitnessError) as exc_info:
            prover.assert_satisfied()
        assert len(exc_info.value.failures) == 1

    def test_malformed_instances(self) -> None:
        """Instances must match the instance columns."""
        with pytest.raises(WitnessError):
            MockProver.run(K, TwoChipCircuit(a=3, b=4, y=10, s=1), [])

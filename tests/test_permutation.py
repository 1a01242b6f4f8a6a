"""Tests for permutation cycles, sigma polynomials and the grand product."""

import pytest

from primitives.field import FF
from primitives.polynomial import EvaluationDomain
from protocol.constraint_system import ConstraintSystem
from protocol.errors import ConfigurationError
from protocol.layout import Cell
from protocol.permutation import PermutationAssembly, grand_product, identity_values


@pytest.fixture
def setting():
    cs = ConstraintSystem()
    a = cs.advice_column("a")
    b = cs.advice_column("b")
    c = cs.advice_column("c")
    cs.enable_equality(a)
    cs.enable_equality(b)
    return cs, a, b, c, EvaluationDomain(3)


def _closing_product(values, sigmas, domain, beta, gamma):
    """prod over all cells of (v + beta*id + gamma) / (v + beta*sigma + gamma)."""
    num = FF(1)
    den = FF(1)
    for value, identity, sigma in zip(values, identity_values(len(values), domain), sigmas):
        for i in range(domain.n):
            num = num * (value[i] + beta * identity[i] + gamma)
            den = den * (value[i] + beta * sigma[i] + gamma)
    return num / den


class TestPermutationAssembly:
    """Tests for cycle merging."""

    def test_cycles_merge(self, setting) -> None:
        """Two copies sharing a cell form one cycle of three."""
        cs, a, b, _, domain = setting
        assembly = PermutationAssembly(cs.permutation_columns, domain.n)
        assembly.copy(Cell(a, 0), Cell(b, 1))
        assembly.copy(Cell(b, 1), Cell(a, 3))
        cycles = assembly.cycles()
        assert len(cycles) == 1
        assert sorted(cycles[0]) == [(0, 0), (0, 3), (1, 1)]

    def test_repeated_copy_is_noop(self, setting) -> None:
        """Copying cells already in one cycle changes nothing."""
        cs, a, b, _, domain = setting
        assembly = PermutationAssembly(cs.permutation_columns, domain.n)
        assembly.copy(Cell(a, 0), Cell(b, 1))
        before = [list(row) for row in assembly.mapping]
        assembly.copy(Cell(b, 1), Cell(a, 0))
        assert assembly.mapping == before

    def test_sigma_is_permutation_of_identity(self, setting) -> None:
        """sigma values are a rearrangement of the identity labels."""
        cs, a, b, _, domain = setting
        assembly = PermutationAssembly(cs.permutation_columns, domain.n)
        assembly.copy(Cell(a, 2), Cell(b, 5))
        sigmas = assembly.sigma_values(domain)
        identities = identity_values(2, domain)
        flat_sigma = sorted(int(v) for s in sigmas for v in s)
        flat_id = sorted(int(v) for s in identities for v in s)
        assert flat_sigma == flat_id
        assert sigmas[0][2] == identities[1][5]
        assert sigmas[1][5] == identities[0][2]

    def test_copy_requires_equality(self, setting) -> None:
        """Cells of columns outside the permutation are rejected."""
        cs, a, _, c, domain = setting
        assembly = PermutationAssembly(cs.permutation_columns, domain.n)
        with pytest.raises(ConfigurationError):
            assembly.copy(Cell(a, 0), Cell(c, 0))


class TestGrandProduct:
    """Tests for the permutation grand product."""

    def _assembly(self, setting):
        cs, a, b, _, domain = setting
        assembly = PermutationAssembly(cs.permutation_columns, domain.n)
        assembly.copy(Cell(a, 0), Cell(b, 1))
        assembly.copy(Cell(b, 1), Cell(a, 3))
        return assembly, domain

    def test_consistent_values_close(self, setting) -> None:
        """Equal values along every cycle make the product return to one."""
        assembly, domain = self._assembly(setting)
        values = [FF([5, 1, 2, 5, 3, 4, 6, 7]), FF([9, 5, 8, 8, 8, 8, 8, 8])]
        sigmas = assembly.sigma_values(domain)
        beta, gamma = FF(1234567), FF(7654321)
        z = grand_product(values, sigmas, domain, beta, gamma)
        assert z[0] == FF(1)
        assert _closing_product(values, sigmas, domain, beta, gamma) == FF(1)

    def test_inconsistent_values_do_not_close(self, setting) -> None:
        """A broken cycle leaves the product away from one."""
        assembly, domain = self._assembly(setting)
        values = [FF([5, 1, 2, 6, 3, 4, 6, 7]), FF([9, 5, 8, 8, 8, 8, 8, 8])]
        sigmas = assembly.sigma_values(domain)
        beta, gamma = FF(1234567), FF(7654321)
        assert _closing_product(values, sigmas, domain, beta, gamma) != FF(1)

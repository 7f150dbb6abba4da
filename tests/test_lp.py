"""
Unit tests for the LP oracle and redundancy elimination.
"""

import numpy as np
import pytest

from convexsets import (
    HalfSpace,
    HPolytope,
    LPOracle,
    LPSolverError,
    ScipyLinprogOracle,
    default_lp_oracle,
    set_default_lp_oracle,
    is_feasible,
    is_redundant,
    remove_redundant_constraints,
    remove_redundant_vertices,
    vertices_from_constraints,
)
from convexsets.core.lp import OPTIMAL, INFEASIBLE, UNBOUNDED, maximize


def box_constraints(lo=0.0, hi=1.0):
    return [
        HalfSpace([1.0, 0.0], hi),
        HalfSpace([0.0, 1.0], hi),
        HalfSpace([-1.0, 0.0], -lo),
        HalfSpace([0.0, -1.0], -lo),
    ]


class FailingOracle(LPOracle):
    """Oracle whose backend always fails."""

    def solve(self, c, A_ub=None, b_ub=None, A_eq=None, b_eq=None, bounds=(None, None)):
        raise LPSolverError("backend unavailable", status=4)


class TestScipyOracle:
    """Tests for ScipyLinprogOracle."""

    def test_optimal(self):
        """A bounded LP returns the optimum."""
        res = ScipyLinprogOracle().solve(np.array([-1.0, -1.0]), *_stack(box_constraints()))
        assert res.status == OPTIMAL
        assert res.value == pytest.approx(-2.0)

    def test_infeasible(self):
        """Contradicting constraints are reported as infeasible."""
        A = np.array([[1.0], [-1.0]])
        b = np.array([0.0, -1.0])
        assert ScipyLinprogOracle().solve(np.array([0.0]), A, b).status == INFEASIBLE

    def test_unbounded(self):
        """An unbounded objective is reported as unbounded."""
        A = np.array([[1.0]])
        b = np.array([0.0])
        assert ScipyLinprogOracle().solve(np.array([1.0]), A, b).status == UNBOUNDED

    def test_default_oracle_swap(self):
        """set_default_lp_oracle returns the previous oracle."""
        mine = ScipyLinprogOracle()
        previous = set_default_lp_oracle(mine)
        assert default_lp_oracle() is mine
        set_default_lp_oracle(previous)
        assert default_lp_oracle() is previous


def _stack(constraints):
    A = np.array([c.a for c in constraints])
    b = np.array([c.b for c in constraints])
    return A, b


class TestFeasibility:
    """Tests for is_feasible() and maximize()."""

    def test_box_feasible(self):
        """A box is feasible."""
        assert is_feasible(box_constraints(), 2)

    def test_crossed_bounds_infeasible(self):
        """x <= 0 and x >= 1 is infeasible."""
        constraints = [HalfSpace([1.0, 0.0], 0.0), HalfSpace([-1.0, 0.0], -1.0)]
        assert not is_feasible(constraints, 2)

    def test_maximize_values(self):
        """Maximize reports +inf when unbounded and -inf when infeasible."""
        assert maximize(np.array([1.0, 1.0]), box_constraints()).value == pytest.approx(2.0)
        assert maximize(np.array([1.0, 0.0]), [HalfSpace([0.0, 1.0], 0.0)]).value == np.inf
        infeasible = [HalfSpace([1.0], 0.0), HalfSpace([-1.0], -1.0)]
        assert maximize(np.array([1.0]), infeasible).value == -np.inf

    def test_solver_error_propagates(self):
        """Backend failures are not mistaken for infeasibility."""
        with pytest.raises(LPSolverError):
            is_feasible(box_constraints(), 2, oracle=FailingOracle())


class TestRedundancy:
    """Tests for the redundancy elimination helpers."""

    def test_is_redundant(self):
        """A looser parallel constraint is redundant."""
        constraints = box_constraints() + [HalfSpace([1.0, 0.0], 5.0)]
        assert is_redundant(constraints, 4)
        assert not is_redundant(constraints, 0)

    def test_remove_redundant_keeps_order(self):
        """Pruning keeps the surviving constraints in their original order."""
        extra = HalfSpace([1.0, 1.0], 10.0)
        constraints = [extra] + box_constraints()
        pruned = remove_redundant_constraints(constraints, 2)
        assert len(pruned) == 4
        assert extra not in pruned
        assert pruned == box_constraints()

    def test_remove_redundant_infeasible(self):
        """Infeasible systems yield None."""
        constraints = box_constraints() + [HalfSpace([1.0, 0.0], -1.0)]
        assert remove_redundant_constraints(constraints, 2) is None

    def test_inplace_on_polytope(self):
        """H-polytopes prune their own constraint list."""
        P = HPolytope(box_constraints() + [HalfSpace([1.0, 0.0], 3.0)])
        assert P.remove_redundant_constraints()
        assert len(P.constraints_list()) == 4

    def test_remove_redundant_vertices(self):
        """Interior and duplicate points are dropped."""
        square = [np.array(v, dtype=float) for v in ([0, 0], [1, 0], [1, 1], [0, 1])]
        points = square + [np.array([0.5, 0.5]), np.array([1.0, 1.0])]
        kept = remove_redundant_vertices(points)
        assert len(kept) == 4

    def test_vertices_from_constraints(self):
        """The unit box has its four corners as vertices."""
        vertices = vertices_from_constraints(box_constraints(), 2)
        assert len(vertices) == 4
        assert sorted(tuple(np.round(v, 12)) for v in vertices) == [(0, 0), (0, 1), (1, 0), (1, 1)]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

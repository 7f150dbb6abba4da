"""
Linear-programming oracle and redundancy elimination.

The geometric algorithms never talk to an LP solver directly. They go
through an ``LPOracle`` so that alternative backends can be plugged in
without touching the algorithms. The default backend is
``scipy.optimize.linprog`` with the HiGHS solver.

Infeasibility is a regular answer of the oracle (callers translate it to an
empty set). Every other solver failure raises ``LPSolverError``.
"""

import itertools
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
from scipy.optimize import linprog

from .errors import LPSolverError
from .tolerance import get_tolerance, _isapprox, _leq

logger = logging.getLogger(__name__)

OPTIMAL = "optimal"
INFEASIBLE = "infeasible"
UNBOUNDED = "unbounded"


@dataclass
class LPResult:
    """
    Outcome of a linear program ``min c^T x``.

    Attributes
    ----------
    status : str
        One of ``"optimal"``, ``"infeasible"``, ``"unbounded"``.
    x : np.ndarray or None
        Optimal point if ``status == "optimal"``.
    value : float
        Optimal objective value; ``inf`` if infeasible, ``-inf`` if unbounded.
    """
    status: str
    x: Optional[np.ndarray] = None
    value: float = np.nan


class LPOracle(ABC):
    """Interface of a linear-programming backend."""

    @abstractmethod
    def solve(
        self,
        c: np.ndarray,
        A_ub: Optional[np.ndarray] = None,
        b_ub: Optional[np.ndarray] = None,
        A_eq: Optional[np.ndarray] = None,
        b_eq: Optional[np.ndarray] = None,
        bounds=(None, None),
    ) -> LPResult:
        """Minimize ``c^T x`` subject to ``A_ub x <= b_ub`` and ``A_eq x = b_eq``."""


class ScipyLinprogOracle(LPOracle):
    """LP oracle backed by ``scipy.optimize.linprog``."""

    def __init__(self, method: str = "highs"):
        self.method = method

    def solve(self, c, A_ub=None, b_ub=None, A_eq=None, b_eq=None, bounds=(None, None)):
        c = np.asarray(c, dtype=np.float64)
        if A_ub is not None and len(A_ub) == 0:
            A_ub, b_ub = None, None
        if A_ub is not None:
            A_ub = np.asarray(A_ub, dtype=np.float64)
            b_ub = np.asarray(b_ub, dtype=np.float64)
        if A_eq is not None:
            A_eq = np.asarray(A_eq, dtype=np.float64)
            b_eq = np.asarray(b_eq, dtype=np.float64)

        try:
            res = linprog(c, A_ub=A_ub, b_ub=b_ub, A_eq=A_eq, b_eq=b_eq,
                          bounds=bounds, method=self.method)
        except ValueError as e:
            raise LPSolverError(f"linprog rejected the problem: {e}") from e

        if res.status == 0:
            return LPResult(OPTIMAL, res.x, float(res.fun))
        if res.status == 2:
            return LPResult(INFEASIBLE, None, np.inf)
        if res.status == 3:
            return LPResult(UNBOUNDED, None, -np.inf)
        raise LPSolverError(f"LP solver failed: {res.message}", status=res.status)


_default_oracle: LPOracle = ScipyLinprogOracle()


def default_lp_oracle() -> LPOracle:
    """Return the process-wide default LP oracle."""
    return _default_oracle


def set_default_lp_oracle(oracle: LPOracle) -> LPOracle:
    """
    Replace the process-wide default LP oracle.

    Returns
    -------
    LPOracle
        The previous default, so callers can restore it.
    """
    global _default_oracle
    previous = _default_oracle
    _default_oracle = oracle
    return previous


def _stack(constraints: Sequence) -> Tuple[np.ndarray, np.ndarray]:
    """Stack a list of half-spaces into ``(A, b)``."""
    A = np.array([np.asarray(c.a, dtype=np.float64) for c in constraints])
    b = np.array([float(c.b) for c in constraints])
    return A, b


def is_feasible(constraints: Sequence, n: int, oracle: Optional[LPOracle] = None) -> bool:
    """Check whether the conjunction of ``constraints`` in ``R^n`` is nonempty."""
    if len(constraints) == 0:
        return True
    oracle = oracle or default_lp_oracle()
    A, b = _stack(constraints)
    res = oracle.solve(np.zeros(n), A, b)
    return res.status != INFEASIBLE


def maximize(d: np.ndarray, constraints: Sequence, oracle: Optional[LPOracle] = None) -> LPResult:
    """
    Maximize ``<d, x>`` over the conjunction of ``constraints``.

    The returned ``value`` is the maximum (``+inf`` if unbounded, ``-inf``
    if infeasible).
    """
    d = np.asarray(d, dtype=np.float64)
    if len(constraints) == 0:
        if np.all(d == 0):
            return LPResult(OPTIMAL, np.zeros(len(d)), 0.0)
        return LPResult(UNBOUNDED, None, np.inf)
    oracle = oracle or default_lp_oracle()
    A, b = _stack(constraints)
    res = oracle.solve(-d, A, b)
    if res.status == OPTIMAL:
        return LPResult(OPTIMAL, res.x, -res.value)
    if res.status == UNBOUNDED:
        return LPResult(UNBOUNDED, None, np.inf)
    return LPResult(INFEASIBLE, None, -np.inf)


def is_redundant(constraints: Sequence, i: int, oracle: Optional[LPOracle] = None) -> bool:
    """
    Check whether ``constraints[i]`` is implied by the other constraints.

    The i-th bound is relaxed by one to keep the LP bounded, then the i-th
    normal is maximized. The constraint is redundant iff the maximum does
    not exceed its original bound.
    """
    oracle = oracle or default_lp_oracle()
    A, b = _stack(constraints)
    b_relaxed = b.copy()
    b_relaxed[i] += 1
    res = oracle.solve(-A[i], A, b_relaxed)
    if res.status == INFEASIBLE:
        return False
    if res.status != OPTIMAL:
        raise LPSolverError(f"unexpected LP status {res.status!r} in redundancy check")
    return _leq(-res.value, b[i])


def remove_redundant_constraints(
    constraints: Sequence,
    n: int,
    oracle: Optional[LPOracle] = None,
) -> Optional[list]:
    """
    Remove every constraint not needed to define the feasible set.

    Parameters
    ----------
    constraints : sequence of HalfSpace
        Constraint list; the objects themselves are kept, not copied.
    n : int
        Ambient dimension.
    oracle : LPOracle, optional
        LP backend; defaults to ``default_lp_oracle()``.

    Returns
    -------
    list or None
        The pruned list in the original order, or None if the constraints
        are infeasible.
    """
    oracle = oracle or default_lp_oracle()
    kept = list(constraints)
    if not kept:
        return kept
    if not is_feasible(kept, n, oracle):
        logger.debug("constraint system with %d constraints is infeasible", len(kept))
        return None

    A, b = _stack(kept)
    active = list(range(len(kept)))
    i = 0
    while i < len(active):
        A_act = A[active]
        b_act = b[active].copy()
        b_act[i] += 1
        res = oracle.solve(-A_act[i], A_act, b_act)
        if res.status == INFEASIBLE:
            return None
        if res.status != OPTIMAL:
            raise LPSolverError(f"unexpected LP status {res.status!r} in redundancy removal")
        if _leq(-res.value, b[active[i]]):
            del active[i]
        else:
            i += 1

    logger.debug("removed %d of %d constraints", len(kept) - len(active), len(kept))
    return [kept[j] for j in active]


def remove_redundant_vertices(
    vertices: Sequence[np.ndarray],
    oracle: Optional[LPOracle] = None,
) -> List[np.ndarray]:
    """
    Remove vertices that lie in the convex hull of the remaining ones.

    A vertex ``v`` is redundant if the LP ``lambda >= 0, sum(lambda) = 1,
    V^T lambda = v`` over the other kept vertices is feasible.
    """
    oracle = oracle or default_lp_oracle()
    ztol = get_tolerance(float).ztol

    # exact duplicates first
    unique = []
    for v in vertices:
        v = np.asarray(v, dtype=np.float64)
        if not any(_isapprox(v, u) for u in unique):
            unique.append(v)

    kept = list(unique)
    i = 0
    while i < len(kept) and len(kept) > 1:
        others = kept[:i] + kept[i + 1:]
        V = np.array(others)
        m = len(others)
        A_eq = np.vstack([V.T, np.ones((1, m))])
        b_eq = np.concatenate([kept[i], [1.0]])
        res = oracle.solve(np.zeros(m), A_eq=A_eq, b_eq=b_eq, bounds=(0, None))
        if res.status == OPTIMAL and np.allclose(V.T @ res.x, kept[i], atol=max(ztol, 1e-9)):
            del kept[i]
        else:
            i += 1
    return kept


def vertices_from_constraints(constraints: Sequence, n: int) -> List[np.ndarray]:
    """
    Enumerate the vertices of a bounded polyhedron in H-representation.

    Every choice of ``n`` constraints with linearly independent normals
    defines a candidate point; the feasible candidates are the vertices.
    Duplicates (degenerate vertices) are merged.
    """
    if len(constraints) < n:
        return []
    A, b = _stack(constraints)
    tol = get_tolerance(float)
    scale = np.maximum(1.0, np.abs(b))
    result = []
    for rows in itertools.combinations(range(len(constraints)), n):
        A_sub = A[list(rows)]
        if abs(np.linalg.det(A_sub)) <= tol.ztol:
            continue
        x = np.linalg.solve(A_sub, b[list(rows)])
        slack = A @ x - b
        if np.all(slack <= tol.rtol * 100 * scale + tol.atol):
            if not any(_isapprox(x, v) for v in result):
                result.append(x)
    return result

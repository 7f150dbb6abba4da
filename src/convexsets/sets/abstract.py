"""
Abstract polyhedral layers of the set taxonomy.

    LazySet
      AbstractPolyhedron        finite conjunction of half-spaces
        AbstractPolytope        ... that is bounded
          AbstractPolygon       ... in two dimensions

The zonotope/hyperrectangle/singleton layers live in their own modules.
"""

from typing import List

import numpy as np

from .base import LazySet, _unbounded_vector
from ..core.errors import PreconditionViolation
from ..core.lp import OPTIMAL, UNBOUNDED, is_feasible, maximize, vertices_from_constraints
from ..core.tolerance import _leq


class AbstractPolyhedron(LazySet):
    """
    Convex polyhedral set.

    Support queries default to one LP over ``constraints_list()``.
    """

    is_convex_type = True
    is_polyhedral_type = True

    def support_function(self, d):
        return maximize(d, self.constraints_list()).value

    def support_vector(self, d):
        res = maximize(d, self.constraints_list())
        if res.status == OPTIMAL:
            return res.x
        if res.status == UNBOUNDED:
            return _unbounded_vector(d)
        raise PreconditionViolation("the support vector of an empty set is undefined")

    def __contains__(self, x) -> bool:
        x = np.asarray(x)
        return all(_leq(np.dot(c.a, x), c.b) for c in self.constraints_list())

    def is_empty(self) -> bool:
        return not is_feasible(self.constraints_list(), self.dim)


class AbstractPolytope(AbstractPolyhedron):
    """Bounded convex polyhedral set."""

    is_bounded_type = True

    def is_bounded(self) -> bool:
        return True

    def vertices_list(self) -> List[np.ndarray]:
        return vertices_from_constraints(self.constraints_list(), self.dim)


class AbstractPolygon(AbstractPolytope):
    """Two-dimensional polytope."""

    @property
    def dim(self) -> int:
        return 2

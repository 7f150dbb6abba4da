"""
Star sets: affine images of a predicate set in generator coordinates.

A star with center ``c``, basis ``V`` (``n x m``) and predicate ``P``
(an ``m``-dimensional set) represents ``{c + V a : a in P}``.
"""

import numpy as np

from .base import LazySet, _to_vector
from .halfspace import HalfSpace
from .polyhedron import _ConstraintSet
from ..core.errors import DimensionMismatch, PreconditionViolation, UnsupportedOperation
from ..core.lp import OPTIMAL, _stack, default_lp_oracle


class Star(LazySet):
    """
    Star set ``{c + V a : a in P}``.

    Parameters
    ----------
    center : array_like
        Center ``c`` of shape (n,).
    basis : array_like
        Basis matrix ``V`` of shape (n, m).
    predicate : LazySet
        Set ``P`` of dimension m, in the basis coordinates. Stars are usually
        refined by intersection, which requires a constraint-based
        predicate (HPolygon, HPolytope or HPolyhedron).
    """

    is_convex_type = True

    def __init__(self, center, basis, predicate: LazySet):
        self.center = _to_vector(center)
        V = np.asarray(basis)
        if V.dtype.kind in "iub":
            V = V.astype(np.float64)
        if V.ndim != 2 or V.shape[0] != len(self.center):
            raise DimensionMismatch(V.shape[0], len(self.center), "star construction")
        if V.shape[1] != predicate.dim:
            raise DimensionMismatch(V.shape[1], predicate.dim, "star construction")
        self.basis = V
        self.predicate = predicate

    @property
    def dim(self) -> int:
        return len(self.center)

    def is_constraint_based(self) -> bool:
        return isinstance(self.predicate, _ConstraintSet)

    def is_convex(self) -> bool:
        return self.predicate.is_convex()

    def is_bounded(self) -> bool:
        return self.predicate.is_bounded()

    def is_empty(self) -> bool:
        return self.predicate.is_empty()

    def support_function(self, d):
        d = np.asarray(d)
        return np.dot(d, self.center) + self.predicate.support_function(self.basis.T @ d)

    def support_vector(self, d):
        d = np.asarray(d)
        return self.center + self.basis @ self.predicate.support_vector(self.basis.T @ d)

    def an_element(self):
        return self.center + self.basis @ self.predicate.an_element()

    def __contains__(self, x) -> bool:
        x = np.asarray(x, dtype=np.float64)
        if not self.predicate.is_polyhedral_type:
            raise UnsupportedOperation("membership", "Star", type(self.predicate).__name__)
        constraints = self.predicate.constraints_list()
        m = self.predicate.dim
        if constraints:
            A, b = _stack(constraints)
        else:
            A, b = None, None
        # x = c + V a with a in P
        res = default_lp_oracle().solve(np.zeros(m), A, b, A_eq=self.basis,
                                        b_eq=x - self.center)
        return res.status == OPTIMAL

    def constraints_list(self):
        """Constraints in ambient coordinates; needs an invertible basis."""
        V = self.basis
        if V.shape[0] != V.shape[1] or np.linalg.matrix_rank(V) < V.shape[0]:
            raise UnsupportedOperation("constraints_list", "Star",
                                       reason="the basis is not invertible")
        Vinv_T = np.linalg.inv(V).T
        result = []
        for c in self.predicate.constraints_list():
            a = Vinv_T @ c.a
            result.append(HalfSpace(a, c.b + np.dot(a, self.center)))
        return result

    def vertices_list(self):
        return [self.center + self.basis @ v for v in self.predicate.vertices_list()]

    def copy(self) -> "Star":
        if not hasattr(self.predicate, "copy"):
            raise PreconditionViolation(
                f"cannot copy a star with predicate {type(self.predicate).__name__}"
            )
        return Star(self.center.copy(), self.basis.copy(), self.predicate.copy())

    def __repr__(self):
        return f"Star(dim={self.dim}, predicate={self.predicate!r})"

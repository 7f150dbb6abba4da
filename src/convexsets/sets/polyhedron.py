"""
Polyhedra in constraint representation and polytopes in vertex
representation, plus the conversions between the two.

Conversions use ``scipy.spatial.ConvexHull`` in three or more dimensions and
the planar helpers of ``core.geometry`` in two.
"""

import warnings
from typing import List, Optional, Sequence

import numpy as np
from scipy.spatial import ConvexHull, QhullError

from .abstract import AbstractPolyhedron, AbstractPolytope
from .base import _to_vector
from .halfspace import HalfSpace
from ..core.errors import DimensionMismatch, PreconditionViolation
from ..core.geometry import convex_hull_2d, sort_by_angle
from ..core.lp import (
    LPOracle,
    OPTIMAL,
    default_lp_oracle,
    remove_redundant_constraints,
    remove_redundant_vertices,
)
from ..core.tolerance import get_tolerance, _isapprox


def _point_constraints(p: np.ndarray) -> List[HalfSpace]:
    constraints = []
    for i in range(len(p)):
        e = np.zeros(len(p))
        e[i] = 1.0
        constraints.append(HalfSpace(e, p[i]))
        constraints.append(HalfSpace(-e, -p[i]))
    return constraints


def _segment_constraints(p: np.ndarray, q: np.ndarray) -> List[HalfSpace]:
    d = q - p
    a = np.array([-d[1], d[0]])
    return [
        HalfSpace(a, np.dot(a, p)),
        HalfSpace(-a, -np.dot(a, p)),
        HalfSpace(d, np.dot(d, q)),
        HalfSpace(-d, -np.dot(d, p)),
    ]


def _affine_hull(V: np.ndarray):
    """
    Affine hull of the rows of ``V``.

    Returns
    -------
    (np.ndarray, np.ndarray, np.ndarray)
        A point ``c`` of the hull, an orthonormal basis of its directions
        (one per row) and an orthonormal basis of the orthogonal complement.
    """
    c = V.mean(axis=0)
    _, s, Wt = np.linalg.svd(V - c)
    tol = get_tolerance(float)
    rank = int(np.sum(s > max(tol.ztol, tol.rtol * s[0]))) if len(s) else 0
    return c, Wt[:rank], Wt[rank:]


def vertices_to_constraints(vertices: Sequence[np.ndarray], n: int) -> List[HalfSpace]:
    """
    Convert a vertex list into an equivalent list of half-spaces.

    Parameters
    ----------
    vertices : sequence of np.ndarray
        Points of shape (n,); need not be in any order and may contain
        non-extreme points.
    n : int
        Ambient dimension.

    Returns
    -------
    list of HalfSpace
        Constraints of the convex hull. In two dimensions they are ordered
        by the angle of their normal vectors.
    """
    vertices = [np.asarray(v, dtype=np.float64) for v in vertices]
    if not vertices:
        return [HalfSpace(np.zeros(n), -1.0)]
    if n == 1:
        lo = min(v[0] for v in vertices)
        hi = max(v[0] for v in vertices)
        return [HalfSpace([1.0], hi), HalfSpace([-1.0], -lo)]
    if n == 2:
        hull = convex_hull_2d(vertices)
        if len(hull) == 1:
            return _point_constraints(hull[0])
        if len(hull) == 2:
            return _segment_constraints(hull[0], hull[1])
        constraints = []
        for i, v in enumerate(hull):
            w = hull[(i + 1) % len(hull)]
            # outward normal of a CCW edge
            a = np.array([w[1] - v[1], v[0] - w[0]])
            constraints.append(HalfSpace(a, np.dot(a, v)))
        return sort_by_angle(constraints, key=lambda c: c.a)

    V = np.array(vertices)
    c, basis, normals = _affine_hull(V)
    if len(normals):
        # flat point set: equalities for the missing directions plus the
        # facets of the hull inside the affine hull, lifted back
        constraints = []
        for e in normals:
            constraints.append(HalfSpace(e, np.dot(e, c)))
            constraints.append(HalfSpace(-e, -np.dot(e, c)))
        if len(basis):
            for h in vertices_to_constraints(list((V - c) @ basis.T), len(basis)):
                a = basis.T @ h.a
                constraints.append(HalfSpace(a, h.b + np.dot(a, c)))
        return constraints

    try:
        hull = ConvexHull(V)
    except QhullError as e:
        raise PreconditionViolation(
            f"cannot convert a nearly degenerate vertex set to constraints: {e}"
        ) from e
    constraints = []
    for eq in hull.equations:
        a, offset = eq[:-1], eq[-1]
        h = HalfSpace(a, -offset)
        if not any(_isapprox(h.a, c.a) and _isapprox(h.b, c.b) for c in constraints):
            constraints.append(h)
    return constraints


def convex_hull(vertices: Sequence[np.ndarray], n: int,
                oracle: Optional[LPOracle] = None) -> List[np.ndarray]:
    """
    Extreme points of a finite point set.

    Planar inputs are ordered counter-clockwise. In higher dimensions Qhull
    runs inside the affine hull of the points; if it still fails the slower
    LP pruning takes over.
    """
    vertices = [np.asarray(v, dtype=np.float64) for v in vertices]
    if len(vertices) <= 1:
        return vertices
    if n == 1:
        lo = min(vertices, key=lambda v: v[0])
        hi = max(vertices, key=lambda v: v[0])
        return [lo] if _isapprox(lo, hi) else [lo, hi]
    if n == 2:
        return convex_hull_2d(vertices)
    V = np.array(vertices)
    c, basis, _ = _affine_hull(V)
    if len(basis) == 0:
        return [vertices[0]]
    Y = (V - c) @ basis.T
    if len(basis) == 1:
        return [vertices[int(np.argmin(Y[:, 0]))], vertices[int(np.argmax(Y[:, 0]))]]
    try:
        hull = ConvexHull(Y)
        return [vertices[i] for i in hull.vertices]
    except QhullError:
        warnings.warn("degenerate point set, falling back to LP-based vertex pruning",
                      RuntimeWarning)
        return remove_redundant_vertices(vertices, oracle)


class _ConstraintSet:
    """Mixin for H-represented sets with a mutable constraint list."""

    def constraints_list(self):
        return self.constraints

    def add_constraint(self, constraint: HalfSpace):
        """Append ``constraint`` in place and return the set."""
        if constraint.dim != self.dim:
            raise DimensionMismatch(constraint.dim, self.dim, "constraint addition")
        self.constraints.append(constraint)
        return self

    def remove_redundant_constraints(self, oracle: Optional[LPOracle] = None) -> bool:
        """
        Remove redundant constraints in place.

        Returns
        -------
        bool
            False if the constraints are infeasible (the list is left
            untouched), True otherwise.
        """
        pruned = remove_redundant_constraints(self.constraints, self.dim, oracle)
        if pruned is None:
            return False
        self.constraints[:] = pruned
        return True

    def copy(self):
        return type(self)(list(self.constraints), dim=self.dim)


class HPolyhedron(_ConstraintSet, AbstractPolyhedron):
    """
    Convex polyhedron ``{x : A x <= b}`` given by a list of half-spaces.

    The list may be empty (the universe), in which case ``dim`` must be
    passed explicitly.
    """

    def __init__(self, constraints: Sequence[HalfSpace] = (), dim: Optional[int] = None):
        self.constraints = list(constraints)
        if dim is None:
            if not self.constraints:
                raise PreconditionViolation("the dimension of an unconstrained polyhedron is unknown")
            dim = self.constraints[0].dim
        self._dim = int(dim)
        for c in self.constraints:
            if c.dim != self._dim:
                raise DimensionMismatch(c.dim, self._dim, "polyhedron construction")

    @property
    def dim(self) -> int:
        return self._dim

    def __repr__(self):
        return f"{type(self).__name__}(dim={self._dim}, constraints={len(self.constraints)})"


class HPolytope(_ConstraintSet, AbstractPolytope):
    """
    Bounded convex polyhedron given by a list of half-spaces.

    Boundedness is assumed, not checked, unless ``check_boundedness`` is set.
    """

    def __init__(self, constraints: Sequence[HalfSpace] = (), dim: Optional[int] = None,
                 check_boundedness: bool = False):
        self.constraints = list(constraints)
        if dim is None:
            if not self.constraints:
                raise PreconditionViolation("the dimension of an unconstrained polytope is unknown")
            dim = self.constraints[0].dim
        self._dim = int(dim)
        for c in self.constraints:
            if c.dim != self._dim:
                raise DimensionMismatch(c.dim, self._dim, "polytope construction")
        if check_boundedness and not HPolyhedron(self.constraints, dim=self._dim).is_bounded():
            raise PreconditionViolation("the constraints do not describe a bounded set")

    @property
    def dim(self) -> int:
        return self._dim

    def __repr__(self):
        return f"{type(self).__name__}(dim={self._dim}, constraints={len(self.constraints)})"


class VPolytope(AbstractPolytope):
    """Polytope given as the convex hull of a finite list of vertices."""

    def __init__(self, vertices: Sequence, dim: Optional[int] = None):
        self.vertices = [_to_vector(v) for v in vertices]
        if dim is None:
            if not self.vertices:
                raise PreconditionViolation("the dimension of a polytope without vertices is unknown")
            dim = len(self.vertices[0])
        self._dim = int(dim)
        for v in self.vertices:
            if len(v) != self._dim:
                raise DimensionMismatch(len(v), self._dim, "polytope construction")

    @property
    def dim(self) -> int:
        return self._dim

    def _fields(self):
        return (np.array(self.vertices),)

    def vertices_list(self):
        return self.vertices

    def constraints_list(self):
        return vertices_to_constraints(self.vertices, self._dim)

    def is_empty(self) -> bool:
        return len(self.vertices) == 0

    def support_function(self, d):
        if not self.vertices:
            return -np.inf
        return max(np.dot(d, v) for v in self.vertices)

    def support_vector(self, d):
        if not self.vertices:
            raise PreconditionViolation("the support vector of an empty set is undefined")
        return max(self.vertices, key=lambda v: np.dot(d, v))

    def __contains__(self, x) -> bool:
        x = np.asarray(x, dtype=np.float64)
        if not self.vertices:
            return False
        if len(self.vertices) == 1:
            return _isapprox(x, self.vertices[0])
        # x is a convex combination of the vertices
        V = np.array(self.vertices, dtype=np.float64)
        m = len(V)
        A_eq = np.vstack([V.T, np.ones((1, m))])
        b_eq = np.concatenate([x, [1.0]])
        res = default_lp_oracle().solve(np.zeros(m), A_eq=A_eq, b_eq=b_eq, bounds=(0, None))
        return res.status == OPTIMAL

    def remove_redundant_vertices(self, oracle: Optional[LPOracle] = None) -> "VPolytope":
        """Drop vertices inside the hull of the others, in place."""
        self.vertices[:] = remove_redundant_vertices(self.vertices, oracle)
        return self

    def tohrep(self) -> HPolytope:
        return HPolytope(self.constraints_list(), dim=self._dim)


def constrained_dimensions(P: AbstractPolyhedron) -> List[int]:
    """Indices of the coordinates that appear with a nonzero coefficient in ``P``."""
    dims = set()
    for c in P.constraints_list():
        dims.update(int(i) for i in np.flatnonzero(c.a))
    return sorted(dims)


def project_unconstrained(P: AbstractPolyhedron, block: Sequence[int]) -> HPolyhedron:
    """
    Projection of ``P`` onto the coordinates ``block``.

    Only valid when ``P`` does not constrain any coordinate outside
    ``block``; then the projection just drops the zero coefficients.
    """
    block = list(block)
    outside = [i for i in constrained_dimensions(P) if i not in block]
    if outside:
        raise PreconditionViolation(
            f"the polyhedron constrains dimensions {outside} outside of the projection block"
        )
    constraints = [HalfSpace(c.a[block], c.b) for c in P.constraints_list()]
    return HPolyhedron(constraints, dim=len(block))

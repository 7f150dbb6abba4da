"""
Concrete linear maps.

``linear_map(M, X)`` computes a concrete representation of ``{M x : x in X}``
(as opposed to the lazy ``LinearMap`` wrapper). The output kind depends on
the input kind; see the individual handlers.
"""

from functools import singledispatch

import numpy as np

from ..core.errors import DimensionMismatch, UnsupportedOperation
from ..sets import (
    AbstractHPolygon,
    AbstractPolyhedron,
    AbstractPolytope,
    AbstractSingleton,
    AbstractZonotope,
    Ball2,
    CartesianProductArray,
    EmptySet,
    HalfSpace,
    HPolygon,
    HPolyhedron,
    HPolytope,
    Interval,
    LazySet,
    LinearMap,
    LineSegment,
    Singleton,
    Star,
    UnionSet,
    UnionSetArray,
    Universe,
    VPolygon,
    VPolytope,
    Zonotope,
)
from ..core.tolerance import _isapprox


def _is_invertible(M: np.ndarray) -> bool:
    return M.shape[0] == M.shape[1] and np.linalg.matrix_rank(M) == M.shape[0]


def linear_map(M, X: LazySet) -> LazySet:
    """
    Concrete linear map of a set.

    Parameters
    ----------
    M : array_like
        Matrix of shape (m, n).
    X : LazySet
        Set of dimension n.

    Returns
    -------
    LazySet
        Concrete set of dimension m.
    """
    M = np.asarray(M)
    if M.dtype.kind in "iub":
        M = M.astype(np.float64)
    if M.ndim != 2 or M.shape[1] != X.dim:
        raise DimensionMismatch(M.shape[-1] if M.ndim else 0, X.dim, "linear map")
    return _linear_map(X, M)


def _vertex_result(vertices, m: int) -> LazySet:
    if m == 2:
        return VPolygon(vertices)
    return VPolytope(vertices, dim=m)


@singledispatch
def _linear_map(X, M):
    raise UnsupportedOperation("linear_map", type(X).__name__)


@_linear_map.register
def _(X: EmptySet, M):
    return EmptySet(M.shape[0])


@_linear_map.register
def _(X: AbstractSingleton, M):
    return Singleton(M @ X.element())


@_linear_map.register
def _(X: Interval, M):
    if M.shape == (1, 1):
        lo, hi = sorted((M[0, 0] * X.lo, M[0, 0] * X.hi))
        return Interval(lo, hi)
    return Zonotope(M @ X.center(), M @ X.genmat())


@_linear_map.register
def _(X: LineSegment, M):
    if M.shape[0] == 2:
        return LineSegment(M @ X.p, M @ X.q)
    return Zonotope(M @ X.center(), M @ X.genmat())


@_linear_map.register
def _(X: AbstractZonotope, M):
    return Zonotope(M @ X.center(), M @ X.genmat())


@_linear_map.register
def _(X: VPolygon, M):
    return _vertex_result([M @ v for v in X.vertices_list()], M.shape[0])


@_linear_map.register
def _(X: VPolytope, M):
    return _vertex_result([M @ v for v in X.vertices_list()], M.shape[0])


def _transformed_constraints(X: AbstractPolyhedron, M):
    # y = M x  =>  <a, x> <= b  iff  <M^{-T} a, y> <= b
    Minv_T = np.linalg.inv(M).T
    return [HalfSpace(Minv_T @ c.a, c.b) for c in X.constraints_list()]


@_linear_map.register
def _(X: AbstractPolytope, M):
    if _is_invertible(M):
        constraints = _transformed_constraints(X, M)
        if isinstance(X, AbstractHPolygon):
            return HPolygon(constraints)
        return HPolytope(constraints, dim=M.shape[0])
    return _vertex_result([M @ v for v in X.vertices_list()], M.shape[0])


@_linear_map.register
def _(X: AbstractPolyhedron, M):
    if not _is_invertible(M):
        raise UnsupportedOperation("linear_map", type(X).__name__,
                                   reason="a non-invertible map of an unbounded polyhedron")
    return HPolyhedron(_transformed_constraints(X, M), dim=M.shape[0])


@_linear_map.register
def _(X: Universe, M):
    if not _is_invertible(M):
        raise UnsupportedOperation("linear_map", "Universe",
                                   reason="the image of a non-invertible map is a subspace")
    return Universe(M.shape[0])


@_linear_map.register
def _(X: Ball2, M):
    # only maps that preserve balls: scaled orthogonal matrices
    gram = M.T @ M
    alpha2 = gram[0, 0]
    if M.shape[0] != M.shape[1] or not _isapprox(gram, alpha2 * np.eye(M.shape[1])):
        raise UnsupportedOperation("linear_map", "Ball2",
                                   reason="the map is not a scaled orthogonal matrix")
    return Ball2(M @ X.center, np.sqrt(alpha2) * X.radius)


@_linear_map.register
def _(X: Star, M):
    return Star(M @ X.center, M @ X.basis, X.predicate)


@_linear_map.register
def _(X: LinearMap, M):
    return _linear_map(X.X, M @ X.M)


@_linear_map.register
def _(X: UnionSet, M):
    return UnionSet(_linear_map(X.X, M), _linear_map(X.Y, M))


@_linear_map.register
def _(X: UnionSetArray, M):
    return UnionSetArray([_linear_map(Y, M) for Y in X.sets], dim=M.shape[0])


@_linear_map.register
def _(X: CartesianProductArray, M):
    if all(Y.is_bounded_type and Y.is_polyhedral_type for Y in X.blocks):
        return _vertex_result([M @ v for v in X.vertices_list()], M.shape[0])
    if X.is_polyhedral() and _is_invertible(M):
        return HPolyhedron(_transformed_constraints(X, M), dim=M.shape[0])
    raise UnsupportedOperation("linear_map", "CartesianProductArray")

"""
Concrete translations, affine maps and Minkowski sums.

``affine_map(M, X, v)`` is ``translate(linear_map(M, X), v)``; the lazy
``AffineMap`` and ``MinkowskiSum`` wrappers are materialized through the
functions here.
"""

from functools import singledispatch

import numpy as np

from .linear_map import _linear_map, _vertex_result, linear_map
from ..core.errors import DimensionMismatch, UnsupportedOperation
from ..sets import (
    AbstractHPolygon,
    AbstractHyperrectangle,
    AbstractPolyhedron,
    AbstractPolytope,
    AbstractSingleton,
    AbstractZonotope,
    AffineMap,
    Ball2,
    CartesianProductArray,
    EmptySet,
    HalfSpace,
    HPolygon,
    HPolyhedron,
    HPolytope,
    Hyperplane,
    Hyperrectangle,
    Interval,
    LazySet,
    LinearMap,
    LineSegment,
    MinkowskiSum,
    Singleton,
    Star,
    UnionSet,
    UnionSetArray,
    Universe,
    VPolygon,
    VPolytope,
    Zonotope,
)
from ..sets.base import _to_vector
from ..sets.polyhedron import convex_hull


def translate(X: LazySet, v) -> LazySet:
    """
    Concrete translation ``{x + v : x in X}``.

    Parameters
    ----------
    X : LazySet
        Set of dimension n.
    v : array_like
        Translation vector of shape (n,).

    Returns
    -------
    LazySet
        Translated set, usually of the same kind as ``X``.
    """
    v = _to_vector(v)
    if len(v) != X.dim:
        raise DimensionMismatch(len(v), X.dim, "translation")
    return _translate(X, v)


def affine_map(M, X: LazySet, v) -> LazySet:
    """
    Concrete affine map ``{M x + v : x in X}``.

    Parameters
    ----------
    M : array_like
        Matrix of shape (m, n).
    X : LazySet
        Set of dimension n.
    v : array_like
        Translation of shape (m,).
    """
    v = _to_vector(v)
    M = np.asarray(M)
    if M.ndim == 2 and len(v) != M.shape[0]:
        raise DimensionMismatch(len(v), M.shape[0], "affine map")
    return translate(linear_map(M, X), v)


@singledispatch
def _translate(X, v):
    raise UnsupportedOperation("translate", type(X).__name__)


@_translate.register
def _(X: EmptySet, v):
    return X


@_translate.register
def _(X: Universe, v):
    return X


@_translate.register
def _(X: AbstractSingleton, v):
    return Singleton(X.element() + v)


@_translate.register
def _(X: Interval, v):
    return Interval(X.lo + v[0], X.hi + v[0])


@_translate.register
def _(X: AbstractHyperrectangle, v):
    return Hyperrectangle(X.center() + v, X.radius_hyperrectangle())


@_translate.register
def _(X: LineSegment, v):
    return LineSegment(X.p + v, X.q + v)


@_translate.register
def _(X: AbstractZonotope, v):
    return Zonotope(X.center() + v, X.genmat())


@_translate.register
def _(X: VPolygon, v):
    return VPolygon([w + v for w in X.vertices_list()], apply_convex_hull=False)


@_translate.register
def _(X: VPolytope, v):
    return VPolytope([w + v for w in X.vertices_list()], dim=X.dim)


def _shifted(c: HalfSpace, v) -> HalfSpace:
    return HalfSpace(c.a, c.b + np.dot(c.a, v))


@_translate.register
def _(X: HalfSpace, v):
    return _shifted(X, v)


@_translate.register
def _(X: Hyperplane, v):
    # keeps Line2D a Line2D
    return type(X)(X.a, X.b + np.dot(X.a, v))


@_translate.register
def _(X: AbstractHPolygon, v):
    return HPolygon([_shifted(c, v) for c in X.constraints_list()], sort_constraints=False)


@_translate.register
def _(X: AbstractPolyhedron, v):
    constraints = [_shifted(c, v) for c in X.constraints_list()]
    if isinstance(X, AbstractPolytope):
        return HPolytope(constraints, dim=X.dim)
    return HPolyhedron(constraints, dim=X.dim)


@_translate.register
def _(X: Ball2, v):
    return Ball2(X.center + v, X.radius)


@_translate.register
def _(X: Star, v):
    return Star(X.center + v, X.basis, X.predicate)


@_translate.register
def _(X: UnionSet, v):
    return UnionSet(_translate(X.X, v), _translate(X.Y, v))


@_translate.register
def _(X: UnionSetArray, v):
    return UnionSetArray([_translate(Y, v) for Y in X.sets], dim=X.dim)


@_translate.register
def _(X: CartesianProductArray, v):
    blocks, start = [], 0
    for B in X.blocks:
        blocks.append(_translate(B, v[start:start + B.dim]))
        start += B.dim
    return CartesianProductArray(blocks)


@_translate.register
def _(X: LinearMap, v):
    return _translate(_linear_map(X.X, X.M), v)


@_translate.register
def _(X: AffineMap, v):
    return _translate(affine_map(X.M, X.X, X.v), v)


@_translate.register
def _(X: MinkowskiSum, v):
    return _translate(minkowski_sum(X.X, X.Y), v)


def minkowski_sum(X: LazySet, Y: LazySet) -> LazySet:
    """
    Concrete Minkowski sum ``{x + y : x in X, y in Y}``.

    Structured pairs keep their structure (hyperrectangles, zonotopes,
    Euclidean balls); other bounded polyhedral pairs are summed vertex by
    vertex.

    Raises
    ------
    UnsupportedOperation
        If no concrete representation is available for the pair.
    """
    if X.dim != Y.dim:
        raise DimensionMismatch(X.dim, Y.dim, "Minkowski sum")
    if isinstance(X, EmptySet) or isinstance(Y, EmptySet):
        return EmptySet(X.dim)
    if isinstance(X, Universe) or isinstance(Y, Universe):
        return Universe(X.dim)
    if isinstance(X, AbstractSingleton):
        return translate(Y, X.element())
    if isinstance(Y, AbstractSingleton):
        return translate(X, Y.element())
    if isinstance(X, Interval) and isinstance(Y, Interval):
        return Interval(X.lo + Y.lo, X.hi + Y.hi)
    if isinstance(X, AbstractHyperrectangle) and isinstance(Y, AbstractHyperrectangle):
        return Hyperrectangle(X.center() + Y.center(),
                              X.radius_hyperrectangle() + Y.radius_hyperrectangle())
    if isinstance(X, AbstractZonotope) and isinstance(Y, AbstractZonotope):
        return Zonotope(X.center() + Y.center(), np.hstack([X.genmat(), Y.genmat()]))
    if isinstance(X, Ball2) and isinstance(Y, Ball2):
        return Ball2(X.center + Y.center, X.radius + Y.radius)
    if X.is_bounded_type and Y.is_bounded_type and X.is_polyhedral_type and Y.is_polyhedral_type:
        points = [v + w for v in X.vertices_list() for w in Y.vertices_list()]
        if X.dim == 1:
            lo, hi = min(p[0] for p in points), max(p[0] for p in points)
            return Interval(lo, hi)
        return _vertex_result(convex_hull(points, X.dim), X.dim)
    raise UnsupportedOperation("minkowski_sum", type(X).__name__, type(Y).__name__)


@_linear_map.register
def _(X: AffineMap, M):
    return affine_map(M @ X.M, X.X, M @ X.v)


@_linear_map.register
def _(X: MinkowskiSum, M):
    return minkowski_sum(_linear_map(X.X, M), _linear_map(X.Y, M))

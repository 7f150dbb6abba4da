"""
Concrete intersection of two sets.

``intersection(X, Y)`` checks dimensions, short-circuits empty sets and
universes, and then runs the most specific registered algorithm for the
operand classes. Algorithms receive the keyword options passed to
``intersection``:

- oracle : LPOracle used for feasibility and redundancy checks
- prune : remove redundant constraints from polyhedral results (default True)
- apply_convex_hull : order vertex results as a convex hull (default True)

Example
-------
>>> from convexsets import Hyperrectangle, intersection
>>> B1 = Hyperrectangle([0.0, 0.0], [1.0, 1.0])
>>> B2 = Hyperrectangle([1.5, 0.0], [1.0, 1.0])
>>> intersection(B1, B2).high()
array([1., 1.])
"""

import logging
from typing import List, Sequence

import numpy as np

from .dispatch import DispatchRegistry
from .affine_map import affine_map, minkowski_sum
from .linear_map import linear_map
from ..core.errors import DimensionMismatch, PreconditionViolation, UnsupportedOperation
from ..core.geometry import angle_leq, convex_hull_2d, right_turn, same_direction
from ..core.lp import remove_redundant_vertices, vertices_from_constraints
from ..core.tolerance import isapproxzero, _geq, _isapprox, _leq
from ..sets import (
    AbstractHPolygon,
    AbstractHyperrectangle,
    AbstractPolygon,
    AbstractPolyhedron,
    AbstractPolytope,
    AbstractSingleton,
    AbstractZonotope,
    AffineMap,
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
    Line2D,
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
    constrained_dimensions,
    project_unconstrained,
    same_block_structure,
    vertices_to_constraints,
)

logger = logging.getLogger(__name__)

_registry = DispatchRegistry("intersection")
register = _registry.register


def intersection(X: LazySet, Y: LazySet, **options) -> LazySet:
    """
    Concrete intersection of two sets.

    Parameters
    ----------
    X, Y : LazySet
        Sets of the same dimension.
    **options
        Forwarded to the selected algorithm (``oracle``, ``prune``,
        ``apply_convex_hull``).

    Returns
    -------
    LazySet
        A set representing ``X ∩ Y``. Empty results are ``EmptySet``
        unless stated otherwise by the algorithm.

    Raises
    ------
    DimensionMismatch
        If the operands live in different dimensions.
    UnsupportedOperation
        If no algorithm exists for the operand kinds.
    """
    if X.dim != Y.dim:
        raise DimensionMismatch(X.dim, Y.dim)
    if isinstance(X, EmptySet):
        return X
    if isinstance(Y, EmptySet):
        return Y
    if isinstance(Y, Universe):
        return X
    if isinstance(X, Universe):
        return Y
    return _registry(X, Y, **options)


# ---------------------------------------------------------------------------
# singletons
# ---------------------------------------------------------------------------

def _intersection_singleton(S: AbstractSingleton, X: LazySet, **options) -> LazySet:
    return S if S.element() in X else EmptySet(S.dim)


register(AbstractSingleton, LazySet)(_intersection_singleton)
# disambiguations against the other generic rules
for _other in (AbstractHyperrectangle, Interval, HalfSpace, AbstractPolyhedron,
               UnionSet, UnionSetArray, LinearMap, CartesianProductArray,
               AffineMap, MinkowskiSum):
    register(AbstractSingleton, _other)(_intersection_singleton)


@register(AbstractSingleton, AbstractSingleton, commutative=False)
def _intersection_singleton_singleton(S1, S2, **options):
    return S1 if _isapprox(S1.element(), S2.element()) else EmptySet(S1.dim)


# ---------------------------------------------------------------------------
# lines and segments in the plane
# ---------------------------------------------------------------------------

@register(Line2D, Line2D, commutative=False)
def _intersection_line_line(L1: Line2D, L2: Line2D, **options) -> LazySet:
    det = right_turn(L1.a, L2.a)
    if isapproxzero(det):
        # parallel: identical iff the offsets agree after rescaling
        k = int(np.argmax(np.abs(L1.a)))
        if _isapprox(L1.b * L2.a[k], L2.b * L1.a[k]):
            return L1
        return EmptySet(2)
    x = (L1.b * L2.a[1] - L1.a[1] * L2.b) / det
    y = (L1.a[0] * L2.b - L1.b * L2.a[0]) / det
    return Singleton([x, y])


@register(LineSegment, Line2D)
def _intersection_segment_line(LS: LineSegment, L2: Line2D, **options) -> LazySet:
    if LS.is_degenerate():
        return _intersection_singleton(Singleton(LS.p), L2)
    L1 = Line2D.from_points(LS.p, LS.q)
    m = _intersection_line_line(L1, L2)
    if m is L1:
        return LS
    if isinstance(m, Singleton) and m.element() in LS:
        return m
    return EmptySet(2)


@register(LineSegment, LineSegment, commutative=False)
def _intersection_segment_segment(LS1: LineSegment, LS2: LineSegment, **options) -> LazySet:
    if LS1.is_degenerate():
        return _intersection_singleton(Singleton(LS1.p), LS2)
    if LS2.is_degenerate():
        return _intersection_singleton(Singleton(LS2.p), LS1)

    L1 = Line2D.from_points(LS1.p, LS1.q)
    m = _intersection_line_line(L1, Line2D.from_points(LS2.p, LS2.q))
    if m is L1:
        # same line: overlap of the bounding boxes
        p1 = max(min(LS1.p[0], LS1.q[0]), min(LS2.p[0], LS2.q[0]))
        p2 = max(min(LS1.p[1], LS1.q[1]), min(LS2.p[1], LS2.q[1]))
        q1 = min(max(LS1.p[0], LS1.q[0]), max(LS2.p[0], LS2.q[0]))
        q2 = min(max(LS1.p[1], LS1.q[1]), max(LS2.p[1], LS2.q[1]))
        if _isapprox(p1, q1) and _isapprox(p2, q2):
            return Singleton([p1, p2])
        if _leq(p1, q1) and _leq(p2, q2):
            d = LS1.q - LS1.p
            if d[0] * d[1] < 0:
                # descending segment: the box corners are the other diagonal
                return LineSegment([p1, q2], [q1, p2])
            return LineSegment([p1, p2], [q1, q2])
        return EmptySet(2)
    if isinstance(m, Singleton) and m.element() in LS1 and m.element() in LS2:
        return m
    return EmptySet(2)


# ---------------------------------------------------------------------------
# hyperrectangles and intervals
# ---------------------------------------------------------------------------

@register(AbstractHyperrectangle, AbstractHyperrectangle)
def _intersection_hyperrectangle(H1, H2, **options) -> LazySet:
    low = np.maximum(H1.low(), H2.low())
    high = np.minimum(H1.high(), H2.high())
    if np.any(high < low):
        return EmptySet(H1.dim)
    return Hyperrectangle.from_bounds(low, high)


@register(Interval, Interval, commutative=False)
def _intersection_interval_interval(X: Interval, Y: Interval, **options) -> LazySet:
    lo = max(X.lo, Y.lo)
    hi = min(X.hi, Y.hi)
    if lo > hi:
        return EmptySet(1)
    return Interval(lo, hi)


def _intersection_interval_halfspace(lo, hi, a, b):
    """
    Clip ``[lo, hi]`` with ``a x <= b`` (``a != 0``).

    Returns
    -------
    (bool, float, float)
        Emptiness flag and the clipped bounds.
    """
    c = b / a
    if a > 0:
        if c < lo:
            return True, lo, hi
        return False, lo, min(c, hi)
    if c > hi:
        return True, lo, hi
    return False, max(c, lo), hi


@register(Interval, HalfSpace)
def _intersection_interval_hs(X: Interval, H: HalfSpace, **options) -> LazySet:
    a = H.a[0]
    if isapproxzero(a):
        return X if _geq(H.b, 0) else EmptySet(1)
    empty, lo, hi = _intersection_interval_halfspace(X.lo, X.hi, a, H.b)
    if empty:
        return EmptySet(1)
    return Interval(lo, hi)


@register(Interval, Hyperplane)
def _intersection_interval_hyperplane(X: Interval, H: Hyperplane, **options) -> LazySet:
    p = H.b / H.a[0]
    if _leq(X.lo, p) and _leq(p, X.hi):
        return Singleton([p])
    return EmptySet(1)


def _intersection_interval_convex(X: Interval, Y: LazySet, **options) -> LazySet:
    if not Y.is_convex():
        raise UnsupportedOperation("intersection", "Interval", type(Y).__name__,
                                   reason="the second set is not known to be convex")
    lo = max(X.lo, -Y.support_function(np.array([-1.0])))
    hi = min(X.hi, Y.support_function(np.array([1.0])))
    if _isapprox(lo, hi):
        return Singleton([lo])
    if lo < hi:
        return Interval(lo, hi)
    return EmptySet(1)


register(Interval, LazySet)(_intersection_interval_convex)
for _other in (AbstractHyperrectangle, AbstractPolyhedron, LinearMap, CartesianProductArray,
               AffineMap, MinkowskiSum):
    register(Interval, _other)(_intersection_interval_convex)


@register(AbstractHyperrectangle, HalfSpace)
def _intersection_hyperrectangle_hs(B, H: HalfSpace, **options) -> LazySet:
    nonzero = [i for i in range(H.dim) if not isapproxzero(H.a[i])]
    if not nonzero:
        return B if _geq(H.b, 0) else EmptySet(B.dim)
    if len(nonzero) > 1:
        return _intersection_poly(B, H, **options)
    i = nonzero[0]
    empty, lo, hi = _intersection_interval_halfspace(B.low(i), B.high(i), H.a[i], H.b)
    if empty:
        return EmptySet(B.dim)
    # keep the operand's dtype (exact rationals stay exact)
    low = np.array(B.low(), copy=True)
    high = np.array(B.high(), copy=True)
    low[i] = lo
    high[i] = hi
    return Hyperrectangle.from_bounds(low, high)


# ---------------------------------------------------------------------------
# polygons and polyhedra
# ---------------------------------------------------------------------------

def _is_tighter(h1: HalfSpace, h2: HalfSpace) -> bool:
    # h1 and h2 point in the same direction; compare offsets on a common scale
    k = int(np.argmax(np.abs(h1.a)))
    return h1.b * (h2.a[k] / h1.a[k]) <= h2.b


@register(AbstractHPolygon, AbstractHPolygon)
def _intersection_hpolygon(P1, P2, prune: bool = True, oracle=None, **options) -> LazySet:
    c1 = P1.constraints_list()
    c2 = P2.constraints_list()
    if not c1:
        return P2
    if not c2:
        return P1
    for P in (P1, P2):
        if not P.is_sorted():
            raise PreconditionViolation("the polygon constraints are not sorted by angle")

    # merge two angle-sorted lists; keep the tighter of parallel constraints
    merged = []
    i = j = 0
    while i < len(c1) and j < len(c2):
        h1, h2 = c1[i], c2[j]
        if same_direction(h1.a, h2.a):
            merged.append(h1 if _is_tighter(h1, h2) else h2)
            i += 1
            j += 1
        elif _angle_lt(h1.a, h2.a):
            merged.append(h1)
            i += 1
        else:
            merged.append(h2)
            j += 1
    merged.extend(c1[i:])
    merged.extend(c2[j:])

    P = HPolygon(merged, sort_constraints=False)
    if prune and not P.remove_redundant_constraints(oracle):
        logger.debug("polygon intersection is empty")
        return EmptySet(2)
    return P


def _angle_lt(u, v) -> bool:
    return angle_leq(u, v) and not same_direction(u, v)


@register(AbstractPolygon, AbstractPolygon)
def _intersection_polygon(P1, P2, **options) -> LazySet:
    return _intersection_hpolygon(P1.tohrep(), P2.tohrep(), **options)


@register(AbstractPolyhedron, AbstractPolyhedron)
def _intersection_poly(P1, P2, oracle=None, prune: bool = True, **options) -> LazySet:
    if isinstance(P1, AbstractPolytope) or isinstance(P2, AbstractPolytope):
        result_type = HPolytope
    else:
        result_type = HPolyhedron
    constraints = list(P1.constraints_list()) + list(P2.constraints_list())
    Q = result_type(constraints, dim=P1.dim)
    if prune and not Q.remove_redundant_constraints(oracle):
        logger.debug("%s intersection is empty", result_type.__name__)
        return EmptySet(P1.dim)
    return Q


def _clip(subject: List[np.ndarray], clip: List[np.ndarray]) -> List[np.ndarray]:
    """
    Sutherland-Hodgman clipping of a convex polygon by a convex polygon.

    Both vertex lists are in counter-clockwise order.
    """
    def inside(p, a, b):
        turn = right_turn(a, b, p)
        return turn >= 0 or isapproxzero(turn)

    def crossing(s, e, a, b):
        d_se = e - s
        d_ab = b - a
        denom = right_turn(d_ab, d_se)
        if isapproxzero(denom):
            return e
        t = right_turn(d_ab, a - s) / denom
        return s + t * d_se

    output = list(subject)
    for k in range(len(clip)):
        if not output:
            break
        a, b = clip[k], clip[(k + 1) % len(clip)]
        candidates, output = output, []
        s = candidates[-1]
        for e in candidates:
            if inside(e, a, b):
                if not inside(s, a, b):
                    output.append(crossing(s, e, a, b))
                output.append(e)
            elif inside(s, a, b):
                output.append(crossing(s, e, a, b))
            s = e
    return output


def _intersection_vertices_2d(v1: Sequence[np.ndarray], v2: Sequence[np.ndarray]) -> List[np.ndarray]:
    v1 = convex_hull_2d(v1)
    v2 = convex_hull_2d(v2)
    if not v1 or not v2:
        return []
    if len(v1) < 3 or len(v2) < 3:
        # a point or a segment: clipping needs areas, use the constraints
        constraints = vertices_to_constraints(v1, 2) + vertices_to_constraints(v2, 2)
        return convex_hull_2d(vertices_from_constraints(constraints, 2))
    return convex_hull_2d(_clip(v1, v2))


def _intersection_vrep(P1, P2, oracle=None, apply_convex_hull: bool = True, **options):
    """Vertex list of the intersection of two V-represented polytopes."""
    n = P1.dim
    v1, v2 = P1.vertices_list(), P2.vertices_list()
    if not v1 or not v2:
        return []
    if n == 1:
        lo = max(min(v[0] for v in v1), min(v[0] for v in v2))
        hi = min(max(v[0] for v in v1), max(v[0] for v in v2))
        if lo > hi:
            return []
        return [np.array([lo])] if _isapprox(lo, hi) else [np.array([lo]), np.array([hi])]
    if n == 2:
        vertices = _intersection_vertices_2d(v1, v2)
        return vertices if apply_convex_hull else list(vertices)
    constraints = P1.constraints_list() + P2.constraints_list()
    vertices = vertices_from_constraints(constraints, n)
    if not vertices:
        return []
    return remove_redundant_vertices(vertices, oracle)


@register(VPolygon, VPolygon)
def _intersection_vpolygon(P1, P2, **options) -> LazySet:
    vertices = _intersection_vrep(P1, P2, **options)
    if not vertices:
        return EmptySet(2)
    return VPolygon(vertices, apply_convex_hull=False)


@register(VPolytope, VPolytope)
def _intersection_vpolytope(P1, P2, **options) -> LazySet:
    vertices = _intersection_vrep(P1, P2, **options)
    if not vertices:
        return EmptySet(P1.dim)
    return VPolytope(vertices, dim=P1.dim)


register(VPolygon, VPolytope)(_intersection_vpolytope)


# ---------------------------------------------------------------------------
# zonotopes
# ---------------------------------------------------------------------------

@register(AbstractZonotope, HalfSpace)
def _intersection_zonotope_hs(Z, H: HalfSpace, **options) -> LazySet:
    # both checks use only support functions
    if not _leq(-Z.support_function(-H.a), H.b):
        return EmptySet(Z.dim)
    if _leq(Z.support_function(H.a), H.b):
        return Z
    return _intersection_poly(Z, H, **options)


# ---------------------------------------------------------------------------
# Cartesian products
# ---------------------------------------------------------------------------

@register(CartesianProductArray, CartesianProductArray)
def _intersection_cpa(X, Y, **options) -> LazySet:
    if not same_block_structure(X.blocks, Y.blocks):
        raise PreconditionViolation(
            f"block structures {X.block_structure()} and {Y.block_structure()} differ"
        )
    return CartesianProductArray([intersection(A, B, **options) for A, B in zip(X.blocks, Y.blocks)])


@register(CartesianProductArray, AbstractPolyhedron)
def _intersection_cpa_polyhedron(X, P, **options) -> LazySet:
    dims = constrained_dimensions(P)
    if not dims:
        return EmptySet(X.dim) if P.is_empty() else X

    # minimal contiguous run of blocks covering the constrained dimensions
    first, last = dims[0], dims[-1]
    start_block = end_block = None
    start_dim = end_dim = 0
    lower = 0
    for i, block in enumerate(X.blocks):
        upper = lower + block.dim - 1
        if start_block is None and lower <= first <= upper:
            start_block, start_dim = i, lower
        if lower <= last <= upper:
            end_block, end_dim = i, upper
            break
        lower = upper + 1

    run = CartesianProductArray(X.blocks[start_block:end_block + 1])
    if not run.is_polyhedral():
        raise UnsupportedOperation("intersection", "CartesianProductArray", type(P).__name__,
                                   reason="the constrained blocks are not polyhedral")
    result_type = HPolytope if all(B.is_bounded_type for B in run) else HPolyhedron
    hpoly = result_type(run.constraints_list(), dim=run.dim)
    logger.debug("intersecting blocks %d..%d (dimensions %d..%d)",
                 start_block, end_block, start_dim, end_dim)
    cap = intersection(hpoly, project_unconstrained(P, range(start_dim, end_dim + 1)), **options)
    return CartesianProductArray(X.blocks[:start_block] + [cap] + X.blocks[end_block + 1:])


# ---------------------------------------------------------------------------
# unions
# ---------------------------------------------------------------------------

def _intersection_union(U: UnionSet, X: LazySet, **options) -> LazySet:
    return UnionSet(intersection(U.X, X, **options), intersection(U.Y, X, **options))


def _intersection_union_array(U: UnionSetArray, X: LazySet, **options) -> LazySet:
    return UnionSetArray([intersection(Y, X, **options) for Y in U.sets], dim=U.dim)


for _other in (LazySet, UnionSetArray, Interval, LinearMap, AffineMap, MinkowskiSum):
    register(UnionSet, _other)(_intersection_union)
for _other in (LazySet, Interval, LinearMap, AffineMap, MinkowskiSum):
    register(UnionSetArray, _other)(_intersection_union_array)


# ---------------------------------------------------------------------------
# lazy linear maps
# ---------------------------------------------------------------------------

@register(LinearMap, LazySet)
def _intersection_linear_map(L: LinearMap, X: LazySet, **options) -> LazySet:
    return intersection(linear_map(L.M, L.X), X, **options)


@register(AffineMap, LazySet)
def _intersection_affine_map(A: AffineMap, X: LazySet, **options) -> LazySet:
    return intersection(affine_map(A.M, A.X, A.v), X, **options)


@register(MinkowskiSum, LazySet)
def _intersection_minkowski_sum(S: MinkowskiSum, X: LazySet, **options) -> LazySet:
    return intersection(minkowski_sum(S.X, S.Y), X, **options)


for _other in (AffineMap, MinkowskiSum):
    register(LinearMap, _other)(_intersection_linear_map)
register(AffineMap, MinkowskiSum)(_intersection_affine_map)


# ---------------------------------------------------------------------------
# stars
# ---------------------------------------------------------------------------

def intersection_inplace(X: Star, H: HalfSpace) -> Star:
    """
    Intersect a star with a half-space by refining its predicate in place.

    ``<a, c + V x> <= b`` becomes ``<V^T a, x> <= b - <a, c>`` in the
    predicate coordinates.

    Raises
    ------
    PreconditionViolation
        If the predicate is not constraint-based.
    """
    if not isinstance(X, Star) or not isinstance(H, HalfSpace):
        raise UnsupportedOperation("intersection_inplace", type(X).__name__, type(H).__name__)
    if X.dim != H.dim:
        raise DimensionMismatch(X.dim, H.dim, "intersection_inplace")
    if not X.is_constraint_based():
        raise PreconditionViolation(
            f"cannot add a constraint to a {type(X.predicate).__name__} predicate"
        )
    a = X.basis.T @ H.a
    b = H.b - np.dot(H.a, X.center)
    X.predicate.add_constraint(HalfSpace(a, b))
    return X


@register(Star, HalfSpace)
def _intersection_star_hs(X: Star, H: HalfSpace, **options) -> Star:
    if X.is_constraint_based():
        Y = X.copy()
    else:
        predicate = HPolyhedron(list(X.predicate.constraints_list()), dim=X.predicate.dim)
        Y = Star(X.center.copy(), X.basis.copy(), predicate)
    return intersection_inplace(Y, H)

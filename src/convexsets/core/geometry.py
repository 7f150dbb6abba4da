"""
Core geometry operations on points, directions and planar polygons.

Contains utility functions for:
- Orientation tests (right turn / cross product)
- Ordering of normal directions by angle
- Polygon area and vertex ordering (CCW)
- Planar convex hulls
- Point-in-polygon testing via Shapely
"""

from functools import cmp_to_key
from typing import List, Sequence

import numpy as np
from shapely.geometry import Polygon, Point

from .tolerance import EPS, isapproxzero, _isapprox


def right_turn(*args):
    """
    Two-dimensional cross product.

    ``right_turn(u, v)`` returns ``u[0]*v[1] - u[1]*v[0]``.
    ``right_turn(o, p, q)`` returns the cross product of ``p - o`` and
    ``q - o``; it is positive if ``q`` lies to the left of the directed line
    from ``o`` to ``p``.
    """
    if len(args) == 2:
        u, v = args
        return u[0] * v[1] - u[1] * v[0]
    o, p, q = args
    return (p[0] - o[0]) * (q[1] - o[1]) - (p[1] - o[1]) * (q[0] - o[0])


def _upper_half(u) -> bool:
    # angle in [0, pi)
    return u[1] > 0 or (u[1] == 0 and u[0] > 0)


def _compare_angles(u, v) -> int:
    uu, vu = _upper_half(u), _upper_half(v)
    if uu != vu:
        return -1 if uu else 1
    cross = right_turn(u, v)
    if cross > 0:
        return -1
    if cross < 0:
        return 1
    return 0


def angle_leq(u, v) -> bool:
    """
    Compare two 2D directions by their angle with the positive x-axis.

    The angle is measured counter-clockwise in ``[0, 2*pi)``. The comparison
    is exact and does not evaluate any trigonometric function.
    """
    return _compare_angles(u, v) <= 0


def sort_by_angle(items: Sequence, key=lambda x: x) -> list:
    """Stable sort of ``items`` by the angle of ``key(item)``."""
    return sorted(items, key=cmp_to_key(lambda x, y: _compare_angles(key(x), key(y))))


def same_direction(u, v) -> bool:
    """Check whether two 2D vectors are positive multiples of each other."""
    return isapproxzero(right_turn(u, v)) and np.dot(u, v) > 0


def polygon_area(poly: np.ndarray) -> float:
    """
    Compute the area of a polygon using the shoelace formula.

    Parameters
    ----------
    poly : np.ndarray
        Polygon vertices of shape (M, 2).

    Returns
    -------
    float
        Area of the polygon.
    """
    poly = np.asarray(poly, dtype=np.float64)
    n = len(poly)
    if n < 3:
        return 0.0

    # Shoelace formula
    x = poly[:, 0]
    y = poly[:, 1]
    return 0.5 * abs(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))


def ensure_ccw(vertices: Sequence[np.ndarray]) -> List[np.ndarray]:
    """
    Return the vertices of a simple polygon in counter-clockwise order.

    The list is reversed when the signed area (sum of edge cross products)
    is negative. Works on exact rationals; fewer than three vertices are
    returned unchanged.

    Parameters
    ----------
    vertices : sequence of np.ndarray
        Polygon vertices of shape (2,), in boundary order.

    Returns
    -------
    list of np.ndarray
    """
    vertices = list(vertices)
    if len(vertices) < 3:
        return vertices
    twice_area = sum(right_turn(v, w) for v, w in zip(vertices, vertices[1:] + vertices[:1]))
    if twice_area < 0:
        return vertices[::-1]
    return vertices


def convex_hull_2d(points: Sequence[np.ndarray]) -> List[np.ndarray]:
    """
    Convex hull of planar points (Andrew's monotone chain).

    Duplicate and collinear points are dropped. Unlike ``scipy.spatial``,
    degenerate inputs (a single point, collinear points) are supported and
    yield one or two vertices.

    Parameters
    ----------
    points : sequence of np.ndarray
        Points of shape (2,).

    Returns
    -------
    list of np.ndarray
        Hull vertices in counter-clockwise order, starting from the
        lexicographically smallest point.
    """
    pts = sorted((np.asarray(p) for p in points), key=lambda p: (p[0], p[1]))
    unique = []
    for p in pts:
        if not unique or not _isapprox(unique[-1], p):
            unique.append(p)
    if len(unique) <= 2:
        return unique

    def half(seq):
        chain = []
        for p in seq:
            while len(chain) >= 2:
                cross = right_turn(chain[-2], chain[-1], p)
                if cross > 0 and not isapproxzero(cross):
                    break
                chain.pop()
            chain.append(p)
        return chain

    lower = half(unique)
    upper = half(reversed(unique))
    hull = lower[:-1] + upper[:-1]
    if len(hull) < 2:
        # all points collinear and the chains collapsed
        return [unique[0], unique[-1]]
    return hull


def polygon_covers(poly: np.ndarray, point: np.ndarray, ztol: float = EPS) -> bool:
    """
    Test if a point is inside or on a convex polygon.

    Uses Shapely for robust point-in-polygon testing.

    Parameters
    ----------
    poly : np.ndarray
        Polygon vertices of shape (M, 2) with M >= 3.
    point : np.ndarray
        Point of shape (2,).
    ztol : float
        Boundary distance still counted as inside.

    Returns
    -------
    bool
        True if the point lies in the closed polygon.
    """
    shapely_poly = Polygon(np.asarray(poly, dtype=np.float64))

    if not shapely_poly.is_valid:
        # Try to fix invalid polygon
        shapely_poly = shapely_poly.buffer(0)

    shapely_point = Point(float(point[0]), float(point[1]))
    # covers() includes the boundary
    if shapely_poly.covers(shapely_point):
        return True
    return shapely_poly.exterior.distance(shapely_point) <= ztol

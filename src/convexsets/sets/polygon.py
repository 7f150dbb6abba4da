"""
Polygons in constraint representation (HPolygon) and in vertex
representation (VPolygon).

The constraints of an HPolygon are kept sorted by the angle of their normal
vectors (counter-clockwise from the positive x-axis). Planar algorithms,
in particular the linear-time intersection merge, rely on that order.
"""

from typing import Sequence

import numpy as np

from .abstract import AbstractPolygon
from .base import _to_vector
from .halfspace import HalfSpace
from .polyhedron import vertices_to_constraints, _ConstraintSet
from .zonotope import LineSegment
from ..core.errors import DimensionMismatch, PreconditionViolation
from ..core.geometry import (
    angle_leq,
    convex_hull_2d,
    ensure_ccw,
    polygon_area,
    polygon_covers,
    sort_by_angle,
)
from ..core.lp import vertices_from_constraints
from ..core.tolerance import get_tolerance, _isapprox


class AbstractHPolygon(AbstractPolygon):
    """Polygon given by a list of half-spaces sorted by normal angle."""

    def is_sorted(self) -> bool:
        c = self.constraints_list()
        return all(angle_leq(c[i].a, c[i + 1].a) for i in range(len(c) - 1))

    def vertices_list(self):
        return convex_hull_2d(vertices_from_constraints(self.constraints_list(), 2))

    def area(self) -> float:
        return polygon_area(np.array(self.vertices_list()))

    def tohrep(self):
        return self

    def tovrep(self) -> "VPolygon":
        return VPolygon(self.vertices_list())


class HPolygon(_ConstraintSet, AbstractHPolygon):
    """
    Convex polygon in constraint representation.

    Parameters
    ----------
    constraints : sequence of HalfSpace
        Two-dimensional half-spaces.
    sort_constraints : bool
        If True (default), sort the constraints by normal angle. Pass False
        only if the input is already sorted.
    """

    def __init__(self, constraints: Sequence[HalfSpace] = (), sort_constraints: bool = True):
        constraints = list(constraints)
        for c in constraints:
            if c.dim != 2:
                raise DimensionMismatch(c.dim, 2, "polygon construction")
        if sort_constraints:
            constraints = sort_by_angle(constraints, key=lambda c: c.a)
        self.constraints = constraints

    def add_constraint(self, constraint: HalfSpace) -> "HPolygon":
        """Insert ``constraint`` at its sorted position, in place."""
        if constraint.dim != 2:
            raise DimensionMismatch(constraint.dim, 2, "constraint addition")
        i = 0
        while i < len(self.constraints) and angle_leq(self.constraints[i].a, constraint.a):
            i += 1
        self.constraints.insert(i, constraint)
        return self

    def copy(self) -> "HPolygon":
        return HPolygon(list(self.constraints), sort_constraints=False)

    def __repr__(self):
        return f"HPolygon(constraints={len(self.constraints)})"


class VPolygon(AbstractPolygon):
    """
    Convex polygon in vertex representation.

    Vertices are stored in counter-clockwise convex-hull order.

    Parameters
    ----------
    vertices : sequence of array_like
        Points of shape (2,).
    apply_convex_hull : bool
        If True (default), replace the input by its convex hull. Pass False
        only if the input is already a convex hull in boundary order; a
        clockwise order is reversed.
    """

    def __init__(self, vertices: Sequence = (), apply_convex_hull: bool = True):
        vertices = [_to_vector(v) for v in vertices]
        for v in vertices:
            if len(v) != 2:
                raise DimensionMismatch(len(v), 2, "polygon construction")
        if apply_convex_hull:
            vertices = convex_hull_2d(vertices)
        else:
            vertices = ensure_ccw(vertices)
        self.vertices = vertices

    def _fields(self):
        return (np.array(self.vertices),)

    def vertices_list(self):
        return self.vertices

    def constraints_list(self):
        return vertices_to_constraints(self.vertices, 2)

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
        x = np.asarray(x)
        if not self.vertices:
            return False
        if len(self.vertices) == 1:
            return _isapprox(x, self.vertices[0])
        if len(self.vertices) == 2:
            return x in LineSegment(self.vertices[0], self.vertices[1])
        return polygon_covers(np.array(self.vertices), x, ztol=get_tolerance(float).ztol)

    def area(self) -> float:
        return polygon_area(np.array(self.vertices))

    def tohrep(self) -> HPolygon:
        return HPolygon(self.constraints_list())

    def tovrep(self):
        return self

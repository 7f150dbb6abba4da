"""
Zonotopic sets: affine images of the unit hypercube.

A zonotope is ``{c + G xi : ||xi||_inf <= 1}`` with center ``c`` and
generator matrix ``G`` (one generator per column).
"""

import itertools

import numpy as np

from .abstract import AbstractPolytope
from .base import _to_vector
from .polyhedron import convex_hull, vertices_to_constraints, _point_constraints, _segment_constraints
from ..core.errors import PreconditionViolation
from ..core.geometry import right_turn
from ..core.lp import OPTIMAL, default_lp_oracle
from ..core.tolerance import get_tolerance, isapproxzero, _isapprox, _leq, _numeric_kind


class AbstractZonotope(AbstractPolytope):
    """
    Centrally symmetric polytope given by a center and generators.

    Subclasses provide ``center()`` and ``genmat()``.
    """

    def center(self) -> np.ndarray:
        raise NotImplementedError

    def genmat(self) -> np.ndarray:
        raise NotImplementedError

    def ngens(self) -> int:
        return self.genmat().shape[1]

    def support_function(self, d):
        d = np.asarray(d)
        return np.dot(d, self.center()) + np.sum(np.abs(self.genmat().T @ d))

    def support_vector(self, d):
        d = np.asarray(d)
        signs = np.where(self.genmat().T @ d >= 0, 1.0, -1.0)
        return self.center() + self.genmat() @ signs

    def an_element(self):
        return self.center()

    def __contains__(self, x) -> bool:
        x = np.asarray(x, dtype=np.float64)
        G = np.asarray(self.genmat(), dtype=np.float64)
        c = np.asarray(self.center(), dtype=np.float64)
        if G.shape[1] == 0:
            return _isapprox(x, c)
        # x = c + G xi with -1 <= xi <= 1
        res = default_lp_oracle().solve(np.zeros(G.shape[1]), A_eq=G, b_eq=x - c, bounds=(-1, 1))
        return res.status == OPTIMAL

    def vertices_list(self):
        c = np.asarray(self.center(), dtype=np.float64)
        G = np.asarray(self.genmat(), dtype=np.float64)
        # drop zero generators; they do not contribute vertices
        G = G[:, [j for j in range(G.shape[1]) if not isapproxzero(G[:, j])]]
        if G.shape[1] == 0:
            return [c]
        if self.dim == 1:
            s = np.sum(np.abs(G))
            return [c - s, c + s]
        points = [c + G @ np.array(signs)
                  for signs in itertools.product((-1.0, 1.0), repeat=G.shape[1])]
        return convex_hull(points, self.dim)

    def constraints_list(self):
        return vertices_to_constraints(self.vertices_list(), self.dim)


class Zonotope(AbstractZonotope):
    """
    Zonotope with explicit center and generator matrix.

    Parameters
    ----------
    center : array_like
        Center of shape (n,).
    generators : array_like
        Generator matrix of shape (n, p).
    """

    def __init__(self, center, generators):
        self._center = _to_vector(center)
        G = np.asarray(generators)
        if G.dtype.kind in "iub":
            G = G.astype(np.float64)
        if G.ndim == 1:
            G = G.reshape(-1, 1)
        if G.shape[0] != len(self._center):
            raise PreconditionViolation(
                f"generator matrix with {G.shape[0]} rows for a {len(self._center)}-dimensional center"
            )
        self._generators = G

    @property
    def dim(self) -> int:
        return len(self._center)

    def _fields(self):
        return (self._center, self._generators)

    def center(self):
        return self._center

    def genmat(self):
        return self._generators


class LineSegment(AbstractZonotope):
    """
    Line segment in the plane between ``p`` and ``q``.

    ``p == q`` is allowed and represents a single point.
    """

    def __init__(self, p, q):
        self.p = _to_vector(p)
        self.q = _to_vector(q)
        if len(self.p) != 2 or len(self.q) != 2:
            raise PreconditionViolation("a LineSegment must be two-dimensional")

    @property
    def dim(self) -> int:
        return 2

    def _fields(self):
        return (self.p, self.q)

    def center(self):
        return (self.p + self.q) / 2

    def genmat(self):
        return ((self.q - self.p) / 2).reshape(2, 1)

    def is_degenerate(self) -> bool:
        return _isapprox(self.p, self.q)

    def support_vector(self, d):
        return self.q if np.dot(d, self.q - self.p) >= 0 else self.p

    def __contains__(self, x) -> bool:
        x = np.asarray(x)
        if self.is_degenerate():
            return _isapprox(x, self.p)
        d = self.q - self.p
        w = x - self.p
        dd = np.dot(d, d)
        # distance to the line (|cross| / |d|) relative to the segment's scale
        cross = right_turn(d, w)
        rtol = get_tolerance(_numeric_kind(d)).rtol
        if not isapproxzero(cross) and cross * cross > rtol * rtol * dd * max(np.dot(w, w), dd):
            return False
        lam = np.dot(w, d) / dd
        return _leq(0, lam) and _leq(lam, 1)

    def vertices_list(self):
        if self.is_degenerate():
            return [self.p]
        return [self.p, self.q]

    def constraints_list(self):
        if self.is_degenerate():
            return _point_constraints(self.p)
        return _segment_constraints(self.p, self.q)

"""
Sets defined by a single linear (in)equality: half-spaces, hyperplanes and
two-dimensional lines.
"""

from typing import Optional

import numpy as np

from .abstract import AbstractPolyhedron
from .base import _to_vector, _unbounded_vector
from ..core.errors import PreconditionViolation
from ..core.tolerance import isapproxzero, _isapprox, _leq


def _multiple_of(d: np.ndarray, a: np.ndarray) -> Optional[float]:
    """Return ``lam`` with ``d == lam * a`` (approximately), or None."""
    k = int(np.argmax(np.abs(a)))
    lam = d[k] / a[k]
    if _isapprox(d, lam * a):
        return lam
    return None


class HalfSpace(AbstractPolyhedron):
    """
    Half-space ``{x : <a, x> <= b}``.

    A normal vector ``a`` that is approximately zero is allowed; the set is
    then either the universe (``b >= 0``) or empty.
    """

    def __init__(self, a, b):
        self.a = _to_vector(a)
        self.b = b

    @property
    def dim(self) -> int:
        return len(self.a)

    def _fields(self):
        return (self.a, self.b)

    def constraints_list(self):
        return [self]

    def __contains__(self, x) -> bool:
        return _leq(np.dot(self.a, np.asarray(x)), self.b)

    def is_empty(self) -> bool:
        return isapproxzero(self.a) and self.b < 0

    def is_bounded(self) -> bool:
        return False

    def _is_degenerate(self) -> bool:
        return isapproxzero(self.a)

    def support_function(self, d):
        d = np.asarray(d)
        if self._is_degenerate():
            if self.b < 0:
                return -np.inf
            return 0.0 if isapproxzero(d) else np.inf
        if isapproxzero(d):
            return 0.0
        lam = _multiple_of(d, self.a)
        if lam is not None and lam > 0:
            return lam * self.b
        return np.inf

    def support_vector(self, d):
        d = np.asarray(d)
        if self._is_degenerate():
            if self.b < 0:
                raise PreconditionViolation("the support vector of an empty set is undefined")
            return _unbounded_vector(d)
        if isapproxzero(d):
            return self.an_element()
        lam = _multiple_of(d, self.a)
        if lam is not None and lam > 0:
            # every point on the boundary is a maximizer
            return self.an_element()
        return _unbounded_vector(d)

    def an_element(self):
        if self._is_degenerate():
            return np.zeros(self.dim)
        return self.a * (self.b / np.dot(self.a, self.a))


class Hyperplane(AbstractPolyhedron):
    """Hyperplane ``{x : <a, x> = b}``."""

    def __init__(self, a, b):
        self.a = _to_vector(a)
        self.b = b
        if isapproxzero(self.a):
            raise PreconditionViolation("the normal vector of a hyperplane must be nonzero")

    @property
    def dim(self) -> int:
        return len(self.a)

    def _fields(self):
        return (self.a, self.b)

    def constraints_list(self):
        return [HalfSpace(self.a, self.b), HalfSpace(-self.a, -self.b)]

    def __contains__(self, x) -> bool:
        return _isapprox(np.dot(self.a, np.asarray(x)), self.b)

    def is_empty(self) -> bool:
        return False

    def is_bounded(self) -> bool:
        return self.dim == 1

    def support_function(self, d):
        d = np.asarray(d)
        if isapproxzero(d):
            return 0.0
        lam = _multiple_of(d, self.a)
        if lam is not None:
            return lam * self.b
        return np.inf

    def support_vector(self, d):
        d = np.asarray(d)
        if isapproxzero(d) or _multiple_of(d, self.a) is not None:
            return self.an_element()
        return _unbounded_vector(d)

    def an_element(self):
        return self.a * (self.b / np.dot(self.a, self.a))


class Line2D(Hyperplane):
    """
    Line in the plane, ``{x : <a, x> = b}`` with ``a`` of length 2.

    Kept as a separate kind so that planar algorithms (Cramer's rule,
    segment clipping) can be selected for it.
    """

    def __init__(self, a, b):
        super().__init__(a, b)
        if self.dim != 2:
            raise PreconditionViolation(f"a Line2D must be two-dimensional, got {self.dim}")

    @classmethod
    def from_points(cls, p, q) -> "Line2D":
        """Line through two distinct points ``p`` and ``q``."""
        p = _to_vector(p)
        q = _to_vector(q)
        if _isapprox(p, q):
            raise PreconditionViolation("a line needs two distinct points")
        a = np.array([p[1] - q[1], q[0] - p[0]])
        return cls(a, np.dot(a, p))

    def is_bounded(self) -> bool:
        return False

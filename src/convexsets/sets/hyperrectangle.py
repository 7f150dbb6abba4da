"""
Axis-aligned boxes: hyperrectangles, intervals and single points.
"""

import itertools

import numpy as np

from .base import _to_vector
from .halfspace import HalfSpace
from .zonotope import AbstractZonotope
from ..core.errors import PreconditionViolation
from ..core.tolerance import _isapprox, _leq


class AbstractHyperrectangle(AbstractZonotope):
    """
    Axis-aligned box ``{x : low <= x <= high}``.

    Subclasses provide ``center()`` and ``radius_hyperrectangle()``.
    """

    def radius_hyperrectangle(self) -> np.ndarray:
        raise NotImplementedError

    def low(self, i=None):
        lo = self.center() - self.radius_hyperrectangle()
        return lo if i is None else lo[i]

    def high(self, i=None):
        hi = self.center() + self.radius_hyperrectangle()
        return hi if i is None else hi[i]

    def genmat(self):
        r = self.radius_hyperrectangle()
        nonzero = [i for i in range(len(r)) if r[i] != 0]
        G = np.zeros((len(r), len(nonzero)), dtype=np.asarray(r).dtype)
        for j, i in enumerate(nonzero):
            G[i, j] = r[i]
        return G

    def support_function(self, d):
        d = np.asarray(d)
        return np.dot(d, self.center()) + np.dot(np.abs(d), self.radius_hyperrectangle())

    def support_vector(self, d):
        d = np.asarray(d)
        r = self.radius_hyperrectangle()
        return self.center() + np.where(d < 0, -r, r)

    def __contains__(self, x) -> bool:
        x = np.asarray(x)
        return _leq(self.low(), x) and _leq(x, self.high())

    def vertices_list(self):
        lo, hi = self.low(), self.high()
        axes = [(lo[i],) if lo[i] == hi[i] else (lo[i], hi[i]) for i in range(self.dim)]
        return [np.array(v) for v in itertools.product(*axes)]

    def constraints_list(self):
        n = self.dim
        lo, hi = self.low(), self.high()
        constraints = []
        for i in range(n):
            e = np.zeros(n)
            e[i] = 1.0
            constraints.append(HalfSpace(e, hi[i]))
            constraints.append(HalfSpace(-e, -lo[i]))
        return constraints


class Hyperrectangle(AbstractHyperrectangle):
    """
    Hyperrectangle given by center and (nonnegative) radius per axis.

    Use ``Hyperrectangle.from_bounds(low, high)`` to build one from bounds.
    """

    def __init__(self, center, radius):
        self._center = _to_vector(center)
        self._radius = _to_vector(radius)
        if len(self._center) != len(self._radius):
            raise PreconditionViolation("center and radius must have the same length")
        if np.any(self._radius < 0):
            raise PreconditionViolation(f"radius must be nonnegative, got {self._radius}")

    @classmethod
    def from_bounds(cls, low, high) -> "Hyperrectangle":
        low = _to_vector(low)
        high = _to_vector(high)
        if np.any(high < low):
            raise PreconditionViolation(f"low {low} exceeds high {high}")
        return cls((high + low) / 2, (high - low) / 2)

    @property
    def dim(self) -> int:
        return len(self._center)

    def _fields(self):
        return (self._center, self._radius)

    def center(self):
        return self._center

    def radius_hyperrectangle(self):
        return self._radius


class Interval(AbstractHyperrectangle):
    """One-dimensional interval ``[lo, hi]``."""

    def __init__(self, lo, hi):
        if hi < lo:
            raise PreconditionViolation(f"invalid interval [{lo}, {hi}]")
        self.lo = lo
        self.hi = hi

    @property
    def dim(self) -> int:
        return 1

    def _fields(self):
        return (self.lo, self.hi)

    def center(self):
        return np.array([(self.lo + self.hi) / 2])

    def radius_hyperrectangle(self):
        return np.array([(self.hi - self.lo) / 2])

    def low(self, i=None):
        lo = np.array([self.lo])
        return lo if i is None else lo[i]

    def high(self, i=None):
        hi = np.array([self.hi])
        return hi if i is None else hi[i]

    def __contains__(self, x) -> bool:
        x = np.asarray(x).reshape(-1)[0]
        return _leq(self.lo, x) and _leq(x, self.hi)

    def vertices_list(self):
        if self.lo == self.hi:
            return [np.array([self.lo])]
        return [np.array([self.lo]), np.array([self.hi])]


class AbstractSingleton(AbstractHyperrectangle):
    """Set with exactly one element; subclasses provide ``element()``."""

    def element(self) -> np.ndarray:
        raise NotImplementedError

    def center(self):
        return self.element()

    def radius_hyperrectangle(self):
        return np.zeros(self.dim)

    def low(self, i=None):
        return self.element() if i is None else self.element()[i]

    def high(self, i=None):
        return self.element() if i is None else self.element()[i]

    def support_function(self, d):
        return np.dot(d, self.element())

    def support_vector(self, d):
        return self.element()

    def __contains__(self, x) -> bool:
        return _isapprox(np.asarray(x), self.element())

    def vertices_list(self):
        return [self.element()]


class Singleton(AbstractSingleton):
    """The set ``{x}``."""

    def __init__(self, element):
        self._element = _to_vector(element)

    @property
    def dim(self) -> int:
        return len(self._element)

    def _fields(self):
        return (self._element,)

    def element(self):
        return self._element

"""
Euclidean ball.
"""

from math import factorial, pi
from typing import List, Optional, Sequence

import numpy as np

from .base import LazySet, _to_vector
from ..core.errors import DimensionMismatch, PreconditionViolation
from ..core.tolerance import isapproxzero, _leq


class Ball2(LazySet):
    """
    Ball in the 2-norm, ``{x : ||x - c||_2 <= r}``.

    Parameters
    ----------
    center : array_like
        Center of shape (n,).
    radius : float
        Nonnegative radius.
    """

    is_convex_type = True
    is_bounded_type = True

    def __init__(self, center, radius: float):
        self.center = np.asarray(_to_vector(center), dtype=np.float64)
        if radius < 0:
            raise PreconditionViolation(f"the radius must be nonnegative, got {radius}")
        self.radius = float(radius)

    @property
    def dim(self) -> int:
        return len(self.center)

    def _fields(self):
        return (self.center, self.radius)

    def support_function(self, d):
        d = np.asarray(d, dtype=np.float64)
        return np.dot(d, self.center) + self.radius * np.linalg.norm(d)

    def support_vector(self, d):
        """
        Farthest point in direction ``d``.

        ``c + r * d / ||d||``, or the center if ``d`` is (approximately) zero.
        """
        d = np.asarray(d, dtype=np.float64)
        dnorm = np.linalg.norm(d)
        if isapproxzero(dnorm):
            return self.center
        return self.center + d * (self.radius / dnorm)

    def __contains__(self, x) -> bool:
        x = np.asarray(x, dtype=np.float64)
        if len(x) != self.dim:
            raise DimensionMismatch(len(x), self.dim, "membership test")
        return _leq(np.linalg.norm(self.center - x), self.radius)

    def an_element(self):
        return self.center

    def translate(self, v) -> "Ball2":
        v = _to_vector(v)
        if len(v) != self.dim:
            raise DimensionMismatch(self.dim, len(v), "translation")
        return Ball2(self.center + v, self.radius)

    def translate_(self, v) -> "Ball2":
        """Translate in place and return the ball."""
        v = _to_vector(v)
        if len(v) != self.dim:
            raise DimensionMismatch(self.dim, len(v), "translation")
        self.center += v
        return self

    def chebyshev_center_radius(self):
        return self.center, self.radius

    def volume(self) -> float:
        n = self.dim
        k = n // 2
        R = self.radius
        if n % 2 == 0:
            return pi ** k * R ** n / factorial(k)
        return 2 * factorial(k) * (4 * pi) ** k * R ** n / factorial(n)

    def area(self) -> float:
        if self.dim != 2:
            raise PreconditionViolation(
                f"area only applies to two-dimensional sets, got dimension {self.dim}"
            )
        return pi * self.radius ** 2

    def project(self, block: Sequence[int]) -> "Ball2":
        return Ball2(self.center[list(block)], self.radius)

    def reflect(self) -> "Ball2":
        return Ball2(-self.center, self.radius)

    def scale(self, alpha: float) -> "Ball2":
        return Ball2(self.center * alpha, self.radius * abs(alpha))

    def sample(self, nsamples: int, rng: Optional[np.random.Generator] = None,
               seed: Optional[int] = None) -> List[np.ndarray]:
        """
        Draw points uniformly from the ball.

        Uses Muller's method: a normalized Gaussian direction scaled by
        ``r * u^(1/n)`` for a uniform ``u``.
        """
        if rng is None:
            rng = np.random.default_rng(seed)
        n = self.dim
        directions = rng.standard_normal((nsamples, n))
        norms = np.linalg.norm(directions, axis=1, keepdims=True)
        norms[norms == 0] = 1.0
        radii = rng.uniform(size=(nsamples, 1)) ** (1.0 / n)
        points = self.center + self.radius * radii * directions / norms
        return list(points)

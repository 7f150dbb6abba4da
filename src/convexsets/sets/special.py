"""
The two absorbing elements of intersection: the empty set and the universe.
"""

import numpy as np

from .abstract import AbstractPolyhedron
from .base import LazySet, _unbounded_vector
from .halfspace import HalfSpace
from ..core.errors import PreconditionViolation
from ..core.tolerance import isapproxzero


class EmptySet(LazySet):
    """The empty set of a given ambient dimension."""

    is_convex_type = True
    is_bounded_type = True
    is_polyhedral_type = True

    def __init__(self, dim: int):
        self._dim = int(dim)

    @property
    def dim(self) -> int:
        return self._dim

    def _fields(self):
        return (self._dim,)

    def support_function(self, d):
        return -np.inf

    def support_vector(self, d):
        raise PreconditionViolation("the support vector of an empty set is undefined")

    def an_element(self):
        raise PreconditionViolation("an empty set has no element")

    def __contains__(self, x) -> bool:
        return False

    def is_empty(self) -> bool:
        return True

    def vertices_list(self):
        return []

    def constraints_list(self):
        # 0 <= -1
        return [HalfSpace(np.zeros(self._dim), -1.0)]


class Universe(AbstractPolyhedron):
    """The whole space ``R^n``."""

    def __init__(self, dim: int):
        self._dim = int(dim)

    @property
    def dim(self) -> int:
        return self._dim

    def _fields(self):
        return (self._dim,)

    def support_function(self, d):
        return 0.0 if isapproxzero(d) else np.inf

    def support_vector(self, d):
        return _unbounded_vector(d)

    def an_element(self):
        return np.zeros(self._dim)

    def __contains__(self, x) -> bool:
        return True

    def is_empty(self) -> bool:
        return False

    def is_bounded(self) -> bool:
        return False

    def constraints_list(self):
        return []

"""
Base class of all set representations and the support-function protocol.

Every set answers ``dim``, ``support_function`` and (usually)
``support_vector``. Representations additionally declare three class-level
capability tags used for algorithm selection:

- is_convex_type     : every instance is convex
- is_bounded_type    : every instance is bounded
- is_polyhedral_type : every instance is a finite conjunction of half-spaces
"""

from abc import ABC, abstractmethod
from typing import List

import numpy as np

from ..core.errors import DimensionMismatch, UnsupportedOperation


def _to_vector(x) -> np.ndarray:
    """Convert input to a 1-D array, promoting integers to float."""
    v = np.asarray(x)
    if v.ndim == 0:
        v = v.reshape(1)
    if v.dtype.kind in "iub":
        v = v.astype(np.float64)
    return v


def _unbounded_vector(d: np.ndarray) -> np.ndarray:
    """Support vector of an unbounded set: +-inf along the nonzero entries."""
    d = np.asarray(d, dtype=np.float64)
    return np.where(d > 0, np.inf, np.where(d < 0, -np.inf, 0.0))


class LazySet(ABC):
    """
    Abstract set in ``R^n``.

    Subclasses implement at least ``dim`` and ``support_function``.
    """

    is_convex_type = False
    is_bounded_type = False
    is_polyhedral_type = False

    @property
    @abstractmethod
    def dim(self) -> int:
        """Ambient dimension."""

    @abstractmethod
    def support_function(self, d: np.ndarray) -> float:
        """Return ``sup{<d, x> : x in X}``."""

    def support_vector(self, d: np.ndarray) -> np.ndarray:
        """Return a point of the set attaining the support function."""
        raise UnsupportedOperation("support_vector", type(self).__name__)

    @abstractmethod
    def __contains__(self, x) -> bool:
        """Membership test."""

    def is_empty(self) -> bool:
        return False

    def is_bounded(self) -> bool:
        if self.is_bounded_type:
            return True
        n = self.dim
        for i in range(n):
            e = np.zeros(n)
            e[i] = 1.0
            if not np.isfinite(self.support_function(e)) or not np.isfinite(self.support_function(-e)):
                return False
        return True

    def is_convex(self) -> bool:
        return self.is_convex_type

    def is_polyhedral(self) -> bool:
        return self.is_polyhedral_type

    def an_element(self) -> np.ndarray:
        return self.support_vector(np.eye(self.dim)[0])

    def constraints_list(self) -> list:
        """Half-spaces whose conjunction is the set (polyhedral sets only)."""
        raise UnsupportedOperation("constraints_list", type(self).__name__)

    def vertices_list(self) -> List[np.ndarray]:
        """Vertices of the set (polytopes only)."""
        raise UnsupportedOperation("vertices_list", type(self).__name__)

    # value equality for simple representations; None means identity
    def _fields(self):
        return None

    def __eq__(self, other):
        if self is other:
            return True
        if type(self) is not type(other):
            return NotImplemented
        mine, theirs = self._fields(), other._fields()
        if mine is None or theirs is None:
            return False
        if len(mine) != len(theirs):
            return False
        for x, y in zip(mine, theirs):
            if isinstance(x, np.ndarray) or isinstance(y, np.ndarray):
                if np.shape(x) != np.shape(y) or not np.array_equal(x, y):
                    return False
            elif x != y:
                return False
        return True

    __hash__ = object.__hash__

    def __repr__(self):
        fields = self._fields()
        if fields is None:
            return f"{type(self).__name__}(dim={self.dim})"
        args = ", ".join(repr(f.tolist()) if isinstance(f, np.ndarray) else repr(f) for f in fields)
        return f"{type(self).__name__}({args})"


def _check_direction(d, X: LazySet) -> np.ndarray:
    d = _to_vector(d)
    if len(d) != X.dim:
        raise DimensionMismatch(len(d), X.dim, "support function")
    return d


def support_function(d, X: LazySet) -> float:
    """
    Evaluate the support function of ``X`` in direction ``d``.

    Parameters
    ----------
    d : array_like
        Direction of shape (n,).
    X : LazySet
        Set of dimension n.

    Returns
    -------
    float
        ``sup{<d, x> : x in X}``; ``inf`` in unbounded directions and
        ``-inf`` for the empty set.
    """
    return X.support_function(_check_direction(d, X))


def support_vector(d, X: LazySet) -> np.ndarray:
    """
    Return a point of ``X`` maximizing ``<d, x>``.

    Unbounded coordinates are reported as ``+-inf``.
    """
    return X.support_vector(_check_direction(d, X))

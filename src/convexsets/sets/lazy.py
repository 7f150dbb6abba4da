"""
Lazy composite sets.

These hold references to their operands and answer queries by delegating to
them; nothing is materialized at construction time.
"""

import itertools
from typing import List, Sequence

import numpy as np

from .base import LazySet, _to_vector
from .halfspace import HalfSpace
from .polyhedron import convex_hull, vertices_to_constraints
from ..core.errors import DimensionMismatch, PreconditionViolation, UnsupportedOperation
from ..core.lp import OPTIMAL, _stack, default_lp_oracle


class LinearMap(LazySet):
    """
    Lazy linear map ``{M x : x in X}``.

    Parameters
    ----------
    M : array_like
        Matrix of shape (m, n).
    X : LazySet
        Set of dimension n.
    """

    def __init__(self, M, X: LazySet):
        M = np.asarray(M)
        if M.dtype.kind in "iub":
            M = M.astype(np.float64)
        if M.ndim != 2:
            raise PreconditionViolation(f"expected a matrix, got an array of shape {M.shape}")
        if M.shape[1] != X.dim:
            raise DimensionMismatch(M.shape[1], X.dim, "linear map")
        self.M = M
        self.X = X

    @property
    def dim(self) -> int:
        return self.M.shape[0]

    def is_convex(self) -> bool:
        return self.X.is_convex()

    def is_bounded(self) -> bool:
        return self.X.is_bounded() or not np.any(self.M)

    def is_polyhedral(self) -> bool:
        return self.X.is_polyhedral()

    def is_empty(self) -> bool:
        return self.X.is_empty()

    def support_function(self, d):
        return self.X.support_function(self.M.T @ np.asarray(d))

    def support_vector(self, d):
        return self.M @ self.X.support_vector(self.M.T @ np.asarray(d))

    def an_element(self):
        return self.M @ self.X.an_element()

    def __contains__(self, x) -> bool:
        x = np.asarray(x, dtype=np.float64)
        M = self.M
        if M.shape[0] == M.shape[1] and np.linalg.matrix_rank(M) == M.shape[0]:
            return np.linalg.solve(M, x) in self.X
        if not self.X.is_polyhedral():
            raise UnsupportedOperation("membership", "LinearMap", type(self.X).__name__,
                                       reason="singular map of a non-polyhedral set")
        # x = M y with y in X
        constraints = self.X.constraints_list()
        A, b = _stack(constraints) if constraints else (None, None)
        res = default_lp_oracle().solve(np.zeros(self.X.dim), A, b, A_eq=M, b_eq=x)
        return res.status == OPTIMAL

    def __repr__(self):
        return f"LinearMap(M={self.M.tolist()}, X={self.X!r})"


def _is_invertible(M: np.ndarray) -> bool:
    return M.shape[0] == M.shape[1] and np.linalg.matrix_rank(M) == M.shape[0]


class AffineMap(LazySet):
    """
    Lazy affine map ``{M x + v : x in X}``.

    Parameters
    ----------
    M : array_like
        Matrix of shape (m, n).
    X : LazySet
        Set of dimension n.
    v : array_like
        Translation of shape (m,).
    """

    def __init__(self, M, X: LazySet, v):
        M = np.asarray(M)
        if M.dtype.kind in "iub":
            M = M.astype(np.float64)
        if M.ndim != 2:
            raise PreconditionViolation(f"expected a matrix, got an array of shape {M.shape}")
        if M.shape[1] != X.dim:
            raise DimensionMismatch(M.shape[1], X.dim, "affine map")
        v = _to_vector(v)
        if len(v) != M.shape[0]:
            raise DimensionMismatch(len(v), M.shape[0], "affine map")
        self.M = M
        self.X = X
        self.v = v

    @property
    def dim(self) -> int:
        return self.M.shape[0]

    def is_convex(self) -> bool:
        return self.X.is_convex()

    def is_bounded(self) -> bool:
        return self.X.is_bounded() or not np.any(self.M)

    def is_polyhedral(self) -> bool:
        return self.X.is_polyhedral()

    def is_empty(self) -> bool:
        return self.X.is_empty()

    def support_function(self, d):
        d = np.asarray(d)
        return self.X.support_function(self.M.T @ d) + np.dot(d, self.v)

    def support_vector(self, d):
        d = np.asarray(d)
        return self.M @ self.X.support_vector(self.M.T @ d) + self.v

    def an_element(self):
        return self.M @ self.X.an_element() + self.v

    def __contains__(self, x) -> bool:
        return (np.asarray(x) - self.v) in LinearMap(self.M, self.X)

    def vertices_list(self):
        return [self.M @ w + self.v for w in self.X.vertices_list()]

    def constraints_list(self):
        if _is_invertible(self.M):
            Minv_T = np.linalg.inv(self.M).T
            result = []
            for c in self.X.constraints_list():
                a = Minv_T @ c.a
                result.append(HalfSpace(a, c.b + np.dot(a, self.v)))
            return result
        if not self.is_bounded():
            raise UnsupportedOperation("constraints_list", "AffineMap",
                                       reason="a singular map of an unbounded set")
        return vertices_to_constraints(self.vertices_list(), self.dim)

    def linear_map(self, N) -> "AffineMap":
        """Lazy ``N * (M X + v)``, simplified to the affine map ``(N M) X + N v``."""
        N = np.asarray(N)
        if N.ndim != 2 or N.shape[1] != self.dim:
            raise DimensionMismatch(N.shape[-1] if N.ndim else 0, self.dim, "linear map")
        return AffineMap(N @ self.M, self.X, N @ self.v)

    def scale(self, alpha) -> "AffineMap":
        return AffineMap(alpha * self.M, self.X, alpha * self.v)

    def __repr__(self):
        return f"AffineMap(M={self.M.tolist()}, X={self.X!r}, v={self.v.tolist()})"


class MinkowskiSum(LazySet):
    """Lazy Minkowski sum ``{x + y : x in X, y in Y}`` of two sets."""

    def __init__(self, X: LazySet, Y: LazySet):
        if X.dim != Y.dim:
            raise DimensionMismatch(X.dim, Y.dim, "Minkowski sum")
        self.X = X
        self.Y = Y

    @property
    def dim(self) -> int:
        return self.X.dim

    def is_convex(self) -> bool:
        return self.X.is_convex() and self.Y.is_convex()

    def is_bounded(self) -> bool:
        return self.is_empty() or (self.X.is_bounded() and self.Y.is_bounded())

    def is_polyhedral(self) -> bool:
        return self.X.is_polyhedral() and self.Y.is_polyhedral()

    def is_empty(self) -> bool:
        return self.X.is_empty() or self.Y.is_empty()

    def support_function(self, d):
        return self.X.support_function(d) + self.Y.support_function(d)

    def support_vector(self, d):
        return self.X.support_vector(d) + self.Y.support_vector(d)

    def an_element(self):
        return self.X.an_element() + self.Y.an_element()

    def __contains__(self, x) -> bool:
        if not self.is_polyhedral():
            raise UnsupportedOperation("membership", "MinkowskiSum",
                                       reason="the summands are not polyhedral")
        x = np.asarray(x, dtype=np.float64)
        n = self.dim
        # x = y + z with y in X and z in Y, over the variables (y, z)
        rows, b = [], []
        for offset, Z in ((0, self.X), (n, self.Y)):
            constraints = Z.constraints_list()
            if constraints:
                A_Z, b_Z = _stack(constraints)
                A = np.zeros((len(constraints), 2 * n))
                A[:, offset:offset + n] = A_Z
                rows.append(A)
                b.append(b_Z)
        A_ub = np.vstack(rows) if rows else None
        b_ub = np.concatenate(b) if b else None
        A_eq = np.hstack([np.eye(n), np.eye(n)])
        res = default_lp_oracle().solve(np.zeros(2 * n), A_ub, b_ub, A_eq=A_eq, b_eq=x)
        return res.status == OPTIMAL

    def vertices_list(self):
        points = [v + w for v in self.X.vertices_list() for w in self.Y.vertices_list()]
        return convex_hull(points, self.dim)

    def __repr__(self):
        return f"MinkowskiSum({self.X!r}, {self.Y!r})"


class CartesianProductArray(LazySet):
    """
    Cartesian product ``X1 x ... x Xk`` of a finite list of sets.

    Block ``i`` occupies a contiguous range of coordinates of length
    ``dim(Xi)``; ``block_structure()`` lists these lengths.
    """

    def __init__(self, blocks: Sequence[LazySet]):
        self.blocks = list(blocks)

    @property
    def dim(self) -> int:
        return sum(X.dim for X in self.blocks)

    def __len__(self):
        return len(self.blocks)

    def __iter__(self):
        return iter(self.blocks)

    def __getitem__(self, i):
        return self.blocks[i]

    def block_structure(self) -> tuple:
        return tuple(X.dim for X in self.blocks)

    def _split(self, x) -> List[np.ndarray]:
        x = np.asarray(x)
        parts = []
        start = 0
        for X in self.blocks:
            parts.append(x[start:start + X.dim])
            start += X.dim
        return parts

    def is_convex(self) -> bool:
        return all(X.is_convex() for X in self.blocks)

    def is_bounded(self) -> bool:
        return all(X.is_bounded() for X in self.blocks)

    def is_polyhedral(self) -> bool:
        return all(X.is_polyhedral() for X in self.blocks)

    def is_empty(self) -> bool:
        return any(X.is_empty() for X in self.blocks)

    def support_function(self, d):
        return sum(X.support_function(di) for X, di in zip(self.blocks, self._split(d)))

    def support_vector(self, d):
        return np.concatenate([X.support_vector(di) for X, di in zip(self.blocks, self._split(d))])

    def an_element(self):
        return np.concatenate([X.an_element() for X in self.blocks])

    def __contains__(self, x) -> bool:
        return all(xi in X for X, xi in zip(self.blocks, self._split(x)))

    def constraints_list(self):
        n = self.dim
        constraints = []
        start = 0
        for X in self.blocks:
            for c in X.constraints_list():
                a = np.zeros(n)
                a[start:start + X.dim] = c.a
                constraints.append(HalfSpace(a, c.b))
            start += X.dim
        return constraints

    def vertices_list(self):
        return [np.concatenate(vs) for vs in itertools.product(*(X.vertices_list() for X in self.blocks))]

    def flatten(self) -> "CartesianProductArray":
        """Inline nested Cartesian products into one flat array."""
        flat = []
        for X in self.blocks:
            if isinstance(X, CartesianProductArray):
                flat.extend(X.flatten().blocks)
            else:
                flat.append(X)
        return CartesianProductArray(flat)

    def __repr__(self):
        return f"CartesianProductArray({self.blocks!r})"


def same_block_structure(x: Sequence[LazySet], y: Sequence[LazySet]) -> bool:
    """Check that two block lists have the same length and block dimensions."""
    if len(x) != len(y):
        return False
    return all(X.dim == Y.dim for X, Y in zip(x, y))


class UnionSet(LazySet):
    """Union of two sets of the same dimension (not necessarily convex)."""

    def __init__(self, X: LazySet, Y: LazySet):
        if X.dim != Y.dim:
            raise DimensionMismatch(X.dim, Y.dim, "union")
        self.X = X
        self.Y = Y

    @property
    def dim(self) -> int:
        return self.X.dim

    def array(self) -> List[LazySet]:
        return [self.X, self.Y]

    def is_bounded(self) -> bool:
        return self.X.is_bounded() and self.Y.is_bounded()

    def is_empty(self) -> bool:
        return self.X.is_empty() and self.Y.is_empty()

    def support_function(self, d):
        return max(self.X.support_function(d), self.Y.support_function(d))

    def support_vector(self, d):
        candidates = [Z for Z in (self.X, self.Y) if not Z.is_empty()]
        if not candidates:
            raise PreconditionViolation("the support vector of an empty set is undefined")
        return max((Z.support_vector(d) for Z in candidates), key=lambda v: np.dot(d, v))

    def an_element(self):
        return self.Y.an_element() if self.X.is_empty() else self.X.an_element()

    def __contains__(self, x) -> bool:
        return x in self.X or x in self.Y

    def __repr__(self):
        return f"UnionSet({self.X!r}, {self.Y!r})"


class UnionSetArray(LazySet):
    """Union of a finite list of sets of the same dimension."""

    def __init__(self, sets: Sequence[LazySet], dim: int = None):
        self.sets = list(sets)
        if dim is None:
            if not self.sets:
                raise PreconditionViolation("the dimension of an empty union is unknown")
            dim = self.sets[0].dim
        self._dim = int(dim)
        for X in self.sets:
            if X.dim != self._dim:
                raise DimensionMismatch(X.dim, self._dim, "union")

    @property
    def dim(self) -> int:
        return self._dim

    def array(self) -> List[LazySet]:
        return self.sets

    def __len__(self):
        return len(self.sets)

    def __iter__(self):
        return iter(self.sets)

    def __getitem__(self, i):
        return self.sets[i]

    def is_bounded(self) -> bool:
        return all(X.is_bounded() for X in self.sets)

    def is_empty(self) -> bool:
        return all(X.is_empty() for X in self.sets)

    def support_function(self, d):
        return max((X.support_function(d) for X in self.sets), default=-np.inf)

    def support_vector(self, d):
        candidates = [X for X in self.sets if not X.is_empty()]
        if not candidates:
            raise PreconditionViolation("the support vector of an empty set is undefined")
        return max((X.support_vector(d) for X in candidates), key=lambda v: np.dot(d, v))

    def an_element(self):
        for X in self.sets:
            if not X.is_empty():
                return X.an_element()
        raise PreconditionViolation("an empty set has no element")

    def __contains__(self, x) -> bool:
        return any(x in X for X in self.sets)

    def __repr__(self):
        return f"UnionSetArray({self.sets!r})"

"""
convexsets - Convex set representations and their pairwise intersection.

Sets are described by their support function and grouped in a small
taxonomy (singletons, intervals, hyperrectangles, zonotopes, polygons,
polyhedra, half-spaces, balls, stars and a few lazy composites). The
``intersection`` operation picks the most specific algorithm for each pair
of representations.

Main Functions
--------------
intersection : Concrete intersection of two sets
intersection_inplace : Refine a star by a half-space in place
linear_map : Concrete linear map of a set
affine_map : Concrete affine map of a set
minkowski_sum : Concrete Minkowski sum of two sets
translate : Concrete translation of a set
support_function : Support function of a set in a direction
support_vector : Point of a set attaining the support function
remove_redundant_constraints : Prune a constraint list with an LP oracle

Example
-------
>>> from convexsets import LineSegment, intersection
>>> s1 = LineSegment([0.0, 0.0], [2.0, 2.0])
>>> s2 = LineSegment([0.0, 2.0], [2.0, 0.0])
>>> intersection(s1, s2).element()
array([1., 1.])
"""

from .core import (
    EPS,
    Tolerance,
    get_tolerance,
    set_tolerance,
    reset_tolerance,
    isapproxzero,
    ConvexSetError,
    DimensionMismatch,
    UnsupportedOperation,
    AmbiguousDispatch,
    PreconditionViolation,
    LPSolverError,
)
from .core.lp import (
    LPOracle,
    LPResult,
    ScipyLinprogOracle,
    default_lp_oracle,
    set_default_lp_oracle,
    is_feasible,
    is_redundant,
    remove_redundant_constraints,
    remove_redundant_vertices,
    vertices_from_constraints,
)
from .sets import *  # noqa: F401,F403
from .sets import __all__ as _sets_all
from .operations import (
    affine_map,
    intersection,
    intersection_inplace,
    linear_map,
    minkowski_sum,
    translate,
)

__all__ = [
    # Tolerances
    'EPS',
    'Tolerance',
    'get_tolerance',
    'set_tolerance',
    'reset_tolerance',
    'isapproxzero',
    # Errors
    'ConvexSetError',
    'DimensionMismatch',
    'UnsupportedOperation',
    'AmbiguousDispatch',
    'PreconditionViolation',
    'LPSolverError',
    # LP oracle
    'LPOracle',
    'LPResult',
    'ScipyLinprogOracle',
    'default_lp_oracle',
    'set_default_lp_oracle',
    'is_feasible',
    'is_redundant',
    'remove_redundant_constraints',
    'remove_redundant_vertices',
    'vertices_from_constraints',
    # Operations
    'intersection',
    'intersection_inplace',
    'linear_map',
    'affine_map',
    'minkowski_sum',
    'translate',
] + list(_sets_all)

__version__ = "0.1.0"

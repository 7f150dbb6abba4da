"""
Core numerics: tolerances, errors and planar geometry helpers.
"""

from .tolerance import (
    EPS,
    Tolerance,
    get_tolerance,
    set_tolerance,
    reset_tolerance,
    isapproxzero,
    _isapprox,
    _leq,
    _geq,
)
from .errors import (
    ConvexSetError,
    DimensionMismatch,
    UnsupportedOperation,
    AmbiguousDispatch,
    PreconditionViolation,
    LPSolverError,
)
from .geometry import (
    right_turn,
    angle_leq,
    sort_by_angle,
    same_direction,
    polygon_area,
    ensure_ccw,
    convex_hull_2d,
    polygon_covers,
)

__all__ = [
    'EPS',
    'Tolerance',
    'get_tolerance',
    'set_tolerance',
    'reset_tolerance',
    'isapproxzero',
    '_isapprox',
    '_leq',
    '_geq',
    'ConvexSetError',
    'DimensionMismatch',
    'UnsupportedOperation',
    'AmbiguousDispatch',
    'PreconditionViolation',
    'LPSolverError',
    'right_turn',
    'angle_leq',
    'sort_by_angle',
    'same_direction',
    'polygon_area',
    'ensure_ccw',
    'convex_hull_2d',
    'polygon_covers',
]

"""
Operations on sets: concrete linear and affine maps, Minkowski sums and
pairwise intersection.
"""

from .dispatch import DispatchRegistry, Rule
from .linear_map import linear_map
from .affine_map import affine_map, minkowski_sum, translate
from .intersection import intersection, intersection_inplace

__all__ = [
    'DispatchRegistry',
    'Rule',
    'linear_map',
    'affine_map',
    'minkowski_sum',
    'translate',
    'intersection',
    'intersection_inplace',
]

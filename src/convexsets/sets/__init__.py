"""
Set representations.
"""

from .base import LazySet, support_function, support_vector
from .abstract import AbstractPolyhedron, AbstractPolytope, AbstractPolygon
from .halfspace import HalfSpace, Hyperplane, Line2D
from .special import EmptySet, Universe
from .polyhedron import (
    HPolyhedron,
    HPolytope,
    VPolytope,
    constrained_dimensions,
    project_unconstrained,
    vertices_to_constraints,
)
from .zonotope import AbstractZonotope, Zonotope, LineSegment
from .hyperrectangle import AbstractHyperrectangle, Hyperrectangle, Interval, AbstractSingleton, Singleton
from .polygon import AbstractHPolygon, HPolygon, VPolygon
from .ball import Ball2
from .star import Star
from .lazy import LinearMap, AffineMap, MinkowskiSum, CartesianProductArray, UnionSet, UnionSetArray, same_block_structure

__all__ = [
    'LazySet',
    'support_function',
    'support_vector',
    'AbstractPolyhedron',
    'AbstractPolytope',
    'AbstractPolygon',
    'HalfSpace',
    'Hyperplane',
    'Line2D',
    'EmptySet',
    'Universe',
    'HPolyhedron',
    'HPolytope',
    'VPolytope',
    'constrained_dimensions',
    'project_unconstrained',
    'vertices_to_constraints',
    'AbstractZonotope',
    'Zonotope',
    'LineSegment',
    'AbstractHyperrectangle',
    'Hyperrectangle',
    'Interval',
    'AbstractSingleton',
    'Singleton',
    'AbstractHPolygon',
    'HPolygon',
    'VPolygon',
    'Ball2',
    'Star',
    'LinearMap',
    'AffineMap',
    'MinkowskiSum',
    'CartesianProductArray',
    'UnionSet',
    'UnionSetArray',
    'same_block_structure',
]

"""
Unit tests for affine maps, translations and Minkowski sums.
"""

import numpy as np
import pytest

from convexsets import (
    AffineMap,
    Ball2,
    CartesianProductArray,
    DimensionMismatch,
    EmptySet,
    HalfSpace,
    HPolygon,
    HPolytope,
    Hyperrectangle,
    Interval,
    Line2D,
    LinearMap,
    LineSegment,
    MinkowskiSum,
    Singleton,
    Star,
    UnionSet,
    Universe,
    UnsupportedOperation,
    VPolygon,
    VPolytope,
    Zonotope,
    affine_map,
    intersection,
    linear_map,
    minkowski_sum,
    translate,
)

DIRECTIONS = [np.array(d, dtype=float) for d in
              ([1, 0], [0, 1], [-1, 0], [0, -1], [1, 1], [1, -1], [-2, 1], [-1, -3])]


def unit_box(n):
    return Hyperrectangle(np.zeros(n), np.ones(n))


def sorted_vertices(vertices):
    return sorted(tuple(np.round(v, 9)) for v in vertices)


class TestAffineMap:
    """The lazy AffineMap wrapper."""

    def test_dimension(self):
        """The output dimension is the number of rows of M."""
        am = AffineMap([[1.0, 0.0, 0.0], [0.0, 1.0, 1.0]], unit_box(3), [1.0, 0.0])
        assert am.dim == 2

    def test_translation_length_checked(self):
        """A translation of the wrong length is rejected."""
        with pytest.raises(DimensionMismatch):
            AffineMap(np.eye(2), unit_box(2), [1.0, 0.0, 0.0])
        with pytest.raises(DimensionMismatch):
            AffineMap(np.eye(3), unit_box(2), [1.0, 0.0, 0.0])

    def test_linear_map_composes(self):
        """A linear map of an affine map is an affine map of the same set."""
        am = AffineMap(np.diag([1.0, 2.0, 3.0]), unit_box(3), [1.0, 0.0, 0.0])
        N = np.array([[1.0, 0.0, 0.0], [0.0, 1.0, 1.0]])
        composed = am.linear_map(N)
        assert isinstance(composed, AffineMap)
        assert composed.X is am.X
        np.testing.assert_allclose(composed.M, N @ am.M)
        np.testing.assert_allclose(composed.v, N @ am.v)

    def test_scale(self):
        """Scaling multiplies both the matrix and the translation."""
        am = AffineMap(np.diag([1.0, 2.0, 3.0]), unit_box(3), [1.0, 0.0, 0.0])
        scaled = am.scale(2.0)
        np.testing.assert_allclose(scaled.M, 2.0 * am.M)
        np.testing.assert_allclose(scaled.v, [2.0, 0.0, 0.0])

    def test_support_function(self):
        """The support function adds the translation term."""
        am = AffineMap(np.diag([1.0, 2.0, 3.0]), unit_box(3), [1.0, 0.0, 0.0])
        d = np.array([1.0, 0.0, 0.0])
        assert am.support_function(d) == pytest.approx(2.0)
        assert am.support_function(-d) == pytest.approx(0.0)
        sv = am.support_vector(d)
        assert sv[0] == pytest.approx(2.0)
        assert np.dot(d, sv) == pytest.approx(am.support_function(d))

    def test_boundedness(self):
        """Boundedness follows the operand unless the map is zero."""
        assert AffineMap(np.eye(2), unit_box(2), [1.0, 1.0]).is_bounded()
        assert not AffineMap(np.eye(2), Universe(2), [1.0, 1.0]).is_bounded()
        assert AffineMap(np.zeros((2, 2)), Universe(2), [1.0, 1.0]).is_bounded()

    def test_polyhedral(self):
        """Only maps of polyhedral sets are polyhedral."""
        assert AffineMap(np.eye(2), unit_box(2), [0.0, 0.0]).is_polyhedral()
        assert not AffineMap(np.eye(2), Ball2([0.0, 0.0], 1.0), [0.0, 0.0]).is_polyhedral()

    def test_an_element(self):
        """An element of the operand is mapped."""
        am = AffineMap([[1.0, 0.0], [0.0, 2.0]], Singleton([1.0, 1.0]), [1.0, 0.0])
        np.testing.assert_allclose(am.an_element(), [2.0, 2.0])

    def test_emptiness(self):
        """The image of the empty set is empty."""
        assert AffineMap(np.eye(2), EmptySet(2), [1.0, 1.0]).is_empty()
        assert not AffineMap(np.eye(2), unit_box(2), [1.0, 1.0]).is_empty()

    def test_vertices(self):
        """Vertices of a mapped square."""
        am = AffineMap([[1.0, 0.0], [0.0, 2.0]], unit_box(2), [-1.0, 0.0])
        expected = [(-2.0, -2.0), (-2.0, 2.0), (0.0, -2.0), (0.0, 2.0)]
        assert sorted_vertices(am.vertices_list()) == expected

    def test_equals_hyperrectangle(self):
        """The mapped square is the box with center (-1, 0) and radius (1, 2)."""
        am = AffineMap([[1.0, 0.0], [0.0, 2.0]], unit_box(2), [-1.0, 0.0])
        H = Hyperrectangle([-1.0, 0.0], [1.0, 2.0])
        concrete = affine_map(am.M, am.X, am.v)
        for d in DIRECTIONS:
            assert am.support_function(d) == pytest.approx(H.support_function(d))
            assert concrete.support_function(d) == pytest.approx(H.support_function(d))

    def test_membership(self):
        """Membership undoes the translation before the linear map."""
        am = AffineMap([[1.0, 0.0], [0.0, 2.0]], unit_box(2), [-1.0, 0.0])
        assert [-1.5, 1.0] in am
        assert [0.0, 2.0] in am
        assert [0.5, 0.0] not in am
        singular = AffineMap([[1.0, 1.0], [0.0, 0.0]], unit_box(2), [0.0, 1.0])
        assert [1.5, 1.0] in singular
        assert [1.5, 0.0] not in singular

    def test_constraints(self):
        """Invertible maps transform the constraints of the operand."""
        am = AffineMap([[1.0, 0.0], [0.0, 2.0]], unit_box(2), [-1.0, 0.0])
        P = HPolytope(am.constraints_list(), dim=2)
        assert [-1.0, 1.9] in P
        assert [0.1, 0.0] not in P
        assert P.support_function(np.array([0.0, 1.0])) == pytest.approx(2.0)

    def test_constraints_singular(self):
        """Singular maps go through the vertices."""
        am = AffineMap([[1.0, 1.0], [0.0, 0.0]], unit_box(2), [0.0, 1.0])
        P = HPolytope(am.constraints_list(), dim=2)
        assert [2.0, 1.0] in P
        assert [0.0, 1.5] not in P


class TestMinkowskiSum:
    """The lazy MinkowskiSum wrapper."""

    def test_dimension_checked(self):
        """Summands must agree in dimension."""
        with pytest.raises(DimensionMismatch):
            MinkowskiSum(unit_box(2), unit_box(3))

    def test_support_function(self):
        """Support functions add up."""
        S = MinkowskiSum(unit_box(2), Ball2([0.0, 0.0], 1.0))
        assert S.support_function(np.array([1.0, 0.0])) == pytest.approx(2.0)
        assert S.support_function(np.array([1.0, 1.0])) == pytest.approx(2.0 + np.sqrt(2.0))
        np.testing.assert_allclose(S.support_vector(np.array([1.0, 0.0])), [2.0, 1.0])

    def test_properties(self):
        """Properties combine those of the summands."""
        S = MinkowskiSum(unit_box(2), Ball2([0.0, 0.0], 1.0))
        assert S.is_convex()
        assert S.is_bounded()
        assert not S.is_polyhedral()
        assert MinkowskiSum(unit_box(2), EmptySet(2)).is_empty()
        assert not MinkowskiSum(unit_box(2), HalfSpace([1.0, 0.0], 0.0)).is_bounded()

    def test_an_element(self):
        """Elements of the summands are added."""
        S = MinkowskiSum(Singleton([1.0, 2.0]), Singleton([3.0, -1.0]))
        np.testing.assert_allclose(S.an_element(), [4.0, 1.0])

    def test_membership(self):
        """Polyhedral sums answer membership by an LP."""
        S = MinkowskiSum(unit_box(2), VPolygon([[0.0, 0.0], [2.0, 0.0], [0.0, 2.0]]))
        assert [2.5, 0.5] in S
        assert [-1.0, 3.0] in S
        assert [2.5, 2.5] not in S
        assert [-1.5, 0.0] not in S

    def test_membership_not_polyhedral(self):
        """Non-polyhedral summands are not supported."""
        S = MinkowskiSum(unit_box(2), Ball2([0.0, 0.0], 1.0))
        with pytest.raises(UnsupportedOperation):
            [0.0, 0.0] in S

    def test_vertices(self):
        """Two orthogonal segments sum to a square."""
        S = MinkowskiSum(LineSegment([0.0, 0.0], [1.0, 0.0]), LineSegment([0.0, 0.0], [0.0, 1.0]))
        assert sorted_vertices(S.vertices_list()) == [(0.0, 0.0), (0.0, 1.0), (1.0, 0.0), (1.0, 1.0)]


class TestTranslate:
    """Concrete translations keep the representation."""

    def test_dimension_checked(self):
        """The vector must match the set."""
        with pytest.raises(DimensionMismatch):
            translate(unit_box(2), [1.0])

    def test_absorbers(self):
        """Empty sets and universes are unchanged."""
        E, U = EmptySet(2), Universe(2)
        assert translate(E, [1.0, 1.0]) is E
        assert translate(U, [1.0, 1.0]) is U

    def test_boxes(self):
        """Points, intervals and boxes."""
        assert translate(Singleton([1.0, 2.0]), [1.0, 1.0]) == Singleton([2.0, 3.0])
        assert translate(Interval(0.0, 1.0), [2.0]) == Interval(2.0, 3.0)
        assert translate(unit_box(2), [1.0, -1.0]) == Hyperrectangle([1.0, -1.0], [1.0, 1.0])

    def test_zonotopes(self):
        """Segments stay segments, zonotopes keep their generators."""
        assert translate(LineSegment([0.0, 0.0], [1.0, 0.0]), [0.0, 1.0]) == \
            LineSegment([0.0, 1.0], [1.0, 1.0])
        Z = translate(Zonotope([0.0, 0.0], [[1.0, 1.0], [0.0, 1.0]]), [2.0, 0.0])
        assert isinstance(Z, Zonotope)
        np.testing.assert_allclose(Z.center(), [2.0, 0.0])
        np.testing.assert_allclose(Z.genmat(), [[1.0, 1.0], [0.0, 1.0]])

    def test_half_spaces(self):
        """Offsets move along the normal; lines stay lines."""
        assert translate(HalfSpace([1.0, 1.0], 1.0), [1.0, 0.0]) == HalfSpace([1.0, 1.0], 2.0)
        L = translate(Line2D([0.0, 1.0], 0.0), [5.0, 2.0])
        assert isinstance(L, Line2D)
        assert L.b == pytest.approx(2.0)

    def test_polygons(self):
        """V- and H-polygons are translated in their own representation."""
        V = translate(VPolygon([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]]), [1.0, 1.0])
        assert isinstance(V, VPolygon)
        assert sorted_vertices(V.vertices_list()) == [(1.0, 1.0), (1.0, 2.0), (2.0, 1.0)]
        H = translate(HPolygon(unit_box(2).constraints_list()), [2.0, 0.0])
        assert isinstance(H, HPolygon)
        assert H.is_sorted()
        assert [2.5, 0.5] in H
        assert [0.5, 0.5] not in H

    def test_polytopes(self):
        """Polytopes in higher dimension."""
        P = translate(VPolytope([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]]), [0.0, 0.0, 1.0])
        assert isinstance(P, VPolytope)
        assert sorted_vertices(P.vertices_list()) == [(0.0, 0.0, 1.0), (1.0, 1.0, 2.0)]
        Q = translate(HPolytope(unit_box(3).constraints_list(), dim=3), [1.0, 0.0, 0.0])
        assert isinstance(Q, HPolytope)
        assert [1.9, 0.0, 0.0] in Q

    def test_ball_and_star(self):
        """Balls move their center, stars their center."""
        B = translate(Ball2([0.0, 0.0], 1.0), [1.0, 1.0])
        np.testing.assert_allclose(B.center, [1.0, 1.0])
        S = Star([0.0, 0.0], np.eye(2), unit_box(2))
        T = translate(S, [1.0, 0.0])
        np.testing.assert_allclose(T.center, [1.0, 0.0])
        assert T.predicate is S.predicate

    def test_composites(self):
        """Unions and Cartesian products are translated element-wise."""
        U = translate(UnionSet(Singleton([0.0]), Singleton([1.0])), [1.0])
        assert U.X == Singleton([1.0]) and U.Y == Singleton([2.0])
        C = translate(CartesianProductArray([Interval(0.0, 1.0), unit_box(2)]), [1.0, 2.0, 3.0])
        assert C.blocks[0] == Interval(1.0, 2.0)
        assert C.blocks[1] == Hyperrectangle([2.0, 3.0], [1.0, 1.0])

    def test_lazy_maps(self):
        """Lazy maps are materialized first."""
        T = translate(LinearMap(2.0 * np.eye(2), unit_box(2)), [1.0, 0.0])
        assert T.support_function(np.array([1.0, 0.0])) == pytest.approx(3.0)
        A = translate(AffineMap(np.eye(2), unit_box(2), [1.0, 0.0]), [1.0, 0.0])
        assert A.support_function(np.array([1.0, 0.0])) == pytest.approx(3.0)


class TestConcreteMaps:
    """affine_map() and linear_map() on the lazy wrappers."""

    def test_affine_map(self):
        """The image of a box under a rotation and a shift."""
        R = np.array([[0.0, -1.0], [1.0, 0.0]])
        Z = affine_map(R, Hyperrectangle([1.0, 0.0], [1.0, 2.0]), [0.0, 1.0])
        assert isinstance(Z, Zonotope)
        np.testing.assert_allclose(Z.center(), [0.0, 2.0])
        assert Z.support_function(np.array([1.0, 0.0])) == pytest.approx(2.0)

    def test_affine_map_dimension_checked(self):
        """The translation must match the rows of M."""
        with pytest.raises(DimensionMismatch):
            affine_map(np.eye(2), unit_box(2), [1.0])

    def test_linear_map_of_affine_map(self):
        """Linear maps compose with affine maps."""
        am = AffineMap(np.eye(2), unit_box(2), [1.0, 0.0])
        result = linear_map(2.0 * np.eye(2), am)
        assert result.support_function(np.array([1.0, 0.0])) == pytest.approx(4.0)
        assert result.support_function(np.array([-1.0, 0.0])) == pytest.approx(0.0)

    def test_linear_map_of_minkowski_sum(self):
        """Linear maps distribute over Minkowski sums."""
        S = MinkowskiSum(unit_box(2), Singleton([1.0, 1.0]))
        result = linear_map(np.array([[1.0, 1.0]]), S)
        assert result.support_function(np.array([1.0])) == pytest.approx(4.0)
        assert result.support_function(np.array([-1.0])) == pytest.approx(0.0)


class TestMinkowskiSumConcrete:
    """minkowski_sum() keeps structure where it can."""

    def test_dimension_checked(self):
        """Summands must agree in dimension."""
        with pytest.raises(DimensionMismatch):
            minkowski_sum(unit_box(2), unit_box(3))

    def test_absorbers(self):
        """The empty set absorbs first, then the universe."""
        assert minkowski_sum(EmptySet(2), Universe(2)) == EmptySet(2)
        assert minkowski_sum(unit_box(2), Universe(2)) == Universe(2)

    def test_singleton_translates(self):
        """Adding a point is a translation."""
        B = minkowski_sum(Singleton([1.0, 1.0]), Ball2([0.0, 0.0], 1.0))
        assert isinstance(B, Ball2)
        np.testing.assert_allclose(B.center, [1.0, 1.0])

    def test_intervals_and_boxes(self):
        """Bounds and radii add up."""
        assert minkowski_sum(Interval(0.0, 1.0), Interval(2.0, 4.0)) == Interval(2.0, 5.0)
        H = minkowski_sum(unit_box(2), Hyperrectangle([1.0, 0.0], [0.5, 2.0]))
        assert H == Hyperrectangle([1.0, 0.0], [1.5, 3.0])

    def test_zonotopes(self):
        """Generators are concatenated."""
        Z = minkowski_sum(Zonotope([0.0, 0.0], [[1.0], [1.0]]), LineSegment([0.0, 0.0], [2.0, 0.0]))
        assert isinstance(Z, Zonotope)
        assert Z.ngens() == 2
        np.testing.assert_allclose(Z.center(), [1.0, 0.0])

    def test_balls(self):
        """Euclidean balls add their radii."""
        B = minkowski_sum(Ball2([1.0, 0.0], 1.0), Ball2([0.0, 1.0], 2.0))
        np.testing.assert_allclose(B.center, [1.0, 1.0])
        assert B.radius == 3.0

    def test_polygons(self):
        """Two triangles sum to a hexagon."""
        T1 = VPolygon([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])
        T2 = VPolygon([[0.0, 0.0], [-1.0, 0.0], [0.0, -1.0]])
        P = minkowski_sum(T1, T2)
        assert isinstance(P, VPolygon)
        assert len(P.vertices_list()) == 6
        assert P.area() == pytest.approx(3.0)

    def test_unsupported(self):
        """Unbounded non-trivial sums have no concrete form."""
        with pytest.raises(UnsupportedOperation):
            minkowski_sum(Ball2([0.0, 0.0], 1.0), HalfSpace([1.0, 0.0], 0.0))


class TestIntersectionRules:
    """Intersections materialize the lazy wrappers."""

    def test_affine_map_halfspace(self):
        """A mapped box cut by a half-space."""
        am = AffineMap([[1.0, 0.0], [0.0, 2.0]], unit_box(2), [-1.0, 0.0])
        result = intersection(am, HalfSpace([1.0, 0.0], -1.0))
        assert result.support_function(np.array([1.0, 0.0])) == pytest.approx(-1.0)
        assert result.support_function(np.array([-1.0, 0.0])) == pytest.approx(2.0)
        assert result.support_function(np.array([0.0, 1.0])) == pytest.approx(2.0)

    def test_minkowski_sum_interval(self):
        """An interval against a lazy sum of intervals."""
        S = MinkowskiSum(Interval(0.0, 1.0), Interval(1.0, 2.0))
        assert intersection(Interval(0.0, 2.0), S) == Interval(1.0, 2.0)
        assert intersection(S, Interval(0.0, 2.0)) == Interval(1.0, 2.0)

    def test_singleton(self):
        """Points are tested for membership."""
        am = AffineMap(np.eye(2), unit_box(2), [1.0, 1.0])
        assert intersection(Singleton([0.5, 0.5]), am) == Singleton([0.5, 0.5])
        assert intersection(am, Singleton([-0.5, 0.5])) == EmptySet(2)

    def test_mixed_lazy_operands(self):
        """Linear maps, affine maps and sums intersect with each other."""
        L = LinearMap(np.eye(2), unit_box(2))
        am = AffineMap(np.eye(2), unit_box(2), [1.0, 1.0])
        S = MinkowskiSum(unit_box(2), Singleton([0.5, 0.5]))
        for X, Y in ((L, am), (am, L), (am, S), (S, am), (L, S)):
            result = intersection(X, Y)
            assert [0.5, 0.5] in result
            assert [-0.75, 0.0] not in result
            assert [1.75, 1.75] not in result

    def test_union(self):
        """Unions distribute over the lazy operand."""
        U = UnionSet(Singleton([0.0, 0.0]), Singleton([3.0, 3.0]))
        result = intersection(U, AffineMap(np.eye(2), unit_box(2), [2.0, 2.0]))
        assert result.X == EmptySet(2)
        assert result.Y == Singleton([3.0, 3.0])

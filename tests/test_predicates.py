import math

import pytest

from tetraflip.geom import Pt, extent, lexicographic_order, unique_points
from tetraflip.predicates import (circumsphere, orient3d, segment_crosses_triangle,
                                  signed_distance_to_plane, visible_from_point)

O = Pt(0, 0, 0)
X = Pt(1, 0, 0)
Y = Pt(0, 1, 0)
Z = Pt(0, 0, 1)


def test_orient3d_sign_follows_right_hand_rule():
    assert orient3d(O, X, Y, Z) > 0
    assert orient3d(O, Y, X, Z) < 0
    assert orient3d(O, X, Y, Pt(0.3, 0.3, 0)) == 0


def test_visible_from_point_is_strict():
    assert visible_from_point(O, X, Y, Pt(0.2, 0.2, 1.0))
    assert not visible_from_point(O, X, Y, Pt(0.2, 0.2, -1.0))
    assert not visible_from_point(O, X, Y, Pt(5, 5, 0))


def test_signed_distance_to_plane():
    assert signed_distance_to_plane(O, X, Y, Pt(3, 4, 2)) == pytest.approx(2.0)
    assert signed_distance_to_plane(O, X, X, Pt(3, 4, 2)) == 0.0


def test_circumsphere_of_corner_tetrahedron():
    centre, radius = circumsphere(O, X, Y, Z)
    assert (centre.x, centre.y, centre.z) == pytest.approx((0.5, 0.5, 0.5))
    assert radius == pytest.approx(math.sqrt(0.75))


def test_circumsphere_degenerate_is_none():
    assert circumsphere(O, X, Y, Pt(1, 1, 0)) is None


def test_segment_crosses_triangle():
    a, b, c = X, Y, Z
    assert segment_crosses_triangle(a, b, c, Pt(1, 0.6, 0.6), O)
    # проходить повз трикутник
    assert not segment_crosses_triangle(a, b, c, Pt(2, 2, 2), Pt(1.5, 1.5, -3))
    # не дотягується до площини
    assert not segment_crosses_triangle(a, b, c, O, Pt(0.1, 0.1, 0.1))
    # паралельний площині
    assert not segment_crosses_triangle(a, b, c, Pt(0, 0, 0), Pt(1, -1, 0))


def test_unique_points_keeps_first_occurrence():
    pts = unique_points([(0, 0, 0), (1, 0, 0), (0, 0, 1e-12), (1, 0, 0)])
    assert pts == [Pt(0, 0, 0), Pt(1, 0, 0)]


def test_lexicographic_order():
    pts = [Pt(1, 0, 0), Pt(0, 1, 0), Pt(0, 0, 1), Pt(0, 1, -1)]
    assert lexicographic_order(pts) == [2, 3, 1, 0]


def test_visibility_is_a_pure_sign_test():
    # орієнтований об'єм ~1e-15: поріг 1e-10 відкинув би таку точку
    s = 1e-5
    assert visible_from_point(Pt(0, 0, 0), Pt(s, 0, 0), Pt(0, s, 0), Pt(0, 0, s))
    assert not visible_from_point(Pt(0, 0, 0), Pt(s, 0, 0), Pt(0, s, 0), Pt(0, 0, -s))


def test_extent():
    assert extent([]) == 0.0
    assert extent([Pt(1, 2, 3)]) == 0.0
    assert extent([Pt(0, 0, 0), Pt(2, -1, 0.5)]) == 2

"""Unit tests for plane geometry helpers."""

import pytest

from floorplan.domain.geometry import (
    centroid,
    closest_point_on_segment,
    distance,
    interior_angle,
    normalize_angle,
    point_in_polygon,
    points_coincide,
    project_onto_segment,
    rectangle_corners,
    rotate_point,
    signed_area,
)
from floorplan.domain.value_objects import Point2D

SQUARE_CCW = [Point2D(0, 0), Point2D(10, 0), Point2D(10, 10), Point2D(0, 10)]
SQUARE_CW = list(reversed(SQUARE_CCW))


def assert_point(p: Point2D, x: float, y: float) -> None:
    assert p.x == pytest.approx(x, abs=1e-9)
    assert p.y == pytest.approx(y, abs=1e-9)


class TestDistances:
    def test_distance(self) -> None:
        assert distance(Point2D(0, 0), Point2D(3, 4)) == 5

    def test_points_coincide_within_tolerance(self) -> None:
        assert points_coincide(Point2D(0, 0), Point2D(10, 0), 15)
        assert not points_coincide(Point2D(0, 0), Point2D(20, 0), 15)


class TestProjection:
    """Tests for projecting points onto wall segments."""

    def test_projection_inside_segment(self) -> None:
        assert project_onto_segment(Point2D(5, 5), Point2D(0, 0), Point2D(10, 0)) == 0.5

    def test_projection_is_clamped(self) -> None:
        a, b = Point2D(0, 0), Point2D(10, 0)
        assert project_onto_segment(Point2D(-5, 3), a, b) == 0.0
        assert project_onto_segment(Point2D(25, -3), a, b) == 1.0

    def test_zero_length_segment_projects_to_start(self) -> None:
        a = Point2D(3, 3)
        assert project_onto_segment(Point2D(10, 10), a, a) == 0.0

    def test_closest_point_on_segment(self) -> None:
        closest, dist, t = closest_point_on_segment(Point2D(5, 3), Point2D(0, 0), Point2D(10, 0))
        assert_point(closest, 5, 0)
        assert dist == pytest.approx(3)
        assert t == pytest.approx(0.5)


class TestPolygons:
    def test_point_in_polygon(self) -> None:
        assert point_in_polygon(Point2D(5, 5), SQUARE_CCW)
        assert not point_in_polygon(Point2D(15, 5), SQUARE_CCW)

    def test_point_in_polygon_needs_three_points(self) -> None:
        assert not point_in_polygon(Point2D(0, 0), SQUARE_CCW[:2])

    def test_signed_area_sign_follows_winding(self) -> None:
        assert signed_area(SQUARE_CCW) == 100
        assert signed_area(SQUARE_CW) == -100

    def test_centroid_is_vertex_average(self) -> None:
        assert_point(centroid(SQUARE_CCW), 5, 5)

    def test_centroid_of_empty_polygon_raises(self) -> None:
        with pytest.raises(ValueError):
            centroid([])


class TestAngles:
    @pytest.mark.parametrize(
        ("degrees", "expected"),
        [(-90, 270), (360, 0), (725, 5), (0, 0)],
    )
    def test_normalize_angle(self, degrees: float, expected: float) -> None:
        assert normalize_angle(degrees) == pytest.approx(expected)

    def test_rotate_point_about_origin(self) -> None:
        assert_point(rotate_point(Point2D(1, 0), 90), 0, 1)

    def test_rotate_point_about_custom_origin(self) -> None:
        assert_point(rotate_point(Point2D(2, 1), 90, Point2D(1, 1)), 1, 2)

    def test_interior_angle_counter_clockwise_rectangle(self) -> None:
        angle = interior_angle(Point2D(0, 3000), Point2D(0, 0), Point2D(4000, 0))
        assert angle == pytest.approx(90)

    def test_interior_angle_clockwise_rectangle(self) -> None:
        angle = interior_angle(Point2D(4000, 0), Point2D(0, 0), Point2D(0, 3000))
        assert angle == pytest.approx(270)


class TestRectangleCorners:
    def test_unrotated_front_is_below_rear_edge(self) -> None:
        corners = rectangle_corners(Point2D(0, 0), 1000, 600, 0)
        assert_point(corners.rear_right, 1000, 0)
        assert_point(corners.front_left, 0, -600)
        assert_point(corners.front_right, 1000, -600)
        assert_point(corners.rear_midpoint, 500, 0)

    def test_rotated_ninety_degrees(self) -> None:
        corners = rectangle_corners(Point2D(0, 0), 1000, 600, 90)
        assert_point(corners.rear_right, 0, 1000)
        assert_point(corners.front_left, 600, 0)
        assert_point(corners.front_midpoint, 600, 500)

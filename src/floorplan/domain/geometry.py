"""Plane geometry helpers for floor plan calculations.

Pure functions over Point2D values with no knowledge of rooms, doors or
cabinet runs. All coordinates are millimetres with the Y axis pointing up,
so a positive signed area means counter-clockwise winding.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from .value_objects import Point2D, RunCorners

__all__ = [
    "centroid",
    "closest_point_on_segment",
    "distance",
    "interior_angle",
    "lerp",
    "normalize_angle",
    "point_in_polygon",
    "points_coincide",
    "project_onto_segment",
    "rectangle_corners",
    "rotate_point",
    "signed_area",
]


def distance(a: Point2D, b: Point2D) -> float:
    """Euclidean distance between two points."""
    return math.hypot(b.x - a.x, b.y - a.y)


def points_coincide(a: Point2D, b: Point2D, tolerance: float) -> bool:
    """True when two points are within `tolerance` of each other."""
    return distance(a, b) <= tolerance


def lerp(a: Point2D, b: Point2D, t: float) -> Point2D:
    """Linear interpolation from a (t=0) to b (t=1)."""
    return Point2D(a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t)


def project_onto_segment(p: Point2D, a: Point2D, b: Point2D) -> float:
    """Parameter of the projection of p onto segment ab, clamped to [0, 1].

    A zero-length segment projects everything onto its start (t = 0).
    """
    dx = b.x - a.x
    dy = b.y - a.y
    len2 = dx * dx + dy * dy
    if len2 == 0:
        return 0.0
    t = ((p.x - a.x) * dx + (p.y - a.y) * dy) / len2
    return max(0.0, min(1.0, t))


def closest_point_on_segment(
    p: Point2D, a: Point2D, b: Point2D
) -> tuple[Point2D, float, float]:
    """Closest point to p on segment ab.

    Returns:
        Tuple of (closest point, distance from p, clamped parameter t).
    """
    t = project_onto_segment(p, a, b)
    closest = lerp(a, b, t)
    return closest, distance(p, closest), t


def point_in_polygon(p: Point2D, polygon: Sequence[Point2D]) -> bool:
    """Even-odd rule point-in-polygon test (ray cast towards +X).

    Points exactly on an edge may be reported either way.
    """
    inside = False
    n = len(polygon)
    if n < 3:
        return False
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i].x, polygon[i].y
        xj, yj = polygon[j].x, polygon[j].y
        if (yi > p.y) != (yj > p.y):
            x_cross = (xj - xi) * (p.y - yi) / (yj - yi) + xi
            if p.x < x_cross:
                inside = not inside
        j = i
    return inside


def signed_area(polygon: Sequence[Point2D]) -> float:
    """Shoelace signed area. Negative for clockwise winding (Y up)."""
    n = len(polygon)
    if n < 3:
        return 0.0
    total = 0.0
    for i in range(n):
        a = polygon[i]
        b = polygon[(i + 1) % n]
        total += a.x * b.y - b.x * a.y
    return total / 2


def centroid(polygon: Sequence[Point2D]) -> Point2D:
    """Vertex average of a polygon.

    This is the mean of the vertices, not the area centroid; it is what the
    winding normalization and interior-side tests are defined against.
    """
    if not polygon:
        raise ValueError("Cannot compute the centroid of an empty polygon")
    n = len(polygon)
    return Point2D(
        sum(p.x for p in polygon) / n,
        sum(p.y for p in polygon) / n,
    )


def normalize_angle(degrees: float) -> float:
    """Map an angle in degrees into [0, 360)."""
    result = degrees % 360
    # -1e-15 % 360 rounds to 360.0
    return 0.0 if result >= 360 else result


def rotate_point(p: Point2D, degrees: float, origin: Point2D | None = None) -> Point2D:
    """Rotate p counter-clockwise by `degrees` around origin (default (0, 0))."""
    ox, oy = (origin.x, origin.y) if origin is not None else (0.0, 0.0)
    rad = math.radians(degrees)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    dx = p.x - ox
    dy = p.y - oy
    return Point2D(ox + dx * cos_a - dy * sin_a, oy + dx * sin_a + dy * cos_a)


def interior_angle(prev: Point2D, current: Point2D, nxt: Point2D) -> float:
    """Angle at `current` between the walls to `prev` and to `nxt`.

    Measured clockwise from the vector current->prev to current->nxt and
    returned in [0, 360). For a counter-clockwise rectangle every corner
    reports 90; for a clockwise one, 270.
    """
    v1x, v1y = prev.x - current.x, prev.y - current.y
    v2x, v2y = nxt.x - current.x, nxt.y - current.y
    angle = math.degrees(math.atan2(v1x * v2y - v1y * v2x, v1x * v2x + v1y * v2y))
    return normalize_angle(-angle)


def rectangle_corners(
    rear_left: Point2D, length: float, depth: float, degrees: float
) -> RunCorners:
    """Corners of a length x depth rectangle anchored at its rear-left corner.

    The rear edge runs along (cos θ, sin θ); the front lies `depth` away
    along the right-hand normal (sin θ, -cos θ).
    """
    rad = math.radians(degrees)
    ux, uy = math.cos(rad), math.sin(rad)
    nx, ny = math.sin(rad), -math.cos(rad)
    rear_right = Point2D(rear_left.x + length * ux, rear_left.y + length * uy)
    front_left = Point2D(rear_left.x + depth * nx, rear_left.y + depth * ny)
    front_right = Point2D(rear_right.x + depth * nx, rear_right.y + depth * ny)
    return RunCorners(
        rear_left=rear_left,
        rear_right=rear_right,
        front_left=front_left,
        front_right=front_right,
    )

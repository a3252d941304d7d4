"""Core geometry value objects."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Point2D:
    """2D point in plan coordinate space (millimetres, Y axis up).

    Negative coordinates are valid: the plan origin is wherever the first
    point of the main room was placed.
    """

    x: float
    y: float


@dataclass(frozen=True)
class WallPosition:
    """Computed geometry of one wall of a room.

    Walls are implicit: wall i runs from point i to point i + 1 (wrapping),
    so this object is derived from the room's current points every time it
    is requested.
    """

    wall_index: int
    start: Point2D
    end: Point2D

    def __post_init__(self) -> None:
        if self.wall_index < 0:
            raise ValueError("Wall index must be non-negative")

    @property
    def dx(self) -> float:
        return self.end.x - self.start.x

    @property
    def dy(self) -> float:
        return self.end.y - self.start.y

    @property
    def length(self) -> float:
        """Wall length in mm."""
        return math.hypot(self.dx, self.dy)

    @property
    def direction(self) -> float:
        """Angle in degrees from the positive X axis, in [0, 360)."""
        return math.degrees(math.atan2(self.dy, self.dx)) % 360

    @property
    def is_degenerate(self) -> bool:
        """True for zero-length walls, which have no direction."""
        return self.length == 0

    def unit_vector(self) -> tuple[float, float]:
        """Unit direction vector of the wall.

        Raises:
            ZeroDivisionError: For a zero-length wall. Callers are expected to
                check is_degenerate first.
        """
        length = self.length
        return (self.dx / length, self.dy / length)

    def point_at(self, t: float) -> Point2D:
        """Linear interpolation between start (t=0) and end (t=1)."""
        return Point2D(self.start.x + self.dx * t, self.start.y + self.dy * t)

    def point_at_distance(self, distance: float) -> Point2D:
        """Point `distance` mm from the wall start along the wall direction."""
        ux, uy = self.unit_vector()
        return Point2D(self.start.x + ux * distance, self.start.y + uy * distance)


@dataclass(frozen=True)
class WallData:
    """Length and interior angle of a wall, as shown in the wall table.

    The angle is measured at the wall's start vertex between the previous
    wall and this one, in [0, 360).
    """

    wall_index: int
    length: float
    angle: float

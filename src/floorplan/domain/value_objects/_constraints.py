"""Constraint value objects binding geometry to walls."""

from __future__ import annotations

from dataclasses import dataclass

from ._core_geometry import Point2D


@dataclass(frozen=True)
class AttachmentConstraint:
    """Binds a point to a parametric location on another room's wall.

    The attached point's coordinates are always
    lerp(parent wall start, parent wall end, t) for the parent room's
    current geometry.

    Attributes:
        parent_room_id: Id of the room owning the wall.
        wall_index: Index of the wall within the parent room.
        t: Parameter along the wall, 0 at the wall start and 1 at its end.
    """

    parent_room_id: str
    wall_index: int
    t: float

    def __post_init__(self) -> None:
        if self.wall_index < 0:
            raise ValueError("Wall index must be non-negative")
        if not 0.0 <= self.t <= 1.0:
            raise ValueError(f"t must be within [0, 1], got {self.t}")


@dataclass(frozen=True)
class SnapInfo:
    """Standing constraint binding a cabinet run's rear edge to a wall.

    Attributes:
        room_id: Room owning the wall.
        wall_index: Wall the rear edge is bound to.
        distance_from_start: Distance of the run's rear-left corner from the
            wall's start vertex, within [0, wall length].
        snapped_edge: Run edge bound to the wall. Only the rear edge snaps.
    """

    room_id: str
    wall_index: int
    distance_from_start: float
    snapped_edge: str = "rear"

    def __post_init__(self) -> None:
        if self.wall_index < 0:
            raise ValueError("Wall index must be non-negative")
        if self.snapped_edge != "rear":
            raise ValueError(f"Only the rear edge can snap, got '{self.snapped_edge}'")


@dataclass(frozen=True)
class RunCorners:
    """The four corners of a cabinet run rectangle."""

    rear_left: Point2D
    rear_right: Point2D
    front_left: Point2D
    front_right: Point2D

    @property
    def rear_midpoint(self) -> Point2D:
        return Point2D(
            (self.rear_left.x + self.rear_right.x) / 2,
            (self.rear_left.y + self.rear_right.y) / 2,
        )

    @property
    def front_midpoint(self) -> Point2D:
        return Point2D(
            (self.front_left.x + self.front_right.x) / 2,
            (self.front_left.y + self.front_right.y) / 2,
        )

    def as_polygon(self) -> list[Point2D]:
        """Corners in drawing order (rear-left, rear-right, front-right, front-left)."""
        return [self.rear_left, self.rear_right, self.front_right, self.front_left]


@dataclass(frozen=True)
class SnapResult:
    """Outcome of a best-wall search for a cabinet run.

    When should_snap is False all other fields are None; a missing snap is a
    normal outcome, not an error.
    """

    should_snap: bool
    room_id: str | None = None
    wall_index: int | None = None
    distance: float | None = None
    rotation_z: float | None = None
    start_pos: Point2D | None = None
    distance_from_start: float | None = None

    @classmethod
    def no_match(cls) -> SnapResult:
        return cls(should_snap=False)

    def to_snap_info(self) -> SnapInfo:
        """Build the SnapInfo to persist for an accepted snap."""
        if not self.should_snap:
            raise ValueError("Cannot build SnapInfo from a rejected snap")
        assert self.room_id is not None
        assert self.wall_index is not None
        assert self.distance_from_start is not None
        return SnapInfo(
            room_id=self.room_id,
            wall_index=self.wall_index,
            distance_from_start=self.distance_from_start,
        )

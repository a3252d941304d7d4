"""Door and window anchoring.

Doors and windows are anchored by wall index, absolute distance from the
wall start (position) and width. Whenever a room's wall endpoints move the
feature's start/end points are recomputed from those values, with a clamp
that pins the end point to the wall end when the wall became too short.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..entities import (
    DEFAULT_DOOR_HEIGHT,
    DEFAULT_FRAME_THICKNESS,
    DEFAULT_FRAME_WIDTH,
    DEFAULT_WINDOW_HEIGHT,
    DEFAULT_WINDOW_SILL_HEIGHT,
    Door,
    Plan,
    Room,
    WallFeature,
    Window,
)
from ..errors import EditRejected
from ..geometry import project_onto_segment
from ..value_objects import (
    FeatureEndpoint,
    FeatureKind,
    Point2D,
    WallPosition,
    WindowType,
)
from .room_editing import walls_coincide

__all__ = [
    "FeatureDefaults",
    "PendingAnchor",
    "PlacementSession",
    "WallFeatureService",
    "reanchor_feature",
]

logger = logging.getLogger(__name__)


def reanchor_feature(feature: WallFeature, wall: WallPosition) -> None:
    """Recompute a feature's points from its position and width.

    If the feature no longer fits (position + width > wall length) the
    position is pulled back to max(0, length - width), the start point is
    recomputed from it and the end point is pinned to the wall's end vertex.
    The width is left unchanged. Zero-length walls are skipped.
    """
    if wall.is_degenerate:
        return
    length = wall.length
    if feature.position + feature.width > length:
        feature.position = max(0.0, length - feature.width)
        feature.start_point = wall.point_at_distance(feature.position)
        feature.end_point = wall.end
        return
    feature.start_point = wall.point_at_distance(feature.position)
    feature.end_point = wall.point_at_distance(feature.position + feature.width)


@dataclass(frozen=True)
class FeatureDefaults:
    """Dimensions given to newly placed doors and windows."""

    door_height: float = DEFAULT_DOOR_HEIGHT
    door_frame_thickness: float = DEFAULT_FRAME_THICKNESS
    door_frame_width: float = DEFAULT_FRAME_WIDTH
    door_material: str = "Wood"
    window_height: float = DEFAULT_WINDOW_HEIGHT
    window_sill_height: float = DEFAULT_WINDOW_SILL_HEIGHT
    window_type: WindowType = WindowType.SINGLE


class WallFeatureService:
    """Places, edits and maintains doors and windows.

    Args:
        defaults: Dimensions for new features.
        snap_tolerance: Tolerance used when checking whether a secondary
            room's wall is a copy of a main room wall.
    """

    def __init__(
        self,
        defaults: FeatureDefaults | None = None,
        snap_tolerance: float = 15.0,
    ) -> None:
        self.defaults = defaults or FeatureDefaults()
        self.snap_tolerance = snap_tolerance

    # -- maintenance -------------------------------------------------------

    def reanchor(self, room: Room) -> None:
        """Re-anchor every door and window of a room to its current walls.

        Features whose wall no longer exists are dropped.
        """
        for kind, features in ((FeatureKind.DOOR, room.doors), (FeatureKind.WINDOW, room.windows)):
            kept = []
            for feature in features:
                wall = room.wall(feature.wall_index)
                if wall is None:
                    logger.warning(
                        f"Dropping {kind.value} on missing wall {feature.wall_index} "
                        f"of room '{room.id}'"
                    )
                    continue
                reanchor_feature(feature, wall)
                kept.append(feature)
            features[:] = kept

    def reanchor_rooms(self, plan: Plan, room_ids: set[str]) -> None:
        for room in plan.rooms:
            if room.id in room_ids:
                self.reanchor(room)

    # -- lookups -----------------------------------------------------------

    def _room(self, plan: Plan, room_id: str) -> Room:
        room = plan.room(room_id)
        if room is None:
            raise EditRejected(f"Unknown room '{room_id}'", "invalid_reference")
        return room

    def _features(self, room: Room, kind: FeatureKind) -> list:
        return room.doors if kind == FeatureKind.DOOR else room.windows

    def get_feature(
        self, plan: Plan, room_id: str, kind: FeatureKind, index: int
    ) -> WallFeature:
        kind = FeatureKind(kind)
        features = self._features(self._room(plan, room_id), kind)
        if not 0 <= index < len(features):
            raise EditRejected(
                f"Room '{room_id}' has no {kind.value} {index}", "invalid_reference"
            )
        return features[index]

    def _usable_wall(self, room: Room, wall_index: int) -> WallPosition:
        wall = room.wall(wall_index)
        if wall is None:
            raise EditRejected(
                f"Room '{room.id}' has no wall {wall_index}", "invalid_reference"
            )
        if wall.is_degenerate:
            raise EditRejected(f"Wall {wall_index} has zero length", "degenerate")
        return wall

    def resolve_owner(self, plan: Plan, room_id: str, wall_index: int) -> tuple[str, int]:
        """Room and wall that should own a feature placed on a wall.

        A secondary room wall that duplicates a main room wall belongs to
        the main room, so features placed on it go there.
        """
        room = self._room(plan, room_id)
        if room.is_main:
            return room_id, wall_index
        wall = room.wall(wall_index)
        if wall is None:
            return room_id, wall_index
        main = plan.main_room
        for main_wall in main.walls():
            if walls_coincide(
                wall.start, wall.end, main_wall.start, main_wall.end, self.snap_tolerance
            ):
                logger.debug(
                    f"Wall {wall_index} of '{room_id}' coincides with main wall "
                    f"{main_wall.wall_index}"
                )
                return main.id, main_wall.wall_index
        return room_id, wall_index

    # -- placement ---------------------------------------------------------

    def add_feature(
        self,
        plan: Plan,
        kind: FeatureKind,
        room_id: str,
        wall_index: int,
        start: Point2D,
        end: Point2D,
    ) -> tuple[str, int]:
        """Commit a door or window between two points on a wall.

        Both points are projected onto the owning wall; if `end` lies before
        `start` along the wall they are swapped.

        Returns:
            (owning room id, index of the new feature in its list).
        """
        kind = FeatureKind(kind)
        owner_id, owner_wall = self.resolve_owner(plan, room_id, wall_index)
        room = self._room(plan, owner_id)
        wall = self._usable_wall(room, owner_wall)

        a = project_onto_segment(start, wall.start, wall.end) * wall.length
        b = project_onto_segment(end, wall.start, wall.end) * wall.length
        position, far = min(a, b), max(a, b)
        if far - position <= 0:
            raise EditRejected(f"A {kind.value} needs a non-zero width")

        common = dict(
            wall_index=owner_wall,
            start_point=wall.point_at_distance(position),
            end_point=wall.point_at_distance(far),
            width=far - position,
            position=position,
        )
        d = self.defaults
        feature: WallFeature
        if kind == FeatureKind.DOOR:
            feature = Door(
                **common,
                height=d.door_height,
                frame_thickness=d.door_frame_thickness,
                frame_width=d.door_frame_width,
                material=d.door_material,
            )
            room.doors.append(feature)
        else:
            feature = Window(
                **common,
                height=d.window_height,
                sill_height=d.window_sill_height,
                window_type=d.window_type,
            )
            room.windows.append(feature)
        logger.debug(
            f"Added {kind.value} to wall {owner_wall} of '{owner_id}' "
            f"at {position:.1f} (width {feature.width:.1f})"
        )
        return owner_id, len(self._features(room, kind)) - 1

    # -- edits -------------------------------------------------------------

    def update_width(
        self, plan: Plan, room_id: str, kind: FeatureKind, index: int, width: float
    ) -> None:
        """Change a feature's width keeping its start point fixed.

        The width is capped to the wall remaining after the start point.
        """
        kind = FeatureKind(kind)
        if width <= 0:
            raise EditRejected("Width must be positive")
        feature = self.get_feature(plan, room_id, kind, index)
        wall = self._usable_wall(self._room(plan, room_id), feature.wall_index)
        feature.width = min(width, max(0.0, wall.length - feature.position))
        reanchor_feature(feature, wall)

    def update_position(
        self, plan: Plan, room_id: str, kind: FeatureKind, index: int, position: float
    ) -> None:
        """Move a feature along its wall, keeping the width.

        An overflowing position is pulled back to wall length - width
        (never below 0).
        """
        kind = FeatureKind(kind)
        if position < 0:
            raise EditRejected("Position cannot be negative")
        feature = self.get_feature(plan, room_id, kind, index)
        wall = self._usable_wall(self._room(plan, room_id), feature.wall_index)
        if position + feature.width > wall.length:
            position = max(0.0, wall.length - feature.width)
        feature.position = position
        reanchor_feature(feature, wall)

    def move_endpoint(
        self,
        plan: Plan,
        room_id: str,
        kind: FeatureKind,
        index: int,
        endpoint: FeatureEndpoint,
        x: float,
        y: float,
    ) -> None:
        """Drag one end of a feature to the projection of (x, y) on its wall."""
        kind = FeatureKind(kind)
        feature = self.get_feature(plan, room_id, kind, index)
        wall = self._usable_wall(self._room(plan, room_id), feature.wall_index)
        moved = project_onto_segment(Point2D(x, y), wall.start, wall.end) * wall.length
        if endpoint == FeatureEndpoint.START:
            fixed = feature.position + feature.width
        else:
            fixed = feature.position
        position, far = min(moved, fixed), max(moved, fixed)
        if far - position <= 0:
            raise EditRejected(f"A {kind.value} needs a non-zero width")
        feature.position = position
        feature.width = far - position
        reanchor_feature(feature, wall)

    def set_door_properties(
        self,
        plan: Plan,
        room_id: str,
        index: int,
        height: float | None = None,
        frame_thickness: float | None = None,
        frame_width: float | None = None,
        material: str | None = None,
    ) -> None:
        door = self.get_feature(plan, room_id, FeatureKind.DOOR, index)
        assert isinstance(door, Door)
        for name, value in (
            ("height", height),
            ("frame_thickness", frame_thickness),
            ("frame_width", frame_width),
        ):
            if value is not None and value <= 0:
                raise EditRejected(f"Door {name.replace('_', ' ')} must be positive")
        if height is not None:
            door.height = height
        if frame_thickness is not None:
            door.frame_thickness = frame_thickness
        if frame_width is not None:
            door.frame_width = frame_width
        if material is not None:
            door.material = material

    def set_window_properties(
        self,
        plan: Plan,
        room_id: str,
        index: int,
        height: float | None = None,
        sill_height: float | None = None,
        window_type: WindowType | None = None,
    ) -> None:
        window = self.get_feature(plan, room_id, FeatureKind.WINDOW, index)
        assert isinstance(window, Window)
        if height is not None and height <= 0:
            raise EditRejected("Window height must be positive")
        if sill_height is not None and sill_height < 0:
            raise EditRejected("Sill height cannot be negative")
        if height is not None:
            window.height = height
        if sill_height is not None:
            window.sill_height = sill_height
        if window_type is not None:
            window.window_type = WindowType(window_type)

    def delete_feature(self, plan: Plan, room_id: str, kind: FeatureKind, index: int) -> None:
        kind = FeatureKind(kind)
        self.get_feature(plan, room_id, kind, index)
        del self._features(self._room(plan, room_id), kind)[index]


@dataclass(frozen=True)
class PendingAnchor:
    """First click of a two-click placement, already projected onto the wall."""

    room_id: str
    wall_index: int
    point: Point2D


class PlacementSession:
    """Two-click door/window placement.

    The first click on a wall records a pending anchor. A second click on
    the same wall commits the feature; a click on another wall replaces the
    anchor. Only one placement is pending at a time.
    """

    def __init__(self, service: WallFeatureService) -> None:
        self.service = service
        self.kind: FeatureKind | None = None
        self.pending: PendingAnchor | None = None

    @property
    def active(self) -> bool:
        return self.kind is not None

    def begin(self, kind: FeatureKind) -> None:
        self.kind = FeatureKind(kind)
        self.pending = None

    def cancel(self) -> None:
        self.kind = None
        self.pending = None

    def click(
        self, plan: Plan, room_id: str, wall_index: int, x: float, y: float
    ) -> tuple[str, int] | None:
        """Register a click on a wall.

        Returns:
            (room id, feature index) once a feature is committed, else None.

        Raises:
            EditRejected: If no placement is active or the wall is unusable.
        """
        if self.kind is None:
            raise EditRejected("No door or window placement in progress")
        room = plan.room(room_id)
        wall = room.wall(wall_index) if room is not None else None
        if wall is None:
            raise EditRejected(f"Room '{room_id}' has no wall {wall_index}", "invalid_reference")
        if wall.is_degenerate:
            raise EditRejected(f"Wall {wall_index} has zero length", "degenerate")
        point = wall.point_at(project_onto_segment(Point2D(x, y), wall.start, wall.end))

        pending = self.pending
        if pending is None or (pending.room_id, pending.wall_index) != (room_id, wall_index):
            self.pending = PendingAnchor(room_id, wall_index, point)
            return None

        result = self.service.add_feature(
            plan, self.kind, room_id, wall_index, pending.point, point
        )
        self.cancel()
        return result

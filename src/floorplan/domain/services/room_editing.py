"""Room and point editing.

Edits change the Room/Point model only. Callers are expected to run the
cascade afterwards (attachment propagation, door/window re-anchoring,
cabinet run re-derivation), which PlanEditor does in one call. Every
editing method returns the ids of the rooms whose points it changed.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass

from ..entities import Plan, Point, Room, WallFeature
from ..errors import EditRejected
from ..geometry import closest_point_on_segment, points_coincide
from ..value_objects import (
    AttachmentConstraint,
    Point2D,
    SnapInfo,
    WallData,
    WallPosition,
)
from .attachment import AttachmentService

__all__ = [
    "RoomEditingService",
    "WallHit",
    "walls_coincide",
]

logger = logging.getLogger(__name__)

# Maps (old wall index, distance along the old wall) to the new wall index
# and distance, or None when the wall no longer exists.
WallRemap = Callable[[int, float], "tuple[int, float] | None"]


def walls_coincide(
    a1: Point2D, a2: Point2D, b1: Point2D, b2: Point2D, tolerance: float
) -> bool:
    """True if segment a1-a2 and segment b1-b2 are the same wall.

    Endpoints must coincide pairwise within tolerance, in either
    traversal direction.
    """
    forward = points_coincide(a1, b1, tolerance) and points_coincide(a2, b2, tolerance)
    backward = points_coincide(a1, b2, tolerance) and points_coincide(a2, b1, tolerance)
    return forward or backward


@dataclass(frozen=True)
class WallHit:
    """The closest wall to a location within some tolerance."""

    room_id: str
    wall_index: int
    point: Point2D
    t: float
    distance: float


class RoomEditingService:
    """Applies point and wall edits to rooms of a plan.

    Args:
        attachments: Attachment service used for attach/detach/slide.
        snap_tolerance: Distance (mm) within which a click completes a room
            or lands on a wall, and within which wall endpoints coincide.
    """

    def __init__(
        self,
        attachments: AttachmentService | None = None,
        snap_tolerance: float = 15.0,
    ) -> None:
        self.attachments = attachments or AttachmentService()
        self.snap_tolerance = snap_tolerance

    # -- lookups -----------------------------------------------------------

    def _room(self, plan: Plan, room_id: str) -> Room:
        room = plan.room(room_id)
        if room is None:
            raise EditRejected(f"Unknown room '{room_id}'", "invalid_reference")
        return room

    def _wall(self, room: Room, wall_index: int) -> WallPosition:
        wall = room.wall(wall_index)
        if wall is None:
            raise EditRejected(
                f"Room '{room.id}' has no wall {wall_index}", "invalid_reference"
            )
        return wall

    def _check_point(self, room: Room, index: int) -> None:
        if not 0 <= index < len(room.points):
            raise EditRejected(
                f"Room '{room.id}' has no point {index}", "invalid_reference"
            )

    def find_wall_near(
        self,
        plan: Plan,
        location: Point2D,
        exclude_room_id: str | None = None,
        tolerance: float | None = None,
    ) -> WallHit | None:
        """Closest wall of a complete room within tolerance of `location`."""
        limit = self.snap_tolerance if tolerance is None else tolerance
        best: WallHit | None = None
        for room in plan.complete_rooms():
            if room.id == exclude_room_id:
                continue
            for wall in room.walls():
                if wall.is_degenerate:
                    continue
                closest, dist, t = closest_point_on_segment(location, wall.start, wall.end)
                if dist <= limit and (best is None or dist < best.distance):
                    best = WallHit(room.id, wall.wall_index, closest, t, dist)
        return best

    def wall_data(self, plan: Plan, room_id: str) -> list[WallData]:
        """Length and interior angle of every wall of a room."""
        return self._room(plan, room_id).wall_data()

    # -- rooms -------------------------------------------------------------

    def add_room(self, plan: Plan) -> str:
        """Start a new, empty secondary room and return its id."""
        room = Room(id=plan.new_room_id())
        plan.rooms.append(room)
        logger.debug(f"Added room '{room.id}'")
        return room.id

    def delete_room(self, plan: Plan, room_id: str) -> set[str]:
        """Delete a secondary room and cascade to whatever referenced it.

        Doors and windows of other rooms lying on a wall that coincides with
        one of the deleted room's walls are removed, points attached to the
        room are frozen in place and runs snapped to it are released.

        Raises:
            EditRejected: For the main room or an unknown room.
        """
        room = self._room(plan, room_id)
        if room.is_main:
            raise EditRejected("The main room cannot be deleted", "main_room")

        deleted_walls = room.walls()
        affected: set[str] = set()
        for other in plan.rooms:
            if other is room:
                continue
            for index, point in enumerate(other.points):
                if point.attachment is not None and point.attachment.parent_room_id == room_id:
                    point.detach()
                    affected.add(other.id)
                    logger.debug(f"Detached point {index} of '{other.id}' from deleted room")

            def on_deleted_wall(feature: WallFeature, other: Room = other) -> bool:
                wall = other.wall(feature.wall_index)
                return wall is not None and any(
                    walls_coincide(wall.start, wall.end, w.start, w.end, self.snap_tolerance)
                    for w in deleted_walls
                )

            kept_doors = [d for d in other.doors if not on_deleted_wall(d)]
            kept_windows = [w for w in other.windows if not on_deleted_wall(w)]
            removed = len(other.doors) - len(kept_doors) + len(other.windows) - len(kept_windows)
            if removed:
                other.doors = kept_doors
                other.windows = kept_windows
                logger.info(f"Removed {removed} feature(s) of '{other.id}' on deleted room walls")

        for run in plan.runs_snapped_to(room_id):
            run.snap_info = None

        plan.rooms.remove(room)
        logger.info(f"Deleted room '{room_id}'")
        return affected

    def set_room_properties(
        self,
        plan: Plan,
        room_id: str,
        height: float | None = None,
        wall_thickness: float | None = None,
        wall_material: str | None = None,
        floor_material: str | None = None,
        ceiling_material: str | None = None,
    ) -> set[str]:
        room = self._room(plan, room_id)
        if height is not None and height <= 0:
            raise EditRejected("Room height must be positive")
        if wall_thickness is not None and wall_thickness <= 0:
            raise EditRejected("Wall thickness must be positive")
        if height is not None:
            room.height = height
        if wall_thickness is not None:
            room.wall_thickness = wall_thickness
        if wall_material is not None:
            room.wall_material = wall_material
        if floor_material is not None:
            room.floor_material = floor_material
        if ceiling_material is not None:
            room.ceiling_material = ceiling_material
        return set()

    # -- drawing -----------------------------------------------------------

    def add_point(self, plan: Plan, room_id: str, x: float, y: float) -> set[str]:
        """Handle a drawing click on an incomplete room.

        With three or more points, a click near the first point completes
        the room. For secondary rooms a click near a wall of another
        complete room appends a point attached to that wall. Otherwise a
        free point is appended.
        """
        room = self._room(plan, room_id)
        if room.is_complete:
            raise EditRejected(f"Room '{room_id}' is already complete")

        location = Point2D(x, y)
        if len(room.points) >= 3 and points_coincide(
            location, room.vertex(0), self.snap_tolerance
        ):
            return self.complete_room(plan, room_id)

        room.points.append(Point(x, y))
        index = len(room.points) - 1
        if not room.is_main:
            hit = self.find_wall_near(plan, location, exclude_room_id=room_id)
            if hit is not None and not self.attachments.would_create_cycle(
                plan, room_id, hit.room_id
            ):
                self.attachments.attach(
                    plan, room_id, index, hit.room_id, hit.wall_index, hit.t
                )
        return {room_id}

    def complete_room(self, plan: Plan, room_id: str) -> set[str]:
        """Close a room's polygon.

        A secondary room whose first and last points lie on the same wall
        of another room is closed onto that wall (no_closing_wall).
        """
        room = self._room(plan, room_id)
        if room.is_complete:
            raise EditRejected(f"Room '{room_id}' is already complete")
        if len(room.points) < 3:
            raise EditRejected("A room needs at least three points")

        room.no_closing_wall = not room.is_main and self._ends_on_same_wall(plan, room)
        room.is_complete = True
        logger.debug(
            f"Completed room '{room_id}' with {len(room.points)} points"
            + (" onto an existing wall" if room.no_closing_wall else "")
        )
        return {room_id}

    def _ends_on_same_wall(self, plan: Plan, room: Room) -> bool:
        first = room.points[0]
        last = room.points[-1]
        if first.attachment is not None and last.attachment is not None:
            return (
                first.attachment.parent_room_id == last.attachment.parent_room_id
                and first.attachment.wall_index == last.attachment.wall_index
            )
        first_hit = self.find_wall_near(plan, first.as_point2d(), exclude_room_id=room.id)
        last_hit = self.find_wall_near(plan, last.as_point2d(), exclude_room_id=room.id)
        if first_hit is None or last_hit is None:
            return False
        if (first_hit.room_id, first_hit.wall_index) == (last_hit.room_id, last_hit.wall_index):
            return True
        # Endpoints may sit on two different rooms' copies of one wall.
        first_wall = plan.get_room(first_hit.room_id).wall(first_hit.wall_index)
        last_wall = plan.get_room(last_hit.room_id).wall(last_hit.wall_index)
        assert first_wall is not None and last_wall is not None
        return walls_coincide(
            first_wall.start, first_wall.end, last_wall.start, last_wall.end, self.snap_tolerance
        )

    # -- point edits -------------------------------------------------------

    def move_point(
        self, plan: Plan, room_id: str, index: int, x: float, y: float
    ) -> set[str]:
        """Move a point.

        Point 0 translates every free point of the room rigidly. An attached
        point slides along its parent wall to the projection of (x, y).
        """
        room = self._room(plan, room_id)
        self._check_point(room, index)
        point = room.points[index]
        target = Point2D(x, y)

        if point.is_attached:
            self.attachments.slide(plan, room, index, target)
        elif index == 0:
            origin = point.as_point2d()
            dx = target.x - origin.x
            dy = target.y - origin.y
            for p in room.points:
                if not p.is_attached:
                    current = p.as_point2d()
                    p.move_to(current.x + dx, current.y + dy)
        else:
            point.move_to(x, y)
        return {room_id}

    def attach_point(
        self,
        plan: Plan,
        room_id: str,
        index: int,
        parent_room_id: str,
        wall_index: int,
        t: float,
    ) -> set[str]:
        self.attachments.attach(plan, room_id, index, parent_room_id, wall_index, t)
        return {room_id}

    def detach_point(self, plan: Plan, room_id: str, index: int) -> set[str]:
        self.attachments.detach(plan, room_id, index)
        return {room_id}

    def _next_free_point(self, room: Room, wall_index: int) -> Point:
        next_index = (wall_index + 1) % len(room.points)
        point = room.points[next_index]
        if point.is_attached:
            raise EditRejected(
                f"Point {next_index} of room '{room.id}' is attached to another wall",
                "attached_point",
            )
        return point

    def set_wall_length(
        self, plan: Plan, room_id: str, wall_index: int, length: float
    ) -> set[str]:
        """Resize a wall by moving its end point along the wall direction.

        Raises:
            EditRejected: If the length is not positive, the wall has zero
                length (no direction) or its end point is attached.
        """
        room = self._room(plan, room_id)
        wall = self._wall(room, wall_index)
        if length <= 0:
            raise EditRejected("Wall length must be positive")
        if wall.is_degenerate:
            raise EditRejected(f"Wall {wall_index} has zero length", "degenerate")
        point = self._next_free_point(room, wall_index)

        ux, uy = wall.unit_vector()
        point.move_to(wall.start.x + ux * length, wall.start.y + uy * length)
        return {room_id}

    def set_wall_angle(
        self, plan: Plan, room_id: str, wall_index: int, angle: float
    ) -> set[str]:
        """Rotate a wall so the interior angle at its start vertex is `angle`.

        The new wall direction is the direction towards the previous vertex
        minus `angle`; the wall keeps its length and only its end point
        moves.
        """
        room = self._room(plan, room_id)
        wall = self._wall(room, wall_index)
        n = len(room.points)
        if n < 3:
            raise EditRejected("Wall angles need at least three points")
        if wall.is_degenerate:
            raise EditRejected(f"Wall {wall_index} has zero length", "degenerate")
        current = room.vertex(wall_index)
        previous = room.vertex((wall_index - 1) % n)
        if points_coincide(previous, current, 0.0):
            raise EditRejected("The previous wall has zero length", "degenerate")
        point = self._next_free_point(room, wall_index)

        back = math.atan2(previous.y - current.y, previous.x - current.x)
        direction = back - math.radians(angle)
        point.move_to(
            current.x + wall.length * math.cos(direction),
            current.y + wall.length * math.sin(direction),
        )
        return {room_id}

    def insert_point_on_wall(
        self, plan: Plan, room_id: str, wall_index: int, x: float, y: float
    ) -> set[str]:
        """Split a wall at the projection of (x, y), inserting point i + 1.

        Features, attached points and snaps on the split wall move to the
        half containing them; those on later walls are re-indexed.
        """
        room = self._room(plan, room_id)
        wall = self._wall(room, wall_index)
        if wall.is_degenerate:
            raise EditRejected(f"Wall {wall_index} has zero length", "degenerate")

        split_point, _, t = closest_point_on_segment(Point2D(x, y), wall.start, wall.end)
        split = wall.length * t

        def remap(index: int, along: float) -> tuple[int, float] | None:
            if index < wall_index:
                return index, along
            if index > wall_index:
                return index + 1, along
            if along < split:
                return index, along
            return index + 1, along - split

        self._remap_dependents(
            plan,
            room,
            remap,
            lambda: room.points.insert(wall_index + 1, Point(split_point.x, split_point.y)),
        )
        logger.debug(f"Inserted point {wall_index + 1} into room '{room_id}'")
        return {room_id}

    def delete_point(self, plan: Plan, room_id: str, index: int) -> set[str]:
        """Remove a vertex, merging its two adjacent walls.

        Raises:
            EditRejected: For point 0 or a room with three or fewer points.
        """
        room = self._room(plan, room_id)
        self._check_point(room, index)
        if index == 0:
            raise EditRejected("The first point of a room cannot be deleted", "first_point")
        if len(room.points) <= 3:
            raise EditRejected("A room needs at least three points", "too_few_points")

        before = room.wall(index - 1)
        after = room.wall(index)
        assert before is not None
        first_length = before.length
        merged_length = first_length + (after.length if after is not None else 0.0)

        def remap(wall_index: int, along: float) -> tuple[int, float] | None:
            if wall_index < index - 1:
                return wall_index, along
            if wall_index == index - 1:
                # Removing the last point of an open polyline drops its wall.
                return (wall_index, along) if after is not None else None
            if wall_index == index:
                return index - 1, first_length + along
            return wall_index - 1, along

        self._remap_dependents(plan, room, remap, lambda: room.points.pop(index))
        logger.debug(
            f"Deleted point {index} of room '{room_id}' (merged wall length {merged_length:.1f})"
        )
        return {room_id}

    def _remap_dependents(
        self,
        plan: Plan,
        room: Room,
        remap: WallRemap,
        mutate: Callable[[], object],
    ) -> None:
        """Re-index everything anchored to `room`'s walls around a mutation.

        Positions along walls are carried as absolute distances; attachment
        parameters are converted back to t against the new wall lengths.
        """
        old_lengths = {w.wall_index: w.length for w in room.walls()}

        def length_of(wall_index: int) -> float:
            return old_lengths.get(wall_index, 0.0)

        feature_updates: list[tuple[WallFeature, int, float]] = []
        for feature in room.features():
            mapped = remap(feature.wall_index, feature.position)
            if mapped is None:
                logger.warning(
                    f"Dropping feature on removed wall {feature.wall_index} of '{room.id}'"
                )
                continue
            feature_updates.append((feature, *mapped))
        kept = {id(f) for f, _, _ in feature_updates}

        point_updates: list[tuple[Point, int, float]] = []
        for other in plan.rooms:
            if other is room:
                continue
            for point in other.points:
                attachment = point.attachment
                if attachment is None or attachment.parent_room_id != room.id:
                    continue
                along = attachment.t * length_of(attachment.wall_index)
                mapped = remap(attachment.wall_index, along)
                # Freeze first so the point has valid coordinates while the
                # parent's walls are being renumbered.
                point.detach()
                if mapped is not None:
                    point_updates.append((point, *mapped))

        snap_updates: list[tuple[int, int, float]] = []
        for run in plan.runs_snapped_to(room.id):
            assert run.snap_info is not None
            mapped = remap(run.snap_info.wall_index, run.snap_info.distance_from_start)
            if mapped is None:
                run.snap_info = None
            else:
                snap_updates.append((run.id, *mapped))

        mutate()

        room.doors = [d for d in room.doors if id(d) in kept]
        room.windows = [w for w in room.windows if id(w) in kept]
        for feature, wall_index, along in feature_updates:
            feature.wall_index = wall_index
            feature.position = along

        for point, wall_index, along in point_updates:
            wall = room.wall(wall_index)
            if wall is None:
                continue
            t = along / wall.length if wall.length > 0 else 0.0
            point.attach(
                AttachmentConstraint(
                    parent_room_id=room.id,
                    wall_index=wall_index,
                    t=min(1.0, max(0.0, t)),
                ),
                room,
            )

        for run_id, wall_index, along in snap_updates:
            run = plan.get_run(run_id)
            assert run.snap_info is not None
            run.snap_info = SnapInfo(
                room_id=room.id,
                wall_index=wall_index,
                distance_from_start=along,
                snapped_edge=run.snap_info.snapped_edge,
            )

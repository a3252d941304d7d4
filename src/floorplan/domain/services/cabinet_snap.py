"""Cabinet run snapping.

A cabinet run snaps its rear edge to the nearest wall of a complete room,
rotated so that its front faces the room interior. An accepted snap is
persisted as SnapInfo and behaves as a standing constraint: when the wall
moves, the run is re-derived from the stored distance without repeating
the threshold and interior checks.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from ..entities import CabinetRun, Plan, Room
from ..errors import EditRejected
from ..geometry import (
    centroid,
    closest_point_on_segment,
    distance,
    normalize_angle,
    point_in_polygon,
)
from ..value_objects import Point2D, SnapInfo, SnapResult, WallPosition

__all__ = [
    "CabinetSnapService",
    "DragState",
    "RunDragSession",
]

logger = logging.getLogger(__name__)


class CabinetSnapService:
    """Best-wall search, snap application and snap re-derivation.

    Args:
        snap_threshold: Rear-edge midpoint to wall distance (mm) below which
            a wall is a snap candidate.
        distance_epsilon: Minimum change (mm) before a re-derived
            distance_from_start is written back.
    """

    def __init__(self, snap_threshold: float = 50.0, distance_epsilon: float = 0.1) -> None:
        self.snap_threshold = snap_threshold
        self.distance_epsilon = distance_epsilon

    @staticmethod
    def alignment_rotation(room: Room, wall: WallPosition) -> float:
        """Rotation making a run's front face the room interior.

        The front of a run rotated by θ points along (sin θ, -cos θ). The
        wall's own angle is used when the room's vertex centroid lies on that
        side of the wall, otherwise the angle plus 180 degrees.
        """
        angle = wall.direction
        rad = math.radians(angle)
        c = centroid(room.vertices())
        side = (c.x - wall.start.x) * math.sin(rad) - (c.y - wall.start.y) * math.cos(rad)
        if side > 0:
            return angle
        return normalize_angle(angle + 180)

    def find_best_wall(self, plan: Plan, run: CabinetRun) -> SnapResult:
        """Search every wall of every complete room for a snap target.

        Returns:
            A SnapResult; should_snap is False when no wall is close enough,
            when the aligned run's front centre falls outside the room, or
            for islands.
        """
        if run.is_island:
            return SnapResult.no_match()

        midpoint = run.corners().rear_midpoint
        best: tuple[Room, WallPosition, Point2D, float] | None = None
        for room in plan.complete_rooms():
            for wall in room.walls():
                if wall.is_degenerate:
                    continue
                closest, dist, _ = closest_point_on_segment(midpoint, wall.start, wall.end)
                if dist < self.snap_threshold and (best is None or dist < best[3]):
                    best = (room, wall, closest, dist)

        if best is None:
            return SnapResult.no_match()

        room, wall, closest, dist = best
        rotation = self.alignment_rotation(room, wall)
        rad = math.radians(rotation)
        front_centre = Point2D(
            closest.x + run.depth * math.sin(rad),
            closest.y - run.depth * math.cos(rad),
        )
        if not point_in_polygon(front_centre, room.vertices()):
            logger.debug(
                f"Run {run.id}: front of wall {wall.wall_index} of '{room.id}' "
                "falls outside the room"
            )
            return SnapResult.no_match()

        rear_left = Point2D(
            closest.x - run.length / 2 * math.cos(rad),
            closest.y - run.length / 2 * math.sin(rad),
        )
        ux, uy = wall.unit_vector()
        along = (rear_left.x - wall.start.x) * ux + (rear_left.y - wall.start.y) * uy
        along = min(max(along, 0.0), wall.length)

        return SnapResult(
            should_snap=True,
            room_id=room.id,
            wall_index=wall.wall_index,
            distance=dist,
            rotation_z=rotation,
            start_pos=wall.point_at_distance(along),
            distance_from_start=along,
        )

    def apply_snap(self, run: CabinetRun, result: SnapResult) -> None:
        """Place a run according to an accepted SnapResult."""
        if not result.should_snap:
            return
        assert result.start_pos is not None and result.rotation_z is not None
        run.rotation_z = result.rotation_z
        run.move_to(result.start_pos.x, result.start_pos.y)
        run.snap_info = result.to_snap_info()
        logger.debug(
            f"Run {run.id} snapped to wall {result.wall_index} of '{result.room_id}' "
            f"at {result.distance_from_start:.1f}"
        )

    def snap(self, plan: Plan, run: CabinetRun) -> SnapResult:
        """Search for a wall and, if one qualifies, snap the run to it."""
        result = self.find_best_wall(plan, run)
        self.apply_snap(run, result)
        return result

    def rederive(self, plan: Plan, run: CabinetRun) -> None:
        """Re-place a snapped run against the current geometry of its wall.

        Invalid references clear the snap. A zero-length wall leaves the run
        where it is.
        """
        info = run.snap_info
        if info is None:
            return
        room = plan.room(info.room_id)
        wall = room.wall(info.wall_index) if room is not None else None
        if room is None or wall is None:
            logger.warning(
                f"Clearing snap of run {run.id}: wall {info.wall_index} of "
                f"'{info.room_id}' no longer exists"
            )
            run.snap_info = None
            return
        if wall.is_degenerate:
            return

        along = min(max(info.distance_from_start, 0.0), wall.length)
        start = wall.point_at_distance(along)
        run.rotation_z = self.alignment_rotation(room, wall)
        run.move_to(start.x, start.y)
        if abs(along - info.distance_from_start) > self.distance_epsilon:
            run.snap_info = SnapInfo(
                room_id=info.room_id,
                wall_index=info.wall_index,
                distance_from_start=along,
                snapped_edge=info.snapped_edge,
            )

    def rederive_for_rooms(self, plan: Plan, room_ids: set[str]) -> list[int]:
        """Re-derive every run snapped to one of `room_ids`.

        Returns:
            Ids of the runs that were re-derived.
        """
        touched = []
        for run in plan.cabinet_runs:
            if run.snap_info is not None and run.snap_info.room_id in room_ids:
                self.rederive(plan, run)
                touched.append(run.id)
        return touched

    def rotate(self, run: CabinetRun, rotation: float) -> None:
        """Manually rotate a run; this releases any snap."""
        run.rotation_z = normalize_angle(rotation)
        run.snap_info = None


@dataclass
class DragState:
    run_id: int
    origin: Point2D


class RunDragSession:
    """Interactive drag of one cabinet run.

    A snapped run stays put until the drag moves it more than
    `jitter_threshold` from where it started; from then on the snap is
    released and the run follows the pointer. Releasing runs the snap
    check; cancelling only forgets the drag.
    """

    def __init__(self, service: CabinetSnapService, jitter_threshold: float = 10.0) -> None:
        self.service = service
        self.jitter_threshold = jitter_threshold
        self.state: DragState | None = None

    @property
    def active(self) -> bool:
        return self.state is not None

    def _run(self, plan: Plan) -> CabinetRun:
        if self.state is None:
            raise EditRejected("No cabinet run is being dragged")
        run = plan.run(self.state.run_id)
        if run is None:
            self.state = None
            raise EditRejected("The dragged cabinet run no longer exists", "invalid_reference")
        return run

    def begin(self, plan: Plan, run_id: int) -> None:
        run = plan.run(run_id)
        if run is None:
            raise EditRejected(f"Unknown cabinet run {run_id}", "invalid_reference")
        self.state = DragState(run_id=run_id, origin=run.start_pos)

    def drag(self, plan: Plan, x: float, y: float) -> None:
        """Move the run's rear-left corner to (x, y)."""
        run = self._run(plan)
        assert self.state is not None
        target = Point2D(x, y)
        if run.snap_info is not None:
            if distance(self.state.origin, target) <= self.jitter_threshold:
                return
            logger.debug(f"Run {run.id} dragged off its wall")
            run.snap_info = None
        run.move_to(x, y)

    def end(self, plan: Plan) -> SnapResult:
        run = self._run(plan)
        self.state = None
        if run.snap_info is not None:
            return SnapResult.no_match()
        return self.service.snap(plan, run)

    def cancel(self) -> None:
        self.state = None

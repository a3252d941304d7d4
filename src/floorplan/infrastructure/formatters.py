"""Text and dictionary formatters for floor plans."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any, Protocol

from floorplan.domain import Plan, Room
from floorplan.infrastructure.plan_serializer import round_mm


class _XY(Protocol):
    x: float
    y: float


class RoomSummaryFormatter:
    """Formats a plan as a per-room text report.

    Each room gets a wall table (length and the interior angle at the wall's
    start vertex) followed by its doors and windows and the cabinet runs
    snapped to it. Free-standing runs are listed at the end.
    """

    def format(self, plan: Plan) -> str:
        sections = [self._format_room(plan, room) for room in plan.rooms]
        unsnapped = [r for r in plan.cabinet_runs if r.snap_info is None]
        if unsnapped:
            lines = ["FREE-STANDING RUNS", "=" * 60]
            for run in unsnapped:
                lines.append(self._run_line(plan, run))
            sections.append("\n".join(lines))
        return "\n\n".join(sections)

    def _format_room(self, plan: Plan, room: Room) -> str:
        title = "MAIN ROOM" if room.is_main else f"ROOM {room.id}"
        state = "complete" if room.is_complete else "in progress"
        if room.no_closing_wall:
            state += ", no closing wall"
        lines = [
            f"{title} ({state})",
            "=" * 60,
            f"Height: {room.height:.0f} mm   Wall thickness: {room.wall_thickness:.0f} mm",
        ]

        walls = room.wall_data()
        if not walls:
            lines.append("No walls drawn.")
        else:
            lines.append(f"{'Wall':<6} {'Length (mm)':>12} {'Angle':>8}")
            lines.append("-" * 60)
            for wall in walls:
                lines.append(f"{wall.wall_index:<6} {wall.length:>12.1f} {wall.angle:>8.1f}")
            lines.append("-" * 60)
            lines.append(f"{'TOTAL':<6} {room.perimeter:>12.1f}")

        for door in room.doors:
            lines.append(
                f"Door on wall {door.wall_index}: {door.width:.0f} wide at {door.position:.0f}"
            )
        for window in room.windows:
            lines.append(
                f"Window ({window.window_type.value}) on wall {window.wall_index}: "
                f"{window.width:.0f} wide at {window.position:.0f}"
            )
        for run in plan.runs_snapped_to(room.id):
            lines.append(self._run_line(plan, run))
        return "\n".join(lines)

    @staticmethod
    def _run_line(plan: Plan, run) -> str:
        cabinets = plan.cabinets_in_run(run.id)
        text = (
            f"Run {run.id} ({run.run_type.value}"
            f"{', island' if run.is_island else ''}): "
            f"{run.length:.0f} x {run.depth:.0f}, {len(cabinets)} cabinet(s)"
        )
        if run.snap_info is not None:
            text += (
                f", on wall {run.snap_info.wall_index} at "
                f"{run.snap_info.distance_from_start:.0f}"
            )
        return text


def format_room_for_processing(points: Sequence[_XY]) -> dict[str, Any]:
    """Shape a closed outline for downstream 3D processing.

    Points are rounded to whole millimetres and given z = 0; every point
    starts a wall to the next one, wrapping around. Lengths are measured on
    the unrounded coordinates.
    """
    n = len(points)
    walls = []
    for i, point in enumerate(points):
        nxt = points[(i + 1) % n]
        walls.append(
            {
                "start": i,
                "end": (i + 1) % n,
                "length": math.hypot(nxt.x - point.x, nxt.y - point.y),
            }
        )
    return {
        "points": [{"x": round_mm(p.x), "y": round_mm(p.y), "z": 0} for p in points],
        "walls": walls,
    }

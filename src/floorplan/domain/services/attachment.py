"""Point attachment constraints between rooms.

A secondary room's points may be attached to walls of other rooms. The
attachments form a directed graph between rooms (child room -> parent
room) which must stay acyclic; this module maintains that graph and runs
the propagation pass after every geometry edit.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..errors import EditRejected
from ..geometry import project_onto_segment
from ..value_objects import AttachmentConstraint, Point2D

if TYPE_CHECKING:
    from ..entities import Plan, Room

__all__ = ["AttachmentService"]

logger = logging.getLogger(__name__)


class AttachmentService:
    """Maintains point-to-wall attachments and their dependency graph."""

    def dependency_graph(self, plan: Plan) -> dict[str, set[str]]:
        """Map each room id to the ids of rooms its points are attached to."""
        graph: dict[str, set[str]] = {room.id: set() for room in plan.rooms}
        for room in plan.rooms:
            for point in room.points:
                if point.attachment is not None:
                    graph[room.id].add(point.attachment.parent_room_id)
        return graph

    def would_create_cycle(
        self, plan: Plan, child_room_id: str, parent_room_id: str
    ) -> bool:
        """True if making child depend on parent would close a cycle.

        A room depending on its own walls counts as a cycle.
        """
        if child_room_id == parent_room_id:
            return True
        graph = self.dependency_graph(plan)
        stack = [parent_room_id]
        seen: set[str] = set()
        while stack:
            current = stack.pop()
            if current == child_room_id:
                return True
            if current in seen:
                continue
            seen.add(current)
            stack.extend(graph.get(current, ()))
        return False

    def dependents(self, plan: Plan, room_ids: set[str]) -> set[str]:
        """Rooms whose geometry depends on any of `room_ids`, transitively.

        The given rooms are included in the result.
        """
        graph = self.dependency_graph(plan)
        children: dict[str, set[str]] = {room_id: set() for room_id in graph}
        for child, parents in graph.items():
            for parent in parents:
                children.setdefault(parent, set()).add(child)

        result = set(room_ids)
        stack = list(room_ids)
        while stack:
            current = stack.pop()
            for child in children.get(current, ()):
                if child not in result:
                    result.add(child)
                    stack.append(child)
        return result

    def attach(
        self,
        plan: Plan,
        room_id: str,
        point_index: int,
        parent_room_id: str,
        wall_index: int,
        t: float,
    ) -> None:
        """Attach a point to a parametric location on another room's wall.

        Raises:
            EditRejected: If the point or wall does not exist, t is outside
                [0, 1], or the attachment would create a cycle.
        """
        room = plan.room(room_id)
        parent = plan.room(parent_room_id)
        if room is None or not 0 <= point_index < len(room.points):
            raise EditRejected(f"No point {point_index} in room '{room_id}'", "invalid_reference")
        if parent is None or parent.wall(wall_index) is None:
            raise EditRejected(
                f"No wall {wall_index} in room '{parent_room_id}'", "invalid_reference"
            )
        if not 0.0 <= t <= 1.0:
            raise EditRejected(f"Attachment parameter must be within [0, 1], got {t}")
        if self.would_create_cycle(plan, room_id, parent_room_id):
            raise EditRejected(
                f"Attaching room '{room_id}' to room '{parent_room_id}' would create a cycle",
                "cycle",
            )

        room.points[point_index].attach(
            AttachmentConstraint(parent_room_id=parent_room_id, wall_index=wall_index, t=t),
            parent,
        )
        logger.debug(
            f"Attached point {point_index} of '{room_id}' to wall {wall_index} "
            f"of '{parent_room_id}' at t={t:.4f}"
        )

    def attach_at(
        self,
        plan: Plan,
        room_id: str,
        point_index: int,
        parent_room_id: str,
        wall_index: int,
        location: Point2D,
    ) -> None:
        """Attach a point at the projection of `location` onto a wall."""
        parent = plan.room(parent_room_id)
        wall = parent.wall(wall_index) if parent is not None else None
        if wall is None:
            raise EditRejected(
                f"No wall {wall_index} in room '{parent_room_id}'", "invalid_reference"
            )
        t = project_onto_segment(location, wall.start, wall.end)
        self.attach(plan, room_id, point_index, parent_room_id, wall_index, t)

    def detach(self, plan: Plan, room_id: str, point_index: int) -> None:
        """Make an attached point free at its current position."""
        room = plan.room(room_id)
        if room is None or not 0 <= point_index < len(room.points):
            raise EditRejected(f"No point {point_index} in room '{room_id}'", "invalid_reference")
        room.points[point_index].detach()

    def slide(self, plan: Plan, room: Room, point_index: int, location: Point2D) -> None:
        """Move an attached point along its parent wall towards `location`."""
        point = room.points[point_index]
        attachment = point.attachment
        assert attachment is not None
        parent = plan.room(attachment.parent_room_id)
        wall = parent.wall(attachment.wall_index) if parent is not None else None
        if wall is None or wall.is_degenerate:
            raise EditRejected("The wall this point is attached to cannot be resolved")
        t = project_onto_segment(location, wall.start, wall.end)
        point.attach(
            AttachmentConstraint(
                parent_room_id=attachment.parent_room_id,
                wall_index=attachment.wall_index,
                t=t,
            ),
            parent,
        )

    def propagate(self, plan: Plan, edited_room_ids: set[str] | None = None) -> set[str]:
        """Rebind every attachment to the current rooms and drop invalid ones.

        Attached coordinates are derived on read, so after binding they
        reflect the parents' current walls. Attachments whose parent room or
        wall no longer exists are dropped and the point is frozen where it
        was last materialized. Any cycle found (only possible with malformed
        input) is broken by freeing the offending points.

        Returns:
            The edited rooms plus every room depending on them, directly or
            through other rooms, and any room that lost an attachment.
        """
        self._break_cycles(plan)
        dropped: set[str] = set()
        for room in plan.rooms:
            for index, point in enumerate(room.points):
                attachment = point.attachment
                if attachment is None:
                    continue
                parent = plan.room(attachment.parent_room_id)
                if parent is None or not parent.has_wall(attachment.wall_index):
                    logger.warning(
                        f"Dropping attachment of point {index} in room '{room.id}': "
                        f"wall {attachment.wall_index} of '{attachment.parent_room_id}' "
                        "no longer exists"
                    )
                    point.bind(None)
                    point.detach()
                    dropped.add(room.id)
                    continue
                point.bind(parent)
        return self.dependents(plan, set(edited_room_ids or ())) | dropped

    def _break_cycles(self, plan: Plan) -> None:
        graph = self.dependency_graph(plan)
        visiting: set[str] = set()
        done: set[str] = set()
        broken: list[tuple[str, str]] = []

        def visit(room_id: str) -> None:
            visiting.add(room_id)
            for parent_id in sorted(graph.get(room_id, ())):
                if parent_id in visiting:
                    broken.append((room_id, parent_id))
                elif parent_id not in done:
                    visit(parent_id)
            visiting.discard(room_id)
            done.add(room_id)

        for room_id in sorted(graph):
            if room_id not in done:
                visit(room_id)

        for child_id, parent_id in broken:
            child = plan.room(child_id)
            if child is None:
                continue
            logger.warning(
                f"Breaking attachment cycle between '{child_id}' and '{parent_id}'"
            )
            for point in child.points:
                if point.attachment is not None and point.attachment.parent_room_id == parent_id:
                    point.bind(None)
                    point.detach()

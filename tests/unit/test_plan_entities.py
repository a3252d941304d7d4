"""Unit tests for floor plan entities and value objects.

These tests verify:
- Attached points derive their coordinates from the parent wall
- Implicit wall numbering for complete, incomplete and open rooms
- Entity validation
- Plan id allocation and deep copies
"""

import pytest

from floorplan.domain import (
    MAIN_ROOM_ID,
    AttachmentConstraint,
    Cabinet,
    CabinetRun,
    Plan,
    Point,
    Point2D,
    Room,
    SnapInfo,
    WallPosition,
)

RECTANGLE = [(0, 0), (4000, 0), (4000, 3000), (0, 3000)]


def make_room(room_id: str = "main", complete: bool = True, **kwargs) -> Room:
    return Room(
        id=room_id,
        points=[Point(x, y) for x, y in RECTANGLE],
        is_complete=complete,
        **kwargs,
    )


class TestPoint:
    """Tests for free and attached points."""

    def test_free_point_moves(self) -> None:
        point = Point(1, 2)
        point.move_to(3, 4)
        assert (point.x, point.y) == (3, 4)
        assert not point.is_attached

    def test_attached_point_follows_parent_wall(self) -> None:
        parent = make_room()
        point = Point(0, 0)
        point.attach(AttachmentConstraint(MAIN_ROOM_ID, 0, 0.25), parent)
        assert (point.x, point.y) == (1000, 0)

        parent.points[1].move_to(8000, 0)
        assert (point.x, point.y) == (2000, 0)

    def test_attached_point_cannot_be_moved_directly(self) -> None:
        point = Point(0, 0)
        point.attach(AttachmentConstraint(MAIN_ROOM_ID, 0, 0.5), make_room())
        with pytest.raises(ValueError):
            point.move_to(10, 10)

    def test_detach_freezes_current_position(self) -> None:
        parent = make_room()
        point = Point(0, 0)
        point.attach(AttachmentConstraint(MAIN_ROOM_ID, 1, 0.5), parent)
        point.detach()
        parent.points[2].move_to(5000, 5000)
        assert (point.x, point.y) == (4000, 1500)
        assert point.attachment is None

    def test_unresolvable_attachment_keeps_last_position(self) -> None:
        parent = make_room()
        point = Point(0, 0)
        point.attach(AttachmentConstraint(MAIN_ROOM_ID, 3, 0.5), parent)
        assert (point.x, point.y) == (0, 1500)

        parent.is_complete = False  # wall 3 disappears
        assert (point.x, point.y) == (0, 1500)


class TestRoomWalls:
    """Tests for implicit wall numbering."""

    def test_complete_room_has_closing_wall(self) -> None:
        room = make_room()
        assert room.wall_count == 4
        wall = room.wall(3)
        assert wall is not None
        assert wall.start == Point2D(0, 3000)
        assert wall.end == Point2D(0, 0)

    def test_incomplete_room_has_no_closing_wall(self) -> None:
        room = make_room(complete=False)
        assert room.wall_count == 3
        assert room.wall(3) is None

    def test_no_closing_wall_room(self) -> None:
        room = make_room("room-1", no_closing_wall=True)
        assert room.wall_count == 3

    def test_single_point_has_no_walls(self) -> None:
        room = Room(id="room-1", points=[Point(0, 0)])
        assert room.wall_count == 0
        assert room.walls() == []

    def test_wall_data_and_perimeter(self) -> None:
        room = make_room()
        data = room.wall_data()
        assert [d.length for d in data] == [4000, 3000, 4000, 3000]
        assert all(d.angle == pytest.approx(90) for d in data)
        assert room.perimeter == 14000

    def test_room_rejects_non_positive_height(self) -> None:
        with pytest.raises(ValueError) as exc_info:
            Room(id="main", height=0)
        assert "must be positive" in str(exc_info.value)


class TestValueObjects:
    def test_wall_direction(self) -> None:
        wall = WallPosition(0, Point2D(0, 0), Point2D(0, 10))
        assert wall.direction == pytest.approx(90)
        assert wall.length == 10
        assert wall.point_at_distance(4) == Point2D(0, 4)

    def test_attachment_parameter_range(self) -> None:
        with pytest.raises(ValueError):
            AttachmentConstraint(MAIN_ROOM_ID, 0, 1.5)

    def test_only_rear_edge_snaps(self) -> None:
        with pytest.raises(ValueError):
            SnapInfo(MAIN_ROOM_ID, 0, 100.0, snapped_edge="front")


class TestCabinetEntities:
    def test_cabinet_rejects_zero_width(self) -> None:
        with pytest.raises(ValueError):
            Cabinet(id=1, cabinet_run_id=1, cabinet_type="base", width=0)

    def test_run_rejects_negative_length(self) -> None:
        with pytest.raises(ValueError):
            CabinetRun(id=1, start_pos_x=0, start_pos_y=0, length=-1, depth=600)

    def test_run_rejects_zero_depth(self) -> None:
        with pytest.raises(ValueError):
            CabinetRun(id=1, start_pos_x=0, start_pos_y=0, length=1000, depth=0)

    def test_cabinet_end(self) -> None:
        cabinet = Cabinet(id=1, cabinet_run_id=1, cabinet_type="base", width=600, position=50)
        assert cabinet.end == 650


class TestPlan:
    """Tests for the Plan aggregate."""

    def test_new_plan_has_main_room(self) -> None:
        plan = Plan.new()
        assert len(plan.rooms) == 1
        assert plan.main_room.id == MAIN_ROOM_ID
        assert plan.main_room.is_main

    def test_new_room_id_skips_existing_ids(self) -> None:
        plan = Plan.new()
        plan.rooms.append(Room(id="room-1"))
        assert plan.new_room_id() == "room-2"

    def test_new_run_id_is_above_existing_ids(self) -> None:
        plan = Plan.new()
        plan.cabinet_runs.append(
            CabinetRun(id=7, start_pos_x=0, start_pos_y=0, length=0, depth=600)
        )
        assert plan.new_run_id() == 8
        assert plan.new_run_id() == 9

    def test_cabinets_in_run_are_ordered_by_position(self) -> None:
        plan = Plan.new()
        plan.cabinets = [
            Cabinet(id=1, cabinet_run_id=1, cabinet_type="base", width=600, position=600),
            Cabinet(id=2, cabinet_run_id=1, cabinet_type="base", width=600, position=0),
            Cabinet(id=3, cabinet_run_id=2, cabinet_type="base", width=600, position=0),
        ]
        assert [c.id for c in plan.cabinets_in_run(1)] == [2, 1]

    def test_copy_rebinds_attached_points(self) -> None:
        plan = Plan.new()
        plan.rooms[0] = make_room(is_main=True)
        child = Room(id="room-1", points=[Point(0, 0), Point(1000, -1000), Point(0, -1000)])
        plan.rooms.append(child)
        child.points[0].attach(AttachmentConstraint(MAIN_ROOM_ID, 0, 0.5), plan.main_room)

        clone = plan.copy()
        clone.main_room.points[1].move_to(6000, 0)

        assert clone.get_room("room-1").points[0].x == 3000
        assert plan.get_room("room-1").points[0].x == 2000

"""Unit tests for RoomEditingService.

These tests verify:
- Drawing clicks, room completion and wall-sharing detection
- Point moves, wall length and wall angle edits
- Wall splits and point deletion re-indexing their dependents
- Room deletion cascades
"""

import pytest

from floorplan.domain import (
    MAIN_ROOM_ID,
    CabinetRun,
    Door,
    EditRejected,
    Plan,
    Point,
    Point2D,
    Room,
    SnapInfo,
)
from floorplan.domain.services import AttachmentService, RoomEditingService, walls_coincide


@pytest.fixture
def service() -> RoomEditingService:
    return RoomEditingService(AttachmentService(), snap_tolerance=15.0)


def door(wall_index: int, position: float, width: float = 900.0) -> Door:
    return Door(
        wall_index=wall_index,
        start_point=Point2D(0, 0),
        end_point=Point2D(0, 0),
        width=width,
        position=position,
    )


def draw_room_on_bottom_wall(plan: Plan, service: RoomEditingService) -> str:
    """Draw a room whose first and last points land on the main bottom wall."""
    room_id = service.add_room(plan)
    for x, y in [(1000, 5), (1000, -1000), (2000, -1000), (2000, 3)]:
        service.add_point(plan, room_id, x, y)
    return room_id


class TestDrawing:
    """Tests for drawing clicks and completion."""

    def test_click_near_first_point_completes_room(
        self, plan: Plan, service: RoomEditingService
    ) -> None:
        room_id = service.add_room(plan)
        for x, y in [(5000, 0), (6000, 0), (6000, 1000)]:
            service.add_point(plan, room_id, x, y)
        service.add_point(plan, room_id, 5005, 5)

        room = plan.get_room(room_id)
        assert room.is_complete
        assert not room.no_closing_wall
        assert len(room.points) == 3
        assert room.wall_count == 3

    def test_click_near_wall_attaches_point(
        self, plan: Plan, service: RoomEditingService
    ) -> None:
        room_id = draw_room_on_bottom_wall(plan, service)
        room = plan.get_room(room_id)

        first = room.points[0]
        assert first.attachment.parent_room_id == MAIN_ROOM_ID
        assert first.attachment.wall_index == 0
        assert first.attachment.t == pytest.approx(0.25)
        assert (first.x, first.y) == (1000, 0)
        assert not room.points[1].is_attached

    def test_room_ending_on_its_start_wall_has_no_closing_wall(
        self, plan: Plan, service: RoomEditingService
    ) -> None:
        room_id = draw_room_on_bottom_wall(plan, service)
        service.complete_room(plan, room_id)

        room = plan.get_room(room_id)
        assert room.is_complete
        assert room.no_closing_wall
        assert room.wall_count == 3

    def test_main_room_points_never_attach(self, service: RoomEditingService) -> None:
        plan = Plan.new()
        service.add_point(plan, MAIN_ROOM_ID, 0, 0)
        assert not plan.main_room.points[0].is_attached

    def test_complete_room_rejected_with_two_points(
        self, plan: Plan, service: RoomEditingService
    ) -> None:
        room_id = service.add_room(plan)
        service.add_point(plan, room_id, 5000, 0)
        service.add_point(plan, room_id, 6000, 0)
        with pytest.raises(EditRejected):
            service.complete_room(plan, room_id)

    def test_click_on_complete_room_rejected(
        self, plan: Plan, service: RoomEditingService
    ) -> None:
        with pytest.raises(EditRejected):
            service.add_point(plan, MAIN_ROOM_ID, 100, 100)

    def test_find_wall_near(self, plan: Plan, service: RoomEditingService) -> None:
        hit = service.find_wall_near(plan, Point2D(3990, 1500))
        assert hit is not None
        assert (hit.room_id, hit.wall_index) == (MAIN_ROOM_ID, 1)
        assert hit.distance == pytest.approx(10)
        assert service.find_wall_near(plan, Point2D(2000, 1500)) is None

    def test_walls_coincide_in_either_direction(self) -> None:
        a, b = Point2D(0, 0), Point2D(100, 0)
        assert walls_coincide(a, b, Point2D(100, 5), Point2D(0, -5), 15)
        assert not walls_coincide(a, b, Point2D(0, 0), Point2D(50, 0), 15)


class TestPointEdits:
    """Tests for moving points and editing walls."""

    def test_moving_first_point_translates_room(
        self, plan: Plan, service: RoomEditingService
    ) -> None:
        service.move_point(plan, MAIN_ROOM_ID, 0, 100, 50)
        assert [(v.x, v.y) for v in plan.main_room.vertices()] == [
            (100, 50),
            (4100, 50),
            (4100, 3050),
            (100, 3050),
        ]

    def test_moving_other_point_moves_only_it(
        self, plan: Plan, service: RoomEditingService
    ) -> None:
        service.move_point(plan, MAIN_ROOM_ID, 2, 4500, 3500)
        vertices = plan.main_room.vertices()
        assert vertices[2] == Point2D(4500, 3500)
        assert vertices[1] == Point2D(4000, 0)

    def test_moving_attached_point_slides_along_wall(
        self, plan: Plan, service: RoomEditingService
    ) -> None:
        room_id = draw_room_on_bottom_wall(plan, service)
        service.move_point(plan, room_id, 0, 500, 700)
        point = plan.get_room(room_id).points[0]
        assert point.is_attached
        assert (point.x, point.y) == (500, 0)

    def test_set_wall_length_moves_end_point(
        self, plan: Plan, service: RoomEditingService
    ) -> None:
        service.set_wall_length(plan, MAIN_ROOM_ID, 0, 5000)
        assert plan.main_room.vertex(1) == Point2D(5000, 0)
        assert plan.main_room.wall(0).length == pytest.approx(5000)

    def test_set_wall_length_rejects_attached_end_point(
        self, plan: Plan, service: RoomEditingService
    ) -> None:
        room_id = draw_room_on_bottom_wall(plan, service)
        service.complete_room(plan, room_id)
        # Wall 2 ends on point 3, which is attached to the main room.
        with pytest.raises(EditRejected) as exc_info:
            service.set_wall_length(plan, room_id, 2, 500)
        assert exc_info.value.reason == "attached_point"

    def test_set_wall_length_rejects_non_positive(
        self, plan: Plan, service: RoomEditingService
    ) -> None:
        with pytest.raises(EditRejected):
            service.set_wall_length(plan, MAIN_ROOM_ID, 0, 0)

    def test_set_wall_angle(self, plan: Plan, service: RoomEditingService) -> None:
        service.set_wall_angle(plan, MAIN_ROOM_ID, 0, 120)
        end = plan.main_room.vertex(1)
        assert end.x == pytest.approx(3464.1016, abs=1e-3)
        assert end.y == pytest.approx(-2000)
        assert plan.main_room.wall_data()[0].angle == pytest.approx(120)
        assert plan.main_room.wall(0).length == pytest.approx(4000)


class TestWallSplitAndMerge:
    """Tests for inserting and deleting points."""

    def test_insert_point_moves_dependents_to_correct_half(
        self, plan: Plan, service: RoomEditingService
    ) -> None:
        main = plan.main_room
        main.doors = [door(0, 100), door(0, 2500), door(2, 1000)]
        side = Room(id="room-1", points=[Point(0, 0), Point(3000, -500), Point(3500, -500)])
        plan.rooms.append(side)
        service.attachments.attach(plan, "room-1", 0, MAIN_ROOM_ID, 0, 0.75)
        run = CabinetRun(
            id=1,
            start_pos_x=2500,
            start_pos_y=0,
            length=1000,
            depth=600,
            rotation_z=180,
            snap_info=SnapInfo(MAIN_ROOM_ID, 0, 2500.0),
        )
        plan.cabinet_runs.append(run)

        service.insert_point_on_wall(plan, MAIN_ROOM_ID, 0, 2000, 10)

        assert len(main.points) == 5
        assert main.vertex(1) == Point2D(2000, 0)
        assert [(d.wall_index, d.position) for d in main.doors] == [
            (0, 100),
            (1, 500),
            (3, 1000),
        ]
        attachment = side.points[0].attachment
        assert (attachment.wall_index, attachment.t) == (1, pytest.approx(0.5))
        assert (side.points[0].x, side.points[0].y) == (3000, 0)
        assert run.snap_info.wall_index == 1
        assert run.snap_info.distance_from_start == pytest.approx(500)

    def test_delete_point_merges_walls(self, plan: Plan, service: RoomEditingService) -> None:
        main = plan.main_room
        main.points.insert(1, Point(2000, 0))
        main.doors = [door(1, 500)]

        service.delete_point(plan, MAIN_ROOM_ID, 1)

        assert len(main.points) == 4
        assert (main.doors[0].wall_index, main.doors[0].position) == (0, 2500)

    def test_first_point_cannot_be_deleted(
        self, plan: Plan, service: RoomEditingService
    ) -> None:
        with pytest.raises(EditRejected) as exc_info:
            service.delete_point(plan, MAIN_ROOM_ID, 0)
        assert exc_info.value.reason == "first_point"

    def test_triangle_keeps_its_points(self, plan: Plan, service: RoomEditingService) -> None:
        plan.main_room.points.pop()
        with pytest.raises(EditRejected) as exc_info:
            service.delete_point(plan, MAIN_ROOM_ID, 1)
        assert exc_info.value.reason == "too_few_points"


class TestRoomLifecycle:
    def test_main_room_cannot_be_deleted(
        self, plan: Plan, service: RoomEditingService
    ) -> None:
        with pytest.raises(EditRejected) as exc_info:
            service.delete_room(plan, MAIN_ROOM_ID)
        assert exc_info.value.reason == "main_room"
        assert plan.room(MAIN_ROOM_ID) is not None

    def test_delete_room_cascades(self, plan: Plan, service: RoomEditingService) -> None:
        # room-1 shares the main room's right wall
        neighbour = Room(
            id="room-1",
            points=[Point(4000, 0), Point(5000, 0), Point(5000, 3000), Point(4000, 3000)],
            is_complete=True,
        )
        outer = Room(id="room-2", points=[Point(5000, 1000), Point(6000, 1000), Point(6000, 0)])
        plan.rooms.extend([neighbour, outer])
        service.attachments.attach(plan, "room-2", 0, "room-1", 1, 0.5)
        plan.main_room.doors = [door(1, 1000), door(0, 1000)]
        plan.cabinet_runs.append(
            CabinetRun(
                id=1,
                start_pos_x=5000,
                start_pos_y=0,
                length=1000,
                depth=600,
                snap_info=SnapInfo("room-1", 1, 0.0),
            )
        )

        affected = service.delete_room(plan, "room-1")

        assert plan.room("room-1") is None
        assert affected == {"room-2"}
        assert not outer.points[0].is_attached
        assert (outer.points[0].x, outer.points[0].y) == (5000, 1500)
        assert [d.wall_index for d in plan.main_room.doors] == [0]
        assert plan.cabinet_runs[0].snap_info is None

    def test_invalid_properties_leave_room_unchanged(
        self, plan: Plan, service: RoomEditingService
    ) -> None:
        with pytest.raises(EditRejected):
            service.set_room_properties(plan, MAIN_ROOM_ID, height=2700, wall_thickness=-1)
        assert plan.main_room.height == 2400

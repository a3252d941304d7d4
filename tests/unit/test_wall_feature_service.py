"""Unit tests for door and window anchoring and placement."""

import pytest

from floorplan.domain import (
    MAIN_ROOM_ID,
    Door,
    EditRejected,
    FeatureEndpoint,
    FeatureKind,
    Plan,
    Point,
    Point2D,
    Room,
    Window,
    WindowType,
)
from floorplan.domain.services import (
    FeatureDefaults,
    PlacementSession,
    WallFeatureService,
    reanchor_feature,
)


@pytest.fixture
def service() -> WallFeatureService:
    return WallFeatureService(snap_tolerance=15.0)


def door(wall_index: int = 0, position: float = 100.0, width: float = 900.0) -> Door:
    return Door(
        wall_index=wall_index,
        start_point=Point2D(0, 0),
        end_point=Point2D(0, 0),
        width=width,
        position=position,
    )


def small_room() -> Room:
    """Room whose wall 0 is 1200 mm long."""
    return Room(
        id=MAIN_ROOM_ID,
        points=[Point(0, 0), Point(1200, 0), Point(1200, 1000), Point(0, 1000)],
        is_complete=True,
        is_main=True,
    )


class TestReanchor:
    """Tests for recomputing feature points from position and width."""

    def test_feature_points_follow_position_and_width(self) -> None:
        room = small_room()
        d = door()
        reanchor_feature(d, room.wall(0))
        assert d.start_point == Point2D(100, 0)
        assert d.end_point == Point2D(1000, 0)

    def test_shortened_wall_clamps_position_and_pins_end(
        self, service: WallFeatureService
    ) -> None:
        room = small_room()
        d = door(position=100, width=900)
        room.doors.append(d)

        room.points[1].move_to(800, 0)
        service.reanchor(room)

        assert d.position == 0
        assert d.width == 900
        assert d.start_point == Point2D(0, 0)
        assert d.end_point == Point2D(800, 0)

    def test_partial_overflow_pulls_feature_back(self, service: WallFeatureService) -> None:
        room = small_room()
        d = door(position=250, width=900)
        room.doors.append(d)

        room.points[1].move_to(1000, 0)
        service.reanchor(room)

        assert d.position == pytest.approx(100)
        assert d.start_point.x == pytest.approx(100)
        assert d.end_point == Point2D(1000, 0)

    def test_feature_on_missing_wall_is_dropped(self, service: WallFeatureService) -> None:
        room = small_room()
        room.windows.append(
            Window(
                wall_index=3,
                start_point=Point2D(0, 0),
                end_point=Point2D(0, 0),
                width=500,
                position=100,
            )
        )
        room.is_complete = False
        service.reanchor(room)
        assert room.windows == []

    def test_zero_length_wall_is_skipped(self) -> None:
        room = small_room()
        room.points[1].move_to(0, 0)
        d = door()
        reanchor_feature(d, room.wall(0))
        assert d.position == 100
        assert d.start_point == Point2D(0, 0)


class TestPlacement:
    """Tests for committing doors and windows."""

    def test_add_feature_projects_and_orders_points(
        self, plan: Plan, service: WallFeatureService
    ) -> None:
        owner, index = service.add_feature(
            plan, FeatureKind.DOOR, MAIN_ROOM_ID, 0, Point2D(2000, 30), Point2D(1000, -20)
        )
        d = plan.main_room.doors[index]
        assert owner == MAIN_ROOM_ID
        assert (d.position, d.width) == (1000, 1000)
        assert d.start_point == Point2D(1000, 0)
        assert d.end_point == Point2D(2000, 0)

    def test_new_features_use_defaults(self, plan: Plan) -> None:
        service = WallFeatureService(
            FeatureDefaults(window_height=1500, window_type=WindowType.DOUBLE)
        )
        _, index = service.add_feature(
            plan, FeatureKind.WINDOW, MAIN_ROOM_ID, 2, Point2D(3000, 3000), Point2D(2000, 3000)
        )
        window = plan.main_room.windows[index]
        assert window.height == 1500
        assert window.window_type == WindowType.DOUBLE

    def test_zero_width_feature_rejected(self, plan: Plan, service: WallFeatureService) -> None:
        with pytest.raises(EditRejected):
            service.add_feature(
                plan, FeatureKind.DOOR, MAIN_ROOM_ID, 0, Point2D(1000, 0), Point2D(1000, 50)
            )
        assert plan.main_room.doors == []

    def test_feature_on_shared_wall_belongs_to_main_room(
        self, plan: Plan, service: WallFeatureService
    ) -> None:
        plan.rooms.append(
            Room(
                id="room-1",
                points=[Point(4000, 0), Point(5000, 0), Point(5000, 3000), Point(4000, 3000)],
                is_complete=True,
            )
        )
        owner, index = service.add_feature(
            plan, FeatureKind.WINDOW, "room-1", 3, Point2D(4000, 1000), Point2D(4000, 2000)
        )

        assert owner == MAIN_ROOM_ID
        assert plan.get_room("room-1").windows == []
        window = plan.main_room.windows[index]
        assert window.wall_index == 1
        assert (window.position, window.width) == (1000, 1000)

    def test_two_click_placement(self, plan: Plan, service: WallFeatureService) -> None:
        session = PlacementSession(service)
        session.begin(FeatureKind.DOOR)

        assert session.click(plan, MAIN_ROOM_ID, 0, 1000, 20) is None
        # A click on another wall replaces the pending anchor
        assert session.click(plan, MAIN_ROOM_ID, 1, 3990, 500) is None
        assert session.pending.wall_index == 1

        placed = session.click(plan, MAIN_ROOM_ID, 1, 4010, 1400)

        assert placed == (MAIN_ROOM_ID, 0)
        assert not session.active
        d = plan.main_room.doors[0]
        assert d.wall_index == 1
        assert d.position == pytest.approx(500)
        assert d.width == pytest.approx(900)

    def test_click_without_placement_rejected(
        self, plan: Plan, service: WallFeatureService
    ) -> None:
        with pytest.raises(EditRejected):
            PlacementSession(service).click(plan, MAIN_ROOM_ID, 0, 100, 0)


class TestEdits:
    """Tests for editing placed features."""

    def test_update_width_caps_to_wall(self, plan: Plan, service: WallFeatureService) -> None:
        plan.main_room.doors.append(door(position=3500, width=300))
        service.update_width(plan, MAIN_ROOM_ID, FeatureKind.DOOR, 0, 1000)
        d = plan.main_room.doors[0]
        assert d.width == 500
        assert d.end_point == Point2D(4000, 0)

    def test_update_position_clamps_to_wall_end(
        self, plan: Plan, service: WallFeatureService
    ) -> None:
        plan.main_room.doors.append(door(position=100, width=900))
        service.update_position(plan, MAIN_ROOM_ID, FeatureKind.DOOR, 0, 3500)
        d = plan.main_room.doors[0]
        assert d.position == 3100
        assert d.width == 900

    def test_update_position_rejects_negative(
        self, plan: Plan, service: WallFeatureService
    ) -> None:
        plan.main_room.doors.append(door())
        with pytest.raises(EditRejected):
            service.update_position(plan, MAIN_ROOM_ID, FeatureKind.DOOR, 0, -10)

    def test_move_end_point(self, plan: Plan, service: WallFeatureService) -> None:
        plan.main_room.doors.append(door(position=1000, width=900))
        service.move_endpoint(
            plan, MAIN_ROOM_ID, FeatureKind.DOOR, 0, FeatureEndpoint.END, 3000, 50
        )
        d = plan.main_room.doors[0]
        assert (d.position, d.width) == (1000, 2000)

    def test_dragging_start_past_end_swaps_ends(
        self, plan: Plan, service: WallFeatureService
    ) -> None:
        plan.main_room.doors.append(door(position=1000, width=900))
        service.move_endpoint(
            plan, MAIN_ROOM_ID, FeatureKind.DOOR, 0, FeatureEndpoint.START, 2500, 0
        )
        d = plan.main_room.doors[0]
        assert (d.position, d.width) == (1900, 600)

    def test_invalid_door_properties_change_nothing(
        self, plan: Plan, service: WallFeatureService
    ) -> None:
        plan.main_room.doors.append(door())
        with pytest.raises(EditRejected):
            service.set_door_properties(plan, MAIN_ROOM_ID, 0, height=2100, frame_width=0)
        assert plan.main_room.doors[0].height == 2032

    def test_window_properties(self, plan: Plan, service: WallFeatureService) -> None:
        plan.main_room.windows.append(
            Window(
                wall_index=0,
                start_point=Point2D(0, 0),
                end_point=Point2D(0, 0),
                width=600,
                position=100,
            )
        )
        service.set_window_properties(
            plan, MAIN_ROOM_ID, 0, sill_height=0, window_type=WindowType.DOUBLE
        )
        window = plan.main_room.windows[0]
        assert window.sill_height == 0
        assert window.window_type == WindowType.DOUBLE

    def test_delete_feature(self, plan: Plan, service: WallFeatureService) -> None:
        plan.main_room.doors.extend([door(position=100), door(position=2000)])
        service.delete_feature(plan, MAIN_ROOM_ID, FeatureKind.DOOR, 0)
        assert [d.position for d in plan.main_room.doors] == [2000]

    def test_unknown_feature_rejected(self, plan: Plan, service: WallFeatureService) -> None:
        with pytest.raises(EditRejected) as exc_info:
            service.delete_feature(plan, MAIN_ROOM_ID, FeatureKind.WINDOW, 0)
        assert exc_info.value.reason == "invalid_reference"

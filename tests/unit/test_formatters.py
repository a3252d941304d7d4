"""Unit tests for the room summary and room processing formatters."""

import pytest

from floorplan.domain import (
    MAIN_ROOM_ID,
    CabinetRun,
    Door,
    Plan,
    Point2D,
    Room,
    SnapInfo,
    Window,
)
from floorplan.infrastructure import RoomSummaryFormatter, format_room_for_processing


@pytest.fixture
def formatter() -> RoomSummaryFormatter:
    return RoomSummaryFormatter()


class TestRoomSummaryFormatter:
    def test_wall_table(self, plan: Plan, formatter: RoomSummaryFormatter) -> None:
        text = formatter.format(plan)
        assert text.startswith("MAIN ROOM (complete)")
        assert "Height: 2400 mm   Wall thickness: 100 mm" in text
        assert "0            4000.0     90.0" in text
        assert "TOTAL       14000.0" in text

    def test_doors_windows_and_runs(self, plan: Plan, formatter: RoomSummaryFormatter) -> None:
        plan.main_room.doors.append(
            Door(0, Point2D(100, 0), Point2D(1000, 0), width=900, position=100)
        )
        plan.main_room.windows.append(
            Window(2, Point2D(3000, 3000), Point2D(2000, 3000), width=1000, position=1000)
        )
        plan.cabinet_runs = [
            CabinetRun(
                id=1,
                start_pos_x=2000,
                start_pos_y=0,
                length=1000,
                depth=635,
                rotation_z=180,
                snap_info=SnapInfo(MAIN_ROOM_ID, 0, 2000.0),
            ),
            CabinetRun(
                id=2, start_pos_x=1500, start_pos_y=1500, length=0, depth=635, is_island=True
            ),
        ]

        text = formatter.format(plan)

        assert "Door on wall 0: 900 wide at 100" in text
        assert "Window (single) on wall 2: 1000 wide at 1000" in text
        assert "Run 1 (Base): 1000 x 635, 0 cabinet(s), on wall 0 at 2000" in text
        free = text.split("FREE-STANDING RUNS")[1]
        assert "Run 2 (Base, island): 0 x 635, 0 cabinet(s)" in free
        assert "Run 1" not in free

    def test_room_in_progress(self, plan: Plan, formatter: RoomSummaryFormatter) -> None:
        plan.rooms.append(Room(id="room-1"))
        text = formatter.format(plan)
        assert "ROOM room-1 (in progress)" in text
        assert "No walls drawn." in text
        assert "FREE-STANDING RUNS" not in text


class TestFormatRoomForProcessing:
    def test_points_are_rounded_and_walls_wrap(self) -> None:
        points = [Point2D(0, 0), Point2D(3000.4, 0), Point2D(3000.4, 2000.5)]
        data = format_room_for_processing(points)

        assert data["points"] == [
            {"x": 0, "y": 0, "z": 0},
            {"x": 3000, "y": 0, "z": 0},
            {"x": 3000, "y": 2001, "z": 0},
        ]
        assert [(w["start"], w["end"]) for w in data["walls"]] == [(0, 1), (1, 2), (2, 0)]
        assert data["walls"][0]["length"] == pytest.approx(3000.4)
        assert data["walls"][2]["length"] == pytest.approx(3606.16, abs=0.01)

    def test_empty_outline(self) -> None:
        assert format_room_for_processing([]) == {"points": [], "walls": []}

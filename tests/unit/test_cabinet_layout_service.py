"""Unit tests for CabinetLayoutService and the cabinet width policy."""

import pytest

from floorplan.domain import (
    MAIN_ROOM_ID,
    CabinetRunType,
    EditRejected,
    Plan,
    RunEndType,
    SnapInfo,
)
from floorplan.domain.services import (
    CabinetLayoutService,
    CabinetTypeRule,
    CabinetWidthPolicy,
)


@pytest.fixture
def policy() -> CabinetWidthPolicy:
    return CabinetWidthPolicy(
        rules={
            "dishwasher": CabinetTypeRule(fixed_width=600),
            "sink_base": CabinetTypeRule(min_width=600),
            "floating_shelf": CabinetTypeRule(min_width=300),
        },
        default_min_width=250,
    )


@pytest.fixture
def service(policy: CabinetWidthPolicy) -> CabinetLayoutService:
    return CabinetLayoutService(policy, filler_width=50)


@pytest.fixture
def empty_plan() -> Plan:
    return Plan.new()


def positions(plan: Plan, run_id: int) -> list[float]:
    return [c.position for c in plan.cabinets_in_run(run_id)]


class TestWidthPolicy:
    def test_fixed_width_ignores_request(self, policy: CabinetWidthPolicy) -> None:
        assert policy.resolve("dishwasher", 450) == 600
        assert not policy.is_width_editable("dishwasher")

    def test_minimum_width_clamps_up(self, policy: CabinetWidthPolicy) -> None:
        assert policy.resolve("sink_base", 400) == 600
        assert policy.resolve("sink_base", 900) == 900

    def test_unknown_type_uses_default_minimum(self, policy: CabinetWidthPolicy) -> None:
        assert policy.resolve("base", 100) == 250
        assert policy.resolve("base") == 250
        assert policy.is_width_editable("base")


class TestRuns:
    def test_default_depth_follows_run_type(
        self, empty_plan: Plan, service: CabinetLayoutService
    ) -> None:
        base = service.create_run(empty_plan, 0, 0, 1000)
        upper = service.create_run(empty_plan, 0, 0, 1000, run_type=CabinetRunType.UPPER)
        assert empty_plan.get_run(base).depth == 635
        assert empty_plan.get_run(upper).depth == 350

    def test_negative_length_rejected(
        self, empty_plan: Plan, service: CabinetLayoutService
    ) -> None:
        with pytest.raises(EditRejected):
            service.create_run(empty_plan, 0, 0, -10)
        assert empty_plan.cabinet_runs == []

    def test_empty_run_length_is_editable(
        self, empty_plan: Plan, service: CabinetLayoutService
    ) -> None:
        run_id = service.create_run(empty_plan, 0, 0, 1000)
        service.set_run_length(empty_plan, run_id, 1800)
        assert empty_plan.get_run(run_id).length == 1800

    def test_length_of_run_with_cabinets_is_derived(
        self, empty_plan: Plan, service: CabinetLayoutService
    ) -> None:
        run_id = service.create_run(empty_plan, 0, 0, 1000)
        service.add_cabinet(empty_plan, run_id, "base", 600)
        with pytest.raises(EditRejected) as exc_info:
            service.set_run_length(empty_plan, run_id, 2000)
        assert exc_info.value.reason == "derived_length"
        assert empty_plan.get_run(run_id).length == 600

    def test_making_run_an_island_clears_snap(
        self, empty_plan: Plan, service: CabinetLayoutService
    ) -> None:
        run_id = service.create_run(empty_plan, 0, 0, 1000)
        run = empty_plan.get_run(run_id)
        run.snap_info = SnapInfo(MAIN_ROOM_ID, 0, 0.0)
        service.set_run_properties(empty_plan, run_id, is_island=True, omit_backsplash=True)
        assert run.is_island
        assert run.omit_backsplash
        assert run.snap_info is None

    def test_non_positive_depth_rejected(
        self, empty_plan: Plan, service: CabinetLayoutService
    ) -> None:
        run_id = service.create_run(empty_plan, 0, 0, 1000)
        with pytest.raises(EditRejected):
            service.set_run_properties(empty_plan, run_id, depth=0)

    def test_delete_run_removes_its_cabinets(
        self, empty_plan: Plan, service: CabinetLayoutService
    ) -> None:
        keep = service.create_run(empty_plan, 0, 0, 0)
        drop = service.create_run(empty_plan, 0, 0, 0)
        service.add_cabinet(empty_plan, keep, "base", 600)
        service.add_cabinet(empty_plan, drop, "base", 600)

        service.delete_run(empty_plan, drop)

        assert [r.id for r in empty_plan.cabinet_runs] == [keep]
        assert [c.cabinet_run_id for c in empty_plan.cabinets] == [keep]


class TestCabinets:
    """Tests for laying out cabinets with fillers."""

    def test_cabinets_are_appended_contiguously(
        self, empty_plan: Plan, service: CabinetLayoutService
    ) -> None:
        run_id = service.create_run(empty_plan, 0, 0, 0)
        service.add_cabinet(empty_plan, run_id, "base", 600)
        service.add_cabinet(empty_plan, run_id, "dishwasher")
        service.add_cabinet(empty_plan, run_id, "sink_base", 400)

        assert positions(empty_plan, run_id) == [0, 600, 1200]
        assert empty_plan.get_run(run_id).length == 1800

    def test_wall_start_reserves_leading_filler(
        self, empty_plan: Plan, service: CabinetLayoutService
    ) -> None:
        run_id = service.create_run(empty_plan, 0, 0, 0)
        service.set_start_type(empty_plan, run_id, RunEndType.WALL)
        service.add_cabinet(empty_plan, run_id, "base", 600)

        assert positions(empty_plan, run_id) == [50]
        assert empty_plan.get_run(run_id).length == 650

    def test_changing_start_type_shifts_cabinets(
        self, empty_plan: Plan, service: CabinetLayoutService
    ) -> None:
        run_id = service.create_run(empty_plan, 0, 0, 0)
        service.add_cabinet(empty_plan, run_id, "base", 600)
        service.add_cabinet(empty_plan, run_id, "base", 500)

        service.set_start_type(empty_plan, run_id, RunEndType.WALL)
        assert positions(empty_plan, run_id) == [50, 650]
        assert empty_plan.get_run(run_id).length == 1150

        service.set_start_type(empty_plan, run_id, RunEndType.OPEN)
        assert positions(empty_plan, run_id) == [0, 600]
        assert empty_plan.get_run(run_id).length == 1100

    def test_wall_end_only_extends_length(
        self, empty_plan: Plan, service: CabinetLayoutService
    ) -> None:
        run_id = service.create_run(empty_plan, 0, 0, 0)
        service.add_cabinet(empty_plan, run_id, "base", 600)
        service.set_end_type(empty_plan, run_id, RunEndType.WALL)

        assert positions(empty_plan, run_id) == [0]
        assert empty_plan.get_run(run_id).length == 650
        assert service.expected_length(empty_plan, empty_plan.get_run(run_id)) == 650

    def test_remove_cabinet_closes_gap(
        self, empty_plan: Plan, service: CabinetLayoutService
    ) -> None:
        run_id = service.create_run(empty_plan, 0, 0, 0)
        first = service.add_cabinet(empty_plan, run_id, "base", 600)
        middle = service.add_cabinet(empty_plan, run_id, "base", 800)
        last = service.add_cabinet(empty_plan, run_id, "base", 400)

        service.remove_cabinet(empty_plan, middle)

        assert [c.id for c in empty_plan.cabinets_in_run(run_id)] == [first, last]
        assert positions(empty_plan, run_id) == [0, 600]
        assert empty_plan.get_run(run_id).length == 1000

    def test_update_width_repacks_following_cabinets(
        self, empty_plan: Plan, service: CabinetLayoutService
    ) -> None:
        run_id = service.create_run(empty_plan, 0, 0, 0)
        first = service.add_cabinet(empty_plan, run_id, "sink_base", 600)
        service.add_cabinet(empty_plan, run_id, "base", 600)

        applied = service.update_cabinet_width(empty_plan, first, 450)

        assert applied == 600
        applied = service.update_cabinet_width(empty_plan, first, 900)
        assert applied == 900
        assert positions(empty_plan, run_id) == [0, 900]
        assert empty_plan.get_run(run_id).length == 1500

    def test_fixed_width_cabinet_cannot_be_resized(
        self, empty_plan: Plan, service: CabinetLayoutService
    ) -> None:
        run_id = service.create_run(empty_plan, 0, 0, 0)
        cabinet_id = service.add_cabinet(empty_plan, run_id, "dishwasher")
        with pytest.raises(EditRejected) as exc_info:
            service.update_cabinet_width(empty_plan, cabinet_id, 450)
        assert exc_info.value.reason == "fixed_width"

    def test_empty_run_has_no_expected_length(
        self, empty_plan: Plan, service: CabinetLayoutService
    ) -> None:
        run_id = service.create_run(empty_plan, 0, 0, 1200)
        assert service.expected_length(empty_plan, empty_plan.get_run(run_id)) is None


class TestFloatingShelves:
    def test_floating_shelf_gets_shelf_defaults(
        self, empty_plan: Plan, service: CabinetLayoutService
    ) -> None:
        run_id = service.create_run(empty_plan, 0, 0, 0)
        cabinet_id = service.add_cabinet(empty_plan, run_id, "floating_shelf", 900)
        cabinet = empty_plan.cabinet(cabinet_id)
        assert cabinet.shelf_count == 1
        assert cabinet.shelf_depth == 250

    def test_shelf_settings_rejected_for_other_types(
        self, empty_plan: Plan, service: CabinetLayoutService
    ) -> None:
        run_id = service.create_run(empty_plan, 0, 0, 0)
        cabinet_id = service.add_cabinet(empty_plan, run_id, "base", 600)
        with pytest.raises(EditRejected):
            service.set_cabinet_properties(empty_plan, cabinet_id, shelf_count=3)

    def test_invalid_shelf_settings_change_nothing(
        self, empty_plan: Plan, service: CabinetLayoutService
    ) -> None:
        run_id = service.create_run(empty_plan, 0, 0, 0)
        cabinet_id = service.add_cabinet(empty_plan, run_id, "floating_shelf", 900)
        with pytest.raises(EditRejected):
            service.set_cabinet_properties(
                empty_plan, cabinet_id, hinge_right=True, shelf_count=3, shelf_spacing=0
            )
        cabinet = empty_plan.cabinet(cabinet_id)
        assert not cabinet.hinge_right
        assert cabinet.shelf_count == 1

"""Pytest configuration and shared fixtures for floor plan tests."""

from __future__ import annotations

import pytest

from floorplan.application import PlanEditor, ServiceFactory, reset_factory
from floorplan.domain import MAIN_ROOM_ID, Plan, Point

# Counter-clockwise 4 m x 3 m main room (Y axis up)
MAIN_OUTLINE = [(0, 0), (4000, 0), (4000, 3000), (0, 3000)]


def build_room_points(outline: list[tuple[float, float]]) -> list[Point]:
    return [Point(x, y) for x, y in outline]


@pytest.fixture(autouse=True)
def _reset_default_factory():
    """Give every test a fresh default ServiceFactory."""
    reset_factory()
    yield
    reset_factory()


@pytest.fixture
def plan() -> Plan:
    """Plan whose main room is a complete 4000 x 3000 rectangle."""
    plan = Plan.new()
    main = plan.get_room(MAIN_ROOM_ID)
    main.points = build_room_points(MAIN_OUTLINE)
    main.is_complete = True
    return plan


@pytest.fixture
def factory() -> ServiceFactory:
    return ServiceFactory()


@pytest.fixture
def editor(plan: Plan, factory: ServiceFactory) -> PlanEditor:
    """Editor over the rectangular plan, wired through the service factory."""
    return factory.create_editor(plan)

"""Cabinet placement inside cabinet runs.

Cabinets sit side by side from the run origin. A run end of type Wall
reserves a filler strip: the leading filler offsets every cabinet
position, the trailing one only adds to the run length. Once a run holds
cabinets its length is derived:

    length = sum(widths) + filler (start is Wall) + filler (end is Wall)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..entities import (
    FILLER_WIDTH,
    Cabinet,
    CabinetRun,
    Plan,
    total_cabinet_width,
)
from ..errors import EditRejected
from ..value_objects import CabinetRunType, RunEndType

__all__ = [
    "CabinetLayoutService",
    "CabinetTypeRule",
    "CabinetWidthPolicy",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CabinetTypeRule:
    """Width constraint for one cabinet type.

    Attributes:
        fixed_width: Width every cabinet of this type has; user values are
            ignored and the width cannot be edited.
        min_width: Smallest allowed width; smaller requests are clamped up.
    """

    fixed_width: float | None = None
    min_width: float | None = None


@dataclass
class CabinetWidthPolicy:
    """Resolves the width a cabinet of a given type ends up with.

    Types without a rule fall back to `default_min_width` with no maximum.
    """

    rules: dict[str, CabinetTypeRule] = field(default_factory=dict)
    default_min_width: float = 250.0

    def rule_for(self, cabinet_type: str) -> CabinetTypeRule | None:
        return self.rules.get(cabinet_type)

    def is_width_editable(self, cabinet_type: str) -> bool:
        rule = self.rule_for(cabinet_type)
        return rule is None or rule.fixed_width is None

    def minimum_for(self, cabinet_type: str) -> float:
        rule = self.rule_for(cabinet_type)
        if rule is not None and rule.min_width is not None:
            return rule.min_width
        return self.default_min_width

    def resolve(self, cabinet_type: str, requested: float | None = None) -> float:
        """Width for a cabinet of `cabinet_type` given a requested width."""
        rule = self.rule_for(cabinet_type)
        if rule is not None and rule.fixed_width is not None:
            return rule.fixed_width
        minimum = self.minimum_for(cabinet_type)
        if requested is None:
            return minimum
        return max(requested, minimum)


class CabinetLayoutService:
    """Creates runs and lays out cabinets inside them.

    Args:
        policy: Width policy applied to every width a cabinet receives.
        filler_width: Width reserved at a run end of type Wall.
        base_depth: Default depth for new Base runs.
        upper_depth: Default depth for new Upper runs.
    """

    def __init__(
        self,
        policy: CabinetWidthPolicy | None = None,
        filler_width: float = FILLER_WIDTH,
        base_depth: float = 635.0,
        upper_depth: float = 350.0,
    ) -> None:
        self.policy = policy or CabinetWidthPolicy()
        self.filler_width = filler_width
        self.base_depth = base_depth
        self.upper_depth = upper_depth

    def _run(self, plan: Plan, run_id: int) -> CabinetRun:
        run = plan.run(run_id)
        if run is None:
            raise EditRejected(f"Unknown cabinet run {run_id}", "invalid_reference")
        return run

    def _cabinet(self, plan: Plan, cabinet_id: int) -> Cabinet:
        cabinet = plan.cabinet(cabinet_id)
        if cabinet is None:
            raise EditRejected(f"Unknown cabinet {cabinet_id}", "invalid_reference")
        return cabinet

    def _filler(self, end_type: RunEndType) -> float:
        return self.filler_width if end_type == RunEndType.WALL else 0.0

    # -- runs --------------------------------------------------------------

    def create_run(
        self,
        plan: Plan,
        x: float,
        y: float,
        length: float,
        depth: float | None = None,
        rotation_z: float = 0.0,
        run_type: CabinetRunType = CabinetRunType.BASE,
        is_island: bool = False,
    ) -> int:
        """Add an empty run with its rear-left corner at (x, y)."""
        if length < 0:
            raise EditRejected("Run length cannot be negative")
        run_type = CabinetRunType(run_type)
        if depth is None:
            depth = self.base_depth if run_type == CabinetRunType.BASE else self.upper_depth
        if depth <= 0:
            raise EditRejected("Run depth must be positive")
        run = CabinetRun(
            id=plan.new_run_id(),
            start_pos_x=x,
            start_pos_y=y,
            length=length,
            depth=depth,
            rotation_z=rotation_z,
            run_type=run_type,
            is_island=is_island,
        )
        plan.cabinet_runs.append(run)
        logger.debug(f"Created {run_type.value} run {run.id}")
        return run.id

    def delete_run(self, plan: Plan, run_id: int) -> None:
        """Delete a run together with its cabinets."""
        run = self._run(plan, run_id)
        plan.cabinets = [c for c in plan.cabinets if c.cabinet_run_id != run_id]
        plan.cabinet_runs.remove(run)

    def set_run_length(self, plan: Plan, run_id: int, length: float) -> None:
        """Set the length of an empty run.

        Raises:
            EditRejected: If the run holds cabinets; its length is then
                derived from their widths.
        """
        run = self._run(plan, run_id)
        if plan.cabinets_in_run(run_id):
            raise EditRejected(
                "The length of a run with cabinets is derived from their widths",
                "derived_length",
            )
        if length < 0:
            raise EditRejected("Run length cannot be negative")
        run.length = length

    def set_run_properties(
        self,
        plan: Plan,
        run_id: int,
        depth: float | None = None,
        run_type: CabinetRunType | None = None,
        top_filler: bool | None = None,
        is_island: bool | None = None,
        omit_backsplash: bool | None = None,
    ) -> None:
        run = self._run(plan, run_id)
        if depth is not None:
            if depth <= 0:
                raise EditRejected("Run depth must be positive")
            run.depth = depth
        if run_type is not None:
            run.run_type = CabinetRunType(run_type)
        if top_filler is not None:
            run.top_filler = top_filler
        if omit_backsplash is not None:
            run.omit_backsplash = omit_backsplash
        if is_island is not None:
            run.is_island = is_island
            if is_island:
                run.snap_info = None

    def set_start_type(self, plan: Plan, run_id: int, start_type: RunEndType) -> None:
        """Change the start end; cabinets shift with the leading filler."""
        run = self._run(plan, run_id)
        start_type = RunEndType(start_type)
        delta = self._filler(start_type) - self._filler(run.start_type)
        run.start_type = start_type
        if delta == 0:
            return
        run.length = max(0.0, run.length + delta)
        for cabinet in plan.cabinets_in_run(run_id):
            cabinet.position += delta

    def set_end_type(self, plan: Plan, run_id: int, end_type: RunEndType) -> None:
        """Change the far end; only the run length changes."""
        run = self._run(plan, run_id)
        end_type = RunEndType(end_type)
        delta = self._filler(end_type) - self._filler(run.end_type)
        run.end_type = end_type
        run.length = max(0.0, run.length + delta)

    # -- cabinets ----------------------------------------------------------

    def add_cabinet(
        self,
        plan: Plan,
        run_id: int,
        cabinet_type: str,
        width: float | None = None,
        hinge_right: bool = False,
        material: str = "White Shaker",
    ) -> int:
        """Append a cabinet after the rightmost one in a run."""
        run = self._run(plan, run_id)
        existing = plan.cabinets_in_run(run_id)
        if existing:
            position = max(c.end for c in existing)
        else:
            position = self._filler(run.start_type)

        cabinet = Cabinet(
            id=plan.new_cabinet_id(),
            cabinet_run_id=run_id,
            cabinet_type=cabinet_type,
            width=self.policy.resolve(cabinet_type, width),
            position=position,
            hinge_right=hinge_right,
            material=material,
        )
        if cabinet.is_floating_shelf:
            cabinet.shelf_depth = 250.0
            cabinet.shelf_height = 38.0
            cabinet.shelf_count = 1
            cabinet.shelf_spacing = 300.0
        plan.cabinets.append(cabinet)
        self.recompute_length(plan, run)
        logger.debug(
            f"Added {cabinet_type} cabinet {cabinet.id} ({cabinet.width:.0f} mm) to run {run_id}"
        )
        return cabinet.id

    def remove_cabinet(self, plan: Plan, cabinet_id: int) -> None:
        """Remove a cabinet and close the gap it leaves."""
        cabinet = self._cabinet(plan, cabinet_id)
        plan.cabinets.remove(cabinet)
        run = plan.run(cabinet.cabinet_run_id)
        if run is not None:
            self.repack(plan, run)

    def update_cabinet_width(self, plan: Plan, cabinet_id: int, width: float) -> float:
        """Change a cabinet's width through the width policy.

        Returns:
            The width actually applied.

        Raises:
            EditRejected: For cabinet types with a fixed width.
        """
        cabinet = self._cabinet(plan, cabinet_id)
        if not self.policy.is_width_editable(cabinet.cabinet_type):
            raise EditRejected(
                f"Cabinets of type '{cabinet.cabinet_type}' have a fixed width", "fixed_width"
            )
        cabinet.width = self.policy.resolve(cabinet.cabinet_type, width)
        run = plan.run(cabinet.cabinet_run_id)
        if run is not None:
            self.repack(plan, run)
        return cabinet.width

    def set_cabinet_properties(
        self,
        plan: Plan,
        cabinet_id: int,
        hinge_right: bool | None = None,
        material: str | None = None,
        shelf_depth: float | None = None,
        shelf_height: float | None = None,
        shelf_count: int | None = None,
        shelf_spacing: float | None = None,
    ) -> None:
        cabinet = self._cabinet(plan, cabinet_id)
        shelf_values = (shelf_depth, shelf_height, shelf_count, shelf_spacing)
        if any(v is not None for v in shelf_values):
            if not cabinet.is_floating_shelf:
                raise EditRejected("Shelf settings only apply to floating shelves")
            if any(v is not None and v <= 0 for v in shelf_values):
                raise EditRejected("Shelf settings must be positive")
        if hinge_right is not None:
            cabinet.hinge_right = hinge_right
        if material is not None:
            cabinet.material = material
        if any(v is not None for v in shelf_values):
            if shelf_depth is not None:
                cabinet.shelf_depth = shelf_depth
            if shelf_height is not None:
                cabinet.shelf_height = shelf_height
            if shelf_count is not None:
                cabinet.shelf_count = shelf_count
            if shelf_spacing is not None:
                cabinet.shelf_spacing = shelf_spacing

    # -- layout ------------------------------------------------------------

    def repack(self, plan: Plan, run: CabinetRun) -> None:
        """Place a run's cabinets contiguously after the leading filler."""
        position = self._filler(run.start_type)
        for cabinet in plan.cabinets_in_run(run.id):
            cabinet.position = position
            position += cabinet.width
        self.recompute_length(plan, run)

    def expected_length(self, plan: Plan, run: CabinetRun) -> float | None:
        """Length implied by a run's cabinets and fillers, None when empty."""
        cabinets = plan.cabinets_in_run(run.id)
        if not cabinets:
            return None
        return (
            total_cabinet_width(cabinets)
            + self._filler(run.start_type)
            + self._filler(run.end_type)
        )

    def recompute_length(self, plan: Plan, run: CabinetRun) -> None:
        """Derive a run's length from its cabinets; empty runs keep theirs."""
        length = self.expected_length(plan, run)
        if length is not None:
            run.length = length

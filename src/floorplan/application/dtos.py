"""Data Transfer Objects for the application layer."""

from __future__ import annotations

from dataclasses import dataclass, field

from floorplan.domain import Plan, SnapResult


@dataclass
class EditResult:
    """Outcome of PlanEditor.apply.

    Attributes:
        plan: The plan after the edit (the same aggregate that was edited).
        applied: False when the edit was refused; the plan is then unchanged.
        message: Reason for a refusal, or a short note about the edit.
        changed_room_ids: Rooms whose geometry was recomputed by the cascade.
        created_id: Id of the room, run or cabinet the edit created, if any.
        snap: Snap result for edits that ran a snap check.
    """

    plan: Plan
    applied: bool = True
    message: str = ""
    changed_room_ids: frozenset[str] = field(default_factory=frozenset)
    created_id: str | int | None = None
    snap: SnapResult | None = None

    @property
    def rejected(self) -> bool:
        return not self.applied

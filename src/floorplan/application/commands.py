"""Application commands: applying edit operations to a plan.

PlanEditor is the single entry point for changing a plan. Each call to
apply() performs the edit and then, within the same call, the full
cascade: attachment propagation, door/window re-anchoring for every room
whose geometry changed and re-derivation of runs snapped to those rooms.
Callers never observe a plan where points moved but dependents did not.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from floorplan.domain import (
    Camera,
    EditRejected,
    FocalPoint,
    Plan,
    Point2D,
    SnapResult,
)
from floorplan.domain.services import (
    AttachmentService,
    CabinetLayoutService,
    CabinetSnapService,
    PlacementSession,
    RoomEditingService,
    RunDragSession,
    WallFeatureService,
)

from . import operations as ops
from .dtos import EditResult

logger = logging.getLogger(__name__)


@dataclass
class _Outcome:
    changed: set[str] = field(default_factory=set)
    created_id: str | int | None = None
    snap: SnapResult | None = None
    message: str = ""


class PlanEditor:
    """Applies edit operations to one plan.

    The editor also owns the transient interaction state: at most one
    pending door/window placement and one cabinet run drag.
    """

    def __init__(
        self,
        plan: Plan | None = None,
        attachments: AttachmentService | None = None,
        room_editing: RoomEditingService | None = None,
        wall_features: WallFeatureService | None = None,
        snapping: CabinetSnapService | None = None,
        layout: CabinetLayoutService | None = None,
        jitter_threshold: float = 10.0,
    ) -> None:
        self.plan = plan if plan is not None else Plan.new()
        self.attachments = attachments or AttachmentService()
        self.room_editing = room_editing or RoomEditingService(self.attachments)
        self.wall_features = wall_features or WallFeatureService()
        self.snapping = snapping or CabinetSnapService()
        self.layout = layout or CabinetLayoutService()
        self.placement = PlacementSession(self.wall_features)
        self.drag = RunDragSession(self.snapping, jitter_threshold)

        self._handlers: dict[type, Callable[[Any], _Outcome]] = {
            ops.AddRoom: self._add_room,
            ops.DeleteRoom: self._delete_room,
            ops.AddPoint: self._add_point,
            ops.MovePoint: self._move_point,
            ops.SetWallLength: self._set_wall_length,
            ops.SetWallAngle: self._set_wall_angle,
            ops.InsertPointOnWall: self._insert_point,
            ops.DeletePoint: self._delete_point,
            ops.CompleteRoom: self._complete_room,
            ops.AttachPoint: self._attach_point,
            ops.DetachPoint: self._detach_point,
            ops.SetRoomProperties: self._set_room_properties,
            ops.BeginFeaturePlacement: self._begin_placement,
            ops.PlacementClick: self._placement_click,
            ops.CancelFeaturePlacement: self._cancel_placement,
            ops.AddWallFeature: self._add_feature,
            ops.UpdateFeatureWidth: self._update_feature_width,
            ops.UpdateFeaturePosition: self._update_feature_position,
            ops.MoveFeatureEndpoint: self._move_feature_endpoint,
            ops.SetDoorProperties: self._set_door_properties,
            ops.SetWindowProperties: self._set_window_properties,
            ops.DeleteWallFeature: self._delete_feature,
            ops.CreateCabinetRun: self._create_run,
            ops.DeleteCabinetRun: self._delete_run,
            ops.BeginRunDrag: self._begin_drag,
            ops.DragRun: self._drag,
            ops.EndRunDrag: self._end_drag,
            ops.CancelRunDrag: self._cancel_drag,
            ops.RotateRun: self._rotate_run,
            ops.SnapRun: self._snap_run,
            ops.SetRunLength: self._set_run_length,
            ops.SetRunProperties: self._set_run_properties,
            ops.SetRunStartType: self._set_run_start_type,
            ops.SetRunEndType: self._set_run_end_type,
            ops.AddCabinet: self._add_cabinet,
            ops.RemoveCabinet: self._remove_cabinet,
            ops.UpdateCabinetWidth: self._update_cabinet_width,
            ops.SetCabinetProperties: self._set_cabinet_properties,
            ops.SetCamera: self._set_camera,
            ops.SetFocalPoint: self._set_focal_point,
            ops.SetAddress: self._set_address,
        }

    def apply(self, op: ops.EditOperation) -> EditResult:
        """Apply one edit and its cascade.

        Refused edits leave the plan untouched and come back with
        applied=False and the reason in message.

        Raises:
            TypeError: For objects that are not edit operations.
        """
        handler = self._handlers.get(type(op))
        if handler is None:
            raise TypeError(f"Unsupported edit operation: {type(op).__name__}")

        try:
            outcome = handler(op)
        except EditRejected as e:
            logger.info(f"{type(op).__name__} rejected: {e.message}")
            return EditResult(plan=self.plan, applied=False, message=e.message)

        changed = self.cascade(outcome.changed)
        return EditResult(
            plan=self.plan,
            applied=True,
            message=outcome.message,
            changed_room_ids=frozenset(changed),
            created_id=outcome.created_id,
            snap=outcome.snap,
        )

    def apply_all(self, operations: Iterable[ops.EditOperation]) -> list[EditResult]:
        return [self.apply(op) for op in operations]

    def cascade(self, edited_room_ids: set[str]) -> set[str]:
        """Propagate attachments, re-anchor features and re-derive snaps.

        Returns:
            Ids of every room whose geometry was recomputed.
        """
        changed = self.attachments.propagate(self.plan, edited_room_ids)
        if not changed:
            return changed
        logger.debug(f"Cascading geometry changes to rooms {sorted(changed)}")
        self.wall_features.reanchor_rooms(self.plan, changed)
        self.snapping.rederive_for_rooms(self.plan, changed)
        return changed

    # -- rooms -------------------------------------------------------------

    def _add_room(self, op: ops.AddRoom) -> _Outcome:
        return _Outcome(created_id=self.room_editing.add_room(self.plan))

    def _delete_room(self, op: ops.DeleteRoom) -> _Outcome:
        changed = self.room_editing.delete_room(self.plan, op.room_id)
        return _Outcome(changed=changed | {op.room_id})

    def _add_point(self, op: ops.AddPoint) -> _Outcome:
        return _Outcome(changed=self.room_editing.add_point(self.plan, op.room_id, op.x, op.y))

    def _move_point(self, op: ops.MovePoint) -> _Outcome:
        return _Outcome(
            changed=self.room_editing.move_point(self.plan, op.room_id, op.index, op.x, op.y)
        )

    def _set_wall_length(self, op: ops.SetWallLength) -> _Outcome:
        return _Outcome(
            changed=self.room_editing.set_wall_length(
                self.plan, op.room_id, op.wall_index, op.length
            )
        )

    def _set_wall_angle(self, op: ops.SetWallAngle) -> _Outcome:
        return _Outcome(
            changed=self.room_editing.set_wall_angle(self.plan, op.room_id, op.wall_index, op.angle)
        )

    def _insert_point(self, op: ops.InsertPointOnWall) -> _Outcome:
        return _Outcome(
            changed=self.room_editing.insert_point_on_wall(
                self.plan, op.room_id, op.wall_index, op.x, op.y
            )
        )

    def _delete_point(self, op: ops.DeletePoint) -> _Outcome:
        return _Outcome(changed=self.room_editing.delete_point(self.plan, op.room_id, op.index))

    def _complete_room(self, op: ops.CompleteRoom) -> _Outcome:
        return _Outcome(changed=self.room_editing.complete_room(self.plan, op.room_id))

    def _attach_point(self, op: ops.AttachPoint) -> _Outcome:
        return _Outcome(
            changed=self.room_editing.attach_point(
                self.plan, op.room_id, op.index, op.parent_room_id, op.wall_index, op.t
            )
        )

    def _detach_point(self, op: ops.DetachPoint) -> _Outcome:
        return _Outcome(changed=self.room_editing.detach_point(self.plan, op.room_id, op.index))

    def _set_room_properties(self, op: ops.SetRoomProperties) -> _Outcome:
        self.room_editing.set_room_properties(
            self.plan,
            op.room_id,
            height=op.height,
            wall_thickness=op.wall_thickness,
            wall_material=op.wall_material,
            floor_material=op.floor_material,
            ceiling_material=op.ceiling_material,
        )
        return _Outcome()

    # -- doors and windows -------------------------------------------------

    def _begin_placement(self, op: ops.BeginFeaturePlacement) -> _Outcome:
        self.placement.begin(op.kind)
        return _Outcome()

    def _placement_click(self, op: ops.PlacementClick) -> _Outcome:
        placed = self.placement.click(self.plan, op.room_id, op.wall_index, op.x, op.y)
        if placed is None:
            return _Outcome(message="Start point recorded")
        return _Outcome(created_id=placed[1], message=f"Placed on room '{placed[0]}'")

    def _cancel_placement(self, op: ops.CancelFeaturePlacement) -> _Outcome:
        self.placement.cancel()
        return _Outcome()

    def _add_feature(self, op: ops.AddWallFeature) -> _Outcome:
        owner, index = self.wall_features.add_feature(
            self.plan,
            op.kind,
            op.room_id,
            op.wall_index,
            Point2D(op.start_x, op.start_y),
            Point2D(op.end_x, op.end_y),
        )
        return _Outcome(created_id=index, message=f"Placed on room '{owner}'")

    def _update_feature_width(self, op: ops.UpdateFeatureWidth) -> _Outcome:
        self.wall_features.update_width(self.plan, op.room_id, op.kind, op.index, op.width)
        return _Outcome()

    def _update_feature_position(self, op: ops.UpdateFeaturePosition) -> _Outcome:
        self.wall_features.update_position(self.plan, op.room_id, op.kind, op.index, op.position)
        return _Outcome()

    def _move_feature_endpoint(self, op: ops.MoveFeatureEndpoint) -> _Outcome:
        self.wall_features.move_endpoint(
            self.plan, op.room_id, op.kind, op.index, op.endpoint, op.x, op.y
        )
        return _Outcome()

    def _set_door_properties(self, op: ops.SetDoorProperties) -> _Outcome:
        self.wall_features.set_door_properties(
            self.plan,
            op.room_id,
            op.index,
            height=op.height,
            frame_thickness=op.frame_thickness,
            frame_width=op.frame_width,
            material=op.material,
        )
        return _Outcome()

    def _set_window_properties(self, op: ops.SetWindowProperties) -> _Outcome:
        self.wall_features.set_window_properties(
            self.plan,
            op.room_id,
            op.index,
            height=op.height,
            sill_height=op.sill_height,
            window_type=op.window_type,
        )
        return _Outcome()

    def _delete_feature(self, op: ops.DeleteWallFeature) -> _Outcome:
        self.wall_features.delete_feature(self.plan, op.room_id, op.kind, op.index)
        return _Outcome()

    # -- cabinet runs ------------------------------------------------------

    def _create_run(self, op: ops.CreateCabinetRun) -> _Outcome:
        run_id = self.layout.create_run(
            self.plan,
            op.x,
            op.y,
            op.length,
            depth=op.depth,
            rotation_z=op.rotation_z,
            run_type=op.run_type,
            is_island=op.is_island,
        )
        snap = None
        if op.snap:
            snap = self.snapping.snap(self.plan, self.plan.get_run(run_id))
        return _Outcome(created_id=run_id, snap=snap)

    def _delete_run(self, op: ops.DeleteCabinetRun) -> _Outcome:
        if self.drag.state is not None and self.drag.state.run_id == op.run_id:
            self.drag.cancel()
        self.layout.delete_run(self.plan, op.run_id)
        return _Outcome()

    def _begin_drag(self, op: ops.BeginRunDrag) -> _Outcome:
        self.drag.begin(self.plan, op.run_id)
        return _Outcome()

    def _drag(self, op: ops.DragRun) -> _Outcome:
        self.drag.drag(self.plan, op.x, op.y)
        return _Outcome()

    def _end_drag(self, op: ops.EndRunDrag) -> _Outcome:
        return _Outcome(snap=self.drag.end(self.plan))

    def _cancel_drag(self, op: ops.CancelRunDrag) -> _Outcome:
        self.drag.cancel()
        return _Outcome()

    def _rotate_run(self, op: ops.RotateRun) -> _Outcome:
        run = self.plan.run(op.run_id)
        if run is None:
            raise EditRejected(f"Unknown cabinet run {op.run_id}", "invalid_reference")
        self.snapping.rotate(run, op.rotation_z)
        return _Outcome()

    def _snap_run(self, op: ops.SnapRun) -> _Outcome:
        run = self.plan.run(op.run_id)
        if run is None:
            raise EditRejected(f"Unknown cabinet run {op.run_id}", "invalid_reference")
        return _Outcome(snap=self.snapping.snap(self.plan, run))

    def _set_run_length(self, op: ops.SetRunLength) -> _Outcome:
        self.layout.set_run_length(self.plan, op.run_id, op.length)
        return _Outcome()

    def _set_run_properties(self, op: ops.SetRunProperties) -> _Outcome:
        self.layout.set_run_properties(
            self.plan,
            op.run_id,
            depth=op.depth,
            run_type=op.run_type,
            top_filler=op.top_filler,
            is_island=op.is_island,
            omit_backsplash=op.omit_backsplash,
        )
        return _Outcome()

    def _set_run_start_type(self, op: ops.SetRunStartType) -> _Outcome:
        self.layout.set_start_type(self.plan, op.run_id, op.start_type)
        return _Outcome()

    def _set_run_end_type(self, op: ops.SetRunEndType) -> _Outcome:
        self.layout.set_end_type(self.plan, op.run_id, op.end_type)
        return _Outcome()

    # -- cabinets ----------------------------------------------------------

    def _add_cabinet(self, op: ops.AddCabinet) -> _Outcome:
        cabinet_id = self.layout.add_cabinet(
            self.plan,
            op.run_id,
            op.cabinet_type,
            width=op.width,
            hinge_right=op.hinge_right,
            material=op.material,
        )
        return _Outcome(created_id=cabinet_id)

    def _remove_cabinet(self, op: ops.RemoveCabinet) -> _Outcome:
        self.layout.remove_cabinet(self.plan, op.cabinet_id)
        return _Outcome()

    def _update_cabinet_width(self, op: ops.UpdateCabinetWidth) -> _Outcome:
        width = self.layout.update_cabinet_width(self.plan, op.cabinet_id, op.width)
        return _Outcome(message=f"Width set to {width:g} mm")

    def _set_cabinet_properties(self, op: ops.SetCabinetProperties) -> _Outcome:
        self.layout.set_cabinet_properties(
            self.plan,
            op.cabinet_id,
            hinge_right=op.hinge_right,
            material=op.material,
            shelf_depth=op.shelf_depth,
            shelf_height=op.shelf_height,
            shelf_count=op.shelf_count,
            shelf_spacing=op.shelf_spacing,
        )
        return _Outcome()

    # -- plan markers ------------------------------------------------------

    def _set_camera(self, op: ops.SetCamera) -> _Outcome:
        self.plan.camera = Camera(x=op.x, y=op.y, height=op.height, rotation=op.rotation)
        return _Outcome()

    def _set_focal_point(self, op: ops.SetFocalPoint) -> _Outcome:
        self.plan.focal_point = FocalPoint(x=op.x, y=op.y, height=op.height)
        return _Outcome()

    def _set_address(self, op: ops.SetAddress) -> _Outcome:
        self.plan.address = op.address
        return _Outcome()

"""Edit operations accepted by PlanEditor.apply.

Each operation is a small immutable record describing one user action.
Optional fields left as None mean "leave unchanged".
"""

from __future__ import annotations

from dataclasses import dataclass

from floorplan.domain.value_objects import (
    CabinetRunType,
    FeatureEndpoint,
    FeatureKind,
    RunEndType,
    WindowType,
)

# =============================================================================
# Rooms and points
# =============================================================================


@dataclass(frozen=True)
class AddRoom:
    """Start drawing a new secondary room."""


@dataclass(frozen=True)
class DeleteRoom:
    room_id: str


@dataclass(frozen=True)
class AddPoint:
    """Drawing click on an incomplete room."""

    room_id: str
    x: float
    y: float


@dataclass(frozen=True)
class MovePoint:
    room_id: str
    index: int
    x: float
    y: float


@dataclass(frozen=True)
class SetWallLength:
    room_id: str
    wall_index: int
    length: float


@dataclass(frozen=True)
class SetWallAngle:
    """Set the interior angle at the start vertex of a wall (degrees)."""

    room_id: str
    wall_index: int
    angle: float


@dataclass(frozen=True)
class InsertPointOnWall:
    room_id: str
    wall_index: int
    x: float
    y: float


@dataclass(frozen=True)
class DeletePoint:
    room_id: str
    index: int


@dataclass(frozen=True)
class CompleteRoom:
    room_id: str


@dataclass(frozen=True)
class AttachPoint:
    room_id: str
    index: int
    parent_room_id: str
    wall_index: int
    t: float


@dataclass(frozen=True)
class DetachPoint:
    room_id: str
    index: int


@dataclass(frozen=True)
class SetRoomProperties:
    room_id: str
    height: float | None = None
    wall_thickness: float | None = None
    wall_material: str | None = None
    floor_material: str | None = None
    ceiling_material: str | None = None


# =============================================================================
# Doors and windows
# =============================================================================


@dataclass(frozen=True)
class BeginFeaturePlacement:
    """Arm the two-click placement of a door or window."""

    kind: FeatureKind


@dataclass(frozen=True)
class PlacementClick:
    room_id: str
    wall_index: int
    x: float
    y: float


@dataclass(frozen=True)
class CancelFeaturePlacement:
    pass


@dataclass(frozen=True)
class AddWallFeature:
    """Place a door or window between two points in one step."""

    kind: FeatureKind
    room_id: str
    wall_index: int
    start_x: float
    start_y: float
    end_x: float
    end_y: float


@dataclass(frozen=True)
class UpdateFeatureWidth:
    room_id: str
    kind: FeatureKind
    index: int
    width: float


@dataclass(frozen=True)
class UpdateFeaturePosition:
    room_id: str
    kind: FeatureKind
    index: int
    position: float


@dataclass(frozen=True)
class MoveFeatureEndpoint:
    room_id: str
    kind: FeatureKind
    index: int
    endpoint: FeatureEndpoint
    x: float
    y: float


@dataclass(frozen=True)
class SetDoorProperties:
    room_id: str
    index: int
    height: float | None = None
    frame_thickness: float | None = None
    frame_width: float | None = None
    material: str | None = None


@dataclass(frozen=True)
class SetWindowProperties:
    room_id: str
    index: int
    height: float | None = None
    sill_height: float | None = None
    window_type: WindowType | None = None


@dataclass(frozen=True)
class DeleteWallFeature:
    room_id: str
    kind: FeatureKind
    index: int


# =============================================================================
# Cabinet runs
# =============================================================================


@dataclass(frozen=True)
class CreateCabinetRun:
    """Add a run with its rear-left corner at (x, y).

    With snap set, the run is snapped to a nearby wall right away.
    """

    x: float
    y: float
    length: float
    depth: float | None = None
    rotation_z: float = 0.0
    run_type: CabinetRunType = CabinetRunType.BASE
    is_island: bool = False
    snap: bool = True


@dataclass(frozen=True)
class DeleteCabinetRun:
    run_id: int


@dataclass(frozen=True)
class BeginRunDrag:
    run_id: int


@dataclass(frozen=True)
class DragRun:
    """Move the dragged run's rear-left corner."""

    x: float
    y: float


@dataclass(frozen=True)
class EndRunDrag:
    pass


@dataclass(frozen=True)
class CancelRunDrag:
    pass


@dataclass(frozen=True)
class RotateRun:
    run_id: int
    rotation_z: float


@dataclass(frozen=True)
class SnapRun:
    """Run the snap check for a run where it currently stands."""

    run_id: int


@dataclass(frozen=True)
class SetRunLength:
    run_id: int
    length: float


@dataclass(frozen=True)
class SetRunProperties:
    run_id: int
    depth: float | None = None
    run_type: CabinetRunType | None = None
    top_filler: bool | None = None
    is_island: bool | None = None
    omit_backsplash: bool | None = None


@dataclass(frozen=True)
class SetRunStartType:
    run_id: int
    start_type: RunEndType


@dataclass(frozen=True)
class SetRunEndType:
    run_id: int
    end_type: RunEndType


# =============================================================================
# Cabinets
# =============================================================================


@dataclass(frozen=True)
class AddCabinet:
    run_id: int
    cabinet_type: str
    width: float | None = None
    hinge_right: bool = False
    material: str = "White Shaker"


@dataclass(frozen=True)
class RemoveCabinet:
    cabinet_id: int


@dataclass(frozen=True)
class UpdateCabinetWidth:
    cabinet_id: int
    width: float


@dataclass(frozen=True)
class SetCabinetProperties:
    cabinet_id: int
    hinge_right: bool | None = None
    material: str | None = None
    shelf_depth: float | None = None
    shelf_height: float | None = None
    shelf_count: int | None = None
    shelf_spacing: float | None = None


# =============================================================================
# Plan-level markers
# =============================================================================


@dataclass(frozen=True)
class SetCamera:
    x: float
    y: float
    height: float = 1600.0
    rotation: float = 0.0


@dataclass(frozen=True)
class SetFocalPoint:
    x: float
    y: float
    height: float = 1000.0


@dataclass(frozen=True)
class SetAddress:
    address: str


EditOperation = (
    AddRoom
    | DeleteRoom
    | AddPoint
    | MovePoint
    | SetWallLength
    | SetWallAngle
    | InsertPointOnWall
    | DeletePoint
    | CompleteRoom
    | AttachPoint
    | DetachPoint
    | SetRoomProperties
    | BeginFeaturePlacement
    | PlacementClick
    | CancelFeaturePlacement
    | AddWallFeature
    | UpdateFeatureWidth
    | UpdateFeaturePosition
    | MoveFeatureEndpoint
    | SetDoorProperties
    | SetWindowProperties
    | DeleteWallFeature
    | CreateCabinetRun
    | DeleteCabinetRun
    | BeginRunDrag
    | DragRun
    | EndRunDrag
    | CancelRunDrag
    | RotateRun
    | SnapRun
    | SetRunLength
    | SetRunProperties
    | SetRunStartType
    | SetRunEndType
    | AddCabinet
    | RemoveCabinet
    | UpdateCabinetWidth
    | SetCabinetProperties
    | SetCamera
    | SetFocalPoint
    | SetAddress
)

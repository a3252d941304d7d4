"""Domain services for floor plan editing.

This package provides the constraint and snapping engine:
- Point attachment graph and propagation
- Room and point editing with wall-sharing detection
- Door/window anchoring and two-click placement
- Cabinet run snapping and cabinet layout
- Clockwise normalization for export
"""

from .attachment import AttachmentService
from .cabinet_layout import CabinetLayoutService, CabinetTypeRule, CabinetWidthPolicy
from .cabinet_snap import CabinetSnapService, DragState, RunDragSession
from .room_editing import RoomEditingService, WallHit, walls_coincide
from .wall_features import (
    FeatureDefaults,
    PendingAnchor,
    PlacementSession,
    WallFeatureService,
    reanchor_feature,
)
from .winding import remap_wall_features, sort_points_clockwise

__all__ = [
    "AttachmentService",
    "CabinetLayoutService",
    "CabinetSnapService",
    "CabinetTypeRule",
    "CabinetWidthPolicy",
    "DragState",
    "FeatureDefaults",
    "PendingAnchor",
    "PlacementSession",
    "RoomEditingService",
    "RunDragSession",
    "WallFeatureService",
    "WallHit",
    "reanchor_feature",
    "remap_wall_features",
    "sort_points_clockwise",
    "walls_coincide",
]

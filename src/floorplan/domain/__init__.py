"""Domain layer - floor plan model and constraint engine."""

from .entities import (
    FILLER_WIDTH,
    MAIN_ROOM_ID,
    Cabinet,
    CabinetRun,
    Camera,
    Door,
    FocalPoint,
    Plan,
    Point,
    Room,
    WallFeature,
    Window,
)
from .errors import EditRejected
from .value_objects import (
    AttachmentConstraint,
    CabinetRunType,
    FeatureEndpoint,
    FeatureKind,
    Point2D,
    RunCorners,
    RunEndType,
    SnapInfo,
    SnapResult,
    WallData,
    WallPosition,
    WindowType,
)

__all__ = [
    "FILLER_WIDTH",
    "MAIN_ROOM_ID",
    "AttachmentConstraint",
    "Cabinet",
    "CabinetRun",
    "CabinetRunType",
    "Camera",
    "Door",
    "EditRejected",
    "FeatureEndpoint",
    "FeatureKind",
    "FocalPoint",
    "Plan",
    "Point",
    "Point2D",
    "Room",
    "RunCorners",
    "RunEndType",
    "SnapInfo",
    "SnapResult",
    "WallData",
    "WallFeature",
    "WallPosition",
    "Window",
    "WindowType",
]

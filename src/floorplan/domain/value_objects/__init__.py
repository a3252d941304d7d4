"""Value objects for the floor plan domain.

This module provides immutable data types used throughout the floor plan
engine. All classes are re-exported from sub-modules for convenience.
"""

from __future__ import annotations

# Core geometry
from ._core_geometry import (
    Point2D,
    WallData,
    WallPosition,
)

# Enumerations
from ._enums import (
    CabinetRunType,
    FeatureEndpoint,
    FeatureKind,
    RunEndType,
    WindowType,
)

# Wall-bound constraints and snapping
from ._constraints import (
    AttachmentConstraint,
    RunCorners,
    SnapInfo,
    SnapResult,
)

__all__ = [
    "AttachmentConstraint",
    "CabinetRunType",
    "FeatureEndpoint",
    "FeatureKind",
    "Point2D",
    "RunCorners",
    "RunEndType",
    "SnapInfo",
    "SnapResult",
    "WallData",
    "WallPosition",
    "WindowType",
]

"""Enumerations shared by the floor plan domain.

All enums use (str, Enum) so their values serialize directly into the
projectData JSON format.
"""

from __future__ import annotations

from enum import Enum


class CabinetRunType(str, Enum):
    """Kind of cabinet run."""

    BASE = "Base"
    UPPER = "Upper"


class RunEndType(str, Enum):
    """What a cabinet run end abuts.

    A Wall end reserves a filler strip of FILLER_WIDTH at that end.
    """

    OPEN = "Open"
    WALL = "Wall"


class WindowType(str, Enum):
    """Window sash configuration."""

    SINGLE = "single"
    DOUBLE = "double"


class FeatureKind(str, Enum):
    """Wall feature kinds that can be placed with the two-click protocol."""

    DOOR = "door"
    WINDOW = "window"


class FeatureEndpoint(str, Enum):
    """Which end of a door or window is being dragged."""

    START = "start"
    END = "end"

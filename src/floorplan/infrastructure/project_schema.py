"""Pydantic schema of the projectData JSON format.

Field names follow the JSON keys of the format exactly, including its mix
of camelCase and snake_case. Unknown keys are ignored so that files written
by newer tools still load; missing optional values fall back to defaults.
"""

from __future__ import annotations

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeFloat,
    NonNegativeInt,
    model_validator,
)

from floorplan.domain.value_objects import CabinetRunType, RunEndType, WindowType


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class PointsSchema(_Lenient):
    """Parallel x/y coordinate arrays."""

    x: list[float] = Field(default_factory=list)
    y: list[float] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_lengths(self) -> PointsSchema:
        if len(self.x) != len(self.y):
            raise ValueError(
                f"points.x has {len(self.x)} entries but points.y has {len(self.y)}"
            )
        return self


class WallsSchema(_Lenient):
    count: int = Field(ge=0)
    from_: list[int] = Field(default_factory=list, alias="from")
    to: list[int] = Field(default_factory=list)


class DoorsSchema(_Lenient):
    count: int = Field(default=0, ge=0)
    wallIndices: list[NonNegativeInt] = Field(default_factory=list)
    widths: list[NonNegativeFloat] = Field(default_factory=list)
    positions: list[NonNegativeFloat] = Field(default_factory=list)
    heights: list[float] | None = None
    frameThicknesses: list[float] | None = None
    frameWidths: list[float] | None = None
    materials: list[str] | None = None

    @model_validator(mode="after")
    def check_counts(self) -> DoorsSchema:
        for name in ("wallIndices", "widths", "positions"):
            if len(getattr(self, name)) < self.count:
                raise ValueError(f"{name} has fewer than {self.count} entries")
        return self


class WindowsSchema(_Lenient):
    count: int = Field(default=0, ge=0)
    wallIndices: list[NonNegativeInt] = Field(default_factory=list)
    widths: list[NonNegativeFloat] = Field(default_factory=list)
    positions: list[NonNegativeFloat] = Field(default_factory=list)
    heights: list[float] | None = None
    sillHeights: list[float] | None = None
    types: list[WindowType] | None = None

    @model_validator(mode="after")
    def check_counts(self) -> WindowsSchema:
        for name in ("wallIndices", "widths", "positions"):
            if len(getattr(self, name)) < self.count:
                raise ValueError(f"{name} has fewer than {self.count} entries")
        return self


class RoomSchema(_Lenient):
    id: int
    isMain: bool = False
    isComplete: bool = True
    height: float = Field(default=2400.0, gt=0)
    wall_thickness: float = Field(default=100.0, gt=0)
    wall_material: str = "Drywall"
    floor_material: str = "Oak"
    ceiling_material: str = "Plaster"
    points: PointsSchema
    walls: WallsSchema | None = None
    doors: DoorsSchema = Field(default_factory=DoorsSchema)
    windows: WindowsSchema = Field(default_factory=WindowsSchema)


class XYSchema(_Lenient):
    x: float
    y: float


class RunDimensionsSchema(_Lenient):
    length: float = Field(ge=0)
    depth: float = Field(gt=0)


class RunPropertiesSchema(_Lenient):
    start_type: RunEndType = RunEndType.OPEN
    end_type: RunEndType = RunEndType.OPEN
    top_filler: bool = False
    is_island: bool = False
    omit_backsplash: bool = False


class SnapInfoSchema(_Lenient):
    snappedEdge: str = "rear"
    roomId: int
    wallIndex: int = Field(ge=0)
    distanceFromStart: float


class CabinetRunSchema(_Lenient):
    id: int
    type: CabinetRunType = CabinetRunType.BASE
    position: XYSchema
    dimensions: RunDimensionsSchema
    rotation_z: float = 0.0
    properties: RunPropertiesSchema = Field(default_factory=RunPropertiesSchema)
    snapInfo: SnapInfoSchema | None = None


class CabinetSchema(_Lenient):
    id: int
    cabinet_run_id: int
    cabinet_type: str
    cabinet_width: float = Field(gt=0)
    hinge_right: bool = False
    material_doors: str = "White Shaker"
    position: float = 0.0
    floating_shelf_depth: float | None = None
    floating_shelf_height: float | None = None
    floating_shelf_num: int | None = None
    floating_shelf_vertical_spacing: float | None = None


class CameraSchema(_Lenient):
    x: float
    y: float
    height: float = 1600.0
    rotation: float = 0.0


class FocalPointSchema(_Lenient):
    x: float
    y: float
    height: float = 1000.0


class ProjectDataSchema(_Lenient):
    """Top level of a projectData document.

    rooms, cabinetRuns and cabinets are required; everything else is
    optional.
    """

    address: str = ""
    rooms: list[RoomSchema]
    cabinetRuns: list[CabinetRunSchema]
    cabinets: list[CabinetSchema]
    camera: CameraSchema | None = None
    focalPoint: FocalPointSchema | None = None
    exportDate: str | None = None

"""Engine settings schema.

Pydantic models for the tunable parameters of the floor plan engine:
snapping tolerances, cabinet width rules, default door/window dimensions
and export options. Every section has defaults, so an empty JSON object is
a valid settings file.
"""

from __future__ import annotations

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from floorplan.domain.value_objects import WindowType


class SnappingConfig(BaseModel):
    """Snapping and tolerance settings.

    Attributes:
        point_snap_tolerance: Distance within which a click lands on a point
            or wall, and within which wall endpoints coincide.
        wall_snap_threshold: Rear-edge to wall distance below which a
            cabinet run snaps.
        drag_jitter_threshold: Drag distance a snapped run tolerates before
            its snap is released.
        distance_epsilon: Minimum change before a re-derived snap distance
            is stored.
    """

    model_config = ConfigDict(extra="forbid")

    point_snap_tolerance: float = Field(default=15.0, ge=0)
    wall_snap_threshold: float = Field(default=50.0, gt=0)
    drag_jitter_threshold: float = Field(default=10.0, ge=0)
    distance_epsilon: float = Field(default=0.1, ge=0)


class CabinetTypeConfig(BaseModel):
    """Width rule for one cabinet type.

    At most one of fixed_width and min_width may be given.
    """

    model_config = ConfigDict(extra="forbid")

    fixed_width: float | None = Field(default=None, gt=0)
    min_width: float | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def check_single_rule(self) -> CabinetTypeConfig:
        if self.fixed_width is not None and self.min_width is not None:
            raise ValueError("A cabinet type has either a fixed or a minimum width, not both")
        return self


def _default_cabinet_types() -> dict[str, CabinetTypeConfig]:
    return {
        "dishwasher": CabinetTypeConfig(fixed_width=600),
        "sink_base": CabinetTypeConfig(min_width=600),
        "corner_base": CabinetTypeConfig(min_width=900),
        "floating_shelf": CabinetTypeConfig(min_width=300),
        "drawer_base": CabinetTypeConfig(min_width=300),
        "base": CabinetTypeConfig(),
        "upper": CabinetTypeConfig(),
    }


class CabinetsConfig(BaseModel):
    """Cabinet layout settings."""

    model_config = ConfigDict(extra="forbid")

    filler_width: float = Field(default=50.0, gt=0)
    default_min_width: float = Field(default=250.0, gt=0)
    default_base_depth: float = Field(default=635.0, gt=0)
    default_upper_depth: float = Field(default=350.0, gt=0)
    cabinet_types: dict[str, CabinetTypeConfig] = Field(
        default_factory=_default_cabinet_types
    )

    @field_validator("cabinet_types")
    @classmethod
    def validate_type_names(
        cls, v: dict[str, CabinetTypeConfig]
    ) -> dict[str, CabinetTypeConfig]:
        """Cabinet type names must be non-empty."""
        for name in v:
            if not name.strip():
                raise ValueError("Cabinet type names cannot be empty")
        return v


class FeaturesConfig(BaseModel):
    """Default dimensions of newly placed or imported doors and windows."""

    model_config = ConfigDict(extra="forbid")

    door_height: float = Field(default=2032.0, gt=0)
    door_frame_thickness: float = Field(default=40.0, gt=0)
    door_frame_width: float = Field(default=70.0, gt=0)
    door_material: str = "Wood"
    window_height: float = Field(default=1200.0, gt=0)
    window_sill_height: float = Field(default=900.0, ge=0)
    window_type: WindowType = WindowType.SINGLE


class ExportConfig(BaseModel):
    """projectData export settings.

    Attributes:
        python_style_booleans: Emit True/False instead of JSON booleans, for
            consumers of the legacy format.
        indent: JSON indentation; None for compact output.
    """

    model_config = ConfigDict(extra="forbid")

    python_style_booleans: bool = False
    indent: int | None = Field(default=2, ge=0)


class EngineSettings(BaseModel):
    """Root settings model."""

    model_config = ConfigDict(extra="forbid")

    snapping: SnappingConfig = Field(default_factory=SnappingConfig)
    cabinets: CabinetsConfig = Field(default_factory=CabinetsConfig)
    features: FeaturesConfig = Field(default_factory=FeaturesConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
